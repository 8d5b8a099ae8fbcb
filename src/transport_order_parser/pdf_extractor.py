#!/usr/bin/env python3
"""
Document line extraction.
Turns a booking PDF (or an already extracted text file) into the list of
text lines the assistant works on.
"""

import re
import logging
from pathlib import Path
from typing import List

import pdfplumber

logger = logging.getLogger(__name__)

TEXT_SUFFIXES = {".txt", ".text"}


class PDFLineExtractor:
    """Extracts text lines page by page with pdfplumber."""

    def extract_text(self, pdf_path: str) -> str:
        """
        Extract text from a PDF.

        Pages without plain text are retried with layout extraction.

        Args:
            pdf_path: Path to the PDF file

        Returns:
            Extracted text, pages separated by newlines
        """
        pages = []
        with pdfplumber.open(pdf_path) as pdf:
            for i, page in enumerate(pdf.pages):
                page_text = page.extract_text()
                if not page_text:
                    page_text = page.extract_text(
                        layout=True,
                        x_tolerance=3,
                        y_tolerance=3
                    )
                if page_text:
                    pages.append(page_text)
                else:
                    logger.warning(f"No text on page {i + 1} of {pdf_path}")

        text = "\n".join(pages)
        logger.info(f"Extracted {len(text)} characters from {len(pages)} page(s)")
        return text

    @staticmethod
    def clean_lines(text: str) -> List[str]:
        """
        Split text into lines, dropping encoding artifacts and blank lines.

        Args:
            text: Raw extracted text

        Returns:
            Non-empty, stripped lines
        """
        if not text:
            return []

        # Remove CID encoding artifacts
        text = re.sub(r'\(cid:\d+\)', '', text)

        text = text.replace('\r\n', '\n').replace('\r', '\n')

        lines = []
        for line in text.split('\n'):
            line = re.sub(r'[ \t]+', ' ', line).strip()
            if line:
                lines.append(line)
        return lines


def extract_document_lines(path: str) -> List[str]:
    """
    Convenience function returning the cleaned lines of a document.

    PDFs go through pdfplumber; .txt files are read as they are.

    Args:
        path: Path to a PDF or text file

    Returns:
        List of lines
    """
    extractor = PDFLineExtractor()
    if Path(path).suffix.lower() in TEXT_SUFFIXES:
        text = Path(path).read_text(encoding='utf-8')
    else:
        text = extractor.extract_text(path)

    lines = extractor.clean_lines(text)
    logger.info(f"Extracted {len(lines)} lines from {path}")
    return lines
