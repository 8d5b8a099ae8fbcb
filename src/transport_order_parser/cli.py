#!/usr/bin/env python3
"""
Transport Order Parser CLI
Parses booking confirmation PDFs (or their extracted text) into order JSON.
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from pdfplumber.utils.exceptions import PdfminerException

from .assistant import BookingPdfAssistant, ParserConfig, validate_format
from .exceptions import UnsupportedDocumentError
from .extractors import DATE_FALLBACK_POLICIES
from .pdf_extractor import extract_document_lines

logger = logging.getLogger(__name__)


def _configure_logging(verbose: bool):
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)


def _read_lines(path: str):
    try:
        return extract_document_lines(path)
    except (OSError, ValueError, PdfminerException) as e:
        raise click.ClickException(f"Could not read {path}: {e}")


@click.group()
def cli():
    """Transport Order Parser - booking confirmation to order JSON."""


@cli.command()
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', type=click.Path(dir_okay=False), help='Output JSON file path')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--default-country', default='GB', show_default=True,
              help='Customer country when none can be determined')
@click.option('--currency', 'default_currency', default='EUR', show_default=True,
              help='Freight currency when none is stated')
@click.option('--date-fallback', type=click.Choice(DATE_FALLBACK_POLICIES), default='now',
              show_default=True, help='What to put in a location time when its date is missing')
def parse(path: str, output: Optional[str], verbose: bool, default_country: str,
          default_currency: str, date_fallback: str):
    """Parse a booking document and print the order record."""
    _configure_logging(verbose)

    config = ParserConfig(
        default_country=default_country,
        default_currency=default_currency,
        date_fallback=date_fallback,
    )
    lines = _read_lines(path)

    try:
        record = BookingPdfAssistant(config).process_lines(lines, Path(path).name)
    except UnsupportedDocumentError as e:
        raise click.ClickException(f"{path}: {e}")

    json_str = json.dumps(record.to_dict(), indent=2, ensure_ascii=False)

    if output:
        with open(output, 'w', encoding='utf-8') as f:
            f.write(json_str)
        logger.info(f"✅ Results saved to: {output}")
    else:
        click.echo(json_str)


@cli.command()
@click.argument('path', type=click.Path(exists=True, dir_okay=False))
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
def validate(path: str, verbose: bool):
    """Report whether a document uses the supported booking layout."""
    _configure_logging(verbose)

    lines = _read_lines(path)
    if validate_format(lines):
        click.echo(f"{path}: supported")
    else:
        click.echo(f"{path}: unsupported", err=True)
        sys.exit(1)


if __name__ == "__main__":
    cli()
