#!/usr/bin/env python3
"""
Tests for the command line interface.
"""

import json
import unittest
from pathlib import Path

# Add src to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from click.testing import CliRunner

from transport_order_parser.cli import cli
from transport_order_parser.pdf_extractor import PDFLineExtractor, extract_document_lines

BOOKING_TEXT = """BOOKING CONFIRMATION
Ref.: AB-1234
Invoicing Adress
TRANSALLIANCE UK LTD
Unit 4 Kingsway
Business Park
GB-PE2 6DP PETERBOROUGH
Shipping Price
1 250,50
EUR
Loading on: 12/05/2024
ACME PAPER MILL
08h00 - 12h00
12 Mill Road LEEDS
Delivery on: 14/05/2024
GAMMA STORE
YORK YO1 7HH
"""


class TestCli(unittest.TestCase):

    def setUp(self):
        self.runner = CliRunner()

    def test_parse_to_file(self):
        with self.runner.isolated_filesystem():
            Path("booking.txt").write_text(BOOKING_TEXT, encoding="utf-8")
            result = self.runner.invoke(cli, ["parse", "booking.txt", "-o", "order.json"])

            self.assertEqual(result.exit_code, 0, result.output)
            order = json.loads(Path("order.json").read_text(encoding="utf-8"))

        self.assertEqual(order["order_reference"], "AB-1234")
        self.assertEqual(order["freight_price"], 1250.5)
        self.assertEqual(order["attachment_filenames"], ["booking.txt"])
        self.assertEqual(order["loading_locations"][0]["time"]["datetime_to"], "2024-05-12T12:00:00+00:00")

    def test_parse_to_stdout(self):
        with self.runner.isolated_filesystem():
            Path("booking.txt").write_text(BOOKING_TEXT, encoding="utf-8")
            result = self.runner.invoke(cli, ["parse", "booking.txt", "--currency", "GBP"])

        self.assertEqual(result.exit_code, 0, result.output)
        self.assertIn('"order_reference": "AB-1234"', result.output)

    def test_parse_unsupported(self):
        with self.runner.isolated_filesystem():
            Path("invoice.txt").write_text("Invoice\nTotal 120,00\n", encoding="utf-8")
            result = self.runner.invoke(cli, ["parse", "invoice.txt"])

        self.assertEqual(result.exit_code, 1)

    def test_parse_unreadable_pdf(self):
        with self.runner.isolated_filesystem():
            Path("bad.pdf").write_text(BOOKING_TEXT, encoding="utf-8")
            result = self.runner.invoke(cli, ["parse", "bad.pdf"])

        self.assertEqual(result.exit_code, 1)
        self.assertIn("Could not read bad.pdf", result.output)

    def test_parse_rejects_unknown_fallback(self):
        with self.runner.isolated_filesystem():
            Path("booking.txt").write_text(BOOKING_TEXT, encoding="utf-8")
            result = self.runner.invoke(cli, ["parse", "booking.txt", "--date-fallback", "later"])

        self.assertEqual(result.exit_code, 2)

    def test_validate(self):
        with self.runner.isolated_filesystem():
            Path("booking.txt").write_text(BOOKING_TEXT, encoding="utf-8")
            Path("invoice.txt").write_text("Invoice\n", encoding="utf-8")

            supported = self.runner.invoke(cli, ["validate", "booking.txt"])
            unsupported = self.runner.invoke(cli, ["validate", "invoice.txt"])

        self.assertEqual(supported.exit_code, 0)
        self.assertIn("supported", supported.output)
        self.assertEqual(unsupported.exit_code, 1)


class TestLineExtraction(unittest.TestCase):

    def test_clean_lines(self):
        text = "A (cid:3)B\r\n\r\n   C   D  \n\t\n"
        self.assertEqual(PDFLineExtractor.clean_lines(text), ["A B", "C D"])
        self.assertEqual(PDFLineExtractor.clean_lines(""), [])

    def test_text_file_lines(self):
        runner = CliRunner()
        with runner.isolated_filesystem():
            Path("booking.txt").write_text(BOOKING_TEXT, encoding="utf-8")
            lines = extract_document_lines("booking.txt")

        self.assertEqual(lines[0], "BOOKING CONFIRMATION")
        self.assertEqual(len(lines), 17)


if __name__ == '__main__':
    unittest.main()
