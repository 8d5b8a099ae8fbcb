#!/usr/bin/env python3
"""
Tests for format validation and the end-to-end booking pipeline.
"""

import unittest
from datetime import datetime, timezone

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from transport_order_parser import (
    BookingPdfAssistant,
    ParserConfig,
    UnsupportedDocumentError,
    validate_format,
)

FIXED_NOW = datetime(2024, 6, 1, 9, 30, tzinfo=timezone.utc)

BOOKING_LINES = [
    "BOOKING CONFIRMATION",
    "Ref.: AB-1234",
    "Invoicing Adress",
    "TRANSALLIANCE UK LTD",
    "Unit 4 Kingsway",
    "Business Park",
    "GB-PE2 6DP PETERBOROUGH",
    "Shipping Price",
    "1 250,50",
    "EUR",
    "Loading on: 12/05/2024",
    "ACME PAPER MILL",
    "08h00 - 12h00",
    "12 Mill Road LEEDS",
    "Delivery on: 14/05/2024",
    "GAMMA STORE",
    "YORK YO1 7HH",
]


class TestValidateFormat(unittest.TestCase):

    def test_empty_input(self):
        self.assertFalse(validate_format([]))

    def test_booking_line(self):
        self.assertTrue(validate_format(["Booking confirmation"]))

    def test_chartering_confirmation(self):
        self.assertTrue(validate_format(["x", "chartering confirmation no. 12"]))

    def test_rate_needs_loading_and_delivery(self):
        self.assertFalse(validate_format(["Shipping Price", "Loading on: 12/05/2024"]))
        self.assertTrue(validate_format(["Shipping Price", "Loading on: 12/05/2024", "Delivery on: 14/05/2024"]))
        self.assertTrue(validate_format(["Rate", "LOADING", "DELIVERY"]))

    def test_unrelated_document(self):
        self.assertFalse(validate_format(["Invoice", "Total 120,00"]))

    def test_static_method(self):
        self.assertTrue(BookingPdfAssistant.validate_format(BOOKING_LINES))


class TestBookingPdfAssistant(unittest.TestCase):

    def setUp(self):
        self.orders = []
        self.assistant = BookingPdfAssistant(order_sink=self.orders.append, clock=lambda: FIXED_NOW)

    def test_end_to_end(self):
        record = self.assistant.process_lines(BOOKING_LINES, "Booking_123.PDF")

        self.assertEqual(record.order_reference, "AB-1234")
        self.assertEqual(record.freight_price, 1250.5)
        self.assertEqual(record.freight_currency, "EUR")
        self.assertEqual(record.customer.to_dict(), {
            "side": "none",
            "details": {
                "company": "TRANSALLIANCE UK LTD",
                "street_address": "Unit 4 Kingsway Business Park",
                "city": "PETERBOROUGH",
                "postal_code": "PE2 6DP",
                "country": "GB",
            },
        })

        self.assertEqual(len(record.loading_locations), 1)
        loading = record.loading_locations[0]
        self.assertEqual(loading.company_address.company, "ACME PAPER MILL")
        self.assertEqual(loading.time.to_dict(), {
            "datetime_from": "2024-05-12T08:00:00+00:00",
            "datetime_to": "2024-05-12T12:00:00+00:00",
        })

        self.assertEqual(len(record.destination_locations), 1)
        self.assertEqual(record.destination_locations[0].company_address.company, "GAMMA STORE")
        self.assertEqual(record.destination_locations[0].time.datetime_from, "2024-05-14T00:00:00+00:00")

        self.assertEqual(len(record.cargos), 1)
        self.assertEqual(record.cargos[0].package_count, 1)
        self.assertEqual(record.cargos[0].package_type, "pallet")

        self.assertEqual(record.attachment_filenames, ["booking_123.pdf"])

    def test_sink_receives_record_dict(self):
        record = self.assistant.process_lines(BOOKING_LINES)
        self.assertEqual(self.orders, [record.to_dict()])
        self.assertEqual(set(self.orders[0]), {
            "customer",
            "loading_locations",
            "destination_locations",
            "attachment_filenames",
            "cargos",
            "order_reference",
            "freight_price",
            "freight_currency",
        })
        self.assertEqual(self.orders[0]["attachment_filenames"], [])

    def test_idempotent(self):
        first = self.assistant.process_lines(BOOKING_LINES, "a.pdf").to_dict()
        second = self.assistant.process_lines(BOOKING_LINES, "a.pdf").to_dict()
        self.assertEqual(first, second)

    def test_unsupported_document(self):
        with self.assertRaises(UnsupportedDocumentError):
            self.assistant.process_lines(["Invoice", "Total 120,00"])
        with self.assertRaises(UnsupportedDocumentError):
            self.assistant.process_lines([])
        self.assertEqual(self.orders, [])

    def test_defaults_for_sparse_document(self):
        record = self.assistant.process_lines(["Booking confirmation"])
        data = record.to_dict()

        self.assertIsNone(data["order_reference"])
        self.assertEqual(data["freight_price"], 0)
        self.assertEqual(data["freight_currency"], "EUR")
        self.assertEqual(data["customer"]["details"]["company"], "Booking confirmation")
        self.assertEqual(data["customer"]["details"]["country"], "GB")
        self.assertEqual(data["loading_locations"], [])
        self.assertEqual(data["destination_locations"], [])
        self.assertEqual(data["cargos"], [{"package_count": 1, "package_type": "pallet"}])

    def test_currency_word_falls_back_to_default(self):
        lines = ["Booking confirmation", "Shipping Price", "900", "Freight paid by customer"]
        record = self.assistant.process_lines(lines)
        self.assertEqual(record.freight_price, 900.0)
        self.assertEqual(record.freight_currency, "EUR")

    def test_configured_defaults(self):
        config = ParserConfig(default_currency="gbp", date_fallback="none")
        assistant = BookingPdfAssistant(config, country_lookup=lambda text: None, clock=lambda: FIXED_NOW)
        record = assistant.process_lines(["Booking", "Loading", "ACME", "LEEDS"])

        self.assertEqual(record.freight_currency, "GBP")
        self.assertEqual(record.loading_locations[0].time.to_dict(), {})

    def test_fabricated_time_uses_clock(self):
        record = self.assistant.process_lines(["Booking", "Loading", "ACME", "LEEDS"])
        self.assertEqual(record.loading_locations[0].time.to_dict(), {
            "datetime_from": "2024-06-01T09:30:00+00:00",
        })

    def test_customer_country_from_lookup(self):
        lines = ["Booking", "Invoicing Adress", "ACME", "Street", "", "Paris France"]
        record = self.assistant.process_lines(lines)
        self.assertEqual(record.customer.details.country, "FR")


class TestParserConfig(unittest.TestCase):

    def test_unknown_date_fallback(self):
        with self.assertRaises(ValueError):
            ParserConfig(date_fallback="yesterday")

    def test_codes_are_upper_cased(self):
        config = ParserConfig(default_country="ie", default_currency="usd")
        self.assertEqual(config.default_country, "IE")
        self.assertEqual(config.default_currency, "USD")


if __name__ == '__main__':
    unittest.main()
