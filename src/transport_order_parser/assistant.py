#!/usr/bin/env python3
"""
Booking PDF assistant.
Validates that a document uses the supported booking layout, runs every field
extractor over its lines and hands the assembled order record to the order
sink.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

from . import classifiers
from .country_lookup import CountryLookup
from .exceptions import UnsupportedDocumentError
from .extractors import (
    DATE_FALLBACK_NOW,
    DATE_FALLBACK_POLICIES,
    Clock,
    extract_cargos,
    extract_customer,
    extract_freight,
    extract_locations,
    extract_order_reference,
    utc_now,
)
from .models import OrderRecord

logger = logging.getLogger(__name__)

OrderSink = Callable[[Dict[str, Any]], Any]


@dataclass
class ParserConfig:
    """Defaults applied when the document does not state a value."""
    default_country: str = "GB"
    location_country: str = "GB"
    default_currency: str = "EUR"
    date_fallback: str = DATE_FALLBACK_NOW
    lookup_locale: str = "en"

    def __post_init__(self):
        if self.date_fallback not in DATE_FALLBACK_POLICIES:
            raise ValueError(
                f"Unknown date fallback '{self.date_fallback}', expected one of {DATE_FALLBACK_POLICIES}"
            )
        self.default_country = self.default_country.upper()
        self.location_country = self.location_country.upper()
        self.default_currency = self.default_currency.upper()


def validate_format(lines: List[str]) -> bool:
    """
    Check whether the lines come from the supported booking layout.

    Booking and chartering confirmations are accepted outright; other
    documents need a rate line plus both a loading and a delivery marker.
    """
    if not lines:
        return False

    def has(predicate):
        return classifiers.first_index(lines, predicate) is not None

    if has(classifiers.is_booking_line) or has(classifiers.is_chartering_line):
        return True

    return (
        has(classifiers.is_rate_line)
        and has(classifiers.is_loading_marker)
        and has(classifiers.is_delivery_marker)
    )


class OrderAssistant:
    """Base class for document assistants that produce orders."""

    def __init__(self, order_sink: Optional[OrderSink] = None):
        self.order_sink = order_sink

    def create_order(self, record: OrderRecord) -> OrderRecord:
        """Hand the record to the order sink, if one is configured."""
        if self.order_sink is not None:
            self.order_sink(record.to_dict())
        else:
            logger.debug("No order sink configured, returning record only")
        return record


class BookingPdfAssistant(OrderAssistant):
    """Turns the text lines of a booking/chartering confirmation into an order."""

    def __init__(self,
                 config: Optional[ParserConfig] = None,
                 order_sink: Optional[OrderSink] = None,
                 country_lookup: Optional[Callable[[str], Optional[str]]] = None,
                 clock: Clock = utc_now):
        super().__init__(order_sink)
        self.config = config or ParserConfig()
        self.country_lookup = country_lookup or CountryLookup(self.config.lookup_locale)
        self.clock = clock

    @staticmethod
    def validate_format(lines: List[str]) -> bool:
        return validate_format(lines)

    def process_lines(self, lines: List[str], attachment_filename: Optional[str] = None) -> OrderRecord:
        """
        Main processing entrypoint.

        Args:
            lines: Text lines of the document, in reading order
            attachment_filename: Name of the source attachment, if any

        Returns:
            The OrderRecord passed to the order sink

        Raises:
            UnsupportedDocumentError: the lines do not match the booking layout
        """
        lines = list(lines or [])
        if not self.validate_format(lines):
            logger.error(f"Unsupported document layout ({len(lines)} lines)")
            raise UnsupportedDocumentError(line_count=len(lines))

        logger.info(f"Processing booking document with {len(lines)} lines")

        order_reference = extract_order_reference(lines)
        freight_price, freight_currency = extract_freight(lines)
        customer = extract_customer(lines, self.country_lookup, self.config.default_country)
        loading_locations, destination_locations = extract_locations(
            lines,
            clock=self.clock,
            date_fallback=self.config.date_fallback,
            country=self.config.location_country,
        )
        cargos = extract_cargos(lines)

        attachment_filenames = [attachment_filename.lower()] if attachment_filename else []

        record = OrderRecord(
            customer=customer,
            order_reference=order_reference,
            freight_price=freight_price if freight_price is not None else 0,
            freight_currency=freight_currency or self.config.default_currency,
            loading_locations=loading_locations,
            destination_locations=destination_locations,
            cargos=cargos,
            attachment_filenames=attachment_filenames,
        )

        logger.info(
            f"Extracted order {order_reference or '-'}: {len(loading_locations)} loading, "
            f"{len(destination_locations)} destination location(s), "
            f"freight {record.freight_price} {record.freight_currency}"
        )
        return self.create_order(record)
