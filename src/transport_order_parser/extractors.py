#!/usr/bin/env python3
"""
Field extractors for the booking layout.
Each extractor scans the document lines for an anchor line and reads its
value from neighbouring lines, falling back to alternate anchors when the
primary one is missing. A missing or malformed field never raises; the
extractor returns None or an empty value instead.
"""

import re
import logging
from datetime import datetime, timezone
from typing import Callable, List, Optional, Tuple

from . import classifiers
from .classifiers import first_index, first_line, line_at
from .models import CargoItem, CompanyAddress, Location, Party, TimeWindow
from .normalizers import (
    build_company_address,
    find_date_token,
    parse_amount,
    parse_city_postal_country,
    parse_currency,
    parse_date_and_time,
)
from .rules import CUSTOMER_RULES, ON_MARKER_RULES, read_fields
from .segmenter import split_by_keyword

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

DATE_FALLBACK_NOW = "now"
DATE_FALLBACK_NONE = "none"
DATE_FALLBACK_POLICIES = (DATE_FALLBACK_NOW, DATE_FALLBACK_NONE)

LOADING_KEYWORDS = ["COLLECTION", "LOADING"]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def extract_order_reference(lines: List[str]) -> Optional[str]:
    """
    Extract the vendor order reference.

    "REF.: AB-1234" gives "AB-1234". Without such a line, a "Ziegler Ref"
    line is used with everything but letters, digits and hyphens removed.
    """
    index = first_index(lines, classifiers.is_reference_line)
    if index is not None:
        raw = line_at(lines, index)
        for marker in ("REF.:", "REF:"):
            if raw.upper().startswith(marker):
                return raw[len(marker):].strip() or None

    index = first_index(lines, classifiers.is_ziegler_reference)
    if index is not None:
        raw = lines[index]
        position = raw.upper().find("ZIEGLER REF")
        reference = re.sub(r'[^0-9A-Za-z\-]', '', raw[position + len("ZIEGLER REF"):])
        return reference or None

    logger.debug("No order reference found")
    return None


def extract_freight(lines: List[str]) -> Tuple[Optional[float], Optional[str]]:
    """
    Extract freight price and currency.

    The amount sits on the line after the price anchor and the currency on
    the line after that (or on the amount line when the document ends).

    Returns:
        (price, currency), either may be None
    """
    index = first_index(lines, classifiers.is_freight_anchor)
    if index is None:
        logger.debug("No freight price anchor found")
        return None, None

    price = parse_amount(line_at(lines, index + 1))

    if index + 2 < len(lines):
        currency_line = lines[index + 2]
    else:
        currency_line = line_at(lines, index + 1)
    currency = parse_currency(currency_line)

    logger.debug(f"Freight: {price} {currency}")
    return price, currency


def extract_customer(lines: List[str],
                     country_lookup: Optional[Callable[[str], Optional[str]]] = None,
                     default_country: str = "GB") -> Party:
    """
    Extract the customer from the invoicing address block.

    Falls back to the TRANSALLIANCE header (or the first line) when the
    document has no "Invoicing Adress" block. A country missing from the
    city line is looked up from the same text, then defaults.
    """
    match = read_fields(lines, CUSTOMER_RULES)
    company = match.get("company")
    street = " ".join(part for part in (match.get("street1"), match.get("street2")) if part)
    city_line = match.get("city_line")

    parts = parse_city_postal_country(city_line)
    country = parts.country
    if not country and country_lookup is not None:
        country = country_lookup(city_line)
    if not country:
        logger.debug(f"No country for customer line '{city_line}', using {default_country}")
        country = default_country

    details = CompanyAddress(
        company=company,
        street_address=street,
        city=parts.city or "",
        postal_code=parts.postal or "",
        country=country,
    )
    return Party(details=details, side="none")


def _fallback_time(clock: Clock, date_fallback: str, reason: str) -> TimeWindow:
    if date_fallback == DATE_FALLBACK_NONE:
        logger.debug(f"{reason}; leaving location time empty")
        return TimeWindow()
    now = clock().isoformat()
    logger.warning(f"{reason}; using current time {now} as datetime_from")
    return TimeWindow(datetime_from=now)


def parse_booking_location_block(block: List[str],
                                 clock: Clock = utc_now,
                                 date_fallback: str = DATE_FALLBACK_NOW,
                                 country: str = "GB") -> Optional[Location]:
    """
    Parse a booking-style location block ("Collection ..." / "Loading on: ...").

    The company is the second line of the block and the address its last
    line. The first D/M/YYYY date in the block, combined with the first hour
    range, gives the time window. Without a usable date the date fallback
    policy decides between the current instant and an empty time.

    Args:
        block: Lines of one location section
        clock: Source of the current instant
        date_fallback: "now" or "none"
        country: Country assigned to the address

    Returns:
        Location, or None for an empty block
    """
    if not block:
        return None

    company = line_at(block, 1)
    reference_line = first_line(block, classifiers.is_block_reference)
    time_line = first_line(block, classifiers.is_hour_range)
    date_line = first_line(block, classifiers.has_booking_date)
    address_line = line_at(block, len(block) - 1)

    if reference_line:
        logger.debug(f"Location block reference: {reference_line.strip()}")

    company_address = CompanyAddress(
        company=company,
        street_address=address_line,
        country=country,
    )

    if date_line is None:
        time = _fallback_time(clock, date_fallback, f"No date in location block for '{company}'")
    else:
        time = parse_date_and_time(find_date_token(date_line), time_line)
        if time.is_empty:
            time = _fallback_time(clock, date_fallback, f"Unparseable date line '{date_line.strip()}'")

    return Location(company_address=company_address, time=time)


def parse_location_block(block: List[str]) -> Location:
    """Parse a location block whose address follows an "ON:" marker."""
    date = first_line(block, classifiers.is_standalone_date)
    match = read_fields(block, ON_MARKER_RULES)

    company_address = build_company_address(
        match.get("company"),
        match.get("street"),
        match.get("city_line"),
    )

    time_window = first_line(block, classifiers.is_hour_range)
    time = parse_date_and_time(date.strip() if date else None, time_window.strip() if time_window else None)

    return Location(company_address=company_address, time=time)


def extract_locations(lines: List[str],
                      clock: Clock = utc_now,
                      date_fallback: str = DATE_FALLBACK_NOW,
                      country: str = "GB") -> Tuple[List[Location], List[Location]]:
    """
    Extract loading and destination locations.

    The loading section runs from the first loading/collection line up to the
    first delivery/unloading/destination line; the delivery section runs from
    there to the end. Each "Collection"/"Loading" sub-block of the loading
    section is a separate loading location.

    Returns:
        (loading_locations, destination_locations)
    """
    # "UNLOADING" contains "LOADING": an unloading-only document yields one
    # loading location and no destination.
    loading_start = first_index(lines, classifiers.is_loading_start)
    delivery_start = first_index(lines, classifiers.is_delivery_start)

    loading_block: List[str] = []
    delivery_block: List[str] = []

    if loading_start is not None and delivery_start is not None and delivery_start > loading_start:
        loading_block = lines[loading_start:delivery_start]
        delivery_block = lines[delivery_start:]
    elif loading_start is not None:
        loading_block = lines[loading_start:]
    elif delivery_start is not None:
        delivery_block = lines[delivery_start:]

    logger.debug(f"Loading block: {len(loading_block)} lines, delivery block: {len(delivery_block)} lines")

    loading_locations: List[Location] = []
    for block in split_by_keyword(loading_block, LOADING_KEYWORDS):
        location = parse_booking_location_block(block, clock, date_fallback, country)
        if location:
            loading_locations.append(location)

    if not loading_locations and loading_block:
        location = parse_booking_location_block(loading_block, clock, date_fallback, country)
        if location:
            loading_locations.append(location)

    destination_locations: List[Location] = []
    if delivery_block:
        location = parse_booking_location_block(delivery_block, clock, date_fallback, country)
        if location:
            destination_locations.append(location)

    return loading_locations, destination_locations


def extract_cargos(lines: List[str]) -> List[CargoItem]:
    """Extract the cargo; the layout always describes a single item."""
    title = first_line(lines, classifiers.is_cargo_title)

    weight = None
    weight_line = first_line(lines, classifiers.is_weight_line)
    if weight_line is not None:
        weight = parse_amount(weight_line.strip())

    number = None
    number_index = first_index(lines, classifiers.is_cargo_number_anchor)
    if number_index is not None:
        number = line_at(lines, number_index + 2) or None

    cargo = CargoItem(
        package_count=1,
        package_type="pallet",
        title=title.strip() if title else None,
        number=number,
        weight=weight,
    )
    return [cargo]

