#!/usr/bin/env python3
"""
Text normalizers.
Turn free-text fragments of a booking document into structured values:
city/postal/country lines, dates with time windows, company addresses,
amounts and currency codes.
"""

import re
import logging
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Callable, List, NamedTuple, Optional, Tuple

from babel.numbers import list_currencies

from .classifiers import BOOKING_DATE_PATTERN, STANDALONE_DATE_PATTERN
from .models import CompanyAddress, TimeWindow

logger = logging.getLogger(__name__)


class CityPostalCountry(NamedTuple):
    """Parts of a city/postal/country line; None when undetermined."""
    city: Optional[str] = None
    postal: Optional[str] = None
    country: Optional[str] = None


# City/postal/country matchers, tried in order

def match_country_postal_city(line: str) -> Optional[CityPostalCountry]:
    """GB-DE14-BURTON ON TRENT"""
    m = re.match(r'^([A-Z]{2})-([A-Z0-9 ]+)-(.+)$', line)
    if not m:
        return None
    return CityPostalCountry(city=m.group(3).strip(), postal=m.group(2).strip(), country=m.group(1))


def match_country_postal_space_city(line: str) -> Optional[CityPostalCountry]:
    """GB-PE2 6DP PETERBOROUGH"""
    m = re.match(r'^([A-Z]{2})-([A-Z0-9 ]+)\s+(.+)$', line)
    if not m:
        return None
    return CityPostalCountry(city=m.group(3).strip(), postal=m.group(2).strip(), country=m.group(1))


def match_numeric_postal_city(line: str) -> Optional[CityPostalCountry]:
    """-37530 POCE-SUR-CISSE; five digits means a French postal code."""
    m = re.match(r'^-?([0-9]{4,6})\s+(.+)$', line)
    if not m:
        return None
    postal = m.group(1).strip()
    country = "FR" if len(postal) == 5 else None
    return CityPostalCountry(city=m.group(2).strip(), postal=postal, country=country)


def match_fallback(line: str) -> CityPostalCountry:
    """Trailing ISO country token, else a loose postal guess, else city only."""
    tokens = line.split()
    last = tokens[-1].upper()
    if len(last) == 2 and last.isalpha():
        return CityPostalCountry(city=" ".join(tokens[:-1]).strip(), country=last)

    m = re.search(r'([A-Z0-9\-]{3,10})', line)
    if m:
        postal = m.group(1)
        return CityPostalCountry(city=line.replace(postal, "").strip(), postal=postal)

    return CityPostalCountry(city=line)


CITY_LINE_MATCHERS: List[Callable[[str], Optional[CityPostalCountry]]] = [
    match_country_postal_city,
    match_country_postal_space_city,
    match_numeric_postal_city,
    match_fallback,
]


def parse_city_postal_country(line: Optional[str]) -> CityPostalCountry:
    """
    Parse a city/postal/country line into parts.

    Recognizes lines like:
        GB-PE2 6DP PETERBOROUGH
        GB-DE14-BURTON ON TRENT
        -37530 POCE-SUR-CISSE

    Args:
        line: Raw line text

    Returns:
        CityPostalCountry with the fields that could be determined
    """
    line = (line or "").strip()
    if not line:
        return CityPostalCountry()

    for matcher in CITY_LINE_MATCHERS:
        parts = matcher(line)
        if parts is not None:
            logger.debug(f"City line '{line}' matched by {matcher.__name__}: {parts}")
            return parts

    return CityPostalCountry(city=line)


def build_company_address(company: str, street: str, city_postal_line: str) -> CompanyAddress:
    """Combine company, street and a city/postal/country line into an address."""
    parts = parse_city_postal_country(city_postal_line)
    return CompanyAddress(
        company=company,
        street_address=street,
        city=parts.city or None,
        postal_code=parts.postal or None,
        country=parts.country or None,
    )


# Dates and time windows

DATE_FORMATS = ['%d/%m/%y', '%d/%m/%Y']


def _hour_range(m) -> Tuple[int, int, int, int]:
    return int(m.group(1)), int(m.group(2)), int(m.group(3)), int(m.group(4))


def _meridiem_range(m) -> Tuple[int, int, int, int]:
    digits = m.group(1).zfill(4)
    to_hour = int(m.group(2)) % 12
    if m.group(3).upper() == "PM":
        to_hour += 12
    return int(digits[:2]), int(digits[2:]), to_hour, 0


TIME_WINDOW_MATCHERS = [
    (re.compile(r'([0-9]{1,2})h([0-9]{2})\s*-\s*([0-9]{1,2})h([0-9]{2})', re.IGNORECASE), _hour_range),
    (re.compile(r'\b([0-9]{1,2}):([0-9]{2})\b\s*-\s*\b([0-9]{1,2}):([0-9]{2})\b'), _hour_range),
    (re.compile(r'\b([0-9]{3,4})\s*-\s*([0-9]{1,2})\s*(AM|PM)\b', re.IGNORECASE), _meridiem_range),
]


def parse_date(date: Optional[str]) -> Optional[datetime]:
    """Parse D/M/YY or D/M/YYYY (first format that fits wins) at midnight UTC."""
    if not date:
        return None
    date = date.strip()
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(date, fmt).replace(tzinfo=timezone.utc)
        except ValueError:
            continue
    logger.debug(f"Could not parse date: {date}")
    return None


def parse_time_window(time_window: Optional[str]) -> Optional[Tuple[int, int, int, int]]:
    """Hour/minute pairs (from_h, from_m, to_h, to_m) of a free-text hour range."""
    if not time_window:
        return None
    for pattern, convert in TIME_WINDOW_MATCHERS:
        m = pattern.search(time_window)
        if m:
            return convert(m)
    return None


def find_date_token(line: Optional[str]) -> Optional[str]:
    """The date token inside a line, e.g. '12/05/2024' out of 'Loading on: 12/05/2024'."""
    if not line:
        return None
    stripped = line.strip()
    if STANDALONE_DATE_PATTERN.match(stripped):
        return stripped
    m = BOOKING_DATE_PATTERN.search(stripped)
    return m.group(0) if m else None


def parse_date_and_time(date: Optional[str], time_window: Optional[str] = None) -> TimeWindow:
    """
    Parse a date plus an optional time window into ISO timestamps.

    Both ends start at midnight of the date; a recognized hour range
    overwrites them. An unparseable date gives an empty TimeWindow.
    """
    base = parse_date(date)
    if base is None:
        return TimeWindow()

    start = end = base
    hours = parse_time_window(time_window)
    if hours:
        from_h, from_m, to_h, to_m = hours
        try:
            start = base.replace(hour=from_h, minute=from_m, second=0)
            end = base.replace(hour=to_h, minute=to_m, second=0)
        except ValueError:
            logger.debug(f"Ignoring out of range time window: {time_window}")
            start = end = base
        if end < start:
            logger.debug(f"Ignoring time window ending before it starts: {time_window}")
            start = end = base

    window = TimeWindow(datetime_from=start.isoformat())
    if end != start:
        window.datetime_to = end.isoformat()
    return window


# Amounts and currencies

def parse_amount(raw: Optional[str]) -> Optional[float]:
    """
    Read a number written with a decimal comma, e.g. '1 250,50' -> 1250.5.

    Only digits, commas and periods are kept. When several separators
    remain, the last one is the decimal point.
    """
    cleaned = re.sub(r'[^0-9,\.]', '', raw or "").replace(',', '.')
    if not cleaned:
        return None

    if cleaned.count('.') > 1:
        head, _, tail = cleaned.rpartition('.')
        cleaned = head.replace('.', '') + '.' + tail

    try:
        return float(Decimal(cleaned))
    except InvalidOperation:
        logger.warning(f"Invalid amount format: {raw}")
        return None


PREFERRED_CURRENCIES = ["EUR", "GBP", "USD"]


def parse_currency(line: Optional[str]) -> Optional[str]:
    """
    ISO 4217 currency code in a line, EUR/GBP/USD first.

    Other codes must be written in capitals as a word of their own and be
    known to babel, so ordinary words ("all", "paid") are not read as codes.
    """
    if not line:
        return None
    for code in PREFERRED_CURRENCIES:
        if re.search(rf'\b{code}\b', line, re.IGNORECASE):
            return code
    known = list_currencies()
    for token in re.findall(r'\b([A-Z]{3})\b', line):
        if token in known:
            return token
    logger.debug(f"No currency code in line: {line}")
    return None
