#!/usr/bin/env python3
"""
Line classifiers.
Pure predicates telling whether a single text line carries a semantic marker
of the booking layout, plus helpers to find the first line that does.
"""

import re
from typing import Callable, Iterable, List, Optional

LinePredicate = Callable[[str], bool]

# Date and hour patterns shared by the location parsers
STANDALONE_DATE_PATTERN = re.compile(r'^[0-3]?[0-9]/[0-1]?[0-9]/[0-9]{2,4}$')
BOOKING_DATE_PATTERN = re.compile(r'[0-3]?[0-9]/[0-1]?[0-9]/[0-9]{4}')
HOUR_RANGE_PATTERNS = [
    re.compile(r'[0-9]{1,2}h[0-9]{2}\s*-\s*[0-9]{1,2}h[0-9]{2}', re.IGNORECASE),
    re.compile(r'\b\d{1,2}:\d{2}\b\s*-\s*\d{1,2}:\d{2}'),
    re.compile(r'\b[0-9]{3,4}\s*-\s*[0-9]{1,2}\s*(AM|PM)\b', re.IGNORECASE),
]
WEIGHT_PATTERN = re.compile(r'[0-9]{1,3}\.?[0-9]{3},?[0-9]*')


def contains(line: str, *keywords: str) -> bool:
    """Case-insensitive substring test against any keyword."""
    upper = (line or "").upper()
    return any(keyword.upper() in upper for keyword in keywords)


def starts_with(line: str, *keywords: str) -> bool:
    """Case-insensitive prefix test on the stripped line."""
    upper = (line or "").strip().upper()
    return any(upper.startswith(keyword.upper()) for keyword in keywords)


def first_index(lines: Iterable[str], predicate: LinePredicate) -> Optional[int]:
    """Index of the first line satisfying the predicate, or None."""
    for i, line in enumerate(lines):
        if predicate(line):
            return i
    return None


def first_line(lines: Iterable[str], predicate: LinePredicate) -> Optional[str]:
    """The first line satisfying the predicate, or None."""
    for line in lines:
        if predicate(line):
            return line
    return None


def line_at(lines: List[str], index: Optional[int]) -> str:
    """Stripped line at index, empty string when out of range."""
    if index is None or index < 0 or index >= len(lines):
        return ""
    return (lines[index] or "").strip()


# Format markers

def is_booking_line(line: str) -> bool:
    return contains(line, "BOOKING")


def is_chartering_line(line: str) -> bool:
    return contains(line, "CHARTERING CONFIRMATION")


def is_rate_line(line: str) -> bool:
    return contains(line, "SHIPPING PRICE", "RATE")


def is_loading_marker(line: str) -> bool:
    return starts_with(line, "LOADING") or contains(line, "LOADING ON:")


def is_delivery_marker(line: str) -> bool:
    return starts_with(line, "DELIVERY") or contains(line, "DELIVERY ON:")


# Field anchors

def is_reference_line(line: str) -> bool:
    return starts_with(line, "REF.:", "REF:")


def is_ziegler_reference(line: str) -> bool:
    return contains(line, "ZIEGLER REF")


def is_freight_anchor(line: str) -> bool:
    return contains(line, "SHIPPING PRICE", "RATE", "PRICE")


def is_invoicing_address(line: str) -> bool:
    # "ADRESS" is how the vendor spells it
    return starts_with(line, "INVOICING ADRESS") or contains(line, "INVOICING ADRESS")


def is_transalliance_line(line: str) -> bool:
    return contains(line, "TRANSALLIANCE")


def is_loading_start(line: str) -> bool:
    return contains(line, "LOADING", "COLLECTION")


def is_delivery_start(line: str) -> bool:
    return contains(line, "DELIVERY", "UNLOADING", "DESTINATION")


def is_on_marker(line: str) -> bool:
    return starts_with(line, "ON:") or contains(line, "ON:")


def is_block_reference(line: str) -> bool:
    return (line or "").upper().startswith("REF")


# Value shapes

def is_standalone_date(line: str) -> bool:
    return bool(STANDALONE_DATE_PATTERN.match((line or "").strip()))


def has_booking_date(line: str) -> bool:
    return bool(BOOKING_DATE_PATTERN.search(line or ""))


def is_hour_range(line: str) -> bool:
    return any(pattern.search(line or "") for pattern in HOUR_RANGE_PATTERNS)


# Cargo anchors

def is_cargo_title(line: str) -> bool:
    return contains(line, "PAPER ROLLS", "PALLETS", "WEIGHT")


def is_weight_line(line: str) -> bool:
    return bool(WEIGHT_PATTERN.search((line or "").strip()))


def is_cargo_number_anchor(line: str) -> bool:
    # case-sensitive
    stripped = (line or "").strip()
    return "OT :" in stripped or "REF" in stripped
