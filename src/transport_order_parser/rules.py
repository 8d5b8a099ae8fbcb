#!/usr/bin/env python3
"""
Declarative offset rules.
Fields of the booking layout sit at fixed distances from anchor lines. An
OffsetRule names the anchor and the offsets; read_fields applies the first
rule whose anchor is present.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .classifiers import LinePredicate, first_index, line_at
from . import classifiers

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OffsetRule:
    """Read fields at fixed offsets from the first anchor line."""
    name: str
    offsets: Dict[str, int]
    anchor: Optional[LinePredicate] = None
    # Position used when the anchor is missing (or when there is no anchor)
    default_index: Optional[int] = None

    def locate(self, lines: List[str]) -> Optional[int]:
        index = first_index(lines, self.anchor) if self.anchor else None
        return index if index is not None else self.default_index


@dataclass
class RuleMatch:
    """Fields read by a rule, with the rule name and anchor position."""
    rule: str
    index: int
    fields: Dict[str, str] = field(default_factory=dict)

    def get(self, name: str) -> str:
        return self.fields.get(name, "")


def read_fields(lines: List[str], rules: List[OffsetRule]) -> Optional[RuleMatch]:
    """
    Apply the first rule that can be anchored in the lines.

    Args:
        lines: Lines to read from
        rules: Rules in priority order (primary anchor first, fallbacks after)

    Returns:
        RuleMatch with stripped field values (empty string past the end),
        or None when no rule applies
    """
    for rule in rules:
        index = rule.locate(lines)
        if index is None:
            continue
        values = {name: line_at(lines, index + offset) for name, offset in rule.offsets.items()}
        logger.debug(f"Rule '{rule.name}' anchored at line {index}: {values}")
        return RuleMatch(rule=rule.name, index=index, fields=values)
    return None


CUSTOMER_RULES = [
    OffsetRule(
        name="invoicing-address",
        anchor=classifiers.is_invoicing_address,
        offsets={"company": 1, "street1": 2, "street2": 3, "city_line": 4},
    ),
    OffsetRule(
        name="transalliance",
        anchor=classifiers.is_transalliance_line,
        default_index=0,
        offsets={"company": 0, "street1": 1, "street2": 2, "city_line": 3},
    ),
]

ON_MARKER_RULES = [
    OffsetRule(
        name="on-marker",
        anchor=classifiers.is_on_marker,
        offsets={"company": 2, "street": 3, "city_line": 4},
    ),
    OffsetRule(
        name="block-start",
        default_index=0,
        offsets={"company": 1, "street": 2, "city_line": 3},
    ),
]
