"""
Country lookup backed by babel's territory names.
"""

import re
import logging
from typing import Dict, List, Optional, Tuple

from babel import Locale

logger = logging.getLogger(__name__)

# Two-letter territory codes that are not countries
NON_COUNTRY_CODES = {"EU", "EZ", "UN", "QO", "ZZ"}

ALIASES = {
    "UK": "GB",
    "ENGLAND": "GB",
    "SCOTLAND": "GB",
}


class CountryLookup:
    """Resolve a free-text string to an ISO 3166 alpha-2 country code."""

    def __init__(self, locale: str = "en"):
        self.locale = Locale.parse(locale)
        self.codes: Dict[str, str] = {}
        self._names: List[Tuple[str, str]] = []
        self._load_territories()

    def _load_territories(self):
        for code, name in self.locale.territories.items():
            if len(code) != 2 or not code.isalpha() or code in NON_COUNTRY_CODES:
                continue
            self.codes[code] = name
            self._names.append((name.upper(), code))
        for alias, code in ALIASES.items():
            self._names.append((alias, code))

        # longest names first
        self._names.sort(key=lambda item: len(item[0]), reverse=True)
        logger.debug(f"Loaded {len(self.codes)} territories for locale {self.locale}")

    def get_iso(self, text: Optional[str]) -> Optional[str]:
        """
        Find the country a piece of text refers to.

        Args:
            text: Free text such as a city/postal/country line

        Returns:
            ISO alpha-2 code, or None when nothing matches
        """
        if not text or not text.strip():
            return None

        upper = text.strip().upper()
        if upper in self.codes:
            return upper

        for name, code in self._names:
            if re.search(rf'(?<!\w){re.escape(name)}(?!\w)', upper):
                logger.debug(f"Resolved country {code} from '{text}'")
                return code

        return None

    __call__ = get_iso
