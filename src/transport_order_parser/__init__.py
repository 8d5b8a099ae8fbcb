"""
Transport Order Parser

Turns the text lines of booking and chartering confirmation PDFs into
normalized transport order records.
"""

__version__ = "1.0.0"

from .assistant import BookingPdfAssistant, OrderAssistant, ParserConfig, validate_format
from .country_lookup import CountryLookup
from .exceptions import UnsupportedDocumentError
from .models import CargoItem, CompanyAddress, Location, OrderRecord, Party, TimeWindow

__all__ = [
    "BookingPdfAssistant",
    "OrderAssistant",
    "ParserConfig",
    "validate_format",
    "CountryLookup",
    "UnsupportedDocumentError",
    "CargoItem",
    "CompanyAddress",
    "Location",
    "OrderRecord",
    "Party",
    "TimeWindow",
]
