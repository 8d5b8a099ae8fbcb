"""
Data models for the Transport Order Parser.
"""

from dataclasses import dataclass, field
from typing import List, Dict, Any, Optional


@dataclass
class CompanyAddress:
    """A company name plus whatever address parts could be recovered."""
    company: str = ""
    street_address: str = ""
    city: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None

    def to_location_dict(self) -> Dict[str, Any]:
        """Location shape: title mirrors company, unknown parts are omitted."""
        address = {
            "company": self.company,
            "title": self.company,
            "street_address": self.street_address,
        }
        if self.city:
            address["city"] = self.city
        if self.postal_code:
            address["postal_code"] = self.postal_code
        if self.country:
            address["country"] = self.country
        return address

    def to_details_dict(self) -> Dict[str, str]:
        """Party shape: every key present, empty string when unknown."""
        return {
            "company": self.company or "",
            "street_address": self.street_address or "",
            "city": self.city or "",
            "postal_code": self.postal_code or "",
            "country": self.country or "",
        }


@dataclass
class Party:
    """Customer (or other side) of an order."""
    details: CompanyAddress
    side: str = "none"

    def to_dict(self) -> Dict[str, Any]:
        return {"side": self.side, "details": self.details.to_details_dict()}


@dataclass
class TimeWindow:
    """ISO-8601 timestamps; both None means no date could be read."""
    datetime_from: Optional[str] = None
    datetime_to: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return self.datetime_from is None

    def to_dict(self) -> Dict[str, str]:
        if self.datetime_from is None:
            return {}
        output = {"datetime_from": self.datetime_from}
        if self.datetime_to is not None and self.datetime_to != self.datetime_from:
            output["datetime_to"] = self.datetime_to
        return output


@dataclass
class Location:
    """A loading or destination point."""
    company_address: CompanyAddress
    time: TimeWindow = field(default_factory=TimeWindow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "company_address": self.company_address.to_location_dict(),
            "time": self.time.to_dict(),
        }


@dataclass
class CargoItem:
    """Represents a single cargo entry of an order."""
    package_count: int = 1
    package_type: str = "pallet"
    title: Optional[str] = None
    number: Optional[str] = None
    weight: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        cargo = {
            "package_count": self.package_count,
            "package_type": self.package_type,
        }
        if self.title:
            cargo["title"] = self.title
        if self.number:
            cargo["number"] = self.number
        if self.weight is not None:
            cargo["weight"] = self.weight
        return cargo


@dataclass
class OrderRecord:
    """The complete record handed to the order sink."""
    customer: Party
    order_reference: Optional[str] = None
    freight_price: float = 0
    freight_currency: str = "EUR"
    loading_locations: List[Location] = field(default_factory=list)
    destination_locations: List[Location] = field(default_factory=list)
    cargos: List[CargoItem] = field(default_factory=list)
    attachment_filenames: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "customer": self.customer.to_dict(),
            "loading_locations": [loc.to_dict() for loc in self.loading_locations],
            "destination_locations": [loc.to_dict() for loc in self.destination_locations],
            "attachment_filenames": list(self.attachment_filenames),
            "cargos": [cargo.to_dict() for cargo in self.cargos],
            "order_reference": self.order_reference,
            "freight_price": self.freight_price,
            "freight_currency": self.freight_currency,
        }
