"""
Deal bundle schema.

The bundle is the JSON blob stored on the deal property `pdf_donnees_json`.
Nothing in it is guaranteed: every field is optional and loosely typed, and
sub-records may arrive either flat or wrapped in HubSpot's `properties` shape.
Use `display()` to turn any field into printable text.
"""

from typing import Any, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, model_validator


PLACEHOLDER = "-"


def display(value: Any, default: str = PLACEHOLDER) -> str:
    """Resolve a bundle field to text, or `default` when absent/null/empty."""
    if value is None or (isinstance(value, str) and value == ""):
        return default
    return str(value)


class _Record(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    @model_validator(mode="before")
    @classmethod
    def _unwrap_properties(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return {}
        props = data.get("properties")
        if isinstance(props, dict):
            return props
        return data


class DealRecord(_Record):
    dealname: Optional[Any] = None
    amount: Optional[Any] = None
    closedate: Optional[Any] = None
    pipeline: Optional[Any] = None
    dealstage: Optional[Any] = None


class ContactRecord(_Record):
    firstname: Optional[Any] = None
    lastname: Optional[Any] = None
    email: Optional[Any] = None
    phone: Optional[Any] = None

    def full_name(self) -> Optional[str]:
        """First and last name joined, or None when both are absent."""
        parts = [display(p, "").strip() for p in (self.firstname, self.lastname)]
        name = " ".join(p for p in parts if p)
        return name or None


class CompanyRecord(_Record):
    name: Optional[Any] = None
    domain: Optional[Any] = None
    city: Optional[Any] = None


class LineItem(_Record):
    name: Optional[Any] = None
    quantity: Optional[Any] = None
    price: Optional[Any] = None
    amount: Optional[Any] = None


class DealBundle(BaseModel):
    """Consolidated deal data: deal, contact, company and ordered line items."""
    model_config = ConfigDict(extra="ignore", frozen=True)

    deal: DealRecord = Field(default_factory=DealRecord)
    contact: ContactRecord = Field(default_factory=ContactRecord)
    company: CompanyRecord = Field(default_factory=CompanyRecord)
    line_items: Tuple[LineItem, ...] = Field(default_factory=tuple)

    @model_validator(mode="before")
    @classmethod
    def _normalize(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return {}
        data = dict(data)
        items = data.get("line_items")
        if items is None:
            items = data.get("lineItems")
        data["line_items"] = items if isinstance(items, list) else []
        for key in ("deal", "contact", "company"):
            if data.get(key) is None:
                data.pop(key, None)
        return data
