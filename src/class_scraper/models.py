"""Pydantic models for class listing data.

RawRecord is whatever a source page gave us. CanonicalRecord is the fully
defaulted, immutable record that gets synced and saved.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

# CanonicalRecord attribute -> Airtable column, matching the base's table schema.
STORE_FIELD_NAMES: dict[str, str] = {
    "title": "Title",
    "provider": "Provider",
    "date": "Date",
    "time": "Time",
    "location": "Location",
    "price": "Price",
    "type": "Type",
    "link": "Link",
    "region": "Region",
    "last_updated": "Last Updated",
}


class RawRecord(BaseModel):
    """One listing as extracted from a source page, before normalization."""

    title: str | None = None
    date: str | None = None  # free text, e.g. "Sat, March 15, 2025"
    time: str | None = None
    location: str | None = None
    price: str | None = None  # free text, e.g. "$45.00 registration fee"
    link: str | None = None
    provider: str | None = None
    type: str | None = None

    model_config = ConfigDict(extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def _blank_to_none(cls, value: Any) -> str | None:
        if value is None:
            return None
        # Page scripts can hand back numbers (e.g. a bare price cell)
        value = str(value).strip()
        return value or None


class CanonicalRecord(BaseModel):
    """A normalized class listing. Every field is set; nothing is mutated later."""

    id: str  # 12-char identity derived from provider/title/date
    title: str
    provider: str
    date: str | None  # YYYY-MM-DD
    time: str
    location: str
    price: float | None
    type: str
    link: str
    last_updated: str = Field(alias="lastUpdated")  # ISO timestamp, UTC
    region: str

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    def to_json(self) -> dict[str, Any]:
        """Serialize with the camelCase keys used in saved JSON files."""
        return self.model_dump(mode="json", by_alias=True)

    def to_store_fields(self) -> dict[str, Any]:
        """Map to Airtable column names, dropping nulls (typed columns reject them)."""
        fields: dict[str, Any] = {}
        for attr, column in STORE_FIELD_NAMES.items():
            value = getattr(self, attr)
            if value is None:
                continue
            fields[column] = value
        return fields
