"""Turn raw source records into canonical class records.

Pure apart from the lastUpdated timestamp, which comes from an injectable
clock. Every raw record, however sparse, yields exactly one canonical record.
"""

import base64
import hashlib
import re
from collections.abc import Callable
from datetime import date, datetime, timezone

from dateutil import parser as date_parser

from src.class_scraper.models import CanonicalRecord, RawRecord

DEFAULT_TITLE = "Motorcycle Safety Class"
DEFAULT_PROVIDER = "Unknown"
DEFAULT_COURSE_TYPE = "Motorcycle Safety Course"
DEFAULT_REGION = "Southern California"

ID_LENGTH = 12

_NON_DATE_CHARS = re.compile(r"[^\d/\-\s]")
_NUMERIC_DATE = re.compile(r"^\d{1,4}[/-]\d{1,2}[/-]\d{1,4}$")
_PRICE = re.compile(r"\$(\d+(?:\.\d{2})?)")


def generate_id(provider: str, title: str, date_text: str | None) -> str:
    """Deterministic short identity for a class listing.

    URL-safe base64 of the SHA-1 of "provider-title-date", cut to 12 chars
    (72 bits), plenty for a dataset of a few hundred classes.
    """
    key = f"{provider}-{title}-{date_text or ''}"
    digest = hashlib.sha1(key.encode("utf-8")).digest()
    return base64.urlsafe_b64encode(digest).decode("ascii")[:ID_LENGTH]


def parse_date(text: str | None) -> str | None:
    """Parse free-form date text into YYYY-MM-DD, or None.

    Everything except digits, slashes, dashes and whitespace is stripped
    first. Text with no digits left is not a date. A purely numeric date is
    read from the stripped string; anything else (month names) goes to the
    generic parser on the original text.
    """
    if not text:
        return None
    cleaned = " ".join(_NON_DATE_CHARS.sub(" ", text).split())
    if not any(ch.isdigit() for ch in cleaned):
        return None

    candidate = cleaned if _NUMERIC_DATE.match(cleaned) else text
    try:
        parsed = date_parser.parse(candidate, fuzzy=True, default=_year_start())
    except (ValueError, OverflowError, TypeError):
        return None
    return parsed.date().isoformat()


def _year_start() -> datetime:
    return datetime(date.today().year, 1, 1)


def parse_price(text: str | None) -> float | None:
    """Dollar amount in the text as a float (e.g. 45.0), or None."""
    if not text:
        return None
    match = _PRICE.search(text)
    return round(float(match.group(1)), 2) if match else None


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class Normalizer:
    """Applies parsing and defaults to produce CanonicalRecords."""

    def __init__(
        self,
        *,
        region: str = DEFAULT_REGION,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self.region = region
        self.clock = clock

    def normalize(self, raw: RawRecord) -> CanonicalRecord:
        provider = raw.provider or DEFAULT_PROVIDER
        title = raw.title or DEFAULT_TITLE
        return CanonicalRecord(
            id=generate_id(provider, title, raw.date),
            title=title,
            provider=provider,
            date=parse_date(raw.date),
            time=raw.time or "",
            location=raw.location or self.region,
            price=parse_price(raw.price),
            type=raw.type or DEFAULT_COURSE_TYPE,
            link=raw.link or "",
            last_updated=self.clock().isoformat(),
            region=self.region,
        )

    def normalize_all(self, records: list[RawRecord]) -> list[CanonicalRecord]:
        return [self.normalize(record) for record in records]
