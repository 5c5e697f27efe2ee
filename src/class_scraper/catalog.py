"""Read side of the class table: filters and the public JSON feed."""

from datetime import date, datetime, timezone
from typing import Any

from src.class_scraper.airtable import AirtableClient
from src.class_scraper.errors import SyncError
from src.class_scraper.logging import get_logger
from src.class_scraper.normalize import DEFAULT_REGION

log = get_logger(__name__)

FEED_TITLE = "Southern California Motorcycle Classes"
FEED_DESCRIPTION = "Comprehensive schedule of motorcycle safety courses"

SEARCH_FIELDS = ("Title", "Provider", "Location", "Type")


class ClassCatalog:
    """Queries over the classes currently stored in Airtable.

    Every query re-reads the table; a failed read is logged and treated as
    an empty table.
    """

    def __init__(self, client: AirtableClient) -> None:
        self.client = client

    async def all_classes(self) -> list[dict[str, Any]]:
        """All classes sorted by date, as {"id": record_id, **fields}."""
        try:
            records = await self.client.list_records(sort_field="Date", direction="asc")
        except SyncError as e:
            log.error("catalog_read_failed", error=str(e))
            return []
        return [{"id": record["id"], **record.get("fields", {})} for record in records]

    async def upcoming(self, limit: int = 50, today: date | None = None) -> list[dict[str, Any]]:
        """Dated classes on or after today, soonest first."""
        cutoff = (today or date.today()).isoformat()
        classes = [cls for cls in await self.all_classes() if (cls.get("Date") or "") >= cutoff]
        classes.sort(key=lambda cls: cls["Date"])
        return classes[:limit]

    async def by_provider(self, provider: str) -> list[dict[str, Any]]:
        return [cls for cls in await self.all_classes() if cls.get("Provider") == provider]

    async def by_region(self, region: str = DEFAULT_REGION) -> list[dict[str, Any]]:
        return [cls for cls in await self.all_classes() if cls.get("Region") == region]

    async def search(self, query: str) -> list[dict[str, Any]]:
        """Case-insensitive substring match on title, provider, location and type."""
        term = query.lower()
        return [
            cls
            for cls in await self.all_classes()
            if any(term in str(cls.get(name) or "").lower() for name in SEARCH_FIELDS)
        ]

    async def json_feed(self, limit: int = 50, today: date | None = None) -> dict[str, Any]:
        """Feed of upcoming classes for embedding on a website."""
        classes = await self.upcoming(limit=limit, today=today)
        return {
            "title": FEED_TITLE,
            "description": FEED_DESCRIPTION,
            "lastUpdated": datetime.now(timezone.utc).isoformat(),
            "classes": [
                {
                    "id": cls["id"],
                    "title": cls.get("Title"),
                    "provider": cls.get("Provider"),
                    "date": cls.get("Date"),
                    "time": cls.get("Time"),
                    "location": cls.get("Location"),
                    "price": cls.get("Price"),
                    "type": cls.get("Type"),
                    "registrationLink": cls.get("Link"),
                }
                for cls in classes
            ],
        }
