"""Thin Airtable REST client for the class table.

Blocking requests calls run in a worker thread so callers can await them
one at a time. No retries here: callers decide what a failure means.
"""

import asyncio
from collections.abc import Sequence
from typing import Any

import requests

from src.class_scraper.errors import StoreRequestError
from src.class_scraper.logging import get_logger

log = get_logger(__name__)

REQUEST_TIMEOUT_SECONDS = 30
MAX_BATCH_SIZE = 10


class AirtableClient:
    """List, create and delete records in one Airtable table."""

    def __init__(
        self,
        api_key: str,
        base_id: str,
        table_id: str,
        *,
        api_url: str = "https://api.airtable.com/v0",
        session: requests.Session | None = None,
    ) -> None:
        self.base_url = f"{api_url.rstrip('/')}/{base_id}/{table_id}"
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            }
        )

    def _request(
        self,
        method: str,
        *,
        params: Any = None,
        json_body: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        try:
            response = self.session.request(
                method,
                self.base_url,
                params=params,
                json=json_body,
                timeout=REQUEST_TIMEOUT_SECONDS,
            )
        except requests.RequestException as e:
            raise StoreRequestError(f"Airtable {method} failed: {e}") from e

        if not response.ok:
            raise StoreRequestError(
                f"Airtable {method} returned {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )
        try:
            return response.json() if response.content else {}
        except ValueError as e:
            # proxies and captive portals answer 200 with HTML
            raise StoreRequestError(
                f"Airtable {method} returned a non-JSON body",
                status_code=response.status_code,
                body=response.text,
            ) from e

    async def probe(self) -> None:
        """Cheapest read that proves the key, base and table are usable."""
        await asyncio.to_thread(self._request, "GET", params={"pageSize": 1})

    async def list_records(
        self, *, sort_field: str | None = "Date", direction: str = "asc"
    ) -> list[dict[str, Any]]:
        """Fetch every record, following Airtable's offset pagination.

        Returns:
            Raw Airtable records: {"id": "rec...", "fields": {...}}.
        """
        params: dict[str, Any] = {}
        if sort_field:
            params["sort[0][field]"] = sort_field
            params["sort[0][direction]"] = direction

        records: list[dict[str, Any]] = []
        while True:
            body = await asyncio.to_thread(self._request, "GET", params=params)
            records.extend(body.get("records", []))
            offset = body.get("offset")
            if not offset:
                break
            params = {**params, "offset": offset}

        log.debug("airtable_records_listed", count=len(records))
        return records

    async def create_records(self, fields: Sequence[dict[str, Any]]) -> list[str]:
        """Create up to 10 records. Returns the new record IDs."""
        _check_batch(fields)
        body = await asyncio.to_thread(
            self._request,
            "POST",
            json_body={
                "records": [{"fields": item} for item in fields],
                # adds missing single-select options (e.g. course types) instead of a 422
                "typecast": True,
            },
        )
        return [record["id"] for record in body.get("records", [])]

    async def delete_records(self, record_ids: Sequence[str]) -> list[str]:
        """Delete up to 10 records by ID. Returns the IDs Airtable confirmed."""
        _check_batch(record_ids)
        params = [("records[]", record_id) for record_id in record_ids]
        body = await asyncio.to_thread(self._request, "DELETE", params=params)
        return [record["id"] for record in body.get("records", []) if record.get("deleted")]


def _check_batch(items: Sequence[Any]) -> None:
    if len(items) > MAX_BATCH_SIZE:
        raise ValueError(f"Airtable accepts at most {MAX_BATCH_SIZE} records per request")
