"""Shared fakes: a scriptable browser page/session and an in-memory Airtable."""

from collections.abc import Sequence
from datetime import datetime, timezone
from typing import Any

import pytest

from src.class_scraper.errors import StoreRequestError
from src.class_scraper.extractors.base import (
    COLLECT_CELLS_JS,
    COLLECT_FIELDS_JS,
    COUNT_MATCHES_JS,
    CURRENT_URL_JS,
)
from src.class_scraper.models import CanonicalRecord
from src.class_scraper.normalize import Normalizer
from src.class_scraper.storage import LocalStore

FIXED_NOW = datetime(2025, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


class FakePage:
    """Answers the extractor page scripts from canned data.

    elements: selector -> list of {field: [value per candidate selector]}
    rows: row selector -> list of cell text lists
    """

    def __init__(
        self,
        *,
        elements: dict[str, list[dict[str, list[str | None]]]] | None = None,
        rows: dict[str, list[list[str]]] | None = None,
        url: str = "https://register.example.test/classes",
        navigate_error: Exception | None = None,
        wait_error: Exception | None = None,
        evaluate_error: Exception | None = None,
    ) -> None:
        self.elements = elements or {}
        self.rows = rows or {}
        self.url = url
        self.navigate_error = navigate_error
        self.wait_error = wait_error
        self.evaluate_error = evaluate_error
        self.navigations: list[tuple[str, str, int]] = []
        self.waits: list[tuple[str, int]] = []
        self.counted: list[str] = []
        self.closed = 0

    async def navigate(
        self, url: str, *, wait_until: str = "networkidle", timeout_ms: int = 30000
    ) -> None:
        self.navigations.append((url, wait_until, timeout_ms))
        if self.navigate_error:
            raise self.navigate_error

    async def wait_for(self, selector: str, *, timeout_ms: int) -> None:
        self.waits.append((selector, timeout_ms))
        if self.wait_error:
            raise self.wait_error

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        if self.evaluate_error:
            raise self.evaluate_error
        if script == COUNT_MATCHES_JS:
            self.counted.append(arg)
            return len(self.elements.get(arg, []))
        if script == COLLECT_FIELDS_JS:
            return self.elements.get(arg["selector"], [])
        if script == COLLECT_CELLS_JS:
            return self.rows.get(arg["selector"], [])
        if script == CURRENT_URL_JS:
            return self.url
        raise AssertionError(f"unexpected page script: {script[:40]}")

    async def close(self) -> None:
        self.closed += 1


class FakeSession:
    """Hands out the given pages in order, then blank pages."""

    def __init__(self, *pages: FakePage, open_error: Exception | None = None) -> None:
        self.pages = list(pages)
        self.opened: list[FakePage] = []
        self.open_error = open_error

    async def open_page(self) -> FakePage:
        if self.open_error:
            raise self.open_error
        page = self.pages.pop(0) if self.pages else FakePage()
        self.opened.append(page)
        return page


class FakeSessionContext:
    """Session factory that counts how often the session is entered and left."""

    def __init__(self, session: FakeSession | None = None, enter_error: Exception | None = None) -> None:
        self.session = session or FakeSession()
        self.enter_error = enter_error
        self.entered = 0
        self.exited = 0

    def __call__(self) -> "FakeSessionContext":
        return self

    async def __aenter__(self) -> FakeSession:
        if self.enter_error:
            raise self.enter_error
        self.entered += 1
        return self.session

    async def __aexit__(self, *exc_info: Any) -> None:
        self.exited += 1


class FakeAirtable:
    """In-memory stand-in for AirtableClient that records every call."""

    def __init__(
        self,
        existing: Sequence[dict[str, Any]] = (),
        *,
        probe_error: Exception | None = None,
        failing_create_batches: Sequence[int] = (),
        failing_delete_batches: Sequence[int] = (),
    ) -> None:
        self.existing = list(existing)
        self.probe_error = probe_error
        self.failing_create_batches = set(failing_create_batches)
        self.failing_delete_batches = set(failing_delete_batches)
        self.calls: list[str] = []
        self.created: list[list[dict[str, Any]]] = []
        self.deleted: list[list[str]] = []

    async def probe(self) -> None:
        self.calls.append("probe")
        if self.probe_error:
            raise self.probe_error

    async def list_records(self, *, sort_field: str | None = "Date", direction: str = "asc") -> list[dict[str, Any]]:
        self.calls.append("list")
        return list(self.existing)

    async def create_records(self, fields: Sequence[dict[str, Any]]) -> list[str]:
        index = len(self.created)
        self.calls.append("create")
        self.created.append(list(fields))
        if index in self.failing_create_batches:
            raise StoreRequestError("boom", status_code=422, body="INVALID_VALUE")
        return [f"rec{index}_{i}" for i in range(len(fields))]

    async def delete_records(self, record_ids: Sequence[str]) -> list[str]:
        index = len(self.deleted)
        self.calls.append("delete")
        self.deleted.append(list(record_ids))
        if index in self.failing_delete_batches:
            raise StoreRequestError("boom", status_code=503)
        return list(record_ids)


class RecordingStore(LocalStore):
    """LocalStore that keeps what it was asked to save instead of writing files."""

    def __init__(self) -> None:
        super().__init__("unused")
        self.saves: list[list[CanonicalRecord]] = []

    async def save(self, records: Sequence[CanonicalRecord]):  # type: ignore[override]
        self.saves.append(list(records))
        return self.snapshot_path("test")


class RecordingSleep:
    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture
def normalizer() -> Normalizer:
    return Normalizer(clock=lambda: FIXED_NOW)


@pytest.fixture
def recording_store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


def make_records(normalizer: Normalizer, count: int, provider: str = "RideRite") -> list[CanonicalRecord]:
    from src.class_scraper.models import RawRecord

    return [
        normalizer.normalize(
            RawRecord(
                title=f"Basic Rider Course #{i}",
                date=f"2025-04-{(i % 28) + 1:02d}",
                price="$350.00",
                provider=provider,
            )
        )
        for i in range(count)
    ]
