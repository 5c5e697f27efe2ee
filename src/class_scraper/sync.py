"""Push canonical records to Airtable, with local JSON as fallback and backup.

Flow for one sync() call:

    no credentials        -> save locally, done            (mode="local")
    probe fails           -> save locally, done            (mode="fallback")
    otherwise             -> delete old records (optional), create new ones,
                             then save locally as backup   (mode="remote")

Batches go out one at a time, 10 records each, with a fixed pause between
requests to stay under Airtable's 5 requests/second. A failed batch is logged
and skipped; there is no retry and no rollback, so a remote sync can be
partial. The delete-then-insert replace is not atomic: a crash between the
two phases leaves the table empty until the next run.
"""

import asyncio
from collections.abc import Awaitable, Callable, Sequence
from typing import Literal, TypeVar

from pydantic import BaseModel

from src.class_scraper.airtable import AirtableClient
from src.class_scraper.config import ClassScraperConfig
from src.class_scraper.errors import StoreUnavailableError, SyncError
from src.class_scraper.logging import get_logger
from src.class_scraper.models import CanonicalRecord
from src.class_scraper.storage import LocalStore

log = get_logger(__name__)

T = TypeVar("T")

SyncMode = Literal["local", "fallback", "remote"]


class SyncOutcome(BaseModel):
    """What a sync() call did."""

    mode: SyncMode
    records: int
    batches_sent: int = 0
    batches_failed: int = 0
    records_created: int = 0
    records_deleted: int = 0
    reason: str | None = None

    @property
    def partial(self) -> bool:
        return self.mode == "remote" and self.batches_failed > 0


def make_batches(items: Sequence[T], size: int) -> list[list[T]]:
    """Split items into consecutive batches of at most size elements."""
    if size < 1:
        raise ValueError("batch size must be positive")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


class RemoteSync:
    """Synchronizes the class table, falling back to local files."""

    def __init__(
        self,
        local_store: LocalStore,
        client: AirtableClient | None = None,
        *,
        batch_size: int = 10,
        batch_delay_seconds: float = 0.25,
        replace_existing: bool = True,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.local_store = local_store
        self.client = client
        self.batch_size = batch_size
        self.batch_delay_seconds = batch_delay_seconds
        self.replace_existing = replace_existing
        self.sleep = sleep

    @classmethod
    def from_config(cls, config: ClassScraperConfig, local_store: LocalStore) -> "RemoteSync":
        client = None
        if config.has_store_credentials:
            client = AirtableClient(
                config.airtable_api_key,
                config.airtable_base_id,
                config.airtable_table_id,
                api_url=config.airtable_api_url,
            )
        return cls(
            local_store,
            client,
            batch_size=config.batch_size,
            batch_delay_seconds=config.batch_delay_seconds,
            replace_existing=config.replace_existing,
        )

    async def sync(self, records: Sequence[CanonicalRecord]) -> SyncOutcome:
        if self.client is None:
            log.info("airtable_not_configured", action="saving_locally")
            await self.local_store.save(records)
            return SyncOutcome(mode="local", records=len(records), reason="no_credentials")

        try:
            await self._probe(self.client)
        except StoreUnavailableError as e:
            log.warning("airtable_unreachable", error=str(e), action="saving_locally")
            await self.local_store.save(records)
            return SyncOutcome(mode="fallback", records=len(records), reason=str(e))

        outcome = SyncOutcome(mode="remote", records=len(records))
        if self.replace_existing:
            await self._delete_existing(self.client, outcome)
        await self._create_all(self.client, records, outcome)

        log.info(
            "airtable_sync_complete",
            created=outcome.records_created,
            deleted=outcome.records_deleted,
            batches_sent=outcome.batches_sent,
            batches_failed=outcome.batches_failed,
        )
        await self.local_store.save(records)
        return outcome

    async def _probe(self, client: AirtableClient) -> None:
        try:
            await client.probe()
        except SyncError as e:
            raise StoreUnavailableError(str(e)) from e

    async def _delete_existing(self, client: AirtableClient, outcome: SyncOutcome) -> None:
        try:
            existing = await client.list_records()
        except SyncError as e:
            log.error("airtable_list_failed", error=str(e))
            return

        record_ids = [record["id"] for record in existing]
        batches = make_batches(record_ids, self.batch_size)
        log.info("airtable_clearing", records=len(record_ids), batches=len(batches))

        for index, batch in enumerate(batches):
            if index:
                await self.sleep(self.batch_delay_seconds)
            try:
                deleted = await client.delete_records(batch)
            except SyncError as e:
                outcome.batches_failed += 1
                log.error("delete_batch_failed", batch=index, size=len(batch), error=str(e))
                continue
            outcome.batches_sent += 1
            outcome.records_deleted += len(deleted)

        if batches:
            await self.sleep(self.batch_delay_seconds)

    async def _create_all(
        self,
        client: AirtableClient,
        records: Sequence[CanonicalRecord],
        outcome: SyncOutcome,
    ) -> None:
        batches = make_batches(records, self.batch_size)
        for index, batch in enumerate(batches):
            if index:
                await self.sleep(self.batch_delay_seconds)
            try:
                created = await client.create_records(
                    [record.to_store_fields() for record in batch]
                )
            except SyncError as e:
                outcome.batches_failed += 1
                log.error("create_batch_failed", batch=index, size=len(batch), error=str(e))
                continue
            outcome.batches_sent += 1
            outcome.records_created += len(created)
            log.debug("create_batch_sent", batch=index, size=len(batch))
