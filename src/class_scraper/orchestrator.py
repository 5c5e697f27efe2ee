"""Run every registered source, normalize the results, and sync them.

One browser session is shared by all sources and released exactly once. A
source that fails contributes nothing; only failing to start the browser
ends the run.
"""

from collections.abc import Callable, Sequence
from contextlib import AbstractAsyncContextManager, AsyncExitStack
from dataclasses import dataclass, field

from src.class_scraper.browser import BrowserSession, open_browser_session
from src.class_scraper.config import ClassScraperConfig
from src.class_scraper.errors import SessionStartupError
from src.class_scraper.logging import get_logger
from src.class_scraper.models import CanonicalRecord, RawRecord
from src.class_scraper.normalize import Normalizer
from src.class_scraper.sources import RegisteredSource, resolve_sources
from src.class_scraper.storage import LocalStore
from src.class_scraper.sync import RemoteSync, SyncOutcome

log = get_logger(__name__)

SessionFactory = Callable[[], AbstractAsyncContextManager[BrowserSession]]


@dataclass
class RunResult:
    raw_count: int
    records: list[CanonicalRecord]
    per_source: dict[str, int] = field(default_factory=dict)
    outcome: SyncOutcome | None = None


class Orchestrator:
    """Owns the browser session and the aggregate record list for one run."""

    def __init__(
        self,
        sources: Sequence[RegisteredSource],
        *,
        session_factory: SessionFactory,
        normalizer: Normalizer,
        remote_sync: RemoteSync,
        local_store: LocalStore,
    ) -> None:
        self.sources = list(sources)
        self.session_factory = session_factory
        self.normalizer = normalizer
        self.remote_sync = remote_sync
        self.local_store = local_store

    async def collect(self) -> tuple[list[RawRecord], dict[str, int]]:
        """Run sources in registration order against one shared session.

        Raises:
            SessionStartupError: If the browser session can't be opened.
        """
        records: list[RawRecord] = []
        per_source: dict[str, int] = {}

        async with AsyncExitStack() as stack:
            try:
                session = await stack.enter_async_context(self.session_factory())
            except Exception as e:
                log.error("browser_session_failed", error=str(e), type=type(e).__name__)
                raise SessionStartupError(f"Could not start browser session: {e}") from e

            log.info("scrape_started", sources=len(self.sources))
            for source in self.sources:
                before = len(records)
                log.info("source_started", source=source.name)
                try:
                    extracted = await source.factory(session).extract()
                except Exception as e:
                    # extractors catch their own errors; this is a second net
                    log.error(
                        "source_failed",
                        source=source.name,
                        error=str(e),
                        type=type(e).__name__,
                    )
                    extracted = []
                records.extend(extracted)
                per_source[source.name] = len(records) - before
                log.info(
                    "source_finished",
                    source=source.name,
                    found=per_source[source.name],
                    total=len(records),
                )

        log.info("scrape_complete", total=len(records))
        return records, per_source

    async def run(self) -> RunResult:
        raw, per_source = await self.collect()
        canonical = self.normalizer.normalize_all(raw)
        result = RunResult(raw_count=len(raw), records=canonical, per_source=per_source)

        if not canonical:
            # an empty replace would wipe the remote table
            log.warning("no_classes_found", action="saving_empty_snapshot")
            await self.local_store.save([])
            return result

        result.outcome = await self.remote_sync.sync(canonical)
        return result


def build_orchestrator(config: ClassScraperConfig) -> Orchestrator:
    """Wire an orchestrator from configuration."""
    local_store = LocalStore(config.output_dir)

    def session_factory() -> AbstractAsyncContextManager[BrowserSession]:
        return open_browser_session(
            headless=config.headless,
            navigation_timeout_ms=config.navigation_timeout_ms,
        )

    return Orchestrator(
        resolve_sources(config),
        session_factory=session_factory,
        normalizer=Normalizer(region=config.region),
        remote_sync=RemoteSync.from_config(config, local_store),
        local_store=local_store,
    )
