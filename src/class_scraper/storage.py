"""Local JSON persistence: dated snapshot plus a small summary file.

Used as the fallback sink when Airtable is unavailable and as a backup after
every sync. Files for the same day are overwritten, never merged.
"""

import asyncio
import json
from collections.abc import Callable, Sequence
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from src.class_scraper.logging import get_logger
from src.class_scraper.models import CanonicalRecord

log = get_logger(__name__)

FILE_PREFIX = "motorcycle-classes"


class LocalStore:
    """Writes class snapshots under a single output directory."""

    def __init__(
        self,
        output_dir: str | Path = "data",
        *,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self.output_dir = Path(output_dir)
        self.clock = clock

    def snapshot_path(self, day: str) -> Path:
        return self.output_dir / f"{FILE_PREFIX}-{day}.json"

    def summary_path(self, day: str) -> Path:
        return self.output_dir / f"{FILE_PREFIX}-{day}-summary.json"

    async def save(self, records: Sequence[CanonicalRecord]) -> Path:
        """Write today's snapshot and summary, replacing earlier files.

        Returns:
            Path of the snapshot file.
        """
        now = self.clock()
        day = now.date().isoformat()
        payload = [record.to_json() for record in records]
        summary = build_summary(payload, saved_at=now)

        snapshot = self.snapshot_path(day)
        await asyncio.to_thread(_write_json, snapshot, payload)
        await asyncio.to_thread(_write_json, self.summary_path(day), summary)

        log.info(
            "local_snapshot_saved",
            path=str(snapshot),
            classes=len(payload),
            providers=len(summary["providers"]),
        )
        return snapshot


def build_summary(payload: list[dict[str, Any]], *, saved_at: datetime) -> dict[str, Any]:
    return {
        "totalClasses": len(payload),
        "providers": sorted({item["provider"] for item in payload}),
        "savedAt": saved_at.isoformat(),
        "sample": payload[0] if payload else None,
    }


def _write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")
