"""Motorcycle class scraper: extract listings, normalize, sync to Airtable.

Scrapes class schedules from provider sites with Playwright, normalizes them
into CanonicalRecords and syncs them to Airtable, keeping dated JSON files
locally as fallback and backup.
"""

from src.class_scraper.models import CanonicalRecord, RawRecord
from src.class_scraper.normalize import Normalizer
from src.class_scraper.orchestrator import Orchestrator, RunResult, build_orchestrator
from src.class_scraper.storage import LocalStore
from src.class_scraper.sync import RemoteSync, SyncOutcome

__all__ = [
    "CanonicalRecord",
    "LocalStore",
    "Normalizer",
    "Orchestrator",
    "RawRecord",
    "RemoteSync",
    "RunResult",
    "SyncOutcome",
    "build_orchestrator",
]
