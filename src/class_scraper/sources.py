"""Source table: which pages we scrape and with which extractor.

A source is a (name, variant, params) entry. Adding a provider means adding
an entry here or in a JSON file pointed to by SOURCES_FILE, e.g.:

    [
      {"name": "Valley Community Ed", "variant": "table_listing",
       "params": {"url": "https://example.edu/moto", "provider": "Valley CE",
                  "course_type": "Motorcycle Safety Course"}}
    ]
"""

import json
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, TypeAdapter

from src.class_scraper.browser import BrowserSession
from src.class_scraper.config import ClassScraperConfig
from src.class_scraper.extractors import EXTRACTOR_VARIANTS, SourceExtractor
from src.class_scraper.logging import get_logger

log = get_logger(__name__)

Variant = Literal["static_catalog", "dynamic_app", "table_listing", "card_listing"]


class SourceConfig(BaseModel):
    """One entry of the source table."""

    name: str
    variant: Variant
    params: dict[str, Any] = Field(default_factory=dict)


ExtractorFactory = Callable[[BrowserSession], SourceExtractor]


@dataclass(frozen=True)
class RegisteredSource:
    """A named source ready to run against a browser session."""

    name: str
    factory: ExtractorFactory


DEFAULT_SOURCES: tuple[SourceConfig, ...] = (
    SourceConfig(
        name="RideRite",
        variant="static_catalog",
        params={
            "url": "https://shopriderite.net/product-category/basic/",
            "provider": "RideRite",
            "course_type": "Basic Course",
        },
    ),
    SourceConfig(
        name="MSI Capitol",
        variant="dynamic_app",
        params={
            "url": (
                "https://register.msi5.com/webreg/production/reactapp/"
                "?book=capsc&SC=*FA&CC=MTC,EMTC"
            ),
            "provider": "MSI Capitol",
        },
    ),
    SourceConfig(
        name="Harley Davidson",
        variant="card_listing",
        params={
            "url": "https://riders.harley-davidson.com/s/?language=en_US#99992&expLvl=NRC",
            "provider": "Harley Davidson",
            "course_type": "New Rider Course",
        },
    ),
)

_SOURCE_LIST = TypeAdapter(list[SourceConfig])


def load_source_table(path: str | Path) -> list[SourceConfig]:
    """Read and validate a JSON source table.

    Raises:
        pydantic.ValidationError: If an entry has an unknown variant or bad shape.
    """
    raw = json.loads(Path(path).read_text(encoding="utf-8"))
    sources = _SOURCE_LIST.validate_python(raw)
    log.info("source_table_loaded", path=str(path), sources=len(sources))
    return sources


def build_registry(
    sources: Sequence[SourceConfig], config: ClassScraperConfig
) -> list[RegisteredSource]:
    """Turn source table entries into extractor factories, keeping table order.

    Timeouts come from config unless an entry sets them itself.
    """
    registry: list[RegisteredSource] = []
    for source in sources:
        cls = EXTRACTOR_VARIANTS[source.variant]
        params: dict[str, Any] = {
            "navigation_timeout_ms": config.navigation_timeout_ms,
            "wait_timeout_ms": (
                config.card_wait_timeout_ms
                if source.variant == "card_listing"
                else config.wait_timeout_ms
            ),
            **source.params,
            "name": source.name,
        }
        registry.append(RegisteredSource(source.name, _factory(cls, params)))
    return registry


def _factory(cls: type[SourceExtractor], params: dict[str, Any]) -> ExtractorFactory:
    def make(session: BrowserSession) -> SourceExtractor:
        return cls(session, **params)

    return make


def resolve_sources(config: ClassScraperConfig) -> list[RegisteredSource]:
    """Registry for this run: SOURCES_FILE if set, else the built-in table."""
    if config.sources_file:
        table = load_source_table(config.sources_file)
    else:
        table = list(DEFAULT_SOURCES)
    return build_registry(table, config)
