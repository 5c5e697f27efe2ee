"""Card grids (dealer rider-academy pages).

Cards render client-side, so the base class waits for them before we pick
the card selector and resolve each field through its own fallbacks.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from src.class_scraper.browser import BrowserPage, BrowserSession
from src.class_scraper.extractors.base import (
    FieldSpec,
    SourceExtractor,
    coerce_fields,
    collect_fields,
    first_matching_selector,
)
from src.class_scraper.logging import get_logger

log = get_logger(__name__)

DEFAULT_CANDIDATES: tuple[str, ...] = (
    ".class-card",
    ".course-card",
    '[data-testid="class"]',
)
DEFAULT_WAIT_SELECTORS: tuple[str, ...] = (".class-card", ".course-card")

DEFAULT_FIELDS: dict[str, FieldSpec] = {
    "title": FieldSpec(("h3", "h4", ".title")),
    "date": FieldSpec((".date",)),
    "location": FieldSpec((".location",)),
}


class CardListingExtractor(SourceExtractor):
    variant = "card_listing"

    def __init__(
        self,
        session: BrowserSession,
        *,
        candidates: Sequence[str] = DEFAULT_CANDIDATES,
        fields: Mapping[str, FieldSpec | Sequence[str] | Mapping[str, Any]] | None = None,
        wait_selectors: Sequence[str] = DEFAULT_WAIT_SELECTORS,
        wait_timeout_ms: int = 15000,
        **kwargs: Any,
    ) -> None:
        super().__init__(
            session,
            wait_selectors=wait_selectors,
            wait_timeout_ms=wait_timeout_ms,
            **kwargs,
        )
        self.candidates = tuple(candidates)
        self.fields = coerce_fields(fields) if fields else dict(DEFAULT_FIELDS)

    async def extract_items(self, page: BrowserPage) -> list[dict[str, str | None]]:
        selector = await first_matching_selector(page, self.candidates)
        if selector is None:
            log.info("no_card_selector_matched", source=self.name)
            return []
        return await collect_fields(page, selector, self.fields)
