"""Client-rendered registration app (React booking widgets).

The listing only exists after the app has fetched its data, so we wait for
any of the candidate selectors, then pick the first one that matches.
Listings carry no per-class link; the registration page itself is the link.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from src.class_scraper.browser import BrowserPage, BrowserSession
from src.class_scraper.extractors.base import (
    CURRENT_URL_JS,
    FieldSpec,
    SourceExtractor,
    coerce_fields,
    collect_fields,
    first_matching_selector,
)
from src.class_scraper.logging import get_logger

log = get_logger(__name__)

DEFAULT_CANDIDATES: tuple[str, ...] = (
    ".class-item",
    ".course-item",
    '[data-testid="class-listing"]',
    ".schedule-item",
)

DEFAULT_FIELDS: dict[str, FieldSpec] = {
    "title": FieldSpec(("h3", "h4", ".title", ".class-title")),
    "date": FieldSpec((".date", ".schedule-date")),
    "location": FieldSpec((".location", ".venue")),
    "price": FieldSpec((".price", ".cost")),
}


class DynamicAppExtractor(SourceExtractor):
    variant = "dynamic_app"

    def __init__(
        self,
        session: BrowserSession,
        *,
        candidates: Sequence[str] = DEFAULT_CANDIDATES,
        fields: Mapping[str, FieldSpec | Sequence[str] | Mapping[str, Any]] | None = None,
        wait_selectors: Sequence[str] | None = None,
        **kwargs: Any,
    ) -> None:
        self.candidates = tuple(candidates)
        super().__init__(
            session,
            wait_selectors=self.candidates if wait_selectors is None else wait_selectors,
            **kwargs,
        )
        self.fields = coerce_fields(fields) if fields else dict(DEFAULT_FIELDS)

    async def extract_items(self, page: BrowserPage) -> list[dict[str, str | None]]:
        selector = await first_matching_selector(page, self.candidates)
        if selector is None:
            log.info("no_listing_selector_matched", source=self.name)
            return []

        items = await collect_fields(page, selector, self.fields)
        page_url = await page.evaluate(CURRENT_URL_JS) or self.url
        for item in items:
            item["link"] = page_url
        log.debug("listing_selector_matched", source=self.name, selector=selector)
        return items
