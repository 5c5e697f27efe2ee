"""SourceExtractor base class and the selector-fallback helpers.

Every extractor follows the same lifecycle:

    open one page -> navigate -> (optionally) wait for a listing selector
    -> variant-specific extraction -> close the page

extract() never raises. A timeout or any other failure is logged and the
source contributes zero records; the page is closed on every path.

Page scripts return raw candidate values and the Python side decides which
one wins, so the fallback rules live here once instead of in each script.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar

from src.class_scraper.browser import BrowserPage, BrowserSession
from src.class_scraper.errors import PageTimeoutError
from src.class_scraper.logging import get_logger
from src.class_scraper.models import RawRecord

log = get_logger(__name__)

COUNT_MATCHES_JS = "(selector) => document.querySelectorAll(selector).length"

CURRENT_URL_JS = "() => window.location.href"

# For each element matched by `selector`, returns {field: [value per candidate]}.
# A candidate value is the trimmed text (or property named by `attr`) of the
# first descendant matching that candidate selector, or null.
COLLECT_FIELDS_JS = """({selector, fields}) =>
    Array.from(document.querySelectorAll(selector)).map((el) => {
        const out = {};
        for (const [name, spec] of Object.entries(fields)) {
            out[name] = spec.selectors.map((sel) => {
                const node = el.querySelector(sel);
                if (!node) return null;
                const value = spec.attr ? node[spec.attr] : node.textContent;
                if (value === null || value === undefined) return null;
                return String(value).trim() || null;
            });
        }
        return out;
    })"""

# For each element matched by `selector`, the trimmed text of its cells.
COLLECT_CELLS_JS = """({selector, cellSelector}) =>
    Array.from(document.querySelectorAll(selector)).map((row) =>
        Array.from(row.querySelectorAll(cellSelector)).map(
            (cell) => (cell.textContent || "").trim()
        )
    )"""


@dataclass(frozen=True)
class FieldSpec:
    """Candidate selectors for one field, in priority order.

    attr names a DOM property to read instead of the text content
    (e.g. "href" gives the absolute link).
    """

    selectors: tuple[str, ...]
    attr: str | None = None

    @classmethod
    def coerce(cls, value: "FieldSpec | str | Sequence[str] | Mapping[str, Any]") -> "FieldSpec":
        """Build a FieldSpec from the loose shapes allowed in source tables."""
        if isinstance(value, FieldSpec):
            return value
        if isinstance(value, str):
            return cls((value,))
        if isinstance(value, Mapping):
            return cls(tuple(value["selectors"]), value.get("attr"))
        return cls(tuple(value))

    def to_js(self) -> dict[str, Any]:
        return {"selectors": list(self.selectors), "attr": self.attr}


def first_present(values: Iterable[str | None]) -> str | None:
    """Return the first non-empty value, in candidate order."""
    for value in values:
        if value:
            return value
    return None


async def first_matching_selector(
    page: BrowserPage, candidates: Sequence[str]
) -> str | None:
    """Return the first candidate selector that matches at least one element."""
    for selector in candidates:
        count = await page.evaluate(COUNT_MATCHES_JS, selector)
        if count:
            return selector
    return None


async def collect_fields(
    page: BrowserPage, selector: str, fields: Mapping[str, FieldSpec]
) -> list[dict[str, str | None]]:
    """Extract one dict per element matched by selector, resolving field fallbacks."""
    payload = {
        "selector": selector,
        "fields": {name: spec.to_js() for name, spec in fields.items()},
    }
    elements = await page.evaluate(COLLECT_FIELDS_JS, payload) or []
    return [
        {name: first_present(element.get(name) or []) for name in fields}
        for element in elements
    ]


class SourceExtractor(ABC):
    """Renders one source page and turns it into raw records."""

    variant: ClassVar[str]

    def __init__(
        self,
        session: BrowserSession,
        *,
        name: str,
        url: str,
        provider: str | None = None,
        course_type: str | None = None,
        wait_selectors: Sequence[str] = (),
        navigation_timeout_ms: int = 30000,
        wait_timeout_ms: int = 10000,
    ) -> None:
        self.session = session
        self.name = name
        self.url = url
        self.provider = provider
        self.course_type = course_type
        self.wait_selectors = tuple(wait_selectors)
        self.navigation_timeout_ms = navigation_timeout_ms
        self.wait_timeout_ms = wait_timeout_ms

    @abstractmethod
    async def extract_items(self, page: BrowserPage) -> list[dict[str, str | None]]:
        """Variant-specific extraction from a page that has finished loading."""

    async def extract(self) -> list[RawRecord]:
        """Extract raw records from the source. Never raises."""
        slog = log.bind(source=self.name, variant=self.variant, url=self.url)
        page: BrowserPage | None = None
        try:
            page = await self.session.open_page()
            await page.navigate(
                self.url,
                wait_until="networkidle",
                timeout_ms=self.navigation_timeout_ms,
            )
            if self.wait_selectors:
                await page.wait_for(
                    ", ".join(self.wait_selectors), timeout_ms=self.wait_timeout_ms
                )
            items = await self.extract_items(page)
            records = [self._to_raw(item) for item in items]
        except PageTimeoutError as e:
            slog.warning("extraction_timeout", error=str(e))
            return []
        except Exception as e:
            slog.error("extraction_failed", error=str(e), type=type(e).__name__)
            return []
        finally:
            if page is not None:
                await self._close_page(page, slog)

        slog.info("source_extracted", records=len(records))
        return records

    def _to_raw(self, item: Mapping[str, str | None]) -> RawRecord:
        data: dict[str, str | None] = {"provider": self.provider, "type": self.course_type}
        data.update({key: value for key, value in item.items() if value is not None})
        return RawRecord.model_validate(data)

    @staticmethod
    async def _close_page(page: BrowserPage, slog: Any) -> None:
        try:
            await page.close()
        except Exception as e:
            slog.warning("page_close_failed", error=str(e))


def coerce_fields(
    fields: Mapping[str, "FieldSpec | str | Sequence[str] | Mapping[str, Any]"],
) -> dict[str, FieldSpec]:
    return {name: FieldSpec.coerce(spec) for name, spec in fields.items()}
