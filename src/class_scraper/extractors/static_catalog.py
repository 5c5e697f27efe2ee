"""Static product catalog: one URL, one element selector, one pass.

Built for WooCommerce-style shop pages where each class is a product tile.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from src.class_scraper.browser import BrowserPage, BrowserSession
from src.class_scraper.extractors.base import (
    FieldSpec,
    SourceExtractor,
    coerce_fields,
    collect_fields,
)

DEFAULT_SELECTOR = ".product"

DEFAULT_FIELDS: dict[str, FieldSpec] = {
    "title": FieldSpec((".woocommerce-loop-product__title",)),
    "price": FieldSpec((".price",)),
    "link": FieldSpec(("a",), attr="href"),
}


class StaticCatalogExtractor(SourceExtractor):
    variant = "static_catalog"

    def __init__(
        self,
        session: BrowserSession,
        *,
        selector: str = DEFAULT_SELECTOR,
        fields: Mapping[str, FieldSpec | Sequence[str] | Mapping[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(session, **kwargs)
        self.selector = selector
        self.fields = coerce_fields(fields) if fields else dict(DEFAULT_FIELDS)

    async def extract_items(self, page: BrowserPage) -> list[dict[str, str | None]]:
        return await collect_fields(page, self.selector, self.fields)
