"""Schedule tables (community education catalogs and similar).

Each matched element is a row; cells are read by position. Header rows and
layout rows fall out naturally: they have too few cells or no title.
"""

from collections.abc import Mapping
from typing import Any

from src.class_scraper.browser import BrowserPage, BrowserSession
from src.class_scraper.extractors.base import COLLECT_CELLS_JS, SourceExtractor

DEFAULT_ROW_SELECTOR = "tr, .class-row, .course-listing"
DEFAULT_CELL_SELECTOR = "td, .cell, .info"
DEFAULT_COLUMNS: dict[str, int] = {"title": 0, "date": 1, "time": 2, "location": 3}


class TableListingExtractor(SourceExtractor):
    variant = "table_listing"

    def __init__(
        self,
        session: BrowserSession,
        *,
        row_selector: str = DEFAULT_ROW_SELECTOR,
        cell_selector: str = DEFAULT_CELL_SELECTOR,
        columns: Mapping[str, int] | None = None,
        min_cells: int = 3,
        **kwargs: Any,
    ) -> None:
        super().__init__(session, **kwargs)
        self.row_selector = row_selector
        self.cell_selector = cell_selector
        self.columns = dict(columns or DEFAULT_COLUMNS)
        self.min_cells = min_cells

    async def extract_items(self, page: BrowserPage) -> list[dict[str, str | None]]:
        rows = await page.evaluate(
            COLLECT_CELLS_JS,
            {"selector": self.row_selector, "cellSelector": self.cell_selector},
        )
        items = []
        for cells in rows or []:
            item = self.map_row(cells)
            if item is not None:
                items.append(item)
        return items

    def map_row(self, cells: list[str]) -> dict[str, str | None] | None:
        """Map cell positions to fields; None for rows that aren't classes."""
        if len(cells) < self.min_cells:
            return None
        item = {
            name: (cells[index] or None) if index < len(cells) else None
            for name, index in self.columns.items()
        }
        if not item.get("title"):
            return None
        return item
