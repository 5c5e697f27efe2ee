"""Source extractors, one class per page structure."""

from src.class_scraper.extractors.base import (
    FieldSpec,
    SourceExtractor,
    first_matching_selector,
    first_present,
)
from src.class_scraper.extractors.card_listing import CardListingExtractor
from src.class_scraper.extractors.dynamic_app import DynamicAppExtractor
from src.class_scraper.extractors.static_catalog import StaticCatalogExtractor
from src.class_scraper.extractors.table_listing import TableListingExtractor

EXTRACTOR_VARIANTS: dict[str, type[SourceExtractor]] = {
    cls.variant: cls
    for cls in (
        StaticCatalogExtractor,
        DynamicAppExtractor,
        TableListingExtractor,
        CardListingExtractor,
    )
}

__all__ = [
    "CardListingExtractor",
    "DynamicAppExtractor",
    "EXTRACTOR_VARIANTS",
    "FieldSpec",
    "SourceExtractor",
    "StaticCatalogExtractor",
    "TableListingExtractor",
    "first_matching_selector",
    "first_present",
]
