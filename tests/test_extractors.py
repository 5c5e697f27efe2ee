import pytest

from src.class_scraper.errors import PageTimeoutError
from src.class_scraper.extractors import (
    CardListingExtractor,
    DynamicAppExtractor,
    FieldSpec,
    StaticCatalogExtractor,
    TableListingExtractor,
    first_matching_selector,
    first_present,
)
from src.class_scraper.extractors.table_listing import DEFAULT_ROW_SELECTOR

from tests.conftest import FakePage, FakeSession


# ---------------------------------------------------------------------------
# Fallback helpers
# ---------------------------------------------------------------------------


def test_first_present_skips_empty_values() -> None:
    assert first_present([None, "", "Basic RiderCourse", "other"]) == "Basic RiderCourse"
    assert first_present([None, None]) is None
    assert first_present([]) is None


@pytest.mark.asyncio
async def test_first_matching_selector_respects_priority() -> None:
    page = FakePage(
        elements={
            ".course-item": [{"title": ["A"]}],
            ".schedule-item": [{"title": ["B"]}, {"title": ["C"]}],
        }
    )

    selector = await first_matching_selector(
        page, [".class-item", ".course-item", ".schedule-item"]
    )

    assert selector == ".course-item"
    # stops at the first hit
    assert page.counted == [".class-item", ".course-item"]


@pytest.mark.asyncio
async def test_first_matching_selector_none_when_nothing_matches() -> None:
    page = FakePage()
    assert await first_matching_selector(page, [".a", ".b"]) is None


def test_field_spec_coerce_shapes() -> None:
    assert FieldSpec.coerce(".date") == FieldSpec((".date",))
    assert FieldSpec.coerce(["h3", "h4"]) == FieldSpec(("h3", "h4"))
    assert FieldSpec.coerce({"selectors": ["a"], "attr": "href"}) == FieldSpec(("a",), "href")


# ---------------------------------------------------------------------------
# StaticCatalogExtractor
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_static_catalog_extracts_products() -> None:
    page = FakePage(
        elements={
            ".product": [
                {
                    "title": ["Basic RiderCourse"],
                    "price": ["$45.00"],
                    "link": ["https://shopriderite.net/product/brc"],
                },
                {"title": ["Intermediate RiderCourse"], "price": [None], "link": [None]},
            ]
        }
    )
    session = FakeSession(page)
    extractor = StaticCatalogExtractor(
        session,
        name="RideRite",
        url="https://shopriderite.net/product-category/basic/",
        provider="RideRite",
        course_type="Basic Course",
    )

    records = await extractor.extract()

    assert len(records) == 2
    assert records[0].title == "Basic RiderCourse"
    assert records[0].price == "$45.00"
    assert records[0].link == "https://shopriderite.net/product/brc"
    assert records[0].provider == "RideRite"
    assert records[0].type == "Basic Course"
    assert records[1].price is None
    assert page.navigations == [
        ("https://shopriderite.net/product-category/basic/", "networkidle", 30000)
    ]
    assert page.waits == []
    assert page.closed == 1


@pytest.mark.asyncio
async def test_static_catalog_navigation_timeout_yields_nothing() -> None:
    page = FakePage(navigate_error=PageTimeoutError("timed out"))
    extractor = StaticCatalogExtractor(FakeSession(page), name="RideRite", url="https://x.test")

    assert await extractor.extract() == []
    assert page.closed == 1


@pytest.mark.asyncio
async def test_evaluation_failure_yields_nothing_and_closes_page() -> None:
    page = FakePage(evaluate_error=RuntimeError("Execution context was destroyed"))
    extractor = StaticCatalogExtractor(FakeSession(page), name="RideRite", url="https://x.test")

    assert await extractor.extract() == []
    assert page.closed == 1


@pytest.mark.asyncio
async def test_open_page_failure_yields_nothing() -> None:
    session = FakeSession(open_error=RuntimeError("browser crashed"))
    extractor = StaticCatalogExtractor(session, name="RideRite", url="https://x.test")

    assert await extractor.extract() == []


# ---------------------------------------------------------------------------
# DynamicAppExtractor
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_dynamic_app_waits_then_uses_first_matching_selector() -> None:
    page = FakePage(
        url="https://register.msi5.com/webreg/?book=capsc",
        elements={
            ".course-item": [
                {
                    "title": [None, "Motorcycle Training Course", None, None],
                    "date": ["March 15, 2025", None],
                    "location": [None, "Sacramento"],
                    "price": [None, "$250.00"],
                }
            ],
            ".schedule-item": [{"title": ["Should not be used"]}],
        },
    )
    extractor = DynamicAppExtractor(
        FakeSession(page),
        name="MSI Capitol",
        url="https://register.msi5.com/webreg/?book=capsc",
        provider="MSI Capitol",
        wait_timeout_ms=10000,
    )

    records = await extractor.extract()

    assert len(records) == 1
    record = records[0]
    assert record.title == "Motorcycle Training Course"
    assert record.date == "March 15, 2025"
    assert record.location == "Sacramento"
    assert record.price == "$250.00"
    assert record.link == "https://register.msi5.com/webreg/?book=capsc"
    assert record.provider == "MSI Capitol"
    assert page.waits == [
        ('.class-item, .course-item, [data-testid="class-listing"], .schedule-item', 10000)
    ]
    assert page.closed == 1


@pytest.mark.asyncio
async def test_dynamic_app_wait_timeout_yields_nothing() -> None:
    page = FakePage(wait_error=PageTimeoutError("no listing"))
    extractor = DynamicAppExtractor(FakeSession(page), name="MSI", url="https://x.test")

    assert await extractor.extract() == []
    assert page.closed == 1


@pytest.mark.asyncio
async def test_dynamic_app_no_candidate_matches_is_not_an_error() -> None:
    page = FakePage()
    extractor = DynamicAppExtractor(FakeSession(page), name="MSI", url="https://x.test")

    assert await extractor.extract() == []
    assert page.closed == 1


# ---------------------------------------------------------------------------
# TableListingExtractor
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_table_listing_maps_cells_and_drops_short_rows() -> None:
    page = FakePage(
        rows={
            DEFAULT_ROW_SELECTOR: [
                [],  # header row: th cells aren't matched
                ["Motorcycle Safety", "04/12/2025", "8:00am-5:00pm", "Room 101"],
                ["Notes", "see office"],  # too few cells
                ["", "04/19/2025", "8:00am"],  # no title
                ["Refresher", "04/26/2025", "9:00am"],  # no location column
            ]
        }
    )
    extractor = TableListingExtractor(
        FakeSession(page),
        name="Valley CE",
        url="https://ce.example.edu/moto",
        provider="Valley CE",
        course_type="Motorcycle Safety Course",
    )

    records = await extractor.extract()

    assert [r.title for r in records] == ["Motorcycle Safety", "Refresher"]
    assert records[0].date == "04/12/2025"
    assert records[0].time == "8:00am-5:00pm"
    assert records[0].location == "Room 101"
    assert records[1].location is None
    assert records[1].type == "Motorcycle Safety Course"
    assert page.closed == 1


def test_table_listing_custom_columns_and_min_cells() -> None:
    extractor = TableListingExtractor(
        FakeSession(),
        name="t",
        url="https://x.test",
        columns={"date": 0, "title": 1, "price": 4},
        min_cells=2,
    )

    assert extractor.map_row(["5/1/2025", "BRC"]) == {"date": "5/1/2025", "title": "BRC", "price": None}
    assert extractor.map_row(["5/1/2025"]) is None


# ---------------------------------------------------------------------------
# CardListingExtractor
# ---------------------------------------------------------------------------


@pytest.mark.asyncio
async def test_card_listing_field_fallback() -> None:
    page = FakePage(
        elements={
            ".class-card": [
                {"title": [None, "New Rider Course", None], "date": ["Apr 5, 2025"], "location": ["Riverside"]},
                {"title": [None, None, "Skilled Rider"], "date": [None], "location": [None]},
            ]
        }
    )
    extractor = CardListingExtractor(
        FakeSession(page),
        name="Harley Davidson",
        url="https://riders.example.test",
        provider="Harley Davidson",
        course_type="New Rider Course",
    )

    records = await extractor.extract()

    assert [r.title for r in records] == ["New Rider Course", "Skilled Rider"]
    assert records[0].date == "Apr 5, 2025"
    assert records[1].date is None
    assert all(r.provider == "Harley Davidson" for r in records)
    assert page.waits == [(".class-card, .course-card", 15000)]


@pytest.mark.asyncio
async def test_card_listing_uses_later_candidate_when_first_is_empty() -> None:
    page = FakePage(elements={'[data-testid="class"]': [{"title": ["Returning Rider"]}]})
    extractor = CardListingExtractor(FakeSession(page), name="HD", url="https://x.test")

    records = await extractor.extract()

    assert [r.title for r in records] == ["Returning Rider"]
    assert page.counted == [".class-card", ".course-card", '[data-testid="class"]']


@pytest.mark.asyncio
async def test_card_listing_timeout_yields_nothing() -> None:
    page = FakePage(wait_error=PageTimeoutError("no cards"))
    extractor = CardListingExtractor(FakeSession(page), name="HD", url="https://x.test")

    assert await extractor.extract() == []
    assert page.closed == 1
