"""Page setup shared by every source: resource blocking and default timeouts."""

from playwright.async_api import Page, Route

from src.class_scraper.logging import get_logger

log = get_logger(__name__)

# Listings only need markup and scripts; client-rendered apps still run.
BLOCKED_RESOURCE_TYPES: frozenset[str] = frozenset(
    {"image", "stylesheet", "font", "media"}
)

# Registration sites take bookings - never send anything that could create one.
_BLOCKED_METHODS: frozenset[str] = frozenset({"PUT", "DELETE", "PATCH"})


async def configure_page_for_scraping(
    page: Page, *, navigation_timeout_ms: int = 30000
) -> None:
    """Block heavy resources and mutating requests, and set default timeouts.

    Args:
        page: Playwright Page instance.
        navigation_timeout_ms: Default for goto() and other navigations.
    """

    async def _route(route: Route) -> None:
        request = route.request

        if request.method in _BLOCKED_METHODS:
            log.warning(
                "blocked_mutating_request",
                method=request.method,
                url=request.url,
            )
            await route.abort("blockedbyclient")
            return

        if request.resource_type in BLOCKED_RESOURCE_TYPES:
            await route.abort()
        else:
            await route.continue_()

    await page.route("**/*", _route)
    page.set_default_timeout(navigation_timeout_ms)
    page.set_default_navigation_timeout(navigation_timeout_ms)
