"""Playwright adapter for the browser capability used by extractors.

Extractors only see BrowserSession / BrowserPage: open a page, navigate,
wait for a selector, evaluate a script, close. Playwright's timeout type is
translated to PageTimeoutError here so nothing else imports Playwright.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Protocol

from playwright.async_api import Browser, Page, async_playwright
from playwright.async_api import TimeoutError as PlaywrightTimeoutError

from src.class_scraper.errors import PageTimeoutError
from src.class_scraper.logging import get_logger
from src.class_scraper.utils import configure_page_for_scraping

log = get_logger(__name__)

CHROMIUM_ARGS = ["--no-sandbox", "--disable-setuid-sandbox"]


class BrowserPage(Protocol):
    async def navigate(
        self, url: str, *, wait_until: str = "networkidle", timeout_ms: int = 30000
    ) -> None: ...

    async def wait_for(self, selector: str, *, timeout_ms: int) -> None: ...

    async def evaluate(self, script: str, arg: Any = None) -> Any: ...

    async def close(self) -> None: ...


class BrowserSession(Protocol):
    async def open_page(self) -> BrowserPage: ...


class PlaywrightPage:
    """BrowserPage backed by a Playwright Page."""

    def __init__(self, page: Page) -> None:
        self.page = page

    async def navigate(
        self, url: str, *, wait_until: str = "networkidle", timeout_ms: int = 30000
    ) -> None:
        try:
            await self.page.goto(url, wait_until=wait_until, timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise PageTimeoutError(f"Navigation to {url} timed out") from e

    async def wait_for(self, selector: str, *, timeout_ms: int) -> None:
        try:
            await self.page.wait_for_selector(selector, timeout=timeout_ms)
        except PlaywrightTimeoutError as e:
            raise PageTimeoutError(
                f"No element matched {selector!r} within {timeout_ms} ms"
            ) from e

    async def evaluate(self, script: str, arg: Any = None) -> Any:
        return await self.page.evaluate(script, arg)

    async def close(self) -> None:
        await self.page.close()


class PlaywrightSession:
    """BrowserSession backed by one Chromium instance."""

    def __init__(self, browser: Browser, *, navigation_timeout_ms: int = 30000) -> None:
        self.browser = browser
        self.navigation_timeout_ms = navigation_timeout_ms

    async def open_page(self) -> PlaywrightPage:
        page = await self.browser.new_page()
        await configure_page_for_scraping(
            page, navigation_timeout_ms=self.navigation_timeout_ms
        )
        return PlaywrightPage(page)


@asynccontextmanager
async def open_browser_session(
    *, headless: bool = True, navigation_timeout_ms: int = 30000
) -> AsyncIterator[PlaywrightSession]:
    """Launch Chromium and close it on exit, whatever happened inside."""
    async with async_playwright() as pw:
        browser = await pw.chromium.launch(headless=headless, args=CHROMIUM_ARGS)
        log.info("browser_launched", headless=headless)
        try:
            yield PlaywrightSession(
                browser, navigation_timeout_ms=navigation_timeout_ms
            )
        finally:
            await browser.close()
            log.info("browser_closed")
