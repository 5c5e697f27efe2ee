"""Check what a source page actually renders before writing a source entry.

Temporary diagnostic script: loads one URL through the same browser setup as
the scraper and reports the page title, how many elements each candidate
selector matches, and the start of the body text.

Usage:
    python scripts/probe_source.py https://shopriderite.net/product-category/basic/
    python scripts/probe_source.py URL --selector ".class-card" --selector "tr" --headed
"""

import argparse
import asyncio
import os
import sys

from dotenv import load_dotenv

load_dotenv()

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.class_scraper.browser import open_browser_session  # noqa: E402
from src.class_scraper.extractors.base import COUNT_MATCHES_JS  # noqa: E402

DEFAULT_SELECTORS = [
    ".product",
    ".woocommerce-loop-product",
    ".course",
    ".class",
    ".class-item",
    ".course-item",
    ".class-card",
    ".course-card",
    "tr",
]


def _log(msg: str) -> None:
    print(msg)


async def main() -> None:
    parser = argparse.ArgumentParser(description="Probe a source page")
    parser.add_argument("url", help="Page to load")
    parser.add_argument("--selector", action="append", help="Selector to count (repeatable)")
    parser.add_argument("--headed", action="store_true", help="Visible browser")
    args = parser.parse_args()

    selectors = args.selector or DEFAULT_SELECTORS
    _log(f"=== Probing {args.url} ===")

    async with open_browser_session(headless=not args.headed) as session:
        page = await session.open_page()
        try:
            await page.navigate(args.url, wait_until="networkidle", timeout_ms=30000)
            _log("Page loaded")
            _log(f"Title: {await page.evaluate('() => document.title')}")

            for selector in selectors:
                count = await page.evaluate(COUNT_MATCHES_JS, selector)
                _log(f"  {selector:<30} {count}")

            sample = await page.evaluate(
                "() => (document.body ? document.body.innerText : '').substring(0, 500)"
            )
            _log(f"Body sample:\n{sample}")
        finally:
            await page.close()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)
