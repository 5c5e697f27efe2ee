"""Print the public JSON feed (or a filtered class list) from Airtable.

Run with: python scripts/class_feed.py
Filter:   python scripts/class_feed.py --provider "MSI Capitol"
Search:   python scripts/class_feed.py --search "refresher"
To file:  python scripts/class_feed.py --output data/feed.json

Exit codes:
  0 = success (JSON on stdout or file written)
  1 = Airtable not configured, or unexpected error
"""

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.class_scraper.airtable import AirtableClient  # noqa: E402
from src.class_scraper.catalog import ClassCatalog  # noqa: E402
from src.class_scraper.config import get_config  # noqa: E402
from src.class_scraper.logging import get_logger, setup_logging  # noqa: E402

log = get_logger("class_feed")


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Class feed from Airtable as JSON.")
    query = parser.add_mutually_exclusive_group()
    query.add_argument("--provider", type=str, help="Only classes from this provider.")
    query.add_argument("--region", type=str, help="Only classes in this region.")
    query.add_argument("--search", type=str, help="Free-text search.")
    parser.add_argument("--limit", type=int, default=50, help="Max upcoming classes in the feed.")
    parser.add_argument("--output", type=str, default=None, help="Write JSON here instead of stdout.")
    return parser.parse_args()


async def main(args: argparse.Namespace) -> int:
    config = get_config()
    if not config.has_store_credentials:
        log.error("airtable_not_configured")
        return 1

    catalog = ClassCatalog(
        AirtableClient(
            config.airtable_api_key,
            config.airtable_base_id,
            config.airtable_table_id,
            api_url=config.airtable_api_url,
        )
    )
    if args.provider:
        result = await catalog.by_provider(args.provider)
    elif args.region:
        result = await catalog.by_region(args.region)
    elif args.search:
        result = await catalog.search(args.search)
    else:
        result = await catalog.json_feed(limit=args.limit)

    text = json.dumps(result, indent=2, ensure_ascii=False)
    if args.output:
        Path(args.output).parent.mkdir(parents=True, exist_ok=True)
        Path(args.output).write_text(text, encoding="utf-8")
        log.info("feed_written", path=args.output)
    else:
        print(text)
    return 0


if __name__ == "__main__":
    args = _parse_args()
    config = get_config()
    setup_logging(json_output=config.log_json, log_level=config.log_level)
    try:
        sys.exit(asyncio.run(main(args)))
    except Exception as e:
        log.exception("feed_failed", error=str(e))
        sys.exit(1)
