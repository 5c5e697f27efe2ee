"""Scrape motorcycle class listings and sync them to Airtable.

Runs every configured source through one headless Chromium session,
normalizes the listings and syncs them to Airtable. Without Airtable
credentials (AIRTABLE_API_KEY, AIRTABLE_BASE_ID, AIRTABLE_TABLE_ID) the
classes are only written to data/motorcycle-classes-YYYY-MM-DD.json.

Run with:  python scripts/scrape_classes.py
Debug:     python scripts/scrape_classes.py --headed --log-level DEBUG
Keep old:  python scripts/scrape_classes.py --keep-existing
Sources:   python scripts/scrape_classes.py --sources-file data/sources.json

Exit codes:
  0 = run completed (even with zero classes or a local-only save)
  1 = run aborted (browser could not start, bad source table, ...)
"""

import argparse
import asyncio
import os
import sys

from dotenv import load_dotenv

load_dotenv()

# Add project root to path for src imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.class_scraper.config import get_config  # noqa: E402
from src.class_scraper.logging import get_logger, setup_logging  # noqa: E402
from src.class_scraper.orchestrator import build_orchestrator  # noqa: E402

log = get_logger("scrape_classes")


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Scrape motorcycle classes and sync them to Airtable.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Launch browser in headed mode (visible window).",
    )
    parser.add_argument(
        "--keep-existing",
        action="store_true",
        help="Don't delete existing Airtable records before inserting.",
    )
    parser.add_argument(
        "--sources-file",
        type=str,
        default=None,
        help="JSON source table to use instead of the built-in sources.",
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Directory for the dated JSON snapshot (default: data).",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Override LOG_LEVEL (DEBUG, INFO, WARNING, ...).",
    )
    return parser.parse_args()


async def main(args: argparse.Namespace) -> None:
    config = get_config()
    overrides: dict = {}
    if args.headed:
        overrides["headless"] = False
    if args.keep_existing:
        overrides["replace_existing"] = False
    if args.sources_file:
        overrides["sources_file"] = args.sources_file
    if args.output_dir:
        overrides["output_dir"] = args.output_dir
    if overrides:
        config = config.model_copy(update=overrides)

    orchestrator = build_orchestrator(config)
    result = await orchestrator.run()

    outcome = result.outcome
    log.info(
        "run_complete",
        classes=len(result.records),
        per_source=result.per_source,
        sync_mode=outcome.mode if outcome else "skipped",
        partial=outcome.partial if outcome else False,
    )


if __name__ == "__main__":
    args = _parse_args()
    config = get_config()
    setup_logging(json_output=config.log_json, log_level=args.log_level or config.log_level)
    try:
        asyncio.run(main(args))
    except Exception as e:
        log.exception("run_failed", error=str(e), type=type(e).__name__)
        sys.exit(1)
