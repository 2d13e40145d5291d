"""Snapshot the Britannia pool calendar and write the weekly schedule as JSON.

Standalone CLI script. Loads the calendar in headless Chromium, captures
every JSON response during load, validates the page, and writes:

  - the page summary (title + heading)      -> britannia-hours.json
  - the weekly pool schedule                -> pool-times.json

When no sessions can be extracted the rendered HTML is saved to
debug-page.html for inspection.

Run with:  python scripts/scrape_pool_times.py
Debug:     python scripts/scrape_pool_times.py --headed
Summary:   python scripts/scrape_pool_times.py --summary-only
Other URL: python scripts/scrape_pool_times.py --url https://britanniacentre.org/pool/ \
               --summary-output britanniacentre-pool-hours.json --summary-only

Exit codes:
  0 = success (files written, possibly with an empty schedule)
  1 = error (blocked page, missing heading, load failure; message on stderr)
"""

import argparse
import asyncio
import json
import os
import sys
from pathlib import Path

from dotenv import load_dotenv
from playwright.async_api import async_playwright

load_dotenv()

# Add project root to path for src imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from src.pool_times.config import get_config  # noqa: E402
from src.pool_times.logging import (  # noqa: E402
    bind_run_context,
    get_logger,
    setup_logging,
)
from src.pool_times.pages.calendar import CalendarPage  # noqa: E402
from src.pool_times.pipeline import extract_schedule, summarize_page  # noqa: E402
from src.pool_times.utils import configure_page_for_scraping  # noqa: E402

log = get_logger("scrape_pool_times")


def _parse_args() -> argparse.Namespace:
    """Parse CLI arguments using argparse."""
    config = get_config()
    parser = argparse.ArgumentParser(
        description="Extract the weekly pool schedule from the calendar page.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--url",
        type=str,
        default=config.calendar_url,
        help="Calendar page URL (default: CALENDAR_URL or the Britannia calendar).",
    )
    parser.add_argument(
        "--headed",
        action="store_true",
        help="Launch browser in headed mode (visible window).",
    )
    parser.add_argument(
        "--summary-only",
        action="store_true",
        help="Only validate the page and write the title/heading summary.",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=config.pool_times_path,
        help=f"Schedule output path (default: {config.pool_times_path}).",
    )
    parser.add_argument(
        "--summary-output",
        type=str,
        default=config.summary_path,
        help=f"Page summary output path (default: {config.summary_path}).",
    )
    return parser.parse_args()


def _write_json(path: str, document: dict) -> None:
    output_file = Path(path)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text(
        json.dumps(document, indent=2, ensure_ascii=False), encoding="utf-8"
    )
    log.info("output_written", path=str(output_file))


async def main(args: argparse.Namespace) -> None:
    config = get_config()
    log.info("scrape_started")

    async with async_playwright() as pw:
        browser = await pw.chromium.launch(headless=config.headless and not args.headed)
        try:
            page = await browser.new_page()
            await configure_page_for_scraping(
                page, timeout_ms=config.navigation_timeout_ms
            )

            calendar = CalendarPage(page, config=config)
            # Register BEFORE navigation so no responses are missed
            calendar.start_capture()
            await calendar.navigate(args.url)
            snapshot = await calendar.snapshot()

            summary = summarize_page(snapshot.signature, config=config)
            _write_json(args.summary_output, summary.to_document())

            if args.summary_only:
                return

            result = extract_schedule(snapshot, config=config)
            if result.is_empty:
                debug_path = Path(config.debug_html_path)
                debug_path.write_text(await page.content(), encoding="utf-8")
                log.warning("debug_html_saved", path=str(debug_path))

            _write_json(args.output, result.to_document())
        finally:
            await browser.close()

    log.info("scrape_finished")


if __name__ == "__main__":
    args = _parse_args()
    config = get_config()
    setup_logging(config=config)
    bind_run_context(args.url, summary_only=args.summary_only)
    try:
        asyncio.run(main(args))
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        sys.exit(1)
