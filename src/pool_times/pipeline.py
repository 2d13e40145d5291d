"""Turn one captured page snapshot into the weekly schedule document.

    snapshot -> check_page_signature -> locate -> group_sessions_by_day -> ScheduleResult

Invalid pages (no heading, block phrases) raise. A valid page on which no
strategy finds sessions is not an error: the result simply has no days and a
null week range, and the caller decides whether to keep diagnostics.
"""

from collections.abc import Iterable
from datetime import datetime

from src.pool_times.config import ScraperConfig, get_config
from src.pool_times.dates import Clock, utc_now
from src.pool_times.grouping import compute_week_range, group_sessions_by_day
from src.pool_times.guard import check_page_signature
from src.pool_times.locate import Strategy, default_strategies, locate
from src.pool_times.logging import get_logger
from src.pool_times.models import (
    DayBucket,
    PageSignature,
    PageSnapshot,
    PageSummary,
    ScheduleResult,
)
from src.pool_times.text import normalize_text

log = get_logger(__name__)


def build_schedule_result(days: Iterable[DayBucket], now: datetime) -> ScheduleResult:
    """Assemble the final document, pruning empty days and sorting by date."""
    kept = sorted((d for d in days if d.sessions), key=lambda d: d.date)
    return ScheduleResult(
        last_updated=now,
        week_range=compute_week_range(kept),
        days=kept,
    )


def summarize_page(
    signature: PageSignature,
    *,
    clock: Clock | None = None,
    config: ScraperConfig | None = None,
) -> PageSummary:
    """Validate the page and return its normalized title and heading.

    Raises:
        NoHeadingError, BlockedPageError: If the page is not trustworthy.
    """
    config = config or get_config()
    clock = clock or utc_now

    check_page_signature(signature, config.block_phrases)
    return PageSummary(
        last_updated=clock(),
        page_title=normalize_text(signature.page_title),
        primary_heading=normalize_text(signature.primary_heading),
    )


def extract_schedule(
    snapshot: PageSnapshot,
    *,
    clock: Clock | None = None,
    config: ScraperConfig | None = None,
    strategies: list[Strategy] | None = None,
) -> ScheduleResult:
    """Extract the weekly schedule from a snapshot.

    Args:
        snapshot: Captured responses, scripts and markup plus the page signature.
        clock: Supplies "now" for lastUpdated and the date rollover.
        config: Block phrases and search depth. Defaults to get_config().
        strategies: Override the locator strategies (tests, new sources).

    Returns:
        ScheduleResult, with no days when nothing could be extracted.

    Raises:
        NoHeadingError, BlockedPageError: If the page is not trustworthy.
    """
    config = config or get_config()
    clock = clock or utc_now

    check_page_signature(snapshot.signature, config.block_phrases)

    now = clock()
    sources = snapshot.sources()
    if strategies is None:
        strategies = default_strategies(config.max_search_depth)

    candidate = locate(sources, strategies)
    if candidate is None:
        log.warning("extraction_empty", sources=len(sources))
        return build_schedule_result([], now)

    days = group_sessions_by_day(candidate.records, now.year, now.month)
    result = build_schedule_result(days, now)
    log.info(
        "schedule_extracted",
        strategy=candidate.strategy,
        source=candidate.provenance,
        days=len(result.days),
        sessions=sum(len(d.sessions) for d in result.days),
        week_start=result.week_range.start,
        week_end=result.week_range.end,
    )
    return result
