"""Group normalized sessions into day buckets and compute the week range."""

import re
from collections.abc import Iterable

from src.pool_times.dates import ISO_DATE_PREFIX, resolve_date, weekday_name
from src.pool_times.models import DayBucket, RawSessionRecord, WeekRange
from src.pool_times.normalize import first_alias_value, normalize_session
from src.pool_times.text import normalize_text

UNKNOWN_DATE = "unknown"

_YEAR_LEADING = re.compile(r"^\d{4}")


def resolve_record_date(
    record: RawSessionRecord, reference_year: int, current_month: int
) -> tuple[str, bool]:
    """Return (date key, resolved) for a raw record.

    ISO-prefixed values are truncated to YYYY-MM-DD; partial dates go through
    resolve_date. Unresolvable values fall back to their normalized raw text,
    records without any date alias to UNKNOWN_DATE.
    """
    raw = first_alias_value(record, "date")
    if raw is None:
        return UNKNOWN_DATE, False

    text = normalize_text(raw)
    if ISO_DATE_PREFIX.match(text):
        return text[:10], True

    iso = resolve_date(text, reference_year, current_month)
    if iso is not None:
        return iso, True
    return text, False


def group_sessions_by_day(
    records: Iterable[RawSessionRecord],
    reference_year: int,
    current_month: int,
) -> list[DayBucket]:
    """Bucket raw records by date, normalizing each into a session.

    Records sharing a date key are merged in encounter order. Weekday names
    are filled only for resolved dates. Buckets come back sorted by date key
    as plain strings, so unresolved raw-text keys sort wherever their text
    falls.
    """
    buckets: dict[str, tuple[str, list]] = {}
    for record in records:
        key, resolved = resolve_record_date(record, reference_year, current_month)
        if key not in buckets:
            buckets[key] = (weekday_name(key) if resolved else "", [])
        buckets[key][1].append(normalize_session(record))

    days = [
        DayBucket(date=key, day_of_week=day_of_week, sessions=sessions)
        for key, (day_of_week, sessions) in buckets.items()
        if sessions
    ]
    days.sort(key=lambda d: d.date)
    return days


def compute_week_range(days: Iterable[DayBucket]) -> WeekRange:
    """First and last year-leading date among the buckets, else nulls."""
    dated = sorted(d.date for d in days if _YEAR_LEADING.match(d.date))
    if not dated:
        return WeekRange(start=None, end=None)
    return WeekRange(start=dated[0], end=dated[-1])
