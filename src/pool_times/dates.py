"""Date and time helpers for partial calendar dates.

Schedule pages show dates without a year ("Feb 23", "2/23") and times either
as ISO timestamps or as already human-readable text. The year is resolved
against a reference year supplied by the caller, with a rollover correction
when the page straddles New Year.

Nothing here reads the wall clock; callers pass the reference year and the
current month, usually taken from a Clock.
"""

import re
from collections.abc import Callable
from datetime import date, datetime, timezone

from src.pool_times.text import normalize_text

Clock = Callable[[], datetime]

MONTHS: dict[str, int] = {
    "jan": 1, "feb": 2, "mar": 3, "apr": 4,
    "may": 5, "jun": 6, "jul": 7, "aug": 8,
    "sep": 9, "oct": 10, "nov": 11, "dec": 12,
}

WEEKDAYS = (
    "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday",
)

ISO_DATE_PREFIX = re.compile(r"^\d{4}-\d{2}-\d{2}")
_MONTH_DAY = re.compile(r"(?<![a-z])([a-z]{3})[a-z.]*\s+(\d{1,2})(?!\d)", re.IGNORECASE)
_SLASH_DATE = re.compile(r"(?<!\d)(\d{1,2})/(\d{1,2})(?!\d)")
_ISO_CLOCK = re.compile(r"T(\d{2}):(\d{2})")


def utc_now() -> datetime:
    """Default Clock."""
    return datetime.now(timezone.utc)


def _rollover_year(year: int, month: int, current_month: int) -> int:
    # Early-year dates seen in Nov/Dec belong to next year; late-year dates
    # seen in Jan/Feb belong to last year. February is deliberately in the
    # forward window: "Feb 23" read in December is next February, and a
    # January-only check would date it ten months in the past.
    if month <= 2 and current_month >= 11:
        return year + 1
    if month >= 11 and current_month <= 2:
        return year - 1
    return year


def _month_day(raw: str) -> tuple[int, int] | None:
    for match in _MONTH_DAY.finditer(raw):
        month = MONTHS.get(match.group(1).lower())
        if month is not None:
            return month, int(match.group(2))

    match = _SLASH_DATE.search(raw)
    if match:
        return int(match.group(1)), int(match.group(2))
    return None


def resolve_date(raw: str | None, reference_year: int, current_month: int) -> str | None:
    """Resolve "Feb 23" / "February 23" / "2/23" to YYYY-MM-DD.

    Text already starting with an ISO date is returned as that date, with no
    rollover. Month and day are range checked (1-12, 1-31) but not validated
    against the calendar, so "2/31" resolves while "13/45" does not.

    Args:
        raw: Date text as shown on the page.
        reference_year: Year to assume before rollover, normally the current year.
        current_month: Month (1-12) at resolution time, drives the rollover.

    Returns:
        ISO date string, or None when the text is not a recognised shape.
    """
    text = normalize_text(raw)
    if not text:
        return None
    if ISO_DATE_PREFIX.match(text):
        return text[:10]

    parsed = _month_day(text)
    if parsed is None:
        return None
    month, day = parsed
    if not (1 <= month <= 12 and 1 <= day <= 31):
        return None

    year = _rollover_year(reference_year, month, current_month)
    return f"{year:04d}-{month:02d}-{day:02d}"


def format_clock_time(raw) -> str:
    """Render an ISO timestamp's time as "2:30pm"; pass other text through.

    "2024-02-23T14:30:00" -> "2:30pm", "2024-02-23T00:05:00" -> "12:05am",
    "10:00 AM" -> "10:00 AM".
    """
    if raw is None:
        return ""
    text = str(raw)
    match = _ISO_CLOCK.search(text)
    if not match:
        return normalize_text(text)

    hours = int(match.group(1))
    suffix = "pm" if hours >= 12 else "am"
    display_hours = hours % 12 or 12
    return f"{display_hours}:{match.group(2)}{suffix}"


def weekday_name(iso_date: str) -> str:
    """English weekday name for an ISO date, "" if it is not a real date."""
    try:
        return WEEKDAYS[date.fromisoformat(iso_date[:10]).weekday()]
    except ValueError:
        return ""
