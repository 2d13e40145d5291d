"""Map heterogeneous raw session records onto CanonicalSession.

Every source names its fields differently (activity_name, activityName,
title, ...). Each canonical field has an ordered alias list; the first alias
present with a non-blank scalar value wins. New source schemas are supported
by extending FIELD_ALIASES, not by adding branches.
"""

from typing import Any

from src.pool_times.dates import format_clock_time
from src.pool_times.models import CanonicalSession, RawSessionRecord
from src.pool_times.text import normalize_text

FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "name": ("activity_name", "activityName", "name", "title", "description"),
    "start": ("start_time", "startTime", "start_date", "startDate", "time"),
    "end": ("end_time", "endTime", "end_date", "endDate"),
    "location": (
        "location",
        "locationName",
        "location_name",
        "facility_name",
        "facilityName",
        "room",
    ),
    "status": ("status", "availability"),
    "date": ("date", "session_date", "start_date", "startDate", "activity_date", "day"),
}


def _is_scalar(value: Any) -> bool:
    return isinstance(value, (str, int, float)) and not isinstance(value, bool)


def first_alias_value(record: RawSessionRecord, field: str) -> Any:
    """Return the raw value of the first non-blank alias for a canonical field.

    Nested objects, lists and booleans are skipped. Returns None when no
    alias carries a usable value.
    """
    for key in FIELD_ALIASES[field]:
        value = record.get(key)
        if _is_scalar(value) and normalize_text(value):
            return value
    return None


def _text_field(record: RawSessionRecord, field: str) -> str | None:
    return normalize_text(first_alias_value(record, field)) or None


def _time_field(record: RawSessionRecord) -> str | None:
    start = first_alias_value(record, "start")
    if start is None:
        return None
    end = first_alias_value(record, "end")
    if end is None:
        return format_clock_time(start) or None
    return f"{format_clock_time(start)} - {format_clock_time(end)}"


def normalize_session(record: RawSessionRecord) -> CanonicalSession:
    """Build the canonical session for one raw record.

    Never raises on odd records: a record without any name alias yields
    name="" and absent optional fields.
    """
    return CanonicalSession(
        name=_text_field(record, "name") or "",
        time=_time_field(record),
        location=_text_field(record, "location"),
        status=_text_field(record, "status"),
    )


def normalize_sessions(records: list[RawSessionRecord]) -> list[CanonicalSession]:
    return [normalize_session(r) for r in records]
