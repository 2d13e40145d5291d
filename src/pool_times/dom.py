"""Markup fallbacks used when no JSON source carries the sessions.

Two strategies read rendered HTML (the page content, or the calendar web
component's serialized shadow root):

CalendarGridMarkup
    FullCalendar renders one column per day, td[data-date="YYYY-MM-DD"],
    holding the event elements. Each event's aria-label reads like
      "Center *Britannia Feb 23, 2024 10:00 AM - 11:00 AM Activity |Lane Swim| Pool"
    and its text content like "|Lane Swim|Pool".

LeafTextMarkup
    Layout-agnostic: finds the smallest elements whose text is a day header
    ("Fri Feb 23") or a time range ("10:00 am - 11:00 am") and pairs each time
    with the only header under their nearest shared ancestor. When that
    ancestor holds several headers the placement is ambiguous and the time is
    dropped rather than guessed.

Both emit raw records that go through the same normalizer and grouper as
JSON records.
"""

import re

from bs4 import BeautifulSoup, Tag

from src.pool_times.dates import MONTHS
from src.pool_times.models import RawSessionRecord, RawSource
from src.pool_times.text import normalize_text

_ARIA_TIME = re.compile(
    r"(\w{3}\s+\d+,\s+\d{4})\s+(\d{1,2}:\d{2}\s*[AP]M)\s*-\s*(\d{1,2}:\d{2}\s*[AP]M)",
    re.IGNORECASE,
)
_ARIA_ACTIVITY = re.compile(r"Activity\s+\|([^|]+)\|\s*(.*)$", re.IGNORECASE)

DAY_HEADER = re.compile(
    r"\b(?:mon|tue|wed|thu|fri|sat|sun)[a-z]*\.?,?\s+([a-z]{3,})\.?\s+(\d{1,2})\b",
    re.IGNORECASE,
)
TIME_RANGE = re.compile(
    r"\d{1,2}:\d{2}\s*[ap]\.?m\.?\s*[-–—]\s*\d{1,2}:\d{2}\s*[ap]\.?m\.?",
    re.IGNORECASE,
)

_SKIPPED_TAGS = frozenset({"script", "style", "noscript", "template", "head", "title"})
_MAX_HEADER_LEN = 40
_MAX_TIME_LEN = 80


def parse_markup(payload) -> Tag | None:
    """Return a parsed tree for an HTML string, or the tree itself."""
    if isinstance(payload, Tag):
        return payload
    if isinstance(payload, str) and payload.strip():
        return BeautifulSoup(payload, "html.parser")
    return None


def element_text(el: Tag) -> str:
    return normalize_text(el.get_text(" "))


# ---------------------------------------------------------------------------
# Calendar grid
# ---------------------------------------------------------------------------


def _event_elements(column: Tag) -> list[Tag]:
    # fc-event-start skips the continuation pieces of multi-day events
    events = column.select(".fc-event-start")
    if not events:
        events = column.select(".fc-timegrid-event, .fc-daygrid-event")
    return events


def parse_calendar_event(event: Tag) -> dict[str, str]:
    """Read name, location, start and end from one calendar event element."""
    aria_label = event.get("aria-label") or ""
    time_match = _ARIA_TIME.search(aria_label)
    activity_match = _ARIA_ACTIVITY.search(aria_label)

    parts = [p.strip() for p in element_text(event).split("|")]
    parts = [p for p in parts if p]

    if activity_match:
        name = activity_match.group(1)
        location = activity_match.group(2)
    else:
        name = parts[0] if parts else ""
        location = parts[1] if len(parts) > 1 else ""

    return {
        "name": normalize_text(name),
        "location": normalize_text(location),
        "startTime": time_match.group(2) if time_match else "",
        "endTime": time_match.group(3) if time_match else "",
    }


class CalendarGridMarkup:
    name = "calendar_grid"

    def accepts(self, source: RawSource) -> bool:
        return source.kind == "markup"

    def attempt(self, source: RawSource) -> list[RawSessionRecord] | None:
        root = parse_markup(source.payload)
        if root is None:
            return None

        records: list[RawSessionRecord] = []
        for column in root.select("td[data-date]"):
            day = column.get("data-date") or ""
            for event in _event_elements(column):
                records.append({"date": day, **parse_calendar_event(event)})
        return records or None


# ---------------------------------------------------------------------------
# Leaf text heuristics
# ---------------------------------------------------------------------------


def _is_day_header(text: str) -> bool:
    match = DAY_HEADER.search(text)
    return bool(match) and match.group(1)[:3].lower() in MONTHS


def _has_time_range(text: str) -> bool:
    return TIME_RANGE.search(text) is not None


def find_leaf_elements(root: Tag, matches, max_len: int) -> list[Tag]:
    """Deepest elements whose own text satisfies matches().

    An element is skipped if any descendant element also matches, so only
    the innermost carrier of a header or time range is returned.
    """
    found: list[Tag] = []
    for el in root.find_all(True):
        if el.name in _SKIPPED_TAGS:
            continue
        text = element_text(el)
        if len(text) > max_len or not matches(text):
            continue
        if any(
            child.name not in _SKIPPED_TAGS and matches(element_text(child))
            for child in el.find_all(True)
        ):
            continue
        found.append(el)
    return found


def sole_header_for(el: Tag, headers: list[tuple[Tag, set[int]]]) -> Tag | None:
    """The single header under el's nearest ancestor that contains any header.

    headers pairs each header element with the ids of its ancestors.
    Returns None when that ancestor contains more than one header, or when
    no ancestor contains one.
    """
    for ancestor in el.parents:
        contained = [
            header
            for header, ancestry in headers
            if header is ancestor or id(ancestor) in ancestry
        ]
        if len(contained) == 1:
            return contained[0]
        if contained:
            return None
    return None


def activity_name_near(el: Tag, time_text: str) -> str:
    """Parent text minus the time range, falling back to the grandparent."""
    parent = el.parent
    grandparent = parent.parent if parent is not None else None
    for candidate in (parent, grandparent):
        if candidate is None:
            continue
        name = normalize_text(element_text(candidate).replace(time_text, " "))
        if name:
            return name
    return ""


class LeafTextMarkup:
    name = "leaf_text"

    def accepts(self, source: RawSource) -> bool:
        return source.kind == "markup"

    def attempt(self, source: RawSource) -> list[RawSessionRecord] | None:
        root = parse_markup(source.payload)
        if root is None:
            return None

        header_elements = find_leaf_elements(root, _is_day_header, _MAX_HEADER_LEN)
        if not header_elements:
            return None
        headers = [(h, {id(p) for p in h.parents}) for h in header_elements]

        records: list[RawSessionRecord] = []
        for time_el in find_leaf_elements(root, _has_time_range, _MAX_TIME_LEN):
            header = sole_header_for(time_el, headers)
            if header is None:
                continue
            time_text = TIME_RANGE.search(element_text(time_el)).group(0)
            records.append(
                {
                    "date": DAY_HEADER.search(element_text(header)).group(0),
                    "name": activity_name_near(time_el, time_text),
                    "time": time_text,
                }
            )
        return records or None
