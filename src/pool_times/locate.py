"""Locate the list of session records inside an unknown source.

The calendar's data contract is not published and changes without notice, so
records are found by shape rather than by path. Each strategy handles one
kind of RawSource and returns the candidate records, or None when nothing
qualifies. locate() tries every strategy against every source, in order, and
stops at the first hit.

Strategy priority (first success wins):
  1. StructuralSearch     json   - bounded recursive search for a list of
                                   objects with name-like and time-like keys
  2. ExplicitPathProbe    json   - well-known paths (data, activities, items)
  3. EmbeddedJsonRecovery text   - balanced JSON literals inside script text
  4. CalendarGridMarkup   markup - calendar widget day columns
  5. LeafTextMarkup       markup - day headers and time ranges in page text
"""

import json
import re
from collections.abc import Iterable
from typing import Any, Protocol

from src.pool_times.dom import CalendarGridMarkup, LeafTextMarkup
from src.pool_times.logging import get_logger
from src.pool_times.models import LocatedCandidate, RawSessionRecord, RawSource
from src.pool_times.normalize import FIELD_ALIASES

log = get_logger(__name__)

DEFAULT_MAX_DEPTH = 6

NAME_KEY_PATTERN = re.compile(r"name|title|desc|activ|event")
TIME_KEY_PATTERN = re.compile(r"time|date|start|end|when")

# Explicit probing only trusts exact keys the normalizer knows how to read
NAME_KEYS = frozenset(FIELD_ALIASES["name"])
TIME_KEYS = frozenset(
    FIELD_ALIASES["start"] + FIELD_ALIASES["end"] + FIELD_ALIASES["date"]
)
PROBE_PATHS: tuple[tuple[str, ...], ...] = (
    ("data",),
    ("activities",),
    ("items",),
    (),
)

_JSON_START = re.compile(r"[=:]\s*([\[{])")


class Strategy(Protocol):
    name: str

    def accepts(self, source: RawSource) -> bool: ...

    def attempt(self, source: RawSource) -> list[RawSessionRecord] | None: ...


def looks_like_session_list(value: Any) -> bool:
    """True for a list whose first object has a name-like and a time-like key."""
    if not isinstance(value, list) or not value or not isinstance(value[0], dict):
        return False
    keys = [str(k).lower() for k in value[0]]
    has_name = any(NAME_KEY_PATTERN.search(k) for k in keys)
    has_time = any(TIME_KEY_PATTERN.search(k) for k in keys)
    return has_name and has_time


def find_session_array(
    value: Any, depth: int = 0, max_depth: int = DEFAULT_MAX_DEPTH
) -> list | None:
    """Depth-first search for the first list that looks like sessions.

    A list is checked itself before its elements are searched; objects are
    searched value by value in key order. Returns None past max_depth.
    """
    if depth > max_depth:
        return None

    if isinstance(value, list):
        if looks_like_session_list(value):
            return value
        for item in value:
            found = find_session_array(item, depth + 1, max_depth)
            if found is not None:
                return found
        return None

    if isinstance(value, dict):
        for item in value.values():
            found = find_session_array(item, depth + 1, max_depth)
            if found is not None:
                return found
    return None


def _records(found: list | None) -> list[RawSessionRecord] | None:
    if not found:
        return None
    return [item for item in found if isinstance(item, dict)] or None


class StructuralSearch:
    name = "structural_search"

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self.max_depth = max_depth

    def accepts(self, source: RawSource) -> bool:
        return source.kind == "json"

    def attempt(self, source: RawSource) -> list[RawSessionRecord] | None:
        return _records(find_session_array(source.payload, 0, self.max_depth))


class ExplicitPathProbe:
    name = "explicit_path"

    def accepts(self, source: RawSource) -> bool:
        return source.kind == "json"

    def attempt(self, source: RawSource) -> list[RawSessionRecord] | None:
        for path in PROBE_PATHS:
            value = _follow(source.payload, path)
            if not isinstance(value, list) or not value:
                continue
            first = value[0]
            if not isinstance(first, dict):
                continue
            keys = set(first)
            if keys & NAME_KEYS and keys & TIME_KEYS:
                return _records(value)
        return None


def _follow(value: Any, path: tuple[str, ...]) -> Any:
    for key in path:
        if not isinstance(value, dict):
            return None
        value = value.get(key)
    return value


_QUOTES = "\"'`"


def bracket_spans(text: str) -> dict[int, int]:
    """Map each opening [ or { to the index just past its closing bracket.

    One pass with a stack over the whole text. Brackets inside quoted strings
    (double, single or backtick quotes, with backslash escapes) are ignored,
    so a "[" in a JS string literal cannot unbalance the rest of the script.
    Brackets that never close are absent from the result.
    """
    spans: dict[int, int] = {}
    stack: list[int] = []
    quote = None
    escaped = False
    for i, ch in enumerate(text):
        if quote is not None:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == quote:
                quote = None
        elif ch in _QUOTES:
            quote = ch
        elif ch in "[{":
            stack.append(i)
        elif ch in "]}" and stack:
            spans[stack.pop()] = i + 1
    return spans


def iter_embedded_json(text: str) -> Iterable[tuple[Any, int]]:
    """Yield (parsed value, span end) for JSON literals assigned in text.

    Candidates start at "=" or ":" followed by "[" or "{". Spans that do not
    parse are skipped and scanning resumes just past their opening bracket,
    so a valid literal nested inside a broken one is still found.
    """
    spans = bracket_spans(text)
    pos = 0
    while True:
        match = _JSON_START.search(text, pos)
        if match is None:
            return
        start = match.start(1)
        end = spans.get(start)
        if end is None:
            pos = start + 1
            continue
        try:
            parsed = json.loads(text[start:end])
        except (ValueError, RecursionError):
            pos = start + 1
            continue
        yield parsed, end
        pos = end


class EmbeddedJsonRecovery:
    name = "embedded_json"

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH) -> None:
        self.max_depth = max_depth

    def accepts(self, source: RawSource) -> bool:
        return source.kind == "text" and isinstance(source.payload, str)

    def attempt(self, source: RawSource) -> list[RawSessionRecord] | None:
        for parsed, _end in iter_embedded_json(source.payload):
            records = _records(find_session_array(parsed, 0, self.max_depth))
            if records:
                return records
        return None


def default_strategies(max_depth: int = DEFAULT_MAX_DEPTH) -> list[Strategy]:
    return [
        StructuralSearch(max_depth),
        ExplicitPathProbe(),
        EmbeddedJsonRecovery(max_depth),
        CalendarGridMarkup(),
        LeafTextMarkup(),
    ]


def locate(
    sources: Iterable[RawSource],
    strategies: list[Strategy] | None = None,
) -> LocatedCandidate | None:
    """Return the first candidate any strategy finds, or None.

    Sources are tried in the order given; for each source, every strategy
    that accepts it is tried in priority order. Nothing after the first hit
    is evaluated.
    """
    if strategies is None:
        strategies = default_strategies()

    for source in sources:
        for strategy in strategies:
            if not strategy.accepts(source):
                continue
            records = strategy.attempt(source)
            if records:
                log.info(
                    "candidate_located",
                    strategy=strategy.name,
                    source=source.provenance,
                    records=len(records),
                )
                return LocatedCandidate(
                    records=records,
                    provenance=source.provenance,
                    strategy=strategy.name,
                )
            log.debug("strategy_miss", strategy=strategy.name, source=source.provenance)

    log.info("candidate_not_found")
    return None
