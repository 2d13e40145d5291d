"""Pydantic models for snapshots, sessions and the schedule document.

All data structures use Pydantic v2 for validation, serialization, and type safety.
Output models serialize with camelCase aliases to match the published JSON
document (lastUpdated, weekRange, dayOfWeek).
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

RawSessionRecord = dict[str, Any]


class _Document(BaseModel):
    """Immutable value object serialized with camelCase keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class CanonicalSession(_Document):
    """One activity session after field aliasing.

    Optional fields are None when the source did not carry them (or carried
    only blank text); they are omitted from the serialized document.
    """

    name: str
    time: str | None = None  # "10:00am - 11:00am"
    location: str | None = None
    status: str | None = None


class DayBucket(_Document):
    """Sessions sharing one date key, in source encounter order."""

    date: str  # YYYY-MM-DD, or the raw date text when it did not resolve
    day_of_week: str = ""
    sessions: list[CanonicalSession] = Field(default_factory=list)

    @field_serializer("sessions")
    def _serialize_sessions(
        self, sessions: list[CanonicalSession]
    ) -> list[dict[str, str]]:
        return [s.model_dump(exclude_none=True) for s in sessions]


class WeekRange(_Document):
    start: str | None = None
    end: str | None = None


class ScheduleResult(_Document):
    """The weekly schedule document written to pool-times.json."""

    last_updated: datetime
    week_range: WeekRange = Field(default_factory=WeekRange)
    days: list[DayBucket] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.days

    def to_document(self) -> dict[str, Any]:
        """Return the JSON-ready document with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)


class PageSignature(_Document):
    """Minimal evidence that a snapshot is a genuine, unblocked page."""

    page_title: str = ""
    primary_heading: str = ""


class PageSummary(_Document):
    """Normalized page signature stamped with the capture time."""

    last_updated: datetime
    page_title: str
    primary_heading: str

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class CapturedResponse(BaseModel):
    """A JSON response body captured while the page loaded."""

    url: str
    body: Any = None


class RawSource(BaseModel):
    """One place session data might live, tagged with where it came from.

    kind decides which locator strategies apply:
      json   -> payload is a parsed JSON value
      text   -> payload is a script/text blob that may embed JSON
      markup -> payload is an HTML string or a parsed BeautifulSoup tree
    """

    kind: Literal["json", "text", "markup"]
    provenance: str
    payload: Any = None


class PageSnapshot(BaseModel):
    """Everything captured from one page load, in source priority order."""

    signature: PageSignature = Field(default_factory=PageSignature)
    responses: list[CapturedResponse] = Field(default_factory=list)
    scripts: list[str] = Field(default_factory=list)
    markup: list[str] = Field(default_factory=list)

    def sources(self) -> list[RawSource]:
        """Return the snapshot's raw sources, most trusted first.

        Captured API responses come before inline scripts, which come before
        rendered markup. Within each kind, capture order is preserved.
        """
        sources = [
            RawSource(kind="json", provenance=r.url, payload=r.body)
            for r in self.responses
        ]
        sources.extend(
            RawSource(kind="text", provenance=f"script[{i}]", payload=text)
            for i, text in enumerate(self.scripts)
        )
        sources.extend(
            RawSource(kind="markup", provenance=f"markup[{i}]", payload=html)
            for i, html in enumerate(self.markup)
        )
        return sources


class LocatedCandidate(BaseModel):
    """The session records one strategy found, and where it found them."""

    records: list[RawSessionRecord]
    provenance: str
    strategy: str
