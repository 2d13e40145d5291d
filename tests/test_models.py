"""Tests for models.py – snapshot ordering and document serialization."""
from datetime import datetime, timezone

from src.pool_times.models import (
    CanonicalSession,
    CapturedResponse,
    DayBucket,
    PageSnapshot,
    ScheduleResult,
    WeekRange,
)


class TestPageSnapshotSources:
    def test_priority_order(self):
        snapshot = PageSnapshot(
            responses=[
                CapturedResponse(url="https://a", body={"x": 1}),
                CapturedResponse(url="https://b", body=[]),
            ],
            scripts=["var a = 1;"],
            markup=["<div></div>", "<html></html>"],
        )
        sources = snapshot.sources()
        assert [(s.kind, s.provenance) for s in sources] == [
            ("json", "https://a"),
            ("json", "https://b"),
            ("text", "script[0]"),
            ("markup", "markup[0]"),
            ("markup", "markup[1]"),
        ]

    def test_empty(self):
        assert PageSnapshot().sources() == []


class TestScheduleDocument:
    def test_optional_session_fields_omitted(self):
        result = ScheduleResult(
            last_updated=datetime(2024, 2, 23, 8, 0, tzinfo=timezone.utc),
            week_range=WeekRange(start="2024-02-23", end="2024-02-23"),
            days=[
                DayBucket(
                    date="2024-02-23",
                    day_of_week="Friday",
                    sessions=[
                        CanonicalSession(name="Lane Swim", location="Pool"),
                        CanonicalSession(name="Sauna", status="Closed"),
                    ],
                )
            ],
        )
        document = result.to_document()
        assert document["weekRange"] == {"start": "2024-02-23", "end": "2024-02-23"}
        assert document["days"][0]["sessions"] == [
            {"name": "Lane Swim", "location": "Pool"},
            {"name": "Sauna", "status": "Closed"},
        ]

    def test_default_week_range_is_null(self):
        result = ScheduleResult(last_updated=datetime(2024, 2, 23, tzinfo=timezone.utc))
        assert result.to_document()["weekRange"] == {"start": None, "end": None}
        assert result.is_empty
