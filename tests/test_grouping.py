"""Tests for grouping.py – day buckets and week range."""
from src.pool_times.grouping import (
    UNKNOWN_DATE,
    compute_week_range,
    group_sessions_by_day,
    resolve_record_date,
)
from src.pool_times.models import CanonicalSession, DayBucket


def _day(date):
    return DayBucket(date=date, sessions=[CanonicalSession(name="x")])


class TestGroupSessionsByDay:
    def test_sorted_ascending(self):
        records = [
            {"name": "A", "date": "2024-03-01"},
            {"name": "B", "date": "2024-02-28"},
            {"name": "C", "date": "2024-03-15"},
        ]
        days = group_sessions_by_day(records, 2024, 7)
        assert [d.date for d in days] == ["2024-02-28", "2024-03-01", "2024-03-15"]

    def test_same_date_merges_in_encounter_order(self):
        records = [
            {"name": "Lane Swim", "date": "2024-02-23T06:00:00"},
            {"name": "Aquafit", "date": "2024-02-24"},
            {"name": "Public Swim", "session_date": "Feb 23"},
        ]
        days = group_sessions_by_day(records, 2024, 7)
        assert len(days) == 2
        assert days[0].date == "2024-02-23"
        assert days[0].day_of_week == "Friday"
        assert [s.name for s in days[0].sessions] == ["Lane Swim", "Public Swim"]

    def test_unresolvable_raw_text_kept_and_merged(self):
        records = [
            {"name": "A", "day": "Every weekday"},
            {"name": "B", "day": "Every weekday"},
        ]
        days = group_sessions_by_day(records, 2024, 7)
        assert len(days) == 1
        assert days[0].date == "Every weekday"
        assert days[0].day_of_week == ""
        assert len(days[0].sessions) == 2

    def test_missing_date_goes_to_unknown(self):
        days = group_sessions_by_day([{"name": "A"}], 2024, 7)
        assert days[0].date == UNKNOWN_DATE
        assert days[0].day_of_week == ""

    def test_rollover_applied(self):
        days = group_sessions_by_day([{"name": "A", "date": "Jan 3"}], 2024, 12)
        assert days[0].date == "2025-01-03"
        assert days[0].day_of_week == "Friday"

    def test_empty_input(self):
        assert group_sessions_by_day([], 2024, 7) == []


class TestResolveRecordDate:
    def test_alias_priority(self):
        record = {"day": "Mon", "startDate": "2024-02-26", "date": ""}
        assert resolve_record_date(record, 2024, 7) == ("2024-02-26", True)


class TestComputeWeekRange:
    def test_excludes_non_year_dates(self):
        days = [_day("unknown"), _day("2024-02-28"), _day("2024-03-01")]
        week = compute_week_range(days)
        assert week.start == "2024-02-28"
        assert week.end == "2024-03-01"

    def test_all_unresolved(self):
        week = compute_week_range([_day("unknown")])
        assert week.start is None
        assert week.end is None

    def test_single_day(self):
        week = compute_week_range([_day("2024-02-23")])
        assert (week.start, week.end) == ("2024-02-23", "2024-02-23")
