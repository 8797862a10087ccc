"""Tests for availability windows, the availability index and the slot finder."""

from dataclasses import dataclass
from datetime import date, time

import pytest
from pydantic import ValidationError

from matchday.core.availability import AvailabilityIndex
from matchday.core.slots import find_slot, window_intersection
from matchday.models.availability import AvailabilityWindow, Weekday

from conftest import START, window


@dataclass
class _Row:
    team_id: str
    day_of_week: str
    start_time: time
    end_time: time
    available: bool = True


class TestWindow:
    def test_start_must_precede_end(self):
        with pytest.raises(ValidationError):
            window(Weekday.MONDAY, "20:00", "18:00")

    def test_empty_window_rejected(self):
        with pytest.raises(ValidationError):
            window(Weekday.MONDAY, "18:00", "18:00")

    def test_overlap_same_day(self):
        a = window(Weekday.MONDAY, "18:00", "20:00")
        assert a.overlaps(window(Weekday.MONDAY, "19:00", "21:00"))
        assert not a.overlaps(window(Weekday.MONDAY, "20:00", "21:00"))
        assert not a.overlaps(window(Weekday.TUESDAY, "18:00", "20:00"))

    def test_weekday_of_date(self):
        assert Weekday.of(START) is Weekday.MONDAY
        assert Weekday.of(date(2026, 3, 8)) is Weekday.SUNDAY


class TestAvailabilityIndex:
    def test_windows_sorted_by_day_then_time(self):
        rows = [
            _Row("a", "SUNDAY", time(10), time(12)),
            _Row("a", "MONDAY", time(19), time(21)),
            _Row("a", "MONDAY", time(8), time(9)),
        ]
        windows = AvailabilityIndex.from_rows(rows).availability_for("a")
        assert [(w.day_of_week, w.start_time) for w in windows] == [
            (Weekday.MONDAY, time(8)),
            (Weekday.MONDAY, time(19)),
            (Weekday.SUNDAY, time(10)),
        ]

    def test_unavailable_rows_excluded(self):
        rows = [
            _Row("a", "MONDAY", time(8), time(9), available=False),
            _Row("a", "TUESDAY", time(8), time(9)),
        ]
        windows = AvailabilityIndex.from_rows(rows).availability_for("a")
        assert [w.day_of_week for w in windows] == [Weekday.TUESDAY]

    def test_unknown_team_has_no_windows(self):
        index = AvailabilityIndex.from_rows([])
        assert index.availability_for("ghost") == ()


class TestWindowIntersection:
    def test_overlap(self):
        a = window(Weekday.MONDAY, "18:00", "20:00")
        b = window(Weekday.MONDAY, "19:00", "21:00")
        assert window_intersection(a, b) == (time(19), time(20))

    def test_touching_windows_do_not_intersect(self):
        a = window(Weekday.MONDAY, "18:00", "19:00")
        b = window(Weekday.MONDAY, "19:00", "21:00")
        assert window_intersection(a, b) is None

    def test_different_days(self):
        a = window(Weekday.MONDAY, "18:00", "20:00")
        b = window(Weekday.TUESDAY, "18:00", "20:00")
        assert window_intersection(a, b) is None


class TestFindSlot:
    def test_intersection_start_on_matching_day(self):
        home = [window(Weekday.MONDAY, "18:00", "20:00")]
        away = [window(Weekday.MONDAY, "19:00", "21:00")]
        slot = find_slot(home, away, START)
        assert slot is not None
        assert slot.day == START
        assert slot.start_time == time(19)

    def test_first_matching_day_is_chosen(self):
        home = [window(Weekday.SATURDAY, "09:00", "12:00")]
        away = [window(Weekday.SATURDAY, "10:00", "11:00")]
        slot = find_slot(home, away, START)
        assert slot is not None
        assert slot.day == date(2026, 3, 7)
        assert slot.starts_at.isoformat() == "2026-03-07T10:00:00"

    def test_disjoint_windows_give_no_slot(self):
        home = [window(day, "08:00", "10:00") for day in Weekday]
        away = [window(day, "10:00", "12:00") for day in Weekday]
        assert find_slot(home, away, START) is None

    def test_team_without_windows_gets_no_slot(self):
        away = [window(day, "00:00", "23:59") for day in Weekday]
        assert find_slot([], away, START) is None
        assert find_slot(away, [], START, horizon_days=365) is None

    def test_horizon_bounds_the_search(self):
        home = [window(Weekday.SUNDAY, "09:00", "12:00")]
        away = [window(Weekday.SUNDAY, "09:00", "12:00")]
        # START is a Monday; the first Sunday is day 7 of the search.
        assert find_slot(home, away, START, horizon_days=6) is None
        assert find_slot(home, away, START, horizon_days=7) is not None

    def test_blocked_dates_are_skipped(self):
        home = [window(Weekday.SATURDAY, "09:00", "12:00")]
        away = [window(Weekday.SATURDAY, "09:00", "12:00")]
        slot = find_slot(home, away, START, blocked_dates={date(2026, 3, 7)})
        assert slot is not None
        assert slot.day == date(2026, 3, 14)

    def test_first_window_pair_in_iteration_order_wins(self):
        home = [
            window(Weekday.MONDAY, "08:00", "10:00"),
            window(Weekday.MONDAY, "18:00", "20:00"),
        ]
        away = [
            window(Weekday.MONDAY, "19:00", "21:00"),
            window(Weekday.MONDAY, "09:00", "11:00"),
        ]
        slot = find_slot(home, away, START)
        assert slot is not None
        assert slot.start_time == time(9)
