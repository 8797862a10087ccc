"""Slot finder: earliest mutually-available time for two teams.

Walks calendar days forward from a candidate date for a bounded horizon and
intersects both teams' windows for that weekday. The first non-empty
intersection wins: first day, then first (home, away) window pair in
iteration order. There is no search for a "best" slot.
"""

from __future__ import annotations

from collections.abc import Collection, Sequence
from datetime import date, time, timedelta

from matchday.models.availability import AvailabilityWindow, Weekday
from matchday.models.fixture import Slot

DEFAULT_HORIZON_DAYS = 14


def window_intersection(
    a: AvailabilityWindow,
    b: AvailabilityWindow,
) -> tuple[time, time] | None:
    """Return the overlapping (start, end) of two same-day windows, or None."""
    if a.day_of_week != b.day_of_week:
        return None
    start = max(a.start_time, b.start_time)
    end = min(a.end_time, b.end_time)
    if start < end:
        return start, end
    return None


def find_slot(
    home_windows: Sequence[AvailabilityWindow],
    away_windows: Sequence[AvailabilityWindow],
    candidate_start: date,
    horizon_days: int = DEFAULT_HORIZON_DAYS,
    blocked_dates: Collection[date] = (),
) -> Slot | None:
    """Find the first slot both teams can play within the horizon.

    Args:
        home_windows: Home team availability.
        away_windows: Away team availability.
        candidate_start: First calendar day to try.
        horizon_days: Number of days to search, starting at ``candidate_start``.
        blocked_dates: Days to skip (e.g. a team already plays that day).

    Returns:
        The slot, or None when no day in the horizon has an intersection.
        A team without windows never gets a slot; that is not an error.
    """
    if not home_windows or not away_windows:
        return None

    for offset in range(horizon_days):
        day = candidate_start + timedelta(days=offset)
        if day in blocked_dates:
            continue
        weekday = Weekday.of(day)
        home_today = [w for w in home_windows if w.day_of_week == weekday]
        if not home_today:
            continue
        away_today = [w for w in away_windows if w.day_of_week == weekday]
        for home_window in home_today:
            for away_window in away_today:
                overlap = window_intersection(home_window, away_window)
                if overlap is not None:
                    return Slot(day=day, start_time=overlap[0])
    return None
