"""Availability index: per-team lookup of weekly windows.

Built once per fixture run from the stored availability rows. Rows marked
unavailable are left out; nothing else is validated here.
"""

from __future__ import annotations

from collections import defaultdict
from collections.abc import Iterable
from typing import Protocol

from matchday.models.availability import AvailabilityWindow, Weekday


class AvailabilityRecord(Protocol):
    team_id: str
    day_of_week: str
    start_time: object
    end_time: object
    available: bool


class AvailabilityIndex:
    """Immutable mapping of team id to its ordered availability windows."""

    def __init__(self, windows: dict[str, Iterable[AvailabilityWindow]] | None = None) -> None:
        self._windows: dict[str, tuple[AvailabilityWindow, ...]] = {
            team_id: tuple(sorted(set(ws), key=AvailabilityWindow.sort_key))
            for team_id, ws in (windows or {}).items()
        }

    @classmethod
    def from_rows(cls, rows: Iterable[AvailabilityRecord]) -> AvailabilityIndex:
        grouped: dict[str, list[AvailabilityWindow]] = defaultdict(list)
        for row in rows:
            if not row.available:
                continue
            grouped[row.team_id].append(
                AvailabilityWindow(
                    day_of_week=Weekday(row.day_of_week),
                    start_time=row.start_time,
                    end_time=row.end_time,
                )
            )
        return cls(grouped)

    def availability_for(self, team_id: str) -> tuple[AvailabilityWindow, ...]:
        """Return a team's windows ordered by weekday, start and end. Unknown teams have none."""
        return self._windows.get(team_id, ())
