"""Weekly availability windows.

A team declares the weekly windows in which it can play (day of week plus a
local start and end time, no timezone). Windows are trusted once stored.
"""

from __future__ import annotations

from datetime import date, time
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, model_validator


class Weekday(StrEnum):
    """Day of week, Monday first, matching ``date.weekday()`` order."""

    MONDAY = "MONDAY"
    TUESDAY = "TUESDAY"
    WEDNESDAY = "WEDNESDAY"
    THURSDAY = "THURSDAY"
    FRIDAY = "FRIDAY"
    SATURDAY = "SATURDAY"
    SUNDAY = "SUNDAY"

    @classmethod
    def of(cls, day: date) -> Weekday:
        """Return the weekday of a calendar date."""
        return _WEEKDAYS[day.weekday()]

    @property
    def index(self) -> int:
        return _WEEKDAYS.index(self)


_WEEKDAYS: tuple[Weekday, ...] = tuple(Weekday)


class AvailabilityWindow(BaseModel):
    """One weekly window in which a team can play."""

    model_config = ConfigDict(frozen=True)

    day_of_week: Weekday
    start_time: time
    end_time: time

    @model_validator(mode="after")
    def _start_before_end(self) -> AvailabilityWindow:
        if self.start_time >= self.end_time:
            msg = f"start_time {self.start_time} must be before end_time {self.end_time}"
            raise ValueError(msg)
        return self

    def overlaps(self, other: AvailabilityWindow) -> bool:
        """True when both windows share a day and some instant of time."""
        return (
            self.day_of_week == other.day_of_week
            and self.start_time < other.end_time
            and other.start_time < self.end_time
        )

    def sort_key(self) -> tuple[int, time, time]:
        return (self.day_of_week.index, self.start_time, self.end_time)
