"""Fixture models: modes, match statuses, pairings and slots.

A fixture is the full set of matches for one (tournament, category).
"""

from __future__ import annotations

from datetime import date, datetime, time
from enum import StrEnum

from pydantic import BaseModel, ConfigDict


class FixtureMode(StrEnum):
    """How a fixture is built. The str mixin lets rows compare against raw strings."""

    ROUND_ROBIN = "round_robin"
    KNOCKOUT = "knockout"


class MatchStatus(StrEnum):
    """Lifecycle of a single match.

    ``PENDING`` is a knockout match whose participants are not decided yet.
    """

    SCHEDULED = "scheduled"
    POSTPONED = "postponed"
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"
    CANCELLED = "cancelled"


# A fixture cannot be regenerated once any of its matches reached these states.
STARTED_STATUSES: frozenset[str] = frozenset({MatchStatus.IN_PROGRESS, MatchStatus.FINISHED})


class Pairing(BaseModel):
    """A (home, away) pairing produced by the round-robin generator."""

    model_config = ConfigDict(frozen=True)

    round_number: int
    matchup_index: int
    home_team_id: str
    away_team_id: str


class Slot(BaseModel):
    """A concrete (date, time) assignment for a match."""

    model_config = ConfigDict(frozen=True)

    day: date
    start_time: time

    @property
    def starts_at(self) -> datetime:
        return datetime.combine(self.day, self.start_time)


class FixtureSummary(BaseModel):
    """Outcome of one fixture generation run."""

    mode: FixtureMode
    matches_created: int = 0
    scheduled: int = 0
    postponed: int = 0
    pending: int = 0
