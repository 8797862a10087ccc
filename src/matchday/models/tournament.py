"""Tournament lifecycle."""

from __future__ import annotations

from enum import StrEnum


class TournamentStatus(StrEnum):
    DRAFT = "draft"
    OPEN_FOR_INSCRIPTION = "open_for_inscription"
    IN_PROGRESS = "in_progress"
    FINISHED = "finished"
    CANCELLED = "cancelled"


# Fixtures and results can no longer change once a tournament reaches these.
CLOSED_STATUSES: frozenset[str] = frozenset(
    {TournamentStatus.FINISHED, TournamentStatus.CANCELLED}
)
