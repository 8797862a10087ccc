"""Registry: tournaments, categories, venues, teams and their availability."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from datetime import date
from itertools import combinations
from typing import TYPE_CHECKING

from matchday.core.errors import ConflictError, NotFoundError, RuleViolation
from matchday.models.availability import AvailabilityWindow
from matchday.models.tournament import CLOSED_STATUSES, TournamentStatus

if TYPE_CHECKING:
    from matchday.db.models import (
        CategoryRow,
        TeamAvailabilityRow,
        TeamRow,
        TournamentRow,
        VenueRow,
    )
    from matchday.db.repository import Repository

logger = logging.getLogger(__name__)


async def create_tournament(
    repo: Repository,
    name: str,
    start_date: date,
    end_date: date | None = None,
    status: str = TournamentStatus.DRAFT,
) -> TournamentRow:
    if end_date is not None and end_date < start_date:
        raise RuleViolation(
            f"end_date {end_date} is before start_date {start_date}", code="INVALID_DATES"
        )
    row = await repo.create_tournament(name, start_date, end_date, _parse_status(status))
    logger.info("tournament_created id=%s name=%s", row.id, name)
    return row


async def get_tournament(repo: Repository, tournament_id: str) -> TournamentRow:
    row = await repo.get_tournament(tournament_id)
    if row is None:
        raise NotFoundError.for_entity("Tournament", tournament_id)
    return row


def _parse_status(status: str) -> TournamentStatus:
    try:
        return TournamentStatus(status)
    except ValueError as exc:
        valid = ", ".join(s.value for s in TournamentStatus)
        raise RuleViolation(
            f"Invalid tournament status {status!r}; expected one of: {valid}",
            code="INVALID_STATUS",
        ) from exc


async def set_tournament_status(
    repo: Repository, tournament_id: str, status: str
) -> TournamentRow:
    """Move a tournament through its lifecycle. Finished and cancelled are terminal."""
    row = await get_tournament(repo, tournament_id)
    new_status = _parse_status(status)
    if row.status in CLOSED_STATUSES and new_status != row.status:
        raise RuleViolation(
            f"Tournament is {row.status} and cannot change status", code="TOURNAMENT_CLOSED"
        )
    await repo.update_tournament_status(tournament_id, new_status)
    logger.info("tournament_status id=%s status=%s", tournament_id, new_status)
    return row


async def create_category(repo: Repository, name: str) -> CategoryRow:
    if await repo.get_category_by_name(name) is not None:
        raise ConflictError(f"Category already exists: {name}", code="CATEGORY_EXISTS")
    return await repo.create_category(name)


async def create_venue(repo: Repository, name: str, address: str = "") -> VenueRow:
    return await repo.create_venue(name, address)


async def register_team(
    repo: Repository,
    tournament_id: str,
    category_id: str,
    name: str,
    club_name: str | None = None,
    inscription_id: str | None = None,
) -> TeamRow:
    """Register a team into a (tournament, category)."""
    tournament = await get_tournament(repo, tournament_id)
    if await repo.get_category(category_id) is None:
        raise NotFoundError.for_entity("Category", category_id)
    if tournament.status in CLOSED_STATUSES:
        raise RuleViolation(
            f"Tournament is {tournament.status}; registration is closed",
            code="TOURNAMENT_CLOSED",
        )
    existing = await repo.get_teams(tournament_id, category_id, active_only=False)
    if any(t.name == name for t in existing):
        raise ConflictError(f"Team already registered: {name}", code="TEAM_EXISTS")

    row = await repo.create_team(tournament_id, category_id, name, club_name, inscription_id)
    logger.info(
        "team_registered id=%s tournament=%s category=%s name=%s",
        row.id,
        tournament_id,
        category_id,
        name,
    )
    return row


async def get_team(repo: Repository, team_id: str) -> TeamRow:
    row = await repo.get_team(team_id)
    if row is None:
        raise NotFoundError.for_entity("Team", team_id)
    return row


async def deactivate_team(repo: Repository, team_id: str) -> TeamRow:
    """Exclude a team from future fixtures. Its played matches stay."""
    row = await get_team(repo, team_id)
    await repo.set_team_active(team_id, False)
    logger.info("team_deactivated id=%s", team_id)
    return row


def check_windows(windows: Iterable[AvailabilityWindow]) -> list[AvailabilityWindow]:
    """Return the windows sorted, or raise if two of them overlap on the same day."""
    ordered = sorted(windows, key=AvailabilityWindow.sort_key)
    for a, b in combinations(ordered, 2):
        if a.overlaps(b):
            raise RuleViolation(
                f"Overlapping windows on {a.day_of_week}: "
                f"{a.start_time}-{a.end_time} and {b.start_time}-{b.end_time}",
                code="OVERLAPPING_WINDOWS",
            )
    return ordered


async def get_availability(repo: Repository, team_id: str) -> list[TeamAvailabilityRow]:
    await get_team(repo, team_id)
    return await repo.get_availability(team_id)


async def replace_availability(
    repo: Repository,
    team_id: str,
    windows: Iterable[AvailabilityWindow],
) -> list[TeamAvailabilityRow]:
    """Replace all weekly windows of a team."""
    await get_team(repo, team_id)
    ordered = check_windows(windows)
    rows = await repo.replace_availability(team_id, ordered)
    logger.info("availability_replaced team=%s windows=%d", team_id, len(rows))
    return rows
