"""Fixture orchestration: turn pairings into persisted, slotted matches.

``generate_fixture`` validates the scope, picks the eligible teams, runs the
round-robin generator (or plans a knockout bracket), asks the slot finder
for a date and time per match and stores every match in one batch.

Partial scheduling is expected: a pairing without a common window becomes a
POSTPONED match with no start time, the run itself still succeeds. Only a
failed precondition (unknown scope, closed tournament, fewer than two teams,
fixture already under way) aborts before anything is written.
"""

from __future__ import annotations

import logging
import uuid
from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING

from matchday.core.availability import AvailabilityIndex
from matchday.core.errors import NotFoundError, RuleViolation
from matchday.core.knockout import plan_bracket
from matchday.core.scheduler import generate_pairings
from matchday.core.slots import DEFAULT_HORIZON_DAYS, find_slot
from matchday.core.standings import recalculate_standings
from matchday.db.models import MatchRow
from matchday.models.fixture import (
    STARTED_STATUSES,
    FixtureMode,
    FixtureSummary,
    MatchStatus,
)
from matchday.models.standing import DEFAULT_SCORING, ScoringRule
from matchday.models.tournament import CLOSED_STATUSES

if TYPE_CHECKING:
    from matchday.config import Settings
    from matchday.db.models import TournamentRow
    from matchday.db.repository import Repository

logger = logging.getLogger(__name__)

DEFAULT_ROUND_INTERVAL_DAYS = 1


def parse_mode(mode: str | FixtureMode) -> FixtureMode:
    """Parse a fixture mode, rejecting anything outside the closed set."""
    try:
        return FixtureMode(str(mode).strip().lower())
    except ValueError as exc:
        valid = ", ".join(m.value for m in FixtureMode)
        raise RuleViolation(
            f"Invalid fixture mode {mode!r}; expected one of: {valid}",
            code="INVALID_FIXTURE_MODE",
        ) from exc


async def require_scope(
    repo: Repository, tournament_id: str, category_id: str
) -> TournamentRow:
    """Return the tournament after checking both scope ids exist."""
    tournament = await repo.get_tournament(tournament_id)
    if tournament is None:
        raise NotFoundError.for_entity("Tournament", tournament_id)
    if await repo.get_category(category_id) is None:
        raise NotFoundError.for_entity("Category", category_id)
    return tournament


def require_open(tournament: TournamentRow) -> None:
    """Raise once a tournament is finished or cancelled."""
    if tournament.status in CLOSED_STATUSES:
        raise RuleViolation(
            f"Tournament is {tournament.status}; fixtures and results can no longer change",
            code="TOURNAMENT_CLOSED",
        )


class _SlotPlanner:
    """Assigns slots within one run, never giving a team two matches on one day."""

    def __init__(self, index: AvailabilityIndex, horizon_days: int) -> None:
        self.index = index
        self.horizon_days = horizon_days
        self.booked: dict[str, set[date]] = defaultdict(set)

    def book(self, team_id: str, day: date) -> None:
        self.booked[team_id].add(day)

    def assign(self, match: MatchRow, candidate_start: date) -> bool:
        """Slot a match with two known teams. Returns True when a slot was found."""
        home, away = match.home_team_id, match.away_team_id
        if home is None or away is None:
            raise RuleViolation(
                "Match participants are not decided yet", code="MATCH_PARTICIPANTS_PENDING"
            )
        slot = find_slot(
            self.index.availability_for(home),
            self.index.availability_for(away),
            candidate_start,
            horizon_days=self.horizon_days,
            blocked_dates=self.booked[home] | self.booked[away],
        )
        if slot is None:
            match.starts_at = None
            match.status = MatchStatus.POSTPONED
            return False
        match.starts_at = slot.starts_at
        match.status = MatchStatus.SCHEDULED
        self.book(home, slot.day)
        self.book(away, slot.day)
        return True


def _round_start(start_date: date, round_number: int, interval_days: int) -> date:
    return start_date + timedelta(days=(round_number - 1) * interval_days)


def _round_robin_matches(
    tournament_id: str,
    category_id: str,
    team_ids: list[str],
    planner: _SlotPlanner,
    start_date: date,
    interval_days: int,
    summary: FixtureSummary,
) -> list[MatchRow]:
    matches: list[MatchRow] = []
    for pairings in generate_pairings(team_ids):
        for p in pairings:
            match = MatchRow(
                tournament_id=tournament_id,
                category_id=category_id,
                home_team_id=p.home_team_id,
                away_team_id=p.away_team_id,
                phase=FixtureMode.ROUND_ROBIN,
                round_number=p.round_number,
                matchup_index=p.matchup_index,
            )
            candidate = _round_start(start_date, p.round_number, interval_days)
            if planner.assign(match, candidate):
                summary.scheduled += 1
            else:
                summary.postponed += 1
            matches.append(match)
    return matches


def _knockout_matches(
    tournament_id: str,
    category_id: str,
    team_ids: list[str],
    planner: _SlotPlanner,
    start_date: date,
    interval_days: int,
    summary: FixtureSummary,
) -> list[MatchRow]:
    plan = plan_bracket(team_ids)
    for team_id, seed in plan.byes.items():
        logger.info("knockout_bye team=%s seed=%d", team_id, seed)
    ids = {key: str(uuid.uuid4()) for key in plan.matches}
    matches: list[MatchRow] = []
    for planned in plan.ordered():
        next_id = None
        if planned.next_position is not None:
            next_id = ids[(planned.round_number + 1, planned.next_position)]
        match = MatchRow(
            id=ids[(planned.round_number, planned.position)],
            tournament_id=tournament_id,
            category_id=category_id,
            home_team_id=planned.home_team_id,
            away_team_id=planned.away_team_id,
            phase=FixtureMode.KNOCKOUT,
            round_number=planned.round_number,
            matchup_index=planned.position,
            next_match_id=next_id,
            next_match_slot=planned.next_slot,
            status=MatchStatus.PENDING,
        )
        if planned.is_ready:
            candidate = _round_start(start_date, planned.round_number, interval_days)
            if planner.assign(match, candidate):
                summary.scheduled += 1
            else:
                summary.postponed += 1
        else:
            summary.pending += 1
        matches.append(match)
    # Later rounds first: earlier matches reference them through next_match_id.
    matches.sort(key=lambda m: -m.round_number)
    return matches


async def generate_fixture(
    repo: Repository,
    tournament_id: str,
    category_id: str,
    mode: str | FixtureMode = FixtureMode.ROUND_ROBIN,
    start_date: date | None = None,
    settings: Settings | None = None,
) -> FixtureSummary:
    """Generate (or regenerate) the fixture of a (tournament, category).

    Args:
        repo: Repository bound to the current session.
        tournament_id: Tournament scope.
        category_id: Category scope.
        mode: ``"round_robin"`` or ``"knockout"``.
        start_date: First candidate day. Defaults to the tournament start.
        settings: Supplies the slot horizon and round interval.

    Returns:
        Counts of matches created, scheduled, postponed and pending.

    Raises:
        NotFoundError: unknown tournament or category.
        RuleViolation: invalid mode, closed tournament, fixture already
            started, or fewer than two eligible teams.
    """
    fixture_mode = parse_mode(mode)
    tournament = await require_scope(repo, tournament_id, category_id)
    require_open(tournament)

    existing = await repo.get_matches(tournament_id, category_id)
    if any(m.status in STARTED_STATUSES for m in existing):
        raise RuleViolation(
            "Cannot regenerate the fixture: matches are in progress or finished",
            code="FIXTURE_ALREADY_STARTED",
        )

    teams = await repo.get_teams(tournament_id, category_id, active_only=True)
    if len(teams) < 2:
        raise RuleViolation(
            f"At least 2 active teams are required, found {len(teams)}",
            code="INSUFFICIENT_TEAMS",
        )

    if existing:
        await delete_fixture(repo, tournament_id, category_id)

    horizon = settings.matchday_slot_horizon_days if settings else DEFAULT_HORIZON_DAYS
    interval = (
        settings.matchday_round_interval_days if settings else DEFAULT_ROUND_INTERVAL_DAYS
    )
    team_ids = [t.id for t in teams]
    index = AvailabilityIndex.from_rows(await repo.get_availability_for_teams(team_ids))
    planner = _SlotPlanner(index, horizon)
    start = start_date or tournament.start_date

    summary = FixtureSummary(mode=fixture_mode)
    build = (
        _round_robin_matches if fixture_mode is FixtureMode.ROUND_ROBIN else _knockout_matches
    )
    matches = build(tournament_id, category_id, team_ids, planner, start, interval, summary)
    await repo.add_matches(matches)
    summary.matches_created = len(matches)

    logger.info(
        "fixture_generated tournament=%s category=%s mode=%s teams=%d created=%d "
        "scheduled=%d postponed=%d pending=%d",
        tournament_id,
        category_id,
        fixture_mode,
        len(teams),
        summary.matches_created,
        summary.scheduled,
        summary.postponed,
        summary.pending,
    )
    return summary


async def generate_round_robin(
    repo: Repository,
    tournament_id: str,
    category_id: str,
    start_date: date | None = None,
    settings: Settings | None = None,
) -> int:
    """Generate a round-robin fixture and return the number of matches created."""
    summary = await generate_fixture(
        repo, tournament_id, category_id, FixtureMode.ROUND_ROBIN, start_date, settings
    )
    return summary.matches_created


async def delete_fixture(
    repo: Repository,
    tournament_id: str,
    category_id: str,
    rule: ScoringRule = DEFAULT_SCORING,
) -> int:
    """Remove every match of a scope, their results, and rebuild (empty) standings."""
    await require_scope(repo, tournament_id, category_id)
    deleted = await repo.delete_matches(tournament_id, category_id)
    await recalculate_standings(repo, tournament_id, category_id, results=[], rule=rule)
    logger.info(
        "fixture_deleted tournament=%s category=%s matches=%d",
        tournament_id,
        category_id,
        deleted,
    )
    return deleted


async def list_fixture(repo: Repository, tournament_id: str, category_id: str) -> list[MatchRow]:
    await require_scope(repo, tournament_id, category_id)
    return await repo.get_matches(tournament_id, category_id)


async def schedule_match(
    repo: Repository,
    match_id: str,
    starts_at: datetime,
    venue_id: str | None = None,
) -> MatchRow:
    """Manually slot a match, typically one the generator had to postpone."""
    match = await repo.get_match(match_id)
    if match is None:
        raise NotFoundError.for_entity("Match", match_id)
    if match.status in (MatchStatus.FINISHED, MatchStatus.CANCELLED):
        raise RuleViolation(f"Match is {match.status}", code="MATCH_CLOSED")
    if match.home_team_id is None or match.away_team_id is None:
        raise RuleViolation(
            "Match participants are not decided yet", code="MATCH_PARTICIPANTS_PENDING"
        )
    if venue_id is not None and await repo.get_venue(venue_id) is None:
        raise NotFoundError.for_entity("Venue", venue_id)

    match.starts_at = starts_at
    match.venue_id = venue_id if venue_id is not None else match.venue_id
    match.status = MatchStatus.SCHEDULED
    await repo.session.flush()
    logger.info("match_scheduled match=%s starts_at=%s", match_id, starts_at.isoformat())
    return match


async def _open_match(repo: Repository, match_id: str) -> MatchRow:
    match = await repo.get_match(match_id)
    if match is None:
        raise NotFoundError.for_entity("Match", match_id)
    require_open(await require_scope(repo, match.tournament_id, match.category_id))
    return match


async def start_match(repo: Repository, match_id: str) -> MatchRow:
    """Kick off a scheduled match. From here on its fixture cannot be regenerated."""
    match = await _open_match(repo, match_id)
    if match.status != MatchStatus.SCHEDULED:
        raise RuleViolation(
            f"Only scheduled matches can start; match is {match.status}",
            code="MATCH_NOT_SCHEDULED",
        )
    match.status = MatchStatus.IN_PROGRESS
    await repo.session.flush()
    logger.info("match_started match=%s", match_id)
    return match


async def cancel_match(repo: Repository, match_id: str) -> MatchRow:
    """Call a match off. Finished matches keep their result and cannot be cancelled."""
    match = await _open_match(repo, match_id)
    if match.status == MatchStatus.FINISHED:
        raise RuleViolation("Match is finished and cannot be cancelled", code="MATCH_CLOSED")
    if match.status != MatchStatus.CANCELLED:
        match.status = MatchStatus.CANCELLED
        await repo.session.flush()
        logger.info("match_cancelled match=%s", match_id)
    return match


async def slot_ready_match(
    repo: Repository,
    match: MatchRow,
    settings: Settings | None = None,
) -> bool:
    """Slot a knockout match whose two participants just became known.

    The search starts the day after the latest match feeding into it (or at
    the round's nominal start when nothing fed it a date), skipping days on
    which either team already plays.
    """
    tournament = await repo.get_tournament(match.tournament_id)
    if tournament is None:
        raise NotFoundError.for_entity("Tournament", match.tournament_id)
    horizon = settings.matchday_slot_horizon_days if settings else DEFAULT_HORIZON_DAYS
    interval = (
        settings.matchday_round_interval_days if settings else DEFAULT_ROUND_INTERVAL_DAYS
    )
    candidate = _round_start(tournament.start_date, match.round_number, interval)
    feeders = await repo.get_matches_feeding(match.id)
    played_days = [m.starts_at.date() for m in feeders if m.starts_at is not None]
    if played_days:
        candidate = max(candidate, max(played_days) + timedelta(days=1))

    team_ids = [t for t in match.team_ids if t is not None]
    index = AvailabilityIndex.from_rows(await repo.get_availability_for_teams(team_ids))
    planner = _SlotPlanner(index, horizon)
    for other in await repo.get_matches(match.tournament_id, match.category_id):
        if other.id == match.id or other.starts_at is None:
            continue
        for team_id in other.team_ids:
            if team_id in team_ids:
                planner.book(team_id, other.starts_at.date())

    found = planner.assign(match, candidate)
    await repo.session.flush()
    logger.info(
        "knockout_match_ready match=%s round=%d slotted=%s",
        match.id,
        match.round_number,
        found,
    )
    return found
