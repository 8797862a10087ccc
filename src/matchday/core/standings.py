"""Standings engine: league tables derived from match results.

One aggregate row per (tournament, category, team). Two update modes:

- **incremental** -- ``update_from_match`` applies one new result to the two
  rows involved, creating them zeroed on first touch.
- **rebuild** -- ``recalculate_standings`` deletes every row of the scope and
  replays all results. The per-team update is commutative, so replay order
  does not change the totals and a rebuild is idempotent.

Ranking order: points desc, goal difference desc, goals for desc, team
name asc.

Rows only ever grow between rebuilds: played == wins + draws + losses and
points == win*wins + draw*draws + loss*losses always hold.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from typing import TYPE_CHECKING, Protocol

from matchday.core.errors import NotFoundError
from matchday.models.standing import DEFAULT_SCORING, ScoringRule, StandingLine

if TYPE_CHECKING:
    from matchday.db.models import MatchRow, StandingRow
    from matchday.db.repository import Repository

logger = logging.getLogger(__name__)


class Tally(Protocol):
    points: int
    played: int
    wins: int
    draws: int
    losses: int
    goals_for: int
    goals_against: int


def apply_result(
    home: Tally,
    away: Tally,
    home_score: int,
    away_score: int,
    rule: ScoringRule = DEFAULT_SCORING,
) -> None:
    """Add one result to both teams' tallies in place."""
    if home_score < 0 or away_score < 0:
        msg = f"Scores must be non-negative, got {home_score}-{away_score}"
        raise ValueError(msg)

    home.played += 1
    away.played += 1
    home.goals_for += home_score
    home.goals_against += away_score
    away.goals_for += away_score
    away.goals_against += home_score

    if home_score > away_score:
        _win(home, rule)
        _loss(away, rule)
    elif home_score < away_score:
        _win(away, rule)
        _loss(home, rule)
    else:
        _draw(home, rule)
        _draw(away, rule)


def _win(t: Tally, rule: ScoringRule) -> None:
    t.wins += 1
    t.points += rule.win


def _draw(t: Tally, rule: ScoringRule) -> None:
    t.draws += 1
    t.points += rule.draw


def _loss(t: Tally, rule: ScoringRule) -> None:
    t.losses += 1
    t.points += rule.loss


def ranking_key(line: StandingLine) -> tuple[int, int, int, str]:
    return (-line.points, -line.goal_difference, -line.goals_for, line.team_name)


def rank(lines: Iterable[StandingLine]) -> list[StandingLine]:
    """Sort lines into table order and number positions from 1."""
    ranked = sorted(lines, key=ranking_key)
    for position, line in enumerate(ranked, start=1):
        line.position = position
    return ranked


def to_line(row: StandingRow, team_name: str = "") -> StandingLine:
    return StandingLine(
        team_id=row.team_id,
        team_name=team_name,
        points=row.points,
        played=row.played,
        wins=row.wins,
        draws=row.draws,
        losses=row.losses,
        goals_for=row.goals_for,
        goals_against=row.goals_against,
    )


# ---------------------------------------------------------------------------
# Persistent standings
# ---------------------------------------------------------------------------


async def update_from_match(
    repo: Repository,
    match: MatchRow,
    home_score: int,
    away_score: int,
    rule: ScoringRule = DEFAULT_SCORING,
) -> tuple[StandingRow, StandingRow]:
    """Apply one result to the persisted standings of both teams."""
    if match.home_team_id is None or match.away_team_id is None:
        msg = f"Match {match.id} has no decided participants"
        raise ValueError(msg)

    home = await repo.get_or_create_standing(
        match.tournament_id, match.category_id, match.home_team_id
    )
    away = await repo.get_or_create_standing(
        match.tournament_id, match.category_id, match.away_team_id
    )
    apply_result(home, away, home_score, away_score, rule)
    await repo.session.flush()
    return home, away


async def recalculate_standings(
    repo: Repository,
    tournament_id: str,
    category_id: str,
    results: Sequence[tuple[MatchRow, int, int]] | None = None,
    rule: ScoringRule = DEFAULT_SCORING,
) -> int:
    """Rebuild the standings of a scope from scratch.

    Args:
        repo: Repository bound to the current session.
        tournament_id: Tournament scope.
        category_id: Category scope.
        results: ``(match, home_score, away_score)`` triples to replay in the
            given order. Defaults to every stored result of the scope.
        rule: Points per outcome.

    Returns:
        Number of results replayed.

    The delete and the replay run inside one SAVEPOINT, so a failure leaves
    the previous table intact.
    """
    if results is None:
        results = [
            (match, result.home_score, result.away_score)
            for match, result in await repo.get_results_for_scope(tournament_id, category_id)
        ]

    async with repo.session.begin_nested():
        deleted = await repo.delete_standings(tournament_id, category_id)
        for match, home_score, away_score in results:
            await update_from_match(repo, match, home_score, away_score, rule)

    logger.info(
        "standings_recalculated tournament=%s category=%s deleted=%d replayed=%d",
        tournament_id,
        category_id,
        deleted,
        len(results),
    )
    return len(results)


async def get_standings(
    repo: Repository,
    tournament_id: str,
    category_id: str,
) -> list[StandingLine]:
    """Return the ranked table of a scope with team names resolved."""
    if await repo.get_tournament(tournament_id) is None:
        raise NotFoundError.for_entity("Tournament", tournament_id)
    if await repo.get_category(category_id) is None:
        raise NotFoundError.for_entity("Category", category_id)

    rows = await repo.get_standings(tournament_id, category_id)
    teams = await repo.get_teams(tournament_id, category_id, active_only=False)
    names = {t.id: t.name for t in teams}
    return rank(to_line(row, names.get(row.team_id, "")) for row in rows)
