"""Match results: submission, correction, deletion and validation.

A first submission finishes the match and updates the two standings rows
incrementally. A correction (re-submission) or a deletion cannot be undone
incrementally, so those rebuild the whole (tournament, category) table.

Knockout matches also move the winner into the next match of the bracket.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from matchday.core.errors import ConflictError, NotFoundError, RuleViolation
from matchday.core.fixtures import require_open, slot_ready_match
from matchday.core.standings import recalculate_standings, update_from_match
from matchday.models.fixture import STARTED_STATUSES, FixtureMode, MatchStatus
from matchday.models.standing import DEFAULT_SCORING

if TYPE_CHECKING:
    from matchday.config import Settings
    from matchday.db.models import MatchResultRow, MatchRow
    from matchday.db.repository import Repository

logger = logging.getLogger(__name__)


async def _require_match(repo: Repository, match_id: str) -> MatchRow:
    match = await repo.get_match(match_id)
    if match is None:
        raise NotFoundError.for_entity("Match", match_id)
    return match


async def _require_open_match(repo: Repository, match_id: str) -> MatchRow:
    match = await _require_match(repo, match_id)
    tournament = await repo.get_tournament(match.tournament_id)
    if tournament is None:
        raise NotFoundError.for_entity("Tournament", match.tournament_id)
    require_open(tournament)
    return match


def _winner(match: MatchRow, home_score: int, away_score: int) -> str | None:
    if home_score > away_score:
        return match.home_team_id
    if away_score > home_score:
        return match.away_team_id
    return None


async def _next_match(repo: Repository, match: MatchRow) -> MatchRow | None:
    if match.next_match_id is None:
        return None
    return await repo.get_match(match.next_match_id)


def _occupant(match: MatchRow, side: str | None) -> str | None:
    return match.home_team_id if side == "home" else match.away_team_id


def _place(match: MatchRow, side: str | None, team_id: str | None) -> None:
    if side == "home":
        match.home_team_id = team_id
    else:
        match.away_team_id = team_id


async def _ensure_next_open(repo: Repository, match: MatchRow, winner_id: str | None) -> None:
    """Refuse to change who advances once the next match has been played."""
    nxt = await _next_match(repo, match)
    if nxt is None or _occupant(nxt, match.next_match_slot) == winner_id:
        return
    if nxt.status in STARTED_STATUSES:
        raise ConflictError(
            f"Next match {nxt.id} is already {nxt.status}; its participants are locked",
            code="NEXT_MATCH_STARTED",
        )


async def advance_winner(
    repo: Repository,
    match: MatchRow,
    winner_id: str,
    settings: Settings | None = None,
) -> MatchRow | None:
    """Place the winner of a knockout match into the match it feeds.

    Returns the next match, or None for the final. The next match is slotted
    as soon as both of its participants are known.
    """
    nxt = await _next_match(repo, match)
    if nxt is None:
        return None
    if _occupant(nxt, match.next_match_slot) == winner_id:
        return nxt
    await _ensure_next_open(repo, match, winner_id)

    _place(nxt, match.next_match_slot, winner_id)
    logger.info(
        "winner_advanced match=%s winner=%s next=%s slot=%s",
        match.id,
        winner_id,
        nxt.id,
        match.next_match_slot,
    )
    if nxt.home_team_id is not None and nxt.away_team_id is not None:
        await slot_ready_match(repo, nxt, settings)
    else:
        await repo.session.flush()
    return nxt


async def retract_winner(repo: Repository, match: MatchRow) -> MatchRow | None:
    """Undo ``advance_winner``: empty the fed slot and park the next match."""
    nxt = await _next_match(repo, match)
    if nxt is None or _occupant(nxt, match.next_match_slot) is None:
        return nxt
    await _ensure_next_open(repo, match, None)

    _place(nxt, match.next_match_slot, None)
    nxt.starts_at = None
    nxt.status = MatchStatus.PENDING
    await repo.session.flush()
    logger.info("winner_retracted match=%s next=%s", match.id, nxt.id)
    return nxt


async def submit_result(
    repo: Repository,
    match_id: str,
    home_score: int,
    away_score: int,
    notes: str = "",
    entered_by: str = "",
    settings: Settings | None = None,
) -> MatchResultRow:
    """Record (or correct) the final score of a match.

    Raises:
        NotFoundError: unknown match.
        RuleViolation: closed tournament, cancelled match, undecided
            participants, negative score, or a knockout draw.
        ConflictError: a knockout correction would change the participants
            of a next match that is already under way.
    """
    match = await _require_open_match(repo, match_id)
    if match.status == MatchStatus.CANCELLED:
        raise RuleViolation("Cannot record a result for a cancelled match", code="MATCH_CANCELLED")
    if match.home_team_id is None or match.away_team_id is None:
        raise RuleViolation(
            "Match participants are not decided yet", code="MATCH_PARTICIPANTS_PENDING"
        )
    if home_score < 0 or away_score < 0:
        raise RuleViolation(
            f"Scores must be non-negative, got {home_score}-{away_score}", code="INVALID_SCORE"
        )

    knockout = match.phase == FixtureMode.KNOCKOUT
    winner = _winner(match, home_score, away_score)
    if knockout and winner is None:
        raise RuleViolation("Knockout matches cannot end in a draw", code="DRAW_NOT_ALLOWED")
    if knockout:
        await _ensure_next_open(repo, match, winner)

    rule = settings.scoring_rule() if settings else DEFAULT_SCORING
    result, created = await repo.save_result(match_id, home_score, away_score, notes, entered_by)
    match.status = MatchStatus.FINISHED

    if created:
        await update_from_match(repo, match, home_score, away_score, rule)
    else:
        await recalculate_standings(repo, match.tournament_id, match.category_id, rule=rule)

    if knockout and winner is not None:
        await advance_winner(repo, match, winner, settings)

    logger.info(
        "result_%s match=%s score=%d-%d",
        "recorded" if created else "corrected",
        match_id,
        home_score,
        away_score,
    )
    return result


async def get_result(repo: Repository, match_id: str) -> MatchResultRow:
    await _require_match(repo, match_id)
    result = await repo.get_result(match_id)
    if result is None:
        raise NotFoundError.for_entity("Result", match_id)
    return result


async def delete_result(
    repo: Repository,
    match_id: str,
    settings: Settings | None = None,
) -> None:
    """Remove a result, reopen its match and rebuild the standings."""
    match = await _require_open_match(repo, match_id)
    if await repo.get_result(match_id) is None:
        raise NotFoundError.for_entity("Result", match_id)
    if match.phase == FixtureMode.KNOCKOUT:
        await retract_winner(repo, match)

    await repo.delete_result(match_id)
    match.status = MatchStatus.SCHEDULED if match.starts_at else MatchStatus.POSTPONED
    rule = settings.scoring_rule() if settings else DEFAULT_SCORING
    await recalculate_standings(repo, match.tournament_id, match.category_id, rule=rule)
    logger.info("result_deleted match=%s", match_id)


async def validate_result(repo: Repository, match_id: str, validated_by: str) -> MatchResultRow:
    """Stamp a result as checked by an official."""
    result = await get_result(repo, match_id)
    result.validated_by = validated_by
    result.validated_at = datetime.now(UTC)
    await repo.session.flush()
    logger.info("result_validated match=%s by=%s", match_id, validated_by)
    return result
