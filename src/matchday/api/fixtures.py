"""Fixture API endpoints: generate, list and delete the matches of a scope."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Response

from matchday.api.deps import RepoDep, SettingsDep
from matchday.core import fixtures
from matchday.db.models import MatchRow

router = APIRouter(prefix="/api/fixtures", tags=["fixtures"])


def match_to_dict(m: MatchRow) -> dict:
    return {
        "id": m.id,
        "tournament_id": m.tournament_id,
        "category_id": m.category_id,
        "phase": m.phase,
        "round_number": m.round_number,
        "matchup_index": m.matchup_index,
        "home_team_id": m.home_team_id,
        "away_team_id": m.away_team_id,
        "starts_at": m.starts_at.isoformat() if m.starts_at else None,
        "venue_id": m.venue_id,
        "status": m.status,
        "next_match_id": m.next_match_id,
        "next_match_slot": m.next_match_slot,
        "referee": m.referee,
    }


@router.post("/generate")
async def generate_fixture(
    tournament_id: str,
    category_id: str,
    repo: RepoDep,
    settings: SettingsDep,
    mode: str = "round_robin",
    start_date: date | None = None,
) -> dict:
    """Generate the fixture of a (tournament, category).

    Matches without a common availability window are created as postponed;
    the response counts them so the organizer can slot them by hand.
    """
    summary = await fixtures.generate_fixture(
        repo, tournament_id, category_id, mode, start_date=start_date, settings=settings
    )
    return {
        "message": f"Fixture generated: {summary.matches_created} matches",
        "mode": summary.mode,
        "matches_created": summary.matches_created,
        "scheduled": summary.scheduled,
        "postponed": summary.postponed,
        "pending": summary.pending,
    }


@router.get("")
async def list_fixture(tournament_id: str, category_id: str, repo: RepoDep) -> dict:
    matches = await fixtures.list_fixture(repo, tournament_id, category_id)
    counts = await repo.count_matches_by_status(tournament_id, category_id)
    return {"data": [match_to_dict(m) for m in matches], "by_status": counts}


@router.delete("", status_code=204)
async def delete_fixture(
    tournament_id: str, category_id: str, repo: RepoDep, settings: SettingsDep
) -> Response:
    """Delete every match of the scope, their results, and the standings they produced."""
    await fixtures.delete_fixture(repo, tournament_id, category_id, settings.scoring_rule())
    return Response(status_code=204)
