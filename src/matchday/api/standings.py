"""Standings API endpoints."""

from __future__ import annotations

from fastapi import APIRouter

from matchday.api.deps import RepoDep, SettingsDep
from matchday.core.fixtures import require_scope
from matchday.core.standings import get_standings, recalculate_standings

router = APIRouter(prefix="/api/standings", tags=["standings"])


@router.get("/{tournament_id}/{category_id}")
async def read_standings(tournament_id: str, category_id: str, repo: RepoDep) -> dict:
    """Ranked table of a (tournament, category).

    Order: points, goal difference, goals for, then team name.
    """
    lines = await get_standings(repo, tournament_id, category_id)
    return {"data": [line.as_dict() for line in lines]}


@router.post("/{tournament_id}/{category_id}/recalculate")
async def recalculate(
    tournament_id: str, category_id: str, repo: RepoDep, settings: SettingsDep
) -> dict:
    """Rebuild the table from every stored result of the scope."""
    await require_scope(repo, tournament_id, category_id)
    replayed = await recalculate_standings(
        repo, tournament_id, category_id, rule=settings.scoring_rule()
    )
    lines = await get_standings(repo, tournament_id, category_id)
    return {
        "message": f"Standings recalculated from {replayed} results",
        "data": [line.as_dict() for line in lines],
    }
