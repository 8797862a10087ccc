"""Team and availability API endpoints."""

from __future__ import annotations

from fastapi import APIRouter
from pydantic import BaseModel, Field

from matchday.api.deps import RepoDep
from matchday.core import registry
from matchday.db.models import TeamAvailabilityRow, TeamRow
from matchday.models.availability import AvailabilityWindow

router = APIRouter(prefix="/api/teams", tags=["teams"])


class RegisterTeamRequest(BaseModel):
    tournament_id: str
    category_id: str
    name: str = Field(min_length=1, max_length=100)
    club_name: str | None = None
    inscription_id: str | None = None


class AvailabilityRequest(BaseModel):
    windows: list[AvailabilityWindow] = Field(default_factory=list)


def team_to_dict(t: TeamRow) -> dict:
    return {
        "id": t.id,
        "tournament_id": t.tournament_id,
        "category_id": t.category_id,
        "name": t.name,
        "club_name": t.club_name,
        "is_active": t.is_active,
    }


def window_to_dict(w: TeamAvailabilityRow) -> dict:
    return {
        "day_of_week": w.day_of_week,
        "start_time": w.start_time.isoformat(timespec="minutes"),
        "end_time": w.end_time.isoformat(timespec="minutes"),
        "available": w.available,
    }


@router.post("", status_code=201)
async def register_team(body: RegisterTeamRequest, repo: RepoDep) -> dict:
    row = await registry.register_team(
        repo,
        body.tournament_id,
        body.category_id,
        body.name,
        club_name=body.club_name,
        inscription_id=body.inscription_id,
    )
    return {"data": team_to_dict(row)}


@router.get("")
async def list_teams(
    tournament_id: str, category_id: str, repo: RepoDep, active_only: bool = False
) -> dict:
    """List the teams of a (tournament, category) in registration order."""
    teams = await repo.get_teams(tournament_id, category_id, active_only=active_only)
    return {"data": [team_to_dict(t) for t in teams]}


@router.post("/{team_id}/deactivate")
async def deactivate_team(team_id: str, repo: RepoDep) -> dict:
    """Withdraw a team from future fixtures."""
    row = await registry.deactivate_team(repo, team_id)
    return {"data": team_to_dict(row)}


@router.get("/{team_id}/availability")
async def get_availability(team_id: str, repo: RepoDep) -> dict:
    rows = await registry.get_availability(repo, team_id)
    return {"data": [window_to_dict(w) for w in rows]}


@router.put("/{team_id}/availability")
async def replace_availability(team_id: str, body: AvailabilityRequest, repo: RepoDep) -> dict:
    """Replace every weekly window of a team. Overlapping windows are rejected."""
    rows = await registry.replace_availability(repo, team_id, body.windows)
    return {"data": [window_to_dict(w) for w in rows]}
