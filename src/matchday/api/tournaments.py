"""Tournament, category and venue API endpoints."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter
from pydantic import BaseModel, Field

from matchday.api.deps import RepoDep
from matchday.core import registry
from matchday.db.models import TournamentRow
from matchday.models.tournament import TournamentStatus

router = APIRouter(prefix="/api", tags=["tournaments"])


class CreateTournamentRequest(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    start_date: date
    end_date: date | None = None
    status: TournamentStatus = TournamentStatus.DRAFT


class StatusRequest(BaseModel):
    status: str


class CreateCategoryRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)


class CreateVenueRequest(BaseModel):
    name: str = Field(min_length=1, max_length=120)
    address: str = ""


def tournament_to_dict(t: TournamentRow) -> dict:
    return {
        "id": t.id,
        "name": t.name,
        "status": t.status,
        "start_date": t.start_date.isoformat(),
        "end_date": t.end_date.isoformat() if t.end_date else None,
    }


@router.post("/tournaments", status_code=201)
async def create_tournament(body: CreateTournamentRequest, repo: RepoDep) -> dict:
    row = await registry.create_tournament(
        repo, body.name, body.start_date, body.end_date, status=body.status
    )
    return {"data": tournament_to_dict(row)}


@router.get("/tournaments/{tournament_id}")
async def get_tournament(tournament_id: str, repo: RepoDep) -> dict:
    row = await registry.get_tournament(repo, tournament_id)
    return {"data": tournament_to_dict(row)}


@router.patch("/tournaments/{tournament_id}/status")
async def set_tournament_status(tournament_id: str, body: StatusRequest, repo: RepoDep) -> dict:
    """Move a tournament through draft, inscription, play and closure."""
    row = await registry.set_tournament_status(repo, tournament_id, body.status)
    return {"data": tournament_to_dict(row)}


@router.post("/categories", status_code=201)
async def create_category(body: CreateCategoryRequest, repo: RepoDep) -> dict:
    row = await registry.create_category(repo, body.name)
    return {"data": {"id": row.id, "name": row.name}}


@router.post("/venues", status_code=201)
async def create_venue(body: CreateVenueRequest, repo: RepoDep) -> dict:
    row = await registry.create_venue(repo, body.name, body.address)
    return {"data": {"id": row.id, "name": row.name, "address": row.address}}
