"""Match API endpoints: manual scheduling, start/cancel and result management."""

from __future__ import annotations

from datetime import datetime

from fastapi import APIRouter, Response
from pydantic import BaseModel, Field

from matchday.api.deps import RepoDep, SettingsDep
from matchday.api.fixtures import match_to_dict
from matchday.core import fixtures, results
from matchday.core.errors import NotFoundError
from matchday.db.models import MatchResultRow

router = APIRouter(prefix="/api/matches", tags=["matches"])


class ScheduleRequest(BaseModel):
    starts_at: datetime
    venue_id: str | None = None


class ResultRequest(BaseModel):
    """Final score of a match."""

    home_score: int = Field(ge=0)
    away_score: int = Field(ge=0)
    notes: str = Field(default="", max_length=1000)
    entered_by: str = ""


class ValidateRequest(BaseModel):
    validated_by: str = Field(min_length=1)


def result_to_dict(r: MatchResultRow) -> dict:
    return {
        "match_id": r.match_id,
        "home_score": r.home_score,
        "away_score": r.away_score,
        "notes": r.notes,
        "entered_by": r.entered_by,
        "entered_at": r.entered_at.isoformat() if r.entered_at else None,
        "validated_by": r.validated_by,
        "validated_at": r.validated_at.isoformat() if r.validated_at else None,
    }


@router.get("/{match_id}")
async def get_match(match_id: str, repo: RepoDep) -> dict:
    match = await repo.get_match(match_id)
    if match is None:
        raise NotFoundError.for_entity("Match", match_id)
    data = match_to_dict(match)
    result = await repo.get_result(match_id)
    data["result"] = result_to_dict(result) if result else None
    return {"data": data}


@router.patch("/{match_id}/schedule")
async def schedule_match(match_id: str, body: ScheduleRequest, repo: RepoDep) -> dict:
    """Manually slot a match, e.g. one postponed for lack of a common window."""
    match = await fixtures.schedule_match(repo, match_id, body.starts_at, body.venue_id)
    return {"data": match_to_dict(match)}


@router.post("/{match_id}/start")
async def start_match(match_id: str, repo: RepoDep) -> dict:
    match = await fixtures.start_match(repo, match_id)
    return {"data": match_to_dict(match)}


@router.post("/{match_id}/cancel")
async def cancel_match(match_id: str, repo: RepoDep) -> dict:
    match = await fixtures.cancel_match(repo, match_id)
    return {"data": match_to_dict(match)}


@router.post("/{match_id}/result")
async def submit_result(
    match_id: str, body: ResultRequest, repo: RepoDep, settings: SettingsDep
) -> dict:
    """Record or correct a match result and update the standings."""
    result = await results.submit_result(
        repo,
        match_id,
        body.home_score,
        body.away_score,
        notes=body.notes,
        entered_by=body.entered_by,
        settings=settings,
    )
    return {"data": result_to_dict(result)}


@router.get("/{match_id}/result")
async def get_result(match_id: str, repo: RepoDep) -> dict:
    result = await results.get_result(repo, match_id)
    return {"data": result_to_dict(result)}


@router.delete("/{match_id}/result", status_code=204)
async def delete_result(match_id: str, repo: RepoDep, settings: SettingsDep) -> Response:
    await results.delete_result(repo, match_id, settings=settings)
    return Response(status_code=204)


@router.post("/{match_id}/result/validate")
async def validate_result(match_id: str, body: ValidateRequest, repo: RepoDep) -> dict:
    result = await results.validate_result(repo, match_id, body.validated_by)
    return {"data": result_to_dict(result)}
