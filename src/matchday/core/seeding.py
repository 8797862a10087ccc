"""Tournament seeding from YAML.

A seed file describes one tournament, its categories and the teams of each
category with their weekly availability:

    tournament:
      name: Liga Barrial
      start_date: 2026-03-07
    categories: [Sub-12, Libre]
    teams:
      - name: Los Halcones
        category: Sub-12
        availability:
          - {day_of_week: SATURDAY, start_time: "09:00", end_time: "12:00"}
"""

from __future__ import annotations

from datetime import date
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, model_validator

from matchday.core import registry
from matchday.db.repository import Repository
from matchday.models.availability import AvailabilityWindow
from matchday.models.tournament import TournamentStatus


class TournamentSpec(BaseModel):
    name: str
    start_date: date
    end_date: date | None = None
    status: TournamentStatus = TournamentStatus.OPEN_FOR_INSCRIPTION


class TeamSeed(BaseModel):
    name: str
    category: str
    club_name: str | None = None
    availability: list[AvailabilityWindow] = Field(default_factory=list)


class TournamentSeed(BaseModel):
    """Everything needed to stand up a tournament in an empty database."""

    tournament: TournamentSpec
    categories: list[str] = Field(default_factory=list)
    teams: list[TeamSeed] = Field(default_factory=list)

    @model_validator(mode="after")
    def _teams_use_known_categories(self) -> TournamentSeed:
        unknown = {t.category for t in self.teams} - set(self.categories)
        if unknown:
            msg = f"Teams reference undeclared categories: {sorted(unknown)}"
            raise ValueError(msg)
        return self


class SeedResult(BaseModel):
    """Ids created by ``apply_seed``, keyed by name."""

    tournament_id: str
    categories: dict[str, str] = Field(default_factory=dict)
    teams: dict[str, str] = Field(default_factory=dict)


async def apply_seed(repo: Repository, seed: TournamentSeed) -> SeedResult:
    """Persist a seed. Existing categories are reused by name."""
    t = seed.tournament
    tournament = await registry.create_tournament(
        repo, t.name, t.start_date, t.end_date, status=t.status
    )
    result = SeedResult(tournament_id=tournament.id)

    for name in seed.categories:
        category = await repo.get_category_by_name(name)
        if category is None:
            category = await registry.create_category(repo, name)
        result.categories[name] = category.id

    for team in seed.teams:
        row = await registry.register_team(
            repo,
            tournament.id,
            result.categories[team.category],
            team.name,
            club_name=team.club_name,
        )
        if team.availability:
            await registry.replace_availability(repo, row.id, team.availability)
        result.teams[team.name] = row.id

    return result


def save_seed_yaml(seed: TournamentSeed, path: Path) -> None:
    """Save a tournament seed to YAML."""
    data = seed.model_dump(mode="json")
    with open(path, "w") as f:
        yaml.dump(data, f, default_flow_style=False, sort_keys=False)


def load_seed_yaml(path: Path) -> TournamentSeed:
    """Load a tournament seed from YAML."""
    with open(path) as f:
        data = yaml.safe_load(f)
    return TournamentSeed.model_validate(data)
