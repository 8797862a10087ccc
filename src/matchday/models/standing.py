"""Standing models: the scoring rule and a ranked table line."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ScoringRule(BaseModel):
    """Points awarded per outcome. Defaults to the usual 3/1/0."""

    model_config = ConfigDict(frozen=True)

    win: int = Field(default=3, ge=0)
    draw: int = Field(default=1, ge=0)
    loss: int = Field(default=0, ge=0)


DEFAULT_SCORING = ScoringRule()


class StandingLine(BaseModel):
    """One team's aggregate record within a (tournament, category)."""

    team_id: str
    team_name: str = ""
    position: int = 0
    points: int = 0
    played: int = 0
    wins: int = 0
    draws: int = 0
    losses: int = 0
    goals_for: int = 0
    goals_against: int = 0

    @property
    def goal_difference(self) -> int:
        return self.goals_for - self.goals_against

    def as_dict(self) -> dict:
        data = self.model_dump()
        data["goal_difference"] = self.goal_difference
        return data
