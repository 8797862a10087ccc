"""Application settings via pydantic-settings. Loads from environment and .env file."""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

from matchday.models.standing import ScoringRule

VALID_ENVS = frozenset({"development", "test", "production"})


class Settings(BaseSettings):
    """Matchday application configuration.

    All values can be overridden via environment variables or .env file.
    """

    # Database
    database_url: str = "sqlite+aiosqlite:///matchday.db"

    # Environment
    matchday_env: str = "development"

    # Scheduling
    matchday_slot_horizon_days: int = Field(default=14, ge=1)
    matchday_round_interval_days: int = Field(default=1, ge=0)

    # Scoring (win / draw / loss points)
    matchday_points_win: int = Field(default=3, ge=0)
    matchday_points_draw: int = Field(default=1, ge=0)
    matchday_points_loss: int = Field(default=0, ge=0)

    # Logging
    matchday_log_level: str = "INFO"

    model_config = {"env_prefix": "", "env_file": ".env", "extra": "ignore"}

    @model_validator(mode="after")
    def _check_env(self) -> Settings:
        if self.matchday_env not in VALID_ENVS:
            msg = f"MATCHDAY_ENV must be one of {sorted(VALID_ENVS)}, got {self.matchday_env!r}"
            raise ValueError(msg)
        return self

    @model_validator(mode="after")
    def _check_points_order(self) -> Settings:
        """A win can never be worth less than a draw, nor a draw less than a loss."""
        if not (
            self.matchday_points_win >= self.matchday_points_draw >= self.matchday_points_loss
        ):
            msg = (
                "Scoring must satisfy win >= draw >= loss, got "
                f"{self.matchday_points_win}/{self.matchday_points_draw}/"
                f"{self.matchday_points_loss}"
            )
            raise ValueError(msg)
        return self

    def scoring_rule(self) -> ScoringRule:
        """Return the points awarded per outcome."""
        return ScoringRule(
            win=self.matchday_points_win,
            draw=self.matchday_points_draw,
            loss=self.matchday_points_loss,
        )
