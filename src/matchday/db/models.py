"""SQLAlchemy ORM models for the Matchday database.

Tables: tournaments, categories, venues, teams, team_availability, matches,
match_results, standings. Standings are a derived table that can always be
rebuilt from matches + match_results.
"""

from __future__ import annotations

import uuid
from datetime import UTC, date, datetime, time

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    Time,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


def _uuid() -> str:
    return str(uuid.uuid4())


def _now() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Base class for all ORM models."""


class TournamentRow(Base):
    __tablename__ = "tournaments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    status: Mapped[str] = mapped_column(String(30), default="draft")
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now)

    __table_args__ = (
        CheckConstraint(
            "end_date IS NULL OR end_date >= start_date", name="ck_tournament_dates"
        ),
    )


class CategoryRow(Base):
    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now)


class VenueRow(Base):
    __tablename__ = "venues"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    name: Mapped[str] = mapped_column(String(120), nullable=False)
    address: Mapped[str] = mapped_column(String(255), default="")
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now)


class TeamRow(Base):
    __tablename__ = "teams"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    tournament_id: Mapped[str] = mapped_column(ForeignKey("tournaments.id"), nullable=False)
    category_id: Mapped[str] = mapped_column(ForeignKey("categories.id"), nullable=False)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    club_name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    inscription_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now)

    availability: Mapped[list[TeamAvailabilityRow]] = relationship(
        back_populates="team",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("ix_teams_scope", "tournament_id", "category_id"),
        UniqueConstraint("tournament_id", "category_id", "name", name="uq_team_name_in_scope"),
    )


class TeamAvailabilityRow(Base):
    """A weekly window a team can play in. Owned by its team."""

    __tablename__ = "team_availability"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    team_id: Mapped[str] = mapped_column(
        ForeignKey("teams.id", ondelete="CASCADE"), nullable=False
    )
    day_of_week: Mapped[str] = mapped_column(String(10), nullable=False)
    start_time: Mapped[time] = mapped_column(Time, nullable=False)
    end_time: Mapped[time] = mapped_column(Time, nullable=False)
    available: Mapped[bool] = mapped_column(Boolean, default=True)

    team: Mapped[TeamRow] = relationship(back_populates="availability")

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_availability_window"),
        Index("ix_availability_team", "team_id"),
        Index("ix_availability_day", "day_of_week"),
    )


class MatchRow(Base):
    """A fixture match.

    Knockout matches link to the match their winner feeds through
    ``next_match_id``/``next_match_slot``; until both participants are known
    their team ids are null.
    """

    __tablename__ = "matches"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    tournament_id: Mapped[str] = mapped_column(ForeignKey("tournaments.id"), nullable=False)
    category_id: Mapped[str] = mapped_column(ForeignKey("categories.id"), nullable=False)
    venue_id: Mapped[str | None] = mapped_column(
        ForeignKey("venues.id", ondelete="SET NULL"), nullable=True
    )
    starts_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    home_team_id: Mapped[str | None] = mapped_column(ForeignKey("teams.id"), nullable=True)
    away_team_id: Mapped[str | None] = mapped_column(ForeignKey("teams.id"), nullable=True)
    status: Mapped[str] = mapped_column(String(20), default="scheduled")
    phase: Mapped[str] = mapped_column(String(20), default="round_robin")
    round_number: Mapped[int] = mapped_column(Integer, nullable=False)
    matchup_index: Mapped[int] = mapped_column(Integer, nullable=False)
    next_match_id: Mapped[str | None] = mapped_column(
        ForeignKey("matches.id", ondelete="SET NULL"), nullable=True
    )
    next_match_slot: Mapped[str | None] = mapped_column(String(4), nullable=True)
    referee: Mapped[str | None] = mapped_column(String(120), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=_now)

    __table_args__ = (
        CheckConstraint("home_team_id <> away_team_id", name="ck_match_teams_distinct"),
        Index("ix_matches_scope", "tournament_id", "category_id"),
        Index("ix_matches_starts_at", "starts_at"),
        UniqueConstraint(
            "tournament_id",
            "category_id",
            "phase",
            "round_number",
            "matchup_index",
            name="uq_match_position",
        ),
    )

    @property
    def team_ids(self) -> tuple[str | None, str | None]:
        return self.home_team_id, self.away_team_id


class MatchResultRow(Base):
    """The final score of a match. At most one per match."""

    __tablename__ = "match_results"

    match_id: Mapped[str] = mapped_column(
        ForeignKey("matches.id", ondelete="CASCADE"), primary_key=True
    )
    home_score: Mapped[int] = mapped_column(Integer, nullable=False)
    away_score: Mapped[int] = mapped_column(Integer, nullable=False)
    notes: Mapped[str] = mapped_column(Text, default="")
    entered_by: Mapped[str] = mapped_column(String(100), default="")
    entered_at: Mapped[datetime] = mapped_column(DateTime, default=_now)
    validated_by: Mapped[str | None] = mapped_column(String(100), nullable=True)
    validated_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)

    __table_args__ = (
        CheckConstraint("home_score >= 0 AND away_score >= 0", name="ck_result_scores"),
    )


class StandingRow(Base):
    """Aggregate record of one team in one (tournament, category)."""

    __tablename__ = "standings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_uuid)
    tournament_id: Mapped[str] = mapped_column(ForeignKey("tournaments.id"), nullable=False)
    category_id: Mapped[str] = mapped_column(ForeignKey("categories.id"), nullable=False)
    team_id: Mapped[str] = mapped_column(ForeignKey("teams.id"), nullable=False)
    points: Mapped[int] = mapped_column(Integer, default=0)
    played: Mapped[int] = mapped_column(Integer, default=0)
    wins: Mapped[int] = mapped_column(Integer, default=0)
    draws: Mapped[int] = mapped_column(Integer, default=0)
    losses: Mapped[int] = mapped_column(Integer, default=0)
    goals_for: Mapped[int] = mapped_column(Integer, default=0)
    goals_against: Mapped[int] = mapped_column(Integer, default=0)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=_now, onupdate=_now)

    __table_args__ = (
        UniqueConstraint("tournament_id", "category_id", "team_id", name="uq_standing"),
        Index("ix_standings_scope", "tournament_id", "category_id"),
    )
