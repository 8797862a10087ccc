"""Repository pattern for database access.

Wraps SQLAlchemy async sessions. All queries for a (tournament, category)
scope live here so the core modules never build SQL themselves.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import UTC, date, datetime

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from matchday.db.models import (
    CategoryRow,
    MatchResultRow,
    MatchRow,
    StandingRow,
    TeamAvailabilityRow,
    TeamRow,
    TournamentRow,
    VenueRow,
)
from matchday.models.availability import AvailabilityWindow


class Repository:
    """Async repository for all database operations."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    # --- Tournament / Category / Venue ---

    async def create_tournament(
        self,
        name: str,
        start_date: date,
        end_date: date | None = None,
        status: str = "draft",
    ) -> TournamentRow:
        row = TournamentRow(name=name, start_date=start_date, end_date=end_date, status=status)
        self.session.add(row)
        await self.session.flush()
        return row

    async def get_tournament(self, tournament_id: str) -> TournamentRow | None:
        return await self.session.get(TournamentRow, tournament_id)

    async def update_tournament_status(self, tournament_id: str, status: str) -> None:
        row = await self.session.get(TournamentRow, tournament_id)
        if row:
            row.status = status
            await self.session.flush()

    async def create_category(self, name: str) -> CategoryRow:
        row = CategoryRow(name=name)
        self.session.add(row)
        await self.session.flush()
        return row

    async def get_category(self, category_id: str) -> CategoryRow | None:
        return await self.session.get(CategoryRow, category_id)

    async def get_category_by_name(self, name: str) -> CategoryRow | None:
        stmt = select(CategoryRow).where(CategoryRow.name == name)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def create_venue(self, name: str, address: str = "") -> VenueRow:
        row = VenueRow(name=name, address=address)
        self.session.add(row)
        await self.session.flush()
        return row

    async def get_venue(self, venue_id: str) -> VenueRow | None:
        return await self.session.get(VenueRow, venue_id)

    # --- Teams / Availability ---

    async def create_team(
        self,
        tournament_id: str,
        category_id: str,
        name: str,
        club_name: str | None = None,
        inscription_id: str | None = None,
        is_active: bool = True,
    ) -> TeamRow:
        row = TeamRow(
            tournament_id=tournament_id,
            category_id=category_id,
            name=name,
            club_name=club_name,
            inscription_id=inscription_id,
            is_active=is_active,
        )
        self.session.add(row)
        await self.session.flush()
        return row

    async def get_team(self, team_id: str) -> TeamRow | None:
        return await self.session.get(TeamRow, team_id)

    async def get_teams(
        self,
        tournament_id: str,
        category_id: str,
        active_only: bool = True,
    ) -> list[TeamRow]:
        """Teams of a scope in registration order (ties broken by name)."""
        stmt = select(TeamRow).where(
            TeamRow.tournament_id == tournament_id,
            TeamRow.category_id == category_id,
        )
        if active_only:
            stmt = stmt.where(TeamRow.is_active.is_(True))
        stmt = stmt.order_by(TeamRow.created_at, TeamRow.name)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def set_team_active(self, team_id: str, is_active: bool) -> None:
        row = await self.session.get(TeamRow, team_id)
        if row:
            row.is_active = is_active
            await self.session.flush()

    async def get_availability(self, team_id: str) -> list[TeamAvailabilityRow]:
        stmt = (
            select(TeamAvailabilityRow)
            .where(TeamAvailabilityRow.team_id == team_id)
            .order_by(TeamAvailabilityRow.start_time)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_availability_for_teams(
        self, team_ids: Iterable[str]
    ) -> list[TeamAvailabilityRow]:
        """Availability rows for many teams in one query."""
        ids = list(team_ids)
        if not ids:
            return []
        stmt = select(TeamAvailabilityRow).where(TeamAvailabilityRow.team_id.in_(ids))
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def replace_availability(
        self,
        team_id: str,
        windows: Iterable[AvailabilityWindow],
    ) -> list[TeamAvailabilityRow]:
        """Delete a team's windows and store the given ones instead."""
        await self.session.execute(
            delete(TeamAvailabilityRow).where(TeamAvailabilityRow.team_id == team_id)
        )
        rows = [
            TeamAvailabilityRow(
                team_id=team_id,
                day_of_week=w.day_of_week.value,
                start_time=w.start_time,
                end_time=w.end_time,
                available=True,
            )
            for w in windows
        ]
        self.session.add_all(rows)
        await self.session.flush()
        return rows

    # --- Matches ---

    async def add_matches(self, rows: list[MatchRow]) -> list[MatchRow]:
        """Persist a batch of matches with a single flush."""
        self.session.add_all(rows)
        await self.session.flush()
        return rows

    async def get_match(self, match_id: str) -> MatchRow | None:
        return await self.session.get(MatchRow, match_id)

    async def get_matches(self, tournament_id: str, category_id: str) -> list[MatchRow]:
        stmt = (
            select(MatchRow)
            .where(
                MatchRow.tournament_id == tournament_id,
                MatchRow.category_id == category_id,
            )
            .order_by(MatchRow.phase, MatchRow.round_number, MatchRow.matchup_index)
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def get_matches_feeding(self, match_id: str) -> list[MatchRow]:
        """Knockout matches whose winner advances into ``match_id``."""
        stmt = select(MatchRow).where(MatchRow.next_match_id == match_id)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_matches(self, tournament_id: str, category_id: str) -> int:
        """Delete all matches of a scope together with their results."""
        scope = select(MatchRow.id).where(
            MatchRow.tournament_id == tournament_id,
            MatchRow.category_id == category_id,
        )
        await self.session.execute(
            delete(MatchResultRow).where(MatchResultRow.match_id.in_(scope))
        )
        result = await self.session.execute(
            delete(MatchRow).where(
                MatchRow.tournament_id == tournament_id,
                MatchRow.category_id == category_id,
            )
        )
        await self.session.flush()
        return result.rowcount or 0

    # --- Results ---

    async def get_result(self, match_id: str) -> MatchResultRow | None:
        return await self.session.get(MatchResultRow, match_id)

    async def save_result(
        self,
        match_id: str,
        home_score: int,
        away_score: int,
        notes: str = "",
        entered_by: str = "",
    ) -> tuple[MatchResultRow, bool]:
        """Create or overwrite the result of a match.

        Returns the row and whether it was newly created.
        """
        row = await self.session.get(MatchResultRow, match_id)
        created = row is None
        if row is None:
            row = MatchResultRow(match_id=match_id)
            self.session.add(row)
        row.home_score = home_score
        row.away_score = away_score
        row.notes = notes
        row.entered_by = entered_by
        row.entered_at = datetime.now(UTC)
        row.validated_by = None
        row.validated_at = None
        await self.session.flush()
        return row, created

    async def delete_result(self, match_id: str) -> bool:
        row = await self.session.get(MatchResultRow, match_id)
        if row is None:
            return False
        await self.session.delete(row)
        await self.session.flush()
        return True

    async def get_results_for_scope(
        self, tournament_id: str, category_id: str
    ) -> list[tuple[MatchRow, MatchResultRow]]:
        """All results of a scope, oldest match first (unscheduled last)."""
        stmt = (
            select(MatchRow, MatchResultRow)
            .join(MatchResultRow, MatchResultRow.match_id == MatchRow.id)
            .where(
                MatchRow.tournament_id == tournament_id,
                MatchRow.category_id == category_id,
            )
            .order_by(
                MatchRow.starts_at.is_(None),
                MatchRow.starts_at,
                MatchResultRow.entered_at,
            )
        )
        result = await self.session.execute(stmt)
        return [(m, r) for m, r in result.all()]

    # --- Standings ---

    async def get_standing(
        self, tournament_id: str, category_id: str, team_id: str
    ) -> StandingRow | None:
        stmt = select(StandingRow).where(
            StandingRow.tournament_id == tournament_id,
            StandingRow.category_id == category_id,
            StandingRow.team_id == team_id,
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def get_or_create_standing(
        self, tournament_id: str, category_id: str, team_id: str
    ) -> StandingRow:
        """Fetch a team's row, creating it zeroed on first touch."""
        row = await self.get_standing(tournament_id, category_id, team_id)
        if row is None:
            row = StandingRow(
                tournament_id=tournament_id,
                category_id=category_id,
                team_id=team_id,
                points=0,
                played=0,
                wins=0,
                draws=0,
                losses=0,
                goals_for=0,
                goals_against=0,
            )
            self.session.add(row)
            await self.session.flush()
        return row

    async def get_standings(self, tournament_id: str, category_id: str) -> list[StandingRow]:
        """Standings of a scope by points, then goal difference, then goals for."""
        stmt = (
            select(StandingRow)
            .where(
                StandingRow.tournament_id == tournament_id,
                StandingRow.category_id == category_id,
            )
            .order_by(
                StandingRow.points.desc(),
                (StandingRow.goals_for - StandingRow.goals_against).desc(),
                StandingRow.goals_for.desc(),
            )
        )
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def delete_standings(self, tournament_id: str, category_id: str) -> int:
        result = await self.session.execute(
            delete(StandingRow).where(
                StandingRow.tournament_id == tournament_id,
                StandingRow.category_id == category_id,
            )
        )
        return result.rowcount or 0

    async def count_matches_by_status(
        self, tournament_id: str, category_id: str
    ) -> dict[str, int]:
        stmt = (
            select(MatchRow.status, func.count())
            .where(
                MatchRow.tournament_id == tournament_id,
                MatchRow.category_id == category_id,
            )
            .group_by(MatchRow.status)
        )
        result = await self.session.execute(stmt)
        return {status: count for status, count in result.all()}
