"""Seed a Matchday tournament and generate its fixtures for demo purposes.

Usage:
    python scripts/demo_seed.py seed [FILE]           # Load a YAML seed (default data/demo_tournament.yaml)
    python scripts/demo_seed.py generate [MODE]       # Generate fixtures for every category
    python scripts/demo_seed.py status                # Print calendar and standings

Uses a local SQLite database (demo_matchday.db). Scheduling settings come from
the environment, e.g. MATCHDAY_ROUND_INTERVAL_DAYS=7 for one round per week.
"""

from __future__ import annotations

import asyncio
import os
import sys
from pathlib import Path

from sqlalchemy import select

from matchday.config import Settings
from matchday.core.fixtures import generate_fixture
from matchday.core.seeding import apply_seed, load_seed_yaml
from matchday.core.standings import get_standings
from matchday.db.engine import create_engine, create_tables, get_session
from matchday.db.models import CategoryRow, TournamentRow
from matchday.db.repository import Repository

DEMO_DB = os.environ.get("DATABASE_URL", "sqlite+aiosqlite:///demo_matchday.db")
DEFAULT_SEED = Path(__file__).resolve().parent.parent / "data" / "demo_tournament.yaml"


async def _first_tournament(repo: Repository) -> TournamentRow | None:
    result = await repo.session.execute(
        select(TournamentRow).order_by(TournamentRow.created_at).limit(1)
    )
    return result.scalar_one_or_none()


async def _categories(repo: Repository) -> list[CategoryRow]:
    result = await repo.session.execute(select(CategoryRow).order_by(CategoryRow.name))
    return list(result.scalars().all())


async def seed(path: Path) -> None:
    """Create the demo tournament from a YAML seed."""
    engine = create_engine(DEMO_DB)
    await create_tables(engine)

    async with get_session(engine) as session:
        repo = Repository(session)
        created = await apply_seed(repo, load_seed_yaml(path))
        print(f"Tournament seeded: {created.tournament_id}")
        for name, category_id in created.categories.items():
            print(f"  category {name}: {category_id}")
        print(f"  {len(created.teams)} teams")

    await engine.dispose()


async def generate(mode: str) -> None:
    """Generate fixtures for every category of the demo tournament."""
    engine = create_engine(DEMO_DB)
    settings = Settings()
    async with get_session(engine) as session:
        repo = Repository(session)
        tournament = await _first_tournament(repo)
        if not tournament:
            print("No tournament found. Run 'seed' first.")
            return

        for category in await _categories(repo):
            if len(await repo.get_teams(tournament.id, category.id)) < 2:
                continue
            summary = await generate_fixture(
                repo, tournament.id, category.id, mode, settings=settings
            )
            print(
                f"{category.name}: {summary.matches_created} matches "
                f"({summary.scheduled} scheduled, {summary.postponed} postponed, "
                f"{summary.pending} pending)"
            )

    await engine.dispose()


async def status() -> None:
    """Print the calendar and standings of every category."""
    engine = create_engine(DEMO_DB)
    async with get_session(engine) as session:
        repo = Repository(session)
        tournament = await _first_tournament(repo)
        if not tournament:
            print("No tournament found.")
            return

        print(f"Tournament: {tournament.name} ({tournament.status})")
        for category in await _categories(repo):
            teams = await repo.get_teams(tournament.id, category.id, active_only=False)
            names = {t.id: t.name for t in teams}
            print(f"\n== {category.name} ==")
            for m in await repo.get_matches(tournament.id, category.id):
                when = m.starts_at.strftime("%a %Y-%m-%d %H:%M") if m.starts_at else "-"
                home = names.get(m.home_team_id or "", "TBD")
                away = names.get(m.away_team_id or "", "TBD")
                print(f"  R{m.round_number} {when:<22} {home:<24} vs {away:<24} {m.status}")

            lines = await get_standings(repo, tournament.id, category.id)
            if lines:
                print(f"  {'#':>2} {'Team':<24} {'P':>3} {'W':>3} {'D':>3} {'L':>3} {'GD':>4} {'Pts':>4}")
                for s in lines:
                    print(
                        f"  {s.position:>2} {s.team_name:<24} {s.played:>3} {s.wins:>3} "
                        f"{s.draws:>3} {s.losses:>3} {s.goal_difference:>4} {s.points:>4}"
                    )

    await engine.dispose()


def main():
    if len(sys.argv) < 2:
        print(__doc__)
        return

    cmd = sys.argv[1]
    if cmd == "seed":
        path = Path(sys.argv[2]) if len(sys.argv) > 2 else DEFAULT_SEED
        asyncio.run(seed(path))
    elif cmd == "generate":
        mode = sys.argv[2] if len(sys.argv) > 2 else "round_robin"
        asyncio.run(generate(mode))
    elif cmd == "status":
        asyncio.run(status())
    else:
        print(f"Unknown command: {cmd}")
        print(__doc__)


if __name__ == "__main__":
    main()
