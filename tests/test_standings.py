"""Tests for the standings engine: scoring, ranking, incremental and rebuild."""

import random

import pytest

from matchday.core.errors import NotFoundError
from matchday.core.standings import (
    apply_result,
    get_standings,
    rank,
    recalculate_standings,
    update_from_match,
)
from matchday.db.models import MatchRow
from matchday.db.repository import Repository
from matchday.models.standing import ScoringRule, StandingLine


def _snapshot(rows) -> list[tuple]:
    return sorted(
        (
            r.team_id,
            r.points,
            r.played,
            r.wins,
            r.draws,
            r.losses,
            r.goals_for,
            r.goals_against,
        )
        for r in rows
    )


async def _match(repo: Repository, scope, home: str, away: str, index: int = 0) -> MatchRow:
    match = MatchRow(
        tournament_id=scope[0],
        category_id=scope[1],
        home_team_id=home,
        away_team_id=away,
        round_number=1,
        matchup_index=index,
    )
    await repo.add_matches([match])
    return match


class TestApplyResult:
    def test_home_win(self):
        home, away = StandingLine(team_id="h"), StandingLine(team_id="a")
        apply_result(home, away, 3, 1)
        assert (home.played, home.wins, home.draws, home.losses) == (1, 1, 0, 0)
        assert (home.points, home.goals_for, home.goals_against) == (3, 3, 1)
        assert (away.played, away.wins, away.draws, away.losses) == (1, 0, 0, 1)
        assert (away.points, away.goals_for, away.goals_against) == (0, 1, 3)

    def test_draw(self):
        home, away = StandingLine(team_id="h"), StandingLine(team_id="a")
        apply_result(home, away, 2, 2)
        for line in (home, away):
            assert (line.played, line.draws, line.points) == (1, 1, 1)

    def test_away_win(self):
        home, away = StandingLine(team_id="h"), StandingLine(team_id="a")
        apply_result(home, away, 0, 2)
        assert away.wins == 1
        assert home.losses == 1

    def test_custom_scoring(self):
        home, away = StandingLine(team_id="h"), StandingLine(team_id="a")
        apply_result(home, away, 1, 0, ScoringRule(win=2, draw=1, loss=0))
        assert home.points == 2

    def test_negative_score_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            apply_result(StandingLine(team_id="h"), StandingLine(team_id="a"), -1, 0)

    def test_invariants_hold_for_random_histories(self):
        rng = random.Random(7)
        teams = ["a", "b", "c", "d", "e"]
        lines = {t: StandingLine(team_id=t) for t in teams}
        for _ in range(60):
            home, away = rng.sample(teams, 2)
            apply_result(lines[home], lines[away], rng.randint(0, 5), rng.randint(0, 5))
        for line in lines.values():
            assert line.played == line.wins + line.draws + line.losses
            assert line.points == 3 * line.wins + line.draws
        assert sum(line.goals_for for line in lines.values()) == sum(
            line.goals_against for line in lines.values()
        )


class TestRanking:
    def test_tiebreak_order(self):
        lines = [
            StandingLine(team_id="1", team_name="Zeta", points=6, goals_for=5, goals_against=2),
            StandingLine(team_id="2", team_name="Alpha", points=6, goals_for=5, goals_against=2),
            StandingLine(team_id="3", team_name="Beta", points=6, goals_for=7, goals_against=4),
            StandingLine(team_id="4", team_name="Gamma", points=6, goals_for=4, goals_against=0),
            StandingLine(team_id="5", team_name="Delta", points=7),
        ]
        ranked = rank(lines)
        assert [line.team_name for line in ranked] == ["Delta", "Gamma", "Beta", "Alpha", "Zeta"]
        assert [line.position for line in ranked] == [1, 2, 3, 4, 5]

    def test_as_dict_includes_goal_difference(self):
        line = StandingLine(team_id="x", goals_for=4, goals_against=6)
        assert line.as_dict()["goal_difference"] == -2


class TestPersistentStandings:
    async def test_first_result_creates_rows(self, repo: Repository, scope, make_team):
        home, away = await make_team("Home"), await make_team("Away")
        match = await _match(repo, scope, home, away)
        await update_from_match(repo, match, 3, 1)

        h = await repo.get_standing(scope[0], scope[1], home)
        a = await repo.get_standing(scope[0], scope[1], away)
        assert (h.played, h.wins, h.draws, h.losses, h.points) == (1, 1, 0, 0, 3)
        assert (h.goals_for, h.goals_against) == (3, 1)
        assert (a.played, a.wins, a.draws, a.losses, a.points) == (1, 0, 0, 1, 0)
        assert (a.goals_for, a.goals_against) == (1, 3)

    async def test_draw_scenario(self, repo: Repository, scope, make_team):
        home, away = await make_team("Home"), await make_team("Away")
        match = await _match(repo, scope, home, away)
        await update_from_match(repo, match, 2, 2)
        for team in (home, away):
            row = await repo.get_standing(scope[0], scope[1], team)
            assert (row.played, row.draws, row.points) == (1, 1, 1)

    async def test_undecided_match_rejected(self, repo: Repository, scope, make_team):
        home = await make_team("Home")
        match = await _match(repo, scope, home, None)
        with pytest.raises(ValueError, match="participants"):
            await update_from_match(repo, match, 1, 0)

    async def test_rebuild_is_idempotent(self, repo: Repository, scope, make_team):
        teams = [await make_team(name) for name in ("A", "B", "C")]
        scores = [(teams[0], teams[1], 2, 0), (teams[1], teams[2], 1, 1), (teams[2], teams[0], 3, 2)]
        replay = []
        for index, (home, away, hs, as_) in enumerate(scores):
            match = await _match(repo, scope, home, away, index)
            await update_from_match(repo, match, hs, as_)
            replay.append((match, hs, as_))
        incremental = _snapshot(await repo.get_standings(*scope))

        await recalculate_standings(repo, *scope, results=replay)
        first = _snapshot(await repo.get_standings(*scope))
        await recalculate_standings(repo, *scope, results=replay)
        second = _snapshot(await repo.get_standings(*scope))

        assert first == second == incremental

    async def test_failed_rebuild_keeps_previous_table(self, repo: Repository, scope, make_team):
        home, away = await make_team("Home"), await make_team("Away")
        played = await _match(repo, scope, home, away)
        await update_from_match(repo, played, 3, 1)
        before = _snapshot(await repo.get_standings(*scope))

        undecided = await _match(repo, scope, home, None, index=1)
        with pytest.raises(ValueError, match="participants"):
            await recalculate_standings(repo, *scope, results=[(played, 2, 2), (undecided, 1, 0)])

        rows = await repo.get_standings(*scope)
        assert _snapshot(rows) == before
        assert sorted((r.played, r.points) for r in rows) == [(1, 0), (1, 3)]

    async def test_rebuild_with_no_results_clears_scope(self, repo: Repository, scope, make_team):
        home, away = await make_team("Home"), await make_team("Away")
        match = await _match(repo, scope, home, away)
        await update_from_match(repo, match, 1, 0)

        replayed = await recalculate_standings(repo, *scope, results=[])
        assert replayed == 0
        assert await repo.get_standings(*scope) == []

    async def test_get_standings_ranks_with_names(self, repo: Repository, scope, make_team):
        home, away = await make_team("Home"), await make_team("Away")
        match = await _match(repo, scope, home, away)
        await update_from_match(repo, match, 0, 1)

        lines = await get_standings(repo, *scope)
        assert [(line.position, line.team_name, line.points) for line in lines] == [
            (1, "Away", 3),
            (2, "Home", 0),
        ]

    async def test_get_standings_unknown_scope(self, repo: Repository, scope):
        with pytest.raises(NotFoundError):
            await get_standings(repo, "nope", scope[1])
        with pytest.raises(NotFoundError):
            await get_standings(repo, scope[0], "nope")

    async def test_standings_isolated_per_category(self, repo: Repository, scope, make_team):
        other = await repo.create_category("Sub-12")
        home, away = await make_team("Home"), await make_team("Away")
        await update_from_match(repo, await _match(repo, scope, home, away), 1, 0)
        assert await repo.get_standings(scope[0], other.id) == []
