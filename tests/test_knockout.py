"""Tests for single-elimination bracket planning."""

import pytest

from matchday.core.knockout import bracket_size, feed_target, plan_bracket, seed_order


def _teams(n: int) -> list[str]:
    return [f"s{i}" for i in range(1, n + 1)]


class TestSeedOrder:
    def test_standard_orders(self):
        assert seed_order(2) == [1, 2]
        assert seed_order(4) == [1, 4, 2, 3]
        assert seed_order(8) == [1, 8, 4, 5, 2, 7, 3, 6]

    def test_top_seeds_meet_only_in_final(self):
        order = seed_order(16)
        half = len(order) // 2
        assert 1 in order[:half]
        assert 2 in order[half:]

    @pytest.mark.parametrize("size", [0, 1, 3, 6])
    def test_invalid_size(self, size: int):
        with pytest.raises(ValueError):
            seed_order(size)

    def test_bracket_size(self):
        assert [bracket_size(n) for n in (2, 3, 4, 5, 8, 9)] == [2, 4, 4, 8, 8, 16]


class TestPlanBracket:
    @pytest.mark.parametrize("n", range(2, 13))
    def test_one_match_fewer_than_teams(self, n: int):
        plan = plan_bracket(_teams(n))
        assert len(plan.matches) == n - 1

    def test_power_of_two_has_no_byes(self):
        plan = plan_bracket(_teams(8))
        assert plan.byes == {}
        first = plan.in_round(1)
        assert [(m.home_team_id, m.away_team_id) for m in first] == [
            ("s1", "s8"),
            ("s4", "s5"),
            ("s2", "s7"),
            ("s3", "s6"),
        ]
        assert all(not m.is_ready for m in plan.in_round(2))

    def test_byes_go_to_top_seeds(self):
        plan = plan_bracket(_teams(5))
        assert plan.byes == {"s1": 1, "s2": 2, "s3": 3}
        assert [(m.home_team_id, m.away_team_id) for m in plan.in_round(1)] == [("s4", "s5")]
        second = plan.in_round(2)
        assert (second[0].home_team_id, second[0].away_team_id) == ("s1", None)
        assert (second[1].home_team_id, second[1].away_team_id) == ("s2", "s3")
        assert second[1].is_ready

    def test_links_point_to_next_round(self):
        plan = plan_bracket(_teams(4))
        semi_a, semi_b = plan.in_round(1)
        (final,) = plan.in_round(2)
        assert (semi_a.next_position, semi_a.next_slot) == (final.position, "home")
        assert (semi_b.next_position, semi_b.next_slot) == (final.position, "away")
        assert final.next_position is None
        assert final.next_slot is None

    def test_two_teams_is_a_final(self):
        plan = plan_bracket(["a", "b"])
        assert plan.rounds == 1
        (final,) = plan.ordered()
        assert final.is_ready
        assert final.next_position is None

    def test_ordered_walks_rounds(self):
        plan = plan_bracket(_teams(6))
        rounds = [m.round_number for m in plan.ordered()]
        assert rounds == sorted(rounds)

    def test_feed_target(self):
        assert feed_target(0) == (0, "home")
        assert feed_target(1) == (0, "away")
        assert feed_target(5) == (2, "away")

    def test_validation(self):
        with pytest.raises(ValueError):
            plan_bracket(["a"])
        with pytest.raises(ValueError):
            plan_bracket(["a", "a"])
