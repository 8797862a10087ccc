"""Single-elimination bracket planning.

Teams are seeded in insertion order (seed 1 is the first team). The bracket
size is the next power of two; the missing entrants are byes, which land
against the top seeds thanks to the standard bracket order (1 v N, then the
seeds that keep 1 and 2 apart until the final).

A first-round pairing against a bye produces no match: the seeded team is
placed straight into its second-round slot. Every later match is planned up
front and linked to the match its winner feeds.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Literal

SlotSide = Literal["home", "away"]


def bracket_size(team_count: int) -> int:
    """Smallest power of two that fits ``team_count`` entrants."""
    size = 1
    while size < team_count:
        size *= 2
    return size


def seed_order(size: int) -> list[int]:
    """Standard bracket seed order, e.g. 8 -> [1, 8, 4, 5, 2, 7, 3, 6]."""
    if size < 2 or size & (size - 1):
        msg = f"Bracket size must be a power of two >= 2, got {size}"
        raise ValueError(msg)
    order = [1, 2]
    while len(order) < size:
        total = len(order) * 2 + 1
        order = [s for seed in order for s in (seed, total - seed)]
    return order


@dataclass
class BracketMatch:
    """One planned knockout match."""

    round_number: int
    position: int
    home_team_id: str | None = None
    away_team_id: str | None = None
    next_position: int | None = None
    next_slot: SlotSide | None = None

    @property
    def is_ready(self) -> bool:
        return self.home_team_id is not None and self.away_team_id is not None

    def place(self, side: SlotSide, team_id: str | None) -> None:
        if side == "home":
            self.home_team_id = team_id
        else:
            self.away_team_id = team_id


@dataclass
class BracketPlan:
    """All matches of a bracket, indexed by (round_number, position)."""

    size: int
    rounds: int
    matches: dict[tuple[int, int], BracketMatch] = field(default_factory=dict)
    byes: dict[str, int] = field(default_factory=dict)

    def in_round(self, round_number: int) -> list[BracketMatch]:
        return sorted(
            (m for (r, _), m in self.matches.items() if r == round_number),
            key=lambda m: m.position,
        )

    def ordered(self) -> list[BracketMatch]:
        return [m for r in range(1, self.rounds + 1) for m in self.in_round(r)]


def feed_target(position: int) -> tuple[int, SlotSide]:
    """Where the winner of a match at ``position`` goes in the next round."""
    return position // 2, "home" if position % 2 == 0 else "away"


def plan_bracket(team_ids: Sequence[str]) -> BracketPlan:
    """Plan a single-elimination bracket.

    Returns a plan with ``len(team_ids) - 1`` matches. Round-one matches
    involving a bye are omitted and the seeded team is pre-placed in
    round two. ``byes`` maps those teams to their seed.

    Raises:
        ValueError: fewer than two teams, or duplicate ids.
    """
    teams = list(team_ids)
    if len(teams) < 2:
        msg = f"At least 2 teams are required for a knockout, got {len(teams)}"
        raise ValueError(msg)
    if len(set(teams)) != len(teams):
        raise ValueError("Team ids must be unique")

    size = bracket_size(len(teams))
    rounds = size.bit_length() - 1
    plan = BracketPlan(size=size, rounds=rounds)

    for round_number in range(1, rounds + 1):
        for position in range(size >> round_number):
            match = BracketMatch(round_number=round_number, position=position)
            if round_number < rounds:
                match.next_position, match.next_slot = feed_target(position)
            plan.matches[(round_number, position)] = match

    order = seed_order(size)
    for position in range(size // 2):
        home_seed, away_seed = order[2 * position], order[2 * position + 1]
        home = teams[home_seed - 1] if home_seed <= len(teams) else None
        away = teams[away_seed - 1] if away_seed <= len(teams) else None
        first = plan.matches[(1, position)]
        if home is not None and away is not None:
            first.home_team_id, first.away_team_id = home, away
            continue
        # Only one side can be a bye: byes are always fewer than half the bracket.
        advancing = home if home is not None else away
        seed = home_seed if home is not None else away_seed
        del plan.matches[(1, position)]
        next_position, side = feed_target(position)
        plan.matches[(2, next_position)].place(side, advancing)
        plan.byes[advancing] = seed

    return plan
