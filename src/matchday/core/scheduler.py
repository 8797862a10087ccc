"""Round-robin pairing generation.

Every team plays every other team exactly once. Uses the circle method
(polygon scheduling): with N teams (padded to even with a bye) there are
N-1 rounds of N/2 pairings. Position 0 stays fixed and the remaining
positions rotate by one after each round.

Terminology:
  - **round**: a set of simultaneous pairings where no team appears twice.
    With 4 teams a round has 2 pairings and there are 3 rounds.
  - **bye**: placeholder used when the team count is odd; whoever is paired
    with it sits the round out.

The rotation works on an index permutation over an immutable tuple of team
ids, so the caller's list is never mutated between rounds.
"""

from __future__ import annotations

from collections.abc import Sequence

from matchday.models.fixture import Pairing

BYE = -1


def rotate(order: tuple[int, ...]) -> tuple[int, ...]:
    """Return the next circle-method permutation: hold the first, rotate the rest right."""
    if len(order) <= 2:
        return order
    return (order[0], order[-1], *order[1:-1])


def _padded_order(team_count: int) -> tuple[int, ...]:
    order = tuple(range(team_count))
    if team_count % 2 == 1:
        order = (*order, BYE)
    return order


def generate_pairings(team_ids: Sequence[str]) -> list[list[Pairing]]:
    """Generate a single round-robin using the circle method.

    Args:
        team_ids: Ordered team ids. Order decides home/away and round layout.

    Returns:
        One list of pairings per round (rounds numbered from 1). Pairings
        against the bye are dropped, so with an odd count each round has one
        team fewer than the padded size.

    Raises:
        ValueError: fewer than two teams, or duplicate ids.
    """
    teams = tuple(team_ids)
    if len(teams) < 2:
        msg = f"At least 2 teams are required for a round-robin, got {len(teams)}"
        raise ValueError(msg)
    if len(set(teams)) != len(teams):
        raise ValueError("Team ids must be unique")

    order = _padded_order(len(teams))
    n = len(order)
    rounds: list[list[Pairing]] = []

    for round_idx in range(n - 1):
        pairings: list[Pairing] = []
        for i in range(n // 2):
            home = order[i]
            away = order[n - 1 - i]
            if home == BYE or away == BYE:
                continue
            pairings.append(
                Pairing(
                    round_number=round_idx + 1,
                    matchup_index=len(pairings),
                    home_team_id=teams[home],
                    away_team_id=teams[away],
                )
            )
        rounds.append(pairings)
        order = rotate(order)

    return rounds
