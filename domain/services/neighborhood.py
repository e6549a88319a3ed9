"""
Randomized perturbation moves over a candidate solution.

Every move exchanges players that hold the same assigned position, so the
per-team headcount and the declared-position invariant survive any sequence
of moves. Moves mutate the candidate in place and return False when the
candidate offers nothing to move.
"""

import random

from domain.models.team import Candidate, TeamSlot

SINGLE_SWAP_WEIGHT = 0.6
DOUBLE_SWAP_WEIGHT = 0.3  # remaining 0.1 goes to the three-way rotation


def _teams_holding(candidate: Candidate, position: str, minimum: int = 1) -> list[int]:
    return [
        i for i, team in enumerate(candidate.teams) if team.count_at(position) >= minimum
    ]


def _positions_with_teams(candidate: Candidate, team_count: int, minimum: int = 1) -> list[str]:
    positions = []
    for team in candidate.teams:
        for slot in team:
            if slot.assigned_position not in positions:
                positions.append(slot.assigned_position)
    return [p for p in positions if len(_teams_holding(candidate, p, minimum)) >= team_count]


def single_swap(candidate: Candidate, rng: random.Random) -> bool:
    """Swap one player at a random position between two random teams."""
    positions = _positions_with_teams(candidate, 2)
    if not positions:
        return False
    position = rng.choice(positions)
    team_a, team_b = rng.sample(_teams_holding(candidate, position), 2)
    index_a = rng.choice(candidate.teams[team_a].indices_at(position))
    index_b = rng.choice(candidate.teams[team_b].indices_at(position))
    candidate.swap(team_a, index_a, team_b, index_b)
    return True


def double_swap(candidate: Candidate, rng: random.Random) -> bool:
    """Swap two same-position players between two teams that each hold at least two."""
    positions = _positions_with_teams(candidate, 2, minimum=2)
    if not positions:
        return False
    position = rng.choice(positions)
    team_a, team_b = rng.sample(_teams_holding(candidate, position, minimum=2), 2)
    indices_a = rng.sample(candidate.teams[team_a].indices_at(position), 2)
    indices_b = rng.sample(candidate.teams[team_b].indices_at(position), 2)
    for index_a, index_b in zip(indices_a, indices_b):
        candidate.swap(team_a, index_a, team_b, index_b)
    return True


def rotate_three(candidate: Candidate, rng: random.Random) -> bool:
    """Rotate one player at a position across three teams (A -> B -> C -> A)."""
    positions = _positions_with_teams(candidate, 3)
    if not positions:
        return False
    position = rng.choice(positions)
    chosen = rng.sample(_teams_holding(candidate, position), 3)
    picks = [(t, rng.choice(candidate.teams[t].indices_at(position))) for t in chosen]
    players = [candidate.teams[t].slots[i].player for t, i in picks]
    for offset, (team_index, slot_index) in enumerate(picks):
        incoming = players[offset - 1]
        candidate.set_slot(team_index, slot_index, TeamSlot(incoming, position))
    return True


def random_neighbor(candidate: Candidate, rng: random.Random) -> bool:
    """
    Apply one weighted random move: single swap 60%, double swap 30%,
    three-way rotation 10%. A move that does not apply falls back to a
    single swap.
    """
    roll = rng.random()
    if roll < SINGLE_SWAP_WEIGHT:
        return single_swap(candidate, rng)
    if roll < SINGLE_SWAP_WEIGHT + DOUBLE_SWAP_WEIGHT:
        moved = double_swap(candidate, rng)
    else:
        moved = rotate_three(candidate, rng)
    return moved or single_swap(candidate, rng)


def mutate(candidate: Candidate, rng: random.Random) -> bool:
    """Apply one to three single swaps."""
    moved = False
    for _ in range(rng.randint(1, 3)):
        moved = single_swap(candidate, rng) or moved
    return moved
