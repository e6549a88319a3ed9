"""
Seed solution generation.

Each strategy first chooses which players fill which position (the pool) and
then distributes every pool across the teams. Pools are chosen with an
augmenting-path matching over position slots, so a strategy only changes who
is preferred, never whether all slots get filled.
"""

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass

from config import OPTIMIZER_SETTINGS
from domain.errors import CompositionError
from domain.models.player import Player
from domain.models.team import Candidate

logger = logging.getLogger("squad_balancer.seeder")

FLEXIBILITY_SINGLE_POSITION_FACTOR = 0.8


@dataclass
class Seed:
    """A named starting candidate."""

    strategy: str
    candidate: Candidate


def _try_place(
    player: Player,
    pools: dict[str, list[Player]],
    capacity: dict[str, int],
    visited: set[str],
) -> bool:
    for position in player.positions:
        if capacity.get(position, 0) <= 0 or position in visited:
            continue
        visited.add(position)
        pool = pools[position]
        if len(pool) < capacity[position]:
            pool.append(player)
            return True
        for index, occupant in enumerate(pool):
            # Bump the occupant to another of their positions if one has room
            if _try_place(occupant, pools, capacity, visited):
                pool[index] = player
                return True
    return False


def match_players_to_positions(
    players: list[Player], capacity: dict[str, int]
) -> dict[str, list[Player]]:
    """
    Assign players to position pools of the given capacities.

    Players first take their primary position in list order. The rest are
    then fitted with augmenting paths, which may move an already placed
    player to another declared position but never drop one. Returns the
    pools, which are full only if a complete assignment exists.
    """
    pools: dict[str, list[Player]] = {position: [] for position in capacity}
    remaining = sum(capacity.values())
    unplaced: list[Player] = []
    for player in players:
        primary = player.primary_position
        if len(pools.get(primary, ())) < capacity.get(primary, 0):
            pools[primary].append(player)
            remaining -= 1
        else:
            unplaced.append(player)

    for player in unplaced:
        if remaining == 0:
            break
        if _try_place(player, pools, capacity, set()):
            remaining -= 1
    return pools


class SolutionSeeder:
    """
    Produces structurally different starting candidates for the search engines.

    Strategies: primary-first, snake draft, balanced rating, flexible-first and
    ``random_seed_count`` random seeds. Every seed fills each team with exactly
    ``composition[P]`` players at every position P and uses each player once.
    """

    def __init__(self, rng: random.Random | None = None, random_seed_count: int | None = None):
        self.rng = rng or random.Random()
        self.random_seed_count = (
            random_seed_count
            if random_seed_count is not None
            else OPTIMIZER_SETTINGS["random_seed_count"]
        )

    def seed(
        self, players: list[Player], composition: dict[str, int], team_count: int
    ) -> list[Seed]:
        if team_count < 1:
            raise ValueError("team_count must be at least 1")

        strategies: list[tuple[str, Callable[..., Candidate]]] = [
            ("Primary First", self.primary_first),
            ("Snake Draft", self.snake_draft),
            ("Balanced Rating", self.balanced_rating),
            ("Flexible First", self.flexible_first),
        ]
        for n in range(1, self.random_seed_count + 1):
            strategies.append((f"Random {n}", self.random_assignment))

        seeds = []
        for name, strategy in strategies:
            candidate = strategy(players, composition, team_count)
            seeds.append(Seed(name, candidate))
            logger.debug(f"Seed '{name}': strengths {[round(s) for s in candidate.strengths()]}")
        return seeds

    # ------------------------------------------------------------------
    # Strategies
    # ------------------------------------------------------------------

    def primary_first(
        self, players: list[Player], composition: dict[str, int], team_count: int
    ) -> Candidate:
        """
        Snake-distribute each pool's primary players by rating, then give each
        secondary player to the weakest team that still has room.
        """
        pools = self._pools(self._primary_order(players, composition), composition, team_count)
        candidate = Candidate.empty(team_count)
        totals = [0.0] * team_count
        for position in self._scarcity_order(players, composition, team_count):
            pool = pools[position]
            primaries = sorted(
                (p for p in pool if p.is_primary(position)),
                key=lambda p: p.rating_for(position),
                reverse=True,
            )
            secondaries = sorted(
                (p for p in pool if not p.is_primary(position)),
                key=lambda p: p.rating_for(position),
                reverse=True,
            )
            self._snake(candidate, totals, primaries, position, composition[position])
            self._greedy(candidate, totals, secondaries, position, composition[position])
        return candidate

    def snake_draft(
        self, players: list[Player], composition: dict[str, int], team_count: int
    ) -> Candidate:
        pools = self._pools(self._primary_order(players, composition), composition, team_count)
        candidate = Candidate.empty(team_count)
        totals = [0.0] * team_count
        for position in self._scarcity_order(players, composition, team_count):
            ordered = self._sorted_for_position(pools[position], position)
            self._snake(candidate, totals, ordered, position, composition[position])
        return candidate

    def balanced_rating(
        self, players: list[Player], composition: dict[str, int], team_count: int
    ) -> Candidate:
        pools = self._pools(self._primary_order(players, composition), composition, team_count)
        candidate = Candidate.empty(team_count)
        totals = [0.0] * team_count
        for position in self._scarcity_order(players, composition, team_count):
            ordered = self._sorted_for_position(pools[position], position)
            self._greedy(candidate, totals, ordered, position, composition[position])
        return candidate

    def flexible_first(
        self, players: list[Player], composition: dict[str, int], team_count: int
    ) -> Candidate:
        """Rank by flexibility and deal players round-robin so versatile players spread out."""
        ranked = sorted(players, key=self.flexibility_score, reverse=True)
        pools = self._pools(ranked, composition, team_count)
        candidate = Candidate.empty(team_count)
        dealt = 0
        for position in self._scarcity_order(players, composition, team_count):
            for player in sorted(pools[position], key=self.flexibility_score, reverse=True):
                candidate.teams[dealt % team_count].add(player, position)
                dealt += 1
        return candidate

    def random_assignment(
        self, players: list[Player], composition: dict[str, int], team_count: int
    ) -> Candidate:
        shuffled = list(players)
        self.rng.shuffle(shuffled)
        pools = self._pools(shuffled, composition, team_count)
        candidate = Candidate.empty(team_count)
        for position in composition:
            pool = list(pools[position])
            self.rng.shuffle(pool)
            for index, player in enumerate(pool):
                candidate.teams[index % team_count].add(player, position)
        return candidate

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def flexibility_score(player: Player) -> float:
        rating = player.rating_for(player.primary_position)
        if player.is_multi_position():
            return len(player.positions) * rating
        return rating * FLEXIBILITY_SINGLE_POSITION_FACTOR

    @staticmethod
    def _primary_order(players: list[Player], composition: dict[str, int]) -> list[Player]:
        """Players whose primary position is needed first, each group by best needed rating."""

        def key(player: Player):
            needed = [p for p in player.positions if composition.get(p, 0) > 0]
            best = max((player.rating_for(p) for p in needed), default=0.0)
            return (0 if composition.get(player.primary_position, 0) > 0 else 1, -best)

        return sorted(players, key=key)

    @staticmethod
    def _sorted_for_position(pool: list[Player], position: str) -> list[Player]:
        return sorted(pool, key=lambda p: (not p.is_primary(position), -p.rating_for(position)))

    @staticmethod
    def _scarcity_order(
        players: list[Player], composition: dict[str, int], team_count: int
    ) -> list[str]:
        """Needed positions, scarcest (fewest available per needed slot) first."""
        needed = [p for p, count in composition.items() if count > 0]

        def ratio(position: str) -> float:
            available = sum(1 for player in players if player.can_play(position))
            return available / (composition[position] * team_count)

        return sorted(needed, key=ratio)

    @staticmethod
    def _pools(
        ordered: list[Player], composition: dict[str, int], team_count: int
    ) -> dict[str, list[Player]]:
        capacity = {p: count * team_count for p, count in composition.items() if count > 0}
        pools = match_players_to_positions(ordered, capacity)
        short = [p for p, cap in capacity.items() if len(pools[p]) < cap]
        if short:
            raise CompositionError(
                [], errors=[f"No complete assignment of players covers positions: {', '.join(short)}"]
            )
        for position in composition:
            pools.setdefault(position, [])
        return pools

    @staticmethod
    def _snake(
        candidate: Candidate,
        totals: list[float],
        ordered: list[Player],
        position: str,
        per_team: int,
    ) -> None:
        team_count = candidate.team_count
        forward = list(range(team_count))
        order: list[int] = []
        round_index = 0
        while len(order) < len(ordered) and round_index < per_team:
            teams = forward if round_index % 2 == 0 else forward[::-1]
            order.extend(t for t in teams if candidate.teams[t].count_at(position) < per_team)
            round_index += 1
        for player, team_index in zip(ordered, order):
            candidate.teams[team_index].add(player, position)
            totals[team_index] += player.rating_for(position)

    @staticmethod
    def _greedy(
        candidate: Candidate,
        totals: list[float],
        ordered: list[Player],
        position: str,
        per_team: int,
    ) -> None:
        for player in ordered:
            open_teams = [
                t for t in range(candidate.team_count)
                if candidate.teams[t].count_at(position) < per_team
            ]
            team_index = min(open_teams, key=lambda t: totals[t])
            candidate.teams[team_index].add(player, position)
            totals[team_index] += player.rating_for(position)
