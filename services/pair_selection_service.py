"""
Comparison pair selection (PairSelector).
"""

import itertools
import logging
import random

from domain.models.player import Player
from services.rating_service import RatingStore

logger = logging.getLogger("squad_balancer.services.pair_selection")


class PairSelector:
    """
    Chooses the next pair to compare at a position.

    Least-compared players are paired first so coverage stays even. A pair is
    never offered twice; ``next_pair`` returns None once every pair at the
    position has been compared (or fewer than two players declare it).
    """

    def __init__(self, store: RatingStore, rng: random.Random | None = None):
        self.store = store
        self.rng = rng or random.Random()

    @staticmethod
    def _fresh(a: Player, b: Player, position: str) -> bool:
        return not a.has_compared(b.id, position) and not b.has_compared(a.id, position)

    def _find_pair(self, position: str) -> tuple[Player, Player] | None:
        candidates = self.store.players_for_position(position)
        if len(candidates) < 2:
            return None

        fewest = min(p.comparisons[position] for p in candidates)
        least_compared = [p for p in candidates if p.comparisons[position] == fewest]
        self.rng.shuffle(least_compared)
        for a, b in itertools.combinations(least_compared, 2):
            if self._fresh(a, b, position):
                return a, b

        by_count = sorted(candidates, key=lambda p: p.comparisons[position])
        for a, b in itertools.combinations(by_count, 2):
            if self._fresh(a, b, position):
                return a, b
        return None

    def next_pair(self, position: str) -> tuple[Player, Player] | None:
        """Next pair as player snapshots, or None when the position is exhausted."""
        pair = self._find_pair(position)
        if pair is None:
            logger.debug(f"No comparison pair left at {position}")
            return None
        a, b = pair
        return a.snapshot(), b.snapshot()

    def progress(self, position: str) -> dict:
        """Compared pairs vs total possible pairs at a position."""
        players = self.store.players_for_position(position)
        total = len(players) * (len(players) - 1) // 2
        compared = sum(
            1 for a, b in itertools.combinations(players, 2)
            if not self._fresh(a, b, position)
        )
        return {
            "compared_pairs": compared,
            "total_pairs": total,
            "fraction": compared / total if total else 1.0,
        }

    def status(self, position: str) -> dict:
        """Whether a comparison can be offered at a position, and why not if it cannot."""
        players = self.store.players_for_position(position)
        if len(players) < 2:
            return {
                "can_compare": False,
                "reason": "insufficient_players",
                "player_count": len(players),
                "all_pairs_compared": False,
                "next_pair": None,
            }

        pair = self.next_pair(position)
        return {
            "can_compare": pair is not None,
            "reason": None if pair is not None else "all_pairs_compared",
            "player_count": len(players),
            "all_pairs_compared": pair is None,
            "next_pair": pair,
        }
