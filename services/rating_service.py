"""
Per-position rating state for a roster (RatingStore).
"""

import logging
from collections.abc import Iterable
from typing import Any

from config import DEFAULT_RATING
from domain.models.activity import ActivityConfig
from domain.models.player import Player
from rating_system import EloRatingSystem, RatingChange

logger = logging.getLogger("squad_balancer.services.rating")


class RatingStore:
    """
    Owns the roster and every player's per-position rating state.

    Rating fields only change through ``apply_result``, ``apply_draw`` and
    ``reset``. Host-facing getters return snapshots; ``players_for_position``
    and ``position_groups`` hand out the live records for read-only use by the
    pairing and optimisation code.
    """

    def __init__(
        self,
        players: Iterable[Player | dict] = (),
        activity: ActivityConfig | None = None,
        rating_system: EloRatingSystem | None = None,
    ):
        self.activity = activity
        self.rating_system = rating_system or EloRatingSystem()
        self._players: dict[Any, Player] = {}
        for player in players:
            self.add_player(player)

    # ------------------------------------------------------------------
    # Roster
    # ------------------------------------------------------------------

    def add_player(self, player: Player | dict) -> Player:
        if isinstance(player, dict):
            player = Player.from_dict(player, self.activity)
        else:
            if self.activity is not None:
                for position in player.positions:
                    self.activity.require(position)
            player = player.snapshot()
        if player.id in self._players:
            raise ValueError(f"Player {player.id!r} is already on the roster")
        self._players[player.id] = player
        return player.snapshot()

    def remove_player(self, player_id: Any) -> Player:
        """Remove a player and erase them from everyone else's comparison history."""
        player = self._require(player_id)
        del self._players[player_id]
        for other in self._players.values():
            for opponents in other.compared_with.values():
                opponents.discard(player_id)
        logger.info(f"Removed player {player.name} ({player_id})")
        return player

    def get_player(self, player_id: Any) -> Player | None:
        player = self._players.get(player_id)
        return player.snapshot() if player else None

    def players(self) -> list[Player]:
        return [player.snapshot() for player in self._players.values()]

    def players_for_position(self, position: str) -> list[Player]:
        return [p for p in self._players.values() if p.can_play(position)]

    def position_groups(self) -> dict[str, list[Player]]:
        """Players grouped by every position they declare, primary or not."""
        order = self.activity.position_order if self.activity else []
        groups: dict[str, list[Player]] = {position: [] for position in order}
        for player in self._players.values():
            for position in player.positions:
                groups.setdefault(position, []).append(player)
        return groups

    def __len__(self) -> int:
        return len(self._players)

    def __contains__(self, player_id: Any) -> bool:
        return player_id in self._players

    def _require(self, player_id: Any) -> Player:
        player = self._players.get(player_id)
        if player is None:
            raise ValueError(f"Player {player_id!r} not found")
        return player

    def _require_pair(self, a_id: Any, b_id: Any, position: str) -> tuple[Player, Player]:
        if a_id == b_id:
            raise ValueError("A player cannot be compared with themselves")
        if self.activity is not None:
            self.activity.require(position)
        a = self._require(a_id)
        b = self._require(b_id)
        a.require_position(position)
        b.require_position(position)
        return a, b

    # ------------------------------------------------------------------
    # Rating updates
    # ------------------------------------------------------------------

    @staticmethod
    def _record_comparison(a: Player, b: Player, position: str) -> None:
        a.comparisons[position] += 1
        b.comparisons[position] += 1
        a.compared_with[position].add(b.id)
        b.compared_with[position].add(a.id)

    def apply_result(self, winner_id: Any, loser_id: Any, position: str) -> RatingChange:
        """
        Record that the winner beat the loser at a position.

        Raises:
            ValueError: unknown player id or self-comparison
            UnknownPositionError: either player does not declare the position
        """
        winner, loser = self._require_pair(winner_id, loser_id, position)
        winner_old = winner.ratings[position]
        loser_old = loser.ratings[position]
        winner_expected = self.rating_system.expected_score(winner_old, loser_old)

        winner_new, loser_new = self.rating_system.rating_change(winner_old, loser_old)
        winner.ratings[position] = winner_new
        loser.ratings[position] = loser_new
        self._record_comparison(winner, loser, position)

        logger.debug(
            f"{position}: {winner.name} {winner_old:.0f}->{winner_new:.0f} beat "
            f"{loser.name} {loser_old:.0f}->{loser_new:.0f}"
        )
        return RatingChange(
            position=position,
            winner_id=winner_id,
            loser_id=loser_id,
            winner_old=winner_old,
            winner_new=winner_new,
            loser_old=loser_old,
            loser_new=loser_new,
            winner_expected=winner_expected,
            loser_expected=1.0 - winner_expected,
        )

    def apply_draw(self, a_id: Any, b_id: Any, position: str) -> RatingChange:
        """
        Record a draw: comparison coverage is updated, ratings do not move.

        A draw uses up the pairing but carries no ranking information.
        """
        a, b = self._require_pair(a_id, b_id, position)
        rating_a = a.ratings[position]
        rating_b = b.ratings[position]
        expected_a = self.rating_system.expected_score(rating_a, rating_b)
        self._record_comparison(a, b, position)
        logger.debug(f"{position}: draw between {a.name} and {b.name}")
        return RatingChange(
            position=position,
            winner_id=a_id,
            loser_id=b_id,
            winner_old=rating_a,
            winner_new=rating_a,
            loser_old=rating_b,
            loser_new=rating_b,
            winner_expected=expected_a,
            loser_expected=1.0 - expected_a,
            is_draw=True,
        )

    def reset(self, player_id: Any, positions: list[str] | None = None) -> None:
        """
        Reset a player's rating state at the given positions (all if omitted).

        Other players forget having faced this player at those positions.
        """
        player = self._require(player_id)
        targets = list(positions) if positions is not None else list(player.positions)
        for position in targets:
            player.require_position(position)

        for position in targets:
            player.ratings[position] = DEFAULT_RATING
            player.comparisons[position] = 0
            player.compared_with[position] = set()
            for other in self._players.values():
                if other.id != player_id and position in other.compared_with:
                    other.compared_with[position].discard(player_id)

        logger.info(f"Reset {player.name} at {', '.join(targets)}")

    # ------------------------------------------------------------------
    # Rankings and statistics
    # ------------------------------------------------------------------

    def rankings(self, position: str) -> list[dict]:
        """Players declaring a position, best rating first."""
        ranked = sorted(
            self.players_for_position(position),
            key=lambda p: p.ratings[position],
            reverse=True,
        )
        return [
            {
                "rank": index + 1,
                "id": p.id,
                "name": p.name,
                "rating": p.ratings[position],
                "comparisons": p.comparisons[position],
                "is_primary": p.is_primary(position),
            }
            for index, p in enumerate(ranked)
        ]

    def position_stats(self) -> dict[str, dict[str, int]]:
        """Per position: how many players have it as primary and how many can play it."""
        stats: dict[str, dict[str, int]] = {}
        for position, group in self.position_groups().items():
            stats[position] = {
                "primary": sum(1 for p in group if p.is_primary(position)),
                "can_play": len(group),
            }
        return stats

    def best_position(self, player_id: Any) -> dict:
        player = self._require(player_id)
        position = max(player.positions, key=lambda p: player.ratings[p])
        return {
            "position": position,
            "rating": player.ratings[position],
            "comparisons": player.comparisons[position],
        }

    def predict_match(self, a_id: Any, b_id: Any, position: str) -> dict:
        a, b = self._require_pair(a_id, b_id, position)
        return self.rating_system.predict_match(a.ratings[position], b.ratings[position])
