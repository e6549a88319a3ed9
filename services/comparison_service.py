"""
Host-facing comparison workflow: offer a pair, record the verdict.
"""

import logging
from typing import Any

from domain.errors import UnknownPositionError
from domain.models.player import Player
from rating_system import RatingChange
from services import error_codes
from services.pair_selection_service import PairSelector
from services.rating_service import RatingStore
from services.result import Result

logger = logging.getLogger("squad_balancer.services.comparison")


class ComparisonService:
    """Wraps RatingStore and PairSelector, reporting failures as Result values."""

    def __init__(self, store: RatingStore, selector: PairSelector | None = None):
        self.store = store
        self.selector = selector or PairSelector(store)

    def _check_pair(self, a_id: Any, b_id: Any) -> Result | None:
        if a_id == b_id:
            return Result.fail("A player cannot be compared with themselves", code=error_codes.SELF_COMPARISON)
        for player_id in (a_id, b_id):
            if player_id not in self.store:
                return Result.fail(f"Player {player_id!r} not found", code=error_codes.PLAYER_NOT_FOUND)
        return None

    def next_comparison(self, position: str) -> Result[tuple[Player, Player] | None]:
        """
        Next pair to compare.

        A successful result with a None value means every pair at the position
        has been compared.
        """
        if len(self.store.players_for_position(position)) < 2:
            return Result.fail(
                f"Need at least two players at {position} to compare",
                code=error_codes.INSUFFICIENT_PLAYERS,
            )
        return Result.ok(self.selector.next_pair(position))

    def record_result(self, winner_id: Any, loser_id: Any, position: str) -> Result[RatingChange]:
        failure = self._check_pair(winner_id, loser_id)
        if failure is not None:
            return failure
        try:
            return Result.ok(self.store.apply_result(winner_id, loser_id, position))
        except UnknownPositionError as exc:
            logger.error(f"Rating update rejected: {exc}")
            return Result.fail(str(exc), code=error_codes.UNKNOWN_POSITION)
        except ValueError as exc:
            return Result.fail(str(exc), code=error_codes.VALIDATION_ERROR)

    def record_draw(self, a_id: Any, b_id: Any, position: str) -> Result[RatingChange]:
        failure = self._check_pair(a_id, b_id)
        if failure is not None:
            return failure
        try:
            return Result.ok(self.store.apply_draw(a_id, b_id, position))
        except UnknownPositionError as exc:
            logger.error(f"Draw rejected: {exc}")
            return Result.fail(str(exc), code=error_codes.UNKNOWN_POSITION)
        except ValueError as exc:
            return Result.fail(str(exc), code=error_codes.VALIDATION_ERROR)

    def reset_player(self, player_id: Any, positions: list[str] | None = None) -> Result[None]:
        if player_id not in self.store:
            return Result.fail(f"Player {player_id!r} not found", code=error_codes.PLAYER_NOT_FOUND)
        try:
            self.store.reset(player_id, positions)
        except UnknownPositionError as exc:
            return Result.fail(str(exc), code=error_codes.UNKNOWN_POSITION)
        return Result.ok()

    def add_player(self, data: dict | Player) -> Result[Player]:
        try:
            return Result.ok(self.store.add_player(data))
        except UnknownPositionError as exc:
            return Result.fail(str(exc), code=error_codes.UNKNOWN_POSITION)
        except ValueError as exc:
            code = (
                error_codes.PLAYER_ALREADY_EXISTS
                if "already on the roster" in str(exc)
                else error_codes.VALIDATION_ERROR
            )
            return Result.fail(str(exc), code=code)
