"""
Host-facing team building: validate a request, run the optimizer, cancel it.
"""

import logging
from collections.abc import Iterable

from domain.errors import (
    CompositionError,
    OptimizationCancelledError,
    OptimizationInProgressError,
    UnknownPositionError,
)
from domain.models.player import Player
from services import error_codes
from services.rating_service import RatingStore
from services.result import Result
from team_optimizer import OptimizationResult, TeamOptimizer
from utils.cancellation import CancellationToken

logger = logging.getLogger("squad_balancer.services.team_building")


class TeamBuildingService:
    """
    Wraps TeamOptimizer for the host UI.

    The roster defaults to the players held by the rating store, so ratings
    recorded through the comparison workflow feed straight into team building.
    """

    def __init__(self, store: RatingStore, optimizer: TeamOptimizer | None = None):
        self.store = store
        self.optimizer = optimizer or TeamOptimizer(activity=store.activity)
        self._token: CancellationToken | None = None

    def _roster(self, players: Iterable[Player | dict] | None) -> list:
        return list(players) if players is not None else self.store.players()

    @staticmethod
    def _composition_failure(exc: CompositionError) -> Result:
        return Result.fail(str(exc), code=error_codes.COMPOSITION_ERROR)

    def check_request(
        self,
        composition: dict[str, int],
        team_count: int,
        players: Iterable[Player | dict] | None = None,
    ) -> Result[dict]:
        """
        Validate a request without searching.

        Returns:
            Result.ok(validation dict with is_valid, errors, warnings)
            Result.fail(message, code) when the roster cannot fill the composition
        """
        try:
            return Result.ok(
                self.optimizer.check_request(composition, team_count, self._roster(players))
            )
        except CompositionError as exc:
            return self._composition_failure(exc)
        except UnknownPositionError as exc:
            return Result.fail(str(exc), code=error_codes.UNKNOWN_POSITION)
        except ValueError as exc:
            return Result.fail(str(exc), code=error_codes.VALIDATION_ERROR)

    async def build_teams(
        self,
        composition: dict[str, int],
        team_count: int,
        players: Iterable[Player | dict] | None = None,
    ) -> Result[OptimizationResult]:
        """
        Run a full optimisation.

        Only one run per service is allowed at a time; ``cancel()`` stops the
        current run at its next suspension point.
        """
        if self._token is not None:
            return Result.fail(
                "Team building already in progress", code=error_codes.OPTIMIZATION_IN_PROGRESS
            )
        token = CancellationToken()
        self._token = token
        try:
            result = await self.optimizer.optimize(
                composition, team_count, self._roster(players), token
            )
            return Result.ok(result)
        except CompositionError as exc:
            return self._composition_failure(exc)
        except UnknownPositionError as exc:
            return Result.fail(str(exc), code=error_codes.UNKNOWN_POSITION)
        except OptimizationInProgressError as exc:
            return Result.fail(str(exc), code=error_codes.OPTIMIZATION_IN_PROGRESS)
        except OptimizationCancelledError as exc:
            logger.warning(f"Team building cancelled: {exc}")
            return Result.fail(str(exc), code=error_codes.OPTIMIZATION_CANCELLED)
        except ValueError as exc:
            return Result.fail(str(exc), code=error_codes.VALIDATION_ERROR)
        finally:
            self._token = None

    @property
    def is_running(self) -> bool:
        return self._token is not None

    def cancel(self, reason: str | None = None) -> Result[None]:
        if self._token is None:
            return Result.fail("No team building run to cancel", code=error_codes.STATE_ERROR)
        self._token.cancel(reason)
        return Result.ok()
