"""
Domain exceptions.

Validation problems are ValueErrors so callers that already guard domain input
with ``except ValueError`` keep working.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PositionShortage:
    """One position that cannot be filled for the requested team count."""

    position: str
    needed: int
    available: int
    message: str

    @property
    def shortage(self) -> int:
        return max(0, self.needed - self.available)

    def to_dict(self) -> dict:
        return {
            "position": self.position,
            "needed": self.needed,
            "available": self.available,
            "shortage": self.shortage,
            "message": self.message,
        }


class CompositionError(ValueError):
    """
    Requested headcounts exceed what the roster can supply.

    Carries every shortage found, never only the first one, plus any
    non-positional errors (total headcount, roster coverage) and the warnings
    collected during validation.
    """

    def __init__(
        self,
        shortages: list[PositionShortage],
        errors: list[str] | None = None,
        warnings: list[str] | None = None,
    ):
        self.shortages = list(shortages)
        self.errors = list(errors or [])
        self.warnings = list(warnings or [])
        messages = [s.message for s in self.shortages] + self.errors
        super().__init__("Cannot create teams: " + "; ".join(messages))

    def shortage_for(self, position: str) -> PositionShortage | None:
        for shortage in self.shortages:
            if shortage.position == position:
                return shortage
        return None


class UnknownPositionError(ValueError):
    """A position code is not declared by the player (or by the activity)."""

    def __init__(self, position: str, player_id: object | None = None):
        self.position = position
        self.player_id = player_id
        if player_id is None:
            message = f"Unknown position: {position!r}"
        else:
            message = f"Player {player_id!r} does not play position {position!r}"
        super().__init__(message)


class OptimizationCancelledError(RuntimeError):
    """Raised at a suspension point after the host cancelled the run."""


class OptimizationInProgressError(RuntimeError):
    """An optimizer instance was asked to run while already running."""
