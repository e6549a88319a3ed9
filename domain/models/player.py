"""
Player domain model.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Any

from config import DEFAULT_RATING, MAX_POSITIONS_PER_PLAYER
from domain.errors import UnknownPositionError
from domain.models.activity import ActivityConfig


@dataclass
class Player:
    """
    Represents a player on the roster.

    This is a pure domain model with no infrastructure dependencies.
    Rating state is kept per position; only positions the player declares
    carry a rating, a comparison count and a compared-with set.
    """

    id: Any
    name: str
    positions: list[str]
    ratings: dict[str, float] = field(default_factory=dict)
    comparisons: dict[str, int] = field(default_factory=dict)
    compared_with: dict[str, set] = field(default_factory=dict)  # position -> opponent ids

    def __post_init__(self):
        deduped: list[str] = []
        for position in self.positions:
            if position not in deduped:
                deduped.append(position)
        if not deduped:
            raise ValueError(f"Player {self.name!r} must declare at least one position")
        if len(deduped) > MAX_POSITIONS_PER_PLAYER:
            raise ValueError(
                f"Player {self.name!r} declares {len(deduped)} positions, "
                f"maximum is {MAX_POSITIONS_PER_PLAYER}"
            )
        self.positions = deduped

        # Keep rating state aligned with declared positions
        self.ratings = {p: float(self.ratings.get(p, DEFAULT_RATING)) for p in deduped}
        self.comparisons = {p: int(self.comparisons.get(p, 0)) for p in deduped}
        self.compared_with = {p: set(self.compared_with.get(p, ())) for p in deduped}

    @classmethod
    def from_dict(cls, data: dict[str, Any], activity: ActivityConfig | None = None) -> "Player":
        """
        Build a player from a plain record supplied by the roster collaborator.

        Accepts either a ``positions`` list or the legacy single ``position``
        field (treated as a one-element list). ``comparedWith`` / ``compared_with``
        may hold lists or sets. When an activity is given, every position code
        is validated against it.
        """
        if "id" not in data:
            raise ValueError("Player record needs an id")
        positions = data.get("positions")
        if not positions:
            legacy = data.get("position")
            positions = [legacy] if legacy else []
        positions = list(positions)

        if activity is not None:
            for position in positions:
                activity.require(position)

        compared_raw = data.get("compared_with", data.get("comparedWith")) or {}
        return cls(
            id=data["id"],
            name=data.get("name", str(data["id"])),
            positions=positions,
            ratings=dict(data.get("ratings") or {}),
            comparisons=dict(data.get("comparisons") or {}),
            compared_with={pos: set(ids) for pos, ids in compared_raw.items()},
        )

    def to_dict(self) -> dict[str, Any]:
        """Plain-data view for the host (compared-with sets become sorted lists)."""
        return {
            "id": self.id,
            "name": self.name,
            "positions": list(self.positions),
            "ratings": dict(self.ratings),
            "comparisons": dict(self.comparisons),
            "comparedWith": {
                pos: sorted(ids, key=str) for pos, ids in self.compared_with.items()
            },
        }

    @property
    def primary_position(self) -> str:
        return self.positions[0]

    def can_play(self, position: str) -> bool:
        return position in self.ratings

    def is_primary(self, position: str) -> bool:
        return self.positions[0] == position

    def is_multi_position(self) -> bool:
        return len(self.positions) > 1

    def rating_for(self, position: str) -> float:
        """Rating at a position, the default rating if the player does not declare it."""
        return self.ratings.get(position, DEFAULT_RATING)

    def require_position(self, position: str) -> None:
        if position not in self.ratings:
            raise UnknownPositionError(position, player_id=self.id)

    def has_compared(self, other_id: Any, position: str) -> bool:
        return other_id in self.compared_with.get(position, ())

    def snapshot(self) -> "Player":
        """Independent copy; mutating the snapshot never touches the original."""
        return copy.deepcopy(self)

    def __str__(self) -> str:
        return f"{self.name} ({'/'.join(self.positions)})"
