"""
Activity configuration: the closed set of positions a roster can use.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from domain.errors import UnknownPositionError


@dataclass(frozen=True)
class ActivityConfig:
    """
    Position catalogue for one activity (sport, game mode, ...).

    The host owns the catalogue; the core only validates codes against it.
    ``positions`` maps short codes to display names and its insertion order is
    the display order.
    """

    name: str
    positions: dict[str, str]
    default_composition: dict[str, int] = field(default_factory=dict)

    def __post_init__(self):
        if not self.positions:
            raise ValueError("An activity needs at least one position")
        for position in self.default_composition:
            self.require(position)

    @property
    def position_order(self) -> list[str]:
        return list(self.positions)

    @property
    def team_size(self) -> int:
        return sum(self.default_composition.values())

    def is_known(self, position: str) -> bool:
        return position in self.positions

    def require(self, position: str) -> str:
        """Return the code unchanged, raising UnknownPositionError if it is not in the catalogue."""
        if position not in self.positions:
            raise UnknownPositionError(position)
        return position

    def display_name(self, position: str) -> str:
        return self.positions.get(position, position)

    def validate_composition(self, composition: dict[str, int]) -> dict[str, int]:
        """
        Check a composition against the catalogue.

        Returns a copy with every catalogue position present (missing ones as 0),
        in display order.
        """
        for position, count in composition.items():
            self.require(position)
            if not isinstance(count, int) or isinstance(count, bool) or count < 0:
                raise ValueError(f"Headcount for {position} must be a non-negative integer, got {count!r}")
        return {position: composition.get(position, 0) for position in self.positions}


VOLLEYBALL = ActivityConfig(
    name="Volleyball",
    positions={
        "S": "Setter",
        "OPP": "Opposite",
        "OH": "Outside Hitter",
        "MB": "Middle Blocker",
        "L": "Libero",
    },
    default_composition={"S": 1, "OPP": 1, "OH": 2, "MB": 2, "L": 1},
)
