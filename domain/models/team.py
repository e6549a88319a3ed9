"""
Team and candidate-solution domain models.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from domain.models.player import Player


@dataclass(frozen=True)
class TeamSlot:
    """A player filling one position slot in a team."""

    player: Player
    assigned_position: str

    @property
    def player_id(self) -> Any:
        return self.player.id

    @property
    def rating(self) -> float:
        """Rating the player carries at the position they were assigned to."""
        return self.player.rating_for(self.assigned_position)

    @property
    def is_off_position(self) -> bool:
        return not self.player.is_primary(self.assigned_position)

    def to_dict(self) -> dict[str, Any]:
        data = self.player.to_dict()
        data["assigned_position"] = self.assigned_position
        data["position_rating"] = self.rating
        return data


class Team:
    """
    An ordered list of slots.

    Slots are immutable; moves replace them, so copying the list is enough to
    give a team value semantics.
    """

    def __init__(self, slots: list[TeamSlot] | None = None):
        self.slots: list[TeamSlot] = list(slots or [])

    def add(self, player: Player, position: str) -> None:
        self.slots.append(TeamSlot(player, position))

    def strength(self) -> float:
        """Sum of each player's rating at their assigned position."""
        return sum(slot.rating for slot in self.slots)

    def average_rating(self) -> float:
        if not self.slots:
            return 0.0
        return self.strength() / len(self.slots)

    def indices_at(self, position: str) -> list[int]:
        return [i for i, slot in enumerate(self.slots) if slot.assigned_position == position]

    def count_at(self, position: str) -> int:
        return sum(1 for slot in self.slots if slot.assigned_position == position)

    def off_position_count(self) -> int:
        return sum(1 for slot in self.slots if slot.is_off_position)

    def player_ids(self) -> list[Any]:
        return [slot.player_id for slot in self.slots]

    def clone(self) -> "Team":
        return Team(self.slots)

    def to_list(self) -> list[dict[str, Any]]:
        return [slot.to_dict() for slot in self.slots]

    def __len__(self) -> int:
        return len(self.slots)

    def __iter__(self) -> Iterator[TeamSlot]:
        return iter(self.slots)

    def __str__(self) -> str:
        names = ", ".join(f"{s.player.name}[{s.assigned_position}]" for s in self.slots)
        return f"Team: {names}"


class Candidate:
    """
    A complete assignment of players to a fixed number of teams.

    Each search strategy works on its own clone; ``clone()`` copies the team
    lists while sharing the immutable slots and the read-only player snapshots.
    """

    def __init__(self, teams: list[Team]):
        self.teams = teams
        self._journal: list[tuple[int, int, TeamSlot]] | None = None

    @classmethod
    def empty(cls, team_count: int) -> "Candidate":
        return cls([Team() for _ in range(team_count)])

    @property
    def team_count(self) -> int:
        return len(self.teams)

    def clone(self) -> "Candidate":
        return Candidate([team.clone() for team in self.teams])

    def strengths(self) -> list[float]:
        return [team.strength() for team in self.teams]

    def player_ids(self) -> list[Any]:
        return [pid for team in self.teams for pid in team.player_ids()]

    def off_position_count(self) -> int:
        return sum(team.off_position_count() for team in self.teams)

    def set_slot(self, team_index: int, slot_index: int, slot: TeamSlot) -> None:
        """Replace one slot, journalling the old one while moves are tracked."""
        slots = self.teams[team_index].slots
        if self._journal is not None:
            self._journal.append((team_index, slot_index, slots[slot_index]))
        slots[slot_index] = slot

    def swap(self, team_a: int, index_a: int, team_b: int, index_b: int) -> None:
        """Exchange two slots between teams in place, keeping each slot's position."""
        slot_a = self.teams[team_a].slots[index_a]
        slot_b = self.teams[team_b].slots[index_b]
        self.set_slot(team_a, index_a, TeamSlot(slot_b.player, slot_a.assigned_position))
        self.set_slot(team_b, index_b, TeamSlot(slot_a.player, slot_b.assigned_position))

    def track_moves(self) -> None:
        """Start journalling slot replacements so a move can be rolled back."""
        self._journal = []

    def pending_moves(self) -> list[tuple[int, TeamSlot, TeamSlot]]:
        """(team index, slot before, slot now) for every slot touched since the last commit."""
        original: dict[tuple[int, int], TeamSlot] = {}
        for team_index, slot_index, slot in self._journal or []:
            original.setdefault((team_index, slot_index), slot)
        return [
            (team_index, slot, self.teams[team_index].slots[slot_index])
            for (team_index, slot_index), slot in original.items()
        ]

    def commit(self) -> None:
        if self._journal is not None:
            self._journal.clear()

    def rollback(self) -> None:
        """Undo every slot replacement since the last commit."""
        if not self._journal:
            return
        for team_index, slot_index, slot in reversed(self._journal):
            self.teams[team_index].slots[slot_index] = slot
        self._journal.clear()

    def check(self, composition: dict[str, int]) -> None:
        """
        Verify the structural invariants.

        Raises AssertionError on a duplicated player id, a headcount that does
        not match the composition, or a player assigned to a position they do
        not declare. A failure here is a bug in a seeder or a move.
        """
        ids = self.player_ids()
        if len(ids) != len(set(ids)):
            raise AssertionError("Candidate assigns a player to more than one slot")
        for team_index, team in enumerate(self.teams):
            for position, required in composition.items():
                count = team.count_at(position)
                if count != required:
                    raise AssertionError(
                        f"Team {team_index} has {count} {position}, composition requires {required}"
                    )
            for slot in team:
                if not slot.player.can_play(slot.assigned_position):
                    raise AssertionError(
                        f"{slot.player.name} assigned to undeclared position {slot.assigned_position}"
                    )

    def to_lists(self) -> list[list[dict[str, Any]]]:
        return [team.to_list() for team in self.teams]
