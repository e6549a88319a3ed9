"""
Tests for the perturbation moves shared by the search engines.
"""

import random

import pytest

from domain.services.neighborhood import (
    double_swap,
    mutate,
    random_neighbor,
    rotate_three,
    single_swap,
)
from domain.services.solution_seeder import SolutionSeeder
from tests.conftest import TWO_TEAM_COMPOSITION, make_player

THREE_TEAM_COMPOSITION = {"OH": 2, "MB": 1}


@pytest.fixture
def three_team_candidate():
    players = [make_player(f"oh{i}", ["OH"], {"OH": 1300 + 50 * i}) for i in range(6)]
    players += [make_player(f"mb{i}", ["MB"], {"MB": 1400 + 80 * i}) for i in range(3)]
    return SolutionSeeder(rng=random.Random(0)).snake_draft(players, THREE_TEAM_COMPOSITION, 3)


class TestMovesPreserveInvariants:
    """Moves never break headcounts or duplicate a player."""

    @pytest.mark.parametrize("move", [single_swap, double_swap, rotate_three, random_neighbor, mutate])
    def test_move_keeps_candidate_valid(self, three_team_candidate, move):
        rng = random.Random(21)
        before = sorted(three_team_candidate.player_ids())
        for _ in range(50):
            move(three_team_candidate, rng)
            three_team_candidate.check(THREE_TEAM_COMPOSITION)
        assert sorted(three_team_candidate.player_ids()) == before

    def test_random_neighbor_on_two_teams(self, two_team_roster):
        candidate = SolutionSeeder(rng=random.Random(4)).snake_draft(two_team_roster, TWO_TEAM_COMPOSITION, 2)
        rng = random.Random(4)
        for _ in range(100):
            assert random_neighbor(candidate, rng)
            candidate.check(TWO_TEAM_COMPOSITION)


class TestMoveApplicability:
    """Moves report when they cannot apply."""

    def test_rotation_needs_three_teams(self, two_team_roster):
        candidate = SolutionSeeder().snake_draft(two_team_roster, TWO_TEAM_COMPOSITION, 2)
        assert rotate_three(candidate, random.Random(1)) is False

    def test_double_swap_needs_two_per_team(self):
        players = [make_player(i, ["S"]) for i in range(2)]
        candidate = SolutionSeeder().snake_draft(players, {"S": 1}, 2)
        assert double_swap(candidate, random.Random(1)) is False
        assert single_swap(candidate, random.Random(1)) is True

    def test_single_team_has_no_moves(self):
        players = [make_player(i, ["S"]) for i in range(2)]
        candidate = SolutionSeeder().snake_draft(players, {"S": 2}, 1)
        assert single_swap(candidate, random.Random(1)) is False

    def test_rotation_moves_three_players(self, three_team_candidate):
        before = [team.player_ids() for team in three_team_candidate.teams]
        assert rotate_three(three_team_candidate, random.Random(5))
        after = [team.player_ids() for team in three_team_candidate.teams]
        changed = sum(1 for b, a in zip(before, after) if b != a)
        assert changed == 3

    def test_single_swap_keeps_assigned_positions(self, three_team_candidate):
        positions_before = [[s.assigned_position for s in team] for team in three_team_candidate.teams]
        single_swap(three_team_candidate, random.Random(2))
        positions_after = [[s.assigned_position for s in team] for team in three_team_candidate.teams]
        assert positions_before == positions_after

    def test_clone_is_independent(self, three_team_candidate):
        clone = three_team_candidate.clone()
        single_swap(clone, random.Random(3))
        assert clone.player_ids() != three_team_candidate.player_ids()
