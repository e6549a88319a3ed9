"""
Pytest fixtures for tests.

Engines are built with small iteration budgets and seeded random sources so
the optimisation tests stay fast and reproducible.
"""

import random

import pytest

from domain.models.player import Player
from domain.services.genetic_search_service import GeneticSearch
from domain.services.local_search_service import SimulatedAnnealingSearch, SmartSwapSearch
from domain.services.solution_seeder import SolutionSeeder
from domain.services.team_evaluator import TeamEvaluator
from services.rating_service import RatingStore
from team_optimizer import TeamOptimizer

# =============================================================================
# CENTRALIZED CONSTANTS
# =============================================================================

TWO_TEAM_COMPOSITION = {"S": 1, "OH": 2, "MB": 1, "L": 0, "OPP": 1}
"""Five-a-side volleyball composition used by the end-to-end scenarios."""


def make_player(player_id, positions, ratings=None, name=None) -> Player:
    """Build a player with optional per-position ratings."""
    return Player(
        id=player_id,
        name=name or str(player_id),
        positions=list(positions),
        ratings=dict(ratings or {}),
    )


@pytest.fixture
def rng():
    """Seeded random source."""
    return random.Random(1234)


@pytest.fixture
def evaluator():
    return TeamEvaluator(off_position_penalty=50.0, variance_weight=0.5, balanced_threshold=300.0)


@pytest.fixture
def two_team_roster():
    """
    Ten single-position players: exactly the headcount TWO_TEAM_COMPOSITION
    needs for two teams.
    """
    return [
        make_player("s1", ["S"], {"S": 1620}),
        make_player("s2", ["S"], {"S": 1480}),
        make_player("oh1", ["OH"], {"OH": 1700}),
        make_player("oh2", ["OH"], {"OH": 1550}),
        make_player("oh3", ["OH"], {"OH": 1450}),
        make_player("oh4", ["OH"], {"OH": 1380}),
        make_player("mb1", ["MB"], {"MB": 1590}),
        make_player("mb2", ["MB"], {"MB": 1410}),
        make_player("opp1", ["OPP"], {"OPP": 1530}),
        make_player("opp2", ["OPP"], {"OPP": 1490}),
    ]


@pytest.fixture
def flexible_roster():
    """Fourteen players, several declaring secondary positions."""
    return [
        make_player("s1", ["S", "OPP"], {"S": 1650, "OPP": 1500}),
        make_player("s2", ["S"], {"S": 1450}),
        make_player("s3", ["OH", "S"], {"OH": 1520, "S": 1400}),
        make_player("oh1", ["OH"], {"OH": 1720}),
        make_player("oh2", ["OH", "OPP"], {"OH": 1600, "OPP": 1580}),
        make_player("oh3", ["OH"], {"OH": 1400}),
        make_player("oh4", ["OH", "L"], {"OH": 1350, "L": 1500}),
        make_player("mb1", ["MB"], {"MB": 1610}),
        make_player("mb2", ["MB", "OPP"], {"MB": 1480, "OPP": 1420}),
        make_player("mb3", ["MB"], {"MB": 1390}),
        make_player("opp1", ["OPP"], {"OPP": 1560}),
        make_player("l1", ["L"], {"L": 1500}),
        make_player("l2", ["L", "OH"], {"L": 1450, "OH": 1300}),
        make_player("x1", ["OPP", "MB"], {"OPP": 1440, "MB": 1460}),
    ]


@pytest.fixture
def rating_store():
    """Store with four outside hitters and a setter who also plays OH."""
    return RatingStore(
        [
            make_player("a", ["OH"], name="Alice"),
            make_player("b", ["OH"], name="Bruno"),
            make_player("c", ["OH"], name="Chen"),
            make_player("d", ["OH"], name="Dana"),
            make_player("e", ["S", "OH"], name="Emre"),
        ]
    )


@pytest.fixture
def fast_optimizer(evaluator):
    """TeamOptimizer with small engine budgets."""
    rng = random.Random(99)
    return TeamOptimizer(
        evaluator=evaluator,
        rng=rng,
        seeder=SolutionSeeder(rng=rng, random_seed_count=2),
        annealing=SimulatedAnnealingSearch(evaluator, max_iterations=300, yield_every=100, rng=rng),
        smart_swap=SmartSwapSearch(evaluator, max_iterations=60, yield_every=20, rng=rng),
        genetic=GeneticSearch(
            evaluator, population_size=10, generations=6, elite_count=2, yield_every=2, rng=rng
        ),
    )
