"""
Domain services containing pure business logic.
"""

from domain.services.genetic_search_service import GeneticSearch
from domain.services.local_search_service import SimulatedAnnealingSearch, SmartSwapSearch
from domain.services.solution_seeder import Seed, SolutionSeeder, match_players_to_positions
from domain.services.team_evaluator import TeamEvaluator

__all__ = [
    "GeneticSearch",
    "SimulatedAnnealingSearch",
    "SmartSwapSearch",
    "Seed",
    "SolutionSeeder",
    "TeamEvaluator",
    "match_players_to_positions",
]
