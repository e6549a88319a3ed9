"""
Centralized configuration for the squad balancer.
"""

from __future__ import annotations

import os
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _parse_int(env_var: str, default: int) -> int:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _parse_float(env_var: str, default: float) -> float:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _parse_bool(env_var: str, default: bool) -> bool:
    raw = os.getenv(env_var)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


# Elo rating configuration
DEFAULT_RATING = _parse_float("DEFAULT_RATING", 1500.0)
ELO_K_FACTOR = _parse_float("ELO_K_FACTOR", 30.0)
ELO_RATING_DIVISOR = _parse_float("ELO_RATING_DIVISOR", 400.0)
MATCHUP_BALANCED_THRESHOLD = _parse_float("MATCHUP_BALANCED_THRESHOLD", 200.0)  # Rating gap below which a pair is "even"

# Player records
MAX_POSITIONS_PER_PLAYER = _parse_int("MAX_POSITIONS_PER_PLAYER", 5)

RATING_SETTINGS: dict[str, Any] = {
    "default_rating": DEFAULT_RATING,
    "k_factor": ELO_K_FACTOR,
    "rating_divisor": ELO_RATING_DIVISOR,
    "matchup_balanced_threshold": MATCHUP_BALANCED_THRESHOLD,
}

EVALUATOR_SETTINGS: dict[str, Any] = {
    "off_position_penalty": _parse_float("OFF_POSITION_PENALTY", 50.0),  # Per player outside their primary position
    "variance_weight": _parse_float("VARIANCE_WEIGHT", 0.5),
    "team_balanced_threshold": _parse_float("TEAM_BALANCED_THRESHOLD", 300.0),
}

OPTIMIZER_SETTINGS: dict[str, Any] = {
    # Simulated annealing
    "sa_max_iterations": _parse_int("SA_MAX_ITERATIONS", 50000),
    "sa_initial_temperature": _parse_float("SA_INITIAL_TEMPERATURE", 1000.0),
    "sa_cooling_rate": _parse_float("SA_COOLING_RATE", 0.995),
    "sa_yield_every": _parse_int("SA_YIELD_EVERY", 5000),
    # Targeted (smart) swap search, budget is a fraction of the annealing budget
    "smart_swap_iteration_ratio": _parse_float("SMART_SWAP_ITERATION_RATIO", 0.3),
    "smart_swap_target_probability": _parse_float("SMART_SWAP_TARGET_PROBABILITY", 0.7),
    "smart_swap_yield_every": _parse_int("SMART_SWAP_YIELD_EVERY", 2000),
    # Genetic algorithm
    "ga_population_size": _parse_int("GA_POPULATION_SIZE", 20),
    "ga_generations": _parse_int("GA_GENERATIONS", 100),
    "ga_elite_count": _parse_int("GA_ELITE_COUNT", 5),
    "ga_tournament_size": _parse_int("GA_TOURNAMENT_SIZE", 3),
    "ga_crossover_rate": _parse_float("GA_CROSSOVER_RATE", 0.8),
    "ga_mutation_rate": _parse_float("GA_MUTATION_RATE", 0.1),
    "ga_yield_every": _parse_int("GA_YIELD_EVERY", 10),
    # Strategy policy
    "use_genetic_algorithm": _parse_bool("USE_GENETIC_ALGORITHM", True),
    "use_simulated_annealing": _parse_bool("USE_SIMULATED_ANNEALING", True),
    "random_seed_count": _parse_int("RANDOM_SEED_COUNT", 2),
}
