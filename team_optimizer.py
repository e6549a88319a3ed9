"""
Team optimisation orchestrator.

Validates a composition against the roster, seeds several candidates, refines
them with the search engines and returns the best-balanced assignment.
"""

import logging
import math
import random
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

from config import OPTIMIZER_SETTINGS
from domain.errors import CompositionError, OptimizationInProgressError, PositionShortage
from domain.models.activity import VOLLEYBALL, ActivityConfig
from domain.models.player import Player
from domain.models.team import Candidate
from domain.services.genetic_search_service import GeneticSearch
from domain.services.local_search_service import SimulatedAnnealingSearch, SmartSwapSearch
from domain.services.solution_seeder import SolutionSeeder, match_players_to_positions
from domain.services.team_evaluator import TeamEvaluator
from utils.cancellation import CancellationToken

logger = logging.getLogger("squad_balancer.optimizer")


@dataclass
class OptimizationResult:
    """Final assignment plus everything the host needs to present it."""

    candidate: Candidate
    score: float
    algorithm: str
    balance: dict
    unused_players: list[dict]
    validation: dict
    stats: dict
    strategy_scores: dict[str, float] = field(default_factory=dict)

    @property
    def teams(self) -> list[list[dict]]:
        return self.candidate.to_lists()

    def to_dict(self) -> dict:
        return {
            "teams": self.teams,
            "balance": self.balance,
            "unused_players": self.unused_players,
            "validation": self.validation,
            "stats": self.stats,
            "algorithm": self.algorithm,
            "score": self.score,
        }


class TeamOptimizer:
    """
    Runs seeding and search strategies and keeps the lowest-scoring result.

    Strategies run one after another on their own candidate copies. One
    instance serves a single optimisation at a time.
    """

    def __init__(
        self,
        activity: ActivityConfig | None = VOLLEYBALL,
        evaluator: TeamEvaluator | None = None,
        rng: random.Random | None = None,
        seeder: SolutionSeeder | None = None,
        annealing: SimulatedAnnealingSearch | None = None,
        smart_swap: SmartSwapSearch | None = None,
        genetic: GeneticSearch | None = None,
        use_genetic_algorithm: bool | None = None,
        use_simulated_annealing: bool | None = None,
    ):
        """
        Initialize the optimizer.

        Args:
            activity: Position catalogue compositions and players are checked against (None skips the check)
            evaluator: Candidate scorer shared by every engine
            rng: Random source shared by the default engines, for reproducible runs
            seeder, annealing, smart_swap, genetic: Engine overrides (mostly for tests)
            use_genetic_algorithm: Run the genetic search over all seeds
            use_simulated_annealing: Refine each seed with annealing; smart swap is used otherwise
        """
        settings = OPTIMIZER_SETTINGS
        self.activity = activity
        self.evaluator = evaluator or TeamEvaluator()
        self.rng = rng or random.Random()
        self.seeder = seeder or SolutionSeeder(rng=self.rng)
        self.annealing = annealing or SimulatedAnnealingSearch(self.evaluator, rng=self.rng)
        self.smart_swap = smart_swap or SmartSwapSearch(self.evaluator, rng=self.rng)
        self.genetic = genetic or GeneticSearch(self.evaluator, rng=self.rng)
        self.use_genetic_algorithm = (
            use_genetic_algorithm
            if use_genetic_algorithm is not None
            else settings["use_genetic_algorithm"]
        )
        self.use_simulated_annealing = (
            use_simulated_annealing
            if use_simulated_annealing is not None
            else settings["use_simulated_annealing"]
        )
        self._optimizing = False

    @property
    def is_optimizing(self) -> bool:
        return self._optimizing

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    def _display(self, position: str) -> str:
        return self.activity.display_name(position) if self.activity else position

    def _normalize_players(self, players: Iterable[Player | dict]) -> list[Player]:
        roster: list[Player] = []
        seen: set = set()
        for entry in players:
            if isinstance(entry, dict):
                player = Player.from_dict(entry, self.activity)
            else:
                player = entry.snapshot()
                if self.activity is not None:
                    for position in player.positions:
                        self.activity.require(position)
            if player.id in seen:
                raise ValueError(f"Duplicate player id {player.id!r} in roster")
            seen.add(player.id)
            roster.append(player)
        return roster

    def validate(
        self, composition: dict[str, int], team_count: int, players: list[Player]
    ) -> dict:
        """
        Check that the roster can fill the composition for every team.

        Collects every per-position shortage, the total headcount shortage and
        a roster-coverage error, plus warnings for exact matches and secondary
        reliance. Raises CompositionError if anything is missing.

        Returns:
            Dict with is_valid, errors and warnings
        """
        if isinstance(team_count, bool) or not isinstance(team_count, int) or team_count < 1:
            raise ValueError(f"team_count must be a positive integer, got {team_count!r}")

        shortages: list[PositionShortage] = []
        errors: list[str] = []
        warnings: list[str] = []

        team_size = sum(composition.values())
        if team_size == 0:
            errors.append("Composition must require at least one player per team")

        capacity: dict[str, int] = {}
        for position, per_team in composition.items():
            needed = per_team * team_count
            if needed == 0:
                continue
            capacity[position] = needed
            display = self._display(position)
            available = sum(1 for p in players if p.can_play(position))
            primaries = sum(1 for p in players if p.is_primary(position))

            if available < needed:
                shortages.append(
                    PositionShortage(
                        position=position,
                        needed=needed,
                        available=available,
                        message=f"Not enough {display} players: need {needed}, have {available}",
                    )
                )
                continue
            if available == needed:
                warnings.append(f"Exact match for {display}: all {available} available players will be used")
            if primaries < needed:
                warnings.append(
                    f"{display}: relying on {needed - primaries} secondary-position player(s)"
                )

        total_needed = team_size * team_count
        if total_needed > len(players):
            errors.append(f"Not enough players: need {total_needed}, have {len(players)}")

        if not shortages and not errors:
            pools = match_players_to_positions(players, capacity)
            uncovered = [p for p, needed in capacity.items() if len(pools[p]) < needed]
            if uncovered:
                names = ", ".join(self._display(p) for p in uncovered)
                errors.append(
                    f"Players cannot cover every position at once (short at {names}); "
                    "too many players are shared between positions"
                )

        if shortages or errors:
            error = CompositionError(shortages, errors=errors, warnings=warnings)
            logger.info(f"Composition rejected: {error}")
            raise error

        for warning in warnings:
            logger.warning(warning)
        return {"is_valid": True, "errors": [], "warnings": warnings}

    def _prepare(
        self, composition: dict[str, int], team_count: int, players: Iterable[Player | dict]
    ) -> tuple[dict[str, int], list[Player], dict]:
        if self.activity is not None:
            composition = self.activity.validate_composition(composition)
        else:
            composition = dict(composition)
        roster = self._normalize_players(players)
        return composition, roster, self.validate(composition, team_count, roster)

    def check_request(
        self, composition: dict[str, int], team_count: int, players: Iterable[Player | dict]
    ) -> dict:
        """Normalise and validate a request without running any search."""
        return self._prepare(composition, team_count, players)[2]

    # ------------------------------------------------------------------
    # Optimisation
    # ------------------------------------------------------------------

    async def optimize(
        self,
        composition: dict[str, int],
        team_count: int,
        players: Iterable[Player | dict],
        cancel_token: CancellationToken | None = None,
    ) -> OptimizationResult:
        """
        Build ``team_count`` balanced teams matching ``composition``.

        Players may be Player objects or plain records (``positions`` or the
        legacy ``position`` field); they are copied, never mutated.

        Raises:
            CompositionError: the roster cannot fill the composition (before any search runs)
            OptimizationInProgressError: this optimizer is already running
            OptimizationCancelledError: the cancel token fired at a suspension point
        """
        if self._optimizing:
            raise OptimizationInProgressError("Optimization already in progress")
        self._optimizing = True
        try:
            composition, roster, validation = self._prepare(composition, team_count, players)

            logger.info(
                f"Optimizing {team_count} teams of {sum(composition.values())} "
                f"from {len(roster)} players"
            )
            seeds = self.seeder.seed(roster, composition, team_count)
            for seed in seeds:
                seed.candidate.check(composition)

            results: list[tuple[str, Candidate]] = []
            if self.use_genetic_algorithm:
                evolved = await self.genetic.search(
                    [seed.candidate for seed in seeds], composition, roster, cancel_token
                )
                results.append(("Genetic Algorithm", evolved))

            local = self.annealing if self.use_simulated_annealing else self.smart_swap
            local_name = "Simulated Annealing" if self.use_simulated_annealing else "Smart Swap"
            for seed in seeds:
                refined = await local.search(seed.candidate, cancel_token)
                results.append((f"{seed.strategy} + {local_name}", refined))

            strategy_scores: dict[str, float] = {}
            best_name, best_candidate, best_score = "", None, math.inf
            for name, candidate in results:
                candidate.check(composition)
                score = self.evaluator.score(candidate)
                strategy_scores[name] = score
                logger.info(f"  {name}: score={score:.1f}")
                if best_candidate is None or score < best_score:
                    best_name, best_candidate, best_score = name, candidate, score
            logger.info(f"SELECTED: {best_name} with score {best_score:.1f}")

            best_candidate.teams.sort(key=lambda team: team.strength(), reverse=True)
            return OptimizationResult(
                candidate=best_candidate,
                score=best_score,
                algorithm=best_name,
                balance=self.evaluator.evaluate_balance(best_candidate),
                unused_players=self._unused_players(best_candidate, roster),
                validation=validation,
                stats=self._stats(best_candidate, best_score),
                strategy_scores=strategy_scores,
            )
        finally:
            self._optimizing = False

    @staticmethod
    def _unused_players(candidate: Candidate, roster: list[Player]) -> list[dict]:
        used = set(candidate.player_ids())
        unused = []
        for player in roster:
            if player.id in used:
                continue
            data = player.to_dict()
            data["available_positions"] = list(player.positions)
            unused.append(data)
        return unused

    @staticmethod
    def _stats(candidate: Candidate, score: float) -> dict[str, Any]:
        strengths = candidate.strengths()
        players_used = sum(len(team) for team in candidate.teams)
        secondary = candidate.off_position_count()
        return {
            "teams_used": candidate.team_count,
            "players_used": players_used,
            "average_team_rating": round(sum(strengths) / len(strengths)) if strengths else 0,
            "balance_score": score,
            "primary_placements": players_used - secondary,
            "secondary_placements": secondary,
        }
