"""
Genetic search over seeded candidates.
"""

import logging
import math
import random

from config import OPTIMIZER_SETTINGS
from domain.models.player import Player
from domain.models.team import Candidate
from domain.services.neighborhood import mutate
from domain.services.team_evaluator import TeamEvaluator
from utils.cancellation import CancellationToken, checkpoint

logger = logging.getLogger("squad_balancer.genetic_search")


class GeneticSearch:
    """
    Elitist genetic algorithm.

    Each generation keeps the top ``elite_count`` individuals unchanged and
    breeds the rest from tournament-selected parents with per-position
    crossover and swap mutation.
    """

    def __init__(
        self,
        evaluator: TeamEvaluator,
        population_size: int | None = None,
        generations: int | None = None,
        elite_count: int | None = None,
        tournament_size: int | None = None,
        crossover_rate: float | None = None,
        mutation_rate: float | None = None,
        yield_every: int | None = None,
        rng: random.Random | None = None,
    ):
        settings = OPTIMIZER_SETTINGS
        self.evaluator = evaluator
        self.population_size = (
            population_size if population_size is not None else settings["ga_population_size"]
        )
        self.generations = generations if generations is not None else settings["ga_generations"]
        self.elite_count = elite_count if elite_count is not None else settings["ga_elite_count"]
        self.tournament_size = (
            tournament_size if tournament_size is not None else settings["ga_tournament_size"]
        )
        self.crossover_rate = (
            crossover_rate if crossover_rate is not None else settings["ga_crossover_rate"]
        )
        self.mutation_rate = (
            mutation_rate if mutation_rate is not None else settings["ga_mutation_rate"]
        )
        self.yield_every = max(1, yield_every if yield_every is not None else settings["ga_yield_every"])
        self.rng = rng or random.Random()

    def fitness(self, score: float) -> float:
        if math.isinf(score):
            return 0.0
        return 1.0 / (1.0 + score)

    def initial_population(self, seeds: list[Candidate]) -> list[Candidate]:
        """The seeds themselves, padded with mutated copies of random seeds."""
        population = [seed.clone() for seed in seeds]
        while len(population) < self.population_size:
            individual = self.rng.choice(seeds).clone()
            mutate(individual, self.rng)
            population.append(individual)
        return population

    def _tournament(self, population: list[Candidate], fitnesses: list[float]) -> Candidate:
        size = min(self.tournament_size, len(population))
        contenders = self.rng.sample(range(len(population)), size)
        winner = max(contenders, key=lambda i: fitnesses[i])
        return population[winner]

    def crossover(
        self,
        parent1: Candidate,
        parent2: Candidate,
        composition: dict[str, int],
        roster: list[Player],
    ) -> Candidate:
        """
        Rebuild every position from both parents.

        Per position the de-duplicated union of both parents' players (parent 1
        first) is dealt round-robin across the teams. Players already placed at
        an earlier position are skipped; a short union is topped up with unused
        roster players declaring the position, and if that is still not enough
        the child is a clone of parent 1.
        """
        team_count = parent1.team_count
        child = Candidate.empty(team_count)
        placed: set = set()

        for position, per_team in composition.items():
            if per_team <= 0:
                continue
            needed = per_team * team_count
            pool: list[Player] = []
            for parent in (parent1, parent2):
                for team in parent.teams:
                    for slot in team:
                        if slot.assigned_position != position:
                            continue
                        if slot.player_id in placed or any(p.id == slot.player_id for p in pool):
                            continue
                        pool.append(slot.player)
            pool = pool[:needed]

            if len(pool) < needed:
                pool_ids = {p.id for p in pool}
                spare = [
                    p for p in roster
                    if p.can_play(position) and p.id not in placed and p.id not in pool_ids
                ]
                self.rng.shuffle(spare)
                pool.extend(spare[: needed - len(pool)])
                if len(pool) < needed:
                    return parent1.clone()

            for index, player in enumerate(pool):
                child.teams[index % team_count].add(player, position)
                placed.add(player.id)

        return child

    async def search(
        self,
        seeds: list[Candidate],
        composition: dict[str, int],
        roster: list[Player],
        cancel_token: CancellationToken | None = None,
    ) -> Candidate:
        if not seeds:
            raise ValueError("Genetic search needs at least one seed")

        population = self.initial_population(seeds)
        scores = [self.evaluator.score(c) for c in population]

        for generation in range(1, self.generations + 1):
            fitnesses = [self.fitness(s) for s in scores]
            ranked = sorted(range(len(population)), key=lambda i: fitnesses[i], reverse=True)

            next_population = [population[i] for i in ranked[: self.elite_count]]
            while len(next_population) < len(population):
                parent1 = self._tournament(population, fitnesses)
                parent2 = self._tournament(population, fitnesses)
                if self.rng.random() < self.crossover_rate:
                    child = self.crossover(parent1, parent2, composition, roster)
                else:
                    child = parent1.clone()
                if self.rng.random() < self.mutation_rate:
                    mutate(child, self.rng)
                next_population.append(child)

            population = next_population
            scores = [self.evaluator.score(c) for c in population]

            if generation % self.yield_every == 0:
                logger.debug(f"Generation {generation}: best={min(scores):.1f}")
                await checkpoint(cancel_token)

        best_index = min(range(len(population)), key=lambda i: scores[i])
        return population[best_index]
