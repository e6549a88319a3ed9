"""
Local search engines: simulated annealing and targeted swap search.

Both engines work on their own clone of the seed and suspend every few
thousand iterations so the host loop stays responsive.
"""

import logging
import math
import random

from config import OPTIMIZER_SETTINGS
from domain.models.team import Candidate
from domain.services.neighborhood import random_neighbor
from domain.services.team_evaluator import TeamEvaluator
from utils.cancellation import CancellationToken, checkpoint

logger = logging.getLogger("squad_balancer.local_search")


class SimulatedAnnealingSearch:
    """
    Simulated annealing over the swap/rotation neighbourhood.

    The current state may drift to worse solutions, so the best candidate seen
    across all iterations is what gets returned. Moves are applied in place,
    scored from the strength deltas of the touched slots and rolled back when
    rejected.
    """

    def __init__(
        self,
        evaluator: TeamEvaluator,
        max_iterations: int | None = None,
        initial_temperature: float | None = None,
        cooling_rate: float | None = None,
        yield_every: int | None = None,
        rng: random.Random | None = None,
    ):
        settings = OPTIMIZER_SETTINGS
        self.evaluator = evaluator
        self.max_iterations = (
            max_iterations if max_iterations is not None else settings["sa_max_iterations"]
        )
        self.initial_temperature = (
            initial_temperature
            if initial_temperature is not None
            else settings["sa_initial_temperature"]
        )
        self.cooling_rate = cooling_rate if cooling_rate is not None else settings["sa_cooling_rate"]
        self.yield_every = max(1, yield_every if yield_every is not None else settings["sa_yield_every"])
        self.rng = rng or random.Random()

    def _accept(self, delta: float, temperature: float) -> bool:
        if delta < 0:
            return True
        if temperature <= 0:
            return False
        return self.rng.random() < math.exp(-delta / temperature)

    async def search(
        self, seed: Candidate, cancel_token: CancellationToken | None = None
    ) -> Candidate:
        current = seed.clone()
        current.track_moves()
        strengths = current.strengths()
        off_count = current.off_position_count()
        current_score = self.evaluator.score_from(strengths, off_count)
        best = current.clone()
        best_score = current_score
        temperature = self.initial_temperature

        for iteration in range(1, self.max_iterations + 1):
            if random_neighbor(current, self.rng):
                trial = list(strengths)
                trial_off = off_count
                for team_index, before, after in current.pending_moves():
                    trial[team_index] += after.rating - before.rating
                    trial_off += int(after.is_off_position) - int(before.is_off_position)
                neighbor_score = self.evaluator.score_from(trial, trial_off)
                if self._accept(neighbor_score - current_score, temperature):
                    current.commit()
                    strengths, off_count, current_score = trial, trial_off, neighbor_score
                    if current_score < best_score:
                        best, best_score = current.clone(), current_score
                else:
                    current.rollback()
            temperature *= self.cooling_rate

            if iteration % self.yield_every == 0:
                logger.debug(
                    f"Annealing iteration {iteration}: current={current_score:.1f} "
                    f"best={best_score:.1f} T={temperature:.3f}"
                )
                await checkpoint(cancel_token)

        return best


class SmartSwapSearch:
    """
    Targeted swap search.

    Each round picks two teams (usually the strongest and the weakest), a
    position, and tries every not-yet-attempted cross-team pair at that
    position. The best strictly improving swap of the round is committed.
    Swaps are scored incrementally from the team strengths, which gives the
    same value as re-scoring the whole candidate.
    """

    def __init__(
        self,
        evaluator: TeamEvaluator,
        max_iterations: int | None = None,
        target_probability: float | None = None,
        yield_every: int | None = None,
        rng: random.Random | None = None,
    ):
        settings = OPTIMIZER_SETTINGS
        self.evaluator = evaluator
        self.max_iterations = (
            max_iterations
            if max_iterations is not None
            else int(settings["sa_max_iterations"] * settings["smart_swap_iteration_ratio"])
        )
        self.target_probability = (
            target_probability
            if target_probability is not None
            else settings["smart_swap_target_probability"]
        )
        self.yield_every = max(
            1, yield_every if yield_every is not None else settings["smart_swap_yield_every"]
        )
        self.rng = rng or random.Random()

    def _pick_teams(self, strengths: list[float]) -> tuple[int, int]:
        if self.rng.random() < self.target_probability:
            strongest = max(range(len(strengths)), key=lambda i: strengths[i])
            weakest = min(range(len(strengths)), key=lambda i: strengths[i])
            if strongest != weakest:
                return strongest, weakest
        team_a, team_b = self.rng.sample(range(len(strengths)), 2)
        return team_a, team_b

    async def search(
        self, seed: Candidate, cancel_token: CancellationToken | None = None
    ) -> Candidate:
        current = seed.clone()
        if current.team_count < 2:
            return current

        strengths = current.strengths()
        off_count = current.off_position_count()
        current_score = self.evaluator.score_from(strengths, off_count)
        best = current.clone()
        best_score = current_score
        attempted: set[frozenset] = set()
        positions = sorted({slot.assigned_position for team in current.teams for slot in team})
        if not positions:
            return current

        for iteration in range(1, self.max_iterations + 1):
            team_a, team_b = self._pick_teams(strengths)
            position = self.rng.choice(positions)

            chosen = None
            chosen_score = current_score
            slots_a = current.teams[team_a].slots
            slots_b = current.teams[team_b].slots
            for index_a in current.teams[team_a].indices_at(position):
                for index_b in current.teams[team_b].indices_at(position):
                    slot_a, slot_b = slots_a[index_a], slots_b[index_b]
                    key = frozenset((slot_a.player_id, slot_b.player_id))
                    if key in attempted:
                        continue
                    attempted.add(key)

                    gain = slot_b.player.rating_for(position) - slot_a.player.rating_for(position)
                    trial = list(strengths)
                    trial[team_a] += gain
                    trial[team_b] -= gain
                    trial_off = (
                        off_count
                        - int(slot_a.is_off_position)
                        - int(slot_b.is_off_position)
                        + int(not slot_b.player.is_primary(position))
                        + int(not slot_a.player.is_primary(position))
                    )
                    trial_score = self.evaluator.score_from(trial, trial_off)
                    if trial_score < chosen_score:
                        chosen = (index_a, index_b, trial, trial_off)
                        chosen_score = trial_score

            if chosen is not None:
                index_a, index_b, strengths, off_count = chosen
                current.swap(team_a, index_a, team_b, index_b)
                current_score = chosen_score
                if current_score < best_score:
                    best, best_score = current.clone(), current_score

            if iteration % self.yield_every == 0:
                logger.debug(f"Smart swap iteration {iteration}: best={best_score:.1f}")
                await checkpoint(cancel_token)

        return best
