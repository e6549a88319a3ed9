"""
Team evaluation domain service.

Handles team strength calculations and candidate scoring.
"""

import math

from config import EVALUATOR_SETTINGS
from domain.models.team import Candidate, Team


class TeamEvaluator:
    """
    Pure domain service for scoring candidate team assignments.

    Responsibilities:
    - Calculate team strength (sum of assigned-position ratings)
    - Score a candidate (lower is better)
    - Summarize balance for presentation
    """

    def __init__(
        self,
        off_position_penalty: float | None = None,
        variance_weight: float | None = None,
        balanced_threshold: float | None = None,
    ):
        """
        Initialize the evaluator.

        Args:
            off_position_penalty: Flat penalty per player assigned outside their primary position
            variance_weight: Weight of the strength standard deviation in the score
            balanced_threshold: Max strength difference still reported as balanced
        """
        settings = EVALUATOR_SETTINGS
        self.off_position_penalty = (
            off_position_penalty
            if off_position_penalty is not None
            else settings["off_position_penalty"]
        )
        self.variance_weight = (
            variance_weight if variance_weight is not None else settings["variance_weight"]
        )
        self.balanced_threshold = (
            balanced_threshold
            if balanced_threshold is not None
            else settings["team_balanced_threshold"]
        )

    def team_strength(self, team: Team) -> float:
        return team.strength()

    def score(self, candidate: Candidate) -> float:
        """
        Score a candidate.

        score = (max - min strength) + variance_weight * sqrt(variance)
                + off_position_penalty * off-position players

        Candidates with fewer than two teams are invalid and score infinity.
        """
        if candidate.team_count < 2:
            return math.inf
        return self.score_from(candidate.strengths(), candidate.off_position_count())

    def score_from(self, strengths: list[float], off_position_count: int) -> float:
        """Score from precomputed team strengths, used for incremental evaluation."""
        if len(strengths) < 2:
            return math.inf
        mean = sum(strengths) / len(strengths)
        variance = sum((s - mean) ** 2 for s in strengths) / len(strengths)
        balance = max(strengths) - min(strengths)
        return (
            balance
            + self.variance_weight * math.sqrt(variance)
            + self.off_position_penalty * off_position_count
        )

    def evaluate_balance(self, candidate: Candidate) -> dict:
        """
        Summarize how balanced a candidate is.

        Returns:
            Dict with is_balanced, max_difference and a per-team list of
            total rating, average rating and strength rank (1 = strongest).
        """
        if candidate.team_count == 0:
            return {"is_balanced": True, "max_difference": 0.0, "teams": []}

        strengths = candidate.strengths()
        max_difference = max(strengths) - min(strengths)
        ranked = sorted(range(len(strengths)), key=lambda i: strengths[i], reverse=True)
        rank_of = {team_index: rank + 1 for rank, team_index in enumerate(ranked)}

        teams = []
        for index, team in enumerate(candidate.teams):
            teams.append(
                {
                    "index": index,
                    "total_rating": round(strengths[index]),
                    "average_rating": round(team.average_rating()),
                    "rank": rank_of[index],
                }
            )

        return {
            "is_balanced": max_difference < self.balanced_threshold,
            "max_difference": round(max_difference),
            "teams": teams,
        }
