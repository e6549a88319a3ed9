"""
Elo rating system implementation for pairwise player comparisons.
"""

from dataclasses import dataclass

from config import RATING_SETTINGS


@dataclass(frozen=True)
class RatingChange:
    """Outcome of one rating update at one position."""

    position: str
    winner_id: object
    loser_id: object
    winner_old: float
    winner_new: float
    loser_old: float
    loser_new: float
    winner_expected: float
    loser_expected: float
    is_draw: bool = False

    @property
    def winner_delta(self) -> float:
        return self.winner_new - self.winner_old

    @property
    def loser_delta(self) -> float:
        return self.loser_new - self.loser_old


class EloRatingSystem:
    """
    Fixed-K Elo maths.

    Handles:
    - Expected score from the logistic curve
    - Zero-sum rating exchange after a comparison
    - Match prediction between two ratings
    """

    def __init__(
        self,
        k_factor: float | None = None,
        rating_divisor: float | None = None,
        balanced_threshold: float | None = None,
    ):
        """
        Initialize rating system.

        Args:
            k_factor: Maximum rating points exchanged per comparison
            rating_divisor: Rating gap that makes the stronger side 10x as likely to win
            balanced_threshold: Rating gap below which a pairing is reported as balanced
        """
        settings = RATING_SETTINGS
        self.k_factor = k_factor if k_factor is not None else settings["k_factor"]
        self.rating_divisor = (
            rating_divisor if rating_divisor is not None else settings["rating_divisor"]
        )
        self.balanced_threshold = (
            balanced_threshold
            if balanced_threshold is not None
            else settings["matchup_balanced_threshold"]
        )

    def expected_score(self, rating: float, opponent_rating: float) -> float:
        """
        Probability that a player rated ``rating`` beats one rated ``opponent_rating``.

        E = 1 / (1 + 10 ** ((opponent - rating) / 400))
        """
        return 1.0 / (1.0 + 10 ** ((opponent_rating - rating) / self.rating_divisor))

    def rating_change(self, winner_rating: float, loser_rating: float) -> tuple[float, float]:
        """
        New (winner, loser) ratings after the winner beats the loser.

        The winner gains K * (1 - E) and the loser loses exactly the same amount.
        """
        expected = self.expected_score(winner_rating, loser_rating)
        delta = self.k_factor * (1.0 - expected)
        return winner_rating + delta, loser_rating - delta

    def predict_match(self, rating_a: float, rating_b: float) -> dict:
        """
        Predict a comparison between two ratings.

        Returns:
            Dict with each side's win probability (0-1) and rounded percentage,
            the absolute rating difference, and whether the pairing is balanced.
        """
        prob_a = self.expected_score(rating_a, rating_b)
        prob_b = 1.0 - prob_a
        difference = abs(rating_a - rating_b)
        return {
            "player_a_probability": prob_a,
            "player_b_probability": prob_b,
            "player_a_percentage": round(prob_a * 100),
            "player_b_percentage": round(prob_b * 100),
            "rating_difference": round(difference),
            "is_balanced": difference < self.balanced_threshold,
        }
