"""
Tests for candidate scoring.
"""

import math

import pytest

from domain.models.team import Candidate, Team
from domain.services.team_evaluator import TeamEvaluator
from tests.conftest import make_player


def _candidate(*teams):
    candidate = Candidate([Team() for _ in teams])
    for index, members in enumerate(teams):
        for player, position in members:
            candidate.teams[index].add(player, position)
    return candidate


class TestScore:
    """score = balance + 0.5 * sqrt(variance) + 50 * off-position players."""

    def test_two_team_formula(self, evaluator):
        candidate = _candidate(
            [(make_player(1, ["OH"], {"OH": 1600}), "OH"), (make_player(2, ["MB"], {"MB": 1400}), "MB")],
            [(make_player(3, ["OH"], {"OH": 1500}), "OH"), (make_player(4, ["MB"], {"MB": 1400}), "MB")],
        )
        # strengths 3000 / 2900: balance 100, std dev 50
        assert evaluator.score(candidate) == pytest.approx(125.0)

    def test_perfect_balance_scores_zero(self, evaluator):
        candidate = _candidate(
            [(make_player(1, ["OH"]), "OH")],
            [(make_player(2, ["OH"]), "OH")],
        )
        assert evaluator.score(candidate) == 0

    def test_uses_rating_at_assigned_position(self, evaluator):
        versatile = make_player(1, ["OH", "S"], {"OH": 1800, "S": 1500})
        candidate = _candidate(
            [(versatile, "S")],
            [(make_player(2, ["S"], {"S": 1500}), "S")],
        )
        assert candidate.strengths() == [1500, 1500]
        # only the off-position penalty remains
        assert evaluator.score(candidate) == pytest.approx(50.0)

    def test_single_team_or_empty_is_infinite(self, evaluator):
        assert evaluator.score(Candidate([])) == math.inf
        assert evaluator.score(_candidate([(make_player(1, ["S"]), "S")])) == math.inf

    def test_penalty_is_strictly_additive(self, evaluator):
        strengths = [3100.0, 2950.0, 3020.0]
        scores = [evaluator.score_from(strengths, off) for off in range(5)]
        assert scores == sorted(scores)
        assert scores[3] - scores[2] == pytest.approx(50.0)

    def test_score_from_matches_score(self, evaluator, flexible_roster):
        candidate = _candidate(
            [(p, p.positions[-1]) for p in flexible_roster[:7]],
            [(p, p.primary_position) for p in flexible_roster[7:]],
        )
        expected = evaluator.score(candidate)
        assert evaluator.score_from(candidate.strengths(), candidate.off_position_count()) == pytest.approx(expected)

    def test_configurable_weights(self):
        evaluator = TeamEvaluator(off_position_penalty=0.0, variance_weight=0.0)
        assert evaluator.score_from([1000.0, 1300.0], 4) == pytest.approx(300.0)


class TestEvaluateBalance:
    """Presentation summary."""

    def test_summary(self, evaluator):
        candidate = _candidate(
            [(make_player(1, ["OH"], {"OH": 1400}), "OH"), (make_player(2, ["MB"], {"MB": 1400}), "MB")],
            [(make_player(3, ["OH"], {"OH": 1700}), "OH"), (make_player(4, ["MB"], {"MB": 1500}), "MB")],
        )
        summary = evaluator.evaluate_balance(candidate)
        assert summary["max_difference"] == 400
        assert summary["is_balanced"] is False
        assert summary["teams"][0] == {"index": 0, "total_rating": 2800, "average_rating": 1400, "rank": 2}
        assert summary["teams"][1]["rank"] == 1

    def test_balanced_below_threshold(self, evaluator):
        candidate = _candidate(
            [(make_player(1, ["OH"], {"OH": 1500}), "OH")],
            [(make_player(2, ["OH"], {"OH": 1701}), "OH")],
        )
        assert evaluator.evaluate_balance(candidate)["is_balanced"] is True
