"""
Tests for PairSelector coverage and exhaustion behaviour.
"""

import random

from services.pair_selection_service import PairSelector
from services.rating_service import RatingStore
from tests.conftest import make_player


def _drive_to_exhaustion(store: RatingStore, selector: PairSelector, position: str) -> list[frozenset]:
    seen = []
    while True:
        pair = selector.next_pair(position)
        if pair is None:
            return seen
        a, b = pair
        assert not a.has_compared(b.id, position)
        assert not b.has_compared(a.id, position)
        seen.append(frozenset((a.id, b.id)))
        store.apply_result(a.id, b.id, position)


class TestNextPair:
    """Pair selection at one position."""

    def test_fewer_than_two_players_returns_none(self):
        store = RatingStore([make_player(1, ["S"]), make_player(2, ["OH"])])
        assert PairSelector(store).next_pair("S") is None
        assert PairSelector(store).next_pair("MB") is None

    def test_four_players_yield_six_unique_pairs(self):
        store = RatingStore([make_player(i, ["OH"]) for i in range(4)])
        selector = PairSelector(store, rng=random.Random(3))
        pairs = _drive_to_exhaustion(store, selector, "OH")
        assert len(pairs) == 6
        assert len(set(pairs)) == 6
        assert selector.next_pair("OH") is None

    def test_exhaustion_counts_secondary_declarers(self, rating_store):
        selector = PairSelector(rating_store, rng=random.Random(5))
        pairs = _drive_to_exhaustion(rating_store, selector, "OH")
        assert len(pairs) == 10

    def test_least_compared_players_go_first(self, rating_store):
        rating_store.apply_result("a", "b", "OH")
        rating_store.apply_result("e", "a", "OH")
        selector = PairSelector(rating_store, rng=random.Random(11))
        a, b = selector.next_pair("OH")
        assert {a.id, b.id} == {"c", "d"}

    def test_falls_back_to_full_list_when_least_compared_are_exhausted(self):
        store = RatingStore([make_player(i, ["MB"]) for i in range(3)])
        store.apply_result(0, 1, "MB")
        store.apply_result(0, 1, "MB")
        # 2 is the only least-compared player, so the pair must come from the fallback scan
        a, b = PairSelector(store, rng=random.Random(1)).next_pair("MB")
        assert 2 in {a.id, b.id}

    def test_returns_snapshots(self, rating_store):
        a, _ = PairSelector(rating_store).next_pair("OH")
        a.ratings["OH"] = 0
        assert rating_store.get_player(a.id).ratings["OH"] == 1500


class TestStatusAndProgress:
    """Host-facing pairing summaries."""

    def test_status_with_too_few_players(self, rating_store):
        status = PairSelector(rating_store).status("S")
        assert status["can_compare"] is False
        assert status["reason"] == "insufficient_players"
        assert status["player_count"] == 1

    def test_status_when_exhausted(self):
        store = RatingStore([make_player(1, ["L"]), make_player(2, ["L"])])
        store.apply_draw(1, 2, "L")
        status = PairSelector(store).status("L")
        assert status["can_compare"] is False
        assert status["all_pairs_compared"] is True
        assert status["next_pair"] is None

    def test_status_offers_pair(self, rating_store):
        status = PairSelector(rating_store).status("OH")
        assert status["can_compare"] is True
        assert status["reason"] is None
        assert len(status["next_pair"]) == 2

    def test_progress(self, rating_store):
        selector = PairSelector(rating_store)
        assert selector.progress("OH") == {"compared_pairs": 0, "total_pairs": 10, "fraction": 0.0}
        rating_store.apply_result("a", "b", "OH")
        rating_store.apply_draw("c", "d", "OH")
        progress = selector.progress("OH")
        assert progress["compared_pairs"] == 2
        assert progress["fraction"] == 0.2

    def test_progress_single_player_is_complete(self, rating_store):
        assert PairSelector(rating_store).progress("S")["fraction"] == 1.0
