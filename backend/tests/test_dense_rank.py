"""Tests for the dense rank primitive."""

from hypothesis import given, settings
from hypothesis import strategies as st

from school_results.ranking.dense_rank import dense_rank

scores_strategy = st.lists(st.integers(min_value=0, max_value=100), max_size=40)


def test_ties_share_rank_and_next_score_is_not_skipped():
    """90, 90, 70 -> 1, 1, 2 (dense, not 1, 1, 3)."""
    assert dense_rank([90, 90, 70], lambda s: s) == [1, 1, 2]


def test_ranks_follow_input_order():
    assert dense_rank([70, 95, 80, 95], lambda s: s) == [3, 1, 2, 1]


def test_empty_input():
    assert dense_rank([], lambda s: s) == []


def test_single_item_is_rank_one():
    assert dense_rank([42.5], lambda s: s) == [1]


def test_all_equal_scores_are_rank_one():
    assert dense_rank([60, 60, 60, 60], lambda s: s) == [1, 1, 1, 1]


def test_score_function_is_applied_to_items():
    items = [{"id": 1, "avg": 55.0}, {"id": 2, "avg": 81.5}, {"id": 3, "avg": 55.0}]
    assert dense_rank(items, lambda item: item["avg"]) == [2, 1, 2]


def test_negative_scores_are_ranked_as_given():
    assert dense_rank([-5, 0, -5, 10], lambda s: s) == [3, 2, 3, 1]


def test_input_is_not_mutated():
    scores = [3, 1, 2]
    dense_rank(scores, lambda s: s)
    assert scores == [3, 1, 2]


@settings(max_examples=100, deadline=None)
@given(scores=scores_strategy)
def test_higher_score_means_better_rank(scores):
    """Property: score order and rank order agree, ties share a rank."""
    ranks = dense_rank(scores, lambda s: s)
    for i in range(len(scores)):
        for j in range(len(scores)):
            if scores[i] > scores[j]:
                assert ranks[i] < ranks[j]
            elif scores[i] == scores[j]:
                assert ranks[i] == ranks[j]


@settings(max_examples=100, deadline=None)
@given(scores=scores_strategy)
def test_max_rank_equals_distinct_scores(scores):
    """Property: no gaps, the worst rank is the number of distinct scores."""
    ranks = dense_rank(scores, lambda s: s)
    assert max(ranks, default=0) == len(set(scores))
    assert sorted(set(ranks)) == list(range(1, len(set(scores)) + 1))


@settings(max_examples=50, deadline=None)
@given(scores=scores_strategy, rnd=st.randoms())
def test_rank_travels_with_item_when_input_is_shuffled(scores, rnd):
    """Property: shuffling then restoring order gives back the same ranks."""
    indexed = list(enumerate(scores))
    ranks = dense_rank(indexed, lambda pair: pair[1])

    shuffled = indexed[:]
    rnd.shuffle(shuffled)
    shuffled_ranks = dense_rank(shuffled, lambda pair: pair[1])
    restored = [rank for _, rank in sorted(zip((pair[0] for pair in shuffled), shuffled_ranks))]

    assert restored == ranks
