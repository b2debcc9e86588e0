"""Dense ranking: ties share a rank and the next distinct score gets rank + 1."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import TypeVar

T = TypeVar("T")


def dense_rank(items: Sequence[T], score: Callable[[T], float]) -> list[int]:
    """
    Rank items by descending score (1 = best) without gaps after ties.

    Scores 90, 90, 70 rank 1, 1, 2. Equal scores are not ordered further.

    Returns:
        One rank per item, in the input order of ``items``.
    """
    scores = [score(item) for item in items]
    order = sorted(range(len(items)), key=lambda idx: scores[idx], reverse=True)

    ranks = [0] * len(items)
    last_score: float | None = None
    current_rank = 0
    for idx in order:
        if current_rank == 0 or scores[idx] != last_score:
            current_rank += 1
            last_score = scores[idx]
        ranks[idx] = current_rank

    return ranks
