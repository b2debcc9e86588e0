"""Grade-level rankings: a student's standing in their arm and across the level.

Both denominators come from a single level-wide selection (arm filter left
out), which is then partitioned by arm, so the two ranks never disagree about
who is in the population. Each student appears once per level (once per
subject for subject rankings); only their first row counts.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Hashable, Iterable, Sequence
from typing import TypeVar

from school_results.ranking.dense_rank import dense_rank
from school_results.ranking.scope import ScopeFilter
from school_results.schemas.results import (
    AcademicClassRecord,
    LevelRanking,
    ResultScope,
    ScoreEntryRecord,
    StudentRecord,
    SubjectRanking,
    TermReportRecord,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _group_indexes(items: Sequence[T], key: Callable[[T], Hashable]) -> dict[Hashable, list[int]]:
    groups: dict[Hashable, list[int]] = {}
    for idx, item in enumerate(items):
        groups.setdefault(key(item), []).append(idx)
    return groups


def _rank_within_groups(
    items: Sequence[T],
    groups: dict[Hashable, list[int]],
    score: Callable[[T], float],
) -> dict[int, tuple[int, int]]:
    """Map item index -> (rank within its group, group size)."""
    placed: dict[int, tuple[int, int]] = {}
    for indexes in groups.values():
        ranks = dense_rank([items[i] for i in indexes], score)
        for idx, rank in zip(indexes, ranks):
            placed[idx] = (rank, len(indexes))
    return placed


def _first_per_key(items: Iterable[T], key: Callable[[T], Hashable]) -> list[T]:
    """Keep the first item seen for each key."""
    seen: set[Hashable] = set()
    kept: list[T] = []
    for item in items:
        k = key(item)
        if k not in seen:
            seen.add(k)
            kept.append(item)
    return kept


def _in_level(scope_filter: ScopeFilter, class_id: int | None, student_id: int, term_id: int, level: str) -> bool:
    return (
        term_id == scope_filter.scope.term_id
        and scope_filter.is_rankable(student_id)
        and scope_filter.matches_level(class_id, level)
        and scope_filter.matches_session(class_id)
    )


def rank_level(
    reports: Sequence[TermReportRecord],
    scope: ResultScope,
    students: Sequence[StudentRecord],
    classes: Sequence[AcademicClassRecord],
    level: str,
) -> list[LevelRanking]:
    """Rank each student of ``level`` within their arm and across the level."""
    scope_filter = ScopeFilter(scope, students, classes)
    level_reports = _first_per_key(
        (r for r in reports if _in_level(scope_filter, r.academic_class_id, r.student_id, r.term_id, level)),
        lambda r: r.student_id,
    )
    logger.debug("Level selected", extra={"grade_level": level, "size": len(level_reports)})
    if not level_reports:
        return []

    level_ranks = dense_rank(level_reports, lambda r: r.average_score)
    arms = _group_indexes(level_reports, lambda r: scope_filter.arm_label(r.academic_class_id))
    arm_ranks = _rank_within_groups(level_reports, arms, lambda r: r.average_score)

    total_in_level = len(level_reports)
    rankings = []
    for idx, report in enumerate(level_reports):
        rank_in_arm, total_in_arm = arm_ranks[idx]
        rankings.append(
            LevelRanking(
                student_id=report.student_id,
                rank_in_arm=rank_in_arm,
                total_in_arm=total_in_arm,
                rank_in_level=level_ranks[idx],
                total_in_level=total_in_level,
            )
        )
    return rankings


def rank_subjects(
    score_entries: Sequence[ScoreEntryRecord],
    scope: ResultScope,
    students: Sequence[StudentRecord],
    classes: Sequence[AcademicClassRecord],
    level: str,
) -> list[SubjectRanking]:
    """Per-subject version of ``rank_level``, ranked on ``total_score``.

    Each subject is its own population; arm groups are formed inside it.
    """
    scope_filter = ScopeFilter(scope, students, classes)
    level_entries = _first_per_key(
        (e for e in score_entries if _in_level(scope_filter, e.academic_class_id, e.student_id, e.term_id, level)),
        lambda e: (e.student_id, e.subject_name),
    )
    logger.debug("Level score entries selected", extra={"grade_level": level, "size": len(level_entries)})
    if not level_entries:
        return []

    placed_level: dict[int, tuple[int, int]] = {}
    placed_arm: dict[int, tuple[int, int]] = {}
    for subject_indexes in _group_indexes(level_entries, lambda e: e.subject_name).values():
        subject_entries = [level_entries[i] for i in subject_indexes]
        level_ranks = dense_rank(subject_entries, lambda e: e.total_score)
        arms = _group_indexes(subject_entries, lambda e: scope_filter.arm_label(e.academic_class_id))
        arm_ranks = _rank_within_groups(subject_entries, arms, lambda e: e.total_score)
        for local_idx, entry_idx in enumerate(subject_indexes):
            placed_level[entry_idx] = (level_ranks[local_idx], len(subject_indexes))
            placed_arm[entry_idx] = arm_ranks[local_idx]

    rankings = []
    for idx, entry in enumerate(level_entries):
        rank_in_level, total_in_level = placed_level[idx]
        rank_in_arm, total_in_arm = placed_arm[idx]
        rankings.append(
            SubjectRanking(
                student_id=entry.student_id,
                subject_name=entry.subject_name,
                rank_in_arm=rank_in_arm,
                total_in_arm=total_in_arm,
                rank_in_level=rank_in_level,
                total_in_level=total_in_level,
                score=entry.total_score,
            )
        )
    return rankings
