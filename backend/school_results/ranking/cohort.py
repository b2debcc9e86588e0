"""Cohort ranking and campus percentile."""

from __future__ import annotations

import logging
import math
from collections.abc import Sequence

from school_results.ranking.dense_rank import dense_rank
from school_results.ranking.scope import ScopeFilter
from school_results.schemas.results import (
    AcademicClassRecord,
    CohortRanking,
    ResultScope,
    StudentRecord,
    TermReportRecord,
)

logger = logging.getLogger(__name__)


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def rank_cohort(
    reports: Sequence[TermReportRecord],
    scope: ResultScope,
    students: Sequence[StudentRecord],
    classes: Sequence[AcademicClassRecord],
) -> list[CohortRanking]:
    """
    Dense-rank the reports selected by ``scope`` on ``average_score``.

    Returns:
        One entry per selected report, in input order; empty when nothing matches.
    """
    scope_filter = ScopeFilter(scope, students, classes)
    cohort = scope_filter.cohort_reports(reports)
    logger.debug("Cohort selected", extra={"term_id": scope.term_id, "size": len(cohort)})
    if not cohort:
        return []

    ranks = dense_rank(cohort, lambda r: r.average_score)
    total = len(cohort)
    return [
        CohortRanking(student_id=report.student_id, rank=rank, total=total)
        for report, rank in zip(cohort, ranks)
    ]


def calculate_campus_percentile(
    report: TermReportRecord,
    all_reports: Sequence[TermReportRecord],
    scope: ResultScope,
    students: Sequence[StudentRecord],
    classes: Sequence[AcademicClassRecord],
) -> int | None:
    """
    Percentile of ``report``'s student across the campus for the term.

    The population ignores class and arm: only term, active/campus and session
    filters apply. Percentile = round((N - position) / N * 100) with a 1-based
    position in descending score order, so the top of 100 scores 99 and the
    bottom scores 0.

    Returns:
        Integer in [0, 100], or None when the population is empty or does not
        contain the student.
    """
    scope_filter = ScopeFilter(scope, students, classes)
    population = [
        r
        for r in all_reports
        if r.term_id == scope.term_id
        and scope_filter.is_rankable(r.student_id)
        and scope_filter.matches_session(r.academic_class_id)
    ]
    if not population:
        return None

    ordered = sorted(population, key=lambda r: r.average_score, reverse=True)
    position = next(
        (idx + 1 for idx, r in enumerate(ordered) if r.student_id == report.student_id),
        0,
    )
    if position == 0:
        return None

    n = len(ordered)
    return _round_half_up(((n - position) / n) * 100)
