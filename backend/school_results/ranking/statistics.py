"""Result statistics, grading and arm/level summaries."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from school_results.ranking.scope import ScopeFilter, build_scope_for_class
from school_results.schemas.results import (
    AcademicClassRecord,
    ArmStatistics,
    EnrollmentRecord,
    GradeDistribution,
    GradingScheme,
    LevelStatistics,
    ResultScope,
    ResultSnapshot,
    ResultStatistics,
    StudentRecord,
    TermReportRecord,
)

logger = logging.getLogger(__name__)

DEFAULT_PASSING_SCORE = 50.0
NO_GRADE = "N/A"
GRADE_ORDER = ["A", "B", "C", "D", "E", "F"]


def aggregate_result_statistics(
    reports: Sequence[TermReportRecord],
    enrollments: Sequence[EnrollmentRecord],
    students: Sequence[StudentRecord],
    scope: ResultScope,
    passing_score: float = DEFAULT_PASSING_SCORE,
    classes: Sequence[AcademicClassRecord] = (),
) -> ResultStatistics:
    """
    Enrollment, coverage, average and pass figures for a scope.

    Only active students on the scope's campus count (a student without a
    campus does not match a campus-filtered scope here).

    Note: pass_rate divides by the number of scoped report rows, duplicates
    included, not by with_results.
    """
    scope_filter = ScopeFilter(scope, students, classes)

    def in_scope(term_id: int, class_id: int | None, student_id: int) -> bool:
        return (
            term_id == scope.term_id
            and scope_filter.matches_class_id(class_id)
            and scope_filter.matches_class_scope(class_id)
            and scope_filter.is_countable(student_id)
        )

    enrolled_ids = {
        e.student_id for e in enrollments if in_scope(e.enrolled_term_id, e.academic_class_id, e.student_id)
    }
    scoped_reports = [r for r in reports if in_scope(r.term_id, r.academic_class_id, r.student_id)]

    if not scoped_reports:
        return ResultStatistics(enrolled=len(enrolled_ids))

    scores = [r.average_score or 0.0 for r in scoped_reports]
    pass_count = sum(1 for s in scores if s >= passing_score)
    return ResultStatistics(
        enrolled=len(enrolled_ids),
        with_results=len({r.student_id for r in scoped_reports}),
        average_score=sum(scores) / len(scores),
        pass_count=pass_count,
        pass_rate=pass_count / len(scoped_reports) * 100,
    )


# ============================================================================
# Grading
# ============================================================================


def grade_for_score(score: float, grading_scheme: GradingScheme | None) -> str:
    """Label of the first rule whose band contains ``score``."""
    if grading_scheme is None:
        return NO_GRADE
    for rule in grading_scheme.rules:
        if rule.min_score <= score <= rule.max_score:
            return rule.grade_label
    return NO_GRADE


def grade_distribution(
    scores: Sequence[float],
    grading_scheme: GradingScheme | None,
) -> list[GradeDistribution]:
    """Count of scores per grade, A..F first, other labels after in first-seen order."""
    if not scores:
        return []

    counts: dict[str, int] = {}
    for score in scores:
        label = grade_for_score(score, grading_scheme)
        counts[label] = counts.get(label, 0) + 1

    total = len(scores)
    distribution = [
        GradeDistribution(grade_label=label, count=count, percentage=count / total * 100)
        for label, count in counts.items()
    ]

    def order(item: GradeDistribution) -> int:
        if item.grade_label in GRADE_ORDER:
            return GRADE_ORDER.index(item.grade_label)
        return len(GRADE_ORDER)

    return sorted(distribution, key=order)


# ============================================================================
# Arm / level summaries
# ============================================================================


def _extremes(
    reports: Sequence[TermReportRecord],
    scope_filter: ScopeFilter,
) -> tuple[float, str | None, float, str | None]:
    highest = lowest = reports[0]
    for report in reports:
        if report.average_score > highest.average_score:
            highest = report
        if report.average_score < lowest.average_score:
            lowest = report

    def name(report: TermReportRecord) -> str | None:
        student = scope_filter.student(report.student_id)
        return student.name if student else None

    return highest.average_score, name(highest), lowest.average_score, name(lowest)


def summarize_arm(
    class_id: int,
    snapshot: ResultSnapshot,
    term_id: int,
    passing_score: float = DEFAULT_PASSING_SCORE,
    grading_scheme: GradingScheme | None = None,
) -> ArmStatistics | None:
    """Summary of one class arm, or None when the class is unknown."""
    academic_class = next((c for c in snapshot.classes if c.id == class_id), None)
    if academic_class is None:
        return None

    scope = build_scope_for_class(class_id, term_id, snapshot)
    scope_filter = ScopeFilter(scope, snapshot.students, snapshot.classes)
    reports = scope_filter.cohort_reports(snapshot.reports)

    if not reports:
        return ArmStatistics(
            arm_name=academic_class.arm,
            academic_class_id=class_id,
            student_count=0,
            average_score=0.0,
            highest_score=0.0,
            lowest_score=0.0,
            pass_count=0,
            pass_rate=0.0,
        )

    stats = aggregate_result_statistics(
        snapshot.reports, snapshot.enrollments, snapshot.students, scope, passing_score, snapshot.classes
    )
    highest_score, highest_scorer, lowest_score, lowest_scorer = _extremes(reports, scope_filter)

    return ArmStatistics(
        arm_name=academic_class.arm,
        academic_class_id=class_id,
        student_count=stats.enrolled,
        average_score=stats.average_score,
        highest_score=highest_score,
        highest_scorer=highest_scorer,
        lowest_score=lowest_score,
        lowest_scorer=lowest_scorer,
        pass_count=stats.pass_count,
        pass_rate=stats.pass_rate,
        grade_distribution=grade_distribution([r.average_score for r in reports], grading_scheme),
    )


def summarize_level(
    level: str,
    snapshot: ResultSnapshot,
    term_id: int,
    passing_score: float = DEFAULT_PASSING_SCORE,
    grading_scheme: GradingScheme | None = None,
) -> LevelStatistics | None:
    """Summary of a grade level over its active classes, with a per-arm breakdown.

    Returns None when the level has no active class.
    """
    level_classes = [c for c in snapshot.classes if c.level == level and c.is_active]
    if not level_classes:
        return None

    scopes = [build_scope_for_class(c.id, term_id, snapshot) for c in level_classes]
    reports: list[TermReportRecord] = []
    for scope in scopes:
        reports.extend(ScopeFilter(scope, snapshot.students, snapshot.classes).cohort_reports(snapshot.reports))

    logger.debug(
        "Level summary inputs",
        extra={"grade_level": level, "classes": len(level_classes), "reports": len(reports)},
    )
    if not reports:
        return LevelStatistics(
            level=level,
            total_students=0,
            overall_average=0.0,
            highest_score=0.0,
            lowest_score=0.0,
            pass_count=0,
            pass_rate=0.0,
        )

    stats_list = [
        aggregate_result_statistics(
            snapshot.reports, snapshot.enrollments, snapshot.students, scope, passing_score, snapshot.classes
        )
        for scope in scopes
    ]
    pass_count = sum(s.pass_count for s in stats_list)
    scores = [r.average_score for r in reports]
    lookup = ScopeFilter(ResultScope(term_id=term_id), snapshot.students, snapshot.classes)
    highest_score, highest_scorer, lowest_score, lowest_scorer = _extremes(reports, lookup)

    arms = [
        arm
        for arm in (summarize_arm(c.id, snapshot, term_id, passing_score, grading_scheme) for c in level_classes)
        if arm is not None
    ]

    return LevelStatistics(
        level=level,
        total_students=sum(s.enrolled for s in stats_list),
        overall_average=sum(scores) / len(scores),
        highest_score=highest_score,
        highest_scorer=highest_scorer,
        lowest_score=lowest_score,
        lowest_scorer=lowest_scorer,
        pass_count=pass_count,
        pass_rate=pass_count / len(reports) * 100,
        grade_distribution=grade_distribution(scores, grading_scheme),
        arms=arms,
    )
