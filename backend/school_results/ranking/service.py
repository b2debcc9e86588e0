"""Results service: runs the engine over posted snapshots or rows loaded from the database."""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from school_results.ranking.cohort import calculate_campus_percentile, rank_cohort
from school_results.ranking.integrity import find_integrity_issues
from school_results.ranking.level import rank_level, rank_subjects
from school_results.ranking.snapshot import load_snapshot
from school_results.ranking.statistics import (
    DEFAULT_PASSING_SCORE,
    aggregate_result_statistics,
    summarize_arm,
    summarize_level,
)
from school_results.schemas.results import (
    ArmStatistics,
    CohortRanking,
    IntegrityIssue,
    LevelRanking,
    LevelStatistics,
    PercentileRequest,
    PercentileResponse,
    ResultAnalysisRequest,
    ResultAnalysisResponse,
    ResultScope,
    ResultStatistics,
    SubjectRanking,
)

logger = logging.getLogger(__name__)


def analyze_snapshot(request: ResultAnalysisRequest) -> ResultAnalysisResponse:
    """Run every operation for one scope over a caller-supplied snapshot."""
    scope, snap = request.scope, request.snapshot

    response = ResultAnalysisResponse(
        cohort_ranking=rank_cohort(snap.reports, scope, snap.students, snap.classes),
        statistics=aggregate_result_statistics(
            snap.reports, snap.enrollments, snap.students, scope, request.passing_score, snap.classes
        ),
        integrity_issues=find_integrity_issues(
            snap.reports, snap.enrollments, snap.students, snap.score_entries, scope, snap.classes
        ),
    )
    if request.level:
        response.level_ranking = rank_level(snap.reports, scope, snap.students, snap.classes, request.level)
        response.subject_ranking = rank_subjects(
            snap.score_entries, scope, snap.students, snap.classes, request.level
        )
        response.level_summary = summarize_level(
            request.level, snap, scope.term_id, request.passing_score, request.grading_scheme
        )

    logger.info(
        "Analyzed result snapshot",
        extra={
            "term_id": scope.term_id,
            "grade_level": request.level,
            "ranked": len(response.cohort_ranking),
            "issues": len(response.integrity_issues),
        },
    )
    return response


def percentile_for_student(request: PercentileRequest) -> PercentileResponse:
    """Campus percentile of a student's report for the scope's term."""
    snap = request.snapshot
    report = next(
        (r for r in snap.reports if r.student_id == request.student_id and r.term_id == request.scope.term_id),
        None,
    )
    percentile = None
    if report is not None:
        percentile = calculate_campus_percentile(report, snap.reports, request.scope, snap.students, snap.classes)
    return PercentileResponse(student_id=request.student_id, percentile=percentile)


# --- Database-backed operations ---


def get_cohort_ranking(db: Session, scope: ResultScope) -> list[CohortRanking]:
    snap = load_snapshot(db, scope.term_id)
    return rank_cohort(snap.reports, scope, snap.students, snap.classes)


def get_level_ranking(db: Session, scope: ResultScope, level: str) -> list[LevelRanking]:
    snap = load_snapshot(db, scope.term_id)
    return rank_level(snap.reports, scope, snap.students, snap.classes, level)


def get_subject_ranking(db: Session, scope: ResultScope, level: str) -> list[SubjectRanking]:
    snap = load_snapshot(db, scope.term_id)
    return rank_subjects(snap.score_entries, scope, snap.students, snap.classes, level)


def get_result_statistics(
    db: Session,
    scope: ResultScope,
    passing_score: float = DEFAULT_PASSING_SCORE,
) -> ResultStatistics:
    snap = load_snapshot(db, scope.term_id)
    return aggregate_result_statistics(
        snap.reports, snap.enrollments, snap.students, scope, passing_score, snap.classes
    )


def get_integrity_issues(db: Session, scope: ResultScope) -> list[IntegrityIssue]:
    snap = load_snapshot(db, scope.term_id)
    issues = find_integrity_issues(snap.reports, snap.enrollments, snap.students, snap.score_entries, scope, snap.classes)
    if issues:
        logger.warning("Integrity issues found", extra={"term_id": scope.term_id, "issues": len(issues)})
    return issues


def get_level_summary(
    db: Session,
    term_id: int,
    level: str,
    passing_score: float = DEFAULT_PASSING_SCORE,
) -> LevelStatistics | None:
    snap = load_snapshot(db, term_id)
    return summarize_level(level, snap, term_id, passing_score)


def get_class_summary(
    db: Session,
    term_id: int,
    class_id: int,
    passing_score: float = DEFAULT_PASSING_SCORE,
) -> ArmStatistics | None:
    snap = load_snapshot(db, term_id)
    return summarize_arm(class_id, snap, term_id, passing_score)
