"""Results API: rankings, percentile, statistics, integrity audit and summaries."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from school_results.core.app_exceptions import raise_not_found
from school_results.db.session import get_db
from school_results.ranking import service
from school_results.ranking.statistics import DEFAULT_PASSING_SCORE
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

router = APIRouter()


def scope_params(
    term_id: Annotated[int, Query(description="Term to compute for")],
    campus_id: Annotated[int | None, Query()] = None,
    session_label: Annotated[str | None, Query(description="e.g. 2024/2025")] = None,
    academic_class_id: Annotated[int | None, Query()] = None,
    arm_name: Annotated[str | None, Query()] = None,
) -> ResultScope:
    """Build a ResultScope from query parameters."""
    return ResultScope(
        term_id=term_id,
        campus_id=campus_id,
        session_label=session_label,
        academic_class_id=academic_class_id,
        arm_name=arm_name,
    )


ScopeDep = Annotated[ResultScope, Depends(scope_params)]
DbDep = Annotated[Session, Depends(get_db)]


# --- Snapshot computations ---


@router.post("/results/analyze", response_model=ResultAnalysisResponse)
def analyze_results(payload: ResultAnalysisRequest) -> ResultAnalysisResponse:
    """Rank, summarize and audit a posted snapshot."""
    return service.analyze_snapshot(payload)


@router.post("/results/percentile", response_model=PercentileResponse)
def student_percentile(payload: PercentileRequest) -> PercentileResponse:
    """Campus percentile of one student; null when the student is not ranked."""
    return service.percentile_for_student(payload)


# --- Database-backed computations ---


@router.get("/results/cohort-ranking", response_model=list[CohortRanking])
def cohort_ranking(scope: ScopeDep, db: DbDep) -> list[CohortRanking]:
    return service.get_cohort_ranking(db, scope)


@router.get("/results/level-ranking", response_model=list[LevelRanking])
def level_ranking(
    scope: ScopeDep,
    db: DbDep,
    level: Annotated[str, Query(min_length=1, description="Grade level, e.g. SS1")],
) -> list[LevelRanking]:
    return service.get_level_ranking(db, scope, level)


@router.get("/results/subject-ranking", response_model=list[SubjectRanking])
def subject_ranking(
    scope: ScopeDep,
    db: DbDep,
    level: Annotated[str, Query(min_length=1, description="Grade level, e.g. SS1")],
) -> list[SubjectRanking]:
    return service.get_subject_ranking(db, scope, level)


@router.get("/results/statistics", response_model=ResultStatistics)
def result_statistics(
    scope: ScopeDep,
    db: DbDep,
    passing_score: Annotated[float, Query()] = DEFAULT_PASSING_SCORE,
) -> ResultStatistics:
    return service.get_result_statistics(db, scope, passing_score)


@router.get("/results/integrity", response_model=list[IntegrityIssue])
def integrity_issues(scope: ScopeDep, db: DbDep) -> list[IntegrityIssue]:
    return service.get_integrity_issues(db, scope)


@router.get("/results/levels/{level}/summary", response_model=LevelStatistics)
def level_summary(
    level: str,
    term_id: int,
    db: DbDep,
    passing_score: Annotated[float, Query()] = DEFAULT_PASSING_SCORE,
) -> LevelStatistics:
    summary = service.get_level_summary(db, term_id, level, passing_score)
    if summary is None:
        raise_not_found("level", level)
    return summary


@router.get("/results/classes/{class_id}/summary", response_model=ArmStatistics)
def class_summary(
    class_id: int,
    term_id: int,
    db: DbDep,
    passing_score: Annotated[float, Query()] = DEFAULT_PASSING_SCORE,
) -> ArmStatistics:
    summary = service.get_class_summary(db, term_id, class_id, passing_score)
    if summary is None:
        raise_not_found("class", class_id)
    return summary
