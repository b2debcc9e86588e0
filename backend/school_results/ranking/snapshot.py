"""Load the rows a term's result computations need into a ResultSnapshot."""

from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from school_results.models.academic import (
    AcademicClass,
    AcademicClassStudent,
    ScoreEntry,
    Student,
    StudentTermReport,
)
from school_results.schemas.results import (
    AcademicClassRecord,
    EnrollmentRecord,
    ResultSnapshot,
    ScoreEntryRecord,
    StudentRecord,
    TermReportRecord,
)

logger = logging.getLogger(__name__)


def load_snapshot(db: Session, term_id: int) -> ResultSnapshot:
    """
    Fetch every student and class, plus the term's enrollments, reports and scores.

    Rows are returned in primary-key order so engine output is reproducible.
    """
    students = db.execute(select(Student).order_by(Student.id)).scalars().all()
    classes = db.execute(select(AcademicClass).order_by(AcademicClass.id)).scalars().all()
    enrollments = (
        db.execute(
            select(AcademicClassStudent)
            .where(AcademicClassStudent.enrolled_term_id == term_id)
            .order_by(AcademicClassStudent.id)
        )
        .scalars()
        .all()
    )
    reports = (
        db.execute(
            select(StudentTermReport).where(StudentTermReport.term_id == term_id).order_by(StudentTermReport.id)
        )
        .scalars()
        .all()
    )
    score_entries = (
        db.execute(select(ScoreEntry).where(ScoreEntry.term_id == term_id).order_by(ScoreEntry.id))
        .scalars()
        .all()
    )

    snapshot = ResultSnapshot(
        students=[StudentRecord.model_validate(s) for s in students],
        classes=[AcademicClassRecord.model_validate(c) for c in classes],
        enrollments=[EnrollmentRecord.model_validate(e) for e in enrollments],
        reports=[TermReportRecord.model_validate(r) for r in reports],
        score_entries=[ScoreEntryRecord.model_validate(s) for s in score_entries],
    )
    logger.info(
        "Loaded result snapshot",
        extra={
            "term_id": term_id,
            "students": len(snapshot.students),
            "classes": len(snapshot.classes),
            "enrollments": len(snapshot.enrollments),
            "reports": len(snapshot.reports),
            "score_entries": len(snapshot.score_entries),
        },
    )
    return snapshot
