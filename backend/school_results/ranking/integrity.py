"""Cross-checks between enrollments, term reports and score entries.

The audit only looks at students that already touch the scope through an
enrollment row. Enrollments are taken as they are: they are not narrowed by
campus or status, so a class shared by two campuses does not produce orphan
warnings for the other campus. An active student with no enrollment anywhere
in the scope is not reported (no missing-assignment issues).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from school_results.ranking.scope import ScopeFilter
from school_results.schemas.results import (
    AcademicClassRecord,
    EnrollmentRecord,
    IntegrityIssue,
    IntegrityIssueType,
    ResultScope,
    ScoreEntryRecord,
    StudentRecord,
    TermReportRecord,
)

logger = logging.getLogger(__name__)


def _count_keys(keys: list[tuple]) -> dict[tuple, int]:
    counts: dict[tuple, int] = {}
    for key in keys:
        counts[key] = counts.get(key, 0) + 1
    return counts


def find_integrity_issues(
    reports: Sequence[TermReportRecord],
    enrollments: Sequence[EnrollmentRecord],
    students: Sequence[StudentRecord],
    score_entries: Sequence[ScoreEntryRecord],
    scope: ResultScope,
    classes: Sequence[AcademicClassRecord] = (),
) -> list[IntegrityIssue]:
    """
    Audit the scope and list what looks wrong.

    Issues, in order:
    - orphan-result: enrollment whose student record does not exist
    - orphan-result: report for a student not enrolled in the scope
    - duplicate-result: more than one report per (student, term, class)
    - duplicate-result: more than one score per (student, class, subject, term)

    Never raises; an empty list means the scope is consistent.
    """
    scope_filter = ScopeFilter(scope, students, classes)

    def in_scope(term_id: int, class_id: int | None) -> bool:
        if term_id != scope.term_id:
            return False
        # Rows without a class are not excluded by the class filter
        if scope.academic_class_id is not None and class_id is not None and class_id != scope.academic_class_id:
            return False
        return scope_filter.matches_class_scope(class_id)

    issues: list[IntegrityIssue] = []

    scoped_enrollments = [e for e in enrollments if in_scope(e.enrolled_term_id, e.academic_class_id)]
    for enrollment in scoped_enrollments:
        if scope_filter.student(enrollment.student_id) is None:
            issues.append(
                IntegrityIssue(
                    type=IntegrityIssueType.ORPHAN_RESULT,
                    message=f"Enrollment exists for student ID {enrollment.student_id} but student record not found",
                )
            )
    enrolled_ids = {e.student_id for e in scoped_enrollments}

    scoped_reports = [r for r in reports if in_scope(r.term_id, r.academic_class_id)]
    for report in scoped_reports:
        if report.student_id not in enrolled_ids:
            issues.append(
                IntegrityIssue(
                    type=IntegrityIssueType.ORPHAN_RESULT,
                    message=(
                        f"Result exists for {scope_filter.student_label(report.student_id)} "
                        "without enrollment in this class"
                    ),
                )
            )

    report_counts = _count_keys([(r.student_id, r.term_id, r.academic_class_id) for r in scoped_reports])
    for (student_id, _, _), count in report_counts.items():
        if count > 1:
            issues.append(
                IntegrityIssue(
                    type=IntegrityIssueType.DUPLICATE_RESULT,
                    message=f"Duplicate results detected for {scope_filter.student_label(student_id)} in the same term",
                )
            )

    scoped_scores = [s for s in score_entries if in_scope(s.term_id, s.academic_class_id)]
    score_counts = _count_keys(
        [(s.student_id, s.academic_class_id, s.subject_name, s.term_id) for s in scoped_scores]
    )
    for (student_id, _, subject_name, _), count in score_counts.items():
        if count > 1:
            issues.append(
                IntegrityIssue(
                    type=IntegrityIssueType.DUPLICATE_RESULT,
                    message=(
                        f"Duplicate score rows detected for {scope_filter.student_label(student_id)} "
                        f"in {subject_name}"
                    ),
                )
            )

    logger.debug(
        "Integrity audit finished",
        extra={
            "term_id": scope.term_id,
            "enrollments": len(scoped_enrollments),
            "reports": len(scoped_reports),
            "score_entries": len(scoped_scores),
            "issues": len(issues),
        },
    )
    return issues
