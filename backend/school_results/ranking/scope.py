"""Scope matching shared by the ranking, statistics and integrity operations.

Every operation builds a ``ScopeFilter`` once per call. It indexes students and
classes by id so the per-row predicates are dictionary lookups instead of
linear scans over the roster.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from school_results.schemas.results import (
    AcademicClassRecord,
    ResultScope,
    ResultSnapshot,
    StudentRecord,
    TermReportRecord,
)

DEFAULT_STATUS = "Active"
INACTIVE_STATUSES = frozenset({"Withdrawn", "Graduated", "Expelled", "Inactive"})
UNKNOWN_ARM = "Unknown"


def is_active_student(
    student: StudentRecord | None,
    inactive_statuses: Iterable[str] | None = None,
) -> bool:
    """A missing student is never active; a missing status counts as Active."""
    if student is None:
        return False
    inactive = INACTIVE_STATUSES if inactive_statuses is None else frozenset(inactive_statuses)
    return (student.status or DEFAULT_STATUS) not in inactive


class ScopeFilter:
    """Predicates answering "does this row belong to the scope?"."""

    def __init__(
        self,
        scope: ResultScope,
        students: Sequence[StudentRecord],
        classes: Sequence[AcademicClassRecord] = (),
        inactive_statuses: Iterable[str] | None = None,
    ):
        self.scope = scope
        self.students_by_id = {s.id: s for s in students}
        self.classes_by_id = {c.id: c for c in classes}
        self.inactive_statuses = (
            INACTIVE_STATUSES if inactive_statuses is None else frozenset(inactive_statuses)
        )

    def student(self, student_id: int) -> StudentRecord | None:
        return self.students_by_id.get(student_id)

    def academic_class(self, class_id: int | None) -> AcademicClassRecord | None:
        if class_id is None:
            return None
        return self.classes_by_id.get(class_id)

    def student_label(self, student_id: int) -> str:
        """Student name when resolvable, else the raw id."""
        student = self.student(student_id)
        if student is not None and student.name:
            return student.name
        return str(student_id)

    # --- student predicates ---

    def is_rankable(self, student_id: int) -> bool:
        """Active, and on the scope's campus unless the student has no campus."""
        student = self.student(student_id)
        if not is_active_student(student, self.inactive_statuses):
            return False
        if (
            self.scope.campus_id is not None
            and student.campus_id is not None
            and student.campus_id != self.scope.campus_id
        ):
            return False
        return True

    def is_countable(self, student_id: int) -> bool:
        """Active, and on exactly the scope's campus when one is given."""
        student = self.student(student_id)
        if not is_active_student(student, self.inactive_statuses):
            return False
        return self.scope.campus_id is None or student.campus_id == self.scope.campus_id

    # --- class predicates ---
    # A class row (or attribute) that cannot be resolved never excludes a record.

    def matches_session(self, class_id: int | None) -> bool:
        academic_class = self.academic_class(class_id)
        if self.scope.session_label and academic_class is not None and academic_class.session_label:
            return academic_class.session_label == self.scope.session_label
        return True

    def matches_arm(self, class_id: int | None) -> bool:
        academic_class = self.academic_class(class_id)
        if self.scope.arm_name and academic_class is not None and academic_class.arm:
            return academic_class.arm == self.scope.arm_name
        return True

    def matches_class_scope(self, class_id: int | None) -> bool:
        """Session and arm of the row's class agree with the scope."""
        return self.matches_session(class_id) and self.matches_arm(class_id)

    def matches_class_id(self, class_id: int | None) -> bool:
        """Exact class match when the scope names a class."""
        return self.scope.academic_class_id is None or class_id == self.scope.academic_class_id

    def matches_level(self, class_id: int | None, level: str) -> bool:
        academic_class = self.academic_class(class_id)
        return academic_class is not None and academic_class.level == level

    def arm_label(self, class_id: int | None) -> str:
        academic_class = self.academic_class(class_id)
        if academic_class is not None and academic_class.arm:
            return academic_class.arm
        return UNKNOWN_ARM

    # --- row selection ---

    def cohort_reports(self, reports: Iterable[TermReportRecord]) -> list[TermReportRecord]:
        """Reports ranked together: term, class, student and class-scope filters."""
        return [
            r
            for r in reports
            if r.term_id == self.scope.term_id
            and self.matches_class_id(r.academic_class_id)
            and self.is_rankable(r.student_id)
            and self.matches_class_scope(r.academic_class_id)
        ]


def build_scope_for_class(
    class_id: int | None,
    term_id: int,
    snapshot: ResultSnapshot,
) -> ResultScope:
    """Derive the scope a dashboard uses for one class (or the whole term).

    Session and arm come from the class row. The campus is taken from the first
    student, in roster order, who touches the class in this term through an
    enrollment, a report or a score entry and has a campus set.
    """
    academic_class = next((c for c in snapshot.classes if c.id == class_id), None) if class_id is not None else None

    def in_class(row_class_id: int | None) -> bool:
        return class_id is None or row_class_id == class_id

    candidate_ids: set[int] = set()
    candidate_ids.update(
        e.student_id for e in snapshot.enrollments if e.enrolled_term_id == term_id and in_class(e.academic_class_id)
    )
    candidate_ids.update(
        r.student_id for r in snapshot.reports if r.term_id == term_id and in_class(r.academic_class_id)
    )
    candidate_ids.update(
        s.student_id for s in snapshot.score_entries if s.term_id == term_id and in_class(s.academic_class_id)
    )

    campus_id = next(
        (s.campus_id for s in snapshot.students if s.id in candidate_ids and s.campus_id is not None),
        None,
    )

    return ResultScope(
        term_id=term_id,
        campus_id=campus_id,
        session_label=academic_class.session_label if academic_class else None,
        academic_class_id=class_id,
        arm_name=academic_class.arm if academic_class else None,
    )


def grade_levels(classes: Iterable[AcademicClassRecord]) -> list[str]:
    """Sorted distinct grade levels present in the class list."""
    return sorted({c.level for c in classes if c.level})
