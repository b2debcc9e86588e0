"""Tests for cohort ranking."""

from school_results.ranking.cohort import rank_cohort
from school_results.schemas.results import CohortRanking, ResultScope
from tests.helpers.seed import academic_class, report, student


def _as_tuples(rankings: list[CohortRanking]) -> list[tuple[int, int, int]]:
    return [(r.student_id, r.rank, r.total) for r in rankings]


def test_tied_scores_share_first_place():
    """Two students on 90 share rank 1; 70 is rank 2 of 3."""
    reports = [report(1, 90), report(2, 90), report(3, 70)]
    students = [student(1), student(2), student(3)]
    classes = [academic_class(10)]
    scope = ResultScope(term_id=1, academic_class_id=10)

    result = rank_cohort(reports, scope, students, classes)

    assert _as_tuples(result) == [(1, 1, 3), (2, 1, 3), (3, 2, 3)]


def test_empty_reports_return_empty_list():
    assert rank_cohort([], ResultScope(term_id=1), [student(1)], []) == []


def test_no_matching_term_returns_empty_list():
    reports = [report(1, 80, term_id=2)]
    assert rank_cohort(reports, ResultScope(term_id=1), [student(1)], [academic_class(10)]) == []


def test_class_filter_excludes_other_classes():
    reports = [report(1, 80, class_id=10), report(2, 95, class_id=11)]
    students = [student(1), student(2)]
    classes = [academic_class(10), academic_class(11, arm="B")]

    result = rank_cohort(reports, ResultScope(term_id=1, academic_class_id=10), students, classes)

    assert _as_tuples(result) == [(1, 1, 1)]


def test_inactive_students_are_not_ranked():
    reports = [report(1, 60), report(2, 99), report(3, 70), report(4, 98), report(5, 97)]
    students = [
        student(1),
        student(2, status="Withdrawn"),
        student(3, status=None),
        student(4, status="Graduated"),
        student(5, status="Suspended"),
    ]

    result = rank_cohort(reports, ResultScope(term_id=1), students, [academic_class(10)])

    # Unset and unknown statuses count as active
    assert _as_tuples(result) == [(1, 3, 3), (3, 2, 3), (5, 1, 3)]


def test_report_without_student_record_is_skipped():
    reports = [report(1, 60), report(99, 100)]
    result = rank_cohort(reports, ResultScope(term_id=1), [student(1)], [academic_class(10)])
    assert _as_tuples(result) == [(1, 1, 1)]


def test_campus_filter_lets_students_without_campus_through():
    reports = [report(1, 70), report(2, 80), report(3, 90)]
    students = [student(1, campus_id=1), student(2, campus_id=None), student(3, campus_id=2)]

    result = rank_cohort(reports, ResultScope(term_id=1, campus_id=1), students, [academic_class(10)])

    assert _as_tuples(result) == [(1, 2, 2), (2, 1, 2)]


def test_arm_and_session_filters_use_the_report_class():
    reports = [report(1, 70, class_id=10), report(2, 80, class_id=11), report(3, 90, class_id=12)]
    students = [student(1), student(2), student(3)]
    classes = [
        academic_class(10, arm="Gold"),
        academic_class(11, arm="Silver"),
        academic_class(12, arm="Gold", session_label="2023/2024"),
    ]
    scope = ResultScope(term_id=1, arm_name="Gold", session_label="2024/2025")

    result = rank_cohort(reports, scope, students, classes)

    assert _as_tuples(result) == [(1, 1, 1)]


def test_unknown_class_or_missing_arm_does_not_exclude():
    reports = [report(1, 70, class_id=10), report(2, 80, class_id=77)]
    students = [student(1), student(2)]
    classes = [academic_class(10, arm=None, session_label=None)]
    scope = ResultScope(term_id=1, arm_name="Gold", session_label="2024/2025")

    result = rank_cohort(reports, scope, students, classes)

    assert _as_tuples(result) == [(1, 2, 2), (2, 1, 2)]


def test_level_wide_and_single_arm_rankings():
    """Without a class the whole level is ranked; with one, only that arm."""
    students = [student(i, campus_id=1) for i in range(1, 7)]
    classes = [academic_class(101, arm="Gold"), academic_class(102, arm="Silver")]
    reports = [
        report(1, 95, class_id=101),
        report(2, 85, class_id=101),
        report(3, 75, class_id=101),
        report(4, 90, class_id=102),
        report(5, 80, class_id=102),
        report(6, 70, class_id=102),
    ]

    level_wide = rank_cohort(reports, ResultScope(term_id=1, campus_id=1, session_label="2024/2025"), students, classes)
    assert {r.student_id: r.rank for r in level_wide} == {1: 1, 4: 2, 2: 3, 5: 4, 3: 5, 6: 6}
    assert all(r.total == 6 for r in level_wide)

    arm_scope = ResultScope(term_id=1, campus_id=1, session_label="2024/2025", academic_class_id=101, arm_name="Gold")
    arm = rank_cohort(reports, arm_scope, students, classes)
    assert _as_tuples(arm) == [(1, 1, 3), (2, 2, 3), (3, 3, 3)]


def test_ranking_is_repeatable():
    reports = [report(1, 55.5), report(2, 72.25), report(3, 55.5)]
    students = [student(1), student(2), student(3)]
    classes = [academic_class(10)]
    scope = ResultScope(term_id=1)

    assert rank_cohort(reports, scope, students, classes) == rank_cohort(reports, scope, students, classes)
