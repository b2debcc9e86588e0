"""Tests for campus percentile."""

from hypothesis import given, settings
from hypothesis import strategies as st

from school_results.ranking.cohort import calculate_campus_percentile
from school_results.schemas.results import ResultScope
from tests.helpers.seed import academic_class, report, student

SCOPE = ResultScope(term_id=1)
CLASSES = [academic_class(10, arm="A"), academic_class(11, arm="B")]


def test_eighth_of_ten_is_twentieth_percentile():
    scores = {1: 100, 2: 95, 4: 90, 5: 85, 6: 80, 7: 75, 8: 70, 3: 65, 9: 60, 10: 55}
    reports = [report(sid, avg) for sid, avg in scores.items()]
    students = [student(sid) for sid in scores]

    assert calculate_campus_percentile(report(3, 65), reports, SCOPE, students, CLASSES) == 20


def test_top_of_hundred_is_ninety_ninth_and_bottom_is_zero():
    reports = [report(sid, float(sid)) for sid in range(1, 101)]
    students = [student(sid) for sid in range(1, 101)]

    assert calculate_campus_percentile(reports[-1], reports, SCOPE, students, CLASSES) == 99
    assert calculate_campus_percentile(reports[0], reports, SCOPE, students, CLASSES) == 0


def test_half_percentiles_round_up():
    """7th of 8 is 12.5 -> 13."""
    reports = [report(sid, 100 - sid) for sid in range(1, 9)]
    students = [student(sid) for sid in range(1, 9)]

    assert calculate_campus_percentile(reports[6], reports, SCOPE, students, CLASSES) == 13


def test_empty_population_is_none():
    assert calculate_campus_percentile(report(1, 80), [], SCOPE, [student(1)], CLASSES) is None


def test_student_outside_population_is_none():
    reports = [report(1, 80), report(2, 70)]
    students = [student(1), student(2), student(3, status="Expelled")]

    assert calculate_campus_percentile(report(3, 90), reports + [report(3, 90)], SCOPE, students, CLASSES) is None
    assert calculate_campus_percentile(report(4, 90), reports, SCOPE, students, CLASSES) is None


def test_population_spans_arms_but_respects_term_and_session():
    reports = [
        report(1, 90, class_id=10),
        report(2, 80, class_id=11),
        report(3, 70, class_id=12),
        report(4, 99, term_id=2),
    ]
    students = [student(1), student(2), student(3), student(4)]
    classes = CLASSES + [academic_class(12, session_label="2023/2024")]
    scope = ResultScope(term_id=1, arm_name="A", academic_class_id=10, session_label="2024/2025")

    # Population is students 1 and 2; student 2 is second of two
    assert calculate_campus_percentile(report(2, 80, class_id=11), reports, scope, students, classes) == 0
    assert calculate_campus_percentile(report(1, 90), reports, scope, students, classes) == 50


def test_input_reports_are_not_reordered():
    reports = [report(1, 10), report(2, 90), report(3, 50)]
    before = list(reports)
    calculate_campus_percentile(report(1, 10), reports, SCOPE, [student(1), student(2), student(3)], CLASSES)
    assert reports == before


@settings(max_examples=60, deadline=None)
@given(
    scores=st.lists(st.floats(min_value=0, max_value=100, allow_nan=False), min_size=1, max_size=30),
    data=st.data(),
)
def test_percentile_is_between_zero_and_hundred(scores, data):
    reports = [report(idx + 1, s) for idx, s in enumerate(scores)]
    students = [student(idx + 1) for idx in range(len(scores))]
    target = data.draw(st.sampled_from(reports))

    percentile = calculate_campus_percentile(target, reports, SCOPE, students, CLASSES)

    assert percentile is not None
    assert 0 <= percentile <= 100
