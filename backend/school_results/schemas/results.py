"""Pydantic schemas for result ranking, statistics and integrity auditing."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# ============================================================================
# Input records (snapshots of externally-owned rows)
# ============================================================================


class StudentRecord(BaseModel):
    """A learner record."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    name: str | None = None
    status: str | None = None
    campus_id: int | None = None


class AcademicClassRecord(BaseModel):
    """A class-arm offering."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: int
    name: str | None = None
    level: str | None = None
    arm: str | None = None
    session_label: str | None = None
    is_active: bool = True


class EnrollmentRecord(BaseModel):
    """A student's enrollment in a class for a term."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    student_id: int
    academic_class_id: int | None = None
    enrolled_term_id: int


class TermReportRecord(BaseModel):
    """Aggregate term result for one student in one class."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    student_id: int
    term_id: int
    academic_class_id: int | None = None
    average_score: float = 0.0


class ScoreEntryRecord(BaseModel):
    """A single subject score."""

    model_config = ConfigDict(from_attributes=True, frozen=True)

    student_id: int
    academic_class_id: int | None = None
    subject_name: str
    term_id: int
    total_score: float = 0.0


class ResultScope(BaseModel):
    """Filter narrowing which records take part in a computation."""

    model_config = ConfigDict(frozen=True)

    term_id: int
    campus_id: int | None = None
    session_label: str | None = None
    academic_class_id: int | None = None
    arm_name: str | None = None


class ResultSnapshot(BaseModel):
    """Fully materialized rows handed to the engine."""

    students: list[StudentRecord] = Field(default_factory=list)
    classes: list[AcademicClassRecord] = Field(default_factory=list)
    enrollments: list[EnrollmentRecord] = Field(default_factory=list)
    reports: list[TermReportRecord] = Field(default_factory=list)
    score_entries: list[ScoreEntryRecord] = Field(default_factory=list)


# ============================================================================
# Engine outputs
# ============================================================================


class CohortRanking(BaseModel):
    student_id: int
    rank: int
    total: int


class LevelRanking(BaseModel):
    """Arm and level standing of one student."""

    student_id: int
    rank_in_arm: int
    total_in_arm: int
    rank_in_level: int
    total_in_level: int


class SubjectRanking(BaseModel):
    """Arm and level standing of one student in one subject."""

    student_id: int
    subject_name: str
    rank_in_arm: int
    total_in_arm: int
    rank_in_level: int
    total_in_level: int
    score: float


class ResultStatistics(BaseModel):
    enrolled: int = 0
    with_results: int = 0
    average_score: float = 0.0
    pass_count: int = 0
    pass_rate: float = 0.0


class IntegrityIssueType(str, Enum):
    """Kinds of data-integrity problems."""

    MISSING_ASSIGNMENT = "missing-assignment"
    ORPHAN_RESULT = "orphan-result"
    DUPLICATE_RESULT = "duplicate-result"


class IntegrityIssue(BaseModel):
    type: IntegrityIssueType
    message: str


class GradingRule(BaseModel):
    min_score: float
    max_score: float
    grade_label: str


class GradingScheme(BaseModel):
    """Ordered grade bands; the first matching rule wins."""

    rules: list[GradingRule] = Field(default_factory=list)


class GradeDistribution(BaseModel):
    grade_label: str
    count: int
    percentage: float


class ArmStatistics(BaseModel):
    """Summary of one class arm."""

    arm_name: str | None
    academic_class_id: int
    student_count: int
    average_score: float
    highest_score: float
    highest_scorer: str | None = None
    lowest_score: float
    lowest_scorer: str | None = None
    pass_count: int
    pass_rate: float
    grade_distribution: list[GradeDistribution] = Field(default_factory=list)


class LevelStatistics(BaseModel):
    """Summary of a grade level across all of its arms."""

    level: str
    total_students: int
    overall_average: float
    highest_score: float
    highest_scorer: str | None = None
    lowest_score: float
    lowest_scorer: str | None = None
    pass_count: int
    pass_rate: float
    grade_distribution: list[GradeDistribution] = Field(default_factory=list)
    arms: list[ArmStatistics] = Field(default_factory=list)


# ============================================================================
# API payloads
# ============================================================================


class ResultAnalysisRequest(BaseModel):
    """POST /results/analyze."""

    scope: ResultScope
    snapshot: ResultSnapshot
    level: str | None = Field(default=None, description="Grade level for level/subject rankings, e.g. SS1")
    passing_score: float = Field(default=50.0, description="Minimum average score counted as a pass")
    grading_scheme: GradingScheme | None = None


class ResultAnalysisResponse(BaseModel):
    cohort_ranking: list[CohortRanking]
    statistics: ResultStatistics
    integrity_issues: list[IntegrityIssue]
    level_ranking: list[LevelRanking] = Field(default_factory=list)
    subject_ranking: list[SubjectRanking] = Field(default_factory=list)
    level_summary: LevelStatistics | None = None


class PercentileRequest(BaseModel):
    """POST /results/percentile."""

    scope: ResultScope
    snapshot: ResultSnapshot
    student_id: int


class PercentileResponse(BaseModel):
    student_id: int
    percentile: int | None
