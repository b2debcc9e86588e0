"""Database models."""

# Import all models here so metadata.create_all can see them
from school_results.models.academic import (
    AcademicClass,
    AcademicClassStudent,
    ScoreEntry,
    Student,
    StudentTermReport,
)

__all__ = [
    "AcademicClass",
    "AcademicClassStudent",
    "ScoreEntry",
    "Student",
    "StudentTermReport",
]
