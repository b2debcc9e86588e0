"""Academic records read by the results engine.

These tables are owned by the school-management application; the results
service only ever reads them.
"""

from sqlalchemy import Boolean, Column, Float, ForeignKey, Index, Integer, String, Text

from school_results.db.base import Base


class Student(Base):
    """A learner record."""

    __tablename__ = "students"

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=True)
    status = Column(String(32), nullable=True)  # Active | Withdrawn | Graduated | Expelled | Inactive | ...
    campus_id = Column(Integer, nullable=True)

    __table_args__ = (Index("ix_students_campus_id", "campus_id"),)


class AcademicClass(Base):
    """A class-arm offering for a session, e.g. SS1 Gold 2024/2025."""

    __tablename__ = "academic_classes"

    id = Column(Integer, primary_key=True)
    name = Column(Text, nullable=True)
    level = Column(String(32), nullable=True)
    arm = Column(String(64), nullable=True)
    session_label = Column(String(32), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)

    __table_args__ = (Index("ix_academic_classes_level", "level"),)


class AcademicClassStudent(Base):
    """A student's enrollment in a class for a term."""

    __tablename__ = "academic_class_students"

    id = Column(Integer, primary_key=True)
    academic_class_id = Column(Integer, ForeignKey("academic_classes.id", ondelete="CASCADE"), nullable=True)
    # No FK on student_id: enrollments pointing at deleted students are reported by the audit
    student_id = Column(Integer, nullable=False)
    enrolled_term_id = Column(Integer, nullable=False)

    __table_args__ = (Index("ix_academic_class_students_term", "enrolled_term_id"),)


class StudentTermReport(Base):
    """Computed aggregate result for one student in one term and class."""

    __tablename__ = "student_term_reports"

    id = Column(Integer, primary_key=True)
    student_id = Column(Integer, nullable=False)
    term_id = Column(Integer, nullable=False)
    academic_class_id = Column(Integer, ForeignKey("academic_classes.id", ondelete="SET NULL"), nullable=True)
    average_score = Column(Float, nullable=False, default=0.0)

    __table_args__ = (Index("ix_student_term_reports_term", "term_id"),)


class ScoreEntry(Base):
    """A single subject score for a student in a term and class."""

    __tablename__ = "score_entries"

    id = Column(Integer, primary_key=True)
    student_id = Column(Integer, nullable=False)
    academic_class_id = Column(Integer, ForeignKey("academic_classes.id", ondelete="SET NULL"), nullable=True)
    subject_name = Column(Text, nullable=False)
    term_id = Column(Integer, nullable=False)
    total_score = Column(Float, nullable=False, default=0.0)

    __table_args__ = (Index("ix_score_entries_term", "term_id"),)
