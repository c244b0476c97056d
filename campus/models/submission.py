from sqlalchemy import (
    Column, String, Float, Text, DateTime, ForeignKey, CheckConstraint, UniqueConstraint, Uuid
)
from sqlalchemy.orm import relationship
from .base import Base, enum_column
import enum


class SubmissionStatus(enum.Enum):
    PENDING = "pending"
    LATE = "late"
    GRADED = "graded"


class Submission(Base):
    __tablename__ = "submissions"

    assignment_id = Column(Uuid, ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False, index=True)
    student_id = Column(Uuid, ForeignKey("students.id", ondelete="CASCADE"), nullable=False, index=True)

    # Files live elsewhere; only the reference is stored
    file_url = Column(String(500), nullable=False)
    file_name = Column(String(255), nullable=False)
    submitted_at = Column(DateTime(timezone=True), nullable=False)
    status = Column(enum_column(SubmissionStatus), default=SubmissionStatus.PENDING, nullable=False, index=True)

    grade = Column(Float, nullable=True)
    feedback = Column(Text)
    graded_by = Column(Uuid, ForeignKey("professors.id"), nullable=True)
    graded_at = Column(DateTime(timezone=True), nullable=True)

    assignment = relationship("Assignment")
    student = relationship("Student")

    __table_args__ = (
        UniqueConstraint("assignment_id", "student_id", name="uq_submission_assignment_student"),
        CheckConstraint("grade IS NULL OR grade >= 0", name="check_submission_grade"),
    )
