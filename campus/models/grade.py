# campus/models/grade.py
from sqlalchemy import (
    Column, String, Integer, Float, Text, Boolean, DateTime, ForeignKey,
    CheckConstraint, UniqueConstraint, Uuid
)
from sqlalchemy.orm import relationship
from .base import Base, enum_column
import enum


class GradeType(enum.Enum):
    EXAM = "exam"
    CONTINUOUS = "continuous"
    FINAL = "final"


GRADE_MIN = 0
GRADE_MAX = 20


class Grade(Base):
    __tablename__ = "grades"

    # Natural key
    student_id = Column(Uuid, ForeignKey("students.id"), nullable=False, index=True)
    module_id = Column(Uuid, ForeignKey("modules.id"), nullable=False, index=True)
    semester = Column(Integer, nullable=False)
    academic_year = Column(String(9), nullable=False)  # Ex: "2024-2025"
    grade_type = Column(enum_column(GradeType), default=GradeType.FINAL, nullable=False)

    value = Column(Float, nullable=False)
    comments = Column(Text)

    # Professor submits, admin validates; only validated grades are published
    validated = Column(Boolean, default=False, nullable=False)
    validated_by = Column(Uuid, ForeignKey("users.id"), nullable=True)
    validated_at = Column(DateTime(timezone=True), nullable=True)
    is_published = Column(Boolean, default=False, nullable=False)
    published_at = Column(DateTime(timezone=True), nullable=True)

    student = relationship("Student", back_populates="grades")
    module = relationship("Module")

    __table_args__ = (
        UniqueConstraint(
            "student_id", "module_id", "semester", "academic_year", "grade_type",
            name="uq_grade_natural_key"
        ),
        CheckConstraint(f"value >= {GRADE_MIN} AND value <= {GRADE_MAX}", name="check_grade_value"),
        CheckConstraint("semester IN (1, 2)", name="check_grade_semester"),
    )
