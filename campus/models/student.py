# campus/models/student.py
from sqlalchemy import Column, String, Integer, Table, ForeignKey, CheckConstraint, Uuid
from sqlalchemy.orm import relationship
from .base import Base

# Enrolled-module set of each student
student_modules = Table(
    "student_modules",
    Base.metadata,
    Column("student_id", Uuid, ForeignKey("students.id", ondelete="CASCADE"), primary_key=True),
    Column("module_id", Uuid, ForeignKey("modules.id", ondelete="CASCADE"), primary_key=True),
)


class Student(Base):
    __tablename__ = "students"

    # Foreign Keys
    user_id = Column(Uuid, ForeignKey("users.id"), unique=True, nullable=False, index=True)
    level_id = Column(Uuid, ForeignKey("levels.id"), nullable=False, index=True)

    # Academic Information
    student_number = Column(String(20), unique=True, nullable=False)  # Ex: "STU2024001"
    field = Column(String(100), nullable=False)
    semester = Column(Integer, nullable=False)
    academic_year = Column(String(9), nullable=False)

    # Relationships
    user = relationship("User", back_populates="student")
    level = relationship("Level")
    modules = relationship("Module", secondary=student_modules, back_populates="students")
    grades = relationship("Grade", back_populates="student")

    __table_args__ = (
        CheckConstraint("semester IN (1, 2)", name="check_student_semester"),
    )
