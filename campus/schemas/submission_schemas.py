# campus/schemas/submission_schemas.py
from typing import Optional
from datetime import datetime
from uuid import UUID
from pydantic import Field
from .base import CamelModel
from .academic_schemas import StudentRead
from ..models.submission import SubmissionStatus


class SubmissionCreate(CamelModel):
    file_url: str = Field(..., min_length=1, max_length=500)
    file_name: str = Field(..., min_length=1, max_length=255)


class SubmissionGrade(CamelModel):
    # Bounds depend on the assignment and are checked in SubmissionService
    grade: float
    feedback: Optional[str] = None


class SubmissionRead(CamelModel):
    id: UUID
    assignment_id: UUID
    student_id: UUID
    file_url: str
    file_name: str
    submitted_at: datetime
    status: SubmissionStatus
    grade: Optional[float] = None
    feedback: Optional[str] = None
    graded_by: Optional[UUID] = None
    graded_at: Optional[datetime] = None


class SubmissionWithStudent(SubmissionRead):
    student: StudentRead
