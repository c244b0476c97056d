# campus/schemas/grade_schemas.py
from typing import List, Optional
from datetime import datetime
from uuid import UUID
from pydantic import Field
from .base import CamelModel
from .academic_schemas import AssignmentRead, MaterialRead, ModuleRead, ModuleSummary
from ..models.grade import GradeType


class GradeSubmission(CamelModel):
    # Range checks live in GradeService so the messages stay identical for every caller
    student_id: UUID
    module_id: UUID
    value: float
    semester: int
    academic_year: str = Field(..., min_length=1, max_length=9)
    grade_type: GradeType = GradeType.FINAL
    comments: Optional[str] = None


class GradeRead(CamelModel):
    id: UUID
    student_id: UUID
    module_id: UUID
    value: float
    semester: int
    academic_year: str
    grade_type: GradeType
    comments: Optional[str] = None
    validated: bool
    validated_by: Optional[UUID] = None
    validated_at: Optional[datetime] = None
    is_published: bool
    published_at: Optional[datetime] = None
    module: Optional[ModuleSummary] = None


class StudentGrades(CamelModel):
    grades: List[GradeRead]
    semester_average: str
    yearly_average: str


class StudentModuleDetails(CamelModel):
    """One enrolled module as the student sees it: content plus published grades"""
    module: ModuleRead
    materials: List[MaterialRead]
    assignments: List[AssignmentRead]
    grades: List[GradeRead]
