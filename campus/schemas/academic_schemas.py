# campus/schemas/academic_schemas.py
from typing import List, Optional
from datetime import datetime
from uuid import UUID
from pydantic import EmailStr, Field, field_validator
from .base import CamelModel
from .auth_schemas import UserRead
from ..models.module import MaterialType

ACADEMIC_YEAR_PATTERN = r"^\d{4}-\d{4}$"


class LevelCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    short_name: str = Field(..., min_length=1, max_length=20)
    academic_year: str = Field(..., pattern=ACADEMIC_YEAR_PATTERN)
    capacity: Optional[int] = Field(default=None, ge=1)


class LevelRead(LevelCreate):
    id: UUID


class AccountCreate(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)


class StudentCreate(AccountCreate):
    student_number: str = Field(..., min_length=1, max_length=20)
    level_id: UUID
    field: str = Field(..., min_length=1, max_length=100)
    semester: int = Field(..., ge=1, le=2)
    academic_year: str = Field(..., pattern=ACADEMIC_YEAR_PATTERN)


class StudentRead(CamelModel):
    id: UUID
    student_number: str
    level_id: UUID
    field: str
    semester: int
    academic_year: str
    user: UserRead


class EnrollmentRequest(CamelModel):
    module_ids: List[UUID] = Field(..., min_length=1)


class ProfessorCreate(AccountCreate):
    professor_number: str = Field(..., min_length=1, max_length=20)
    department: str = Field(..., min_length=1, max_length=100)
    specialization: Optional[str] = Field(default=None, max_length=100)


class ProfessorRead(CamelModel):
    id: UUID
    professor_number: str
    department: str
    specialization: Optional[str] = None
    user: UserRead


class ProfessorAssignment(CamelModel):
    module_id: UUID


class ModuleCreate(CamelModel):
    code: str = Field(..., min_length=1, max_length=20)
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    semester: int = Field(..., ge=1, le=2)
    coefficient: int = Field(default=1)
    level_id: UUID
    field: str = Field(..., min_length=1, max_length=100)
    professor_id: Optional[UUID] = None
    academic_year: str = Field(..., pattern=ACADEMIC_YEAR_PATTERN)

    @field_validator("coefficient")
    @classmethod
    def coefficient_in_range(cls, value: int) -> int:
        if value < 1 or value > 10:
            raise ValueError("Coefficient must be between 1 and 10")
        return value


class ModuleSummary(CamelModel):
    id: UUID
    code: str
    name: str
    coefficient: int
    semester: int


class ModuleRead(ModuleSummary):
    description: Optional[str] = None
    level_id: UUID
    field: str
    professor_id: Optional[UUID] = None
    academic_year: str
    is_active: bool


class MaterialCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    file_url: str = Field(..., min_length=1, max_length=500)
    file_type: MaterialType = MaterialType.PDF


class MaterialRead(MaterialCreate):
    id: UUID
    module_id: UUID
    created_at: Optional[datetime] = None


class AssignmentCreate(CamelModel):
    module_id: UUID
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    instructions: Optional[str] = None
    deadline: datetime
    max_grade: int = Field(default=20, ge=1, le=20)


class AssignmentRead(CamelModel):
    id: UUID
    module_id: UUID
    professor_id: UUID
    title: str
    description: Optional[str] = None
    instructions: Optional[str] = None
    deadline: datetime
    max_grade: int


class AnnouncementCreate(CamelModel):
    module_id: UUID
    title: str = Field(..., min_length=1, max_length=200)
    message: str = Field(..., min_length=1)


class StudentDashboard(CamelModel):
    student: StudentRead
    total_modules: int
    pending_assignments: int
    unread_notifications: int
    average: str


class ProfessorDashboard(CamelModel):
    professor: ProfessorRead
    total_modules: int
    total_assignments: int
    pending_submissions: int
    unread_notifications: int


class AdminDashboard(CamelModel):
    total_levels: int
    total_students: int
    total_professors: int
    total_modules: int
    pending_grades: int
