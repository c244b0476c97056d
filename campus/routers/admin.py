from typing import List, Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.security import ActingUser, require_admin
from ..models.level import Level
from ..models.module import Module
from ..models.professor import Professor
from ..models.student import Student
from ..schemas.academic_schemas import (
    AdminDashboard, EnrollmentRequest, LevelCreate, LevelRead, ModuleCreate, ModuleRead,
    ProfessorAssignment, ProfessorCreate, ProfessorRead, StudentCreate, StudentRead
)
from ..schemas.base import Envelope
from ..schemas.grade_schemas import GradeRead
from ..services.base_service import BaseService
from ..services.grade_service import GradeService
from ..services.module_service import ModuleService
from ..services.professor_service import ProfessorService
from ..services.student_service import StudentService

router = APIRouter(
    prefix="/api/admin",
    tags=["Admin"],
    dependencies=[Depends(require_admin)]
)

# ==================== DASHBOARD ====================

@router.get("/dashboard", response_model=Envelope[AdminDashboard])
async def get_dashboard(db: AsyncSession = Depends(get_db)):
    """Institution-wide totals and the validation backlog"""
    dashboard = AdminDashboard(
        total_levels=await BaseService(Level, db).count(),
        total_students=await BaseService(Student, db).count(),
        total_professors=await BaseService(Professor, db).count(),
        total_modules=await BaseService(Module, db).count(),
        pending_grades=await GradeService(db).count_pending_validation(),
    )
    return Envelope(data=dashboard)

# ==================== LEVELS ====================

@router.post("/levels", response_model=Envelope[LevelRead], status_code=status.HTTP_201_CREATED)
async def create_level(level_data: LevelCreate, db: AsyncSession = Depends(get_db)):
    """Create a study level"""
    level = await BaseService(Level, db).create(level_data.model_dump())
    return Envelope(data=LevelRead.model_validate(level))

# ==================== STUDENTS ====================

@router.post("/students", response_model=Envelope[StudentRead], status_code=status.HTTP_201_CREATED)
async def create_student(student_data: StudentCreate, db: AsyncSession = Depends(get_db)):
    """Create a student account and profile"""
    student = await StudentService(db).create_student(student_data)
    return Envelope(data=StudentRead.model_validate(student))

@router.post("/students/{student_id}/enroll", response_model=Envelope[StudentRead])
async def enroll_student(
    student_id: UUID,
    enrollment: EnrollmentRequest,
    db: AsyncSession = Depends(get_db)
):
    """Enroll a student in one or more modules"""
    student = await StudentService(db).enroll(student_id, enrollment.module_ids)
    return Envelope(data=StudentRead.model_validate(student))

# ==================== PROFESSORS ====================

@router.post("/professors", response_model=Envelope[ProfessorRead], status_code=status.HTTP_201_CREATED)
async def create_professor(professor_data: ProfessorCreate, db: AsyncSession = Depends(get_db)):
    """Create a professor account and profile"""
    professor = await ProfessorService(db).create_professor(professor_data)
    return Envelope(data=ProfessorRead.model_validate(professor))

@router.post("/professors/{professor_id}/assign", response_model=Envelope[ModuleRead])
async def assign_professor_to_module(
    professor_id: UUID,
    assignment: ProfessorAssignment,
    db: AsyncSession = Depends(get_db)
):
    """Assign a professor to a module"""
    module = await ProfessorService(db).assign_module(professor_id, assignment.module_id)
    return Envelope(data=ModuleRead.model_validate(module))

# ==================== MODULES ====================

@router.post("/modules", response_model=Envelope[ModuleRead], status_code=status.HTTP_201_CREATED)
async def create_module(module_data: ModuleCreate, db: AsyncSession = Depends(get_db)):
    """Create a module"""
    module = await ModuleService(db).create_module(module_data)
    return Envelope(data=ModuleRead.model_validate(module))

# ==================== GRADES ====================

@router.get("/grades", response_model=Envelope[List[GradeRead]])
async def get_all_grades(
    validated: Optional[bool] = Query(None),
    module_id: Optional[UUID] = Query(None, alias="moduleId"),
    academic_year: Optional[str] = Query(None, alias="academicYear"),
    db: AsyncSession = Depends(get_db)
):
    """All grade records, newest first"""
    grades = await GradeService(db).list_grades(
        validated=validated, module_id=module_id, academic_year=academic_year
    )
    return Envelope(data=[GradeRead.model_validate(grade) for grade in grades])

@router.patch("/grades/{grade_id}/validate", response_model=Envelope[GradeRead])
async def validate_grade(
    grade_id: UUID,
    actor: ActingUser = Depends(require_admin),
    db: AsyncSession = Depends(get_db)
):
    """Validate and publish a grade, notifying its student"""
    grade = await GradeService(db).validate_grade(grade_id, actor)
    return Envelope(
        data=GradeRead.model_validate(grade),
        message="Grade validated and published successfully"
    )
