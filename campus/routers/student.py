from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.security import ActingUser, require_student
from ..schemas.academic_schemas import (
    AssignmentRead, MaterialRead, ModuleRead, StudentDashboard, StudentRead
)
from ..schemas.base import Envelope
from ..schemas.grade_schemas import GradeRead, StudentGrades, StudentModuleDetails
from ..schemas.submission_schemas import SubmissionCreate, SubmissionRead
from ..services.grade_aggregator import compute_semester_and_yearly_averages
from ..services.grade_service import GradeService
from ..services.module_service import ModuleService
from ..services.notification_service import NotificationService
from ..services.student_service import StudentService
from ..services.submission_service import SubmissionService

router = APIRouter(prefix="/api/student", tags=["Student"])

@router.get("/dashboard", response_model=Envelope[StudentDashboard])
async def get_dashboard(
    actor: ActingUser = Depends(require_student),
    db: AsyncSession = Depends(get_db)
):
    """Profile and headline statistics for the current period"""
    student_service = StudentService(db)
    student = await student_service.get_profile(actor.profile_id)

    grades = await GradeService(db).find_grades_by_student(student.id)
    semester_average, _ = compute_semester_and_yearly_averages(
        GradeService.to_entries(grades), student.semester, student.academic_year
    )

    dashboard = StudentDashboard(
        student=StudentRead.model_validate(student),
        total_modules=len(student.modules),
        pending_assignments=await student_service.count_pending_assignments(student),
        unread_notifications=await NotificationService(db).get_unread_count(actor.id),
        average=semester_average,
    )
    return Envelope(data=dashboard)

@router.get("/modules", response_model=Envelope[List[ModuleRead]])
async def get_modules(
    actor: ActingUser = Depends(require_student),
    db: AsyncSession = Depends(get_db)
):
    """Modules the student is enrolled in"""
    student = await StudentService(db).get_profile(actor.profile_id)
    return Envelope(data=[ModuleRead.model_validate(module) for module in student.modules])

@router.get("/grades", response_model=Envelope[StudentGrades])
async def get_grades(
    actor: ActingUser = Depends(require_student),
    db: AsyncSession = Depends(get_db)
):
    """All grade records with the semester and yearly averages of validated grades"""
    student = await StudentService(db).get_profile(actor.profile_id)
    result = await GradeService(db).get_student_grades(student)
    return Envelope(data=StudentGrades(
        grades=[GradeRead.model_validate(grade) for grade in result["grades"]],
        semester_average=result["semester_average"],
        yearly_average=result["yearly_average"],
    ))

@router.get("/modules/{module_id}", response_model=Envelope[StudentModuleDetails])
async def get_module_details(
    module_id: UUID,
    actor: ActingUser = Depends(require_student),
    db: AsyncSession = Depends(get_db)
):
    """One enrolled module with its materials, assignments and published grades"""
    student = await StudentService(db).get_profile(actor.profile_id)
    module_service = ModuleService(db)
    module = await module_service.get_module_details(student, module_id)
    assignments = await module_service.list_assignments([module.id])
    grades = await GradeService(db).find_published_for_module(student, module.id)
    return Envelope(data=StudentModuleDetails(
        module=ModuleRead.model_validate(module),
        materials=[MaterialRead.model_validate(material) for material in module.materials],
        assignments=[AssignmentRead.model_validate(assignment) for assignment in assignments],
        grades=[GradeRead.model_validate(grade) for grade in grades],
    ))

@router.get("/assignments", response_model=Envelope[List[AssignmentRead]])
async def get_assignments(
    actor: ActingUser = Depends(require_student),
    db: AsyncSession = Depends(get_db)
):
    """Assignments of every enrolled module, earliest deadline first"""
    student = await StudentService(db).get_profile(actor.profile_id)
    assignments = await ModuleService(db).list_assignments([module.id for module in student.modules])
    return Envelope(data=[AssignmentRead.model_validate(assignment) for assignment in assignments])

@router.post(
    "/assignments/{assignment_id}/submit",
    response_model=Envelope[SubmissionRead],
    status_code=status.HTTP_201_CREATED
)
async def submit_assignment(
    assignment_id: UUID,
    submission_data: SubmissionCreate,
    actor: ActingUser = Depends(require_student),
    db: AsyncSession = Depends(get_db)
):
    """Hand in an assignment once; the professor is notified"""
    submission = await SubmissionService(db).submit(actor, assignment_id, submission_data)
    return Envelope(
        data=SubmissionRead.model_validate(submission),
        message="Assignment submitted successfully"
    )

@router.get("/submissions", response_model=Envelope[List[SubmissionRead]])
async def get_submissions(
    actor: ActingUser = Depends(require_student),
    db: AsyncSession = Depends(get_db)
):
    submissions = await SubmissionService(db).list_for_student(actor.profile_id)
    return Envelope(data=[SubmissionRead.model_validate(submission) for submission in submissions])
