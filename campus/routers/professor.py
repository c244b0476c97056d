from typing import List
from uuid import UUID
from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.security import ActingUser, require_professor
from ..models.assignment import Assignment
from ..schemas.academic_schemas import (
    AnnouncementCreate, AssignmentCreate, AssignmentRead, MaterialCreate,
    MaterialRead, ModuleRead, ProfessorDashboard, ProfessorRead, StudentRead
)
from ..schemas.base import Envelope
from ..schemas.grade_schemas import GradeRead, GradeSubmission
from ..schemas.submission_schemas import SubmissionGrade, SubmissionRead, SubmissionWithStudent
from ..services.base_service import BaseService
from ..services.grade_service import GradeService
from ..services.module_service import ModuleService
from ..services.notification_service import NotificationService
from ..services.professor_service import ProfessorService
from ..services.student_service import StudentService
from ..services.submission_service import SubmissionService

router = APIRouter(prefix="/api/professor", tags=["Professor"])

@router.get("/dashboard", response_model=Envelope[ProfessorDashboard])
async def get_dashboard(
    actor: ActingUser = Depends(require_professor),
    db: AsyncSession = Depends(get_db)
):
    """Profile with module, assignment and ungraded submission counts"""
    professor = await ProfessorService(db).get_profile(actor.profile_id)
    modules = await ModuleService(db).list_for_professor(professor.id)
    dashboard = ProfessorDashboard(
        professor=ProfessorRead.model_validate(professor),
        total_modules=len(modules),
        total_assignments=await BaseService(Assignment, db).count(Assignment.professor_id == professor.id),
        pending_submissions=await SubmissionService(db).count_ungraded_for_professor(professor.id),
        unread_notifications=await NotificationService(db).get_unread_count(actor.id),
    )
    return Envelope(data=dashboard)

@router.get("/modules", response_model=Envelope[List[ModuleRead]])
async def get_my_modules(
    actor: ActingUser = Depends(require_professor),
    db: AsyncSession = Depends(get_db)
):
    """Modules assigned to the current professor"""
    modules = await ModuleService(db).list_for_professor(actor.profile_id)
    return Envelope(data=[ModuleRead.model_validate(module) for module in modules])

@router.get("/modules/{module_id}/students", response_model=Envelope[List[StudentRead]])
async def get_module_students(
    module_id: UUID,
    actor: ActingUser = Depends(require_professor),
    db: AsyncSession = Depends(get_db)
):
    """Students enrolled in one of the professor's modules"""
    module = await ModuleService(db).get_owned_module(actor, module_id)
    students = await StudentService(db).list_for_module(module.id)
    return Envelope(data=[StudentRead.model_validate(student) for student in students])

@router.get("/modules/{module_id}/grades", response_model=Envelope[List[GradeRead]])
async def get_module_grades(
    module_id: UUID,
    actor: ActingUser = Depends(require_professor),
    db: AsyncSession = Depends(get_db)
):
    """Grades recorded for one of the professor's modules"""
    grades = await GradeService(db).get_module_grades(actor, module_id)
    return Envelope(data=[GradeRead.model_validate(grade) for grade in grades])

@router.post("/grades", response_model=Envelope[GradeRead], status_code=status.HTTP_201_CREATED)
async def add_grade(
    submission: GradeSubmission,
    actor: ActingUser = Depends(require_professor),
    db: AsyncSession = Depends(get_db)
):
    """Create or update a grade; it stays hidden from the student until validated"""
    grade = await GradeService(db).submit_grade(
        actor,
        student_id=submission.student_id,
        module_id=submission.module_id,
        value=submission.value,
        semester=submission.semester,
        academic_year=submission.academic_year,
        grade_type=submission.grade_type,
        comments=submission.comments,
    )
    return Envelope(data=GradeRead.model_validate(grade))

@router.post(
    "/modules/{module_id}/materials",
    response_model=Envelope[MaterialRead],
    status_code=status.HTTP_201_CREATED
)
async def upload_material(
    module_id: UUID,
    material_data: MaterialCreate,
    actor: ActingUser = Depends(require_professor),
    db: AsyncSession = Depends(get_db)
):
    """Register course material and notify enrolled students"""
    material = await ModuleService(db).add_material(actor, module_id, material_data)
    return Envelope(data=MaterialRead.model_validate(material))

@router.post("/assignments", response_model=Envelope[AssignmentRead], status_code=status.HTTP_201_CREATED)
async def create_assignment(
    assignment_data: AssignmentCreate,
    actor: ActingUser = Depends(require_professor),
    db: AsyncSession = Depends(get_db)
):
    """Create an assignment and notify enrolled students"""
    assignment = await ModuleService(db).create_assignment(actor, assignment_data)
    return Envelope(data=AssignmentRead.model_validate(assignment))

@router.post("/announcements", response_model=Envelope[None])
async def send_announcement(
    announcement: AnnouncementCreate,
    actor: ActingUser = Depends(require_professor),
    db: AsyncSession = Depends(get_db)
):
    """Send an announcement to every student of a module"""
    count = await ModuleService(db).send_announcement(actor, announcement)
    return Envelope(data=None, message=f"Announcement sent to {count} students")

@router.get("/assignments/{assignment_id}/submissions", response_model=Envelope[List[SubmissionWithStudent]])
async def get_submissions(
    assignment_id: UUID,
    actor: ActingUser = Depends(require_professor),
    db: AsyncSession = Depends(get_db)
):
    """Submissions for one of the professor's assignments, newest first"""
    submissions = await SubmissionService(db).list_for_assignment(actor, assignment_id)
    return Envelope(data=[SubmissionWithStudent.model_validate(submission) for submission in submissions])

@router.post("/submissions/{submission_id}/grade", response_model=Envelope[SubmissionRead])
async def grade_submission(
    submission_id: UUID,
    grading: SubmissionGrade,
    actor: ActingUser = Depends(require_professor),
    db: AsyncSession = Depends(get_db)
):
    """Grade a submission and notify the student"""
    submission = await SubmissionService(db).grade_submission(
        actor, submission_id, grading.grade, grading.feedback
    )
    return Envelope(
        data=SubmissionRead.model_validate(submission),
        message="Submission graded successfully"
    )
