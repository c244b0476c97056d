# campus/services/submission_service.py
from typing import Optional, Sequence
from uuid import UUID
from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload
import logging
import math

from .base_service import BaseService
from .grade_service import format_grade_value
from .notification_service import NotificationService
from .student_service import StudentService
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..core.security import ActingUser
from ..models.assignment import Assignment
from ..models.notification import NotificationType, RelatedModel
from ..models.professor import Professor
from ..models.student import Student
from ..models.submission import Submission, SubmissionStatus
from ..models.user import User
from ..schemas.submission_schemas import SubmissionCreate

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; they are stored as UTC
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class SubmissionService(BaseService[Submission]):
    def __init__(self, db: AsyncSession):
        super().__init__(Submission, db)

    async def _get_assignment(self, assignment_id: UUID) -> Assignment:
        assignment = await self.db.get(Assignment, assignment_id)
        if not assignment:
            raise NotFoundError("Assignment", assignment_id)
        return assignment

    @staticmethod
    def _check_owner(actor: ActingUser, assignment: Assignment):
        if not actor.is_admin and assignment.professor_id != actor.profile_id:
            raise AuthorizationError("Not authorized for this assignment")

    async def submit(self, actor: ActingUser, assignment_id: UUID, data: SubmissionCreate) -> Submission:
        """Record a student's single submission and notify the assignment's professor.

        Submissions after the deadline are accepted and flagged late.
        """
        assignment = await self._get_assignment(assignment_id)
        student_id = actor.profile_id

        if not await StudentService(self.db).is_enrolled(student_id, assignment.module_id):
            raise AuthorizationError("You are not enrolled in this module")

        existing = await self.db.execute(
            select(Submission.id).where(
                Submission.assignment_id == assignment.id,
                Submission.student_id == student_id,
            )
        )
        if existing.first() is not None:
            raise ValidationError("You have already submitted this assignment")

        now = datetime.now(timezone.utc)
        submission = Submission(
            assignment_id=assignment.id,
            student_id=student_id,
            file_url=data.file_url,
            file_name=data.file_name,
            submitted_at=now,
            status=SubmissionStatus.LATE if now > _as_utc(assignment.deadline) else SubmissionStatus.PENDING,
        )
        self.db.add(submission)
        # A concurrent duplicate hits uq_submission_assignment_student and becomes a ConflictError
        await self.commit()
        logger.info(f"Submission {submission.id} for assignment {assignment.id} ({submission.status.value})")

        sender = await self.db.get(User, actor.id)
        professor = await self.db.get(Professor, assignment.professor_id)
        await NotificationService(self.db).dispatch_best_effort(
            recipients=[professor.user_id],
            sender_id=actor.id,
            title="New Assignment Submission",
            message=f"{sender.full_name} submitted {assignment.title}",
            notification_type=NotificationType.SUBMISSION,
            related_to=(RelatedModel.SUBMISSION, submission.id),
        )
        return submission

    async def list_for_student(self, student_id: UUID) -> Sequence[Submission]:
        stmt = (
            select(Submission)
            .where(Submission.student_id == student_id)
            .order_by(Submission.submitted_at.desc())
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def list_for_assignment(self, actor: ActingUser, assignment_id: UUID) -> Sequence[Submission]:
        assignment = await self._get_assignment(assignment_id)
        self._check_owner(actor, assignment)
        stmt = (
            select(Submission)
            .options(selectinload(Submission.student).selectinload(Student.user))
            .where(Submission.assignment_id == assignment.id)
            .order_by(Submission.submitted_at.desc())
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def grade_submission(
        self,
        actor: ActingUser,
        submission_id: UUID,
        grade: float,
        feedback: Optional[str] = None
    ) -> Submission:
        """Grade a submission against the assignment's maximum and notify the student"""
        submission = await self.get_or_404(submission_id)
        assignment = await self._get_assignment(submission.assignment_id)
        self._check_owner(actor, assignment)

        if grade is None or not math.isfinite(grade) or grade < 0:
            raise ValidationError("Grade cannot be negative")
        if grade > assignment.max_grade:
            raise ValidationError(f"Grade cannot exceed {assignment.max_grade}")

        submission.grade = grade
        submission.feedback = feedback
        submission.status = SubmissionStatus.GRADED
        submission.graded_by = assignment.professor_id if actor.is_admin else actor.profile_id
        submission.graded_at = datetime.now(timezone.utc)
        await self.commit()
        await self.db.refresh(submission)

        student = await self.db.get(Student, submission.student_id)
        await NotificationService(self.db).dispatch_best_effort(
            recipients=[student.user_id],
            sender_id=actor.id,
            title="Assignment Graded",
            message=(
                f'Your submission for "{assignment.title}" has been graded: '
                f"{format_grade_value(grade)}/{assignment.max_grade}"
            ),
            notification_type=NotificationType.GRADE,
            related_to=(RelatedModel.SUBMISSION, submission.id),
        )
        return submission

    async def count_ungraded_for_professor(self, professor_id: UUID) -> int:
        stmt = (
            select(Submission.id)
            .join(Assignment, Assignment.id == Submission.assignment_id)
            .where(
                Assignment.professor_id == professor_id,
                Submission.status != SubmissionStatus.GRADED,
            )
        )
        result = await self.db.execute(stmt)
        return len(result.all())
