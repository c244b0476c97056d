# campus/services/grade_service.py
from typing import List, Optional, Sequence
from uuid import UUID
from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import selectinload
import logging
import math

from .base_service import BaseService
from .grade_aggregator import GradeEntry, compute_semester_and_yearly_averages
from .notification_service import NotificationService
from .student_service import StudentService
from ..core.exceptions import (
    AuthorizationError, ConflictError, NotFoundError, ValidationError
)
from ..core.security import ActingUser
from ..models.grade import Grade, GradeType, GRADE_MIN, GRADE_MAX
from ..models.module import Module
from ..models.notification import NotificationType, RelatedModel
from ..models.student import Student

logger = logging.getLogger(__name__)


NATURAL_KEY_CONSTRAINT = "uq_grade_natural_key"


def format_grade_value(value: float) -> str:
    return f"{value:g}"


def is_natural_key_collision(error: IntegrityError) -> bool:
    """True when the violation is the grade natural key and nothing else.

    PostgreSQL names the constraint; SQLite only lists the key columns.
    """
    message = str(error.orig)
    return NATURAL_KEY_CONSTRAINT in message or "UNIQUE constraint failed: grades.student_id" in message


class GradeService(BaseService[Grade]):
    def __init__(self, db: AsyncSession):
        super().__init__(Grade, db)

    async def get_with_module(self, grade_id: UUID) -> Optional[Grade]:
        stmt = (
            select(Grade)
            .options(selectinload(Grade.module))
            .where(Grade.id == grade_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def find_by_natural_key(
        self,
        student_id: UUID,
        module_id: UUID,
        semester: int,
        academic_year: str,
        grade_type: GradeType
    ) -> Optional[Grade]:
        stmt = select(Grade).where(
            Grade.student_id == student_id,
            Grade.module_id == module_id,
            Grade.semester == semester,
            Grade.academic_year == academic_year,
            Grade.grade_type == grade_type,
        )
        result = await self.db.execute(stmt)
        return result.scalar_one_or_none()

    async def submit_grade(
        self,
        actor: ActingUser,
        student_id: UUID,
        module_id: UUID,
        value: float,
        semester: int,
        academic_year: str,
        grade_type: GradeType = GradeType.FINAL,
        comments: Optional[str] = None
    ) -> Grade:
        """Create or overwrite the grade identified by its natural key.

        Any overwrite sends the grade back to the unvalidated, unpublished
        state. Professors cannot touch a grade once it has been validated.
        """
        if value is None or not math.isfinite(value) or value < GRADE_MIN or value > GRADE_MAX:
            raise ValidationError(f"Grade value must be between {GRADE_MIN} and {GRADE_MAX}")
        if semester not in (1, 2):
            raise ValidationError("Semester must be 1 or 2")

        student = await self.db.get(Student, student_id)
        if not student:
            raise NotFoundError("Student", student_id)
        module = await self.db.get(Module, module_id)
        if not module:
            raise NotFoundError("Module", module_id)

        if not actor.is_admin:
            if not actor.is_professor or module.professor_id is None \
                    or module.professor_id != actor.profile_id:
                raise AuthorizationError("Not authorized to grade this module")

        if not await StudentService(self.db).is_enrolled(student_id, module_id):
            raise ValidationError("Student is not enrolled in this module")

        key = dict(
            student_id=student_id,
            module_id=module_id,
            semester=semester,
            academic_year=academic_year,
            grade_type=grade_type,
        )

        try:
            grade = await self._write_grade(actor, key, value, comments)
        except IntegrityError as e:
            if not is_natural_key_collision(e):
                raise self._rejected(e)
            # A concurrent submission inserted the same natural key first
            logger.warning(f"Natural key collision for grade {key}, retrying as update")
            try:
                grade = await self._write_grade(actor, key, value, comments)
            except IntegrityError as retry_error:
                if not is_natural_key_collision(retry_error):
                    raise self._rejected(retry_error)
                raise ConflictError("A grade for this student, module and period already exists")

        return await self.get_with_module(grade.id)

    @staticmethod
    def _rejected(error: IntegrityError) -> ValidationError:
        logger.warning(f"Grade rejected by the store: {error.orig}")
        return ValidationError("Grade violates a data integrity constraint")

    async def _write_grade(
        self, actor: ActingUser, key: dict, value: float, comments: Optional[str]
    ) -> Grade:
        grade = await self.find_by_natural_key(**key)

        if grade is not None:
            if grade.validated and not actor.is_admin:
                raise ConflictError("Grade has already been validated and can no longer be modified")
            grade.value = value
            grade.comments = comments
            grade.validated = False
            grade.validated_by = None
            grade.validated_at = None
            grade.is_published = False
            grade.published_at = None
        else:
            grade = Grade(
                **key,
                value=value,
                comments=comments,
                validated=False,
                is_published=False,
            )
            self.db.add(grade)

        # IntegrityError propagates (already rolled back) for the collision retry
        await self.commit(translate_integrity=False)
        logger.info(f"Grade {grade.id} saved for student {key['student_id']} in module {key['module_id']}")
        return grade

    async def validate_grade(self, grade_id: UUID, admin: ActingUser) -> Grade:
        """Validate and publish a grade, then notify its student.

        The conditional update only matches unvalidated grades, so concurrent
        validations produce a single transition and a single notification.
        """
        now = datetime.now(timezone.utc)
        stmt = (
            update(Grade)
            .where(Grade.id == grade_id, Grade.validated.is_(False))
            .values(
                validated=True,
                validated_by=admin.id,
                validated_at=now,
                is_published=True,
                published_at=now,
            )
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        await self.commit()

        grade = await self.get_with_module(grade_id)
        if grade is None:
            raise NotFoundError("Grade", grade_id)
        if result.rowcount == 0:
            raise ValidationError("Grade is already validated")

        logger.info(f"Grade {grade.id} validated by {admin.id}")

        student = await self.db.get(Student, grade.student_id)
        await NotificationService(self.db).dispatch_best_effort(
            recipients=[student.user_id],
            sender_id=admin.id,
            title="Grade Published",
            message=(
                f"Your grade for {grade.module.name} ({grade.module.code}) has been validated "
                f"and published: {format_grade_value(grade.value)}/{GRADE_MAX}"
            ),
            notification_type=NotificationType.GRADE,
            related_to=(RelatedModel.GRADE, grade.id),
        )
        return grade

    async def list_grades(
        self,
        validated: Optional[bool] = None,
        module_id: Optional[UUID] = None,
        academic_year: Optional[str] = None,
    ) -> Sequence[Grade]:
        stmt = select(Grade).options(selectinload(Grade.module))
        if validated is not None:
            stmt = stmt.where(Grade.validated == validated)
        if module_id is not None:
            stmt = stmt.where(Grade.module_id == module_id)
        if academic_year is not None:
            stmt = stmt.where(Grade.academic_year == academic_year)
        result = await self.db.execute(stmt.order_by(Grade.created_at.desc()))
        return result.scalars().all()

    async def get_module_grades(self, actor: ActingUser, module_id: UUID) -> Sequence[Grade]:
        module = await self.db.get(Module, module_id)
        if not module:
            raise NotFoundError("Module", module_id)
        if not actor.is_admin and module.professor_id != actor.profile_id:
            raise AuthorizationError("Not authorized to view grades for this module")
        return await self.list_grades(module_id=module_id)

    async def find_grades_by_student(self, student_id: UUID) -> Sequence[Grade]:
        stmt = (
            select(Grade)
            .options(selectinload(Grade.module))
            .where(Grade.student_id == student_id)
            .order_by(Grade.created_at.desc())
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def find_published_for_module(self, student: Student, module_id: UUID) -> Sequence[Grade]:
        """Published grades of one module for the student's current period"""
        stmt = (
            select(Grade)
            .options(selectinload(Grade.module))
            .where(
                Grade.student_id == student.id,
                Grade.module_id == module_id,
                Grade.semester == student.semester,
                Grade.academic_year == student.academic_year,
                Grade.is_published.is_(True),
            )
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def count_pending_validation(self) -> int:
        return await self.count(Grade.validated.is_(False))

    @staticmethod
    def to_entries(grades: Sequence[Grade]) -> List[GradeEntry]:
        return [
            GradeEntry(
                value=grade.value,
                coefficient=grade.module.coefficient if grade.module else None,
                semester=grade.semester,
                academic_year=grade.academic_year,
                validated=grade.validated,
                is_published=grade.is_published,
            )
            for grade in grades
        ]

    async def get_student_grades(self, student: Student) -> dict:
        """All grade records of a student plus the current-period averages"""
        grades = await self.find_grades_by_student(student.id)
        semester_average, yearly_average = compute_semester_and_yearly_averages(
            self.to_entries(grades),
            current_semester=student.semester,
            current_academic_year=student.academic_year,
        )
        return {
            "grades": grades,
            "semester_average": semester_average,
            "yearly_average": yearly_average,
        }
