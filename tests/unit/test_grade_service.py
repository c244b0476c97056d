"""
Unit Tests for GradeService
"""
import uuid
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, OperationalError

from campus.core.exceptions import (
    AuthorizationError, ConflictError, NotFoundError, PersistenceError, ValidationError
)
from campus.core.security import ActingUser
from campus.models import Grade, GradeType, Notification, NotificationType, RelatedModel, UserRole
from campus.services.grade_service import GradeService, format_grade_value
from tests.conftest import ACADEMIC_YEAR, count_rows, enroll, make_module, make_professor


class TestSubmitGrade:
    """Tests for GradeService.submit_grade"""

    @pytest.mark.asyncio
    async def test_creates_unvalidated_grade(self, db_session, professor_actor, enrolled_student, module):
        grade = await GradeService(db_session).submit_grade(
            professor_actor, enrolled_student.id, module.id, 14.5, 1, ACADEMIC_YEAR
        )

        assert grade.value == 14.5
        assert grade.grade_type == GradeType.FINAL
        assert grade.validated is False
        assert grade.is_published is False
        assert grade.module.id == module.id

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [-0.5, 20.01, 25])
    async def test_value_out_of_range(self, db_session, professor_actor, enrolled_student, module, value):
        with pytest.raises(ValidationError) as exc:
            await GradeService(db_session).submit_grade(
                professor_actor, enrolled_student.id, module.id, value, 1, ACADEMIC_YEAR
            )
        assert exc.value.message == "Grade value must be between 0 and 20"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
    async def test_non_finite_value_is_rejected(self, db_session, professor_actor, enrolled_student, module, value):
        with pytest.raises(ValidationError) as exc:
            await GradeService(db_session).submit_grade(
                professor_actor, enrolled_student.id, module.id, value, 1, ACADEMIC_YEAR
            )
        assert exc.value.message == "Grade value must be between 0 and 20"
        assert await count_rows(db_session, Grade) == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("value", [0, 20])
    async def test_bounds_are_inclusive(self, db_session, professor_actor, enrolled_student, module, value):
        grade = await GradeService(db_session).submit_grade(
            professor_actor, enrolled_student.id, module.id, value, 1, ACADEMIC_YEAR
        )
        assert grade.value == value

    @pytest.mark.asyncio
    async def test_invalid_semester(self, db_session, professor_actor, enrolled_student, module):
        with pytest.raises(ValidationError):
            await GradeService(db_session).submit_grade(
                professor_actor, enrolled_student.id, module.id, 12, 3, ACADEMIC_YEAR
            )

    @pytest.mark.asyncio
    async def test_unknown_student(self, db_session, professor_actor, module):
        with pytest.raises(NotFoundError):
            await GradeService(db_session).submit_grade(
                professor_actor, uuid.uuid4(), module.id, 12, 1, ACADEMIC_YEAR
            )

    @pytest.mark.asyncio
    async def test_student_not_enrolled(self, db_session, professor_actor, student, module):
        with pytest.raises(ValidationError) as exc:
            await GradeService(db_session).submit_grade(
                professor_actor, student.id, module.id, 12, 1, ACADEMIC_YEAR
            )
        assert exc.value.message == "Student is not enrolled in this module"
        assert await count_rows(db_session, Grade) == 0

    @pytest.mark.asyncio
    async def test_professor_must_teach_module(self, db_session, enrolled_student, module):
        other = await make_professor(db_session)
        actor = ActingUser(id=other.user_id, role=UserRole.PROFESSOR, profile_id=other.id)

        with pytest.raises(AuthorizationError):
            await GradeService(db_session).submit_grade(
                actor, enrolled_student.id, module.id, 12, 1, ACADEMIC_YEAR
            )

    @pytest.mark.asyncio
    async def test_unassigned_module_rejects_professors(self, db_session, professor_actor, level, student):
        orphan = await make_module(db_session, level, professor=None)
        await enroll(db_session, student, orphan)

        with pytest.raises(AuthorizationError):
            await GradeService(db_session).submit_grade(
                professor_actor, student.id, orphan.id, 12, 1, ACADEMIC_YEAR
            )

    @pytest.mark.asyncio
    async def test_resubmission_overwrites(self, db_session, professor_actor, enrolled_student, module):
        service = GradeService(db_session)
        first = await service.submit_grade(professor_actor, enrolled_student.id, module.id, 10, 1, ACADEMIC_YEAR)
        second = await service.submit_grade(
            professor_actor, enrolled_student.id, module.id, 16, 1, ACADEMIC_YEAR, comments="Re-marked"
        )

        assert second.id == first.id
        assert second.value == 16
        assert second.comments == "Re-marked"
        assert await count_rows(db_session, Grade) == 1

    @pytest.mark.asyncio
    async def test_grade_types_are_separate_records(self, db_session, professor_actor, enrolled_student, module):
        service = GradeService(db_session)
        await service.submit_grade(
            professor_actor, enrolled_student.id, module.id, 10, 1, ACADEMIC_YEAR, grade_type=GradeType.EXAM
        )
        await service.submit_grade(
            professor_actor, enrolled_student.id, module.id, 12, 1, ACADEMIC_YEAR, grade_type=GradeType.CONTINUOUS
        )
        assert await count_rows(db_session, Grade) == 2

    @pytest.mark.asyncio
    async def test_professor_cannot_modify_validated_grade(
        self, db_session, professor_actor, admin_actor, enrolled_student, module
    ):
        service = GradeService(db_session)
        grade = await service.submit_grade(professor_actor, enrolled_student.id, module.id, 10, 1, ACADEMIC_YEAR)
        await service.validate_grade(grade.id, admin_actor)

        with pytest.raises(ConflictError):
            await service.submit_grade(professor_actor, enrolled_student.id, module.id, 18, 1, ACADEMIC_YEAR)

        unchanged = await service.get_with_module(grade.id)
        assert unchanged.value == 10
        assert unchanged.validated is True

    @pytest.mark.asyncio
    async def test_admin_overwrite_resets_validation(
        self, db_session, professor_actor, admin_actor, enrolled_student, module
    ):
        service = GradeService(db_session)
        grade = await service.submit_grade(professor_actor, enrolled_student.id, module.id, 10, 1, ACADEMIC_YEAR)
        await service.validate_grade(grade.id, admin_actor)

        updated = await service.submit_grade(admin_actor, enrolled_student.id, module.id, 11, 1, ACADEMIC_YEAR)

        assert updated.id == grade.id
        assert updated.value == 11
        assert updated.validated is False
        assert updated.validated_by is None
        assert updated.is_published is False
        assert updated.published_at is None


class TestConcurrentSubmission:
    """Natural key collisions between submit_grade calls racing on separate sessions"""

    @staticmethod
    def racing_lookup(session_factory, collide_every_time=False):
        """Lookup that lets another session insert the same key before the caller writes"""
        original = GradeService.find_by_natural_key
        calls = []

        async def lookup(self, **key):
            calls.append(key)
            if len(calls) == 1:
                async with session_factory() as other:
                    other.add(Grade(**key, value=11, validated=False, is_published=False))
                    await other.commit()
                return None
            if collide_every_time:
                return None
            return await original(self, **key)

        return lookup, calls

    @pytest.mark.asyncio
    async def test_collision_is_retried_as_update(
        self, db_session, session_factory, professor_actor, enrolled_student, module
    ):
        student_id, module_id = enrolled_student.id, module.id
        lookup, calls = self.racing_lookup(session_factory)

        with patch.object(GradeService, "find_by_natural_key", lookup):
            grade = await GradeService(db_session).submit_grade(
                professor_actor, student_id, module_id, 17, 1, ACADEMIC_YEAR
            )

        assert len(calls) == 2
        assert grade.value == 17
        assert grade.validated is False
        result = await db_session.execute(select(Grade.value).where(Grade.student_id == student_id))
        assert result.scalars().all() == [17]

    @pytest.mark.asyncio
    async def test_second_collision_is_a_conflict(
        self, db_session, session_factory, professor_actor, enrolled_student, module
    ):
        student_id, module_id = enrolled_student.id, module.id
        lookup, calls = self.racing_lookup(session_factory, collide_every_time=True)

        with patch.object(GradeService, "find_by_natural_key", lookup):
            with pytest.raises(ConflictError) as exc:
                await GradeService(db_session).submit_grade(
                    professor_actor, student_id, module_id, 17, 1, ACADEMIC_YEAR
                )

        assert exc.value.message == "A grade for this student, module and period already exists"
        assert len(calls) == 2
        result = await db_session.execute(select(Grade.value).where(Grade.student_id == student_id))
        assert result.scalars().all() == [11]


class TestStoreFailures:
    """submit_grade maps store errors that are not key collisions into the domain taxonomy"""

    @pytest.mark.asyncio
    async def test_other_integrity_error_is_not_retried(
        self, db_session, professor_actor, enrolled_student, module
    ):
        student_id, module_id = enrolled_student.id, module.id
        failing = AsyncMock(
            side_effect=IntegrityError("INSERT INTO grades", {}, Exception("FOREIGN KEY constraint failed"))
        )

        with patch.object(db_session, "commit", failing):
            with pytest.raises(ValidationError) as exc:
                await GradeService(db_session).submit_grade(
                    professor_actor, student_id, module_id, 12, 1, ACADEMIC_YEAR
                )

        assert exc.value.message == "Grade violates a data integrity constraint"
        failing.assert_awaited_once()
        assert await count_rows(db_session, Grade) == 0

    @pytest.mark.asyncio
    async def test_operational_error_becomes_persistence_error(
        self, db_session, professor_actor, enrolled_student, module
    ):
        student_id, module_id = enrolled_student.id, module.id
        failing = AsyncMock(
            side_effect=OperationalError("INSERT INTO grades", {}, Exception("disk I/O error"))
        )

        with patch.object(db_session, "commit", failing):
            with pytest.raises(PersistenceError):
                await GradeService(db_session).submit_grade(
                    professor_actor, student_id, module_id, 12, 1, ACADEMIC_YEAR
                )

        failing.assert_awaited_once()
        assert await count_rows(db_session, Grade) == 0


class TestValidateGrade:
    """Tests for GradeService.validate_grade"""

    @pytest.fixture
    async def grade(self, db_session, professor_actor, enrolled_student, module):
        return await GradeService(db_session).submit_grade(
            professor_actor, enrolled_student.id, module.id, 15, 1, ACADEMIC_YEAR
        )

    @pytest.mark.asyncio
    async def test_validates_publishes_and_notifies(self, db_session, admin_actor, grade, enrolled_student, module):
        validated = await GradeService(db_session).validate_grade(grade.id, admin_actor)

        assert validated.validated is True
        assert validated.is_published is True
        assert validated.validated_by == admin_actor.id
        assert validated.validated_at is not None
        assert validated.published_at is not None

        result = await db_session.execute(
            select(Notification).where(Notification.recipient_id == enrolled_student.user_id)
        )
        notifications = result.scalars().all()
        assert len(notifications) == 1
        notification = notifications[0]
        assert notification.title == "Grade Published"
        assert notification.notification_type == NotificationType.GRADE
        assert notification.related_model == RelatedModel.GRADE
        assert notification.related_id == grade.id
        assert notification.sender_id == admin_actor.id
        assert f"{module.name} ({module.code})" in notification.message
        assert notification.message.endswith("15/20")

    @pytest.mark.asyncio
    async def test_second_validation_is_rejected(self, db_session, admin_actor, grade, enrolled_student):
        service = GradeService(db_session)
        await service.validate_grade(grade.id, admin_actor)

        with pytest.raises(ValidationError) as exc:
            await service.validate_grade(grade.id, admin_actor)
        assert exc.value.message == "Grade is already validated"

        assert await count_rows(
            db_session, Notification, Notification.recipient_id == enrolled_student.user_id
        ) == 1

    @pytest.mark.asyncio
    async def test_unknown_grade(self, db_session, admin_actor):
        with pytest.raises(NotFoundError):
            await GradeService(db_session).validate_grade(uuid.uuid4(), admin_actor)

    @pytest.mark.asyncio
    async def test_notification_failure_does_not_undo_validation(self, db_session, admin_actor, grade):
        service = GradeService(db_session)
        failing = AsyncMock(side_effect=PersistenceError("store unavailable"))

        with patch("campus.services.notification_service.NotificationService.dispatch", failing):
            validated = await service.validate_grade(grade.id, admin_actor)

        failing.assert_awaited_once()
        assert validated.validated is True
        stored = await service.get_with_module(grade.id)
        assert stored.validated is True


class TestStudentGrades:
    """Tests for GradeService.get_student_grades"""

    @pytest.mark.asyncio
    async def test_averages_only_count_validated_grades(
        self, db_session, level, professor, professor_actor, admin_actor, enrolled_student, module
    ):
        service = GradeService(db_session)
        second = await make_module(db_session, level, professor, coefficient=1)
        await enroll(db_session, enrolled_student, second)

        graded = await service.submit_grade(professor_actor, enrolled_student.id, module.id, 12, 1, ACADEMIC_YEAR)
        await service.submit_grade(professor_actor, enrolled_student.id, second.id, 8, 1, ACADEMIC_YEAR)
        await service.validate_grade(graded.id, admin_actor)

        result = await service.get_student_grades(enrolled_student)

        assert len(result["grades"]) == 2
        assert result["semester_average"] == "12.00"
        assert result["yearly_average"] == "12.00"


def test_format_grade_value():
    assert format_grade_value(15.0) == "15"
    assert format_grade_value(12.5) == "12.5"
