# campus/services/student_service.py
from typing import List, Sequence
from uuid import UUID
from datetime import datetime, timezone
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, func
from sqlalchemy.orm import selectinload
import logging

from .base_service import BaseService
from .user_service import UserService
from ..core.exceptions import NotFoundError
from ..models.assignment import Assignment
from ..models.level import Level
from ..models.module import Module
from ..models.student import Student, student_modules
from ..models.user import User, UserRole
from ..schemas.academic_schemas import StudentCreate

logger = logging.getLogger(__name__)


class StudentService(BaseService[Student]):
    def __init__(self, db: AsyncSession):
        super().__init__(Student, db)

    async def get_profile(self, student_id: UUID) -> Student:
        return await self.get_or_404(
            student_id, selectinload(Student.user), selectinload(Student.modules)
        )

    async def create_student(self, data: StudentCreate) -> Student:
        """Create the login account and the student profile together"""
        if not await self.db.get(Level, data.level_id):
            raise NotFoundError("Level", data.level_id)

        user = await UserService(self.db).build_account(data, UserRole.STUDENT)
        student = Student(
            user=user,
            student_number=data.student_number.strip().upper(),
            level_id=data.level_id,
            field=data.field.strip(),
            semester=data.semester,
            academic_year=data.academic_year,
        )
        self.db.add(student)
        await self.commit()
        logger.info(f"Student {student.student_number} created")
        return await self.get_profile(student.id)

    async def enroll(self, student_id: UUID, module_ids: List[UUID]) -> Student:
        """Add modules to the student's enrolled set; existing enrolments are kept"""
        student = await self.get_profile(student_id)

        result = await self.db.execute(select(Module).where(Module.id.in_(set(module_ids))))
        modules = result.scalars().all()
        found = {module.id for module in modules}
        missing = [module_id for module_id in module_ids if module_id not in found]
        if missing:
            raise NotFoundError("Module", missing[0])

        enrolled = {module.id for module in student.modules}
        for module in modules:
            if module.id not in enrolled:
                student.modules.append(module)
        await self.commit()
        logger.info(f"Student {student.student_number} enrolled in {len(found - enrolled)} new modules")
        return await self.get_profile(student.id)

    async def is_enrolled(self, student_id: UUID, module_id: UUID) -> bool:
        stmt = select(func.count()).select_from(student_modules).where(
            student_modules.c.student_id == student_id,
            student_modules.c.module_id == module_id,
        )
        result = await self.db.execute(stmt)
        return result.scalar() > 0

    async def list_for_module(self, module_id: UUID) -> Sequence[Student]:
        stmt = (
            select(Student)
            .join(student_modules, student_modules.c.student_id == Student.id)
            .options(selectinload(Student.user))
            .where(student_modules.c.module_id == module_id)
            .order_by(Student.student_number)
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def get_enrolled_user_ids(self, module_id: UUID) -> List[UUID]:
        """Recipients for module-wide notifications"""
        stmt = (
            select(Student.user_id)
            .join(student_modules, student_modules.c.student_id == Student.id)
            .join(User, User.id == Student.user_id)
            .where(student_modules.c.module_id == module_id, User.is_active.is_(True))
        )
        result = await self.db.execute(stmt)
        return list(result.scalars().all())

    async def count_pending_assignments(self, student: Student) -> int:
        module_ids = [module.id for module in student.modules]
        if not module_ids:
            return 0
        stmt = select(func.count()).select_from(Assignment).where(
            Assignment.module_id.in_(module_ids),
            Assignment.deadline >= datetime.now(timezone.utc),
        )
        result = await self.db.execute(stmt)
        return result.scalar()
