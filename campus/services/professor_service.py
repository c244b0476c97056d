# campus/services/professor_service.py
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
import logging

from .base_service import BaseService
from .user_service import UserService
from ..core.exceptions import NotFoundError
from ..models.module import Module
from ..models.professor import Professor
from ..models.user import UserRole
from ..schemas.academic_schemas import ProfessorCreate

logger = logging.getLogger(__name__)


class ProfessorService(BaseService[Professor]):
    def __init__(self, db: AsyncSession):
        super().__init__(Professor, db)

    async def get_profile(self, professor_id: UUID) -> Professor:
        return await self.get_or_404(professor_id, selectinload(Professor.user))

    async def create_professor(self, data: ProfessorCreate) -> Professor:
        user = await UserService(self.db).build_account(data, UserRole.PROFESSOR)
        professor = Professor(
            user=user,
            professor_number=data.professor_number.strip().upper(),
            department=data.department.strip(),
            specialization=data.specialization,
        )
        self.db.add(professor)
        await self.commit()
        logger.info(f"Professor {professor.professor_number} created")
        return await self.get_profile(professor.id)

    async def assign_module(self, professor_id: UUID, module_id: UUID) -> Module:
        """Make the professor the assigned grader of a module"""
        professor = await self.get_or_404(professor_id)
        module = await self.db.get(Module, module_id)
        if not module:
            raise NotFoundError("Module", module_id)
        module.professor_id = professor.id
        await self.commit()
        await self.db.refresh(module)
        logger.info(f"Module {module.code} assigned to professor {professor.professor_number}")
        return module
