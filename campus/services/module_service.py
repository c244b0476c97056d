# campus/services/module_service.py
from typing import Sequence
from uuid import UUID
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from sqlalchemy.orm import selectinload
import logging

from .base_service import BaseService
from .notification_service import NotificationService
from .student_service import StudentService
from ..core.exceptions import AuthorizationError, NotFoundError
from ..core.security import ActingUser
from ..models.assignment import Assignment
from ..models.level import Level
from ..models.module import Module, Material
from ..models.notification import NotificationType, RelatedModel
from ..models.professor import Professor
from ..models.student import Student
from ..schemas.academic_schemas import (
    AnnouncementCreate, AssignmentCreate, MaterialCreate, ModuleCreate
)

logger = logging.getLogger(__name__)


class ModuleService(BaseService[Module]):
    def __init__(self, db: AsyncSession):
        super().__init__(Module, db)

    async def create_module(self, data: ModuleCreate) -> Module:
        if not await self.db.get(Level, data.level_id):
            raise NotFoundError("Level", data.level_id)
        if data.professor_id and not await self.db.get(Professor, data.professor_id):
            raise NotFoundError("Professor", data.professor_id)

        payload = data.model_dump()
        payload["code"] = data.code.strip().upper()
        return await self.create(payload)

    async def list_for_professor(self, professor_id: UUID) -> Sequence[Module]:
        stmt = (
            select(Module)
            .where(Module.professor_id == professor_id, Module.is_active.is_(True))
            .order_by(Module.code)
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()

    async def get_owned_module(self, actor: ActingUser, module_id: UUID) -> Module:
        """Module lookup restricted to its assigned professor (admins pass)"""
        module = await self.get(module_id)
        if not module:
            raise NotFoundError("Module", module_id)
        if not actor.is_admin and (module.professor_id is None or module.professor_id != actor.profile_id):
            raise AuthorizationError("Not authorized for this module")
        return module

    async def add_material(self, actor: ActingUser, module_id: UUID, data: MaterialCreate) -> Material:
        module = await self.get_owned_module(actor, module_id)
        material = Material(module_id=module.id, **data.model_dump())
        self.db.add(material)
        await self.commit()
        await self.db.refresh(material)

        recipients = await StudentService(self.db).get_enrolled_user_ids(module.id)
        await NotificationService(self.db).dispatch_best_effort(
            recipients=recipients,
            sender_id=actor.id,
            title="New Course Material",
            message=f'New material "{material.title}" uploaded for {module.name}',
            notification_type=NotificationType.ANNOUNCEMENT,
            related_to=(RelatedModel.MODULE, module.id),
        )
        return material

    async def create_assignment(self, actor: ActingUser, data: AssignmentCreate) -> Assignment:
        module = await self.get_owned_module(actor, data.module_id)
        assignment = Assignment(
            module_id=module.id,
            professor_id=actor.profile_id if actor.is_professor else module.professor_id,
            title=data.title,
            description=data.description,
            instructions=data.instructions,
            deadline=data.deadline,
            max_grade=data.max_grade,
        )
        self.db.add(assignment)
        await self.commit()
        await self.db.refresh(assignment)

        recipients = await StudentService(self.db).get_enrolled_user_ids(module.id)
        await NotificationService(self.db).dispatch_best_effort(
            recipients=recipients,
            sender_id=actor.id,
            title="New Assignment",
            message=(
                f'New assignment "{assignment.title}" for {module.name}. '
                f"Deadline: {data.deadline:%Y-%m-%d}"
            ),
            notification_type=NotificationType.ASSIGNMENT,
            related_to=(RelatedModel.ASSIGNMENT, assignment.id),
        )
        return assignment

    async def send_announcement(self, actor: ActingUser, data: AnnouncementCreate) -> int:
        """Notify every student enrolled in the module; returns how many were notified"""
        module = await self.get_owned_module(actor, data.module_id)
        recipients = await StudentService(self.db).get_enrolled_user_ids(module.id)
        sent = await NotificationService(self.db).dispatch_best_effort(
            recipients=recipients,
            sender_id=actor.id,
            title=data.title,
            message=data.message,
            notification_type=NotificationType.ANNOUNCEMENT,
            related_to=(RelatedModel.MODULE, module.id),
        )
        if sent != len(recipients):
            logger.warning(f"Announcement for {module.code} reached {sent} of {len(recipients)} students")
        return sent

    async def get_module_details(self, student: Student, module_id: UUID) -> Module:
        """Module with its materials, visible only to enrolled students"""
        stmt = (
            select(Module)
            .options(selectinload(Module.materials))
            .where(Module.id == module_id)
            .execution_options(populate_existing=True)
        )
        result = await self.db.execute(stmt)
        module = result.scalar_one_or_none()
        if not module:
            raise NotFoundError("Module", module_id)
        if module.id not in {enrolled.id for enrolled in student.modules}:
            raise AuthorizationError("You are not enrolled in this module")
        return module

    async def list_assignments(self, module_ids: Sequence[UUID]) -> Sequence[Assignment]:
        if not module_ids:
            return []
        stmt = (
            select(Assignment)
            .where(Assignment.module_id.in_(module_ids))
            .order_by(Assignment.deadline)
        )
        result = await self.db.execute(stmt)
        return result.scalars().all()
