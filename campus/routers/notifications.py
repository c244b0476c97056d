from typing import Optional
from uuid import UUID
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from ..core.database import get_db
from ..core.security import ActingUser, require_roles
from ..models.notification import NotificationType
from ..models.user import UserRole
from ..schemas.base import Envelope
from ..schemas.notification_schemas import NotificationList, NotificationRead
from ..services.notification_service import NotificationService


def build_router(role: UserRole) -> APIRouter:
    """Notification inbox routes mounted under /api/{role}/notifications"""
    router = APIRouter(
        prefix=f"/api/{role.value}/notifications",
        tags=[f"{role.value.capitalize()} - Notifications"]
    )
    require_role = require_roles(role)

    @router.get("", response_model=Envelope[NotificationList])
    async def get_notifications(
        read: Optional[bool] = Query(None),
        notification_type: Optional[NotificationType] = Query(None, alias="type"),
        limit: int = Query(50, ge=1, le=100),
        actor: ActingUser = Depends(require_role),
        db: AsyncSession = Depends(get_db)
    ):
        """Newest notifications with the unread count"""
        notifications, unread_count = await NotificationService(db).get_notifications_for_user(
            actor.id, read=read, notification_type=notification_type, limit=limit
        )
        return Envelope(data=NotificationList(
            notifications=[NotificationRead.from_model(n) for n in notifications],
            unread_count=unread_count,
            count=len(notifications),
        ))

    @router.patch("/read-all", response_model=Envelope[None])
    async def mark_all_read(
        actor: ActingUser = Depends(require_role),
        db: AsyncSession = Depends(get_db)
    ):
        """Mark every notification as read"""
        updated = await NotificationService(db).mark_all_as_read(actor.id)
        return Envelope(data=None, message=f"{updated} notifications marked as read")

    @router.patch("/{notification_id}", response_model=Envelope[NotificationRead])
    @router.patch("/{notification_id}/read", response_model=Envelope[NotificationRead])
    async def mark_read(
        notification_id: UUID,
        actor: ActingUser = Depends(require_role),
        db: AsyncSession = Depends(get_db)
    ):
        """Mark one notification as read"""
        notification = await NotificationService(db).mark_as_read(notification_id, actor.id)
        return Envelope(data=NotificationRead.from_model(notification))

    @router.delete("/{notification_id}", response_model=Envelope[None])
    async def delete_notification(
        notification_id: UUID,
        actor: ActingUser = Depends(require_role),
        db: AsyncSession = Depends(get_db)
    ):
        """Delete one notification"""
        await NotificationService(db).delete_notification(notification_id, actor.id)
        return Envelope(data=None, message="Notification deleted")

    return router


routers = [build_router(role) for role in UserRole]
