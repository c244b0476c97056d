# campus/services/notification_service.py
from typing import Iterable, List, Optional, Tuple
from uuid import UUID
from datetime import datetime, timedelta, timezone
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, insert, update, delete, func
from sqlalchemy.exc import SQLAlchemyError
import logging

from .base_service import BaseService
from ..core.config import settings
from ..core.exceptions import AuthorizationError, NotFoundError, PersistenceError
from ..models.notification import (
    Notification, NotificationType, NotificationPriority, RelatedModel
)

logger = logging.getLogger(__name__)


class NotificationService(BaseService[Notification]):
    def __init__(self, db: AsyncSession):
        super().__init__(Notification, db)

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    async def dispatch(
        self,
        recipients: Iterable[UUID],
        sender_id: Optional[UUID],
        title: str,
        message: str,
        notification_type: NotificationType,
        related_to: Optional[Tuple[RelatedModel, UUID]] = None,
        priority: NotificationPriority = NotificationPriority.MEDIUM,
    ) -> int:
        """Create one notification per recipient in a single batched insert.

        Not idempotent: every call creates a fresh set of rows, so callers
        invoke it once per triggering state change.
        """
        now = self._now()
        expires_at = now + timedelta(days=settings.notification_retention_days)
        related_model, related_id = related_to if related_to else (None, None)

        rows = [
            {
                "recipient_id": recipient_id,
                "sender_id": sender_id,
                "title": title,
                "message": message,
                "notification_type": notification_type,
                "priority": priority,
                "related_model": related_model,
                "related_id": related_id,
                "read": False,
                "expires_at": expires_at,
            }
            for recipient_id in recipients
        ]
        if not rows:
            return 0

        try:
            await self.db.execute(insert(Notification), rows)
            await self.db.commit()
        except SQLAlchemyError as e:
            await self.db.rollback()
            raise PersistenceError(f"Failed to create notifications: {e}")

        logger.info(f"Dispatched {len(rows)} '{notification_type.value}' notifications: {title}")
        return len(rows)

    async def dispatch_best_effort(self, *args, **kwargs) -> int:
        """Dispatch without failing the operation that triggered it"""
        try:
            return await self.dispatch(*args, **kwargs)
        except PersistenceError as e:
            logger.error(f"Notification dispatch failed, continuing: {e.message}")
            return 0

    def _visible_to(self, user_id: UUID):
        return (
            Notification.recipient_id == user_id,
            Notification.expires_at > self._now(),
        )

    async def get_notifications_for_user(
        self,
        user_id: UUID,
        read: Optional[bool] = None,
        notification_type: Optional[NotificationType] = None,
        limit: int = 50
    ) -> Tuple[List[Notification], int]:
        """Newest notifications for a recipient plus their unread count"""
        stmt = select(Notification).where(*self._visible_to(user_id))
        if read is not None:
            stmt = stmt.where(Notification.read == read)
        if notification_type is not None:
            stmt = stmt.where(Notification.notification_type == notification_type)
        stmt = stmt.order_by(Notification.created_at.desc()).limit(limit)

        result = await self.db.execute(stmt)
        notifications = list(result.scalars().all())

        unread_count = await self.get_unread_count(user_id)
        return notifications, unread_count

    async def get_unread_count(self, user_id: UUID) -> int:
        stmt = (
            select(func.count())
            .select_from(Notification)
            .where(*self._visible_to(user_id), Notification.read.is_(False))
        )
        result = await self.db.execute(stmt)
        return result.scalar()

    async def _get_owned(self, notification_id: UUID, user_id: UUID) -> Notification:
        notification = await self.get(notification_id)
        if not notification:
            raise NotFoundError("Notification", notification_id)
        if notification.recipient_id != user_id:
            raise AuthorizationError("Not authorized to access this notification")
        return notification

    async def mark_as_read(self, notification_id: UUID, user_id: UUID) -> Notification:
        notification = await self._get_owned(notification_id, user_id)
        if not notification.read:
            notification.read = True
            notification.read_at = self._now()
            await self.commit()
            await self.db.refresh(notification)
        return notification

    async def mark_all_as_read(self, user_id: UUID) -> int:
        stmt = (
            update(Notification)
            .where(Notification.recipient_id == user_id, Notification.read.is_(False))
            .values(read=True, read_at=self._now())
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        await self.commit()
        return result.rowcount

    async def delete_notification(self, notification_id: UUID, user_id: UUID) -> None:
        notification = await self._get_owned(notification_id, user_id)
        await self.db.delete(notification)
        await self.commit()

    async def purge_expired(self) -> int:
        """Hard-delete notifications past their retention window"""
        stmt = (
            delete(Notification)
            .where(Notification.expires_at <= self._now())
            .execution_options(synchronize_session=False)
        )
        result = await self.db.execute(stmt)
        await self.commit()
        logger.info(f"Purged {result.rowcount} expired notifications")
        return result.rowcount
