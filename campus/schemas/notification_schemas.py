# campus/schemas/notification_schemas.py
from typing import List, Optional
from datetime import datetime
from uuid import UUID
from .base import CamelModel
from ..models.notification import NotificationType, NotificationPriority, RelatedModel


class RelatedTo(CamelModel):
    model: RelatedModel
    id: UUID


class NotificationRead(CamelModel):
    id: UUID
    recipient_id: UUID
    sender_id: Optional[UUID] = None
    title: str
    message: str
    notification_type: NotificationType
    priority: NotificationPriority
    related_to: Optional[RelatedTo] = None
    read: bool
    read_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_model(cls, notification) -> "NotificationRead":
        related_to = None
        if notification.related_model and notification.related_id:
            related_to = RelatedTo(model=notification.related_model, id=notification.related_id)
        return cls(
            id=notification.id,
            recipient_id=notification.recipient_id,
            sender_id=notification.sender_id,
            title=notification.title,
            message=notification.message,
            notification_type=notification.notification_type,
            priority=notification.priority,
            related_to=related_to,
            read=notification.read,
            read_at=notification.read_at,
            created_at=notification.created_at,
        )


class NotificationList(CamelModel):
    notifications: List[NotificationRead]
    unread_count: int
    count: int
