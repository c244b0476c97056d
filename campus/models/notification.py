# campus/models/notification.py
from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey, Index, Uuid
from sqlalchemy.orm import relationship
from .base import Base, enum_column
import enum


class NotificationType(enum.Enum):
    ANNOUNCEMENT = "announcement"
    GRADE = "grade"
    ASSIGNMENT = "assignment"
    SUBMISSION = "submission"
    GENERAL = "general"
    SYSTEM = "system"


class NotificationPriority(enum.Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    URGENT = "urgent"


class RelatedModel(enum.Enum):
    ASSIGNMENT = "Assignment"
    GRADE = "Grade"
    MODULE = "Module"
    SUBMISSION = "Submission"


class Notification(Base):
    __tablename__ = "notifications"

    recipient_id = Column(Uuid, ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    sender_id = Column(Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    title = Column(String(200), nullable=False)
    message = Column(Text, nullable=False)
    notification_type = Column(enum_column(NotificationType), default=NotificationType.GENERAL, nullable=False)
    priority = Column(enum_column(NotificationPriority), default=NotificationPriority.MEDIUM, nullable=False)

    # Polymorphic reference to the entity the notification is about
    related_model = Column(enum_column(RelatedModel), nullable=True)
    related_id = Column(Uuid, nullable=True)

    read = Column(Boolean, default=False, nullable=False)
    read_at = Column(DateTime(timezone=True), nullable=True)
    expires_at = Column(DateTime(timezone=True), nullable=False, index=True)

    sender = relationship("User", foreign_keys=[sender_id])

    __table_args__ = (
        Index("ix_notifications_recipient_read_created", "recipient_id", "read", "created_at"),
    )
