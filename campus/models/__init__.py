# campus/models/__init__.py
"""Import all models here so they are registered for Alembic and create_all."""
from .base import Base
from .user import User, UserRole
from .level import Level
from .student import Student, student_modules
from .professor import Professor
from .module import Module, Material, MaterialType
from .assignment import Assignment
from .submission import Submission, SubmissionStatus
from .grade import Grade, GradeType
from .notification import Notification, NotificationType, NotificationPriority, RelatedModel

__all__ = [
    "Base",
    "User",
    "UserRole",
    "Level",
    "Student",
    "student_modules",
    "Professor",
    "Module",
    "Material",
    "MaterialType",
    "Assignment",
    "Submission",
    "SubmissionStatus",
    "Grade",
    "GradeType",
    "Notification",
    "NotificationType",
    "NotificationPriority",
    "RelatedModel",
]
