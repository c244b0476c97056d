from .base_service import BaseService
from .user_service import UserService
from .student_service import StudentService
from .professor_service import ProfessorService
from .module_service import ModuleService
from .notification_service import NotificationService
from .grade_service import GradeService
from .submission_service import SubmissionService

__all__ = [
    "BaseService",
    "UserService",
    "StudentService",
    "ProfessorService",
    "ModuleService",
    "NotificationService",
    "GradeService",
    "SubmissionService",
]
