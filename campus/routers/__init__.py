from . import health, auth, admin, professor, student, notifications

__all__ = [
    "health",
    "auth",
    "admin",
    "professor",
    "student",
    "notifications",
]
