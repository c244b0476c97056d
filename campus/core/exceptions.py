# campus/core/exceptions.py
"""Custom exceptions for the campus application."""
from typing import Optional


class CampusException(Exception):
    """Base exception for campus application."""
    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


class ValidationError(CampusException):
    """Malformed or out-of-range input."""
    status_code = 400


class AuthenticationError(CampusException):
    """Missing or invalid credentials."""
    status_code = 401

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message)


class AuthorizationError(CampusException):
    """Actor lacks the required role or ownership."""
    status_code = 403

    def __init__(self, message: str = "Not authorized"):
        super().__init__(message)


class NotFoundError(CampusException):
    """Referenced entity is absent."""
    status_code = 404

    def __init__(self, resource: str, id=None):
        message = f"{resource} not found"
        if id:
            message += f" with id: {id}"
        self.resource = resource
        super().__init__(message)


class ConflictError(CampusException):
    """Uniqueness violation or forbidden state transition."""
    status_code = 409


class PersistenceError(CampusException):
    """Underlying store failure."""
    status_code = 500
