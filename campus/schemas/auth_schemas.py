# campus/schemas/auth_schemas.py
from uuid import UUID
from pydantic import EmailStr, Field
from .base import CamelModel
from ..models.user import UserRole


class LoginRequest(CamelModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class UserRead(CamelModel):
    id: UUID
    email: str
    first_name: str
    last_name: str
    role: UserRole
    is_active: bool


class TokenResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead
