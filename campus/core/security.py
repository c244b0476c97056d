from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from uuid import UUID
from jose import JWTError, jwt
import bcrypt
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from .config import settings
from .database import get_db
from .exceptions import AuthenticationError, AuthorizationError
from ..models.user import User, UserRole

# Bearer token security; missing headers are reported through AuthenticationError
security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class ActingUser:
    """The authenticated caller, resolved once at the boundary."""
    id: UUID
    role: UserRole
    profile_id: Optional[UUID] = None  # Student.id or Professor.id

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_professor(self) -> bool:
        return self.role == UserRole.PROFESSOR

    @property
    def is_student(self) -> bool:
        return self.role == UserRole.STUDENT


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password"""
    # Bcrypt has a 72 byte limit - truncate password if necessary
    password_bytes = plain_password.encode('utf-8')[:72]
    return bcrypt.checkpw(password_bytes, hashed_password.encode('utf-8'))


def get_password_hash(password: str) -> str:
    password_bytes = password.encode('utf-8')[:72]
    return bcrypt.hashpw(password_bytes, bcrypt.gensalt()).decode('utf-8')


def create_access_token(data: Dict[str, Any], expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token"""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"exp": expire, "type": "access"})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Dict[str, Any]:
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        raise AuthenticationError("Could not validate credentials")


async def get_acting_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: AsyncSession = Depends(get_db)
) -> ActingUser:
    """Resolve the bearer token into an ActingUser"""
    if credentials is None:
        raise AuthenticationError("Not authorized, no token")

    payload = decode_token(credentials.credentials)
    if payload.get("type") != "access":
        raise AuthenticationError("Invalid token type")

    try:
        user_id = UUID(payload.get("sub", ""))
    except ValueError:
        raise AuthenticationError("Invalid token payload")

    result = await db.execute(
        select(User)
        .options(selectinload(User.student), selectinload(User.professor))
        .where(User.id == user_id)
    )
    user = result.scalar_one_or_none()

    if not user:
        raise AuthenticationError("User not found")
    if not user.is_active:
        raise AuthorizationError("User account is inactive")

    profile_id = None
    if user.role == UserRole.STUDENT:
        profile_id = user.student.id if user.student else None
    elif user.role == UserRole.PROFESSOR:
        profile_id = user.professor.id if user.professor else None
    if user.role != UserRole.ADMIN and profile_id is None:
        raise AuthorizationError(f"{user.role.value.capitalize()} profile not found")

    return ActingUser(id=user.id, role=user.role, profile_id=profile_id)


def require_roles(*roles: UserRole):
    """Dependency factory restricting a route to the given roles"""
    async def checker(actor: ActingUser = Depends(get_acting_user)) -> ActingUser:
        if actor.role not in roles:
            raise AuthorizationError(
                f"User role '{actor.role.value}' is not authorized to access this route"
            )
        return actor
    return checker


require_student = require_roles(UserRole.STUDENT)
require_professor = require_roles(UserRole.PROFESSOR)
require_admin = require_roles(UserRole.ADMIN)
