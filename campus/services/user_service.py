# campus/services/user_service.py
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import logging

from .base_service import BaseService
from ..core.exceptions import AuthenticationError, AuthorizationError, ConflictError
from ..core.security import create_access_token, get_password_hash, verify_password
from ..models.user import User, UserRole
from ..schemas.academic_schemas import AccountCreate

logger = logging.getLogger(__name__)


class UserService(BaseService[User]):
    def __init__(self, db: AsyncSession):
        super().__init__(User, db)

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.email == email.lower()))
        return result.scalar_one_or_none()

    async def build_account(self, data: AccountCreate, role: UserRole) -> User:
        """Stage a new user in the session; the caller commits"""
        if await self.get_by_email(data.email):
            raise ConflictError("User already exists with this email")
        user = User(
            email=data.email.lower(),
            hashed_password=get_password_hash(data.password),
            first_name=data.first_name.strip(),
            last_name=data.last_name.strip(),
            role=role,
            is_active=True,
        )
        self.db.add(user)
        return user

    async def authenticate(self, email: str, password: str) -> User:
        user = await self.get_by_email(email)
        if not user or not verify_password(password, user.hashed_password):
            logger.warning(f"Failed login attempt for {email}")
            raise AuthenticationError("Invalid credentials")
        if not user.is_active:
            raise AuthorizationError("User account is inactive")
        return user

    @staticmethod
    def issue_token(user: User) -> str:
        return create_access_token({"sub": str(user.id), "role": user.role.value})
