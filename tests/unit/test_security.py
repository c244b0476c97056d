"""
Unit Tests for authentication helpers
"""
from datetime import timedelta

import pytest
from fastapi.security import HTTPAuthorizationCredentials
from jose import jwt

from campus.core.config import settings
from campus.core.exceptions import AuthenticationError, AuthorizationError
from campus.core.security import (
    create_access_token, decode_token, get_acting_user, get_password_hash,
    require_roles, verify_password, ActingUser
)
from campus.models import UserRole
from tests.conftest import make_user


def bearer(token: str) -> HTTPAuthorizationCredentials:
    return HTTPAuthorizationCredentials(scheme="Bearer", credentials=token)


class TestPasswords:

    def test_hash_and_verify(self):
        hashed = get_password_hash("s3cret-pass")
        assert hashed != "s3cret-pass"
        assert verify_password("s3cret-pass", hashed)
        assert not verify_password("wrong-pass", hashed)


class TestTokens:

    def test_round_trip(self):
        token = create_access_token({"sub": "abc"})
        payload = decode_token(token)
        assert payload["sub"] == "abc"
        assert payload["type"] == "access"

    def test_expired_token(self):
        token = create_access_token({"sub": "abc"}, expires_delta=timedelta(seconds=-10))
        with pytest.raises(AuthenticationError):
            decode_token(token)

    def test_tampered_token(self):
        token = jwt.encode({"sub": "abc", "type": "access"}, "another-secret", algorithm="HS256")
        with pytest.raises(AuthenticationError):
            decode_token(token)


class TestActingUser:
    """Tests for get_acting_user and require_roles"""

    @pytest.mark.asyncio
    async def test_missing_token(self, db_session):
        with pytest.raises(AuthenticationError) as exc:
            await get_acting_user(None, db_session)
        assert exc.value.message == "Not authorized, no token"

    @pytest.mark.asyncio
    async def test_resolves_student_profile(self, db_session, student):
        actor = await get_acting_user(bearer(create_access_token({"sub": str(student.user_id)})), db_session)
        assert actor.id == student.user_id
        assert actor.role == UserRole.STUDENT
        assert actor.profile_id == student.id

    @pytest.mark.asyncio
    async def test_admin_has_no_profile(self, db_session, admin_user):
        actor = await get_acting_user(bearer(create_access_token({"sub": str(admin_user.id)})), db_session)
        assert actor.is_admin
        assert actor.profile_id is None

    @pytest.mark.asyncio
    async def test_professor_without_profile_is_rejected(self, db_session):
        user = await make_user(db_session, UserRole.PROFESSOR)
        await db_session.commit()

        with pytest.raises(AuthorizationError):
            await get_acting_user(bearer(create_access_token({"sub": str(user.id)})), db_session)

    @pytest.mark.asyncio
    async def test_inactive_user(self, db_session, admin_user):
        admin_user.is_active = False
        await db_session.commit()

        with pytest.raises(AuthorizationError):
            await get_acting_user(bearer(create_access_token({"sub": str(admin_user.id)})), db_session)

    @pytest.mark.asyncio
    async def test_invalid_subject(self, db_session):
        with pytest.raises(AuthenticationError):
            await get_acting_user(bearer(create_access_token({"sub": "not-a-uuid"})), db_session)

    @pytest.mark.asyncio
    async def test_require_roles(self, admin_user):
        checker = require_roles(UserRole.PROFESSOR)
        admin = ActingUser(id=admin_user.id, role=UserRole.ADMIN)

        with pytest.raises(AuthorizationError) as exc:
            await checker(admin)
        assert exc.value.message == "User role 'admin' is not authorized to access this route"
        assert await require_roles(UserRole.ADMIN, UserRole.PROFESSOR)(admin) is admin


def test_settings_loaded_for_tests():
    assert settings.jwt_secret_key == "test-jwt-secret-key-for-testing"
