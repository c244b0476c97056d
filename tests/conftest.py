"""
Campus API - Test Configuration and Fixtures
"""
import os
from typing import AsyncGenerator

import pytest
from faker import Faker
from httpx import AsyncClient, ASGITransport
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

# Set testing environment before the application reads its settings
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite+aiosqlite:///./test.db'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'

from campus.main import app
from campus.core.database import get_db
from campus.core.security import ActingUser, create_access_token, get_password_hash
from campus.models import Base, Level, Module, Professor, Student, User, UserRole

fake = Faker()

TEST_PASSWORD = 'password123'
# Hash once, bcrypt is deliberately slow
TEST_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)
ACADEMIC_YEAR = '2024-2025'


@pytest.fixture
async def session_factory(tmp_path) -> AsyncGenerator[async_sessionmaker, None]:
    """Fresh SQLite database per test"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/test.db", poolclass=NullPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)

    await engine.dispose()


@pytest.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    """Test client where every request gets its own session, as in production"""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url='http://test') as ac:
        yield ac

    app.dependency_overrides.clear()


def _unique_email() -> str:
    return f"{fake.user_name()}.{fake.unique.random_int(1, 10**6)}@university.edu"


async def make_user(db: AsyncSession, role: UserRole) -> User:
    user = User(
        email=_unique_email(),
        hashed_password=TEST_PASSWORD_HASH,
        first_name=fake.first_name(),
        last_name=fake.last_name(),
        role=role,
        is_active=True,
    )
    db.add(user)
    await db.flush()
    return user


async def make_student(db: AsyncSession, level: Level, semester: int = 1) -> Student:
    user = await make_user(db, UserRole.STUDENT)
    student = Student(
        user_id=user.id,
        student_number=f"STU{fake.unique.random_int(1000, 9999)}",
        level_id=level.id,
        field="Computer Science",
        semester=semester,
        academic_year=ACADEMIC_YEAR,
    )
    db.add(student)
    await db.commit()
    return student


async def make_professor(db: AsyncSession) -> Professor:
    user = await make_user(db, UserRole.PROFESSOR)
    professor = Professor(
        user_id=user.id,
        professor_number=f"PROF{fake.unique.random_int(1000, 9999)}",
        department="Computer Science",
    )
    db.add(professor)
    await db.commit()
    return professor


async def make_module(
    db: AsyncSession,
    level: Level,
    professor: Professor = None,
    coefficient: int = 2,
    semester: int = 1,
) -> Module:
    module = Module(
        code=f"INF{fake.unique.random_int(100, 999)}",
        name=fake.catch_phrase(),
        semester=semester,
        coefficient=coefficient,
        field="Computer Science",
        academic_year=ACADEMIC_YEAR,
        level_id=level.id,
        professor_id=professor.id if professor else None,
        is_active=True,
    )
    db.add(module)
    await db.commit()
    return module


async def count_rows(db: AsyncSession, model, *criteria) -> int:
    result = await db.execute(select(func.count()).select_from(model).where(*criteria))
    return result.scalar()


async def enroll(db: AsyncSession, student: Student, *modules: Module):
    from campus.services.student_service import StudentService
    await StudentService(db).enroll(student.id, [module.id for module in modules])


@pytest.fixture
async def level(db_session: AsyncSession) -> Level:
    level = Level(name="Licence 1", short_name="L1", academic_year=ACADEMIC_YEAR)
    db_session.add(level)
    await db_session.commit()
    return level


@pytest.fixture
async def admin_user(db_session: AsyncSession) -> User:
    user = await make_user(db_session, UserRole.ADMIN)
    await db_session.commit()
    return user


@pytest.fixture
async def professor(db_session: AsyncSession) -> Professor:
    return await make_professor(db_session)


@pytest.fixture
async def student(db_session: AsyncSession, level: Level) -> Student:
    return await make_student(db_session, level)


@pytest.fixture
async def module(db_session: AsyncSession, level: Level, professor: Professor) -> Module:
    return await make_module(db_session, level, professor, coefficient=2)


@pytest.fixture
async def enrolled_student(db_session: AsyncSession, student: Student, module: Module) -> Student:
    await enroll(db_session, student, module)
    return student


@pytest.fixture
def admin_actor(admin_user: User) -> ActingUser:
    return ActingUser(id=admin_user.id, role=UserRole.ADMIN)


@pytest.fixture
def professor_actor(professor: Professor) -> ActingUser:
    return ActingUser(id=professor.user_id, role=UserRole.PROFESSOR, profile_id=professor.id)


def auth_headers_for(user_id) -> dict:
    token = create_access_token({'sub': str(user_id)})
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture
def admin_headers(admin_user: User) -> dict:
    return auth_headers_for(admin_user.id)


@pytest.fixture
def professor_headers(professor: Professor) -> dict:
    return auth_headers_for(professor.user_id)


@pytest.fixture
def student_headers(student: Student) -> dict:
    return auth_headers_for(student.user_id)
