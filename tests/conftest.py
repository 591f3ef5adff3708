"""Pytest fixtures for testing."""

from typing import AsyncGenerator
from uuid import uuid4

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from sport_grades.db.session import get_db
from sport_grades.grading.rules import EvaluationMode, ExerciseRules, Gender, StudentRef
from sport_grades.main import app
from sport_grades.models import Base
from sport_grades.models.exercise import Exercise
from sport_grades.models.student import Student

# One in-memory database per test, shared by every connection
TEST_DATABASE_URL = "sqlite+aiosqlite://"

# Timed sprint: lower is better, male table only
SPRINT_RANGES = {
    "M": [
        {"min_value": "0", "max_value": "12.0", "score": "10"},
        {"min_value": "12.1", "max_value": "12.8", "score": "9"},
        {"min_value": "12.9", "max_value": "13.6", "score": "8"},
        {"min_value": "13.7", "max_value": "15.0", "score": "6"},
        {"min_value": "15.1", "max_value": "99", "score": "0"},
    ],
}

SKILL_CRITERIA = [
    {"name": "technique", "max_points": "10"},
    {"name": "teamwork", "max_points": "10"},
]


@pytest_asyncio.fixture(scope="function")
async def db_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async_session = async_sessionmaker(
        db_engine, class_=AsyncSession, expire_on_commit=False
    )

    async with async_session() as session:
        yield session
        await session.rollback()


@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Create test client with database override."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def sprint_exercise(db_session: AsyncSession) -> Exercise:
    """Range-mode exercise with only a male table."""
    exercise = Exercise(
        id=uuid4(),
        name="100m sprint",
        unit="sec",
        evaluation_mode=EvaluationMode.RANGE,
        ranges=SPRINT_RANGES,
        criteria=[],
    )
    db_session.add(exercise)
    await db_session.commit()
    await db_session.refresh(exercise)
    return exercise


@pytest_asyncio.fixture
async def skills_exercise(db_session: AsyncSession) -> Exercise:
    """Criteria-mode exercise with two criteria worth 10 points each."""
    exercise = Exercise(
        id=uuid4(),
        name="Basketball skills",
        unit="qualitative",
        evaluation_mode=EvaluationMode.CRITERIA,
        ranges={},
        criteria=SKILL_CRITERIA,
        requires_teamwork=True,
    )
    db_session.add(exercise)
    await db_session.commit()
    await db_session.refresh(exercise)
    return exercise


@pytest_asyncio.fixture
async def student_f(db_session: AsyncSession) -> Student:
    student = Student(id=uuid4(), first_name="Ana", last_name="Ruiz", gender="F")
    db_session.add(student)
    await db_session.commit()
    await db_session.refresh(student)
    return student


@pytest_asyncio.fixture
async def student_m(db_session: AsyncSession) -> Student:
    student = Student(id=uuid4(), first_name="Bruno", last_name="Sanz", gender="M")
    db_session.add(student)
    await db_session.commit()
    await db_session.refresh(student)
    return student


# Engine-level rule tables, no database involved


@pytest.fixture
def sprint_rules() -> ExerciseRules:
    return ExerciseRules.from_config(
        id=str(uuid4()),
        name="100m sprint",
        evaluation_mode="range",
        ranges=SPRINT_RANGES,
    )


@pytest.fixture
def skills_rules() -> ExerciseRules:
    return ExerciseRules.from_config(
        id=str(uuid4()),
        name="Basketball skills",
        evaluation_mode="criteria",
        criteria=SKILL_CRITERIA,
        requires_teamwork=True,
    )


@pytest.fixture
def students() -> list[StudentRef]:
    return [
        StudentRef(id=str(uuid4()), gender=Gender.FEMALE),
        StudentRef(id=str(uuid4()), gender=Gender.MALE),
        StudentRef(id=str(uuid4()), gender=Gender.UNSPECIFIED),
    ]
