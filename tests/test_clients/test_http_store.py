"""Tests for the httpx record store client, run against the app in-process."""

from decimal import Decimal
from typing import AsyncGenerator
from uuid import uuid4

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession

from sport_grades.clients.base import EvaluationStore, RecordNotFoundError, StoreError
from sport_grades.clients.http import HttpEvaluationStore
from sport_grades.db.session import get_db
from sport_grades.config import Settings
from sport_grades.grading.lifecycle import DeletePolicy, EvaluationController
from sport_grades.grading.rules import EvaluationMode, Gender
from sport_grades.grading.status import EvaluationState
from sport_grades.main import app
from sport_grades.models.exercise import Exercise
from sport_grades.models.student import Student
from sport_grades.schemas.evaluation import EvaluationCreate


@pytest_asyncio.fixture
async def store(db_session: AsyncSession) -> AsyncGenerator[HttpEvaluationStore, None]:
    """HTTP store wired to the app with the test database."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with HttpEvaluationStore(
        base_url="http://test/api/v1", transport=ASGITransport(app=app)
    ) as store:
        yield store

    app.dependency_overrides.clear()


def test_implements_store_contract():
    store = HttpEvaluationStore(base_url="http://test/api/v1")
    assert isinstance(store, EvaluationStore)


@pytest.mark.asyncio
async def test_create_list_delete(store, student_m: Student, sprint_exercise: Exercise):
    record = await store.create_evaluation(
        EvaluationCreate(
            student_id=student_m.id,
            exercise_id=sprint_exercise.id,
            performance_value="12.5",
            score=Decimal("9.0"),
        )
    )

    assert record.student_id == str(student_m.id)
    assert record.score == Decimal("9.0")
    assert record.sequence == 1

    records = await store.list_evaluations()
    assert [r.id for r in records] == [record.id]

    await store.delete_evaluation(record.id)
    assert await store.list_evaluations() == []


@pytest.mark.asyncio
async def test_delete_unknown_record(store):
    with pytest.raises(RecordNotFoundError):
        await store.delete_evaluation("00000000-0000-0000-0000-000000000000")


@pytest.mark.asyncio
async def test_rejected_payload_is_store_error(store, sprint_exercise: Exercise):
    with pytest.raises(StoreError) as exc_info:
        await store.create_evaluation(
            EvaluationCreate(student_id=uuid4(), exercise_id=sprint_exercise.id)
        )
    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_fetch_registry(store, student_f: Student, sprint_exercise: Exercise, skills_exercise: Exercise):
    exercises = {e.name: e for e in await store.fetch_exercises()}
    assert exercises["100m sprint"].evaluation_mode == EvaluationMode.RANGE
    assert exercises["100m sprint"].max_score == Decimal("10")
    assert [c.name for c in exercises["Basketball skills"].criteria] == ["technique", "teamwork"]

    students = await store.fetch_students()
    assert [(s.id, s.gender) for s in students] == [(str(student_f.id), Gender.FEMALE)]


@pytest.mark.asyncio
async def test_controller_over_http(store, student_f: Student, sprint_exercise: Exercise):
    settings = Settings(base_point_enabled=True, delete_policy="single")
    controller = await EvaluationController.connect(store, settings)
    assert controller.delete_policy == DeletePolicy.SINGLE

    draft = controller.stage(student_f.id, sprint_exercise.id)
    draft.performance_value = "11.5"
    record = await controller.confirm(draft)

    assert record.score == Decimal("10.0")
    assert controller.status_of(student_f.id, sprint_exercise.id) == EvaluationState.GRADED


def failing_transport(status_code: int = 500, body: bytes = b"boom") -> httpx.MockTransport:
    return httpx.MockTransport(lambda request: httpx.Response(status_code, content=body))


@pytest.mark.asyncio
async def test_server_error_is_store_error():
    async with HttpEvaluationStore(base_url="http://test/api/v1", transport=failing_transport()) as store:
        with pytest.raises(StoreError) as exc_info:
            await store.list_evaluations()
    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
async def test_malformed_body_is_store_error():
    transport = failing_transport(200, b'{"not": "a list"}')
    async with HttpEvaluationStore(base_url="http://test/api/v1", transport=transport) as store:
        with pytest.raises(StoreError):
            await store.list_evaluations()


@pytest.mark.asyncio
async def test_connection_error_is_store_error():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with HttpEvaluationStore(
        base_url="http://test/api/v1", transport=httpx.MockTransport(refuse)
    ) as store:
        with pytest.raises(StoreError):
            await store.delete_evaluation("abc")
