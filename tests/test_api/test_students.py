"""Tests for student API endpoints."""

import asyncio
from decimal import Decimal
from uuid import uuid4

import pytest
from httpx import AsyncClient

from sport_grades.models.exercise import Exercise
from sport_grades.models.student import Student


@pytest.mark.asyncio
async def test_create_student(client: AsyncClient):
    """Test student registration."""
    response = await client.post(
        "/api/v1/students",
        json={"first_name": "Lucia", "last_name": "Moreno", "gender": "F"},
    )

    assert response.status_code == 201
    data = response.json()
    assert data["first_name"] == "Lucia"
    assert data["gender"] == "F"
    assert "id" in data


@pytest.mark.asyncio
async def test_gender_defaults_to_unspecified(client: AsyncClient):
    response = await client.post(
        "/api/v1/students", json={"first_name": "Alex", "last_name": "Diaz"}
    )
    assert response.json()["gender"] == "N"


@pytest.mark.asyncio
async def test_create_student_invalid_gender(client: AsyncClient):
    response = await client.post(
        "/api/v1/students",
        json={"first_name": "Alex", "last_name": "Diaz", "gender": "X"},
    )
    assert response.status_code == 422  # Validation error


@pytest.mark.asyncio
async def test_get_and_list_students(client: AsyncClient, student_f: Student, student_m: Student):
    response = await client.get(f"/api/v1/students/{student_m.id}")
    assert response.status_code == 200
    assert response.json()["last_name"] == "Sanz"

    response = await client.get("/api/v1/students")
    assert [s["last_name"] for s in response.json()] == ["Ruiz", "Sanz"]


@pytest.mark.asyncio
async def test_get_student_not_found(client: AsyncClient):
    response = await client.get(f"/api/v1/students/{uuid4()}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_summary_without_grades(client: AsyncClient, student_m: Student):
    response = await client.get(f"/api/v1/students/{student_m.id}/summary")

    assert response.status_code == 200
    data = response.json()
    assert data["total_evaluations"] == 0
    assert data["average_score"] is None
    assert data["passing"] is None


@pytest.mark.asyncio
async def test_summary_uses_current_grades_only(
    client: AsyncClient,
    student_m: Student,
    sprint_exercise: Exercise,
    skills_exercise: Exercise,
):
    async def evaluate(exercise, **fields):
        await client.post(
            "/api/v1/evaluations",
            json={"student_id": str(student_m.id), "exercise_id": str(exercise.id), **fields},
        )
        await asyncio.sleep(0.001)

    await evaluate(sprint_exercise, performance_value="12.5", score="9.0")
    await evaluate(sprint_exercise, performance_value="11.5", score="10.0")  # re-grade
    await evaluate(skills_exercise, performance_value='{"technique": 5, "teamwork": 5}', score="5.0")

    response = await client.get(f"/api/v1/students/{student_m.id}/summary")

    assert response.status_code == 200
    data = response.json()
    assert data["total_evaluations"] == 2
    assert Decimal(data["average_score"]) == Decimal("7.5")
    assert Decimal(data["best_score"]) == Decimal("10")
    assert Decimal(data["worst_score"]) == Decimal("5")
    assert data["average_display"] == "7.5"
    assert data["passing"] is True


@pytest.mark.asyncio
async def test_summary_ignores_ungraded_current_record(
    client: AsyncClient, student_m: Student, sprint_exercise: Exercise
):
    await client.post(
        "/api/v1/evaluations",
        json={
            "student_id": str(student_m.id),
            "exercise_id": str(sprint_exercise.id),
            "performance_value": "12.5",
            "score": "9.0",
        },
    )
    await asyncio.sleep(0.001)
    # A newer draft without a score replaces the grade as the current record
    await client.post(
        "/api/v1/evaluations",
        json={
            "student_id": str(student_m.id),
            "exercise_id": str(sprint_exercise.id),
            "performance_value": "retake",
        },
    )

    data = (await client.get(f"/api/v1/students/{student_m.id}/summary")).json()
    assert data["total_evaluations"] == 0


@pytest.mark.asyncio
async def test_summary_student_not_found(client: AsyncClient):
    response = await client.get(f"/api/v1/students/{uuid4()}/summary")
    assert response.status_code == 404
