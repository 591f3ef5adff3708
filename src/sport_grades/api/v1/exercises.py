"""Exercise API endpoints: registry, scoring preview and grading queue."""

import json
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, status

from ..deps import EvaluationServiceDep, RegistryServiceDep, SettingsDep
from ...grading.queue import build_queue
from ...grading.records import as_naive_utc
from ...grading.rules import EvaluationMode
from ...grading.scoring import compute_score
from ...grading.status import status_for
from ...models.exercise import Exercise
from ...schemas.evaluation import (
    EvaluationResponse,
    GradingQueueResponse,
    QueueEntry,
    ScorePreviewRequest,
    ScorePreviewResponse,
)
from ...schemas.exercise import ExerciseCreate, ExerciseResponse
from ...services.registry_service import RegistryService

router = APIRouter(prefix="/exercises", tags=["exercises"])


async def _get_exercise_or_404(service: RegistryService, exercise_id: UUID) -> Exercise:
    exercise = await service.get_exercise(exercise_id)
    if not exercise:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Exercise not found",
        )
    return exercise


@router.post(
    "",
    response_model=ExerciseResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_exercise(data: ExerciseCreate, service: RegistryServiceDep):
    """Register an exercise with its range table or criteria list."""
    exercise = await service.create_exercise(data)
    return ExerciseResponse.model_validate(exercise)


@router.get("", response_model=List[ExerciseResponse])
async def list_exercises(service: RegistryServiceDep):
    """List all exercises by name."""
    exercises = await service.list_exercises()
    return [ExerciseResponse.model_validate(e) for e in exercises]


@router.get("/{exercise_id}", response_model=ExerciseResponse)
async def get_exercise(exercise_id: UUID, service: RegistryServiceDep):
    exercise = await _get_exercise_or_404(service, exercise_id)
    return ExerciseResponse.model_validate(exercise)


@router.post("/{exercise_id}/score", response_model=ScorePreviewResponse)
async def preview_score(
    exercise_id: UUID,
    data: ScorePreviewRequest,
    service: RegistryServiceDep,
    settings: SettingsDep,
):
    """
    Score a performance without storing anything.

    A null score means the input cannot be scored yet (non-numeric value,
    no matching range, nothing awarded).
    """
    exercise = await _get_exercise_or_404(service, exercise_id)

    base_point_enabled = (
        data.base_point_enabled
        if data.base_point_enabled is not None
        else settings.base_point_enabled
    )
    rules = exercise.rules(settings.default_max_score)
    performance_value = data.performance_value
    if rules.evaluation_mode == EvaluationMode.CRITERIA and data.criteria_scores is not None:
        # Criteria points travel as their JSON map, the way records store them
        performance_value = (
            json.dumps(data.criteria_scores, default=str, sort_keys=True)
            if data.criteria_scores
            else ""
        )

    score = compute_score(
        performance_value,
        rules,
        gender=data.gender,
        base_point_enabled=base_point_enabled,
        criteria_scores=data.criteria_scores,
    )

    return ScorePreviewResponse(
        exercise_id=exercise_id,
        score=score,
        base_point_enabled=base_point_enabled,
        status=status_for(score, performance_value),
    )


@router.get("/{exercise_id}/queue", response_model=GradingQueueResponse)
async def grading_queue(
    exercise_id: UUID,
    registry: RegistryServiceDep,
    evaluations: EvaluationServiceDep,
    session_start: Optional[datetime] = Query(
        None, description="Hide records created before this time"
    ),
):
    """Every registered student grouped as ungraded, in progress or graded."""
    await _get_exercise_or_404(registry, exercise_id)

    students = await registry.list_students()
    records = await evaluations.list_evaluations(exercise_id=exercise_id)
    session_starts = (
        {str(exercise_id): as_naive_utc(session_start)} if session_start else None
    )
    queue = build_queue(records, exercise_id, [s.id for s in students], session_starts)

    def entries(column) -> List[QueueEntry]:
        return [
            QueueEntry(
                student_id=item.student_id,
                status=item.status,
                evaluation=(
                    EvaluationResponse.from_evaluation(item.record)
                    if item.record is not None
                    else None
                ),
            )
            for item in column
        ]

    return GradingQueueResponse(
        exercise_id=exercise_id,
        session_start=queue.session_start,
        ungraded=entries(queue.ungraded),
        in_progress=entries(queue.in_progress),
        graded=entries(queue.graded),
    )
