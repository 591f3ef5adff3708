"""Evaluation API endpoints: the append-only record log."""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, HTTPException, Query, Response, status

from ..deps import EvaluationServiceDep
from ...grading.records import as_naive_utc
from ...schemas.evaluation import EvaluationCreate, EvaluationResponse
from ...services.evaluation_service import EvaluationConflictError, EvaluationNotFoundError
from ...services.registry_service import ExerciseNotFoundError, StudentNotFoundError

router = APIRouter(prefix="/evaluations", tags=["evaluations"])


@router.post(
    "",
    response_model=EvaluationResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_evaluation(data: EvaluationCreate, service: EvaluationServiceDep):
    """
    Append an evaluation record.

    Re-grading a student appends another record for the same pair; the
    newest one becomes current. There is no update endpoint.
    """
    try:
        evaluation = await service.create_evaluation(data)
    except (StudentNotFoundError, ExerciseNotFoundError) as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e),
        )
    except EvaluationConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=str(e),
        )

    return EvaluationResponse.from_evaluation(evaluation)


@router.get("", response_model=List[EvaluationResponse])
async def list_evaluations(
    service: EvaluationServiceDep,
    student_id: Optional[UUID] = Query(None, description="Filter by student"),
    exercise_id: Optional[UUID] = Query(None, description="Filter by exercise"),
):
    """List every stored record in creation order, without deduplication."""
    evaluations = await service.list_evaluations(student_id=student_id, exercise_id=exercise_id)
    return [EvaluationResponse.from_evaluation(e) for e in evaluations]


@router.get("/current", response_model=List[EvaluationResponse])
async def current_evaluations(
    service: EvaluationServiceDep,
    exercise_id: Optional[UUID] = Query(None, description="Filter by exercise"),
    session_start: Optional[datetime] = Query(
        None, description="Ignore the exercise's records created before this time"
    ),
):
    """The current record of each (student, exercise) pair."""
    if session_start is not None and exercise_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="session_start requires exercise_id",
        )

    current = await service.current_evaluations(
        exercise_id=exercise_id,
        session_start=as_naive_utc(session_start) if session_start else None,
    )
    return [EvaluationResponse.from_evaluation(e) for e in current.values()]


@router.delete("/{evaluation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_evaluation(evaluation_id: UUID, service: EvaluationServiceDep):
    """Remove one physical record."""
    try:
        await service.delete_evaluation(evaluation_id)
    except EvaluationNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Evaluation not found",
        )

    return Response(status_code=status.HTTP_204_NO_CONTENT)
