"""Pydantic schemas for API request/response validation."""

from .evaluation import (
    EvaluationCreate,
    EvaluationResponse,
    GradingQueueResponse,
    QueueEntry,
    ScorePreviewRequest,
    ScorePreviewResponse,
)
from .exercise import CriterionSchema, ExerciseCreate, ExerciseResponse, ScoreRangeSchema
from .student import StudentCreate, StudentResponse, StudentSummaryResponse

__all__ = [
    "CriterionSchema",
    "EvaluationCreate",
    "EvaluationResponse",
    "ExerciseCreate",
    "ExerciseResponse",
    "GradingQueueResponse",
    "QueueEntry",
    "ScorePreviewRequest",
    "ScorePreviewResponse",
    "ScoreRangeSchema",
    "StudentCreate",
    "StudentResponse",
    "StudentSummaryResponse",
]
