"""Evaluation schemas for API validation."""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from ..grading.records import EvaluationRecord
from ..grading.rules import Gender
from ..grading.status import EvaluationState, derive_status


class EvaluationCreate(BaseModel):
    """
    Payload appended to the evaluation log.

    There is no update schema: correcting a grade means appending a new
    record for the same (student, exercise) pair.
    """

    student_id: UUID
    exercise_id: UUID
    performance_value: str = Field("", max_length=5000)
    score: Optional[Decimal] = Field(None, ge=0, description="Null while no score is derivable")
    comments: str = Field("", max_length=5000)
    criteria_scores: Optional[Dict[str, Decimal]] = None

    @field_validator("performance_value", mode="before")
    @classmethod
    def stringify_performance(cls, v: Any) -> Any:
        # Measurements may arrive as JSON numbers
        if v is None:
            return ""
        if isinstance(v, (int, float, Decimal)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator("comments", mode="before")
    @classmethod
    def default_comments(cls, v: Any) -> Any:
        return "" if v is None else v


class EvaluationResponse(BaseModel):
    """A stored evaluation record plus its derived status."""

    id: UUID
    student_id: UUID
    exercise_id: UUID
    performance_value: str
    score: Optional[Decimal]
    comments: str
    criteria_scores: Optional[Dict[str, Decimal]]
    created_at: datetime
    sequence: Optional[int] = None
    status: EvaluationState

    model_config = {"from_attributes": True}

    @classmethod
    def from_evaluation(cls, evaluation) -> "EvaluationResponse":
        """Create response from an Evaluation model (or any record-like object)."""
        return cls(
            id=evaluation.id,
            student_id=evaluation.student_id,
            exercise_id=evaluation.exercise_id,
            performance_value=evaluation.performance_value or "",
            score=evaluation.score,
            comments=evaluation.comments or "",
            criteria_scores=evaluation.criteria_scores,
            created_at=evaluation.created_at,
            sequence=getattr(evaluation, "sequence", None),
            status=derive_status(evaluation),
        )

    def to_record(self) -> EvaluationRecord:
        """Immutable engine record for this response."""
        return EvaluationRecord(
            id=str(self.id),
            student_id=str(self.student_id),
            exercise_id=str(self.exercise_id),
            created_at=self.created_at,
            performance_value=self.performance_value,
            score=self.score,
            comments=self.comments,
            criteria_scores=dict(self.criteria_scores) if self.criteria_scores is not None else None,
            sequence=self.sequence,
        )


class ScorePreviewRequest(BaseModel):
    """Performance to score without storing anything."""

    performance_value: str = ""
    criteria_scores: Optional[Dict[str, Any]] = None
    gender: Gender = Gender.UNSPECIFIED
    base_point_enabled: Optional[bool] = Field(
        None, description="Defaults to the server's configured setting"
    )

    @field_validator("performance_value", mode="before")
    @classmethod
    def stringify_performance(cls, v: Any) -> Any:
        if v is None:
            return ""
        if isinstance(v, (int, float, Decimal)) and not isinstance(v, bool):
            return str(v)
        return v


class ScorePreviewResponse(BaseModel):
    """Result of a scoring preview."""

    exercise_id: UUID
    score: Optional[Decimal]
    base_point_enabled: bool
    status: EvaluationState


class QueueEntry(BaseModel):
    """One roster student in the grading queue."""

    student_id: UUID
    status: EvaluationState
    evaluation: Optional[EvaluationResponse] = None


class GradingQueueResponse(BaseModel):
    """Roster grouped by workflow status for one exercise."""

    exercise_id: UUID
    session_start: Optional[datetime]
    ungraded: List[QueueEntry]
    in_progress: List[QueueEntry]
    graded: List[QueueEntry]
