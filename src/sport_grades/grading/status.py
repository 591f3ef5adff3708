"""Workflow status, always derived from a record and never stored."""

import enum
from decimal import Decimal
from typing import Optional

from .records import RecordLike


class EvaluationState(str, enum.Enum):
    """Where a student stands for one exercise."""

    UNGRADED = "ungraded"
    IN_PROGRESS = "in_progress"
    GRADED = "graded"


def status_for(score: Optional[Decimal], performance_value: Optional[str]) -> EvaluationState:
    """
    Classify by score and performance value only.

    A score of zero is a real grade; only a missing score means the record
    is not graded.
    """
    if score is not None:
        return EvaluationState.GRADED
    if (performance_value or "").strip():
        return EvaluationState.IN_PROGRESS
    return EvaluationState.UNGRADED


def derive_status(record: Optional[RecordLike]) -> EvaluationState:
    """Status of a record; no record at all is ungraded."""
    if record is None:
        return EvaluationState.UNGRADED
    return status_for(record.score, record.performance_value)
