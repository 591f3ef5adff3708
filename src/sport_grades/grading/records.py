"""Immutable evaluation records as the engine sees them."""

from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Dict, Optional, Protocol, Tuple


PairKey = Tuple[str, str]  # (student_id, exercise_id)


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, matching stored timestamps."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def as_naive_utc(value: datetime) -> datetime:
    """Normalize an aware datetime to naive UTC; naive values pass through."""
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class RecordLike(Protocol):
    """Anything shaped like an evaluation record (dataclass or ORM row)."""

    id: Any
    student_id: Any
    exercise_id: Any
    performance_value: Optional[str]
    score: Optional[Decimal]
    created_at: datetime


@dataclass(frozen=True)
class EvaluationRecord:
    """One append-only entry of the evaluation log."""

    id: str
    student_id: str
    exercise_id: str
    created_at: datetime
    performance_value: str = ""
    score: Optional[Decimal] = None
    comments: str = ""
    criteria_scores: Optional[Dict[str, Decimal]] = None
    sequence: Optional[int] = None

    @property
    def key(self) -> PairKey:
        return pair_key(self)


def pair_key(record: Any) -> PairKey:
    """Composite (student, exercise) key, with ids normalized to text."""
    return str(record.student_id), str(record.exercise_id)
