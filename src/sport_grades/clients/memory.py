"""In-process record store, for offline grading and tests."""

from datetime import datetime
from typing import Any, Callable, List
from uuid import uuid4

from ..grading.records import EvaluationRecord, utcnow
from ..schemas.evaluation import EvaluationCreate
from .base import RecordNotFoundError


class InMemoryEvaluationStore:
    """Append-only list of records with store-assigned ids and ordering."""

    def __init__(self, clock: Callable[[], datetime] = utcnow):
        self._records: List[EvaluationRecord] = []
        self._sequence = 0
        self._clock = clock

    async def create_evaluation(self, payload: EvaluationCreate) -> EvaluationRecord:
        self._sequence += 1
        record = EvaluationRecord(
            id=str(uuid4()),
            student_id=str(payload.student_id),
            exercise_id=str(payload.exercise_id),
            created_at=self._clock(),
            performance_value=payload.performance_value,
            score=payload.score,
            comments=payload.comments,
            criteria_scores=(
                dict(payload.criteria_scores) if payload.criteria_scores is not None else None
            ),
            sequence=self._sequence,
        )
        self._records.append(record)
        return record

    async def list_evaluations(self) -> List[EvaluationRecord]:
        return list(self._records)

    async def delete_evaluation(self, record_id: Any) -> None:
        for index, record in enumerate(self._records):
            if record.id == str(record_id):
                del self._records[index]
                return
        raise RecordNotFoundError(record_id)

    def __len__(self) -> int:
        return len(self._records)
