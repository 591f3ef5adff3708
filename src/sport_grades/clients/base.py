"""Record store contract consumed by the grading engine."""

from typing import Any, List, Optional, Protocol, runtime_checkable

from ..grading.records import EvaluationRecord
from ..schemas.evaluation import EvaluationCreate


class StoreError(Exception):
    """A create/list/delete round trip to the record store failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class RecordNotFoundError(StoreError):
    """The store has no record with the requested id."""

    def __init__(self, record_id: Any):
        self.record_id = record_id
        super().__init__(f"Evaluation {record_id} not found", status_code=404)


@runtime_checkable
class EvaluationStore(Protocol):
    """
    Minimal append-only store.

    Implementations assign ``id``, ``created_at`` and ``sequence`` on create,
    return every record from ``list_evaluations`` without deduplication, and
    raise ``StoreError`` for any failure.
    """

    async def create_evaluation(self, payload: EvaluationCreate) -> EvaluationRecord:
        ...

    async def list_evaluations(self) -> List[EvaluationRecord]:
        ...

    async def delete_evaluation(self, record_id: Any) -> None:
        ...
