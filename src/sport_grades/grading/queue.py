"""Active grading queue: a roster grouped by derived status."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Generic, Iterable, List, Mapping, Optional, TypeVar

from .records import RecordLike
from .reconcile import reconcile
from .session import filter_by_session
from .status import EvaluationState, derive_status

R = TypeVar("R", bound=RecordLike)


@dataclass(frozen=True)
class QueueItem(Generic[R]):
    """A roster student, their current record (if any) and its status."""

    student_id: str
    status: EvaluationState
    record: Optional[R] = None


@dataclass
class GradingQueue(Generic[R]):
    """Roster for one exercise, split into the three workflow columns."""

    exercise_id: str
    session_start: Optional[datetime] = None
    ungraded: List[QueueItem[R]] = field(default_factory=list)
    in_progress: List[QueueItem[R]] = field(default_factory=list)
    graded: List[QueueItem[R]] = field(default_factory=list)

    def column(self, status: EvaluationState) -> List[QueueItem[R]]:
        return {
            EvaluationState.UNGRADED: self.ungraded,
            EvaluationState.IN_PROGRESS: self.in_progress,
            EvaluationState.GRADED: self.graded,
        }[status]

    def status_of(self, student_id: Any) -> Optional[EvaluationState]:
        for item in self.ungraded + self.in_progress + self.graded:
            if item.student_id == str(student_id):
                return item.status
        return None


def build_queue(
    records: Iterable[R],
    exercise_id: Any,
    student_ids: Iterable[Any],
    session_starts: Optional[Mapping[str, datetime]] = None,
) -> GradingQueue[R]:
    """
    Group a roster for one exercise by status.

    Records for the exercise are session-filtered before reconciliation, so
    a student with only pre-cutoff records lands in the ungraded column.
    """
    exercise_key = str(exercise_id)
    session_starts = session_starts or {}
    relevant = [r for r in records if str(r.exercise_id) == exercise_key]
    active: Dict = reconcile(filter_by_session(relevant, session_starts))

    queue: GradingQueue[R] = GradingQueue(
        exercise_id=exercise_key,
        session_start=session_starts.get(exercise_key),
    )
    seen = set()
    for student_id in student_ids:
        student_key = str(student_id)
        if student_key in seen:
            continue
        seen.add(student_key)
        record = active.get((student_key, exercise_key))
        status = derive_status(record)
        queue.column(status).append(QueueItem(student_key, status, record))
    return queue
