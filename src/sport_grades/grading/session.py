"""Session filter: per-exercise cutoffs that hide stale records.

A session marker is a timestamp held in memory only. Resetting a session
makes every record created before the cutoff invisible to the active
grading queue; nothing is deleted, and clearing the marker brings the old
records back.
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, TypeVar

from .records import RecordLike, as_naive_utc, utcnow

R = TypeVar("R", bound=RecordLike)


def filter_by_session(
    records: Iterable[R],
    session_start_by_exercise: Mapping[str, datetime],
) -> List[R]:
    """Drop records created strictly before their exercise's session start."""
    cutoffs = {
        str(exercise_id): as_naive_utc(start)
        for exercise_id, start in session_start_by_exercise.items()
    }
    kept = []
    for record in records:
        cutoff = cutoffs.get(str(record.exercise_id))
        if cutoff is not None and as_naive_utc(record.created_at) < cutoff:
            continue
        kept.append(record)
    return kept


class SessionMarkers:
    """In-memory session cutoffs keyed by exercise id."""

    def __init__(self) -> None:
        self._starts: Dict[str, datetime] = {}

    def reset(self, exercise_id: Any, now: Optional[datetime] = None) -> datetime:
        """Start a new session for an exercise at ``now`` (UTC by default)."""
        start = as_naive_utc(now) if now is not None else utcnow()
        self._starts[str(exercise_id)] = start
        return start

    def clear(self, exercise_id: Any) -> None:
        """Forget the cutoff, making the exercise's full history active again."""
        self._starts.pop(str(exercise_id), None)

    def cutoff_for(self, exercise_id: Any) -> Optional[datetime]:
        return self._starts.get(str(exercise_id))

    def as_mapping(self) -> Dict[str, datetime]:
        return dict(self._starts)

    def __len__(self) -> int:
        return len(self._starts)

    # Markers never leave the process: pickling or copying yields none.
    def __getstate__(self) -> Dict[str, Any]:
        return {"_starts": {}}

    def __setstate__(self, state: Dict[str, Any]) -> None:
        self._starts = dict(state.get("_starts", {}))
