"""Reduce the append-only evaluation log to one current record per pair."""

from typing import Any, Dict, Iterable, List, Optional, Tuple, TypeVar

from .records import PairKey, RecordLike, as_naive_utc, pair_key

R = TypeVar("R", bound=RecordLike)


def ordering_key(record: Any) -> Tuple:
    """
    Total order over records of the same pair.

    ``created_at`` first; equal timestamps fall back to the store-assigned
    ``sequence`` (records without one sort first), then to the id compared
    as text.
    """
    sequence = getattr(record, "sequence", None)
    return (
        as_naive_utc(record.created_at),
        sequence is not None,
        sequence if sequence is not None else 0,
        str(record.id),
    )


def reconcile(records: Iterable[R]) -> Dict[PairKey, R]:
    """Latest record per (student_id, exercise_id), independent of input order."""
    current: Dict[PairKey, R] = {}
    best_keys: Dict[PairKey, Tuple] = {}
    for record in records:
        key = pair_key(record)
        order = ordering_key(record)
        if key not in best_keys or order > best_keys[key]:
            current[key] = record
            best_keys[key] = order
    return current


def latest_for(records: Iterable[R], student_id: Any, exercise_id: Any) -> Optional[R]:
    """Current record for a single pair, or None if it has no records."""
    return reconcile(history_for(records, student_id, exercise_id)).get(
        (str(student_id), str(exercise_id))
    )


def history_for(records: Iterable[R], student_id: Any, exercise_id: Any) -> List[R]:
    """Every record of a pair, oldest first."""
    wanted = (str(student_id), str(exercise_id))
    return sorted(
        (record for record in records if pair_key(record) == wanted),
        key=ordering_key,
    )
