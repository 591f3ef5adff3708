"""Evaluation lifecycle controller.

Orchestrates one instructor's grading pass: stage a record as a draft,
score it, append a new record through the store, refresh and reconcile.
Nothing here mutates a stored record; every edit is an append.
"""

import enum
import json
import logging
from dataclasses import dataclass, replace
from datetime import datetime
from decimal import Decimal
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from ..clients.base import EvaluationStore, RecordNotFoundError, StoreError
from ..config import get_settings
from ..schemas.evaluation import EvaluationCreate
from .queue import GradingQueue, build_queue
from .records import EvaluationRecord, PairKey, utcnow
from .reconcile import history_for, reconcile
from .rules import EvaluationMode, ExerciseRules, StudentRef
from .scoring import compute_score, parse_criteria_map, serialize_criteria_map
from .session import SessionMarkers, filter_by_session
from .status import EvaluationState, derive_status

logger = logging.getLogger(__name__)


class DeletePolicy(str, enum.Enum):
    """What deleting a pair's current record does to its older records."""

    SINGLE = "single"  # remove one record; an older one may become current
    PAIR = "pair"  # remove every record of the pair in the active session


class EvaluationOperationError(Exception):
    """A store round trip failed; local state was left untouched."""

    def __init__(self, operation: str, cause: StoreError):
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation} failed: {cause}")


@dataclass
class EvaluationDraft:
    """Working copy of an evaluation being edited."""

    student_id: str
    exercise_id: str
    performance_value: str = ""
    criteria_scores: Optional[Dict[str, Any]] = None
    comments: str = ""
    source_id: Optional[str] = None  # record the draft was staged from

    @property
    def key(self) -> PairKey:
        return str(self.student_id), str(self.exercise_id)


@dataclass(frozen=True)
class DeleteOutcome:
    """What a delete removed and which record is now current for the pair."""

    deleted_ids: Tuple[str, ...]
    current: Optional[EvaluationRecord] = None
    resurfaced: bool = False


class EvaluationController:
    """
    Grading workflow over an append-only evaluation store.

    Exercises and students are reference data; the controller only reads
    them. Session markers live on the controller, are never sent to the
    store and vanish with it.
    """

    def __init__(
        self,
        store: EvaluationStore,
        exercises: Iterable[ExerciseRules],
        students: Iterable[StudentRef],
        base_point_enabled: bool = False,
        delete_policy: DeletePolicy = DeletePolicy.PAIR,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.store = store
        self.exercises: Dict[str, ExerciseRules] = {str(e.id): e for e in exercises}
        self.students: Dict[str, StudentRef] = {str(s.id): s for s in students}
        self.base_point_enabled = base_point_enabled
        self.delete_policy = DeletePolicy(delete_policy)
        self.clock = clock
        self.sessions = SessionMarkers()
        self.records: Tuple[EvaluationRecord, ...] = ()
        self.selected: Optional[EvaluationDraft] = None

    @classmethod
    async def connect(cls, store, settings=None) -> "EvaluationController":
        """
        Build a controller over a remote store using configured scoring options.

        Reference data is fetched once from the store's registry and the log
        is loaded before returning.
        """
        settings = settings or get_settings()
        try:
            exercises = await store.fetch_exercises()
            students = await store.fetch_students()
        except StoreError as e:
            raise EvaluationOperationError("connect", e) from e

        controller = cls(
            store,
            exercises,
            students,
            base_point_enabled=settings.base_point_enabled,
            delete_policy=DeletePolicy(settings.delete_policy),
        )
        await controller.refresh()
        return controller

    # Reference data

    def exercise(self, exercise_id: Any) -> ExerciseRules:
        try:
            return self.exercises[str(exercise_id)]
        except KeyError:
            raise KeyError(f"Unknown exercise {exercise_id}") from None

    def student(self, student_id: Any) -> StudentRef:
        try:
            return self.students[str(student_id)]
        except KeyError:
            raise KeyError(f"Unknown student {student_id}") from None

    # Reading

    async def refresh(self) -> Tuple[EvaluationRecord, ...]:
        """Reload the full log from the store."""
        try:
            records = await self.store.list_evaluations()
        except StoreError as e:
            logger.warning(f"Refresh failed: {e}")
            raise EvaluationOperationError("refresh", e) from e
        self.records = tuple(records)
        return self.records

    def active_records(self, exercise_id: Any = None) -> Dict[PairKey, EvaluationRecord]:
        """Current record per pair, ignoring records hidden by session markers."""
        records = self.records
        if exercise_id is not None:
            records = tuple(r for r in records if r.exercise_id == str(exercise_id))
        return reconcile(filter_by_session(records, self.sessions.as_mapping()))

    def current_for(self, student_id: Any, exercise_id: Any) -> Optional[EvaluationRecord]:
        return self.active_records(exercise_id).get((str(student_id), str(exercise_id)))

    def status_of(self, student_id: Any, exercise_id: Any) -> EvaluationState:
        return derive_status(self.current_for(student_id, exercise_id))

    def queue(
        self,
        exercise_id: Any,
        student_ids: Optional[Iterable[Any]] = None,
    ) -> GradingQueue[EvaluationRecord]:
        """Roster grouped by status; defaults to every known student."""
        self.exercise(exercise_id)
        roster = list(student_ids) if student_ids is not None else list(self.students)
        return build_queue(self.records, exercise_id, roster, self.sessions.as_mapping())

    # Sessions

    def reset_session(self, exercise_id: Any) -> datetime:
        """
        Start a new grading session for an exercise.

        Every student not re-evaluated since now drops back to ungraded in
        the queue. Stored records are untouched.
        """
        self.exercise(exercise_id)
        start = self.sessions.reset(exercise_id, self.clock())
        logger.info(f"Session reset for exercise {exercise_id} at {start.isoformat()}")
        return start

    def clear_session(self, exercise_id: Any) -> None:
        """Undo a reset: the exercise's whole history is active again."""
        self.sessions.clear(exercise_id)

    # Editing

    def select(self, record: EvaluationRecord) -> EvaluationDraft:
        """Stage a record's values as the working draft."""
        criteria = record.criteria_scores
        if criteria is None and self.exercise(record.exercise_id).evaluation_mode == EvaluationMode.CRITERIA:
            criteria = parse_criteria_map(record.performance_value)
        self.selected = EvaluationDraft(
            student_id=str(record.student_id),
            exercise_id=str(record.exercise_id),
            performance_value=record.performance_value or "",
            criteria_scores=dict(criteria) if criteria is not None else None,
            comments=record.comments or "",
            source_id=str(record.id),
        )
        return self.selected

    def stage(self, student_id: Any, exercise_id: Any) -> EvaluationDraft:
        """Stage the pair's current active record, or a blank draft."""
        self.student(student_id)
        self.exercise(exercise_id)
        current = self.current_for(student_id, exercise_id)
        if current is not None:
            return self.select(current)
        self.selected = EvaluationDraft(student_id=str(student_id), exercise_id=str(exercise_id))
        return self.selected

    def preview(self, draft: EvaluationDraft) -> Optional[Decimal]:
        """Score a draft without touching the store."""
        exercise = self.exercise(draft.exercise_id)
        student = self.student(draft.student_id)
        return compute_score(
            draft.performance_value,
            exercise,
            gender=student.gender,
            base_point_enabled=self.base_point_enabled,
            criteria_scores=draft.criteria_scores,
        )

    async def save_draft(self, draft: EvaluationDraft) -> EvaluationRecord:
        """Append the draft as a new record and keep it staged."""
        record = await self._append(draft, "save_draft")
        self.selected = replace(draft, source_id=record.id)
        return record

    async def confirm(self, draft: EvaluationDraft) -> EvaluationRecord:
        """Append the draft as the final grade and clear the selection."""
        record = await self._append(draft, "confirm")
        self.selected = None
        return record

    async def delete_selected(self, record_id: Any) -> DeleteOutcome:
        """
        Delete a record, then refresh.

        Only deleting the pair's current (active) record is subject to the
        delete policy; a historical record is always removed on its own.
        """
        record_id = str(record_id)
        target = next((r for r in self.records if r.id == record_id), None)

        was_current = False
        if target is not None:
            current = self.current_for(target.student_id, target.exercise_id)
            was_current = current is not None and current.id == record_id

        to_delete = [record_id]
        if was_current and self.delete_policy == DeletePolicy.PAIR:
            # Records from before a session reset stay recoverable
            visible = filter_by_session(self.records, self.sessions.as_mapping())
            to_delete = [
                r.id for r in history_for(visible, target.student_id, target.exercise_id)
            ]

        deleted: List[str] = []
        try:
            for rid in to_delete:
                try:
                    await self.store.delete_evaluation(rid)
                except RecordNotFoundError:
                    # Gone already, e.g. removed by an earlier partial attempt
                    if target is None:
                        raise
                    logger.info(f"Evaluation {rid} was already deleted")
                deleted.append(rid)
            records = await self.store.list_evaluations()
        except StoreError as e:
            logger.warning(f"Delete of {record_id} failed after removing {deleted}: {e}")
            raise EvaluationOperationError("delete", e) from e

        self.records = tuple(records)
        if self.selected is not None and self.selected.source_id in deleted:
            self.selected = None

        current = None
        resurfaced = False
        if target is not None:
            current = self.current_for(target.student_id, target.exercise_id)
            resurfaced = was_current and current is not None
            if resurfaced:
                logger.warning(
                    f"Deleting {record_id} made older record {current.id} current for "
                    f"student {target.student_id} on exercise {target.exercise_id}"
                )
        logger.info(f"Deleted {len(deleted)} evaluation record(s): {', '.join(deleted)}")
        return DeleteOutcome(deleted_ids=tuple(deleted), current=current, resurfaced=resurfaced)

    async def _append(self, draft: EvaluationDraft, operation: str) -> EvaluationRecord:
        exercise = self.exercise(draft.exercise_id)
        score = self.preview(draft)

        performance_value = draft.performance_value or ""
        criteria_scores = None
        if exercise.evaluation_mode == EvaluationMode.CRITERIA and draft.criteria_scores is not None:
            awarded = parse_criteria_map(draft.criteria_scores)
            if awarded is None:
                # Unparsable points are kept verbatim so the draft stays in progress
                performance_value = json.dumps(draft.criteria_scores, default=str, sort_keys=True)
            elif awarded:
                performance_value = serialize_criteria_map(awarded)
                criteria_scores = awarded
            else:
                performance_value = ""

        payload = EvaluationCreate(
            student_id=draft.student_id,
            exercise_id=draft.exercise_id,
            performance_value=performance_value,
            score=score,
            comments=draft.comments or "",
            criteria_scores=criteria_scores,
        )
        try:
            record = await self.store.create_evaluation(payload)
            records = await self.store.list_evaluations()
        except StoreError as e:
            logger.warning(f"{operation} for {draft.key} failed: {e}")
            raise EvaluationOperationError(operation, e) from e

        self.records = tuple(records)
        logger.info(f"{operation}: student {draft.student_id} exercise {draft.exercise_id} score={score}")
        return record
