"""Evaluation service: the append-only record store."""

import logging
from datetime import datetime
from typing import Dict, Optional
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from ..grading.records import PairKey
from ..grading.reconcile import reconcile
from ..grading.session import filter_by_session
from ..models.evaluation import Evaluation
from ..models.exercise import Exercise
from ..models.student import Student
from ..schemas.evaluation import EvaluationCreate
from .registry_service import ExerciseNotFoundError, StudentNotFoundError

logger = logging.getLogger(__name__)

# Appends retried when a concurrent writer claims the same sequence number
SEQUENCE_ATTEMPTS = 3


class EvaluationNotFoundError(Exception):
    """Raised when deleting a record that does not exist."""

    def __init__(self, evaluation_id: UUID):
        self.evaluation_id = evaluation_id
        super().__init__(f"Evaluation {evaluation_id} not found")


class EvaluationConflictError(Exception):
    """Raised when an append keeps colliding with concurrent writers."""

    def __init__(self, student_id: UUID, exercise_id: UUID):
        self.student_id = student_id
        self.exercise_id = exercise_id
        super().__init__(
            f"Could not append evaluation for student {student_id} on exercise {exercise_id}: "
            "sequence kept colliding with concurrent writes"
        )


class EvaluationService:
    """
    Append-only storage for evaluation records.

    Offers create, list and delete only. Records are never updated; the
    store assigns ``created_at`` and a strictly increasing ``sequence`` so
    that ordering does not depend on any client's clock.
    """

    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_evaluation(self, data: EvaluationCreate) -> Evaluation:
        """
        Append a new evaluation record.

        Raises:
            StudentNotFoundError: If the student is not registered
            ExerciseNotFoundError: If the exercise is not registered
            EvaluationConflictError: If every attempt collided on ``sequence``
        """
        if not await self.db.get(Student, data.student_id):
            raise StudentNotFoundError(data.student_id)
        if not await self.db.get(Exercise, data.exercise_id):
            raise ExerciseNotFoundError(data.exercise_id)

        criteria_scores = (
            {name: str(points) for name, points in data.criteria_scores.items()}
            if data.criteria_scores is not None
            else None
        )

        for attempt in range(1, SEQUENCE_ATTEMPTS + 1):
            evaluation = Evaluation(
                student_id=data.student_id,
                exercise_id=data.exercise_id,
                performance_value=data.performance_value,
                criteria_scores=criteria_scores,
                score=data.score,
                comments=data.comments,
                sequence=await self._next_sequence(),
            )
            self.db.add(evaluation)
            try:
                await self.db.commit()
                break
            except IntegrityError:
                # Another writer took the same sequence number
                await self.db.rollback()
                logger.warning(f"Sequence collision on append (attempt {attempt}), retrying")
        else:
            raise EvaluationConflictError(data.student_id, data.exercise_id)

        await self.db.refresh(evaluation)

        logger.info(
            f"Appended evaluation #{evaluation.sequence} for student {evaluation.student_id} "
            f"on exercise {evaluation.exercise_id} (score={evaluation.score})"
        )
        return evaluation

    async def list_evaluations(
        self,
        student_id: Optional[UUID] = None,
        exercise_id: Optional[UUID] = None,
    ) -> list[Evaluation]:
        """All records, oldest append first. No deduplication happens here."""
        query = select(Evaluation)

        if student_id:
            query = query.where(Evaluation.student_id == student_id)
        if exercise_id:
            query = query.where(Evaluation.exercise_id == exercise_id)

        result = await self.db.execute(query.order_by(Evaluation.sequence.asc()))
        return list(result.scalars().all())

    async def delete_evaluation(self, evaluation_id: UUID) -> None:
        """
        Remove exactly one physical record.

        Raises:
            EvaluationNotFoundError: If no record has this id
        """
        evaluation = await self.db.get(Evaluation, evaluation_id)
        if not evaluation:
            raise EvaluationNotFoundError(evaluation_id)

        await self.db.delete(evaluation)
        await self.db.commit()
        logger.info(f"Deleted evaluation {evaluation_id}")

    async def current_evaluations(
        self,
        exercise_id: Optional[UUID] = None,
        session_start: Optional[datetime] = None,
    ) -> Dict[PairKey, Evaluation]:
        """
        Latest record per (student, exercise).

        With a ``session_start`` (which needs an ``exercise_id``), records of
        that exercise created before it are ignored.
        """
        records = await self.list_evaluations(exercise_id=exercise_id)
        if session_start is not None and exercise_id is not None:
            records = filter_by_session(records, {str(exercise_id): session_start})
        return reconcile(records)

    async def _next_sequence(self) -> int:
        result = await self.db.execute(select(func.max(Evaluation.sequence)))
        return (result.scalar() or 0) + 1
