"""Summary service for per-student grade statistics."""

from decimal import Decimal
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from ..config import Settings, get_settings
from ..grading.formatting import format_grade, is_passing, round_grade
from ..grading.reconcile import reconcile
from ..grading.scoring import round_score
from ..schemas.student import StudentSummaryResponse
from .evaluation_service import EvaluationService


class SummaryService:
    """
    Grade statistics built from the full evaluation history.

    Session markers never apply here: a reset hides records from the
    grading queue, not from a student's record.
    """

    def __init__(self, db: AsyncSession, settings: Settings | None = None):
        self.db = db
        self.settings = settings or get_settings()

    async def student_summary(self, student_id: UUID) -> StudentSummaryResponse:
        """Average, best and worst of the student's current grades."""
        records = await EvaluationService(self.db).list_evaluations(student_id=student_id)
        scores = [
            record.score
            for record in reconcile(records).values()
            if record.score is not None
        ]

        if not scores:
            return StudentSummaryResponse(student_id=student_id)

        average = round_score(sum(scores, Decimal("0")) / len(scores))
        return StudentSummaryResponse(
            student_id=student_id,
            total_evaluations=len(scores),
            average_score=average,
            best_score=max(scores),
            worst_score=min(scores),
            average_display=format_grade(
                round_grade(average, self.settings.rounding_mode),
                self.settings.show_decimals,
            ),
            passing=is_passing(average, self.settings.passing_grade),
        )
