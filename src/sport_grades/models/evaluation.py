"""Evaluation model - one append-only entry of the grading log."""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, DateTime, ForeignKey, Index, Integer, Numeric, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, utcnow

if TYPE_CHECKING:
    from .exercise import Exercise
    from .student import Student


class Evaluation(Base):
    """
    A performance submission and the grade derived from it.

    Rows are never updated. Re-grading appends a new row for the same
    (student, exercise) pair; the row with the latest ``created_at`` (then
    highest ``sequence``) is the current one. Workflow status is derived
    from ``score`` and ``performance_value`` and has no column.
    """

    __tablename__ = "evaluations"

    # Primary key
    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)

    # The (student, exercise) pair
    student_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("students.id"), nullable=False, index=True
    )
    exercise_id: Mapped[UUID] = mapped_column(
        Uuid(as_uuid=True), ForeignKey("exercises.id"), nullable=False, index=True
    )

    # Raw measurement, or JSON map of criterion name -> points
    performance_value: Mapped[str] = mapped_column(Text, default="", nullable=False)
    criteria_scores: Mapped[Optional[dict]] = mapped_column(JSON, nullable=True)

    # Null while no score is derivable; 0 is a real grade
    score: Mapped[Optional[Decimal]] = mapped_column(Numeric(precision=6, scale=1), nullable=True)

    comments: Mapped[str] = mapped_column(Text, default="", nullable=False)

    # Ordering: timestamp first, store-assigned sequence breaks ties
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)
    sequence: Mapped[int] = mapped_column(Integer, nullable=False, unique=True)

    # Relationships
    student: Mapped["Student"] = relationship("Student", back_populates="evaluations")
    exercise: Mapped["Exercise"] = relationship("Exercise", back_populates="evaluations")

    __table_args__ = (
        Index("ix_evaluations_pair", "student_id", "exercise_id"),
    )

    def __repr__(self) -> str:
        return f"<Evaluation {self.student_id}/{self.exercise_id} #{self.sequence}>"
