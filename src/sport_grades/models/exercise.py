"""Exercise model - an exercise and its scoring rule tables."""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, List, Optional
from uuid import UUID, uuid4

from sqlalchemy import JSON, Boolean, DateTime, Enum, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..grading.rules import DEFAULT_MAX_SCORE, EvaluationMode, ExerciseRules
from .base import Base, utcnow

if TYPE_CHECKING:
    from .evaluation import Evaluation


class Exercise(Base):
    """An exercise students are evaluated on."""

    __tablename__ = "exercises"

    # Primary key
    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)

    # Metadata
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    unit: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    requires_teamwork: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    # Scoring
    evaluation_mode: Mapped[EvaluationMode] = mapped_column(
        Enum(EvaluationMode, values_callable=lambda x: [e.value for e in x]),
        nullable=False,
    )
    max_score: Mapped[Optional[Decimal]] = mapped_column(
        Numeric(precision=6, scale=2), nullable=True  # None means 10
    )
    # {"M": [{"min_value", "max_value", "score"}, ...], "F": [...]}, order matters
    ranges: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)
    # [{"name", "max_points"}, ...]
    criteria: Mapped[list] = mapped_column(JSON, default=list, nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    # Relationships
    evaluations: Mapped[List["Evaluation"]] = relationship(
        "Evaluation", back_populates="exercise", lazy="noload"
    )

    def __repr__(self) -> str:
        return f"<Exercise '{self.name}' ({self.evaluation_mode.value})>"

    def rules(self, default_max_score: Decimal = DEFAULT_MAX_SCORE) -> ExerciseRules:
        """Rule tables the scorer consumes."""
        return ExerciseRules.from_config(
            id=self.id,
            name=self.name,
            evaluation_mode=self.evaluation_mode,
            max_score=self.max_score,
            ranges=self.ranges,
            criteria=self.criteria,
            requires_teamwork=self.requires_teamwork,
            default_max_score=default_max_score,
        )
