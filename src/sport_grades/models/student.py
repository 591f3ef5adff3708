"""Student model - reference data read by the grading engine."""

from datetime import datetime
from typing import TYPE_CHECKING, List
from uuid import UUID, uuid4

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from ..grading.rules import StudentRef, to_gender
from .base import Base, utcnow

if TYPE_CHECKING:
    from .evaluation import Evaluation


class Student(Base):
    """A student whose performances are graded."""

    __tablename__ = "students"

    # Primary key
    id: Mapped[UUID] = mapped_column(Uuid(as_uuid=True), primary_key=True, default=uuid4)

    # Identification
    first_name: Mapped[str] = mapped_column(String(255), nullable=False)
    last_name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)

    # M, F or N; range tables are keyed by it
    gender: Mapped[str] = mapped_column(String(1), default="N", nullable=False)

    # Timestamps
    created_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, nullable=False)

    # Relationships
    evaluations: Mapped[List["Evaluation"]] = relationship(
        "Evaluation", back_populates="student", lazy="noload"
    )

    def __repr__(self) -> str:
        return f"<Student {self.first_name} {self.last_name} ({self.id})>"

    @property
    def ref(self) -> StudentRef:
        """What the scorer needs to know about this student."""
        return StudentRef(id=str(self.id), gender=to_gender(self.gender))
