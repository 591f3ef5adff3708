"""Student schemas for API validation."""

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, Field

from ..grading.rules import Gender, StudentRef


class StudentCreate(BaseModel):
    """Schema for registering a student."""

    first_name: str = Field(..., min_length=1, max_length=255)
    last_name: str = Field(..., min_length=1, max_length=255)
    gender: Gender = Gender.UNSPECIFIED


class StudentResponse(BaseModel):
    """Student as returned by the registry."""

    id: UUID
    first_name: str
    last_name: str
    gender: Gender
    created_at: datetime

    model_config = {"from_attributes": True}

    def to_ref(self) -> StudentRef:
        return StudentRef(id=str(self.id), gender=self.gender)


class StudentSummaryResponse(BaseModel):
    """Grade statistics over a student's current graded evaluations."""

    student_id: UUID
    total_evaluations: int = 0
    average_score: Optional[Decimal] = None
    best_score: Optional[Decimal] = None
    worst_score: Optional[Decimal] = None
    average_display: Optional[str] = Field(
        None, description="Average rounded and formatted per display settings"
    )
    passing: Optional[bool] = None
