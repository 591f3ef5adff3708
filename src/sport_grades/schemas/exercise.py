"""Exercise schemas for API validation."""

from datetime import datetime
from decimal import Decimal
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator, model_validator

from ..grading.rules import EvaluationMode, ExerciseRules, Gender


VALID_UNITS = ["cm", "sec", "m", "reps", "qualitative"]


class ScoreRangeSchema(BaseModel):
    """Inclusive value band and the score it awards."""

    min_value: Decimal
    max_value: Decimal
    score: Decimal = Field(..., ge=0)

    @model_validator(mode="after")
    def check_bounds(self) -> "ScoreRangeSchema":
        if self.min_value > self.max_value:
            raise ValueError("min_value must not exceed max_value")
        return self


class CriterionSchema(BaseModel):
    """Named sub-criterion and its maximum points."""

    name: str = Field(..., min_length=1, max_length=100)
    max_points: Decimal = Field(..., ge=0)


class ExerciseCreate(BaseModel):
    """Schema for registering an exercise with its rule tables."""

    name: str = Field(..., min_length=1, max_length=255)
    evaluation_mode: EvaluationMode
    unit: Optional[str] = Field(None, description="Measurement unit")
    max_score: Optional[Decimal] = Field(None, gt=0, description="Top of the grade scale")
    ranges: Dict[Gender, List[ScoreRangeSchema]] = Field(default_factory=dict)
    criteria: List[CriterionSchema] = Field(default_factory=list)
    requires_teamwork: bool = False

    @field_validator("unit")
    @classmethod
    def validate_unit(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v_lower = v.lower().strip()
        if v_lower not in VALID_UNITS:
            raise ValueError(f"Invalid unit. Must be one of: {', '.join(VALID_UNITS)}")
        return v_lower

    @model_validator(mode="after")
    def check_rule_tables(self) -> "ExerciseCreate":
        if self.evaluation_mode == EvaluationMode.RANGE:
            if not any(self.ranges.values()):
                raise ValueError("Range exercises need at least one non-empty range list")
        else:
            if not self.criteria:
                raise ValueError("Criteria exercises need at least one criterion")
            names = [c.name for c in self.criteria]
            if len(set(names)) != len(names):
                raise ValueError("Criterion names must be unique")
        return self


class ExerciseResponse(BaseModel):
    """Exercise with its rule tables."""

    id: UUID
    name: str
    evaluation_mode: EvaluationMode
    unit: Optional[str]
    max_score: Optional[Decimal]
    ranges: Dict[Gender, List[ScoreRangeSchema]]
    criteria: List[CriterionSchema]
    requires_teamwork: bool
    created_at: datetime

    model_config = {"from_attributes": True}

    def to_rules(self, default_max_score: Decimal = Decimal("10")) -> ExerciseRules:
        """Rule tables the scorer consumes."""
        return ExerciseRules.from_config(
            id=self.id,
            name=self.name,
            evaluation_mode=self.evaluation_mode,
            max_score=self.max_score,
            ranges={
                gender.value: [r.model_dump() for r in items]
                for gender, items in self.ranges.items()
            },
            criteria=[c.model_dump() for c in self.criteria],
            requires_teamwork=self.requires_teamwork,
            default_max_score=default_max_score,
        )
