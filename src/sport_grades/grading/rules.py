"""Rule tables: static per-exercise scoring configuration.

Pure data. Range tables map a measured value onto a score band, optionally
split by gender; criteria tables list named sub-criteria with their maximum
points. Nothing here computes a grade, see ``scoring``.
"""

import enum
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple


DEFAULT_MAX_SCORE = Decimal("10")


class Gender(str, enum.Enum):
    """Gender values recognized by range tables."""

    MALE = "M"
    FEMALE = "F"
    UNSPECIFIED = "N"


class EvaluationMode(str, enum.Enum):
    """How an exercise turns a performance into a grade."""

    RANGE = "range"
    CRITERIA = "criteria"


# Lists consulted, in order, when a student's gender has no dedicated list
RANGE_FALLBACK_ORDER: Tuple[Gender, ...] = (Gender.MALE, Gender.FEMALE)


def to_decimal(value: Any) -> Decimal:
    """Convert ints, floats, strings and Decimals without float noise."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def to_gender(value: Any) -> Gender:
    """Coerce a stored gender value; anything unknown is unspecified."""
    if isinstance(value, Gender):
        return value
    try:
        return Gender(str(value).strip().upper())
    except ValueError:
        return Gender.UNSPECIFIED


@dataclass(frozen=True)
class ScoreRange:
    """Inclusive ``[min_value, max_value]`` band awarding ``score``."""

    min_value: Decimal
    max_value: Decimal
    score: Decimal

    def contains(self, value: Decimal) -> bool:
        return self.min_value <= value <= self.max_value

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ScoreRange":
        return cls(
            min_value=to_decimal(data["min_value"]),
            max_value=to_decimal(data["max_value"]),
            score=to_decimal(data["score"]),
        )


@dataclass(frozen=True)
class Criterion:
    """A named sub-criterion worth up to ``max_points``."""

    name: str
    max_points: Decimal

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Criterion":
        return cls(name=str(data["name"]), max_points=to_decimal(data["max_points"]))


@dataclass(frozen=True)
class ExerciseRules:
    """Everything the scorer needs to know about one exercise."""

    id: str
    name: str
    evaluation_mode: EvaluationMode
    max_score: Decimal = DEFAULT_MAX_SCORE
    ranges: Dict[Gender, List[ScoreRange]] = field(default_factory=dict)
    criteria: List[Criterion] = field(default_factory=list)
    requires_teamwork: bool = False

    def ranges_for(self, gender: Any) -> Optional[List[ScoreRange]]:
        """
        Range list for a gender, walking the fallback order when missing.

        The student's own list wins when it exists and is non-empty, then the
        male list, then the female list. Returns None when the exercise has
        no usable list at all.
        """
        order = (to_gender(gender),) + RANGE_FALLBACK_ORDER
        for candidate in order:
            ranges = self.ranges.get(candidate)
            if ranges:
                return ranges
        return None

    @property
    def total_max_points(self) -> Decimal:
        return sum((c.max_points for c in self.criteria), Decimal("0"))

    @classmethod
    def from_config(
        cls,
        id: Any,
        name: str,
        evaluation_mode: Any,
        max_score: Any = None,
        ranges: Optional[Mapping[str, Iterable[Mapping[str, Any]]]] = None,
        criteria: Optional[Iterable[Mapping[str, Any]]] = None,
        requires_teamwork: bool = False,
        default_max_score: Decimal = DEFAULT_MAX_SCORE,
    ) -> "ExerciseRules":
        """Build rules from JSON-shaped configuration (as stored or sent over HTTP)."""
        parsed_ranges: Dict[Gender, List[ScoreRange]] = {}
        for key, items in (ranges or {}).items():
            parsed_ranges[to_gender(key)] = [
                item if isinstance(item, ScoreRange) else ScoreRange.from_dict(item)
                for item in items
            ]

        return cls(
            id=str(id),
            name=name,
            evaluation_mode=EvaluationMode(evaluation_mode),
            max_score=to_decimal(max_score) if max_score is not None else default_max_score,
            ranges=parsed_ranges,
            criteria=[
                item if isinstance(item, Criterion) else Criterion.from_dict(item)
                for item in (criteria or [])
            ],
            requires_teamwork=bool(requires_teamwork),
        )


@dataclass(frozen=True)
class StudentRef:
    """The only student facts the engine reads."""

    id: str
    gender: Gender = Gender.UNSPECIFIED
