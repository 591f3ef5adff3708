"""Scorer: turns a raw performance into a normalized grade.

Every function here is pure. Inputs that cannot be scored (unparsable text,
a malformed criteria map, a value outside every range) produce ``None``
rather than raising: the caller treats a missing score as "still in
progress". ``Decimal("0")`` is a real grade and never stands for "ungraded".
"""

import json
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Dict, Mapping, Optional

from .rules import EvaluationMode, ExerciseRules, Gender, ScoreRange

ONE = Decimal("1")
ZERO = Decimal("0")
TENTH = Decimal("0.1")


def round_score(value: Decimal) -> Decimal:
    """Round to one decimal place, half away from zero."""
    return value.quantize(TENTH, rounding=ROUND_HALF_UP)


def apply_base_point(raw: Decimal, max_score: Decimal) -> Decimal:
    """Map a ``[0, max_score]`` score onto ``[1, max_score]``."""
    if max_score == 0:
        return ONE
    return ONE + (raw / max_score) * (max_score - ONE)


def parse_performance_value(value: Any) -> Optional[Decimal]:
    """Parse a measured value. Returns None for anything non-numeric."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        text = str(value)
    else:
        text = str(value).strip().replace(",", ".")
    if not text:
        return None
    try:
        number = Decimal(text)
    except InvalidOperation:
        return None
    if not number.is_finite():
        return None
    return number


def parse_criteria_map(value: Any) -> Optional[Dict[str, Decimal]]:
    """
    Parse awarded points per criterion.

    Accepts a mapping or its JSON serialization. Entries whose value is null
    are treated as not awarded yet and dropped. Returns None if the input is
    not a map or any awarded value is non-numeric.
    """
    if value is None:
        return None
    if isinstance(value, Mapping):
        raw = value
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            raw = json.loads(text)
        except ValueError:
            return None
        if not isinstance(raw, dict):
            return None

    awarded: Dict[str, Decimal] = {}
    for name, points in raw.items():
        if points is None:
            continue
        number = parse_performance_value(points)
        if number is None:
            return None
        awarded[str(name)] = number
    return awarded


def serialize_criteria_map(awarded: Mapping[str, Any]) -> str:
    """Serialize awarded points the way ``performance_value`` stores them."""
    plain: Dict[str, Any] = {}
    for name, points in awarded.items():
        if points is None:
            plain[name] = None
            continue
        number = Decimal(str(points))
        plain[name] = int(number) if number == number.to_integral_value() else float(number)
    return json.dumps(plain, sort_keys=True)


def score_range(
    value: Decimal,
    ranges: list[ScoreRange],
    max_score: Decimal,
    base_point_enabled: bool = False,
) -> Optional[Decimal]:
    """First range (in stored order) containing ``value`` decides the score."""
    for band in ranges:
        if band.contains(value):
            score = band.score
            if base_point_enabled:
                score = apply_base_point(score, max_score)
            return round_score(score)
    return None


def score_criteria(
    awarded: Mapping[str, Decimal],
    exercise: ExerciseRules,
    base_point_enabled: bool = False,
) -> Optional[Decimal]:
    """
    Proportion of criteria points earned, scaled to the exercise's max score.

    Missing criteria count as zero; names the exercise does not define are
    ignored. Points outside a criterion's ``[0, max_points]`` make the map
    unscorable. A misconfigured exercise whose criteria are worth nothing in
    total scores as 0% instead of dividing by zero.
    """
    if not awarded:
        return None
    for criterion in exercise.criteria:
        points = awarded.get(criterion.name)
        if points is not None and not ZERO <= points <= criterion.max_points:
            return None

    total_max = exercise.total_max_points
    total_scored = sum(
        (awarded.get(criterion.name, ZERO) for criterion in exercise.criteria),
        ZERO,
    )
    percentage = total_scored / total_max if total_max else ZERO

    if base_point_enabled:
        score = ONE + percentage * (exercise.max_score - ONE)
    else:
        score = percentage * exercise.max_score
    return round_score(score)


def compute_score(
    performance_value: Any,
    exercise: ExerciseRules,
    gender: Any = Gender.UNSPECIFIED,
    base_point_enabled: bool = False,
    criteria_scores: Optional[Mapping[str, Any]] = None,
) -> Optional[Decimal]:
    """
    Score a performance against an exercise's rule tables.

    Args:
        performance_value: measured value (range mode) or serialized
            criteria map (criteria mode)
        exercise: the exercise's rule tables
        gender: the student's gender, used to pick the range list
        base_point_enabled: lift the scale floor to one point
        criteria_scores: structured awarded points; preferred over
            ``performance_value`` in criteria mode when given

    Returns:
        The grade rounded to one decimal, or None when no score is derivable.
    """
    if exercise.evaluation_mode == EvaluationMode.CRITERIA:
        source = criteria_scores if criteria_scores is not None else performance_value
        awarded = parse_criteria_map(source)
        if awarded is None:
            return None
        return score_criteria(awarded, exercise, base_point_enabled)

    ranges = exercise.ranges_for(gender)
    if not ranges:
        return None
    value = parse_performance_value(performance_value)
    if value is None:
        return None
    return score_range(value, ranges, exercise.max_score, base_point_enabled)
