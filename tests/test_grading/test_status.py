"""Tests for status derivation."""

from datetime import datetime
from decimal import Decimal

import pytest

from sport_grades.grading.records import EvaluationRecord
from sport_grades.grading.status import EvaluationState, derive_status, status_for


def make_record(performance_value="", score=None) -> EvaluationRecord:
    return EvaluationRecord(
        id="r1",
        student_id="s1",
        exercise_id="e1",
        created_at=datetime(2026, 3, 1, 9, 0),
        performance_value=performance_value,
        score=score,
    )


def test_missing_record_is_ungraded():
    assert derive_status(None) == EvaluationState.UNGRADED


@pytest.mark.parametrize(
    "performance_value,score,expected",
    [
        ("12.5", Decimal("9.0"), EvaluationState.GRADED),
        ("40", Decimal("0"), EvaluationState.GRADED),
        ("", Decimal("0"), EvaluationState.GRADED),
        ("fast", None, EvaluationState.IN_PROGRESS),
        ('{"technique": 3}', None, EvaluationState.IN_PROGRESS),
        ("   ", None, EvaluationState.UNGRADED),
        ("", None, EvaluationState.UNGRADED),
    ],
)
def test_derive_status(performance_value, score, expected):
    assert derive_status(make_record(performance_value, score)) == expected


def test_zero_score_is_graded():
    """A zero is a grade, not a placeholder."""
    assert status_for(Decimal("0"), "") == EvaluationState.GRADED


def test_status_ignores_everything_but_score_and_value():
    record = make_record("12.5", None)
    assert derive_status(record) == derive_status(
        EvaluationRecord(
            id="other",
            student_id="s9",
            exercise_id="e9",
            created_at=datetime(2020, 1, 1),
            performance_value="12.5",
            comments="great effort",
            sequence=42,
        )
    )


def test_none_performance_value_is_blank():
    assert status_for(None, None) == EvaluationState.UNGRADED
