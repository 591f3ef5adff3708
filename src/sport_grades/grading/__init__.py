"""Evaluation scoring and session engine.

The lifecycle controller lives in ``sport_grades.grading.lifecycle``; it is
not re-exported here because it depends on the store clients.
"""

from .formatting import RoundingMode, format_grade, is_passing, round_grade
from .queue import GradingQueue, QueueItem, build_queue
from .records import EvaluationRecord, pair_key, utcnow
from .reconcile import history_for, latest_for, reconcile
from .rules import Criterion, EvaluationMode, ExerciseRules, Gender, ScoreRange, StudentRef
from .scoring import compute_score, parse_criteria_map, parse_performance_value, round_score
from .session import SessionMarkers, filter_by_session
from .status import EvaluationState, derive_status, status_for

__all__ = [
    "Criterion",
    "EvaluationMode",
    "EvaluationRecord",
    "EvaluationState",
    "ExerciseRules",
    "Gender",
    "GradingQueue",
    "QueueItem",
    "RoundingMode",
    "ScoreRange",
    "SessionMarkers",
    "StudentRef",
    "build_queue",
    "compute_score",
    "derive_status",
    "filter_by_session",
    "format_grade",
    "history_for",
    "is_passing",
    "latest_for",
    "pair_key",
    "parse_criteria_map",
    "parse_performance_value",
    "reconcile",
    "round_grade",
    "round_score",
    "status_for",
    "utcnow",
]
