"""Business logic services."""

from .evaluation_service import EvaluationConflictError, EvaluationNotFoundError, EvaluationService
from .registry_service import ExerciseNotFoundError, RegistryService, StudentNotFoundError
from .summary_service import SummaryService

__all__ = [
    "EvaluationService",
    "EvaluationConflictError",
    "EvaluationNotFoundError",
    "RegistryService",
    "ExerciseNotFoundError",
    "StudentNotFoundError",
    "SummaryService",
]
