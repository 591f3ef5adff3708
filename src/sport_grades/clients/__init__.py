"""Record store clients."""

from .base import EvaluationStore, RecordNotFoundError, StoreError
from .http import HttpEvaluationStore
from .memory import InMemoryEvaluationStore

__all__ = [
    "EvaluationStore",
    "HttpEvaluationStore",
    "InMemoryEvaluationStore",
    "RecordNotFoundError",
    "StoreError",
]
