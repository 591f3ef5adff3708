"""Database models."""

from .base import Base
from .evaluation import Evaluation
from .exercise import Exercise
from .student import Student

__all__ = [
    "Base",
    "Evaluation",
    "Exercise",
    "Student",
]
