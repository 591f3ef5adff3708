"""SQLAlchemy base model."""

from sqlalchemy.orm import DeclarativeBase

from ..grading.records import utcnow

__all__ = ["Base", "utcnow"]


class Base(DeclarativeBase):
    """Base class for all models."""

    pass
