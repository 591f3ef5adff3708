"""Database utilities."""

from .session import get_db, get_engine, get_sessionmaker

__all__ = ["get_db", "get_engine", "get_sessionmaker"]
