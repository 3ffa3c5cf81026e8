"""Persistence boundary: repository interfaces and their SQLAlchemy implementation."""

from app.repositories.base import (
    DuplicateKeyError,
    PersistenceError,
    StaleEntityError,
    UnitOfWork,
)
from app.repositories.sql import SqlUnitOfWork

__all__ = [
    "DuplicateKeyError",
    "PersistenceError",
    "SqlUnitOfWork",
    "StaleEntityError",
    "UnitOfWork",
]
