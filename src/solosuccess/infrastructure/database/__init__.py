"""Database connection and models."""
from .connection import DatabaseManager, db
from .base_model import BaseModel, SoftDeleteMixin, as_utc, utcnow

__all__ = [
    "DatabaseManager",
    "db",
    "BaseModel",
    "SoftDeleteMixin",
    "utcnow",
    "as_utc",
]
