"""
Models package for the API Explorer.

Exports all SQLAlchemy models for database operations.
"""

from .history import HistoryRecord

__all__ = [
    "HistoryRecord",
]
