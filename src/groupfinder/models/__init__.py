# src/groupfinder/models/__init__.py
"""SQLAlchemy models for the Group Finder service."""

from .submission import (
    SUBMISSIONS_TABLE,
    TRANSITIONS,
    JoinType,
    SubmissionRecord,
    SubmissionStatus,
    is_allowed_transition,
)

__all__ = [
    "SUBMISSIONS_TABLE",
    "TRANSITIONS",
    "JoinType",
    "SubmissionRecord",
    "SubmissionStatus",
    "is_allowed_transition",
]
