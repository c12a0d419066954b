"""
Pydantic schemas for API request/response models.

These schemas define the structure of API data for serialization and validation.
"""

from .community import DirectoryQuery, LiveCommunity
from .results import ActionFailure, ActionResult, ActionSuccess
from .submission import ReviewRequest, Submission, SubmissionCreate

__all__ = [
    "DirectoryQuery", "LiveCommunity",
    "ActionFailure", "ActionResult", "ActionSuccess",
    "ReviewRequest", "Submission", "SubmissionCreate",
]
