"""Repositories over the submission store."""

from .submission_repo import SubmissionRepository

__all__ = ["SubmissionRepository"]
