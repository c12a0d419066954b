"""Typed errors raised by the submission lifecycle services.

Every failure that crosses the repository or lifecycle engine boundary is one
of the classes below, each tagged with an :class:`ErrorKind` so callers can
render a specific message without parsing strings.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    """Discriminator for failures reported to admin surfaces."""

    VALIDATION = "validation_error"
    NOT_FOUND = "not_found"
    INVALID_TRANSITION = "invalid_transition"
    TRANSIENT_STORE = "transient_store_error"
    AUTHORIZATION = "authorization_error"


class SubmissionError(RuntimeError):
    """Base exception for submission lifecycle failures."""

    kind: ErrorKind = ErrorKind.VALIDATION


class ValidationError(SubmissionError):
    """Raised when submitted data does not satisfy the input rules."""

    kind = ErrorKind.VALIDATION


class NotFoundError(SubmissionError):
    """Raised when a submission id does not exist in the store."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, submission_id: int) -> None:
        super().__init__(f"Submission {submission_id} not found")
        self.submission_id = submission_id


class InvalidTransitionError(SubmissionError):
    """Raised when a status change is not in the transition table."""

    kind = ErrorKind.INVALID_TRANSITION

    def __init__(self, submission_id: int, current: str, target: str) -> None:
        super().__init__(
            f"Submission {submission_id} cannot move from {current} to {target}"
        )
        self.submission_id = submission_id
        self.current = current
        self.target = target


class TransientStoreError(SubmissionError):
    """Raised on store timeouts or connectivity failures; safe for the caller to retry."""

    kind = ErrorKind.TRANSIENT_STORE


class AuthorizationError(SubmissionError):
    """Raised when the caller lacks the capability required for an action."""

    kind = ErrorKind.AUTHORIZATION
