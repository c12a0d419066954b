"""Lifecycle engine for community submissions.

Every status change goes through :class:`LifecycleEngine`, which applies the
transition through the repository and then announces it on the propagation
bus. The engine trusts its caller for authorization and never retries.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from groupfinder.models.submission import SubmissionStatus
from groupfinder.repositories.submission_repo import SubmissionRepository
from groupfinder.schemas.submission import Submission, SubmissionCreate
from groupfinder.services.propagation import (
    EVENT_APPROVED,
    EVENT_DELETED,
    EVENT_DELISTED,
    EVENT_REJECTED,
    EVENT_SUBMITTED,
    BusEvent,
    PropagationBus,
)

logger = logging.getLogger(__name__)


class LifecycleEngine:
    """Executes ``pending -> approved|rejected`` and ``approved -> delisted``."""

    def __init__(self, repository: SubmissionRepository, bus: PropagationBus) -> None:
        self.repository = repository
        self.bus = bus

    async def submit(
        self,
        data: SubmissionCreate | Mapping[str, Any],
        *,
        owner_id: str | None = None,
    ) -> Submission:
        """Store a new pending submission and announce it."""
        submission = await self.repository.create(data, owner_id=owner_id)
        logger.info("Received submission %s (%s)", submission.id, submission.community_name)
        self.bus.publish(BusEvent(EVENT_SUBMITTED, submission.id, submission))
        return submission

    async def approve(self, submission_id: int, notes: str | None = None) -> Submission:
        """Approve a pending submission; approving twice returns the same record."""
        return await self._transition(
            submission_id, SubmissionStatus.APPROVED, EVENT_APPROVED, notes
        )

    async def reject(self, submission_id: int, notes: str | None = None) -> Submission:
        """Reject a pending submission."""
        return await self._transition(
            submission_id, SubmissionStatus.REJECTED, EVENT_REJECTED, notes
        )

    async def delist(self, submission_id: int) -> Submission:
        """Remove an approved community from the public directory."""
        return await self._transition(
            submission_id, SubmissionStatus.DELISTED, EVENT_DELISTED, None
        )

    async def remove(self, submission_id: int) -> None:
        """Hard-delete a submission record."""
        await self.repository.delete(submission_id)
        logger.info("Deleted submission %s", submission_id)
        self.bus.publish(BusEvent(EVENT_DELETED, submission_id))

    async def _transition(
        self,
        submission_id: int,
        target: SubmissionStatus,
        event_type: str,
        notes: str | None,
    ) -> Submission:
        submission = await self.repository.update_status(submission_id, target, notes)
        logger.info("Submission %s is now %s", submission_id, submission.status.value)
        self.bus.publish(BusEvent(event_type, submission_id, submission))
        return submission
