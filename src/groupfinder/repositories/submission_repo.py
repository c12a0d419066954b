"""Data access helpers for working with community submissions."""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Mapping
from datetime import datetime
from typing import Any, TypeVar

from pydantic import ValidationError as PydanticValidationError

from groupfinder.core.settings import settings
from groupfinder.db.time import utcnow
from groupfinder.models.submission import (
    SUBMISSIONS_TABLE,
    SubmissionStatus,
    is_allowed_transition,
)
from groupfinder.schemas.submission import Submission, SubmissionCreate
from groupfinder.services.errors import (
    InvalidTransitionError,
    NotFoundError,
    TransientStoreError,
    ValidationError,
)
from groupfinder.services.store import SubmissionStore

__all__ = ["SubmissionRepository"]

logger = logging.getLogger(__name__)

T = TypeVar("T")


def _describe(err: PydanticValidationError) -> str:
    parts = []
    for item in err.errors():
        location = ".".join(str(part) for part in item["loc"])
        parts.append(f"{location}: {item['msg']}" if location else item["msg"])
    return "; ".join(parts)


def _status(value: SubmissionStatus | str) -> SubmissionStatus:
    try:
        return SubmissionStatus(value)
    except ValueError as err:
        raise ValidationError(f"Unknown status {value!r}") from err


class SubmissionRepository:
    """Typed access to submission rows; the sole writer of lifecycle state.

    Store calls are bounded by a read or write timeout. A timeout surfaces as
    :class:`TransientStoreError` and is never retried here.
    """

    def __init__(
        self,
        store: SubmissionStore,
        *,
        read_timeout: float | None = None,
        write_timeout: float | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self.store = store
        self.read_timeout = read_timeout or settings.store_read_timeout_seconds
        self.write_timeout = write_timeout or settings.store_write_timeout_seconds
        self._clock = clock

    async def _bounded(self, call: Awaitable[T], timeout: float, operation: str) -> T:
        try:
            return await asyncio.wait_for(call, timeout)
        except TimeoutError as err:
            logger.warning("Submission store %s timed out after %.1fs", operation, timeout)
            raise TransientStoreError(f"Store {operation} timed out") from err

    async def create(
        self,
        data: SubmissionCreate | Mapping[str, Any],
        *,
        owner_id: str | None = None,
    ) -> Submission:
        """Persist a new pending submission.

        Args:
            data: Validated form input, or a raw mapping to validate here.
            owner_id: Identity of the submitting user, if signed in.

        Raises:
            ValidationError: If the input breaks a field or join-type rule.
            TransientStoreError: If the store is unreachable or times out.
        """
        if not isinstance(data, SubmissionCreate):
            try:
                data = SubmissionCreate.model_validate(data)
            except PydanticValidationError as err:
                raise ValidationError(_describe(err)) from err

        now = self._clock()
        row = data.model_dump()
        row.update(
            owner_id=owner_id,
            status=SubmissionStatus.PENDING,
            review_notes=None,
            reviewed_at=None,
            created_at=now,
            updated_at=now,
        )
        created = await self._bounded(
            self.store.insert(SUBMISSIONS_TABLE, row), self.write_timeout, "insert"
        )
        return Submission.model_validate(created)

    async def get_by_id(self, submission_id: int) -> Submission:
        """Return a submission by identifier or raise :class:`NotFoundError`."""
        rows = await self._bounded(
            self.store.select(SUBMISSIONS_TABLE, {"id": submission_id}),
            self.read_timeout,
            "select",
        )
        if not rows:
            raise NotFoundError(submission_id)
        return Submission.model_validate(rows[0])

    async def list_by_status(self, status: SubmissionStatus | str) -> list[Submission]:
        """Return submissions in ``status``, newest first."""
        return await self._list({"status": _status(status)})

    async def list_by_owner(self, owner_id: str) -> list[Submission]:
        """Return every submission made by ``owner_id``, newest first."""
        return await self._list({"owner_id": owner_id})

    async def _list(self, filters: Mapping[str, Any]) -> list[Submission]:
        rows = await self._bounded(
            self.store.select(
                SUBMISSIONS_TABLE, filters, order_by="created_at", descending=True
            ),
            self.read_timeout,
            "select",
        )
        return [Submission.model_validate(row) for row in rows]

    async def update_status(
        self,
        submission_id: int,
        new_status: SubmissionStatus | str,
        notes: str | None = None,
    ) -> Submission:
        """Move a submission to ``new_status`` with a conditional write.

        Already being in ``new_status`` is a success that writes nothing. Any
        other move must be in the transition table, and the write only lands
        if the row still holds the status observed before it; a caller that
        loses that race re-reads the row and either returns it (the winner
        made the same move) or reports the conflict.

        Raises:
            NotFoundError: If the submission does not exist.
            ValidationError: If ``new_status`` is not a known status.
            InvalidTransitionError: If the move is not allowed from the stored status.
            TransientStoreError: If the store is unreachable or times out.
        """
        target = _status(new_status)
        current = await self.get_by_id(submission_id)
        if current.status is target:
            return current
        if not is_allowed_transition(current.status, target):
            raise InvalidTransitionError(submission_id, current.status.value, target.value)

        now = self._clock()
        patch: dict[str, Any] = {"status": target, "updated_at": now}
        if current.status is SubmissionStatus.PENDING:
            patch["reviewed_at"] = now
            if notes is not None:
                patch["review_notes"] = notes

        affected = await self._bounded(
            self.store.update(
                SUBMISSIONS_TABLE,
                {"id": submission_id, "status": current.status},
                patch,
            ),
            self.write_timeout,
            "update",
        )
        latest = await self.get_by_id(submission_id)
        if affected:
            return latest

        if latest.status is target:
            logger.info(
                "Submission %s was already moved to %s by a concurrent call",
                submission_id,
                target.value,
            )
            return latest
        raise InvalidTransitionError(submission_id, latest.status.value, target.value)

    async def delete(self, submission_id: int) -> None:
        """Hard-delete a submission. This is never used for status changes."""
        affected = await self._bounded(
            self.store.delete(SUBMISSIONS_TABLE, {"id": submission_id}),
            self.write_timeout,
            "delete",
        )
        if not affected:
            raise NotFoundError(submission_id)
