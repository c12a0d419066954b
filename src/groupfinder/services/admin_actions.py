"""Admin actions exposed to the API and the command line.

Each action returns an :class:`ActionSuccess` or :class:`ActionFailure`
instead of raising, so every admin surface can show a specific message.
"""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable

from groupfinder.schemas.results import ActionFailure, ActionResult, ActionSuccess
from groupfinder.schemas.submission import Submission
from groupfinder.services.authz import Authorizer, Caller
from groupfinder.services.errors import ErrorKind, SubmissionError
from groupfinder.services.lifecycle import LifecycleEngine

logger = logging.getLogger(__name__)

USER_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.NOT_FOUND: "That submission no longer exists.",
    ErrorKind.AUTHORIZATION: "You're not authorized to perform this action.",
    ErrorKind.TRANSIENT_STORE: "Network issue, please try again.",
}


def failure_for(err: SubmissionError) -> ActionFailure:
    """Build the failure envelope for a typed error."""
    return ActionFailure(error=err.kind, message=USER_MESSAGES.get(err.kind, str(err)))


class AdminActions:
    """Authorized wrappers around the lifecycle engine."""

    def __init__(self, engine: LifecycleEngine, authorizer: Authorizer) -> None:
        self.engine = engine
        self.authorizer = authorizer

    async def approve(
        self, caller: Caller, submission_id: int, notes: str | None = None
    ) -> ActionResult:
        return await self._run(
            caller, "approve", submission_id, lambda: self.engine.approve(submission_id, notes)
        )

    async def reject(
        self, caller: Caller, submission_id: int, notes: str | None = None
    ) -> ActionResult:
        return await self._run(
            caller, "reject", submission_id, lambda: self.engine.reject(submission_id, notes)
        )

    async def delist(self, caller: Caller, submission_id: int) -> ActionResult:
        return await self._run(
            caller, "delist", submission_id, lambda: self.engine.delist(submission_id)
        )

    async def delete(self, caller: Caller, submission_id: int) -> ActionResult:
        return await self._run(
            caller, "delete", submission_id, lambda: self.engine.remove(submission_id)
        )

    async def _run(
        self,
        caller: Caller,
        action: str,
        submission_id: int,
        operation: Callable[[], Awaitable[Submission | None]],
    ) -> ActionResult:
        try:
            self.authorizer.require_admin(caller)
            submission = await operation()
        except SubmissionError as err:
            logger.info(
                "Admin %s of submission %s by %s failed: %s",
                action,
                submission_id,
                caller.user_id,
                err,
            )
            return failure_for(err)
        except Exception:
            logger.exception("Admin %s of submission %s crashed", action, submission_id)
            return ActionFailure(
                error=ErrorKind.TRANSIENT_STORE,
                message=USER_MESSAGES[ErrorKind.TRANSIENT_STORE],
            )
        return ActionSuccess(submission=submission)
