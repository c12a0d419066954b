"""Caller identity and capability checks.

Credentials are verified by the identity provider; this module only answers
"is this caller an admin" and "does this caller own that submission".
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Any

from groupfinder.core.security import ADMIN_ROLE
from groupfinder.repositories.submission_repo import SubmissionRepository
from groupfinder.services.errors import AuthorizationError


@dataclass(frozen=True)
class Caller:
    """Who is making a request. ``user_id`` is None for anonymous visitors."""

    user_id: str | None = None
    role: str | None = None

    @classmethod
    def from_claims(cls, claims: dict[str, Any]) -> Caller:
        return cls(user_id=str(claims["sub"]), role=claims.get("role"))

    @property
    def is_anonymous(self) -> bool:
        return self.user_id is None


ANONYMOUS = Caller()


class Authorizer:
    """Answers capability questions for a :class:`Caller`."""

    def __init__(
        self,
        repository: SubmissionRepository,
        admin_user_ids: Iterable[str] = (),
    ) -> None:
        self.repository = repository
        self.admin_user_ids = frozenset(admin_user_ids)

    def is_admin(self, caller: Caller) -> bool:
        if caller.is_anonymous:
            return False
        return caller.role == ADMIN_ROLE or caller.user_id in self.admin_user_ids

    async def is_owner(self, caller: Caller, submission_id: int) -> bool:
        """Return True if ``caller`` submitted ``submission_id``.

        Raises:
            NotFoundError: If the submission does not exist.
        """
        if caller.is_anonymous:
            return False
        submission = await self.repository.get_by_id(submission_id)
        return submission.owner_id is not None and submission.owner_id == caller.user_id

    def require_admin(self, caller: Caller) -> None:
        if not self.is_admin(caller):
            raise AuthorizationError("Admin capability required")
