"""Result envelopes returned by admin actions."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel

from groupfinder.schemas.submission import Submission
from groupfinder.services.errors import ErrorKind


class ActionSuccess(BaseModel):
    """Admin action completed; ``submission`` is the stored state afterwards."""

    ok: Literal[True] = True
    submission: Submission | None = None


class ActionFailure(BaseModel):
    """Admin action failed with a typed, user-presentable error."""

    ok: Literal[False] = False
    error: ErrorKind
    message: str


ActionResult = ActionSuccess | ActionFailure
