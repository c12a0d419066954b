"""Public directory schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, SerializerFunctionWrapHandler, model_serializer

from groupfinder.models.submission import JoinType


class LiveCommunity(BaseModel):
    """A community as shown on the public directory page.

    Instances are rebuilt on every recompute and never mutated. For paid
    communities the ``join_link`` key is dropped from every serialized form.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    long_description: str = ""
    category: str
    platform: str
    join_type: JoinType = JoinType.FREE
    join_link: str | None = None
    price_inr: int | None = None
    logo_url: str | None = None
    tags: tuple[str, ...] = ()
    founder_name: str | None = None
    founder_bio: str | None = None
    verified: bool = True
    member_count: int = 0
    location: str = "Global"
    created_at: datetime | None = None
    source: Literal["submission", "seed"] = "submission"

    @model_serializer(mode="wrap")
    def _hide_private_fields(self, handler: SerializerFunctionWrapHandler) -> dict[str, Any]:
        data: dict[str, Any] = handler(self)
        if self.join_type is JoinType.PAID:
            data.pop("join_link", None)
        return data


class DirectoryQuery(BaseModel):
    """Filters accepted by the public directory listing."""

    category: str | None = None
    platform: str | None = None
    join_type: JoinType | None = None
    q: str | None = None
