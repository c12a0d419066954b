"""SQLAlchemy model and lifecycle constants for community submissions."""

from datetime import datetime
from enum import Enum

from sqlalchemy import Boolean, DateTime, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from groupfinder.db.session import Base
from groupfinder.db.time import utcnow

SUBMISSIONS_TABLE = "community_subs"


class SubmissionStatus(str, Enum):
    """Lifecycle states a submission can be in."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    DELISTED = "delisted"


class JoinType(str, Enum):
    """How a visitor joins a listed community."""

    FREE = "free"
    PAID = "paid"


# Allowed moves out of each state. Rejected and delisted are terminal.
TRANSITIONS: dict[SubmissionStatus, frozenset[SubmissionStatus]] = {
    SubmissionStatus.PENDING: frozenset({SubmissionStatus.APPROVED, SubmissionStatus.REJECTED}),
    SubmissionStatus.APPROVED: frozenset({SubmissionStatus.DELISTED}),
    SubmissionStatus.REJECTED: frozenset(),
    SubmissionStatus.DELISTED: frozenset(),
}


def is_allowed_transition(current: SubmissionStatus, target: SubmissionStatus) -> bool:
    """Return True if ``current -> target`` is a defined lifecycle move."""
    return target in TRANSITIONS.get(current, frozenset())


class SubmissionRecord(Base):
    """Durable row for a community submitted to the directory."""

    __tablename__ = SUBMISSIONS_TABLE
    __table_args__ = (Index("ix_community_subs_status_created", "status", "created_at"),)

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    community_name: Mapped[str] = mapped_column(Text, nullable=False)
    platform: Mapped[str] = mapped_column(Text, nullable=False)
    category: Mapped[str] = mapped_column(Text, nullable=False)
    short_description: Mapped[str] = mapped_column(Text, nullable=False)
    long_description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    # Private for paid communities; never copied into the public directory.
    join_link: Mapped[str | None] = mapped_column(Text, nullable=True)
    join_type: Mapped[str] = mapped_column(Text, nullable=False, default=JoinType.FREE.value)
    price_inr: Mapped[int | None] = mapped_column(Integer, nullable=True)
    owner_id: Mapped[str | None] = mapped_column(Text, nullable=True, index=True)
    founder_name: Mapped[str] = mapped_column(Text, nullable=False, default="Anonymous")
    founder_bio: Mapped[str] = mapped_column(Text, nullable=False, default="")
    show_founder_info: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    logo_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(
        Text, nullable=False, default=SubmissionStatus.PENDING.value
    )
    review_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    reviewed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, default=utcnow
    )
