"""Submission-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime
from urllib.parse import urlsplit

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from groupfinder.models.submission import JoinType, SubmissionStatus

MAX_NAME_LENGTH = 100
MAX_SHORT_DESCRIPTION_LENGTH = 200
MAX_LONG_DESCRIPTION_LENGTH = 2000
MAX_FOUNDER_BIO_LENGTH = 500
MAX_LABEL_LENGTH = 50
MAX_NOTES_LENGTH = 1000
MIN_PRICE_INR = 10
MAX_PRICE_INR = 100_000


def _looks_like_url(value: str) -> bool:
    parts = urlsplit(value)
    if parts.scheme and (parts.netloc or parts.path):
        return True
    return value.startswith(("http://", "https://")) or "." in value


class SubmissionCreate(BaseModel):
    """Schema for a community submitted through the public form."""

    model_config = ConfigDict(str_strip_whitespace=True)

    community_name: str = Field(..., min_length=1, max_length=MAX_NAME_LENGTH)
    platform: str = Field(..., min_length=1, max_length=MAX_LABEL_LENGTH)
    category: str = Field(..., min_length=1, max_length=MAX_LABEL_LENGTH)
    short_description: str = Field(..., min_length=1, max_length=MAX_SHORT_DESCRIPTION_LENGTH)
    long_description: str = Field(default="", max_length=MAX_LONG_DESCRIPTION_LENGTH)
    join_type: JoinType = JoinType.FREE
    join_link: str | None = Field(default=None, max_length=500)
    price_inr: int | None = Field(default=None, ge=MIN_PRICE_INR, le=MAX_PRICE_INR)
    founder_name: str = Field(default="", max_length=MAX_NAME_LENGTH)
    founder_bio: str = Field(default="", max_length=MAX_FOUNDER_BIO_LENGTH)
    show_founder_info: bool = True
    logo_url: str | None = Field(default=None, max_length=500)

    @field_validator("join_link", "logo_url")
    @classmethod
    def _blank_to_none(cls, value: str | None) -> str | None:
        return value or None

    @field_validator("join_link")
    @classmethod
    def _check_join_link(cls, value: str | None) -> str | None:
        if value is not None and not _looks_like_url(value):
            raise ValueError("join_link must be a valid URL")
        return value

    @model_validator(mode="after")
    def _check_join_rules(self) -> SubmissionCreate:
        if self.join_type is JoinType.FREE:
            if not self.join_link:
                raise ValueError("join_link is required for free communities")
            if self.price_inr is not None:
                raise ValueError("price_inr is only allowed for paid communities")
        elif self.price_inr is None:
            raise ValueError("price_inr is required for paid communities")

        if not self.long_description:
            self.long_description = self.short_description
        if not self.founder_name:
            self.founder_name = "Anonymous"
        return self


class Submission(BaseModel):
    """A stored submission as returned by the repository."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    community_name: str
    platform: str
    category: str
    short_description: str
    long_description: str = ""
    join_type: JoinType = JoinType.FREE
    join_link: str | None = None
    price_inr: int | None = None
    owner_id: str | None = None
    founder_name: str = "Anonymous"
    founder_bio: str = ""
    show_founder_info: bool = True
    logo_url: str | None = None
    status: SubmissionStatus = SubmissionStatus.PENDING
    review_notes: str | None = None
    reviewed_at: datetime | None = None
    created_at: datetime
    updated_at: datetime | None = None


class ReviewRequest(BaseModel):
    """Optional reviewer notes attached to an admin action."""

    notes: str | None = Field(default=None, max_length=MAX_NOTES_LENGTH)
