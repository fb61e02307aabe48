"""Feedback model for post-event ratings."""

from datetime import UTC, datetime
from uuid import uuid4

from sqlmodel import Field, SQLModel, UniqueConstraint


class FeedbackCreate(SQLModel):
    """Rating and optional comment submitted by an attendee."""
    rating: int = Field(ge=1, le=5)
    comment: str | None = None


class Feedback(SQLModel, table=True):
    """A rating left by a registered attendee after the event.

    At most one row exists per (user_id, event_id).

    Attributes:
        id: Generated identifier (hex UUID).
        event_id: The rated event.
        user_id: The attendee who left the rating.
        rating: Integer from 1 to 5.
        comment: Optional free text.
        submitted_at: When the feedback was stored (UTC).
    """
    __table_args__ = (UniqueConstraint("user_id", "event_id"),)

    id: str = Field(default_factory=lambda: uuid4().hex, primary_key=True)
    event_id: str = Field(index=True)
    user_id: str = Field(index=True)
    rating: int
    comment: str | None = None
    submitted_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
