"""Event model and the input models used to create and edit events.

Events are the central entity: users discover them, register for them and
leave feedback once they are over. The registered_count column is a
materialized counter of the event's registrations and is only changed
inside the registration transaction.
"""

import datetime as dt
from enum import Enum
from uuid import uuid4

from pydantic import PositiveInt
from sqlmodel import Field, SQLModel

EVENT_CATEGORIES = [
    "Music",
    "Workshop",
    "Conference",
    "Social",
    "Sports",
    "Art & Culture",
    "Food & Drink",
    "Tech",
    "Health & Wellness",
    "Other",
]


class EventStatus(str, Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"
    FEATURED = "featured"
    PAST = "past"


# Statuses that accept new registrations
OPEN_STATUSES = (EventStatus.ACTIVE, EventStatus.FEATURED)


def _new_event_id() -> str:
    return uuid4().hex


def _utcnow() -> dt.datetime:
    return dt.datetime.now(dt.UTC)


class EventDraft(SQLModel):
    """Fields a user supplies when creating or editing an event.

    status is honoured on create, and on edit only when an admin edits.
    """
    title: str = Field(min_length=3)
    date: dt.date
    time: str = Field(min_length=1)
    location: str = Field(min_length=3)
    description: str = Field(min_length=10)
    category: str = Field(min_length=1)
    max_registrants: PositiveInt | None = None
    image_url: str | None = None
    status: EventStatus | None = None


class Event(SQLModel, table=True):
    """An event users can register for.

    Attributes:
        id: Generated identifier (hex UUID).
        title: Event title.
        date: Calendar date the event takes place on.
        time: Free-text start time, e.g. "10:00 AM".
        location: Where the event happens.
        description: Long description.
        category: One of EVENT_CATEGORIES in practice; not enforced.
        max_registrants: Optional seat limit; bounds registered_count.
        registered_count: Number of registrations recorded for the event.
        status: active, cancelled, featured or past.
        created_by: User id of the creator (owner).
        image_url: Optional image URL or data URI.
        created_at: When the event was first stored.
        updated_at: When the event was last replaced.
    """
    id: str = Field(default_factory=_new_event_id, primary_key=True)
    title: str
    date: dt.date = Field(index=True)
    time: str
    location: str
    description: str
    category: str = Field(index=True)
    max_registrants: int | None = None
    registered_count: int = Field(default=0)
    status: EventStatus = Field(default=EventStatus.ACTIVE, index=True)
    created_by: str = Field(index=True)
    image_url: str | None = None
    created_at: dt.datetime = Field(default_factory=_utcnow)
    updated_at: dt.datetime = Field(default_factory=_utcnow)

    @property
    def is_open(self) -> bool:
        return self.status in OPEN_STATUSES

    @property
    def is_full(self) -> bool:
        return (
            self.max_registrants is not None
            and self.registered_count >= self.max_registrants
        )
