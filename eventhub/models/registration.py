"""Registration model linking a user to an event they will attend.

Rows are created only by the registration service and never updated.
Deleting an event does not delete its registrations.
"""

from datetime import UTC, datetime
from uuid import uuid4

from sqlmodel import Field, SQLModel, UniqueConstraint


class Registration(SQLModel, table=True):
    """One user's registration for one event.

    Attributes:
        id: Generated identifier (hex UUID).
        user_id: The registered user.
        event_id: The event registered for. No foreign key: rows outlive
            a deleted event.
        registration_date: When the registration was recorded (UTC).
    """
    __table_args__ = (UniqueConstraint("user_id", "event_id"),)

    id: str = Field(default_factory=lambda: uuid4().hex, primary_key=True)
    user_id: str = Field(index=True)
    event_id: str = Field(index=True)
    registration_date: datetime = Field(default_factory=lambda: datetime.now(UTC))
