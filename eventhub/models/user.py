"""User model for people who browse, create and register for events.

Users are keyed by their login identifier (an email address in the mock
login flow). A record is created on first login or explicit registration
and is not mutated afterwards.
"""

from enum import Enum

from sqlmodel import Field, SQLModel


class UserRole(str, Enum):
    USER = "user"
    ADMIN = "admin"


class User(SQLModel, table=True):
    """A person known to the application.

    Attributes:
        id: Stable identifier, the email address used to log in.
        email: Contact address; equal to id in the current login flow.
        name: Display name, if given.
        role: "admin" for the single reserved identifier, "user" otherwise.
    """
    id: str = Field(primary_key=True)
    email: str = Field(index=True)
    name: str | None = None
    role: UserRole = Field(default=UserRole.USER)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
