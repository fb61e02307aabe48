"""Domain error codes and exceptions.

Services raise these; the HTTP layer maps each code to a status code.
Store transport failures surface as StoreUnavailableError and are never
retried here.
"""

from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    NOT_FOUND = "NOT_FOUND"
    ALREADY_EXISTS = "ALREADY_EXISTS"
    CONFLICT = "CONFLICT"
    INVALID_INPUT = "INVALID_INPUT"
    PRECONDITION_FAILED = "PRECONDITION_FAILED"
    PERMISSION_DENIED = "PERMISSION_DENIED"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"


class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode = ErrorCode.INVALID_INPUT

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class NotFoundError(DomainError):
    code = ErrorCode.NOT_FOUND


class EventNotFoundError(NotFoundError):
    """Raised when an event is not found."""

    def __init__(self, event_id: str) -> None:
        super().__init__("Event not found")
        self.event_id = event_id


class UserNotFoundError(NotFoundError):
    """Raised when a user record is not found."""

    def __init__(self, user_id: str) -> None:
        super().__init__("User not found")
        self.user_id = user_id


class AlreadyExistsError(DomainError):
    code = ErrorCode.ALREADY_EXISTS


class UserAlreadyExistsError(AlreadyExistsError):
    """Raised by explicit registration when the identifier is taken."""

    def __init__(self, user_id: str) -> None:
        super().__init__("User already exists with this email")
        self.user_id = user_id


class ConflictError(DomainError):
    code = ErrorCode.CONFLICT


class AlreadySubmittedError(ConflictError):
    """Raised when feedback for the (user, event) pair already exists."""

    def __init__(self, event_id: str, user_id: str) -> None:
        super().__init__("Feedback already submitted for this event")
        self.event_id = event_id
        self.user_id = user_id


class InvalidInputError(DomainError):
    code = ErrorCode.INVALID_INPUT


class PreconditionFailedError(DomainError):
    code = ErrorCode.PRECONDITION_FAILED


class NotRegisteredError(PreconditionFailedError):
    """Raised when feedback is attempted without a registration."""

    def __init__(self, event_id: str, user_id: str) -> None:
        super().__init__("Only registered attendees can leave feedback")
        self.event_id = event_id
        self.user_id = user_id


class EventNotConcludedError(PreconditionFailedError):
    """Raised when feedback is attempted before the event is past."""

    def __init__(self, event_id: str) -> None:
        super().__init__("Feedback opens once the event has concluded")
        self.event_id = event_id


class PermissionDeniedError(DomainError):
    code = ErrorCode.PERMISSION_DENIED


class StoreUnavailableError(DomainError):
    """Raised when the persistent store cannot be reached or fails."""

    code = ErrorCode.STORE_UNAVAILABLE

    def __init__(self, message: str = "Storage backend unavailable") -> None:
        super().__init__(message)
