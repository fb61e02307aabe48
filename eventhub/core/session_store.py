"""Session stores holding the current client's user identifier.

A session store is a single slot: it either points at a user id or is
empty. Stores are passed explicitly to identity calls instead of living
in module state, so two clients never share a pointer.
"""

from abc import ABC, abstractmethod

from fastapi import Request, Response


class SessionStore(ABC):
    """Single-slot, client-local store for the session user id."""

    @abstractmethod
    def get(self) -> str | None:
        """Return the stored user id, or None if the session is empty."""
        ...

    @abstractmethod
    def set(self, identifier: str) -> None:
        ...

    @abstractmethod
    def clear(self) -> None:
        ...


class MemorySessionStore(SessionStore):
    """In-process slot, used by scripts and tests."""

    def __init__(self, identifier: str | None = None) -> None:
        self._identifier = identifier

    def get(self) -> str | None:
        return self._identifier

    def set(self, identifier: str) -> None:
        self._identifier = identifier

    def clear(self) -> None:
        self._identifier = None


class CookieSessionStore(SessionStore):
    """Slot backed by an HTTP cookie.

    Reads come from the incoming request until the slot is written during
    the same request; writes are staged on the outgoing response.
    """

    _UNSET = object()

    def __init__(self, request: Request, response: Response, cookie_name: str) -> None:
        self._request = request
        self._response = response
        self._cookie_name = cookie_name
        self._pending: object = self._UNSET

    def get(self) -> str | None:
        if self._pending is not self._UNSET:
            return self._pending  # type: ignore[return-value]
        return self._request.cookies.get(self._cookie_name) or None

    def set(self, identifier: str) -> None:
        self._pending = identifier
        self._response.set_cookie(self._cookie_name, identifier, httponly=True, samesite="lax")

    def clear(self) -> None:
        self._pending = None
        self._response.delete_cookie(self._cookie_name)
