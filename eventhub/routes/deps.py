"""FastAPI dependencies wiring the store, services and session user."""
from functools import lru_cache

from fastapi import Depends, HTTPException, Request, Response

from eventhub.core.config import settings
from eventhub.core.database import engine
from eventhub.core.session_store import CookieSessionStore, SessionStore
from eventhub.models import User
from eventhub.services.events import EventRepository
from eventhub.services.feedback import FeedbackService
from eventhub.services.identity import IdentityService
from eventhub.services.registrations import RegistrationService
from eventhub.stores.interfaces import DocumentStore
from eventhub.stores.sql_store import SQLModelStore


class Services:
    """The service set bound to one store."""

    def __init__(self, store: DocumentStore) -> None:
        self.identity = IdentityService(store)
        self.events = EventRepository(store)
        self.registrations = RegistrationService(store, self.events)
        self.feedback = FeedbackService(store, self.events, self.registrations)


@lru_cache
def _default_store() -> DocumentStore:
    return SQLModelStore(engine)


def get_store() -> DocumentStore:
    """Dependency for the persistent store. Overridden in tests."""
    return _default_store()


@lru_cache
def services_for(store: DocumentStore) -> Services:
    # One instance per store so the event cache survives across requests
    return Services(store)


def get_services(store: DocumentStore = Depends(get_store)) -> Services:
    return services_for(store)


def get_session_store(request: Request, response: Response) -> SessionStore:
    return CookieSessionStore(request, response, settings.session_cookie_name)


async def get_current_user(
    services: Services = Depends(get_services),
    session: SessionStore = Depends(get_session_store),
) -> User | None:
    return await services.identity.current_session(session)


async def require_user(response: Response, user: User | None = Depends(get_current_user)) -> User:
    if user is None:
        # The error response replaces this one; keep a staged cookie deletion
        cookie = response.headers.get("set-cookie")
        headers = {"set-cookie": cookie} if cookie else None
        raise HTTPException(status_code=401, detail="Login required", headers=headers)
    return user


async def require_admin(user: User = Depends(require_user)) -> User:
    if not user.is_admin:
        raise HTTPException(status_code=403, detail="Admins only")
    return user
