"""Shared test fixtures."""

from datetime import date, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session, SQLModel, create_engine
from sqlmodel.pool import StaticPool

from eventhub.core.database import create_db_and_tables
from eventhub.core.session_store import MemorySessionStore
from eventhub.main import app
from eventhub.models import Event, EventDraft, EventStatus, User, UserRole
from eventhub.routes.deps import get_store
from eventhub.services.events import EventRepository
from eventhub.services.feedback import FeedbackService
from eventhub.services.identity import IdentityService
from eventhub.services.registrations import RegistrationService
from eventhub.stores.sql_store import SQLModelStore


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture(name="engine")
def engine_fixture():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    create_db_and_tables(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Create a new database session for each test."""
    with Session(engine) as session:
        yield session


@pytest.fixture(name="store")
def store_fixture(engine) -> SQLModelStore:
    return SQLModelStore(engine)


@pytest.fixture(name="identity")
def identity_fixture(store) -> IdentityService:
    return IdentityService(store, admin_identifier="admin@example.com")


@pytest.fixture(name="events")
def events_fixture(store) -> EventRepository:
    return EventRepository(store)


@pytest.fixture(name="registrations")
def registrations_fixture(store, events) -> RegistrationService:
    return RegistrationService(store, events)


@pytest.fixture(name="feedback")
def feedback_fixture(store, events, registrations) -> FeedbackService:
    return FeedbackService(store, events, registrations)


@pytest.fixture(name="browser_session")
def browser_session_fixture() -> MemorySessionStore:
    return MemorySessionStore()


@pytest.fixture(name="alice")
def alice_fixture(store) -> User:
    user = User(id="alice@example.com", email="alice@example.com", name="Alice", role=UserRole.USER)
    store.put(user)
    return user


@pytest.fixture(name="bob")
def bob_fixture(store) -> User:
    user = User(id="bob@example.com", email="bob@example.com", name="Bob", role=UserRole.USER)
    store.put(user)
    return user


@pytest.fixture(name="admin")
def admin_fixture(store) -> User:
    user = User(id="admin@example.com", email="admin@example.com", name="Admin", role=UserRole.ADMIN)
    store.put(user)
    return user


def make_draft(**overrides) -> EventDraft:
    """Build a valid event draft, overriding any field."""
    fields = {
        "title": "Jazz Night",
        "date": date.today() + timedelta(days=7),
        "time": "8:00 PM",
        "location": "Blue Room",
        "description": "An evening of live jazz and drinks.",
        "category": "Music",
    }
    fields.update(overrides)
    return EventDraft(**fields)


def make_event(store, **overrides) -> Event:
    """Store an event directly, bypassing the repository."""
    fields = {
        "title": "Jazz Night",
        "date": date.today() + timedelta(days=7),
        "time": "8:00 PM",
        "location": "Blue Room",
        "description": "An evening of live jazz and drinks.",
        "category": "Music",
        "created_by": "alice@example.com",
    }
    fields.update(overrides)
    event = Event(**fields)
    store.put(event)
    return event


@pytest.fixture(name="open_event")
def open_event_fixture(store, alice) -> Event:
    """An active event with no seat limit."""
    return make_event(store)


@pytest.fixture(name="single_seat_event")
def single_seat_event_fixture(store, alice) -> Event:
    """An active event with exactly one seat."""
    return make_event(store, title="Pottery Class", category="Workshop", max_registrants=1)


@pytest.fixture(name="past_event")
def past_event_fixture(store, alice) -> Event:
    """An event that has concluded."""
    return make_event(
        store,
        title="Spring Meetup",
        category="Social",
        date=date.today() - timedelta(days=3),
        status=EventStatus.PAST,
    )


@pytest.fixture(name="make_client")
def make_client_fixture(store):
    """Factory for test clients sharing the test store; each has its own cookies."""
    app.dependency_overrides[get_store] = lambda: store
    clients = []

    def factory() -> TestClient:
        client = TestClient(app)
        clients.append(client)
        return client

    yield factory
    for client in clients:
        client.close()
    app.dependency_overrides.clear()


@pytest.fixture(name="client")
def client_fixture(make_client) -> TestClient:
    """Create a test client with the test store."""
    return make_client()
