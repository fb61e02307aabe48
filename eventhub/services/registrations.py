"""Registration service: one seat per user per event, within capacity.

The registration row and the event's registered_count are written in one
store transaction. The counter bump is guarded on the event still being
open and below capacity, and the row insert is guarded by the unique
(user_id, event_id) constraint, so two users racing for the last seat
cannot both succeed and a failed attempt leaves nothing behind.
"""

import logging
from datetime import UTC, datetime

from sqlalchemy import func, or_, select

from eventhub.core.errors import EventNotFoundError
from eventhub.models import Event, Registration
from eventhub.models.event import OPEN_STATUSES
from eventhub.services.events import EventRepository
from eventhub.stores.interfaces import DocumentStore, GuardedIncrement

logger = logging.getLogger(__name__)


class RegistrationService:
    """Service for registering users for events."""

    def __init__(self, store: DocumentStore, events: EventRepository) -> None:
        self._store = store
        self._events = events

    async def register(self, event_id: str, user_id: str) -> bool:
        """Register user_id for event_id.

        Returns False without writing anything when the event is missing,
        not open, full, or the user is already registered.
        """
        event = await self._events.get_by_id(event_id)
        if event is None:
            logger.info(f"Registration refused: event {event_id} not found")
            return False
        if not event.is_open:
            logger.info(f"Registration refused: event {event_id} is {event.status.value}")
            return False
        if event.is_full:
            logger.info(f"Registration refused: event {event_id} is full")
            return False
        if await self.is_registered(event_id, user_id):
            logger.info(f"Registration refused: {user_id} already registered for {event_id}")
            return False

        # Re-checked inside the transaction; the reads above may be stale
        seat = GuardedIncrement(
            model=Event,
            key=event_id,
            column="registered_count",
            conditions=(
                Event.status.in_(OPEN_STATUSES),
                or_(
                    Event.max_registrants.is_(None),
                    Event.registered_count < Event.max_registrants,
                ),
            ),
        )
        registration = Registration(
            user_id=user_id,
            event_id=event_id,
            registration_date=datetime.now(UTC),
        )
        if not self._store.atomically(guards=[seat], inserts=[registration]):
            logger.info(f"Registration for {user_id} on {event_id} lost a race, nothing written")
            return False

        await self._events.get_by_id(event_id)  # refresh cached counter
        logger.info(f"User {user_id} registered for event {event_id}")
        return True

    async def is_registered(self, event_id: str, user_id: str) -> bool:
        return bool(self._store.query_all(Registration, event_id=event_id, user_id=user_id))

    async def list_for_user(self, user_id: str) -> list[Registration]:
        return self._store.query_all(Registration, user_id=user_id)

    async def list_for_event(self, event_id: str) -> list[Registration]:
        return self._store.query_all(Registration, event_id=event_id)

    async def registered_events(self, user_id: str) -> list[Event]:
        """Return the events a user is registered for.

        Registrations whose event has been deleted are skipped.
        """
        events = []
        for registration in await self.list_for_user(user_id):
            event = await self._events.get_by_id(registration.event_id)
            if event is not None:
                events.append(event)
        return events

    async def reconcile_count(self, event_id: str) -> int:
        """Reset an event's registered_count to its number of registrations.

        The count is taken and written in one statement, so a registration
        committing meanwhile is never overwritten. Returns the new count.
        """
        before = await self._events.require(event_id)
        live_rows = (
            select(func.count())
            .select_from(Registration)
            .where(Registration.event_id == event_id)
            .scalar_subquery()
        )
        if not self._store.update_fields(Event, event_id, {"registered_count": live_rows}):
            raise EventNotFoundError(event_id)

        event = await self._events.require(event_id)
        if before.registered_count != event.registered_count:
            logger.warning(
                f"Event {event_id} counter drifted: stored {before.registered_count}, "
                f"actual {event.registered_count}"
            )
        return event.registered_count
