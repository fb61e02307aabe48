"""Event repository: CRUD and derived queries over events.

Updates are full-record replaces with last-writer-wins semantics; there is
no optimistic locking, so concurrent edits silently overwrite each other.
The registration counter is the exception: only the registration
transaction and reconcile_count write it, so an update never rewinds it.
Deleting an event leaves its registrations and feedback in place.

The full collection is cached in memory after the first list_all call and
kept in step with writes made through this repository. Writes made by other
processes show up on the next list_all(refresh=True).
"""

import logging
from datetime import UTC, date, datetime

from eventhub.core.errors import EventNotFoundError, PermissionDeniedError
from eventhub.models import Event, EventDraft, EventStatus, User
from eventhub.models.event import OPEN_STATUSES
from eventhub.stores.interfaces import DocumentStore

logger = logging.getLogger(__name__)

# Owned by the registration transaction or fixed at creation
_NOT_REPLACED = {"id", "registered_count", "created_at"}


class EventRepository:
    """Repository for event records."""

    def __init__(self, store: DocumentStore) -> None:
        self._store = store
        self._cache: dict[str, Event] | None = None

    def _remember(self, event: Event) -> None:
        if self._cache is not None:
            self._cache[event.id] = event

    def _forget(self, event_id: str) -> None:
        if self._cache is not None:
            self._cache.pop(event_id, None)

    async def create(self, draft: EventDraft, creator_id: str) -> Event:
        """Store a new event owned by creator_id with no registrations."""
        event = Event(
            **draft.model_dump(exclude={"status"}),
            status=draft.status or EventStatus.ACTIVE,
            registered_count=0,
            created_by=creator_id,
        )
        self._store.put(event)
        self._remember(event)
        logger.info(f"Event {event.id} '{event.title}' created by {creator_id}")
        return event

    async def get_by_id(self, event_id: str) -> Event | None:
        event = self._store.get(Event, event_id)
        if event is None:
            self._forget(event_id)
        else:
            self._remember(event)
        return event

    async def require(self, event_id: str) -> Event:
        """Return the event or raise EventNotFoundError."""
        event = await self.get_by_id(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    async def update(self, event: Event) -> Event:
        """Replace the stored event with the given full record.

        The stored registered_count is kept. Returns the record as stored.
        """
        event.updated_at = datetime.now(UTC)
        values = event.model_dump(exclude=_NOT_REPLACED)
        if not self._store.update_fields(Event, event.id, values):
            self._forget(event.id)
            raise EventNotFoundError(event.id)
        logger.info(f"Event {event.id} updated")
        return await self.require(event.id)

    async def delete(self, event_id: str) -> None:
        """Remove the event. Its registrations and feedback are kept."""
        self._store.delete(Event, event_id)
        self._forget(event_id)
        logger.info(f"Event {event_id} deleted")

    async def list_all(self, refresh: bool = False) -> list[Event]:
        """Return every event, loading from the store once unless refreshed."""
        if self._cache is None or refresh:
            events = self._store.query_all(Event)
            self._cache = {event.id: event for event in events}
            logger.debug(f"Loaded {len(events)} events into cache")
        return list(self._cache.values())

    async def list_created_by(self, user_id: str) -> list[Event]:
        return self._store.query_all(Event, created_by=user_id)

    def ensure_can_modify(self, event: Event, actor: User) -> None:
        """Only the creator or an admin may edit or delete an event."""
        if actor.is_admin or event.created_by == actor.id:
            return
        logger.warning(f"User {actor.id} denied changes to event {event.id}")
        raise PermissionDeniedError("You do not have permission to change this event")

    async def edit(self, event_id: str, draft: EventDraft, actor: User) -> Event:
        """Replace the editable fields of an event on behalf of actor.

        The status only changes when an admin edits. Identity and ownership are
        carried over from the stored record, and the registration counter is
        left to the store.
        """
        current = await self.require(event_id)
        self.ensure_can_modify(current, actor)

        status = current.status
        if actor.is_admin and draft.status is not None:
            status = draft.status

        replacement = Event(
            **draft.model_dump(exclude={"status"}),
            id=current.id,
            status=status,
            created_by=current.created_by,
            created_at=current.created_at,
        )
        return await self.update(replacement)

    async def remove(self, event_id: str, actor: User) -> None:
        """Delete an event on behalf of actor."""
        current = await self.require(event_id)
        self.ensure_can_modify(current, actor)
        await self.delete(event_id)

    async def mark_past(self, today: date) -> list[Event]:
        """Move open events dated before today to the past status.

        Cancelled events keep their status, including ones cancelled while
        the sweep runs.
        """
        concluded = []
        for event in self._store.query_all(Event):
            if not (event.is_open and event.date < today):
                continue
            changed = self._store.update_fields(
                Event,
                event.id,
                {"status": EventStatus.PAST, "updated_at": datetime.now(UTC)},
                conditions=(Event.status.in_(OPEN_STATUSES),),
            )
            stored = await self.get_by_id(event.id) if changed else None
            if stored is not None:
                concluded.append(stored)
        if concluded:
            logger.info(f"Marked {len(concluded)} events as past")
        return concluded
