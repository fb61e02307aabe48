"""Tests for the event repository and list helpers."""

from datetime import date, timedelta

import pytest

from conftest import make_draft, make_event
from eventhub.core.errors import EventNotFoundError, PermissionDeniedError
from eventhub.models import Event, EventStatus, Registration, User
from eventhub.services import listing
from eventhub.services.events import EventRepository
from eventhub.stores.interfaces import GuardedIncrement
from eventhub.stores.sql_store import SQLModelStore

pytestmark = pytest.mark.anyio


def commit_registration(store: SQLModelStore, event_id: str, user_id: str) -> None:
    """Commit a registration the way the registration service does."""
    seat = GuardedIncrement(model=Event, key=event_id, column="registered_count")
    assert store.atomically([seat], [Registration(user_id=user_id, event_id=event_id)]) is True


class TestCreateAndRead:
    async def test_create_assigns_id_and_defaults(self, events: EventRepository, store: SQLModelStore):
        event = await events.create(make_draft(max_registrants=10), "alice@example.com")

        assert event.id
        assert event.registered_count == 0
        assert event.status == EventStatus.ACTIVE
        assert event.created_by == "alice@example.com"
        assert store.get(Event, event.id).title == "Jazz Night"

    async def test_create_with_status_override(self, events: EventRepository):
        event = await events.create(make_draft(status=EventStatus.FEATURED), "admin@example.com")
        assert event.status == EventStatus.FEATURED

    async def test_get_by_id_missing(self, events: EventRepository):
        assert await events.get_by_id("missing") is None

    async def test_require_missing_raises(self, events: EventRepository):
        with pytest.raises(EventNotFoundError):
            await events.require("missing")

    async def test_list_created_by(self, events: EventRepository):
        await events.create(make_draft(title="Mine"), "alice@example.com")
        await events.create(make_draft(title="Theirs"), "bob@example.com")

        mine = await events.list_created_by("alice@example.com")
        assert [e.title for e in mine] == ["Mine"]


class TestListAllCache:
    async def test_loads_once(self, events: EventRepository, store: SQLModelStore):
        make_event(store, title="Stored Before")
        assert len(await events.list_all()) == 1

        # Written behind the repository's back: invisible until refresh
        make_event(store, title="Stored Behind")
        assert len(await events.list_all()) == 1
        assert len(await events.list_all(refresh=True)) == 2

    async def test_writes_keep_cache_in_step(self, events: EventRepository):
        await events.list_all()
        created = await events.create(make_draft(), "alice@example.com")
        assert [e.id for e in await events.list_all()] == [created.id]

        created.title = "Renamed"
        await events.update(created)
        assert (await events.list_all())[0].title == "Renamed"

        await events.delete(created.id)
        assert await events.list_all() == []


class TestUpdateAndDelete:
    async def test_update_is_full_replace(self, events: EventRepository, store: SQLModelStore):
        event = await events.create(make_draft(), "alice@example.com")
        replacement = Event(
            id=event.id,
            title="Replaced",
            date=event.date,
            time="9:00 PM",
            location="Elsewhere",
            description="A completely new description.",
            category="Social",
            created_by=event.created_by,
        )
        await events.update(replacement)

        stored = store.get(Event, event.id)
        assert stored.title == "Replaced"
        assert stored.max_registrants is None

    async def test_last_writer_wins(self, events: EventRepository, store: SQLModelStore):
        event = await events.create(make_draft(), "alice@example.com")
        first = store.get(Event, event.id)
        second = store.get(Event, event.id)

        first.title = "First Edit"
        second.location = "Second Edit Hall"
        await events.update(first)
        await events.update(second)

        stored = store.get(Event, event.id)
        assert stored.title == "Jazz Night"
        assert stored.location == "Second Edit Hall"

    async def test_update_keeps_stored_counter(self, events: EventRepository, store: SQLModelStore):
        event = make_event(store, registered_count=2)
        stale = store.get(Event, event.id)
        stale.registered_count = 0
        stale.title = "Renamed"

        stored = await events.update(stale)

        assert stored.title == "Renamed"
        assert stored.registered_count == 2
        assert store.get(Event, event.id).registered_count == 2

    async def test_update_missing_raises(self, events: EventRepository, store: SQLModelStore):
        event = make_event(store)
        store.delete(Event, event.id)

        with pytest.raises(EventNotFoundError):
            await events.update(event)
        assert store.get(Event, event.id) is None

    async def test_delete_keeps_registrations(self, events: EventRepository, store: SQLModelStore):
        """Deleting an event leaves its registrations orphaned on purpose."""
        event = await events.create(make_draft(), "alice@example.com")
        store.put(Registration(user_id="bob@example.com", event_id=event.id))

        await events.delete(event.id)

        assert await events.get_by_id(event.id) is None
        assert len(store.query_all(Registration, event_id=event.id)) == 1


class TestOwnership:
    async def test_creator_can_edit_but_not_change_status(self, events: EventRepository, alice: User):
        event = await events.create(make_draft(), alice.id)

        edited = await events.edit(
            event.id, make_draft(title="Jazz Night II", status=EventStatus.FEATURED), alice
        )

        assert edited.title == "Jazz Night II"
        assert edited.status == EventStatus.ACTIVE
        assert edited.created_by == alice.id

    async def test_admin_can_change_status(self, events: EventRepository, alice: User, admin: User):
        event = await events.create(make_draft(), alice.id)

        edited = await events.edit(event.id, make_draft(status=EventStatus.CANCELLED), admin)

        assert edited.status == EventStatus.CANCELLED
        assert edited.created_by == alice.id

    async def test_edit_preserves_counter(self, events: EventRepository, store: SQLModelStore, alice: User):
        event = make_event(store, registered_count=3, max_registrants=10)

        edited = await events.edit(event.id, make_draft(max_registrants=20), alice)

        assert edited.registered_count == 3
        assert store.get(Event, event.id).max_registrants == 20

    async def test_edit_racing_registration_keeps_counter(self, store: SQLModelStore, alice: User):
        """A registration committed between edit's read and write is kept."""
        event = make_event(store, max_registrants=10)

        class RacingStore(SQLModelStore):
            def update_fields(self, model, key, values, conditions=()):
                commit_registration(self, key, "rival@example.com")
                return super().update_fields(model, key, values, conditions)

        racing = RacingStore(store._engine)
        edited = await EventRepository(racing).edit(event.id, make_draft(title="Renamed"), alice)

        assert edited.title == "Renamed"
        assert edited.registered_count == 1
        stored = store.get(Event, event.id)
        assert stored.registered_count == len(store.query_all(Registration, event_id=event.id)) == 1

    async def test_stranger_cannot_edit(self, events: EventRepository, alice: User, bob: User):
        event = await events.create(make_draft(), alice.id)
        with pytest.raises(PermissionDeniedError):
            await events.edit(event.id, make_draft(title="Hijacked"), bob)

    async def test_stranger_cannot_remove(self, events: EventRepository, alice: User, bob: User):
        event = await events.create(make_draft(), alice.id)
        with pytest.raises(PermissionDeniedError):
            await events.remove(event.id, bob)
        assert await events.get_by_id(event.id) is not None

    async def test_admin_can_remove(self, events: EventRepository, alice: User, admin: User):
        event = await events.create(make_draft(), alice.id)
        await events.remove(event.id, admin)
        assert await events.get_by_id(event.id) is None


class TestMarkPast:
    async def test_marks_only_open_events_before_today(self, events: EventRepository, store: SQLModelStore):
        yesterday = date.today() - timedelta(days=1)
        old_active = make_event(store, date=yesterday)
        old_featured = make_event(store, date=yesterday, status=EventStatus.FEATURED)
        old_cancelled = make_event(store, date=yesterday, status=EventStatus.CANCELLED)
        today = make_event(store, date=date.today())

        concluded = await events.mark_past(date.today())

        assert {e.id for e in concluded} == {old_active.id, old_featured.id}
        assert store.get(Event, old_cancelled.id).status == EventStatus.CANCELLED
        assert store.get(Event, today.id).status == EventStatus.ACTIVE

    async def test_sweep_keeps_concurrent_writes(self, store: SQLModelStore):
        """Registrations and cancellations landing mid-sweep are not undone."""
        yesterday = date.today() - timedelta(days=1)
        busy = make_event(store, date=yesterday)
        cancelled_meanwhile = make_event(store, date=yesterday)

        class RacingStore(SQLModelStore):
            def update_fields(self, model, key, values, conditions=()):
                if key == busy.id:
                    commit_registration(self, key, "rival@example.com")
                elif key == cancelled_meanwhile.id:
                    super().update_fields(Event, key, {"status": EventStatus.CANCELLED})
                return super().update_fields(model, key, values, conditions)

        concluded = await EventRepository(RacingStore(store._engine)).mark_past(date.today())

        assert [e.id for e in concluded] == [busy.id]
        assert store.get(Event, busy.id).status == EventStatus.PAST
        assert store.get(Event, busy.id).registered_count == 1
        assert store.get(Event, cancelled_meanwhile.id).status == EventStatus.CANCELLED


class TestListing:
    def _events(self, store):
        base = date.today()
        return [
            make_event(store, title="Rock Concert", category="Music", date=base + timedelta(days=5)),
            make_event(store, title="Python Workshop", category="Tech", date=base + timedelta(days=1),
                       description="Learn decorators and generators."),
            make_event(store, title="Old Gala", category="Social", date=base - timedelta(days=10),
                       status=EventStatus.PAST),
            make_event(store, title="Cancelled Run", category="Sports", date=base + timedelta(days=2),
                       status=EventStatus.CANCELLED),
            make_event(store, title="Featured Expo", category="Tech", date=base + timedelta(days=3),
                       status=EventStatus.FEATURED),
        ]

    def test_discover_hides_past_and_cancelled_sorted_ascending(self, store):
        found = listing.discover(self._events(store))
        assert [e.title for e in found] == ["Python Workshop", "Featured Expo", "Rock Concert"]

    def test_discover_search_matches_description(self, store):
        found = listing.discover(self._events(store), search="GENERATORS")
        assert [e.title for e in found] == ["Python Workshop"]

    def test_discover_category_and_date(self, store):
        events = self._events(store)
        assert [e.title for e in listing.discover(events, category="Tech")] == [
            "Python Workshop",
            "Featured Expo",
        ]
        on_date = date.today() + timedelta(days=5)
        assert [e.title for e in listing.discover(events, on_date=on_date)] == ["Rock Concert"]

    def test_admin_view_sorted_descending_with_status(self, store):
        events = self._events(store)
        assert [e.title for e in listing.admin_view(events)] == [
            "Rock Concert",
            "Featured Expo",
            "Cancelled Run",
            "Python Workshop",
            "Old Gala",
        ]
        assert [e.title for e in listing.admin_view(events, status=EventStatus.PAST)] == ["Old Gala"]

    def test_admin_view_search_by_id(self, store):
        events = self._events(store)
        target = events[3]
        assert listing.admin_view(events, search=target.id[:12]) == [target]
