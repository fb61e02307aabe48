#!/usr/bin/env python3
"""
One-off script to repair registered counts on events.

Each event's registered_count is compared against the number of
registration records for it, and drifted counters are rewritten.

Usage:
    python scripts/reconcile_counts.py [--dry-run]

Options:
    --dry-run    Show what would be fixed without making changes
"""
import asyncio
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from eventhub.core.database import create_db_and_tables, engine
from eventhub.core.errors import StoreUnavailableError
from eventhub.models import Event, Registration
from eventhub.services.events import EventRepository
from eventhub.services.registrations import RegistrationService
from eventhub.stores.sql_store import SQLModelStore


async def main(dry_run: bool = False):
    """Compare stored counters against registration rows and fix drift."""
    create_db_and_tables()
    store = SQLModelStore(engine)
    events = EventRepository(store)
    registrations = RegistrationService(store, events)

    try:
        all_events = store.query_all(Event)
        counts: dict[str, int] = {}
        for registration in store.query_all(Registration):
            counts[registration.event_id] = counts.get(registration.event_id, 0) + 1
    except StoreUnavailableError as e:
        print(f"Error: {e}")
        sys.exit(1)

    drifted = [e for e in all_events if e.registered_count != counts.get(e.id, 0)]
    orphaned = set(counts) - {e.id for e in all_events}

    print(f"Checked {len(all_events)} events, {len(drifted)} with drifted counters")
    for event in drifted:
        print(f"  {event.title} ({event.id}): stored {event.registered_count}, actual {counts.get(event.id, 0)}")
    if orphaned:
        print(f"{len(orphaned)} deleted event(s) still have registrations (kept)")

    if dry_run:
        print("--- DRY RUN: No changes made ---")
        return

    for event in drifted:
        await registrations.reconcile_count(event.id)

    print(f"\nComplete: {len(drifted)} counter(s) fixed")


if __name__ == "__main__":
    dry_run = "--dry-run" in sys.argv
    asyncio.run(main(dry_run=dry_run))
