"""Filtering and ordering of a loaded event list.

These run over the cached collection from EventRepository.list_all, the
way discovery and admin views narrow it down for display.
"""

from datetime import date

from eventhub.models import Event, EventStatus

HIDDEN_FROM_DISCOVERY = (EventStatus.PAST, EventStatus.CANCELLED)


def discover(
    events: list[Event],
    search: str | None = None,
    category: str | None = None,
    on_date: date | None = None,
) -> list[Event]:
    """Upcoming events matching the filters, soonest first.

    search matches title or description, ignoring case. Past and cancelled
    events are never shown.
    """
    term = (search or "").lower()
    matches = [
        event
        for event in events
        if event.status not in HIDDEN_FROM_DISCOVERY
        and (term in event.title.lower() or term in event.description.lower())
        and (not category or event.category == category)
        and (on_date is None or event.date == on_date)
    ]
    return sorted(matches, key=lambda event: event.date)


def admin_view(
    events: list[Event],
    search: str | None = None,
    status: EventStatus | None = None,
) -> list[Event]:
    """Every event matching the filters, most recent date first.

    search matches the title (ignoring case) or any part of the id.
    """
    term = search or ""
    matches = [
        event
        for event in events
        if (term.lower() in event.title.lower() or term in event.id)
        and (status is None or event.status == status)
    ]
    return sorted(matches, key=lambda event: event.date, reverse=True)
