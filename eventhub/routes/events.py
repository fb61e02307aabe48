"""Event routes for discovering, creating and managing events."""
from datetime import date

from fastapi import APIRouter, Depends, Response

from eventhub.models import Event, EventDraft, EventStatus, User
from eventhub.routes.deps import Services, get_services, require_admin, require_user
from eventhub.services import listing

router = APIRouter(prefix="/events", tags=["events"])


@router.get("")
async def discover_events(
    search: str | None = None,
    category: str | None = None,
    on_date: date | None = None,
    refresh: bool = False,
    services: Services = Depends(get_services),
) -> list[Event]:
    """
    List upcoming events.

    Filters by a search term over title and description, an exact category
    and an exact date. Past and cancelled events are hidden. Sorted by date,
    soonest first.
    """
    events = await services.events.list_all(refresh=refresh)
    return listing.discover(events, search=search, category=category, on_date=on_date)


@router.get("/admin")
async def admin_events(
    search: str | None = None,
    status: EventStatus | None = None,
    services: Services = Depends(get_services),
    admin: User = Depends(require_admin),
) -> list[Event]:
    """
    List all events for moderation.

    Matches the search term against title or id and optionally filters by
    status. Sorted by date, most recent first.
    """
    events = await services.events.list_all(refresh=True)
    return listing.admin_view(events, search=search, status=status)


@router.post("", status_code=201)
async def create_event(
    draft: EventDraft,
    services: Services = Depends(get_services),
    user: User = Depends(require_user),
) -> Event:
    """Create an event owned by the logged-in user. Only admins may pick a status."""
    if not user.is_admin:
        draft.status = None
    return await services.events.create(draft, user.id)


@router.get("/{event_id}")
async def event_detail(event_id: str, services: Services = Depends(get_services)) -> Event:
    """Return a single event, or 404."""
    return await services.events.require(event_id)


@router.put("/{event_id}")
async def edit_event(
    event_id: str,
    draft: EventDraft,
    services: Services = Depends(get_services),
    user: User = Depends(require_user),
) -> Event:
    """
    Replace an event's details.

    Allowed for the creator and admins. Only admins can change the status.
    Concurrent edits are last-writer-wins.
    """
    return await services.events.edit(event_id, draft, user)


@router.delete("/{event_id}", status_code=204)
async def delete_event(
    event_id: str,
    services: Services = Depends(get_services),
    user: User = Depends(require_user),
):
    """
    Delete an event.

    Allowed for the creator and admins. Registrations and feedback for the
    event are kept.
    """
    await services.events.remove(event_id, user)
    return Response(status_code=204)


@router.post("/{event_id}/reconcile")
async def reconcile_event(
    event_id: str,
    services: Services = Depends(get_services),
    admin: User = Depends(require_admin),
):
    """Recompute the registered count from the registration records."""
    count = await services.registrations.reconcile_count(event_id)
    return {"event_id": event_id, "registered_count": count}
