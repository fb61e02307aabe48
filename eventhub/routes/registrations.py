"""Registration routes, plus the logged-in user's own listings."""
from fastapi import APIRouter, Depends, HTTPException

from eventhub.models import Registration, User
from eventhub.routes.deps import Services, get_services, require_admin, require_user

router = APIRouter(tags=["registrations"])


@router.post("/events/{event_id}/register")
async def register_for_event(
    event_id: str,
    services: Services = Depends(get_services),
    user: User = Depends(require_user),
):
    """
    Register the logged-in user for an event.

    Returns 404 for unknown events and 409 when the event is closed, full,
    or the user is already registered.
    """
    await services.events.require(event_id)
    if not await services.registrations.register(event_id, user.id):
        raise HTTPException(
            status_code=409,
            detail="Could not register for the event. It might be full, closed, or you are already registered.",
        )
    event = await services.events.require(event_id)
    return {"registered": True, "registered_count": event.registered_count}


@router.get("/events/{event_id}/registration")
async def registration_status(
    event_id: str,
    services: Services = Depends(get_services),
    user: User = Depends(require_user),
):
    """Whether the logged-in user is registered for the event."""
    return {"registered": await services.registrations.is_registered(event_id, user.id)}


@router.get("/events/{event_id}/registrations")
async def event_registrations(
    event_id: str,
    services: Services = Depends(get_services),
    admin: User = Depends(require_admin),
) -> list[Registration]:
    """All registrations for an event."""
    return await services.registrations.list_for_event(event_id)


@router.get("/me/registrations")
async def my_registrations(
    services: Services = Depends(get_services),
    user: User = Depends(require_user),
) -> list[Registration]:
    """The logged-in user's registrations."""
    return await services.registrations.list_for_user(user.id)


@router.get("/me/events")
async def my_events(
    services: Services = Depends(get_services),
    user: User = Depends(require_user),
):
    """
    Events on the logged-in user's profile.

    Returns the events they are attending and the events they created.
    Registrations for deleted events are left out.
    """
    return {
        "attending": await services.registrations.registered_events(user.id),
        "created": await services.events.list_created_by(user.id),
    }
