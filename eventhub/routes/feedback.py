"""Feedback routes for rating past events."""
from fastapi import APIRouter, Depends

from eventhub.models import Feedback, FeedbackCreate, User
from eventhub.routes.deps import Services, get_services, require_user

router = APIRouter(prefix="/events/{event_id}/feedback", tags=["feedback"])


@router.post("", status_code=201)
async def submit_feedback(
    event_id: str,
    body: FeedbackCreate,
    services: Services = Depends(get_services),
    user: User = Depends(require_user),
) -> Feedback:
    """
    Rate a past event.

    Only registered attendees can rate, only once, and only after the event
    has been marked past.
    """
    return await services.feedback.submit(event_id, user.id, body.rating, body.comment)


@router.get("")
async def event_feedback(event_id: str, services: Services = Depends(get_services)):
    """All feedback for an event with its average rating."""
    entries = await services.feedback.list_for_event(event_id)
    return {
        "event_id": event_id,
        "count": len(entries),
        "average_rating": await services.feedback.average_rating(event_id),
        "feedback": entries,
    }


@router.get("/eligibility")
async def feedback_eligibility(
    event_id: str,
    services: Services = Depends(get_services),
    user: User = Depends(require_user),
):
    """Where the logged-in user stands: unregistered, registered, eligible or submitted."""
    state = await services.feedback.eligibility(event_id, user.id)
    return {"event_id": event_id, "state": state.value}
