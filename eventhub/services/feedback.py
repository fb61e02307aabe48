"""Feedback service: one rating per attendee, once the event is over.

Eligibility per (event, user) moves Unregistered -> Registered ->
Eligible (event is past) -> Submitted. submit only succeeds from Eligible,
and Submitted is terminal.
"""

import logging
from datetime import UTC, datetime
from enum import Enum

from eventhub.core.errors import (
    AlreadySubmittedError,
    EventNotConcludedError,
    EventNotFoundError,
    InvalidInputError,
    NotRegisteredError,
)
from eventhub.models import EventStatus, Feedback
from eventhub.services.events import EventRepository
from eventhub.services.registrations import RegistrationService
from eventhub.stores.interfaces import DocumentStore

logger = logging.getLogger(__name__)


class FeedbackEligibility(str, Enum):
    UNREGISTERED = "unregistered"
    REGISTERED = "registered"
    ELIGIBLE = "eligible"
    SUBMITTED = "submitted"


class FeedbackService:
    """Service for collecting post-event feedback."""

    def __init__(
        self,
        store: DocumentStore,
        events: EventRepository,
        registrations: RegistrationService,
    ) -> None:
        self._store = store
        self._events = events
        self._registrations = registrations

    async def submit(
        self,
        event_id: str,
        user_id: str,
        rating: int,
        comment: str | None = None,
    ) -> Feedback:
        """Store feedback for a past event the user registered for.

        Raises:
            InvalidInputError: If rating is not an integer from 1 to 5.
            NotRegisteredError: If the user never registered for the event.
            EventNotFoundError: If the event has since been deleted.
            EventNotConcludedError: If the event is not past yet.
            AlreadySubmittedError: If the user already left feedback.
        """
        if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
            raise InvalidInputError("Rating must be a whole number from 1 to 5")

        if not await self._registrations.is_registered(event_id, user_id):
            raise NotRegisteredError(event_id, user_id)

        event = await self._events.get_by_id(event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        if event.status != EventStatus.PAST:
            raise EventNotConcludedError(event_id)

        if await self.has_submitted(event_id, user_id):
            raise AlreadySubmittedError(event_id, user_id)

        feedback = Feedback(
            event_id=event_id,
            user_id=user_id,
            rating=rating,
            comment=comment or None,
            submitted_at=datetime.now(UTC),
        )
        # The unique (user_id, event_id) constraint settles concurrent submits
        if not self._store.create_if_absent(feedback):
            raise AlreadySubmittedError(event_id, user_id)

        logger.info(f"Feedback {feedback.id} ({rating}/5) stored for event {event_id} by {user_id}")
        return feedback

    async def has_submitted(self, event_id: str, user_id: str) -> bool:
        return bool(self._store.query_all(Feedback, event_id=event_id, user_id=user_id))

    async def list_for_event(self, event_id: str) -> list[Feedback]:
        return self._store.query_all(Feedback, event_id=event_id)

    async def average_rating(self, event_id: str) -> float | None:
        """Mean rating for an event, or None when nobody has rated it."""
        ratings = [feedback.rating for feedback in await self.list_for_event(event_id)]
        if not ratings:
            return None
        return round(sum(ratings) / len(ratings), 2)

    async def eligibility(self, event_id: str, user_id: str) -> FeedbackEligibility:
        if not await self._registrations.is_registered(event_id, user_id):
            return FeedbackEligibility.UNREGISTERED
        if await self.has_submitted(event_id, user_id):
            return FeedbackEligibility.SUBMITTED
        event = await self._events.get_by_id(event_id)
        if event is None or event.status != EventStatus.PAST:
            return FeedbackEligibility.REGISTERED
        return FeedbackEligibility.ELIGIBLE
