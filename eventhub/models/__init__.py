from eventhub.models.event import EVENT_CATEGORIES, Event, EventDraft, EventStatus
from eventhub.models.feedback import Feedback, FeedbackCreate
from eventhub.models.registration import Registration
from eventhub.models.user import User, UserRole

__all__ = [
    "EVENT_CATEGORIES",
    "Event",
    "EventDraft",
    "EventStatus",
    "Feedback",
    "FeedbackCreate",
    "Registration",
    "User",
    "UserRole",
]
