"""Database models."""

from eventhub.models.activity import Activity
from eventhub.models.associations import activity_participants, event_participants
from eventhub.models.company import Company
from eventhub.models.event import Event
from eventhub.models.user import User

__all__ = [
    "Activity",
    "Company",
    "Event",
    "User",
    "activity_participants",
    "event_participants",
]
