"""
Model registry.

Import all models here to ensure they are registered with SQLAlchemy metadata
before ``Base.metadata.create_all`` runs.
"""

from eventhub.db.base import Base
from eventhub.models.activity import Activity
from eventhub.models.associations import activity_participants, event_participants
from eventhub.models.company import Company
from eventhub.models.event import Event
from eventhub.models.user import User

__all__ = [
    "Base",
    "Activity",
    "Company",
    "Event",
    "User",
    "activity_participants",
    "event_participants",
]
