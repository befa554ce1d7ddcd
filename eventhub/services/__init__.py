"""Service layer for business logic."""

from eventhub.services.activity_service import ActivityService
from eventhub.services.auth_service import AuthService
from eventhub.services.company_service import CompanyService
from eventhub.services.event_service import EventService
from eventhub.services.user_service import UserService

__all__ = [
    "ActivityService",
    "AuthService",
    "CompanyService",
    "EventService",
    "UserService",
]
