"""Pydantic schemas for API request/response validation."""

from eventhub.schemas.activity import (
    ActivityDTO,
    ActivityForm,
    ActivitySummaryDTO,
    ActivityUpdateForm,
    ParticipantAdd,
)
from eventhub.schemas.auth import ChangePassword, Token, UserLogin
from eventhub.schemas.company import CompanyAssign, CompanyCreate, CompanyDTO
from eventhub.schemas.event import EventDTO, EventForm, EventSummaryDTO, EventUpdateForm
from eventhub.schemas.user import UserCreate, UserDTO, UserSummaryDTO, UserUpdateForm

__all__ = [
    # Activity
    "ActivityDTO",
    "ActivityForm",
    "ActivitySummaryDTO",
    "ActivityUpdateForm",
    "ParticipantAdd",
    # Auth
    "ChangePassword",
    "Token",
    "UserLogin",
    # Company
    "CompanyAssign",
    "CompanyCreate",
    "CompanyDTO",
    # Event
    "EventDTO",
    "EventForm",
    "EventSummaryDTO",
    "EventUpdateForm",
    # User
    "UserCreate",
    "UserDTO",
    "UserSummaryDTO",
    "UserUpdateForm",
]
