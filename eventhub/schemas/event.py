"""Event schemas for API request/response."""

from pydantic import BaseModel, Field

from eventhub.schemas.activity import ActivitySummaryDTO
from eventhub.schemas.user import UserSummaryDTO


class EventForm(BaseModel):
    """Multipart fields for creating an event."""

    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    company_id: int = Field(..., alias="companyId")
    quality: int | None = Field(None, ge=0, le=100)

    model_config = {"populate_by_name": True}


class EventUpdateForm(BaseModel):
    """Multipart fields for updating an event; absent fields are kept."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    quality: int | None = Field(None, ge=0, le=100)


class EventSummaryDTO(BaseModel):
    """Event list item; ``coverImage`` is the miniature data URL."""

    id: int
    title: str
    description: str | None = None
    company_id: int = Field(..., alias="companyId")
    cover_image_url: str | None = Field(None, alias="coverImageUrl")
    cover_image: str | None = Field(None, alias="coverImage")

    model_config = {"populate_by_name": True, "from_attributes": True}


class EventDTO(EventSummaryDTO):
    """Event detail; ``coverImage`` is the compressed data URL."""

    activities: list[ActivitySummaryDTO] = Field(default_factory=list)
    participants: list[UserSummaryDTO] = Field(default_factory=list)
