"""Activity schemas for API request/response."""

from pydantic import BaseModel, Field

from eventhub.schemas.user import UserSummaryDTO


class ActivityForm(BaseModel):
    """Multipart fields for creating an activity."""

    event_id: int = Field(..., alias="eventId")
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    quality: int | None = Field(None, ge=0, le=100)

    model_config = {"populate_by_name": True}


class ActivityUpdateForm(BaseModel):
    """Multipart fields for updating an activity; absent fields are kept."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    quality: int | None = Field(None, ge=0, le=100)


class ActivitySummaryDTO(BaseModel):
    """Activity as listed inside an event; ``coverImage`` is the miniature."""

    id: int
    title: str
    description: str | None = None
    event_id: int = Field(..., alias="eventId")
    cover_image_url: str | None = Field(None, alias="coverImageUrl")
    cover_image: str | None = Field(None, alias="coverImage")

    model_config = {"populate_by_name": True, "from_attributes": True}


class ActivityDTO(ActivitySummaryDTO):
    """Activity detail; ``coverImage`` is the compressed variant."""

    participants: list[UserSummaryDTO] = Field(default_factory=list)


class ParticipantAdd(BaseModel):
    """Body for adding a participant to an event or activity."""

    user_id: int = Field(..., alias="userId")

    model_config = {"populate_by_name": True}
