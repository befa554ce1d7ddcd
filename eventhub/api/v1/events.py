"""Event API endpoints.

Create and update take ``multipart/form-data`` with an optional ``image``
file; list responses carry the miniature as a data URL, detail responses
the compressed variant.
"""

from fastapi import APIRouter, Request, status

from eventhub.core.deps import CurrentUserRequired, DBSession, Images
from eventhub.schemas.activity import ParticipantAdd
from eventhub.schemas.event import EventDTO, EventSummaryDTO
from eventhub.schemas.user import UserSummaryDTO
from eventhub.services.event_service import EventService

router = APIRouter()


@router.post("", response_model=EventDTO, status_code=status.HTTP_201_CREATED)
async def create_event(
    request: Request,
    db: DBSession,
    images: Images,
    current_user: CurrentUserRequired,
) -> EventDTO:
    """
    Create an event.

    - **title**: Event title (required)
    - **description**: Event description
    - **companyId**: Hosting company (required)
    - **quality**: Cover image compression quality 0-100 (default 50)
    - **image**: Cover image file (jpg, jpeg, png, heic; max 5 MiB)
    """
    event_service = EventService(db, images)
    async with request.form() as form:
        event = await event_service.create_event(form)
    return event_service.to_dto(event)


@router.get("", response_model=list[EventSummaryDTO])
async def get_events(
    db: DBSession,
    images: Images,
    current_user: CurrentUserRequired,
) -> list[EventSummaryDTO]:
    """Get all events with miniature cover images."""
    return await EventService(db, images).get_all_dto()


@router.get("/{event_id}", response_model=EventDTO)
async def get_event(
    event_id: int,
    db: DBSession,
    images: Images,
    current_user: CurrentUserRequired,
) -> EventDTO:
    """Get one event with its activities."""
    event_service = EventService(db, images)
    return event_service.to_dto(await event_service.get_or_404(event_id))


@router.put("/{event_id}", response_model=EventDTO)
async def update_event(
    event_id: int,
    request: Request,
    db: DBSession,
    images: Images,
    current_user: CurrentUserRequired,
) -> EventDTO:
    """
    Update an event.

    Fields that are not sent are kept. Sending **image** replaces the cover
    image; the previous files are removed once the change is saved.
    """
    event_service = EventService(db, images)
    async with request.form() as form:
        event = await event_service.update_event(event_id, form)
    return event_service.to_dto(event)


@router.delete("/{event_id}")
async def delete_event(
    event_id: int,
    db: DBSession,
    images: Images,
    current_user: CurrentUserRequired,
) -> dict:
    """Delete an event, its activities and all their image files."""
    deleted = await EventService(db, images).delete_event(event_id)
    return {"status": "success", "deleted": deleted}


@router.delete("/{event_id}/image", response_model=EventDTO)
async def delete_event_image(
    event_id: int,
    db: DBSession,
    images: Images,
    current_user: CurrentUserRequired,
) -> EventDTO:
    """Remove the cover image of an event."""
    event_service = EventService(db, images)
    return event_service.to_dto(await event_service.remove_cover_image(event_id))


@router.get("/{event_id}/participants", response_model=list[UserSummaryDTO])
async def get_participants(
    event_id: int,
    db: DBSession,
    images: Images,
    current_user: CurrentUserRequired,
) -> list[UserSummaryDTO]:
    event = await EventService(db, images).get_or_404(event_id)
    return [UserSummaryDTO.model_validate(user) for user in event.participants]


@router.post("/{event_id}/participants", response_model=list[UserSummaryDTO])
async def add_participant(
    event_id: int,
    data: ParticipantAdd,
    db: DBSession,
    images: Images,
    current_user: CurrentUserRequired,
) -> list[UserSummaryDTO]:
    """
    Add a participant.

    - **userId**: User to add; must belong to the event's company
    """
    event = await EventService(db, images).add_participant(event_id, data.user_id)
    return [UserSummaryDTO.model_validate(user) for user in event.participants]


@router.delete("/{event_id}/participants/{user_id}", response_model=list[UserSummaryDTO])
async def remove_participant(
    event_id: int,
    user_id: int,
    db: DBSession,
    images: Images,
    current_user: CurrentUserRequired,
) -> list[UserSummaryDTO]:
    """Remove a participant from the event and from its activities."""
    event = await EventService(db, images).remove_participant(event_id, user_id)
    return [UserSummaryDTO.model_validate(user) for user in event.participants]
