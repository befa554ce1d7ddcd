"""Activity API endpoints."""

from fastapi import APIRouter, Request, status

from eventhub.core.deps import CurrentUserRequired, DBSession, Images
from eventhub.schemas.activity import ActivityDTO, ParticipantAdd
from eventhub.services.activity_service import ActivityService

router = APIRouter()


@router.post("", response_model=ActivityDTO, status_code=status.HTTP_201_CREATED)
async def create_activity(
    request: Request,
    db: DBSession,
    images: Images,
    current_user: CurrentUserRequired,
) -> ActivityDTO:
    """
    Create an activity inside an event.

    - **eventId**: Parent event (required)
    - **title**: Activity title (required)
    - **description**: Activity description
    - **quality**: Cover image compression quality 0-100
    - **image**: Cover image file
    """
    activity_service = ActivityService(db, images)
    async with request.form() as form:
        activity = await activity_service.create_activity(form)
    return activity_service.to_dto(activity)


@router.get("/{activity_id}", response_model=ActivityDTO)
async def get_activity(
    activity_id: int,
    db: DBSession,
    images: Images,
    current_user: CurrentUserRequired,
) -> ActivityDTO:
    activity_service = ActivityService(db, images)
    return activity_service.to_dto(await activity_service.get_or_404(activity_id))


@router.put("/{activity_id}", response_model=ActivityDTO)
async def update_activity(
    activity_id: int,
    request: Request,
    db: DBSession,
    images: Images,
    current_user: CurrentUserRequired,
) -> ActivityDTO:
    """Update an activity; sending **image** replaces the cover image."""
    activity_service = ActivityService(db, images)
    async with request.form() as form:
        activity = await activity_service.update_activity(activity_id, form)
    return activity_service.to_dto(activity)


@router.delete("/{activity_id}")
async def delete_activity(
    activity_id: int,
    db: DBSession,
    images: Images,
    current_user: CurrentUserRequired,
) -> dict:
    deleted = await ActivityService(db, images).delete_activity(activity_id)
    return {"status": "success", "deleted": deleted}


@router.delete("/{activity_id}/image", response_model=ActivityDTO)
async def delete_activity_image(
    activity_id: int,
    db: DBSession,
    images: Images,
    current_user: CurrentUserRequired,
) -> ActivityDTO:
    activity_service = ActivityService(db, images)
    return activity_service.to_dto(await activity_service.remove_cover_image(activity_id))


@router.post("/{activity_id}/participants", response_model=ActivityDTO)
async def add_participant(
    activity_id: int,
    data: ParticipantAdd,
    db: DBSession,
    images: Images,
    current_user: CurrentUserRequired,
) -> ActivityDTO:
    """
    Add a participant.

    - **userId**: User to add; must participate in the parent event
    """
    activity_service = ActivityService(db, images)
    return activity_service.to_dto(await activity_service.add_participant(activity_id, data.user_id))


@router.delete("/{activity_id}/participants/{user_id}", response_model=ActivityDTO)
async def remove_participant(
    activity_id: int,
    user_id: int,
    db: DBSession,
    images: Images,
    current_user: CurrentUserRequired,
) -> ActivityDTO:
    activity_service = ActivityService(db, images)
    return activity_service.to_dto(
        await activity_service.remove_participant(activity_id, user_id)
    )
