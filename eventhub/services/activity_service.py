"""Activity service."""

from loguru import logger
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from starlette.datastructures import FormData

from eventhub.core.exceptions import NotFoundError, ValidationError
from eventhub.images import ImageIngestion, ImageStore, ImageVariant
from eventhub.models.activity import Activity
from eventhub.models.event import Event
from eventhub.models.user import User
from eventhub.schemas.activity import ActivityDTO, ActivityForm, ActivityUpdateForm
from eventhub.services.base_service import BaseService

ACTIVITY_IMAGE_PREFIX = "activityImage"


class ActivityService(BaseService[Activity]):
    load_options = (selectinload(Activity.participants),)

    def __init__(self, db: AsyncSession, images: ImageStore):
        super().__init__(db, Activity)
        self.images = images

    async def create_activity(self, form: FormData) -> Activity:
        async with ImageIngestion(self.images, ACTIVITY_IMAGE_PREFIX) as ingestion:
            data = await ingestion.receive(form, ActivityForm)
            if await self.db.get(Event, data.event_id) is None:
                raise NotFoundError(f"Event {data.event_id} not found")
            await ingestion.process(data.quality)
            activity = Activity(
                title=data.title,
                description=data.description,
                event_id=data.event_id,
            )
            activity = await ingestion.commit(activity, self.persist, self.reload)

        logger.info(f"Activity {activity.id} created for event {activity.event_id}")
        return activity

    async def update_activity(self, activity_id: int, form: FormData) -> Activity:
        async with ImageIngestion(self.images, ACTIVITY_IMAGE_PREFIX) as ingestion:
            data = await ingestion.receive(form, ActivityUpdateForm)
            activity = await self.get_or_404(activity_id)
            await ingestion.process(data.quality)
            for name, value in data.model_dump(exclude_unset=True, exclude={"quality"}).items():
                setattr(activity, name, value)
            return await ingestion.commit(activity, self.persist, self.reload)

    async def remove_cover_image(self, activity_id: int) -> Activity:
        activity = await self.get_or_404(activity_id)
        previous = activity.cover_image_url
        if not previous:
            return activity
        activity.cover_image_url = None
        activity = await self.save(activity)
        self.images.remove_all(previous)
        return activity

    async def delete_activity(self, activity_id: int) -> bool:
        """Delete the row first, then its image files."""
        activity = await self.get_by_id(activity_id)
        if activity is None:
            return False
        image = activity.cover_image_url
        await self.delete(activity)
        self.images.remove_all(image)
        return True

    async def add_participant(self, activity_id: int, user_id: int) -> Activity:
        """Only participants of the parent event can join one of its activities."""
        activity = await self.get_or_404(activity_id)
        result = await self.db.execute(
            select(Event)
            .options(selectinload(Event.participants))
            .where(Event.id == activity.event_id)
            .execution_options(populate_existing=True)
        )
        event = result.scalar_one()
        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        if user not in event.participants:
            raise ValidationError(
                "User does not participate in the activity's event",
                details={"userId": user_id, "eventId": event.id},
            )
        if user not in activity.participants:
            activity.participants.append(user)
            activity = await self.save(activity)
        return activity

    async def remove_participant(self, activity_id: int, user_id: int) -> Activity:
        activity = await self.get_or_404(activity_id)
        activity.participants = [u for u in activity.participants if u.id != user_id]
        return await self.save(activity)

    def to_dto(self, activity: Activity) -> ActivityDTO:
        dto = ActivityDTO.model_validate(activity)
        dto.cover_image = self.images.to_data_url(
            activity.cover_image_url, ImageVariant.COMPRESSED
        )
        return dto
