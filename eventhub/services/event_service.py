"""Event service: events, their cover images and participants."""

from loguru import logger
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from starlette.datastructures import FormData

from eventhub.core.exceptions import NotFoundError, PersistenceError, ValidationError
from eventhub.images import ImageIngestion, ImageStore, ImageVariant
from eventhub.models.activity import Activity
from eventhub.models.company import Company
from eventhub.models.event import Event
from eventhub.models.user import User
from eventhub.schemas.activity import ActivitySummaryDTO
from eventhub.schemas.event import EventDTO, EventForm, EventSummaryDTO, EventUpdateForm
from eventhub.services.base_service import BaseService

EVENT_IMAGE_PREFIX = "eventImage"


class EventService(BaseService[Event]):
    """Event operations."""

    load_options = (
        selectinload(Event.activities),
        selectinload(Event.participants),
    )

    def __init__(self, db: AsyncSession, images: ImageStore):
        super().__init__(db, Event)
        self.images = images

    async def create_event(self, form: FormData) -> Event:
        """Create an event from a multipart form with an optional cover image."""
        async with ImageIngestion(self.images, EVENT_IMAGE_PREFIX) as ingestion:
            data = await ingestion.receive(form, EventForm)
            if await self.db.get(Company, data.company_id) is None:
                raise NotFoundError(f"Company {data.company_id} not found")
            await ingestion.process(data.quality)
            event = Event(
                title=data.title,
                description=data.description,
                company_id=data.company_id,
            )
            event = await ingestion.commit(event, self.persist, self.reload)

        logger.info(f"Event {event.id} created")
        return event

    async def update_event(self, event_id: int, form: FormData) -> Event:
        """Update event fields and, when a file is sent, replace the cover image."""
        async with ImageIngestion(self.images, EVENT_IMAGE_PREFIX) as ingestion:
            data = await ingestion.receive(form, EventUpdateForm)
            event = await self.get_or_404(event_id)
            await ingestion.process(data.quality)
            for name, value in data.model_dump(exclude_unset=True, exclude={"quality"}).items():
                setattr(event, name, value)
            return await ingestion.commit(event, self.persist, self.reload)

    async def remove_cover_image(self, event_id: int) -> Event:
        event = await self.get_or_404(event_id)
        previous = event.cover_image_url
        if not previous:
            return event
        event.cover_image_url = None
        event = await self.save(event)
        self.images.remove_all(previous)
        return event

    async def delete_event(self, event_id: int) -> bool:
        """Delete an event together with its activities.

        Rows go in one commit; image files are removed afterwards, the
        activities' first and the event's last.
        """
        result = await self.db.execute(
            select(Event)
            .options(
                selectinload(Event.activities).selectinload(Activity.participants),
                selectinload(Event.participants),
            )
            .where(Event.id == event_id)
            .execution_options(populate_existing=True)
        )
        event = result.scalar_one_or_none()
        if event is None:
            return False

        dependent_images = [a.cover_image_url for a in event.activities]
        own_image = event.cover_image_url

        for activity in event.activities:
            await self.db.delete(activity)
        await self.db.delete(event)
        try:
            await self.commit()
        except SQLAlchemyError as e:
            raise PersistenceError(details={"error": str(e)}) from e

        for image in dependent_images:
            self.images.remove_all(image)
        self.images.remove_all(own_image)
        logger.info(f"Event {event_id} deleted with {len(dependent_images)} activities")
        return True

    async def add_participant(self, event_id: int, user_id: int) -> Event:
        """Add a user of the event's company as participant."""
        event = await self.get_or_404(event_id)
        user = await self.db.get(User, user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        if user.company_id != event.company_id:
            raise ValidationError(
                "User does not belong to the event's company",
                details={"userId": user_id, "companyId": event.company_id},
            )
        if user not in event.participants:
            event.participants.append(user)
            event = await self.save(event)
        return event

    async def remove_participant(self, event_id: int, user_id: int) -> Event:
        """Remove a participant from the event and from all of its activities."""
        event = await self.get_or_404(event_id)
        result = await self.db.execute(
            select(User)
            .options(selectinload(User.activities))
            .where(User.id == user_id)
            .execution_options(populate_existing=True)
        )
        user = result.scalar_one_or_none()
        if user is None:
            raise NotFoundError(f"User {user_id} not found")

        if user in event.participants:
            event.participants.remove(user)
        user.activities = [a for a in user.activities if a.event_id != event_id]
        return await self.save(event)

    def to_summary(self, event: Event) -> EventSummaryDTO:
        dto = EventSummaryDTO.model_validate(event)
        dto.cover_image = self.images.to_data_url(event.cover_image_url, ImageVariant.MINIATURE)
        return dto

    def to_dto(self, event: Event) -> EventDTO:
        dto = EventDTO.model_validate(event)
        dto.cover_image = self.images.to_data_url(event.cover_image_url, ImageVariant.COMPRESSED)
        dto.activities = [
            ActivitySummaryDTO.model_validate(activity).model_copy(
                update={
                    "cover_image": self.images.to_data_url(
                        activity.cover_image_url, ImageVariant.MINIATURE
                    )
                }
            )
            for activity in event.activities
        ]
        return dto

    async def get_all_dto(self) -> list[EventSummaryDTO]:
        return [self.to_summary(event) for event in await self.get_all()]
