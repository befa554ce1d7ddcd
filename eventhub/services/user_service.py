"""User service for user management."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from starlette.datastructures import FormData

from eventhub.core.exceptions import NotFoundError, ValidationError
from eventhub.core.security import get_password_hash, verify_password
from eventhub.images import ImageIngestion, ImageStore, ImageVariant
from eventhub.models.activity import Activity
from eventhub.models.company import Company
from eventhub.models.event import Event
from eventhub.models.user import User
from eventhub.schemas.activity import ActivitySummaryDTO
from eventhub.schemas.user import UserCreate, UserDTO, UserUpdateForm
from eventhub.services.base_service import BaseService

PROFILE_IMAGE_PREFIX = "profileImage"


class UserService(BaseService[User]):
    """User service for authentication and management."""

    def __init__(self, db: AsyncSession, images: ImageStore | None = None):
        super().__init__(db, User)
        self.images = images

    async def get_by_email(self, email: str) -> User | None:
        """Get user by login email."""
        result = await self.db.execute(
            select(User).where(User.email == email.strip().lower())
        )
        return result.scalar_one_or_none()

    async def authenticate(self, email: str, password: str) -> User | None:
        """Authenticate user by email and password."""
        user = await self.get_by_email(email)
        if not user or not user.is_active:
            return None
        if not verify_password(password, user.hashed_password):
            return None
        return user

    async def change_password(self, user_id: int, new_password: str) -> bool:
        """Change user password."""
        user = await self.get_by_id(user_id)
        if not user:
            return False
        user.hashed_password = get_password_hash(new_password)
        await self.save(user)
        return True

    async def create_user(self, data: UserCreate) -> User:
        """Create new user."""
        email = data.email.strip().lower()
        if await self.get_by_email(email):
            raise ValidationError(f"User {email} already exists")
        if data.company_id is not None and await self.db.get(Company, data.company_id) is None:
            raise NotFoundError(f"Company {data.company_id} not found")

        user = User(
            email=email,
            hashed_password=get_password_hash(data.password),
            first_name=data.first_name,
            last_name=data.last_name,
            phone=data.phone,
            company_id=data.company_id,
            is_active=True,
            is_superuser=data.is_superuser,
        )
        return await self.save(user)

    async def update_user(self, user_id: int, form: FormData) -> User:
        """Update profile fields and, when a file is sent, the profile image."""
        async with ImageIngestion(
            self.images, PROFILE_IMAGE_PREFIX, attribute="profile_image_url"
        ) as ingestion:
            data = await ingestion.receive(form, UserUpdateForm)
            user = await self.get_or_404(user_id)
            await ingestion.process(data.quality)
            for name, value in data.model_dump(exclude_unset=True, exclude={"quality"}).items():
                setattr(user, name, value)
            return await ingestion.commit(user, self.persist, self.reload)

    async def remove_profile_image(self, user_id: int) -> User:
        user = await self.get_or_404(user_id)
        previous = user.profile_image_url
        if not previous:
            return user
        user.profile_image_url = None
        user = await self.save(user)
        self.images.remove_all(previous)
        return user

    async def assign_company(self, user_id: int, company_id: int) -> User:
        """Move a user into a company."""
        user = await self.get_or_404(user_id)
        if await self.db.get(Company, company_id) is None:
            raise NotFoundError(f"Company {company_id} not found")
        user.company_id = company_id
        return await self.save(user)

    async def delete_user(self, user_id: int) -> bool:
        """Delete a user and then their profile image files."""
        result = await self.db.execute(
            select(User)
            .options(selectinload(User.events), selectinload(User.activities))
            .where(User.id == user_id)
            .execution_options(populate_existing=True)
        )
        user = result.scalar_one_or_none()
        if user is None:
            return False
        image = user.profile_image_url
        await self.delete(user)
        self.images.remove_all(image)
        return True

    async def get_activities_in_event(self, user_id: int, event_id: int) -> list[Activity]:
        """Activities of one event the user takes part in."""
        await self.get_or_404(user_id)
        if await self.db.get(Event, event_id) is None:
            raise NotFoundError(f"Event {event_id} not found")
        result = await self.db.execute(
            select(Activity)
            .join(Activity.participants)
            .where(Activity.event_id == event_id, User.id == user_id)
            .order_by(Activity.id)
        )
        return list(result.scalars().all())

    def to_dto(self, user: User) -> UserDTO:
        dto = UserDTO.model_validate(user)
        if self.images is not None:
            dto.profile_image = self.images.to_data_url(
                user.profile_image_url, ImageVariant.COMPRESSED
            )
        return dto

    def activity_dtos(self, activities: list[Activity]) -> list[ActivitySummaryDTO]:
        items = []
        for activity in activities:
            dto = ActivitySummaryDTO.model_validate(activity)
            dto.cover_image = self.images.to_data_url(
                activity.cover_image_url, ImageVariant.MINIATURE
            )
            items.append(dto)
        return items
