"""User management API endpoints."""

from fastapi import APIRouter, HTTPException, Request, status

from eventhub.core.deps import CurrentUserRequired, DBSession, Images, ensure_self_or_superuser
from eventhub.schemas.activity import ActivitySummaryDTO
from eventhub.schemas.auth import ChangePassword
from eventhub.schemas.company import CompanyAssign
from eventhub.schemas.user import UserCreate, UserDTO
from eventhub.services.user_service import UserService

router = APIRouter()


@router.post("", response_model=UserDTO, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: UserCreate,
    db: DBSession,
    images: Images,
    current_user: CurrentUserRequired,
) -> UserDTO:
    """
    Create a user.

    - **email**: Login email (unique)
    - **password**: Initial password
    - **companyId**: Optional company
    """
    if data.is_superuser and not current_user.is_superuser:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only superusers can create superusers",
        )
    user_service = UserService(db, images)
    return user_service.to_dto(await user_service.create_user(data))


@router.get("", response_model=list[UserDTO])
async def get_users(
    db: DBSession,
    images: Images,
    current_user: CurrentUserRequired,
) -> list[UserDTO]:
    user_service = UserService(db, images)
    return [user_service.to_dto(user) for user in await user_service.get_all()]


@router.get("/me", response_model=UserDTO)
async def get_me(
    db: DBSession,
    images: Images,
    current_user: CurrentUserRequired,
) -> UserDTO:
    """Get the authenticated user."""
    return UserService(db, images).to_dto(current_user)


@router.get("/{user_id}", response_model=UserDTO)
async def get_user(
    user_id: int,
    db: DBSession,
    images: Images,
    current_user: CurrentUserRequired,
) -> UserDTO:
    user_service = UserService(db, images)
    return user_service.to_dto(await user_service.get_or_404(user_id))


@router.put("/{user_id}", response_model=UserDTO)
async def update_user(
    user_id: int,
    request: Request,
    db: DBSession,
    images: Images,
    current_user: CurrentUserRequired,
) -> UserDTO:
    """
    Update a profile (multipart).

    Sending **image** replaces the profile image.
    """
    ensure_self_or_superuser(current_user, user_id)
    user_service = UserService(db, images)
    async with request.form() as form:
        user = await user_service.update_user(user_id, form)
    return user_service.to_dto(user)


@router.delete("/{user_id}")
async def delete_user(
    user_id: int,
    db: DBSession,
    images: Images,
    current_user: CurrentUserRequired,
) -> dict:
    ensure_self_or_superuser(current_user, user_id)
    deleted = await UserService(db, images).delete_user(user_id)
    return {"status": "success", "deleted": deleted}


@router.delete("/{user_id}/profileimage", response_model=UserDTO)
async def delete_profile_image(
    user_id: int,
    db: DBSession,
    images: Images,
    current_user: CurrentUserRequired,
) -> UserDTO:
    ensure_self_or_superuser(current_user, user_id)
    user_service = UserService(db, images)
    return user_service.to_dto(await user_service.remove_profile_image(user_id))


@router.put("/{user_id}/password")
async def change_password(
    user_id: int,
    data: ChangePassword,
    db: DBSession,
    current_user: CurrentUserRequired,
) -> dict:
    """
    Change user password.

    - **user_id**: User ID to change password for
    - **password**: New password
    """
    ensure_self_or_superuser(current_user, user_id)

    user_service = UserService(db)
    success = await user_service.change_password(user_id, data.password)

    if not success:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )

    return {"status": "success"}


@router.post("/{user_id}/company", response_model=UserDTO)
async def assign_company(
    user_id: int,
    data: CompanyAssign,
    db: DBSession,
    images: Images,
    current_user: CurrentUserRequired,
) -> UserDTO:
    """
    Move a user into a company.

    - **companyId**: Target company
    """
    ensure_self_or_superuser(current_user, user_id)
    user_service = UserService(db, images)
    return user_service.to_dto(await user_service.assign_company(user_id, data.company_id))


@router.get("/{user_id}/events/{event_id}/activities", response_model=list[ActivitySummaryDTO])
async def get_user_activities(
    user_id: int,
    event_id: int,
    db: DBSession,
    images: Images,
    current_user: CurrentUserRequired,
) -> list[ActivitySummaryDTO]:
    """Activities of one event the user takes part in."""
    user_service = UserService(db, images)
    activities = await user_service.get_activities_in_event(user_id, event_id)
    return user_service.activity_dtos(activities)
