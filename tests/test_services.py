"""Tests for service layer."""

import asyncio
import io

import pytest
from sqlalchemy.exc import SQLAlchemyError
from starlette.datastructures import FormData, Headers, UploadFile

from eventhub.core.exceptions import NotFoundError, PersistenceError
from eventhub.images import ImageStore, ImageVariant
from eventhub.models.company import Company
from eventhub.models.user import User
from eventhub.schemas.company import CompanyCreate
from eventhub.schemas.user import UserCreate
from eventhub.services.auth_service import AuthService
from eventhub.services.company_service import CompanyService
from eventhub.services.event_service import EventService
from eventhub.services.user_service import UserService


def event_form(company: Company, image: bytes | None = None, **fields: str) -> FormData:
    items = [("title", "Launch"), ("companyId", str(company.id))] + list(fields.items())
    if image is not None:
        items.append((
            "image",
            UploadFile(
                file=io.BytesIO(image),
                size=len(image),
                filename="launch.jpg",
                headers=Headers({"content-type": "image/jpeg"}),
            ),
        ))
    return FormData(items)


@pytest.mark.asyncio
async def test_user_service_create(db_session):
    """Test user creation."""
    user_service = UserService(db_session)

    user = await user_service.create_user(
        UserCreate(email="New@Example.com", password="password123", first_name="New")
    )

    assert user.id is not None
    assert user.email == "new@example.com"
    assert user.full_name == "New"
    assert user.is_superuser is False
    assert user.hashed_password != "password123"


@pytest.mark.asyncio
async def test_user_service_authenticate(db_session, admin_user: User):
    """Test user authentication."""
    user_service = UserService(db_session)

    user = await user_service.authenticate("admin@example.com", "admin")
    assert user is not None
    assert user.id == admin_user.id

    assert await user_service.authenticate("admin@example.com", "wrong") is None


@pytest.mark.asyncio
async def test_user_service_change_password(db_session, test_user: User):
    """Test password change."""
    user_service = UserService(db_session)

    assert await user_service.change_password(test_user.id, "newpassword") is True
    assert await user_service.authenticate("user@example.com", "newpassword") is not None
    assert await user_service.change_password(999, "x") is False


@pytest.mark.asyncio
async def test_auth_service_login(db_session, admin_user: User):
    auth_service = AuthService(db_session)

    token = await auth_service.login("admin@example.com", "admin")
    assert token is not None and token.token

    assert await auth_service.login("admin@example.com", "nope") is None


@pytest.mark.asyncio
async def test_company_service(db_session):
    company_service = CompanyService(db_session)

    company = await company_service.create_company(CompanyCreate(title="Umbrella"))

    assert (await company_service.get_or_404(company.id)).title == "Umbrella"
    with pytest.raises(NotFoundError):
        await company_service.get_or_404(company.id + 1)


@pytest.mark.asyncio
async def test_event_service_update_persistence_failure(
    db_session,
    image_store: ImageStore,
    company: Company,
    jpeg_bytes: bytes,
    stored_files,
    monkeypatch: pytest.MonkeyPatch,
):
    event_service = EventService(db_session, image_store)
    event = await event_service.create_event(event_form(company, jpeg_bytes))
    event_id = event.id
    previous = event.cover_image_url
    before = [stored_files(variant) for variant in ImageVariant]

    async def broken_commit():
        raise SQLAlchemyError("disk I/O error")

    monkeypatch.setattr(event_service, "commit", broken_commit)

    with pytest.raises(PersistenceError):
        await event_service.update_event(event_id, event_form(company, jpeg_bytes, title="Relaunch"))

    assert [stored_files(variant) for variant in ImageVariant] == before
    monkeypatch.undo()
    await db_session.rollback()
    reloaded = await event_service.get_or_404(event_id)
    assert reloaded.cover_image_url == previous
    assert reloaded.title == "Launch"


@pytest.mark.asyncio
async def test_event_service_cancel_after_commit_keeps_image(
    db_session,
    image_store: ImageStore,
    company: Company,
    jpeg_bytes: bytes,
    stored_files,
    monkeypatch: pytest.MonkeyPatch,
):
    event_service = EventService(db_session, image_store)
    reloading = asyncio.Event()

    async def slow_reload(event):
        reloading.set()
        await asyncio.sleep(10)
        return event

    monkeypatch.setattr(event_service, "reload", slow_reload)

    task = asyncio.create_task(event_service.create_event(event_form(company, jpeg_bytes)))
    await reloading.wait()
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    monkeypatch.undo()
    [created] = await event_service.get_all()
    event = await event_service.get_or_404(created.id)
    assert event.cover_image_url.startswith("image/jpeg:public/compressed/eventImage-")
    assert len(stored_files(ImageVariant.COMPRESSED)) == 1
    assert len(stored_files(ImageVariant.MINIATURE)) == 1
    assert event_service.to_dto(event).cover_image.startswith("data:image/jpeg;base64,")


@pytest.mark.asyncio
async def test_remove_cover_image_persistence_failure(
    db_session,
    image_store: ImageStore,
    company: Company,
    jpeg_bytes: bytes,
    stored_files,
    monkeypatch: pytest.MonkeyPatch,
):
    event_service = EventService(db_session, image_store)
    event = await event_service.create_event(event_form(company, jpeg_bytes))
    before = [stored_files(variant) for variant in ImageVariant]

    async def broken_commit():
        raise SQLAlchemyError("disk I/O error")

    monkeypatch.setattr(event_service, "commit", broken_commit)

    with pytest.raises(PersistenceError):
        await event_service.remove_cover_image(event.id)

    assert [stored_files(variant) for variant in ImageVariant] == before
