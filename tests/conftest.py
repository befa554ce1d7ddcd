"""Pytest configuration and fixtures."""

import hashlib
import io
import os
from pathlib import Path
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
import pillow_heif
from PIL import Image
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from eventhub.core.deps import get_db, get_image_store
from eventhub.core.security import create_access_token
from eventhub.db import models_registry  # noqa: F401 - Import to register models
from eventhub.db.base import Base
from eventhub.images import ImagePolicy, ImageStore, ImageVariant
from eventhub.main import app
from eventhub.models.company import Company
from eventhub.models.user import User

# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


def plain_hash(password: str) -> str:
    """Cheap password hash understood by verify_password (tests only)."""
    return f"$plain${hashlib.sha256(password.encode()).hexdigest()}"


def make_image(fmt: str = "JPEG", size: tuple[int, int] = (640, 480), noise: bool = False) -> bytes:
    """Encode a generated image in memory."""
    if noise:
        img = Image.frombytes("RGB", size, os.urandom(size[0] * size[1] * 3))
    else:
        img = Image.new("RGB", size, (30, 120, 200))
        for x in range(0, size[0], 20):
            for y in range(0, size[1], 20):
                img.putpixel((x, y), (255, 255, 0))
    buffer = io.BytesIO()
    save_args = {"quality": 95} if fmt == "JPEG" else {}
    img.save(buffer, fmt, **save_args)
    return buffer.getvalue()


def variant_files(store: ImageStore, variant: ImageVariant) -> list[Path]:
    directory = store.policy.directory(variant)
    if not directory.exists():
        return []
    return sorted(p for p in directory.iterdir() if p.is_file())


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def session_maker(test_engine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture(scope="function")
async def db_session(session_maker) -> AsyncGenerator[AsyncSession, None]:
    """Create test database session."""
    async with session_maker() as session:
        yield session


@pytest.fixture
def image_store(tmp_path: Path):
    """Image store rooted at ``public`` inside a temporary working directory."""
    # Own patch context so a test's monkeypatch.undo() keeps the working directory
    with pytest.MonkeyPatch.context() as mp:
        mp.chdir(tmp_path)
        store = ImageStore(ImagePolicy(root=Path("public")))
        store.ensure_directories()
        yield store


@pytest_asyncio.fixture(scope="function")
async def client(
    db_session: AsyncSession, image_store: ImageStore
) -> AsyncGenerator[AsyncClient, None]:
    """Create test HTTP client with overridden dependencies."""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_image_store] = lambda: image_store

    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def company(db_session: AsyncSession) -> Company:
    company = Company(title="Acme")
    db_session.add(company)
    await db_session.commit()
    return company


@pytest_asyncio.fixture(scope="function")
async def other_company(db_session: AsyncSession) -> Company:
    company = Company(title="Globex")
    db_session.add(company)
    await db_session.commit()
    return company


@pytest_asyncio.fixture(scope="function")
async def test_user(db_session: AsyncSession, company: Company) -> User:
    """Create test user in ``company``."""
    user = User(
        email="user@example.com",
        hashed_password=plain_hash("testpassword"),
        first_name="Test",
        last_name="User",
        company_id=company.id,
        is_active=True,
        is_superuser=False,
    )
    db_session.add(user)
    await db_session.commit()
    return user


@pytest_asyncio.fixture(scope="function")
async def admin_user(db_session: AsyncSession) -> User:
    """Create admin user."""
    user = User(
        email="admin@example.com",
        hashed_password=plain_hash("admin"),
        is_active=True,
        is_superuser=True,
    )
    db_session.add(user)
    await db_session.commit()
    return user


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    """Create authorization headers."""
    return {"Authorization": f"Bearer {create_access_token(test_user.id)}"}


@pytest.fixture
def admin_auth_headers(admin_user: User) -> dict:
    """Create admin authorization headers."""
    return {"Authorization": f"Bearer {create_access_token(admin_user.id)}"}


@pytest.fixture
def jpeg_bytes() -> bytes:
    return make_image("JPEG")


@pytest.fixture
def png_bytes() -> bytes:
    return make_image("PNG")


@pytest.fixture
def image_factory():
    """Function building encoded test images."""
    return make_image


@pytest.fixture
def stored_files(image_store: ImageStore):
    """Function listing the files currently stored for one variant."""
    return lambda variant: variant_files(image_store, variant)


@pytest.fixture
def heic_bytes() -> bytes:
    """HEIC sample; the runtime decoder cannot encode, so the sample comes from pillow-heif."""
    img = Image.new("RGB", (640, 480), (30, 120, 200))
    buffer = io.BytesIO()
    pillow_heif.from_pillow(img).save(buffer, quality=90)
    return buffer.getvalue()
