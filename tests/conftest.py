"""
Pytest configuration and shared fixtures.

This file provides common fixtures for all tests. Every test function gets its
own in-memory SQLite database with the full schema created from the models.
"""

import os
from collections.abc import AsyncGenerator

# Settings are read at import time, so the environment must be ready first
os.environ.setdefault("SECRET_KEY", "test-secret-key-do-not-use-in-production-0123456789")
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ.pop("OPENAI_API_KEY", None)

import pytest  # noqa: E402
from fastapi import FastAPI  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from app.config import UserRole  # noqa: E402
from app.core.database import build_engine, create_tables, get_db  # noqa: E402
from app.core.security import create_access_token, get_password_hash  # noqa: E402
from app.main import app as main_app  # noqa: E402
from app.models import Admins, Groups, Images, LabelerGroups, Labelers, Tags  # noqa: E402
from tests.factories import ADMIN_PASSWORD, LABELER_PASSWORD, make_png_base64  # noqa: E402

TEST_DATABASE_URL = "sqlite+aiosqlite://"


@pytest.fixture(scope="session")
def anyio_backend():
    """Use asyncio backend for async tests."""
    return "asyncio"


@pytest.fixture(scope="function")
async def engine():
    """
    Create an in-memory test database for each test function.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    test_engine = build_engine(
        TEST_DATABASE_URL,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    await create_tables(test_engine)

    yield test_engine

    await test_engine.dispose()


@pytest.fixture(scope="function")
async def db_session(engine) -> AsyncGenerator[AsyncSession, None]:
    """Create a new database session for each test."""
    async_session_maker = async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session_maker() as session:
        yield session

        # Cleanup - rollback any changes made during the test
        await session.rollback()


@pytest.fixture(scope="function")
def app(db_session: AsyncSession) -> FastAPI:
    """
    Create FastAPI app with test database session.

    This overrides the database dependency to use the test session.
    """

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    main_app.dependency_overrides[get_db] = override_get_db

    yield main_app

    main_app.dependency_overrides.clear()


@pytest.fixture(scope="function")
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    """
    Create async HTTP client for testing API endpoints.

    Usage:
        async def test_endpoint(client):
            response = await client.get("/health")
            assert response.status_code == 200
    """
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


# =============================================================================
# Test Data Fixtures
# =============================================================================


@pytest.fixture
async def admin(db_session: AsyncSession) -> Admins:
    """An admin account with password ADMIN_PASSWORD."""
    account = Admins(username="test-admin", password_hash=get_password_hash(ADMIN_PASSWORD))
    db_session.add(account)
    await db_session.commit()
    await db_session.refresh(account)
    return account


@pytest.fixture
def admin_headers(admin: Admins) -> dict[str, str]:
    """Authorization header for the admin fixture."""
    token = create_access_token(admin.id, UserRole.ADMIN)  # type: ignore[arg-type]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def group(db_session: AsyncSession) -> Groups:
    """An empty labeling group."""
    grp = Groups(name="Animals", description="Animal photos")
    db_session.add(grp)
    await db_session.commit()
    await db_session.refresh(grp)
    return grp


@pytest.fixture
async def group_tags(db_session: AsyncSession, group: Groups) -> list[Tags]:
    """Tags cat, dog and outdoor in the group fixture, in id order."""
    tags = [Tags(name=name, group_id=group.id) for name in ("cat", "dog", "outdoor")]  # type: ignore[arg-type]
    db_session.add_all(tags)
    await db_session.commit()
    for tag in tags:
        await db_session.refresh(tag)
    return tags


@pytest.fixture
async def image(db_session: AsyncSession, group: Groups) -> Images:
    """A PNG image in the group fixture."""
    img = Images(
        filename="photo.png",
        filetype="png",
        base64_data=make_png_base64(),
        group_id=group.id,  # type: ignore[arg-type]
    )
    db_session.add(img)
    await db_session.commit()
    await db_session.refresh(img)
    return img


@pytest.fixture
async def labeler(db_session: AsyncSession, group: Groups) -> Labelers:
    """A labeler assigned to the group fixture, with password LABELER_PASSWORD."""
    account = Labelers(username="test-labeler", password_hash=get_password_hash(LABELER_PASSWORD))
    db_session.add(account)
    await db_session.flush()
    db_session.add(LabelerGroups(labeler_id=account.id, group_id=group.id))  # type: ignore[arg-type]
    await db_session.commit()
    await db_session.refresh(account)
    return account


@pytest.fixture
def labeler_headers(labeler: Labelers) -> dict[str, str]:
    """Authorization header for the labeler fixture."""
    token = create_access_token(labeler.id, UserRole.LABELER)  # type: ignore[arg-type]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_labeler(db_session: AsyncSession):
    """
    Factory for extra labelers, optionally assigned to groups.

    Usage:
        async def test_votes(make_labeler, group):
            labeler = await make_labeler("alice", group_ids=[group.id])
    """

    async def _make(username: str, group_ids: list[int] | None = None) -> Labelers:
        # A precomputed hash keeps the factory fast
        account = Labelers(username=username, password_hash=_FAST_HASH)
        db_session.add(account)
        await db_session.flush()
        for group_id in group_ids or []:
            db_session.add(LabelerGroups(labeler_id=account.id, group_id=group_id))  # type: ignore[arg-type]
        await db_session.commit()
        await db_session.refresh(account)
        return account

    return _make


_FAST_HASH = get_password_hash("factory-password")
