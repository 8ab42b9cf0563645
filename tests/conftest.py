from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from itertools import count

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from dailywork.core.config import Settings
from dailywork.db import create_session_factory, init_db
from dailywork.deps import get_db_session
from dailywork.main import create_app
from dailywork.models import Task, User
from dailywork.schemas import TaskCreate
from dailywork.services import TaskService

DISPLAY_TIMEZONE = "Asia/Shanghai"


@pytest_asyncio.fixture
async def engine() -> AsyncIterator[AsyncEngine]:
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    await init_db(engine)
    try:
        yield engine
    finally:
        await engine.dispose()


@pytest_asyncio.fixture
async def session(engine: AsyncEngine) -> AsyncIterator[AsyncSession]:
    async with create_session_factory(engine)() as session:
        yield session


@pytest.fixture
def settings() -> Settings:
    return Settings(
        environment="test",
        jwt_secret_key="test-secret",
        display_timezone=DISPLAY_TIMEZONE,
    )


@pytest.fixture
def task_service(session: AsyncSession) -> TaskService:
    return TaskService(session, display_timezone=DISPLAY_TIMEZONE)


@pytest.fixture
def user_factory(session: AsyncSession) -> Callable[..., Awaitable[User]]:
    counter = count(1)

    async def _factory(*, username: str | None = None, email: str | None = None) -> User:
        number = next(counter)
        user = User(
            username=username or f"user{number}",
            email=email or f"user{number}@example.com",
            hashed_password="not-a-real-hash",
        )
        session.add(user)
        await session.commit()
        await session.refresh(user)
        return user

    return _factory


@pytest.fixture
def task_factory(task_service: TaskService) -> Callable[..., Awaitable[int]]:
    async def _factory(
        user: User,
        title: str,
        *,
        project_id: int = 1,
        parent_task_id: int | None = None,
        **fields: object,
    ) -> int:
        result = await task_service.add(
            user,
            TaskCreate(project_id=project_id, title=title, parent_task_id=parent_task_id, **fields),
        )
        assert result.result is not None
        return result.result.id

    return _factory


@pytest.fixture
def reload_task(session: AsyncSession) -> Callable[[int], Awaitable[Task | None]]:
    """Read a task straight from the database, bypassing cached identity-map state."""

    async def _reload(task_id: int) -> Task | None:
        result = await session.execute(
            select(Task).where(Task.id == task_id).execution_options(populate_existing=True)
        )
        return result.scalars().first()

    return _reload


@pytest_asyncio.fixture
async def app(session: AsyncSession, settings: Settings) -> AsyncIterator[FastAPI]:
    application = create_app(settings)

    async def _override_db_session() -> AsyncIterator[AsyncSession]:
        yield session

    application.dependency_overrides[get_db_session] = _override_db_session
    try:
        yield application
    finally:
        application.dependency_overrides.clear()


@pytest_asyncio.fixture
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as http_client:
        yield http_client
