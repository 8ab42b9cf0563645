"""Reusable FastAPI dependencies."""

from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlmodel.ext.asyncio.session import AsyncSession

from .core.config import Settings, get_settings
from .db.session import get_session
from .models import User
from .services import AuthService, TaskService, UserService

_oauth2_scheme = OAuth2PasswordBearer(tokenUrl="api/auth/login")


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency that yields a database session."""

    async for session in get_session():
        yield session


SettingsDependency = Annotated[Settings, Depends(get_settings)]
DatabaseSessionDependency = Annotated[AsyncSession, Depends(get_db_session)]


def get_auth_service(session: DatabaseSessionDependency, settings: SettingsDependency) -> AuthService:
    return AuthService(session, settings)


def get_user_service(session: DatabaseSessionDependency) -> UserService:
    return UserService(session)


def get_task_service(session: DatabaseSessionDependency, settings: SettingsDependency) -> TaskService:
    return TaskService(session, display_timezone=settings.display_timezone)


AuthServiceDependency = Annotated[AuthService, Depends(get_auth_service)]
UserServiceDependency = Annotated[UserService, Depends(get_user_service)]
TaskServiceDependency = Annotated[TaskService, Depends(get_task_service)]


async def get_current_user(
    auth_service: AuthServiceDependency,
    token: str = Depends(_oauth2_scheme),
) -> User:
    return await auth_service.resolve_user(token)


CurrentUserDependency = Annotated[User, Depends(get_current_user)]


__all__ = [
    "AuthServiceDependency",
    "CurrentUserDependency",
    "DatabaseSessionDependency",
    "SettingsDependency",
    "TaskServiceDependency",
    "UserServiceDependency",
    "get_current_user",
    "get_db_session",
]
