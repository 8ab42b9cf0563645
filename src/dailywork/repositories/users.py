"""Repository for interacting with user persistence models."""

from __future__ import annotations

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..models import User
from .base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Concrete repository for CRUD operations on ``User`` entities."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, User)

    async def get_by_email(self, email: str) -> User | None:
        """Return the first user matching the supplied email."""
        result = await self.session.execute(select(User).where(User.email == email).limit(1))
        return result.scalars().first()

    async def get_by_username(self, username: str) -> User | None:
        """Return the first user matching the supplied username."""
        result = await self.session.execute(select(User).where(User.username == username).limit(1))
        return result.scalars().first()
