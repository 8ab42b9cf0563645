"""Base repository implementation supporting asynchronous SQLModel sessions."""

from __future__ import annotations

from typing import Any, Generic, TypeVar

import sqlalchemy as sa
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

ModelType = TypeVar("ModelType", bound=SQLModel)


class BaseRepository(Generic[ModelType]):
    """Provide shared persistence helpers for repositories.

    Repositories only flush; committing is left to the caller so several
    repository calls can share one transaction.
    """

    def __init__(self, session: AsyncSession, model_type: type[ModelType]) -> None:
        self._session = session
        self._model_type = model_type

    @property
    def session(self) -> AsyncSession:
        """Return the session associated with the repository."""
        return self._session

    async def get(self, entity_id: int) -> ModelType | None:
        """Retrieve a model instance by its primary key."""
        return await self._session.get(self._model_type, entity_id)

    async def add(self, instance: ModelType) -> ModelType:
        """Add and flush a new entity instance."""
        self._session.add(instance)
        await self._session.flush()
        return instance

    async def update_by_id(self, entity_id: int, values: dict[str, Any]) -> int:
        """Patch a single row, returning the number of rows touched."""
        model = self._model_type
        statement = sa.update(model).where(model.id == entity_id).values(**values)
        result = await self._session.execute(statement)
        return result.rowcount

    async def delete_by_id(self, entity_id: int) -> int:
        """Delete a single row, returning the number of rows removed."""
        model = self._model_type
        result = await self._session.execute(sa.delete(model).where(model.id == entity_id))
        return result.rowcount
