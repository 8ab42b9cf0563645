"""Repository for interacting with task persistence models."""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from ..models import Task
from .base import BaseRepository


class TaskRepository(BaseRepository[Task]):
    """Concrete repository encapsulating ``Task`` persistence operations."""

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session, Task)

    async def list_children(self, parent_task_id: int) -> list[Task]:
        """Return the direct children of a task."""
        result = await self.session.execute(
            select(Task).where(Task.parent_task_id == parent_task_id).order_by(Task.id)
        )
        return list(result.scalars().all())

    async def list_project_roots(self, project_id: int) -> list[Task]:
        """Return root-level tasks of a project."""
        result = await self.session.execute(
            select(Task)
            .where(Task.project_id == project_id, Task.parent_task_id.is_(None))
            .order_by(Task.id)
        )
        return list(result.scalars().all())

    async def get_parent_id(self, task_id: int) -> int | None:
        """Return the parent id of a task without loading the whole row."""
        result = await self.session.execute(select(Task.parent_task_id).where(Task.id == task_id))
        return result.scalar_one_or_none()

    async def reparent_many(self, task_ids: Sequence[int], parent_task_id: int | None) -> int:
        """Point every listed task at ``parent_task_id``."""
        if not task_ids:
            return 0
        result = await self.session.execute(
            sa.update(Task).where(Task.id.in_(list(task_ids))).values(parent_task_id=parent_task_id)
        )
        return result.rowcount
