"""Service layer maintaining per-project task trees."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any
from zoneinfo import ZoneInfo

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel.ext.asyncio.session import AsyncSession

from ..core.config import get_settings
from ..core.timeutils import (
    TIME_FIELDS,
    ensure_finish_after_start,
    get_zone,
    normalize_times_to_utc,
    to_display,
)
from ..db import atomic
from ..errors import NotFoundError, PermissionDeniedError, ServerError, ValidationError
from ..models import Task, User
from ..repositories import TaskRepository, UserRepository
from ..schemas import (
    ProjectTaskListQuery,
    ServiceResult,
    TaskCreate,
    TaskCreated,
    TaskDelete,
    TaskDetailQuery,
    TaskNode,
    TaskRead,
    TaskUpdate,
)

logger = logging.getLogger(__name__)

_DISPLAY_FIELDS = (*TIME_FIELDS, "created_at", "updated_at")


class TaskService:
    """CRUD and re-parenting for ``Task`` entities.

    Mutations are restricted to the task's creator. Removing a task from the
    middle of a branch (delete, or a move without ``move_with_children``)
    promotes its direct children to its former parent inside the same
    transaction as the change itself.
    """

    def __init__(self, session: AsyncSession, *, display_timezone: str | ZoneInfo | None = None) -> None:
        self._session = session
        self._repository = TaskRepository(session)
        self._user_repository = UserRepository(session)
        self._tz = get_zone(display_timezone or get_settings().display_timezone)

    async def add(self, user: User, payload: TaskCreate) -> ServiceResult[TaskCreated]:
        """Create a task owned and assigned to ``user``."""
        if payload.start_time is not None and payload.finish_time is not None:
            ensure_finish_after_start(payload.start_time, payload.finish_time, self._tz)
        if payload.parent_task_id is not None:
            parent = await self._load_task(payload.parent_task_id)
            if parent is None:
                raise NotFoundError("Parent task not found.")
            self._ensure_same_project(parent, payload.project_id)

        data = normalize_times_to_utc(payload.model_dump(), self._tz)
        task = Task(**data, creator_id=user.id, assignee_id=user.id)
        try:
            async with atomic(self._session):
                created = await self._repository.add(task)
                if created is None or created.id is None:
                    raise ServerError("Task creation failed.")
        except SQLAlchemyError as exc:
            logger.exception("Task creation failed")
            raise ServerError("Task creation failed.") from exc

        logger.info(
            "Task created",
            extra={"task_id": created.id, "project_id": created.project_id, "user_id": user.id},
        )
        return ServiceResult.success("Task created.", TaskCreated(id=created.id))

    async def delete(self, user: User, payload: TaskDelete) -> ServiceResult[None]:
        """Delete a task, handing its children over to its parent."""
        task = await self._get_owned_task(user, payload.task_id, action="delete")
        former_parent_id = task.parent_task_id
        children = await self._list_children(task.id)

        try:
            async with atomic(self._session):
                if children:
                    await self._repository.reparent_many([child.id for child in children], former_parent_id)
                deleted = await self._repository.delete_by_id(task.id)
                if not deleted:
                    raise ServerError("Task deletion failed.")
        except SQLAlchemyError as exc:
            logger.exception("Task deletion failed")
            raise ServerError("Task deletion failed.") from exc

        logger.info(
            "Task deleted",
            extra={"task_id": payload.task_id, "promoted_children": len(children), "user_id": user.id},
        )
        return ServiceResult.success("Task deleted.")

    async def update(self, user: User, payload: TaskUpdate) -> ServiceResult[None]:
        """Apply a partial update, optionally re-parenting the task.

        A patch that moves the task without ``move_with_children`` promotes the
        current children to the former parent. The move and every other
        patched field are written in that same transaction, so a re-parent
        never drops the rest of the patch.
        """
        task = await self._get_owned_task(user, payload.task_id, action="modify")
        former_parent_id = task.parent_task_id
        changes = payload.changes()

        self._check_time_range(task, changes)
        if changes.get("assignee_id") is not None:
            await self._ensure_user_exists(changes["assignee_id"])

        children: list[Task] = []
        if payload.moves_parent:
            await self._check_new_parent(task, payload.parent_task_id, carry_children=payload.move_with_children)
            if not payload.move_with_children:
                children = await self._list_children(task.id)

        values = normalize_times_to_utc(changes, self._tz)
        try:
            async with atomic(self._session):
                if children:
                    await self._repository.reparent_many([child.id for child in children], former_parent_id)
                updated = await self._repository.update_by_id(task.id, values)
                if not updated:
                    raise ServerError("Task update failed.")
        except SQLAlchemyError as exc:
            logger.exception("Task update failed")
            raise ServerError("Task update failed.") from exc

        logger.info(
            "Task updated",
            extra={"task_id": payload.task_id, "fields": sorted(values), "promoted_children": len(children)},
        )
        return ServiceResult.success("Task updated.")

    async def list_project_tasks(self, query: ProjectTaskListQuery) -> ServiceResult[list[TaskNode]]:
        """Return the project's task forest, roots first, each with its subtree."""
        try:
            roots = await self._repository.list_project_roots(query.project_id)
            forest = [await self._build_node(root) for root in roots]
        except SQLAlchemyError as exc:
            logger.exception("Task list retrieval failed")
            raise ServerError("Task list retrieval failed.") from exc
        return ServiceResult.success("Task list retrieved.", forest)

    async def get_task_detail(self, query: TaskDetailQuery) -> ServiceResult[TaskRead]:
        """Return one task with its times in the display timezone."""
        task = await self._load_task(query.task_id)
        if task is None:
            raise NotFoundError("Task not found.")
        return ServiceResult.success("Task detail retrieved.", self._to_read(task))

    async def _load_task(self, task_id: int) -> Task | None:
        try:
            return await self._repository.get(task_id)
        except SQLAlchemyError as exc:
            logger.exception("Task lookup failed")
            raise ServerError("Task lookup failed.") from exc

    async def _list_children(self, task_id: int) -> list[Task]:
        try:
            return await self._repository.list_children(task_id)
        except SQLAlchemyError as exc:
            logger.exception("Child task lookup failed")
            raise ServerError("Task lookup failed.") from exc

    async def _get_owned_task(self, user: User, task_id: int, *, action: str) -> Task:
        task = await self._load_task(task_id)
        if task is None:
            raise NotFoundError("Task not found.")
        if task.creator_id != user.id:
            raise PermissionDeniedError(f"Only the task creator may {action} this task.")
        return task

    async def _ensure_user_exists(self, user_id: int) -> None:
        try:
            assignee = await self._user_repository.get(user_id)
        except SQLAlchemyError as exc:
            logger.exception("Assignee lookup failed")
            raise ServerError("User lookup failed.") from exc
        if assignee is None:
            raise NotFoundError("Assignee not found.")

    def _check_time_range(self, task: Task, changes: dict[str, Any]) -> None:
        # Stored values are UTC; bring them to the caller's zone so they compare
        # like-for-like with naive patch values.
        start = self._patched_time(task, changes, "start_time")
        finish = self._patched_time(task, changes, "finish_time")
        if start is not None and finish is not None:
            ensure_finish_after_start(start, finish, self._tz)

    def _patched_time(self, task: Task, changes: dict[str, Any], field: str) -> datetime | None:
        if field in changes:
            return changes[field]
        stored = getattr(task, field)
        return to_display(stored, self._tz) if stored is not None else None

    async def _check_new_parent(self, task: Task, parent_id: int | None, *, carry_children: bool) -> None:
        if parent_id is None:
            return
        if parent_id == task.id:
            raise ValidationError("A task cannot be its own parent.")
        parent = await self._load_task(parent_id)
        if parent is None:
            raise NotFoundError("Parent task not found.")
        self._ensure_same_project(parent, task.project_id)
        # Children left behind are promoted first, so only a move that carries
        # the subtree along can close a loop.
        if carry_children and await self._is_descendant(parent_id, task.id):
            raise ValidationError("A task cannot be moved under its own subtree.")

    async def _is_descendant(self, candidate_id: int, ancestor_id: int) -> bool:
        seen: set[int] = set()
        current: int | None = candidate_id
        try:
            while current is not None and current not in seen:
                if current == ancestor_id:
                    return True
                seen.add(current)
                current = await self._repository.get_parent_id(current)
        except SQLAlchemyError as exc:
            logger.exception("Ancestor lookup failed")
            raise ServerError("Task lookup failed.") from exc
        return False

    @staticmethod
    def _ensure_same_project(parent: Task, project_id: int) -> None:
        if parent.project_id != project_id:
            raise ValidationError(
                "Parent task belongs to a different project.",
                details={"parent_task_id": parent.id, "project_id": project_id},
            )

    async def _build_node(self, task: Task) -> TaskNode:
        children = await self._repository.list_children(task.id)
        return TaskNode(
            **self._to_read(task).model_dump(),
            children=[await self._build_node(child) for child in children],
        )

    def _to_read(self, task: Task) -> TaskRead:
        read = TaskRead.model_validate(task)
        localized = {
            field: to_display(value, self._tz)
            for field in _DISPLAY_FIELDS
            if (value := getattr(read, field)) is not None
        }
        return read.model_copy(update=localized)


__all__ = ["TaskService"]
