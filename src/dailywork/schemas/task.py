"""Task-related Pydantic schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..models import TaskStatus

TASK_READ_EXAMPLE = {
    "id": 7,
    "project_id": 1,
    "title": "Draft release notes",
    "description": "Collect merged changes since the last tag.",
    "status": TaskStatus.PENDING.value,
    "creator_id": 42,
    "assignee_id": 42,
    "parent_task_id": None,
    "start_time": "2023-06-14T09:00:00+08:00",
    "finish_time": "2023-06-14T18:00:00+08:00",
    "created_at": "2023-06-14T01:00:00+08:00",
    "updated_at": "2023-06-14T01:00:00+08:00",
}

# Fields that map to NOT NULL columns and so may be omitted but never nulled.
_NON_NULLABLE_PATCH_FIELDS = ("title", "status", "assignee_id")


class TaskCreate(BaseModel):
    """Payload for creating a new task.

    Naive ``start_time``/``finish_time`` values are read in the display timezone.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "project_id": 1,
                "title": "Draft release notes",
                "start_time": "2023-06-14 09:00:00",
                "finish_time": "2023-06-14 18:00:00",
            }
        }
    )

    project_id: int = Field(ge=1)
    title: str = Field(min_length=1, max_length=255)
    description: str | None = Field(default=None)
    status: TaskStatus = Field(default=TaskStatus.PENDING)
    start_time: datetime | None = Field(default=None)
    finish_time: datetime | None = Field(default=None)
    parent_task_id: int | None = Field(default=None, ge=1)


class TaskPatch(BaseModel):
    """Fields that may be changed on an existing task.

    Only fields explicitly present in the payload are applied. Sending
    ``parent_task_id`` (``null`` moves the task to the root) re-parents the task;
    its children stay behind on the old parent unless ``move_with_children``.
    """

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "title": "Publish release notes",
                "parent_task_id": 3,
                "move_with_children": False,
            }
        }
    )

    title: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = Field(default=None)
    status: TaskStatus | None = Field(default=None)
    assignee_id: int | None = Field(default=None, ge=1)
    start_time: datetime | None = Field(default=None)
    finish_time: datetime | None = Field(default=None)
    parent_task_id: int | None = Field(default=None, ge=1)
    move_with_children: bool = Field(default=False)

    @model_validator(mode="after")
    def _check_patch(self) -> "TaskPatch":
        changes = self.changes()
        if not changes:
            raise ValueError("At least one field must be provided for update.")
        for name in _NON_NULLABLE_PATCH_FIELDS:
            if name in changes and changes[name] is None:
                raise ValueError(f"{name} cannot be null.")
        return self

    @property
    def moves_parent(self) -> bool:
        return "parent_task_id" in self.model_fields_set

    def changes(self) -> dict[str, object]:
        """Return the explicitly supplied column values."""
        return {
            name: getattr(self, name)
            for name in sorted(self.model_fields_set)
            if name not in {"move_with_children", "task_id"}
        }


class TaskUpdate(TaskPatch):
    """Patch addressed to a specific task."""

    task_id: int = Field(ge=1)


class TaskDelete(BaseModel):
    task_id: int = Field(ge=1)


class TaskDetailQuery(BaseModel):
    task_id: int = Field(ge=1)


class ProjectTaskListQuery(BaseModel):
    project_id: int = Field(ge=1)


class TaskRead(BaseModel):
    """Public representation of a task, times in the display timezone."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={"example": TASK_READ_EXAMPLE},
    )

    id: int
    project_id: int
    title: str
    description: str | None = None
    status: TaskStatus
    creator_id: int
    assignee_id: int
    parent_task_id: int | None = None
    start_time: datetime | None = None
    finish_time: datetime | None = None
    created_at: datetime
    updated_at: datetime


class TaskNode(TaskRead):
    """A task together with its subtree."""

    children: list["TaskNode"] = Field(default_factory=list)


class TaskCreated(BaseModel):
    id: int


__all__ = [
    "ProjectTaskListQuery",
    "TaskCreate",
    "TaskCreated",
    "TaskDelete",
    "TaskDetailQuery",
    "TaskNode",
    "TaskPatch",
    "TaskRead",
    "TaskUpdate",
]
