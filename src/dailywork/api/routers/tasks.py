"""Routes handling task CRUD and project task trees."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Path

from ...deps import CurrentUserDependency, TaskServiceDependency, get_current_user
from ...schemas import (
    ProjectTaskListQuery,
    ServiceResult,
    TaskCreate,
    TaskCreated,
    TaskDelete,
    TaskDetailQuery,
    TaskNode,
    TaskPatch,
    TaskRead,
    TaskUpdate,
)

router = APIRouter(prefix="/tasks", tags=["tasks"])
project_router = APIRouter(
    prefix="/projects",
    tags=["tasks"],
    dependencies=[Depends(get_current_user)],
)


@router.post("", response_model=ServiceResult[TaskCreated], summary="Create a task")
async def create_task(
    payload: TaskCreate,
    current_user: CurrentUserDependency,
    service: TaskServiceDependency,
) -> ServiceResult[TaskCreated]:
    return await service.add(current_user, payload)


@router.get(
    "/{task_id}",
    response_model=ServiceResult[TaskRead],
    summary="Retrieve a task",
    dependencies=[Depends(get_current_user)],
)
async def read_task(
    service: TaskServiceDependency,
    task_id: int = Path(ge=1),
) -> ServiceResult[TaskRead]:
    return await service.get_task_detail(TaskDetailQuery(task_id=task_id))


@router.patch("/{task_id}", response_model=ServiceResult[None], summary="Update or move a task")
async def update_task(
    payload: TaskPatch,
    current_user: CurrentUserDependency,
    service: TaskServiceDependency,
    task_id: int = Path(ge=1),
) -> ServiceResult[None]:
    update = TaskUpdate(task_id=task_id, **payload.model_dump(exclude_unset=True))
    return await service.update(current_user, update)


@router.delete("/{task_id}", response_model=ServiceResult[None], summary="Delete a task")
async def delete_task(
    current_user: CurrentUserDependency,
    service: TaskServiceDependency,
    task_id: int = Path(ge=1),
) -> ServiceResult[None]:
    return await service.delete(current_user, TaskDelete(task_id=task_id))


@project_router.get(
    "/{project_id}/tasks",
    response_model=ServiceResult[list[TaskNode]],
    summary="List a project's tasks as a tree",
)
async def list_project_tasks(
    service: TaskServiceDependency,
    project_id: int = Path(ge=1),
) -> ServiceResult[list[TaskNode]]:
    return await service.list_project_tasks(ProjectTaskListQuery(project_id=project_id))
