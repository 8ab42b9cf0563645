"""Pydantic schemas for public interfaces."""

from __future__ import annotations

from .auth import AccessToken, LoginResponse, TokenPayload
from .common import ServiceResult
from .system import ErrorResponse, HealthCheckResponse, RootResponse
from .task import (
    ProjectTaskListQuery,
    TaskCreate,
    TaskCreated,
    TaskDelete,
    TaskDetailQuery,
    TaskNode,
    TaskPatch,
    TaskRead,
    TaskUpdate,
)
from .user import RegisterRequest, UserPublic

__all__ = [
    "AccessToken",
    "ErrorResponse",
    "HealthCheckResponse",
    "LoginResponse",
    "ProjectTaskListQuery",
    "RegisterRequest",
    "RootResponse",
    "ServiceResult",
    "TaskCreate",
    "TaskCreated",
    "TaskDelete",
    "TaskDetailQuery",
    "TaskNode",
    "TaskPatch",
    "TaskRead",
    "TaskUpdate",
    "TokenPayload",
    "UserPublic",
]
