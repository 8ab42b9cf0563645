"""Domain models exposed by the service."""

from __future__ import annotations

from .common import TimestampMixin
from .task import Task, TaskBase, TaskStatus
from .user import User, UserBase

__all__ = [
    "Task",
    "TaskBase",
    "TaskStatus",
    "TimestampMixin",
    "User",
    "UserBase",
]
