"""Domain service layer package."""

from __future__ import annotations

from .auth import AuthenticationError, AuthService
from .tasks import TaskService
from .users import UserService

__all__ = ["AuthService", "AuthenticationError", "TaskService", "UserService"]
