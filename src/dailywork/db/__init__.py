"""Database related helpers."""

from __future__ import annotations

from .session import atomic, create_session_factory, get_engine, get_session, init_db

__all__ = ["atomic", "create_session_factory", "get_engine", "get_session", "init_db"]
