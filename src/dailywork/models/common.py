"""Column helpers shared by the ``users`` and ``tasks`` tables."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import sqlalchemy as sa
from sqlmodel import Field, SQLModel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def timestamp_field(*, touch_on_update: bool = False) -> Any:
    """Aware UTC timestamp column; bulk ``UPDATE`` statements refresh it when ``touch_on_update``."""
    column_kwargs: dict[str, Any] = {"server_default": sa.func.now()}
    if touch_on_update:
        column_kwargs["onupdate"] = utcnow
    return Field(
        default_factory=utcnow,
        nullable=False,
        sa_type=sa.DateTime(timezone=True),
        sa_column_kwargs=column_kwargs,
    )


class TimestampMixin(SQLModel):
    created_at: datetime = timestamp_field()
    updated_at: datetime = timestamp_field(touch_on_update=True)


__all__ = ["TimestampMixin", "timestamp_field", "utcnow"]
