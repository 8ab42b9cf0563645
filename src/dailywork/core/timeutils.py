"""Conversions between caller-local wall-clock time and stored UTC instants.

Everything persisted is an aware UTC ``datetime``. Callers send and receive
times in the configured display timezone. Naive values coming from clients are
read as display-local time; naive values coming back from the database (SQLite
drops tzinfo) are read as UTC.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping
from zoneinfo import ZoneInfo

from ..errors import ValidationError

TIME_FIELDS = ("start_time", "finish_time")


def get_zone(name: str | ZoneInfo) -> ZoneInfo:
    if isinstance(name, ZoneInfo):
        return name
    return ZoneInfo(name)


def to_utc(value: datetime, tz: str | ZoneInfo) -> datetime:
    """Return ``value`` as an aware UTC instant."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=get_zone(tz))
    return value.astimezone(timezone.utc)


def to_display(value: datetime, tz: str | ZoneInfo) -> datetime:
    """Return a stored instant converted to the display timezone."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(get_zone(tz))


def normalize_times_to_utc(data: Mapping[str, Any], tz: str | ZoneInfo) -> dict[str, Any]:
    """Copy ``data`` with every present time field converted to UTC."""
    normalized = dict(data)
    for field in TIME_FIELDS:
        value = normalized.get(field)
        if isinstance(value, datetime):
            normalized[field] = to_utc(value, tz)
    return normalized


def ensure_finish_after_start(start: datetime, finish: datetime, tz: str | ZoneInfo) -> None:
    """Raise ``ValidationError`` unless ``finish`` is strictly after ``start``."""
    if to_utc(finish, tz) <= to_utc(start, tz):
        raise ValidationError(
            "Finish time must be later than start time.",
            details={"start_time": start.isoformat(), "finish_time": finish.isoformat()},
        )


__all__ = [
    "TIME_FIELDS",
    "ensure_finish_after_start",
    "get_zone",
    "normalize_times_to_utc",
    "to_display",
    "to_utc",
]
