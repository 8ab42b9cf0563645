from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from dailywork.core.timeutils import (
    ensure_finish_after_start,
    normalize_times_to_utc,
    to_display,
    to_utc,
)
from dailywork.errors import ValidationError

SHANGHAI = "Asia/Shanghai"


def test_naive_input_is_read_as_display_time() -> None:
    converted = to_utc(datetime(2023, 6, 14, 9, 0), SHANGHAI)

    assert converted == datetime(2023, 6, 14, 1, 0, tzinfo=timezone.utc)
    assert converted.utcoffset() == timedelta(0)


def test_aware_input_keeps_its_instant() -> None:
    value = datetime(2023, 6, 14, 9, 0, tzinfo=timezone(timedelta(hours=-5)))

    assert to_utc(value, SHANGHAI) == datetime(2023, 6, 14, 14, 0, tzinfo=timezone.utc)


def test_naive_stored_value_is_read_as_utc() -> None:
    displayed = to_display(datetime(2023, 6, 14, 1, 0), SHANGHAI)

    assert displayed.utcoffset() == timedelta(hours=8)
    assert displayed.replace(tzinfo=None) == datetime(2023, 6, 14, 9, 0)


def test_normalize_only_touches_time_fields() -> None:
    data = {"title": "Plan", "start_time": datetime(2023, 6, 14, 9, 0), "finish_time": None}

    normalized = normalize_times_to_utc(data, SHANGHAI)

    assert normalized["title"] == "Plan"
    assert normalized["start_time"] == datetime(2023, 6, 14, 1, 0, tzinfo=timezone.utc)
    assert normalized["finish_time"] is None
    assert data["start_time"] == datetime(2023, 6, 14, 9, 0)


def test_finish_must_be_strictly_after_start() -> None:
    start = datetime(2023, 6, 14, 9, 0)

    ensure_finish_after_start(start, start + timedelta(minutes=1), SHANGHAI)
    with pytest.raises(ValidationError):
        ensure_finish_after_start(start, start, SHANGHAI)
    with pytest.raises(ValidationError):
        ensure_finish_after_start(start, start - timedelta(hours=1), SHANGHAI)


def test_mixed_naive_and_aware_values_compare_as_instants() -> None:
    start = datetime(2023, 6, 14, 9, 0)  # 01:00 UTC
    finish = datetime(2023, 6, 14, 1, 30, tzinfo=timezone.utc)

    ensure_finish_after_start(start, finish, SHANGHAI)
