from __future__ import annotations

import io
import json
import logging
import sys

import pytest

from dailywork.core.config import Settings
from dailywork.core.correlation import bind_request_id, reset_request_id
from dailywork.core.logging import JsonLogFormatter, configure_logging


def _capture(logger_name: str, message: str, **extra: object) -> dict[str, object]:
    root_logger = logging.getLogger()
    handler = next(
        (h for h in root_logger.handlers if isinstance(h, logging.StreamHandler)),
        None,
    )
    assert handler is not None, "Expected JSON stream handler to be configured"

    buffer = io.StringIO()
    previous_stream = handler.setStream(buffer)
    try:
        logging.getLogger(logger_name).info(message, extra=extra)
    finally:
        handler.flush()
        handler.setStream(previous_stream)

    log_lines = buffer.getvalue().strip().splitlines()
    assert log_lines, "Expected structured log line to be captured"
    return json.loads(log_lines[-1])


@pytest.fixture()
def settings() -> Settings:
    settings = Settings(environment="test", log_level="INFO")
    configure_logging(settings)
    return settings


def test_log_lines_carry_request_id_and_service(settings: Settings) -> None:
    token = bind_request_id("req-json-1")
    try:
        payload = _capture("dailywork.services.tasks", "Task created")
    finally:
        reset_request_id(token)

    assert payload["message"] == "Task created"
    assert payload["request_id"] == "req-json-1"
    assert payload["environment"] == "test"
    assert payload["level"] == "INFO"
    assert payload["service"] == settings.project_name


def test_entity_ids_are_top_level_and_other_extras_nest(settings: Settings) -> None:
    payload = _capture(
        "dailywork.services.tasks",
        "Task deleted",
        task_id=7,
        user_id=3,
        promoted_children=2,
    )

    assert payload["task_id"] == 7
    assert payload["user_id"] == 3
    assert "project_id" not in payload
    assert payload["context"] == {"promoted_children": 2}
    assert payload["request_id"] == "-"


def test_formatter_renders_exceptions() -> None:
    formatter = JsonLogFormatter(service="DailyWork", environment="test")
    try:
        raise RuntimeError("storage went away")
    except RuntimeError:
        record = logging.getLogger("dailywork").makeRecord(
            "dailywork", logging.ERROR, __file__, 1, "Task update failed", None, exc_info=sys.exc_info()
        )

    payload = json.loads(formatter.format(record))

    assert payload["level"] == "ERROR"
    assert "storage went away" in payload["exception"]
    assert "context" not in payload
