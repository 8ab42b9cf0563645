from __future__ import annotations

import pytest
from pydantic import ValidationError

from dailywork.core.config import Settings


def test_environment_profiles_apply_defaults() -> None:
    dev = Settings(environment="development")
    assert dev.environment == "development"
    assert dev.log_level == "DEBUG"
    assert dev.reload is True

    test_profile = Settings(environment="test")
    assert test_profile.log_level == "WARNING"
    assert test_profile.reload is False

    ci_profile = Settings(environment="ci")
    assert ci_profile.log_level == "INFO"
    assert ci_profile.reload is False


def test_environment_aliases_are_normalised() -> None:
    assert Settings(environment="DEV").environment == "development"
    assert Settings(environment="testing").environment == "test"


def test_environment_profile_respects_explicit_overrides(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DAILYWORK_LOG_LEVEL", "error")
    overridden = Settings(environment="test")
    assert overridden.log_level == "ERROR"


def test_cors_lists_accept_comma_separated_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("DAILYWORK_CORS_ALLOW_ORIGINS", "https://a.example, https://b.example")

    assert Settings().cors_allow_origins == ["https://a.example", "https://b.example"]


def test_display_timezone_must_exist() -> None:
    assert Settings(display_timezone="Europe/Berlin").display_timezone == "Europe/Berlin"
    with pytest.raises(ValidationError):
        Settings(display_timezone="Mars/Olympus_Mons")
