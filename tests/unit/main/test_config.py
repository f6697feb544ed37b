from __future__ import annotations

from src.main.config import AppSettings, get_settings
from src.shared.consts import EnumEnvironment


def test_get_settings_loads_defaults(monkeypatch) -> None:
    monkeypatch.delenv("DB_MONGO_URI", raising=False)
    monkeypatch.delenv("STATS_MAX_ZERO_RUN", raising=False)
    settings = get_settings()
    assert settings.database.mongo_uri.startswith("mongodb://")
    assert settings.environment == EnumEnvironment.DEVELOPMENT
    assert settings.stats.max_zero_run == 2
    assert settings.stats.weather_zone == "montpellier"


def test_settings_respect_environment_variables(monkeypatch) -> None:
    monkeypatch.setenv("DB_MONGO_URI", "mongodb://test")
    monkeypatch.setenv("APP_TITLE", "Testing")
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("STATS_MAX_ZERO_RUN", "5")
    monkeypatch.setenv("STATS_FETCH_TIMEOUT_SECONDS", "2.5")

    settings = AppSettings()

    assert settings.database.mongo_uri == "mongodb://test"
    assert settings.app.title == "Testing"
    assert settings.logging.level.value == "DEBUG"
    assert settings.stats.max_zero_run == 5
    assert settings.stats.fetch_timeout_seconds == 2.5


def test_git_commit_accepts_unprefixed_variable(monkeypatch) -> None:
    monkeypatch.delenv("APP_GIT_COMMIT", raising=False)
    monkeypatch.setenv("GIT_COMMIT", "f00ba12")

    assert AppSettings().app.git_commit == "f00ba12"
