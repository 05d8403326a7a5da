"""Tests for centralized Settings and the get_settings cache."""

from __future__ import annotations

from pathlib import Path

import pytest

from campaign_planner.config import Settings, get_settings

# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _clear_settings_cache() -> None:
    """Clear get_settings lru_cache before each test."""
    get_settings.cache_clear()


# ---------------------------------------------------------------------------
# Settings
# ---------------------------------------------------------------------------

class TestSettings:
    """Verify Settings defaults and environment overrides."""

    def test_settings_defaults(self) -> None:
        s = Settings(_env_file=None)  # type: ignore[call-arg]

        assert s.production is False
        assert s.api_port == 8000
        assert s.benchmarks_path.name == "benchmarks.yaml"
        assert s.benchmarks_path.exists()
        assert s.estimation_config_path.name == "estimation.yaml"
        assert s.sentry_dsn == ""

    def test_settings_from_env(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("PRODUCTION", "true")
        monkeypatch.setenv("API_PORT", "9090")
        monkeypatch.setenv("BENCHMARKS_PATH", str(tmp_path / "b.yaml"))
        monkeypatch.setenv("SENTRY_DSN", "https://key@o0.ingest.sentry.io/0")

        s = Settings(_env_file=None)  # type: ignore[call-arg]

        assert s.production is True
        assert s.api_port == 9090
        assert s.benchmarks_path == tmp_path / "b.yaml"
        assert s.sentry_dsn == "https://key@o0.ingest.sentry.io/0"

    def test_invalid_env_exits(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("API_PORT", "not-a-port")
        with pytest.raises(SystemExit):
            get_settings()


# ---------------------------------------------------------------------------
# Cache
# ---------------------------------------------------------------------------

class TestGetSettingsCache:
    def test_get_settings_returns_same_instance(self) -> None:
        assert get_settings() is get_settings()

    def test_cache_clear_gives_fresh_instance(self) -> None:
        first = get_settings()
        get_settings.cache_clear()
        assert get_settings() is not first
