"""Tests for application entry point: structlog config and app creation."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest
import structlog
from fastapi.testclient import TestClient
from structlog_sentry import SentryProcessor

from campaign_planner.app import configure_logging, create_app
from campaign_planner.benchmarks.table import BenchmarkTable
from campaign_planner.config import Settings
from campaign_planner.estimation.config import EstimationConfig


@pytest.fixture(autouse=True)
def _reset_structlog() -> Iterator[None]:
    """Reset structlog so configuration doesn't leak between tests."""
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


def _settings(**overrides) -> Settings:
    return Settings(_env_file=None, **overrides)  # type: ignore[call-arg]


class TestConfigureLogging:
    """Tests for structlog configuration in dev and production modes."""

    def test_development_mode_uses_console_renderer(self) -> None:
        configure_logging(production=False)
        processors = structlog.get_config()["processors"]
        assert any(isinstance(p, structlog.dev.ConsoleRenderer) for p in processors)

    def test_production_mode_uses_json_renderer(self) -> None:
        configure_logging(production=True)
        processors = structlog.get_config()["processors"]
        assert any(isinstance(p, structlog.processors.JSONRenderer) for p in processors)

    def test_service_bound_to_context(self) -> None:
        configure_logging()
        assert structlog.contextvars.get_contextvars()["service"] == "campaign-planner"

    def test_sentry_processor_only_when_enabled(self) -> None:
        configure_logging()
        assert not any(isinstance(p, SentryProcessor) for p in structlog.get_config()["processors"])

        configure_logging(sentry_enabled=True)
        processors = structlog.get_config()["processors"]
        sentry_at = next(i for i, p in enumerate(processors) if isinstance(p, SentryProcessor))
        assert processors[sentry_at - 1] is structlog.stdlib.add_log_level


class TestCreateApp:
    def test_loads_shipped_benchmarks(self) -> None:
        app = create_app(_settings())

        assert isinstance(app.state.benchmarks, BenchmarkTable)
        assert isinstance(app.state.estimation_config, EstimationConfig)
        assert TestClient(app).get("/ready").status_code == 200

    def test_missing_benchmarks_still_serves_health(self, tmp_path: Path) -> None:
        app = create_app(_settings(benchmarks_path=tmp_path / "missing.yaml"))
        client = TestClient(app)

        assert app.state.benchmarks is None
        assert client.get("/health").status_code == 200
        assert client.get("/ready").status_code == 503
        assert client.post("/estimates", json={}).status_code == 503

    def test_prebuilt_table_is_used(self, flat_table: BenchmarkTable) -> None:
        app = create_app(_settings(), benchmarks=flat_table)
        assert app.state.benchmarks is flat_table

    def test_estimation_config_from_settings(self, tmp_path: Path) -> None:
        path = tmp_path / "estimation.yaml"
        path.write_text("min_data_points: 7\n", encoding="utf-8")

        app = create_app(_settings(estimation_config_path=path))

        assert app.state.estimation_config.min_data_points == 7

    def test_responses_carry_request_id(self) -> None:
        response = TestClient(create_app(_settings())).get("/health")
        assert response.headers.get("X-Request-ID")

    def test_metrics_exposed(self) -> None:
        response = TestClient(create_app(_settings())).get("/metrics")
        assert response.status_code == 200
        assert "campaign_planner_estimates_total" in response.text
