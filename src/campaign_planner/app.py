"""Application entry point serving the estimation API over FastAPI.

Configures:
- **structlog** with JSON rendering (production) or colored console (development)
- **Benchmark table** and **estimation constants** loaded once at startup
- **Request IDs** bound into every log line of a request
- **Prometheus** metrics on ``/metrics`` and **Sentry** error reporting (when a DSN is set)
"""

from __future__ import annotations

import logging

import structlog
import uvicorn
from fastapi import FastAPI

from campaign_planner.api import router as api_router
from campaign_planner.benchmarks.loader import load_benchmark_table
from campaign_planner.benchmarks.table import BenchmarkTable
from campaign_planner.config import Settings, get_settings
from campaign_planner.domain.errors import BenchmarkUnavailableError
from campaign_planner.estimation.config import load_estimation_config
from campaign_planner.health import register_health_routes
from campaign_planner.observability.metrics import setup_metrics
from campaign_planner.observability.middleware import SERVICE_NAME, RequestIdMiddleware
from campaign_planner.observability.sentry import get_sentry_processor, init_sentry

logger = structlog.get_logger()


def configure_logging(production: bool = False, sentry_enabled: bool = False) -> None:
    """Configure structlog for production (JSON) or development (console).

    Production mode (*production=True*): JSON rendering at INFO level.
    Development mode: colored console rendering at DEBUG level.

    Args:
        production: Enable production mode if ``True``.
        sentry_enabled: Forward ERROR events to Sentry if ``True``.
    """
    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
    ]
    if sentry_enabled:
        shared_processors.append(get_sentry_processor())
    shared_processors += [
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if production:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
        log_level = logging.INFO
    else:
        renderer = structlog.dev.ConsoleRenderer()
        log_level = logging.DEBUG

    structlog.configure(
        processors=[*shared_processors, renderer],
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    structlog.contextvars.bind_contextvars(service=SERVICE_NAME)


def load_benchmarks_or_none(settings: Settings) -> BenchmarkTable | None:
    """Load the benchmark table, or None when it is unavailable.

    A missing table does not stop the service: health stays up, readiness
    reports not ready, and estimate routes answer 503.
    """
    try:
        return load_benchmark_table(settings.benchmarks_path)
    except BenchmarkUnavailableError as exc:
        logger.error("benchmarks_unavailable", path=str(settings.benchmarks_path), error=str(exc))
        return None


def create_app(
    settings: Settings | None = None,
    benchmarks: BenchmarkTable | None = None,
) -> FastAPI:
    """Create the FastAPI app with estimation routes and health checks.

    Args:
        settings: Application settings.  If ``None``, ``get_settings()`` is used.
        benchmarks: A prebuilt benchmark table.  If ``None``, the table is
            loaded from ``settings.benchmarks_path``.

    Returns:
        The configured FastAPI application.
    """
    if settings is None:
        settings = get_settings()
    if benchmarks is None:
        benchmarks = load_benchmarks_or_none(settings)

    fastapi_app = FastAPI(title="Campaign Planner")
    fastapi_app.state.settings = settings
    fastapi_app.state.benchmarks = benchmarks
    fastapi_app.state.estimation_config = load_estimation_config(settings.estimation_config_path)
    fastapi_app.add_middleware(RequestIdMiddleware)
    fastapi_app.include_router(api_router)
    register_health_routes(fastapi_app)
    setup_metrics(fastapi_app)
    return fastapi_app


def main() -> None:
    """Run the API server with uvicorn."""
    settings = get_settings()
    init_sentry(settings.sentry_dsn)
    configure_logging(production=settings.production, sentry_enabled=bool(settings.sentry_dsn))
    logger.info("application_starting", port=settings.api_port)

    fastapi_app = create_app(settings)

    config = uvicorn.Config(
        fastapi_app,
        host="0.0.0.0",
        port=settings.api_port,
        log_level="info",
    )
    uvicorn.Server(config).run()


if __name__ == "__main__":
    main()
