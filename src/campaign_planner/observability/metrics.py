"""Prometheus metrics for the estimation API.

Provides:
- ``setup_metrics(app)``: Attach prometheus-fastapi-instrumentator to a FastAPI app,
  exposing ``/metrics`` with HTTP request duration/count plus the counters below.
- ``ESTIMATES_COMPUTED``: Counter of estimates served, by confidence level.
- ``BENCHMARK_FALLBACKS``: Counter of funded pairs estimated from broader
  benchmarks, by lookup tier.
- ``COUNTRIES_FINISHED``: Counter of countries finished in the wizard, by origin.
"""

from __future__ import annotations

from fastapi import FastAPI
from prometheus_client import Counter
from prometheus_fastapi_instrumentator import Instrumentator

from campaign_planner.domain.models import EstimationResult

ESTIMATES_COMPUTED: Counter = Counter(
    "campaign_planner_estimates_total",
    "Estimates served, by confidence level",
    ["confidence"],
)

BENCHMARK_FALLBACKS: Counter = Counter(
    "campaign_planner_benchmark_fallbacks_total",
    "Funded (platform, country) pairs estimated without exact benchmark rows",
    ["tier"],
)

COUNTRIES_FINISHED: Counter = Counter(
    "campaign_planner_countries_finished_total",
    "Countries finished in the setup wizard, by how their tree was built",
    ["origin"],
)


def record_estimate(result: EstimationResult) -> None:
    """Count one served estimate and the fallbacks behind it."""
    ESTIMATES_COMPUTED.labels(confidence=result.confidence.value).inc()
    for fallback in result.fallbacks:
        BENCHMARK_FALLBACKS.labels(tier=fallback.tier.value).inc()


def setup_metrics(app: FastAPI) -> None:
    """Instrument *app* with Prometheus HTTP metrics and expose ``/metrics``.

    Health, readiness and the metrics endpoint itself are not instrumented.
    """
    Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=True,
        excluded_handlers=["/health", "/ready", "/metrics"],
    ).instrument(app).expose(app, include_in_schema=False, should_gzip=True)
