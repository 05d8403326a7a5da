"""Request tracing, metrics and error reporting for the HTTP surface."""

from campaign_planner.observability.metrics import record_estimate, setup_metrics
from campaign_planner.observability.middleware import RequestIdMiddleware
from campaign_planner.observability.sentry import get_sentry_processor, init_sentry

__all__ = [
    "RequestIdMiddleware",
    "get_sentry_processor",
    "init_sentry",
    "record_estimate",
    "setup_metrics",
]
