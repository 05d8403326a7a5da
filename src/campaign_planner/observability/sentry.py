"""Sentry error reporting bridged from structlog.

``init_sentry(dsn)`` starts the SDK (nothing happens for an empty DSN) and
``get_sentry_processor()`` returns the structlog processor that forwards
ERROR-level events.
"""

from __future__ import annotations

import logging

import sentry_sdk
import structlog
from sentry_sdk.integrations.logging import LoggingIntegration
from structlog_sentry import SentryProcessor


def init_sentry(dsn: str) -> None:
    """Initialize the Sentry SDK; an empty *dsn* leaves Sentry off."""
    if not dsn:
        return

    sentry_sdk.init(
        dsn=dsn,
        traces_sample_rate=0.1,
        send_default_pii=False,
        integrations=[
            # Error events reach Sentry through structlog only
            LoggingIntegration(event_level=None, level=None),
        ],
    )


def get_sentry_processor() -> structlog.types.Processor:
    """Structlog processor that sends ERROR events to Sentry.

    Goes after ``add_log_level`` and before the renderer.
    """
    return SentryProcessor(event_level=logging.ERROR)
