"""Structured event logging with request correlation."""

import json
import logging
import uuid
from typing import Any

from flask import g, has_request_context, request


logger = logging.getLogger(__name__)


def get_correlation_id() -> str:
    """Get or create correlation ID for the current request, "none" outside one."""
    if not has_request_context():
        return "none"
    if not hasattr(g, "correlation_id"):
        g.correlation_id = request.headers.get("X-Correlation-ID", uuid.uuid4().hex)
    return g.correlation_id


def log_event(
    event_type: str,
    severity: str = "INFO",
    **context: Any,
) -> None:
    """Log a structured event with correlation ID and context.

    Args:
        event_type: Name of the event (e.g., "release_toggle_unknown")
        severity: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        **context: Additional context fields to include in the event
    """
    event_payload = {
        "event_type": event_type,
        "correlation_id": get_correlation_id(),
        **context,
    }

    level = getattr(logging, severity.upper(), logging.INFO)
    logger.log(level, "event=%s %s", event_type, json.dumps(event_payload, default=str))


def log_unknown_toggle(toggle_key: str, reason: str) -> None:
    """Alert sink reporting an unknown toggle key as a structured WARNING event."""
    log_event("release_toggle_unknown", severity="WARNING", toggle_key=toggle_key, reason=reason)
