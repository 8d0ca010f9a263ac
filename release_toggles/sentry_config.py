"""Sentry error tracking initialization and configuration.

Provides optional error tracking when TOGGLES_SENTRY_DSN is set. The audit
CLI only forwards log records (a manifest failure is logged at ERROR and
becomes an event); the Flask binding additionally enables the Flask
integration.
"""

import logging
from importlib.metadata import PackageNotFoundError, version
from typing import Any, Dict, Optional

import sentry_sdk
from sentry_sdk.integrations.flask import FlaskIntegration
from sentry_sdk.integrations.logging import LoggingIntegration


_ENV_KEYS_TO_REDACT = frozenset(
    {
        "TOGGLES_SENTRY_DSN",
        "SENTRY_DSN",
    }
)


def _redact_sensitive_data(event: Dict[str, Any], _hint: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    """Redact credentials from Sentry events.

    Redacts:
    - Authorization and Cookie header values
    - The Sentry DSN itself when captured in env context

    Args:
        event: Sentry event dictionary to filter
        _hint: Additional context - unused but required by API

    Returns:
        Modified event (or None to drop event)
    """
    if "request" in event and "headers" in event["request"]:
        headers = event["request"]["headers"]
        for header in ("Authorization", "Cookie"):
            if header in headers:
                headers[header] = "[REDACTED]"

    if "contexts" in event and "env" in event["contexts"]:
        env = event["contexts"]["env"]
        for key in _ENV_KEYS_TO_REDACT:
            if key in env:
                env[key] = "[REDACTED]"

    return event


def _get_release() -> str:
    """Return the installed package version, or "unknown" in a source checkout."""
    try:
        return version("release-toggles")
    except PackageNotFoundError:
        return "unknown"


def init_sentry(sentry_dsn: Optional[str], component: str, with_flask: bool = False) -> None:
    """Initialize Sentry SDK for error tracking.

    Only initializes if a DSN is provided.

    Args:
        sentry_dsn: Sentry DSN URL (from TOGGLES_SENTRY_DSN). If None or
            empty, Sentry is disabled.
        component: Component name used as a tag ("enforce-toggles" or "web").
        with_flask: Also enable the Flask integration.
    """
    if not sentry_dsn:
        return

    integrations = [
        # WARNING+ lines become breadcrumbs and ERROR+ lines become events.
        LoggingIntegration(
            level=logging.WARNING,
            event_level=logging.ERROR,
        ),
    ]
    if with_flask:
        integrations.append(FlaskIntegration(transaction_style="endpoint"))

    sentry_sdk.init(  # type: ignore[call-arg]
        dsn=sentry_dsn,
        integrations=integrations,
        release=_get_release(),
        before_send=_redact_sensitive_data,  # type: ignore[arg-type]
        send_default_pii=False,
        traces_sample_rate=0.0,
    )

    sentry_sdk.set_tag("component", component)
