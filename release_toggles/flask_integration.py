"""Flask binding for release toggle reads.

Each request gets its own ReleaseToggleReader on ``flask.g``, built from the
entitlements the provider returns for that request. Unknown-toggle notices
are flushed once the response has been produced.
"""

import logging
from typing import Any, Callable, Mapping, Optional

from flask import Flask, g

from release_toggles.release_toggle import DeferredEffectQueue, ReleaseToggleReader, UnknownToggleAlert
from release_toggles.sentry_config import init_sentry
from release_toggles.structured_logging import log_unknown_toggle


logger = logging.getLogger(__name__)

EntitlementsProvider = Callable[[], Optional[Mapping[str, Any]]]


def init_release_toggles(
    app: Flask,
    entitlements_provider: EntitlementsProvider,
    alert: Optional[UnknownToggleAlert] = log_unknown_toggle,
    sentry_dsn: Optional[str] = None,
) -> None:
    """Register per-request toggle readers on a Flask app.

    Args:
        app: Flask application instance.
        entitlements_provider: Called once per request; returns the
            entitlement mapping, or None when it is unavailable.
        alert: Delivery capability for unknown-toggle notices. Defaults to a
            structured WARNING log event; None discards notices.
        sentry_dsn: When set, Sentry is initialised with the Flask
            integration so failing views and ERROR logs are reported.
    """
    init_sentry(sentry_dsn, "web", with_flask=True)

    @app.before_request
    def _bind_release_toggle_reader() -> None:
        g.release_toggles = ReleaseToggleReader(
            entitlements_provider(),
            effects=DeferredEffectQueue(alert=alert),
        )

    @app.after_request
    def _flush_release_toggle_notices(response):
        reader = getattr(g, "release_toggles", None)
        if reader is not None:
            delivered = reader.effects.flush()
            if delivered:
                logger.debug("Flushed %d unknown-toggle notices", delivered)
        return response


def use_release_toggle(toggle_key: str, *, default_value: Any = True, alert_if_unknown: bool = True) -> Any:
    """Read a release toggle for the current request.

    Raises:
        RuntimeError: If called outside a request of an initialised app.
    """
    reader = g.get("release_toggles")
    if reader is None:
        message = "Release toggles are not initialised for this app; call init_release_toggles(app, ...)"
        raise RuntimeError(message)
    return reader.use(toggle_key, default_value=default_value, alert_if_unknown=alert_if_unknown)
