"""Release toggle reads against an explicitly passed entitlement mapping.

A read returns the entitlement value for a key when present, otherwise the
caller's default. Absent keys may request an "unknown toggle" notice. Notices
are not delivered during the read: they are queued on a DeferredEffectQueue
and delivered later by ``flush()``, so callers decide when (for a web request,
after the response is built) and tests can inspect what was requested.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional


logger = logging.getLogger(__name__)

REASON_UNKNOWN_KEY = "unknown_key"
REASON_ENTITLEMENTS_UNAVAILABLE = "entitlements_unavailable"

UnknownToggleAlert = Callable[[str, str], None]
"""Delivery capability for notices: called with (toggle_key, reason)."""


@dataclass(frozen=True)
class UnknownToggleNotice:
    """A request to report that a toggle key was read but not found."""

    toggle_key: str
    reason: str


class DeferredEffectQueue:
    """Collects unknown-toggle notices until they are flushed."""

    def __init__(self, alert: Optional[UnknownToggleAlert] = None) -> None:
        self._alert = alert
        self._pending: List[UnknownToggleNotice] = []

    @property
    def pending(self) -> List[UnknownToggleNotice]:
        """Notices requested since the last flush, in request order."""
        return list(self._pending)

    def schedule(self, notice: UnknownToggleNotice) -> None:
        """Queue a notice; repeated identical notices are kept once."""
        if notice not in self._pending:
            self._pending.append(notice)

    def flush(self) -> int:
        """Deliver queued notices to the alert capability and clear the queue.

        Delivery is fire-and-forget: an alert that raises is logged and the
        remaining notices are still delivered.

        Returns:
            Number of notices taken off the queue.
        """
        notices, self._pending = self._pending, []
        if self._alert is None:
            return len(notices)

        for notice in notices:
            try:
                self._alert(notice.toggle_key, notice.reason)
            except Exception:
                logger.exception("Unknown-toggle alert failed for key '%s'", notice.toggle_key)
        return len(notices)


def use_release_toggle(
    entitlements: Optional[Mapping[str, Any]],
    toggle_key: str,
    *,
    default_value: Any = True,
    alert_if_unknown: bool = True,
    effects: Optional[DeferredEffectQueue] = None,
) -> Any:
    """Read a release toggle.

    Args:
        entitlements: Mapping of toggle keys to granted values, or None when
            the entitlement source is unavailable.
        toggle_key: Key to read.
        default_value: Returned when the key is absent or entitlements are
            unavailable.
        alert_if_unknown: Request an unknown-toggle notice when the key is
            absent.
        effects: Queue receiving the notice. Without one, no notice is
            recorded.

    Returns:
        The entitlement value for ``toggle_key`` when present, else
        ``default_value``.
    """
    if entitlements is not None and toggle_key in entitlements:
        return entitlements[toggle_key]

    if alert_if_unknown and effects is not None:
        reason = REASON_ENTITLEMENTS_UNAVAILABLE if entitlements is None else REASON_UNKNOWN_KEY
        effects.schedule(UnknownToggleNotice(toggle_key=toggle_key, reason=reason))

    return default_value


class ReleaseToggleReader:
    """Binds an entitlement mapping and an effect queue for repeated reads."""

    def __init__(
        self,
        entitlements: Optional[Mapping[str, Any]],
        effects: Optional[DeferredEffectQueue] = None,
    ) -> None:
        self.entitlements = entitlements
        self.effects = effects if effects is not None else DeferredEffectQueue()

    def use(self, toggle_key: str, *, default_value: Any = True, alert_if_unknown: bool = True) -> Any:
        return use_release_toggle(
            self.entitlements,
            toggle_key,
            default_value=default_value,
            alert_if_unknown=alert_if_unknown,
            effects=self.effects,
        )
