"""Environment-driven configuration for the toggle audit."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from release_toggles.extraction import DEFAULT_HOOK_NAME
from release_toggles.manifest import resolve_manifest_path


logger = logging.getLogger(__name__)

DEFAULT_SOURCE_DIR_NAME = "src"

_TRUE_VALUES = ("true", "1", "t", "yes", "on")
_FALSE_VALUES = ("false", "0", "f", "no", "off")


@dataclass(frozen=True)
class AuditConfig:
    """Resolved settings for one audit run."""

    project_root: Path
    manifest_path: Path
    source_root: Path
    hook_name: str = DEFAULT_HOOK_NAME
    report_unused: bool = False
    """Also report manifest keys never referenced in source."""

    strict: bool = False
    """Exit non-zero when unknown keys are found."""

    sentry_dsn: Optional[str] = None


def _parse_bool(raw_value: Optional[str], name: str, default: bool) -> bool:
    """Parse a boolean env value, falling back to ``default`` on garbage.

    Args:
        raw_value: Raw environment value, or None when unset.
        name: Variable name (for logging).
        default: Value used when unset or unparseable.

    Returns:
        Parsed boolean.
    """
    if raw_value is None or raw_value.strip() == "":
        return default
    value_lower = raw_value.strip().lower()
    if value_lower in _TRUE_VALUES:
        return True
    if value_lower in _FALSE_VALUES:
        return False
    logger.warning(
        "Invalid boolean value '%s' for %s. "
        "Valid values: true, 1, t, yes, on, false, 0, f, no, off. "
        "Using default %s",
        raw_value,
        name,
        default,
    )
    return default


def load_audit_config(environ: Optional[Mapping[str, str]] = None) -> AuditConfig:
    """Build an AuditConfig from environment variables.

    Supported env vars:
    - TOGGLES_PROJECT_ROOT: project root (default: current directory)
    - ENTITLEMENTS_MANIFEST: manifest path (default: <root>/config/entitlements-manifest.json)
    - TOGGLES_SOURCE_DIR: directory to scan (default: <root>/src)
    - TOGGLES_HOOK_NAME: hook identifier (default: useReleaseToggle)
    - TOGGLES_REPORT_UNUSED: also list unused manifest keys (default: false)
    - TOGGLES_STRICT: exit 1 when unknown keys are found (default: false)
    - TOGGLES_SENTRY_DSN: enable Sentry error tracking (default: unset)

    Args:
        environ: Mapping to read from; defaults to ``os.environ``.

    Returns:
        Resolved configuration. Loading never fails; bad values fall back
        to defaults with a warning.
    """
    env = os.environ if environ is None else environ

    raw_root = (env.get("TOGGLES_PROJECT_ROOT") or "").strip()
    project_root = Path(raw_root) if raw_root else Path.cwd()

    raw_source_dir = (env.get("TOGGLES_SOURCE_DIR") or "").strip()
    if raw_source_dir:
        source_root = Path(raw_source_dir)
        if not source_root.is_absolute():
            source_root = project_root / source_root
    else:
        source_root = project_root / DEFAULT_SOURCE_DIR_NAME

    hook_name = (env.get("TOGGLES_HOOK_NAME") or "").strip() or DEFAULT_HOOK_NAME

    return AuditConfig(
        project_root=project_root,
        manifest_path=resolve_manifest_path(env, project_root),
        source_root=source_root,
        hook_name=hook_name,
        report_unused=_parse_bool(env.get("TOGGLES_REPORT_UNUSED"), "TOGGLES_REPORT_UNUSED", False),
        strict=_parse_bool(env.get("TOGGLES_STRICT"), "TOGGLES_STRICT", False),
        sentry_dsn=(env.get("TOGGLES_SENTRY_DSN") or "").strip() or None,
    )
