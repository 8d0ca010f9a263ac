"""Warn when release-toggle keys used in source are missing from the manifest.

Usage: enforce-toggles
Optional: ENTITLEMENTS_MANIFEST=path/to/manifest.json enforce-toggles

The check is advisory. The exit status is 0 whenever the manifest loads,
whether or not unknown keys were found; TOGGLES_STRICT=true opts into a
failing exit status for unknown keys.
"""

import logging
import sys
from typing import Iterable, Optional, TextIO

from release_toggles.audit import AuditReport, run_audit
from release_toggles.config import load_audit_config
from release_toggles.logging_config import configure_logging
from release_toggles.manifest import ManifestUnavailableError
from release_toggles.sentry_config import init_sentry


logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_UNKNOWN_KEYS_STRICT = 1
EXIT_MANIFEST_UNAVAILABLE = 2

_PREFIX = "enforce-toggles:"


def _emit(line: str, stream: Optional[TextIO] = None) -> None:
    """Write a status line.

    Args:
        line: Line to emit.
        stream: Destination stream (stdout unless reporting a failure).
    """
    (stream or sys.stdout).write(f"{line}\n")


def _emit_keys(keys: Iterable[str]) -> None:
    for key in sorted(keys):
        _emit(f"  - {key}")


def report(audit: AuditReport) -> None:
    """Print the human-readable outcome of an audit."""
    if not audit.source_root_found:
        _emit(f"{_PREFIX} source directory not found; no files were scanned.")

    if audit.unknown_keys:
        _emit(f"{_PREFIX} used toggle keys not in manifest ({len(audit.unknown_keys)}):")
        _emit_keys(audit.unknown_keys)
    elif audit.source_root_found:
        _emit(
            f"{_PREFIX} all used toggle keys are defined "
            f"({len(audit.used_keys)} keys in {audit.files_scanned} files)."
        )

    if audit.unused_keys:
        _emit(f"{_PREFIX} manifest keys not used in source ({len(audit.unused_keys)}):")
        _emit_keys(audit.unused_keys)


def main() -> int:
    """Run the toggle manifest check.

    Returns:
        Process exit code (0 on success, 2 when the manifest is unavailable,
        1 only in strict mode with unknown keys).
    """
    configure_logging()
    config = load_audit_config()
    init_sentry(config.sentry_dsn, "enforce-toggles")

    try:
        audit = run_audit(config)
    except ManifestUnavailableError as exc:
        logger.error("Manifest unavailable: %s", exc)
        _emit(f"{_PREFIX} could not load manifest at {exc.path}: {exc}", stream=sys.stderr)
        if exc.hint:
            _emit(f"  hint: {exc.hint}", stream=sys.stderr)
        return EXIT_MANIFEST_UNAVAILABLE

    report(audit)

    if config.strict and audit.has_unknown_keys:
        return EXIT_UNKNOWN_KEYS_STRICT
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
