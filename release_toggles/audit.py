"""Manifest consistency audit: compare used toggle keys against the manifest."""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import AbstractSet, FrozenSet, Iterable, Optional, Set

from release_toggles.config import AuditConfig
from release_toggles.discovery import discover_source_files
from release_toggles.extraction import KeyExtractor, RegexKeyExtractor
from release_toggles.manifest import load_manifest


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuditReport:
    """Outcome of a single audit run."""

    manifest_keys: FrozenSet[str]
    used_keys: FrozenSet[str]
    unknown_keys: FrozenSet[str]
    files_scanned: int
    source_root_found: bool = True
    unused_keys: Optional[FrozenSet[str]] = None
    """Manifest keys never used; None unless the unused report was requested."""

    @property
    def has_unknown_keys(self) -> bool:
        return bool(self.unknown_keys)


def audit_all_keys(manifest_keys: AbstractSet[str], used_keys: AbstractSet[str]) -> FrozenSet[str]:
    """Return keys used in source but absent from the manifest."""
    return frozenset(used_keys) - frozenset(manifest_keys)


def find_unused_keys(manifest_keys: AbstractSet[str], used_keys: AbstractSet[str]) -> FrozenSet[str]:
    """Return manifest keys never referenced in source."""
    return frozenset(manifest_keys) - frozenset(used_keys)


def collect_used_keys(files: Iterable[Path], extractor: KeyExtractor) -> tuple[Set[str], int]:
    """Extract and union toggle keys across source files.

    Unreadable files are logged and skipped.

    Args:
        files: Source file paths.
        extractor: Extraction strategy applied to each file's text.

    Returns:
        Tuple of (used key set, number of files actually scanned).
    """
    used: Set[str] = set()
    scanned = 0
    for path in files:
        try:
            content = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            logger.warning("Skipping unreadable source file %s: %s", path, exc)
            continue
        scanned += 1
        keys = extractor.extract_used_keys(content)
        if keys:
            logger.debug("%s: %s", path, ", ".join(sorted(keys)))
        used |= keys
    return used, scanned


def run_audit(config: AuditConfig, extractor: Optional[KeyExtractor] = None) -> AuditReport:
    """Run the full audit described by ``config``.

    Args:
        config: Resolved audit configuration.
        extractor: Extraction strategy; defaults to the regex extractor for
            ``config.hook_name``.

    Returns:
        AuditReport for this run.

    Raises:
        ManifestUnavailableError: If the manifest cannot be loaded. No
            scanning happens in that case.
    """
    manifest_keys = load_manifest(config.manifest_path)
    key_extractor = extractor if extractor is not None else RegexKeyExtractor(config.hook_name)

    source_root_found = config.source_root.is_dir()
    if not source_root_found:
        logger.warning("Source root %s does not exist; no files scanned", config.source_root)

    used, scanned = collect_used_keys(discover_source_files(config.source_root), key_extractor)
    unknown = audit_all_keys(manifest_keys, used)
    unused = find_unused_keys(manifest_keys, used) if config.report_unused else None

    logger.info(
        "Toggle audit complete: files=%d used=%d manifest=%d unknown=%d",
        scanned,
        len(used),
        len(manifest_keys),
        len(unknown),
    )

    return AuditReport(
        manifest_keys=manifest_keys,
        used_keys=frozenset(used),
        unknown_keys=unknown,
        files_scanned=scanned,
        source_root_found=source_root_found,
        unused_keys=unused,
    )
