"""Entitlements manifest loading.

The manifest is the authoritative list of toggle keys. Two JSON shapes are
accepted: a flat array of key strings, or an object keyed by toggle key whose
values carry per-key metadata (ignored here).
"""

import json
import logging
from pathlib import Path
from typing import Any, FrozenSet, Mapping, Optional, Union


logger = logging.getLogger(__name__)

MANIFEST_ENV_VAR = "ENTITLEMENTS_MANIFEST"
DEFAULT_MANIFEST_RELATIVE_PATH = Path("config") / "entitlements-manifest.json"


class ManifestUnavailableError(ValueError):
    """Raised when the manifest cannot be read or parsed."""

    def __init__(self, message: str, path: Path, hint: Optional[str] = None):
        super().__init__(message)
        self.path = path
        self.hint = hint


def resolve_manifest_path(environ: Mapping[str, str], project_root: Path) -> Path:
    """Return the manifest path, honouring the ENTITLEMENTS_MANIFEST override.

    Args:
        environ: Environment mapping to read the override from.
        project_root: Root used for the default location.

    Returns:
        Path to the manifest file (not checked for existence).
    """
    override = (environ.get(MANIFEST_ENV_VAR) or "").strip()
    if override:
        return Path(override)
    return project_root / DEFAULT_MANIFEST_RELATIVE_PATH


def _keys_from_document(document: Any, path: Path) -> FrozenSet[str]:
    if isinstance(document, dict):
        return frozenset(document.keys())

    if isinstance(document, list):
        non_strings = [entry for entry in document if not isinstance(entry, str)]
        if non_strings:
            logger.warning(
                "Manifest at %s contains non-string entries %r; they are ignored",
                path,
                non_strings,
            )
        return frozenset(entry for entry in document if isinstance(entry, str))

    logger.warning(
        "Manifest at %s is a JSON %s, not an array or object; treating it as empty",
        path,
        type(document).__name__,
    )
    return frozenset()


def load_manifest(path: Union[str, Path]) -> FrozenSet[str]:
    """Load the set of valid toggle keys from a JSON manifest.

    Args:
        path: Filesystem path to the manifest document.

    Returns:
        Frozen set of toggle keys.

    Raises:
        ManifestUnavailableError: If the file is missing, unreadable or not
            valid JSON. Documents that parse but hold unexpected entries load
            with a warning.
    """
    manifest_path = Path(path)

    try:
        raw = manifest_path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        message = f"Manifest not found at {manifest_path}"
        raise ManifestUnavailableError(
            message,
            manifest_path,
            hint=f"Create the file or point {MANIFEST_ENV_VAR} at an existing manifest",
        ) from exc
    except (OSError, UnicodeDecodeError) as exc:
        message = f"Could not read manifest at {manifest_path}: {exc}"
        raise ManifestUnavailableError(message, manifest_path) from exc

    try:
        document = json.loads(raw)
    except json.JSONDecodeError as exc:
        message = f"Manifest at {manifest_path} is not valid JSON: {exc}"
        raise ManifestUnavailableError(
            message,
            manifest_path,
            hint="Check for trailing commas or unquoted keys",
        ) from exc

    keys = _keys_from_document(document, manifest_path)
    logger.debug("Loaded %d toggle keys from manifest %s", len(keys), manifest_path)
    return keys
