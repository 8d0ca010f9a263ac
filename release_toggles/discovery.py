"""Source file discovery for the toggle audit."""

import logging
import os
from pathlib import Path
from typing import AbstractSet, Iterator, Union


logger = logging.getLogger(__name__)

SOURCE_EXTENSIONS = frozenset({".js", ".jsx", ".ts", ".tsx"})
"""Script and markup-script suffixes scanned for hook calls."""

VENDORED_DIRECTORY_NAMES = frozenset({"node_modules"})
"""Directories holding third-party code; never descended into."""


def discover_source_files(
    root_dir: Union[str, Path],
    extensions: AbstractSet[str] = SOURCE_EXTENSIONS,
    excluded_dirs: AbstractSet[str] = VENDORED_DIRECTORY_NAMES,
) -> Iterator[Path]:
    """Yield source files under ``root_dir``, skipping vendored directories.

    Args:
        root_dir: Directory to walk recursively.
        extensions: File suffixes to keep (compared case-sensitively).
        excluded_dirs: Directory names whose subtrees are pruned.

    Yields:
        Paths of matching files. Order is unspecified.
    """
    root = Path(root_dir)
    if not root.is_dir():
        logger.debug("Source root %s is not a directory; nothing to scan", root)
        return

    def _on_walk_error(error: OSError) -> None:
        logger.warning("Skipping unreadable directory %s: %s", error.filename, error.strerror)

    for dirpath, dirnames, filenames in os.walk(root, onerror=_on_walk_error):
        # Prune in place so os.walk never enters vendored trees.
        dirnames[:] = [name for name in dirnames if name not in excluded_dirs]
        for filename in filenames:
            if Path(filename).suffix in extensions:
                yield Path(dirpath) / filename
