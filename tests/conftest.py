"""
Pytest configuration and shared fixtures.
"""

import json
import sys
from pathlib import Path

import pytest


# Add the workspace root to path so tests run from a plain checkout
WORKSPACE_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(WORKSPACE_ROOT))

TOGGLE_ENV_VARS = (
    "ENTITLEMENTS_MANIFEST",
    "TOGGLES_PROJECT_ROOT",
    "TOGGLES_SOURCE_DIR",
    "TOGGLES_HOOK_NAME",
    "TOGGLES_REPORT_UNUSED",
    "TOGGLES_STRICT",
    "TOGGLES_LOG_LEVEL",
    "TOGGLES_LOG_FORMAT",
    "TOGGLES_SENTRY_DSN",
)


@pytest.fixture
def workspace_root():
    """Return the absolute path to the workspace root."""
    return WORKSPACE_ROOT


@pytest.fixture
def clean_toggle_env(monkeypatch):
    """Remove every toggle-related environment variable for the test."""
    for name in TOGGLE_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def project_root(tmp_path):
    """Return an empty project root containing a src/ directory."""
    (tmp_path / "src").mkdir()
    return tmp_path


@pytest.fixture
def write_manifest(project_root):
    """Write a manifest document to the default location and return its path."""

    def _write(document, path=None):
        manifest_path = Path(path) if path else project_root / "config" / "entitlements-manifest.json"
        manifest_path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(document, str):
            manifest_path.write_text(document, encoding="utf-8")
        else:
            manifest_path.write_text(json.dumps(document), encoding="utf-8")
        return manifest_path

    return _write


@pytest.fixture
def write_source(project_root):
    """Write a source file relative to the project's src/ directory."""

    def _write(relative_path, content):
        path = project_root / "src" / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return path

    return _write
