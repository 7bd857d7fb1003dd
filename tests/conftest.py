"""Pytest configuration and fixtures."""

import pytest

from pixelproof.config import reset_settings


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    """Point settings at a temporary directory and reset the singleton."""
    monkeypatch.setenv("PIXELPROOF_DISABLE_CONSOLE_LOGGING", "1")
    monkeypatch.setenv("PIXELPROOF_REFERENCE_DIR", str(tmp_path / "references"))
    monkeypatch.setenv("PIXELPROOF_DIFF_ARTIFACT_PATH", str(tmp_path / "diff.png"))
    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def reference_dir(tmp_path):
    """Create and return the configured reference directory."""
    path = tmp_path / "references"
    path.mkdir()
    return path


@pytest.fixture
def diff_path(tmp_path):
    """Return the configured diff artifact path."""
    return tmp_path / "diff.png"
