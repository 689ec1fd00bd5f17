"""Shared fixtures for manifest integration tests."""
from __future__ import annotations

from pathlib import Path

import pytest

CONFIGS_DIR = Path(__file__).resolve().parent / "test_configs"


@pytest.fixture()
def fel4_manifest_path() -> Path:
    """Path to the reference fel4.toml used across integration tests."""
    return CONFIGS_DIR / "fel4.toml"


@pytest.fixture()
def write_manifest(tmp_path: Path):
    """Return a callable that writes manifest text to a temp file and returns its path."""

    def _write(text: str, name: str = "fel4.toml") -> Path:
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write
