# tests/conftest.py

"""Shared pytest fixtures for all catalog_browser tests."""

from collections.abc import Generator
from pathlib import Path

import pytest

from catalog_browser.config.settings import Settings


@pytest.fixture(autouse=True)
def isolated_profile(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch,
) -> Generator[Path, None, None]:
    """Point the profile directory and cache DB at a per-test temp dir."""
    profile = tmp_path / "profile"
    monkeypatch.setattr(Settings, "PROFILE_DIR", profile)
    monkeypatch.setattr(Settings, "CACHE_DB_PATH", profile / "cache.db")
    monkeypatch.setattr(Settings, "LOGS_DIR", profile / "logs")
    yield profile
