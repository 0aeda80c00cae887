"""
Pytest configuration and fixtures for LSP Auto Setup testing.

Provides in-memory stand-ins for the host collaborators so the decision
logic can be tested without an editor, and an isolated cache directory.
"""

import os

import pytest
from pathlib import Path
from typing import Any

from lsp_auto_setup.utils.config import CacheConfig, Config
from tests.fakes import ManualScheduler


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """Isolated cache directory (not created yet)."""
    return tmp_path / "cache" / "lsp-auto-setup"


@pytest.fixture
def cache_config(cache_dir: Path) -> CacheConfig:
    """Cache configuration pointing at the isolated directory."""
    return CacheConfig(path=str(cache_dir))


@pytest.fixture
def make_config(cache_dir: Path):
    """Build a Config whose cache lives in the isolated directory."""
    def _make(**overrides: Any) -> Config:
        cache = {"path": str(cache_dir)}
        cache.update(overrides.pop("cache", {}))
        return Config(cache=cache, **overrides)
    return _make


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path: Path):
    """Keep configuration environment variables out of the tests."""
    for key in list(os.environ):
        if key.startswith("LSP_AUTO_SETUP_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "xdg-cache"))
