"""Shared test fixtures for fetchcache.

Isolates the XDG directories and ``FETCHCACHE_*`` environment for every
test, and provides ready-made stores.  These fixtures are discovered by
pytest automatically.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from fetchcache.storage import DiskStore, MemoryStore


# ---------------------------------------------------------------------------
# Isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _isolate_dirs(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point XDG directories and HOME at tmp_path and clear env overrides."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg_config"))
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path / "xdg_cache"))
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: tmp_path / "home"))
    for var in ("FETCHCACHE_CACHE_DIR", "FETCHCACHE_TIMEOUT", "FETCHCACHE_STRICT_STORE"):
        monkeypatch.delenv(var, raising=False)


# ---------------------------------------------------------------------------
# Stores
# ---------------------------------------------------------------------------


@pytest.fixture
def memory_store() -> MemoryStore:
    """An empty in-memory store."""
    return MemoryStore()


@pytest.fixture
def disk_store(tmp_path: Path):
    """A DiskStore rooted at ``tmp_path/store``, closed after the test."""
    store = DiskStore(tmp_path / "store")
    yield store
    store.close()
