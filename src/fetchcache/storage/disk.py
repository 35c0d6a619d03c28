"""Durable blob store backed by :mod:`diskcache`.

Blobs are kept as raw ``bytes`` in a :class:`diskcache.Cache` directory so
that they survive process restarts.  Entries never expire; the only
eviction is diskcache's size-limit culling.

Backend failures (sqlite errors, lock timeouts, filesystem errors) are
caught and logged.  Writes report them by returning ``False``; reads
degrade to a miss.

See Also:
    :class:`~fetchcache.models.StoreConfig` -- ``size_limit`` and
    ``timeout`` for the underlying cache.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any, Optional

import diskcache

from fetchcache.models import StoreConfig

logger = logging.getLogger(__name__)

_BACKEND_ERRORS = (OSError, sqlite3.Error, diskcache.Timeout)


class DiskStore:
    """Disk-backed :class:`~fetchcache.storage.base.KeyValueStore`.

    Args:
        directory: Root directory for the store.  A ``blobs/``
            subdirectory is created inside it.
        config: Store configuration (``size_limit`` and lock ``timeout``).

    Example::

        from fetchcache.storage import DiskStore

        store = DiskStore("/tmp/fetchcache")
        store.set("user", b'{"id":1}')
        assert store.get("user") == b'{"id":1}'
        store.close()
    """

    def __init__(self, directory: str | Path, config: Optional[StoreConfig] = None) -> None:
        self._config = config or StoreConfig()
        self._directory = Path(directory)
        self._cache = diskcache.Cache(
            str(self._directory / "blobs"),
            size_limit=self._config.size_limit,
            timeout=self._config.timeout,
        )

    @property
    def directory(self) -> Path:
        """Directory holding the diskcache database."""
        return self._directory / "blobs"

    def get(self, key: str) -> Optional[bytes]:
        """Return the blob stored under *key*.

        Returns:
            The stored bytes, or ``None`` on a miss or a backend read failure.
        """
        try:
            value = self._cache.get(key)
        except _BACKEND_ERRORS as exc:
            logger.warning("Store read failed for key '%s': %s", key, exc)
            return None
        if value is None:
            return None
        if not isinstance(value, (bytes, bytearray, memoryview)):
            # Written by something else sharing the directory.
            logger.warning(
                "Ignoring non-bytes entry for key '%s' (%s)", key, type(value).__name__
            )
            return None
        return bytes(value)

    def set(self, key: str, value: bytes) -> bool:
        """Overwrite the blob stored under *key*.

        Returns:
            ``True`` when the write was persisted, ``False`` when the backend
            rejected it (disk full, lock timeout, ...).
        """
        try:
            return bool(self._cache.set(key, bytes(value)))
        except _BACKEND_ERRORS as exc:
            logger.warning("Store write failed for key '%s': %s", key, exc)
            return False

    def delete(self, key: str) -> bool:
        try:
            return bool(self._cache.delete(key))
        except _BACKEND_ERRORS as exc:
            logger.warning("Store delete failed for key '%s': %s", key, exc)
            return False

    def clear(self) -> None:
        """Remove all entries from the store."""
        self._cache.clear()

    def stats(self) -> dict[str, Any]:
        """Return store statistics.

        Returns:
            A ``dict`` with ``backend``, ``size`` (number of entries),
            ``volume`` (approximate bytes on disk), and ``directory``.
        """
        return {
            "backend": "disk",
            "size": len(self._cache),
            "volume": self._cache.volume(),
            "directory": str(self.directory),
        }

    def close(self) -> None:
        """Close the underlying :class:`diskcache.Cache` and release resources."""
        self._cache.close()

    def __contains__(self, key: object) -> bool:
        return key in self._cache

    def __len__(self) -> int:
        return len(self._cache)
