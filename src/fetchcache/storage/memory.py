"""Process-local blob store for tests and short-lived caches."""

from __future__ import annotations

from typing import Any, Optional


class MemoryStore:
    """Dict-backed :class:`~fetchcache.storage.base.KeyValueStore`.

    Nothing is persisted across processes.  Writes always succeed.
    """

    def __init__(self) -> None:
        self._data: dict[str, bytes] = {}

    def get(self, key: str) -> Optional[bytes]:
        return self._data.get(key)

    def set(self, key: str, value: bytes) -> bool:
        self._data[key] = bytes(value)
        return True

    def delete(self, key: str) -> bool:
        return self._data.pop(key, None) is not None

    def clear(self) -> None:
        self._data.clear()

    def stats(self) -> dict[str, Any]:
        return {"backend": "memory", "size": len(self._data)}

    def close(self) -> None:
        pass

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)
