"""Contract that :class:`~fetchcache.client.CacheClient` requires from a store."""

from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """Synchronous string-keyed blob store.

    ``set`` overwrites unconditionally and never raises: backend failures
    are reported by returning ``False``.  ``get`` returns the most recently
    set blob, or ``None`` when the key is absent or the backend read fails.
    Single-key writes are last-write-wins; nothing is atomic across keys.
    """

    def get(self, key: str) -> Optional[bytes]:
        """Return the blob stored under *key*, or ``None``."""
        ...

    def set(self, key: str, value: bytes) -> bool:
        """Store *value* under *key*; return whether the write succeeded."""
        ...

    def delete(self, key: str) -> bool:
        """Remove *key*; return ``False`` if it was absent."""
        ...

    def clear(self) -> None:
        """Remove every entry."""
        ...

    def stats(self) -> dict[str, Any]:
        """Return backend name, entry count, and backend details."""
        ...

    def close(self) -> None:
        """Release resources.  Safe to call more than once."""
        ...
