"""Key-value blob stores for fetchcache.

This package defines :class:`KeyValueStore`, the synchronous get/set
contract the cache client depends on, and two implementations:

- :class:`DiskStore` -- durable, backed by :mod:`diskcache`.
- :class:`MemoryStore` -- process-local, for tests and ephemeral caches.

Any object with the same methods satisfies the protocol, so platform
key-value stores can be plugged in without subclassing.
"""

from fetchcache.storage.base import KeyValueStore
from fetchcache.storage.disk import DiskStore
from fetchcache.storage.memory import MemoryStore

__all__ = ["KeyValueStore", "DiskStore", "MemoryStore"]
