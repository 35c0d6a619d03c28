"""fetchcache -- fetch JSON, decode it into a typed value, keep it on disk.

A one-line "fetch-or-read-cache" primitive: :class:`CacheClient` performs
a single asynchronous HTTP GET, validates the JSON body against a
caller-supplied type, persists the value in a local key-value store, and
serves it back synchronously later.

Typical usage::

    from fetchcache import CacheClient

    async with CacheClient.from_config() as cache:
        user = await cache.fetch_and_cache(url, "user:1", User)

    cached = cache.get_cached("user:1", User)   # User or None

Modules:
    client: :class:`CacheClient`, the fetch-decode-store orchestrator.
    fetcher: Single-attempt HTTP retrieval on :mod:`httpx`.
    codec: Typed JSON encoding on :class:`pydantic.TypeAdapter`.
    storage: Key-value blob stores (:mod:`diskcache` and in-memory).
    models: Pydantic configuration and result models.
    config: XDG-aware configuration loading and precedence.
    exceptions: Exception hierarchy.
"""

from fetchcache.client import CacheClient
from fetchcache.codec import JSONCodec
from fetchcache.exceptions import (
    DecodeError,
    EmptyResponseError,
    FetchCacheError,
    FetchError,
    InvalidURLError,
    NetworkError,
    StoreError,
)
from fetchcache.fetcher import Fetcher
from fetchcache.models import CacheResult, ClientConfig, OperationState
from fetchcache.storage import DiskStore, KeyValueStore, MemoryStore

__version__ = "0.1.0"

__all__ = [
    "CacheClient",
    "CacheResult",
    "ClientConfig",
    "DecodeError",
    "DiskStore",
    "EmptyResponseError",
    "FetchCacheError",
    "FetchError",
    "Fetcher",
    "InvalidURLError",
    "JSONCodec",
    "KeyValueStore",
    "MemoryStore",
    "NetworkError",
    "OperationState",
    "StoreError",
]
