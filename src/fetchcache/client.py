"""Fetch-decode-store orchestration.

:class:`CacheClient` composes a :class:`~fetchcache.fetcher.Fetcher`, a
:class:`~fetchcache.codec.JSONCodec` and a
:class:`~fetchcache.storage.KeyValueStore` into two operations:

- :meth:`CacheClient.fetch_and_cache` -- fetch remote JSON, decode it into
  a target type, persist it under a key, and return the typed value.
- :meth:`CacheClient.get_cached` -- read a key back from the store and
  decode it, returning ``None`` on any miss or failure.

Each fetch-and-cache call moves through
``IDLE -> FETCHING -> DECODING -> STORING -> COMPLETED`` (see
:class:`~fetchcache.models.OperationState`).  A fetch or decode failure
ends the operation before the store is touched, so invalid bytes are never
persisted.  What gets stored is the re-encoded decoded value, not the raw
response body, so unknown fields are dropped and a later read always
decodes back to an equal value.

Concurrent calls are independent.  Two calls for the same key race on the
final write and the last one wins.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Optional, TypeVar

from pydantic import PydanticSchemaGenerationError

from fetchcache.codec import JSONCodec
from fetchcache.config import get_cache_dir, resolve_config
from fetchcache.exceptions import DecodeError, FetchCacheError, StoreError
from fetchcache.fetcher import Fetcher
from fetchcache.models import CacheResult, ClientConfig, OperationState
from fetchcache.storage import DiskStore, KeyValueStore

logger = logging.getLogger(__name__)

T = TypeVar("T")

_EMPTY_PAYLOAD = b"null"


class CacheClient:
    """Fetch JSON into typed values and cache them in a key-value store.

    Every collaborator is passed in, so independent caches and test
    doubles need no global state.

    Args:
        store: Where encoded values are persisted.  An injected store is
            left open by :meth:`aclose`.
        fetcher: Network retrieval.  Built from ``config.fetch`` when
            omitted; a fetcher created here is closed by :meth:`aclose`.
        codec: JSON codec.  Built from ``config.codec`` when omitted.
        config: Client configuration.  Only ``strict_store`` is read
            directly; the rest configures omitted collaborators.

    Example::

        async with CacheClient.from_config() as cache:
            user = await cache.fetch_and_cache(
                "https://api.example.com/users/1", "user:1", User
            )
        ...
        user = cache.get_cached("user:1", User)
    """

    def __init__(
        self,
        store: KeyValueStore,
        fetcher: Optional[Fetcher] = None,
        codec: Optional[JSONCodec] = None,
        config: Optional[ClientConfig] = None,
    ) -> None:
        self._config = config or ClientConfig()
        self._store = store
        self._owns_store = False
        self._owns_fetcher = fetcher is None
        self._fetcher = fetcher or Fetcher(self._config.fetch)
        self._codec = codec or JSONCodec(self._config.codec)

    @classmethod
    def from_config(cls, config: Optional[ClientConfig] = None) -> CacheClient:
        """Build a client backed by a :class:`~fetchcache.storage.DiskStore`.

        Without *config*, settings come from :func:`~fetchcache.config.resolve_config`
        (environment, then the config file).  The store lives in
        ``config.store.directory``, or in :func:`~fetchcache.config.get_cache_dir`
        when unset, and is closed by :meth:`aclose`.
        """
        config = config or resolve_config()
        directory = Path(config.store.directory) if config.store.directory else get_cache_dir()
        client = cls(DiskStore(directory, config.store), config=config)
        client._owns_store = True
        return client

    @property
    def store(self) -> KeyValueStore:
        return self._store

    @property
    def codec(self) -> JSONCodec:
        return self._codec

    # ------------------------------------------------------------------ #
    # Lifecycle
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> CacheClient:
        if self._owns_fetcher:
            await self._fetcher.__aenter__()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the fetcher and the store, if this client created them."""
        if self._owns_fetcher:
            await self._fetcher.aclose()
        if self._owns_store:
            self._store.close()

    # ------------------------------------------------------------------ #
    # Fetch path
    # ------------------------------------------------------------------ #

    async def fetch_and_cache(self, url: str, key: str, target_type: type[T]) -> T:
        """Fetch *url*, decode it as *target_type*, store it under *key*.

        Args:
            url: Absolute http(s) URL returning JSON.
            key: Cache key; overwritten on success.
            target_type: Type to decode the response into.

        Returns:
            The decoded value.

        Raises:
            InvalidURLError: *url* is not usable.  Store untouched.
            NetworkError: The transport failed.  Store untouched.
            EmptyResponseError: The body was empty.  Store untouched.
            DecodeError: The body does not match *target_type*.  Store
                untouched.
            StoreError: Only when ``strict_store`` is enabled and the
                store rejected the write.
        """
        state = OperationState.FETCHING
        self._transition(key, OperationState.IDLE, state)
        try:
            data = await self._fetcher.fetch(url)

            state = self._transition(key, state, OperationState.DECODING)
            # Only reachable with allow_empty: an empty body means "no value".
            value = self._codec.decode(data or _EMPTY_PAYLOAD, target_type)

            state = self._transition(key, state, OperationState.STORING)
            self._persist(key, value, target_type)
        except FetchCacheError as exc:
            self._transition(key, state, OperationState.FAILED, exc)
            raise

        self._transition(key, state, OperationState.COMPLETED)
        return value

    async def fetch_result(self, url: str, key: str, target_type: type[T]) -> CacheResult[T]:
        """Non-raising form of :meth:`fetch_and_cache`.

        Returns:
            A :class:`~fetchcache.models.CacheResult` in state
            ``COMPLETED`` with the value, or ``FAILED`` with the error.
        """
        try:
            value = await self.fetch_and_cache(url, key, target_type)
        except FetchCacheError as exc:
            return CacheResult(state=OperationState.FAILED, error=exc)
        return CacheResult(state=OperationState.COMPLETED, value=value)

    # ------------------------------------------------------------------ #
    # Read / write path
    # ------------------------------------------------------------------ #

    def get_cached(self, key: str, target_type: type[T]) -> Optional[T]:
        """Read *key* from the store and decode it as *target_type*.

        Never raises for a miss or an undecodable entry: both return
        ``None``, so probing the cache cannot crash the caller.
        """
        data = self._store.get(key)
        if data is None:
            logger.debug("Cache miss for key '%s'", key)
            return None
        try:
            return self._codec.decode(data, target_type)
        except (DecodeError, PydanticSchemaGenerationError) as exc:
            logger.debug("Cached entry for key '%s' is unreadable: %s", key, exc)
            return None

    def put(self, key: str, value: Any, value_type: Optional[Any] = None) -> bool:
        """Encode *value* and write it under *key*.

        Args:
            key: Cache key; overwritten.
            value: The value to store.
            value_type: Serializer type; see :meth:`JSONCodec.encode`.

        Returns:
            Whether the store accepted the write.

        Raises:
            EncodeError: If *value* cannot be represented as JSON.
        """
        return self._store.set(key, self._codec.encode(value, value_type))

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _persist(self, key: str, value: Any, target_type: Any) -> None:
        if self._store.set(key, self._codec.encode(value, target_type)):
            return
        if self._config.strict_store:
            raise StoreError(key)
        logger.warning("Value for key '%s' was not persisted; returning it uncached", key)

    @staticmethod
    def _transition(
        key: str,
        current: OperationState,
        new: OperationState,
        error: Optional[BaseException] = None,
    ) -> OperationState:
        if error is not None:
            logger.debug("[%s] %s -> %s: %s", key, current.value, new.value, error)
        else:
            logger.debug("[%s] %s -> %s", key, current.value, new.value)
        return new
