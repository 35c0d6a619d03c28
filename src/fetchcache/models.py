"""Pydantic models shared across fetchcache modules.

**Configuration models** -- serialised as JSON in the user's config
directory and passed into the components they configure:
    :class:`StoreConfig`, :class:`FetchConfig`, :class:`CodecConfig`, and
    :class:`ClientConfig`.

**Operation models** -- describe the outcome of one fetch-and-cache call:
    :class:`OperationState` and :class:`CacheResult`.
"""

from __future__ import annotations

import enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


# --- Configuration ---


class StoreConfig(BaseModel):
    """Settings for the disk-backed key-value store."""

    directory: Optional[str] = Field(
        default=None,
        description="Store directory; defaults to the user cache directory",
    )
    size_limit: int = Field(
        default=2**30, description="Maximum on-disk size in bytes before eviction"
    )
    timeout: float = Field(
        default=60.0, description="Seconds to wait for the store's database lock"
    )


class FetchConfig(BaseModel):
    """Transport settings for :class:`~fetchcache.fetcher.Fetcher`.

    ``allow_empty`` controls how a zero-byte body is treated.  By default it
    is an :class:`~fetchcache.exceptions.EmptyResponseError`; endpoints that
    legitimately return empty payloads opt in and receive ``b""``.
    """

    timeout: float = Field(default=30.0, description="Request timeout in seconds")
    verify_ssl: bool = Field(default=True, description="Verify SSL certificates")
    follow_redirects: bool = Field(default=True, description="Follow HTTP redirects")
    allow_empty: bool = Field(
        default=False, description="Return b'' for zero-byte bodies instead of failing"
    )


class CodecConfig(BaseModel):
    """Settings for :class:`~fetchcache.codec.JSONCodec`."""

    strict: bool = Field(
        default=True, description="Reject type coercion (e.g. '1' for an int field)"
    )


class ClientConfig(BaseModel):
    """Top-level configuration persisted at ``~/.config/fetchcache/config.json``.

    Loaded by :func:`~fetchcache.config.load_config` and layered with
    environment overrides by :func:`~fetchcache.config.resolve_config`.
    """

    store: StoreConfig = Field(default_factory=StoreConfig)
    fetch: FetchConfig = Field(default_factory=FetchConfig)
    codec: CodecConfig = Field(default_factory=CodecConfig)
    strict_store: bool = Field(
        default=False,
        description="Fail fetch_and_cache with StoreError when the store rejects a write",
    )


# --- Operation outcome ---


class OperationState(str, enum.Enum):
    """States of a single fetch-and-cache operation.

    ``FAILED`` is reachable from ``FETCHING`` and ``DECODING``, and from
    ``STORING`` only in strict-store mode.
    """

    IDLE = "idle"
    FETCHING = "fetching"
    DECODING = "decoding"
    STORING = "storing"
    COMPLETED = "completed"
    FAILED = "failed"


class CacheResult(BaseModel, Generic[T]):
    """Tagged outcome of :meth:`~fetchcache.client.CacheClient.fetch_result`.

    Exactly one of :attr:`value` (on ``COMPLETED``) or :attr:`error` (on
    ``FAILED``) is meaningful.

    Example::

        result = await client.fetch_result(url, "user", User)
        if result.ok:
            print(result.value.name)
        else:
            print(f"fetch failed: {result.error}")
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    state: OperationState
    value: Optional[T] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        """Whether the operation reached ``COMPLETED``."""
        return self.state == OperationState.COMPLETED

    def unwrap(self) -> T:
        """Return the value, or raise the stored error if the operation failed."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]
