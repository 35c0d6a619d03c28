"""Exception hierarchy for fetchcache.

All exceptions inherit from :class:`FetchCacheError`.  The four errors of
the fetch-and-cache pipeline (:class:`InvalidURLError`,
:class:`NetworkError`, :class:`EmptyResponseError`, :class:`DecodeError`)
propagate unchanged to the caller of
:meth:`~fetchcache.client.CacheClient.fetch_and_cache`; none of them is
retried internally.

Subclass hierarchy::

    FetchCacheError
    +-- FetchError
    |   +-- InvalidURLError
    |   +-- NetworkError
    |   +-- EmptyResponseError
    +-- DecodeError
    +-- EncodeError
    +-- StoreError
    +-- ConfigError
"""

from __future__ import annotations

from typing import Any, Optional


class FetchCacheError(Exception):
    """Base exception for all fetchcache errors.

    Args:
        message: Human-readable error description.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class FetchError(FetchCacheError):
    """Base class for failures of a single network retrieval."""

    def __init__(self, message: str, url: str):
        super().__init__(message)
        self.url = url


class InvalidURLError(FetchError):
    """Raised when the URL cannot be parsed or is not an absolute http(s) URL.

    No request is sent.
    """

    def __init__(self, url: str, reason: str = ""):
        msg = f"Invalid URL: {url!r}"
        if reason:
            msg = f"{msg} ({reason})"
        super().__init__(msg, url)


class NetworkError(FetchError):
    """Raised when the transport cannot complete the request.

    The underlying :mod:`httpx` exception is kept on :attr:`cause` and is
    also chained as ``__cause__``.
    """

    def __init__(self, url: str, cause: BaseException):
        super().__init__(f"Request to {url} failed: {cause}", url)
        self.cause = cause


class EmptyResponseError(FetchError):
    """Raised when the transport completes but the body has zero bytes."""

    def __init__(self, url: str):
        super().__init__(f"No data received from {url}", url)


class DecodeError(FetchCacheError):
    """Raised when bytes are not valid JSON or do not match the target type.

    Args:
        detail: Description of the validation failure.
        target_type: The type the bytes were decoded into, when known.
    """

    def __init__(self, detail: str, target_type: Optional[Any] = None):
        name = getattr(target_type, "__name__", None) or repr(target_type)
        prefix = f"Failed to decode data as {name}" if target_type is not None else "Failed to decode data"
        super().__init__(f"{prefix}: {detail}")
        self.detail = detail
        self.target_type = target_type


class EncodeError(FetchCacheError):
    """Raised when a value contains something JSON cannot represent."""

    def __init__(self, detail: str):
        super().__init__(f"Failed to encode value: {detail}")
        self.detail = detail


class StoreError(FetchCacheError):
    """Raised in strict-store mode when the key-value store rejects a write."""

    def __init__(self, key: str):
        super().__init__(f"Failed to persist value for key {key!r}")
        self.key = key


class ConfigError(FetchCacheError):
    """Raised for configuration problems (invalid JSON, bad environment values)."""
