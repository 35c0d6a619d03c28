"""Single-attempt asynchronous HTTP retrieval.

This module provides :class:`Fetcher`, a thin wrapper around
:class:`httpx.AsyncClient` that performs one GET request and returns the
raw body bytes.  It deliberately does less than a general HTTP client:

- **No retry** -- one attempt; failures are reported immediately.
- **No status policy** -- a non-2xx response with a body is returned as
  success.  Callers that care about status codes decide for themselves.
- **Typed failures** -- :class:`~fetchcache.exceptions.InvalidURLError`,
  :class:`~fetchcache.exceptions.NetworkError`, and
  :class:`~fetchcache.exceptions.EmptyResponseError`.

TLS, redirects and connection pooling are left to :mod:`httpx`.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from fetchcache.exceptions import EmptyResponseError, InvalidURLError, NetworkError
from fetchcache.models import FetchConfig

logger = logging.getLogger(__name__)

_ALLOWED_SCHEMES = ("http", "https")


def parse_url(url: str) -> httpx.URL:
    """Parse *url* and require an absolute http(s) URL with a host.

    Raises:
        InvalidURLError: If the URL cannot be parsed, is relative, uses
            another scheme, or has no host.
    """
    try:
        parsed = httpx.URL(url)
    except (httpx.InvalidURL, TypeError) as exc:
        raise InvalidURLError(str(url), str(exc)) from exc
    if parsed.scheme not in _ALLOWED_SCHEMES:
        raise InvalidURLError(url, "scheme must be http or https")
    if not parsed.host:
        raise InvalidURLError(url, "missing host")
    return parsed


class Fetcher:
    """Fetch raw bytes from a URL with a single asynchronous GET.

    Can be used as an async context manager to share one connection pool
    across many fetches.  Outside a context, each :meth:`fetch` opens and
    closes its own client.

    Args:
        config: Transport settings (timeout, SSL verification, redirects)
            and the ``allow_empty`` switch for zero-byte bodies.
        client: Pre-built :class:`httpx.AsyncClient` to use instead of
            creating one.  An injected client is never closed by the
            fetcher.

    Example::

        async with Fetcher() as fetcher:
            body = await fetcher.fetch("https://api.example.com/users/1")
    """

    def __init__(
        self,
        config: Optional[FetchConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._config = config or FetchConfig()
        self._client = client
        self._owns_client = False

    @property
    def config(self) -> FetchConfig:
        return self._config

    # ------------------------------------------------------------------ #
    # Async context manager
    # ------------------------------------------------------------------ #

    async def __aenter__(self) -> Fetcher:
        if self._client is None:
            self._client = self._build_client()
            self._owns_client = True
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the client if this fetcher created it."""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None
            self._owns_client = False

    # ------------------------------------------------------------------ #
    # Public API
    # ------------------------------------------------------------------ #

    async def fetch(self, url: str) -> bytes:
        """Retrieve the body at *url*.

        Args:
            url: Absolute ``http`` or ``https`` URL.

        Returns:
            The raw response body.  ``b""`` only when
            :attr:`FetchConfig.allow_empty` is set.

        Raises:
            InvalidURLError: If *url* is not a usable http(s) URL.  No
                request is sent.
            NetworkError: If the request cannot complete (connection,
                timeout, TLS, protocol errors).
            EmptyResponseError: If the body is empty and ``allow_empty``
                is not set.
        """
        parsed = parse_url(url)
        if self._client is not None:
            return await self._get(self._client, url, parsed)
        async with self._build_client() as client:
            return await self._get(client, url, parsed)

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _build_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self._config.timeout,
            verify=self._config.verify_ssl,
            follow_redirects=self._config.follow_redirects,
        )

    async def _get(self, client: httpx.AsyncClient, url: str, parsed: httpx.URL) -> bytes:
        try:
            response = await client.get(parsed)
        except httpx.RequestError as exc:
            logger.debug("GET %s failed: %s", url, exc)
            raise NetworkError(url, exc) from exc

        content = response.content
        logger.debug("GET %s -> HTTP %d (%d bytes)", url, response.status_code, len(content))

        if not content and not self._config.allow_empty:
            raise EmptyResponseError(url)
        return content
