"""
HTTP client utilities for mfdeps.

Registry lookups go through :class:`HTTPClient`, a thin wrapper around
``httpx.AsyncClient`` that bounds concurrent requests and retries transient
failures. Every failure leaves the client as a :class:`NetworkError`, so
callers only ever handle one exception type.

Retry rules:

- transport failures (timeouts, refused or dropped connections, protocol and
  proxy errors) and 5xx responses are retried with exponential backoff;
- ``429`` responses wait for ``Retry-After`` (seconds or an HTTP date) and
  are retried up to :data:`MAX_RATE_LIMIT_RETRIES` times;
- other 4xx responses and non-transport request errors fail immediately.
"""

from __future__ import annotations

import httpx
import random
import asyncio
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, Optional, cast

from mfdeps.utils.logger import get_logger
from mfdeps.__version__ import __version__
from mfdeps.exceptions import NetworkError
from mfdeps.constants import (
    DEFAULT_TIMEOUT,
    MAX_RETRY_AFTER,
    DEFAULT_CONCURRENCY,
    DEFAULT_MAX_RETRIES,
    USER_AGENT_TEMPLATE,
    MAX_RATE_LIMIT_RETRIES,
    RETRYABLE_STATUS_CODES,
)

logger = get_logger("http")


def parse_retry_after(value: Optional[str], *, default: float = 1.0) -> float:
    """Convert a ``Retry-After`` header into a delay in seconds.

    Accepts delta-seconds or an HTTP date. Missing or unparsable values give
    ``default``; the result is clamped to ``[0, MAX_RETRY_AFTER]``.
    """
    if not value:
        return default

    value = value.strip()
    try:
        delay = float(value)
    except ValueError:
        try:
            when = parsedate_to_datetime(value)
        except (TypeError, ValueError):
            logger.debug("Ignoring unparsable Retry-After header: %r", value)
            return default
        if when.tzinfo is None:
            when = when.replace(tzinfo=timezone.utc)
        delay = (when - datetime.now(timezone.utc)).total_seconds()

    return min(max(delay, 0.0), MAX_RETRY_AFTER)


class HTTPClient:
    """Asynchronous HTTP client used for registry lookups.

    Args:
        timeout: Request timeout in seconds.
        max_retries: Retries after the first attempt for transient failures.
        user_agent: Custom User-Agent header value.
        max_concurrency: Maximum number of requests in flight.

    Example:
        >>> async with HTTPClient(max_concurrency=8) as client:
        ...     data = await client.get_json("https://registry.npmjs.org/react")
    """

    def __init__(
        self,
        *,
        timeout: int = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        user_agent: Optional[str] = None,
        max_concurrency: int = DEFAULT_CONCURRENCY,
    ) -> None:
        self.timeout = timeout
        self.max_retries = max_retries
        self.user_agent = user_agent or USER_AGENT_TEMPLATE.format(version=__version__)
        self.max_concurrency = max_concurrency

        self._client: Optional[httpx.AsyncClient] = None
        self._semaphore = asyncio.Semaphore(max_concurrency)

    async def __aenter__(self) -> "HTTPClient":
        self._open()
        return self

    async def __aexit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        await self.close()

    def _open(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(self.timeout),
                http2=True,
                follow_redirects=True,
                headers={"User-Agent": self.user_agent},
            )
        return self._client

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _send(self, url: str, **kwargs: Any) -> httpx.Response:
        client = self._open()
        try:
            async with self._semaphore:
                return await client.get(url, **kwargs)
        except httpx.TransportError:
            raise
        except httpx.RequestError as exc:
            # Decoding errors, redirect loops: retrying will not help
            raise NetworkError(f"Request to {url} failed: {exc}", url=url) from exc

    async def get(self, url: str, **kwargs: Any) -> httpx.Response:
        """GET ``url``, retrying transient failures.

        Raises:
            NetworkError: The request failed for good. ``status_code`` is set
                when the failure was an HTTP error response.
        """
        url = url.strip()
        last_error = "no attempt made"
        rate_limited = 0
        attempt = 0

        while attempt <= self.max_retries:
            try:
                response = await self._send(url, **kwargs)
            except httpx.TransportError as exc:
                last_error = f"{type(exc).__name__}: {exc}"
                logger.warning(
                    "Transport error (%d/%d) for %s: %s",
                    attempt + 1,
                    self.max_retries + 1,
                    url,
                    last_error,
                )
            else:
                status = response.status_code
                if status < 400:
                    return response

                if status == 429:
                    rate_limited += 1
                    if rate_limited > MAX_RATE_LIMIT_RETRIES:
                        raise NetworkError(
                            f"Rate limit exceeded after {MAX_RATE_LIMIT_RETRIES} retries",
                            url=url,
                            status_code=429,
                        )
                    delay = parse_retry_after(response.headers.get("Retry-After"))
                    logger.warning(
                        "Rate limited by %s, retrying in %.1fs (%d/%d)",
                        url,
                        delay,
                        rate_limited,
                        MAX_RATE_LIMIT_RETRIES,
                    )
                    await asyncio.sleep(delay)
                    continue

                if status not in RETRYABLE_STATUS_CODES:
                    message = (
                        f"Resource not found: {url}"
                        if status == 404
                        else f"HTTP {status} error for {url}"
                    )
                    raise NetworkError(
                        message,
                        url=url,
                        status_code=status,
                        response_body=response.text,
                    )

                last_error = f"HTTP {status}"
                logger.warning(
                    "HTTP %d (%d/%d) for %s", status, attempt + 1, self.max_retries + 1, url
                )

            if attempt < self.max_retries:
                delay = (2**attempt) + random.uniform(0.0, 0.3)
                logger.debug("Retrying in %.2fs", delay)
                await asyncio.sleep(delay)
            attempt += 1

        raise NetworkError(
            f"Request failed after {self.max_retries + 1} attempts: {url} ({last_error})",
            url=url,
        )

    async def get_json(self, url: str, **kwargs: Any) -> Dict[str, Any]:
        """Fetch a URL and parse the response as a JSON object."""
        response = await self.get(url, **kwargs)

        try:
            data = response.json()
        except ValueError as exc:
            raise NetworkError(
                f"Invalid JSON response from {url}",
                url=url,
                response_body=response.text,
            ) from exc

        if not isinstance(data, dict):
            raise NetworkError(
                f"Expected JSON object from {url}",
                url=url,
                response_body=response.text,
            )

        return cast(Dict[str, Any], data)
