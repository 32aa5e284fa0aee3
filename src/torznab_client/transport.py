"""HTTP transport with bounded retries and connection hygiene.

Every logical request is attempted up to ``retry_attempts`` times:

- network failure (connect error, timeout, dropped connection): retry
- response with status < 500: done, returned to the caller as-is
- response with status >= 500: drained, closed and retried

Jackett frequently answers 5xx while an indexer behind it is briefly
unavailable, which is why server errors are retried rather than returned.
"""

import asyncio
import logging
import random
from collections.abc import Mapping
from typing import Self
from urllib.parse import urlencode

import httpx

from .config import ClientConfig
from .errors import CancellationError, TransportError
from .urls import redact_url

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = "torznab-client/0.1.0"


async def drain_and_close(response: httpx.Response | None) -> None:
    """Read any unconsumed body and release the connection back to the pool.

    ``None`` and already closed responses are accepted and ignored.
    """
    if response is None or response.is_closed:
        return
    try:
        if not response.is_stream_consumed:
            async for _ in response.aiter_raw():
                pass
    except httpx.HTTPError as exc:
        # Connection is discarded by aclose() below instead of being reused
        logger.debug("Failed to drain response body from %s: %s", response.request.url, exc)
    finally:
        await response.aclose()


def _fresh_request(template: httpx.Request, body: bytes) -> httpx.Request:
    """Copy of a request with a new, unread body stream."""
    return httpx.Request(
        template.method,
        template.url,
        headers=template.headers,
        content=body,
        extensions=template.extensions,
    )


class Transport:
    """Retrying request executor on top of a shared ``httpx.AsyncClient``."""

    def __init__(self, http: httpx.AsyncClient, config: ClientConfig):
        self._http = http
        self._config = config
        basic_auth = config.basic_auth
        self._auth = httpx.BasicAuth(*basic_auth) if basic_auth else None

    @classmethod
    def create(cls, config: ClientConfig) -> Self:
        """Create a transport with a new HTTP client (connection pool)."""
        http = httpx.AsyncClient(
            timeout=httpx.Timeout(config.timeout),
            verify=config.verify_tls,
            follow_redirects=True,
            headers={"User-Agent": DEFAULT_USER_AGENT},
        )
        return cls(http, config)

    async def get(self, url: str, *, timeout: float | None = None) -> httpx.Response:
        """GET a fully resolved URL."""
        return await self.send("GET", url, timeout=timeout)

    async def post_form(
        self,
        url: str,
        form: Mapping[str, str],
        *,
        timeout: float | None = None,
    ) -> httpx.Response:
        """POST parameters as an ``application/x-www-form-urlencoded`` body."""
        return await self.send(
            "POST",
            url,
            content=urlencode(list(form.items())).encode(),
            headers={"Content-Type": "application/x-www-form-urlencoded"},
            timeout=timeout,
        )

    async def send(
        self,
        method: str,
        url: str,
        *,
        content: bytes | None = None,
        headers: Mapping[str, str] | None = None,
        timeout: float | None = None,
    ) -> httpx.Response:
        """Execute one logical request with retries.

        Args:
            method: HTTP method
            url: Fully resolved request URL
            content: Request body, replayed unchanged on every attempt
            headers: Extra request headers
            timeout: Deadline for the whole call, retries and backoff included

        Returns:
            The first response with status < 500, body already read

        Raises:
            CancellationError: If the deadline elapsed
            TransportError: If every attempt failed
        """
        safe_url = redact_url(url, self._config.api_key)
        try:
            async with asyncio.timeout(timeout):
                return await self._send_with_retries(method, url, safe_url, content, headers)
        except TimeoutError as exc:
            raise CancellationError(
                f"{method} {safe_url}: deadline of {timeout}s exceeded", safe_url
            ) from exc

    async def _send_with_retries(
        self,
        method: str,
        url: str,
        safe_url: str,
        content: bytes | None,
        headers: Mapping[str, str] | None,
    ) -> httpx.Response:
        request = self._http.build_request(method, url, content=content, headers=headers)
        # Captured once; each attempt gets its own readable copy
        body = request.read()

        attempts = self._config.retry_attempts
        last_error: Exception | None = None
        last_status: int | None = None

        for attempt in range(1, attempts + 1):
            logger.debug("%s %s (attempt %d/%d)", method, safe_url, attempt, attempts)

            response: httpx.Response | None = None
            try:
                response = await self._http.send(
                    _fresh_request(request, body), auth=self._auth, stream=True
                )
                if response.status_code < 500:
                    try:
                        await response.aread()
                    finally:
                        # Also runs when the deadline cancels the read
                        await response.aclose()
                    return response
            except httpx.TransportError as exc:
                if response is not None:
                    await response.aclose()
                last_error = exc
                last_status = None
                logger.warning(
                    "%s %s: attempt %d/%d failed: %s",
                    method,
                    safe_url,
                    attempt,
                    attempts,
                    redact_url(str(exc), self._config.api_key) or type(exc).__name__,
                )
            else:
                last_error = None
                last_status = response.status_code
                await drain_and_close(response)
                logger.warning(
                    "%s %s: attempt %d/%d got server error %d",
                    method,
                    safe_url,
                    attempt,
                    attempts,
                    last_status,
                )

            if attempt < attempts:
                await asyncio.sleep(self._backoff())

        if last_status is not None:
            raise TransportError(
                f"{method} {safe_url}: server error {last_status} after {attempts} attempts",
                safe_url,
                last_status,
            )
        raise TransportError(
            f"{method} {safe_url}: request failed after {attempts} attempts: {last_error}",
            safe_url,
        ) from last_error

    def _backoff(self) -> float:
        """Fixed inter-attempt delay plus random jitter."""
        return self._config.retry_delay + random.uniform(0, self._config.retry_max_jitter)

    async def close(self):
        """Close the HTTP client."""
        await self._http.aclose()
