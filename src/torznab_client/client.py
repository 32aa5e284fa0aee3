"""Torznab API client.

Works against a Jackett instance (proxy mode) or directly against a
single tracker's Torznab endpoint (``ClientConfig.direct_mode``).

Every operation accepts ``timeout=``: a deadline in seconds for the whole
call, retries included. When it elapses `CancellationError` is raised.
"""

import logging
from collections.abc import Callable, Mapping
from typing import Self, TypeVar

import httpx

from .config import ClientConfig, Settings, get_settings
from .errors import DecodeError, TransportError
from .feed import Capabilities, Feed, Indexer, parse_caps, parse_feed, parse_indexers
from .search import (
    CAPS,
    INDEXERS,
    SEARCH,
    BookSearch,
    MovieSearch,
    MusicSearch,
    SearchRequest,
    TVSearch,
)
from .transport import Transport
from .urls import ALL_INDEXERS, build_url, indexer_endpoint, redact_url, split_url

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TorznabClient:
    """Async client for Torznab search, caps and enclosure downloads."""

    def __init__(self, config: ClientConfig, http: httpx.AsyncClient | None = None):
        self._config = config
        if http is None:
            self._transport = Transport.create(config)
        else:
            self._transport = Transport(http, config)

    @classmethod
    def create(cls, config: ClientConfig) -> Self:
        """Create a client with a new HTTP client."""
        return cls(config)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> Self:
        """Create a client from environment configuration."""
        settings = settings or get_settings()
        return cls(settings.to_client_config())

    @property
    def config(self) -> ClientConfig:
        return self._config

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    # === URL helpers ===

    def _endpoint(self, indexer: str) -> str:
        """Endpoint suffix: the indexer's results path, or the API root in direct mode."""
        if self._config.direct_mode:
            return ""
        return indexer_endpoint(indexer)

    def _url(self, endpoint: str, params: Mapping[str, str] | None = None) -> str:
        return build_url(self._config.host, endpoint, params, self._config.direct_mode)

    def _with_api_key(self, params: Mapping[str, str]) -> dict[str, str]:
        params = dict(params)
        if self._config.api_key:
            params["apikey"] = self._config.api_key
        return params

    def _redact(self, url: str) -> str:
        return redact_url(url, self._config.api_key)

    # === Request execution ===

    async def _request(
        self,
        endpoint: str,
        params: Mapping[str, str],
        *,
        use_post: bool = False,
        timeout: float | None = None,
    ) -> tuple[httpx.Response, str]:
        """Send a Torznab API call, returning the response and a loggable URL."""
        if use_post:
            url = self._url(endpoint)
            response = await self._transport.post_form(url, params, timeout=timeout)
        else:
            url = self._url(endpoint, params)
            response = await self._transport.get(url, timeout=timeout)
        return response, self._redact(url)

    @staticmethod
    def _decode(
        parse: Callable[[bytes, str | None], T],
        response: httpx.Response,
        safe_url: str,
    ) -> T:
        try:
            return parse(response.content, safe_url)
        except DecodeError as exc:
            if response.is_error:
                raise DecodeError(
                    f"HTTP {response.status_code} from {safe_url}: {exc}", safe_url
                ) from exc
            raise

    # === Operations ===

    async def get_indexers(self, *, timeout: float | None = None) -> list[Indexer]:
        """List the indexers configured in Jackett.

        Raises:
            TransportError: If the request failed after retries
            CancellationError: If the deadline elapsed
            DecodeError: If the response is not an <indexers> document
        """
        params = self._with_api_key({"t": INDEXERS, "configured": "true"})
        response, safe_url = await self._request(
            self._endpoint(ALL_INDEXERS), params, timeout=timeout
        )
        indexers = self._decode(parse_indexers, response, safe_url)
        logger.debug("Found %d configured indexers", len(indexers))
        return indexers

    async def get_torrents(
        self,
        indexer: str,
        params: Mapping[str, str] | None = None,
        *,
        use_post: bool = False,
        timeout: float | None = None,
    ) -> Feed:
        """Run a search with raw Torznab parameters.

        Args:
            indexer: Jackett indexer id, or ``all``; ignored in direct mode
            params: Torznab query parameters (``t``, ``q``, ``cat``, ...)
            use_post: Send parameters as a form body instead of the query string
            timeout: Deadline for the whole call in seconds

        Returns:
            Decoded result feed
        """
        params = self._with_api_key(params or {})
        response, safe_url = await self._request(
            self._endpoint(indexer), params, use_post=use_post, timeout=timeout
        )
        feed = self._decode(parse_feed, response, safe_url)
        logger.info("Search on %s returned %d items", indexer, len(feed.items))
        return feed

    async def search(
        self,
        request: SearchRequest,
        *,
        indexer: str = ALL_INDEXERS,
        use_post: bool = False,
        timeout: float | None = None,
    ) -> Feed:
        """Run a typed search request (generic, TV, movie, music or book)."""
        return await self.get_torrents(
            indexer,
            request.to_params(self._config.api_key),
            use_post=use_post,
            timeout=timeout,
        )

    async def search_direct(
        self,
        query: str,
        params: Mapping[str, str] | None = None,
        *,
        timeout: float | None = None,
    ) -> Feed:
        """Free text search with optional extra parameters (``limit``, ``cat``, ...)."""
        search_params = dict(params or {})
        search_params["t"] = SEARCH
        if query:
            search_params["q"] = query
        return await self.get_torrents(ALL_INDEXERS, search_params, timeout=timeout)

    async def tv_search(
        self, options: TVSearch, *, indexer: str = ALL_INDEXERS, timeout: float | None = None
    ) -> Feed:
        return await self.search(options, indexer=indexer, timeout=timeout)

    async def movie_search(
        self, options: MovieSearch, *, indexer: str = ALL_INDEXERS, timeout: float | None = None
    ) -> Feed:
        return await self.search(options, indexer=indexer, timeout=timeout)

    async def music_search(
        self, options: MusicSearch, *, indexer: str = ALL_INDEXERS, timeout: float | None = None
    ) -> Feed:
        return await self.search(options, indexer=indexer, timeout=timeout)

    async def book_search(
        self, options: BookSearch, *, indexer: str = ALL_INDEXERS, timeout: float | None = None
    ) -> Feed:
        return await self.search(options, indexer=indexer, timeout=timeout)

    async def get_caps(
        self, indexer: str = ALL_INDEXERS, *, timeout: float | None = None
    ) -> Capabilities:
        """Fetch capabilities (``t=caps``) of an indexer or the direct tracker."""
        params = self._with_api_key({"t": CAPS})
        response, safe_url = await self._request(self._endpoint(indexer), params, timeout=timeout)
        return self._decode(parse_caps, response, safe_url)

    async def get_enclosure(self, url: str, *, timeout: float | None = None) -> bytes:
        """Download an enclosure (``.torrent`` file) from an item's enclosure URL.

        The URL is used as given, without any proxy/direct path rewriting.

        Raises:
            ConfigurationError: If the URL is not an absolute http(s) URL
            TransportError: If the request failed or the server answered with an error status
        """
        split_url(url)
        response = await self._transport.get(url, timeout=timeout)
        if response.is_error:
            safe_url = self._redact(url)
            raise TransportError(
                f"Enclosure download failed with HTTP {response.status_code}: {safe_url}",
                safe_url,
                response.status_code,
            )
        logger.debug("Downloaded enclosure: %d bytes", len(response.content))
        return response.content

    async def close(self):
        """Close the HTTP client."""
        await self._transport.close()
