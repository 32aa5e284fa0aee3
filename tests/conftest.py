"""Shared fixtures: a client wired to an in-process fake server."""

from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

from torznab_client.client import TorznabClient
from torznab_client.config import ClientConfig

RSS_ONE_ITEM = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:torznab="http://torznab.com/schemas/2015/feed">
  <channel>
    <title>Test Results</title>
    <item>
      <title>Ubuntu 22.04 LTS</title>
      <guid>test-guid-1</guid>
      <link>http://example.com/download/1</link>
      <pubDate>Mon, 01 Jan 2024 00:00:00 +0000</pubDate>
      <torznab:attr name="seeders" value="12" />
    </item>
  </channel>
</rss>"""

INDEXERS_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<indexers>
  <indexer id="test-indexer" configured="true">
    <title>Test Indexer</title>
    <description>Test Description</description>
  </indexer>
</indexers>"""


@pytest.fixture
def make_client() -> Callable[..., TorznabClient]:
    """Factory for a client whose HTTP traffic goes to ``handler``.

    Retry delays default to zero so retry tests run instantly.
    """

    def factory(handler, **overrides) -> TorznabClient:
        settings = {
            "host": "http://localhost:9117",
            "api_key": "test-key",
            "retry_delay": 0.0,
            "retry_max_jitter": 0.0,
        }
        settings.update(overrides)
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return TorznabClient(ClientConfig(**settings), http=http)

    return factory


def xml_response(body: bytes, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, content=body, headers={"Content-Type": "application/xml"})


@pytest.fixture
def rss_response() -> Callable[..., httpx.Response]:
    def factory(body: bytes = RSS_ONE_ITEM, status_code: int = 200) -> httpx.Response:
        return xml_response(body, status_code)

    return factory
