"""End-to-end client tests against an in-process fake server."""

import asyncio

import httpx
import pytest

from torznab_client.client import TorznabClient
from torznab_client.config import ClientConfig, Settings
from torznab_client.errors import (
    CancellationError,
    ConfigurationError,
    DecodeError,
    TorznabAPIError,
    TransportError,
)
from torznab_client.search import BookSearch, MovieSearch, MusicSearch, SearchQuery, TVSearch

from .conftest import INDEXERS_XML, xml_response

PROXY_PATH = "/api/v2.0/indexers/all/results/torznab/api"

CAPS_XML = b"""<caps>
  <server title="Tracker" />
  <searching><search available="yes" supportedParams="q" /></searching>
</caps>"""


def query(request: httpx.Request) -> dict[str, str]:
    return dict(request.url.params)


@pytest.mark.asyncio
async def test_get_indexers(make_client):
    seen = []

    def handler(request):
        seen.append(request)
        return xml_response(INDEXERS_XML)

    async with make_client(handler) as client:
        indexers = await client.get_indexers()

    assert len(indexers) == 1
    assert indexers[0].id == "test-indexer"
    assert indexers[0].title == "Test Indexer"

    request = seen[0]
    assert request.url.path == PROXY_PATH
    assert query(request) == {"t": "indexers", "configured": "true", "apikey": "test-key"}


@pytest.mark.asyncio
async def test_get_torrents(make_client, rss_response):
    seen = []

    def handler(request):
        seen.append(request)
        return rss_response()

    params = {"t": "search", "q": "ubuntu"}
    async with make_client(handler) as client:
        feed = await client.get_torrents("someindexer", params)

    assert len(feed.items) == 1
    assert feed.items[0].title == "Ubuntu 22.04 LTS"
    assert seen[0].url.path == "/api/v2.0/indexers/someindexer/results/torznab/api"
    assert query(seen[0]) == {"t": "search", "q": "ubuntu", "apikey": "test-key"}
    # caller's mapping is left alone
    assert params == {"t": "search", "q": "ubuntu"}


@pytest.mark.asyncio
async def test_get_torrents_with_post(make_client, rss_response):
    seen = []

    def handler(request):
        seen.append(request)
        return rss_response()

    async with make_client(handler) as client:
        await client.get_torrents("all", {"t": "search", "q": "ubuntu"}, use_post=True)

    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == PROXY_PATH
    assert request.url.query == b""
    assert request.content == b"t=search&q=ubuntu&apikey=test-key"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    ("method", "options", "expected"),
    [
        (
            "tv_search",
            TVSearch(query="The Expanse", season=6, episode=5),
            {"t": "tvsearch", "season": "6", "ep": "5"},
        ),
        ("movie_search", MovieSearch(imdb_id="tt0816692"), {"t": "movie", "imdbid": "tt0816692"}),
        ("music_search", MusicSearch(artist="Pink Floyd"), {"t": "music", "artist": "Pink Floyd"}),
        ("book_search", BookSearch(author="Isaac Asimov"), {"t": "book", "author": "Isaac Asimov"}),
    ],
)
async def test_typed_searches(make_client, rss_response, method, options, expected):
    seen = []

    def handler(request):
        seen.append(request)
        return rss_response()

    async with make_client(handler) as client:
        feed = await getattr(client, method)(options)

    assert len(feed.items) == 1
    params = query(seen[0])
    assert params["apikey"] == "test-key"
    for key, value in expected.items():
        assert params[key] == value


@pytest.mark.asyncio
async def test_search_targets_indexer(make_client, rss_response):
    seen = []

    def handler(request):
        seen.append(request)
        return rss_response()

    async with make_client(handler) as client:
        await client.search(SearchQuery(query="ubuntu", limit=5), indexer="1337x")

    assert seen[0].url.path == "/api/v2.0/indexers/1337x/results/torznab/api"
    assert query(seen[0]) == {"t": "search", "q": "ubuntu", "limit": "5", "apikey": "test-key"}


@pytest.mark.asyncio
async def test_search_direct_against_tracker(make_client, rss_response):
    seen = []

    def handler(request):
        seen.append(request)
        return rss_response()

    async with make_client(
        handler, host="https://tracker.example.com/api/torznab", direct_mode=True
    ) as client:
        feed = await client.search_direct("ubuntu", {"limit": "10"})

    items = feed.to_torznab_items()
    assert items[0].seeders == 12

    request = seen[0]
    assert request.url.host == "tracker.example.com"
    assert request.url.path == "/api/torznab"
    assert query(request) == {"limit": "10", "t": "search", "q": "ubuntu", "apikey": "test-key"}


@pytest.mark.asyncio
async def test_direct_mode_ignores_indexer(make_client, rss_response):
    seen = []

    def handler(request):
        seen.append(request)
        return rss_response()

    async with make_client(
        handler, host="https://tracker.example.com/api/torznab", direct_mode=True
    ) as client:
        await client.tv_search(TVSearch(query="x"), indexer="ignored")

    assert seen[0].url.path == "/api/torznab"


@pytest.mark.asyncio
async def test_get_caps_direct_mode(make_client):
    seen = []

    def handler(request):
        seen.append(request)
        return xml_response(CAPS_XML)

    async with make_client(
        handler, host="https://tracker.example.com/api/torznab", direct_mode=True
    ) as client:
        caps = await client.get_caps()

    assert caps.server["title"] == "Tracker"
    assert caps.supports("search")
    assert seen[0].url.path == "/api/torznab"
    assert query(seen[0]) == {"t": "caps", "apikey": "test-key"}


@pytest.mark.asyncio
async def test_get_caps_proxy_mode(make_client):
    seen = []

    def handler(request):
        seen.append(request)
        return xml_response(CAPS_XML)

    async with make_client(handler) as client:
        await client.get_caps("someindexer")

    assert seen[0].url.path == "/api/v2.0/indexers/someindexer/results/torznab/api"


@pytest.mark.asyncio
async def test_no_api_key_is_sent_when_unset(make_client, rss_response):
    seen = []

    def handler(request):
        seen.append(request)
        return rss_response()

    async with make_client(handler, api_key=None) as client:
        await client.search(SearchQuery(query="x"))

    assert "apikey" not in query(seen[0])


@pytest.mark.asyncio
async def test_get_enclosure(make_client):
    def handler(request):
        assert request.url.path == "/download/test.torrent"
        return httpx.Response(
            200,
            content=b"torrent file content",
            headers={"Content-Type": "application/x-bittorrent"},
        )

    async with make_client(handler) as client:
        content = await client.get_enclosure("http://localhost:9117/download/test.torrent")

    assert content == b"torrent file content"


@pytest.mark.asyncio
async def test_get_enclosure_not_found(make_client):
    def handler(request):
        return httpx.Response(404)

    async with make_client(handler) as client:
        with pytest.raises(TransportError) as exc_info:
            await client.get_enclosure("http://localhost:9117/download/missing.torrent")

    assert exc_info.value.status_code == 404


@pytest.mark.asyncio
async def test_get_enclosure_rejects_relative_url(make_client):
    def handler(request):
        raise AssertionError("no request expected")

    async with make_client(handler) as client:
        with pytest.raises(ConfigurationError):
            await client.get_enclosure("/download/test.torrent")


@pytest.mark.asyncio
async def test_invalid_xml_raises_decode_error(make_client):
    def handler(request):
        return httpx.Response(200, content=b"invalid xml")

    async with make_client(handler) as client:
        with pytest.raises(DecodeError):
            await client.search(SearchQuery(query="x"))


@pytest.mark.asyncio
async def test_client_error_status_with_html_body(make_client):
    def handler(request):
        return httpx.Response(401, content=b"<html><body>Unauthorized</body></html>")

    async with make_client(handler) as client:
        with pytest.raises(DecodeError, match="HTTP 401"):
            await client.get_indexers()


@pytest.mark.asyncio
async def test_torznab_error_document(make_client):
    def handler(request):
        return xml_response(b'<error code="100" description="Invalid API Key" />')

    async with make_client(handler) as client:
        with pytest.raises(TorznabAPIError) as exc_info:
            await client.search(SearchQuery(query="x"))

    assert exc_info.value.code == "100"


@pytest.mark.asyncio
async def test_server_errors_exhaust_retries(make_client):
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(500)

    async with make_client(handler) as client:
        with pytest.raises(TransportError) as exc_info:
            await client.get_indexers()

    assert len(calls) == 5
    assert "test-key" not in str(exc_info.value)


@pytest.mark.asyncio
async def test_malformed_host_raises_before_any_request(make_client):
    def handler(request):
        raise AssertionError("no request expected")

    async with make_client(handler, host="localhost:9117") as client:
        with pytest.raises(ConfigurationError):
            await client.get_indexers()


@pytest.mark.asyncio
async def test_timeout_raises_cancellation_error(make_client):
    async def handler(request):
        await asyncio.sleep(1)
        return xml_response(INDEXERS_XML)

    async with make_client(handler) as client:
        with pytest.raises(CancellationError):
            await client.get_indexers(timeout=0.05)


def test_client_from_settings():
    settings = Settings(host="http://nas.local:9117/", api_key="abc", direct_mode=False)
    client = TorznabClient.from_settings(settings)

    assert client.config == ClientConfig(host="http://nas.local:9117", api_key="abc")


@pytest.mark.asyncio
async def test_concurrent_searches_share_one_client(make_client, rss_response):
    seen = []

    def handler(request):
        seen.append(request.url.params["q"])
        return rss_response()

    async with make_client(handler) as client:
        feeds = await asyncio.gather(
            *(client.search(SearchQuery(query=q)) for q in ("a", "b", "c"))
        )

    assert len(feeds) == 3
    assert sorted(seen) == ["a", "b", "c"]
