"""Request URL construction for proxy (Jackett) and direct tracker mode.

Proxy mode routes every request through Jackett's indexer mount:

    http://localhost:9117/api/v2.0/indexers/<indexer>/results/torznab/api?t=search&q=...

Direct mode talks to a single tracker's Torznab API and appends the
endpoint to the configured host path verbatim:

    https://tracker.example.com/api/torznab?t=caps
"""

from collections.abc import Mapping
from urllib.parse import SplitResult, parse_qsl, urlencode, urlsplit, urlunsplit

from .errors import ConfigurationError

# Jackett mount point for "indexer results via torznab"
JACKETT_API_BASE = "/api/v2.0/indexers"
RESULTS_SUFFIX = "results/torznab/api"

# Aggregate indexer id: search every configured indexer
ALL_INDEXERS = "all"


def split_url(url: str) -> SplitResult:
    """Split an absolute http(s) URL.

    Raises:
        ConfigurationError: If the URL is malformed or not http(s)
    """
    try:
        parts = urlsplit(url)
        hostname = parts.hostname
        parts.port  # raises on a non-numeric or out of range port
    except ValueError as exc:
        raise ConfigurationError(f"Malformed URL {url!r}: {exc}") from exc

    if parts.scheme not in ("http", "https") or not hostname:
        raise ConfigurationError(f"Malformed URL {url!r}: expected http(s)://host[:port][/path]")
    return parts


def indexer_endpoint(indexer: str = ALL_INDEXERS) -> str:
    """Endpoint suffix for one indexer (or ``all``) under the Jackett mount."""
    indexer = indexer.strip("/")
    if not indexer:
        raise ConfigurationError("indexer id must not be empty")
    return f"{indexer}/{RESULTS_SUFFIX}"


def build_url(
    host: str,
    endpoint: str,
    params: Mapping[str, str] | None = None,
    direct_mode: bool = False,
) -> str:
    """Resolve host + endpoint + query parameters into an absolute URL.

    Raises:
        ConfigurationError: If host is not an absolute http(s) URL
    """
    parts = split_url(host)
    endpoint = endpoint.strip("/")
    base_path = parts.path.rstrip("/")

    if direct_mode:
        path = f"{base_path}/{endpoint}" if endpoint else parts.path
    else:
        path = f"{base_path}{JACKETT_API_BASE}/{endpoint}"

    query_items = parse_qsl(parts.query, keep_blank_values=True)
    if params:
        query_items.extend(params.items())

    return urlunsplit((parts.scheme, parts.netloc, path, urlencode(query_items), ""))


def redact_url(url: str, secret: str | None) -> str:
    """Mask a secret (the API key) for logging and error messages."""
    if not secret:
        return url
    return url.replace(secret, "***")
