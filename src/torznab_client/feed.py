"""Decoding of Torznab XML documents.

Three document shapes are handled:

- ``<rss><channel><item>...`` search results
- ``<indexers><indexer id=...>`` Jackett's configured indexer list
- ``<caps>`` indexer capabilities

Any of them may instead be an ``<error code=".." description=".."/>``.
"""

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING
from xml.etree import ElementTree as ET

from .errors import DecodeError, TorznabAPIError

if TYPE_CHECKING:
    from .items import TorznabItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TorznabAttr:
    """One ``<torznab:attr name=.. value=..>`` element."""

    name: str
    value: str


@dataclass(frozen=True)
class Enclosure:
    url: str = ""
    length: str = ""
    type: str = ""


@dataclass(frozen=True)
class RawResultItem:
    """One decoded ``<item>``, fields as they appear on the wire."""

    title: str = ""
    guid: str = ""
    jackett_indexer: str = ""  # id attribute of <jackettindexer>
    type: str = ""  # "public", "private", "semi-private"
    comments: str = ""
    pub_date: str = ""
    size: str = ""
    files: str = ""
    grabs: str = ""
    description: str = ""
    link: str = ""

    # RSS-level <category> elements
    categories: tuple[str, ...] = ()
    enclosure: Enclosure = field(default_factory=Enclosure)
    # Extension attributes in wire order; names may repeat
    attributes: tuple[TorznabAttr, ...] = ()


@dataclass(frozen=True)
class Feed:
    """Search results channel."""

    title: str = ""
    description: str = ""
    link: str = ""
    language: str = ""
    category: str = ""
    items: tuple[RawResultItem, ...] = ()

    def to_torznab_items(self) -> list["TorznabItem"]:
        """Wrap every item for typed attribute access."""
        from .items import TorznabItem

        return [TorznabItem(item) for item in self.items]


@dataclass(frozen=True)
class Indexer:
    """An indexer configured in Jackett (or a tracker's self-description)."""

    id: str
    title: str = ""
    description: str = ""
    configured: bool = False
    link: str = ""
    language: str = ""
    type: str = ""


@dataclass(frozen=True)
class SearchMode:
    """One entry of ``<searching>`` in a caps document."""

    available: bool
    supported_params: tuple[str, ...] = ()


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    subcategories: tuple["Category", ...] = ()


@dataclass(frozen=True)
class Capabilities:
    """Decoded ``t=caps`` response."""

    server: dict[str, str] = field(default_factory=dict)
    limit_max: int | None = None
    limit_default: int | None = None
    searching: dict[str, SearchMode] = field(default_factory=dict)
    categories: tuple[Category, ...] = ()
    # Filled when the endpoint answers with an <indexers> list instead
    indexers: tuple[Indexer, ...] = ()

    def supports(self, search_type: str) -> bool:
        """Check whether a search mode (``tv-search``, ``movie-search``, ...) is available."""
        mode = self.searching.get(search_type)
        return bool(mode and mode.available)


def _local_name(tag: str) -> str:
    """Strip an XML namespace: ``{http://...}attr`` -> ``attr``."""
    return tag.rsplit("}", 1)[-1]


def _text(element: ET.Element, path: str) -> str:
    return (element.findtext(path) or "").strip()


def _parse_root(content: bytes, url: str | None, expected: tuple[str, ...]) -> ET.Element:
    """Parse a document, raising on Torznab errors and unexpected roots."""
    try:
        root = ET.fromstring(content)
    except ET.ParseError as exc:
        raise DecodeError(f"Invalid XML from {url or 'response'}: {exc}", url) from exc

    tag = _local_name(root.tag)
    if tag == "error":
        raise TorznabAPIError(root.get("code", ""), root.get("description", ""), url)
    if tag not in expected:
        raise DecodeError(
            f"Unexpected document <{tag}> from {url or 'response'}, expected <{'|'.join(expected)}>",
            url,
        )
    return root


def _parse_item(element: ET.Element) -> RawResultItem:
    enclosure = element.find("enclosure")
    jackett_indexer = element.find("jackettindexer")

    return RawResultItem(
        title=_text(element, "title"),
        guid=_text(element, "guid"),
        jackett_indexer=jackett_indexer.get("id", "") if jackett_indexer is not None else "",
        type=_text(element, "type"),
        comments=_text(element, "comments"),
        pub_date=_text(element, "pubDate"),
        size=_text(element, "size"),
        files=_text(element, "files"),
        grabs=_text(element, "grabs"),
        description=_text(element, "description"),
        link=_text(element, "link"),
        categories=tuple(
            (c.text or "").strip() for c in element.findall("category") if (c.text or "").strip()
        ),
        enclosure=Enclosure(
            url=enclosure.get("url", ""),
            length=enclosure.get("length", ""),
            type=enclosure.get("type", ""),
        )
        if enclosure is not None
        else Enclosure(),
        # {*} matches torznab:attr, newznab:attr and un-namespaced attr
        attributes=tuple(
            TorznabAttr(name=a.get("name", ""), value=a.get("value", ""))
            for a in element.findall("{*}attr")
            if a.get("name")
        ),
    )


def parse_feed(content: bytes, url: str | None = None) -> Feed:
    """Decode a search response.

    Raises:
        TorznabAPIError: If the document is a Torznab <error>
        DecodeError: If the body is not an RSS document
    """
    root = _parse_root(content, url, ("rss",))
    channel = root.find("channel")
    if channel is None:
        return Feed()

    items = tuple(_parse_item(e) for e in channel.findall("item"))
    logger.debug("Decoded %d items from %s", len(items), url or "response")

    return Feed(
        title=_text(channel, "title"),
        description=_text(channel, "description"),
        link=_text(channel, "link"),
        language=_text(channel, "language"),
        category=_text(channel, "category"),
        items=items,
    )


def _parse_indexer(element: ET.Element) -> Indexer:
    return Indexer(
        id=element.get("id", ""),
        title=_text(element, "title"),
        description=_text(element, "description"),
        configured=element.get("configured", "").lower() == "true",
        link=_text(element, "link"),
        language=_text(element, "language"),
        type=_text(element, "type"),
    )


def parse_indexers(content: bytes, url: str | None = None) -> list[Indexer]:
    """Decode Jackett's ``t=indexers`` response."""
    root = _parse_root(content, url, ("indexers",))
    return [_parse_indexer(e) for e in root.findall("indexer")]


def _parse_int(value: str | None) -> int | None:
    try:
        return int(value) if value else None
    except ValueError:
        return None


def _parse_category(element: ET.Element) -> Category:
    return Category(
        id=element.get("id", ""),
        name=element.get("name", ""),
        subcategories=tuple(_parse_category(s) for s in element.findall("subcat")),
    )


def parse_caps(content: bytes, url: str | None = None) -> Capabilities:
    """Decode a ``t=caps`` response.

    Some endpoints describe themselves with an ``<indexers>`` list; that
    shape is accepted and returned in ``Capabilities.indexers``.
    """
    root = _parse_root(content, url, ("caps", "indexers"))

    if _local_name(root.tag) == "indexers":
        return Capabilities(indexers=tuple(_parse_indexer(e) for e in root.findall("indexer")))

    server = root.find("server")
    limits = root.find("limits")
    searching = root.find("searching")
    categories = root.find("categories")

    modes: dict[str, SearchMode] = {}
    if searching is not None:
        for mode in searching:
            params = mode.get("supportedParams", "")
            modes[_local_name(mode.tag)] = SearchMode(
                available=mode.get("available", "").lower() == "yes",
                supported_params=tuple(p.strip() for p in params.split(",") if p.strip()),
            )

    return Capabilities(
        server=dict(server.attrib) if server is not None else {},
        limit_max=_parse_int(limits.get("max")) if limits is not None else None,
        limit_default=_parse_int(limits.get("default")) if limits is not None else None,
        searching=modes,
        categories=tuple(_parse_category(c) for c in categories.findall("category"))
        if categories is not None
        else (),
    )
