"""Typed access to Torznab extension attributes.

A result item carries an open-ended list of ``<torznab:attr name=.. value=..>``
elements. Names can repeat (``tag``, ``category``), so they are indexed as
name -> values in wire order.

Numeric accessors never raise: a missing or malformed value reads as 0.
Predefined attributes:
https://torznab.github.io/spec-1.3-draft/torznab/Specification-v1.3.html#predefined-attributes
"""

import re
from collections.abc import Mapping
from datetime import datetime
from email.utils import parsedate_to_datetime
from types import MappingProxyType

from .feed import RawResultItem

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_DECIMAL_RE = re.compile(r"[+-]?[0-9]+")

# Volume factor when the tracker publishes none: normal accounting
DEFAULT_VOLUME_FACTOR = 1.0


def _parse_int(value: str) -> int:
    value = value.strip()
    # Plain ASCII decimal only: no "1_000", no non-ASCII digits
    if not _DECIMAL_RE.fullmatch(value):
        return 0
    number = int(value)
    if not INT64_MIN <= number <= INT64_MAX:
        return 0
    return number


def _parse_float(value: str) -> float:
    try:
        return float(value.strip())
    except ValueError:
        return 0.0


class TorznabItem:
    """Read-only typed view over one decoded result item."""

    __slots__ = ("raw", "_attributes")

    def __init__(self, raw: RawResultItem):
        self.raw = raw

        index: dict[str, list[str]] = {}
        for attr in raw.attributes:
            index.setdefault(attr.name, []).append(attr.value)
        self._attributes = MappingProxyType({name: tuple(values) for name, values in index.items()})

    def __repr__(self) -> str:
        return f"TorznabItem(title={self.raw.title!r}, attributes={len(self._attributes)})"

    @property
    def attributes(self) -> Mapping[str, tuple[str, ...]]:
        """Attribute name -> every value, in wire order."""
        return self._attributes

    # === Generic accessors ===

    def get_attr(self, name: str) -> str:
        """First value of an attribute, or an empty string."""
        values = self._attributes.get(name)
        return values[0] if values else ""

    def get_attr_values(self, name: str) -> list[str]:
        """Every value of a repeatable attribute, empty list if absent."""
        return list(self._attributes.get(name, ()))

    def has_attr(self, name: str) -> bool:
        return name in self._attributes

    def get_attr_int(self, name: str) -> int:
        """First value as an integer, 0 if absent or malformed."""
        return _parse_int(self.get_attr(name))

    def get_attr_int64(self, name: str) -> int:
        """Same as `get_attr_int`; values outside the signed 64-bit range read as 0."""
        return _parse_int(self.get_attr(name))

    def get_attr_float(self, name: str) -> float:
        """First value as a float, 0.0 if absent or malformed."""
        return _parse_float(self.get_attr(name))

    # === Item fields ===

    @property
    def title(self) -> str:
        return self.raw.title

    @property
    def guid(self) -> str:
        return self.raw.guid

    @property
    def link(self) -> str:
        return self.raw.link

    @property
    def comments(self) -> str:
        return self.raw.comments

    @property
    def description(self) -> str:
        return self.raw.description

    @property
    def enclosure_url(self) -> str:
        return self.raw.enclosure.url

    @property
    def indexer(self) -> str:
        """Jackett indexer id that produced this item (proxy mode only)."""
        return self.raw.jackett_indexer

    @property
    def size(self) -> int:
        """Size in bytes: <size>, then the enclosure length, then the ``size`` attribute."""
        for value in (self.raw.size, self.raw.enclosure.length, self.get_attr("size")):
            if value:
                size = _parse_int(value)
                if size:
                    return size
        return 0

    @property
    def published(self) -> datetime | None:
        """<pubDate> as a datetime, None if missing or unparsable."""
        if not self.raw.pub_date:
            return None
        try:
            return parsedate_to_datetime(self.raw.pub_date)
        except (TypeError, ValueError):
            return None

    @property
    def grabs(self) -> int:
        return self.get_attr_int("grabs") or _parse_int(self.raw.grabs)

    @property
    def files(self) -> int:
        return self.get_attr_int("files") or _parse_int(self.raw.files)

    # === Swarm ===

    @property
    def seeders(self) -> int:
        return self.get_attr_int("seeders")

    @property
    def leechers(self) -> int:
        return self.get_attr_int("leechers")

    @property
    def peers(self) -> int:
        """``peers`` attribute, or seeders + leechers when the tracker omits it."""
        if self.has_attr("peers"):
            return self.get_attr_int("peers")
        return self.seeders + self.leechers

    @property
    def info_hash(self) -> str:
        return self.get_attr("infohash")

    @property
    def magnet_url(self) -> str:
        return self.get_attr("magneturl")

    # === Ratio accounting ===

    def _volume_factor(self, name: str) -> float:
        value = self.get_attr(name)
        if not value:
            return DEFAULT_VOLUME_FACTOR
        try:
            return float(value.strip())
        except ValueError:
            return DEFAULT_VOLUME_FACTOR

    @property
    def download_volume_factor(self) -> float:
        """Share of the download counted against ratio (0 = freeleech)."""
        return self._volume_factor("downloadvolumefactor")

    @property
    def upload_volume_factor(self) -> float:
        """Upload credit multiplier (2 = double upload)."""
        return self._volume_factor("uploadvolumefactor")

    @property
    def is_freeleech(self) -> bool:
        """Freeleech by volume factor 0 or by a ``freeleech`` tag."""
        return self.download_volume_factor == 0.0 or self.has_tag("freeleech")

    @property
    def minimum_ratio(self) -> float:
        return self.get_attr_float("minimumratio")

    @property
    def minimum_seed_time(self) -> int:
        """Required seeding time in seconds."""
        return self.get_attr_int64("minimumseedtime")

    # === TV / movie identifiers ===

    @property
    def tvdb_id(self) -> str:
        return self.get_attr("tvdbid")

    @property
    def tvmaze_id(self) -> str:
        return self.get_attr("tvmazeid")

    @property
    def rage_id(self) -> str:
        return self.get_attr("rageid")

    @property
    def tmdb_id(self) -> str:
        return self.get_attr("tmdbid")

    @property
    def imdb_id(self) -> str:
        """IMDB id; older indexers publish it as ``imdb`` instead of ``imdbid``."""
        return self.get_attr("imdbid") or self.get_attr("imdb")

    @property
    def season(self) -> int:
        return self.get_attr_int("season")

    @property
    def episode(self) -> int:
        return self.get_attr_int("episode")

    @property
    def year(self) -> int:
        return self.get_attr_int("year")

    @property
    def genre(self) -> str:
        return self.get_attr("genre")

    # === Media quality ===

    @property
    def resolution(self) -> str:
        return self.get_attr("resolution")

    @property
    def video(self) -> str:
        return self.get_attr("video")

    @property
    def audio(self) -> str:
        return self.get_attr("audio")

    @property
    def language(self) -> str:
        return self.get_attr("language")

    @property
    def subtitles(self) -> str:
        return self.get_attr("subs")

    # === Music / books ===

    @property
    def artist(self) -> str:
        return self.get_attr("artist")

    @property
    def album(self) -> str:
        return self.get_attr("album")

    @property
    def label(self) -> str:
        return self.get_attr("label")

    @property
    def track(self) -> str:
        return self.get_attr("track")

    @property
    def author(self) -> str:
        return self.get_attr("author")

    @property
    def book_title(self) -> str:
        return self.get_attr("booktitle")

    @property
    def publisher(self) -> str:
        return self.get_attr("publisher")

    @property
    def cover_url(self) -> str:
        return self.get_attr("coverurl")

    # === Tags and categories ===

    @property
    def tags(self) -> list[str]:
        return self.get_attr_values("tag")

    def has_tag(self, tag: str) -> bool:
        """Case-insensitive tag membership."""
        wanted = tag.casefold()
        return any(t.casefold() == wanted for t in self._attributes.get("tag", ()))

    @property
    def categories(self) -> list[str]:
        """``category`` attributes, or the RSS <category> list when there are none."""
        values = self.get_attr_values("category")
        if values:
            return values
        return list(self.raw.categories)
