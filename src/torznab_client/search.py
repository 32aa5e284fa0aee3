"""Typed Torznab search requests.

Each request kind maps its fields onto the flat Torznab query vocabulary
(``t``, ``q``, ``cat``, ``tvdbid``, ``season``, ``ep``, ...). Only fields
with a value are sent.

See: https://torznab.github.io/spec-1.3-draft/torznab/Specification-v1.3.html
"""

from collections.abc import Sequence
from dataclasses import dataclass, field, fields
from typing import ClassVar

# Values of the ``t`` parameter
SEARCH = "search"
TV_SEARCH = "tvsearch"
MOVIE_SEARCH = "movie"
MUSIC_SEARCH = "music"
BOOK_SEARCH = "book"
CAPS = "caps"
INDEXERS = "indexers"

ParamValue = str | int | bool | Sequence[str | int] | None


def _param(key: str):
    """Dataclass field bound to a Torznab query parameter."""
    return field(default=None, metadata={"param": key})


def format_param(value: ParamValue) -> str:
    """Serialize a field value; empty string means "omit"."""
    if value is None or value is False:
        return ""
    if value is True:
        return "1"
    if isinstance(value, str):
        return value if value.strip() else ""
    if isinstance(value, int):
        return str(value)
    # Multiple categories are comma separated
    return ",".join(str(v) for v in value if str(v).strip())


@dataclass(frozen=True, kw_only=True)
class SearchRequest:
    """Fields shared by every search kind."""

    search_type: ClassVar[str] = SEARCH

    query: str | None = _param("q")
    category: str | int | Sequence[str | int] | None = _param("cat")
    limit: int | str | None = _param("limit")
    offset: int | str | None = _param("offset")
    # Ask the indexer to return every extended attribute it has
    extended: bool | str | None = _param("extended")

    def to_params(self, api_key: str | None = None) -> dict[str, str]:
        """Build query parameters for this request.

        The ``t`` discriminator always comes first; the API key is added
        when one is configured.
        """
        params = {"t": self.search_type}
        for f in fields(self):
            key = f.metadata.get("param")
            if key is None:
                continue
            value = format_param(getattr(self, f.name))
            if value:
                params[key] = value
        if api_key:
            params["apikey"] = api_key
        return params


@dataclass(frozen=True, kw_only=True)
class SearchQuery(SearchRequest):
    """Free text search (``t=search``)."""

    search_type: ClassVar[str] = SEARCH


@dataclass(frozen=True, kw_only=True)
class TVSearch(SearchRequest):
    """TV search (``t=tvsearch``)."""

    search_type: ClassVar[str] = TV_SEARCH

    tvdb_id: str | int | None = _param("tvdbid")
    tvmaze_id: str | int | None = _param("tvmazeid")
    rage_id: str | int | None = _param("rid")
    imdb_id: str | None = _param("imdbid")
    season: str | int | None = _param("season")
    episode: str | int | None = _param("ep")


@dataclass(frozen=True, kw_only=True)
class MovieSearch(SearchRequest):
    """Movie search (``t=movie``)."""

    search_type: ClassVar[str] = MOVIE_SEARCH

    imdb_id: str | None = _param("imdbid")
    tmdb_id: str | int | None = _param("tmdbid")
    genre: str | None = _param("genre")
    year: str | int | None = _param("year")


@dataclass(frozen=True, kw_only=True)
class MusicSearch(SearchRequest):
    """Music search (``t=music``)."""

    search_type: ClassVar[str] = MUSIC_SEARCH

    artist: str | None = _param("artist")
    album: str | None = _param("album")
    label: str | None = _param("label")
    track: str | None = _param("track")
    year: str | int | None = _param("year")
    genre: str | None = _param("genre")


@dataclass(frozen=True, kw_only=True)
class BookSearch(SearchRequest):
    """Book search (``t=book``)."""

    search_type: ClassVar[str] = BOOK_SEARCH

    author: str | None = _param("author")
    title: str | None = _param("title")
    year: str | int | None = _param("year")
    genre: str | None = _param("genre")
