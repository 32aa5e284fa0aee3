"""Command line front end for the Torznab client."""

import argparse
import asyncio
import logging
import sys

from pydantic import ValidationError

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def _load_settings(args: argparse.Namespace):
    """Environment settings with command line overrides applied."""
    from .config import Settings

    overrides = {
        "host": args.host,
        "api_key": args.api_key,
        "direct_mode": True if args.direct else None,
        "timeout": args.timeout,
    }
    try:
        return Settings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as e:
        print(f"Error: invalid configuration\n{e}")
        sys.exit(1)


def _build_request(args: argparse.Namespace):
    """Typed search request for the chosen command."""
    from .search import BookSearch, MovieSearch, MusicSearch, SearchQuery, TVSearch

    common = {
        "query": args.query,
        "category": args.cat,
        "limit": args.limit,
        "offset": args.offset,
        "extended": args.extended,
    }

    if args.command == "tv":
        return TVSearch(
            **common,
            tvdb_id=args.tvdbid,
            tvmaze_id=args.tvmazeid,
            imdb_id=args.imdbid,
            season=args.season,
            episode=args.episode,
        )
    if args.command == "movie":
        return MovieSearch(
            **common, imdb_id=args.imdbid, tmdb_id=args.tmdbid, genre=args.genre, year=args.year
        )
    if args.command == "music":
        return MusicSearch(
            **common, artist=args.artist, album=args.album, year=args.year, genre=args.genre
        )
    if args.command == "book":
        return BookSearch(
            **common, author=args.author, title=args.title, year=args.year, genre=args.genre
        )
    return SearchQuery(**common)


def _format_categories(categories: list[str]) -> str:
    """``5040 (TV), 100001``: ids with the name of their top-level category."""
    from .categories import PARENT_CATEGORIES, parent_category

    labels = []
    for category in categories:
        name = PARENT_CATEGORIES.get(parent_category(category))
        labels.append(f"{category} ({name})" if name else category)
    return ", ".join(labels)


def _print_item(item) -> None:
    size_mb = item.size / 1024 / 1024 if item.size else 0

    print(f"  {item.title}")
    print(f"    Seeders: {item.seeders}  Leechers: {item.leechers}  Size: {size_mb:.1f} MB")
    if item.indexer:
        print(f"    Indexer: {item.indexer}")
    if item.categories:
        print(f"    Categories: {_format_categories(item.categories)}")
    if item.imdb_id or item.tvdb_id:
        print(f"    IMDB: {item.imdb_id or '-'}  TVDB: {item.tvdb_id or '-'}")
    if item.is_freeleech:
        print("    Freeleech")
    if item.tags:
        print(f"    Tags: {', '.join(item.tags)}")
    print(f"    Download: {item.magnet_url or item.enclosure_url or item.link}")
    print()


async def run_search(args: argparse.Namespace) -> None:
    """Run one of the search commands and print the results."""
    from .client import TorznabClient

    settings = _load_settings(args)
    request = _build_request(args)

    async with TorznabClient.from_settings(settings) as client:
        feed = await client.search(request, indexer=args.indexer)
        items = feed.to_torznab_items()

        print(f"Found {len(items)} results\n")
        for item in items:
            _print_item(item)


async def run_caps(args: argparse.Namespace) -> None:
    """Print the capabilities of an indexer or direct tracker."""
    from .client import TorznabClient

    settings = _load_settings(args)

    async with TorznabClient.from_settings(settings) as client:
        caps = await client.get_caps(args.indexer)

        if caps.indexers:
            for indexer in caps.indexers:
                print(f"Indexer: {indexer.title} ({indexer.id})")
            return

        if caps.server:
            print(f"Server: {caps.server.get('title', '')} {caps.server.get('version', '')}")
        if caps.limit_max:
            print(f"Limits: default={caps.limit_default} max={caps.limit_max}")

        print("\nSearch modes:")
        for name, mode in caps.searching.items():
            state = "yes" if mode.available else "no"
            print(f"  {name}: {state} ({', '.join(mode.supported_params)})")

        print("\nCategories:")
        for cat in caps.categories:
            print(f"  {cat.id} {cat.name}")
            for sub in cat.subcategories:
                print(f"    {sub.id} {sub.name}")


async def run_indexers(args: argparse.Namespace) -> None:
    """List indexers configured in Jackett."""
    from .client import TorznabClient

    settings = _load_settings(args)

    async with TorznabClient.from_settings(settings) as client:
        indexers = await client.get_indexers()

        print(f"{len(indexers)} configured indexers:\n")
        for indexer in indexers:
            print(f"  {indexer.id}: {indexer.title}")
            if indexer.description:
                print(f"    {indexer.description[:70]}")


async def run_download(args: argparse.Namespace) -> None:
    """Download an enclosure to a local file."""
    from .client import TorznabClient

    settings = _load_settings(args)

    async with TorznabClient.from_settings(settings) as client:
        content = await client.get_enclosure(args.url)

    with open(args.output, "wb") as f:
        f.write(content)
    print(f"Saved {len(content)} bytes to {args.output}")


def main():
    parser = argparse.ArgumentParser(
        description="Torznab search CLI (Jackett proxy or direct tracker)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  torznab-client search ubuntu --cat 4000
  torznab-client tv "The Expanse" --tvdbid 280619 --season 6 --episode 5
  torznab-client movie --imdbid tt0816692 --indexer someindexer
  torznab-client music --artist "Pink Floyd" --album "Dark Side of the Moon"
  torznab-client book --author "Isaac Asimov" --title Foundation
  torznab-client caps --direct --host https://tracker.example.com/api/torznab
  torznab-client indexers
  torznab-client download --url 'http://localhost:9117/dl/...' -o file.torrent

Configuration is read from TORZNAB_* environment variables
(TORZNAB_HOST, TORZNAB_API_KEY, TORZNAB_DIRECT_MODE, ...).
""",
    )
    parser.add_argument(
        "command",
        choices=["search", "tv", "movie", "music", "book", "caps", "indexers", "download"],
    )
    parser.add_argument("query", nargs="?", help="Free text query")

    conn = parser.add_argument_group("connection")
    conn.add_argument("--host", help="Jackett URL, or tracker Torznab URL with --direct")
    conn.add_argument("--api-key", help="API key")
    conn.add_argument("--direct", action="store_true", help="Talk to the tracker directly")
    conn.add_argument("--timeout", type=float, help="Per-request timeout in seconds")
    conn.add_argument("--indexer", default="all", help="Jackett indexer id (default: all)")

    search = parser.add_argument_group("search")
    search.add_argument("--cat", action="append", help="Category id (repeatable)")
    search.add_argument("--limit", "-n", type=int, help="Max results")
    search.add_argument("--offset", type=int, help="Result offset")
    search.add_argument("--extended", action="store_true", help="Request all extended attributes")
    search.add_argument("--imdbid")
    search.add_argument("--tmdbid")
    search.add_argument("--tvdbid")
    search.add_argument("--tvmazeid")
    search.add_argument("--season")
    search.add_argument("--episode")
    search.add_argument("--artist")
    search.add_argument("--album")
    search.add_argument("--author")
    search.add_argument("--title")
    search.add_argument("--year")
    search.add_argument("--genre")

    dl = parser.add_argument_group("download")
    dl.add_argument("--url", help="Enclosure URL")
    dl.add_argument("--output", "-o", default="download.torrent", help="Output file")

    args = parser.parse_args()

    from .errors import TorznabError

    try:
        if args.command == "caps":
            asyncio.run(run_caps(args))
        elif args.command == "indexers":
            asyncio.run(run_indexers(args))
        elif args.command == "download":
            if not args.url:
                print("Error: --url required")
                sys.exit(1)
            asyncio.run(run_download(args))
        else:
            asyncio.run(run_search(args))
    except TorznabError as e:
        print(f"Error: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
