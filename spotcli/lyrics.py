"""Look up song lyrics through the Genius search API and lyric pages."""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Any

import requests

from spotcli.lyrics_parse import parse_lyric_html
from spotcli.lyrics_query import improve_query

SEARCH_BASE_URL = "https://genius.com/api/search"

log = logging.getLogger(__name__)


class LyricError(Exception):
    """Raised when lyrics cannot be searched for or retrieved."""


@dataclass(frozen=True)
class SearchResult:
    url: str
    title: str
    artist_names: str


@dataclass(frozen=True)
class Lyric:
    track: str
    artists: str
    lyric: str


def process_lyric(lyric: str) -> str:
    """Make the blank line before each ``[Section]`` header consistent."""
    return lyric.replace("\n\n[", "\n[").replace("\n[", "\n\n[")


def _require(mapping: Any, key: str, kind: type) -> Any:
    if not isinstance(mapping, dict) or key not in mapping:
        raise LyricError(f"invalid search response: missing field `{key}`")
    value = mapping[key]
    if not isinstance(value, kind):
        raise LyricError(f"invalid search response: bad field `{key}`")
    return value


def _parse_hits(body: Any) -> list[SearchResult]:
    meta = _require(body, "meta", dict)
    status = _require(meta, "status", int)
    if status != 200:
        message = meta.get("message")
        raise LyricError(message or f"request failed with status code: {status}")

    response = body.get("response")
    if response is None:
        return []
    results = []
    for hit in _require(response, "hits", list):
        hit_type = _require(hit, "type", str)
        result = _require(hit, "result", dict)
        item = SearchResult(
            url=_require(result, "url", str),
            title=_require(result, "title", str),
            artist_names=_require(result, "artist_names", str),
        )
        if hit_type == "song":
            results.append(item)
    return results


class LyricClient:
    """Client for finding a song's lyrics."""

    def __init__(self, session: requests.Session | None = None) -> None:
        self._http = session if session is not None else requests.Session()

    def search_songs(self, query: str) -> list[SearchResult]:
        """Search songs satisfying ``query``."""
        query = improve_query(query)
        log.debug("search songs: query=%s", query)
        try:
            body = self._http.get(SEARCH_BASE_URL, params={"q": query}).json()
        except (requests.RequestException, ValueError) as err:
            raise LyricError(str(err)) from err
        return _parse_hits(body)

    def retrieve_lyric(self, url: str) -> str:
        """Retrieve a song's lyric from a lyric page ``url``."""
        try:
            html = self._http.get(url).text
        except requests.RequestException as err:
            raise LyricError(str(err)) from err
        log.debug("retrieve lyric from url=%s", url)
        return parse_lyric_html(html).strip()

    def get_lyric(self, query: str) -> Lyric | None:
        """Return the lyric of the first song matching ``query``, or None."""
        result = next(
            (r for r in self.search_songs(query) if "Genius" not in r.artist_names),
            None,
        )
        if result is None:
            return None
        lyric = self.retrieve_lyric(result.url)
        return Lyric(
            track=result.title,
            artists=result.artist_names,
            lyric=process_lyric(lyric),
        )


def main(argv: list[str] | None = None) -> int:
    """Print the lyric of the song named by the first argument."""
    logging.basicConfig()
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print("Please specify the first argument to be the search query")
        return 1

    try:
        result = LyricClient().get_lyric(args[0])
    except LyricError as err:
        print(f"Error: {err}", file=sys.stderr)
        return 1

    if result is None:
        print("lyric not found!")
    else:
        print(f"{result.track} by {result.artists}'s lyric:\n{result.lyric}")
    return 0


if __name__ == "__main__":
    sys.exit(main())