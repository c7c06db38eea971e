"""Command-line parser for the application and its subcommands."""

from __future__ import annotations

import argparse
from collections.abc import Callable
from enum import Enum
from typing import Any

from spotcli.protocol import ContextType, ItemType, Key, ProtocolError

PROG_NAME = "spotify_player"
SHELLS = ("bash", "elvish", "fish", "powershell", "zsh")
DEFAULT_LIKED_LIMIT = 200


def _enum_type(enum_cls: type[Enum]) -> Callable[[str], Any]:
    def convert(text: str):
        try:
            return enum_cls.from_cli_name(text)
        except ProtocolError as err:
            possible = ", ".join(m.cli_name for m in enum_cls)
            raise argparse.ArgumentTypeError(
                f"invalid value {text!r} (possible values: {possible})"
            ) from err

    convert.__name__ = enum_cls.__name__
    return convert


def _bounded_int(low: int, high: int) -> Callable[[str], int]:
    def convert(text: str) -> int:
        try:
            value = int(text)
        except ValueError as err:
            raise argparse.ArgumentTypeError(f"invalid integer: {text!r}") from err
        if not low <= value <= high:
            raise argparse.ArgumentTypeError(f"{value} is not in {low}..={high}")
        return value

    convert.__name__ = "integer"
    return convert


def _non_empty(text: str) -> str:
    if not text:
        raise argparse.ArgumentTypeError("value must not be empty")
    return text


def _add_id_or_name(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("-i", "--id")
    group.add_argument("-n", "--name")
    return parser


def _add_get(subparsers) -> None:
    get = subparsers.add_parser("get", help="Get Spotify data")
    subs = get.add_subparsers(dest="get_command", required=True)
    key = subs.add_parser("key", help="Get data by key")
    key.add_argument("key", type=_enum_type(Key))
    item = subs.add_parser("item", help="Get a Spotify item's data")
    item.add_argument("item_type", type=_enum_type(ItemType))
    _add_id_or_name(item)


def _add_playback_start(subparsers) -> None:
    start = subparsers.add_parser("start", help="Start a new playback")
    subs = start.add_subparsers(dest="start_command", required=True)

    context = subs.add_parser("context", help="Start a context playback")
    context.add_argument("context_type", type=_enum_type(ContextType))
    context.add_argument(
        "-s", "--shuffle", action="store_true",
        help="Shuffle tracks within the launched playback",
    )
    _add_id_or_name(context)

    _add_id_or_name(subs.add_parser("track", help="Start playback for a track"))

    liked = subs.add_parser("liked", help="Start a liked tracks playback")
    liked.add_argument(
        "-l", "--limit", type=_bounded_int(0, 2**64 - 1), default=DEFAULT_LIKED_LIMIT,
        help="The limit for number of tracks to play",
    )
    liked.add_argument(
        "-r", "--random", action="store_true",
        help="Randomly pick the tracks instead of picking tracks from the beginning",
    )

    radio = subs.add_parser("radio", help="Start a radio playback")
    radio.add_argument("item_type", nargs="?", type=_enum_type(ItemType))
    _add_id_or_name(radio)


def _add_playback(subparsers) -> None:
    playback = subparsers.add_parser("playback", help="Interact with the playback")
    subs = playback.add_subparsers(dest="playback_command", required=True)
    _add_playback_start(subs)
    subs.add_parser("play-pause", help="Toggle between play and pause")
    subs.add_parser("play", help="Resume the current playback if stopped")
    subs.add_parser("pause", help="Pause the current playback if playing")
    subs.add_parser("next", help="Skip to the next track")
    subs.add_parser("previous", help="Skip to the previous track")
    subs.add_parser("shuffle", help="Toggle the shuffle mode")
    subs.add_parser("repeat", help="Cycle the repeat mode")

    volume = subs.add_parser("volume", help="Set the volume percentage")
    volume.add_argument("percent", type=_bounded_int(-100, 100))
    volume.add_argument(
        "--offset", action="store_true", help="Increase the volume percent by an offset"
    )

    seek = subs.add_parser("seek", help="Seek by an offset milliseconds")
    seek.add_argument("position_offset_ms", type=_bounded_int(-(2**63), 2**63 - 1))


def _add_playlist(subparsers) -> None:
    playlist = subparsers.add_parser("playlist", help="Playlist editing")
    subs = playlist.add_subparsers(dest="playlist_command", required=True)

    new = subs.add_parser("new", help="Create a new playlist")
    new.add_argument("name", nargs="?", type=_non_empty)
    new.add_argument("description", nargs="?", type=_non_empty)
    new.add_argument("-p", "--public", action="store_true", help="Sets the playlist to public")
    new.add_argument(
        "-c", "--collab", action="store_true", help="Sets the playlist to collaborative"
    )

    delete = subs.add_parser("delete", help="Delete a playlist")
    delete.add_argument("id", nargs="?", type=_non_empty)

    imp = subs.add_parser(
        "import",
        help="Imports all songs from a playlist into another playlist.",
        epilog=(
            "Import data for each playlist is stored inside the application's cache "
            "folder. If imported again, the command only imports new tracks since "
            "last import."
        ),
    )
    imp.add_argument("from_id", metavar="from", nargs="?", type=_non_empty)
    imp.add_argument("to_id", metavar="to", nargs="?", type=_non_empty)
    imp.add_argument(
        "-d", "--delete", action="store_true",
        help=(
            "Deletes any previously imported tracks that are no longer in the "
            "imported playlist since last import."
        ),
    )

    subs.add_parser("list", help="Lists all user playlists.")

    fork = subs.add_parser("fork", help="Creates a copy of a playlist and imports it.")
    fork.add_argument("id", nargs="?", type=_non_empty)

    sync = subs.add_parser(
        "sync", help="Syncs imports for all playlists or a single playlist."
    )
    sync.add_argument("id", nargs="?", type=_non_empty)
    sync.add_argument(
        "-d", "--delete", action="store_true",
        help=(
            "Deletes any previously imported tracks that are no longer in an "
            "imported playlist since last import."
        ),
    )


def build_parser(default_config_folder: str, default_cache_folder: str) -> argparse.ArgumentParser:
    """Return the parser for the application's options and subcommands."""
    parser = argparse.ArgumentParser(
        prog=PROG_NAME, description="A command driven Spotify player"
    )
    parser.add_argument("-t", "--theme", metavar="THEME", help="Application theme")
    parser.add_argument(
        "-c", "--config-folder", metavar="FOLDER", default=str(default_config_folder),
        help="Path to the application's config folder",
    )
    parser.add_argument(
        "-C", "--cache-folder", metavar="FOLDER", default=str(default_cache_folder),
        help="Path to the application's cache folder",
    )

    subparsers = parser.add_subparsers(dest="command")
    _add_get(subparsers)
    _add_playback(subparsers)
    _add_id_or_name(subparsers.add_parser("connect", help="Connect to a Spotify device"))

    like = subparsers.add_parser("like", help="Like currently playing track")
    like.add_argument(
        "-u", "--unlike", action="store_true", help="Unlike the currently playing track"
    )

    subparsers.add_parser("authenticate", help="Authenticate the application")
    _add_playlist(subparsers)

    generate = subparsers.add_parser(
        "generate", help="Generate shell completion for the application CLI"
    )
    generate.add_argument("shell", choices=SHELLS)

    search = subparsers.add_parser("search", help="Search spotify")
    search.add_argument("query", help="Search query")
    return parser