"""Turn parsed command-line arguments into requests and hand them to a client."""

from __future__ import annotations

import argparse
import socket
import sys
from collections.abc import Sequence
from pathlib import Path

from spotcli.commands import build_parser
from spotcli.protocol import (
    ConnectRequest,
    GetItemRequest,
    GetKeyRequest,
    IdOrName,
    LikeRequest,
    PlaybackRequest,
    PlaylistDelete,
    PlaylistFork,
    PlaylistImport,
    PlaylistList,
    PlaylistNew,
    PlaylistRequest,
    PlaylistSync,
    ProtocolError,
    Request,
    Response,
    SearchRequest,
    Seek,
    SimplePlayback,
    StartContext,
    StartLikedTracks,
    StartRadio,
    StartTrack,
    Volume,
    parse_playlist_id,
)
from spotcli.transport import TransportError, receive_response, send_request

DEFAULT_CLIENT_PORT = 8080
CLIENT_HOST = "127.0.0.1"

_SIMPLE_PLAYBACK = {
    "play-pause": SimplePlayback.PLAY_PAUSE,
    "play": SimplePlayback.PLAY,
    "pause": SimplePlayback.PAUSE,
    "next": SimplePlayback.NEXT,
    "previous": SimplePlayback.PREVIOUS,
    "shuffle": SimplePlayback.SHUFFLE,
    "repeat": SimplePlayback.REPEAT,
}


class CliError(Exception):
    """Raised when a command cannot be turned into a request or handled."""


def _id_or_name(args: argparse.Namespace) -> IdOrName:
    name = getattr(args, "name", None)
    item_id = getattr(args, "id", None)
    if name is not None:
        return IdOrName(name=name)
    if item_id is not None:
        return IdOrName(id=item_id)
    raise CliError("one of `--id` and `--name` is required")


def _get_request(args: argparse.Namespace) -> Request:
    if args.get_command == "key":
        return GetKeyRequest(args.key)
    if args.get_command == "item":
        return GetItemRequest(args.item_type, _id_or_name(args))
    raise CliError(f"invalid get command: {args.get_command!r}")


def _start_command(args: argparse.Namespace):
    sub = args.start_command
    if sub == "track":
        return StartTrack(_id_or_name(args))
    if sub == "context":
        return StartContext(args.context_type, _id_or_name(args), args.shuffle)
    if sub == "liked":
        return StartLikedTracks(args.limit, args.random)
    if sub == "radio":
        if args.item_type is None:
            raise CliError("item_type is required")
        return StartRadio(args.item_type, _id_or_name(args))
    raise CliError("invalid command!")


def _playback_request(args: argparse.Namespace) -> Request:
    cmd = args.playback_command
    if cmd == "start":
        command = _start_command(args)
    elif cmd in _SIMPLE_PLAYBACK:
        command = _SIMPLE_PLAYBACK[cmd]
    elif cmd == "volume":
        command = Volume(args.percent, args.offset)
    elif cmd == "seek":
        command = Seek(args.position_offset_ms)
    else:
        raise CliError(f"invalid playback command: {cmd!r}")
    return PlaybackRequest(command)


def _required(value: str | None, what: str) -> str:
    if value is None:
        raise CliError(f"{what} is required")
    return value


def _playlist_request(args: argparse.Namespace) -> Request:
    cmd = args.playlist_command
    if cmd == "new":
        command = PlaylistNew(
            _required(args.name, "name"),
            args.public,
            args.collab,
            args.description or "",
        )
    elif cmd == "delete":
        command = PlaylistDelete(parse_playlist_id(_required(args.id, "id")))
    elif cmd == "list":
        command = PlaylistList()
    elif cmd == "import":
        from_s = _required(args.from_id, "'from' PlaylistID")
        to_s = _required(args.to_id, "'to' PlaylistID")
        src, dst = parse_playlist_id(from_s), parse_playlist_id(to_s)
        print(f"Importing '{from_s}' into '{to_s}'...\n")
        command = PlaylistImport(src, dst, args.delete)
    elif cmd == "fork":
        id_s = _required(args.id, "Playlist id")
        pid = parse_playlist_id(id_s)
        print(f"Forking '{id_s}'...\n")
        command = PlaylistFork(pid)
    elif cmd == "sync":
        if args.id is not None:
            print(f"Syncing imports for playlist '{args.id}'...\n")
            pid = parse_playlist_id(args.id)
        else:
            print("Syncing imports for all playlists...\n")
            pid = None
        command = PlaylistSync(pid, args.delete)
    else:
        raise CliError(f"invalid playlist command: {cmd!r}")
    return PlaylistRequest(command)


def request_from_args(args: argparse.Namespace) -> Request:
    """Build the request that a parsed command sends to a client."""
    cmd = args.command
    try:
        if cmd == "get":
            return _get_request(args)
        if cmd == "playback":
            return _playback_request(args)
        if cmd == "playlist":
            return _playlist_request(args)
        if cmd == "connect":
            return ConnectRequest(_id_or_name(args))
        if cmd == "like":
            return LikeRequest(args.unlike)
        if cmd == "search":
            return SearchRequest(args.query)
    except ProtocolError as err:
        raise CliError(str(err)) from err
    raise CliError(f"`{cmd}` is not a client request")


def connect_to_client(sock: socket.socket, port: int) -> None:
    """Connect ``sock`` to the client listening on ``port`` and check it answers."""
    try:
        sock.connect((CLIENT_HOST, port))
        sock.send(b"")
        sock.recv(1)
    except ConnectionRefusedError as err:
        raise CliError(f"no running client found on port {port}") from err
    except OSError as err:
        raise CliError(f"try to connect to a client: {err}") from err


def handle_cli_subcommand(args: argparse.Namespace, port: int = DEFAULT_CLIENT_PORT) -> Response:
    """Send the request for ``args`` to the client on ``port`` and return its response."""
    if args.command in ("authenticate", "generate"):
        raise CliError(f"`{args.command}` needs the integrated application and cannot be sent to a client")

    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.bind((CLIENT_HOST, 0))
        connect_to_client(sock, port)
        request = request_from_args(args)
        send_request(sock, request)
        return receive_response(sock)


def _default_folders() -> tuple[Path, Path]:
    home = Path.home()
    return home / ".config" / "spotify-player", home / ".cache" / "spotify-player"


def main(argv: Sequence[str] | None = None) -> int:
    """Run a command-line subcommand; return the process exit code."""
    config_folder, cache_folder = _default_folders()
    parser = build_parser(str(config_folder), str(cache_folder))
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help(sys.stderr)
        return 1

    try:
        response = handle_cli_subcommand(args, DEFAULT_CLIENT_PORT)
    except (CliError, TransportError, ProtocolError) as err:
        print(err, file=sys.stderr)
        return 1

    text = response.data.decode("utf-8", errors="replace")
    if response.is_error:
        print(text, file=sys.stderr)
        return 1
    print(text.replace("\\n", "\n"))
    return 0