import socket
import threading

import pytest

from spotcli.commands import DEFAULT_LIKED_LIMIT, build_parser
from spotcli.handlers import (
    CliError,
    connect_to_client,
    handle_cli_subcommand,
    main,
    request_from_args,
)
from spotcli.protocol import (
    ConnectRequest,
    GetItemRequest,
    GetKeyRequest,
    IdOrName,
    ItemType,
    Key,
    LikeRequest,
    PlaybackRequest,
    PlaylistImport,
    PlaylistList,
    PlaylistNew,
    PlaylistRequest,
    PlaylistSync,
    Response,
    SearchRequest,
    Seek,
    SimplePlayback,
    StartLikedTracks,
    Volume,
    request_to_bytes,
)
from spotcli.transport import send_response


def parse(*argv):
    return build_parser("cfg", "cache").parse_args(list(argv))


def test_get_key():
    assert request_from_args(parse("get", "key", "playback")) == GetKeyRequest(Key.PLAYBACK)


def test_get_item_by_name():
    req = request_from_args(parse("get", "item", "track", "--name", "shape of you"))
    assert req == GetItemRequest(ItemType.TRACK, IdOrName(name="shape of you"))


def test_connect_by_id():
    assert request_from_args(parse("connect", "-i", "dev1")) == ConnectRequest(IdOrName(id="dev1"))


def test_liked_default_limit():
    req = request_from_args(parse("playback", "start", "liked"))
    assert req == PlaybackRequest(StartLikedTracks(DEFAULT_LIKED_LIMIT, False))


@pytest.mark.parametrize(
    "name,expected",
    [
        ("play-pause", SimplePlayback.PLAY_PAUSE),
        ("next", SimplePlayback.NEXT),
        ("repeat", SimplePlayback.REPEAT),
    ],
)
def test_simple_playback(name, expected):
    assert request_from_args(parse("playback", name)) == PlaybackRequest(expected)


def test_volume_offset():
    req = request_from_args(parse("playback", "volume", "-10", "--offset"))
    assert req == PlaybackRequest(Volume(-10, True))


def test_seek():
    assert request_from_args(parse("playback", "seek", "5000")) == PlaybackRequest(Seek(5000))


def test_radio_requires_item_type():
    with pytest.raises(CliError):
        request_from_args(parse("playback", "start", "radio", "--id", "abc"))


def test_like_and_search():
    assert request_from_args(parse("like", "-u")) == LikeRequest(True)
    assert request_from_args(parse("search", "hello")) == SearchRequest("hello")


def test_playlist_new_and_list():
    req = request_from_args(parse("playlist", "new", "mix", "-p"))
    assert req == PlaylistRequest(PlaylistNew("mix", True, False, ""))
    assert request_from_args(parse("playlist", "list")) == PlaylistRequest(PlaylistList())


def test_playlist_new_requires_name():
    with pytest.raises(CliError):
        request_from_args(parse("playlist", "new"))


def test_playlist_delete_invalid_id():
    with pytest.raises(CliError):
        request_from_args(parse("playlist", "delete", "bad-id!"))


def test_playlist_import_prints(capsys):
    req = request_from_args(parse("playlist", "import", "abc", "def", "-d"))
    assert req == PlaylistRequest(PlaylistImport("abc", "def", True))
    assert "Importing 'abc' into 'def'..." in capsys.readouterr().out


def test_playlist_sync_all(capsys):
    req = request_from_args(parse("playlist", "sync"))
    assert req == PlaylistRequest(PlaylistSync(None, False))
    assert "Syncing imports for all playlists..." in capsys.readouterr().out


def test_authenticate_is_not_a_request():
    with pytest.raises(CliError):
        request_from_args(parse("authenticate"))
    with pytest.raises(CliError):
        handle_cli_subcommand(parse("authenticate"), 1)


def test_main_authenticate_fails():
    assert main(["authenticate"]) == 1


def _serve(server, response, received):
    data, addr = server.recvfrom(4096)
    received.append(data)
    server.sendto(b"", addr)
    data, addr = server.recvfrom(4096)
    received.append(data)
    send_response(server, addr, response)


@pytest.fixture
def server():
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(5)
    yield sock
    sock.close()


def test_handle_cli_subcommand_round_trip(server):
    response = Response(b"x" * 10000)
    received = []
    thread = threading.Thread(target=_serve, args=(server, response, received))
    thread.start()
    args = parse("search", "hello")
    result = handle_cli_subcommand(args, server.getsockname()[1])
    thread.join(5)
    assert result == response
    assert received[0] == b""
    assert received[1] == request_to_bytes(SearchRequest("hello"))


def test_connect_to_client_success(server):
    def answer():
        _, addr = server.recvfrom(16)
        server.sendto(b"", addr)

    thread = threading.Thread(target=answer)
    thread.start()
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.settimeout(5)
        connect_to_client(sock, server.getsockname()[1])
        assert sock.getpeername() == server.getsockname()
    thread.join(5)


def test_connect_to_client_refused():
    probe = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    probe.bind(("127.0.0.1", 0))
    port = probe.getsockname()[1]
    probe.close()
    with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
        sock.settimeout(2)
        with pytest.raises(CliError):
            connect_to_client(sock, port)