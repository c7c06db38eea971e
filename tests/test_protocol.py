import json

import pytest

from spotcli.protocol import (
    ConnectRequest,
    ContextType,
    GetItemRequest,
    GetKeyRequest,
    IdOrName,
    ItemType,
    Key,
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
    Response,
    SearchRequest,
    Seek,
    SimplePlayback,
    StartContext,
    StartLikedTracks,
    StartRadio,
    StartTrack,
    Volume,
    item_type_from_context,
    parse_playlist_id,
    request_from_bytes,
    request_from_json,
    request_to_bytes,
    request_to_json,
)

REQUESTS = [
    GetKeyRequest(Key.PLAYBACK),
    GetKeyRequest(Key.USER_FOLLOWED_ARTISTS),
    GetItemRequest(ItemType.TRACK, IdOrName(id="abc")),
    GetItemRequest(ItemType.PLAYLIST, IdOrName(name="chill vibes")),
    PlaybackRequest(StartContext(ContextType.ALBUM, IdOrName(name="x"), True)),
    PlaybackRequest(StartTrack(IdOrName(id="t1"))),
    PlaybackRequest(StartLikedTracks(200, False)),
    PlaybackRequest(StartRadio(ItemType.ARTIST, IdOrName(name="band"))),
    PlaybackRequest(SimplePlayback.PLAY_PAUSE),
    PlaybackRequest(SimplePlayback.REPEAT),
    PlaybackRequest(Volume(-10, True)),
    PlaybackRequest(Seek(-5000)),
    ConnectRequest(IdOrName(name="Kitchen")),
    LikeRequest(True),
    SearchRequest("héllo wörld"),
    PlaylistRequest(PlaylistNew("mix", True, False, "desc")),
    PlaylistRequest(PlaylistDelete("abc123")),
    PlaylistRequest(PlaylistList()),
    PlaylistRequest(PlaylistImport("a1", "b2", True)),
    PlaylistRequest(PlaylistFork("f00")),
    PlaylistRequest(PlaylistSync(None, False)),
    PlaylistRequest(PlaylistSync("s1", True)),
]


@pytest.mark.parametrize("request_", REQUESTS)
def test_bytes_round_trip(request_):
    assert request_from_bytes(request_to_bytes(request_)) == request_


@pytest.mark.parametrize("request_", REQUESTS)
def test_json_round_trip(request_):
    assert request_from_json(request_to_json(request_)) == request_


def test_unit_playback_wire_bytes():
    assert request_to_bytes(PlaybackRequest(SimplePlayback.PLAY_PAUSE)) == b'{"Playback":"PlayPause"}'


def test_tuple_variant_encoding():
    value = request_to_json(GetItemRequest(ItemType.PLAYLIST, IdOrName(name="chill")))
    assert value == {"Get": {"Item": ["Playlist", {"Name": "chill"}]}}


def test_playlist_ids_encode_as_uris():
    value = request_to_json(PlaylistRequest(PlaylistImport("a1", "b2", True)))
    assert value == {
        "Playlist": {
            "Import": {"from": "spotify:playlist:a1", "to": "spotify:playlist:b2", "delete": True}
        }
    }


def test_sync_without_id_encodes_null():
    value = request_to_json(PlaylistRequest(PlaylistSync()))
    assert value["Playlist"]["Sync"]["id"] is None


def test_playlist_id_accepts_bare_id_and_uri():
    bare = request_from_json({"Playlist": {"Delete": {"id": "xyz"}}})
    uri = request_from_json({"Playlist": {"Delete": {"id": "spotify:playlist:xyz"}}})
    assert bare == uri == PlaylistRequest(PlaylistDelete("xyz"))


def test_sync_id_may_be_missing():
    value = request_from_json({"Playlist": {"Sync": {"delete": True}}})
    assert value == PlaylistRequest(PlaylistSync(None, True))


def test_non_ascii_is_utf8():
    data = request_to_bytes(SearchRequest("héllo"))
    assert "héllo".encode("utf-8") in data


@pytest.mark.parametrize(
    "data",
    [
        b"not json",
        b'{"Unknown":1}',
        b'{"Playback":"Dance"}',
        b'{"Playback":{"PlayPause":1}}',
        b'{"Like":{"unlike":"yes"}}',
        b'{"Like":{}}',
        b'{"Get":{"Key":"Nothing"}}',
        b'{"Playback":{"Volume":{"percent":500,"is_offset":false}}}',
        b'{"Playback":{"StartRadio":["Track"]}}',
        b'{"Connect":{"Both":"x"}}',
        b'{"Playlist":{"Delete":{"id":"bad id!"}}}',
        b"[1,2]",
    ],
)
def test_invalid_requests_raise(data):
    with pytest.raises(ProtocolError):
        request_from_bytes(data)


def test_id_or_name_requires_exactly_one():
    with pytest.raises(ValueError):
        IdOrName()
    with pytest.raises(ValueError):
        IdOrName(id="a", name="b")


def test_volume_range_checked():
    with pytest.raises(ValueError):
        Volume(200, False)
    with pytest.raises(TypeError):
        Volume(True, False)


def test_liked_limit_must_not_be_negative():
    with pytest.raises(ValueError):
        StartLikedTracks(-1)


def test_parse_playlist_id():
    assert parse_playlist_id("AbC123") == "AbC123"
    with pytest.raises(ProtocolError):
        parse_playlist_id("bad id!")
    with pytest.raises(ProtocolError):
        parse_playlist_id("")


@pytest.mark.parametrize("context_type", list(ContextType))
def test_item_type_from_context(context_type):
    assert item_type_from_context(context_type).value == context_type.value


@pytest.mark.parametrize("enum_cls", [Key, ContextType, ItemType])
def test_cli_names_round_trip(enum_cls):
    for member in enum_cls:
        assert enum_cls.from_cli_name(member.cli_name) is member
        assert member.cli_name == member.cli_name.lower()


def test_cli_name_is_kebab_case():
    assert Key.USER_LIKED_TRACKS.cli_name == "user-liked-tracks"
    with pytest.raises(ProtocolError):
        Key.from_cli_name("UserLikedTracks")


@pytest.mark.parametrize("is_error", [False, True])
def test_response_round_trip(is_error):
    response = Response("ünïcode".encode(), is_error)
    assert Response.from_bytes(response.to_bytes()) == response


def test_response_wire_format():
    data = Response(b"hi").to_bytes()
    assert json.loads(data) == {"Ok": list(b"hi")}
    err = Response(b"hi", is_error=True).to_bytes()
    assert json.loads(err) == {"Err": list(b"hi")}


@pytest.mark.parametrize(
    "data", [b'{"Ok":[300]}', b'{"Ok":"text"}', b'{"Maybe":[]}', b"garbage", b'"Ok"']
)
def test_invalid_response_raises(data):
    with pytest.raises(ProtocolError):
        Response.from_bytes(data)