"""Messages exchanged between the command line and a running client.

Requests and responses travel as JSON. Enum variants are externally tagged:
a variant without data is a bare string, any other is a one-key object.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

MAX_REQUEST_SIZE = 4096

_I8_RANGE = (-(2**7), 2**7 - 1)
_I64_RANGE = (-(2**63), 2**63 - 1)
_USIZE_RANGE = (0, 2**64 - 1)

_BASE62 = re.compile(r"[0-9A-Za-z]+")
_UNIT = object()


class ProtocolError(ValueError):
    """Raised when a message cannot be encoded, decoded or validated."""


def _camel_to_kebab(name: str) -> str:
    return re.sub(r"(?<!^)(?=[A-Z])", "-", name).lower()


class _WireEnum(Enum):
    @property
    def cli_name(self) -> str:
        """The value's name on the command line."""
        return _camel_to_kebab(self.value)

    @classmethod
    def from_cli_name(cls, name: str):
        for member in cls:
            if member.cli_name == name:
                return member
        raise ProtocolError(f"invalid {cls.__name__} value: {name!r}")

    @classmethod
    def from_wire(cls, value: Any):
        if isinstance(value, str):
            for member in cls:
                if member.value == value:
                    return member
        raise ProtocolError(f"invalid {cls.__name__} variant: {value!r}")


class Key(_WireEnum):
    """Data that can be retrieved by key."""

    PLAYBACK = "Playback"
    DEVICES = "Devices"
    USER_PLAYLISTS = "UserPlaylists"
    USER_LIKED_TRACKS = "UserLikedTracks"
    USER_SAVED_ALBUMS = "UserSavedAlbums"
    USER_FOLLOWED_ARTISTS = "UserFollowedArtists"
    USER_TOP_TRACKS = "UserTopTracks"
    QUEUE = "Queue"


class ContextType(_WireEnum):
    """Kinds of playable context."""

    PLAYLIST = "Playlist"
    ALBUM = "Album"
    ARTIST = "Artist"


class ItemType(_WireEnum):
    """Kinds of item that can be looked up."""

    PLAYLIST = "Playlist"
    ALBUM = "Album"
    ARTIST = "Artist"
    TRACK = "Track"


class SimplePlayback(_WireEnum):
    """Playback commands that carry no data."""

    PLAY_PAUSE = "PlayPause"
    PLAY = "Play"
    PAUSE = "Pause"
    NEXT = "Next"
    PREVIOUS = "Previous"
    SHUFFLE = "Shuffle"
    REPEAT = "Repeat"


def item_type_from_context(context_type: ContextType) -> ItemType:
    """Return the item type matching a context type."""
    return ItemType(context_type.value)


def parse_playlist_id(value: str) -> str:
    """Validate a bare playlist id (base62) and return it."""
    if not isinstance(value, str) or not _BASE62.fullmatch(value):
        raise ProtocolError(f"invalid playlist id: {value!r}")
    return value


def _playlist_uri(playlist_id: str) -> str:
    return f"spotify:playlist:{playlist_id}"


def _playlist_from_wire(value: Any) -> str:
    if not isinstance(value, str):
        raise ProtocolError(f"invalid playlist id: {value!r}")
    for sep in (":", "/"):
        prefix = f"spotify{sep}playlist{sep}"
        if value.startswith(prefix):
            return parse_playlist_id(value[len(prefix):])
    return parse_playlist_id(value)


def _check_bool(name: str, value: Any) -> None:
    if not isinstance(value, bool):
        raise TypeError(f"`{name}` must be a bool")


def _check_str(name: str, value: Any) -> None:
    if not isinstance(value, str):
        raise TypeError(f"`{name}` must be a string")


def _check_int(name: str, value: Any, bounds: tuple[int, int]) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"`{name}` must be an integer")
    low, high = bounds
    if not low <= value <= high:
        raise ValueError(f"`{name}` must be within {low}..={high}, got {value}")


def _check_enum(name: str, value: Any, enum_cls: type[Enum]) -> None:
    if not isinstance(value, enum_cls):
        raise TypeError(f"`{name}` must be a {enum_cls.__name__}")


@dataclass(frozen=True)
class IdOrName:
    """An item given either by its id or by its name; exactly one is set."""

    id: str | None = None
    name: str | None = None

    def __post_init__(self) -> None:
        if (self.id is None) == (self.name is None):
            raise ValueError("exactly one of `id` and `name` must be given")
        _check_str("id" if self.id is not None else "name", self.id or self.name or "")
        if self.id is not None:
            _check_str("id", self.id)
        else:
            _check_str("name", self.name)


def _check_id_or_name(value: Any) -> None:
    if not isinstance(value, IdOrName):
        raise TypeError("`id_or_name` must be an IdOrName")


@dataclass(frozen=True)
class GetKeyRequest:
    key: Key

    def __post_init__(self) -> None:
        _check_enum("key", self.key, Key)


@dataclass(frozen=True)
class GetItemRequest:
    item_type: ItemType
    id_or_name: IdOrName

    def __post_init__(self) -> None:
        _check_enum("item_type", self.item_type, ItemType)
        _check_id_or_name(self.id_or_name)


@dataclass(frozen=True)
class StartContext:
    context_type: ContextType
    id_or_name: IdOrName
    shuffle: bool = False

    def __post_init__(self) -> None:
        _check_enum("context_type", self.context_type, ContextType)
        _check_id_or_name(self.id_or_name)
        _check_bool("shuffle", self.shuffle)


@dataclass(frozen=True)
class StartTrack:
    id_or_name: IdOrName

    def __post_init__(self) -> None:
        _check_id_or_name(self.id_or_name)


@dataclass(frozen=True)
class StartLikedTracks:
    limit: int
    random: bool = False

    def __post_init__(self) -> None:
        _check_int("limit", self.limit, _USIZE_RANGE)
        _check_bool("random", self.random)


@dataclass(frozen=True)
class StartRadio:
    item_type: ItemType
    id_or_name: IdOrName

    def __post_init__(self) -> None:
        _check_enum("item_type", self.item_type, ItemType)
        _check_id_or_name(self.id_or_name)


@dataclass(frozen=True)
class Volume:
    """Set the volume to ``percent``, or change it by ``percent`` if ``is_offset``."""

    percent: int
    is_offset: bool = False

    def __post_init__(self) -> None:
        _check_int("percent", self.percent, _I8_RANGE)
        _check_bool("is_offset", self.is_offset)


@dataclass(frozen=True)
class Seek:
    """Seek by a signed offset in milliseconds."""

    position_offset_ms: int

    def __post_init__(self) -> None:
        _check_int("position_offset_ms", self.position_offset_ms, _I64_RANGE)


PlaybackCommand = Union[
    StartContext, StartTrack, StartLikedTracks, StartRadio, SimplePlayback, Volume, Seek
]


@dataclass(frozen=True)
class PlaybackRequest:
    command: PlaybackCommand

    def __post_init__(self) -> None:
        if not isinstance(
            self.command,
            (StartContext, StartTrack, StartLikedTracks, StartRadio, SimplePlayback, Volume, Seek),
        ):
            raise TypeError("`command` must be a playback command")


@dataclass(frozen=True)
class ConnectRequest:
    id_or_name: IdOrName

    def __post_init__(self) -> None:
        _check_id_or_name(self.id_or_name)


@dataclass(frozen=True)
class LikeRequest:
    unlike: bool = False

    def __post_init__(self) -> None:
        _check_bool("unlike", self.unlike)


@dataclass(frozen=True)
class SearchRequest:
    query: str

    def __post_init__(self) -> None:
        _check_str("query", self.query)


@dataclass(frozen=True)
class PlaylistNew:
    name: str
    public: bool = False
    collab: bool = False
    description: str = ""

    def __post_init__(self) -> None:
        _check_str("name", self.name)
        _check_bool("public", self.public)
        _check_bool("collab", self.collab)
        _check_str("description", self.description)


@dataclass(frozen=True)
class PlaylistDelete:
    id: str

    def __post_init__(self) -> None:
        parse_playlist_id(self.id)


@dataclass(frozen=True)
class PlaylistList:
    pass


@dataclass(frozen=True)
class PlaylistImport:
    import_from: str
    import_to: str
    delete: bool = False

    def __post_init__(self) -> None:
        parse_playlist_id(self.import_from)
        parse_playlist_id(self.import_to)
        _check_bool("delete", self.delete)


@dataclass(frozen=True)
class PlaylistFork:
    id: str

    def __post_init__(self) -> None:
        parse_playlist_id(self.id)


@dataclass(frozen=True)
class PlaylistSync:
    id: str | None = None
    delete: bool = False

    def __post_init__(self) -> None:
        if self.id is not None:
            parse_playlist_id(self.id)
        _check_bool("delete", self.delete)


PlaylistCommand = Union[
    PlaylistNew, PlaylistDelete, PlaylistList, PlaylistImport, PlaylistFork, PlaylistSync
]


@dataclass(frozen=True)
class PlaylistRequest:
    command: PlaylistCommand

    def __post_init__(self) -> None:
        if not isinstance(
            self.command,
            (PlaylistNew, PlaylistDelete, PlaylistList, PlaylistImport, PlaylistFork, PlaylistSync),
        ):
            raise TypeError("`command` must be a playlist command")


Request = Union[
    GetKeyRequest,
    GetItemRequest,
    PlaybackRequest,
    ConnectRequest,
    LikeRequest,
    SearchRequest,
    PlaylistRequest,
]


def _dumps(value: Any) -> bytes:
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def _loads(data: bytes) -> Any:
    try:
        return json.loads(data)
    except ValueError as err:
        raise ProtocolError(f"invalid JSON message: {err}") from err


# ---- encoding ----


def _id_or_name_to_json(value: IdOrName) -> dict[str, str]:
    if value.id is not None:
        return {"Id": value.id}
    return {"Name": value.name}


def _playback_to_json(command: PlaybackCommand) -> Any:
    match command:
        case StartContext(context_type=ct, id_or_name=ion, shuffle=shuffle):
            return {
                "StartContext": {
                    "context_type": ct.value,
                    "id_or_name": _id_or_name_to_json(ion),
                    "shuffle": shuffle,
                }
            }
        case StartTrack(id_or_name=ion):
            return {"StartTrack": _id_or_name_to_json(ion)}
        case StartLikedTracks(limit=limit, random=random):
            return {"StartLikedTracks": {"limit": limit, "random": random}}
        case StartRadio(item_type=it, id_or_name=ion):
            return {"StartRadio": [it.value, _id_or_name_to_json(ion)]}
        case SimplePlayback():
            return command.value
        case Volume(percent=percent, is_offset=is_offset):
            return {"Volume": {"percent": percent, "is_offset": is_offset}}
        case Seek(position_offset_ms=offset):
            return {"Seek": offset}
    raise ProtocolError(f"not a playback command: {command!r}")


def _playlist_to_json(command: PlaylistCommand) -> Any:
    match command:
        case PlaylistNew(name=name, public=public, collab=collab, description=description):
            return {
                "New": {
                    "name": name,
                    "public": public,
                    "collab": collab,
                    "description": description,
                }
            }
        case PlaylistDelete(id=pid):
            return {"Delete": {"id": _playlist_uri(pid)}}
        case PlaylistList():
            return "List"
        case PlaylistImport(import_from=src, import_to=dst, delete=delete):
            return {
                "Import": {
                    "from": _playlist_uri(src),
                    "to": _playlist_uri(dst),
                    "delete": delete,
                }
            }
        case PlaylistFork(id=pid):
            return {"Fork": {"id": _playlist_uri(pid)}}
        case PlaylistSync(id=pid, delete=delete):
            return {
                "Sync": {
                    "id": None if pid is None else _playlist_uri(pid),
                    "delete": delete,
                }
            }
    raise ProtocolError(f"not a playlist command: {command!r}")


def request_to_json(request: Request) -> Any:
    """Return the JSON value representing ``request``."""
    match request:
        case GetKeyRequest(key=key):
            return {"Get": {"Key": key.value}}
        case GetItemRequest(item_type=it, id_or_name=ion):
            return {"Get": {"Item": [it.value, _id_or_name_to_json(ion)]}}
        case PlaybackRequest(command=command):
            return {"Playback": _playback_to_json(command)}
        case ConnectRequest(id_or_name=ion):
            return {"Connect": _id_or_name_to_json(ion)}
        case LikeRequest(unlike=unlike):
            return {"Like": {"unlike": unlike}}
        case PlaylistRequest(command=command):
            return {"Playlist": _playlist_to_json(command)}
        case SearchRequest(query=query):
            return {"Search": {"query": query}}
    raise ProtocolError(f"not a request: {request!r}")


def request_to_bytes(request: Request) -> bytes:
    """Serialize ``request`` into compact UTF-8 JSON."""
    return _dumps(request_to_json(request))


# ---- decoding ----


def _variant(value: Any, what: str) -> tuple[str, Any]:
    if isinstance(value, str):
        return value, _UNIT
    if isinstance(value, dict) and len(value) == 1:
        ((tag, payload),) = value.items()
        return tag, payload
    raise ProtocolError(f"invalid {what}: {value!r}")


def _payload(payload: Any, tag: str) -> Any:
    if payload is _UNIT:
        raise ProtocolError(f"variant `{tag}` requires data")
    return payload


def _unit(payload: Any, tag: str) -> None:
    if payload is not _UNIT:
        raise ProtocolError(f"variant `{tag}` takes no data")


def _struct(payload: Any, tag: str, names: tuple[str, ...], optional: tuple[str, ...] = ()) -> list:
    payload = _payload(payload, tag)
    if not isinstance(payload, dict):
        raise ProtocolError(f"variant `{tag}` expects an object")
    missing = [n for n in names if n not in payload and n not in optional]
    if missing:
        raise ProtocolError(f"variant `{tag}` is missing fields: {missing}")
    return [payload.get(n) for n in names]


def _tuple(payload: Any, tag: str, size: int) -> list:
    payload = _payload(payload, tag)
    if not isinstance(payload, list) or len(payload) != size:
        raise ProtocolError(f"variant `{tag}` expects a list of {size} values")
    return payload


def _id_or_name_from_json(value: Any) -> IdOrName:
    tag, payload = _variant(value, "id or name")
    payload = _payload(payload, tag)
    if not isinstance(payload, str):
        raise ProtocolError(f"variant `{tag}` expects a string")
    if tag == "Id":
        return IdOrName(id=payload)
    if tag == "Name":
        return IdOrName(name=payload)
    raise ProtocolError(f"unknown id-or-name variant: {tag!r}")


def _playback_from_json(value: Any) -> PlaybackCommand:
    tag, payload = _variant(value, "playback command")
    if tag == "StartContext":
        ct, ion, shuffle = _struct(payload, tag, ("context_type", "id_or_name", "shuffle"))
        return StartContext(ContextType.from_wire(ct), _id_or_name_from_json(ion), shuffle)
    if tag == "StartTrack":
        return StartTrack(_id_or_name_from_json(_payload(payload, tag)))
    if tag == "StartLikedTracks":
        limit, random = _struct(payload, tag, ("limit", "random"))
        return StartLikedTracks(limit, random)
    if tag == "StartRadio":
        it, ion = _tuple(payload, tag, 2)
        return StartRadio(ItemType.from_wire(it), _id_or_name_from_json(ion))
    if tag == "Volume":
        percent, is_offset = _struct(payload, tag, ("percent", "is_offset"))
        return Volume(percent, is_offset)
    if tag == "Seek":
        return Seek(_payload(payload, tag))
    simple = SimplePlayback.from_wire(tag)
    _unit(payload, tag)
    return simple


def _playlist_from_json(value: Any) -> PlaylistCommand:
    tag, payload = _variant(value, "playlist command")
    if tag == "New":
        name, public, collab, description = _struct(
            payload, tag, ("name", "public", "collab", "description")
        )
        return PlaylistNew(name, public, collab, description)
    if tag == "Delete":
        (pid,) = _struct(payload, tag, ("id",))
        return PlaylistDelete(_playlist_from_wire(pid))
    if tag == "List":
        _unit(payload, tag)
        return PlaylistList()
    if tag == "Import":
        src, dst, delete = _struct(payload, tag, ("from", "to", "delete"))
        return PlaylistImport(_playlist_from_wire(src), _playlist_from_wire(dst), delete)
    if tag == "Fork":
        (pid,) = _struct(payload, tag, ("id",))
        return PlaylistFork(_playlist_from_wire(pid))
    if tag == "Sync":
        pid, delete = _struct(payload, tag, ("id", "delete"), optional=("id",))
        return PlaylistSync(None if pid is None else _playlist_from_wire(pid), delete)
    raise ProtocolError(f"unknown playlist command: {tag!r}")


def _decode_request(value: Any) -> Request:
    tag, payload = _variant(value, "request")
    if tag == "Get":
        inner_tag, inner = _variant(_payload(payload, tag), "get request")
        if inner_tag == "Key":
            return GetKeyRequest(Key.from_wire(_payload(inner, inner_tag)))
        if inner_tag == "Item":
            it, ion = _tuple(inner, inner_tag, 2)
            return GetItemRequest(ItemType.from_wire(it), _id_or_name_from_json(ion))
        raise ProtocolError(f"unknown get request: {inner_tag!r}")
    if tag == "Playback":
        return PlaybackRequest(_playback_from_json(_payload(payload, tag)))
    if tag == "Connect":
        return ConnectRequest(_id_or_name_from_json(_payload(payload, tag)))
    if tag == "Like":
        (unlike,) = _struct(payload, tag, ("unlike",))
        return LikeRequest(unlike)
    if tag == "Playlist":
        return PlaylistRequest(_playlist_from_json(_payload(payload, tag)))
    if tag == "Search":
        (query,) = _struct(payload, tag, ("query",))
        return SearchRequest(query)
    raise ProtocolError(f"unknown request: {tag!r}")


def request_from_json(value: Any) -> Request:
    """Build a request from its JSON value."""
    try:
        return _decode_request(value)
    except ProtocolError:
        raise
    except (TypeError, ValueError) as err:
        raise ProtocolError(str(err)) from err


def request_from_bytes(data: bytes) -> Request:
    """Deserialize a request from JSON bytes."""
    return request_from_json(_loads(data))


@dataclass(frozen=True)
class Response:
    """The outcome of a request: result data, or an error message."""

    data: bytes
    is_error: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.data, (bytes, bytearray)):
            raise TypeError("`data` must be bytes")
        object.__setattr__(self, "data", bytes(self.data))
        _check_bool("is_error", self.is_error)

    def to_bytes(self) -> bytes:
        """Serialize the response into compact JSON."""
        return _dumps({"Err" if self.is_error else "Ok": list(self.data)})

    @classmethod
    def from_bytes(cls, data: bytes) -> Response:
        """Deserialize a response from JSON bytes."""
        tag, payload = _variant(_loads(data), "response")
        if tag not in ("Ok", "Err"):
            raise ProtocolError(f"unknown response: {tag!r}")
        payload = _payload(payload, tag)
        if not isinstance(payload, list) or not all(
            isinstance(b, int) and not isinstance(b, bool) and 0 <= b <= 255 for b in payload
        ):
            raise ProtocolError("response data must be a list of bytes")
        return cls(bytes(payload), is_error=tag == "Err")