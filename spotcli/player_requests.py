"""Requests that the client handles: player changes and data retrievals."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from types import MappingProxyType
from typing import Any

_Check = Callable[[str, Any], None]


@dataclass(frozen=True)
class _Field:
    check: _Check
    optional: bool = False


def _present(name: str, value: Any) -> None:
    if value is None:
        raise TypeError(f"`{name}` must not be None")


def _string(name: str, value: Any) -> None:
    if not isinstance(value, str):
        raise TypeError(f"`{name}` must be a string")


def _boolean(name: str, value: Any) -> None:
    if not isinstance(value, bool):
        raise TypeError(f"`{name}` must be a bool")


def _int(name: str, value: Any) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"`{name}` must be an integer")


def _index(name: str, value: Any) -> None:
    _int(name, value)
    if value < 0:
        raise ValueError(f"`{name}` must not be negative")


def _u8(name: str, value: Any) -> None:
    _int(name, value)
    if not 0 <= value <= 255:
        raise ValueError(f"`{name}` must be within 0..=255")


def _duration(name: str, value: Any) -> None:
    if not isinstance(value, timedelta):
        raise TypeError(f"`{name}` must be a timedelta")


def _player_request(name: str, value: Any) -> None:
    if not isinstance(value, PlayerRequest):
        raise TypeError(f"`{name}` must be a PlayerRequest")


def _validate(kind: Enum, spec: Mapping[str, _Field], params: Mapping[str, Any]) -> dict[str, Any]:
    unknown = set(params) - set(spec)
    if unknown:
        raise TypeError(f"{kind.value} got unexpected fields: {sorted(unknown)}")
    values: dict[str, Any] = {}
    for name, fld in spec.items():
        if name not in params:
            if not fld.optional:
                raise TypeError(f"{kind.value} requires field `{name}`")
            values[name] = None
            continue
        value = params[name]
        if not (fld.optional and value is None):
            fld.check(name, value)
        values[name] = value
    return values


class PlayerRequestKind(Enum):
    """Kinds of request that modify the player's playback."""

    NEXT_TRACK = "NextTrack"
    PREVIOUS_TRACK = "PreviousTrack"
    RESUME = "Resume"
    PAUSE = "Pause"
    RESUME_PAUSE = "ResumePause"
    SEEK_TRACK = "SeekTrack"
    REPEAT = "Repeat"
    SHUFFLE = "Shuffle"
    VOLUME = "Volume"
    TOGGLE_MUTE = "ToggleMute"
    TRANSFER_PLAYBACK = "TransferPlayback"
    START_PLAYBACK = "StartPlayback"


_PLAYER_FIELDS: dict[PlayerRequestKind, dict[str, _Field]] = {
    PlayerRequestKind.SEEK_TRACK: {"position": _Field(_duration)},
    PlayerRequestKind.VOLUME: {"volume": _Field(_u8)},
    PlayerRequestKind.TRANSFER_PLAYBACK: {
        "device_id": _Field(_string),
        "force_play": _Field(_boolean),
    },
    PlayerRequestKind.START_PLAYBACK: {
        "playback": _Field(_present),
        "shuffle": _Field(_boolean, optional=True),
    },
}


@dataclass(frozen=True)
class PlayerRequest:
    """A request that modifies the player's playback.

    ``params`` holds the fields the request kind carries; optional fields
    left out are set to None.
    """

    kind: PlayerRequestKind
    params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.kind, PlayerRequestKind):
            raise TypeError("kind must be a PlayerRequestKind")
        values = _validate(self.kind, _PLAYER_FIELDS.get(self.kind, {}), self.params)
        object.__setattr__(self, "params", MappingProxyType(values))

    def __getitem__(self, name: str) -> Any:
        return self.params[name]


class ClientRequestKind(Enum):
    """Kinds of request that the client handles."""

    GET_CURRENT_USER = "GetCurrentUser"
    GET_DEVICES = "GetDevices"
    GET_BROWSE_CATEGORIES = "GetBrowseCategories"
    GET_BROWSE_CATEGORY_PLAYLISTS = "GetBrowseCategoryPlaylists"
    GET_USER_PLAYLISTS = "GetUserPlaylists"
    GET_USER_SAVED_ALBUMS = "GetUserSavedAlbums"
    GET_USER_SAVED_SHOWS = "GetUserSavedShows"
    GET_USER_FOLLOWED_ARTISTS = "GetUserFollowedArtists"
    GET_USER_SAVED_TRACKS = "GetUserSavedTracks"
    GET_USER_TOP_TRACKS = "GetUserTopTracks"
    GET_USER_RECENTLY_PLAYED_TRACKS = "GetUserRecentlyPlayedTracks"
    GET_CONTEXT = "GetContext"
    GET_CURRENT_PLAYBACK = "GetCurrentPlayback"
    GET_RADIO_TRACKS = "GetRadioTracks"
    SEARCH = "Search"
    ADD_PLAYABLE_TO_QUEUE = "AddPlayableToQueue"
    ADD_ALBUM_TO_QUEUE = "AddAlbumToQueue"
    ADD_PLAYABLE_TO_PLAYLIST = "AddPlayableToPlaylist"
    DELETE_TRACK_FROM_PLAYLIST = "DeleteTrackFromPlaylist"
    REORDER_PLAYLIST_ITEMS = "ReorderPlaylistItems"
    ADD_TO_LIBRARY = "AddToLibrary"
    DELETE_FROM_LIBRARY = "DeleteFromLibrary"
    PLAYER = "Player"
    GET_CURRENT_USER_QUEUE = "GetCurrentUserQueue"
    GET_LYRICS = "GetLyrics"
    RESTART_INTEGRATED_CLIENT = "RestartIntegratedClient"
    CREATE_PLAYLIST = "CreatePlaylist"


_CLIENT_FIELDS: dict[ClientRequestKind, dict[str, _Field]] = {
    ClientRequestKind.GET_BROWSE_CATEGORY_PLAYLISTS: {"category": _Field(_present)},
    ClientRequestKind.GET_CONTEXT: {"context_id": _Field(_present)},
    ClientRequestKind.GET_RADIO_TRACKS: {
        "seed_uri": _Field(_string),
        "seed_name": _Field(_string),
    },
    ClientRequestKind.SEARCH: {"query": _Field(_string)},
    ClientRequestKind.ADD_PLAYABLE_TO_QUEUE: {"playable_id": _Field(_present)},
    ClientRequestKind.ADD_ALBUM_TO_QUEUE: {"album_id": _Field(_present)},
    ClientRequestKind.ADD_PLAYABLE_TO_PLAYLIST: {
        "playlist_id": _Field(_present),
        "playable_id": _Field(_present),
    },
    ClientRequestKind.DELETE_TRACK_FROM_PLAYLIST: {
        "playlist_id": _Field(_present),
        "track_id": _Field(_present),
    },
    ClientRequestKind.REORDER_PLAYLIST_ITEMS: {
        "playlist_id": _Field(_present),
        "insert_index": _Field(_index),
        "range_start": _Field(_index),
        "range_length": _Field(_index, optional=True),
        "snapshot_id": _Field(_string, optional=True),
    },
    ClientRequestKind.ADD_TO_LIBRARY: {"item": _Field(_present)},
    ClientRequestKind.DELETE_FROM_LIBRARY: {"item_id": _Field(_present)},
    ClientRequestKind.PLAYER: {"request": _Field(_player_request)},
    ClientRequestKind.GET_LYRICS: {"track_id": _Field(_present)},
    ClientRequestKind.CREATE_PLAYLIST: {
        "playlist_name": _Field(_string),
        "public": _Field(_boolean),
        "collab": _Field(_boolean),
        "desc": _Field(_string),
    },
}


@dataclass(frozen=True)
class ClientRequest:
    """A request to the client.

    ``params`` holds the fields the request kind carries; optional fields
    left out are set to None.
    """

    kind: ClientRequestKind
    params: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not isinstance(self.kind, ClientRequestKind):
            raise TypeError("kind must be a ClientRequestKind")
        values = _validate(self.kind, _CLIENT_FIELDS.get(self.kind, {}), self.params)
        object.__setattr__(self, "params", MappingProxyType(values))

    def __getitem__(self, name: str) -> Any:
        return self.params[name]