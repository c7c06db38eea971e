"""Import the tracks of one playlist into another, remembering past imports.

Every import of ``from`` into ``to`` stores the tracks ``from`` had at that
time in ``<cache>/imports/<to>/<from>``. A later import of the same pair only
adds tracks that are new since then. It can also remove tracks that have
left ``from`` since then.
"""

from __future__ import annotations

import json
import re
from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

TRACK_BUFFER_CAP = 100

_BASE62 = re.compile(r"[0-9A-Za-z]+")
_TRACK_PREFIXES = ("spotify:track:", "spotify/track/")


def _parse_track_id(value: Any) -> str:
    if not isinstance(value, str):
        raise ValueError(f"invalid track id: {value!r}")
    for prefix in _TRACK_PREFIXES:
        if value.startswith(prefix):
            value = value[len(prefix):]
            break
    if not _BASE62.fullmatch(value):
        raise ValueError(f"invalid track id: {value!r}")
    return value


@dataclass(frozen=True)
class TrackData:
    """A track's bare id and its name."""

    id: str
    name: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "id", _parse_track_id(self.id))
        if not isinstance(self.name, str):
            raise TypeError("`name` must be a string")

    @property
    def uri(self) -> str:
        return f"spotify:track:{self.id}"

    def to_json(self) -> dict[str, str]:
        return {"id": self.uri, "name": self.name}

    @classmethod
    def from_json(cls, value: Any) -> TrackData:
        if not isinstance(value, dict) or "id" not in value or "name" not in value:
            raise ValueError(f"invalid track data: {value!r}")
        if not isinstance(value["name"], str):
            raise ValueError(f"invalid track name: {value['name']!r}")
        return cls(value["id"], value["name"])


class PlaylistApi(Protocol):
    """The playlist operations an import needs."""

    def playlist_tracks(self, playlist_id: str) -> tuple[str, list[TrackData]]:
        """Return the playlist's name and its tracks."""

    def remove_tracks(self, playlist_id: str, track_ids: list[str]) -> None:
        """Remove every occurrence of the given tracks from the playlist."""

    def add_tracks(self, playlist_id: str, track_ids: list[str]) -> None:
        """Append the given tracks to the playlist."""


def _unique(tracks: Iterable[TrackData]) -> list[TrackData]:
    return list(dict.fromkeys(tracks))


def _batches(items: Sequence[str], size: int) -> Iterator[list[str]]:
    for start in range(0, len(items), size):
        yield list(items[start : start + size])


def _parse_cache(data: bytes) -> list[TrackData]:
    try:
        value = json.loads(data)
    except ValueError as err:
        raise ValueError(f"Deserialize playlist import data: {err}") from err
    if not isinstance(value, list):
        raise ValueError("Deserialize playlist import data: expected a list")
    try:
        return _unique(TrackData.from_json(item) for item in value)
    except (TypeError, ValueError) as err:
        raise ValueError(f"Deserialize playlist import data: {err}") from err


def load_import_cache(path: str | Path) -> list[TrackData]:
    """Return the tracks stored in an import cache file, without duplicates."""
    return _parse_cache(Path(path).read_bytes())


def save_import_cache(path: str | Path, tracks: Iterable[TrackData]) -> None:
    """Store ``tracks`` into an import cache file, replacing its contents."""
    data = json.dumps([t.to_json() for t in _unique(tracks)], ensure_ascii=False)
    Path(path).write_text(data, encoding="utf-8")


def import_playlist(
    api: PlaylistApi,
    import_from: str,
    import_to: str,
    delete: bool,
    cache_dir: str | Path,
) -> str:
    """Add the tracks of ``import_from`` missing from ``import_to``; return a report.

    Tracks imported by a previous import of the same pair are not added again.
    With ``delete``, tracks that left ``import_from`` since the previous import
    are removed from ``import_to``.
    """
    from_name, from_tracks = api.playlist_tracks(import_from)
    to_name, to_tracks = api.playlist_tracks(import_to)

    to_dir = Path(cache_dir) / "imports" / import_to
    from_file = to_dir / import_from
    to_dir.mkdir(parents=True, exist_ok=True)

    from_list = _unique(from_tracks)
    from_set = set(from_list)
    to_set = set(to_tracks)
    new_tracks = [t for t in from_list if t not in to_set]

    report = [f"Importing from {import_from}:{from_name} to {import_to}:{to_name}...\n"]

    if from_file.exists():
        data = from_file.read_bytes()
        from_file.unlink()
        old_tracks = _parse_cache(data)
        old_set = set(old_tracks)

        new_tracks = [t for t in new_tracks if t not in old_set]
        deleted = [t for t in old_tracks if t not in from_set]

        if delete:
            for batch in _batches([t.id for t in deleted], TRACK_BUFFER_CAP):
                api.remove_tracks(import_to, batch)
            report.append(f"Tracks deleted from {from_name}: \n\n")
        else:
            report.append(f"Tracks that are no longer in {from_name} since last import: \n")
        report.extend(f"    {t.id}: {t.name}\n" for t in deleted)

    report.append(f"New tracks imported to {to_name}: \n")
    for batch in _batches([t.id for t in new_tracks], TRACK_BUFFER_CAP):
        api.add_tracks(import_to, batch)
    report.extend(f"    {t.id}: {t.name}\n" for t in new_tracks)

    save_import_cache(from_file, from_list)
    return "".join(report)