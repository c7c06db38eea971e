# spotcli

`spotcli` is a small command-line remote for a Spotify player instance
that is already running, plus a stand-alone lyric finder.

The remote builds a request from the command line, sends it as JSON in a
UDP datagram to the player instance on `127.0.0.1`, port 8080, and prints
the answer it gets back. The lyric finder searches the Genius website for
a song and prints its lyric.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Finding lyrics

```
spotcli-lyrics "shape of you"
```

The query is cleaned up first: it is lower-cased, and remaster and remix
notes such as `2011 Remastered` or `- Some Artist Remix` are dropped, since
they tend to lead the search to the wrong song. The first result whose
artists do not include "Genius" is fetched and printed as

```
<track> by <artists>'s lyric:
<lyric>
```

or `lyric not found!` when nothing matched. Without a query the command
asks for one and exits with status 1; a failed search prints `Error: ...`
to standard error and exits with status 1.

The same is available from Python:

```python
import requests
from spotcli.lyrics import LyricClient

client = LyricClient(requests.Session())   # or LyricClient() for a new session
result = client.get_lyric("shape of you")
if result is None:
    print("lyric not found!")
else:
    print(result.track, result.artists)
    print(result.lyric)
```

`LyricClient.search_songs(query)` returns the matching songs as
`SearchResult` objects (`url`, `title`, `artist_names`), and
`LyricClient.retrieve_lyric(url)` returns the lyric text of one page. A
search that the site answers with an error, or a request that fails,
raises `LyricError`. The query clean-up is `spotcli.lyrics_query.improve_query`
and the page parsing is `spotcli.lyrics_parse.parse_lyric_html`.

## Controlling the player

Every remote command is a subcommand of `spotcli`:

```
spotcli get key playback
spotcli get key devices
spotcli get item playlist --name "Chill Vibes"

spotcli playback play-pause
spotcli playback play
spotcli playback pause
spotcli playback next
spotcli playback previous
spotcli playback shuffle
spotcli playback repeat
spotcli playback volume 50
spotcli playback volume -10 --offset
spotcli playback seek 5000
spotcli playback start context album --id <album-id> --shuffle
spotcli playback start track --name "Shape of You"
spotcli playback start liked --limit 50 --random
spotcli playback start radio artist --name "Ed Sheeran"

spotcli connect --name "Living Room"
spotcli like
spotcli like --unlike
spotcli search "shape of you"

spotcli playlist list
spotcli playlist new "Road Trip" "Songs for the car" --public --collab
spotcli playlist delete <playlist-id>
spotcli playlist import <from-playlist-id> <to-playlist-id> --delete
spotcli playlist fork <playlist-id>
spotcli playlist sync [<playlist-id>] [--delete]
```

Items are given with exactly one of `--id` and `--name`; the player
instance resolves a name to the first search match. `get key` accepts
`playback`, `devices`, `user-playlists`, `user-liked-tracks`,
`user-saved-albums`, `user-followed-artists`, `user-top-tracks` and
`queue`. Item types are `playlist`, `album`, `artist` and `track`; context
types are `playlist`, `album` and `artist`. `volume` takes a value from
-100 to 100, and `start liked` plays at most 200 tracks unless `--limit`
says otherwise. Playlist ids must be bare base62 ids.

A successful answer is printed to standard output (with `\n` escapes
turned into line breaks) and the command exits with status 0; an error
answer is printed to standard error and the command exits with status 1.

### Global options

```
spotcli --config-folder <folder> --cache-folder <folder> --theme <name> <subcommand> ...
```

These options are parsed but the remote itself does not use them.

## Library modules

- `spotcli.protocol` holds the request and response types (`GetKeyRequest`,
  `PlaybackRequest`, `PlaylistRequest`, `Response` and the rest) and their
  JSON encoding: `request_to_bytes`, `request_from_bytes`,
  `Response.to_bytes` and `Response.from_bytes`.
- `spotcli.transport` sends and receives them over UDP sockets. A response
  is sent in chunks of at most 4096 bytes followed by an empty datagram
  (`send_response`, `receive_response`); a request must fit into one
  datagram of 4096 bytes (`send_request`).
- `spotcli.playlist_import.import_playlist(api, import_from, import_to, delete, cache_dir)`
  adds every track of one playlist that is not already in another, through
  any object with the `PlaylistApi` methods `playlist_tracks`,
  `remove_tracks` and `add_tracks`. What was imported is remembered in
  `<cache_dir>/imports/<to>/<from>`, so a later import of the same pair
  only adds tracks that are new since then; with `delete` it also removes
  tracks that have left the source playlist since then. It returns a
  text report.
- `spotcli.player_requests` defines `PlayerRequest` and `ClientRequest`,
  validated descriptions of the requests a player instance handles.

## What spotcli does not do

- It is not a player. It neither plays audio nor talks to the Spotify Web
  API; every remote command needs a player instance already listening on
  port 8080, and fails with "no running client found" otherwise.
- It has no server side that answers requests; the transport and protocol
  modules provide the pieces, but nothing in the package handles them.
- `authenticate` and `generate` are recognised by the parser but refused
  with an error, as there is no login flow or shell-completion generator.
- The playlist import logic is a library function; `spotcli playlist
  import` and `sync` only send the request to the player instance.