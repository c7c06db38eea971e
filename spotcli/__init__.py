"""Command-line remote for a running Spotify player instance, with a song lyric finder."""

__version__ = "0.1.0"