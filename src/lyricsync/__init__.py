"""lyricsync - synced lyrics and now-playing companion for Spotify."""

__version__ = "0.1.0"
