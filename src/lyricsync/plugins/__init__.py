"""Service plugins (LRCLIB, Spotify)."""
