"""Local lyrics cache keyed by artist and title."""

from __future__ import annotations

import logging
from typing import Callable, Optional

from .storage import KeyValueStorage

logger = logging.getLogger(__name__)


def cache_key(artist: str, title: str) -> str:
    # Plain concatenation: "a_b" + "c" and "a" + "b_c" share a key.
    return f"lyrics_{artist}_{title}"


class LyricsCache:
    """Raw lyrics text stored per (artist, title); entries never expire.

    With no storage (``storage=None``) reads miss and writes are dropped.
    """

    def __init__(self, storage: Optional[KeyValueStorage]) -> None:
        self.storage = storage

    def save_lyrics(self, artist: str, title: str, lyrics: str) -> None:
        if self.storage is None:
            return
        self.storage.set_item(cache_key(artist, title), lyrics)
        logger.debug("Cached lyrics for %s - %s", artist, title)

    def get_lyrics(self, artist: str, title: str) -> Optional[str]:
        if self.storage is None:
            return None
        return self.storage.get_item(cache_key(artist, title))

    def cached_or_fetch(
        self, artist: str, title: str, fetcher: Callable[[str, str], Optional[str]]
    ) -> Optional[str]:
        """Return cached lyrics, or fetch them and cache a non-empty result."""
        cached = self.get_lyrics(artist, title)
        if cached is not None:
            logger.debug("Cache hit for %s - %s", artist, title)
            return cached
        lyrics = fetcher(artist, title)
        if lyrics:
            self.save_lyrics(artist, title, lyrics)
        return lyrics
