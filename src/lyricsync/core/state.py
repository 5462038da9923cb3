"""
Observable playback state for lyrics display.

A `Store` holds one value and notifies subscribers when it changes; a
`PlaybackLyrics` bundles the three stores a lyrics view watches. The
consumer creates and owns these objects, nothing here is module level.
"""

from __future__ import annotations

import logging
from typing import Callable, Generic, List, Optional, TypeVar

from .lyrics import EMPTY_LINE, Lyric, line_at, parse_synced_lyrics, plain_text

logger = logging.getLogger(__name__)

T = TypeVar("T")


class Store(Generic[T]):
    """A value plus the callbacks interested in it."""

    def __init__(self, value: T) -> None:
        self._value = value
        self._subscribers: List[Callable[[T], None]] = []

    def get(self) -> T:
        return self._value

    def set(self, value: T) -> None:
        self._value = value
        for callback in list(self._subscribers):
            callback(value)

    def update(self, fn: Callable[[T], T]) -> None:
        self.set(fn(self._value))

    def subscribe(self, callback: Callable[[T], None]) -> Callable[[], None]:
        """Register `callback`, call it with the current value, return an unsubscribe function."""
        self._subscribers.append(callback)
        callback(self._value)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe


class PlaybackLyrics:
    def __init__(self) -> None:
        self.synced_lyrics: Store[Optional[List[Lyric]]] = Store(None)
        self.plain_lyrics: Store[Optional[str]] = Store(None)
        self.current_line: Store[Lyric] = Store(EMPTY_LINE)

    def load(self, synced_text: Optional[str], plain: Optional[str] = None) -> None:
        """Publish a new transcript and reset the current line.

        When only synced text is available the plain view is derived from it.
        """
        lyrics = parse_synced_lyrics(synced_text) if synced_text else None
        if plain is None and lyrics is not None:
            plain = plain_text(lyrics)
        self.synced_lyrics.set(lyrics)
        self.plain_lyrics.set(plain)
        self.current_line.set(EMPTY_LINE)
        logger.debug("Loaded %d synced lines", len(lyrics or []))

    def sync_to_position(self, seconds: float) -> Lyric:
        """Move the current line to the one active at `seconds`; publish only on change."""
        line = line_at(self.synced_lyrics.get() or [], seconds)
        if line != self.current_line.get():
            self.current_line.set(line)
        return line

    def clear(self) -> None:
        self.synced_lyrics.set(None)
        self.plain_lyrics.set(None)
        self.current_line.set(EMPTY_LINE)
