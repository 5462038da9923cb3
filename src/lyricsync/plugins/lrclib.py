# src/lyricsync/plugins/lrclib.py
"""
LRCLIB lyrics lookup.

Queries `GET /api/search` by artist and track name and takes the first
record. Every failure (transport, HTTP status, bad JSON, no results) is
logged and reported as ``None`` by `fetch_lyrics`; `lookup` keeps the
failure kind.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import requests

from ..core.errors import ErrorKind, Outcome
from .base import BasePlugin

logger = logging.getLogger(__name__)

SEARCH_PATH = "/api/search"


class LrclibPlugin(BasePlugin):
    """Client for the public LRCLIB lyrics database."""

    @property
    def search_url(self) -> str:
        return self.settings.lrclib_base_url.rstrip("/") + SEARCH_PATH

    def lookup(self, artist: str, title: str) -> Outcome:
        """Search LRCLIB and return the first matching record.

        Returns:
            An `Outcome` holding the record dict, or the failure kind:
            NETWORK, HTTP (with status), MALFORMED or EMPTY.
        """
        params = {"artist_name": artist, "track_name": title}
        try:
            r = self.session.get(self.search_url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("Error fetching lyrics for %s - %s: %s", artist, title, e)
            return Outcome.failure(ErrorKind.NETWORK, detail=str(e))

        if not 200 <= r.status_code < 300:
            logger.error(
                "Error fetching lyrics for %s - %s: HTTP %s", artist, title, r.status_code
            )
            return Outcome.failure(ErrorKind.HTTP, status=r.status_code)

        try:
            data = r.json()
        except ValueError as e:
            logger.error("Error fetching lyrics for %s - %s: invalid JSON (%s)", artist, title, e)
            return Outcome.failure(ErrorKind.MALFORMED, status=r.status_code, detail=str(e))

        if not data:
            logger.info("No lyrics found for %s - %s", artist, title)
            return Outcome.failure(ErrorKind.EMPTY, status=r.status_code)
        if not isinstance(data, list) or not isinstance(data[0], dict):
            logger.error("Unexpected LRCLIB payload for %s - %s: %r", artist, title, type(data))
            return Outcome.failure(ErrorKind.MALFORMED, status=r.status_code)

        return Outcome.success(data[0], status=r.status_code)

    def fetch_lyrics(self, artist: str, title: str) -> Optional[str]:
        """Return the first result's synced lyrics, or None."""
        record: Optional[Dict[str, Any]] = self.lookup(artist, title).value
        if record is None:
            return None
        return record.get("syncedLyrics")

    def fetch_plain_lyrics(self, artist: str, title: str) -> Optional[str]:
        """Return the first result's untimed lyrics, or None."""
        record: Optional[Dict[str, Any]] = self.lookup(artist, title).value
        if record is None:
            return None
        return record.get("plainLyrics")
