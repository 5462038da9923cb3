"""
Defines the base class for all service plugins.

This module provides `BasePlugin`, the common interface that all service
plugins (LRCLIB, Spotify) share: a `requests.Session` with the application's
headers, context-manager support for closing it, and an `authenticate` hook.
"""

from typing import Optional

import requests

from .. import __version__
from ..core.config import LyricsyncSettings, get_settings

USER_AGENT = f"lyricsync/{__version__} (+https://github.com/lyricsync/lyricsync)"


class BasePlugin:
    """Base class that all service plugins inherit from."""

    def __init__(
        self,
        settings: Optional[LyricsyncSettings] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.timeout = self.settings.http_timeout
        self._owns_session = session is None
        self.session = session or requests.Session()
        if self._owns_session:
            self.session.headers.update({
                "User-Agent": USER_AGENT,
                "Accept": "application/json",
            })

    def authenticate(self) -> bool:
        """
        Check that the plugin can talk to its service.

        Returns True when the plugin is ready for authenticated calls. Anonymous
        services keep this default; Spotify overrides it with a token check.
        """
        return True

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
