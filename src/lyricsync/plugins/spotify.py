# src/lyricsync/plugins/spotify.py
from __future__ import annotations

import logging
import secrets
import time
from typing import Any, Dict, Optional
from urllib.parse import parse_qs, urlencode, urlsplit

import requests

from ..core.config import LyricsyncSettings
from ..core.errors import ConfigurationError, ErrorKind, Outcome
from ..core.navigation import Navigator
from ..core.storage import KeyValueStorage
from .base import BasePlugin

logger = logging.getLogger(__name__)

SPOTIFY_SCOPES = ["user-read-currently-playing", "user-read-playback-state"]

TOKEN_KEY = "access_token"
STATE_KEY = "auth_state"


def redact(token: Optional[str], keep: int = 6) -> str:
    """Shorten a bearer token for log and console output."""
    if not token:
        return "<none>"
    if len(token) <= keep:
        return "***"
    return f"{token[:keep]}..."


def _now() -> float:
    return time.time()


def _fragment_params(url: str) -> Dict[str, str]:
    """Parse `key=value` pairs from a URL fragment (or a bare fragment string)."""
    if "#" in url:
        fragment = urlsplit(url).fragment
    elif "://" in url:
        fragment = ""
    else:
        fragment = url
    return {k: v[0] for k, v in parse_qs(fragment, keep_blank_values=True).items()}


class SpotifyPlugin(BasePlugin):
    """
    Spotify implicit-grant auth and now-playing polling.

      - `initiate_spotify_auth` sends the user to the authorize page with a fresh `state`.
      - `handle_spotify_callback` reads `access_token` from the redirect URL fragment,
        checks `state` and persists the token.
      - `get_currently_playing_track` polls the player endpoint; a 401 drops the token
        and navigates home.

    The token store and the navigator are injected. Without a token store every
    token read misses and writes are dropped; without a navigator redirects are
    only logged.
    """

    def __init__(
        self,
        token_store: Optional[KeyValueStorage],
        navigator: Optional[Navigator] = None,
        settings: Optional[LyricsyncSettings] = None,
        session: Optional[requests.Session] = None,
    ) -> None:
        super().__init__(settings=settings, session=session)
        self.token_store = token_store
        self.navigator = navigator

    # ---------------- token store helpers ----------------

    def _get(self, key: str) -> Optional[str]:
        if self.token_store is None:
            return None
        return self.token_store.get_item(key)

    def _set(self, key: str, value: str) -> None:
        if self.token_store is not None:
            self.token_store.set_item(key, value)

    def _remove(self, key: str) -> None:
        if self.token_store is not None:
            self.token_store.remove_item(key)

    def _navigate(self, url: str) -> None:
        if self.navigator is None:
            logger.info("No navigator available; would navigate to %s", url)
            return
        self.navigator.navigate(url)

    # ---------------- auth flow ----------------

    def authenticate(self) -> bool:
        return self.is_spotify_authenticated()

    def build_authorize_url(self, state: Optional[str] = None) -> str:
        client_id = self.settings.spotify_client_id
        if not client_id:
            raise ConfigurationError(
                "Spotify client id is not configured. Set LYS_SPOTIFY_CLIENT_ID or "
                "spotify_client_id in settings.toml."
            )
        params = {
            "client_id": client_id,
            "response_type": "token",
            "redirect_uri": self.settings.spotify_redirect_uri,
            "scope": " ".join(SPOTIFY_SCOPES),
        }
        if state:
            params["state"] = state
        return f"{self.settings.spotify_auth_url}?{urlencode(params)}"

    def initiate_spotify_auth(self) -> str:
        """Start the implicit grant: remember a fresh state, navigate to the authorize page."""
        state = secrets.token_urlsafe(16)
        url = self.build_authorize_url(state)
        self._set(STATE_KEY, state)
        logger.debug("Redirecting to Spotify authorization")
        self._navigate(url)
        return url

    def handle_spotify_callback(self, url: str) -> Optional[str]:
        """Extract and persist the access token from the redirect URL fragment.

        Returns the token, or None when it is missing or the state does not match.
        """
        params = _fragment_params(url)
        access_token = params.get("access_token")
        if not access_token:
            error = params.get("error")
            if error:
                logger.error("Spotify authorization failed: %s", error)
            else:
                logger.error("No access token found in the URL")
            return None

        expected = self._get(STATE_KEY)
        if expected is not None and params.get("state") != expected:
            logger.error("Spotify callback state does not match the pending request; ignoring token")
            return None

        self._set(TOKEN_KEY, access_token)
        if expected is not None:
            self._remove(STATE_KEY)
        logger.info("Spotify access token stored (%s)", redact(access_token))
        return access_token

    def is_spotify_authenticated(self) -> bool:
        return bool(self._get(TOKEN_KEY))

    def clear_spotify_token(self) -> None:
        self._remove(TOKEN_KEY)

    # ---------------- player ----------------

    @property
    def currently_playing_url(self) -> str:
        return self.settings.spotify_api_url.rstrip("/") + "/me/player/currently-playing"

    def poll_currently_playing(self) -> Outcome:
        """Fetch the now-playing state, keeping the failure kind.

        Kinds: MISSING_TOKEN, NOTHING_PLAYING (204), EXPIRED_TOKEN (401, token
        cleared and home navigated), HTTP, NETWORK, MALFORMED.
        """
        token = self._get(TOKEN_KEY)
        if not token:
            logger.warning("No Spotify access token; authenticate first")
            return Outcome.failure(ErrorKind.MISSING_TOKEN)

        headers = {"Authorization": f"Bearer {token}"}
        try:
            r = self.session.get(self.currently_playing_url, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            logger.error("Error fetching currently playing track: %s", e)
            return Outcome.failure(ErrorKind.NETWORK, detail=str(e))

        if r.status_code == 204:
            return Outcome.failure(ErrorKind.NOTHING_PLAYING, status=204)
        if r.status_code == 401:
            logger.warning("Spotify token rejected (401); clearing it")
            self.clear_spotify_token()
            self._navigate(self.settings.home_url)
            return Outcome.failure(ErrorKind.EXPIRED_TOKEN, status=401)
        if not 200 <= r.status_code < 300:
            logger.error("Error fetching currently playing track: HTTP %s", r.status_code)
            return Outcome.failure(ErrorKind.HTTP, status=r.status_code)

        try:
            track: Any = r.json()
        except ValueError as e:
            logger.error("Error fetching currently playing track: invalid JSON (%s)", e)
            return Outcome.failure(ErrorKind.MALFORMED, status=r.status_code, detail=str(e))
        if not isinstance(track, dict):
            logger.error("Unexpected now-playing payload: %r", type(track))
            return Outcome.failure(ErrorKind.MALFORMED, status=r.status_code)

        track["fetched_at"] = int(_now() * 1000)
        return Outcome.success(track, status=r.status_code)

    def get_currently_playing_track(self) -> Optional[Dict[str, Any]]:
        return self.poll_currently_playing().value


def track_summary(track: Dict[str, Any]) -> Dict[str, Any]:
    """Pick artist, title and timing fields out of a now-playing payload."""
    item = track.get("item") or {}
    artists = item.get("artists") or []
    return {
        "artist": ", ".join(a.get("name", "") for a in artists if isinstance(a, dict)) or None,
        "primary_artist": (artists[0].get("name") if artists and isinstance(artists[0], dict) else None),
        "title": item.get("name"),
        "album": (item.get("album") or {}).get("name"),
        "is_playing": bool(track.get("is_playing")),
        "progress_s": (track.get("progress_ms") or 0) / 1000,
        "duration_s": (item.get("duration_ms") or 0) / 1000,
        "fetched_at": track.get("fetched_at"),
    }
