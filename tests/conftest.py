"""
Shared fixtures: settings/credential isolation and fake HTTP sessions.
"""

import logging

import pytest
import requests

from lyricsync.core import auth as auth_mod
from lyricsync.core.config import LyricsyncSettings, reset_settings
from lyricsync.core.navigation import Navigator


class SimpleResp:
    def __init__(self, json_data=None, status_code=200, bad_json=False):
        self._json = json_data
        self.status_code = status_code
        self._bad_json = bad_json

    def json(self):
        if self._bad_json:
            raise ValueError("Expecting value: line 1 column 1 (char 0)")
        return self._json


class FakeSession:
    """Returns queued responses (or raises queued exceptions) from get()."""

    def __init__(self, *responses, on_get=None):
        self.responses = list(responses)
        self.calls = []
        self.on_get = on_get
        self.closed = False

    def get(self, url, params=None, headers=None, timeout=None):
        self.calls.append({"url": url, "params": params, "headers": headers, "timeout": timeout})
        if self.on_get:
            self.on_get()
        r = self.responses.pop(0)
        if isinstance(r, Exception):
            raise r
        return r

    def close(self):
        self.closed = True


class RecordingNavigator(Navigator):
    def __init__(self):
        self.urls = []

    def navigate(self, url):
        self.urls.append(url)


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("LYS_DISABLE_KEYRING", "1")
    monkeypatch.setenv("LYS_IGNORE_LOCAL_SETTINGS", "1")
    monkeypatch.setenv("LYS_CACHE_PATH", str(tmp_path / "cache" / "lyrics.json"))
    monkeypatch.delenv("LYS_SPOTIFY_CLIENT_ID", raising=False)
    monkeypatch.delenv("LYS_SETTINGS_PATH", raising=False)
    monkeypatch.setattr(auth_mod, "USER_SECRETS_FILE", tmp_path / "user" / ".secrets.toml")
    monkeypatch.setattr(auth_mod, "LOCAL_SECRETS_FILE", tmp_path / ".secrets.toml")
    reset_settings()
    yield
    reset_settings()
    # CLI runs attach a stdout handler bound to the runner's stream
    root = logging.getLogger()
    for handler in list(root.handlers):
        if type(handler) is logging.StreamHandler:
            root.removeHandler(handler)


@pytest.fixture
def settings(tmp_path):
    return LyricsyncSettings(
        spotify_client_id="client-123",
        cache_path=tmp_path / "lyrics.json",
        http_timeout=5,
    )


@pytest.fixture
def simple_resp():
    return SimpleResp


@pytest.fixture
def fake_session():
    return FakeSession


@pytest.fixture
def navigator():
    return RecordingNavigator()


@pytest.fixture
def connection_error():
    return requests.ConnectionError("connection refused")
