import json

import pytest
from pydantic import ValidationError

from lyricsync.core.config import LyricsyncSettings, get_settings, reset_settings, settings_as_dict


def test_defaults():
    s = LyricsyncSettings()
    assert s.spotify_client_id is None
    assert s.spotify_redirect_uri == "http://localhost:5173/callback"
    assert s.home_url == "http://localhost:5173/"
    assert s.lrclib_base_url == "https://lrclib.net"
    assert s.http_timeout > 0


def test_env_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("LYS_SPOTIFY_CLIENT_ID", "abc")
    monkeypatch.setenv("LYS_CACHE_PATH", str(tmp_path / "c.json"))
    reset_settings()

    s = get_settings()
    assert s.spotify_client_id == "abc"
    assert s.cache_path == tmp_path / "c.json"
    assert get_settings() is s


def test_settings_json_file(tmp_path, monkeypatch):
    settings_file = tmp_path / "settings.json"
    settings_file.write_text(json.dumps({"home_url": "http://example.test/", "poll_interval": 1.5}))
    monkeypatch.setenv("LYS_SETTINGS_PATH", str(settings_file))
    reset_settings()

    s = get_settings()
    assert s.home_url == "http://example.test/"
    assert s.poll_interval == 1.5


def test_invalid_timeout_is_rejected():
    with pytest.raises(ValidationError):
        LyricsyncSettings(http_timeout=0)


def test_settings_as_dict_is_json_friendly(tmp_path):
    data = settings_as_dict(LyricsyncSettings(cache_path=tmp_path / "x.json"))
    assert data["cache_path"] == str(tmp_path / "x.json")
    json.dumps(data)
