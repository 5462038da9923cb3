"""
Configuration management using Dynaconf and Pydantic.

Settings are layered: Dynaconf reads `settings.toml` / `.secrets.toml` (project
local first, then user scoped under `~/.config/lyricsync/`) plus `LYS_*`
environment variables. The merged data is validated into a typed
`LyricsyncSettings` object.

`get_settings` returns a process-wide instance; `reset_settings` drops it so
tests can reload from a clean environment.
"""

import json
import os
from pathlib import Path
from typing import Optional

import toml
from dynaconf import Dynaconf
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from rich.console import Console

console = Console()

# Determine a user-scoped config directory (XDG-style)
USER_CONFIG_DIR = Path.home() / ".config" / "lyricsync"
USER_SETTINGS_FILE = USER_CONFIG_DIR / "settings.toml"
USER_SECRETS_FILE = USER_CONFIG_DIR / ".secrets.toml"

# Project-local settings (CWD) to support isolated runs and tests
LOCAL_SETTINGS_FILE = Path("settings.toml")
LOCAL_SECRETS_FILE = Path(".secrets.toml")

settings_loader = Dynaconf(
    envvar_prefix="LYS",
    settings_files=[
        "settings.toml",
        ".secrets.toml",
        str(USER_SETTINGS_FILE),
        str(USER_SECRETS_FILE),
    ],
    load_dotenv=True,
)


# Defaults
DEFAULT_REDIRECT_URI = "http://localhost:5173/callback"
DEFAULT_HOME_URL = "http://localhost:5173/"
LRCLIB_BASE_URL = "https://lrclib.net"
SPOTIFY_AUTH_URL = "https://accounts.spotify.com/authorize"
SPOTIFY_API_URL = "https://api.spotify.com/v1"


def _default_cache_path() -> Path:
    try:
        from platformdirs import user_cache_dir

        return Path(user_cache_dir("lyricsync")) / "lyrics.json"
    except Exception:
        return Path.home() / ".cache" / "lyricsync" / "lyrics.json"


class LyricsyncSettings(BaseModel):
    """A Pydantic model that defines and validates all application settings."""

    # Spotify implicit grant: public client id, redirect URI must match the
    # one registered with the app exactly.
    spotify_client_id: Optional[str] = None
    spotify_redirect_uri: str = DEFAULT_REDIRECT_URI
    home_url: str = DEFAULT_HOME_URL

    spotify_auth_url: str = SPOTIFY_AUTH_URL
    spotify_api_url: str = SPOTIFY_API_URL
    lrclib_base_url: str = LRCLIB_BASE_URL

    cache_path: Path = Field(default_factory=_default_cache_path)
    http_timeout: float = Field(default=20.0, gt=0)
    poll_interval: float = Field(default=3.0, gt=0)

    model_config = ConfigDict(validate_assignment=True, extra="ignore")


_settings_instance: Optional[LyricsyncSettings] = None


def get_settings() -> LyricsyncSettings:
    """Get the application settings as a singleton Pydantic model.

    Honors LYS_SETTINGS_PATH when set: a JSON file path used for persistence in tests.
    """
    global _settings_instance
    if _settings_instance is None:
        try:
            config_dict = {}

            # 1) Explicit JSON settings file (tests, scripted runs)
            env_settings_path = os.getenv("LYS_SETTINGS_PATH")
            if env_settings_path:
                p = Path(env_settings_path)
                if p.exists():
                    try:
                        config_dict.update(json.loads(p.read_text(encoding="utf-8")) or {})
                    except Exception:
                        # If malformed, ignore and continue with other layers
                        pass

            # 2) Dynaconf loader (project + user scope + LYS_* env)
            dc_dict = settings_loader.as_dict() or {}
            config_dict.update({k.lower(): v for k, v in dc_dict.items()})

            # 3) Optional project-local settings.toml overlay
            ignore_local = os.getenv("LYS_IGNORE_LOCAL_SETTINGS") == "1"
            if (not ignore_local) and LOCAL_SETTINGS_FILE.exists():
                try:
                    local_data = toml.loads(LOCAL_SETTINGS_FILE.read_text(encoding="utf-8")) or {}
                    if isinstance(local_data, dict):
                        config_dict.update(local_data)
                except Exception:
                    pass

            # 4) Explicit environment overrides
            env_client = os.getenv("LYS_SPOTIFY_CLIENT_ID")
            env_cache = os.getenv("LYS_CACHE_PATH")
            if env_client:
                config_dict["spotify_client_id"] = env_client
            if env_cache:
                config_dict["cache_path"] = env_cache

            _settings_instance = LyricsyncSettings(**config_dict)
        except ValidationError as e:
            console.print(f"[red]Configuration error:[/red]\n{e}")
            raise

    return _settings_instance


def settings_as_dict(settings: LyricsyncSettings) -> dict:
    """Return settings as plain JSON-friendly data (paths stringified)."""
    data = settings.model_dump()
    data["cache_path"] = str(settings.cache_path)
    return data


def reset_settings():
    """Reset in-memory settings (do not delete on-disk settings).

    The Dynaconf loader is reloaded too, so environment changes made since the
    last load are picked up.
    """
    global _settings_instance
    _settings_instance = None
    settings_loader.reload()
