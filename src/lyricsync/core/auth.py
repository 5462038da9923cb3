"""
Stores the Spotify access token using the system's keyring with pragmatic fallbacks.

Primary store/retrieve is via `keyring` (macOS Keychain, Windows Credential Locker,
Secret Service, etc). To accommodate environments where keyring is unavailable or
undesired, we support:

- Opt-out via `LYS_DISABLE_KEYRING=1` to bypass keyring completely
- File fallback in `.secrets.toml` (user or project-local)

The keyring service name is "lyricsync"; entries are named `{service}_{key}`.
Tokens are kept until removed: there is no local expiry, a 401 from the API
is what clears them. Every place `get_credentials` reads from is one
`delete_credentials` clears, so there is no environment override.
"""

import logging
import os
from pathlib import Path
from typing import Iterator, Optional

import keyring
import keyring.errors
import toml

from .config import LOCAL_SECRETS_FILE, USER_SECRETS_FILE
from .storage import KeyValueStorage

logger = logging.getLogger(__name__)

KEYRING_SERVICE = "lyricsync"

# Known keys per service; clear_credentials only removes these.
SERVICE_KEYS = {
    "spotify": ["access_token", "auth_state"],
}

_SENSITIVE = {"access_token"}


def _keyring_disabled() -> bool:
    return os.getenv("LYS_DISABLE_KEYRING") == "1"


def _load_secrets() -> dict:
    """Load combined secrets from project-local and user-scoped .secrets.toml."""
    data: dict = {}
    for p in (LOCAL_SECRETS_FILE, USER_SECRETS_FILE):
        try:
            if Path(p).exists():
                d = toml.loads(Path(p).read_text(encoding="utf-8")) or {}
                if isinstance(d, dict):
                    data.update(d)
        except Exception:
            # Ignore malformed secrets files
            pass
    return data


def _write_user_secrets(data: dict) -> None:
    USER_SECRETS_FILE.parent.mkdir(parents=True, exist_ok=True)
    USER_SECRETS_FILE.write_text(toml.dumps(data), encoding="utf-8")


def _secrets_key(service: str, key: str) -> str:
    return f"{service.lower()}_{key}"


def store_credentials(service: str, key: str, value: str) -> None:
    """Store a credential in the system keyring, or the secrets file as fallback.

    Args:
        service: The name of the service (e.g., 'spotify').
        key: The name of the credential to store (e.g., 'access_token').
        value: The secret value to store.
    """
    if not _keyring_disabled():
        try:
            keyring.set_password(KEYRING_SERVICE, _secrets_key(service, key), value)
            return
        except Exception as e:
            if key in _SENSITIVE:
                logger.warning("Could not store %s.%s in keyring (%s); using secrets file", service, key, e)

    try:
        data = _load_secrets()
        data[_secrets_key(service, key)] = value
        _write_user_secrets(data)
    except OSError as e:
        logger.error("Could not persist %s.%s to %s: %s", service, key, USER_SECRETS_FILE, e)


def get_credentials(service: str, key: str) -> str | None:
    """Retrieve a stored credential.

    Args:
        service: The name of the service (e.g., 'spotify').
        key: The name of the credential to retrieve (e.g., 'access_token').

    Returns:
        The stored secret value, or None if not found or an error occurs.
    """
    # 1) Optional keyring (unless explicitly disabled)
    if not _keyring_disabled():
        try:
            v = keyring.get_password(KEYRING_SERVICE, _secrets_key(service, key))
            if v:
                return v
        except Exception as e:
            if key in _SENSITIVE:
                logger.warning("Keyring unavailable for %s.%s: %s", service, key, e)

    # 2) .secrets.toml fallback
    v = _load_secrets().get(_secrets_key(service, key))
    if v:
        return str(v)
    return None


def delete_credentials(service: str, key: str) -> None:
    """Remove one credential from keyring and both secrets files.

    A credential that is already missing is not an error.
    """
    name = _secrets_key(service, key)
    if not _keyring_disabled():
        try:
            # Check existence first to avoid backend-specific exceptions when missing
            if keyring.get_password(KEYRING_SERVICE, name) is not None:
                keyring.delete_password(KEYRING_SERVICE, name)
        except keyring.errors.PasswordDeleteError as e:
            logger.warning("Failed to delete %s from keyring: %s", name, e)
        except Exception as e:
            logger.warning("Keyring error while deleting %s: %s", name, e)

    for path in (LOCAL_SECRETS_FILE, USER_SECRETS_FILE):
        try:
            if Path(path).exists():
                data = toml.loads(Path(path).read_text(encoding="utf-8")) or {}
                if name in data:
                    del data[name]
                    Path(path).write_text(toml.dumps(data), encoding="utf-8")
        except Exception as e:
            logger.warning("Could not update %s: %s", path, e)


def clear_credentials(service: str) -> None:
    """Clear all known credentials for a given service."""
    service = service.lower()
    keys_to_delete = SERVICE_KEYS.get(service, [])
    if not keys_to_delete:
        logger.warning("No keys defined for service '%s'. Nothing to clear.", service)
        return
    for key in keys_to_delete:
        delete_credentials(service, key)


class KeyringStorage(KeyValueStorage):
    """`KeyValueStorage` view over the credential store for one service."""

    def __init__(self, service: str = "spotify") -> None:
        self.service = service

    def get_item(self, key: str) -> Optional[str]:
        return get_credentials(self.service, key)

    def set_item(self, key: str, value: str) -> None:
        store_credentials(self.service, key, value)

    def remove_item(self, key: str) -> None:
        delete_credentials(self.service, key)

    def keys(self) -> Iterator[str]:
        return iter(k for k in SERVICE_KEYS.get(self.service, []) if self.get_item(k))
