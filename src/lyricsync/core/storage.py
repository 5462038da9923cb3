"""
Key-value storage ports.

The lyrics cache and the token store only need `localStorage`-style access:
string keys, string values, get/set/remove. `KeyValueStorage` defines that
interface so the cache and the Spotify plugin can be handed whatever backend
fits the host:

- `MemoryStorage` - a dict, lives as long as the process (tests, one-shot runs)
- `JsonFileStorage` - one JSON object on disk, written through on every change

Passing ``None`` where a storage is expected means "no host storage"; callers
treat that as a read miss and a no-op write.
"""

from __future__ import annotations

import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Iterator, Optional

logger = logging.getLogger(__name__)


class KeyValueStorage(ABC):
    """An abstract base class for string key/value stores."""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """Return the stored value, or None when the key is absent."""

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """Store `value` under `key`, replacing any previous value."""

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """Delete `key`. Removing a missing key is not an error."""

    def keys(self) -> Iterator[str]:
        return iter(())


class MemoryStorage(KeyValueStorage):
    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._data: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove_item(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> Iterator[str]:
        return iter(list(self._data))

    def __len__(self) -> int:
        return len(self._data)


class JsonFileStorage(KeyValueStorage):
    """Persist a flat string map as a single JSON object.

    The file is read lazily on first access and rewritten on every change.
    A missing file is an empty store; a malformed one is logged and treated
    as empty (the next write replaces it).
    """

    def __init__(self, path: Path) -> None:
        self.path = Path(path).expanduser()
        self._data: Optional[Dict[str, str]] = None

    def _load(self) -> Dict[str, str]:
        if self._data is None:
            data: Dict[str, str] = {}
            if self.path.exists():
                try:
                    raw = json.loads(self.path.read_text(encoding="utf-8")) or {}
                    if isinstance(raw, dict):
                        data = {str(k): v for k, v in raw.items() if isinstance(v, str)}
                    else:
                        logger.warning("Ignoring non-object storage file %s", self.path)
                except (OSError, ValueError) as e:
                    logger.warning("Could not read storage file %s: %s", self.path, e)
            self._data = data
        return self._data

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(self._load(), ensure_ascii=False, indent=2), encoding="utf-8")
        tmp.replace(self.path)

    def get_item(self, key: str) -> Optional[str]:
        return self._load().get(key)

    def set_item(self, key: str, value: str) -> None:
        self._load()[key] = value
        self._flush()

    def remove_item(self, key: str) -> None:
        data = self._load()
        if key in data:
            del data[key]
            self._flush()

    def keys(self) -> Iterator[str]:
        return iter(list(self._load()))
