# src/lyricsync/core/errors.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class LyricsyncError(Exception):
    """Base application error for lyricsync.

    Use this for predictable, user-facing error messages that should be
    caught by the CLI and displayed nicely.
    """

    pass


class LyricsParseError(LyricsyncError):
    """A timestamp could not be read as minutes and seconds (strict parsing only)."""

    def __init__(self, line_number: int, line: str) -> None:
        super().__init__(f"Malformed timestamp on line {line_number}: {line!r}")
        self.line_number = line_number
        self.line = line


class ConfigurationError(LyricsyncError):
    """A required setting (e.g. the Spotify client id) is missing."""

    pass


class ErrorKind(str, Enum):
    NETWORK = "network"
    HTTP = "http"
    EMPTY = "empty"
    MISSING_TOKEN = "missing_token"
    EXPIRED_TOKEN = "expired_token"
    NOTHING_PLAYING = "nothing_playing"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class Outcome:
    """Result of a remote operation.

    Public operations collapse every failure to ``None``; the ``Outcome``
    variants keep the failure kind (and the HTTP status, where there was one)
    so callers and tests can tell "no data" from "auth required".
    """

    value: Any = None
    error: Optional[ErrorKind] = None
    status: Optional[int] = None
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: Any, status: Optional[int] = None) -> "Outcome":
        return cls(value=value, status=status)

    @classmethod
    def failure(
        cls, kind: ErrorKind, *, status: Optional[int] = None, detail: Optional[str] = None
    ) -> "Outcome":
        return cls(error=kind, status=status, detail=detail)
