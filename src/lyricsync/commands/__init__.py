"""Command groups for the lyricsync CLI.

This package provides sub-apps that are mounted by lyricsync.cli.
"""

from . import auth as auth  # noqa: F401
from . import config as config  # noqa: F401
from . import lyrics as lyrics  # noqa: F401
from . import player as player  # noqa: F401

__all__ = [
    "auth",
    "config",
    "lyrics",
    "player",
]
