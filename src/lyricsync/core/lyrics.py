"""
Synced lyrics parsing.

LRC-style transcripts carry one `[mm:ss.xx]` tag per line:

    [00:12.50]First line
    [00:17.04]Second line

`parse_synced_lyrics` turns such text into an ordered list of `Lyric`
records. Lines without a tag are kept with time 0 so plain transcripts
still render. Tags that are not numeric (LRC headers like `[ar:Artist]`)
produce a NaN time unless `strict=True` is passed.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import List, Sequence

from .errors import LyricsParseError

# First bracketed group anywhere on the line; the text runs to the next line
# terminator (\r, U+2028 and U+2029 included, not only \n).
_TAG_RE = re.compile(r"\[([^\n\r\u2028\u2029]*?)\]([^\n\r\u2028\u2029]*)")

# Decimal number with optional sign, fraction and exponent.
_NUMBER_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")

# Unsigned 0x/0o/0b integer literals.
_RADIX_RE = re.compile(r"0([xXoObB])([0-9a-fA-F]+)")
_RADIX = {"x": 16, "o": 8, "b": 2}
_INFINITY = {"Infinity": math.inf, "+Infinity": math.inf, "-Infinity": -math.inf}


@dataclass(frozen=True)
class Lyric:
    time: float  # seconds from track start
    text: str


EMPTY_LINE = Lyric(0.0, "")


def _to_number(part: str | None) -> float:
    """Read a timestamp component; blank is 0, anything non-numeric is NaN.

    Accepts decimals with an optional exponent, `Infinity` and unsigned
    `0x`/`0o`/`0b` integers.
    """
    if part is None:
        return math.nan
    part = part.strip()
    if not part:
        return 0.0
    if _NUMBER_RE.fullmatch(part):
        return float(part)
    if part in _INFINITY:
        return _INFINITY[part]
    radix = _RADIX_RE.fullmatch(part)
    if radix:
        try:
            return float(int(radix.group(2), _RADIX[radix.group(1).lower()]))
        except ValueError:
            return math.nan
    return math.nan


def _parse_timestamp(tag: str) -> float:
    parts = tag.split(":")
    minutes = _to_number(parts[0])
    seconds = _to_number(parts[1] if len(parts) > 1 else None)
    return minutes * 60 + seconds


def parse_synced_lyrics(lyrics_text: str, *, strict: bool = False) -> List[Lyric]:
    """Parse a synced lyrics transcript into `Lyric` records, one per line.

    Args:
        lyrics_text: Newline separated transcript.
        strict: Raise `LyricsParseError` for a tag that is not `minutes:seconds`
            instead of returning a NaN time.

    Returns:
        Records in source line order. An empty string yields one empty record.
    """
    lyrics: List[Lyric] = []
    for number, line in enumerate(lyrics_text.split("\n"), start=1):
        match = _TAG_RE.search(line)
        if match:
            tag, text = match.groups()
            time = _parse_timestamp(tag)
            if strict and math.isnan(time):
                raise LyricsParseError(number, line)
            lyrics.append(Lyric(time, text.strip()))
        else:
            lyrics.append(Lyric(0.0, line.strip()))
    return lyrics


def plain_text(lyrics: Sequence[Lyric]) -> str:
    """Join lyric texts into an untimed transcript."""
    return "\n".join(lyric.text for lyric in lyrics)


def line_at(lyrics: Sequence[Lyric], position: float) -> Lyric:
    """Return the line active at `position` seconds.

    That is the last line (in source order) whose time is not after the
    position. Before the first timed line, or for no lyrics, the empty line
    is returned. NaN-timed lines never become active.
    """
    current = EMPTY_LINE
    for lyric in lyrics:
        if math.isnan(lyric.time):
            continue
        if lyric.time <= position:
            current = lyric
        else:
            break
    return current
