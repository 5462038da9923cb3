"""
Lyrics commands for lyricsync (`lys lyrics`).

- fetch: look lyrics up on LRCLIB (cache first) and print them
- show: print cached lyrics, optionally only the line active at a position
- parse: parse a local .lrc file
"""

import json
import math
from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..core.cache import LyricsCache
from ..core.config import get_settings
from ..core.errors import LyricsParseError
from ..core.lyrics import Lyric, line_at, parse_synced_lyrics
from ..core.storage import JsonFileStorage
from ..plugins.lrclib import LrclibPlugin

console = Console()
app = typer.Typer(no_args_is_help=True, help="Fetch, cache and parse synced lyrics.")


def open_cache() -> LyricsCache:
    return LyricsCache(JsonFileStorage(get_settings().cache_path))


def format_time(seconds: float) -> str:
    if math.isnan(seconds):
        return "--:--.--"
    minutes, secs = divmod(seconds, 60)
    return f"{int(minutes):02d}:{secs:05.2f}"


def _print_lyrics(lyrics: List[Lyric]) -> None:
    table = Table(show_header=True, header_style="bold")
    table.add_column("time", justify="right")
    table.add_column("text")
    for lyric in lyrics:
        table.add_row(format_time(lyric.time), escape(lyric.text))
    console.print(table)


def _lyrics_json(lyrics: List[Lyric]) -> str:
    rows = [
        {"time": None if math.isnan(lyric.time) else lyric.time, "text": lyric.text}
        for lyric in lyrics
    ]
    return json.dumps(rows, ensure_ascii=False)


@app.command("fetch")
def lyrics_fetch(
    artist: str = typer.Argument(..., help="Artist name"),
    title: str = typer.Argument(..., help="Track title"),
    no_cache: bool = typer.Option(False, "--no-cache", help="Skip the local cache and query LRCLIB."),
    plain: bool = typer.Option(False, "--plain", help="Print untimed lyrics instead."),
    json_output: bool = typer.Option(False, "--json", help="Output JSON"),
):
    """Fetch synced lyrics for a track, caching them locally."""
    cache = open_cache()
    with LrclibPlugin() as plugin:
        if plain:
            text = plugin.fetch_plain_lyrics(artist, title)
            if not text:
                console.print(f"[yellow]No lyrics found for {artist} - {title}.[/yellow]")
                raise typer.Exit(1)
            typer.echo(text)
            return

        if no_cache:
            text = plugin.fetch_lyrics(artist, title)
            if text:
                cache.save_lyrics(artist, title, text)
        else:
            text = cache.cached_or_fetch(artist, title, plugin.fetch_lyrics)

    if not text:
        console.print(f"[yellow]No synced lyrics found for {artist} - {title}.[/yellow]")
        raise typer.Exit(1)

    lyrics = parse_synced_lyrics(text)
    if json_output:
        typer.echo(_lyrics_json(lyrics))
    else:
        _print_lyrics(lyrics)


@app.command("show")
def lyrics_show(
    artist: str = typer.Argument(..., help="Artist name"),
    title: str = typer.Argument(..., help="Track title"),
    at: Optional[float] = typer.Option(None, "--at", help="Only print the line active at this many seconds."),
):
    """Print lyrics from the local cache."""
    text = open_cache().get_lyrics(artist, title)
    if text is None:
        console.print(f"[yellow]No cached lyrics for {artist} - {title}.[/yellow]")
        raise typer.Exit(1)
    lyrics = parse_synced_lyrics(text)
    if at is not None:
        line = line_at(lyrics, at)
        typer.echo(f"[{format_time(line.time)}] {line.text}")
        return
    _print_lyrics(lyrics)


@app.command("parse")
def lyrics_parse(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="LRC file to parse"),
    strict: bool = typer.Option(False, "--strict", help="Fail on malformed timestamps."),
    json_output: bool = typer.Option(False, "--json", help="Output JSON"),
):
    """Parse a local LRC file and print its timed lines."""
    text = path.read_text(encoding="utf-8")
    try:
        lyrics = parse_synced_lyrics(text, strict=strict)
    except LyricsParseError as e:
        console.print(f"[red]{escape(str(e))}[/red]")
        raise typer.Exit(2)
    if json_output:
        typer.echo(_lyrics_json(lyrics))
    else:
        _print_lyrics(lyrics)
