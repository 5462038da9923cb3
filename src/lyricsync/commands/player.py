"""
Now-playing command (`lys now-playing`).

Polls Spotify for the current track. With `--lyrics` the track's synced
lyrics are loaded (cache first, then LRCLIB) and the line matching the
playback position is printed whenever it changes.
"""

import json
import logging
import time
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from ..core.config import get_settings
from ..core.errors import ErrorKind
from ..core.lyrics import Lyric
from ..core.state import PlaybackLyrics
from ..plugins.lrclib import LrclibPlugin
from ..plugins.spotify import track_summary
from .auth import open_spotify
from .lyrics import format_time, open_cache

logger = logging.getLogger(__name__)
console = Console()

_STOP_KINDS = {ErrorKind.MISSING_TOKEN, ErrorKind.EXPIRED_TOKEN}


def now_playing(
    watch: bool = typer.Option(False, "--watch", "-w", help="Keep polling until interrupted."),
    interval: Optional[float] = typer.Option(None, "--interval", help="Seconds between polls (default from settings)."),
    count: int = typer.Option(0, "--count", help="Stop after this many polls (0 = no limit)."),
    with_lyrics: bool = typer.Option(False, "--lyrics", help="Show the synced lyric line for the playback position."),
    json_output: bool = typer.Option(False, "--json", help="Output the raw payload as JSON."),
):
    """Show the track currently playing on Spotify."""
    settings = get_settings()
    delay = interval or settings.poll_interval
    playback = PlaybackLyrics()
    cache = open_cache()
    loaded_for: Optional[tuple] = None

    def _print_line(line: Lyric) -> None:
        if line.text:
            console.print(f"[cyan][{format_time(line.time)}][/cyan] {escape(line.text)}")

    unsubscribe = playback.current_line.subscribe(_print_line) if with_lyrics else None

    polls = 0
    with open_spotify() as spotify, LrclibPlugin() as lrclib:
        try:
            while True:
                polls += 1
                outcome = spotify.poll_currently_playing()
                if outcome.ok:
                    track = outcome.value
                    summary = track_summary(track)
                    if json_output:
                        typer.echo(json.dumps(track, ensure_ascii=False))
                    key = (summary["primary_artist"], summary["title"])
                    if key != loaded_for:
                        loaded_for = key
                        if not json_output:
                            console.print(
                                f"▶ [bold]{summary['title']}[/bold] - {summary['artist']}"
                                f" ({format_time(summary['progress_s'])} / {format_time(summary['duration_s'])})"
                            )
                        if with_lyrics:
                            # podcasts and local files may lack an artist or title
                            synced = None
                            if all(key):
                                synced = cache.cached_or_fetch(key[0], key[1], lrclib.fetch_lyrics)
                            playback.load(synced)
                            if synced is None:
                                console.print("[yellow]No synced lyrics for this track.[/yellow]")
                    if with_lyrics:
                        playback.sync_to_position(summary["progress_s"])
                elif outcome.error == ErrorKind.NOTHING_PLAYING:
                    if loaded_for is not None or not watch:
                        console.print("Nothing is playing.")
                    loaded_for = None
                    playback.clear()
                elif outcome.error in _STOP_KINDS:
                    console.print("[red]Not authenticated with Spotify.[/red] Run: lys auth login")
                    raise typer.Exit(1)
                else:
                    console.print(f"[yellow]Could not fetch now playing ({outcome.error.value}).[/yellow]")
                    if not watch:
                        raise typer.Exit(1)

                if not watch or (count and polls >= count):
                    break
                time.sleep(delay)
        except KeyboardInterrupt:
            console.print("\n[yellow]Stopped.[/yellow]")
        finally:
            if unsubscribe:
                unsubscribe()
