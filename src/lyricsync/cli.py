"""
lyricsync CLI - Main entry point using Typer.

This module configures the main Typer application, registers all command groups,
and defines global options like --version and --verbose.
"""

import typer
from rich.console import Console
from rich.traceback import install

from .commands import auth, config, lyrics, player
from .core.errors import LyricsyncError
from .core.logging_util import setup_logging

# Install a rich traceback handler for readable exceptions
install(show_locals=False)

console = Console()

app = typer.Typer(
    name="lys",
    help="🎤 lyricsync - synced lyrics for whatever Spotify is playing.",
    epilog="Use `lys [COMMAND] --help` for more info on a specific command.",
    no_args_is_help=True,
    pretty_exceptions_enable=False,  # Disable Typer's default handler to use Rich's
)

app.add_typer(
    lyrics.app, name="lyrics", help="📝 Fetch, cache and parse synced lyrics."
)
app.add_typer(
    auth.app, name="auth", help="🔐 Sign in to Spotify and manage the stored token."
)
app.add_typer(
    config.app, name="config", help="⚙️ Inspect settings."
)
app.command("now-playing")(player.now_playing)


def _version_callback(value: bool) -> None:
    if value:
        from . import __version__

        console.print(f"lyricsync v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None,
        "--version",
        "-v",
        help="Show the application version and exit.",
        callback=_version_callback,
        is_eager=True,
    ),
    verbose: bool = typer.Option(None, "--verbose", help="Enable DEBUG-level logging."),
    quiet: bool = typer.Option(
        None, "--quiet", help="Reduce logging to warnings and errors."
    ),
    json_logs: bool = typer.Option(
        False, "--json-logs", help="Emit logs as JSON lines on stderr."
    ),
):
    """
    lyricsync CLI - synced lyrics and Spotify now-playing.
    """
    # Configure logging once, early
    setup_logging(json_logs=json_logs, verbose=bool(verbose), quiet=bool(quiet))


def cli():
    """Main entry point for the console script defined in pyproject.toml."""
    try:
        app()
    except KeyboardInterrupt:
        console.print("\n[yellow]👋 Operation cancelled by user.[/yellow]")
        raise typer.Exit()
    except LyricsyncError as e:
        console.print(f"[bold red]Error:[/bold red] {e}")
        raise typer.Exit(1)


if __name__ == "__main__":
    cli()
