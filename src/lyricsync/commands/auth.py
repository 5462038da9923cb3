"""
Spotify authentication commands (`lys auth`).

The implicit grant hands the token back in the redirect URL fragment, which
never reaches a server. `login` opens the authorize page; after approving,
copy the full URL the browser lands on and pass it to `callback`.
"""

import typer
from rich.console import Console

from ..core.auth import KeyringStorage, clear_credentials
from ..core.errors import ConfigurationError
from ..core.navigation import ConsoleNavigator, Navigator, WebBrowserNavigator
from ..plugins.spotify import SpotifyPlugin, redact

console = Console()
app = typer.Typer(no_args_is_help=True, help="Authenticate with Spotify.")


def open_spotify(navigator: Navigator | None = None) -> SpotifyPlugin:
    return SpotifyPlugin(KeyringStorage("spotify"), navigator or WebBrowserNavigator())


@app.command("login")
def auth_login(
    no_browser: bool = typer.Option(False, "--no-browser", help="Print the URL instead of opening a browser."),
):
    """Start Spotify sign-in."""
    navigator = ConsoleNavigator() if no_browser else WebBrowserNavigator()
    try:
        with open_spotify(navigator) as plugin:
            plugin.initiate_spotify_auth()
    except ConfigurationError as e:
        console.print(f"[red]❌ {e}[/red]")
        raise typer.Exit(1)
    console.print("After approving, run: [bold]lys auth callback '<redirected URL>'[/bold]")


@app.command("callback")
def auth_callback(
    url: str = typer.Argument(..., help="The full URL Spotify redirected to (including #access_token=...)."),
):
    """Finish Spotify sign-in from the redirect URL."""
    with open_spotify() as plugin:
        token = plugin.handle_spotify_callback(url)
    if not token:
        console.print("[red]❌ No valid access token in that URL.[/red]")
        raise typer.Exit(1)
    console.print(f"[green]✅ Spotify authentication successful[/green] ({redact(token)})")


@app.command("status")
def auth_status():
    """Report whether a Spotify token is stored."""
    with open_spotify() as plugin:
        authenticated = plugin.is_spotify_authenticated()
    if authenticated:
        console.print("Spotify: [green]authenticated[/green]")
    else:
        console.print("Spotify: [yellow]not authenticated[/yellow]")
        raise typer.Exit(1)


@app.command("logout")
def auth_logout():
    """Remove the stored Spotify token."""
    clear_credentials("spotify")
    console.print("Spotify token cleared.")
