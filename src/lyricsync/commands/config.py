"""
Configuration commands for lyricsync (`lys config`).

Shows the effective settings and where they come from.
"""

import json

import typer
from rich.console import Console
from rich.table import Table

from ..core.auth import get_credentials
from ..core.config import USER_SECRETS_FILE, USER_SETTINGS_FILE, get_settings, settings_as_dict

console = Console()
app = typer.Typer(
    no_args_is_help=True,
    help="Inspect settings.",
)


@app.command("show")
def config_show(
    json_output: bool = typer.Option(False, "--json", help="Output JSON"),
):
    """Print the effective settings."""
    settings = get_settings()
    data = settings_as_dict(settings)
    data["spotify_token"] = "stored" if get_credentials("spotify", "access_token") else "missing"

    if json_output:
        typer.echo(json.dumps(data, indent=2))
        return

    table = Table(show_header=True, header_style="bold", title="lyricsync settings")
    table.add_column("key")
    table.add_column("value")
    for k, v in data.items():
        table.add_row(k, "" if v is None else str(v))
    console.print(table)
    console.print(f"Settings file: [blue]{USER_SETTINGS_FILE}[/blue]")
    console.print(f"Secrets file:  [blue]{USER_SECRETS_FILE}[/blue]")
