"""Credential and connectivity status command."""

from rich.console import Console
from rich.table import Table
import typer

from spotiwire.config import get_logger, settings
from spotiwire.domain.exceptions import SpotifyError
from spotiwire.infrastructure.auth import credentials_from_settings
from spotiwire.infrastructure.cli.async_helpers import async_command

# Initialize console and logger
console = Console(width=120)
logger = get_logger(__name__)


def register_status_commands(app: typer.Typer) -> None:
    """Register status commands with the Typer app."""
    app.command(
        name="status",
        help="Check that the configured credentials can obtain a token",
        rich_help_panel="⚙️ System",
    )(status)


async def _check_credentials() -> tuple[bool, str]:
    """Exchange credentials once and describe the outcome."""
    if not settings.credentials.client_id or not settings.credentials.client_secret:
        return False, "Not configured - set SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET"

    manager = credentials_from_settings(settings)
    try:
        token = await manager.get_token()
    except SpotifyError as e:
        return False, f"{type(e).__name__}: {e}"

    scopes = ", ".join(token.scope) if token.scope else "no scopes"
    return True, f"Token valid until {token.expires_at:%H:%M:%S} UTC ({scopes})"


@async_command
async def status() -> None:
    """Check connection status of the Spotify accounts service."""
    connected, message = await _check_credentials()

    grant = "authorization code" if settings.credentials.refresh_token else "client credentials"
    table = Table(title="Spotify Status")
    table.add_column("Grant", style="cyan")
    table.add_column("Status", justify="center")
    table.add_column("Details", style="dim")
    table.add_row(
        grant,
        "[green]✓ Connected[/green]" if connected else "[red]✗ Not connected[/red]",
        message,
    )
    console.print(table)

    if not connected:
        raise typer.Exit(code=1)
