"""spotiwire CLI - Main application entry point and commands."""

from importlib.metadata import version
from typing import Annotated

from rich.console import Console
import typer

from spotiwire.config import get_logger, setup_loguru_logger
from spotiwire.infrastructure.cli.async_helpers import async_command
from spotiwire.infrastructure.cli.status_commands import register_status_commands
from spotiwire.infrastructure.cli.ui import playlist_summary, track_details, tracks_table
from spotiwire.infrastructure.connectors.spotify import SpotifyClient

VERSION = version("spotiwire")

# Initialize console and logger with reasonable width
console = Console(width=100)
logger = get_logger(__name__)

app = typer.Typer(
    help=f"🎵 spotiwire v{VERSION} - Spotify Web API from the command line",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
    pretty_exceptions_enable=True,
    pretty_exceptions_short=True,
    pretty_exceptions_show_locals=False,
)

register_status_commands(app)


def create_client() -> SpotifyClient:
    """Client built from environment configuration."""
    return SpotifyClient.from_settings()


MarketOption = Annotated[
    str | None,
    typer.Option("--market", "-m", help="ISO 3166-1 market code, enables track relinking"),
]


@app.command(name="album-tracks", rich_help_panel="🎵 Catalogue")
@async_command
async def album_tracks(
    album: Annotated[str, typer.Argument(help="Album id, URI or URL")],
    limit: Annotated[int, typer.Option("--limit", "-l", help="Page size (1-50)")] = 50,
    offset: Annotated[int, typer.Option("--offset", "-o", help="Index of the first track")] = 0,
    fetch_all: Annotated[
        bool, typer.Option("--all", "-a", help="Follow next links until the last page")
    ] = False,
    market: MarketOption = None,
) -> None:
    """List the tracks of an album."""
    async with create_client() as client:
        page = await client.album_track(album, limit=limit, offset=offset, market=market)
        if fetch_all:
            tracks = await client.paginate(page).collect()
        else:
            tracks = list(page.items)

    console.print(tracks_table(tracks, title=f"{len(tracks)} of {page.total} tracks", start=offset + 1))


@app.command(name="track", rich_help_panel="🎵 Catalogue")
@async_command
async def track(
    track_id: Annotated[str, typer.Argument(help="Track id, URI or URL")],
    market: MarketOption = None,
) -> None:
    """Show details of a single track."""
    async with create_client() as client:
        result = await client.track(track_id, market=market)

    console.print(track_details(result))


@app.command(name="playlist", rich_help_panel="🎵 Catalogue")
@async_command
async def playlist(
    playlist_id: Annotated[str, typer.Argument(help="Playlist id, URI or URL")],
    fetch_all: Annotated[
        bool, typer.Option("--all", "-a", help="List every item, not just the first page")
    ] = False,
    market: MarketOption = None,
) -> None:
    """Show a playlist and its tracks."""
    async with create_client() as client:
        result = await client.playlist(playlist_id, market=market)
        if fetch_all:
            items = await client.paginate(result.tracks).collect()
        else:
            items = list(result.tracks.items)

    console.print(playlist_summary(result))
    # Removed tracks come back as items without a track
    console.print(tracks_table(item.track for item in items if item.track is not None))


@app.command(name="version", rich_help_panel="⚙️ System")
def version_command() -> None:
    """Show version information."""
    console.print(f"[bold bright_blue]🎵 spotiwire[/bold bright_blue] [dim]v{VERSION}[/dim]")


@app.callback()
def init_cli(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose output"),
    ] = False,
) -> None:
    """Initialize spotiwire CLI."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    setup_loguru_logger(verbose)


def main() -> int:
    """Application entry point."""
    try:
        return app() or 0
    except Exception:
        logger.exception("Unhandled exception")
        return 1
