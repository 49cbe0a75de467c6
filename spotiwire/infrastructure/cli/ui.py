"""UI helpers for CLI interaction.

This module keeps the Rich presentation code separate from the commands
that fetch data.
"""

from collections.abc import Callable, Iterable
from datetime import timedelta
import functools

from rich.console import Console
from rich.table import Table
import typer

from spotiwire.config import get_logger
from spotiwire.domain.entities import FullPlaylist, FullTrack, SimplifiedTrack
from spotiwire.domain.exceptions import SpotifyError

# Initialize console and logger
console = Console()
logger = get_logger(__name__)


def command_error_handler[**P, R](func: Callable[P, R]) -> Callable[P, R]:
    """Decorator to standardize error handling for CLI commands.

    Web API errors are shown as a one-line message, anything unexpected is
    logged with its traceback. Both exit with code 1.
    """

    @functools.wraps(func)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        operation = func.__name__.replace("_", " ")

        with logger.contextualize(operation=operation):
            try:
                logger.debug(f"Executing {operation}")
                return func(*args, **kwargs)

            except (typer.Exit, typer.Abort):
                raise

            except (SpotifyError, ValueError) as e:
                logger.debug(f"{operation} failed: {e}")
                console.print(f"\n[bold red]✗ {type(e).__name__}:[/bold red] {e}")
                raise typer.Exit(code=1) from e

            except Exception as e:
                logger.exception(f"Error during {operation}")
                console.print(f"\n[bold red]✗ Error during {operation}:[/bold red] {e}")
                raise typer.Exit(code=1) from e

    return wrapper


def format_duration(duration: timedelta) -> str:
    """Render a track length as ``m:ss`` (``h:mm:ss`` past an hour)."""
    total = int(duration.total_seconds())
    hours, rest = divmod(total, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours:
        return f"{hours}:{minutes:02d}:{seconds:02d}"
    return f"{minutes}:{seconds:02d}"


def tracks_table(
    tracks: Iterable[FullTrack | SimplifiedTrack], title: str | None = None, start: int = 1
) -> Table:
    table = Table(title=title)
    table.add_column("#", justify="right", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Artists")
    table.add_column("Length", justify="right")

    for number, track in enumerate(tracks, start=start):
        table.add_row(
            str(number),
            track.name,
            ", ".join(artist.name for artist in track.artists),
            format_duration(track.duration),
        )
    return table


def track_details(track: FullTrack) -> Table:
    """Key/value table for a single track."""
    table = Table(show_header=False, box=None)
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("Title", track.name)
    table.add_row("Artists", ", ".join(artist.name for artist in track.artists))
    table.add_row("Album", track.album.name)
    table.add_row("Length", format_duration(track.duration))
    table.add_row("Popularity", str(track.popularity))
    table.add_row("Explicit", "yes" if track.explicit else "no")
    if track.isrc:
        table.add_row("ISRC", track.isrc)
    if track.relinking is not None and track.relinking.was_relinked:
        table.add_row("Relinked from", track.relinking.linked_from.uri)
    table.add_row("URI", track.uri)
    return table


def playlist_summary(playlist: FullPlaylist) -> str:
    owner = playlist.owner.display_name or playlist.owner.id
    return (
        f"[bold]{playlist.name}[/bold] by {owner} "
        f"[dim]({playlist.tracks.total} tracks, {playlist.followers.total} followers)[/dim]"
    )
