"""Search results: one page per requested object type."""

from collections.abc import Mapping
from typing import Any, Self

from attrs import define

from .album import SimplifiedAlbum
from .artist import FullArtist
from .paging import Page
from .playlist import SimplifiedPlaylist
from .shared import as_object, join, optional
from .track import FullTrack

SEARCH_TYPES = ("album", "artist", "playlist", "track")


def _page(data: Mapping[str, Any], key: str, parse_item, path: str):
    value = optional(data, f"{key}s", Mapping, path)
    if value is None:
        return None
    return Page.from_json(value, parse_item, join(path, f"{key}s"), skip_null_items=True)


@define(frozen=True, slots=True)
class SearchResult:
    """A page for each type that was searched; None for types that weren't."""

    tracks: Page[FullTrack] | None = None
    albums: Page[SimplifiedAlbum] | None = None
    artists: Page[FullArtist] | None = None
    playlists: Page[SimplifiedPlaylist] | None = None

    @classmethod
    def from_json(cls, data: Mapping[str, Any], path: str = "") -> Self:
        data = as_object(data, path)
        return cls(
            tracks=_page(data, "track", FullTrack.from_json, path),
            albums=_page(data, "album", SimplifiedAlbum.from_json, path),
            artists=_page(data, "artist", FullArtist.from_json, path),
            playlists=_page(data, "playlist", SimplifiedPlaylist.from_json, path),
        )

    def to_json(self) -> dict[str, Any]:
        pages = {
            "tracks": self.tracks,
            "albums": self.albums,
            "artists": self.artists,
            "playlists": self.playlists,
        }
        return {key: page.to_json() for key, page in pages.items() if page is not None}
