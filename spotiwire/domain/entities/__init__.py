"""Immutable value objects mirroring the Web API JSON object model."""

# Album-related entities
from .album import FullAlbum, SavedAlbum, SimplifiedAlbum

# Artist-related entities
from .artist import FullArtist, SimplifiedArtist
from .audio import AudioFeatures
from .identifiers import SpotifyId, parse_ids

# Paging envelopes
from .paging import Cursor, CursorPage, ItemParser, Page

# Playlist-related entities
from .playlist import (
    FullPlaylist,
    PlaylistItem,
    PlaylistSnapshot,
    PlaylistTracksRef,
    SimplifiedPlaylist,
)
from .search import SEARCH_TYPES, SearchResult

# Shared value objects
from .shared import (
    Copyright,
    Followers,
    Image,
    ObjectType,
    Restriction,
    duration_from_ms,
    duration_to_ms,
)

# Track-related entities
from .track import (
    FullTrack,
    Relinking,
    SavedTrack,
    SimplifiedTrack,
    TrackLink,
    TrackPositions,
)
from .user import ExplicitContent, PrivateUser, PublicUser

__all__ = [
    # Track entities
    "FullTrack",
    "SimplifiedTrack",
    "SavedTrack",
    "TrackLink",
    "Relinking",
    "TrackPositions",
    # Album entities
    "FullAlbum",
    "SimplifiedAlbum",
    "SavedAlbum",
    # Artist entities
    "FullArtist",
    "SimplifiedArtist",
    # Playlist entities
    "FullPlaylist",
    "SimplifiedPlaylist",
    "PlaylistItem",
    "PlaylistTracksRef",
    "PlaylistSnapshot",
    # User entities
    "PublicUser",
    "PrivateUser",
    "ExplicitContent",
    # Other resources
    "AudioFeatures",
    "SearchResult",
    "SEARCH_TYPES",
    # Paging
    "Page",
    "CursorPage",
    "Cursor",
    "ItemParser",
    # Identifiers
    "SpotifyId",
    "parse_ids",
    # Shared utilities
    "Copyright",
    "Followers",
    "Image",
    "ObjectType",
    "Restriction",
    "duration_from_ms",
    "duration_to_ms",
]
