"""spotiwire - typed async client for the Spotify Web API."""

from spotiwire.domain.entities import (
    AudioFeatures,
    CursorPage,
    FullAlbum,
    FullArtist,
    FullPlaylist,
    FullTrack,
    Page,
    PlaylistItem,
    PlaylistSnapshot,
    PrivateUser,
    PublicUser,
    SavedAlbum,
    SavedTrack,
    SearchResult,
    SimplifiedAlbum,
    SimplifiedArtist,
    SimplifiedPlaylist,
    SimplifiedTrack,
    SpotifyId,
    TrackLink,
    TrackPositions,
)
from spotiwire.domain.exceptions import (
    ApiError,
    AuthenticationError,
    MalformedResponse,
    NetworkError,
    NotFound,
    RateLimited,
    SpotifyError,
)
from spotiwire.infrastructure.auth import (
    AuthorizationCodeManager,
    ClientCredentialsManager,
    CredentialManager,
    Token,
    credentials_from_settings,
)
from spotiwire.infrastructure.connectors import (
    Paginator,
    SpotifyClient,
    SpotifyHttp,
    retry_on_rate_limit,
)

__all__ = [
    # Client
    "SpotifyClient",
    "SpotifyHttp",
    "Paginator",
    "retry_on_rate_limit",
    # Credentials
    "AuthorizationCodeManager",
    "ClientCredentialsManager",
    "CredentialManager",
    "Token",
    "credentials_from_settings",
    # Errors
    "ApiError",
    "AuthenticationError",
    "MalformedResponse",
    "NetworkError",
    "NotFound",
    "RateLimited",
    "SpotifyError",
    # Entities
    "AudioFeatures",
    "CursorPage",
    "FullAlbum",
    "FullArtist",
    "FullPlaylist",
    "FullTrack",
    "Page",
    "PlaylistItem",
    "PlaylistSnapshot",
    "PrivateUser",
    "PublicUser",
    "SavedAlbum",
    "SavedTrack",
    "SearchResult",
    "SimplifiedAlbum",
    "SimplifiedArtist",
    "SimplifiedPlaylist",
    "SimplifiedTrack",
    "SpotifyId",
    "TrackLink",
    "TrackPositions",
]
