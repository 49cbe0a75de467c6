"""Spotify Web API client with typed responses.

This module provides one coroutine per Web API endpoint. Every method checks
its arguments before touching the network (bad ids, limits out of range and
oversized batches raise ValueError), sends a single request through
SpotifyHttp and decodes the JSON into the immutable entities of
``spotiwire.domain.entities``.

Key components:
- SpotifyClient: the endpoint methods, grouped by resource
- Paging helpers: next_page, previous_page and paginate for any page the
  client returned

Ids may be passed as bare ids, ``spotify:`` URIs or open.spotify.com URLs.
Rate limiting surfaces as RateLimited; see ``retry.retry_on_rate_limit`` for
an opt-in retry.
"""

from collections.abc import Callable, Mapping, Sequence
from typing import Any, Self
from urllib.parse import quote

from attrs import define
import httpx

from spotiwire.config import Settings, get_logger, resilient_operation, settings
from spotiwire.domain.entities import (
    SEARCH_TYPES,
    AudioFeatures,
    CursorPage,
    FullAlbum,
    FullArtist,
    FullPlaylist,
    FullTrack,
    ObjectType,
    Page,
    PlaylistItem,
    PlaylistSnapshot,
    PrivateUser,
    PublicUser,
    SavedAlbum,
    SavedTrack,
    SearchResult,
    SimplifiedAlbum,
    SimplifiedPlaylist,
    SimplifiedTrack,
    SpotifyId,
    TrackPositions,
    parse_ids,
)
from spotiwire.domain.entities.shared import as_object, join, require
from spotiwire.domain.exceptions import MalformedResponse
from spotiwire.infrastructure.auth import CredentialManager, credentials_from_settings
from spotiwire.infrastructure.connectors.base_connector import SpotifyHttp
from spotiwire.infrastructure.connectors.pagination import AnyPage, Paginator

logger = get_logger(__name__).bind(service="spotify")

# Batch caps imposed by the Web API
MAX_TRACKS_PER_REQUEST = 50
MAX_ALBUMS_PER_REQUEST = 20
MAX_ARTISTS_PER_REQUEST = 50
MAX_AUDIO_FEATURES_PER_REQUEST = 100
MAX_PLAYLIST_ITEMS_PER_REQUEST = 100
MAX_LIBRARY_IDS_PER_REQUEST = 50
MAX_SEARCH_OFFSET = 1000

ALBUM_GROUPS = frozenset({"album", "single", "appears_on", "compilation"})


# =============================================================================
# ARGUMENT CHECKS
# =============================================================================


def _check_limit(limit: int, maximum: int = 50) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int) or not 1 <= limit <= maximum:
        raise ValueError(f"limit must be an integer between 1 and {maximum}, got {limit!r}")
    return limit


def _check_offset(offset: int, maximum: int | None = None) -> int:
    if isinstance(offset, bool) or not isinstance(offset, int) or offset < 0:
        raise ValueError(f"offset must be a non-negative integer, got {offset!r}")
    if maximum is not None and offset > maximum:
        raise ValueError(f"offset must not exceed {maximum}, got {offset}")
    return offset


def _id(value: str | SpotifyId, kind: ObjectType) -> str:
    return quote(SpotifyId.parse(value, kind).id, safe="")


def _track_uris(track_ids: Sequence[str | SpotifyId], *, allow_empty: bool = False) -> list[str]:
    if allow_empty and not isinstance(track_ids, str) and len(track_ids) == 0:
        return []
    ids = parse_ids(track_ids, ObjectType.TRACK, limit=MAX_PLAYLIST_ITEMS_PER_REQUEST)
    return [track_id.uri for track_id in ids]


# =============================================================================
# RESPONSE DECODING
# =============================================================================


def _nullable_list[T](
    data: Any, key: str, parse: Callable[[Mapping[str, Any], str], T]
) -> tuple[T | None, ...]:
    """Decode a multi-get response, where unknown ids come back as null."""
    items = require(as_object(data), key, list)
    return tuple(
        parse(as_object(item, join(key, i)), join(key, i)) if item is not None else None
        for i, item in enumerate(items)
    )


def _unwrap(data: Any) -> Mapping[str, Any]:
    """Strip the single-key wrapper some endpoints put around a paging object.

    Search and followed-artists responses look like ``{"artists": {...page}}``,
    and so do the ``next`` links they hand out.
    """
    data = as_object(data)
    if "items" not in data and len(data) == 1:
        (inner,) = data.values()
        return as_object(inner, next(iter(data)))
    return data


@define(slots=True)
class SpotifyClient:
    """Typed async client for the Spotify Web API.

    Use as an async context manager, or call ``aclose`` when done:

        >>> async with SpotifyClient.from_settings() as client:
        ...     album = await client.album("spotify:album:6akEvsycLGftJxYudPjmqK")

    Attributes:
        http: Authenticated transport used for every request
        market: Default ISO 3166-1 market applied when a call gives none
    """

    http: SpotifyHttp
    market: str | None = None

    @classmethod
    def from_settings(
        cls,
        config: Settings | None = None,
        *,
        credentials: CredentialManager | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> Self:
        """Build a client from configuration.

        Uses the authorization-code grant when a refresh token is configured
        and the client-credentials grant otherwise.
        """
        config = config or settings
        if credentials is None:
            credentials = credentials_from_settings(config, http_client=http_client)

        logger.debug("Initializing Spotify client", grant=type(credentials).__name__)
        http = SpotifyHttp(
            credentials=credentials,
            base_url=config.api.base_url,
            timeout=config.api.timeout,
            client=http_client,
        )
        return cls(http=http, market=config.api.default_market)

    async def aclose(self) -> None:
        await self.http.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def _market(self, market: str | None) -> str | None:
        return market if market is not None else self.market

    # -------------------------------------------------------------------------
    # Tracks
    # -------------------------------------------------------------------------

    @resilient_operation("get_track")
    async def track(self, track_id: str | SpotifyId, market: str | None = None) -> FullTrack:
        """Get a single track.

        Args:
            track_id: Track id, URI or URL
            market: Enables track relinking for this market

        Returns:
            The full track; ``relinking`` is set when a market was given
        """
        path = f"tracks/{_id(track_id, ObjectType.TRACK)}"
        data = await self.http.get(path, {"market": self._market(market)})
        return FullTrack.from_json(data)

    @resilient_operation("get_tracks")
    async def tracks(
        self, track_ids: Sequence[str | SpotifyId], market: str | None = None
    ) -> tuple[FullTrack | None, ...]:
        """Get up to 50 tracks in one request.

        Returns:
            Tracks in request order; None where an id is unknown
        """
        ids = parse_ids(track_ids, ObjectType.TRACK, limit=MAX_TRACKS_PER_REQUEST)
        data = await self.http.get(
            "tracks", {"ids": ",".join(str(i) for i in ids), "market": self._market(market)}
        )
        return _nullable_list(data, "tracks", FullTrack.from_json)

    # -------------------------------------------------------------------------
    # Albums
    # -------------------------------------------------------------------------

    @resilient_operation("get_album")
    async def album(self, album_id: str | SpotifyId, market: str | None = None) -> FullAlbum:
        path = f"albums/{_id(album_id, ObjectType.ALBUM)}"
        data = await self.http.get(path, {"market": self._market(market)})
        return FullAlbum.from_json(data)

    @resilient_operation("get_albums")
    async def albums(
        self, album_ids: Sequence[str | SpotifyId], market: str | None = None
    ) -> tuple[FullAlbum | None, ...]:
        """Get up to 20 albums in one request."""
        ids = parse_ids(album_ids, ObjectType.ALBUM, limit=MAX_ALBUMS_PER_REQUEST)
        data = await self.http.get(
            "albums", {"ids": ",".join(str(i) for i in ids), "market": self._market(market)}
        )
        return _nullable_list(data, "albums", FullAlbum.from_json)

    @resilient_operation("get_album_tracks")
    async def album_track(
        self,
        album_id: str | SpotifyId,
        limit: int = 50,
        offset: int = 0,
        market: str | None = None,
    ) -> Page[SimplifiedTrack]:
        """Get one page of an album's tracks.

        Args:
            album_id: Album id, URI or URL
            limit: Page size, 1 to 50
            offset: Index of the first track to return
            market: Enables track relinking for this market
        """
        path = f"albums/{_id(album_id, ObjectType.ALBUM)}/tracks"
        params = {
            "limit": _check_limit(limit),
            "offset": _check_offset(offset),
            "market": self._market(market),
        }
        data = await self.http.get(path, params)
        return Page.from_json(data, SimplifiedTrack.from_json)

    # -------------------------------------------------------------------------
    # Artists
    # -------------------------------------------------------------------------

    @resilient_operation("get_artist")
    async def artist(self, artist_id: str | SpotifyId) -> FullArtist:
        data = await self.http.get(f"artists/{_id(artist_id, ObjectType.ARTIST)}")
        return FullArtist.from_json(data)

    @resilient_operation("get_artists")
    async def artists(self, artist_ids: Sequence[str | SpotifyId]) -> tuple[FullArtist | None, ...]:
        """Get up to 50 artists in one request."""
        ids = parse_ids(artist_ids, ObjectType.ARTIST, limit=MAX_ARTISTS_PER_REQUEST)
        data = await self.http.get("artists", {"ids": ",".join(str(i) for i in ids)})
        return _nullable_list(data, "artists", FullArtist.from_json)

    @resilient_operation("get_artist_albums")
    async def artist_albums(
        self,
        artist_id: str | SpotifyId,
        include_groups: Sequence[str] | None = None,
        market: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Page[SimplifiedAlbum]:
        """Get one page of an artist's discography.

        Args:
            include_groups: Any of ``album``, ``single``, ``appears_on`` and
                ``compilation``; all groups when omitted
        """
        groups = None
        if include_groups is not None:
            unknown = set(include_groups) - ALBUM_GROUPS
            if unknown or not include_groups:
                raise ValueError(f"include_groups must be a non-empty subset of {sorted(ALBUM_GROUPS)}")
            groups = ",".join(include_groups)

        path = f"artists/{_id(artist_id, ObjectType.ARTIST)}/albums"
        params = {
            "include_groups": groups,
            "market": self._market(market),
            "limit": _check_limit(limit),
            "offset": _check_offset(offset),
        }
        data = await self.http.get(path, params)
        return Page.from_json(data, SimplifiedAlbum.from_json)

    @resilient_operation("get_artist_top_tracks")
    async def artist_top_tracks(
        self, artist_id: str | SpotifyId, market: str | None = None
    ) -> tuple[FullTrack, ...]:
        """Get an artist's top tracks in a market (required by the API)."""
        resolved = self._market(market)
        if not resolved:
            raise ValueError("artist_top_tracks requires a market")

        path = f"artists/{_id(artist_id, ObjectType.ARTIST)}/top-tracks"
        data = await self.http.get(path, {"market": resolved})
        tracks = require(as_object(data), "tracks", list)
        return tuple(FullTrack.from_json(t, join("tracks", i)) for i, t in enumerate(tracks))

    @resilient_operation("get_artist_related_artists")
    async def artist_related_artists(self, artist_id: str | SpotifyId) -> tuple[FullArtist, ...]:
        path = f"artists/{_id(artist_id, ObjectType.ARTIST)}/related-artists"
        data = await self.http.get(path)
        artists = require(as_object(data), "artists", list)
        return tuple(FullArtist.from_json(a, join("artists", i)) for i, a in enumerate(artists))

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    @resilient_operation("get_user")
    async def user(self, user_id: str | SpotifyId) -> PublicUser:
        data = await self.http.get(f"users/{_id(user_id, ObjectType.USER)}")
        return PublicUser.from_json(data)

    @resilient_operation("get_current_user")
    async def current_user(self) -> PrivateUser:
        """Get the profile of the user who authorized the token."""
        return PrivateUser.from_json(await self.http.get("me"))

    # -------------------------------------------------------------------------
    # Playlists
    # -------------------------------------------------------------------------

    @resilient_operation("get_playlist")
    async def playlist(self, playlist_id: str | SpotifyId, market: str | None = None) -> FullPlaylist:
        path = f"playlists/{_id(playlist_id, ObjectType.PLAYLIST)}"
        data = await self.http.get(path, {"market": self._market(market)})
        return FullPlaylist.from_json(data)

    @resilient_operation("get_playlist_tracks")
    async def playlist_tracks(
        self,
        playlist_id: str | SpotifyId,
        limit: int = 100,
        offset: int = 0,
        market: str | None = None,
    ) -> Page[PlaylistItem]:
        """Get one page of a playlist's items (up to 100 per page)."""
        path = f"playlists/{_id(playlist_id, ObjectType.PLAYLIST)}/tracks"
        params = {
            "limit": _check_limit(limit, MAX_PLAYLIST_ITEMS_PER_REQUEST),
            "offset": _check_offset(offset),
            "market": self._market(market),
        }
        data = await self.http.get(path, params)
        return Page.from_json(data, PlaylistItem.from_json)

    @resilient_operation("get_user_playlists")
    async def user_playlists(
        self, user_id: str | SpotifyId, limit: int = 50, offset: int = 0
    ) -> Page[SimplifiedPlaylist]:
        path = f"users/{_id(user_id, ObjectType.USER)}/playlists"
        data = await self.http.get(path, {"limit": _check_limit(limit), "offset": _check_offset(offset)})
        return Page.from_json(data, SimplifiedPlaylist.from_json)

    @resilient_operation("get_current_user_playlists")
    async def current_user_playlists(self, limit: int = 50, offset: int = 0) -> Page[SimplifiedPlaylist]:
        data = await self.http.get(
            "me/playlists", {"limit": _check_limit(limit), "offset": _check_offset(offset)}
        )
        return Page.from_json(data, SimplifiedPlaylist.from_json)

    @resilient_operation("create_playlist")
    async def user_playlist_create(
        self,
        user_id: str | SpotifyId,
        name: str,
        public: bool = True,
        description: str | None = None,
        collaborative: bool = False,
    ) -> FullPlaylist:
        """Create an empty playlist owned by ``user_id``.

        Collaborative playlists must be private.
        """
        if not name or not name.strip():
            raise ValueError("Playlist name must not be empty")
        if collaborative and public:
            raise ValueError("A collaborative playlist cannot be public")

        body: dict[str, Any] = {"name": name, "public": public, "collaborative": collaborative}
        if description is not None:
            body["description"] = description

        data = await self.http.post(f"users/{_id(user_id, ObjectType.USER)}/playlists", body)
        playlist = FullPlaylist.from_json(data)
        logger.info(f"Created playlist '{playlist.name}'", playlist_id=playlist.id)
        return playlist

    @resilient_operation("add_playlist_tracks")
    async def playlist_add_tracks(
        self,
        playlist_id: str | SpotifyId,
        track_ids: Sequence[str | SpotifyId],
        position: int | None = None,
    ) -> PlaylistSnapshot:
        """Append up to 100 tracks, or insert them at ``position``."""
        body: dict[str, Any] = {"uris": _track_uris(track_ids)}
        if position is not None:
            body["position"] = _check_offset(position)

        path = f"playlists/{_id(playlist_id, ObjectType.PLAYLIST)}/tracks"
        return PlaylistSnapshot.from_json(await self.http.post(path, body))

    @resilient_operation("replace_playlist_tracks")
    async def playlist_replace_tracks(
        self, playlist_id: str | SpotifyId, track_ids: Sequence[str | SpotifyId]
    ) -> PlaylistSnapshot:
        """Replace all items with up to 100 tracks; an empty list clears the playlist."""
        body = {"uris": _track_uris(track_ids, allow_empty=True)}
        path = f"playlists/{_id(playlist_id, ObjectType.PLAYLIST)}/tracks"
        return PlaylistSnapshot.from_json(await self.http.put(path, body))

    @resilient_operation("reorder_playlist_tracks")
    async def playlist_reorder_tracks(
        self,
        playlist_id: str | SpotifyId,
        range_start: int,
        insert_before: int,
        range_length: int = 1,
        snapshot_id: str | None = None,
    ) -> PlaylistSnapshot:
        """Move ``range_length`` items starting at ``range_start`` before ``insert_before``."""
        if isinstance(range_length, bool) or not isinstance(range_length, int) or range_length < 1:
            raise ValueError(f"range_length must be a positive integer, got {range_length!r}")

        body: dict[str, Any] = {
            "range_start": _check_offset(range_start),
            "insert_before": _check_offset(insert_before),
            "range_length": range_length,
        }
        if snapshot_id is not None:
            body["snapshot_id"] = snapshot_id

        path = f"playlists/{_id(playlist_id, ObjectType.PLAYLIST)}/tracks"
        return PlaylistSnapshot.from_json(await self.http.put(path, body))

    @resilient_operation("remove_playlist_tracks")
    async def playlist_remove_all_occurrences_of_tracks(
        self,
        playlist_id: str | SpotifyId,
        track_ids: Sequence[str | SpotifyId],
        snapshot_id: str | None = None,
    ) -> PlaylistSnapshot:
        """Remove every occurrence of up to 100 tracks."""
        body: dict[str, Any] = {"tracks": [{"uri": uri} for uri in _track_uris(track_ids)]}
        if snapshot_id is not None:
            body["snapshot_id"] = snapshot_id

        path = f"playlists/{_id(playlist_id, ObjectType.PLAYLIST)}/tracks"
        return PlaylistSnapshot.from_json(await self.http.delete(path, body))

    @resilient_operation("remove_playlist_track_positions")
    async def playlist_remove_specific_occurrences_of_tracks(
        self,
        playlist_id: str | SpotifyId,
        tracks: Sequence[TrackPositions],
        snapshot_id: str | None = None,
    ) -> PlaylistSnapshot:
        """Remove tracks only at the given positions.

        Example:
            >>> await client.playlist_remove_specific_occurrences_of_tracks(
            ...     playlist_id, [TrackPositions("4iV5W9uYEdYUVa79Axb7Rh", [0, 3])]
            ... )
        """
        if not tracks:
            raise ValueError("At least one track is required")
        if len(tracks) > MAX_PLAYLIST_ITEMS_PER_REQUEST:
            raise ValueError(f"At most {MAX_PLAYLIST_ITEMS_PER_REQUEST} tracks per request, got {len(tracks)}")
        if not all(isinstance(t, TrackPositions) for t in tracks):
            raise ValueError("tracks must be TrackPositions values")

        body: dict[str, Any] = {"tracks": [t.to_json() for t in tracks]}
        if snapshot_id is not None:
            body["snapshot_id"] = snapshot_id

        path = f"playlists/{_id(playlist_id, ObjectType.PLAYLIST)}/tracks"
        return PlaylistSnapshot.from_json(await self.http.delete(path, body))

    # -------------------------------------------------------------------------
    # Library
    # -------------------------------------------------------------------------

    @resilient_operation("get_saved_tracks")
    async def current_user_saved_tracks(
        self, limit: int = 20, offset: int = 0, market: str | None = None
    ) -> Page[SavedTrack]:
        params = {
            "limit": _check_limit(limit),
            "offset": _check_offset(offset),
            "market": self._market(market),
        }
        return Page.from_json(await self.http.get("me/tracks", params), SavedTrack.from_json)

    @resilient_operation("save_tracks")
    async def current_user_saved_tracks_add(self, track_ids: Sequence[str | SpotifyId]) -> None:
        ids = parse_ids(track_ids, ObjectType.TRACK, limit=MAX_LIBRARY_IDS_PER_REQUEST)
        await self.http.put("me/tracks", {"ids": [str(i) for i in ids]})

    @resilient_operation("unsave_tracks")
    async def current_user_saved_tracks_delete(self, track_ids: Sequence[str | SpotifyId]) -> None:
        ids = parse_ids(track_ids, ObjectType.TRACK, limit=MAX_LIBRARY_IDS_PER_REQUEST)
        await self.http.delete("me/tracks", {"ids": [str(i) for i in ids]})

    @resilient_operation("check_saved_tracks")
    async def current_user_saved_tracks_contains(
        self, track_ids: Sequence[str | SpotifyId]
    ) -> list[bool]:
        """Check which tracks are in the user's library, in request order."""
        ids = parse_ids(track_ids, ObjectType.TRACK, limit=MAX_LIBRARY_IDS_PER_REQUEST)
        data = await self.http.get("me/tracks/contains", {"ids": ",".join(str(i) for i in ids)})
        if not isinstance(data, list) or not all(isinstance(flag, bool) for flag in data):
            raise MalformedResponse("expected a list of booleans")
        if len(data) != len(ids):
            raise MalformedResponse(f"expected {len(ids)} flags, got {len(data)}")
        return data

    @resilient_operation("get_saved_albums")
    async def current_user_saved_albums(
        self, limit: int = 20, offset: int = 0, market: str | None = None
    ) -> Page[SavedAlbum]:
        params = {
            "limit": _check_limit(limit),
            "offset": _check_offset(offset),
            "market": self._market(market),
        }
        return Page.from_json(await self.http.get("me/albums", params), SavedAlbum.from_json)

    @resilient_operation("get_followed_artists")
    async def current_user_followed_artists(
        self, limit: int = 20, after: str | None = None
    ) -> CursorPage[FullArtist]:
        """Get one cursor page of followed artists, starting after artist id ``after``."""
        params = {"type": "artist", "limit": _check_limit(limit), "after": after}
        data = await self.http.get("me/following", params)
        return CursorPage.from_json(_unwrap(data), FullArtist.from_json)

    # -------------------------------------------------------------------------
    # Audio features
    # -------------------------------------------------------------------------

    @resilient_operation("get_audio_features")
    async def audio_features(self, track_id: str | SpotifyId) -> AudioFeatures:
        data = await self.http.get(f"audio-features/{_id(track_id, ObjectType.TRACK)}")
        return AudioFeatures.from_json(data)

    @resilient_operation("get_audios_features")
    async def audios_features(
        self, track_ids: Sequence[str | SpotifyId]
    ) -> tuple[AudioFeatures | None, ...]:
        """Get audio features for up to 100 tracks; None where none exist."""
        ids = parse_ids(track_ids, ObjectType.TRACK, limit=MAX_AUDIO_FEATURES_PER_REQUEST)
        data = await self.http.get("audio-features", {"ids": ",".join(str(i) for i in ids)})
        return _nullable_list(data, "audio_features", AudioFeatures.from_json)

    # -------------------------------------------------------------------------
    # Search
    # -------------------------------------------------------------------------

    @resilient_operation("search")
    async def search(
        self,
        query: str,
        types: Sequence[str] = ("track",),
        market: str | None = None,
        limit: int = 10,
        offset: int = 0,
    ) -> SearchResult:
        """Search the catalogue.

        Args:
            query: Search query, supports field filters like ``isrc:``
            types: Any of ``album``, ``artist``, ``playlist`` and ``track``
            market: Only return content playable in this market

        Returns:
            One page per requested type
        """
        if not query or not query.strip():
            raise ValueError("Search query must not be empty")
        if isinstance(types, str):
            types = (types,)
        unknown = set(types) - set(SEARCH_TYPES)
        if not types or unknown:
            raise ValueError(f"types must be a non-empty subset of {list(SEARCH_TYPES)}")

        params = {
            "q": query,
            "type": ",".join(types),
            "market": self._market(market),
            "limit": _check_limit(limit),
            "offset": _check_offset(offset, MAX_SEARCH_OFFSET),
        }
        return SearchResult.from_json(await self.http.get("search", params))

    # -------------------------------------------------------------------------
    # Paging
    # -------------------------------------------------------------------------

    async def _follow[T](self, page: AnyPage[T], url: str) -> AnyPage[T]:
        if page.parse_item is None:
            raise ValueError("Page has no item parser; it was not returned by this client")

        data = _unwrap(await self.http.get(url))
        if isinstance(page, CursorPage):
            return CursorPage.from_json(data, page.parse_item)
        return Page.from_json(data, page.parse_item, skip_null_items=page.skip_null_items)

    @resilient_operation("get_next_page")
    async def next_page[T](self, page: AnyPage[T]) -> AnyPage[T] | None:
        """Fetch the page after ``page``, or None if it is the last one."""
        if page.next is None:
            return None
        return await self._follow(page, page.next)

    @resilient_operation("get_previous_page")
    async def previous_page[T](self, page: Page[T]) -> Page[T] | None:
        """Fetch the page before ``page``, or None if it is the first one."""
        if not isinstance(page, Page):
            raise ValueError("Only offset-based pages can be walked backwards")
        if page.previous is None:
            return None
        return await self._follow(page, page.previous)

    def paginate[T](self, page: AnyPage[T]) -> Paginator[T]:
        """Iterate over every item of ``page`` and of all pages after it."""
        return Paginator(page=page, fetch_next=self.next_page)
