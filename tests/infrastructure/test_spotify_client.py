"""Tests for SpotifyClient endpoints against the fake backend."""

import httpx
import pytest

from spotiwire.domain.entities import (
    FullAlbum,
    FullPlaylist,
    FullTrack,
    PlaylistSnapshot,
    SimplifiedTrack,
    TrackPositions,
)
from spotiwire.domain.exceptions import (
    ApiError,
    AuthenticationError,
    MalformedResponse,
    NetworkError,
    NotFound,
    RateLimited,
)
from spotiwire.infrastructure.auth import ClientCredentialsManager
from spotiwire.infrastructure.connectors import SpotifyClient, SpotifyHttp
from tests.fixtures.payloads import (
    ALBUM_ID,
    PLAYLIST_ID,
    TRACK_ID,
    USER_ID,
    audio_features_json,
    full_album_json,
    full_artist_json,
    full_playlist_json,
    full_track_json,
    page_json,
    private_user_json,
    simplified_playlist_json,
    simplified_track_json,
)

SNAPSHOT = {"snapshot_id": "snap-2"}


class TestReads:
    async def test_track(self, fake_spotify, client):
        fake_spotify.add("GET", f"tracks/{TRACK_ID}", full_track_json())

        track = await client.track(f"spotify:track:{TRACK_ID}")

        assert isinstance(track, FullTrack)
        assert track.id == TRACK_ID
        request = fake_spotify.api_requests[0]
        assert request.headers["Authorization"] == "Bearer access-1"
        assert "market" not in request.url.params

    async def test_market_defaults_to_client_setting(self, fake_spotify, credentials):
        fake_spotify.add("GET", f"tracks/{TRACK_ID}", full_track_json())
        client = SpotifyClient(
            http=SpotifyHttp(credentials=credentials, client=fake_spotify.client()), market="GB"
        )

        await client.track(TRACK_ID)
        await client.track(TRACK_ID, market="SE")

        assert fake_spotify.api_requests[0].url.params["market"] == "GB"
        assert fake_spotify.api_requests[1].url.params["market"] == "SE"

    async def test_tracks_keeps_order_and_nulls(self, fake_spotify, client):
        fake_spotify.add("GET", "tracks", {"tracks": [full_track_json("a1"), None, full_track_json("c3")]})

        tracks = await client.tracks(["a1", "b2", "c3"])

        assert fake_spotify.api_requests[0].url.params["ids"] == "a1,b2,c3"
        assert tracks[0].id == "a1"
        assert tracks[1] is None
        assert tracks[2].id == "c3"

    async def test_album_track_page(self, fake_spotify, client):
        items = [simplified_track_json(1), simplified_track_json(2)]
        fake_spotify.add(
            "GET", f"albums/{ALBUM_ID}/tracks", page_json(items, path=f"albums/{ALBUM_ID}/tracks", limit=2, total=11)
        )

        page = await client.album_track(f"spotify:album:{ALBUM_ID}", limit=2)

        params = fake_spotify.api_requests[0].url.params
        assert params["limit"] == "2"
        assert params["offset"] == "0"
        assert page.total == 11
        assert page.has_next
        assert all(isinstance(t, SimplifiedTrack) for t in page)

    async def test_album(self, fake_spotify, client):
        fake_spotify.add("GET", f"albums/{ALBUM_ID}", full_album_json())

        album = await client.album(f"https://open.spotify.com/album/{ALBUM_ID}")

        assert isinstance(album, FullAlbum)
        assert album.label == "Independent"

    async def test_artist_top_tracks_requires_market(self, fake_spotify, client):
        with pytest.raises(ValueError, match="market"):
            await client.artist_top_tracks("08td7MxkoHQkXnWAYD8d6Q")

        assert fake_spotify.api_requests == []

    async def test_artist_top_tracks(self, fake_spotify, client):
        fake_spotify.add("GET", "artists/08td7MxkoHQkXnWAYD8d6Q/top-tracks", {"tracks": [full_track_json()]})

        tracks = await client.artist_top_tracks("08td7MxkoHQkXnWAYD8d6Q", market="US")

        assert [t.id for t in tracks] == [TRACK_ID]

    async def test_current_user(self, fake_spotify, client):
        fake_spotify.add("GET", "me", private_user_json())

        user = await client.current_user()

        assert user.id == USER_ID
        assert user.email == "jm@example.com"

    async def test_playlist(self, fake_spotify, client):
        fake_spotify.add("GET", f"playlists/{PLAYLIST_ID}", full_playlist_json())

        playlist = await client.playlist(PLAYLIST_ID)

        assert isinstance(playlist, FullPlaylist)
        assert playlist.tracks.items[0].track.id == TRACK_ID

    async def test_audios_features(self, fake_spotify, client):
        fake_spotify.add("GET", "audio-features", {"audio_features": [audio_features_json(), None]})

        features = await client.audios_features([TRACK_ID, "missing"])

        assert features[0].tempo == 118.211
        assert features[1] is None

    async def test_search(self, fake_spotify, client):
        fake_spotify.add("GET", "search", {"tracks": page_json([full_track_json()], path="search")})

        result = await client.search("isrc:USUM71703861", types=["track"], limit=1)

        params = fake_spotify.api_requests[0].url.params
        assert params["q"] == "isrc:USUM71703861"
        assert params["type"] == "track"
        assert result.tracks.items[0].isrc == "USUM71703861"
        assert result.artists is None

    async def test_search_skips_null_items_on_every_page(self, fake_spotify, client):
        pages = {
            "0": page_json([simplified_playlist_json("first"), None], path="search", limit=2, total=4),
            "2": page_json([None, simplified_playlist_json("second")], path="search", offset=2, limit=2, total=4),
        }
        fake_spotify.add(
            "GET",
            "search",
            lambda request: httpx.Response(
                200, json={"playlists": pages[request.url.params.get("offset", "0")]}
            ),
        )

        result = await client.search("focus", types=["playlist"], limit=2)
        playlists = await client.paginate(result.playlists).collect()

        assert [p.id for p in playlists] == ["first", "second"]
        assert len(fake_spotify.api_requests) == 2

    async def test_followed_artists_unwraps_cursor_page(self, fake_spotify, client):
        fake_spotify.add(
            "GET",
            "me/following",
            {
                "artists": {
                    "href": "https://api.spotify.com/v1/me/following?type=artist&limit=20",
                    "items": [full_artist_json()],
                    "limit": 20,
                    "next": None,
                    "cursors": {"after": None},
                    "total": 1,
                }
            },
        )

        page = await client.current_user_followed_artists()

        assert fake_spotify.api_requests[0].url.params["type"] == "artist"
        assert page.items[0].name == "Tania Bowra"
        assert not page.has_next

    async def test_saved_tracks_contains(self, fake_spotify, client):
        fake_spotify.add("GET", "me/tracks/contains", [True, False])

        assert await client.current_user_saved_tracks_contains(["a1", "b2"]) == [True, False]

    async def test_saved_tracks_contains_rejects_bad_shape(self, fake_spotify, client):
        fake_spotify.add("GET", "me/tracks/contains", {"ok": True})

        with pytest.raises(MalformedResponse):
            await client.current_user_saved_tracks_contains(["a1"])


class TestWrites:
    async def test_create_playlist(self, fake_spotify, client):
        fake_spotify.add("POST", f"users/{USER_ID}/playlists", full_playlist_json())

        playlist = await client.user_playlist_create(USER_ID, "Test Playlist", public=False, description="d")

        assert fake_spotify.last_json() == {
            "name": "Test Playlist",
            "public": False,
            "collaborative": False,
            "description": "d",
        }
        assert playlist.name == "Test Playlist"

    async def test_add_tracks(self, fake_spotify, client):
        fake_spotify.add("POST", f"playlists/{PLAYLIST_ID}/tracks", SNAPSHOT)

        snapshot = await client.playlist_add_tracks(PLAYLIST_ID, ["a1", "spotify:track:b2"], position=0)

        assert snapshot == PlaylistSnapshot("snap-2")
        assert fake_spotify.last_json() == {
            "uris": ["spotify:track:a1", "spotify:track:b2"],
            "position": 0,
        }

    async def test_replace_with_nothing_clears(self, fake_spotify, client):
        fake_spotify.add("PUT", f"playlists/{PLAYLIST_ID}/tracks", SNAPSHOT)

        await client.playlist_replace_tracks(PLAYLIST_ID, [])

        assert fake_spotify.last_json() == {"uris": []}

    async def test_reorder(self, fake_spotify, client):
        fake_spotify.add("PUT", f"playlists/{PLAYLIST_ID}/tracks", SNAPSHOT)

        await client.playlist_reorder_tracks(PLAYLIST_ID, range_start=3, insert_before=0, snapshot_id="snap-1")

        assert fake_spotify.last_json() == {
            "range_start": 3,
            "insert_before": 0,
            "range_length": 1,
            "snapshot_id": "snap-1",
        }

    async def test_remove_all_occurrences(self, fake_spotify, client):
        fake_spotify.add("DELETE", f"playlists/{PLAYLIST_ID}/tracks", SNAPSHOT)

        await client.playlist_remove_all_occurrences_of_tracks(PLAYLIST_ID, ["a1"])

        assert fake_spotify.last_json() == {"tracks": [{"uri": "spotify:track:a1"}]}

    async def test_remove_specific_occurrences(self, fake_spotify, client):
        fake_spotify.add("DELETE", f"playlists/{PLAYLIST_ID}/tracks", SNAPSHOT)

        await client.playlist_remove_specific_occurrences_of_tracks(
            PLAYLIST_ID,
            [TrackPositions("a1", [0, 3]), TrackPositions("b2", [7])],
            snapshot_id="snap-1",
        )

        assert fake_spotify.last_json() == {
            "tracks": [
                {"uri": "spotify:track:a1", "positions": [0, 3]},
                {"uri": "spotify:track:b2", "positions": [7]},
            ],
            "snapshot_id": "snap-1",
        }

    async def test_save_tracks_returns_none_for_empty_body(self, fake_spotify, client):
        fake_spotify.add("PUT", "me/tracks", httpx.Response(200))

        assert await client.current_user_saved_tracks_add(["a1", "b2"]) is None
        assert fake_spotify.last_json() == {"ids": ["a1", "b2"]}


class TestInputValidation:
    """Bad arguments fail before anything is sent, token exchange included."""

    @pytest.mark.parametrize("limit", [0, 51, -1, True])
    async def test_limit_out_of_range(self, fake_spotify, client, limit):
        with pytest.raises(ValueError):
            await client.album_track(ALBUM_ID, limit=limit)

        assert fake_spotify.api_requests == []
        assert fake_spotify.token_requests == []

    async def test_negative_offset(self, fake_spotify, client):
        with pytest.raises(ValueError):
            await client.album_track(ALBUM_ID, offset=-1)

    async def test_wrong_kind_of_uri(self, fake_spotify, client):
        with pytest.raises(ValueError):
            await client.track(f"spotify:album:{ALBUM_ID}")

        assert fake_spotify.api_requests == []

    async def test_batch_caps(self, client):
        with pytest.raises(ValueError):
            await client.tracks([f"t{i}" for i in range(51)])
        with pytest.raises(ValueError):
            await client.albums([f"a{i}" for i in range(21)])
        with pytest.raises(ValueError):
            await client.audios_features([f"t{i}" for i in range(101)])

    async def test_playlist_page_allows_hundred(self, fake_spotify, client):
        fake_spotify.add("GET", f"playlists/{PLAYLIST_ID}/tracks", page_json([], path="x", limit=100))

        page = await client.playlist_tracks(PLAYLIST_ID, limit=100)

        assert len(page) == 0

    async def test_unknown_search_type(self, client):
        with pytest.raises(ValueError):
            await client.search("abba", types=["podcast"])

    async def test_empty_query(self, client):
        with pytest.raises(ValueError):
            await client.search("  ")

    async def test_collaborative_public_playlist(self, client):
        with pytest.raises(ValueError):
            await client.user_playlist_create(USER_ID, "x", public=True, collaborative=True)


class TestErrorMapping:
    """Every failure surfaces as a typed error and nothing is retried."""

    async def test_not_found(self, fake_spotify, client):
        with pytest.raises(NotFound) as exc_info:
            await client.track(TRACK_ID)

        assert exc_info.value.status_code == 404
        assert exc_info.value.message == "Non existing id"

    async def test_rate_limited_carries_retry_after(self, fake_spotify, client):
        fake_spotify.add(
            "GET",
            f"tracks/{TRACK_ID}",
            httpx.Response(429, headers={"Retry-After": "3"}, json={"error": {"status": 429, "message": "API rate limit exceeded"}}),
        )

        with pytest.raises(RateLimited) as exc_info:
            await client.track(TRACK_ID)

        assert exc_info.value.retry_after == 3.0
        assert len(fake_spotify.api_requests) == 1

    async def test_rate_limited_without_header(self, fake_spotify, client):
        fake_spotify.add("GET", f"tracks/{TRACK_ID}", httpx.Response(429))

        with pytest.raises(RateLimited) as exc_info:
            await client.track(TRACK_ID)

        assert exc_info.value.retry_after is None

    async def test_unauthorized_drops_cached_token(self, fake_spotify, client, credentials):
        fake_spotify.add(
            "GET",
            f"tracks/{TRACK_ID}",
            httpx.Response(401, json={"error": {"status": 401, "message": "The access token expired"}}),
        )

        with pytest.raises(AuthenticationError, match="expired"):
            await client.track(TRACK_ID)

        assert credentials.token is None

    async def test_server_error(self, fake_spotify, client):
        fake_spotify.add("GET", f"tracks/{TRACK_ID}", httpx.Response(503, text="Service Unavailable"))

        with pytest.raises(ApiError) as exc_info:
            await client.track(TRACK_ID)

        assert exc_info.value.status_code == 503
        assert not isinstance(exc_info.value, NotFound)

    async def test_body_that_is_not_json(self, fake_spotify, client):
        fake_spotify.add("GET", f"tracks/{TRACK_ID}", httpx.Response(200, text="not json"))

        with pytest.raises(MalformedResponse):
            await client.track(TRACK_ID)

    async def test_response_missing_required_field(self, fake_spotify, client):
        payload = full_track_json()
        del payload["name"]
        fake_spotify.add("GET", f"tracks/{TRACK_ID}", payload)

        with pytest.raises(MalformedResponse) as exc_info:
            await client.track(TRACK_ID)

        assert exc_info.value.path == "name"

    async def test_transport_failure(self, credentials):
        def fail(request):
            raise httpx.ReadTimeout("timed out", request=request)

        http = SpotifyHttp(credentials=credentials, client=httpx.AsyncClient(transport=httpx.MockTransport(fail)))
        client = SpotifyClient(http=http)

        with pytest.raises(NetworkError):
            await client.track(TRACK_ID)

    async def test_authentication_failure_surfaces_from_token_exchange(self, fake_spotify):
        fake_spotify.token_responses = [httpx.Response(401, json={"error": "invalid_client"})]
        credentials = ClientCredentialsManager("id", "secret", http_client=fake_spotify.client())
        client = SpotifyClient(http=SpotifyHttp(credentials=credentials, client=fake_spotify.client()))

        with pytest.raises(AuthenticationError):
            await client.track(TRACK_ID)

        assert fake_spotify.api_requests == []


class TestLifecycle:
    async def test_injected_client_is_left_open(self, fake_spotify, credentials):
        http_client = fake_spotify.client()

        async with SpotifyClient(http=SpotifyHttp(credentials=credentials, client=http_client)):
            pass

        assert not http_client.is_closed

    async def test_owned_client_is_closed(self, credentials):
        http = SpotifyHttp(credentials=credentials)
        owned = http._http()

        async with SpotifyClient(http=http):
            pass

        assert owned.is_closed
        assert http.client is None
