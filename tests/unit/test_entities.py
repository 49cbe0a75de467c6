"""Tests for the wire object model.

Decoding must be strict about required fields and types, and encoding must
give back what the server sent.
"""

from datetime import UTC, datetime, timedelta

import attrs
import pytest

from spotiwire.domain.entities import (
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
    SavedTrack,
    SearchResult,
    SimplifiedAlbum,
    SimplifiedPlaylist,
    SimplifiedTrack,
    TrackPositions,
)
from spotiwire.domain.exceptions import MalformedResponse
from tests.fixtures.payloads import (
    ARTIST_ID,
    TRACK_ID,
    audio_features_json,
    full_album_json,
    full_artist_json,
    full_playlist_json,
    full_track_json,
    local_playlist_item_json,
    page_json,
    playlist_item_json,
    private_user_json,
    relinked_track_json,
    simplified_playlist_json,
    simplified_track_json,
)


class TestFullTrack:
    """Full track decoding, encoding and validation."""

    def test_decode_then_encode_gives_back_the_payload(self):
        payload = full_track_json()

        track = FullTrack.from_json(payload)

        assert track.to_json() == payload

    def test_decoded_fields(self):
        track = FullTrack.from_json(full_track_json())

        assert track.id == TRACK_ID
        assert track.name == "Cut To The Feeling"
        assert track.duration == timedelta(milliseconds=207959)
        assert track.popularity == 63
        assert track.isrc == "USUM71703861"
        assert track.type is ObjectType.TRACK
        assert track.album.name == "Place In The Sun"
        assert [a.id for a in track.artists] == [ARTIST_ID]
        assert track.available_markets == ("GB", "US")
        assert track.relinking is None

    def test_popularity_is_required(self):
        payload = full_track_json()
        del payload["popularity"]

        with pytest.raises(MalformedResponse) as exc_info:
            FullTrack.from_json(payload)

        assert exc_info.value.path == "popularity"

    @pytest.mark.parametrize("popularity", [-1, 101])
    def test_popularity_out_of_range_is_malformed(self, popularity):
        with pytest.raises(MalformedResponse):
            FullTrack.from_json(full_track_json(popularity=popularity))

    def test_missing_nested_field_reports_its_path(self):
        payload = full_track_json()
        del payload["album"]["artists"][0]["name"]

        with pytest.raises(MalformedResponse) as exc_info:
            FullTrack.from_json(payload)

        assert exc_info.value.path == "album.artists[0].name"
        assert "album.artists[0].name" in str(exc_info.value)

    def test_wrong_type_is_malformed(self):
        payload = full_track_json()
        payload["explicit"] = "no"

        with pytest.raises(MalformedResponse) as exc_info:
            FullTrack.from_json(payload)

        assert exc_info.value.path == "explicit"

    def test_bool_is_not_accepted_as_integer(self):
        payload = full_track_json()
        payload["disc_number"] = True

        with pytest.raises(MalformedResponse):
            FullTrack.from_json(payload)

    def test_wrong_object_type_is_malformed(self):
        payload = full_track_json()
        payload["type"] = "episode"

        with pytest.raises(MalformedResponse) as exc_info:
            FullTrack.from_json(payload)

        assert exc_info.value.path == "type"

    def test_unknown_keys_are_ignored(self):
        payload = full_track_json()
        payload["something_new"] = {"nested": True}

        track = FullTrack.from_json(payload)

        assert track.name == "Cut To The Feeling"

    def test_nullable_fields_may_be_null(self):
        payload = full_track_json()
        payload["preview_url"] = None

        assert FullTrack.from_json(payload).preview_url is None

    def test_tracks_are_immutable(self):
        track = FullTrack.from_json(full_track_json())

        with pytest.raises(attrs.exceptions.FrozenInstanceError):
            track.name = "changed"  # type: ignore[misc]


class TestRelinking:
    """Market relinking is grouped into an optional sub-record."""

    def test_relinked_track_exposes_original(self):
        track = FullTrack.from_json(relinked_track_json())

        assert track.relinking is not None
        assert track.relinking.was_relinked
        assert track.relinking.is_playable is True
        assert track.relinking.linked_from.id == TRACK_ID
        assert track.available_markets == ()

    def test_relinked_track_encodes_flat_keys(self):
        payload = relinked_track_json()

        assert FullTrack.from_json(payload).to_json() == payload

    def test_restriction_only(self):
        payload = full_track_json()
        payload["is_playable"] = False
        payload["restrictions"] = {"reason": "market"}

        relinking = FullTrack.from_json(payload).relinking

        assert relinking is not None
        assert not relinking.was_relinked
        assert relinking.restrictions.reason == "market"


class TestSimplifiedTrack:
    """Simplified tracks are a strict subset of full tracks."""

    def test_decoding_never_requires_popularity(self):
        payload = simplified_track_json(1)
        assert "popularity" not in payload

        track = SimplifiedTrack.from_json(payload)

        assert track.name == "Track 1"
        assert not hasattr(track, "popularity")

    def test_round_trip(self):
        payload = simplified_track_json(3)

        assert SimplifiedTrack.from_json(payload).to_json() == payload

    def test_missing_markets_stay_missing(self):
        payload = simplified_track_json(1)
        del payload["available_markets"]

        track = SimplifiedTrack.from_json(payload)

        assert track.available_markets is None
        assert "available_markets" not in track.to_json()

    def test_full_track_payload_decodes_as_simplified(self):
        track = SimplifiedTrack.from_json(full_track_json())

        assert track.id == TRACK_ID


class TestSavedTrack:
    def test_added_at_is_utc(self):
        saved = SavedTrack.from_json({"added_at": "2023-09-21T15:48:56Z", "track": full_track_json()})

        assert saved.added_at == datetime(2023, 9, 21, 15, 48, 56, tzinfo=UTC)
        assert saved.to_json()["added_at"] == "2023-09-21T15:48:56Z"

    @pytest.mark.parametrize(
        "added_at", ["2023-09-21T15:48:56.120Z", "2023-09-21T15:48:56.123456Z"]
    )
    def test_fractional_seconds_are_kept(self, added_at):
        payload = {"added_at": added_at, "track": full_track_json()}

        assert SavedTrack.from_json(payload).to_json() == payload

    def test_invalid_timestamp_is_malformed(self):
        with pytest.raises(MalformedResponse) as exc_info:
            SavedTrack.from_json({"added_at": "yesterday", "track": full_track_json()})

        assert exc_info.value.path == "added_at"


class TestTrackPositions:
    """Request value used to remove specific playlist occurrences."""

    def test_accepts_bare_id_and_encodes_uri(self):
        positions = TrackPositions(TRACK_ID, [0, 3])

        assert positions.to_json() == {"uri": f"spotify:track:{TRACK_ID}", "positions": [0, 3]}

    def test_accepts_uri(self):
        positions = TrackPositions(f"spotify:track:{TRACK_ID}", (5,))

        assert positions.id.id == TRACK_ID
        assert positions.positions == (5,)

    def test_negative_position_rejected(self):
        with pytest.raises(ValueError):
            TrackPositions(TRACK_ID, [1, -1])

    @pytest.mark.parametrize("position", ["3", 1.5, True])
    def test_non_integer_position_is_a_value_error(self, position):
        with pytest.raises(ValueError, match="integers"):
            TrackPositions(TRACK_ID, [0, position])

    def test_album_uri_rejected(self):
        with pytest.raises(ValueError):
            TrackPositions("spotify:album:6akEvsycLGftJxYudPjmqK", [0])


class TestAlbumsAndArtists:
    def test_full_album_round_trip(self):
        payload = full_album_json()

        album = FullAlbum.from_json(payload)

        assert album.to_json() == payload
        assert len(album.tracks) == 2
        assert isinstance(album.tracks.items[0], SimplifiedTrack)

    def test_simplified_album_optional_fields(self):
        payload = full_album_json()
        payload["album_group"] = "appears_on"

        album = SimplifiedAlbum.from_json(payload)

        assert album.album_group == "appears_on"
        assert album.total_tracks == 11
        assert album.restrictions is None

    def test_full_artist_round_trip(self):
        payload = full_artist_json()

        artist = FullArtist.from_json(payload)

        assert artist.to_json() == payload
        assert artist.followers.total == 1025
        assert artist.genres == ("australian indie",)


class TestPlaylistsAndUsers:
    def test_full_playlist_round_trip(self):
        payload = full_playlist_json()

        playlist = FullPlaylist.from_json(payload)

        assert playlist.to_json() == payload
        assert playlist.owner.display_name == "JMPerez"
        assert isinstance(playlist.tracks.items[0], PlaylistItem)

    def test_simplified_playlist_round_trip(self):
        payload = simplified_playlist_json()

        playlist = SimplifiedPlaylist.from_json(payload)

        assert playlist.to_json() == payload
        assert playlist.tracks.total == 1

    def test_removed_track_reads_as_none(self):
        payload = playlist_item_json()
        payload["track"] = None

        item = PlaylistItem.from_json(payload)

        assert item.track is None
        assert item.to_json()["track"] is None

    def test_old_items_without_added_metadata(self):
        payload = playlist_item_json()
        payload["added_at"] = None
        payload["added_by"] = None

        item = PlaylistItem.from_json(payload)

        assert item.added_at is None
        assert item.added_by is None

    def test_local_file_item(self):
        payload = local_playlist_item_json()

        item = PlaylistItem.from_json(payload)

        assert item.is_local
        assert item.track.id is None
        assert item.track.album.album_type is None
        assert item.track.album.id is None
        assert item.track.uri.startswith("spotify:local:")
        assert item.to_json() == payload

    def test_private_user_round_trip(self):
        payload = private_user_json()

        user = PrivateUser.from_json(payload)

        assert user.to_json() == payload
        assert user.product == "premium"
        assert user.explicit_content.filter_enabled is False

    def test_public_user_reads_followers_and_images(self):
        user = PublicUser.from_json(private_user_json())

        assert user.followers.total == 4561
        assert user.images == ()

    def test_snapshot(self):
        assert PlaylistSnapshot.from_json({"snapshot_id": "abc"}).snapshot_id == "abc"


class TestAudioFeatures:
    def test_round_trip(self):
        payload = audio_features_json()

        features = AudioFeatures.from_json(payload)

        assert features.to_json() == payload
        assert features.duration == timedelta(milliseconds=237040)
        assert features.type is ObjectType.AUDIO_FEATURES

    def test_integral_numbers_are_accepted_as_floats(self):
        payload = audio_features_json()
        payload["energy"] = 1

        assert AudioFeatures.from_json(payload).energy == 1.0


class TestPaging:
    def test_page_remembers_its_item_parser(self):
        payload = page_json(
            [simplified_track_json(1), simplified_track_json(2)], path="albums/x/tracks", limit=2, total=5
        )

        page = Page.from_json(payload, SimplifiedTrack.from_json)

        assert page.parse_item == SimplifiedTrack.from_json
        assert page.has_next
        assert [t.name for t in page] == ["Track 1", "Track 2"]
        assert page.to_json() == payload

    def test_page_equality_ignores_parser(self):
        payload = page_json([simplified_track_json(1)], path="albums/x/tracks")

        first = Page.from_json(payload, SimplifiedTrack.from_json)
        second = Page.from_json(payload, SimplifiedTrack.from_json)

        assert first == second

    def test_item_paths_are_reported(self):
        payload = page_json([simplified_track_json(1), {"name": "broken"}], path="albums/x/tracks")

        with pytest.raises(MalformedResponse) as exc_info:
            Page.from_json(payload, SimplifiedTrack.from_json)

        assert exc_info.value.path.startswith("items[1].")

    def test_cursor_page(self):
        payload = {
            "href": "https://api.spotify.com/v1/me/following?type=artist&limit=1",
            "items": [full_artist_json()],
            "limit": 1,
            "next": None,
            "cursors": {"after": None},
            "total": 1,
        }

        page = CursorPage.from_json(payload, FullArtist.from_json)

        assert not page.has_next
        assert page.total == 1
        assert page.cursors.after is None
        assert page.to_json() == payload


class TestSearchResult:
    def test_only_requested_types_are_present(self):
        payload = {"tracks": page_json([full_track_json()], path="search")}

        result = SearchResult.from_json(payload)

        assert result.tracks.items[0].id == TRACK_ID
        assert result.albums is None
        assert result.to_json() == payload

    def test_null_items_are_skipped(self):
        payload = {"playlists": page_json([None, simplified_playlist_json(), None], path="search", total=3)}

        result = SearchResult.from_json(payload)

        assert len(result.playlists) == 1
        assert result.playlists.skip_null_items

    def test_other_pages_still_reject_null_items(self):
        payload = page_json([None], path="albums/x/tracks")

        with pytest.raises(MalformedResponse) as exc_info:
            Page.from_json(payload, SimplifiedTrack.from_json)

        assert exc_info.value.path == "items[0]"
