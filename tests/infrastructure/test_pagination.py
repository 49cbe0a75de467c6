"""Tests for lazy pagination over paged results."""

from urllib.parse import parse_qs

import httpx
import pytest

from spotiwire.domain.entities import Page, SimplifiedTrack
from spotiwire.infrastructure.connectors import Paginator
from tests.fixtures.payloads import ALBUM_ID, page_json, simplified_track_json

TRACKS_PATH = f"albums/{ALBUM_ID}/tracks"


@pytest.fixture
def album_with_five_tracks(fake_spotify):
    """Album track listing served as three pages of 2, 2 and 1 tracks."""
    tracks = [simplified_track_json(n) for n in range(1, 6)]

    def serve(request: httpx.Request) -> httpx.Response:
        query = parse_qs(request.url.query.decode())
        offset = int(query.get("offset", ["0"])[0])
        limit = int(query.get("limit", ["2"])[0])
        page = page_json(tracks[offset : offset + limit], path=TRACKS_PATH, offset=offset, limit=limit, total=5)
        return httpx.Response(200, json=page)

    fake_spotify.add("GET", TRACKS_PATH, serve)
    return tracks


class TestPaginator:
    async def test_three_pages_three_fetches(self, fake_spotify, client, album_with_five_tracks):
        first = await client.album_track(ALBUM_ID, limit=2)

        names = [track.name async for track in client.paginate(first)]

        assert names == ["Track 1", "Track 2", "Track 3", "Track 4", "Track 5"]
        assert len(fake_spotify.api_requests) == 3
        offsets = [r.url.params["offset"] for r in fake_spotify.api_requests]
        assert offsets == ["0", "2", "4"]

    async def test_next_page_is_fetched_lazily(self, fake_spotify, client, album_with_five_tracks):
        first = await client.album_track(ALBUM_ID, limit=2)
        paginator = client.paginate(first)

        assert [await anext(paginator), await anext(paginator)][-1].name == "Track 2"
        assert len(fake_spotify.api_requests) == 1

        assert (await anext(paginator)).name == "Track 3"
        assert len(fake_spotify.api_requests) == 2
        assert paginator.pages_fetched == 1

    async def test_exhausted_paginator_stays_exhausted(self, fake_spotify, client, album_with_five_tracks):
        first = await client.album_track(ALBUM_ID, limit=2)
        paginator = client.paginate(first)

        assert len(await paginator.collect()) == 5
        assert await paginator.collect() == []
        assert len(fake_spotify.api_requests) == 3

    async def test_collect_with_limit_stops_early(self, fake_spotify, client, album_with_five_tracks):
        first = await client.album_track(ALBUM_ID, limit=2)

        items = await client.paginate(first).collect(limit=3)

        assert [t.name for t in items] == ["Track 1", "Track 2", "Track 3"]
        assert len(fake_spotify.api_requests) == 2

    async def test_single_page_needs_no_fetch(self):
        page = Page.from_json(
            page_json([simplified_track_json(1)], path=TRACKS_PATH), SimplifiedTrack.from_json
        )

        async def never(_page):
            raise AssertionError("no further page should be requested")

        assert [t.name async for t in Paginator(page=page, fetch_next=never)] == ["Track 1"]

    async def test_stops_at_reported_total_even_with_next_link(self):
        payload = page_json([simplified_track_json(1), simplified_track_json(2)], path=TRACKS_PATH, limit=2, total=5)
        payload["total"] = 2
        payload["next"] = "https://api.spotify.com/v1/albums/x/tracks?offset=2&limit=2"
        page = Page.from_json(payload, SimplifiedTrack.from_json)

        async def never(_page):
            raise AssertionError("no further page should be requested")

        assert len([t async for t in Paginator(page=page, fetch_next=never)]) == 2

    async def test_stops_on_empty_page(self):
        first = Page.from_json(
            page_json([simplified_track_json(1)], path=TRACKS_PATH, limit=1, total=3),
            SimplifiedTrack.from_json,
        )
        empty = Page.from_json(
            page_json([], path=TRACKS_PATH, offset=1, limit=1, total=3), SimplifiedTrack.from_json
        )
        calls = []

        async def fetch(page):
            calls.append(page)
            return empty

        items = [t async for t in Paginator(page=first, fetch_next=fetch)]

        assert len(items) == 1
        assert len(calls) == 1


class TestPageNavigation:
    async def test_next_and_previous(self, fake_spotify, client, album_with_five_tracks):
        first = await client.album_track(ALBUM_ID, limit=2)

        second = await client.next_page(first)
        back = await client.previous_page(second)

        assert [t.name for t in second] == ["Track 3", "Track 4"]
        assert back == first
        assert await client.previous_page(first) is None

    async def test_next_page_of_last_page_is_none(self, fake_spotify, client, album_with_five_tracks):
        last = await client.album_track(ALBUM_ID, limit=2, offset=4)

        assert await client.next_page(last) is None
        assert len(fake_spotify.api_requests) == 1

    async def test_page_without_parser_is_rejected(self, client):
        payload = page_json([], path=TRACKS_PATH, limit=1, total=3)
        payload["next"] = "https://api.spotify.com/v1/next"
        page = Page(**{k: v for k, v in payload.items() if k != "items"}, items=())

        with pytest.raises(ValueError):
            await client.next_page(page)
