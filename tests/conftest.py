"""Shared fixtures: a fake Spotify backend and clients wired to it."""

import pytest

from spotiwire.infrastructure.auth import ClientCredentialsManager
from spotiwire.infrastructure.connectors import SpotifyClient, SpotifyHttp
from tests.fixtures.transport import FakeSpotify


@pytest.fixture
def fake_spotify():
    """In-memory accounts service and Web API."""
    return FakeSpotify()


@pytest.fixture
def credentials(fake_spotify):
    """Client-credentials manager talking to the fake accounts service."""
    return ClientCredentialsManager(
        client_id="test-client",
        client_secret="test-secret",
        http_client=fake_spotify.client(),
    )


@pytest.fixture
def client(fake_spotify, credentials):
    """SpotifyClient whose requests all land on the fake backend."""
    http = SpotifyHttp(credentials=credentials, client=fake_spotify.client())
    return SpotifyClient(http=http)
