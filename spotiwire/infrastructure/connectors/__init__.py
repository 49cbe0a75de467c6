"""HTTP call layer for the Spotify Web API."""

from spotiwire.infrastructure.connectors.base_connector import SpotifyHttp
from spotiwire.infrastructure.connectors.pagination import Paginator
from spotiwire.infrastructure.connectors.retry import retry_on_rate_limit
from spotiwire.infrastructure.connectors.spotify import SpotifyClient

__all__ = [
    "Paginator",
    "SpotifyClient",
    "SpotifyHttp",
    "retry_on_rate_limit",
]
