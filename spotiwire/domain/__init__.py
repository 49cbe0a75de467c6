"""spotiwire domain layer - wire object model and error taxonomy, no I/O."""

from . import entities, exceptions
from .exceptions import (
    ApiError,
    AuthenticationError,
    MalformedResponse,
    NetworkError,
    NotFound,
    RateLimited,
    SpotifyError,
)

__all__ = [
    "ApiError",
    "AuthenticationError",
    "MalformedResponse",
    "NetworkError",
    "NotFound",
    "RateLimited",
    "SpotifyError",
    "entities",
    "exceptions",
]
