"""Error taxonomy surfaced by every spotiwire operation.

Nothing here retries or recovers; callers catch the specific type they
care about and decide whether to retry, back off or abort.
"""


class SpotifyError(Exception):
    """Base class for all errors raised by spotiwire."""


class AuthenticationError(SpotifyError):
    """Credential exchange rejected, or the API refused the bearer token."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NetworkError(SpotifyError):
    """Transport-level failure: DNS, connection reset, timeout."""


class MalformedResponse(SpotifyError):
    """Response body did not match the expected schema.

    Attributes:
        path: Dotted location of the offending field, e.g. ``album.artists[0].id``
    """

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(f"{path}: {message}" if path else message)
        self.path = path


class ApiError(SpotifyError):
    """Non-2xx response from the Web API."""

    def __init__(self, status_code: int, message: str = "") -> None:
        super().__init__(f"HTTP {status_code}: {message}" if message else f"HTTP {status_code}")
        self.status_code = status_code
        self.message = message


class NotFound(ApiError):
    """The requested resource does not exist (HTTP 404)."""

    def __init__(self, message: str = "") -> None:
        super().__init__(404, message)


class RateLimited(ApiError):
    """Too many requests (HTTP 429).

    Attributes:
        retry_after: Seconds the server asked us to wait, if it said
    """

    def __init__(self, retry_after: float | None = None, message: str = "") -> None:
        super().__init__(429, message)
        self.retry_after = retry_after
