"""HTTP transport for the Spotify Web API.

SpotifyHttp owns the httpx client and the credential manager, attaches the
bearer token to each request and maps responses onto the error taxonomy in
``spotiwire.domain.exceptions``:

- 2xx: decoded JSON, or None for an empty body
- 401: AuthenticationError (the cached token is dropped)
- 404: NotFound
- 429: RateLimited with the ``Retry-After`` delay
- other non-2xx: ApiError
- transport failure: NetworkError
- body that is not JSON: MalformedResponse

One request is one round trip. Nothing here retries.
"""

from collections.abc import Mapping
from typing import Any, Self

from attrs import define, field
import httpx

from spotiwire.config import get_logger
from spotiwire.domain.exceptions import (
    ApiError,
    AuthenticationError,
    MalformedResponse,
    NetworkError,
    NotFound,
    RateLimited,
)
from spotiwire.infrastructure.auth import CredentialManager

logger = get_logger(__name__).bind(service="http")


def _error_message(response: httpx.Response) -> str:
    """Extract ``error.message`` from a Web API error body, if there is one."""
    try:
        body = response.json()
    except ValueError:
        return response.text.strip()
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            return str(error.get("message", ""))
        if isinstance(error, str):
            return str(body.get("error_description") or error)
    return ""


def _retry_after(response: httpx.Response) -> float | None:
    raw = response.headers.get("Retry-After")
    if raw is None:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


def _clean_params(params: Mapping[str, Any] | None) -> dict[str, Any] | None:
    """Drop unset query parameters and render booleans the way the API expects."""
    if not params:
        return None
    cleaned: dict[str, Any] = {}
    for key, value in params.items():
        if value is None:
            continue
        cleaned[key] = str(value).lower() if isinstance(value, bool) else value
    return cleaned


@define(slots=True)
class SpotifyHttp:
    """Authenticated JSON transport.

    The httpx client is created lazily unless one is injected. An injected
    client is left open by ``aclose``; the caller owns it.
    """

    credentials: CredentialManager
    base_url: str = "https://api.spotify.com/v1"
    timeout: float = 30.0
    client: httpx.AsyncClient | None = field(default=None, repr=False)
    _owns_client: bool = field(default=False, init=False, repr=False)

    def _http(self) -> httpx.AsyncClient:
        if self.client is None:
            self.client = httpx.AsyncClient(timeout=self.timeout)
            self._owns_client = True
        return self.client

    def url_for(self, path: str) -> str:
        """Resolve an API path; absolute URLs (paging links) pass through."""
        if path.startswith(("http://", "https://")):
            return path
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        """Send one authenticated request and return the decoded body."""
        url = self.url_for(path)
        token = await self.credentials.get_token()
        headers = {"Authorization": token.authorization_header}

        logger.debug(f"{method} {url}", params=params)
        try:
            response = await self._http().request(
                method,
                url,
                params=_clean_params(params),
                json=json,
                headers=headers,
            )
        except httpx.TransportError as e:
            raise NetworkError(f"{method} {url} failed: {e}") from e

        return self._decode(response)

    def _decode(self, response: httpx.Response) -> Any:
        status = response.status_code
        if status == 401:
            self.credentials.invalidate()
            raise AuthenticationError(_error_message(response) or "Unauthorized", status_code=401)
        if status == 404:
            raise NotFound(_error_message(response))
        if status == 429:
            raise RateLimited(_retry_after(response), _error_message(response))
        if not 200 <= status < 300:
            raise ApiError(status, _error_message(response))

        if not response.content.strip():
            return None
        try:
            return response.json()
        except ValueError:
            raise MalformedResponse(
                f"response to {response.request.method} {response.request.url} is not JSON"
            ) from None

    async def get(self, path: str, params: Mapping[str, Any] | None = None) -> Any:
        return await self.request("GET", path, params=params)

    async def post(self, path: str, json: Any = None, params: Mapping[str, Any] | None = None) -> Any:
        return await self.request("POST", path, params=params, json=json)

    async def put(self, path: str, json: Any = None, params: Mapping[str, Any] | None = None) -> Any:
        return await self.request("PUT", path, params=params, json=json)

    async def delete(self, path: str, json: Any = None, params: Mapping[str, Any] | None = None) -> Any:
        return await self.request("DELETE", path, params=params, json=json)

    async def aclose(self) -> None:
        if self.client is not None and self._owns_client:
            await self.client.aclose()
            self.client = None
            self._owns_client = False

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
