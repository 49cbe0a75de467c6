"""OAuth2 credential managers for the Spotify accounts service.

A credential manager hands out bearer tokens to the HTTP layer. It exchanges
credentials on first use and re-exchanges once the cached token comes within
``refresh_skew`` seconds of its stated expiry. Exchanges are single-flight:
callers that arrive while a refresh is in progress wait for it and share the
result instead of issuing their own token request.

Two grants are supported:
- ClientCredentialsManager: app-only access, no user context
- AuthorizationCodeManager: user access via a refresh token, plus helpers to
  build the consent URL and exchange the returned authorization code

Tokens are kept in memory only.
"""

import asyncio
from collections.abc import Mapping
from datetime import UTC, datetime, timedelta
from typing import Any, Self
from urllib.parse import urlencode

import attrs
from attrs import define, field
import httpx

from spotiwire.config import Settings, get_logger, settings
from spotiwire.domain.entities.shared import as_object, optional, require
from spotiwire.domain.exceptions import (
    ApiError,
    AuthenticationError,
    MalformedResponse,
    NetworkError,
)

logger = get_logger(__name__).bind(service="auth")

TOKEN_PATH = "/api/token"
AUTHORIZE_PATH = "/authorize"


@define(frozen=True, slots=True)
class Token:
    """An access token as issued by the accounts service.

    Attributes:
        access_token: Bearer token sent with every API request
        token_type: Always ``Bearer`` in practice
        expires_at: UTC instant after which the token is rejected
        scope: Granted scopes, empty for client-credentials tokens
        refresh_token: Present for authorization-code grants
    """

    access_token: str
    token_type: str
    expires_at: datetime
    scope: tuple[str, ...] = ()
    refresh_token: str | None = field(default=None, repr=False)

    @classmethod
    def from_json(cls, data: Mapping[str, Any], now: datetime | None = None) -> Self:
        """Build a token from the token endpoint response (``expires_in`` seconds)."""
        data = as_object(data)
        issued_at = now or datetime.now(UTC)
        expires_in = require(data, "expires_in", int)
        scope = optional(data, "scope", str)
        return cls(
            access_token=require(data, "access_token", str),
            token_type=require(data, "token_type", str),
            expires_at=issued_at + timedelta(seconds=expires_in),
            scope=tuple(scope.split()) if scope else (),
            refresh_token=optional(data, "refresh_token", str),
        )

    def is_expired(self, skew: float = 0.0, now: datetime | None = None) -> bool:
        """Whether the token is expired, or will be within ``skew`` seconds."""
        now = now or datetime.now(UTC)
        return now >= self.expires_at - timedelta(seconds=skew)

    @property
    def authorization_header(self) -> str:
        return f"Bearer {self.access_token}"


def _error_description(response: httpx.Response) -> str:
    """Pull the OAuth ``error_description`` out of a failed token response."""
    try:
        body = response.json()
    except ValueError:
        return response.text.strip() or response.reason_phrase
    if isinstance(body, dict):
        return str(body.get("error_description") or body.get("error") or body)
    return str(body)


@define(slots=True)
class CredentialManager:
    """Base class owning the cached token and the single-flight refresh.

    Subclasses implement ``_request_token`` for their grant type.
    """

    client_id: str
    client_secret: str = field(repr=False)
    accounts_url: str = "https://accounts.spotify.com"
    timeout: float = 30.0
    refresh_skew: float = 60.0
    http_client: httpx.AsyncClient | None = field(default=None, repr=False)
    _token: Token | None = field(default=None, init=False, repr=False)
    _lock: asyncio.Lock = field(factory=asyncio.Lock, init=False, repr=False)

    async def get_token(self) -> Token:
        """Return a valid token, exchanging credentials when needed.

        Concurrent callers that find the token stale wait on one in-flight
        exchange and all receive its result.
        """
        seen = self._token
        if seen is not None and not seen.is_expired(self.refresh_skew):
            return seen

        async with self._lock:
            current = self._token
            # Someone else refreshed while we waited for the lock
            if current is not None and current is not seen and not current.is_expired():
                return current

            logger.debug(
                "Requesting access token",
                grant=type(self).__name__,
                reason="initial" if current is None else "expiring",
            )
            token = await self._request_token()
            self._token = token
            return token

    async def get_access_token(self) -> str:
        return (await self.get_token()).access_token

    def invalidate(self) -> None:
        """Forget the cached token so the next call exchanges again."""
        self._token = None

    @property
    def token(self) -> Token | None:
        """The cached token, if any, without triggering an exchange."""
        return self._token

    async def _request_token(self) -> Token:
        raise NotImplementedError

    async def _post_token(self, form: dict[str, str]) -> Token:
        """POST a grant to the token endpoint and decode the response."""
        if not self.client_id or not self.client_secret:
            raise AuthenticationError(
                "No client credentials configured (set SPOTIFY_CLIENT_ID and SPOTIFY_CLIENT_SECRET)"
            )

        url = f"{self.accounts_url.rstrip('/')}{TOKEN_PATH}"
        auth = (self.client_id, self.client_secret)
        try:
            if self.http_client is not None:
                response = await self.http_client.post(url, data=form, auth=auth)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(url, data=form, auth=auth)
        except httpx.TransportError as e:
            raise NetworkError(f"Token request failed: {e}") from e

        if 400 <= response.status_code < 500:
            raise AuthenticationError(
                f"Token request rejected: {_error_description(response)}",
                status_code=response.status_code,
            )
        if response.status_code >= 500:
            raise ApiError(response.status_code, _error_description(response))

        try:
            payload = response.json()
        except ValueError:
            raise MalformedResponse("token response is not JSON") from None
        return Token.from_json(payload)


@define(slots=True)
class ClientCredentialsManager(CredentialManager):
    """Client-credentials grant: app-level access without a user."""

    async def _request_token(self) -> Token:
        return await self._post_token({"grant_type": "client_credentials"})

    @classmethod
    def from_settings(
        cls, config: Settings | None = None, *, http_client: httpx.AsyncClient | None = None
    ) -> Self:
        config = config or settings
        return cls(
            client_id=config.credentials.client_id,
            client_secret=config.credentials.client_secret,
            accounts_url=config.api.accounts_url,
            timeout=config.api.timeout,
            refresh_skew=config.api.token_refresh_skew,
            http_client=http_client,
        )


def _scopes(value: Any) -> tuple[str, ...]:
    if isinstance(value, str):
        return tuple(value.split())
    return tuple(value)


@define(slots=True)
class AuthorizationCodeManager(CredentialManager):
    """Authorization-code grant: user access, renewed with a refresh token.

    Without a refresh token the manager cannot issue tokens until
    ``exchange_code`` has been called with a code from the consent redirect.
    """

    redirect_uri: str = field(kw_only=True)
    scopes: tuple[str, ...] = field(default=(), converter=_scopes, kw_only=True)
    refresh_token: str | None = field(default=None, repr=False, kw_only=True)

    def authorize_url(self, state: str | None = None, show_dialog: bool = False) -> str:
        """Build the URL the user visits to grant access."""
        params = {
            "client_id": self.client_id,
            "response_type": "code",
            "redirect_uri": self.redirect_uri,
        }
        if self.scopes:
            params["scope"] = " ".join(self.scopes)
        if state:
            params["state"] = state
        if show_dialog:
            params["show_dialog"] = "true"
        return f"{self.accounts_url.rstrip('/')}{AUTHORIZE_PATH}?{urlencode(params)}"

    async def exchange_code(self, code: str) -> Token:
        """Trade an authorization code for a token and keep its refresh token."""
        if not code:
            raise ValueError("Authorization code must not be empty")

        async with self._lock:
            token = await self._post_token({
                "grant_type": "authorization_code",
                "code": code,
                "redirect_uri": self.redirect_uri,
            })
            if token.refresh_token:
                self.refresh_token = token.refresh_token
            self._token = token

        logger.info("Authorization code exchanged", scopes=len(token.scope))
        return token

    async def _request_token(self) -> Token:
        if not self.refresh_token:
            raise AuthenticationError(
                "No refresh token available; complete the authorization flow first"
            )

        token = await self._post_token({
            "grant_type": "refresh_token",
            "refresh_token": self.refresh_token,
        })
        # The server may omit the refresh token, in which case the old one stays valid
        if token.refresh_token is None:
            token = attrs.evolve(token, refresh_token=self.refresh_token)
        self.refresh_token = token.refresh_token
        return token

    @classmethod
    def from_settings(
        cls, config: Settings | None = None, *, http_client: httpx.AsyncClient | None = None
    ) -> Self:
        config = config or settings
        return cls(
            client_id=config.credentials.client_id,
            client_secret=config.credentials.client_secret,
            accounts_url=config.api.accounts_url,
            timeout=config.api.timeout,
            refresh_skew=config.api.token_refresh_skew,
            http_client=http_client,
            redirect_uri=config.credentials.redirect_uri,
            scopes=config.credentials.scopes,
            refresh_token=config.credentials.refresh_token,
        )


def credentials_from_settings(
    config: Settings | None = None, *, http_client: httpx.AsyncClient | None = None
) -> CredentialManager:
    """Pick the grant for a configuration.

    A configured refresh token means user access through the authorization-code
    grant; otherwise the app authenticates as itself with client credentials.
    """
    config = config or settings
    if config.credentials.refresh_token:
        return AuthorizationCodeManager.from_settings(config, http_client=http_client)
    return ClientCredentialsManager.from_settings(config, http_client=http_client)
