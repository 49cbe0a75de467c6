"""Configuration management using Pydantic Settings.

This module provides type-safe configuration management with automatic
environment variable loading and validation using Pydantic Settings.

The configuration is organized into logical groups:
- CredentialsConfig: OAuth client credentials and optional refresh token
- APIConfig: Web API endpoints, timeouts and token refresh behaviour
- LoggingConfig: Logging levels and the optional log file
"""

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


def _pop_flat(data: dict[str, Any], key: str) -> Any:
    """Take a flat setting from the loaded data, falling back to the process env.

    Env sources only collect declared fields, so flat names that live inside a
    nested group are looked up directly.
    """
    if key in data:
        return data.pop(key)
    return os.environ.get(key.upper())


class CredentialsConfig(BaseModel):
    """API credentials and authentication settings."""

    client_id: str = ""
    client_secret: str = ""
    redirect_uri: str = "http://localhost:8888/callback"
    refresh_token: str | None = None
    scopes: list[str] = []


class APIConfig(BaseModel):
    """Web API endpoints and request behaviour."""

    base_url: str = "https://api.spotify.com/v1"
    accounts_url: str = "https://accounts.spotify.com"
    timeout: float = 30.0

    # Tokens are refreshed this many seconds before their stated expiry
    token_refresh_skew: float = 60.0
    default_market: str | None = None

    # Only used by the opt-in retry_on_rate_limit decorator
    rate_limit_retry_count: int = 3
    rate_limit_default_wait: float = 1.0


class LoggingConfig(BaseModel):
    """Logging configuration for console and file output."""

    console_level: str = "INFO"
    file_level: str = "DEBUG"
    log_file: Path | None = None


class Settings(BaseSettings):
    """Main settings with environment variable support.

    Environment variables can be set using flat naming or nested naming:
    - Flat: SPOTIFY_CLIENT_ID, SPOTIFY_CLIENT_SECRET, CONSOLE_LOG_LEVEL
    - Nested: CREDENTIALS__CLIENT_ID, API__TIMEOUT, LOGGING__CONSOLE_LEVEL

    The .env file is automatically loaded for development convenience.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    credentials: CredentialsConfig = CredentialsConfig()
    api: APIConfig = APIConfig()
    logging: LoggingConfig = LoggingConfig()

    @model_validator(mode="before")
    @classmethod
    def transform_flat_env_vars(cls, data: Any) -> Any:
        """Transform flat environment variables to nested structure.

        Maps flat env vars (SPOTIFY_CLIENT_ID) to the nested structure
        expected by the models (credentials.client_id).
        """
        if not isinstance(data, dict):
            return data

        transformed: dict[str, dict[str, Any]] = {}

        cred_mapping = {
            "spotify_client_id": "client_id",
            "spotify_client_secret": "client_secret",
            "spotify_redirect_uri": "redirect_uri",
            "spotify_refresh_token": "refresh_token",
        }
        for env_key, field_key in cred_mapping.items():
            value = _pop_flat(data, env_key)
            if value is not None:
                transformed.setdefault("credentials", {})[field_key] = value

        api_mapping = {
            "spotify_api_base_url": "base_url",
            "spotify_accounts_url": "accounts_url",
            "spotify_api_timeout": "timeout",
            "spotify_market": "default_market",
        }
        for env_key, field_key in api_mapping.items():
            value = _pop_flat(data, env_key)
            if value is not None:
                transformed.setdefault("api", {})[field_key] = value

        log_mapping = {
            "console_log_level": "console_level",
            "file_log_level": "file_level",
            "log_file": "log_file",
        }
        for env_key, field_key in log_mapping.items():
            value = _pop_flat(data, env_key)
            if value is not None:
                transformed.setdefault("logging", {})[field_key] = value

        # Flat values must not clobber an explicitly nested group
        for group, values in transformed.items():
            existing = data.get(group)
            if isinstance(existing, dict):
                data[group] = {**values, **existing}
            elif existing is None:
                data[group] = values

        return data


# Singleton instance for application use
settings = Settings()
