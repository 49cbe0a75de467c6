"""Opt-in retry for rate-limited calls.

The client never retries on its own. Callers that want to wait out a 429 can
wrap their own coroutine:

    >>> @retry_on_rate_limit(max_tries=5)
    ... async def fetch(client, album_id):
    ...     return await client.album(album_id)

The wait honours the server's ``Retry-After`` header and falls back to a
configured default when the header is missing.
"""

from collections.abc import Awaitable, Callable
import functools
from typing import Any

import backoff

from spotiwire.config import get_logger, settings
from spotiwire.domain.exceptions import RateLimited

logger = get_logger(__name__).bind(service="retry")


def _on_backoff(details: dict[str, Any]) -> None:
    logger.warning(
        f"Rate limited, backing off {details['target'].__name__} (attempt {details['tries']})",
        retry_delay=f"{details['wait']:.2f}s",
    )


def _on_giveup(details: dict[str, Any]) -> None:
    logger.error(
        f"Giving up on {details['target'].__name__} after {details['tries']} attempts",
        elapsed=f"{details['elapsed']:.2f}s",
    )


def retry_on_rate_limit[**P, R](
    max_tries: int | None = None,
    default_wait: float | None = None,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Retry a coroutine on RateLimited, sleeping for ``Retry-After`` seconds.

    Args:
        max_tries: Total attempts including the first; defaults to
            ``settings.api.rate_limit_retry_count``
        default_wait: Seconds to wait when the response had no Retry-After;
            defaults to ``settings.api.rate_limit_default_wait``
    """
    tries = max_tries if max_tries is not None else settings.api.rate_limit_retry_count
    fallback = default_wait if default_wait is not None else settings.api.rate_limit_default_wait

    if tries < 1:
        raise ValueError(f"max_tries must be at least 1, got {tries}")

    def wait_for(e: RateLimited) -> float:
        return e.retry_after if e.retry_after is not None else fallback

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        # backoff only takes its async path for real coroutine functions
        @functools.wraps(func)
        async def call(*args: P.args, **kwargs: P.kwargs) -> R:
            return await func(*args, **kwargs)

        return backoff.on_exception(
            backoff.runtime,
            RateLimited,
            value=wait_for,
            max_tries=tries,
            jitter=None,
            on_backoff=_on_backoff,
            on_giveup=_on_giveup,
        )(call)

    return decorator
