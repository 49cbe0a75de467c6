"""Async helpers for CLI commands."""

import asyncio
from collections.abc import Awaitable, Callable, Coroutine
from functools import wraps
from typing import Any, cast

from spotiwire.infrastructure.cli.ui import command_error_handler


def async_command(func: Callable[..., Awaitable[Any]]) -> Callable[..., None]:
    """Run an async command body with ``asyncio.run`` under the error handler."""

    @command_error_handler
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> None:
        coro = func(*args, **kwargs)
        asyncio.run(cast("Coroutine[Any, Any, Any]", coro))

    return wrapper
