"""Logging configuration and utilities using Loguru.

This module provides centralized logging setup for spotiwire, including
structured logging with Loguru and an error handling decorator for Web API
boundary calls.

Public API:
----------
setup_loguru_logger(verbose: bool = False) -> None
    Configure Loguru sinks. The library never does this on import;
    applications (and the bundled CLI) call it once at startup.

get_logger(name: str) -> Logger
    Get a context-aware logger for your module
    Usage: logger = get_logger(__name__)

@resilient_operation(operation_name: str)
    Decorator for Web API boundary coroutines
    Usage: @resilient_operation("get_track")

Quick Start:
-----------
```python
from spotiwire.config import get_logger
logger = get_logger(__name__)
logger.info("Fetching album", album_id="6akEvsycLGftJxYudPjmqK")
```
"""

from collections.abc import Awaitable, Callable
import functools
from pathlib import Path
import sys
from typing import Any

from loguru import logger

from spotiwire.domain.exceptions import SpotifyError

from .settings import settings

# =============================================================================
# LOGGING CONFIGURATION
# =============================================================================


def setup_loguru_logger(verbose: bool = False) -> None:
    """Configure Loguru logger.

    Args:
        verbose: Enable verbose logging with debug level and detailed tracebacks

    Note:
        - Removes default logger and sets up a console handler
        - A JSON file handler is added only when a log file is configured
        - Log rotation and retention are automatically managed
    """
    logger.remove()

    # Add contextual info to all log records
    logger.configure(extra={"service": "spotiwire", "module": "root"})

    console_level = "DEBUG" if verbose else settings.logging.console_level
    logger.add(
        sink=sys.stderr,
        level=console_level,
        format=(
            "<green>{time:HH:mm:ss}</green> | "
            "<level>{level: <8}</level> | "
            "<cyan>{name}</cyan>:<cyan>{function}</cyan>:"
            "<cyan>{line}</cyan> - "
            "<level>{message}</level>"
        ),
        colorize=True,
        backtrace=verbose,
        diagnose=verbose,
    )

    if settings.logging.log_file is None:
        return

    log_file_path = Path(settings.logging.log_file)
    log_file_path.parent.mkdir(parents=True, exist_ok=True)

    logger.add(
        sink=str(log_file_path),
        level=settings.logging.file_level,
        format="{time:YYYY-MM-DD HH:mm:ss.SSS} | {level} | {extra[service]} | {extra[module]} | {name}:{function}:{line} | {message}",
        rotation="10 MB",
        retention="1 week",
        compression="zip",
        backtrace=True,
        diagnose=False,  # tracebacks would otherwise dump bearer tokens
        catch=True,
        serialize=True,
    )


# =============================================================================
# LOGGER FACTORY
# =============================================================================


def get_logger(name: str) -> Any:  # Use Any for Loguru logger type
    """Get a pre-configured logger instance for the given module.

    Args:
        name: Module name (typically __name__)

    Returns:
        Loguru logger bound with module and service context
    """
    return logger.bind(
        module=name,
        service="spotiwire",
    )


# =============================================================================
# ERROR HANDLING DECORATORS
# =============================================================================


def resilient_operation[**P, R](
    operation_name: str | None = None,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Decorator for Web API boundary operations with standardized error logging.

    API errors are logged as warnings without a traceback, anything else is
    logged with the full exception. The error is always re-raised: the
    caller decides whether to retry, back off or abort.

    Example:
        >>> @resilient_operation("get_album")
        >>> async def album(self, album_id):
        >>>     return await self._http.get(f"albums/{album_id}")
    """

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        op_name = operation_name or func.__name__

        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            try:
                return await func(*args, **kwargs)
            except SpotifyError as e:
                logger.warning(
                    f"{op_name} failed: {e!s}",
                    operation=op_name,
                    error_type=type(e).__name__,
                )
                raise
            except ValueError:
                # Invalid caller input, nothing was sent
                raise
            except Exception as e:
                logger.exception(f"Error in {op_name}: {e!s}")
                raise

        return wrapper

    return decorator
