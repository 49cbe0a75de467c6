"""Configuration module for spotiwire.

Public API:
----------
settings: Settings instance
    Pydantic settings object with nested configuration

Settings: Settings class
    Build an explicit configuration instead of reading the environment

get_logger(name: str) -> Logger
    Get a context-aware logger for your module

setup_loguru_logger(verbose: bool = False) -> None
    Configure Loguru sinks for an application

resilient_operation(operation_name: str)
    Decorator for logging errors in Web API calls

Usage:
------
```python
from spotiwire.config import settings
timeout = settings.api.timeout

from spotiwire.config import get_logger
logger = get_logger(__name__)
logger.info("Starting operation")
```
"""

from .logging import get_logger, resilient_operation, setup_loguru_logger
from .settings import Settings, settings

__all__ = [
    "Settings",
    "get_logger",
    "resilient_operation",
    "settings",
    "setup_loguru_logger",
]
