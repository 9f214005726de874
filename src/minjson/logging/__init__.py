"""structlog setup shared by the package."""

from .utils import (
    PythonLoggingInterceptHandler,
    configure,
    exception_json,
    getLogger,
    min_log_level_from_env,
    uppercase_log_level,
)

__all__ = [
    "getLogger",
    "configure",
    "exception_json",
    "min_log_level_from_env",
    "uppercase_log_level",
    "PythonLoggingInterceptHandler",
]
