"""Minimal JSON string escaping and compact exception serialization."""

from .config import SerializerConfig
from .core import (
    ErrorRecord,
    ExceptionSerializer,
    StackFrame,
    escape,
    quote,
    write_boolean,
    write_escaped,
    write_frame,
    write_integer,
)

__version__ = "0.1.0"

__all__ = [
    "SerializerConfig",
    "ErrorRecord",
    "ExceptionSerializer",
    "StackFrame",
    "escape",
    "quote",
    "write_escaped",
    "write_boolean",
    "write_integer",
    "write_frame",
]
