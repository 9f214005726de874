"""Configuration for exception serialization."""

import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field, model_validator

from . import logging

_logger = logging.getLogger(__name__)

_ENV_PREFIX = "MINJSON_"


def _env_flag(value: str) -> bool:
    match value.strip().lower():
        case "1" | "true" | "yes" | "on":
            return True
        case "0" | "false" | "no" | "off" | "":
            return False
        case _:
            raise ValueError(f"not a boolean flag: {value!r}")


class SerializerConfig(BaseModel):
    """Options for ``ExceptionSerializer``."""

    include_frames: bool = Field(default=True, description="Emit the traceback as a \"frames\" array")
    max_frames: Optional[int] = Field(default=None, ge=0, description="Keep at most this many frames, most recent last; None keeps all")
    legacy_thread_quote: bool = Field(
        default=False,
        description="Append the stray '\"' after the thread id, as older releases did. Produces invalid JSON.",
    )

    @model_validator(mode="after")
    def warn_legacy_thread_quote(self) -> "SerializerConfig":
        if self.legacy_thread_quote:
            _logger.warning("legacy_thread_quote is enabled; the thread field will be followed by a stray quote")
        return self

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "SerializerConfig":
        """
        Build a config from ``MINJSON_INCLUDE_FRAMES``, ``MINJSON_MAX_FRAMES`` and
        ``MINJSON_LEGACY_THREAD_QUOTE``. Unset variables keep their defaults.
        """
        if environ is None:
            environ = os.environ

        values = {}
        if (raw := environ.get(f"{_ENV_PREFIX}INCLUDE_FRAMES")) is not None:
            values["include_frames"] = _env_flag(raw)
        if (raw := environ.get(f"{_ENV_PREFIX}MAX_FRAMES")) is not None and raw.strip():
            values["max_frames"] = int(raw)
        if (raw := environ.get(f"{_ENV_PREFIX}LEGACY_THREAD_QUOTE")) is not None:
            values["legacy_thread_quote"] = _env_flag(raw)
        return cls(**values)


DEFAULT_CONFIG = SerializerConfig()
