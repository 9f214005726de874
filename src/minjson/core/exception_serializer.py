import io
import threading
from typing import Any, Dict, List, Optional, Union

from pydantic import ConfigDict, Field

from ..config import DEFAULT_CONFIG, SerializerConfig
from ..pydantic import BaseModel
from .escape import Sink, write_escaped, write_integer, writer_for
from .frames import StackFrame, extract_frames, write_frames

ThreadLike = Union[threading.Thread, int]

# Modules that do not count as a package: built-in exceptions are importable from nowhere.
_NO_PACKAGE = frozenset({"", "builtins"})


class ErrorRecord(BaseModel):
    """Everything the serializer emits about one exception."""

    model_config = ConfigDict(frozen=True)

    class_name: str = Field(serialization_alias="class", description="Qualified name of the exception type, without its module")
    message: Optional[str] = Field(default=None, description="str(exc), if the exception has arguments or renders to text")
    package: Optional[str] = Field(default=None, description="Module defining the exception type")
    thread: Optional[int] = Field(default=None, description="Identifier of the owning thread")
    frames: List[StackFrame] = Field(default_factory=list, description="Traceback, outermost call first")

    def to_dict(self, **kwargs) -> Dict[str, Any]:
        kwargs.setdefault("by_alias", True)
        kwargs.setdefault("exclude_none", True)
        kwargs["exclude"] = set(kwargs.get("exclude") or ()) | {"frames"}
        result = super().to_dict(**kwargs)
        if self.frames:
            result["frames"] = [frame.to_dict() for frame in self.frames]
        return result

    def to_json(self, legacy_thread_quote: bool = False) -> str:
        buf = io.StringIO()
        write_record(self, buf, legacy_thread_quote=legacy_thread_quote)
        return buf.getvalue()


def _thread_id(thread: Optional[ThreadLike]) -> Optional[int]:
    if thread is None:
        return None
    if isinstance(thread, bool):
        raise TypeError("thread must be a threading.Thread or an int, not bool")
    if isinstance(thread, int):
        return thread
    # None until the thread has been started.
    return thread.ident


def write_record(record: ErrorRecord, sink: Sink, legacy_thread_quote: bool = False) -> None:
    write = writer_for(sink)

    write('{"class":"')
    write_escaped(record.class_name, sink)
    write('"')

    if record.message is not None:
        write(',"message":"')
        write_escaped(record.message, sink)
        write('"')

    if record.package is not None:
        write(',"package":"')
        write_escaped(record.package, sink)
        write('"')

    if record.thread is not None:
        write(',"thread":')
        write_integer(record.thread, sink)
        if legacy_thread_quote:
            write('"')

    if record.frames:
        write(',"frames":')
        write_frames(record.frames, sink)

    write("}")


class ExceptionSerializer:
    """Serialize Python exceptions to compact JSON objects."""

    @staticmethod
    def to_record(exc: BaseException, thread: Optional[ThreadLike] = None, config: Optional[SerializerConfig] = None) -> ErrorRecord:
        """Collect the fields of ``exc`` that are emitted."""
        config = config or DEFAULT_CONFIG
        exc_type = type(exc)

        package = exc_type.__module__
        if package in _NO_PACKAGE:
            package = None

        text = str(exc)

        frames: List[StackFrame] = []
        if config.include_frames and exc.__traceback__ is not None:
            frames = extract_frames(exc.__traceback__, limit=config.max_frames)

        return ErrorRecord(
            class_name=exc_type.__qualname__,
            message=text if exc.args or text else None,
            package=package,
            thread=_thread_id(thread),
            frames=frames,
        )

    @staticmethod
    def to_dict(exc: BaseException, thread: Optional[ThreadLike] = None, config: Optional[SerializerConfig] = None) -> Dict[str, Any]:
        """Serialize exception to dictionary, with the same keys as the JSON form."""
        return ExceptionSerializer.to_record(exc, thread, config).to_dict()

    @staticmethod
    def write(exc: BaseException, sink: Sink, thread: Optional[ThreadLike] = None, config: Optional[SerializerConfig] = None) -> None:
        """
        Write ``exc`` to ``sink`` as one JSON object:

            {"class":"..."[,"message":"..."][,"package":"..."][,"thread":N][,"frames":[...]]}

        Errors raised by the sink propagate unchanged.
        """
        config = config or DEFAULT_CONFIG
        record = ExceptionSerializer.to_record(exc, thread, config)
        write_record(record, sink, legacy_thread_quote=config.legacy_thread_quote)

    @staticmethod
    def to_json(exc: BaseException, thread: Optional[ThreadLike] = None, config: Optional[SerializerConfig] = None) -> str:
        """Convert exception to JSON string."""
        config = config or DEFAULT_CONFIG
        record = ExceptionSerializer.to_record(exc, thread, config)
        buf = io.StringIO()
        try:
            write_record(record, buf, legacy_thread_quote=config.legacy_thread_quote)
        except (OSError, ValueError) as ex:
            # An in-memory buffer cannot fail to accept text.
            raise RuntimeError(f"Unexpected {type(ex).__name__}: It should not happen.") from ex
        return buf.getvalue()
