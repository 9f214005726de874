import io
import traceback
from types import FrameType, TracebackType
from typing import Any, Dict, List, Optional

from pydantic import ConfigDict, Field

from ..pydantic import BaseModel
from .escape import Sink, write_boolean, write_escaped, write_integer, writer_for


class StackFrame(BaseModel):
    """One entry of a traceback, in the shape emitted by ``write_frame``."""

    model_config = ConfigDict(frozen=True)

    filename: Optional[str] = Field(default=None, description="Source file, if known")
    method: str = Field(description="Function or method name")
    class_name: str = Field(serialization_alias="class", description="Defining module, followed by the owning class path if any")
    line_number: int = Field(default=-1, serialization_alias="lineNumber", description="Line number; negative when unknown")
    native: bool = Field(default=False, description="Whether the frame is native code")

    @classmethod
    def from_frame(cls, frame: FrameType, lineno: Optional[int] = None) -> "StackFrame":
        code = frame.f_code
        module = frame.f_globals.get("__name__") or "<unknown>"
        # co_qualname is "Outer.method" for methods, "outer.<locals>.inner" for closures.
        qualname = getattr(code, "co_qualname", code.co_name)
        owner = qualname.rpartition(".")[0]
        if "<locals>" in owner:
            # Nested in a function body: there is no importable class path.
            owner = ""
        return cls(
            filename=code.co_filename or None,
            method=code.co_name,
            class_name=f"{module}.{owner}" if owner else module,
            line_number=lineno if lineno is not None else -1,
            # Tracebacks only hold interpreted frames.
            native=False,
        )

    def to_dict(self, **kwargs) -> Dict[str, Any]:
        kwargs.setdefault("by_alias", True)
        kwargs.setdefault("exclude_none", True)
        result = super().to_dict(**kwargs)
        if self.line_number < 0:
            result.pop("lineNumber", None)
        return result

    def to_json(self) -> str:
        buf = io.StringIO()
        write_frame(self, buf)
        return buf.getvalue()


def extract_frames(tb: Optional[TracebackType], limit: Optional[int] = None) -> List[StackFrame]:
    """
    Convert a traceback into ``StackFrame`` objects, outermost call first.

    With ``limit`` only the last ``limit`` frames (closest to the raise) are kept.
    """
    frames = [StackFrame.from_frame(frame, lineno) for frame, lineno in traceback.walk_tb(tb)]
    if limit is not None:
        frames = frames[len(frames) - limit:] if limit < len(frames) else frames
    return frames


def write_frame(frame: StackFrame, sink: Sink) -> None:
    """Write ``{"filename":..,"method":..,"class":..,"lineNumber":..,"native":..}`` for one frame."""
    write = writer_for(sink)

    write("{")
    if frame.filename is not None:
        write('"filename":"')
        write_escaped(frame.filename, sink)
        write('",')

    write('"method":"')
    write_escaped(frame.method, sink)
    write('","class":"')
    write_escaped(frame.class_name, sink)
    write('"')

    if frame.line_number >= 0:
        write(',"lineNumber":')
        write_integer(frame.line_number, sink)

    write(',"native":')
    write_boolean(frame.native, sink)
    write("}")


def write_frames(frames: List[StackFrame], sink: Sink) -> None:
    write = writer_for(sink)
    write("[")
    for i, frame in enumerate(frames):
        if i:
            write(",")
        write_frame(frame, sink)
    write("]")
