from .escape import Sink, escape, quote, write_boolean, write_escaped, write_integer, writer_for
from .exception_serializer import ErrorRecord, ExceptionSerializer, write_record
from .frames import StackFrame, extract_frames, write_frame, write_frames

__all__ = [
    "Sink",
    "escape",
    "quote",
    "write_escaped",
    "write_boolean",
    "write_integer",
    "writer_for",
    "ErrorRecord",
    "ExceptionSerializer",
    "write_record",
    "StackFrame",
    "extract_frames",
    "write_frame",
    "write_frames",
]
