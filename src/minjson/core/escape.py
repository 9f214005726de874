import io
import re
from typing import Any, Callable, Optional, Protocol, Union


class SupportsWrite(Protocol):
    def write(self, s: str, /) -> Any: ...


class SupportsAppend(Protocol):
    def append(self, s: str, /) -> Any: ...


Sink = Union[SupportsWrite, SupportsAppend]

# Only the characters JSON requires to be escaped: '"', '\\' and U+0000..U+001F.
# The solidus '/' is intentionally not here.
_ESCAPE_RE = re.compile(r'[\x00-\x1f\\"]')

_ESCAPES = {chr(i): f"\\u{i:04x}" for i in range(0x20)}
_ESCAPES.update({
    "\\": "\\\\",
    '"': '\\"',
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
})


def writer_for(sink: Sink) -> Callable[[str], Any]:
    """
    Return the append function of a sink.

    A sink is anything accepting text: an object with ``write`` (streams, ``io.StringIO``)
    or an object with ``append`` (a ``list`` used as a string builder).
    """
    write = getattr(sink, "write", None)
    if callable(write):
        return write
    append = getattr(sink, "append", None)
    if callable(append):
        return append
    raise TypeError(f"{type(sink).__name__!r} is not a sink: it has neither write() nor append()")


def write_escaped(original: Optional[str], sink: Sink) -> None:
    """
    Write ``original`` to ``sink`` escaped for a JSON string, with minimum conversions.

    Only ``"``, ``\\`` and C0 control characters are escaped. Some encoders also escape
    the solidus ``/`` to be safe against ``"</script>"`` in HTML, but RFC 8259 does not
    require it, so it is copied as is. Everything outside C0 (including non-ASCII text,
    astral characters and lone surrogates) is copied verbatim.

    Nothing is written for ``None`` or an empty string. Errors raised by the sink propagate.

    Example usage:
        >>> buf = io.StringIO()
        >>> write_escaped('say "hi"\\n</p>', buf)
        >>> buf.getvalue()
        'say \\\\"hi\\\\"\\\\n</p>'
    """
    if not original:
        return

    write = writer_for(sink)
    start = 0
    for match in _ESCAPE_RE.finditer(original):
        position = match.start()
        if position > start:
            write(original[start:position])
        write(_ESCAPES[match.group()])
        start = position + 1
    if start < len(original):
        write(original[start:] if start else original)


def escape(original: Optional[str]) -> str:
    """Return ``original`` escaped for a JSON string, without surrounding quotes."""
    buf = io.StringIO()
    write_escaped(original, buf)
    return buf.getvalue()


def quote(original: Optional[str]) -> str:
    """Return ``original`` as a complete JSON string literal."""
    return f'"{escape(original)}"'


def write_boolean(value: bool, sink: Sink) -> None:
    writer_for(sink)("true" if value else "false")


def write_integer(value: int, sink: Sink) -> None:
    # bool is an int subclass; never let True reach the sink as "True" or "1".
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"expected an int, got {type(value).__name__}")
    writer_for(sink)(str(value))
