"""Tests for stack frame formatting."""

import json
import sys

import pytest

from minjson.core.frames import StackFrame, extract_frames, write_frame, write_frames


class _Outer:
    def boom(self):
        raise ValueError("from a method")


def _level_three():
    raise KeyError("deep")


def _level_two():
    _level_three()


def _level_one():
    _level_two()


def _with_closure():
    def inner():
        raise RuntimeError("from a closure")

    inner()


def _traceback_of(func):
    try:
        func()
    except Exception as e:
        return e.__traceback__
    raise AssertionError("expected an exception")


def _format(frame: StackFrame) -> str:
    parts = []
    write_frame(frame, parts)
    return "".join(parts)


class TestWriteFrame:
    """Exact output of a single frame."""

    def test_all_fields(self):
        """Test a frame with every field set."""
        frame = StackFrame(filename="app/worker.py", method="run", class_name="app.worker.Worker", line_number=42, native=False)
        assert _format(frame) == (
            '{"filename":"app/worker.py","method":"run","class":"app.worker.Worker","lineNumber":42,"native":false}'
        )

    def test_optional_fields_omitted(self):
        """Test filename and a negative line number are left out."""
        frame = StackFrame(method="<module>", class_name="app", line_number=-1, native=True)
        assert _format(frame) == '{"method":"<module>","class":"app","native":true}'

    def test_line_zero_is_emitted(self):
        """Test line number zero counts as known."""
        frame = StackFrame(method="f", class_name="m", line_number=0)
        assert _format(frame) == '{"method":"f","class":"m","lineNumber":0,"native":false}'

    def test_strings_are_escaped(self):
        """Test string fields go through the escaper."""
        frame = StackFrame(filename="C:\\src\\a.py", method="f", class_name='m"x', line_number=3)
        text = _format(frame)
        assert text.startswith('{"filename":"C:\\\\src\\\\a.py",')
        assert json.loads(text) == {"filename": "C:\\src\\a.py", "method": "f", "class": 'm"x', "lineNumber": 3, "native": False}

    def test_to_json_matches_writer(self):
        """Test the model's JSON form is the writer output."""
        frame = StackFrame(filename="a.py", method="f", class_name="m", line_number=1)
        assert frame.to_json() == _format(frame)

    def test_to_dict_uses_output_keys(self):
        """Test the dict form uses the emitted key names and presence rules."""
        assert StackFrame(method="f", class_name="m").to_dict() == {"method": "f", "class": "m", "native": False}
        frame = StackFrame(filename="a.py", method="f", class_name="m", line_number=7)
        assert list(frame.to_dict()) == ["filename", "method", "class", "lineNumber", "native"]
        assert frame.to_dict() == json.loads(frame.to_json())

    def test_frames_array(self):
        """Test frames are joined with commas inside brackets."""
        frames = [StackFrame(method="a", class_name="m"), StackFrame(method="b", class_name="m")]
        parts = []
        write_frames(frames, parts)
        assert "".join(parts) == '[{"method":"a","class":"m","native":false},{"method":"b","class":"m","native":false}]'

    def test_empty_frames_array(self):
        """Test an empty list gives an empty array."""
        parts = []
        write_frames([], parts)
        assert "".join(parts) == "[]"


class TestExtractFrames:
    """Frames derived from a live traceback."""

    def test_order_is_outermost_first(self):
        """Test frames follow traceback order, most recent call last."""
        frames = extract_frames(_traceback_of(_level_one))
        assert [f.method for f in frames] == ["_traceback_of", "_level_one", "_level_two", "_level_three"]

    def test_frame_fields(self):
        """Test file, line, native flag and class of a module-level function."""
        frame = extract_frames(_traceback_of(_level_one))[-1]
        assert frame.filename == __file__
        assert frame.line_number > 0
        assert frame.native is False
        assert frame.class_name == __name__

    @pytest.mark.skipif(sys.version_info < (3, 11), reason="co_qualname is new in 3.11")
    def test_method_owner_is_part_of_class(self):
        """Test a method's owning class is appended to the module."""
        frame = extract_frames(_traceback_of(_Outer().boom))[-1]
        assert frame.method == "boom"
        assert frame.class_name == f"{__name__}._Outer"

    def test_closure_falls_back_to_module(self):
        """Test a function nested in another function reports only its module."""
        frame = extract_frames(_traceback_of(_with_closure))[-1]
        assert frame.method == "inner"
        assert frame.class_name == __name__

    @pytest.mark.parametrize("limit, expected", [
        (None, 4),
        (10, 4),
        (2, 2),
        (0, 0),
    ])
    def test_limit_keeps_most_recent(self, limit, expected):
        """Test the limit keeps the frames closest to the raise."""
        frames = extract_frames(_traceback_of(_level_one), limit=limit)
        assert len(frames) == expected
        if frames:
            assert frames[-1].method == "_level_three"

    def test_no_traceback(self):
        """Test a missing traceback gives no frames."""
        assert extract_frames(None) == []
