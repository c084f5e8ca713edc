"""Canonical JSON formatter.

Consumes serialization events in document order and emits canonical bytes:
object members sorted by their rendered key bytes, arrays in event order,
integers only, and the minimal escape set from ``canonjson.escapes``.

Objects cannot be written as they arrive because a later key may sort first.
Each open object therefore gets a ``Frame`` on an explicit stack and every
write made while a frame is open lands in the current member of the top frame.
Closing an object renders the sorted frame and routes the result as a single
write against the parent state, so nesting depth is bounded by memory only.
"""

from __future__ import annotations

import logging

from .errors import ProtocolViolation
from .escapes import Escape, canonical_escape
from .frames import Frame, Member
from .numbers import IntWidth, format_integer, reject_float, validate_number_literal
from .protocols import Sink

_logger = logging.getLogger(__name__)


class CanonicalFormatter:
    """Reordering formatter for one document serialization session.

    Not thread-safe and not reusable after an error: any exception leaves the
    session aborted and whatever reached the sink must be discarded.
    """

    def __init__(self) -> None:
        self._stack: list[Frame] = []

    @property
    def depth(self) -> int:
        """Number of objects currently open."""
        return len(self._stack)

    def finish(self) -> None:
        """Fail if the event stream ended with objects still open."""
        if self._stack:
            raise ProtocolViolation(f"event stream ended with {len(self._stack)} open object(s)")

    # -------- routing --------

    def _current_frame(self) -> Frame:
        if not self._stack:
            raise ProtocolViolation("object key requested when object is not active")
        return self._stack[-1]

    def _current_member(self, frame: Frame) -> Member:
        member = frame.current_member()
        if member is None:
            raise ProtocolViolation("object member requested when member is not active")
        return member

    def _write(self, sink: Sink, data: bytes) -> None:
        """Send ``data`` to the open member, or to the sink at top level."""
        if not self._stack:
            sink.write(data)
            return
        self._current_member(self._stack[-1]).push(data)

    # -------- objects --------

    def begin_object(self, sink: Sink) -> None:
        self._stack.append(Frame())

    def end_object(self, sink: Sink) -> None:
        if not self._stack:
            raise ProtocolViolation("end of object requested when object is not active")
        frame = self._stack.pop()
        rendered = frame.render()
        _logger.debug(
            "closed object members=%d depth=%d bytes=%d",
            len(frame.members),
            len(self._stack),
            len(rendered),
        )
        self._write(sink, rendered)

    def begin_object_key(self, sink: Sink, first: bool) -> None:
        self._current_frame().push_member()

    def end_object_key(self, sink: Sink) -> None:
        frame = self._current_frame()
        self._current_member(frame).finish_key()

    def begin_object_value(self, sink: Sink) -> None:
        pass

    def end_object_value(self, sink: Sink) -> None:
        pass

    # -------- arrays --------

    def begin_array(self, sink: Sink) -> None:
        self._write(sink, b"[")

    def end_array(self, sink: Sink) -> None:
        self._write(sink, b"]")

    def begin_array_value(self, sink: Sink, first: bool) -> None:
        if not first:
            self._write(sink, b",")

    def end_array_value(self, sink: Sink) -> None:
        pass

    # -------- strings --------

    def begin_string(self, sink: Sink) -> None:
        self._write(sink, b'"')

    def end_string(self, sink: Sink) -> None:
        self._write(sink, b'"')

    def write_string_fragment(self, sink: Sink, fragment: str) -> None:
        self._write(sink, fragment.encode("utf-8"))

    def write_char_escape(self, sink: Sink, escape: Escape) -> None:
        self._write(sink, canonical_escape(escape))

    # -------- scalars --------

    def write_null(self, sink: Sink) -> None:
        self._write(sink, b"null")

    def write_bool(self, sink: Sink, value: bool) -> None:
        self._write(sink, b"true" if value else b"false")

    def _write_int(self, sink: Sink, value: int, width: IntWidth) -> None:
        self._write(sink, format_integer(value, width))

    def write_i8(self, sink: Sink, value: int) -> None:
        self._write_int(sink, value, IntWidth.I8)

    def write_i16(self, sink: Sink, value: int) -> None:
        self._write_int(sink, value, IntWidth.I16)

    def write_i32(self, sink: Sink, value: int) -> None:
        self._write_int(sink, value, IntWidth.I32)

    def write_i64(self, sink: Sink, value: int) -> None:
        self._write_int(sink, value, IntWidth.I64)

    def write_i128(self, sink: Sink, value: int) -> None:
        self._write_int(sink, value, IntWidth.I128)

    def write_u8(self, sink: Sink, value: int) -> None:
        self._write_int(sink, value, IntWidth.U8)

    def write_u16(self, sink: Sink, value: int) -> None:
        self._write_int(sink, value, IntWidth.U16)

    def write_u32(self, sink: Sink, value: int) -> None:
        self._write_int(sink, value, IntWidth.U32)

    def write_u64(self, sink: Sink, value: int) -> None:
        self._write_int(sink, value, IntWidth.U64)

    def write_u128(self, sink: Sink, value: int) -> None:
        self._write_int(sink, value, IntWidth.U128)

    def write_f32(self, sink: Sink, value: float) -> None:
        reject_float(value, 32)

    def write_f64(self, sink: Sink, value: float) -> None:
        reject_float(value, 64)

    def write_number_str(self, sink: Sink, value: str) -> None:
        self._write(sink, validate_number_literal(value))

    def write_raw_fragment(self, sink: Sink, fragment: str) -> None:
        self._write(sink, fragment.encode("utf-8"))
