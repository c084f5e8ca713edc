"""Protocol definitions for the serialization event interface.

A traversal engine walks a value depth-first and pushes events into a
``Formatter``; the formatter decides what bytes reach the ``Sink``.

Design notes:
- Every event method takes the sink first, so one driver can own the sink
  while the formatter owns only its buffering state
- @runtime_checkable is for debugging/logging convenience only, not dispatch
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from .escapes import Escape


@runtime_checkable
class Sink(Protocol):
    """Final destination for canonical bytes."""

    def write(self, data: bytes) -> None:
        """Append ``data`` to the output."""
        ...


@runtime_checkable
class Formatter(Protocol):
    """Push-style serialization events, in document order.

    Implementations may raise any ``CanonicalJSONError``; the session is then
    aborted and the sink contents are unusable.
    """

    def begin_object(self, sink: Sink) -> None: ...

    def end_object(self, sink: Sink) -> None: ...

    def begin_object_key(self, sink: Sink, first: bool) -> None: ...

    def end_object_key(self, sink: Sink) -> None: ...

    def begin_object_value(self, sink: Sink) -> None: ...

    def end_object_value(self, sink: Sink) -> None: ...

    def begin_array(self, sink: Sink) -> None: ...

    def end_array(self, sink: Sink) -> None: ...

    def begin_array_value(self, sink: Sink, first: bool) -> None: ...

    def end_array_value(self, sink: Sink) -> None: ...

    def begin_string(self, sink: Sink) -> None: ...

    def end_string(self, sink: Sink) -> None: ...

    def write_string_fragment(self, sink: Sink, fragment: str) -> None: ...

    def write_char_escape(self, sink: Sink, escape: Escape) -> None: ...

    def write_null(self, sink: Sink) -> None: ...

    def write_bool(self, sink: Sink, value: bool) -> None: ...

    def write_i8(self, sink: Sink, value: int) -> None: ...

    def write_i16(self, sink: Sink, value: int) -> None: ...

    def write_i32(self, sink: Sink, value: int) -> None: ...

    def write_i64(self, sink: Sink, value: int) -> None: ...

    def write_i128(self, sink: Sink, value: int) -> None: ...

    def write_u8(self, sink: Sink, value: int) -> None: ...

    def write_u16(self, sink: Sink, value: int) -> None: ...

    def write_u32(self, sink: Sink, value: int) -> None: ...

    def write_u64(self, sink: Sink, value: int) -> None: ...

    def write_u128(self, sink: Sink, value: int) -> None: ...

    def write_f32(self, sink: Sink, value: float) -> None: ...

    def write_f64(self, sink: Sink, value: float) -> None: ...

    def write_number_str(self, sink: Sink, value: str) -> None:
        """Write a number supplied as pre-formatted text."""
        ...

    def write_raw_fragment(self, sink: Sink, fragment: str) -> None:
        """Write pre-validated JSON text without escaping."""
        ...
