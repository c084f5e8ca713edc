"""Value walker that drives a Formatter.

The walker turns ordinary Python values into the depth-first event stream a
``Formatter`` consumes. It uses an explicit work stack instead of recursion,
so deeply nested documents do not hit the interpreter's recursion limit.
"""

from __future__ import annotations

import dataclasses
import re
import unicodedata
from decimal import Decimal
from typing import Any, Callable, Mapping

from pydantic import BaseModel

from .errors import DuplicateKey, NestingTooDeep, UnsupportedType
from .escapes import CharEscape
from .formatter import CanonicalFormatter
from .numbers import DRIVER_WIDTHS
from .protocols import Formatter, Sink
from .types import DEFAULT_OPTIONS, RawFragment, RawNumber, SerializerOptions

# Characters a standard JSON engine never writes verbatim inside a string.
_NEEDS_ESCAPE = re.compile(r'["\\\x00-\x1f]')

# Work items: ("value", value, depth) | ("member", key, value, first, depth)
# | ("element", value, first, depth) | ("event", method)
_Task = tuple[Any, ...]


def _decimal_text(value: Decimal) -> str:
    """Return number text for a Decimal; exact integers drop their fraction.

    ``Decimal("1.0")`` becomes ``1`` and ``Decimal("-0")`` becomes ``0``.
    Anything else keeps its fixed-point text and fails the number grammar.
    """
    if value.is_finite() and value == value.to_integral_value():
        return str(int(value))
    return format(value, "f")


class Serializer:
    """Walks a value and pushes its events into ``formatter``.

    Supported values:
    - None, bool, int, str
    - Decimal and RawNumber (written as number text, so non-integers fail)
    - RawFragment (written verbatim)
    - Mapping with str keys, pydantic models, dataclass instances (objects)
    - list and tuple (arrays)

    float values reach the formatter as f64 writes and are rejected there.
    """

    def __init__(
        self,
        sink: Sink,
        formatter: Formatter | None = None,
        *,
        options: SerializerOptions | None = None,
    ) -> None:
        self.sink = sink
        self.formatter: Formatter = formatter if formatter is not None else CanonicalFormatter()
        self.options = options if options is not None else DEFAULT_OPTIONS

    def serialize(self, value: Any) -> None:
        """Emit the complete event stream for ``value``."""
        work: list[_Task] = [("value", value, 0)]
        while work:
            task = work.pop()
            kind = task[0]
            if kind == "value":
                self._emit_value(task[1], task[2], work)
            elif kind == "member":
                self._emit_member(task[1], task[2], task[3], task[4], work)
            elif kind == "element":
                self._emit_element(task[1], task[2], task[3], work)
            else:
                task[1](self.sink)
        finish: Callable[[], None] | None = getattr(self.formatter, "finish", None)
        if finish is not None:
            finish()

    # -------- containers --------

    def _enter(self, depth: int) -> int:
        inner = depth + 1
        max_depth = self.options.max_depth
        if max_depth is not None and inner > max_depth:
            raise NestingTooDeep(f"nesting depth exceeds {max_depth}")
        return inner

    def _emit_object(self, items: list[tuple[str, Any]], depth: int, work: list[_Task]) -> None:
        inner = self._enter(depth)
        self.formatter.begin_object(self.sink)
        work.append(("event", self.formatter.end_object))
        for index in range(len(items) - 1, -1, -1):
            key, item = items[index]
            work.append(("member", key, item, index == 0, inner))

    def _emit_member(self, key: str, value: Any, first: bool, depth: int, work: list[_Task]) -> None:
        fmt = self.formatter
        fmt.begin_object_key(self.sink, first)
        self._emit_string(key)
        fmt.end_object_key(self.sink)
        fmt.begin_object_value(self.sink)
        work.append(("event", fmt.end_object_value))
        work.append(("value", value, depth))

    def _emit_array(self, items: list[Any] | tuple[Any, ...], depth: int, work: list[_Task]) -> None:
        inner = self._enter(depth)
        self.formatter.begin_array(self.sink)
        work.append(("event", self.formatter.end_array))
        for index in range(len(items) - 1, -1, -1):
            work.append(("element", items[index], index == 0, inner))

    def _emit_element(self, value: Any, first: bool, depth: int, work: list[_Task]) -> None:
        self.formatter.begin_array_value(self.sink, first)
        work.append(("event", self.formatter.end_array_value))
        work.append(("value", value, depth))

    def _object_items(self, value: Any) -> list[tuple[str, Any]] | None:
        """Return (key, value) pairs for object-like values, else None."""
        if isinstance(value, BaseModel):
            raw: Mapping[Any, Any] = value.model_dump(mode="python", by_alias=True)
        elif dataclasses.is_dataclass(value) and not isinstance(value, type):
            raw = {f.name: getattr(value, f.name) for f in dataclasses.fields(value)}
        elif isinstance(value, Mapping):
            raw = value
        else:
            return None

        items: list[tuple[str, Any]] = []
        seen: set[str] = set()
        for key, item in raw.items():
            if not isinstance(key, str):
                raise UnsupportedType(f"object keys must be strings, got {type(key).__name__}")
            if self.options.normalize_unicode:
                key = unicodedata.normalize("NFC", key)
                if key in seen:
                    raise DuplicateKey(f"duplicate key after NFC normalization: {key!r}")
                seen.add(key)
            items.append((key, item))
        return items

    # -------- scalars --------

    def _emit_value(self, value: Any, depth: int, work: list[_Task]) -> None:
        fmt = self.formatter
        sink = self.sink
        if value is None:
            fmt.write_null(sink)
            return
        # NOTE: bool is a subclass of int, so check bool before int.
        if isinstance(value, bool):
            fmt.write_bool(sink, value)
            return
        if isinstance(value, int):
            self._emit_int(value)
            return
        if isinstance(value, float):
            fmt.write_f64(sink, value)
            return
        if isinstance(value, Decimal):
            fmt.write_number_str(sink, _decimal_text(value))
            return
        if isinstance(value, RawNumber):
            fmt.write_number_str(sink, value.text)
            return
        if isinstance(value, RawFragment):
            fmt.write_raw_fragment(sink, value.text)
            return
        if isinstance(value, str):
            self._emit_string(value)
            return
        if isinstance(value, (list, tuple)):
            self._emit_array(value, depth, work)
            return
        if isinstance(value, (set, frozenset)):
            raise UnsupportedType("sets have no canonical order; convert to a sorted list")
        if isinstance(value, (bytes, bytearray, memoryview)):
            raise UnsupportedType("bytes are not JSON; encode them as a string first")
        items = self._object_items(value)
        if items is None:
            raise UnsupportedType(f"type {type(value).__name__} is not JSON-serializable")
        self._emit_object(items, depth, work)

    def _emit_int(self, value: int) -> None:
        for width in DRIVER_WIDTHS:
            if width.contains(value):
                getattr(self.formatter, f"write_{width.value}")(self.sink, value)
                return
        self.formatter.write_number_str(self.sink, str(int(value)))

    def _emit_string(self, value: str) -> None:
        fmt = self.formatter
        sink = self.sink
        if self.options.normalize_unicode:
            value = unicodedata.normalize("NFC", value)
        fmt.begin_string(sink)
        start = 0
        for match in _NEEDS_ESCAPE.finditer(value):
            if match.start() > start:
                fmt.write_string_fragment(sink, value[start : match.start()])
            escape = CharEscape.from_char(match.group())
            if escape is not None:
                fmt.write_char_escape(sink, escape)
            start = match.end()
        if start < len(value):
            fmt.write_string_fragment(sink, value[start:])
        fmt.end_string(sink)
