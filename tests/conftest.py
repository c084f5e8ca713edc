from __future__ import annotations

from dataclasses import dataclass

import pytest

from canonjson.escapes import CharEscape
from canonjson.formatter import CanonicalFormatter
from canonjson.sinks import BytesSink


@dataclass
class EventFeed:
    """Feeds hand-written event sequences into a formatter."""

    formatter: CanonicalFormatter
    sink: BytesSink

    def string(self, text: str) -> None:
        self.formatter.begin_string(self.sink)
        for ch in text:
            escape = CharEscape.from_char(ch)
            if escape is None:
                self.formatter.write_string_fragment(self.sink, ch)
            else:
                self.formatter.write_char_escape(self.sink, escape)
        self.formatter.end_string(self.sink)

    def key(self, name: str, *, first: bool = False) -> None:
        self.formatter.begin_object_key(self.sink, first)
        self.string(name)
        self.formatter.end_object_key(self.sink)
        self.formatter.begin_object_value(self.sink)

    def end_value(self) -> None:
        self.formatter.end_object_value(self.sink)

    def output(self) -> bytes:
        return self.sink.getvalue()


@pytest.fixture
def sink() -> BytesSink:
    return BytesSink()


@pytest.fixture
def formatter() -> CanonicalFormatter:
    return CanonicalFormatter()


@pytest.fixture
def feed(formatter: CanonicalFormatter, sink: BytesSink) -> EventFeed:
    return EventFeed(formatter=formatter, sink=sink)
