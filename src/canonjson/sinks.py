"""Output sinks for canonical bytes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import BinaryIO


@dataclass
class BytesSink:
    """In-memory sink backed by a bytearray."""

    buffer: bytearray = field(default_factory=bytearray)

    def write(self, data: bytes) -> None:
        self.buffer += data

    def getvalue(self) -> bytes:
        return bytes(self.buffer)

    def __len__(self) -> int:
        return len(self.buffer)


@dataclass
class StreamSink:
    """Sink writing straight through to a binary file object."""

    stream: BinaryIO
    bytes_written: int = 0

    def write(self, data: bytes) -> None:
        self.stream.write(data)
        self.bytes_written += len(data)
