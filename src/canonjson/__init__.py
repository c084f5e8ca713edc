"""canonjson public API."""

from .canonical import canonical_bytes, canonical_dumps, is_canonical, loads, sha256_hex
from .errors import (
    CanonicalJSONError,
    DuplicateKey,
    InvalidNumberLiteral,
    NestingTooDeep,
    ProtocolViolation,
    UnsupportedFloat,
    UnsupportedType,
)
from .escapes import AsciiControl, CharEscape
from .formatter import CanonicalFormatter
from .protocols import Formatter, Sink
from .serializer import Serializer
from .sinks import BytesSink, StreamSink
from .types import RawFragment, RawNumber, SerializerOptions

__all__ = (
    # Helpers
    "canonical_bytes",
    "canonical_dumps",
    "sha256_hex",
    "is_canonical",
    "loads",
    # Core engine
    "CanonicalFormatter",
    "Formatter",
    "Sink",
    "BytesSink",
    "StreamSink",
    "CharEscape",
    "AsciiControl",
    # Driver
    "Serializer",
    "SerializerOptions",
    "RawNumber",
    "RawFragment",
    # Errors
    "CanonicalJSONError",
    "UnsupportedFloat",
    "InvalidNumberLiteral",
    "ProtocolViolation",
    "UnsupportedType",
    "DuplicateKey",
    "NestingTooDeep",
)
