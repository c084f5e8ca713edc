"""Canonical JSON encoding and hashing helpers.

Rules enforced by ``CanonicalFormatter``:
- object members sorted by the bytes of their quoted, escaped key
- arrays keep their order
- integers only; floats are rejected, number text must be canonical
- only ``"`` and ``\\`` are backslash-escaped, other control bytes are raw
- no whitespace
"""

from __future__ import annotations

import hashlib
import json
import logging
from typing import Any, NoReturn

from .errors import NestingTooDeep, UnsupportedFloat
from .serializer import Serializer
from .sinks import BytesSink
from .types import SerializerOptions

_logger = logging.getLogger(__name__)


def canonical_bytes(value: Any, *, options: SerializerOptions | None = None) -> bytes:
    """Return canonical UTF-8 bytes for ``value``."""
    sink = BytesSink()
    Serializer(sink, options=options).serialize(value)
    _logger.debug("canonicalized %s into %d bytes", type(value).__name__, len(sink))
    return sink.getvalue()


def canonical_dumps(value: Any, *, options: SerializerOptions | None = None) -> str:
    """Return the canonical encoding of ``value`` as text."""
    return canonical_bytes(value, options=options).decode("utf-8")


def sha256_hex(value: Any, *, options: SerializerOptions | None = None) -> str:
    """Return SHA-256 hex digest of the canonical bytes."""
    return hashlib.sha256(canonical_bytes(value, options=options)).hexdigest()


def _reject_float(text: str) -> NoReturn:
    raise UnsupportedFloat(f"floating point literal in input: {text}")


def loads(data: bytes | str) -> Any:
    """Parse JSON text, rejecting floating point literals.

    Decoding needs no reordering, so this is the standard ``json`` parser
    with floats refused up front. ``strict=False`` admits the raw control
    bytes canonical strings carry. Input nested past the parser recursion
    limit raises ``NestingTooDeep``.
    """
    try:
        return json.loads(
            data, strict=False, parse_float=_reject_float, parse_constant=_reject_float
        )
    except RecursionError as exc:
        raise NestingTooDeep("input nesting exceeds the JSON parser recursion limit") from exc


def is_canonical(data: bytes | str) -> bool:
    """Return True if ``data`` is exactly the canonical encoding of its value."""
    raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
    try:
        value = loads(raw)
        return canonical_bytes(value) == raw
    except ValueError:  # CanonicalJSONError, JSONDecodeError and UnicodeDecodeError
        return False
