"""Exception types for canonjson."""

from __future__ import annotations


class CanonicalJSONError(ValueError):
    """Base exception for all canonjson errors.

    Every subclass is fatal to the serialization session that raised it; any
    bytes already written to the sink must be discarded.
    """


class UnsupportedFloat(CanonicalJSONError):
    """Raised when a floating-point value is written."""


class InvalidNumberLiteral(CanonicalJSONError):
    """Raised when a textual number does not match the canonical grammar."""


class ProtocolViolation(CanonicalJSONError):
    """Raised when the event stream breaks the expected event ordering."""


class UnsupportedType(CanonicalJSONError):
    """Raised when a value has no canonical JSON representation."""


class DuplicateKey(CanonicalJSONError):
    """Raised when two object keys collide after unicode normalization."""


class NestingTooDeep(CanonicalJSONError):
    """Raised when container nesting exceeds the configured limit."""


def sanitize_exception(exc: Exception) -> str:
    """Return a safe one-line error message without filesystem paths."""
    if isinstance(exc, OSError):
        parts: list[str] = [exc.__class__.__name__]
        if exc.errno is not None:
            parts.append(f"errno={exc.errno}")
        if exc.strerror:
            parts.append(exc.strerror)
        return " ".join(parts).strip()
    lines = str(exc).strip().splitlines()
    return lines[0] if lines else exc.__class__.__name__
