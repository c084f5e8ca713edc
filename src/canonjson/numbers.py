"""Integer formatting and canonical number-literal validation."""

from __future__ import annotations

import re
from enum import Enum
from typing import NoReturn

from .errors import InvalidNumberLiteral, ProtocolViolation, UnsupportedFloat

# digit | "-" digit1-9 | digit1-9 digit+ | "-" digit1-9 digit+
_NUMBER_RE = re.compile(r"[0-9]|-[1-9]|-?[1-9][0-9]+")


class IntWidth(str, Enum):
    """Fixed integer widths of the event protocol."""

    I8 = "i8"
    I16 = "i16"
    I32 = "i32"
    I64 = "i64"
    I128 = "i128"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    U128 = "u128"

    @property
    def bits(self) -> int:
        return int(self.value[1:])

    @property
    def signed(self) -> bool:
        return self.value.startswith("i")

    @property
    def bounds(self) -> tuple[int, int]:
        """Inclusive (min, max) range of the width."""
        if self.signed:
            half = 1 << (self.bits - 1)
            return -half, half - 1
        return 0, (1 << self.bits) - 1

    def contains(self, value: int) -> bool:
        low, high = self.bounds
        return low <= value <= high


# Narrowest-first order used by drivers to pick a width for a Python int.
DRIVER_WIDTHS = (IntWidth.I64, IntWidth.U64, IntWidth.I128, IntWidth.U128)


def is_canonical_number(text: str) -> bool:
    """Return True if ``text`` is a valid canonical number literal."""
    # fullmatch: "$" alone would accept a trailing newline.
    return _NUMBER_RE.fullmatch(text) is not None


def validate_number_literal(text: str) -> bytes:
    """Return the literal as bytes, or raise InvalidNumberLiteral."""
    if not isinstance(text, str) or not is_canonical_number(text):
        raise InvalidNumberLiteral(f"number literal not in canonical form: {text!r}")
    return text.encode("ascii")


def format_integer(value: int, width: IntWidth) -> bytes:
    """Render ``value`` as plain decimal after checking it fits ``width``."""
    # NOTE: bool is a subclass of int, so check bool before int.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ProtocolViolation(f"{width.value} write expects an int, got {type(value).__name__}")
    if not width.contains(value):
        raise ProtocolViolation(f"value {value} out of range for {width.value}")
    # int subclasses (IntEnum, flags) may override __str__.
    return str(int(value)).encode("ascii")


def reject_float(value: object, bits: int) -> NoReturn:
    """Floating point writes are never accepted, whatever the value."""
    raise UnsupportedFloat(f"f{bits} values are forbidden in canonical JSON: {value!r}")
