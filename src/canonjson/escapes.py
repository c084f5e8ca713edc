"""Minimal string escape policy.

Only the quote and the reverse solidus are ever written as backslash escapes.
Every other character a JSON engine would escape is emitted as its raw byte,
which leaves exactly one encoding for any string.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias


class CharEscape(str, Enum):
    """Named escape events produced by a JSON traversal engine."""

    QUOTE = "quote"
    REVERSE_SOLIDUS = "reverse_solidus"
    SOLIDUS = "solidus"
    BACKSPACE = "backspace"
    FORM_FEED = "form_feed"
    LINE_FEED = "line_feed"
    CARRIAGE_RETURN = "carriage_return"
    TAB = "tab"

    @staticmethod
    def from_char(ch: str) -> "Escape | None":
        """Return the escape event a standard JSON engine emits for ``ch``.

        Returns ``None`` when the character is written as a plain fragment.
        The solidus is never escaped by standard engines and maps to ``None``.
        """
        named = _CHAR_TO_ESCAPE.get(ch)
        if named is not None:
            return named
        code = ord(ch)
        if code < 0x20:
            return AsciiControl(code)
        return None


@dataclass(frozen=True, slots=True)
class AsciiControl:
    """Escape event for a control byte without a short JSON escape."""

    byte: int

    def __post_init__(self) -> None:
        if not (0 <= self.byte < 0x20 or self.byte == 0x7F):
            raise ValueError(f"not an ASCII control byte: {self.byte:#04x}")


Escape: TypeAlias = CharEscape | AsciiControl

_CHAR_TO_ESCAPE: dict[str, CharEscape] = {
    '"': CharEscape.QUOTE,
    "\\": CharEscape.REVERSE_SOLIDUS,
    "\b": CharEscape.BACKSPACE,
    "\f": CharEscape.FORM_FEED,
    "\n": CharEscape.LINE_FEED,
    "\r": CharEscape.CARRIAGE_RETURN,
    "\t": CharEscape.TAB,
}

CANONICAL_ESCAPES: dict[CharEscape, bytes] = {
    CharEscape.QUOTE: b'\\"',
    CharEscape.REVERSE_SOLIDUS: b"\\\\",
    CharEscape.SOLIDUS: b"/",
    CharEscape.BACKSPACE: b"\x08",
    CharEscape.FORM_FEED: b"\x0c",
    CharEscape.LINE_FEED: b"\n",
    CharEscape.CARRIAGE_RETURN: b"\r",
    CharEscape.TAB: b"\t",
}


def canonical_escape(escape: Escape) -> bytes:
    """Translate an escape event into its canonical output bytes."""
    if isinstance(escape, AsciiControl):
        return bytes((escape.byte,))
    return CANONICAL_ESCAPES[CharEscape(escape)]
