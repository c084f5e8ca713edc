"""Typed models for canonjson."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import TypeAlias

from pydantic import BaseModel, field_validator


@dataclass(frozen=True, slots=True)
class RawNumber:
    """A number supplied as pre-formatted text.

    The text is checked against the canonical number grammar when written.
    """

    text: str


@dataclass(frozen=True, slots=True)
class RawFragment:
    """Pre-validated JSON text written verbatim, without escaping or checks."""

    text: str


JSONPrimitive: TypeAlias = str | int | bool | None | Decimal | RawNumber | RawFragment
JSONValue: TypeAlias = JSONPrimitive | dict[str, "JSONValue"] | list["JSONValue"]


class SerializerOptions(BaseModel):
    """Knobs for the value walker. The formatter itself has none."""

    model_config = {"frozen": True}

    normalize_unicode: bool = False
    max_depth: int | None = None

    @field_validator("max_depth")
    @classmethod
    def _max_depth_positive(cls, value: int | None) -> int | None:
        if value is not None and value < 1:
            raise ValueError("max_depth must be a positive integer")
        return value


DEFAULT_OPTIONS = SerializerOptions()
