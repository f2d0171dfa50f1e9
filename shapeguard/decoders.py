"""
Built-in decoders for shapeguard.

Provides factory functions that return Decoder instances. A schema is built
once from these and can then be shared by any number of parse() calls.
"""

from __future__ import annotations

import datetime
import re
from collections.abc import Mapping, Sequence
from typing import Any

from . import patterns
from .core import Decoder, OptionalDecoder, ensure_decoder
from .primitives import (
    BooleanDecoder,
    EnumDecoder,
    IntDecoder,
    LiteralDecoder,
    NumberDecoder,
    StringDecoder,
    enum_values,
)
from .structures import ArrayDecoder, ObjectDecoder, RecordDecoder, UnionDecoder


def String(
    pattern: str | re.Pattern[str] | None = None,
    min_length: int | None = None,
    max_length: int | None = None,
    pattern_name: str | None = None,
) -> StringDecoder:
    """
    Validate that value is a string, optionally constrained.

    Usage:
        String()
        String(min_length=3, max_length=20)
        String(pattern=r"^#[0-9A-Fa-f]{6}$", pattern_name="hex color")
    """
    return StringDecoder(
        regex=pattern,
        min_length=min_length,
        max_length=max_length,
        pattern_name=pattern_name,
    )


def Number(min: float | None = None, max: float | None = None) -> NumberDecoder:
    """
    Validate a number, or a string starting with one ("12.5" -> 12.5).

    Usage:
        Number()
        Number(min=0, max=100)
    """
    return NumberDecoder(min=min, max=max)


def Int(min: float | None = None, max: float | None = None) -> IntDecoder:
    """Validate an integer; floats and numeric strings are truncated ("123.5" -> 123)."""
    return IntDecoder(min=min, max=max)


def Boolean() -> BooleanDecoder:
    """Validate a bool, or "true"/"false" in any case."""
    return BooleanDecoder()


def Literal(value: str) -> LiteralDecoder:
    """Validate a string equal to `value`."""
    if not isinstance(value, str):
        raise TypeError(f"Literal value must be a string, got {type(value).__name__}")
    return LiteralDecoder(value=value)


def Enum(values: Sequence[Any] | Mapping[str, Any] | type) -> EnumDecoder:
    """
    Validate value is one of a closed set.

    Usage:
        Enum(["ACTIVE", "INACTIVE"])
        Enum({"active": "ACTIVE", "inactive": "INACTIVE"})
        Enum(StatusEnum)      # member values of an enum.Enum
    """
    return EnumDecoder(values=enum_values(values))


def Optional(decoder: Decoder[Any]) -> OptionalDecoder:
    """
    Allow the value to be absent; validate it otherwise.

    Falsy inputs (None, False, 0, "") decode to None without validation.
    """
    return OptionalDecoder(decoder=ensure_decoder(decoder, "Optional inner decoder"))


def Array(decoder: Decoder[Any]) -> ArrayDecoder:
    """
    Validate a list (or JSON array text) whose items all match `decoder`.

    Usage:
        Array(Number()).parse("[1, 2, 3]")   # [1, 2, 3]
    """
    return ArrayDecoder(decoder=decoder)


def Object(
    fields: Mapping[str, Decoder[Any]], disallow_unknown_fields: bool = False
) -> ObjectDecoder:
    """
    Validate a mapping (or JSON object text) field by field.

    Usage:
        User = Object({
            "id": Int(),
            "name": String(),
            "age": Optional(Int(min=0)),
        })
    """
    return ObjectDecoder(fields=fields, disallow_unknown_fields=disallow_unknown_fields)


def Record(key: Decoder[Any], value: Decoder[Any]) -> RecordDecoder:
    """
    Validate every key and value of a mapping.

    Usage:
        Record(Enum(["dev", "prod"]), String())
    """
    return RecordDecoder(key_decoder=key, value_decoder=value)


def Dictionary(value: Decoder[Any]) -> RecordDecoder:
    """Record with plain string keys."""
    return Record(String(), value)


def Union(decoders: Sequence[Decoder[Any]]) -> UnionDecoder:
    """
    Validate against the first matching alternative, in order.

    Usage:
        Union([String(), Number()])
    """
    return UnionDecoder(decoders=tuple(decoders))


def Email():
    """Validate an e-mail address (local-part@domain)."""
    return String().pattern(patterns.email, "email")


def UUID():
    """Validate an 8-4-4-4-12 hexadecimal UUID string."""
    return String().pattern(patterns.uuid, "UUID")


def Date():
    """
    Validate an ISO 8601 date or datetime string and decode it to a datetime.

    Usage:
        Date().parse("2024-01-15T10:30:00Z")
    """
    return (
        String()
        .transform(_to_datetime)
        .refine(
            lambda d: isinstance(d, datetime.datetime),
            error="Input string is not a valid date",
        )
    )


def _to_datetime(text: str) -> datetime.datetime | None:
    try:
        return datetime.datetime.fromisoformat(text)
    except ValueError:
        return None
