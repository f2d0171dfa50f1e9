"""
Leaf decoders: string, number, int, boolean, literal and enum.
"""

from __future__ import annotations

import enum
import math
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Callable, ClassVar

from .core import Decoder, Refined, show, type_name
from .types import Err, JSONSchema, Ok, Result

_FLOAT_PREFIX = re.compile(
    r"^\s*([+-]?(?:Infinity|(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?))"
)
_INT_PREFIX = re.compile(r"^\s*([+-]?\d+)")


def parse_float(text: str) -> float | None:
    """
    Parse the leading decimal number of `text` ("12.5kg" -> 12.5).

    A leading "Infinity" (optionally signed) parses to an infinite float.
    """
    match = _FLOAT_PREFIX.match(text)
    return float(match.group(1)) if match else None


def parse_int(text: str) -> int | None:
    """Parse the leading integer of `text`, truncating ("123.5" -> 123)."""
    match = _INT_PREFIX.match(text)
    if not match:
        return None
    try:
        return int(match.group(1))
    except ValueError:
        # more digits than sys.get_int_max_str_digits() allows
        return None


@dataclass(frozen=True, slots=True, eq=False)
class StringDecoder(Decoder[str]):
    tag: ClassVar[str] = "string"

    regex: re.Pattern[str] | None = None
    min_length: int | None = None
    max_length: int | None = None
    pattern_name: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.regex, str):
            object.__setattr__(self, "regex", re.compile(self.regex))

        if (
            self.min_length is not None
            and self.max_length is not None
            and self.min_length > self.max_length
        ):
            raise ValueError("Minimum length cannot be greater than maximum length")

    def parse_internal(self, value: Any) -> Result[str]:
        if not isinstance(value, str):
            return Err(f"Expected string, got {type_name(value)}")

        if self.regex is not None and not self.regex.search(value):
            shown = self.pattern_name or self.regex.pattern
            return Err(f'Input string does not match pattern "{shown}", got "{value}"')

        if self.min_length is not None and len(value) < self.min_length:
            return Err(
                f"Input string is shorter than minimum length {self.min_length}, "
                f'got "{value}"'
            )

        if self.max_length is not None and len(value) > self.max_length:
            return Err(
                f"Input string is longer than maximum length {self.max_length}, "
                f'got "{value}"'
            )

        return Ok(value)

    def length(self, n: int) -> Refined[str]:
        """Require exactly `n` characters."""
        return self.constrain(
            lambda s: len(s) == n,
            f"Input string must be exactly {n} characters long",
            minLength=n,
            maxLength=n,
        )

    def min(self, n: int) -> Refined[str]:
        """Require at least `n` characters."""
        return self.constrain(
            lambda s: len(s) >= n,
            f"Input string must be at least {n} characters long",
            minLength=n,
        )

    def max(self, n: int) -> Refined[str]:
        """Require at most `n` characters."""
        return self.constrain(
            lambda s: len(s) <= n,
            f"Input string must be at most {n} characters long",
            maxLength=n,
        )

    def pattern(self, regex: str | re.Pattern[str], name: str | None = None) -> Refined[str]:
        """
        Require the string to contain a match for `regex`.

        Usage:
            String().pattern(r"^#[0-9a-f]{6}$", "hex color")
        """
        compiled = re.compile(regex) if isinstance(regex, str) else regex
        suffix = f' "{name}"' if name else ""
        return self.constrain(
            lambda s: compiled.search(s) is not None,
            f"Input string does not match pattern{suffix}",
            pattern=compiled.pattern,
        )

    def to_json_schema(self) -> JSONSchema:
        schema: JSONSchema = {"type": "string"}
        if self.min_length is not None:
            schema["minLength"] = self.min_length
        if self.max_length is not None:
            schema["maxLength"] = self.max_length
        if self.regex is not None:
            schema["pattern"] = self.regex.pattern
        return schema


@dataclass(frozen=True, slots=True, eq=False)
class NumberDecoder(Decoder[float]):
    """
    Accepts numbers, or strings whose leading characters form a number.

    Subclasses swap the text parser and the JSON Schema type.
    """

    tag: ClassVar[str] = "number"
    json_type: ClassVar[str] = "number"
    parse_text: ClassVar[Callable[[str], float | int | None]] = staticmethod(parse_float)

    min: float | None = None
    max: float | None = None

    def parse_internal(self, value: Any) -> Result[float]:
        extracted = self._extract(value)
        if isinstance(extracted, Err):
            return extracted

        number = extracted.value

        if self.min is not None and number < self.min:
            return Err(f"Number is less than minimum value {self.min}, got {show(value)}")

        if self.max is not None and number > self.max:
            return Err(
                f"Number is greater than maximum value {self.max}, got {show(value)}"
            )

        return Ok(number)

    def _extract(self, value: Any) -> Result[float]:
        if isinstance(value, bool) or not isinstance(value, (int, float, str)):
            return Err(f"Expected number, got {type_name(value)}")

        if isinstance(value, str):
            number = self.parse_text(value)
            if number is None:
                return Err(f'Expected number, got "{value}"')
        else:
            number = value

        if isinstance(number, float) and math.isnan(number):
            return Err("Expected number, got NaN")

        return self._coerce(number)

    def _coerce(self, number: float) -> Result[float]:
        return Ok(number)

    def to_json_schema(self) -> JSONSchema:
        schema: JSONSchema = {"type": self.json_type}
        if self.min is not None:
            schema["minimum"] = self.min
        if self.max is not None:
            schema["maximum"] = self.max
        return schema


@dataclass(frozen=True, slots=True, eq=False)
class IntDecoder(NumberDecoder):
    """Like NumberDecoder, but truncates toward zero."""

    tag: ClassVar[str] = "int"
    json_type: ClassVar[str] = "integer"
    parse_text: ClassVar[Callable[[str], float | int | None]] = staticmethod(parse_int)

    def _coerce(self, number: float) -> Result[float]:
        if isinstance(number, float) and not math.isfinite(number):
            return Err(f"Expected integer, got {number}")
        return Ok(math.trunc(number))


@dataclass(frozen=True, slots=True, eq=False)
class BooleanDecoder(Decoder[bool]):
    tag: ClassVar[str] = "boolean"

    def parse_internal(self, value: Any) -> Result[bool]:
        if isinstance(value, bool):
            return Ok(value)

        if not isinstance(value, str):
            return Err(f"Expected boolean, got {type_name(value)}")

        lowered = value.lower()
        if lowered not in ("true", "false"):
            return Err(f'Expected boolean, got "{value}"')

        return Ok(lowered == "true")

    def to_json_schema(self) -> JSONSchema:
        return {"type": "boolean"}


@dataclass(frozen=True, slots=True, eq=False)
class LiteralDecoder(Decoder[str]):
    tag: ClassVar[str] = "literal"

    value: str

    def parse_internal(self, value: Any) -> Result[str]:
        if not isinstance(value, str):
            return Err(f"Expected string, got {type_name(value)}")

        if value != self.value:
            return Err(
                f'Input string does not match literal value "{self.value}", got "{value}"'
            )

        return Ok(value)

    def to_json_schema(self) -> JSONSchema:
        return {"type": "string", "const": self.value}


EnumValue = str | int | float | bool

_JSON_TYPES: dict[type, str] = {
    str: "string",
    bool: "boolean",
    int: "integer",
    float: "number",
}


@dataclass(frozen=True, slots=True, eq=False)
class EnumDecoder(Decoder[EnumValue]):
    """
    Closed set of allowed values.

    Membership compares the kind of value as well as the value: ints and
    floats are both numbers (1 matches 1.0), but True never matches 1.
    """

    tag: ClassVar[str] = "enum"

    values: tuple[EnumValue, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", _unique(self.values))

    def parse_internal(self, value: Any) -> Result[EnumValue]:
        for allowed in self.values:
            if _same(allowed, value):
                return Ok(value)

        expected = ", ".join(show(v) for v in self.values)
        return Err(f"Invalid enum value: {show(value)}, expected one of: {expected}")

    def exclude(self, *values: EnumValue) -> EnumDecoder:
        """
        Return a new enum without `values`.

        Usage:
            Enum(["A", "B", "C"]).exclude("A")   # B, C
        """
        removed = _unique(values)
        return EnumDecoder(
            values=tuple(
                v for v in self.values if not any(_same(v, r) for r in removed)
            )
        )

    def include(self, values: Any) -> EnumDecoder:
        """
        Return a new enum extended with a value, a sequence, a mapping's
        values or an enum.Enum's member values.

        Usage:
            Enum(["A"]).include("B")
            Enum(["A"]).include(["B", "C"])
            Enum(["A"]).include({"b": "B"})
        """
        return EnumDecoder(values=self.values + enum_values(values))

    def to_json_schema(self) -> JSONSchema:
        types = sorted({_JSON_TYPES.get(type(v), "string") for v in self.values})
        schema: JSONSchema = {}
        if len(types) == 1:
            schema["type"] = types[0]
        elif types:
            schema["type"] = types
        schema["enum"] = list(self.values)
        return schema

    def __str__(self) -> str:
        return f"{self.tag} [ {', '.join(show(v) for v in self.values)} ]"


def enum_values(source: Any) -> tuple[EnumValue, ...]:
    """Collect enum values from a scalar, sequence, mapping or enum.Enum class."""
    if isinstance(source, type) and issubclass(source, enum.Enum):
        return tuple(member.value for member in source)
    if isinstance(source, Mapping):
        return tuple(source.values())
    if isinstance(source, (str, int, float, bool)):
        return (source,)
    if isinstance(source, Iterable):
        return tuple(source)
    raise TypeError(f"Cannot build enum values from {type(source).__name__}")


def _kind(value: Any) -> type:
    if isinstance(value, bool):
        return bool
    if isinstance(value, (int, float)):
        return float
    return type(value)


def _same(a: Any, b: Any) -> bool:
    return _kind(a) is _kind(b) and a == b


def _unique(values: Iterable[EnumValue]) -> tuple[EnumValue, ...]:
    seen: list[EnumValue] = []
    for v in values:
        if not any(_same(v, s) for s in seen):
            seen.append(v)
    return tuple(seen)
