"""
Core decoder classes for shapeguard.

Provides the abstract Decoder contract and the combinator decoders
(Transformed, Refined, OptionalDecoder) shared by every schema node.
"""

from __future__ import annotations

import json
import logging
import math
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Callable, ClassVar, Generic, TypeVar

from .context import current_depth, get_max_depth, nesting
from .types import DecodeError, Err, JSONSchema, Ok, Predicate, Result

logger = logging.getLogger(__name__)

T = TypeVar("T")
U = TypeVar("U")

DEFAULT_REFINE_ERROR = "Failed to parse input"


class Decoder(ABC, Generic[T]):
    """
    Immutable validator node.

    Subclasses implement parse_internal() and never raise from it; every other
    entry point is layered on top of that single method.
    """

    __slots__ = ()

    tag: ClassVar[str] = "decoder"

    @abstractmethod
    def parse_internal(self, value: Any) -> Result[T]:
        """Validate `value` and return Ok(decoded) or Err(message)."""

    def safe_parse(self, value: Any) -> Result[T]:
        """Validate without raising. Returns Ok(decoded) or Err(message)."""
        return self.parse_internal(value)

    def parse(self, value: Any) -> T:
        """
        Validate and return the decoded value.

        Raises:
            DecodeError: carrying the failure message verbatim
        """
        result = self.parse_internal(value)
        if isinstance(result, Err):
            logger.debug("Decoding with %s failed: %s", self, result.error)
            raise DecodeError(result.error)
        return result.value

    def transform(self, fn: Callable[[T], U]) -> Transformed[T, U]:
        """
        Return a decoder that applies `fn` to every successfully decoded value.

        Usage:
            String().transform(str.upper)
        """
        return Transformed(parent=self, fn=fn)

    def refine(self, predicate: Predicate, error: str | None = None) -> Refined[T]:
        """
        Return a decoder that additionally requires `predicate(value)` to hold.

        Usage:
            Number().refine(lambda n: n % 2 == 0, error="Must be even")
        """
        return Refined(parent=self, predicate=predicate, error=error)

    def constrain(self, predicate: Predicate, error: str, **schema: Any) -> Refined[T]:
        """Like refine(), but also records JSON Schema keywords for the constraint."""
        return Refined(parent=self, predicate=predicate, error=error, schema=schema)

    def is_optional(self) -> bool:
        """Whether this decoder accepts an absent value."""
        return False

    @abstractmethod
    def to_json_schema(self) -> JSONSchema:
        """Return a JSON Schema fragment mirroring this decoder's rules."""

    def __str__(self) -> str:
        return self.tag


@dataclass(frozen=True, slots=True, eq=False)
class Transformed(Decoder[U], Generic[T, U]):
    """Runs the parent decoder, then maps the value through `fn`."""

    tag: ClassVar[str] = "transform"

    parent: Decoder[T]
    fn: Callable[[T], U]

    def parse_internal(self, value: Any) -> Result[U]:
        result = self.parent.safe_parse(value)
        if isinstance(result, Err):
            return result
        return Ok(self.fn(result.value))

    def to_json_schema(self) -> JSONSchema:
        return self.parent.to_json_schema()

    def __str__(self) -> str:
        return f"{self.tag} [ {self.parent} ]"


@dataclass(frozen=True, slots=True, eq=False)
class Refined(Decoder[T]):
    """Runs the parent decoder, then checks the value against `predicate`."""

    tag: ClassVar[str] = "refine"

    parent: Decoder[T]
    predicate: Predicate
    error: str | None = None
    schema: dict[str, Any] = field(default_factory=dict)

    def parse_internal(self, value: Any) -> Result[T]:
        result = self.parent.safe_parse(value)
        if isinstance(result, Err):
            return result

        try:
            passed = self.predicate(result.value)
        except Exception as e:
            return Err(f"Validation error: {e}")

        if not passed:
            return Err(self.error or DEFAULT_REFINE_ERROR)
        return result

    def to_json_schema(self) -> JSONSchema:
        return {**self.parent.to_json_schema(), **self.schema}

    def __str__(self) -> str:
        return f"{self.tag} [ {self.parent} ]"


@dataclass(frozen=True, slots=True, eq=False)
class OptionalDecoder(Decoder[T | None]):
    """
    Allows the wrapped decoder's value to be absent.

    Absent means falsy in the JSON sense: None, False, numeric zero, NaN and
    the empty string all decode to None without consulting the wrapped
    decoder. Empty lists and mappings are NOT absent and are validated
    normally.

    Note that this makes Optional(Number()) turn a legitimate 0 into None and
    Optional(Boolean()) turn False into None.
    """

    tag: ClassVar[str] = "optional"

    decoder: Decoder[T]

    def parse_internal(self, value: Any) -> Result[T | None]:
        if is_absent(value):
            return Ok(None)
        return self.decoder.safe_parse(value)

    def is_optional(self) -> bool:
        return True

    def to_json_schema(self) -> JSONSchema:
        return self.decoder.to_json_schema()

    def __str__(self) -> str:
        return f"{self.tag} [ {self.decoder} ]"


def is_absent(value: Any) -> bool:
    """True for None, False, 0, NaN and ""."""
    if value is None or value is False:
        return True
    if isinstance(value, (int, float)) and not value:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and value == ""


def type_name(value: Any) -> str:
    """Name a value's runtime type the way JSON would describe it."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (list, tuple)):
        return "array"
    if isinstance(value, Mapping):
        return "object"
    return type(value).__name__


def show(value: Any) -> str:
    """str(value) for error messages; falls back to the type name for huge ints."""
    try:
        return str(value)
    except ValueError:
        return type_name(value)


def load_json(text: str) -> Result[Any]:
    """Decode JSON text, reporting malformed or over-deep input as Err."""
    try:
        return Ok(json.loads(text))
    except (ValueError, RecursionError) as e:
        return Err(str(e) or type(e).__name__)


def descend(decoder: Decoder[T], value: Any) -> Result[T]:
    """
    Delegate to a child decoder one nesting level down.

    Fails instead of recursing once the active max depth is reached.
    """
    limit = get_max_depth()
    if current_depth() >= limit:
        logger.warning("Maximum nesting depth of %d exceeded by %s", limit, decoder)
        return Err(f"Maximum nesting depth of {limit} exceeded")

    with nesting():
        return decoder.safe_parse(value)


def ensure_decoder(value: Any, role: str) -> Decoder[Any]:
    if not isinstance(value, Decoder):
        raise TypeError(f"{role} must be a Decoder, got {type(value).__name__}")
    return value
