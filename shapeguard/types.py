"""
Type definitions for shapeguard.

Provides a minimal Result type (Ok/Err) and the exception raised by parse().
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, TypeVar, Union

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """Success result containing a value."""

    value: T

    @property
    def success(self) -> bool:
        return True

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """Error result containing an error value."""

    error: E

    @property
    def success(self) -> bool:
        return False

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True


class DecodeError(ValueError):
    """Raised by Decoder.parse() with the fully path-annotated failure message."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# Type aliases
Result = Union[Ok[T], Err[str]]
Predicate = Callable[[Any], bool]
JSONSchema = dict[str, Any]
