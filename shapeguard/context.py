"""
Context manager for decoding configuration (e.g., nesting-depth limit).
"""

from contextlib import contextmanager
from contextvars import ContextVar

DEFAULT_MAX_DEPTH = 128

# Context variables for the active limit and the current nesting depth
_max_depth: ContextVar[int] = ContextVar("max_depth", default=DEFAULT_MAX_DEPTH)
_depth: ContextVar[int] = ContextVar("depth", default=0)


def get_max_depth() -> int:
    """Return the nesting-depth limit currently in effect."""
    return _max_depth.get()


def current_depth() -> int:
    return _depth.get()


@contextmanager
def decoding_context(*, max_depth: int = DEFAULT_MAX_DEPTH):
    """
    Context manager for decoding configuration.

    Args:
        max_depth: Maximum number of nested structural decoders (array, object,
                   record) a single parse may descend through. Deeper inputs
                   fail with "Maximum nesting depth of <n> exceeded" instead of
                   exhausting the interpreter stack.

    Example:
        from shapeguard import Array, decoding_context

        nested = Array(Array(Array(Number())))

        with decoding_context(max_depth=2):
            nested.safe_parse([[[1]]])  # Err("... Maximum nesting depth of 2 exceeded")
    """
    if max_depth < 1:
        raise ValueError(f"max_depth must be positive, got {max_depth}")

    token = _max_depth.set(max_depth)
    try:
        yield
    finally:
        _max_depth.reset(token)


@contextmanager
def nesting():
    token = _depth.set(_depth.get() + 1)
    try:
        yield
    finally:
        _depth.reset(token)
