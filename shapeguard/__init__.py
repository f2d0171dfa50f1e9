"""
shapeguard - composable decoders that validate untyped data.

Usage:
    from shapeguard import Object, String, Int, Optional, Array, Email

    User = Object({
        "id": Int(),
        "name": String(min_length=1),
        "email": Optional(Email()),
        "tags": Array(String()),
    })

    user = User.parse(payload)        # raises DecodeError on failure
    result = User.safe_parse(payload)  # Ok(value) | Err(message)
"""

from .context import DEFAULT_MAX_DEPTH, decoding_context, get_max_depth
from .core import Decoder, OptionalDecoder, Refined, Transformed
from .decoders import (
    UUID,
    Array,
    Boolean,
    Date,
    Dictionary,
    Email,
    Enum,
    Int,
    Literal,
    Number,
    Object,
    Optional,
    Record,
    String,
    Union,
)
from .primitives import (
    BooleanDecoder,
    EnumDecoder,
    IntDecoder,
    LiteralDecoder,
    NumberDecoder,
    StringDecoder,
)
from .schema import json_schema, to_pydantic
from .structures import ArrayDecoder, ObjectDecoder, RecordDecoder, UnionDecoder
from .types import DecodeError, Err, Ok, Result

__all__ = [
    # Result types
    "Ok",
    "Err",
    "Result",
    "DecodeError",
    # Core
    "Decoder",
    "Transformed",
    "Refined",
    "OptionalDecoder",
    "StringDecoder",
    "NumberDecoder",
    "IntDecoder",
    "BooleanDecoder",
    "LiteralDecoder",
    "EnumDecoder",
    "ArrayDecoder",
    "ObjectDecoder",
    "RecordDecoder",
    "UnionDecoder",
    # Decoders
    "String",
    "Number",
    "Int",
    "Boolean",
    "Literal",
    "Enum",
    "Optional",
    "Array",
    "Object",
    "Record",
    "Dictionary",
    "Union",
    "Email",
    "UUID",
    "Date",
    # Schema
    "json_schema",
    "to_pydantic",
    # Configuration
    "decoding_context",
    "get_max_depth",
    "DEFAULT_MAX_DEPTH",
]
