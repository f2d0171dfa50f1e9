"""
Schema operations for shapeguard.

Provides json_schema() and to_pydantic() functions.
"""

from __future__ import annotations

from typing import Any
from typing import Literal as TypingLiteral
from typing import Optional as TypingOptional
from typing import Union as TypingUnion

from pydantic import BaseModel, create_model

from .core import Decoder, OptionalDecoder, Refined, Transformed
from .primitives import (
    BooleanDecoder,
    EnumDecoder,
    IntDecoder,
    LiteralDecoder,
    NumberDecoder,
    StringDecoder,
)
from .structures import ArrayDecoder, ObjectDecoder, RecordDecoder, UnionDecoder
from .types import JSONSchema

JSON_SCHEMA_DIALECT = "https://json-schema.org/draft/2020-12/schema"


def json_schema(decoder: Decoder[Any]) -> JSONSchema:
    """
    Produce a standalone JSON Schema document for a decoder.

    Same as decoder.to_json_schema(), with the `$schema` dialect declared.

    Usage:
        json_schema(Object({"name": String()}))
        # {"$schema": "https://json-schema.org/draft/2020-12/schema",
        #  "type": "object", "properties": {...}, "required": ["name"]}
    """
    return {"$schema": JSON_SCHEMA_DIALECT, **decoder.to_json_schema()}


def to_pydantic(name: str, decoder: ObjectDecoder) -> type[BaseModel]:
    """
    Compile an object decoder to a Pydantic model.

    Args:
        name: Name of the generated model class
        decoder: Object decoder to mirror

    Returns:
        A Pydantic BaseModel subclass. Nested object decoders become nested
        models named after their parent and field.

    Usage:
        User = to_pydantic("User", Object({
            "name": String(),
            "email": Optional(Email()),
        }))
        user = User(name="Alice")
    """
    if not isinstance(decoder, ObjectDecoder):
        raise TypeError("Decoder must be an object decoder")

    fields: dict[str, Any] = {}

    for key, field_decoder in decoder.fields.items():
        field_type = _python_type(field_decoder, f"{name}{_camel(key)}")
        default = None if field_decoder.is_optional() else ...
        fields[key] = (field_type, default)

    return create_model(name, **fields)


def _python_type(decoder: Decoder[Any], model_name: str) -> Any:
    """Extract the Python type annotation matching a decoder."""
    match decoder:
        case OptionalDecoder(decoder=inner):
            return TypingOptional[_python_type(inner, model_name)]
        case IntDecoder():
            return int
        case NumberDecoder():
            return float
        case StringDecoder():
            return str
        case BooleanDecoder():
            return bool
        case LiteralDecoder(value=value):
            return TypingLiteral[value]
        case EnumDecoder(values=values) if values:
            return TypingLiteral[values]
        case ArrayDecoder(decoder=inner):
            return list[_python_type(inner, f"{model_name}Item")]  # type: ignore[misc]
        case ObjectDecoder():
            return to_pydantic(model_name, decoder)
        case RecordDecoder(key_decoder=key, value_decoder=value):
            return dict[  # type: ignore[misc]
                _python_type(key, f"{model_name}Key"),
                _python_type(value, f"{model_name}Value"),
            ]
        case UnionDecoder(decoders=alternatives):
            return TypingUnion[
                tuple(
                    _python_type(alt, f"{model_name}{i}")
                    for i, alt in enumerate(alternatives)
                )
            ]
        case Refined(parent=parent):
            return _python_type(parent, model_name)
        case Transformed():
            return Any

    return Any


def _camel(key: str) -> str:
    return "".join(part[:1].upper() + part[1:] for part in key.split("_"))
