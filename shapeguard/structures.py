"""
Structural decoders: array, object, record and union.

Each one extracts its expected shape from the raw input and delegates the
parts to child decoders, prefixing child failures with the index, field or
key they occurred at.
"""

from __future__ import annotations

import datetime
import re
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, ClassVar

from .core import Decoder, descend, ensure_decoder, load_json, show, type_name
from .types import Err, JSONSchema, Ok, Result


@dataclass(frozen=True, slots=True, eq=False)
class ArrayDecoder(Decoder[list]):
    """Validator for lists (or JSON array text) with a single item decoder."""

    tag: ClassVar[str] = "array"

    decoder: Decoder[Any]

    def __post_init__(self) -> None:
        ensure_decoder(self.decoder, "Array item decoder")

    def parse_internal(self, value: Any) -> Result[list]:
        extracted = self._extract(value)
        if isinstance(extracted, Err):
            return extracted

        output: list[Any] = []
        for i, item in enumerate(extracted.value):
            result = descend(self.decoder, item)
            if isinstance(result, Err):
                return Err(f"array [{i}] -> {result.error}")
            output.append(result.value)

        return Ok(output)

    def _extract(self, value: Any) -> Result[list | tuple]:
        if isinstance(value, (list, tuple)):
            return Ok(value)

        if not isinstance(value, str):
            return Err(f"Expected array-like string, got {type_name(value)}")

        parsed = load_json(value)
        if isinstance(parsed, Err):
            return Err(f"Failed to parse array: {parsed.error}")

        if not isinstance(parsed.value, list):
            return Err(f"Expected array, got {type_name(parsed.value)}")

        return parsed

    def to_json_schema(self) -> JSONSchema:
        return {"type": "array", "items": self.decoder.to_json_schema()}

    def __str__(self) -> str:
        return f"{self.tag} [ {self.decoder} ]"


# Native types that are never treated as keyed structures
_NOT_OBJECTS: tuple[tuple[type | tuple[type, ...], str], ...] = (
    ((list, tuple), "Array"),
    ((set, frozenset), "Set"),
    ((datetime.date, datetime.time), "Date"),
    (re.Pattern, "RegExp"),
)


@dataclass(frozen=True, slots=True, eq=False)
class ObjectDecoder(Decoder[dict]):
    """
    Validator for mappings (or JSON object text) with named field decoders.

    Fields are checked in declaration order and the first failure wins.
    Fields absent from the input (allowed only for optional decoders) are
    left out of the decoded mapping.
    """

    tag: ClassVar[str] = "object"

    fields: Mapping[str, Decoder[Any]]
    disallow_unknown_fields: bool = False

    def __post_init__(self) -> None:
        for name, decoder in self.fields.items():
            ensure_decoder(decoder, f"Field {name!r}")
        object.__setattr__(self, "fields", MappingProxyType(dict(self.fields)))

    def parse_internal(self, value: Any) -> Result[dict]:
        extracted = self._extract(value)
        if isinstance(extracted, Err):
            return extracted

        data: Mapping[Any, Any] = extracted.value
        output: dict[str, Any] = {}

        for name, decoder in self.fields.items():
            present = name in data
            if not present and not decoder.is_optional():
                return Err(f'Missing required field: "{name}"')

            result = descend(decoder, data[name] if present else None)
            if isinstance(result, Err):
                return Err(f"{name} -> {result.error}")

            if present:
                output[name] = result.value

        if self.disallow_unknown_fields:
            unknown = [str(k) for k in data if k not in self.fields]
            if unknown:
                return Err(f'Unknown disallowed fields: "{", ".join(unknown)}"')

        return Ok(output)

    def _extract(self, value: Any) -> Result[Mapping[Any, Any]]:
        if isinstance(value, Mapping):
            return Ok(value)

        if isinstance(value, str):
            parsed = load_json(value)
            if isinstance(parsed, Err) or not isinstance(parsed.value, dict):
                return Err(f"Expected object, got {type_name(value)}")
            return parsed

        for kinds, label in _NOT_OBJECTS:
            if isinstance(value, kinds):
                return Err(f"{label} does not qualify as valid object")

        return Err(f"Expected object, got {type_name(value)}")

    def extend(self, other: ObjectDecoder) -> ObjectDecoder:
        """
        Return a new object decoder with the fields of both decoders.

        On a name collision the field from `other` wins. The options of this
        decoder are kept.

        Usage:
            base = Object({"id": Int(), "created_at": String()})
            user = base.extend(Object({"name": String(), "email": Email()}))
        """
        if not isinstance(other, ObjectDecoder):
            raise TypeError(
                f"Can only extend with an object decoder, got {type(other).__name__}"
            )
        return ObjectDecoder(
            fields={**self.fields, **other.fields},
            disallow_unknown_fields=self.disallow_unknown_fields,
        )

    def exclude(self, *keys: str) -> ObjectDecoder:
        """
        Return a new object decoder without the named fields.

        Usage:
            public_user = user.exclude("password", "salt")
        """
        return ObjectDecoder(
            fields={k: v for k, v in self.fields.items() if k not in keys},
            disallow_unknown_fields=self.disallow_unknown_fields,
        )

    def to_json_schema(self) -> JSONSchema:
        schema: JSONSchema = {
            "type": "object",
            "properties": {
                name: decoder.to_json_schema() for name, decoder in self.fields.items()
            },
            "required": [
                name for name, decoder in self.fields.items() if not decoder.is_optional()
            ],
        }
        if self.disallow_unknown_fields:
            schema["additionalProperties"] = False
        return schema

    def __str__(self) -> str:
        fields = ", ".join(f"{name} [ {decoder} ]" for name, decoder in self.fields.items())
        return f"{self.tag} {{ {fields} }}"


@dataclass(frozen=True, slots=True, eq=False)
class RecordDecoder(Decoder[dict]):
    """Validator for arbitrary-width mappings with a key and a value decoder."""

    tag: ClassVar[str] = "record"

    key_decoder: Decoder[Any]
    value_decoder: Decoder[Any]

    def __post_init__(self) -> None:
        ensure_decoder(self.key_decoder, "Record key decoder")
        ensure_decoder(self.value_decoder, "Record value decoder")

    def parse_internal(self, value: Any) -> Result[dict]:
        if value is None:
            return Err("Record cannot be undefined")
        if isinstance(value, (list, tuple)):
            return Err("Record cannot be an array")
        if isinstance(value, re.Pattern):
            return Err("Record cannot be a regular expression.")
        if isinstance(value, (datetime.date, datetime.time)):
            return Err("Record cannot be a date object.")
        if isinstance(value, BaseException):
            return Err("Record cannot be an error object.")
        if not isinstance(value, Mapping):
            return Err(f"Expected record, got {type_name(value)}")

        output: dict[Any, Any] = {}

        for raw_key, item in value.items():
            key = self.key_decoder.safe_parse(raw_key)
            if isinstance(key, Err):
                return Err(
                    f"Failed to decode record key '{show(raw_key)}' -> {key.error}"
                )

            decoded = descend(self.value_decoder, item)
            if isinstance(decoded, Err):
                return Err(
                    f"Failed to decode record value for key '{show(key.value)}' -> "
                    f"{decoded.error}"
                )

            try:
                output[key.value] = decoded.value
            except TypeError:
                return Err(
                    f"Failed to decode record key '{show(raw_key)}' -> "
                    f"Decoded key is not hashable, got {type_name(key.value)}"
                )

        return Ok(output)

    def to_json_schema(self) -> JSONSchema:
        schema: JSONSchema = {
            "type": "object",
            "additionalProperties": self.value_decoder.to_json_schema(),
        }
        key_schema = self.key_decoder.to_json_schema()
        if key_schema.get("type") == "string" and len(key_schema) > 1:
            schema["propertyNames"] = key_schema
        return schema

    def __str__(self) -> str:
        return f"{self.tag} [ {self.key_decoder}, {self.value_decoder} ]"


@dataclass(frozen=True, slots=True, eq=False)
class UnionDecoder(Decoder[Any]):
    """
    Ordered alternatives; the first decoder that succeeds wins.

    Individual alternative errors are not reported, str() lists the
    alternatives instead.
    """

    tag: ClassVar[str] = "union"

    decoders: tuple[Decoder[Any], ...]

    def __post_init__(self) -> None:
        decoders = tuple(self.decoders)
        if not decoders:
            raise ValueError("Union requires at least one decoder")
        for i, decoder in enumerate(decoders):
            ensure_decoder(decoder, f"Union alternative {i}")
        object.__setattr__(self, "decoders", decoders)

    def parse_internal(self, value: Any) -> Result[Any]:
        for decoder in self.decoders:
            result = decoder.safe_parse(value)
            if isinstance(result, Ok):
                return result

        return Err(f'Failed to parse union, got: "{type_name(value)}"')

    def to_json_schema(self) -> JSONSchema:
        return {"anyOf": [decoder.to_json_schema() for decoder in self.decoders]}

    def __str__(self) -> str:
        return f"{self.tag} [ {' | '.join(str(d) for d in self.decoders)} ]"
