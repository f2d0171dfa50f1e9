"""
Tests for the decoder contract: Result types, parse/safe_parse, transform,
refine, optional and the decoding context.
"""

import dataclasses
import datetime
import re

import pytest

from shapeguard import (
    DEFAULT_MAX_DEPTH,
    Array,
    Boolean,
    DecodeError,
    Dictionary,
    Enum,
    Err,
    Number,
    Object,
    Ok,
    Optional,
    Record,
    String,
    Union,
    decoding_context,
    get_max_depth,
)
from shapeguard.context import current_depth


class TestResult:
    def test_ok(self):
        result = Ok(5)
        assert result.success is True
        assert result.is_ok()
        assert not result.is_err()
        assert result.value == 5

    def test_err(self):
        result = Err("boom")
        assert result.success is False
        assert result.is_err()
        assert not result.is_ok()
        assert result.error == "boom"

    def test_equality(self):
        assert Ok([1, 2]) == Ok([1, 2])
        assert Err("a") != Err("b")


class TestDecoderContract:
    def test_parse_returns_value(self):
        assert String().parse("hello") == "hello"

    def test_parse_raises_with_verbatim_message(self):
        with pytest.raises(DecodeError) as excinfo:
            Object({"name": String()}).parse({"name": 1})
        assert excinfo.value.message == "name -> Expected string, got number"
        assert str(excinfo.value) == "name -> Expected string, got number"

    def test_decode_error_is_value_error(self):
        with pytest.raises(ValueError):
            Number().parse("abc")

    def test_safe_parse_matches_parse_internal(self):
        decoder = Number(min=1)
        assert decoder.safe_parse(0) == decoder.parse_internal(0)
        assert decoder.safe_parse(2) == Ok(2)

    @pytest.mark.parametrize(
        "value",
        [
            None,
            object(),
            {1, 2},
            datetime.datetime(2024, 1, 1),
            re.compile("x"),
            ValueError("bad"),
            b"bytes",
            float("nan"),
            "{not json",
            "[" * 50_000 + "]" * 50_000,
        ],
    )
    def test_safe_parse_never_raises(self, value):
        decoders = [
            String(),
            Number(),
            Boolean(),
            Enum(["A"]),
            Array(Number()),
            Object({"a": String()}),
            Record(String(), Number()),
            Dictionary(String()),
            Union([Number(), Boolean()]),
        ]
        for decoder in decoders:
            assert isinstance(decoder.safe_parse(value), (Ok, Err))

    def test_decoders_are_frozen(self):
        decoder = String(min_length=2)
        with pytest.raises(dataclasses.FrozenInstanceError):
            decoder.min_length = 3  # type: ignore[misc]

    def test_decoders_are_reusable(self):
        decoder = Array(Number())
        assert decoder.parse([1]) == [1]
        assert isinstance(decoder.safe_parse(["x"]), Err)
        assert decoder.parse([2, 3]) == [2, 3]

    def test_is_optional(self):
        assert Optional(String()).is_optional()
        assert not String().is_optional()
        assert not String().refine(bool).is_optional()


class TestTransform:
    def test_applies_function(self):
        decoder = String().transform(lambda s: f"{s}-refined")
        assert decoder.parse("abc") == "abc-refined"
        assert decoder.parse("abcd") == "abcd-refined"

    def test_parent_failure_passes_through(self):
        decoder = String().transform(str.upper)
        assert decoder.safe_parse(1) == Err("Expected string, got number")

    def test_does_not_modify_parent(self):
        parent = String()
        parent.transform(str.upper)
        assert parent.parse("abc") == "abc"

    def test_str(self):
        assert str(String().transform(str.upper)) == "transform [ string ]"

    def test_json_schema_is_parents(self):
        assert Number(min=1).transform(int).to_json_schema() == {
            "type": "number",
            "minimum": 1,
        }


class TestRefine:
    def test_custom_error(self):
        decoder = String().refine(lambda s: s == "test", error='Input must be "test"')
        assert decoder.parse("test") == "test"
        assert decoder.safe_parse("other") == Err('Input must be "test"')

    def test_default_error(self):
        decoder = Number().refine(lambda n: n > 0)
        assert decoder.safe_parse(-1) == Err("Failed to parse input")

    def test_parent_failure_is_not_prefixed(self):
        decoder = Number().refine(lambda n: n > 0, error="Must be positive")
        assert decoder.safe_parse("x") == Err('Expected number, got "x"')

    def test_predicate_exception(self):
        decoder = String().refine(lambda s: 1 / 0)
        result = decoder.safe_parse("abc")
        assert isinstance(result, Err)
        assert result.error.startswith("Validation error:")

    def test_refine_after_transform(self):
        decoder = String().transform(len).refine(lambda n: n < 3, error="Too long")
        assert decoder.parse("ab") == 2
        assert decoder.safe_parse("abcd") == Err("Too long")

    def test_str(self):
        assert str(Number().refine(bool)) == "refine [ number ]"


class TestOptional:
    @pytest.mark.parametrize("value", [None, 0, 0.0, "", False, float("nan")])
    def test_falsy_input_is_absent(self, value):
        assert Optional(String()).parse(value) is None
        assert Optional(Number(min=5)).parse(value) is None

    def test_delegates_when_present(self):
        decoder = Optional(String())
        assert decoder.parse("test") == "test"
        assert decoder.safe_parse({}) == Err("Expected string, got object")

    def test_empty_containers_are_validated(self):
        assert Optional(Array(Number())).parse([]) == []
        assert Optional(Object({"a": String()})).safe_parse({}) == Err(
            'Missing required field: "a"'
        )

    def test_str(self):
        assert str(Optional(String())) == "optional [ string ]"

    def test_rejects_non_decoder(self):
        with pytest.raises(TypeError):
            Optional(str)  # type: ignore[arg-type]


class TestDecodingContext:
    def test_default(self):
        assert get_max_depth() == DEFAULT_MAX_DEPTH

    def test_context_sets_and_restores(self):
        with decoding_context(max_depth=5):
            assert get_max_depth() == 5
        assert get_max_depth() == DEFAULT_MAX_DEPTH

    def test_invalid_limit(self):
        with pytest.raises(ValueError):
            with decoding_context(max_depth=0):
                pass

    def test_depth_limit(self):
        decoder = Array(Array(Array(Number())))

        with decoding_context(max_depth=2):
            result = decoder.safe_parse([[[1]]])
        assert result == Err(
            "array [0] -> array [0] -> array [0] -> Maximum nesting depth of 2 exceeded"
        )

        with decoding_context(max_depth=3):
            assert decoder.parse([[[1]]]) == [[[1]]]

    def test_depth_resets_after_parse(self):
        Array(Object({"a": Array(Number())})).parse([{"a": [1, 2]}])
        assert current_depth() == 0

    def test_default_limit_guards_deep_schemas(self):
        decoder = Number()
        value = 1
        for _ in range(DEFAULT_MAX_DEPTH + 10):
            decoder = Array(decoder)
            value = [value]

        result = decoder.safe_parse(value)
        assert isinstance(result, Err)
        assert result.error.endswith(
            f"Maximum nesting depth of {DEFAULT_MAX_DEPTH} exceeded"
        )
