from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Any

import pytest

from conformity.errors import Err, ErrorCode, Ok, SchemaError
from conformity.validation import (
    CastError,
    Failure,
    LeafError,
    Success,
    cast,
    compile_schema,
    integer,
    required,
    string,
    validate,
)
from conformity.validation.casters import (
    DEFAULT_CASTERS,
    CasterRule,
    FunctionCaster,
    IntegerToDateTime,
    StringToBoolean,
    StringToInteger,
)


class TestBuiltinCasters:
    @pytest.mark.parametrize("source, target, value, expected", [
        ("string", "integer", "12", 12),
        ("string", "integer", " 7 ", 7),
        ("string", "float", "1.5", 1.5),
        ("integer", "string", 12, "12"),
        ("float", "string", 1.5, "1.5"),
        ("string", "boolean", "yes", True),
        ("string", "boolean", "off", False),
        ("string", "date", "2024-01-15", date(2024, 1, 15)),
        ("string", "time", "10:30:00", time(10, 30)),
        ("string", "date_time", "2024-01-15T10:30:00Z", datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)),
    ])
    def test_lookup_and_cast(self, source, target, value, expected):
        caster = DEFAULT_CASTERS.lookup(source, target)
        assert caster.cast(value, {}) == Ok(expected)

    def test_unknown_pair(self):
        assert DEFAULT_CASTERS.lookup("map", "integer") is None

    def test_failure_is_err(self):
        result = StringToInteger().cast("not-a-number", {})
        assert isinstance(result, Err)
        assert result.error.code is ErrorCode.E2006_CAST_FAILED

    def test_boolean_rejects_unknown_words(self):
        assert StringToBoolean().cast("maybe", {}).is_err()

    @pytest.mark.parametrize("unit, value", [
        ("second", 1_700_000_000),
        ("millisecond", 1_700_000_000_000),
        ("microsecond", 1_700_000_000_000_000),
    ])
    def test_timestamp_units(self, unit, value):
        result = IntegerToDateTime().cast(value, {"unit": unit})
        assert result == Ok(datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc))

    def test_timestamp_unknown_unit_rejected_at_compile_time(self):
        with pytest.raises(SchemaError) as exc:
            compile_schema({required("at"): cast("integer", "date_time", unit="fortnight")})
        assert exc.value.code is ErrorCode.E7006_INVALID_SPEC
        assert exc.value.error.metadata["path"] == ["at"]

    def test_timestamp_options_check(self):
        assert IntegerToDateTime().check_options({"unit": "millisecond"}) == Ok(None)
        assert IntegerToDateTime().check_options({"unit": "fortnight"}).is_err()
        assert IntegerToDateTime().cast(1, {"unit": "fortnight"}).is_err()


class TestCustomCasters:
    def test_add_rule_returns_new_registry(self):
        @dataclass(frozen=True, slots=True)
        class StringToUpper(CasterRule):
            @property
            def source(self) -> str:
                return "string"

            @property
            def target(self) -> str:
                return "any"

            def cast(self, value: Any, options):
                return Ok(value.upper())

        registry = DEFAULT_CASTERS.add_rule(StringToUpper())
        assert registry.lookup("string", "any") == StringToUpper()
        assert DEFAULT_CASTERS.lookup("string", "any") is None

        schema = compile_schema(cast("string", "any"), casters=registry)
        assert validate("abc", schema) == Success("ABC")

    def test_callable_caster_gets_options(self):
        def scale(value, factor=1):
            return int(value) * factor

        schema = compile_schema(cast("string", "integer", caster=scale, factor=10))
        assert validate("4", schema) == Success(40)

    def test_callable_caster_value_error_is_a_cast_failure(self):
        caster = FunctionCaster(fn=int, target_name="integer")
        assert caster.cast("x", {}).is_err()

    def test_callable_caster_other_exceptions_propagate(self):
        def broken(value):
            raise RuntimeError("boom")

        schema = compile_schema(cast("string", "integer", caster=broken))
        with pytest.raises(RuntimeError):
            validate("1", schema)


class TestCastNodes:
    def test_string_to_integer(self):
        schema = compile_schema(cast("string", "integer"))
        assert validate("12", schema) == Success(12)

    def test_unconvertible_input_folds_into_cast_error(self):
        schema = compile_schema({required("age"): cast("string", "integer")})

        outcome = validate({"age": "not-a-number"}, schema)

        assert isinstance(outcome, Failure)
        assert outcome.errors == [
            CastError(("age",), LeafError(("age",), "type?", ("integer", "not-a-number"))),
        ]

    def test_invalid_input_never_reaches_caster(self):
        calls = []

        def record(value):
            calls.append(value)
            return value

        schema = compile_schema(cast(string("filled?"), "integer", caster=record))
        outcome = validate("", schema)

        assert calls == []
        assert outcome.errors == [CastError((), LeafError((), "filled?", ("",)))]

    def test_output_is_revalidated(self):
        schema = compile_schema(cast("string", integer(gt=18)))
        outcome = validate("12", schema)
        assert outcome.errors == [LeafError((), "gt?", (18, 12))]

    def test_timestamp_unit_option(self):
        schema = compile_schema(cast("integer", "date_time", unit="millisecond"))
        outcome = validate(1_700_000_000_000, schema)
        assert outcome.unwrap() == datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)
