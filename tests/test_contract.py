from __future__ import annotations

import pytest

from conformity.errors import Err, ErrorCode, SchemaError
from conformity.validation import (
    ContractBuilder,
    Failure,
    LeafError,
    RuleError,
    Success,
    cast,
    integer,
    maybe,
    messages,
    required,
    string,
)


def require_login_or_email(output):
    return Err("email or login must be present")


@pytest.fixture
def signup():
    return (
        ContractBuilder("signup")
        .schema({
            required("email"): maybe("string"),
            required("login"): maybe("string"),
        })
        .rule("either_login_or_email", require_login_or_email, guard={"email": None, "login": None})
        .build()
    )


class TestConform:
    @pytest.mark.parametrize("data", [
        {"email": "jane@doe.org", "login": None},
        {"email": None, "login": "jane"},
        {"email": "jane@doe.org", "login": "jane"},
    ])
    def test_rule_does_not_fire(self, signup, data):
        assert signup.conform(data) == Success(data)

    def test_rule_fires_when_both_are_nil(self, signup):
        outcome = signup.conform({"email": None, "login": None})

        assert isinstance(outcome, Failure)
        assert outcome.errors == [RuleError((), "email or login must be present")]
        assert messages(outcome.errors) == ["email or login must be present"]

    def test_rules_do_not_run_when_validation_fails(self):
        calls = []

        def record(output):
            calls.append(output)

        contract = ContractBuilder().schema({required("name"): string("filled?")}).rule("record", record).build()

        outcome = contract.conform({"name": ""})

        assert outcome.errors == [LeafError(("name",), "filled?", ("",))]
        assert calls == []

    def test_rules_see_cast_and_pruned_output(self):
        seen = []

        def record(output):
            seen.append(output)

        contract = (
            ContractBuilder(atomize=True)
            .schema({required("age"): cast("string", "integer")})
            .rule("record", record)
            .build()
        )

        assert contract.conform({"age": "42", "extra": True}) == Success({"age": 42})
        assert seen == [{"age": 42}]

    def test_named_schemas(self):
        contract = (
            ContractBuilder()
            .schema({required("name"): string()})
            .schema({required("id"): integer()}, name="lookup")
            .build()
        )

        assert contract.conform({"id": 1}, schema="lookup") == Success({"id": 1})
        assert set(contract.schemas) == {"default", "lookup"}


class TestBuilder:
    def test_builder_is_immutable(self):
        base = ContractBuilder()
        with_schema = base.schema({required("name"): string()})

        with pytest.raises(SchemaError):
            base.build()
        assert with_schema.build().rules == ()

    def test_compiled_schemas_can_be_reused(self):
        builder = ContractBuilder().schema({required("city"): string()}, name="address")
        builder = builder.schema({required("address"): builder.compiled("address")})

        contract = builder.build()

        assert contract.conform({"address": {"city": 1}}).errors == [
            LeafError(("address", "city"), "type?", ("string", 1)),
        ]

    def test_options_apply_to_every_schema_and_can_be_overridden(self):
        builder = (
            ContractBuilder(atomize=True)
            .schema({required("a"): string()})
            .schema({required("a"): string()}, name="strict", atomize=False)
        )
        contract = builder.build()

        assert contract.schema().atomize
        assert not contract.schema("strict").atomize

    def test_malformed_schema_fails_at_definition(self):
        with pytest.raises(SchemaError) as exc:
            ContractBuilder().schema({required("a"): string("uuid?")})
        assert exc.value.code is ErrorCode.E7002_UNKNOWN_PREDICATE

    def test_duplicate_names(self):
        builder = ContractBuilder().schema("string").rule("r", require_login_or_email)
        with pytest.raises(SchemaError):
            builder.schema("integer")
        with pytest.raises(SchemaError) as exc:
            builder.rule("r", require_login_or_email)
        assert exc.value.code is ErrorCode.E7008_INVALID_RULE

    def test_unknown_schema(self):
        contract = ContractBuilder().schema("string").build()
        with pytest.raises(SchemaError):
            contract.conform("x", schema="missing")
        with pytest.raises(SchemaError):
            ContractBuilder().compiled("missing")

    def test_views_are_read_only(self):
        contract = ContractBuilder().schema("string").build()
        with pytest.raises(TypeError):
            contract.schemas["other"] = contract.schema()
