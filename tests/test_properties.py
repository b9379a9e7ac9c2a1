"""Property-style checks over generated inputs."""
from __future__ import annotations

from hypothesis import given, settings
from hypothesis import strategies as st

from conformity.validation import (
    cast,
    compile_schema,
    integer,
    list_,
    optional,
    required,
    string,
    union,
    validate,
)

PROFILE = {
    required("name"): string("filled?"),
    required("age"): integer(gteq=0),
    optional("tags"): list_(string()),
}

SCHEMA = compile_schema(PROFILE)
ATOMIZED = compile_schema(PROFILE, atomize=True)
SUM = compile_schema(union(integer(gt=10), string("filled?")))
LEFT = compile_schema(integer(gt=10))
RIGHT = compile_schema(string("filled?"))
TO_INTEGER = compile_schema(cast("string", "integer"))
INTEGER = compile_schema("integer")

scalars = st.one_of(st.none(), st.booleans(), st.integers(), st.floats(allow_nan=False), st.text(max_size=5))
extra_fields = st.dictionaries(st.text(min_size=1, max_size=8), scalars, max_size=5)
valid_profiles = st.fixed_dictionaries(
    {"name": st.text(min_size=1, max_size=10), "age": st.integers(min_value=0)},
    optional={"tags": st.lists(st.text(max_size=5), max_size=4)},
)


@settings(max_examples=200, deadline=None)
@given(valid_profiles, extra_fields)
def test_valid_input_succeeds_with_declared_keys_only(profile, extra):
    data = {**extra, **profile}

    outcome = validate(data, SCHEMA)

    assert outcome.is_ok()
    assert outcome.value == profile


@settings(max_examples=200, deadline=None)
@given(extra_fields, valid_profiles | extra_fields)
def test_atomized_output_never_has_undeclared_keys(extra, data):
    outcome = validate({**extra, **data}, ATOMIZED)

    if outcome.is_ok():
        assert set(outcome.value) <= {"name", "age", "tags"}


@settings(max_examples=300, deadline=None)
@given(scalars)
def test_sum_succeeds_iff_a_branch_succeeds(value):
    outcome = validate(value, SUM)
    left, right = validate(value, LEFT), validate(value, RIGHT)

    assert outcome.is_ok() == (left.is_ok() or right.is_ok())
    if left.is_ok():
        assert outcome == left


@settings(max_examples=300, deadline=None)
@given(st.one_of(st.integers().map(str), st.text(max_size=6)))
def test_cast_output_revalidates(value):
    outcome = validate(value, TO_INTEGER)

    if outcome.is_ok():
        assert validate(outcome.value, INTEGER).is_ok()


def test_compilation_is_deterministic():
    assert compile_schema(PROFILE) == compile_schema(PROFILE)
    assert compile_schema(PROFILE, atomize=True) == ATOMIZED
