"""Validator

``validate(value, node, path=())`` walks a compiled type tree against a value
and returns Success with the materialized output, or Failure with the error
tree. It is a pure function: it never logs, never raises for bad data, and
never mutates the input or the tree.

Traversal policy:
- Constraints on one value are AND-joined and stop at the first failure
- Keys of a map and members of a list are all checked, none short-circuits another
- A union tries left first and keeps both failures when neither side passes
- A cast validates its input, converts it, then validates the converted value
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from conformity.errors import Err, Ok, SchemaError, invalid_spec

from .errors import CastError, ErrorNode, GroupError, LeafError, OrError
from .outcome import Failure, Outcome, Success
from .predicates import Predicate
from .types import CastType, ListType, MapType, Primitive, SumType, TypeNode


def validate(value: Any, node: TypeNode, path: tuple = ()) -> Outcome:
    """Validate value against a compiled type node."""
    match node:
        case Primitive():
            return _validate_primitive(value, node, path)
        case MapType():
            return _validate_map(value, node, path)
        case ListType():
            return _validate_list(value, node, path)
        case SumType():
            return _validate_sum(value, node, path)
        case CastType():
            return _validate_cast(value, node, path)
        case _:
            raise SchemaError(invalid_spec(node, "not a compiled type node", path))


def _check(value: Any, constraints: Sequence[Predicate], path: tuple) -> LeafError | None:
    for predicate in constraints:
        if not predicate(value):
            return LeafError(path, predicate.name, predicate.error_args(value))
    return None


def _put_in(output: dict, key_path: tuple, value: Any) -> None:
    *parents, last = key_path
    target = output
    for segment in parents:
        target = target.setdefault(segment, {})
    target[last] = value


# ============================================================================
# Per-node validation
# ============================================================================

def _validate_primitive(value: Any, node: Primitive, path: tuple) -> Outcome:
    if error := _check(value, node.constraints, path):
        return Failure(error)
    return Success(value, path)


def _validate_map(value: Any, node: MapType, path: tuple) -> Outcome:
    data = node.normalize(value)
    if error := _check(data, node.constraints, path):
        return Failure(error)

    output: dict = {}
    errors: list[ErrorNode] = []
    for key in node.keys:
        if not key.present_in(data):
            if key.required:
                errors.append(LeafError(path, "has_key?", (key.name,)))
            continue
        match validate(key.value_in(data), key.type, (*path, *key.path)):
            case Success(result):
                _put_in(output, key.path, result)
            case Failure(error):
                errors.append(error)

    if errors:
        return Failure(GroupError(tuple(errors)))
    return Success(output, path)


def _validate_list(value: Any, node: ListType, path: tuple) -> Outcome:
    if error := _check(value, node.constraints, path):
        return Failure(error)

    output: list = []
    errors: list[ErrorNode] = []
    for index, member in enumerate(value):
        match validate(member, node.member_type, (*path, index)):
            case Success(result):
                output.append(result)
            case Failure(error):
                errors.append(error)

    if errors:
        return Failure(GroupError(tuple(errors)))
    return Success(output, path)


def _validate_sum(value: Any, node: SumType, path: tuple) -> Outcome:
    left = validate(value, node.left, path)
    if left.is_ok():
        return left
    right = validate(value, node.right, path)
    if right.is_ok():
        return right
    return Failure(OrError(path, left.error, right.error))


def _validate_cast(value: Any, node: CastType, path: tuple) -> Outcome:
    checked = validate(value, node.input_type, path)
    if checked.is_err():
        return Failure(CastError(path, checked.error))

    match node.caster.cast(checked.value, node.caster_options):
        case Ok(cast_value):
            return validate(cast_value, node.output_type, path)
        case Err(_):
            mismatch = LeafError(path, "type?", (node.output_type.primitive, checked.value))
            return Failure(CastError(path, mismatch))
