"""Spec builders.

Plain functions producing Spec data: tuples, dicts and lists that the
compiler understands. Nothing here compiles or validates; a spec written by
hand with the same tuples is equivalent.

Usage:
    from conformity.validation.dsl import required, optional, string, integer

    spec = {
        required("name"): string("filled?"),
        optional("age"): integer(gt=18),
    }
"""
from __future__ import annotations

from typing import Any, NamedTuple

from .types import Presence


class KeySpec(NamedTuple):
    presence: Presence
    name: Any


def required(name: Any) -> KeySpec:
    return KeySpec(Presence.REQUIRED, name)


def optional(name: Any) -> KeySpec:
    return KeySpec(Presence.OPTIONAL, name)


def _predicates(predicates: tuple, kwargs: dict[str, Any]) -> list:
    """Positional predicates first, then keyword ones (``gt=18`` -> ``("gt?", 18)``)."""
    return [*predicates, *((f"{name.rstrip('_')}?", arg) for name, arg in kwargs.items())]


def type_(primitive: str, *predicates: Any, **kwargs: Any) -> tuple:
    return ("type", (primitive, _predicates(predicates, kwargs)))


def any_(*predicates: Any, **kwargs: Any) -> tuple:
    return type_("any", *predicates, **kwargs)


def string(*predicates: Any, **kwargs: Any) -> tuple:
    return type_("string", *predicates, **kwargs)


def integer(*predicates: Any, **kwargs: Any) -> tuple:
    return type_("integer", *predicates, **kwargs)


def float_(*predicates: Any, **kwargs: Any) -> tuple:
    return type_("float", *predicates, **kwargs)


def number(*predicates: Any, **kwargs: Any) -> tuple:
    return type_("number", *predicates, **kwargs)


def boolean(*predicates: Any, **kwargs: Any) -> tuple:
    return type_("boolean", *predicates, **kwargs)


def date(*predicates: Any, **kwargs: Any) -> tuple:
    return type_("date", *predicates, **kwargs)


def date_time(*predicates: Any, **kwargs: Any) -> tuple:
    return type_("date_time", *predicates, **kwargs)


def time(*predicates: Any, **kwargs: Any) -> tuple:
    return type_("time", *predicates, **kwargs)


def nil() -> tuple:
    return type_("nil")


def map_(*predicates: Any, **kwargs: Any) -> tuple:
    """Map primitive with no declared keys; use a dict spec to declare keys."""
    return type_("map", *predicates, **kwargs)


def list_(member: Any = None, *predicates: Any, **kwargs: Any) -> tuple:
    """List of ``member``, with optional list-level predicates.

    ``list_()`` or ``list_(None, "filled?")`` is a plain list with no member checks.
    """
    if member is None:
        return type_("list", *predicates, **kwargs)
    if isinstance(member, str):
        member = type_(member)
    elif isinstance(member, list):
        member = union(*member)
    preds = _predicates(predicates, kwargs)
    if preds:
        return ("type", ("list", member, preds))
    return ("type", ("list", member))


def union(left: Any, right: Any) -> tuple:
    return ("union", (left, right))


def maybe(primitive: str | tuple, *predicates: Any, **kwargs: Any) -> tuple:
    """``nil`` or the given type."""
    if isinstance(primitive, str):
        primitive = type_(primitive, *predicates, **kwargs)
    return union(nil(), primitive)


def cast(input_spec: Any, output_spec: Any, **options: Any) -> tuple:
    """Cast from ``input_spec`` to ``output_spec``.

    Keyword options reach the caster (``unit="millisecond"``); ``caster=``
    overrides the registry for this node.
    """
    if isinstance(input_spec, str):
        input_spec = type_(input_spec)
    if isinstance(output_spec, str):
        output_spec = type_(output_spec)
    return ("cast", (input_spec, output_spec, options))
