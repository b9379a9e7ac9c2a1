"""Predicate Registry

Named boolean checks invoked with their positional arguments followed by the
value under test. Names are the symbolic identifiers reported in validation
errors (``"filled?"``, ``"gt?"``), so they are part of the error contract.

Features:
- Fixed arity per predicate, checked when a schema is compiled
- Frozen Predicate nodes carrying their resolved function
- Type checks keyed by primitive name, shared with the compiler
- TypeError or ArithmeticError inside a check counts as a failed check
- `match?` patterns compiled once, when the schema is compiled
"""
from __future__ import annotations

import re
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Callable

from conformity.errors import SchemaError, invalid_spec, predicate_arity, unknown_predicate, unknown_type

PredicateFn = Callable[..., bool]


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def _is_date(value: Any) -> bool:
    return isinstance(value, date) and not isinstance(value, datetime)


TYPE_CHECKS: Mapping[str, Callable[[Any], bool]] = {
    "any": lambda value: True,
    "string": lambda value: isinstance(value, str),
    "integer": _is_integer,
    "float": lambda value: isinstance(value, float),
    "number": _is_number,
    "boolean": lambda value: isinstance(value, bool),
    "map": lambda value: isinstance(value, Mapping),
    "list": lambda value: isinstance(value, list),
    "nil": lambda value: value is None,
    "date": _is_date,
    "date_time": lambda value: isinstance(value, datetime),
    "time": lambda value: isinstance(value, time),
}

PRIMITIVES = frozenset(TYPE_CHECKS)


def _freeze(arg: Any) -> Any:
    if isinstance(arg, list):
        return tuple(_freeze(a) for a in arg)
    if isinstance(arg, set):
        return frozenset(arg)
    return arg


@dataclass(frozen=True, slots=True)
class Predicate:
    """A compiled constraint: registry name plus its fixed arguments."""
    name: str
    args: tuple = ()
    fn: PredicateFn | None = field(default=None, compare=False, repr=False)

    def __call__(self, value: Any) -> bool:
        if self.fn is None:
            raise SchemaError(unknown_predicate(self.name))
        try:
            return bool(self.fn(*self.args, value))
        except (TypeError, ArithmeticError):
            return False

    def error_args(self, value: Any) -> tuple:
        """Arguments reported in a failure: the predicate's own, value last.

        Compiled patterns are reported by their source text.
        """
        args = (a.pattern if isinstance(a, re.Pattern) else a for a in self.args)
        return (*args, value)


class PredicateRegistry:
    """Append-only name -> (function, arity) table.

    Populated once at import time; compiled schemas capture the functions
    they need, so validation never reads the registry.

    Usage:
        registry = DEFAULT_PREDICATES.extend()

        @registry.register("uuid?")
        def is_uuid(value) -> bool: ...

        compile_schema({required("id"): string("uuid?")}, predicates=registry)
    """

    __slots__ = ("_entries",)

    def __init__(self, entries: dict[str, tuple[PredicateFn, int]] | None = None):
        self._entries: dict[str, tuple[PredicateFn, int]] = dict(entries or {})

    def register(self, name: str, arity: int = 0) -> Callable[[PredicateFn], PredicateFn]:
        """Decorator registering a predicate under its symbolic name."""
        def decorator(fn: PredicateFn) -> PredicateFn:
            self._entries[name] = (fn, arity)
            return fn
        return decorator

    def extend(self) -> PredicateRegistry:
        """Copy of this registry that can take additional predicates."""
        return PredicateRegistry(self._entries)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def arity(self, name: str) -> int:
        return self._entries[name][1]

    def resolve(self, name: str, args: tuple = (), path: tuple = ()) -> Predicate:
        """Build a Predicate, checking the name and its arity."""
        if name not in self._entries:
            raise SchemaError(unknown_predicate(name, path))
        fn, arity = self._entries[name]
        if len(args) != arity:
            raise SchemaError(predicate_arity(name, arity, len(args), path))
        if name == "type?" and args[0] not in TYPE_CHECKS:
            raise SchemaError(unknown_type(args[0], path))
        if name == "match?" and isinstance(args[0], str):
            try:
                args = (re.compile(args[0]),)
            except re.error as e:
                raise SchemaError(invalid_spec(args[0], f"invalid match? pattern: {e}", path)) from e
        return Predicate(name, tuple(_freeze(a) for a in args), fn)

    def type_check(self, primitive: str, path: tuple = ()) -> Predicate:
        return self.resolve("type?", (primitive,), path)


DEFAULT_PREDICATES = PredicateRegistry()
register = DEFAULT_PREDICATES.register


def _sized(value: Any) -> int:
    return len(value)


# ============================================================================
# Type and presence
# ============================================================================

@register("type?", arity=1)
def is_type(type_name: str, value: Any) -> bool:
    return TYPE_CHECKS[type_name](value)


@register("has_key?", arity=1)
def has_key(key: Any, value: Any) -> bool:
    return isinstance(value, Mapping) and key in value


@register("filled?")
def is_filled(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, (str, list, tuple, Mapping, set, frozenset)):
        return _sized(value) > 0
    return True


@register("empty?")
def is_empty(value: Any) -> bool:
    return _sized(value) == 0


# ============================================================================
# Equality and comparison
# ============================================================================

@register("eql?", arity=1)
def is_eql(expected: Any, value: Any) -> bool:
    return value == expected


@register("not_eql?", arity=1)
def is_not_eql(expected: Any, value: Any) -> bool:
    return value != expected


@register("gt?", arity=1)
def is_gt(bound: Any, value: Any) -> bool:
    return value > bound


@register("gteq?", arity=1)
def is_gteq(bound: Any, value: Any) -> bool:
    return value >= bound


@register("lt?", arity=1)
def is_lt(bound: Any, value: Any) -> bool:
    return value < bound


@register("lteq?", arity=1)
def is_lteq(bound: Any, value: Any) -> bool:
    return value <= bound


# ============================================================================
# Size
# ============================================================================

@register("size?", arity=1)
def is_size(size: int, value: Any) -> bool:
    return _sized(value) == size


@register("min_size?", arity=1)
def is_min_size(size: int, value: Any) -> bool:
    return _sized(value) >= size


@register("max_size?", arity=1)
def is_max_size(size: int, value: Any) -> bool:
    return _sized(value) <= size


# ============================================================================
# Membership and format
# ============================================================================

@register("includes?", arity=1)
def includes(member: Any, value: Any) -> bool:
    return member in value


@register("excludes?", arity=1)
def excludes(member: Any, value: Any) -> bool:
    return member not in value


@register("in?", arity=1)
def is_in(options: Any, value: Any) -> bool:
    return value in options


@register("not_in?", arity=1)
def is_not_in(options: Any, value: Any) -> bool:
    return value not in options


@register("match?", arity=1)
def matches(pattern: str | re.Pattern, value: Any) -> bool:
    return re.search(pattern, value) is not None


@register("even?")
def is_even(value: Any) -> bool:
    return value % 2 == 0


@register("odd?")
def is_odd(value: Any) -> bool:
    return value % 2 != 0
