"""Type Tree

Compiled, immutable representation of a schema. Nodes are frozen dataclasses,
so a tree compiled once can be shared across threads and validated against
any number of inputs; two compilations of the same spec compare equal.

Node kinds:
- Primitive: a named primitive plus ordered, AND-joined constraints
- MapType: declared keys, each validated independently
- ListType: list-level constraints plus a member type
- SumType: left-biased alternation of two types
- CastType: input type, caster, output type
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .casters import CasterRule
from .predicates import Predicate


class Presence(str, Enum):
    """Presence tag of a map key."""
    REQUIRED = "required"
    OPTIONAL = "optional"


def key_alias(name: Any) -> str:
    """String form of a declared key name, used for atomize lookups."""
    if isinstance(name, Enum):
        return str(name.value)
    return str(name)


class TypeNode(ABC):
    """Base class for compiled type nodes."""

    __slots__ = ()

    @property
    @abstractmethod
    def primitive(self) -> str | None:
        """Primitive name used for caster lookup; None for unions."""


@dataclass(frozen=True, slots=True)
class Key:
    """A declared map key: path segments, presence and value type."""
    path: tuple
    presence: Presence
    type: TypeNode

    @property
    def name(self) -> Any:
        return self.path[-1]

    @property
    def required(self) -> bool:
        return self.presence is Presence.REQUIRED

    def present_in(self, data: Any) -> bool:
        value = data
        for segment in self.path:
            try:
                if segment not in value:
                    return False
            except TypeError:
                return False
            value = value[segment]
        return True

    def value_in(self, data: Any) -> Any:
        value = data
        for segment in self.path:
            value = value[segment]
        return value


@dataclass(frozen=True, slots=True)
class Primitive(TypeNode):
    """Primitive type; constraints always start with its own type check."""
    name: str
    constraints: tuple[Predicate, ...] = ()

    @property
    def primitive(self) -> str:
        return self.name


@dataclass(frozen=True, slots=True)
class MapType(TypeNode):
    """Map of declared keys.

    ``aliases`` pairs each declared name's string form with the name itself;
    with ``atomize`` it is the allowlist used to normalize input keys.
    """
    keys: tuple[Key, ...]
    constraints: tuple[Predicate, ...] = ()
    atomize: bool = False
    aliases: tuple[tuple[str, Any], ...] = ()

    @property
    def primitive(self) -> str:
        return "map"

    @property
    def names(self) -> tuple:
        return tuple(key.name for key in self.keys)

    def normalize(self, data: Any) -> Any:
        """Rewrite declared keys to their canonical form and drop all others."""
        if not self.atomize or not isinstance(data, Mapping):
            return data
        declared = set(self.names)
        by_alias = dict(self.aliases)
        result = {}
        for raw_key, value in data.items():
            if raw_key in declared:
                result[raw_key] = value
            elif isinstance(raw_key, str) and raw_key in by_alias:
                result.setdefault(by_alias[raw_key], value)
        return result


@dataclass(frozen=True, slots=True)
class ListType(TypeNode):
    """List whose constraints apply to the whole and member_type to each element."""
    member_type: TypeNode
    constraints: tuple[Predicate, ...] = ()

    @property
    def primitive(self) -> str:
        return "list"


@dataclass(frozen=True, slots=True)
class SumType(TypeNode):
    """Either of two types, left attempted first."""
    left: TypeNode
    right: TypeNode

    @property
    def primitive(self) -> str | None:
        if self.left.primitive == self.right.primitive:
            return self.left.primitive
        return None


@dataclass(frozen=True, slots=True)
class CastType(TypeNode):
    """Validate input_type, run the caster, then validate output_type."""
    input_type: TypeNode
    output_type: TypeNode
    caster: CasterRule
    options: tuple[tuple[str, Any], ...] = field(default=())

    @property
    def primitive(self) -> str | None:
        return self.output_type.primitive

    @property
    def caster_options(self) -> dict[str, Any]:
        return dict(self.options)
