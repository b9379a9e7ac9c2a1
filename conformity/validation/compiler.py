"""Schema Compiler

Recursive-descent translation of Spec data into an immutable type tree.
Every mistake in a spec (unknown primitive, unknown predicate, wrong arity,
duplicate key, missing caster) raises SchemaError here, so validation never
meets a malformed tree.

Usage:
    schema = compile_schema({required("name"): string("filled?")})

    match try_compile(spec, atomize=True):
        case Ok(schema): ...
        case Err(error): log.error("bad_schema", code=error.code.name)
"""
from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from conformity.config import get_settings
from conformity.errors import (
    AppError,
    Err,
    Ok,
    Result,
    SchemaError,
    duplicate_key,
    invalid_option,
    invalid_spec,
    unknown_caster,
    unknown_type,
)
from conformity.logging import compiler_logger

from .casters import DEFAULT_CASTERS, CasterRegistry, CasterRule, as_caster
from .dsl import KeySpec
from .predicates import DEFAULT_PREDICATES, PRIMITIVES, Predicate, PredicateRegistry
from .types import CastType, Key, ListType, MapType, Presence, Primitive, SumType, TypeNode, key_alias

log = compiler_logger()


class CompileOptions(BaseModel):
    """Options flowing down through one compilation."""
    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    atomize: bool = Field(default_factory=lambda: get_settings().ATOMIZE)
    default_presence: Presence = Field(default_factory=lambda: Presence(get_settings().DEFAULT_PRESENCE))
    cast: bool = True
    caster: Any = None
    predicates: PredicateRegistry = DEFAULT_PREDICATES
    casters: CasterRegistry = DEFAULT_CASTERS

    @field_validator("caster")
    @classmethod
    def validate_caster(cls, v: Any) -> Any:
        if v is None or isinstance(v, CasterRule) or callable(v):
            return v
        raise ValueError("caster must be a CasterRule or a callable")


# ============================================================================
# Entry points
# ============================================================================

def compile_schema(spec: Any, **options: Any) -> TypeNode:
    """Compile a spec into a type tree, raising SchemaError on a malformed spec."""
    try:
        opts = CompileOptions(**options)
    except ValidationError as e:
        raise SchemaError(invalid_option(e)) from e

    node = _compile(spec, opts, ())
    log.debug(
        "schema_compiled",
        node=type(node).__name__,
        keys=len(node.keys) if isinstance(node, MapType) else None,
        atomize=opts.atomize,
    )
    return node


def try_compile(spec: Any, **options: Any) -> Result[TypeNode, AppError]:
    """Result-returning form of compile_schema."""
    try:
        return Ok(compile_schema(spec, **options))
    except SchemaError as e:
        return Err(e.error)


# ============================================================================
# Recursive descent
# ============================================================================

def _compile(spec: Any, opts: CompileOptions, path: tuple) -> TypeNode:
    match spec:
        case TypeNode():
            return spec
        case Mapping():
            return _compile_map(spec, opts, path)
        case ("union", (left, right)):
            return SumType(_compile(left, opts, path), _compile(right, opts, path))
        case [left, right] if isinstance(spec, list):
            return SumType(_compile(left, opts, path), _compile(right, opts, path))
        case ("type", ("list", list() as predicates)):
            return _compile_primitive("list", predicates, opts, path)
        case ("type", ("list", member)):
            return _compile_list(member, [], opts, path)
        case ("type", ("list", member, list() as predicates)):
            return _compile_list(member, predicates, opts, path)
        case ("type", (str() as primitive, list() | tuple() as predicates)):
            return _compile_primitive(primitive, predicates, opts, path)
        case ("cast", (input_spec, output_spec, cast_opts)):
            return _compile_cast(input_spec, output_spec, cast_opts, opts, path)
        case str():
            return _compile_primitive(spec, (), opts, path)
        case _:
            raise SchemaError(invalid_spec(spec, "not a recognized type descriptor", path))


def _compile_predicate(pred: Any, opts: CompileOptions, path: tuple) -> Predicate:
    match pred:
        case Predicate(name=name, args=args):
            return opts.predicates.resolve(name, args, path)
        case str():
            return opts.predicates.resolve(pred, (), path)
        case (str() as name, *args):
            return opts.predicates.resolve(name, tuple(args), path)
        case _:
            raise SchemaError(invalid_spec(pred, "not a predicate", path))


def _compile_primitive(primitive: str, predicates: Any, opts: CompileOptions, path: tuple) -> Primitive:
    if primitive not in PRIMITIVES:
        raise SchemaError(unknown_type(primitive, path))
    constraints = (
        opts.predicates.type_check(primitive, path),
        *(_compile_predicate(p, opts, path) for p in predicates),
    )
    return Primitive(primitive, constraints)


def _compile_list(member: Any, predicates: list, opts: CompileOptions, path: tuple) -> ListType:
    constraints = (
        opts.predicates.type_check("list", path),
        *(_compile_predicate(p, opts, path) for p in predicates),
    )
    return ListType(_compile(member, opts, path), constraints)


def _key_spec(raw: Any, opts: CompileOptions) -> tuple[Presence, Any]:
    match raw:
        case KeySpec(presence, name):
            return Presence(presence), name
        case (Presence() | "required" | "optional" as presence, name):
            return Presence(presence), name
        case _:
            return opts.default_presence, raw


def _compile_map(spec: Mapping, opts: CompileOptions, path: tuple) -> MapType:
    keys: list[Key] = []
    seen: set = set()
    for raw_key, value_spec in spec.items():
        presence, name = _key_spec(raw_key, opts)
        if name in seen:
            raise SchemaError(duplicate_key(name, path))
        seen.add(name)
        key_path = (*path, name)
        keys.append(Key((name,), presence, _compile(value_spec, opts, key_path)))

    return MapType(
        keys=tuple(keys),
        constraints=(opts.predicates.type_check("map", path),),
        atomize=opts.atomize,
        aliases=tuple((key_alias(key.name), key.name) for key in keys),
    )


def _compile_cast(input_spec: Any, output_spec: Any, cast_opts: Any, opts: CompileOptions, path: tuple) -> TypeNode:
    if not isinstance(cast_opts, Mapping):
        raise SchemaError(invalid_spec(cast_opts, "cast options must be a mapping", path))

    output_type = _compile(output_spec, opts, path)
    if not opts.cast:
        return output_type
    input_type = _compile(input_spec, opts, path)

    custom = cast_opts.get("caster", opts.caster)
    caster = as_caster(custom, input_type.primitive, output_type.primitive)
    if custom is not None and caster is None:
        raise SchemaError(invalid_spec(custom, "caster must be a CasterRule or a callable", path))
    if caster is None:
        caster = opts.casters.lookup(input_type.primitive, output_type.primitive)
    if caster is None:
        raise SchemaError(unknown_caster(input_type.primitive, output_type.primitive, path))

    options = tuple((k, v) for k, v in cast_opts.items() if k != "caster")
    match caster.check_options(dict(options)):
        case Err(reason):
            raise SchemaError(invalid_spec(dict(options), reason, path))
    return CastType(input_type, output_type, caster, options)
