"""Declarative Validation Engine

Specs are plain data describing nested maps, lists, unions and casts. They
are compiled once into an immutable type tree, which validates any number of
inputs into either a pruned, cast output or a path-qualified error tree.

Key Features:
- Plain builder functions producing spec data
- Compile-time detection of malformed specs (SchemaError)
- Collect-all traversal of keys and list members
- Left-biased unions that keep both failures
- Casts that fold caster failures into validation errors
- Root-only business rules guarded by output shape

Usage:
    from conformity.validation import (
        compile_schema, validate, required, optional, string, integer,
        Success, Failure, messages,
    )

    schema = compile_schema({
        required("name"): string("filled?"),
        required("age"): integer(),
    })

    match validate({"name": "", "age": "21"}, schema):
        case Success(value):
            ...
        case Failure() as failure:
            messages(failure.errors)
            # ["name must be filled", "age must be an integer"]
"""

# Registries
from .predicates import (
    Predicate,
    PredicateRegistry,
    DEFAULT_PREDICATES,
    PRIMITIVES,
)

from .casters import (
    CasterRule,
    CasterRegistry,
    FunctionCaster,
    DEFAULT_CASTERS,
)

# Type tree
from .types import (
    Presence,
    Key,
    TypeNode,
    Primitive,
    MapType,
    ListType,
    SumType,
    CastType,
)

# Spec builders
from .dsl import (
    KeySpec,
    required,
    optional,
    type_,
    any_,
    string,
    integer,
    float_,
    number,
    boolean,
    date,
    date_time,
    time,
    nil,
    map_,
    list_,
    union,
    maybe,
    cast,
)

# Compilation and validation
from .compiler import CompileOptions, compile_schema, try_compile
from .validator import validate
from .outcome import Success, Failure, Outcome

# Errors
from .errors import (
    ErrorNode,
    LeafError,
    GroupError,
    OrError,
    CastError,
    RuleError,
    ValidationError,
    collapse,
)
from .messages import message_for, messages

# Rules and contracts
from .rules import ANY, Rule, apply_rules, match_shape
from .contract import Contract, ContractBuilder

__all__ = [
    # Registries
    "Predicate",
    "PredicateRegistry",
    "DEFAULT_PREDICATES",
    "PRIMITIVES",
    "CasterRule",
    "CasterRegistry",
    "FunctionCaster",
    "DEFAULT_CASTERS",
    # Type tree
    "Presence",
    "Key",
    "TypeNode",
    "Primitive",
    "MapType",
    "ListType",
    "SumType",
    "CastType",
    # Spec builders
    "KeySpec",
    "required",
    "optional",
    "type_",
    "any_",
    "string",
    "integer",
    "float_",
    "number",
    "boolean",
    "date",
    "date_time",
    "time",
    "nil",
    "map_",
    "list_",
    "union",
    "maybe",
    "cast",
    # Compilation and validation
    "CompileOptions",
    "compile_schema",
    "try_compile",
    "validate",
    "Success",
    "Failure",
    "Outcome",
    # Errors
    "ErrorNode",
    "LeafError",
    "GroupError",
    "OrError",
    "CastError",
    "RuleError",
    "ValidationError",
    "collapse",
    "message_for",
    "messages",
    # Rules and contracts
    "ANY",
    "Rule",
    "apply_rules",
    "match_shape",
    "Contract",
    "ContractBuilder",
]
