"""Monadic Error Handling System

Result types inspired by Haskell's Either and Rust's Result, plus the
AppError envelope and its code taxonomy.

Key components:
- Result[T, E]: Monadic container for success/failure
- AppError: Base error type with full context
- ErrorCode: Hierarchical error code taxonomy
- SchemaError: raised for malformed specs at compile time
- Builder functions: Ergonomic error construction

Usage:
    from conformity.errors import Ok, Err, Result

    def check_unique(output) -> Result[None, str]:
        if output["email"] in taken:
            return Err((("email",), "is already taken"))
        return Ok(None)
"""
from .types import (
    Result,
    Ok,
    Err,
    AppError,
    ErrorCode,
    ErrorContext,
    from_exception,
    try_result,
)

from .builders import (
    schema_error,
    unknown_type,
    unknown_predicate,
    predicate_arity,
    duplicate_key,
    unknown_caster,
    invalid_spec,
    invalid_option,
    invalid_rule,
)

from .exceptions import (
    AppErrorException,
    SchemaError,
)

__all__ = [
    # Core types
    "Result",
    "Ok",
    "Err",
    "AppError",
    "ErrorCode",
    "ErrorContext",
    # Constructors
    "from_exception",
    "try_result",
    # Schema definition (E7xxx)
    "schema_error",
    "unknown_type",
    "unknown_predicate",
    "predicate_arity",
    "duplicate_key",
    "unknown_caster",
    "invalid_spec",
    "invalid_option",
    "invalid_rule",
    # Exceptions
    "AppErrorException",
    "SchemaError",
]
