"""Schema Definition Error Builders

Ergonomic constructors for the programmer errors a malformed spec produces.
Each builder creates an AppError with the appropriate code and context; the
compiler raises them wrapped in SchemaError.
"""
from typing import Any

from .types import AppError, ErrorCode, ErrorContext


def schema_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E7000_SCHEMA_GENERIC,
    path: tuple = (),
    origin: str = "compiler",
    cause: Exception | None = None,
    **metadata,
) -> AppError:
    """Create schema definition error."""
    meta = {"path": list(path) if path else None, **metadata}
    return AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata={k: v for k, v in meta.items() if v is not None},
        cause=cause,
    )


def unknown_type(name: Any, path: tuple = ()) -> AppError:
    return schema_error(
        f"Unknown primitive type {name!r}",
        code=ErrorCode.E7001_UNKNOWN_TYPE,
        path=path,
        type=repr(name),
    )


def unknown_predicate(name: Any, path: tuple = ()) -> AppError:
    return schema_error(
        f"Unknown predicate {name!r}",
        code=ErrorCode.E7002_UNKNOWN_PREDICATE,
        path=path,
        predicate=repr(name),
    )


def predicate_arity(name: str, expected: int, got: int, path: tuple = ()) -> AppError:
    return schema_error(
        f"Predicate {name!r} takes {expected} argument(s), got {got}",
        code=ErrorCode.E7003_PREDICATE_ARITY,
        path=path,
        predicate=name,
        expected=expected,
        got=got,
    )


def duplicate_key(name: Any, path: tuple = ()) -> AppError:
    return schema_error(
        f"Key {name!r} is declared more than once",
        code=ErrorCode.E7004_DUPLICATE_KEY,
        path=path,
        key=repr(name),
    )


def unknown_caster(source: str | None, target: str | None, path: tuple = ()) -> AppError:
    return schema_error(
        f"No caster registered for {source} -> {target}",
        code=ErrorCode.E7005_UNKNOWN_CASTER,
        path=path,
        source=source,
        target=target,
    )


def invalid_spec(spec: Any, reason: str, path: tuple = ()) -> AppError:
    return schema_error(
        f"Invalid spec {spec!r}: {reason}",
        code=ErrorCode.E7006_INVALID_SPEC,
        path=path,
    )


def invalid_option(exc: Exception) -> AppError:
    """Create option error, flattening pydantic error details when present."""
    details = []
    if hasattr(exc, "errors"):
        details = [
            {"option": ".".join(str(p) for p in e.get("loc", ())), "type": e.get("type"), "message": e.get("msg")}
            for e in exc.errors()
        ]
    return schema_error(
        f"Invalid compile options: {', '.join(d['option'] for d in details) or exc}",
        code=ErrorCode.E7007_INVALID_OPTION,
        cause=exc,
        errors=details or None,
    )


def invalid_rule(name: str, reason: str) -> AppError:
    return schema_error(
        f"Rule {name!r} {reason}",
        code=ErrorCode.E7008_INVALID_RULE,
        origin="rules",
        rule=name,
    )
