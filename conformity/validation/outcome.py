"""Validation outcome: Success(value, path) or Failure(error).

Mirrors the Ok/Err interface of ``conformity.errors`` so both can be handled
with the same ``match`` idiom:

    match validate(data, schema):
        case Success(value):
            save(value)
        case Failure() as failure:
            report(failure.errors)
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, NoReturn, TypeVar, Union, final

from .errors import ErrorNode, ValidationError, collapse

T = TypeVar("T")
U = TypeVar("U")


@final
@dataclass(frozen=True, slots=True)
class Success(Generic[T]):
    """Validated, pruned and cast output."""
    value: T
    path: tuple = ()

    def is_ok(self) -> bool:
        return True

    def is_err(self) -> bool:
        return False

    def unwrap(self) -> T:
        return self.value

    def unwrap_or(self, default: T) -> T:
        return self.value

    def unwrap_err(self) -> NoReturn:
        raise ValueError(f"Called unwrap_err on Success: {self.value!r}")

    def map(self, f: Callable[[T], U]) -> Success[U]:
        return Success(f(self.value), self.path)


@final
@dataclass(frozen=True, slots=True)
class Failure:
    """Structured failure tree."""
    error: ErrorNode

    def is_ok(self) -> bool:
        return False

    def is_err(self) -> bool:
        return True

    @property
    def errors(self) -> list[ErrorNode]:
        """Collapsed errors in declaration order."""
        return collapse(self.error)

    def unwrap(self) -> NoReturn:
        raise ValidationError(self.errors)

    def unwrap_or(self, default: Any) -> Any:
        return default

    def unwrap_err(self) -> ErrorNode:
        return self.error

    def map(self, f: Callable[[Any], Any]) -> Failure:
        return self


Outcome = Union[Success[T], Failure]
