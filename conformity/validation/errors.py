"""Validation Error Tree

Failures produced by the validator and the rule engine. They are data,
returned inside a Failure and never raised by ``validate``; ValidationError is
only raised when a caller explicitly unwraps a Failure.

Error Format (``to_dict``):
{
    "error": {
        "type": "validation_error",
        "error_count": 2,
        "errors": [
            {"kind": "leaf", "path": ["name"], "predicate": "filled?", "args": [""]},
            {"kind": "leaf", "path": ["age"], "predicate": "type?", "args": ["integer", "21"]}
        ]
    }
}

Collapsing flattens nested groups into one list in declaration order. Or and
Cast nodes are kept because they change what the failure means; their own
branches are collapsed to a single node, or a flat group when a branch failed
in several places.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Iterator

from conformity.errors import AppError, ErrorCode


class ErrorNode(ABC):
    """Base class for validation failures."""

    __slots__ = ()

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Serialize to plain data."""

    def leaves(self) -> Iterator[ErrorNode]:
        """Every Leaf and Rule error below this node, in order."""
        yield self


@dataclass(frozen=True, slots=True)
class LeafError(ErrorNode):
    """A single failed predicate.

    args holds the predicate's own arguments followed by the failing value.
    has_key? is the exception: path is the parent map's path and args holds
    only the missing key's name.
    """
    path: tuple
    predicate: str
    args: tuple = ()

    @property
    def value(self) -> Any:
        return self.args[-1] if self.args else None

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "leaf", "path": list(self.path), "predicate": self.predicate, "args": list(self.args)}


@dataclass(frozen=True, slots=True)
class GroupError(ErrorNode):
    """Failures of several keys or list members."""
    errors: tuple[ErrorNode, ...]

    def leaves(self) -> Iterator[ErrorNode]:
        for error in self.errors:
            yield from error.leaves()

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "group", "errors": [e.to_dict() for e in self.errors]}


@dataclass(frozen=True, slots=True)
class OrError(ErrorNode):
    """Both alternatives of a union failed."""
    path: tuple
    left: ErrorNode
    right: ErrorNode

    def leaves(self) -> Iterator[ErrorNode]:
        yield from self.left.leaves()
        yield from self.right.leaves()

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "or", "path": list(self.path), "left": self.left.to_dict(), "right": self.right.to_dict()}


@dataclass(frozen=True, slots=True)
class CastError(ErrorNode):
    """The input of a cast was invalid, or the caster could not convert it."""
    path: tuple
    error: ErrorNode

    def leaves(self) -> Iterator[ErrorNode]:
        yield from self.error.leaves()

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "cast", "path": list(self.path), "error": self.error.to_dict()}


@dataclass(frozen=True, slots=True)
class RuleError(ErrorNode):
    """A failed business rule."""
    path: tuple
    text: str
    meta: dict = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {"kind": "rule", "path": list(self.path), "text": self.text, "meta": dict(self.meta)}


# ============================================================================
# Collapsing
# ============================================================================

def collapse(error: ErrorNode) -> list[ErrorNode]:
    """Flatten groups into a list in declaration order."""
    match error:
        case GroupError(errors):
            return [node for e in errors for node in collapse(e)]
        case OrError(path, left, right):
            return [OrError(path, _collapse_branch(left), _collapse_branch(right))]
        case CastError(path, inner):
            return [CastError(path, _collapse_branch(inner))]
        case _:
            return [error]


def _collapse_branch(error: ErrorNode) -> ErrorNode:
    flat = collapse(error)
    return flat[0] if len(flat) == 1 else GroupError(tuple(flat))


# ============================================================================
# Exception form
# ============================================================================

@dataclass
class ValidationError(Exception):
    """Raised by ``Failure.unwrap()``; carries the collapsed error list."""
    errors: list[ErrorNode]
    message: str = "Validation failed"

    def __post_init__(self):
        super().__init__(self.message)

    def __str__(self) -> str:
        if len(self.errors) == 1:
            return self.messages()[0]
        return f"{self.message} ({len(self.errors)} errors)"

    def messages(self) -> list[str]:
        from .messages import messages
        return messages(self.errors)

    def to_dict(self) -> dict[str, Any]:
        return {"error": {"type": "validation_error", "message": self.message,
            "error_count": len(self.errors), "errors": [e.to_dict() for e in self.errors]}}

    def to_app_error(self) -> AppError:
        """Convert to AppError for callers that report through the Result envelope."""
        texts = self.messages()
        if len(texts) == 1:
            return AppError(code=ErrorCode.E2000_VALIDATION_GENERIC, message=texts[0],
                metadata={"errors": [e.to_dict() for e in self.errors]})
        return AppError(code=ErrorCode.E2000_VALIDATION_GENERIC, message=f"{self.message}: {len(texts)} errors",
            metadata={"error_count": len(texts), "messages": texts, "errors": [e.to_dict() for e in self.errors]})
