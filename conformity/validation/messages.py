"""Default message texts.

Renders collapsed errors as "path text" lines, e.g. ``"user.name must be
filled"``. Only the (path, predicate, args) triple of a leaf is read, so a
custom renderer can replace this module without touching the validator.
"""
from __future__ import annotations

from collections.abc import Iterable
from enum import Enum
from typing import Any

from .errors import CastError, ErrorNode, GroupError, LeafError, OrError, RuleError

TYPE_TEXTS = {
    "nil": "must be nil",
    "integer": "must be an integer",
    "float": "must be a float",
    "number": "must be a number",
    "boolean": "must be boolean",
    "list": "must be a list",
    "map": "must be a map",
    "string": "must be a string",
    "date": "must be a date",
    "date_time": "must be a date time",
    "time": "must be a time",
}

TEXTS = {
    "has_key?": "key must be present",
    "filled?": "must be filled",
    "empty?": "must be empty",
    "eql?": "must be equal to %input%",
    "not_eql?": "must not be equal to %input%",
    "lt?": "must be less than %input%",
    "gt?": "must be greater than %input%",
    "lteq?": "must be less than or equal to %input%",
    "gteq?": "must be greater than or equal to %input%",
    "min_size?": "size cannot be less than %input%",
    "max_size?": "size cannot be greater than %input%",
    "size?": "size must be %input%",
    "even?": "must be even",
    "odd?": "must be odd",
    "match?": "must have a valid format",
    "includes?": "must include %input%",
    "excludes?": "must exclude %input%",
    "in?": "must be one of: %input%",
    "not_in?": "must not be one of: %input%",
}


def _segment(segment: Any) -> str:
    return str(segment.value) if isinstance(segment, Enum) else str(segment)


def format_path(path: tuple) -> str:
    return ".".join(_segment(s) for s in path)


def _join(values: Any) -> str:
    if isinstance(values, (list, tuple, set, frozenset)):
        return ", ".join(str(v) for v in values)
    return str(values)


def predicate_text(predicate: str, args: tuple) -> str:
    """Text for a failed predicate, without the path."""
    params = args[:-1]
    match predicate:
        case "type?":
            return TYPE_TEXTS.get(params[0], f"must be {params[0]}")
        case "in?" | "not_in?":
            return TEXTS[predicate].replace("%input%", _join(params[0]))
        case "match?":
            return TEXTS[predicate]
        case _ if predicate in TEXTS and params:
            return TEXTS[predicate].replace("%input%", str(params[0]))
        case _ if predicate in TEXTS:
            return TEXTS[predicate]
        case _:
            return f"must satisfy {predicate}"


def message_for(error: ErrorNode) -> str:
    match error:
        case LeafError(path, "has_key?", (name,)):
            return f"{format_path((*path, name))} {TEXTS['has_key?']}"
        case LeafError(path, predicate, args):
            text = predicate_text(predicate, args)
            return f"{format_path(path)} {text}" if path else text
        case GroupError(errors):
            return " and ".join(message_for(e) for e in errors)
        case OrError(_, left, right):
            return f"{message_for(left)} or {message_for(right)}"
        case CastError(_, inner):
            return f"cast error: {message_for(inner)}"
        case RuleError(path, text, _):
            return f"{format_path(path)} {text}" if path else text
        case _:
            return str(error)


def messages(errors: Iterable[ErrorNode]) -> list[str]:
    return [message_for(e) for e in errors]
