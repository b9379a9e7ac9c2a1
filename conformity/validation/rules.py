"""Rule Engine

Business rules run against the validated output of a root schema. A rule has
a guard describing the output shapes it applies to; when the guard does not
match, the rule is skipped. Every matching rule runs, in declaration order.

Guard patterns:
- ANY: always matches (a guard of None means the rule always applies)
- Mapping: every pattern key is present and its value matches
- list/tuple: same length, element-wise match
- class: isinstance check
- callable: called with the value, truthy result matches
- anything else: equality

Rule reasons, inside Err:
- "text": an error at the root
- (path, text) or (path, text, meta), as a tuple or a list: an error at path,
  where path is a sequence of str or int segments
- a list of reasons: each one in turn

Usage:
    def either_login_or_email(output):
        return Err("email or login must be present")

    rule = Rule("either_login_or_email", either_login_or_email,
                guard={"email": None, "login": None})
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable

from conformity.errors import Err, Ok, SchemaError, invalid_rule

from .errors import RuleError


class _Any:
    __slots__ = ()

    def __repr__(self) -> str:
        return "ANY"


ANY = _Any()


def match_shape(pattern: Any, value: Any) -> bool:
    """Whether value has the shape described by pattern."""
    match pattern:
        case _Any():
            return True
        case Mapping():
            if not isinstance(value, Mapping):
                return False
            return all(k in value and match_shape(p, value[k]) for k, p in pattern.items())
        case list() | tuple():
            if not isinstance(value, (list, tuple)) or len(value) != len(pattern):
                return False
            return all(match_shape(p, v) for p, v in zip(pattern, value))
        case type():
            return isinstance(value, pattern)
        case _ if callable(pattern):
            return bool(pattern(value))
        case _:
            return pattern == value


@dataclass(frozen=True, slots=True)
class Rule:
    name: str
    body: Callable[[Any], Any]
    guard: Any = None

    def applies_to(self, output: Any) -> bool:
        return self.guard is None or match_shape(self.guard, output)

    def apply(self, output: Any) -> list[RuleError]:
        """Run the body, returning the errors it reported."""
        match self.body(output):
            case None | Ok(_):
                return []
            case Err(reason):
                return _rule_errors(self.name, reason)
            case result:
                raise SchemaError(invalid_rule(self.name, f"returned {result!r}; expected None, Ok or Err"))


def _is_path(path: Any) -> bool:
    return all(isinstance(segment, (str, int)) for segment in path)


def _rule_errors(name: str, reason: Any) -> list[RuleError]:
    match reason:
        case str():
            return [RuleError((), reason)]
        case (tuple() | list() as path, str() as text) if _is_path(path):
            return [RuleError(tuple(path), text)]
        case (tuple() | list() as path, str() as text, Mapping() as meta) if _is_path(path):
            return [RuleError(tuple(path), text, dict(meta))]
        case list():
            return [error for item in reason for error in _rule_errors(name, item)]
        case _:
            raise SchemaError(invalid_rule(name, f"reported unsupported reason {reason!r}"))


def apply_rules(rules: tuple[Rule, ...] | list[Rule], output: Any) -> list[RuleError]:
    """Run every rule whose guard matches output, collecting all errors."""
    errors: list[RuleError] = []
    for rule in rules:
        if rule.applies_to(output):
            errors.extend(rule.apply(output))
    return errors
