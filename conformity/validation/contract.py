"""Contracts: named schemas plus root rules.

A ContractBuilder is immutable; every call returns a new builder, and
schemas are compiled as soon as they are added so a malformed spec fails at
definition time. ``build()`` freezes the result into a Contract.

Usage:
    contract = (
        ContractBuilder("signup", atomize=True)
        .schema({required("email"): maybe("string"), required("login"): maybe("string")})
        .rule("either_login_or_email", require_login_or_email, guard={"email": None, "login": None})
        .build()
    )

    match contract.conform(payload):
        case Success(value): ...
        case Failure() as failure: messages(failure.errors)
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Callable

from conformity.errors import ErrorCode, SchemaError, invalid_rule, schema_error
from conformity.logging import contract_logger

from .compiler import compile_schema
from .errors import GroupError
from .outcome import Failure, Outcome
from .rules import Rule, apply_rules
from .types import TypeNode
from .validator import validate

log = contract_logger()

DEFAULT_SCHEMA = "default"


def _unknown_schema(contract: str, name: str) -> SchemaError:
    return SchemaError(schema_error(
        f"Contract {contract!r} has no schema {name!r}",
        code=ErrorCode.E7006_INVALID_SPEC,
        origin="contract",
        schema=name,
    ))


@dataclass(frozen=True, slots=True)
class Contract:
    """Compiled schemas and rules, ready to conform data."""
    name: str
    schemas: Mapping[str, TypeNode]
    rules: tuple[Rule, ...]

    def schema(self, name: str = DEFAULT_SCHEMA) -> TypeNode:
        try:
            return self.schemas[name]
        except KeyError:
            raise _unknown_schema(self.name, name) from None

    def conform(self, data: Any, schema: str = DEFAULT_SCHEMA) -> Outcome:
        """Validate data against a schema, then apply rules to the output."""
        outcome = validate(data, self.schema(schema))
        if outcome.is_ok() and self.rules:
            if rule_errors := apply_rules(self.rules, outcome.value):
                outcome = Failure(GroupError(tuple(rule_errors)))

        log.debug(
            "contract_conformed",
            contract=self.name,
            schema=schema,
            ok=outcome.is_ok(),
            error_count=0 if outcome.is_ok() else len(outcome.errors),
        )
        return outcome


class ContractBuilder:
    """Immutable builder for a Contract.

    Compile options given to the constructor apply to every schema; options
    given to ``schema()`` override them for that schema only.
    """

    __slots__ = ("_name", "_options", "_schemas", "_rules")

    def __init__(
        self,
        name: str = "contract",
        *,
        _schemas: Mapping[str, TypeNode] | None = None,
        _rules: tuple[Rule, ...] = (),
        **options: Any,
    ):
        self._name = name
        self._options = dict(options)
        self._schemas = dict(_schemas or {})
        self._rules = _rules

    def _evolve(self, schemas: Mapping[str, TypeNode] | None = None, rules: tuple[Rule, ...] | None = None) -> ContractBuilder:
        return ContractBuilder(
            self._name,
            _schemas=self._schemas if schemas is None else schemas,
            _rules=self._rules if rules is None else rules,
            **self._options,
        )

    @property
    def name(self) -> str:
        return self._name

    def schema(self, spec: Any, name: str = DEFAULT_SCHEMA, **options: Any) -> ContractBuilder:
        """Compile spec under name, returning a new builder."""
        if name in self._schemas:
            raise SchemaError(schema_error(
                f"Contract {self._name!r} already has a schema {name!r}",
                code=ErrorCode.E7006_INVALID_SPEC,
                origin="contract",
                schema=name,
            ))
        node = compile_schema(spec, **{**self._options, **options})
        return self._evolve(schemas={**self._schemas, name: node})

    def compiled(self, name: str = DEFAULT_SCHEMA) -> TypeNode:
        """An already compiled schema, for reuse inside later specs."""
        try:
            return self._schemas[name]
        except KeyError:
            raise _unknown_schema(self._name, name) from None

    def rule(self, name: str, body: Callable[[Any], Any], guard: Any = None) -> ContractBuilder:
        if not callable(body):
            raise SchemaError(invalid_rule(name, "body must be callable"))
        if any(r.name == name for r in self._rules):
            raise SchemaError(invalid_rule(name, "is already defined"))
        return self._evolve(rules=(*self._rules, Rule(name, body, guard)))

    def build(self) -> Contract:
        if not self._schemas:
            raise SchemaError(schema_error(
                f"Contract {self._name!r} has no schema",
                code=ErrorCode.E7006_INVALID_SPEC,
                origin="contract",
            ))
        contract = Contract(self._name, MappingProxyType(dict(self._schemas)), self._rules)
        log.debug("contract_built", contract=self._name, schemas=list(contract.schemas), rules=len(contract.rules))
        return contract
