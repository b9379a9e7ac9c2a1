"""Caster Registry

Value transformations used only by Cast nodes. A caster is keyed by the
(input primitive, output primitive) pair of the node it serves and returns a
Result, so a value it cannot convert becomes a validation failure rather
than an exception.

Features:
- Frozen CasterRule dataclasses with explicit source/target primitives
- Registry lookup resolved once, at compile time
- Custom casters: any CasterRule, or a plain callable wrapped in FunctionCaster
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Callable

from conformity.errors import AppError, Err, ErrorCode, Ok, Result, try_result

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

TIMESTAMP_UNITS = {
    "second": "seconds",
    "millisecond": "milliseconds",
    "microsecond": "microseconds",
}


def _cast_failure(value: Any, target: str, reason: str = "") -> Err[AppError]:
    message = f"Cannot cast {value!r} to {target}"
    return Err(AppError(
        code=ErrorCode.E2006_CAST_FAILED,
        message=f"{message}: {reason}" if reason else message,
        metadata={"target": target},
    ))


@dataclass(frozen=True, slots=True)
class CasterRule(ABC):
    """Base class for casters.

    Each rule defines:
    - The primitive it casts from
    - The primitive it casts to
    - The cast itself, returning Ok(value) or Err(AppError)
    - Optionally, a compile-time check of the node options it is given
    """

    @property
    @abstractmethod
    def source(self) -> str:
        """Primitive name this rule casts from."""

    @property
    @abstractmethod
    def target(self) -> str:
        """Primitive name this rule casts to."""

    def check_options(self, options: Mapping[str, Any]) -> Result[None, str]:
        """Check a cast node's options once, when the schema is compiled."""
        return Ok(None)

    @abstractmethod
    def cast(self, value: Any, options: Mapping[str, Any]) -> Result[Any, AppError]:
        """Cast value to the target primitive."""


@dataclass(frozen=True, slots=True)
class StringToInteger(CasterRule):
    """Cast string to integer."""

    @property
    def source(self) -> str:
        return "string"

    @property
    def target(self) -> str:
        return "integer"

    def cast(self, value: Any, options: Mapping[str, Any]) -> Result[int, AppError]:
        try:
            return Ok(int(value.strip()))
        except (ValueError, AttributeError) as e:
            return _cast_failure(value, self.target, str(e))


@dataclass(frozen=True, slots=True)
class StringToFloat(CasterRule):
    """Cast string to float."""

    @property
    def source(self) -> str:
        return "string"

    @property
    def target(self) -> str:
        return "float"

    def cast(self, value: Any, options: Mapping[str, Any]) -> Result[float, AppError]:
        try:
            return Ok(float(value.strip()))
        except (ValueError, AttributeError) as e:
            return _cast_failure(value, self.target, str(e))


@dataclass(frozen=True, slots=True)
class IntegerToString(CasterRule):
    """Cast integer to its decimal string."""

    @property
    def source(self) -> str:
        return "integer"

    @property
    def target(self) -> str:
        return "string"

    def cast(self, value: Any, options: Mapping[str, Any]) -> Result[str, AppError]:
        return Ok(str(value))


@dataclass(frozen=True, slots=True)
class FloatToString(CasterRule):
    """Cast float to its repr string."""

    @property
    def source(self) -> str:
        return "float"

    @property
    def target(self) -> str:
        return "string"

    def cast(self, value: Any, options: Mapping[str, Any]) -> Result[str, AppError]:
        return Ok(repr(value))


@dataclass(frozen=True, slots=True)
class IntegerToDateTime(CasterRule):
    """Cast a Unix timestamp to an aware UTC datetime.

    The ``unit`` option selects the timestamp resolution: ``second`` (default),
    ``millisecond`` or ``microsecond``.
    """

    @property
    def source(self) -> str:
        return "integer"

    @property
    def target(self) -> str:
        return "date_time"

    def check_options(self, options: Mapping[str, Any]) -> Result[None, str]:
        unit = options.get("unit", "second")
        if unit not in TIMESTAMP_UNITS:
            return Err(f"unknown unit {unit!r}; expected one of {sorted(TIMESTAMP_UNITS)}")
        return Ok(None)

    def cast(self, value: Any, options: Mapping[str, Any]) -> Result[datetime, AppError]:
        match self.check_options(options):
            case Err(reason):
                return _cast_failure(value, self.target, reason)
        unit = TIMESTAMP_UNITS[options.get("unit", "second")]
        try:
            return Ok(EPOCH + timedelta(**{unit: value}))
        except OverflowError as e:
            return _cast_failure(value, self.target, str(e))


@dataclass(frozen=True, slots=True)
class StringToBoolean(CasterRule):
    """Cast string to boolean.

    Truthy: "true", "1", "yes", "on", "y"
    Falsy: "false", "0", "no", "off", "n"
    """
    true_values: frozenset[str] = frozenset({"true", "1", "yes", "on", "y"})
    false_values: frozenset[str] = frozenset({"false", "0", "no", "off", "n"})

    @property
    def source(self) -> str:
        return "string"

    @property
    def target(self) -> str:
        return "boolean"

    def cast(self, value: Any, options: Mapping[str, Any]) -> Result[bool, AppError]:
        lower = value.strip().lower()
        if lower in self.true_values:
            return Ok(True)
        if lower in self.false_values:
            return Ok(False)
        return _cast_failure(value, self.target, f"valid values: {sorted(self.true_values | self.false_values)}")


@dataclass(frozen=True, slots=True)
class StringToDateTime(CasterRule):
    """Cast ISO8601 string to datetime, handling the Z suffix."""
    default_timezone: timezone | None = None

    @property
    def source(self) -> str:
        return "string"

    @property
    def target(self) -> str:
        return "date_time"

    def cast(self, value: Any, options: Mapping[str, Any]) -> Result[datetime, AppError]:
        try:
            dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError as e:
            return _cast_failure(value, self.target, str(e))
        if dt.tzinfo is None and self.default_timezone:
            dt = dt.replace(tzinfo=self.default_timezone)
        return Ok(dt)


@dataclass(frozen=True, slots=True)
class StringToDate(CasterRule):
    """Cast ISO8601 string to date."""

    @property
    def source(self) -> str:
        return "string"

    @property
    def target(self) -> str:
        return "date"

    def cast(self, value: Any, options: Mapping[str, Any]) -> Result[date, AppError]:
        try:
            return Ok(date.fromisoformat(value.strip()))
        except ValueError as e:
            return _cast_failure(value, self.target, str(e))


@dataclass(frozen=True, slots=True)
class StringToTime(CasterRule):
    """Cast ISO8601 string to time."""

    @property
    def source(self) -> str:
        return "string"

    @property
    def target(self) -> str:
        return "time"

    def cast(self, value: Any, options: Mapping[str, Any]) -> Result[time, AppError]:
        try:
            return Ok(time.fromisoformat(value.strip()))
        except ValueError as e:
            return _cast_failure(value, self.target, str(e))


@dataclass(frozen=True, slots=True)
class FunctionCaster(CasterRule):
    """Adapter for a plain callable ``fn(value, **params)``.

    ValueError, TypeError and ArithmeticError raised by the callable are
    reported as a failed cast; anything else propagates.
    """
    fn: Callable[..., Any] = field(default=None)
    source_name: str | None = None
    target_name: str | None = None

    @property
    def source(self) -> str:
        return self.source_name or "any"

    @property
    def target(self) -> str:
        return self.target_name or "any"

    def cast(self, value: Any, options: Mapping[str, Any]) -> Result[Any, AppError]:
        params = {k: v for k, v in options.items() if k != "caster"}
        return try_result(
            lambda: self.fn(value, **params),
            catch=(ValueError, TypeError, ArithmeticError),
            code=ErrorCode.E2006_CAST_FAILED,
            origin="caster",
        )


@dataclass(frozen=True, slots=True)
class CasterRegistry:
    """Registry of casters keyed by (source, target) primitive names.

    Usage:
        registry = DEFAULT_CASTERS.add_rule(MyCaster())
        compile_schema(spec, casters=registry)
    """
    rules: tuple[CasterRule, ...] = field(default_factory=lambda: (
        StringToInteger(),
        StringToFloat(),
        IntegerToString(),
        FloatToString(),
        IntegerToDateTime(),
        StringToBoolean(),
        StringToDateTime(),
        StringToDate(),
        StringToTime(),
    ))

    def add_rule(self, rule: CasterRule) -> CasterRegistry:
        """Add a caster, returning new instance. Later rules win on lookup."""
        return CasterRegistry(rules=(*self.rules, rule))

    def lookup(self, source: str | None, target: str | None) -> CasterRule | None:
        for rule in reversed(self.rules):
            if rule.source == source and rule.target == target:
                return rule
        return None


DEFAULT_CASTERS = CasterRegistry()


def as_caster(candidate: Any, source: str | None = None, target: str | None = None) -> CasterRule | None:
    """Normalize a custom caster option into a CasterRule."""
    if candidate is None or isinstance(candidate, CasterRule):
        return candidate
    if callable(candidate):
        return FunctionCaster(fn=candidate, source_name=source, target_name=target)
    return None
