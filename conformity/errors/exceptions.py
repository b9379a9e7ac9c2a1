"""Exception wrappers for AppError.

Used where a failure must not travel as data: schema definition mistakes are
programmer errors and are raised at compile time instead of being returned.
"""
from __future__ import annotations

from .types import AppError, ErrorCode


class AppErrorException(Exception):
    """Exception wrapper for AppError.

    Use this when you need to raise an AppError in code that
    doesn't use the Result type.
    """

    def __init__(self, error: AppError):
        self.error = error
        super().__init__(str(error))

    @property
    def code(self) -> ErrorCode:
        return self.error.code


class SchemaError(AppErrorException):
    """Malformed spec: unknown type or predicate, bad arity, duplicate key, missing caster."""
