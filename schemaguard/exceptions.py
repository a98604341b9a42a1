# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Exception hierarchy for schemaguard.

Two families live here:

* internal errors (``SchemaGuardError`` and subclasses) that carry full
  diagnostic detail for logs and tests;
* user-facing errors (``ArgumentsError``, ``ResultConstraintError``) that are
  ``GraphQLError`` instances with a fixed, generic message. They keep the
  internal detail on the instance but never render it into the response.
"""

from __future__ import annotations

from typing import Any, Iterable, Optional, Tuple

from graphql import GraphQLError

from .path import Path

ARGUMENTS_ERROR_MESSAGE = "Arguments are incorrect"
RESULT_ERROR_MESSAGE = "Result is incorrect"
BAD_USER_INPUT = "BAD_USER_INPUT"


class SchemaGuardError(Exception):
    """Base class for all schemaguard errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(SchemaGuardError):
    """Raised while building a schema when constraints are declared incorrectly."""


class ConstraintViolation(SchemaGuardError):
    """A single constraint check failed.

    Raised by ``Constraint.check`` and always converted by the coercion or
    resolution chain that ran the check.
    """

    def __init__(
        self,
        message: str,
        *,
        path: Path,
        constraint: str,
        expected: Any = None,
        actual: Any = None,
    ):
        super().__init__(message)
        self.path = path
        self.constraint = constraint
        self.expected = expected
        self.actual = actual

    def __repr__(self) -> str:
        return (
            f"ConstraintViolation(constraint={self.constraint!r}, path={self.path.render()!r}, "
            f"expected={self.expected!r}, actual={self.actual!r})"
        )


class CoercionError(SchemaGuardError):
    """A coercion failure collected while deep-coercing field arguments."""

    def __init__(
        self,
        message: str,
        *,
        path: Path,
        original_error: Optional[BaseException] = None,
    ):
        if not path:
            raise ValueError("CoercionError requires a non-empty path")
        super().__init__(message)
        self.path = path
        self.original_error = original_error

    @classmethod
    def from_exception(cls, error: BaseException, path: Path) -> "CoercionError":
        """Normalize any coercion failure raised at *path*."""

        if isinstance(error, CoercionError):
            return error
        return cls(str(error) or type(error).__name__, path=path, original_error=error)

    def __str__(self) -> str:
        return f"{self.path.render()}: {self.message}"

    def __repr__(self) -> str:
        return f"CoercionError(path={self.path.as_list()!r}, message={self.message!r})"


class ArgumentsError(GraphQLError):
    """User-facing error raised when a field's arguments failed coercion.

    The message is always ``"Arguments are incorrect"``; the underlying
    ``CoercionError`` list is available as ``coercion_errors`` for logging.
    """

    def __init__(self, coercion_errors: Iterable[CoercionError]):
        super().__init__(ARGUMENTS_ERROR_MESSAGE, extensions={"code": BAD_USER_INPUT})
        self.coercion_errors: Tuple[CoercionError, ...] = tuple(coercion_errors)


class ResultConstraintError(GraphQLError):
    """User-facing error raised when a resolved value violates an output constraint."""

    def __init__(self, violation: ConstraintViolation):
        super().__init__(RESULT_ERROR_MESSAGE)
        self.violation = violation


__all__ = [
    "ARGUMENTS_ERROR_MESSAGE",
    "RESULT_ERROR_MESSAGE",
    "ArgumentsError",
    "CoercionError",
    "ConfigurationError",
    "ConstraintViolation",
    "ResultConstraintError",
    "SchemaGuardError",
]
