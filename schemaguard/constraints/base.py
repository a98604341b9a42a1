# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Constraint base class.

A constraint is a named, parameterized predicate bound to one schema element.
Parameters are validated when the constraint is constructed, which happens
while the schema is built, so malformed declarations never reach a request.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Any, ClassVar, Mapping, Tuple

from ..exceptions import ConfigurationError
from ..path import Path


class Constraint(ABC):
    """Abstract base for all constraints.

    Contract:
        - ``check`` is side-effect free and never mutates ``value``
        - ``check`` returns ``None`` or raises ``ConstraintViolation``
        - parameters are read-only after construction
    """

    #: Directive name used in SDL (``@length``) and in binding files.
    name: ClassVar[str]

    #: SDL definition injected into documents that do not declare the directive.
    directive_sdl: ClassVar[str]

    #: Accepted parameter names; anything else is a declaration typo.
    parameter_names: ClassVar[Tuple[str, ...]] = ()

    def __init__(self, **parameters: Any):
        unknown = sorted(set(parameters) - set(self.parameter_names))
        if unknown:
            raise ConfigurationError(
                f"Unknown argument(s) for @{self.name}: {unknown}. "
                f"Expected: {list(self.parameter_names)}"
            )
        self._parameters = MappingProxyType(dict(parameters))
        self.validate_parameters(self._parameters)

    @property
    def parameters(self) -> Mapping[str, Any]:
        return self._parameters

    def validate_parameters(self, parameters: Mapping[str, Any]) -> None:
        """Hook for subclasses; raise ``ConfigurationError`` on bad parameters."""

    @abstractmethod
    def check(self, value: Any, path: Path) -> None:
        ...

    def _require_non_negative_int(self, parameters: Mapping[str, Any], key: str) -> int:
        if key not in parameters:
            raise ConfigurationError(f"@{self.name} requires a '{key}' argument")
        value = parameters[key]
        # bool is an int subclass
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigurationError(
                f"@{self.name}({key}:) must be an integer, got {type(value).__name__}"
            )
        if value < 0:
            raise ConfigurationError(f"@{self.name}({key}:) must be non-negative, got {value}")
        return value

    def __repr__(self) -> str:
        params = ", ".join(f"{k}={v!r}" for k, v in self._parameters.items())
        return f"{type(self).__name__}({params})"


__all__ = ["Constraint"]
