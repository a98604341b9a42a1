"""The ``@length`` constraint."""

from __future__ import annotations

from typing import Any, Mapping

from ..exceptions import ConstraintViolation
from ..path import Path
from .base import Constraint


class LengthConstraint(Constraint):
    """Fail when ``len(value)`` exceeds ``max``.

    Works for anything sized: strings, lists, input objects. A value without a
    length is reported as a violation rather than crashing the chain.
    """

    name = "length"
    directive_sdl = (
        "directive @length(max: Int!) "
        "on FIELD_DEFINITION | INPUT_FIELD_DEFINITION | ARGUMENT_DEFINITION"
    )
    parameter_names = ("max",)

    def validate_parameters(self, parameters: Mapping[str, Any]) -> None:
        self._require_non_negative_int(parameters, "max")

    @property
    def max(self) -> int:
        return self.parameters["max"]

    def check(self, value: Any, path: Path) -> None:
        try:
            size = len(value)
        except TypeError:
            raise ConstraintViolation(
                f"length: expected a value with a length, got {type(value).__name__}",
                path=path,
                constraint=self.name,
                expected=self.max,
                actual=value,
            ) from None

        if size > self.max:
            raise ConstraintViolation(
                f"length: expected {size} to be at most {self.max}",
                path=path,
                constraint=self.name,
                expected=self.max,
                actual=size,
            )


__all__ = ["LengthConstraint"]
