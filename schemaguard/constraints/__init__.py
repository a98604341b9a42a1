"""Constraint package - named, parameterized checks bound to schema elements.

Checks are pure: they raise ``ConstraintViolation`` or return ``None`` and
never transform the value.
"""

from .base import Constraint
from .length import LengthConstraint
from .registry import ConstraintRegistry, default_registry

__all__ = [
    "Constraint",
    "ConstraintRegistry",
    "LengthConstraint",
    "default_registry",
]
