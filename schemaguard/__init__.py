"""Declarative constraint enforcement for graphql-core schemas."""

from .bindings import ConstraintBindings, load_bindings_file
from .config import Settings
from .constraints import Constraint, ConstraintRegistry, LengthConstraint, default_registry
from .exceptions import (
    ArgumentsError,
    CoercionError,
    ConfigurationError,
    ConstraintViolation,
    ResultConstraintError,
    SchemaGuardError,
)
from .path import Path
from .runtime import CoercionChain, CoercionContext, CoercionPlan, ResolutionChain
from .schema import constrain_schema, make_executable_schema

__all__ = [
    "ArgumentsError",
    "CoercionChain",
    "CoercionContext",
    "CoercionError",
    "CoercionPlan",
    "ConfigurationError",
    "Constraint",
    "ConstraintBindings",
    "ConstraintRegistry",
    "ConstraintViolation",
    "LengthConstraint",
    "Path",
    "ResolutionChain",
    "ResultConstraintError",
    "SchemaGuardError",
    "Settings",
    "constrain_schema",
    "default_registry",
    "load_bindings_file",
    "make_executable_schema",
]
