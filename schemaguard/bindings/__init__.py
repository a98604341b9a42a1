"""Constraint bindings declared outside the SDL (mappings and YAML files)."""

from .bundle import ConstraintBindings, ConstraintDeclaration
from .loader import load_bindings_file

__all__ = [
    "ConstraintBindings",
    "ConstraintDeclaration",
    "load_bindings_file",
]
