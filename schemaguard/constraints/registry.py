"""Registry mapping directive names to constraint classes."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterator, Mapping, Optional, Type

from ..exceptions import ConfigurationError
from .base import Constraint
from .length import LengthConstraint

logger = logging.getLogger(__name__)


class ConstraintRegistry:
    """Known constraint kinds, keyed by directive name."""

    def __init__(self, constraints: Optional[Mapping[str, Type[Constraint]]] = None):
        self._constraints: Dict[str, Type[Constraint]] = {}
        for constraint_cls in (constraints or {}).values():
            self.register(constraint_cls)

    def register(self, constraint_cls: Type[Constraint]) -> Type[Constraint]:
        name = getattr(constraint_cls, "name", None)
        if not name:
            raise ConfigurationError(f"{constraint_cls.__name__} does not declare a constraint name")
        if not getattr(constraint_cls, "directive_sdl", None):
            raise ConfigurationError(
                f"{constraint_cls.__name__} does not declare a directive definition (directive_sdl)"
            )
        if name in self._constraints:
            raise ConfigurationError(f"Constraint '@{name}' is already registered")
        self._constraints[name] = constraint_cls
        logger.debug("Registered constraint '@%s' -> %s", name, constraint_cls.__name__)
        return constraint_cls

    def create(self, name: str, parameters: Mapping[str, Any]) -> Constraint:
        """Instantiate constraint *name*; parameter errors surface as ``ConfigurationError``."""

        constraint_cls = self._constraints.get(name)
        if constraint_cls is None:
            raise ConfigurationError(
                f"Unknown constraint '@{name}'. Known constraints: {sorted(self._constraints)}"
            )
        try:
            return constraint_cls(**dict(parameters))
        except TypeError as exc:
            raise ConfigurationError(f"Invalid arguments for '@{name}': {exc}") from exc

    def __contains__(self, name: object) -> bool:
        return name in self._constraints

    def __iter__(self) -> Iterator[str]:
        return iter(self._constraints)

    def __getitem__(self, name: str) -> Type[Constraint]:
        return self._constraints[name]


def default_registry() -> ConstraintRegistry:
    """Return a fresh registry holding the built-in constraints."""

    registry = ConstraintRegistry()
    registry.register(LengthConstraint)
    return registry


__all__ = ["ConstraintRegistry", "default_registry"]
