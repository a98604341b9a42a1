"""Constraint bindings declared outside the SDL."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ..exceptions import ConfigurationError
from ..coordinates import parse_coordinate


logger = logging.getLogger(__name__)

ConstraintDeclaration = Tuple[str, Dict[str, Any]]


@dataclass
class ConstraintBindings:
    """A structured representation of constraint bindings.

    Accepts either a flat mapping of coordinates or one nested under a
    ``constraints`` key (the layout used by bindings files)::

        constraints:
          BookInput.title:
            length: {max: 10}
          Mutation.createBook(book:):
            - length: {max: 3}
    """

    raw_bindings: Mapping[str, Any]
    source: str = "mapping"
    by_coordinate: Dict[str, List[ConstraintDeclaration]] = field(default_factory=dict, repr=False)

    def __post_init__(self):
        """Parse the raw mapping into coordinate -> ordered declarations."""

        if not isinstance(self.raw_bindings, Mapping):
            raise ConfigurationError(
                f"Constraint bindings from {self.source} must be a mapping, "
                f"got {type(self.raw_bindings).__name__}"
            )

        if "constraints" in self.raw_bindings:
            content = self.raw_bindings["constraints"] or {}
        else:
            content = self.raw_bindings

        if not isinstance(content, Mapping):
            raise ConfigurationError(f"'constraints' in {self.source} must be a mapping")

        logger.debug("Processing %d constraint bindings from %s", len(content), self.source)

        for coordinate, declarations in content.items():
            parsed = parse_coordinate(coordinate)
            key = str(parsed)
            for name, parameters in self._iter_declarations(key, declarations):
                self.by_coordinate.setdefault(key, []).append((name, parameters))

        logger.debug("Final constraint bindings: %s", self.by_coordinate)

    def _iter_declarations(self, coordinate: str, declarations: Any):
        if isinstance(declarations, Mapping):
            items: Sequence[Any] = [declarations]
        elif isinstance(declarations, Sequence) and not isinstance(declarations, (str, bytes)):
            items = declarations
        else:
            raise ConfigurationError(
                f"Constraints for '{coordinate}' in {self.source} must be a mapping or a list"
            )

        for item in items:
            if not isinstance(item, Mapping):
                raise ConfigurationError(
                    f"Unsupported constraint declaration for '{coordinate}': {item!r}"
                )
            for name, parameters in item.items():
                if parameters is None:
                    parameters = {}
                if not isinstance(parameters, Mapping):
                    raise ConfigurationError(
                        f"Arguments of @{name} on '{coordinate}' must be a mapping, got {parameters!r}"
                    )
                yield str(name), dict(parameters)

    def for_coordinate(self, coordinate: str) -> List[ConstraintDeclaration]:
        return list(self.by_coordinate.get(coordinate, ()))

    @property
    def coordinates(self) -> List[str]:
        return list(self.by_coordinate)

    @classmethod
    def merge(cls, *bindings: Optional["ConstraintBindings"]) -> "ConstraintBindings":
        """Combine several binding sets, keeping declaration order per coordinate."""

        merged = cls({}, source="merged")
        for item in bindings:
            if item is None:
                continue
            for coordinate, declarations in item.by_coordinate.items():
                merged.by_coordinate.setdefault(coordinate, []).extend(declarations)
        return merged


__all__ = ["ConstraintBindings", "ConstraintDeclaration"]
