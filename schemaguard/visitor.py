# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Schema traversal driver.

Visits every schema element once, in declaration order, and attaches the
constraints bound to it:

* input fields and arguments get a ``CoercionChain`` in the returned
  ``CoercionPlan`` (run later by the resolver gate during deep coercion);
* output fields get their resolver replaced by a ``ResolutionChain``.

Constraints come from SDL directives on the element (``@length(max: 10)``)
followed by external bindings for the element's schema coordinate. Fields and
arguments of an object type then inherit the constraints (and argument
coercers) declared on the same field of every interface the type implements.
"""

from __future__ import annotations

import logging
import weakref
from typing import Callable, Dict, List, Mapping, Optional, Sequence, Set, Union

from graphql import GraphQLError, GraphQLSchema, is_object_type
from graphql.execution.values import get_argument_values

from .bindings import ConstraintBindings
from .constraints import Constraint, ConstraintRegistry, default_registry
from .elements import (
    ArgumentElement,
    InputFieldElement,
    OutputFieldElement,
    SchemaElement,
    iter_interface_elements,
    iter_schema_elements,
)
from .exceptions import ConfigurationError
from .runtime.chains import Coercer, CoercionChain, ResolutionChain
from .runtime.coercion import CoercionPlan
from .telemetry import constrained_elements

logger = logging.getLogger(__name__)

CoercerMap = Mapping[str, Union[Coercer, Sequence[Coercer]]]

_CONSTRAINED_SCHEMAS: "weakref.WeakSet[GraphQLSchema]" = weakref.WeakSet()


def directive_constraints(
    schema: GraphQLSchema, element: SchemaElement, registry: ConstraintRegistry
) -> List[Constraint]:
    """Instantiate the constraint directives found on *element*'s SDL node."""

    node = element.ast_node
    if node is None or not node.directives:
        return []

    constraints: List[Constraint] = []
    for directive_node in node.directives:
        name = directive_node.name.value
        if name not in registry:
            continue
        directive = schema.get_directive(name)
        if directive is None:
            raise ConfigurationError(
                f"Constraint directive '@{name}' on '{element.coordinate}' is not defined in the schema"
            )
        try:
            parameters = get_argument_values(directive, directive_node)
        except GraphQLError as exc:
            raise ConfigurationError(
                f"Invalid arguments for '@{name}' on '{element.coordinate}': {exc.message}"
            ) from exc
        try:
            constraints.append(registry.create(name, parameters))
        except ConfigurationError as exc:
            logger.error("Rejected constraint on %s: %s", element.coordinate, exc.message)
            raise ConfigurationError(f"{element.coordinate}: {exc.message}") from exc
    return constraints


class ConstraintVisitor:
    """Dispatches each element kind to the matching wrapper."""

    def __init__(
        self,
        schema: GraphQLSchema,
        registry: ConstraintRegistry,
        bindings: ConstraintBindings,
        coercers: Optional[CoercerMap] = None,
    ):
        self._schema = schema
        self._registry = registry
        self._bindings = bindings
        self._coercers: Dict[str, List[Coercer]] = {
            coordinate: _as_list(funcs) for coordinate, funcs in (coercers or {}).items()
        }
        self._seen: Set[str] = set()
        self.chains: Dict[str, CoercionChain] = {}
        self.resolution_chains: Dict[str, ResolutionChain] = {}

    def visit(self, element: SchemaElement) -> None:
        self._seen.add(element.coordinate)
        if isinstance(element, InputFieldElement):
            self.visit_input_field(element)
        elif isinstance(element, ArgumentElement):
            self.visit_argument(element)
        elif isinstance(element, OutputFieldElement):
            self.visit_output_field(element)
        else:  # pragma: no cover - exhaustive over SchemaElement
            raise TypeError(f"Unsupported schema element: {element!r}")

    def visit_input_field(self, element: InputFieldElement) -> None:
        self._attach_coercion(element)

    def visit_argument(self, element: ArgumentElement) -> None:
        self._attach_coercion(element)

    def visit_interface_element(self, element: Union[OutputFieldElement, ArgumentElement]) -> None:
        """Validate declarations on an interface field or argument.

        Nothing is attached here; implementing object types pick the
        constraints up when their own fields are visited.
        """
        self._seen.add(element.coordinate)
        if isinstance(element, OutputFieldElement):
            self._reject_output_coercers(element)
        self._declared_constraints(element)

    def visit_output_field(self, element: OutputFieldElement) -> None:
        self._reject_output_coercers(element)
        constraints = self._constraints_for(element)
        if not constraints:
            return
        chain = ResolutionChain(element.coordinate, element.field.resolve, tuple(constraints))
        element.field.resolve = chain
        self.resolution_chains[element.coordinate] = chain
        logger.debug("Wrapped resolver of %s: %s", element.coordinate, chain.describe())

    def _attach_coercion(self, element: Union[InputFieldElement, ArgumentElement]) -> None:
        constraints = self._constraints_for(element)
        coercers = list(self._coercers.get(element.coordinate, []))
        for inherited in self._inherited(element):
            coercers.extend(self._coercers.get(inherited.coordinate, []))
        if not constraints and not coercers:
            return
        chain = CoercionChain.build(element.coordinate, coercers, constraints)
        self.chains[element.coordinate] = chain
        logger.debug("Built coercion chain for %s: %s", element.coordinate, chain.describe())

    def _reject_output_coercers(self, element: OutputFieldElement) -> None:
        if element.coordinate in self._coercers:
            raise ConfigurationError(
                f"Coercers apply to input fields and arguments; '{element.coordinate}' is an output field"
            )

    def _inherited(self, element: SchemaElement) -> List[SchemaElement]:
        """The matching elements on the interfaces implemented by *element*'s owner."""

        owner = self._schema.get_type(element.type_name)
        if not is_object_type(owner):
            return []
        inherited: List[SchemaElement] = []
        for interface in owner.interfaces:
            field = interface.fields.get(element.field_name)
            if field is None:
                continue
            if isinstance(element, OutputFieldElement):
                inherited.append(OutputFieldElement(interface.name, element.field_name, field))
            elif isinstance(element, ArgumentElement):
                argument = field.args.get(element.argument_name)
                if argument is not None:
                    inherited.append(
                        ArgumentElement(interface.name, element.field_name, element.argument_name, argument)
                    )
        return inherited

    def _constraints_for(self, element: SchemaElement) -> List[Constraint]:
        constraints = self._declared_constraints(element)
        for inherited in self._inherited(element):
            from_interface = self._declared_constraints(inherited)
            if from_interface:
                logger.debug(
                    "%s inherits %d constraint(s) from %s",
                    element.coordinate,
                    len(from_interface),
                    inherited.coordinate,
                )
            constraints.extend(from_interface)
        return constraints

    def _declared_constraints(self, element: SchemaElement) -> List[Constraint]:
        constraints = directive_constraints(self._schema, element, self._registry)
        for name, parameters in self._bindings.for_coordinate(element.coordinate):
            try:
                constraints.append(self._registry.create(name, parameters))
            except ConfigurationError as exc:
                logger.error("Rejected constraint binding on %s: %s", element.coordinate, exc.message)
                raise ConfigurationError(f"{element.coordinate}: {exc.message}") from exc
        return constraints

    def finish(self) -> CoercionPlan:
        """Fail on bindings or coercers naming elements the schema does not have."""

        unknown = sorted(
            (set(self._bindings.coordinates) | set(self._coercers)) - self._seen
        )
        if unknown:
            logger.error("Constraint declarations reference unknown schema elements: %s", unknown)
            raise ConfigurationError(
                f"Constraint declarations reference undefined schema coordinate(s): {unknown}"
            )
        return CoercionPlan(self.chains)


def _as_list(funcs: Union[Coercer, Sequence[Coercer]]) -> List[Coercer]:
    if callable(funcs):
        return [funcs]
    return list(funcs)


def apply_constraints(
    schema: GraphQLSchema,
    *,
    registry: Optional[ConstraintRegistry] = None,
    bindings: Optional[ConstraintBindings] = None,
    coercers: Optional[CoercerMap] = None,
) -> CoercionPlan:
    """Attach constraints and coercers to every element of *schema*.

    Returns the ``CoercionPlan`` consumed by the resolver gate. Output field
    resolvers are wrapped in place. Applying constraints twice to the same
    schema raises ``ConfigurationError``.
    """
    if schema in _CONSTRAINED_SCHEMAS:
        logger.error("Constraints already applied to schema %r", schema)
        raise ConfigurationError("Constraints have already been applied to this schema")

    visitor = ConstraintVisitor(
        schema,
        registry or default_registry(),
        bindings or ConstraintBindings({}),
        coercers,
    )
    for interface_element in iter_interface_elements(schema):
        visitor.visit_interface_element(interface_element)
    for element in iter_schema_elements(schema):
        visitor.visit(element)
    plan = visitor.finish()

    _CONSTRAINED_SCHEMAS.add(schema)
    constrained_elements.add(len(plan) + len(visitor.resolution_chains))
    logger.debug(
        "Applied constraints: %d coercion chain(s), %d resolution chain(s)",
        len(plan),
        len(visitor.resolution_chains),
    )
    return plan


__all__ = ["ConstraintVisitor", "apply_constraints", "directive_constraints"]
