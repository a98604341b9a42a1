# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Schema construction entry points.

``make_executable_schema`` builds a fresh graphql-core schema from SDL and
runs both passes on it before anyone else can see it:

1. the traversal driver attaches constraints and coercers
   (``schemaguard.visitor.apply_constraints``);
2. the resolver gate wraps every object field resolver
   (``schemaguard.runtime.install_argument_gate``).

.. code-block:: python

    from graphql import graphql
    from schemaguard import make_executable_schema

    schema = make_executable_schema(
        '''
        type Query { books: [Book] }
        type Book { title: String @length(max: 10) }
        type Mutation { createBook(book: BookInput): Book }
        input BookInput { title: String! @length(max: 10) }
        ''',
        resolvers={"Mutation": {"createBook": lambda _, info, book: book}},
    )

    result = await graphql(schema, 'mutation { createBook(book: {title: "hello world!"}) { title } }')
    # result.errors[0].message == "Arguments are incorrect"

The ``@length`` directive definition is added automatically when the SDL does
not declare it.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Optional, Sequence, Union

from graphql import (
    DocumentNode,
    GraphQLError,
    GraphQLSchema,
    build_ast_schema,
    is_object_type,
    parse,
)
from graphql.language import DirectiveDefinitionNode
from graphql.utilities import concat_ast

from .bindings import ConstraintBindings, load_bindings_file
from .config import Settings
from .constraints import ConstraintRegistry, default_registry
from .exceptions import ConfigurationError
from .runtime import install_argument_gate
from .visitor import CoercerMap, apply_constraints

logger = logging.getLogger(__name__)

TypeDefs = Union[str, DocumentNode, Sequence[Union[str, DocumentNode]]]
ResolverMap = Mapping[str, Mapping[str, Callable[..., Any]]]


def _as_document(type_defs: TypeDefs) -> DocumentNode:
    if isinstance(type_defs, DocumentNode):
        return type_defs
    if isinstance(type_defs, str):
        return parse(type_defs)
    return concat_ast([_as_document(part) for part in type_defs])


def with_constraint_directives(document: DocumentNode, registry: ConstraintRegistry) -> DocumentNode:
    """Prepend definitions for registered constraint directives missing from *document*."""

    defined = {
        definition.name.value
        for definition in document.definitions
        if isinstance(definition, DirectiveDefinitionNode)
    }
    missing = [name for name in registry if name not in defined]
    if not missing:
        return document
    logger.debug("Adding constraint directive definitions: %s", missing)
    return concat_ast([parse(registry[name].directive_sdl) for name in missing] + [document])


def attach_resolvers(schema: GraphQLSchema, resolvers: ResolverMap) -> None:
    """Install ``{"Type": {"field": resolver}}`` onto freshly built object types."""

    for type_name, field_resolvers in resolvers.items():
        type_ = schema.get_type(type_name)
        if type_ is None or not is_object_type(type_):
            raise ConfigurationError(f"Resolvers given for unknown object type '{type_name}'")
        for field_name, resolver in field_resolvers.items():
            field = type_.fields.get(field_name)
            if field is None:
                raise ConfigurationError(
                    f"Resolver given for unknown field '{type_name}.{field_name}'"
                )
            if not callable(resolver):
                raise ConfigurationError(f"Resolver for '{type_name}.{field_name}' is not callable")
            field.resolve = resolver


def _bindings_from(
    constraints: Optional[Union[ConstraintBindings, Mapping[str, Any]]], settings: Settings
) -> ConstraintBindings:
    inline: Optional[ConstraintBindings]
    if constraints is None or isinstance(constraints, ConstraintBindings):
        inline = constraints
    else:
        inline = ConstraintBindings(constraints, source="constraints argument")

    from_file = None
    if settings.constraints_file is not None:
        from_file = load_bindings_file(settings.constraints_file)
    return ConstraintBindings.merge(inline, from_file)


def constrain_schema(
    schema: GraphQLSchema,
    *,
    coercers: Optional[CoercerMap] = None,
    constraints: Optional[Union[ConstraintBindings, Mapping[str, Any]]] = None,
    registry: Optional[ConstraintRegistry] = None,
    settings: Optional[Settings] = None,
) -> GraphQLSchema:
    """Apply constraints and install the argument gate on an unpublished schema.

    *schema* must not have been handed to an executor yet; each schema can be
    constrained once.
    """
    settings = settings or Settings.from_env()
    plan = apply_constraints(
        schema,
        registry=registry or default_registry(),
        bindings=_bindings_from(constraints, settings),
        coercers=coercers,
    )
    return install_argument_gate(schema, plan, settings=settings)


def make_executable_schema(
    type_defs: TypeDefs,
    resolvers: Optional[ResolverMap] = None,
    *,
    coercers: Optional[CoercerMap] = None,
    constraints: Optional[Union[ConstraintBindings, Mapping[str, Any]]] = None,
    registry: Optional[ConstraintRegistry] = None,
    settings: Optional[Settings] = None,
) -> GraphQLSchema:
    """Build a new constrained, executable schema from SDL.

    :param type_defs: SDL string, parsed document, or a sequence of either.
    :param resolvers: ``{"Type": {"field": resolver}}``; resolvers take
                      ``(parent, info, **args)`` like any graphql-core resolver.
    :param coercers: ``{"Type.field": fn}`` or ``{"Type.field(arg:)": [fn, ...]}``;
                     each coercer takes ``(value, CoercionContext)`` and may be async.
                     Coercers always run before constraint checks.
    :param constraints: extra bindings, ``{"Type.field": {"length": {"max": 10}}}``.
    :param registry: constraint kinds; defaults to the built-in ``@length``.
    :param settings: defaults to ``Settings.from_env()``.
    """
    registry = registry or default_registry()
    settings = settings or Settings.from_env()

    try:
        document = with_constraint_directives(_as_document(type_defs), registry)
        schema = build_ast_schema(document)
    except (GraphQLError, TypeError) as exc:
        # graphql-core reports invalid SDL as TypeError, syntax errors as GraphQLError
        logger.error("Invalid schema definition: %s", exc)
        raise ConfigurationError(f"Invalid schema definition: {exc}") from exc
    attach_resolvers(schema, resolvers or {})

    return constrain_schema(
        schema,
        coercers=coercers,
        constraints=constraints,
        registry=registry,
        settings=settings,
    )


__all__ = [
    "attach_resolvers",
    "constrain_schema",
    "make_executable_schema",
    "with_constraint_directives",
]
