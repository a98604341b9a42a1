"""Schema elements as tagged variants, and declaration-order traversal."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Iterator, List, Optional, Tuple, Union

from graphql import (
    GraphQLArgument,
    GraphQLField,
    GraphQLInputField,
    GraphQLNamedType,
    GraphQLSchema,
    is_input_object_type,
    is_interface_type,
    is_introspection_type,
    is_object_type,
)
from graphql.language import Node

from .coordinates import argument_coordinate, field_coordinate


@dataclass(frozen=True)
class InputFieldElement:
    type_name: str
    field_name: str
    field: GraphQLInputField

    kind = "input_field"

    @property
    def coordinate(self) -> str:
        return field_coordinate(self.type_name, self.field_name)

    @property
    def ast_node(self) -> Optional[Node]:
        return self.field.ast_node


@dataclass(frozen=True)
class ArgumentElement:
    type_name: str
    field_name: str
    argument_name: str
    argument: GraphQLArgument

    kind = "argument"

    @property
    def coordinate(self) -> str:
        return argument_coordinate(self.type_name, self.field_name, self.argument_name)

    @property
    def ast_node(self) -> Optional[Node]:
        return self.argument.ast_node


@dataclass(frozen=True)
class OutputFieldElement:
    type_name: str
    field_name: str
    field: GraphQLField

    kind = "output_field"

    @property
    def coordinate(self) -> str:
        return field_coordinate(self.type_name, self.field_name)

    @property
    def ast_node(self) -> Optional[Node]:
        return self.field.ast_node


SchemaElement = Union[InputFieldElement, ArgumentElement, OutputFieldElement]


def declared_types(schema: GraphQLSchema) -> List[GraphQLNamedType]:
    """User-defined named types, in SDL declaration order.

    Types from several SDL sources are grouped per source, sources ranked by
    first appearance in the type map. Types without a source location (built
    programmatically) follow in type-map order.
    """
    types = [t for t in schema.type_map.values() if not is_introspection_type(t)]
    source_rank: Dict[int, int] = {}

    def position(type_: GraphQLNamedType) -> Tuple[float, float]:
        node = type_.ast_node
        if node is None or node.loc is None:
            return math.inf, math.inf
        rank = source_rank.setdefault(id(node.loc.source), len(source_rank))
        return rank, node.loc.start

    keys = [position(t) for t in types]
    return [t for _, t in sorted(zip(keys, types), key=lambda pair: pair[0])]


def iter_schema_elements(schema: GraphQLSchema) -> Iterator[SchemaElement]:
    """Yield every input field, argument and object field exactly once.

    Each object field is yielded before its arguments. Interface fields are
    left to ``iter_interface_elements`` since the executor never resolves
    them directly.
    """
    for type_ in declared_types(schema):
        if is_object_type(type_):
            for field_name, field in type_.fields.items():
                yield OutputFieldElement(type_.name, field_name, field)
                for argument_name, argument in field.args.items():
                    yield ArgumentElement(type_.name, field_name, argument_name, argument)
        elif is_input_object_type(type_):
            for field_name, input_field in type_.fields.items():
                yield InputFieldElement(type_.name, field_name, input_field)


def iter_interface_elements(schema: GraphQLSchema) -> Iterator[SchemaElement]:
    """Yield interface fields and their arguments in declaration order.

    These are never resolved themselves; their constraints apply to the
    matching fields and arguments of every implementing object type.
    """
    for type_ in declared_types(schema):
        if is_interface_type(type_):
            for field_name, field in type_.fields.items():
                yield OutputFieldElement(type_.name, field_name, field)
                for argument_name, argument in field.args.items():
                    yield ArgumentElement(type_.name, field_name, argument_name, argument)


__all__ = [
    "ArgumentElement",
    "InputFieldElement",
    "OutputFieldElement",
    "SchemaElement",
    "declared_types",
    "iter_interface_elements",
    "iter_schema_elements",
]
