# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Deep coercion of field argument values.

graphql-core has already parsed and type-checked argument values by the time a
resolver runs. ``ArgumentCoercer`` walks those values a second time along
the declared input types and runs the coercion chain attached to every
argument and input field it meets:

- ``None`` is passed through without running chains
- non-null wrappers are unwrapped
- lists are coerced item by item (index appended to the path)
- input objects are coerced field by field, in declaration order
- an element's own chain runs after its nested values, and only when none of
  them failed

Every failure becomes a ``CoercionError`` carrying the exact path of the
element that failed. Sibling branches may run concurrently, but errors are
always returned in declaration/index order.
"""

from __future__ import annotations

import functools
import logging
from types import MappingProxyType
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Iterator,
    List,
    Mapping,
    Optional,
    Sequence,
    Tuple,
)

import anyio
from graphql import (
    GraphQLField,
    GraphQLInputType,
    GraphQLResolveInfo,
    is_input_object_type,
    is_list_type,
    is_non_null_type,
)
from graphql.pyutils import Undefined, is_iterable

from ..coordinates import argument_coordinate, field_coordinate
from ..exceptions import CoercionError
from ..path import Path
from .chains import CoercionChain, CoercionContext

logger = logging.getLogger(__name__)

CoercionOutcome = Tuple[Any, List[CoercionError]]
OnError = Callable[[CoercionError], None]


class CoercionPlan(Mapping[str, CoercionChain]):
    """Read-only mapping of schema coordinate -> coercion chain."""

    def __init__(self, chains: Optional[Mapping[str, CoercionChain]] = None):
        self._chains = MappingProxyType(dict(chains or {}))

    def __getitem__(self, coordinate: str) -> CoercionChain:
        return self._chains[coordinate]

    def __iter__(self) -> Iterator[str]:
        return iter(self._chains)

    def __len__(self) -> int:
        return len(self._chains)

    def for_input_field(self, type_name: str, field_name: str) -> Optional[CoercionChain]:
        return self._chains.get(field_coordinate(type_name, field_name))

    def for_argument(
        self, type_name: str, field_name: str, argument_name: str
    ) -> Optional[CoercionChain]:
        return self._chains.get(argument_coordinate(type_name, field_name, argument_name))

    def __repr__(self) -> str:
        return f"CoercionPlan({sorted(self._chains)})"


class ArgumentCoercer:
    """Deep-coerce argument values, collecting every error instead of stopping at the first."""

    def __init__(self, plan: CoercionPlan, *, concurrent: bool = True):
        self._plan = plan
        self._concurrent = concurrent

    async def coerce_arguments(
        self,
        type_name: str,
        field_name: str,
        field: GraphQLField,
        values: Mapping[str, Any],
        on_error: OnError,
        info: Optional[GraphQLResolveInfo] = None,
    ) -> Dict[str, Any]:
        """Coerce every supplied argument of ``type_name.field_name``.

        Errors are reported through *on_error* depth-first in declaration
        order. Arguments that failed keep their incoming value in the
        returned mapping.
        """
        keys: List[str] = []
        branches: List[Callable[[], Awaitable[CoercionOutcome]]] = []
        for argument_name, argument in field.args.items():
            key = argument.out_name or argument_name
            if key not in values:
                continue
            keys.append(key)
            branches.append(
                functools.partial(
                    self._coerce_element,
                    values[key],
                    argument.type,
                    Path.of(argument_name),
                    self._plan.for_argument(type_name, field_name, argument_name),
                    info,
                )
            )

        coerced = dict(values)
        for key, (value, errors) in zip(keys, await self._gather(branches)):
            if errors:
                for error in errors:
                    on_error(error)
            else:
                coerced[key] = value
        return coerced

    async def coerce_value(
        self,
        value: Any,
        type_: GraphQLInputType,
        path: Path,
        info: Optional[GraphQLResolveInfo] = None,
    ) -> CoercionOutcome:
        """Coerce *value* against *type_*, returning the new value and its errors."""

        if value is None or value is Undefined:
            return value, []

        if is_non_null_type(type_):
            return await self.coerce_value(value, type_.of_type, path, info)

        if is_list_type(type_):
            item_type = type_.of_type
            if not is_iterable(value):
                return await self.coerce_value(value, item_type, path, info)
            outcomes = await self._gather(
                [
                    functools.partial(self.coerce_value, item, item_type, path.add(index), info)
                    for index, item in enumerate(value)
                ]
            )
            return [item for item, _ in outcomes], [e for _, errors in outcomes for e in errors]

        if is_input_object_type(type_):
            # Input types with a custom out_type have already been converted by the engine.
            if not isinstance(value, Mapping):
                return value, []
            keys: List[str] = []
            branches = []
            for name, input_field in type_.fields.items():
                key = input_field.out_name or name
                if key not in value:
                    continue
                keys.append(key)
                branches.append(
                    functools.partial(
                        self._coerce_element,
                        value[key],
                        input_field.type,
                        path.add(name),
                        self._plan.for_input_field(type_.name, name),
                        info,
                    )
                )
            coerced = dict(value)
            collected: List[CoercionError] = []
            for key, (field_value, errors) in zip(keys, await self._gather(branches)):
                if errors:
                    collected.extend(errors)
                else:
                    coerced[key] = field_value
            return coerced, collected

        return value, []

    async def _coerce_element(
        self,
        value: Any,
        type_: GraphQLInputType,
        path: Path,
        chain: Optional[CoercionChain],
        info: Optional[GraphQLResolveInfo],
    ) -> CoercionOutcome:
        coerced, errors = await self.coerce_value(value, type_, path, info)
        if errors or chain is None or coerced is None or coerced is Undefined:
            return coerced, errors

        try:
            coerced = await chain(coerced, CoercionContext(path, chain.coordinate, info))
        except Exception as exc:
            error = CoercionError.from_exception(exc, path)
            logger.debug("Coercion failed for %s at %s: %s", chain.coordinate, path, error.message)
            return coerced, [error]
        return coerced, []

    async def _gather(
        self, branches: Sequence[Callable[[], Awaitable[CoercionOutcome]]]
    ) -> List[CoercionOutcome]:
        if not self._concurrent or len(branches) < 2:
            return [await branch() for branch in branches]

        # Each branch writes to its own slot so ordering follows declaration order.
        outcomes: List[Any] = [None] * len(branches)

        async def run(index: int, branch: Callable[[], Awaitable[CoercionOutcome]]) -> None:
            outcomes[index] = await branch()

        async with anyio.create_task_group() as tg:
            for index, branch in enumerate(branches):
                tg.start_soon(run, index, branch)
        return outcomes


__all__ = ["ArgumentCoercer", "CoercionOutcome", "CoercionPlan", "OnError"]
