# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Coercion and resolution chains.

Each constrained schema element gets an explicit, ordered list of stages built
once at schema-construction time:

1. ``CoercionChain``: pre-existing coercers first, then constraint checks.
   Checks therefore always see the fully coerced value, and a coercer
   failure stops the chain before any check runs.
2. ``ResolutionChain``: the original resolver, then constraint checks on
   non-null results.

Chains are frozen; invocations share them without locking.
"""

from __future__ import annotations

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Tuple, Union

from graphql import GraphQLResolveInfo, default_field_resolver

from ..constraints import Constraint
from ..exceptions import CoercionError, ConstraintViolation, ResultConstraintError
from ..path import Path
from ..telemetry import record_violation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CoercionContext:
    """Per-call information handed to coercers."""

    path: Path
    coordinate: str
    info: Optional[GraphQLResolveInfo] = None

    @property
    def context(self) -> Any:
        """The request context value supplied to the executor."""
        return self.info.context if self.info is not None else None


Coercer = Callable[[Any, CoercionContext], Union[Any, Awaitable[Any]]]


@dataclass(frozen=True)
class CoercerStage:
    coercer: Coercer

    @property
    def label(self) -> str:
        return f"coerce:{getattr(self.coercer, '__qualname__', repr(self.coercer))}"

    async def __call__(self, value: Any, ctx: CoercionContext) -> Any:
        result = self.coercer(value, ctx)
        if inspect.isawaitable(result):
            result = await result
        return result


@dataclass(frozen=True)
class CheckStage:
    constraint: Constraint

    @property
    def label(self) -> str:
        return f"check:@{self.constraint.name}"

    async def __call__(self, value: Any, ctx: CoercionContext) -> Any:
        self.constraint.check(value, ctx.path)
        return value


Stage = Union[CoercerStage, CheckStage]


@dataclass(frozen=True)
class CoercionChain:
    """Effective coercion of one input field or argument."""

    coordinate: str
    stages: Tuple[Stage, ...] = ()

    @classmethod
    def build(
        cls,
        coordinate: str,
        coercers: Iterable[Coercer] = (),
        constraints: Iterable[Constraint] = (),
    ) -> "CoercionChain":
        stages: List[Stage] = [CoercerStage(c) for c in coercers]
        stages.extend(CheckStage(c) for c in constraints)
        return cls(coordinate, tuple(stages))

    @property
    def constraints(self) -> Tuple[Constraint, ...]:
        return tuple(s.constraint for s in self.stages if isinstance(s, CheckStage))

    def describe(self) -> List[str]:
        return [stage.label for stage in self.stages]

    async def __call__(self, value: Any, ctx: CoercionContext) -> Any:
        for stage in self.stages:
            try:
                value = await stage(value, ctx)
            except ConstraintViolation as violation:
                record_violation(violation.constraint, "input")
                raise CoercionError(
                    violation.message, path=ctx.path, original_error=violation
                ) from violation
        return value


@dataclass(frozen=True)
class ResolutionChain:
    """Effective resolver of one output field: resolve, then check non-null results."""

    coordinate: str
    resolver: Optional[Callable[..., Any]] = None
    constraints: Tuple[Constraint, ...] = ()

    def describe(self) -> List[str]:
        name = getattr(self.resolver or default_field_resolver, "__qualname__", "resolver")
        return [f"resolve:{name}"] + [f"check:@{c.name}" for c in self.constraints]

    async def __call__(self, parent: Any, info: GraphQLResolveInfo, **args: Any) -> Any:
        resolve = self.resolver or default_field_resolver
        value = resolve(parent, info, **args)
        if inspect.isawaitable(value):
            value = await value

        if value is None:
            return value

        path = Path.from_graphql(info.path)
        for constraint in self.constraints:
            try:
                constraint.check(value, path)
            except ConstraintViolation as violation:
                record_violation(violation.constraint, "output")
                logger.warning(
                    "Output constraint @%s failed for %s at %s: %s",
                    violation.constraint,
                    self.coordinate,
                    path.render(),
                    violation.message,
                )
                raise ResultConstraintError(violation) from violation
        return value


__all__ = [
    "CheckStage",
    "CoercerStage",
    "Coercer",
    "CoercionChain",
    "CoercionContext",
    "ResolutionChain",
    "Stage",
]
