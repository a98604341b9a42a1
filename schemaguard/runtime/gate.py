# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Resolver gate: deep-coerce arguments, reject invalid input before resolution."""

from __future__ import annotations

import inspect
import logging
import time
import weakref
from enum import Enum
from typing import Any, Callable, Iterable, List, Optional

from graphql import GraphQLField, GraphQLResolveInfo, GraphQLSchema, default_field_resolver

from ..config import Settings
from ..coordinates import field_coordinate
from ..elements import OutputFieldElement, iter_schema_elements
from ..exceptions import ArgumentsError, CoercionError, ConfigurationError
from ..telemetry import arguments_rejected_total, get_tracer, record_field_metrics
from .coercion import ArgumentCoercer, CoercionPlan

logger = logging.getLogger(__name__)

_GATED_SCHEMAS: "weakref.WeakSet[GraphQLSchema]" = weakref.WeakSet()


class InvocationState(str, Enum):
    """Lifecycle of one gated field invocation."""

    PENDING = "pending"
    COERCING = "coercing"
    REJECTED = "rejected"
    RESOLVING = "resolving"
    RESOLVED = "resolved"
    FAILED = "failed"


def format_coercion_report(coordinate: str, errors: Iterable[CoercionError]) -> str:
    """Produce a human-readable diagnostic for rejected arguments."""

    lines = [f"Argument coercion failed for '{coordinate}':"]
    for error in errors:
        lines.append(f" - {error.path.render()}: {error.message}")
    return "\n".join(lines)


def gate_resolver(
    type_name: str,
    field_name: str,
    field: GraphQLField,
    coercer: ArgumentCoercer,
) -> Callable[..., Any]:
    """Wrap ``field.resolve`` so that arguments are coerced and checked first.

    The returned coroutine function never calls the wrapped resolver when any
    argument failed coercion; it raises a single ``ArgumentsError`` instead.
    """
    resolve = field.resolve or default_field_resolver
    coordinate = field_coordinate(type_name, field_name)

    async def gated_resolver(parent: Any, info: GraphQLResolveInfo, **args: Any) -> Any:
        state = InvocationState.PENDING
        with get_tracer().start_as_current_span(
            f"schemaguard.gate:{coordinate}",
            attributes={"schemaguard.field": coordinate, "schemaguard.state": state.value},
        ) as span:
            state = InvocationState.COERCING
            span.set_attribute("schemaguard.state", state.value)
            started_at = time.perf_counter()
            errors: List[CoercionError] = []
            coerced = await coercer.coerce_arguments(
                type_name, field_name, field, args, errors.append, info
            )
            coercion_ms = (time.perf_counter() - started_at) * 1000.0

            if errors:
                state = InvocationState.REJECTED
                span.set_attribute("schemaguard.state", state.value)
                arguments_rejected_total.add(1, {"field": coordinate})
                record_field_metrics(coordinate, state.value, coercion_ms)
                if logger.isEnabledFor(logging.INFO):
                    logger.info("%s", format_coercion_report(coordinate, errors))
                raise ArgumentsError(errors)

            state = InvocationState.RESOLVING
            span.set_attribute("schemaguard.state", state.value)
            try:
                result = resolve(parent, info, **coerced)
                if inspect.isawaitable(result):
                    result = await result
            except Exception:
                state = InvocationState.FAILED
                span.set_attribute("schemaguard.state", state.value)
                record_field_metrics(coordinate, state.value, coercion_ms)
                raise

            state = InvocationState.RESOLVED
            span.set_attribute("schemaguard.state", state.value)
            record_field_metrics(coordinate, state.value, coercion_ms)
            return result

    gated_resolver.__qualname__ = f"gated_resolver[{coordinate}]"
    gated_resolver.__wrapped__ = resolve  # type: ignore[attr-defined]
    return gated_resolver


def install_argument_gate(
    schema: GraphQLSchema,
    plan: Optional[CoercionPlan] = None,
    *,
    settings: Optional[Settings] = None,
) -> GraphQLSchema:
    """Wrap every object field resolver of *schema* with the argument gate.

    Must run after constraints were applied, so that *plan* holds the
    constraint-augmented coercion chains. Gating the same schema twice
    raises ``ConfigurationError``.
    """
    if schema in _GATED_SCHEMAS:
        logger.error("Argument gate already installed on schema %r", schema)
        raise ConfigurationError("The argument gate has already been installed on this schema")

    settings = settings or Settings.from_env()
    coercer = ArgumentCoercer(plan or CoercionPlan(), concurrent=settings.concurrent_coercion)

    gated = 0
    for element in iter_schema_elements(schema):
        if not isinstance(element, OutputFieldElement):
            continue
        element.field.resolve = gate_resolver(
            element.type_name, element.field_name, element.field, coercer
        )
        gated += 1

    _GATED_SCHEMAS.add(schema)
    logger.debug("Installed argument gate on %d field(s)", gated)
    return schema


__all__ = [
    "InvocationState",
    "format_coercion_report",
    "gate_resolver",
    "install_argument_gate",
]
