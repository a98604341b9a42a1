# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Metric instrument definitions for schemaguard."""

from __future__ import annotations

import logging

from .runtime import meter

logger = logging.getLogger(__name__)

constraint_violation_total = meter.create_counter(
    name="schemaguard.constraint.violation.total",
    description="Counts constraint violations, partitioned by constraint and direction (input/output).",
    unit="1",
)

arguments_rejected_total = meter.create_counter(
    name="schemaguard.arguments.rejected.total",
    description="Counts field invocations rejected before the resolver ran.",
    unit="1",
)

field_invocation_total = meter.create_counter(
    name="schemaguard.field.invocation.total",
    description="Counts gated field invocations by terminal state.",
    unit="1",
)

field_coercion_latency_ms = meter.create_histogram(
    name="schemaguard.field.coercion.latency.ms",
    description="Time spent deep-coercing a field's arguments before resolution.",
    unit="ms",
)

constrained_elements = meter.create_up_down_counter(
    name="schemaguard.schema.constrained_elements",
    description="Number of schema elements carrying at least one constraint.",
    unit="1",
)


# ==============================================================================
# Field Invocation Metrics Recording
# ==============================================================================


def record_field_metrics(coordinate: str, status: str, coercion_ms: float) -> None:
    """Record coercion latency and the terminal state of a gated field invocation.

    Args:
        coordinate: Schema coordinate of the field (``Mutation.createBook``)
        status: Terminal state name (``rejected``, ``resolved``, ``failed``)
        coercion_ms: Time spent coercing arguments before the resolver was called
    """
    try:
        field_coercion_latency_ms.record(coercion_ms, {"field": coordinate, "status": status})
        field_invocation_total.add(1, {"field": coordinate, "status": status})
    except Exception:
        # Telemetry must never interfere with resolution
        logger.debug("Failed to record metrics for %s", coordinate, exc_info=True)


def record_violation(constraint: str, direction: str) -> None:
    try:
        constraint_violation_total.add(1, {"constraint": constraint, "direction": direction})
    except Exception:
        logger.debug("Failed to record violation metric for @%s", constraint, exc_info=True)


__all__ = [
    "arguments_rejected_total",
    "constrained_elements",
    "constraint_violation_total",
    "field_coercion_latency_ms",
    "field_invocation_total",
    "record_field_metrics",
    "record_violation",
]
