"""Telemetry package - OpenTelemetry metrics and tracing."""

from .metrics import (
    arguments_rejected_total,
    constrained_elements,
    constraint_violation_total,
    field_coercion_latency_ms,
    field_invocation_total,
    record_field_metrics,
    record_violation,
)
from .runtime import get_tracer, meter

__all__ = [
    "arguments_rejected_total",
    "constrained_elements",
    "constraint_violation_total",
    "field_coercion_latency_ms",
    "field_invocation_total",
    "get_tracer",
    "meter",
    "record_field_metrics",
    "record_violation",
]
