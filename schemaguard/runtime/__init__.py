"""Runtime pieces: coercion/resolution chains, deep coercion and the resolver gate."""

from .chains import (
    CheckStage,
    CoercerStage,
    Coercer,
    CoercionChain,
    CoercionContext,
    ResolutionChain,
)
from .coercion import ArgumentCoercer, CoercionPlan
from .gate import InvocationState, format_coercion_report, gate_resolver, install_argument_gate

__all__ = [
    "ArgumentCoercer",
    "CheckStage",
    "CoercerStage",
    "Coercer",
    "CoercionChain",
    "CoercionContext",
    "CoercionPlan",
    "InvocationState",
    "ResolutionChain",
    "format_coercion_report",
    "gate_resolver",
    "install_argument_gate",
]
