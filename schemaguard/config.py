"""Environment-driven settings."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

CONCURRENT_COERCION_ENV = "SCHEMAGUARD_CONCURRENT_COERCION"
CONSTRAINTS_FILE_ENV = "SCHEMAGUARD_CONSTRAINTS_FILE"

_FALSEY = ("", "0", "false", "no", "off")


@dataclass(frozen=True)
class Settings:
    """Runtime knobs for schema construction and argument coercion."""

    # Coerce sibling input fields and list items in concurrent anyio tasks.
    concurrent_coercion: bool = True
    # Optional YAML file with extra constraint bindings.
    constraints_file: Optional[Path] = None

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Settings":
        env = os.environ if environ is None else environ
        concurrent = env.get(CONCURRENT_COERCION_ENV, "1").strip().lower() not in _FALSEY
        constraints_file = env.get(CONSTRAINTS_FILE_ENV) or None
        return cls(
            concurrent_coercion=concurrent,
            constraints_file=Path(constraints_file) if constraints_file else None,
        )


__all__ = ["CONCURRENT_COERCION_ENV", "CONSTRAINTS_FILE_ENV", "Settings"]
