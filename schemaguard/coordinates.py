"""Schema coordinates: ``Type.field`` and ``Type.field(argument:)``."""

from __future__ import annotations

import re
from typing import NamedTuple, Optional

from .exceptions import ConfigurationError

_NAME = r"[_A-Za-z][_0-9A-Za-z]*"
_COORDINATE_RE = re.compile(
    rf"^(?P<type>{_NAME})\.(?P<field>{_NAME})(?:\((?P<argument>{_NAME}):\))?$"
)


class Coordinate(NamedTuple):
    type_name: str
    field_name: str
    argument_name: Optional[str] = None

    def __str__(self) -> str:
        if self.argument_name is None:
            return field_coordinate(self.type_name, self.field_name)
        return argument_coordinate(self.type_name, self.field_name, self.argument_name)


def field_coordinate(type_name: str, field_name: str) -> str:
    return f"{type_name}.{field_name}"


def argument_coordinate(type_name: str, field_name: str, argument_name: str) -> str:
    return f"{type_name}.{field_name}({argument_name}:)"


def parse_coordinate(text: str) -> Coordinate:
    match = _COORDINATE_RE.match(text.strip()) if isinstance(text, str) else None
    if match is None:
        raise ConfigurationError(
            f"Invalid schema coordinate {text!r}; expected 'Type.field' or 'Type.field(argument:)'"
        )
    return Coordinate(match["type"], match["field"], match["argument"])


__all__ = ["Coordinate", "argument_coordinate", "field_coordinate", "parse_coordinate"]
