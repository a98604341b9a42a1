"""Structural paths into nested argument and result values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple, Union

from graphql.pyutils import Path as ResponsePath

PathSegment = Union[str, int]

SEPARATOR = "."


@dataclass(frozen=True)
class Path:
    """An immutable chain of field names, argument names and list indices."""

    segments: Tuple[PathSegment, ...] = ()

    @classmethod
    def of(cls, *segments: PathSegment) -> "Path":
        return cls(tuple(segments))

    @classmethod
    def from_graphql(cls, path: Optional[ResponsePath]) -> "Path":
        """Convert the engine's linked response path (``info.path``)."""

        if path is None:
            return cls()
        return cls(tuple(path.as_list()))

    def add(self, key: PathSegment) -> "Path":
        return Path(self.segments + (key,))

    def as_list(self) -> List[PathSegment]:
        return list(self.segments)

    def render(self, separator: str = SEPARATOR) -> str:
        return separator.join(str(segment) for segment in self.segments)

    def __str__(self) -> str:
        return self.render()

    def __iter__(self) -> Iterator[PathSegment]:
        return iter(self.segments)

    def __len__(self) -> int:
        return len(self.segments)


__all__ = ["Path", "PathSegment", "SEPARATOR"]
