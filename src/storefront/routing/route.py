"""PathSegment, CompiledRoute and ResolvedRoute frozen dataclasses."""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class PathSegment:
    """A parsed segment of a route pattern.

    Literal:  ``product``  (is_param=False)
    Param:    ``:id``      (is_param=True, param_name="id")
    """

    value: str
    is_param: bool = False
    param_name: str | None = None

    def accepts(self, part: str) -> bool:
        """Whether one path segment satisfies this pattern segment."""
        if self.is_param:
            return part != ""
        return part == self.value


@dataclass(frozen=True, slots=True)
class CompiledRoute:
    """A registered pattern compiled into an ordered segment matcher.

    Created by ``RouteTable.register``; replaced, never mutated, when the
    same pattern is registered again.
    """

    pattern: str
    segments: tuple[PathSegment, ...]
    param_names: tuple[str, ...]
    handler: Any

    def match(self, parts: list[str]) -> dict[str, str] | None:
        """Match split path parts. Returns bound params or ``None``."""
        if len(parts) != len(self.segments):
            return None
        values: list[str] = []
        for segment, part in zip(self.segments, parts, strict=True):
            if not segment.accepts(part):
                return None
            if segment.is_param:
                values.append(part)
        return dict(zip(self.param_names, values, strict=True))


@dataclass(frozen=True, slots=True)
class ResolvedRoute:
    """Result of a successful resolution. Created fresh on every attempt."""

    route: CompiledRoute
    path: str
    params: dict[str, str]

    @property
    def pattern(self) -> str:
        return self.route.pattern

    @property
    def handler(self) -> Any:
        return self.route.handler
