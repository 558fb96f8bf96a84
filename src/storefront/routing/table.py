"""Route table with ordered, segment-wise path matching.

Patterns are plain path templates: segments separated by ``/``, any
segment written as ``:name`` is a parameter, everything else is literal.
Matching is anchored at both ends and requires equal segment counts, so
``/product/:id/`` matches ``/product/42/`` but not ``/product/42``.

Resolution walks patterns in registration order and the first structural
match wins. This is a total order, not best-match: register specific
patterns before general ones.
"""

import re
from collections.abc import Iterator
from typing import Any

from storefront.errors import InvalidPatternError
from storefront.routing.route import CompiledRoute, PathSegment, ResolvedRoute

_PARAM_NAME = re.compile(r"^\w+$")


def normalize_base(base: str) -> str:
    """Strip trailing slashes; ``"/"`` and ``""`` both mean no prefix."""
    return base.rstrip("/")


def split_path(path: str) -> list[str]:
    """Split a path into segments, treating ``""`` as ``"/"``.

    Leading and trailing empty segments are kept so a trailing slash is
    significant::

        "/"              -> ["", ""]
        "/product/42"    -> ["", "product", "42"]
        "/product/42/"   -> ["", "product", "42", ""]
    """
    if not path:
        path = "/"
    elif not path.startswith("/"):
        path = "/" + path
    return path.split("/")


def parse_pattern(pattern: str) -> list[PathSegment]:
    """Parse a route pattern into segments.

    Examples::

        "/"               -> [PathSegment(""), PathSegment("")]
        "/product/:id/"   -> [..., PathSegment(":id", is_param=True, param_name="id"), ...]

    Raises ``InvalidPatternError`` for an empty or malformed parameter
    name, or a parameter name used twice.
    """
    segments: list[PathSegment] = []
    seen: set[str] = set()
    for part in split_path(pattern):
        if not part.startswith(":"):
            segments.append(PathSegment(value=part))
            continue
        name = part[1:]
        if not _PARAM_NAME.match(name):
            raise InvalidPatternError(pattern, f"bad parameter segment {part!r}")
        if name in seen:
            raise InvalidPatternError(
                pattern, f"parameter {name!r} is declared more than once", name=name
            )
        seen.add(name)
        segments.append(PathSegment(value=part, is_param=True, param_name=name))
    return segments


def compile_route(pattern: str, handler: Any) -> CompiledRoute:
    """Compile *pattern* into an immutable ``CompiledRoute``."""
    segments = parse_pattern(pattern)
    return CompiledRoute(
        pattern=pattern,
        segments=tuple(segments),
        param_names=tuple(s.param_name for s in segments if s.param_name is not None),
        handler=handler,
    )


class RouteTable:
    """Ordered table of compiled routes under an optional base prefix.

    Usage::

        table = RouteTable(base="/shop")
        table.register("/", home)
        table.register("/product/:id/", product_detail)
        resolved = table.resolve("/shop/product/42/")
        resolved.params  # {"id": "42"}

    Entries are keyed by the original pattern string. Registering the same
    pattern again replaces the handler and keeps the original position.
    """

    __slots__ = ("_base", "_routes")

    def __init__(self, base: str = "") -> None:
        self._base = normalize_base(base)
        self._routes: dict[str, CompiledRoute] = {}

    @property
    def base(self) -> str:
        return self._base

    @property
    def routes(self) -> list[CompiledRoute]:
        """All compiled routes in registration order."""
        return list(self._routes.values())

    def __len__(self) -> int:
        return len(self._routes)

    def __iter__(self) -> Iterator[CompiledRoute]:
        return iter(self.routes)

    def __contains__(self, pattern: object) -> bool:
        return pattern in self._routes

    def register(self, pattern: str, handler: Any) -> CompiledRoute:
        """Compile and store *pattern*, replacing any entry with the same string."""
        compiled = compile_route(pattern, handler)
        self._routes[pattern] = compiled
        return compiled

    def resolve(self, path: str) -> ResolvedRoute | None:
        """Resolve *path* to the first matching route, or ``None``.

        *path* must be a bare path (no query string or fragment). It is
        not normalized: a trailing slash has to match the pattern.
        """
        relative = self._strip_base(path)
        if relative is None:
            return None
        parts = split_path(relative)
        for compiled in self._routes.values():
            params = compiled.match(parts)
            if params is not None:
                return ResolvedRoute(route=compiled, path=path, params=params)
        return None

    def _strip_base(self, path: str) -> str | None:
        if not self._base:
            return path
        if not path.startswith(self._base):
            return None
        rest = path[len(self._base):]
        if rest and not rest.startswith("/"):
            return None
        return rest
