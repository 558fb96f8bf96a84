"""Routing: ordered route table and navigation controllers.

Patterns are registered during setup and compiled into immutable
segment matchers; navigators track the current resolution on top.
"""

from storefront.routing.navigation import (
    ClientRouter,
    HostEnvironment,
    MemoryHistory,
    NavigationState,
    Navigator,
    ServerRouter,
    create_router,
)
from storefront.routing.route import CompiledRoute, PathSegment, ResolvedRoute
from storefront.routing.table import RouteTable

__all__ = [
    "ClientRouter",
    "CompiledRoute",
    "HostEnvironment",
    "MemoryHistory",
    "NavigationState",
    "Navigator",
    "PathSegment",
    "ResolvedRoute",
    "RouteTable",
    "ServerRouter",
    "create_router",
]
