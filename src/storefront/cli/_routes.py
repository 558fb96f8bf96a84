"""``storefront routes``: list registered page routes.

Resolves a router factory import string, builds the router, and prints
its patterns in resolution order with their handlers.
"""

import argparse
import sys

from storefront._internal.imports import resolve_import
from storefront.routing.navigation import Navigator


def run_routes(args: argparse.Namespace) -> None:
    try:
        factory = resolve_import(args.router, "build_router")
        router = factory() if callable(factory) else factory
    except (ModuleNotFoundError, AttributeError, TypeError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    if not isinstance(router, Navigator):
        print(f"Error: {args.router!r} did not produce a router", file=sys.stderr)
        raise SystemExit(1)

    routes = router.table.routes
    if not routes:
        print("No routes registered.")
        return

    rows = [
        (route.pattern or "/", getattr(route.handler, "__name__", str(route.handler)))
        for route in routes
    ]
    width = max(max(len(pattern) for pattern, _ in rows), 7)  # "PATTERN" header

    fmt = f"{{:<{width}}}  {{}}"
    print(fmt.format("PATTERN", "HANDLER"))
    print("-" * min(width + 2 + max(len(h) for _, h in rows), 80))
    for pattern, handler_name in rows:
        print(fmt.format(pattern, handler_name))
