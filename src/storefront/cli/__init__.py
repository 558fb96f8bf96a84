"""Storefront CLI: static export, one-off server render, route listing.

Entry point registered as ``storefront`` in ``pyproject.toml``::

    [project.scripts]
    storefront = "storefront.cli:main"
"""

import argparse
import sys


def _add_config_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--base", default=None, help="Base path prefix (e.g. /shop)")
    parser.add_argument("--render", default=None, help="Render target import string (module:attr)")
    parser.add_argument("--template", default=None, help="HTML template path")
    parser.add_argument("--catalog", default=None, help="Product catalog JSON file")
    parser.add_argument("--api-port", type=int, default=None, help="Temporary data endpoint port")
    parser.add_argument("--log-level", default=None, help="Logging level (debug, info, ...)")


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for the ``storefront`` command."""
    parser = argparse.ArgumentParser(
        prog="storefront",
        description="Storefront: server rendering and static export for a single-page shop.",
    )
    subparsers = parser.add_subparsers(dest="command")

    # -- storefront export ------------------------------------------------
    export_parser = subparsers.add_parser("export", help="Pre-render the page set to HTML files")
    _add_config_options(export_parser)
    export_parser.add_argument("--dist", default=None, help="Output directory")
    export_parser.add_argument(
        "--limit",
        type=int,
        default=None,
        help="Number of products to pre-render (default 20)",
    )

    # -- storefront render ------------------------------------------------
    render_parser = subparsers.add_parser("render", help="Server-render one URL to stdout")
    render_parser.add_argument("url", help="URL to render (e.g. /product/42/)")
    render_parser.add_argument("--query", default="", help="Query string (e.g. search=mug)")
    render_parser.add_argument(
        "--production",
        action="store_true",
        help="Use the built template and render target",
    )
    _add_config_options(render_parser)

    # -- storefront routes ------------------------------------------------
    routes_parser = subparsers.add_parser("routes", help="List registered page routes")
    routes_parser.add_argument(
        "router",
        nargs="?",
        default="storefront.shop:build_router",
        help="Router factory import string (default storefront.shop:build_router)",
    )

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    if args.command == "export":
        from storefront.cli._export import run_export_command

        run_export_command(args)
    elif args.command == "render":
        from storefront.cli._render import run_render_command

        run_render_command(args)
    elif args.command == "routes":
        from storefront.cli._routes import run_routes

        run_routes(args)
