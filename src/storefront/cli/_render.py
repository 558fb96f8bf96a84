"""``storefront render``: single-shot server render of one URL.

Brings up the temporary data endpoint for the duration of the render and
prints the final document to stdout. A failing render exits 1 with the
error on stderr.
"""

import argparse
import asyncio
import sys
from collections.abc import Mapping

from storefront.cli._options import configure_logging, load_config
from storefront.config import StorefrontConfig, render_environment
from storefront.data.api import DataAPI
from storefront.data.catalog import Catalog
from storefront.data.endpoint import TemporaryEndpoint
from storefront.http.query import parse_query, split_url
from storefront.rendering.providers import render_page, select_render_provider


async def render_url(config: StorefrontConfig, url: str, query: Mapping[str, str]) -> str:
    provider = select_render_provider(config)
    api = DataAPI(Catalog.load(config.catalog_path))
    async with TemporaryEndpoint(api, host=config.api_host, port=config.api_port) as endpoint:
        with render_environment(endpoint.base_url, config.base_url):
            return await render_page(provider, url, query)


def run_render_command(args: argparse.Namespace) -> None:
    overrides: dict[str, object] = {}
    if args.production:
        overrides["mode"] = "production"
    elif args.template is not None:
        overrides["source_template_path"] = args.template
    config = load_config(args, **overrides)
    configure_logging(config.log_level)

    path, query = split_url(args.url)
    query.update(parse_query(args.query))

    try:
        document = asyncio.run(render_url(config, path, query))
    except Exception as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc
    sys.stdout.write(document)
