"""``storefront export``: pre-render the page set to disk.

Exits 0 when every page was written, 1 on any fatal error. The data
endpoint is closed before the process exits either way.
"""

import argparse
import asyncio

from storefront.cli._options import configure_logging, load_config
from storefront.export.static import run_export


def run_export_command(args: argparse.Namespace) -> None:
    config = load_config(args)
    configure_logging(config.log_level)

    code = asyncio.run(run_export(config))
    if code:
        raise SystemExit(code)
