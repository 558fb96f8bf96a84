"""Shared CLI plumbing: config from environment plus flags, logging setup."""

import argparse
import dataclasses
import logging
import sys

from storefront.config import StorefrontConfig
from storefront.errors import ConfigurationError

_FLAG_FIELDS = {
    "base": "base_url",
    "render": "render_target",
    "template": "template_path",
    "catalog": "catalog_path",
    "api_port": "api_port",
    "log_level": "log_level",
    "dist": "dist_dir",
    "limit": "page_limit",
}


def load_config(args: argparse.Namespace, **overrides: object) -> StorefrontConfig:
    """``StorefrontConfig.from_env()`` with command-line flags applied on top.

    Exits with status 1 on invalid configuration.
    """
    try:
        config = StorefrontConfig.from_env()
    except ConfigurationError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc

    for flag, field_name in _FLAG_FIELDS.items():
        value = getattr(args, flag, None)
        if value is not None:
            overrides[field_name] = value
    return dataclasses.replace(config, **overrides)  # type: ignore[arg-type]


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

