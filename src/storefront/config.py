"""Storefront configuration.

StorefrontConfig is a frozen dataclass: immutable after creation,
IDE-autocompletable, no string-key dict lookups.
"""

import os
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from storefront.errors import ConfigurationError

Mode = Literal["development", "production"]

DEFAULT_API_PORT = 9999
DEFAULT_PAGE_LIMIT = 20

_ENV_PREFIX = "STOREFRONT_"

# Read by the render target, which only receives (url, query)
API_URL_ENV = "STOREFRONT_API_URL"
BASE_ENV = "STOREFRONT_BASE"


@dataclass(frozen=True, slots=True)
class StorefrontConfig:
    """Storefront configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = StorefrontConfig(mode="production", dist_dir="public")
    """

    mode: Mode = "development"
    base_url: str = ""

    # Rendering
    render_target: str = "storefront.shop:render"
    source_template_path: str | Path = "index.html"
    template_path: str | Path | None = None  # None = <dist_dir>/index.html

    # Static export
    dist_dir: str | Path = "dist/storefront"
    page_limit: int = DEFAULT_PAGE_LIMIT
    progress_interval: int = 10

    # Temporary data endpoint
    api_host: str = "127.0.0.1"
    api_port: int = DEFAULT_API_PORT
    catalog_path: str | Path | None = None  # None = bundled sample catalog

    log_level: str = "info"

    @property
    def is_production(self) -> bool:
        return self.mode == "production"

    @property
    def api_base_url(self) -> str:
        return f"http://{self.api_host}:{self.api_port}"

    @property
    def built_template_path(self) -> Path:
        """Template the export and production render read from."""
        if self.template_path is not None:
            return Path(self.template_path)
        return Path(self.dist_dir) / "index.html"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "StorefrontConfig":
        """Build a config from ``STOREFRONT_*`` environment variables.

        Unset variables keep their defaults. ``STOREFRONT_MODE`` accepts
        ``development`` or ``production``.
        """
        env = os.environ if environ is None else environ

        def get(name: str) -> str | None:
            return env.get(_ENV_PREFIX + name)

        overrides: dict[str, object] = {}

        mode = get("MODE")
        if mode is not None:
            if mode not in ("development", "production"):
                msg = f"{_ENV_PREFIX}MODE must be 'development' or 'production', got {mode!r}"
                raise ConfigurationError(msg)
            overrides["mode"] = mode

        for key, field_name in (
            ("BASE", "base_url"),
            ("DIST", "dist_dir"),
            ("TEMPLATE", "template_path"),
            ("RENDER", "render_target"),
            ("CATALOG", "catalog_path"),
            ("API_HOST", "api_host"),
            ("LOG_LEVEL", "log_level"),
        ):
            value = get(key)
            if value is not None:
                overrides[field_name] = value

        for key, field_name in (
            ("API_PORT", "api_port"),
            ("PAGE_LIMIT", "page_limit"),
        ):
            value = get(key)
            if value is None:
                continue
            try:
                overrides[field_name] = int(value)
            except ValueError as exc:
                msg = f"{_ENV_PREFIX}{key} must be an integer, got {value!r}"
                raise ConfigurationError(msg) from exc

        return cls(**overrides)  # type: ignore[arg-type]


@contextmanager
def render_environment(api_url: str, base_url: str) -> Iterator[None]:
    """Point the render target at a data endpoint and base path.

    Sets ``STOREFRONT_API_URL`` and ``STOREFRONT_BASE`` for the duration
    of the block and restores the previous values on exit.
    """
    saved = {name: os.environ.get(name) for name in (API_URL_ENV, BASE_ENV)}
    os.environ[API_URL_ENV] = api_url
    os.environ[BASE_ENV] = base_url
    try:
        yield
    finally:
        for name, value in saved.items():
            if value is None:
                os.environ.pop(name, None)
            else:
                os.environ[name] = value
