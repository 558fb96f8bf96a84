"""Render providers: where the template and the render function come from.

One provider is chosen at startup from configuration:

- ``BuiltRenderProvider`` (production and static export): reads the built
  template once and imports the render target once; both are reused for
  every page.
- ``LiveRenderProvider`` (development): re-reads the source template and
  re-imports the render module on every call so edits show up without a
  restart.

Both satisfy ``RenderProvider``, so ``render_page`` and the exporter do
not care which one they were handed.
"""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Protocol, runtime_checkable

import anyio

from storefront._internal.imports import resolve_import
from storefront.config import StorefrontConfig
from storefront.errors import RenderFailure
from storefront.rendering.document import RenderFunction, render_document

logger = logging.getLogger("storefront.render")


@runtime_checkable
class RenderProvider(Protocol):
    """Supplies the HTML template and the render function."""

    async def load_template(self) -> str: ...

    async def load_render(self) -> RenderFunction: ...


def resolve_render(import_string: str, *, reload: bool = False) -> RenderFunction:
    """Resolve a ``"module:attribute"`` string to a render function.

    When the attribute portion is omitted it defaults to ``"render"``
    (``"myshop.server"`` resolves to ``myshop.server.render``).

    Raises ``RenderFailure`` if the module cannot be imported, the
    attribute is missing, or the object is not callable.
    """
    try:
        obj = resolve_import(import_string, "render", reload=reload)
    except (ImportError, AttributeError) as exc:
        msg = f"Cannot load render target {import_string!r}: {exc}"
        raise RenderFailure(msg) from exc

    if not callable(obj):
        msg = f"{import_string!r} resolved to {type(obj).__name__}, not a callable"
        raise RenderFailure(msg)
    return obj


async def read_template(path: str | Path) -> str:
    try:
        return await anyio.Path(path).read_text(encoding="utf-8")
    except OSError as exc:
        msg = f"Cannot read template {str(path)!r}: {exc}"
        raise RenderFailure(msg) from exc


class BuiltRenderProvider:
    """Built template and render target, each loaded at most once."""

    __slots__ = ("_render", "_render_target", "_template", "_template_path")

    def __init__(
        self,
        template_path: str | Path,
        render_target: str | RenderFunction,
    ) -> None:
        self._template_path = Path(template_path)
        self._render_target = render_target
        self._template: str | None = None
        self._render: RenderFunction | None = None

    async def load_template(self) -> str:
        if self._template is None:
            self._template = await read_template(self._template_path)
        return self._template

    async def load_render(self) -> RenderFunction:
        if self._render is None:
            target = self._render_target
            self._render = resolve_render(target) if isinstance(target, str) else target
        return self._render


class LiveRenderProvider:
    """Source template and render module, reloaded on every call."""

    __slots__ = ("_render_target", "_template_path")

    def __init__(self, template_path: str | Path, render_target: str) -> None:
        self._template_path = Path(template_path)
        self._render_target = render_target

    async def load_template(self) -> str:
        return await read_template(self._template_path)

    async def load_render(self) -> RenderFunction:
        return resolve_render(self._render_target, reload=True)


def select_render_provider(config: StorefrontConfig) -> RenderProvider:
    """Pick the provider for ``config.mode``. Called once at startup."""
    if config.is_production:
        logger.debug("Using built render provider (%s)", config.built_template_path)
        return BuiltRenderProvider(config.built_template_path, config.render_target)
    logger.debug("Using live render provider (%s)", config.source_template_path)
    return LiveRenderProvider(config.source_template_path, config.render_target)


async def render_page(
    provider: RenderProvider,
    url: str,
    query: Mapping[str, str] | None = None,
) -> str:
    """Server-render one request: ``render(url, query) -> document``."""
    template = await provider.load_template()
    render = await provider.load_render()
    return await render_document(template, url, query or {}, render)
