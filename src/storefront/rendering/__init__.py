"""Rendering: render-function invocation, template injection, providers."""

from storefront.rendering.document import (
    BODY_PLACEHOLDER,
    HEAD_PLACEHOLDER,
    RenderResult,
    inject_rendered,
    render_document,
    strip_initial_data,
)
from storefront.rendering.providers import (
    BuiltRenderProvider,
    LiveRenderProvider,
    RenderProvider,
    render_page,
    select_render_provider,
)

__all__ = [
    "BODY_PLACEHOLDER",
    "HEAD_PLACEHOLDER",
    "BuiltRenderProvider",
    "LiveRenderProvider",
    "RenderProvider",
    "RenderResult",
    "inject_rendered",
    "render_document",
    "render_page",
    "select_render_provider",
    "strip_initial_data",
]
