"""Storefront: server rendering and static export for a single-page shop.

Routes a URL to a page handler, renders it through an opaque render
function, and injects the result into the HTML template, either per
request or ahead of time for a finite page set.

Basic usage::

    from storefront import RouteTable

    table = RouteTable()
    table.register("/product/:id/", product_page)
    table.resolve("/product/42/").params  # {"id": "42"}

Static export::

    from storefront import StaticExporter, StorefrontConfig

    result = await StaticExporter(StorefrontConfig(dist_dir="public")).export()
"""

__version__ = "0.1.0"
__all__ = [
    "ClientRouter",
    "ConfigurationError",
    "DataSourceError",
    "ExportError",
    "InvalidPatternError",
    "NavigationFault",
    "RenderFailure",
    "RenderResult",
    "RouteTable",
    "ServerRouter",
    "StaticExporter",
    "StorefrontConfig",
    "StorefrontError",
    "create_router",
    "parse_query",
    "render_document",
    "serialize_query",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import storefront`` fast; uvicorn and kida load on first use.
    """
    if name == "StorefrontConfig":
        from storefront.config import StorefrontConfig

        return StorefrontConfig

    if name in ("RouteTable", "ServerRouter", "ClientRouter", "create_router"):
        from storefront import routing as _routing

        return getattr(_routing, name)

    if name in ("parse_query", "serialize_query"):
        from storefront.http import query as _query

        return getattr(_query, name)

    if name in ("RenderResult", "render_document"):
        from storefront.rendering import document as _document

        return getattr(_document, name)

    if name == "StaticExporter":
        from storefront.export.static import StaticExporter

        return StaticExporter

    if name in (
        "ConfigurationError",
        "DataSourceError",
        "ExportError",
        "InvalidPatternError",
        "NavigationFault",
        "RenderFailure",
        "StorefrontError",
    ):
        from storefront import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
