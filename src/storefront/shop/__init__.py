"""Reference storefront: home, product detail and not-found pages.

``storefront.shop:render`` is the default render target.
"""

from storefront.shop.app import build_router, render

__all__ = ["build_router", "render"]
