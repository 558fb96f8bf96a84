"""Reference storefront render function.

``render(url, query)`` is the default render target for server renders
and static export. Each call builds a fresh single-shot ``ServerRouter``,
resolves the URL, fetches what the page needs from the data API, and
returns ``{"html", "head", "data"}``.

Environment:
    STOREFRONT_BASE: base path prefix (default: none)
    STOREFRONT_API_URL: data API origin (default: the export endpoint)
"""

import os
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from html import escape
from typing import Any

from storefront.config import API_URL_ENV, BASE_ENV, DEFAULT_API_PORT, DEFAULT_PAGE_LIMIT
from storefront.data.client import ProductClient
from storefront.routing.navigation import Navigator, ServerRouter
from storefront.shop.templates import create_environment

SHOP_NAME = "Storefront"

Page = Callable[[ProductClient, Navigator], Awaitable[dict[str, Any]]]

_env = create_environment()


@dataclass(frozen=True, slots=True)
class ProductCard:
    """Template view of one product."""

    product_id: str
    title: str
    price: str
    image: str
    mall: str
    url: str

    @classmethod
    def from_product(cls, product: Mapping[str, Any], base: str) -> "ProductCard":
        product_id = str(product["productId"])
        return cls(
            product_id=product_id,
            title=str(product.get("title", "")),
            price=format_price(product.get("lprice")),
            image=str(product.get("image", "")),
            mall=str(product.get("mallName", "")),
            url=f"{base}/product/{product_id}/",
        )


def format_price(value: Any) -> str:
    try:
        return f"{int(float(value)):,}"
    except (TypeError, ValueError):
        return ""


def api_base_url() -> str:
    return os.environ.get(API_URL_ENV, f"http://127.0.0.1:{DEFAULT_API_PORT}")


def make_client() -> ProductClient:
    return ProductClient(api_base_url())


def _render_template(name: str, router: Navigator, **context: Any) -> str:
    context.update(base=router.base_url, shop_name=SHOP_NAME)
    return _env.get_template(name).render(context)


def _title(text: str) -> str:
    return f"<title>{escape(text)}</title>"


def _int(value: str | None, default: int) -> int:
    try:
        return int(value) if value is not None else default
    except ValueError:
        return default


async def home_page(client: ProductClient, router: Navigator) -> dict[str, Any]:
    query = router.query
    listing = await client.get_products(
        limit=_int(query.get("limit"), DEFAULT_PAGE_LIMIT),
        page=_int(query.get("current"), 1),
        search=query.get("search", ""),
        category1=query.get("category1", ""),
        category2=query.get("category2", ""),
        sort=query.get("sort", "price_asc"),
    )
    categories = await client.get_categories()
    products = listing.get("products", [])
    total = listing.get("pagination", {}).get("total", len(products))
    cards = [ProductCard.from_product(p, router.base_url) for p in products]
    return {
        "html": _render_template("home.html", router, products=cards, total=total),
        "head": _title(f"{SHOP_NAME} - Home"),
        "data": {"products": products, "categories": categories, "totalCount": total},
    }


async def product_page(client: ProductClient, router: Navigator) -> dict[str, Any]:
    product = await client.get_product(router.params["id"])
    if product is None:
        return await not_found_page(client, router)

    related: list[Mapping[str, Any]] = []
    if product.get("category2"):
        listing = await client.get_products(
            category1=product.get("category1", ""),
            category2=product["category2"],
            limit=DEFAULT_PAGE_LIMIT,
        )
        related = [
            p for p in listing.get("products", [])
            if p["productId"] != product["productId"]
        ]

    base = router.base_url
    return {
        "html": _render_template(
            "product.html",
            router,
            product=ProductCard.from_product(product, base),
            related=[ProductCard.from_product(p, base) for p in related],
        ),
        "head": _title(f"{product.get('title', '')} - {SHOP_NAME}"),
        "data": {"product": product, "relatedProducts": related},
    }


async def not_found_page(client: ProductClient, router: Navigator) -> dict[str, Any]:
    return {
        "html": _render_template("not_found.html", router),
        "head": _title(f"{SHOP_NAME} - Page not found"),
    }


def build_router(base_url: str = "") -> ServerRouter:
    router = ServerRouter(base_url)
    router.add_route("/", home_page)
    router.add_route("/product/:id/", product_page)
    router.add_route("/product/:id", product_page)
    return router


async def render(url: str, query: Mapping[str, str]) -> dict[str, Any]:
    """Render one storefront URL."""
    router = build_router(os.environ.get(BASE_ENV, ""))
    router.query = query
    router.push(url)
    page: Page = router.target or not_found_page
    async with make_client() as client:
        return await page(client, router)
