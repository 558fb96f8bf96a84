"""JSON data API over a ``Catalog``, as a bare ASGI application.

Endpoints::

    GET /api/products              ?page ?limit ?search ?category1 ?category2 ?sort
    GET /api/products/:id
    GET /api/categories

Paths are dispatched through a ``RouteTable``, the same matcher the
storefront pages use.
"""

import json
import logging
from collections.abc import Awaitable, Callable, MutableMapping
from typing import Any, TypeAlias

from storefront.data.catalog import Catalog
from storefront.http.query import QueryMap, parse_query
from storefront.routing.table import RouteTable

logger = logging.getLogger("storefront.data")

# Raw ASGI types
Scope: TypeAlias = MutableMapping[str, Any]
Receive: TypeAlias = Callable[[], Awaitable[MutableMapping[str, Any]]]
Send: TypeAlias = Callable[[MutableMapping[str, Any]], Awaitable[None]]

Endpoint: TypeAlias = Callable[[dict[str, str], QueryMap], tuple[int, Any]]


def _int_param(query: QueryMap, name: str, default: int) -> int:
    value = query.get(name)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


async def send_json(send: Send, status: int, payload: Any) -> None:
    """Translate a JSON payload into ASGI ``send()`` calls."""
    body = json.dumps(payload, ensure_ascii=False).encode("utf-8")
    await send(
        {
            "type": "http.response.start",
            "status": status,
            "headers": [
                (b"content-type", b"application/json; charset=utf-8"),
                (b"content-length", str(len(body)).encode("latin-1")),
            ],
        }
    )
    await send({"type": "http.response.body", "body": body})


class DataAPI:
    """ASGI app answering catalog queries during export and server renders."""

    __slots__ = ("_catalog", "_table")

    def __init__(self, catalog: Catalog, prefix: str = "/api") -> None:
        self._catalog = catalog
        self._table = RouteTable(base=prefix)
        self._table.register("/products", self._list_products)
        self._table.register("/products/:id", self._get_product)
        self._table.register("/categories", self._categories)

    @property
    def catalog(self) -> Catalog:
        return self._catalog

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] == "lifespan":
            await self._lifespan(receive, send)
            return
        if scope["type"] != "http":
            return

        status, payload = self.handle(
            scope["method"],
            scope["path"],
            scope.get("query_string", b"").decode("latin-1"),
        )
        logger.debug("%s %s -> %d", scope["method"], scope["path"], status)
        await send_json(send, status, payload)

    def handle(self, method: str, path: str, query_string: str = "") -> tuple[int, Any]:
        """Dispatch one request. Returns ``(status, json_payload)``."""
        resolved = self._table.resolve(path.rstrip("/") or "/")
        if resolved is None:
            return 404, {"error": f"No endpoint for {path}"}
        if method not in ("GET", "HEAD"):
            return 405, {"error": f"Method {method} not allowed"}
        endpoint: Endpoint = resolved.handler
        return endpoint(resolved.params, parse_query(query_string))

    async def _lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            message = await receive()
            if message["type"] == "lifespan.startup":
                await send({"type": "lifespan.startup.complete"})
            elif message["type"] == "lifespan.shutdown":
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Endpoints ---------------------------------------------------------

    def _list_products(self, params: dict[str, str], query: QueryMap) -> tuple[int, Any]:
        return 200, self._catalog.list_products(
            page=_int_param(query, "page", 1),
            limit=_int_param(query, "limit", 20),
            search=query.get("search", ""),
            category1=query.get("category1", ""),
            category2=query.get("category2", ""),
            sort=query.get("sort", "price_asc"),
        )

    def _get_product(self, params: dict[str, str], query: QueryMap) -> tuple[int, Any]:
        product = self._catalog.get_product(params["id"])
        if product is None:
            return 404, {"error": "Product not found"}
        return 200, product

    def _categories(self, params: dict[str, str], query: QueryMap) -> tuple[int, Any]:
        return 200, self._catalog.categories()
