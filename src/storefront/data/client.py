"""Async client for the storefront data API.

Thin httpx wrapper. Transport errors and non-2xx responses surface as
``DataSourceError``; a missing product is ``None``, not an error.
"""

from typing import Any

import httpx

from storefront.data.catalog import Product
from storefront.errors import DataSourceError

DEFAULT_TIMEOUT = 10.0


class ProductClient:
    """Query ``/api/*`` on a data endpoint.

    Usage::

        async with ProductClient("http://127.0.0.1:9999") as client:
            listing = await client.get_products(limit=20, page=1)
    """

    __slots__ = ("_client", "_owns_client")

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(
            base_url=base_url, timeout=timeout, trust_env=False
        )

    async def __aenter__(self) -> "ProductClient":
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> httpx.Response:
        try:
            return await self._client.get(path, params=params)
        except httpx.HTTPError as exc:
            msg = f"Data request GET {path} failed: {exc}"
            raise DataSourceError(msg) from exc

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            response.raise_for_status()
            return response.json()
        except (httpx.HTTPStatusError, ValueError) as exc:
            msg = f"Data request {response.request.url} failed: {exc}"
            raise DataSourceError(msg) from exc

    async def get_products(
        self,
        *,
        limit: int = 20,
        page: int = 1,
        search: str = "",
        category1: str = "",
        category2: str = "",
        sort: str = "price_asc",
    ) -> dict[str, Any]:
        """List products. Returns ``{"products": [...], "pagination": {...}}``."""
        params: dict[str, Any] = {"limit": limit, "page": page, "sort": sort}
        if search:
            params["search"] = search
        if category1:
            params["category1"] = category1
        if category2:
            params["category2"] = category2
        return self._json(await self._get("/api/products", params))

    async def get_product(self, product_id: str) -> Product | None:
        response = await self._get(f"/api/products/{product_id}")
        if response.status_code == 404:
            return None
        return self._json(response)

    async def get_categories(self) -> dict[str, Any]:
        return self._json(await self._get("/api/categories"))
