"""Tests for storefront.data.client: the httpx data client."""

import httpx
import pytest

from storefront.data.api import DataAPI
from storefront.data.catalog import Catalog
from storefront.data.client import ProductClient
from storefront.errors import DataSourceError


def _client(app=None) -> ProductClient:
    transport = httpx.ASGITransport(app=app or DataAPI(Catalog.load()))
    return ProductClient(
        "http://test",
        client=httpx.AsyncClient(transport=transport, base_url="http://test"),
    )


def _mock_client(handler) -> ProductClient:
    transport = httpx.MockTransport(handler)
    return ProductClient(
        "http://test",
        client=httpx.AsyncClient(transport=transport, base_url="http://test"),
    )


class TestQueries:
    @pytest.mark.asyncio
    async def test_get_products(self) -> None:
        async with _client() as client:
            listing = await client.get_products(limit=3, category1="Digital")

        assert {p["category1"] for p in listing["products"]} == {"Digital"}
        assert listing["pagination"]["limit"] == 3

    @pytest.mark.asyncio
    async def test_get_product(self) -> None:
        async with _client() as client:
            product = await client.get_product("87721905411")

        assert product is not None
        assert product["title"] == "Linen Throw Pillow Cover"

    @pytest.mark.asyncio
    async def test_missing_product_is_none(self) -> None:
        async with _client() as client:
            assert await client.get_product("0000") is None

    @pytest.mark.asyncio
    async def test_get_categories(self) -> None:
        async with _client() as client:
            categories = await client.get_categories()

        assert "Bathroom" in categories["Living"]

    @pytest.mark.asyncio
    async def test_empty_filters_not_sent(self) -> None:
        seen: list[httpx.URL] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.url)
            return httpx.Response(200, json={"products": [], "pagination": {}})

        async with _mock_client(handler) as client:
            await client.get_products(search="mug")

        assert dict(seen[0].params) == {
            "limit": "20",
            "page": "1",
            "sort": "price_asc",
            "search": "mug",
        }


class TestErrors:
    @pytest.mark.asyncio
    async def test_server_error(self) -> None:
        async with _mock_client(lambda request: httpx.Response(500)) as client:
            with pytest.raises(DataSourceError):
                await client.get_categories()

    @pytest.mark.asyncio
    async def test_invalid_json(self) -> None:
        async with _mock_client(lambda request: httpx.Response(200, text="oops")) as client:
            with pytest.raises(DataSourceError):
                await client.get_products()

    @pytest.mark.asyncio
    async def test_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _mock_client(handler) as client:
            with pytest.raises(DataSourceError, match="failed"):
                await client.get_product("1")


class TestOwnership:
    @pytest.mark.asyncio
    async def test_injected_client_left_open(self) -> None:
        http = httpx.AsyncClient(transport=httpx.MockTransport(lambda r: httpx.Response(200)))
        async with ProductClient("http://test", client=http):
            pass

        assert http.is_closed is False
        await http.aclose()

    @pytest.mark.asyncio
    async def test_owned_client_closed(self) -> None:
        client = ProductClient("http://127.0.0.1:1")
        await client.aclose()

        assert client._client.is_closed is True
