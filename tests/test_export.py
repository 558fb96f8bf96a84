"""Tests for storefront.export.static: the static export pipeline."""

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pytest

from storefront.config import API_URL_ENV, BASE_ENV, StorefrontConfig
from storefront.errors import ExportError, RenderFailure
from storefront.export.static import StaticExporter, run_export, write_html
from storefront.rendering.document import RenderFunction

TEMPLATE = (
    "<html><head><!--app-head--></head>"
    '<body><div id="root"><!--app-html--></div></body></html>'
)


class FakeEndpoint:
    """Records lifecycle calls instead of serving anything."""

    base_url = "http://fake"

    def __init__(self, *, fail_start: bool = False) -> None:
        self.fail_start = fail_start
        self.started = 0
        self.close_count = 0

    async def start(self) -> None:
        self.started += 1
        if self.fail_start:
            raise OSError("address already in use")

    async def close(self) -> None:
        self.close_count += 1


class FakeProvider:
    def __init__(self, render: RenderFunction, template: str = TEMPLATE) -> None:
        self.render = render
        self.template = template
        self.template_loads = 0
        self.render_loads = 0

    async def load_template(self) -> str:
        self.template_loads += 1
        return self.template

    async def load_render(self) -> RenderFunction:
        self.render_loads += 1
        return self.render


class FailingProvider(FakeProvider):
    async def load_template(self) -> str:
        raise RenderFailure("template missing")


def _lister(ids: list[str]):
    calls: list[dict[str, Any]] = []

    async def list_products(**kwargs: Any) -> dict[str, Any]:
        calls.append(kwargs)
        return {"products": [{"productId": i} for i in ids]}

    list_products.calls = calls  # type: ignore[attr-defined]
    return list_products


def _echo_render(url: str, query: Mapping[str, str]) -> dict[str, Any]:
    return {"html": f"<p>{url}</p>", "head": "<title>t</title>", "data": {"url": url}}


def _config(tmp_path: Path, **overrides: Any) -> StorefrontConfig:
    return StorefrontConfig(mode="production", dist_dir=tmp_path / "dist", **overrides)


class TestExport:
    @pytest.mark.asyncio
    async def test_writes_home_404_and_products(self, tmp_path: Path) -> None:
        endpoint = FakeEndpoint()
        provider = FakeProvider(_echo_render)
        exporter = StaticExporter(
            _config(tmp_path),
            provider=provider,
            endpoint=endpoint,
            list_products=_lister(["1", "2", "3"]),
        )

        result = await exporter.export()

        dist = tmp_path / "dist"
        assert result.total_pages == 5
        assert result.output_dir == dist
        assert (dist / "index.html").exists()
        assert (dist / "404.html").exists()
        for product_id in ("1", "2", "3"):
            assert (dist / "product" / product_id / "index.html").exists()

        home = (dist / "index.html").read_text()
        assert '<div id="root"><p>/</p></div>' in home
        assert '<title>t</title> <script>window.__INITIAL_DATA__ = {"url":"/"};</script>' in home

        assert endpoint.started == 1
        assert endpoint.close_count == 1
        assert provider.template_loads == 1
        assert provider.render_loads == 1

    @pytest.mark.asyncio
    async def test_exported_file_records(self, tmp_path: Path) -> None:
        result = await StaticExporter(
            _config(tmp_path),
            provider=FakeProvider(_echo_render),
            endpoint=FakeEndpoint(),
            list_products=_lister(["7"]),
        ).export()

        by_url = {f.url: f for f in result.files}
        assert list(by_url) == ["/", "/404", "/product/7/"]
        detail = by_url["/product/7/"]
        assert detail.output_path == tmp_path / "dist" / "product" / "7" / "index.html"
        assert detail.size_bytes == detail.output_path.stat().st_size

    @pytest.mark.asyncio
    async def test_listing_bounded_by_page_limit(self, tmp_path: Path) -> None:
        lister = _lister([str(i) for i in range(30)])
        result = await StaticExporter(
            _config(tmp_path, page_limit=20),
            provider=FakeProvider(_echo_render),
            endpoint=FakeEndpoint(),
            list_products=lister,
        ).export()

        assert lister.calls == [{"limit": 20, "page": 1}]
        assert result.total_pages == 22

    @pytest.mark.asyncio
    async def test_pages_rendered_with_empty_query(self, tmp_path: Path) -> None:
        seen: list[dict[str, str]] = []

        def render(url: str, query: Mapping[str, str]) -> dict[str, str]:
            seen.append(dict(query))
            return {"html": ""}

        await StaticExporter(
            _config(tmp_path),
            provider=FakeProvider(render),
            endpoint=FakeEndpoint(),
            list_products=_lister([]),
        ).export()

        assert seen == [{}, {}]

    @pytest.mark.asyncio
    async def test_progress_logged(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="storefront.export"):
            await StaticExporter(
                _config(tmp_path, progress_interval=2),
                provider=FakeProvider(_echo_render),
                endpoint=FakeEndpoint(),
                list_products=_lister(["1", "2", "3"]),
            ).export()

        progress = [r.getMessage() for r in caplog.records if "Progress" in r.getMessage()]
        assert progress == [
            "Progress: 2/5 pages generated",
            "Progress: 4/5 pages generated",
            "Progress: 5/5 pages generated",
        ]
        assert "Found 5 pages to generate (1 home + 1 404 + 3 products)" in caplog.text


class TestExportFailures:
    @pytest.mark.asyncio
    async def test_render_failure_aborts_and_closes(self, tmp_path: Path) -> None:
        def render(url: str, query: Mapping[str, str]) -> dict[str, str]:
            if url == "/product/2/":
                raise RuntimeError("render exploded")
            return {"html": url}

        endpoint = FakeEndpoint()
        exporter = StaticExporter(
            _config(tmp_path),
            provider=FakeProvider(render),
            endpoint=endpoint,
            list_products=_lister(["1", "2", "3"]),
        )

        with pytest.raises(ExportError, match="/product/2/") as exc_info:
            await exporter.export()

        dist = tmp_path / "dist"
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert (dist / "product" / "1" / "index.html").exists()
        assert not (dist / "product" / "2" / "index.html").exists()
        assert not (dist / "product" / "3" / "index.html").exists()
        assert endpoint.close_count == 1

    @pytest.mark.asyncio
    async def test_endpoint_start_failure(self, tmp_path: Path) -> None:
        endpoint = FakeEndpoint(fail_start=True)
        exporter = StaticExporter(
            _config(tmp_path),
            provider=FakeProvider(_echo_render),
            endpoint=endpoint,
            list_products=_lister(["1"]),
        )

        with pytest.raises(ExportError, match="Cannot start data endpoint"):
            await exporter.export()

        assert endpoint.close_count == 1
        assert not (tmp_path / "dist").exists()

    @pytest.mark.asyncio
    async def test_load_failure(self, tmp_path: Path) -> None:
        endpoint = FakeEndpoint()
        exporter = StaticExporter(
            _config(tmp_path),
            provider=FailingProvider(_echo_render),
            endpoint=endpoint,
            list_products=_lister(["1"]),
        )

        with pytest.raises(ExportError, match="Load phase failed"):
            await exporter.export()

        assert endpoint.close_count == 1

    @pytest.mark.asyncio
    async def test_enumerate_failure(self, tmp_path: Path) -> None:
        async def list_products(**kwargs: Any) -> dict[str, Any]:
            raise ConnectionError("api down")

        endpoint = FakeEndpoint()
        exporter = StaticExporter(
            _config(tmp_path),
            provider=FakeProvider(_echo_render),
            endpoint=endpoint,
            list_products=list_products,
        )

        with pytest.raises(ExportError, match="Enumerate phase failed"):
            await exporter.export()

        assert endpoint.close_count == 1
        assert not (tmp_path / "dist").exists()

    @pytest.mark.asyncio
    async def test_unsafe_product_id(self, tmp_path: Path) -> None:
        exporter = StaticExporter(
            _config(tmp_path),
            provider=FakeProvider(_echo_render),
            endpoint=FakeEndpoint(),
            list_products=_lister([".."]),
        )

        with pytest.raises(ExportError, match="Enumerate phase failed"):
            await exporter.export()


class TestRunExport:
    @pytest.mark.asyncio
    async def test_success_is_zero(self, tmp_path: Path) -> None:
        code = await run_export(
            _config(tmp_path),
            provider=FakeProvider(_echo_render),
            endpoint=FakeEndpoint(),
            list_products=_lister(["1"]),
        )
        assert code == 0

    @pytest.mark.asyncio
    async def test_failure_is_one(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        def render(url: str, query: Mapping[str, str]) -> dict[str, str]:
            raise RuntimeError("boom")

        endpoint = FakeEndpoint()
        with caplog.at_level(logging.ERROR, logger="storefront.export"):
            code = await run_export(
                _config(tmp_path),
                provider=FakeProvider(render),
                endpoint=endpoint,
                list_products=_lister(["1"]),
            )

        assert code == 1
        assert endpoint.close_count == 1
        assert "Static export failed" in caplog.text


class TestDefaultCollaborators:
    @pytest.mark.asyncio
    async def test_real_endpoint_and_client(self, tmp_path: Path) -> None:
        catalog = tmp_path / "products.json"
        catalog.write_text(json.dumps([{"productId": "a1", "lprice": "1"}]))
        config = _config(tmp_path, api_port=0, catalog_path=catalog)

        result = await StaticExporter(config, provider=FakeProvider(_echo_render)).export()

        assert [f.url for f in result.files] == ["/", "/404", "/product/a1/"]

    @pytest.mark.asyncio
    async def test_bad_catalog(self, tmp_path: Path) -> None:
        config = _config(tmp_path, catalog_path=tmp_path / "missing.json")

        with pytest.raises(ExportError, match="Cannot create data endpoint"):
            await StaticExporter(config, provider=FakeProvider(_echo_render)).export()

    @pytest.mark.asyncio
    async def test_shop_renders_against_bound_endpoint(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv(API_URL_ENV, raising=False)
        monkeypatch.delenv(BASE_ENV, raising=False)
        template = tmp_path / "index.html"
        template.write_text(TEMPLATE)
        config = _config(tmp_path, template_path=template, api_port=0, base_url="/shop")

        result = await StaticExporter(config).export()

        assert result.total_pages == 8
        index = (tmp_path / "dist" / "index.html").read_text(encoding="utf-8")
        assert 'data-total="6"' in index
        assert 'href="/shop/product/' in index
        assert API_URL_ENV not in os.environ
        assert BASE_ENV not in os.environ


class TestWriteHtml:
    @pytest.mark.asyncio
    async def test_creates_parents(self, tmp_path: Path) -> None:
        target = tmp_path / "a" / "b" / "index.html"
        size = await write_html(target, "<p>é</p>")

        assert target.read_text(encoding="utf-8") == "<p>é</p>"
        assert size == len("<p>é</p>".encode())
