"""Static export: pre-render the storefront's page set to HTML files.

Pipeline order, strictly sequential:

    1. Bring up the temporary data endpoint and point the render
       target at it (``STOREFRONT_API_URL``, ``STOREFRONT_BASE``)
    2. Load the template and the render function (once)
    3. Enumerate pages (home, 404, one per listed product)
    4. Render and write every page, one at a time
    5. Close the endpoint, always, even when a step above failed

Any failure in steps 1-4 aborts the whole run with ``ExportError``.
Files written before the failure stay on disk.
"""

import logging
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol

import anyio

from storefront.config import StorefrontConfig, render_environment
from storefront.data.api import DataAPI
from storefront.data.catalog import Catalog
from storefront.data.client import ProductClient
from storefront.data.endpoint import TemporaryEndpoint
from storefront.errors import ExportError
from storefront.export.pages import PageDescriptor, enumerate_pages
from storefront.rendering.document import RenderFunction, render_document
from storefront.rendering.providers import BuiltRenderProvider, RenderProvider

logger = logging.getLogger("storefront.export")

ListProducts = Callable[..., Awaitable[dict[str, Any]]]


class Endpoint(Protocol):
    """What the exporter needs from the temporary data endpoint."""

    @property
    def base_url(self) -> str: ...

    async def start(self) -> None: ...

    async def close(self) -> None: ...


@dataclass(frozen=True, slots=True)
class ExportedFile:
    """Record of a single page written during export.

    Attributes:
        url: Page URL that was rendered (e.g. ``"/product/42/"``).
        output_path: Filesystem path of the written file.
        size_bytes: Size of the written file in bytes.
        duration_ms: Time taken to render and write this page.
    """

    url: str
    output_path: Path
    size_bytes: int
    duration_ms: float


@dataclass(frozen=True, slots=True)
class ExportResult:
    """Aggregate result of a successful export run."""

    files: tuple[ExportedFile, ...]
    duration_ms: float
    output_dir: Path

    @property
    def total_pages(self) -> int:
        return len(self.files)


class StaticExporter:
    """Runs one static export.

    Collaborators default to the real ones built from *config*; tests
    inject fakes.

    Args:
        config: Frozen storefront configuration.
        provider: Template and render function source. Defaults to a
            ``BuiltRenderProvider`` over the built template.
        endpoint: Temporary data endpoint. Defaults to a uvicorn-served
            ``DataAPI`` on ``config.api_host:config.api_port``.
        list_products: Async ``(limit=, page=) -> {"products": [...]}``
            listing used for enumeration. Defaults to a ``ProductClient``
            against the endpoint.
    """

    def __init__(
        self,
        config: StorefrontConfig,
        *,
        provider: RenderProvider | None = None,
        endpoint: Endpoint | None = None,
        list_products: ListProducts | None = None,
    ) -> None:
        self._config = config
        self._provider = provider or BuiltRenderProvider(
            config.built_template_path, config.render_target
        )
        self._endpoint = endpoint
        self._list_products = list_products

    @property
    def output_dir(self) -> Path:
        return Path(self._config.dist_dir)

    async def export(self) -> ExportResult:
        """Run the full pipeline and return the result.

        Raises:
            ExportError: If bring-up, load, enumerate, or any render fails.
        """
        start = time.perf_counter()
        endpoint = self._create_endpoint()
        try:
            await self._bring_up(endpoint)
            with render_environment(endpoint.base_url, self._config.base_url):
                template, render = await self._load()
                pages = await self._enumerate(endpoint)
                files = await self._render_all(pages, template, render)
        finally:
            await self._teardown(endpoint)

        elapsed = (time.perf_counter() - start) * 1000
        logger.info("Export completed: %d pages in %.0f ms", len(files), elapsed)
        return ExportResult(files=tuple(files), duration_ms=elapsed, output_dir=self.output_dir)

    # ------------------------------------------------------------------
    # Pipeline steps
    # ------------------------------------------------------------------

    async def _bring_up(self, endpoint: Endpoint) -> None:
        try:
            await endpoint.start()
        except Exception as exc:
            msg = f"Cannot start data endpoint: {exc}"
            raise ExportError(msg) from exc

    async def _load(self) -> tuple[str, RenderFunction]:
        logger.info("Loading template and render function")
        try:
            template = await self._provider.load_template()
            render = await self._provider.load_render()
        except Exception as exc:
            msg = f"Load phase failed: {exc}"
            raise ExportError(msg) from exc
        return template, render

    async def _enumerate(self, endpoint: Endpoint) -> list[PageDescriptor]:
        logger.info("Enumerating pages")
        limit = self._config.page_limit
        try:
            if self._list_products is not None:
                listing = await self._list_products(limit=limit, page=1)
            else:
                async with ProductClient(endpoint.base_url) as client:
                    listing = await client.get_products(limit=limit, page=1)
            # Bounded even when the listing ignores the limit
            products = list(listing.get("products", []))[:limit]
            pages = enumerate_pages(self.output_dir, products)
        except Exception as exc:
            msg = f"Enumerate phase failed: {exc}"
            raise ExportError(msg) from exc

        logger.info(
            "Found %d pages to generate (1 home + 1 404 + %d products)",
            len(pages),
            len(pages) - 2,
        )
        return pages

    async def _render_all(
        self,
        pages: list[PageDescriptor],
        template: str,
        render: RenderFunction,
    ) -> list[ExportedFile]:
        files: list[ExportedFile] = []
        total = len(pages)
        interval = max(self._config.progress_interval, 1)
        for index, page in enumerate(pages, start=1):
            files.append(await self._render_one(page, template, render))
            if index % interval == 0 or index == total:
                logger.info("Progress: %d/%d pages generated", index, total)
        return files

    async def _render_one(
        self,
        page: PageDescriptor,
        template: str,
        render: RenderFunction,
    ) -> ExportedFile:
        t0 = time.perf_counter()
        try:
            document = await render_document(template, page.url, page.query, render)
            size = await write_html(page.file_path, document)
        except Exception as exc:
            msg = f"Failed to render page {page.url!r}: {exc}"
            raise ExportError(msg) from exc
        logger.info("Generated: %s", page.file_path)
        return ExportedFile(
            url=page.url,
            output_path=page.file_path,
            size_bytes=size,
            duration_ms=(time.perf_counter() - t0) * 1000,
        )

    async def _teardown(self, endpoint: Endpoint) -> None:
        try:
            await endpoint.close()
        except Exception:
            logger.exception("Failed to close data endpoint")

    def _create_endpoint(self) -> Endpoint:
        if self._endpoint is not None:
            return self._endpoint
        config = self._config
        try:
            api = DataAPI(Catalog.load(config.catalog_path))
        except Exception as exc:
            msg = f"Cannot create data endpoint: {exc}"
            raise ExportError(msg) from exc
        return TemporaryEndpoint(api, host=config.api_host, port=config.api_port)


async def write_html(file_path: Path, html: str) -> int:
    """Write *html*, creating parent directories. Returns bytes written."""
    path = anyio.Path(file_path)
    await path.parent.mkdir(parents=True, exist_ok=True)
    data = html.encode("utf-8")
    await path.write_bytes(data)
    return len(data)


async def run_export(config: StorefrontConfig, **collaborators: Any) -> int:
    """Run an export and map the outcome to a process exit status."""
    try:
        await StaticExporter(config, **collaborators).export()
    except ExportError as exc:
        logger.exception("Static export failed: %s", exc)
        return 1
    return 0
