"""Page enumeration for static export.

The page set is finite: the home page, the not-found page, and one
detail page per product from a single bounded listing query.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(frozen=True, slots=True)
class PageDescriptor:
    """One page to export: the URL to render and where to write it."""

    url: str
    file_path: Path
    query: dict[str, str] = field(default_factory=dict)


def product_url(product_id: str) -> str:
    if not product_id or "/" in product_id or product_id in (".", ".."):
        msg = f"Product id {product_id!r} cannot be used as a directory name"
        raise ValueError(msg)
    return f"/product/{product_id}/"


def url_to_file_path(url: str, dist_dir: Path) -> Path:
    """Map a page URL to its output file.

    Clean URL convention::

        /                  -> dist/index.html
        /404               -> dist/404.html
        /product/42/       -> dist/product/42/index.html
    """
    clean = url.strip("/")
    if not clean:
        return dist_dir / "index.html"
    if clean == "404":
        return dist_dir / "404.html"
    return dist_dir / clean / "index.html"


def enumerate_pages(dist_dir: str | Path, products: Iterable[Mapping[str, Any]]) -> list[PageDescriptor]:
    """Build the export page list: home, not-found, then one per product."""
    root = Path(dist_dir)
    urls = ["/", "/404"]
    urls.extend(product_url(str(product["productId"])) for product in products)
    return [PageDescriptor(url=url, file_path=url_to_file_path(url, root)) for url in urls]
