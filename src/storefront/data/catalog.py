"""Product catalog served by the temporary data endpoint.

A read-only, in-memory list of product records loaded from JSON. Each
record is a plain dict with at least a ``productId``; listing supports
the search, category, sort and pagination parameters the storefront
sends.
"""

import json
import math
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Any

from storefront.errors import DataSourceError

Product = dict[str, Any]

SORTS = ("price_asc", "price_desc", "name_asc", "name_desc")


def _price(product: Mapping[str, Any]) -> float:
    try:
        return float(product.get("lprice", 0) or 0)
    except (TypeError, ValueError):
        return 0.0


@dataclass(frozen=True, slots=True)
class Catalog:
    """Immutable product catalog."""

    products: tuple[Product, ...] = ()

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "Catalog":
        products: list[Product] = []
        for record in records:
            if "productId" not in record:
                msg = f"Catalog record without 'productId': {dict(record)!r}"
                raise DataSourceError(msg)
            products.append({**record, "productId": str(record["productId"])})
        return cls(products=tuple(products))

    @classmethod
    def load(cls, path: str | Path | None = None) -> "Catalog":
        """Load a catalog from a JSON array file, or the bundled sample."""
        try:
            if path is None:
                raw = resources.files("storefront.shop").joinpath("products.json").read_text("utf-8")
            else:
                raw = Path(path).read_text(encoding="utf-8")
            records = json.loads(raw)
        except (OSError, ValueError) as exc:
            msg = f"Cannot load catalog {str(path or 'products.json')!r}: {exc}"
            raise DataSourceError(msg) from exc
        if not isinstance(records, list):
            msg = "Catalog file must contain a JSON array of products"
            raise DataSourceError(msg)
        return cls.from_records(records)

    def __len__(self) -> int:
        return len(self.products)

    def get_product(self, product_id: str) -> Product | None:
        for product in self.products:
            if product["productId"] == product_id:
                return product
        return None

    def categories(self) -> dict[str, dict[str, dict]]:
        """Two-level category tree: ``{category1: {category2: {}}}``."""
        tree: dict[str, dict[str, dict]] = {}
        for product in self.products:
            top = product.get("category1")
            if not top:
                continue
            children = tree.setdefault(top, {})
            sub = product.get("category2")
            if sub:
                children.setdefault(sub, {})
        return tree

    def list_products(
        self,
        *,
        page: int = 1,
        limit: int = 20,
        search: str = "",
        category1: str = "",
        category2: str = "",
        sort: str = "price_asc",
    ) -> dict[str, Any]:
        """Filter, sort and paginate. Returns ``{products, pagination}``."""
        page = max(page, 1)
        limit = max(limit, 1)

        items = list(self.products)
        if search:
            needle = search.lower()
            items = [
                p for p in items
                if needle in str(p.get("title", "")).lower()
                or needle in str(p.get("brand", "")).lower()
            ]
        if category1:
            items = [p for p in items if p.get("category1") == category1]
        if category2:
            items = [p for p in items if p.get("category2") == category2]

        if sort == "price_desc":
            items.sort(key=_price, reverse=True)
        elif sort == "name_asc":
            items.sort(key=lambda p: str(p.get("title", "")))
        elif sort == "name_desc":
            items.sort(key=lambda p: str(p.get("title", "")), reverse=True)
        else:
            items.sort(key=_price)

        total = len(items)
        total_pages = math.ceil(total / limit) if total else 0
        start = (page - 1) * limit
        return {
            "products": items[start:start + limit],
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "totalPages": total_pages,
                "hasNext": page < total_pages,
                "hasPrev": page > 1,
            },
        }
