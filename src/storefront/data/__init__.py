"""Data layer: catalog, JSON API, temporary endpoint, and client."""

from storefront.data.api import DataAPI
from storefront.data.catalog import Catalog, Product
from storefront.data.client import ProductClient
from storefront.data.endpoint import TemporaryEndpoint

__all__ = ["Catalog", "DataAPI", "Product", "ProductClient", "TemporaryEndpoint"]
