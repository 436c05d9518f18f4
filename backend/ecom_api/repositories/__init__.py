from ecom_api.repositories.catalog import CatalogRepository
from ecom_api.repositories.assocs import AssocRepository
from ecom_api.repositories.products import ProductRepository

__all__ = [
    "CatalogRepository",
    "AssocRepository",
    "ProductRepository",
]
