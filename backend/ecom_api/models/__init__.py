# models包初始化文件

from ecom_api.models.catalog import CatalogNode
from ecom_api.models.product import Product
from ecom_api.models.catalog_product import CatalogProduct

__all__ = [
    "CatalogNode",
    "Product",
    "CatalogProduct",
]
