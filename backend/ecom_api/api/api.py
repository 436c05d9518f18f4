"""API 路由聚合（认证由外部身份服务负责）"""
from fastapi import APIRouter

from ecom_api.api.endpoints import assocs, catalog, products

api_router = APIRouter()

api_router.include_router(catalog.router, prefix="/catalog", tags=["目录"])
api_router.include_router(assocs.router, prefix="/assocs", tags=["目录商品关联"])
api_router.include_router(products.router, prefix="/products", tags=["商品"])
