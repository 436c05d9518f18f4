"""目录API"""

from typing import Any

from fastapi import APIRouter, Depends, Query, Response

from ecom_api.core.deps import get_catalog_service
from ecom_api.schemas.catalog import CategoryNodeIn, CategoryNodeOut, CategoryRecordResponse
from ecom_api.services.catalog import CatalogService
from ecom_api.services.nestedset import Node

router = APIRouter()


@router.put("", response_model=CategoryNodeOut, response_model_exclude_none=True)
async def publish_catalog(
    *,
    service: CatalogService = Depends(get_catalog_service),
    catalog_in: CategoryNodeIn) -> Any:
    """整体发布目录（替换原有目录）"""
    root = await service.publish_catalog(Node.from_dict(catalog_in.model_dump()))
    return root.to_dict()


@router.get("", response_model=CategoryNodeOut, response_model_exclude_none=True)
async def get_catalog(
    *,
    service: CatalogService = Depends(get_catalog_service),
    products: bool = Query(False, description="是否附带每个分类下的商品SKU")) -> Any:
    """获取目录树"""
    root = await service.get_catalog()
    cmap = await service.get_catalog_products() if products else None
    return root.to_dict(products=cmap)


@router.delete("", status_code=204)
async def purge_catalog(
    *,
    service: CatalogService = Depends(get_catalog_service)) -> Response:
    """清空目录（需先清空商品关联）"""
    await service.purge_catalog()
    return Response(status_code=204)


@router.get("/nodes/{path:path}", response_model=CategoryRecordResponse)
async def get_category(
    *,
    service: CatalogService = Depends(get_catalog_service),
    path: str) -> Any:
    """按路径获取单个分类的嵌套集记录"""
    record = await service.get_category(path)
    return CategoryRecordResponse.model_validate(record)
