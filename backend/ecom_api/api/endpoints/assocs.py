"""目录商品关联API"""

from typing import Any, Dict, List

from fastapi import APIRouter, Body, Depends, Query, Response

from ecom_api.core.deps import get_catalog_service
from ecom_api.repositories.assocs import AssocEntry
from ecom_api.schemas.assoc import AssocBatchItem, AssocCreate, AssocResponse
from ecom_api.services.catalog import CatalogService

router = APIRouter()


@router.get("", response_model=List[AssocResponse])
async def get_assocs(
    *,
    service: CatalogService = Depends(get_catalog_service)) -> Any:
    """获取全部关联，按 (path, pri) 排序"""
    return await service.get_associations()


@router.put("", response_model=List[AssocResponse])
async def publish_assocs(
    *,
    service: CatalogService = Depends(get_catalog_service),
    mapping: Dict[str, List[str]] = Body(..., description="分类路径 -> 有序SKU列表")) -> Any:
    """整体替换关联，数组顺序决定 pri（10, 20, ...）"""
    return await service.publish_associations(mapping)


@router.patch("", response_model=List[AssocResponse])
async def batch_update_assocs(
    *,
    service: CatalogService = Depends(get_catalog_service),
    items: List[AssocBatchItem]) -> Any:
    """整体替换关联，pri 按请求原样保存（用于调整排序）"""
    entries = [AssocEntry(path=i.path, sku=i.sku, pri=i.pri) for i in items]
    return await service.update_associations(entries)


@router.delete("", status_code=204)
async def purge_assocs(
    *,
    service: CatalogService = Depends(get_catalog_service)) -> Response:
    """清空全部关联"""
    await service.purge_associations()
    return Response(status_code=204)


@router.post("/items", response_model=AssocResponse, status_code=201)
async def create_assoc(
    *,
    service: CatalogService = Depends(get_catalog_service),
    assoc_in: AssocCreate) -> Any:
    """新增单条关联，排在该分类末尾"""
    return await service.create_association(assoc_in.path, assoc_in.sku)


@router.delete("/items", status_code=204)
async def delete_assoc(
    *,
    service: CatalogService = Depends(get_catalog_service),
    path: str = Query(..., min_length=1),
    sku: str = Query(..., min_length=1)) -> Response:
    """删除单条关联（不存在时同样返回成功）"""
    await service.delete_association(path, sku)
    return Response(status_code=204)
