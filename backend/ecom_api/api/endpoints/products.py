"""商品API（目录关联所需的最小接口）"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from ecom_api.core.deps import get_db
from ecom_api.repositories.products import ProductRepository
from ecom_api.schemas.product import ProductCreate, ProductListResponse, ProductResponse

router = APIRouter()


@router.get("", response_model=ProductListResponse)
async def list_products(
    *,
    db: AsyncSession = Depends(get_db),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=200)) -> Any:
    """获取商品列表（按 SKU 排序）"""
    products = await ProductRepository(db).list_products(offset=(page - 1) * limit, limit=limit)
    return ProductListResponse(
        data=[ProductResponse.model_validate(p) for p in products],
        page=page,
        limit=limit,
    )


@router.post("", response_model=ProductResponse, status_code=201)
async def create_product(
    *,
    db: AsyncSession = Depends(get_db),
    product_in: ProductCreate) -> Any:
    """创建商品"""
    repo = ProductRepository(db)
    if await repo.get_by_sku(product_in.sku):
        raise HTTPException(status_code=409, detail="SKU 已存在")
    return await repo.create_product(product_in.sku, product_in.name)


@router.get("/{sku}", response_model=ProductResponse)
async def get_product(
    *,
    db: AsyncSession = Depends(get_db),
    sku: str) -> Any:
    """获取商品详情"""
    product = await ProductRepository(db).get_by_sku(sku)
    if not product:
        raise HTTPException(status_code=404, detail="商品不存在")
    return product


@router.delete("/{sku}", status_code=204)
async def delete_product(
    *,
    db: AsyncSession = Depends(get_db),
    sku: str) -> Response:
    """删除商品，其目录关联一并删除"""
    await ProductRepository(db).delete_product(sku)
    return Response(status_code=204)
