"""商品存储 - 目录关联所需的最小商品接口"""

from typing import List, Optional, Sequence, Tuple

from sqlalchemy import select, delete

from ecom_api.core.errors import NotFoundError
from ecom_api.models.product import Product
from ecom_api.repositories.base import BaseRepository, atomic


class ProductRepository(BaseRepository):

    async def create_product(self, sku: str, name: str) -> Product:
        product = Product(sku=sku, name=name)
        async with atomic(self.db, "create_product"):
            self.db.add(product)
            await self.db.flush()
        await self.db.refresh(product)
        return product

    async def get_by_sku(self, sku: str) -> Optional[Product]:
        async with atomic(self.db, "get_product", commit=False):
            result = await self.db.execute(
                select(Product)
                .where(Product.sku == sku)
                .execution_options(populate_existing=True)
            )
            return result.scalar_one_or_none()

    async def list_products(self, offset: int = 0, limit: int = 50) -> List[Product]:
        async with atomic(self.db, "list_products", commit=False):
            result = await self.db.execute(
                select(Product)
                .order_by(Product.sku)
                .offset(offset)
                .limit(limit)
                .execution_options(populate_existing=True)
            )
            return list(result.scalars().all())

    async def delete_product(self, sku: str) -> None:
        """删除商品，其目录关联由外键级联删除"""
        op = "delete_product"
        async with atomic(self.db, op):
            result = await self.db.execute(
                delete(Product)
                .where(Product.sku == sku)
                .execution_options(synchronize_session=False)
            )
            self.db.expunge_all()
            if result.rowcount == 0:
                raise NotFoundError(f"商品不存在: {sku}", op=op, data={"sku": sku})

    async def products_exist(self, skus: Sequence[str]) -> Tuple[List[str], List[str]]:
        """返回 (存在的SKU, 缺失的SKU)，保持输入顺序并去重"""
        skus = list(dict.fromkeys(skus))
        if not skus:
            return [], []
        async with atomic(self.db, "products_exist", commit=False):
            result = await self.db.execute(select(Product.sku).where(Product.sku.in_(skus)))
            existing = set(result.scalars().all())
        found = [s for s in skus if s in existing]
        missing = [s for s in skus if s not in existing]
        return found, missing
