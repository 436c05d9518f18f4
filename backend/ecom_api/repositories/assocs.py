"""目录-商品关联存储

pri 以 10 为步长：某路径下第一条为 10，之后为 max(pri) + 10。
批量写入都是先清空再插入，整体在一个事务内完成。
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List

from sqlalchemy import Integer, String, select, func, delete, insert, literal

from ecom_api.core.errors import NotFoundError, NotLeafError
from ecom_api.models.catalog import CatalogNode
from ecom_api.models.catalog_product import CatalogProduct
from ecom_api.models.product import Product
from ecom_api.repositories.base import BaseRepository, atomic

PRI_STEP = 10


@dataclass
class AssocEntry:
    """带显式优先级的关联，用于批量更新"""
    path: str
    sku: str
    pri: int


class AssocRepository(BaseRepository):

    async def has_assocs(self) -> bool:
        async with atomic(self.db, "has_assocs", commit=False):
            result = await self.db.execute(select(func.count(CatalogProduct.id)))
            return (result.scalar() or 0) > 0

    async def get_assocs(self) -> List[CatalogProduct]:
        """按 (path, pri) 升序返回全部关联"""
        async with atomic(self.db, "get_assocs", commit=False):
            result = await self.db.execute(
                select(CatalogProduct)
                .order_by(CatalogProduct.path, CatalogProduct.pri)
                .execution_options(populate_existing=True)
            )
            return list(result.scalars().all())

    async def get_assoc_paths(self) -> List[str]:
        async with atomic(self.db, "get_assoc_paths", commit=False):
            result = await self.db.execute(
                select(CatalogProduct.path).distinct().order_by(CatalogProduct.path)
            )
            return list(result.scalars().all())

    async def create_assoc(self, path: str, sku: str) -> CatalogProduct:
        """把一个 SKU 挂到叶子分类末尾，pri 取该路径当前最大值 + 10"""
        op = "create_assoc"
        async with atomic(self.db, op):
            node_ids = await self._resolve_paths([path], op)
            product_ids = await self._resolve_skus([sku], op)
            # 取最大值与插入在同一条语句里完成
            next_pri = select(
                literal(node_ids[path], Integer),
                literal(product_ids[sku], Integer),
                literal(path, String),
                literal(sku, String),
                func.coalesce(func.max(CatalogProduct.pri), 0) + PRI_STEP,
            ).where(CatalogProduct.path == path)
            await self.db.execute(
                insert(CatalogProduct).from_select(
                    ["catalog_id", "product_id", "path", "sku", "pri"], next_pri
                )
            )
            result = await self.db.execute(
                select(CatalogProduct)
                .where(CatalogProduct.path == path, CatalogProduct.sku == sku)
                .execution_options(populate_existing=True)
            )
            assoc = result.scalar_one()
        return assoc

    async def delete_assoc(self, path: str, sku: str) -> None:
        """删除单条关联，不存在时什么也不做"""
        async with atomic(self.db, "delete_assoc"):
            await self.db.execute(
                delete(CatalogProduct)
                .where(CatalogProduct.path == path, CatalogProduct.sku == sku)
                .execution_options(synchronize_session=False)
            )
            self.db.expunge_all()

    async def replace_assocs(self, mapping: Dict[str, List[str]]) -> None:
        """
        原子替换全部关联

        mapping 为 path -> 有序 SKU 列表，按给定顺序分配 pri = 10, 20, 30 ...
        """
        entries = [
            AssocEntry(path=path, sku=sku, pri=(i + 1) * PRI_STEP)
            for path, skus in mapping.items()
            for i, sku in enumerate(skus)
        ]
        await self._truncate_and_insert(entries, list(mapping.keys()), "replace_assocs")

    async def batch_update_assocs(self, entries: List[AssocEntry]) -> None:
        """原子替换全部关联，pri 按调用方给定的值原样写入"""
        paths = list(dict.fromkeys(e.path for e in entries))
        await self._truncate_and_insert(entries, paths, "batch_update_assocs")

    async def purge_assocs(self) -> int:
        """删除全部关联，返回删除条数"""
        async with atomic(self.db, "purge_assocs"):
            result = await self.db.execute(
                delete(CatalogProduct).execution_options(synchronize_session=False)
            )
            self.db.expunge_all()
        return result.rowcount

    async def _truncate_and_insert(self, entries: List[AssocEntry], paths: List[str], op: str) -> None:
        async with atomic(self.db, op):
            await self.db.execute(
                delete(CatalogProduct).execution_options(synchronize_session=False)
            )
            # 旧行的 id 可能被新行复用，丢弃会话里已加载的对象
            self.db.expunge_all()
            node_ids = await self._resolve_paths(paths, op)
            product_ids = await self._resolve_skus(dict.fromkeys(e.sku for e in entries), op)
            if entries:
                await self.db.execute(
                    insert(CatalogProduct),
                    [
                        {
                            "catalog_id": node_ids[e.path],
                            "product_id": product_ids[e.sku],
                            "path": e.path,
                            "sku": e.sku,
                            "pri": e.pri,
                        }
                        for e in entries
                    ],
                )

    async def _resolve_paths(self, paths: Iterable[str], op: str) -> Dict[str, int]:
        """路径 -> 分类ID；路径不存在或不是叶子时报错"""
        paths = list(paths)
        if not paths:
            return {}
        result = await self.db.execute(
            select(CatalogNode.path, CatalogNode.id, CatalogNode.lft, CatalogNode.rgt)
            .where(CatalogNode.path.in_(paths))
        )
        rows = {row.path: row for row in result.all()}
        for path in paths:
            row = rows.get(path)
            if row is None:
                raise NotFoundError(f"分类不存在: {path}", op=op, data={"path": path})
            if row.rgt != row.lft + 1:
                raise NotLeafError(f"只能关联到叶子分类: {path}", op=op, data={"path": path})
        return {path: row.id for path, row in rows.items()}

    async def _resolve_skus(self, skus: Iterable[str], op: str) -> Dict[str, int]:
        """SKU -> 商品ID；有缺失时一次性报出全部缺失的 SKU"""
        skus = list(skus)
        if not skus:
            return {}
        result = await self.db.execute(
            select(Product.sku, Product.id).where(Product.sku.in_(skus))
        )
        found = {row.sku: row.id for row in result.all()}
        missing = [s for s in skus if s not in found]
        if missing:
            raise NotFoundError(
                f"商品不存在: {', '.join(missing)}",
                op=op,
                data={"missing_skus": missing},
            )
        return found
