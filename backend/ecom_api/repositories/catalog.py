"""目录存储 - 嵌套集的读取与整体替换"""

from typing import List

from sqlalchemy import select, func, delete, insert, update

from ecom_api.core.errors import CategoriesInUseError, ConflictError, NotFoundError
from ecom_api.models.catalog import CatalogNode
from ecom_api.models.catalog_product import CatalogProduct
from ecom_api.repositories.base import BaseRepository, atomic
from ecom_api.services.nestedset import NestedSetRecord


def _to_record(row: CatalogNode) -> NestedSetRecord:
    return NestedSetRecord(
        id=row.id,
        segment=row.segment,
        path=row.path,
        name=row.name,
        lft=row.lft,
        rgt=row.rgt,
        depth=row.depth,
        created=row.created,
        modified=row.modified,
    )


class CatalogRepository(BaseRepository):

    async def has_catalog(self) -> bool:
        async with atomic(self.db, "has_catalog", commit=False):
            result = await self.db.execute(select(func.count(CatalogNode.id)))
            return (result.scalar() or 0) > 0

    async def get_catalog(self) -> List[NestedSetRecord]:
        """按 lft 升序返回整个嵌套集"""
        async with atomic(self.db, "get_catalog", commit=False):
            result = await self.db.execute(
                select(CatalogNode)
                .order_by(CatalogNode.lft.asc())
                .execution_options(populate_existing=True)
            )
            return [_to_record(row) for row in result.scalars().all()]

    async def get_by_path(self, path: str) -> NestedSetRecord:
        async with atomic(self.db, "get_by_path", commit=False):
            result = await self.db.execute(
                select(CatalogNode)
                .where(CatalogNode.path == path)
                .execution_options(populate_existing=True)
            )
            row = result.scalar_one_or_none()
        if row is None:
            raise NotFoundError(f"分类不存在: {path}", op="get_by_path", data={"path": path})
        return _to_record(row)

    async def replace_catalog(self, listing: List[NestedSetRecord]) -> None:
        """
        原子替换整个目录：删除全部节点，按顺序插入新节点后提交

        已有关联先与旧节点脱钩，插入完成后按 path 挂到新节点上。
        任一步失败则回滚，旧目录保持不变。
        """
        async with atomic(self.db, "replace_catalog"):
            await self.db.execute(
                update(CatalogProduct)
                .values(catalog_id=None)
                .execution_options(synchronize_session=False)
            )
            await self.db.execute(
                delete(CatalogNode).execution_options(synchronize_session=False)
            )
            # 旧行的 id 可能被新行复用，丢弃会话里已加载的对象
            self.db.expunge_all()
            if listing:
                await self.db.execute(
                    insert(CatalogNode),
                    [
                        {
                            "segment": r.segment,
                            "path": r.path,
                            "name": r.name,
                            "lft": r.lft,
                            "rgt": r.rgt,
                            "depth": r.depth,
                        }
                        for r in listing
                    ],
                )
            node_id = (
                select(CatalogNode.id)
                .where(CatalogNode.path == CatalogProduct.path)
                .scalar_subquery()
            )
            await self.db.execute(
                update(CatalogProduct)
                .values(catalog_id=node_id)
                .execution_options(synchronize_session=False)
            )

    async def purge_catalog(self) -> None:
        """删除全部节点；仍有关联或其他引用时失败"""
        op = "purge_catalog"
        try:
            async with atomic(self.db, op):
                result = await self.db.execute(select(func.count(CatalogProduct.id)))
                count = result.scalar() or 0
                if count:
                    raise CategoriesInUseError(
                        f"仍有 {count} 条目录商品关联引用分类",
                        op=op,
                        data={"assocs": count},
                    )
                await self.db.execute(
                    delete(CatalogNode).execution_options(synchronize_session=False)
                )
                self.db.expunge_all()
        except ConflictError as e:
            raise CategoriesInUseError("分类仍被其他数据引用", op=op) from e
