"""
目录服务

目录状态：空 → 已发布（整体发布可重复），清空后回到空。
关联是已发布目录下的并行子状态：无关联 ↔ 有关联。

- 发布目录：校验分类树 → 嵌套集编码 → 原子替换
- 发布关联：校验路径为叶子、SKU 存在 → 原子替换，按顺序分配 pri
- 有关联引用的分类不能被清空，也不能在重新发布时消失或变成非叶子
"""

import re
from typing import Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from ecom_api.core.errors import (
    CategoriesInUseError, MalformedError, NotFoundError, NotLeafError,
)
from ecom_api.core.logging_config import get_logger
from ecom_api.models.catalog_product import CatalogProduct
from ecom_api.repositories import AssocRepository, CatalogRepository, ProductRepository
from ecom_api.repositories.assocs import AssocEntry
from ecom_api.services.nestedset import NestedSetRecord, Node, build_tree, encode

logger = get_logger(__name__)

SEGMENT_PATTERN = re.compile(r"^[A-Za-z0-9._-]+$")


def validate_tree(root: Optional[Node]) -> None:
    """
    校验待发布的分类树

    - 树不能为空
    - 非根节点的路径段非空，且只含字母、数字和 . _ -（因此不会有 /）
    - 根节点路径段可以为空（匿名根），非空时规则同上
    - 同一父节点下路径段不能重复
    - 同一个节点对象不能在树中出现两次
    """
    if root is None:
        raise MalformedError("分类树为空", op="validate_tree")

    seen = set()
    stack = [(root, "")]
    while stack:
        node, parent_path = stack.pop()
        if id(node) in seen:
            raise MalformedError(
                f"节点重复出现: {node.segment}", op="validate_tree",
                data={"segment": node.segment},
            )
        seen.add(id(node))

        path = f"{parent_path}/{node.segment}" if parent_path else node.segment
        allow_empty = node is root
        if not (allow_empty and node.segment == "") and not SEGMENT_PATTERN.match(node.segment or ""):
            raise MalformedError(
                f"非法路径段 {node.segment!r}（父路径 {parent_path!r}）",
                op="validate_tree",
                data={"parent_path": parent_path, "segment": node.segment},
            )

        siblings = set()
        for child in node.nodes:
            if child.segment in siblings:
                dup = f"{path}/{child.segment}" if path else child.segment
                raise MalformedError(
                    f"同级分类路径段重复: {dup}",
                    op="validate_tree",
                    data={"parent_path": path, "segment": child.segment},
                )
            siblings.add(child.segment)
            stack.append((child, path))


class CatalogService:

    def __init__(self, db: AsyncSession):
        self.catalog = CatalogRepository(db)
        self.assocs = AssocRepository(db)
        self.products = ProductRepository(db)

    # ---------- 目录 ----------

    async def has_catalog(self) -> bool:
        return await self.catalog.has_catalog()

    async def publish_catalog(self, root: Node) -> Node:
        """整体发布目录，返回已编号的分类树"""
        validate_tree(root)
        listing = encode(root)

        # 已有关联的路径在新目录里必须仍是叶子
        assoc_paths = await self.assocs.get_assoc_paths()
        if assoc_paths:
            leafs = set(root.leaf_paths())
            stale = [p for p in assoc_paths if p not in leafs]
            if stale:
                logger.warning(f"目录发布被拒绝，{len(stale)} 个已关联路径不再是叶子: {stale}")
                raise CategoriesInUseError(
                    "已有商品关联的分类在新目录中不存在或不再是叶子",
                    op="publish_catalog",
                    data={"paths": stale},
                )

        await self.catalog.replace_catalog(listing)
        logger.info(f"📚 目录已发布: {len(listing)} 个节点, 根路径 {root.path!r}")
        return root

    async def get_catalog(self) -> Node:
        """读取目录并还原为分类树"""
        listing = await self.catalog.get_catalog()
        if not listing:
            raise NotFoundError("目录不存在", op="get_catalog")
        return build_tree(listing)

    async def get_catalog_products(self) -> Dict[str, List[str]]:
        """path -> 按 pri 排序的 SKU 列表"""
        cmap: Dict[str, List[str]] = {}
        for assoc in await self.assocs.get_assocs():
            cmap.setdefault(assoc.path, []).append(assoc.sku)
        return cmap

    async def get_category(self, path: str) -> NestedSetRecord:
        return await self.catalog.get_by_path(path)

    async def purge_catalog(self) -> None:
        if await self.assocs.has_assocs():
            logger.warning("目录清空被拒绝：仍有目录商品关联")
            raise CategoriesInUseError(
                "请先清空目录商品关联再清空目录", op="purge_catalog"
            )
        await self.catalog.purge_catalog()
        logger.info("🗑️ 目录已清空")

    # ---------- 关联 ----------

    async def _load_tree(self, op: str) -> Node:
        listing = await self.catalog.get_catalog()
        if not listing:
            raise NotFoundError("目录不存在，无法写入商品关联", op=op)
        return build_tree(listing)

    @staticmethod
    def _check_leaf_paths(tree: Node, paths: List[str], op: str) -> None:
        """逐个检查路径，遇到第一个不存在或非叶子的路径即失败"""
        for path in paths:
            node = tree.find_node_by_path(path)
            if node is None:
                raise NotFoundError(f"分类不存在: {path}", op=op, data={"path": path})
            if not node.is_leaf():
                raise NotLeafError(f"只能关联到叶子分类: {path}", op=op, data={"path": path})

    async def _check_skus(self, skus: List[str], op: str) -> None:
        _, missing = await self.products.products_exist(skus)
        if missing:
            raise NotFoundError(
                f"商品不存在: {', '.join(missing)}", op=op, data={"missing_skus": missing}
            )

    async def publish_associations(self, mapping: Dict[str, List[str]]) -> List[CatalogProduct]:
        """整体替换关联；每个路径下 SKU 的顺序决定 pri（10, 20, ...）"""
        op = "publish_associations"
        tree = await self._load_tree(op)
        self._check_leaf_paths(tree, list(mapping.keys()), op)
        for path, skus in mapping.items():
            if len(set(skus)) != len(skus):
                raise MalformedError(f"同一分类下 SKU 重复: {path}", op=op, data={"path": path})
        await self._check_skus([s for skus in mapping.values() for s in skus], op)

        await self.assocs.replace_assocs(mapping)
        logger.info(f"🔗 目录商品关联已发布: {len(mapping)} 个分类, "
                    f"{sum(len(v) for v in mapping.values())} 条关联")
        return await self.assocs.get_assocs()

    async def update_associations(self, entries: List[AssocEntry]) -> List[CatalogProduct]:
        """整体替换关联，保留调用方给定的 pri"""
        op = "update_associations"
        tree = await self._load_tree(op)
        self._check_leaf_paths(tree, list(dict.fromkeys(e.path for e in entries)), op)
        pairs = set()
        for e in entries:
            if e.pri <= 0:
                raise MalformedError(f"pri 必须为正整数: {e.path} {e.sku}", op=op,
                                     data={"path": e.path, "sku": e.sku, "pri": e.pri})
            if (e.path, e.sku) in pairs:
                raise MalformedError(f"关联重复: {e.path} {e.sku}", op=op,
                                     data={"path": e.path, "sku": e.sku})
            pairs.add((e.path, e.sku))
        await self._check_skus([e.sku for e in entries], op)

        await self.assocs.batch_update_assocs(entries)
        logger.info(f"🔗 目录商品关联已批量更新: {len(entries)} 条")
        return await self.assocs.get_assocs()

    async def get_associations(self) -> List[CatalogProduct]:
        return await self.assocs.get_assocs()

    async def has_associations(self) -> bool:
        return await self.assocs.has_assocs()

    async def create_association(self, path: str, sku: str) -> CatalogProduct:
        assoc = await self.assocs.create_assoc(path, sku)
        logger.info(f"🔗 新增关联 {path} -> {sku} (pri={assoc.pri})")
        return assoc

    async def delete_association(self, path: str, sku: str) -> None:
        await self.assocs.delete_assoc(path, sku)

    async def purge_associations(self) -> int:
        count = await self.assocs.purge_assocs()
        logger.info(f"🗑️ 目录商品关联已清空: {count} 条")
        return count
