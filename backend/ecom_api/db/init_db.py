import asyncio
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncEngine

from ecom_api.db.base import Base
from ecom_api.db.session import engine as default_engine

# 导入所有模型，确保表能被创建
from ecom_api.models import CatalogNode, CatalogProduct, Product  # noqa: F401


async def ensure_tables_exist(engine: Optional[AsyncEngine] = None) -> None:
    """
    确保数据库表存在（应用启动时调用）
    """
    async with (engine or default_engine).begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_tables(engine: Optional[AsyncEngine] = None) -> None:
    """删除全部表（测试和重建用）"""
    async with (engine or default_engine).begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


if __name__ == "__main__":
    asyncio.run(ensure_tables_exist())
