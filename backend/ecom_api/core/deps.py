"""依赖注入（认证由外部身份服务负责，这里不处理）"""
from typing import AsyncGenerator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from ecom_api.db.session import SessionLocal
from ecom_api.services.catalog import CatalogService


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """
    获取数据库会话依赖

    每个请求一个会话；请求取消或异常时，会话关闭会回滚未提交的事务。
    """
    async with SessionLocal() as session:
        yield session


def get_catalog_service(db: AsyncSession = Depends(get_db)) -> CatalogService:
    return CatalogService(db)
