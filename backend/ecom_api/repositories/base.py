"""存储层公共部分：事务边界与错误转换"""

from contextlib import asynccontextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ecom_api.core.errors import CatalogError, translate_db_error


@asynccontextmanager
async def atomic(db: AsyncSession, op: str, commit: bool = True):
    """
    包裹一组存储操作

    成功则提交（commit=False 时不提交，用于只读查询）；
    任一步失败则整体回滚，SQLAlchemy 异常转换为带操作名的 StoreError。
    请求被取消时由会话关闭负责回滚。
    """
    try:
        yield
        if commit:
            await db.commit()
    except CatalogError:
        await db.rollback()
        raise
    except SQLAlchemyError as e:
        await db.rollback()
        raise translate_db_error(op, e) from e


class BaseRepository:
    def __init__(self, db: AsyncSession):
        self.db = db
