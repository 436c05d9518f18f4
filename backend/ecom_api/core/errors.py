"""
目录核心错误类型

每种错误带一个固定的 code，API 层据此映射 HTTP 状态码。
存储层错误由 translate_db_error 统一转换，并记录出错的操作名。
"""

from typing import Any, Dict, Optional

from sqlalchemy import exc as sa_exc


class CatalogError(Exception):
    """目录错误基类"""

    code = "CatalogError"
    status_code = 500

    def __init__(self, message: str, *, op: Optional[str] = None, data: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.op = op
        self.data = data or {}

    def __str__(self) -> str:
        if self.op:
            return f"{self.op}: {self.message}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status_code,
            "code": self.code,
            "message": str(self),
            "data": self.data,
        }


class NotFoundError(CatalogError):
    """路径、SKU 或目录不存在"""
    code = "NotFound"
    status_code = 404


class NotLeafError(CatalogError):
    """关联目标不是叶子分类"""
    code = "NotLeaf"
    status_code = 409


class MalformedError(CatalogError):
    """分类树或嵌套集输入不合法"""
    code = "Malformed"
    status_code = 400


class CategoriesInUseError(CatalogError):
    """分类仍被关联引用，不能清空或替换"""
    code = "CategoriesInUse"
    status_code = 409


class StoreError(CatalogError):
    """未归类的存储层错误"""
    code = "StoreError"
    status_code = 500


class ConflictError(StoreError):
    """唯一约束等并发冲突"""
    code = "Conflict"
    status_code = 409


class TransientError(StoreError):
    """可重试的存储错误（连接断开、超时等），核心不做重试"""
    code = "Transient"
    status_code = 503


def translate_db_error(op: str, e: Exception) -> StoreError:
    """把 SQLAlchemy 异常转换成带操作名的存储错误"""
    detail = str(getattr(e, "orig", None) or e)
    if isinstance(e, sa_exc.IntegrityError):
        return ConflictError(f"数据冲突: {detail}", op=op)
    if isinstance(e, (sa_exc.OperationalError, sa_exc.TimeoutError)):
        return TransientError(f"存储暂不可用: {detail}", op=op)
    if isinstance(e, sa_exc.DBAPIError) and e.connection_invalidated:
        return TransientError(f"数据库连接已失效: {detail}", op=op)
    return StoreError(f"存储错误: {detail}", op=op)
