"""目录 Schema"""

from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field


class CategoryNodeIn(BaseModel):
    """发布目录时的分类节点（递归）

    根节点 segment 可以为空串（匿名根），其他节点由服务层要求非空。
    """
    segment: str = Field(..., max_length=100, pattern=r"^[A-Za-z0-9._-]*$", description="路径段")
    name: str = Field(..., max_length=200, description="显示名称")
    nodes: List["CategoryNodeIn"] = Field(default_factory=list, description="子分类，顺序有意义")


class CategoryNodeOut(BaseModel):
    """读取目录时的分类节点，位置字段由服务端计算"""
    segment: str
    name: str
    path: str
    lft: int
    rgt: int
    depth: int
    products: Optional[List[str]] = None
    nodes: List["CategoryNodeOut"] = []


class CategoryRecordResponse(BaseModel):
    """嵌套集中的一行"""
    id: Optional[int] = None
    segment: str
    path: str
    name: str
    lft: int
    rgt: int
    depth: int
    is_leaf: bool
    created: Optional[datetime] = None
    modified: Optional[datetime] = None

    class Config:
        from_attributes = True


CategoryNodeIn.model_rebuild()
CategoryNodeOut.model_rebuild()
