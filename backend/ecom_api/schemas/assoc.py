"""目录商品关联 Schema"""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field


class AssocCreate(BaseModel):
    path: str = Field(..., min_length=1, description="叶子分类路径")
    sku: str = Field(..., min_length=1)


class AssocBatchItem(BaseModel):
    path: str = Field(..., min_length=1)
    sku: str = Field(..., min_length=1)
    pri: int = Field(..., gt=0, description="展示优先级，原样保存")


class AssocResponse(BaseModel):
    path: str
    sku: str
    pri: int
    created: Optional[datetime] = None
    modified: Optional[datetime] = None

    class Config:
        from_attributes = True
