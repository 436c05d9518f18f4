"""商品 Schema"""

from typing import List, Optional
from datetime import datetime
from pydantic import BaseModel, Field


class ProductCreate(BaseModel):
    sku: str = Field(..., min_length=1, max_length=64, description="库存单位编码")
    name: str = Field(..., min_length=1, max_length=200, description="品名")


class ProductResponse(BaseModel):
    uuid: str
    sku: str
    name: str
    created: Optional[datetime] = None
    modified: Optional[datetime] = None

    class Config:
        from_attributes = True


class ProductListResponse(BaseModel):
    data: List[ProductResponse]
    page: int
    limit: int
