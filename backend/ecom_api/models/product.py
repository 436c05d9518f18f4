"""商品模型 - 目录关联只依赖 SKU"""

import uuid

from sqlalchemy import Column, Integer, String, DateTime, func
from sqlalchemy.orm import relationship
from ecom_api.db.base import Base


class Product(Base):
    __tablename__ = "product"

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))
    sku = Column(String(64), unique=True, nullable=False, index=True, comment="库存单位编码")
    name = Column(String(200), nullable=False, comment="品名")

    created = Column(DateTime(timezone=True), server_default=func.now())
    modified = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    # 删除商品时一并删除其目录关联
    catalog_assocs = relationship(
        "CatalogProduct",
        back_populates="product",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self):
        return f"<Product {self.sku}: {self.name}>"
