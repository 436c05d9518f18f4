"""目录-商品关联模型

商品（SKU）只能挂在叶子分类上，同一路径下按 pri 升序展示。
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, UniqueConstraint, Index, func
from sqlalchemy.orm import relationship
from ecom_api.db.base import Base


class CatalogProduct(Base):
    __tablename__ = "catalog_products"
    __table_args__ = (
        UniqueConstraint("path", "sku", name="uq_catalog_products_path_sku"),
        Index("ix_catalog_products_path_pri", "path", "pri"),
    )

    id = Column(Integer, primary_key=True, index=True)
    # 目录整体替换时先置空，插入新节点后按 path 重新挂接
    catalog_id = Column(Integer, ForeignKey("catalog.id"), nullable=True)
    product_id = Column(Integer, ForeignKey("product.id", ondelete="CASCADE"), nullable=False)
    path = Column(String(1024), nullable=False, comment="叶子分类路径")
    sku = Column(String(64), nullable=False)
    pri = Column(Integer, nullable=False, comment="展示优先级，10 的倍数")

    created = Column(DateTime(timezone=True), server_default=func.now())
    modified = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    product = relationship("Product", back_populates="catalog_assocs")

    def __repr__(self):
        return f"<CatalogProduct {self.path} {self.sku} pri={self.pri}>"
