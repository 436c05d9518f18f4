"""目录分类模型 - 嵌套集（Nested Set）存储"""

import uuid

from sqlalchemy import Column, Integer, String, DateTime, func
from ecom_api.db.base import Base


class CatalogNode(Base):
    """目录分类节点

    整棵分类树以嵌套集形式平铺存储，例如：
    - a            lft=1  rgt=8
      - a/b        lft=2  rgt=3
      - a/c        lft=4  rgt=7
        - a/c/f    lft=5  rgt=6

    A 是 B 的祖先 当且仅当 A.lft < B.lft 且 A.rgt > B.rgt；
    rgt = lft + 1 的节点是叶子。按 lft 升序即为先序遍历。
    """
    __tablename__ = "catalog"

    id = Column(Integer, primary_key=True, index=True)
    uuid = Column(String(36), unique=True, nullable=False, default=lambda: str(uuid.uuid4()))
    segment = Column(String(100), nullable=False, comment="路径段")
    path = Column(String(1024), unique=True, nullable=False, comment="从根到本节点的完整路径")
    name = Column(String(200), nullable=False, comment="显示名称")
    lft = Column(Integer, nullable=False, index=True)
    rgt = Column(Integer, nullable=False)
    depth = Column(Integer, nullable=False, comment="层级（根=0）")

    created = Column(DateTime(timezone=True), server_default=func.now())
    modified = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    @property
    def is_leaf(self) -> bool:
        return self.rgt == self.lft + 1

    def __repr__(self):
        return f"<CatalogNode {self.path} [{self.lft}, {self.rgt}]>"
