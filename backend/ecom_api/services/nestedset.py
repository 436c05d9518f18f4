"""
分类树与嵌套集互转

Node 是内存中的分类树节点；NestedSetRecord 是持久化的嵌套集行。
- generate_nested_set: 先序遍历给每个节点编号 (lft, rgt, depth, path)
- nested_set:          按先序输出嵌套集列表
- build_tree:          由按 lft 排序的嵌套集列表还原分类树

编码器本身信任输入，合法性校验在服务层完成。
"""

import io
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, IO, Iterable, List, Optional

from ecom_api.core.errors import MalformedError


@dataclass
class NestedSetRecord:
    """嵌套集中的一行"""
    segment: str
    path: str
    name: str
    lft: int
    rgt: int
    depth: int
    id: Optional[int] = None
    created: Optional[datetime] = None
    modified: Optional[datetime] = None

    @property
    def is_leaf(self) -> bool:
        return self.rgt == self.lft + 1


class Node:
    """分类树节点

    nodes 为有序子节点列表（顺序有意义，编码/解码均保持）；
    parent 只是回指，不持有父节点。
    """

    def __init__(self, segment: str, name: str):
        self.segment = segment
        self.name = name
        self.path = ""
        self.lft = -1
        self.rgt = -1
        self.depth = -1
        self.parent: Optional["Node"] = None
        self.nodes: List["Node"] = []

    def __repr__(self):
        return f"<Node {self.path or self.segment!r} [{self.lft}, {self.rgt}]>"

    def add_child(self, child: "Node") -> "Node":
        child.parent = self
        self.nodes.append(child)
        return child

    def is_root(self) -> bool:
        return self.parent is None

    def is_leaf(self) -> bool:
        return len(self.nodes) == 0

    def find_node(self, segment: str) -> Optional["Node"]:
        """在直接子节点中查找路径段，O(n)"""
        for node in self.nodes:
            if node.segment == segment:
                return node
        return None

    def find_node_by_path(self, path: str) -> Optional["Node"]:
        """按路径查找节点，如 'a/c/f/j/n'（无前导斜杠）

        根节点路径段为空（匿名根）时，路径从其子节点开始匹配。
        """
        segments = path.split("/")
        if self.segment == "":
            context = self
        else:
            if segments[0] != self.segment:
                return None
            context = self
            segments = segments[1:]
        for segment in segments:
            context = context.find_node(segment)
            if context is None:
                return None
        return context

    def generate_nested_set(self, lft: int = 1, depth: int = 0, path: str = "") -> int:
        """先序遍历给整棵子树编号，返回下一个可用编号"""
        current = f"{path}/{self.segment}" if path else self.segment
        rgt = lft + 1
        for child in self.nodes:
            rgt = child.generate_nested_set(rgt, depth + 1, current)
        self.lft = lft
        self.rgt = rgt
        self.depth = depth
        self.path = current
        return rgt + 1

    def nested_set(self) -> List[NestedSetRecord]:
        """按先序遍历输出嵌套集（需先调用 generate_nested_set）"""
        listing: List[NestedSetRecord] = []
        stack = [self]
        while stack:
            n = stack.pop()
            listing.append(NestedSetRecord(
                segment=n.segment,
                path=n.path,
                name=n.name,
                lft=n.lft,
                rgt=n.rgt,
                depth=n.depth,
            ))
            stack.extend(reversed(n.nodes))
        return listing

    def walk(self) -> Iterable["Node"]:
        """先序遍历所有节点"""
        stack = [self]
        while stack:
            n = stack.pop()
            yield n
            stack.extend(reversed(n.nodes))

    def leaf_paths(self) -> List[str]:
        return [n.path for n in self.walk() if n.is_leaf()]

    def preorder_traversal_print(self, w: Optional[IO[str]] = None) -> str:
        """深度优先打印每个节点，列对齐"""
        rows = [
            (f"segment: {n.segment}", f"path: {n.path!r}", f"name: {n.name!r}",
             f"lft: {n.lft}", f"rgt: {n.rgt}", f"depth: {n.depth}")
            for n in self.walk()
        ]
        widths = [max(len(r[i]) for r in rows) for i in range(len(rows[0]) - 1)]
        buf = io.StringIO()
        for r in rows:
            cols = [c.ljust(widths[i] + 2) for i, c in enumerate(r[:-1])]
            buf.write("".join(cols) + r[-1] + "\n")
        text = buf.getvalue()
        if w is not None:
            w.write(text)
        return text

    def to_dict(
        self,
        products: Optional[Dict[str, List[str]]] = None,
        with_position: bool = True,
    ) -> Dict[str, Any]:
        """转换为接口 JSON 结构；products 为 path -> [sku] 时附带商品"""
        data: Dict[str, Any] = {"segment": self.segment, "name": self.name}
        if with_position:
            data.update(path=self.path, lft=self.lft, rgt=self.rgt, depth=self.depth)
        if products is not None:
            data["products"] = list(products.get(self.path, []))
        data["nodes"] = [c.to_dict(products, with_position) for c in self.nodes]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Node":
        """由接口 JSON 结构构造分类树"""
        node = cls(data.get("segment", ""), data.get("name", ""))
        for child in data.get("nodes") or []:
            node.add_child(cls.from_dict(child))
        return node


def _move_context(context: Node) -> Node:
    """当前节点的子节点已全部挂完，沿父链回退到还有待挂子节点的祖先"""
    if context.parent is None:
        return context
    prev = context
    context = context.parent
    while prev.rgt == context.rgt - 1 and context.parent is not None:
        prev = context
        context = context.parent
    return context


def _node_from_record(rec: NestedSetRecord) -> Node:
    n = Node(rec.segment, rec.name)
    n.path = rec.path
    n.lft = rec.lft
    n.rgt = rec.rgt
    n.depth = rec.depth
    return n


def build_tree(listing: List[NestedSetRecord]) -> Node:
    """由嵌套集还原分类树，返回根节点

    Raises:
        MalformedError: 列表为空，或第一行（根）的 lft 不是 1
    """
    if not listing:
        raise MalformedError("嵌套集为空", op="build_tree")
    records = sorted(listing, key=lambda r: r.lft)
    if records[0].lft != 1:
        raise MalformedError(
            f"根节点 lft 应为 1，实际为 {records[0].lft}",
            op="build_tree",
            data={"path": records[0].path},
        )

    root = _node_from_record(records[0])
    context = root
    for rec in records[1:]:
        n = context.add_child(_node_from_record(rec))
        if rec.is_leaf:
            # 叶子且紧贴父节点右值：父节点已无更多子节点
            if rec.rgt == context.rgt - 1:
                context = _move_context(context)
        else:
            context = n
    return root


def encode(root: Node) -> List[NestedSetRecord]:
    """从 lft=1, depth=0 开始编号并返回嵌套集"""
    root.generate_nested_set(1, 0, "")
    return root.nested_set()
