"""测试共用的分类树样例"""

from ecom_api.services.nestedset import Node

# (父, 子)，同一父节点下按添加顺序排列
SAMPLE_EDGES = [
    ("a", "b"), ("a", "c"), ("a", "d"),
    ("b", "e"),
    ("c", "f"), ("c", "g"),
    ("d", "h"),
    ("f", "i"), ("f", "j"),
    ("h", "k"), ("h", "l"),
    ("j", "m"), ("j", "n"),
]

# (path, lft, rgt, depth)
SAMPLE_LISTING = [
    ("a", 1, 28, 0),
    ("a/b", 2, 5, 1),
    ("a/b/e", 3, 4, 2),
    ("a/c", 6, 19, 1),
    ("a/c/f", 7, 16, 2),
    ("a/c/f/i", 8, 9, 3),
    ("a/c/f/j", 10, 15, 3),
    ("a/c/f/j/m", 11, 12, 4),
    ("a/c/f/j/n", 13, 14, 4),
    ("a/c/g", 17, 18, 2),
    ("a/d", 20, 27, 1),
    ("a/d/h", 21, 26, 2),
    ("a/d/h/k", 22, 23, 3),
    ("a/d/h/l", 24, 25, 3),
]


def build_sample_tree() -> Node:
    nodes = {k: Node(k, f"Category {k.upper()}") for k in "abcdefghijklmn"}
    for parent, child in SAMPLE_EDGES:
        nodes[parent].add_child(nodes[child])
    return nodes["a"]


def sample_tree_json() -> dict:
    return build_sample_tree().to_dict(with_position=False)


def positions(listing):
    return [(r.path, r.lft, r.rgt, r.depth) for r in listing]


def shape(node: Node):
    """结构比较用：(segment, name, depth, 子节点...)"""
    return (node.segment, node.name, node.depth, [shape(c) for c in node.nodes])
