"""Structural sharing between successive trees."""

from ..core.json import safe_json_dumps
from .models import UINode, UITree


def _same_node(prev: UINode, nxt: UINode) -> bool:
    if prev.type != nxt.type or prev.key != nxt.key:
        return False
    if prev.child_ids != nxt.child_ids:
        return False
    return safe_json_dumps(prev.props, sort_keys=True) == safe_json_dumps(nxt.props, sort_keys=True)


def merge_trees(prev: UITree | None, nxt: UITree) -> UITree:
    """
    Merge an incoming tree into the current one.

    Nodes that did not change keep their previous object identity so that
    widgets holding local state do not re-sync. A changed root id or root
    type replaces the tree wholesale.
    """
    if prev is None:
        return nxt

    prev_root, next_root = prev.root_node, nxt.root_node
    if prev.root != nxt.root or prev_root is None or next_root is None or prev_root.type != next_root.type:
        return nxt

    elements: dict[str, UINode] = {}
    reused = 0
    for node_id, node in nxt.elements.items():
        old = prev.elements.get(node_id)
        if old is not None and _same_node(old, node):
            elements[node_id] = old
            reused += 1
        else:
            elements[node_id] = node

    if reused == len(prev.elements) == len(nxt.elements):
        return prev
    return UITree(root=nxt.root, elements=elements)
