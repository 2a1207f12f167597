"""
Tree Interpreter.

Walks a UI tree from its root and resolves every node against the closed
component catalog. Rendering degrades instead of failing: unknown types
become placeholders, missing children are skipped, cyclic back edges and
over-deep branches are cut off, and bad props fall back to defaults. Shared
children render under every parent, so the total output is capped too.
"""

import html
from dataclasses import dataclass, field
from typing import Any, Iterator, Union

from ..catalog.components import ComponentType, get_spec, normalize_props, resolve_type
from ..core.json import safe_json_dumps
from ..core.logging_config import get_logger
from .models import UINode, UITree

logger = get_logger(__name__)

DEFAULT_MAX_DEPTH = 32
DEFAULT_MAX_NODES = 1000


@dataclass(frozen=True)
class RenderedComponent:
    """A node resolved to a catalog component."""

    kind: ComponentType
    key: str
    props: dict[str, Any]
    children: tuple["RenderedNode", ...] = ()


@dataclass(frozen=True)
class UnknownComponent:
    """Neutral placeholder for a type outside the catalog."""

    type_name: str
    key: str


@dataclass(frozen=True)
class InvalidTree:
    """Output for a tree whose root cannot be resolved."""

    reason: str


RenderedNode = Union[RenderedComponent, UnknownComponent]


@dataclass
class RenderOutput:
    """Result of interpreting one tree."""

    root: RenderedNode | InvalidTree
    placeholders: int = 0
    skipped: list[str] = field(default_factory=list)
    rendered: int = 0
    truncated: bool = False

    @property
    def ok(self) -> bool:
        return not isinstance(self.root, InvalidTree)

    def walk(self) -> Iterator[RenderedNode]:
        """Depth-first, children in order."""
        if isinstance(self.root, InvalidTree):
            return
        stack: list[RenderedNode] = [self.root]
        while stack:
            node = stack.pop()
            yield node
            if isinstance(node, RenderedComponent):
                stack.extend(reversed(node.children))


class Renderer:
    """Interprets trees into rendered component nodes."""

    def __init__(self, max_depth: int = DEFAULT_MAX_DEPTH, max_nodes: int = DEFAULT_MAX_NODES) -> None:
        self.max_depth = max_depth
        self.max_nodes = max_nodes

    def render(self, tree: UITree) -> RenderOutput:
        root = tree.elements.get(tree.root)
        if root is None:
            logger.warning("render_missing_root", root=tree.root)
            return RenderOutput(root=InvalidTree(f"Root '{tree.root}' is not in elements"))

        output = RenderOutput(root=InvalidTree("unrendered"))
        output.root = self._render_node(tree, tree.root, root, (tree.root,), output)
        return output

    def _render_node(
        self,
        tree: UITree,
        node_id: str,
        node: UINode,
        path: tuple[str, ...],
        output: RenderOutput,
    ) -> RenderedNode:
        output.rendered += 1
        kind = resolve_type(node.type)
        if kind is None:
            logger.debug("render_unknown_component", node_id=node_id, type=node.type)
            output.placeholders += 1
            return UnknownComponent(type_name=node.type, key=node_id)

        spec = get_spec(kind)
        props = normalize_props(spec, node.props)

        if not spec.accepts_children:
            if node.child_ids:
                logger.debug("render_children_ignored", node_id=node_id, type=node.type)
            return RenderedComponent(kind=kind, key=node_id, props=props)

        children: list[RenderedNode] = []
        for child_id in node.child_ids:
            child = tree.elements.get(child_id)
            if child is None:
                logger.debug("render_child_missing", node_id=node_id, child_id=child_id)
                output.skipped.append(child_id)
                continue
            if child_id in path:
                logger.warning("render_cycle_omitted", node_id=node_id, child_id=child_id)
                output.skipped.append(child_id)
                continue
            if len(path) >= self.max_depth:
                logger.warning("render_depth_exceeded", node_id=node_id, child_id=child_id, max_depth=self.max_depth)
                output.skipped.append(child_id)
                continue
            if output.rendered >= self.max_nodes:
                if not output.truncated:
                    logger.warning("render_node_limit_reached", node_id=node_id, max_nodes=self.max_nodes)
                    output.truncated = True
                output.skipped.append(child_id)
                continue
            children.append(self._render_node(tree, child_id, child, path + (child_id,), output))

        return RenderedComponent(kind=kind, key=node_id, props=props, children=tuple(children))


def render(tree: UITree, max_depth: int = DEFAULT_MAX_DEPTH, max_nodes: int = DEFAULT_MAX_NODES) -> RenderOutput:
    """Interpret a tree; never raises on structural problems."""
    return Renderer(max_depth, max_nodes).render(tree)


def to_html(output: RenderOutput) -> str:
    """
    Serialize rendered output to static markup.

    Each component becomes an element tagged with its type and key, with its
    normalized props attached as sorted JSON so identical trees produce
    identical markup.
    """
    if isinstance(output.root, InvalidTree):
        return f'<div class="vk-invalid" role="alert">{html.escape(output.root.reason)}</div>'
    return _node_html(output.root)


def _node_html(node: RenderedNode) -> str:
    if isinstance(node, UnknownComponent):
        return (
            f'<div class="vk-unknown" data-key="{html.escape(node.key)}" '
            f'data-type="{html.escape(node.type_name)}">'
            f"Unknown component: {html.escape(node.type_name) or '(empty)'}</div>"
        )

    props = html.escape(safe_json_dumps(node.props, sort_keys=True))
    inner = "".join(_node_html(child) for child in node.children)
    return (
        f'<div class="vk-component" data-component="{node.kind.value}" '
        f'data-key="{html.escape(node.key)}" data-props="{props}">{inner}</div>'
    )
