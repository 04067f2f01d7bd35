"""Forest construction and layout for flat category lists."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from category_versions.schemas.category import Category

logger = logging.getLogger(__name__)

NODE_WIDTH = 150
NODE_HEIGHT = 40
HORIZONTAL_SPACING = 15
VERTICAL_SPACING = 60
TOP_OFFSET = 50


@dataclass
class CategoryNode:
    """A category with its resolved children."""

    category: Category
    children: list["CategoryNode"] = field(default_factory=list)

    @property
    def is_leaf(self) -> bool:
        return not self.children

    def count(self) -> int:
        """Number of nodes in this subtree, itself included."""
        return 1 + sum(child.count() for child in self.children)


@dataclass
class NodeLayout:
    """Position of a node box in the graph view."""

    category: Category
    x: float
    y: float
    width: float
    children: list["NodeLayout"] = field(default_factory=list)


def build_tree(categories: Sequence[Category]) -> list[CategoryNode]:
    """Build a forest from a flat category list.

    Nodes are indexed by ``id`` or ``temp_id`` and attached to the node their
    ``parent_id`` or ``parent_temp_id`` resolves to. A node whose parent is
    missing from the list becomes a root. Input order is kept among roots and
    among the children of each parent.
    """
    nodes = {c.key: CategoryNode(category=c) for c in categories}
    parents: dict[str, str] = {}
    roots: list[CategoryNode] = []

    for c in categories:
        node = nodes[c.key]
        parent_key = c.parent_key
        parent = nodes.get(parent_key) if parent_key else None
        if parent is None or parent_key == c.key:
            if parent_key:
                logger.warning(
                    f"Category {c.key} references missing parent {parent_key}; shown as root"
                )
            roots.append(node)
            continue
        parent.children.append(node)
        parents[c.key] = parent_key

    _break_cycles(categories, nodes, parents, roots)
    return roots


def _break_cycles(
    categories: Sequence[Category],
    nodes: dict[str, CategoryNode],
    parents: dict[str, str],
    roots: list[CategoryNode],
) -> None:
    """Promote nodes caught in parent cycles to roots so none is dropped."""
    reachable: set[str] = set()

    def mark(node: CategoryNode) -> None:
        stack = [node]
        while stack:
            current = stack.pop()
            reachable.add(current.category.key)
            stack.extend(current.children)

    for root in roots:
        mark(root)

    for c in categories:
        if c.key in reachable:
            continue
        node = nodes[c.key]
        parent = nodes[parents[c.key]]
        parent.children = [child for child in parent.children if child is not node]
        logger.warning(f"Category {c.key} is part of a parent cycle; shown as root")
        roots.append(node)
        mark(node)


def flatten_tree(forest: Sequence[CategoryNode]) -> list[tuple[CategoryNode, int]]:
    """Depth-first rows of ``(node, depth)`` for an indented list view."""
    rows: list[tuple[CategoryNode, int]] = []

    def visit(node: CategoryNode, depth: int) -> None:
        rows.append((node, depth))
        for child in node.children:
            visit(child, depth + 1)

    for root in forest:
        visit(root, 0)
    return rows


def layout_tree(forest: Sequence[CategoryNode]) -> list[NodeLayout]:
    """Compute box positions for the graph view.

    Each subtree is measured from its children, then its parent is centered
    above them. Sibling subtrees are placed side by side so they never
    overlap, and separate root trees get a double gap.
    """

    def place(node: CategoryNode, depth: int, start_x: float) -> NodeLayout:
        children: list[NodeLayout] = []
        current_x = start_x
        total_width = 0.0

        if node.is_leaf:
            total_width = NODE_WIDTH + HORIZONTAL_SPACING
        else:
            for child in node.children:
                child_layout = place(child, depth + 1, current_x)
                children.append(child_layout)
                current_x += child_layout.width
                total_width += child_layout.width

        x = start_x + (total_width - HORIZONTAL_SPACING) / 2 - NODE_WIDTH / 2
        return NodeLayout(
            category=node.category,
            x=x,
            y=depth * VERTICAL_SPACING + TOP_OFFSET,
            width=total_width,
            children=children,
        )

    layouts = []
    root_x = 0.0
    for root in forest:
        layout = place(root, 0, root_x)
        layouts.append(layout)
        root_x += layout.width + HORIZONTAL_SPACING * 2
    return layouts
