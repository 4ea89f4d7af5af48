"""Transforms from a size tree node to the bounded datasets each view draws.

Every transform filters out empty children, ranks the rest by size (largest
first, ties keep their input order) and keeps only the top entries. Dropped
siblings are not folded into a remainder entry.
"""

from dataclasses import dataclass, field
from typing import Optional, Union

from diskscope.formatting import clamp, color_for_index, format_bytes, truncate
from diskscope.models import DirectoryNode, FileNode

Node = Union[DirectoryNode, FileNode]

TREEMAP_LIMIT = 15
SUNBURST_INNER_LIMIT = 8
SUNBURST_OUTER_LIMIT = 6
SUNBURST_LEVEL_STRIDE = 8
BARCHART_LIMIT = 20
BAR_NAME_CHARS = 25
LIST_LIMIT = 20
LIST_EXPANDED_DEPTH = 2
MAX_TRAVERSAL_DEPTH = 64


def rank_children(node: Optional[Node], limit: int) -> list[Node]:
    """
    Largest non-empty children of a node.

    Args:
        node: Node whose children to rank (None gives an empty list)
        limit: Maximum number of children to keep

    Returns:
        New list, at most ``limit`` long, sorted by size descending
    """
    if node is None or limit <= 0:
        return []
    kept = [child for child in node.children if child.size > 0]
    kept.sort(key=lambda child: child.size, reverse=True)
    return kept[:limit]


@dataclass(frozen=True)
class TreemapEntry:
    name: str
    size: int
    path: str
    is_dir: bool
    formatted_size: str
    color: str


def project_treemap(node: Optional[Node], limit: int = TREEMAP_LIMIT) -> list[TreemapEntry]:
    """
    One level of the largest children, as treemap leaves.

    A node without children is returned as the only entry so files and empty
    directories still draw something.
    """
    if node is None:
        return []
    if not node.children:
        return [
            TreemapEntry(
                name=node.name,
                size=node.size,
                path=node.path,
                is_dir=node.is_dir,
                formatted_size=format_bytes(node.size),
                color=color_for_index(0),
            )
        ]
    return [
        TreemapEntry(
            name=child.name,
            size=child.size,
            path=child.path,
            is_dir=child.is_dir,
            formatted_size=format_bytes(child.size),
            color=color_for_index(index),
        )
        for index, child in enumerate(rank_children(node, limit))
    ]


@dataclass(frozen=True)
class SunburstEntry:
    name: str
    value: int
    path: str
    level: int
    index: int
    parent_path: str
    color: str

    @property
    def formatted_size(self) -> str:
        return format_bytes(self.value)


@dataclass(frozen=True)
class SunburstProjection:
    """Two concentric rings; list order is angular order."""

    inner: list[SunburstEntry] = field(default_factory=list)
    outer: list[SunburstEntry] = field(default_factory=list)

    @property
    def inner_total(self) -> int:
        return sum(entry.value for entry in self.inner)

    @property
    def outer_total(self) -> int:
        return sum(entry.value for entry in self.outer)


def _ring(node: Node, level: int, limit: int) -> list[SunburstEntry]:
    return [
        SunburstEntry(
            name=child.name,
            value=child.size,
            path=child.path,
            level=level,
            index=index,
            parent_path=node.path,
            color=color_for_index(level * SUNBURST_LEVEL_STRIDE + index),
        )
        for index, child in enumerate(rank_children(node, limit))
    ]


def project_sunburst(
    node: Optional[Node],
    inner_limit: int = SUNBURST_INNER_LIMIT,
    outer_limit: int = SUNBURST_OUTER_LIMIT,
) -> SunburstProjection:
    """
    Inner ring of the largest children and an outer ring of their children.

    The outer ring concatenates each inner entry's ranked children in inner
    ring order, so slices line up with their parents.
    """
    if node is None:
        return SunburstProjection()

    inner_nodes = rank_children(node, inner_limit)
    inner = _ring(node, 0, inner_limit)
    outer: list[SunburstEntry] = []
    for child in inner_nodes:
        outer.extend(_ring(child, 1, outer_limit))
    return SunburstProjection(inner=inner, outer=outer)


@dataclass(frozen=True)
class BarEntry:
    name: str
    size: int
    path: str
    formatted_size: str
    color: str


def project_barchart(node: Optional[Node], limit: int = BARCHART_LIMIT) -> list[BarEntry]:
    """Flat ranking of immediate children with display-ready sizes."""
    return [
        BarEntry(
            name=truncate(child.name or "Unknown", BAR_NAME_CHARS),
            size=child.size,
            path=child.path,
            formatted_size=format_bytes(child.size),
            color=color_for_index(index),
        )
        for index, child in enumerate(rank_children(node, limit))
    ]


@dataclass(frozen=True)
class ListRow:
    name: str
    path: str
    size: int
    formatted_size: str
    depth: int
    is_dir: bool
    expandable: bool
    expanded: bool
    share: float


class ListProjection:
    """
    Expandable list over the whole tree.

    Each node lists at most ``limit`` children. Expansion state is kept per
    path; nodes start expanded above depth 2 and collapsed below it.
    Children are ranked on first visit only.
    """

    def __init__(
        self,
        root: Optional[Node],
        limit: int = LIST_LIMIT,
        max_depth: int = MAX_TRAVERSAL_DEPTH,
    ):
        self.root = root
        self.limit = limit
        self.max_depth = max_depth
        self._expanded: dict[str, bool] = {}
        self._ranked: dict[int, list[Node]] = {}
        self._depths: dict[str, int] = {}

    def children_of(self, node: Node) -> list[Node]:
        key = id(node)
        if key not in self._ranked:
            self._ranked[key] = rank_children(node, self.limit)
        return self._ranked[key]

    def is_expanded(self, path: str, depth: int) -> bool:
        return self._expanded.get(path, depth < LIST_EXPANDED_DEPTH)

    def toggle(self, path: str) -> bool:
        """Flip one node's expansion. Returns the new state."""
        depth = self._depths.get(path)
        if depth is None:
            depth = self._find_depth(path)
        expanded = not self.is_expanded(path, depth if depth is not None else LIST_EXPANDED_DEPTH)
        self._expanded[path] = expanded
        return expanded

    def _find_depth(self, path: str) -> Optional[int]:
        if self.root is None:
            return None
        stack = [(self.root, 0)]
        while stack:
            node, depth = stack.pop()
            if node.path == path:
                return depth
            if depth < self.max_depth:
                stack.extend((child, depth + 1) for child in self.children_of(node))
        return None

    def rows(self) -> list[ListRow]:
        """Visible rows in display order."""
        if self.root is None:
            return []

        root_size = self.root.size
        rows: list[ListRow] = []
        stack = [(self.root, 0)]
        while stack:
            node, depth = stack.pop()
            self._depths[node.path] = depth
            children = self.children_of(node) if depth < self.max_depth else []
            expandable = node.is_dir and bool(children)
            expanded = expandable and self.is_expanded(node.path, depth)
            share = clamp(node.size / root_size, 0.0, 1.0) if root_size > 0 else 0.0
            rows.append(
                ListRow(
                    name=node.name,
                    path=node.path,
                    size=node.size,
                    formatted_size=format_bytes(node.size),
                    depth=depth,
                    is_dir=node.is_dir,
                    expandable=expandable,
                    expanded=expanded,
                    share=share,
                )
            )
            if expanded:
                stack.extend((child, depth + 1) for child in reversed(children))
        return rows


def project_list(node: Optional[Node], limit: int = LIST_LIMIT) -> ListProjection:
    return ListProjection(node, limit=limit)
