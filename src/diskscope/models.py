"""Data models for diskscope."""

from collections.abc import Iterator, Mapping
from typing import Annotated, Any, Literal, Optional, Union

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field

# Deepest level parse_tree keeps children for (root is depth 0)
MAX_TREE_DEPTH = 256


class FileNode(BaseModel):
    """A regular file in the size tree."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["file"] = "file"
    name: str = Field("", description="Display label")
    path: str = Field("", description="Absolute path, unique within one scan")
    size: int = Field(0, ge=0, description="Size in bytes")

    @property
    def is_dir(self) -> bool:
        return False

    @property
    def children(self) -> tuple["SizeNode", ...]:
        return ()


class DirectoryNode(BaseModel):
    """A directory in the size tree.

    ``size`` is the backend's aggregate for the whole subtree. It is never
    recomputed from ``children``, which may be truncated.
    """

    model_config = ConfigDict(frozen=True)

    kind: Literal["directory"] = "directory"
    name: str = Field("", description="Display label")
    path: str = Field("", description="Absolute path, unique within one scan")
    size: int = Field(0, ge=0, description="Aggregate size in bytes")
    children: tuple["SizeNode", ...] = Field(default_factory=tuple)

    @property
    def is_dir(self) -> bool:
        return True


SizeNode = Annotated[Union[DirectoryNode, FileNode], Field(discriminator="kind")]

DirectoryNode.model_rebuild()


class ScanResult(BaseModel):
    """Result of scanning one directory tree."""

    model_config = ConfigDict(frozen=True)

    root: SizeNode
    total_size: int = Field(0, ge=0, description="Total bytes counted")
    file_count: int = Field(0, ge=0, description="Number of files counted")
    error_count: int = Field(0, ge=0, description="Entries that could not be read")

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "ScanResult":
        """Build a result from loosely-typed backend data."""
        return cls(
            root=parse_tree(payload.get("root")),
            total_size=_coerce_count(payload.get("total_size")),
            file_count=_coerce_count(payload.get("file_count")),
            error_count=_coerce_count(payload.get("error_count")),
        )


class ScanProgress(BaseModel):
    """A progress frame streamed while a scan runs. Only the latest one matters."""

    model_config = ConfigDict(frozen=True)

    current_path: str = ""
    files_processed: int = 0
    total_size_so_far: int = 0
    estimated_total: Optional[int] = None


class NodeSnapshot(BaseModel):
    """By-value copy of the node fields a context menu shows."""

    model_config = ConfigDict(frozen=True)

    name: str
    path: str
    size: int = 0
    is_dir: bool = False
    child_count: int = 0

    @classmethod
    def from_node(cls, node: Union[DirectoryNode, FileNode]) -> "NodeSnapshot":
        return cls(
            name=node.name,
            path=node.path,
            size=node.size,
            is_dir=node.is_dir,
            child_count=len(node.children),
        )


class ContextMenuState(BaseModel):
    """Visible context menu and the node it was opened on."""

    model_config = ConfigDict(frozen=True)

    visible: bool = False
    x: int = 0
    y: int = 0
    target: Optional[NodeSnapshot] = None


class MutationResult(BaseModel):
    """Result of a delete, open or copy operation."""

    action: str = Field(..., description="Operation name")
    path: str = Field(..., description="Path the operation targeted")
    success: bool = Field(True, description="Whether the operation succeeded")
    error: Optional[str] = Field(None, description="Error message if failed")
    cancelled: bool = Field(False, description="Whether the user declined")


def _coerce_count(value: Any) -> int:
    if isinstance(value, bool):
        return 0
    try:
        number = int(value)
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(number, 0)


class _Frame:
    """Work-list entry for parse_tree."""

    __slots__ = ("raw", "depth", "pending", "built")

    def __init__(self, raw: Mapping[str, Any], depth: int, pending: Iterator[Any]):
        self.raw = raw
        self.depth = depth
        self.pending = pending
        self.built: list[Union[DirectoryNode, FileNode]] = []


def _raw_children(raw: Mapping[str, Any]) -> list[Any]:
    children = raw.get("children")
    if not isinstance(children, (list, tuple)):
        return []
    return [c for c in children if isinstance(c, (Mapping, DirectoryNode, FileNode))]


def _is_directory(raw: Mapping[str, Any], children: list[Any]) -> bool:
    kind = raw.get("kind")
    if kind in ("directory", "file"):
        return kind == "directory"
    is_dir = raw.get("is_dir")
    if isinstance(is_dir, bool):
        return is_dir
    return bool(children)


def parse_tree(payload: Any, max_depth: int = MAX_TREE_DEPTH) -> Union[DirectoryNode, FileNode]:
    """
    Build a validated size tree from loosely-typed backend data.

    Walks the payload with an explicit stack, so pathological nesting cannot
    exhaust the call stack. Malformed fields fall back to safe defaults.

    Args:
        payload: Mapping with ``name``, ``path``, ``size``, ``is_dir`` and
            ``children`` keys (any may be missing), or an already built node
        max_depth: Nodes at this depth keep no children

    Returns:
        The root node of the tree
    """
    if isinstance(payload, (DirectoryNode, FileNode)):
        return payload
    if not isinstance(payload, Mapping):
        payload = {}

    dropped = 0

    def make_frame(raw: Mapping[str, Any], depth: int) -> _Frame:
        nonlocal dropped
        children = _raw_children(raw)
        if depth >= max_depth and children:
            dropped += len(children)
            children = []
        return _Frame(raw, depth, iter(children))

    stack = [make_frame(payload, 0)]
    while True:
        frame = stack[-1]
        child = next(frame.pending, None)
        if child is not None:
            if isinstance(child, (DirectoryNode, FileNode)):
                frame.built.append(child)
            else:
                stack.append(make_frame(child, frame.depth + 1))
            continue

        stack.pop()
        node = _build_node(frame)
        if not stack:
            if dropped:
                logger.warning(f"Size tree deeper than {max_depth} levels, dropped {dropped} entries")
            return node
        stack[-1].built.append(node)


def _build_node(frame: _Frame) -> Union[DirectoryNode, FileNode]:
    raw = frame.raw
    name = raw.get("name")
    path = raw.get("path")
    fields = {
        "name": name if isinstance(name, str) else "",
        "path": path if isinstance(path, str) else "",
        "size": _coerce_count(raw.get("size")),
    }
    if _is_directory(raw, _raw_children(raw)):
        return DirectoryNode(children=tuple(frame.built), **fields)
    return FileNode(**fields)


def find_node(
    root: Union[DirectoryNode, FileNode, None], path: str
) -> Union[DirectoryNode, FileNode, None]:
    """Find the node with the given path, or None."""
    if root is None:
        return None
    stack = [root]
    while stack:
        node = stack.pop()
        if node.path == path:
            return node
        stack.extend(reversed(node.children))
    return None
