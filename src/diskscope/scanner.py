"""Directory walker that produces the size tree for diskscope."""

import os
import sys
import time
from pathlib import Path
from typing import Callable, Optional, Union

from loguru import logger

from diskscope.errors import ScanError
from diskscope.models import DirectoryNode, FileNode, ScanProgress, ScanResult

DEFAULT_MAX_DEPTH = 4
MAX_FILES = 50_000  # Stop after this many files
MAX_SCAN_SECONDS = 300.0
MAX_CHILDREN = 100  # Largest entries kept per directory
PROGRESS_INTERVAL = 0.1

ProgressCallback = Callable[[ScanProgress], None]


def default_scan_path() -> str:
    """Platform default scan root."""
    if sys.platform.startswith("win"):
        return "C:\\"
    return "/home"


def expand_path(path: str) -> Path:
    """Expand ~ and environment variables in path."""
    return Path(os.path.expanduser(os.path.expandvars(path)))


class _DirFrame:
    """A directory being walked: listed entries wait in ``pending``."""

    __slots__ = ("path", "name", "depth", "pending", "children", "size")

    def __init__(self, path: str, name: str, depth: int):
        self.path = path
        self.name = name
        self.depth = depth
        self.pending: list[tuple[str, str]] = []
        self.children: list[Union[DirectoryNode, FileNode]] = []
        self.size = 0

    def build(self, max_children: int) -> DirectoryNode:
        children = sorted(self.children, key=lambda c: c.size, reverse=True)[:max_children]
        return DirectoryNode(name=self.name, path=self.path, size=self.size, children=tuple(children))


def _display_name(path: str) -> str:
    return os.path.basename(path.rstrip("\\/")) or path


def scan_directory(
    path: Optional[str] = None,
    progress: Optional[ProgressCallback] = None,
    max_depth: int = DEFAULT_MAX_DEPTH,
    max_files: int = MAX_FILES,
    max_seconds: float = MAX_SCAN_SECONDS,
    max_children: int = MAX_CHILDREN,
) -> ScanResult:
    """
    Walk a directory tree and measure it.

    Uses os.scandir with an explicit stack; symlinks are not followed.
    Unreadable entries are counted in ``error_count`` and skipped.

    Args:
        path: Directory to scan (platform default when None)
        progress: Optional callback receiving ScanProgress frames
        max_depth: Directories at this depth are kept but not read
        max_files: Stop counting after this many files
        max_seconds: Stop walking after this many seconds
        max_children: Largest entries kept per directory in the tree

    Returns:
        ScanResult with the size tree and totals

    Raises:
        ScanError: If the path does not exist
    """
    root_path = expand_path(path or default_scan_path())
    if not root_path.exists():
        raise ScanError(f"Path does not exist: {root_path}")

    root_str = str(root_path.absolute())
    if not root_path.is_dir():
        size = root_path.stat().st_size
        node = FileNode(name=_display_name(root_str), path=root_str, size=size)
        return ScanResult(root=node, total_size=size, file_count=1, error_count=0)

    total_size = 0
    file_count = 0
    error_count = 0
    started = time.monotonic()
    last_emit = 0.0
    stopped = False

    def emit(current: str) -> None:
        nonlocal last_emit
        if not progress:
            return
        now = time.monotonic()
        if now - last_emit >= PROGRESS_INTERVAL:
            last_emit = now
            progress(
                ScanProgress(
                    current_path=current,
                    files_processed=file_count,
                    total_size_so_far=total_size,
                )
            )

    def open_dir(dir_path: str, depth: int, name: str) -> _DirFrame:
        nonlocal total_size, file_count, error_count, stopped
        frame = _DirFrame(dir_path, name, depth)
        if depth >= max_depth:
            return frame
        try:
            with os.scandir(dir_path) as entries:
                for entry in entries:
                    if stopped:
                        break
                    try:
                        if entry.is_dir(follow_symlinks=False):
                            frame.pending.append((entry.path, entry.name))
                        elif entry.is_file(follow_symlinks=False):
                            size = entry.stat(follow_symlinks=False).st_size
                            frame.children.append(FileNode(name=entry.name, path=entry.path, size=size))
                            frame.size += size
                            total_size += size
                            file_count += 1
                            emit(entry.path)
                            if file_count >= max_files:
                                logger.warning(f"File limit of {max_files} reached, stopping scan")
                                stopped = True
                    except OSError:
                        error_count += 1
        except OSError as e:
            logger.debug(f"Cannot read {dir_path}: {e}")
            error_count += 1
        return frame

    stack = [open_dir(root_str, 0, _display_name(root_str))]
    root: Optional[DirectoryNode] = None
    while stack:
        frame = stack[-1]
        if not stopped and time.monotonic() - started > max_seconds:
            logger.warning(f"Scan time limit of {max_seconds:.0f}s reached, stopping scan")
            stopped = True

        if frame.pending and not stopped:
            child_path, child_name = frame.pending.pop()
            stack.append(open_dir(child_path, frame.depth + 1, child_name))
            continue

        stack.pop()
        node = frame.build(max_children)
        if stack:
            parent = stack[-1]
            parent.children.append(node)
            parent.size += node.size
        else:
            root = node

    logger.info(f"Scanned {root_str}: {file_count} files, {total_size} bytes, {error_count} errors")
    return ScanResult(
        root=root,
        total_size=total_size,
        file_count=file_count,
        error_count=error_count,
    )
