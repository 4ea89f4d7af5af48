"""File system side effects: reveal, copy path, delete with safety checks."""

import os
import shutil
import subprocess
import sys
from pathlib import Path

from loguru import logger

from diskscope.errors import MutationError
from diskscope.scanner import expand_path

# Paths that should NEVER be deleted
BLOCKED_PATHS = [
    "~",
    "~/Documents",
    "~/Desktop",
    "~/Pictures",
    "~/Music",
    "~/Movies",
    "/System",
    "/Library",
    "/Applications",
    "/usr",
    "/bin",
    "/sbin",
    "/etc",
    "/var",
    "/private",
    "/Users",
    "/home",
    "C:\\Windows",
    "C:\\Program Files",
    "C:\\Users",
]


def _normalized(path: Path) -> set[Path]:
    """Lexical and symlink-resolved forms of an absolute path."""
    expanded = path.expanduser()
    lexical = Path(os.path.normpath(os.path.abspath(expanded)))
    return {lexical, expanded.resolve(strict=False)}


def is_path_safe(path: Path) -> bool:
    """
    Check if a path is safe to delete.

    ``..`` segments and symlinks are resolved first. Filesystem roots and
    the exact blocked paths are refused; anything inside a blocked path is
    allowed.

    Args:
        path: Path to check

    Returns:
        True if safe to delete, False otherwise
    """
    if not str(path):
        return False

    blocked = set()
    for entry in BLOCKED_PATHS:
        blocked |= _normalized(expand_path(entry))

    for candidate in _normalized(path):
        if candidate.parent == candidate or candidate in blocked:
            return False

    return True


def delete_path(path: str) -> int:
    """
    Delete a file or directory tree.

    Args:
        path: Path to delete

    Returns:
        Number of bytes the deleted entry occupied (files only; 0 for directories)

    Raises:
        MutationError: If the path is missing, protected or cannot be removed
    """
    target = Path(path)
    if not target.exists() and not target.is_symlink():
        raise MutationError(f"No such file or folder: {path}")
    if not is_path_safe(target):
        raise MutationError(f"Refusing to delete protected path: {path}")

    try:
        if target.is_dir() and not target.is_symlink():
            shutil.rmtree(target)
            size = 0
        else:
            size = target.lstat().st_size
            target.unlink()
    except PermissionError as e:
        raise MutationError(f"Permission denied: {e}") from e
    except OSError as e:
        raise MutationError(f"OS error: {e}") from e

    logger.info(f"Deleted {path}")
    return size


def reveal_in_file_manager(path: str) -> None:
    """
    Open the system file manager at ``path``.

    Raises:
        MutationError: If the path is missing or no file manager could be started
    """
    target = os.path.abspath(path)
    if not os.path.exists(target):
        raise MutationError(f"No such file or folder: {path}")

    try:
        if sys.platform.startswith("win"):
            if os.path.isdir(target):
                os.startfile(target)  # type: ignore[attr-defined]
            else:
                subprocess.Popen(["explorer", "/select,", target])
        elif sys.platform == "darwin":
            subprocess.Popen(["open", "-R", target])
        else:
            folder = target if os.path.isdir(target) else os.path.dirname(target)
            subprocess.Popen(["xdg-open", folder])
    except OSError as e:
        raise MutationError(f"Could not open file manager: {e}") from e


def _clipboard_commands() -> list[list[str]]:
    if sys.platform == "darwin":
        return [["pbcopy"]]
    if os.name == "nt":
        return [["clip"]]
    return [
        ["wl-copy"],
        ["xclip", "-selection", "clipboard"],
        ["xsel", "--clipboard", "--input"],
    ]


def copy_to_clipboard(text: str) -> None:
    """
    Put ``text`` on the system clipboard.

    Raises:
        MutationError: If no clipboard tool is available or all of them fail
    """
    if not text:
        raise MutationError("Nothing to copy")

    try:
        data = os.fsencode(text)
    except UnicodeError as e:
        raise MutationError(f"Path cannot be encoded for the clipboard: {e}") from e

    tried = []
    for command in _clipboard_commands():
        if shutil.which(command[0]) is None:
            continue
        tried.append(command[0])
        try:
            proc = subprocess.run(command, input=data, check=False, timeout=5)
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.debug(f"{command[0]} failed: {e}")
            continue
        if proc.returncode == 0:
            return

    if not tried:
        raise MutationError("No clipboard tool available")
    raise MutationError(f"Clipboard copy failed ({', '.join(tried)})")
