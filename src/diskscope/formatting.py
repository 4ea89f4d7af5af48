"""Byte formatting, label fitting and colours shared by every view."""

from dataclasses import dataclass
from typing import Optional

UNITS = ("B", "KB", "MB", "GB", "TB")
KIBI = 1024

# Colours assigned by rank; immutable so every view sees the same table
PALETTE = (
    "#3b82f6",
    "#10b981",
    "#f59e0b",
    "#ef4444",
    "#8b5cf6",
    "#06b6d4",
    "#84cc16",
    "#f97316",
    "#ec4899",
    "#6366f1",
    "#14b8a6",
    "#eab308",
    "#f43f5e",
    "#a855f7",
    "#22c55e",
)

# Label-fit thresholds, in pixels of the shape the label is drawn on
LABEL_MIN_WIDTH = 40
LABEL_MIN_HEIGHT = 30
NAME_MIN_WIDTH = 50
NAME_MIN_HEIGHT = 35
SIZE_MIN_HEIGHT = 50
COMPACT_WIDTH = 120
COMPACT_HEIGHT = 60
COMPACT_NAME_CHARS = 12
FULL_NAME_CHARS = 20
FONT_SCALE = 8
MIN_FONT_SIZE = 10
MAX_FONT_SIZE = 16
ELLIPSIS = "..."


def format_bytes(size_bytes: int) -> str:
    """
    Format a byte count with binary units.

    Args:
        size_bytes: Non-negative number of bytes

    Returns:
        String like "512.0 MB"; "0 B" for zero
    """
    if size_bytes <= 0:
        return "0 B"

    exponent = 0
    while exponent < len(UNITS) - 1 and size_bytes >= KIBI ** (exponent + 1):
        exponent += 1
    return f"{size_bytes / KIBI**exponent:.1f} {UNITS[exponent]}"


def color_for_index(index: int) -> str:
    """Palette colour for a rank position."""
    return PALETTE[index % len(PALETTE)]


def truncate(name: str, max_chars: int) -> str:
    """Cut a name to max_chars characters, marking the cut with an ellipsis."""
    if len(name) > max_chars:
        return name[:max_chars] + ELLIPSIS
    return name


def clamp(value: float, lo: float, hi: float) -> float:
    return lo if value < lo else hi if value > hi else value


@dataclass(frozen=True)
class LabelFit:
    """What text fits on a shape, and how large to draw it."""

    name: str
    size_text: Optional[str]
    font_size: float


def font_size_for(width: float, height: float) -> float:
    """Font size growing with the shorter side, clamped to a readable range."""
    return clamp(min(width, height) / FONT_SCALE, MIN_FONT_SIZE, MAX_FONT_SIZE)


def fit_label(name: str, size_bytes: int, width: float, height: float) -> Optional[LabelFit]:
    """
    Decide which text to draw over a treemap cell or sunburst slice.

    Args:
        name: Node name
        size_bytes: Node size, shown below the name when there is room
        width: Shape width
        height: Shape height

    Returns:
        LabelFit, or None when the shape is too small for any text
    """
    if width < LABEL_MIN_WIDTH or height < LABEL_MIN_HEIGHT:
        return None
    if not (width > NAME_MIN_WIDTH and height > NAME_MIN_HEIGHT):
        return None

    compact = width < COMPACT_WIDTH or height < COMPACT_HEIGHT
    max_chars = COMPACT_NAME_CHARS if compact else FULL_NAME_CHARS
    size_text = format_bytes(size_bytes) if height > SIZE_MIN_HEIGHT else None
    return LabelFit(
        name=truncate(name or "", max_chars),
        size_text=size_text,
        font_size=font_size_for(width, height),
    )
