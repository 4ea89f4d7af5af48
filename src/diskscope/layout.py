"""Squarified treemap layout for treemap entries."""

from dataclasses import dataclass
from typing import Sequence

from diskscope.projector import TreemapEntry


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    w: float
    h: float


def _aspect(areas: list[float], side: float) -> float:
    """Worst cell aspect ratio of a strip of ``areas`` laid along ``side``."""
    total = sum(areas)
    if not areas or total <= 0 or side <= 0:
        return float("inf")
    thickness = total / side
    square = thickness * thickness
    return max(max(a / square, square / a) for a in areas)


def _place_strip(areas: list[float], bounds: Rect) -> tuple[list[Rect], Rect]:
    """Lay a strip against the shorter side of ``bounds``; returns its cells and the free space."""
    total = sum(areas)
    cells: list[Rect] = []
    if bounds.w >= bounds.h:
        # column on the left edge
        thickness = total / bounds.h if bounds.h > 0 else 0.0
        y = bounds.y
        for area in areas:
            length = area / thickness if thickness > 0 else 0.0
            cells.append(Rect(bounds.x, y, thickness, length))
            y += length
        rest = Rect(bounds.x + thickness, bounds.y, max(0.0, bounds.w - thickness), bounds.h)
    else:
        # row along the top edge
        thickness = total / bounds.w if bounds.w > 0 else 0.0
        x = bounds.x
        for area in areas:
            length = area / thickness if thickness > 0 else 0.0
            cells.append(Rect(x, bounds.y, length, thickness))
            x += length
        rest = Rect(bounds.x, bounds.y + thickness, bounds.w, max(0.0, bounds.h - thickness))
    return cells, rest


def squarify(entries: Sequence[TreemapEntry], w: float, h: float) -> list[tuple[Rect, TreemapEntry]]:
    """
    Lay out entries as rectangles filling a w x h area.

    Entries must already be ranked largest first; empty entries are skipped.
    Areas are proportional to size.
    """
    entries = [entry for entry in entries if entry.size > 0]
    total = sum(entry.size for entry in entries)
    if not entries or w <= 0 or h <= 0:
        return []

    scale = w * h / total
    bounds = Rect(0.0, 0.0, w, h)
    placed: list[tuple[Rect, TreemapEntry]] = []
    strip: list[TreemapEntry] = []

    def areas(group: list[TreemapEntry]) -> list[float]:
        return [entry.size * scale for entry in group]

    for entry in entries:
        side = min(bounds.w, bounds.h)
        if strip and _aspect(areas(strip + [entry]), side) > _aspect(areas(strip), side):
            cells, bounds = _place_strip(areas(strip), bounds)
            placed.extend(zip(cells, strip))
            strip = []
        strip.append(entry)

    if strip:
        cells, bounds = _place_strip(areas(strip), bounds)
        placed.extend(zip(cells, strip))
    return placed
