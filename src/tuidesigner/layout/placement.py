"""
Grid snapping and collision-free widget placement.

These are the two operations the design editor calls while the user drags
or drops widgets. Everything here is pure and deterministic: the same
inputs always give the same answer.

Rectangles use half-open intervals, so widgets that only share an edge or
a corner do not overlap.
"""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Protocol

from tuidesigner.core.ir import Position, Size


class Placed(Protocol):
    """Anything with a position and a size (widgets, candidate boxes)."""

    @property
    def position(self) -> Position: ...

    @property
    def size(self) -> Size: ...


class Bounds(Protocol):
    @property
    def width(self) -> int: ...

    @property
    def height(self) -> int: ...


# Radial search visits 8 compass directions per ring
SEARCH_ANGLES = tuple(range(0, 360, 45))


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def snap_to_grid(x: float, y: float, grid_size: int) -> tuple[int, int]:
    """Round each coordinate to the nearest multiple of ``grid_size``."""
    return (
        _round_half_up(x / grid_size) * grid_size,
        _round_half_up(y / grid_size) * grid_size,
    )


def _overlap(
    x1: int, y1: int, w1: int, h1: int, x2: int, y2: int, w2: int, h2: int
) -> bool:
    return not (x1 + w1 <= x2 or x2 + w2 <= x1 or y1 + h1 <= y2 or y2 + h2 <= y1)


def rectangles_overlap(a: Placed, b: Placed) -> bool:
    """Whether two placed rectangles share any interior cell."""
    return _overlap(
        a.position.x,
        a.position.y,
        a.size.width,
        a.size.height,
        b.position.x,
        b.position.y,
        b.size.width,
        b.size.height,
    )


def _fits(x: int, y: int, size: Size, bounds: Bounds) -> bool:
    return x >= 0 and y >= 0 and x + size.width <= bounds.width and y + size.height <= bounds.height


def _is_free(x: int, y: int, size: Size, existing: Sequence[Placed]) -> bool:
    return not any(
        _overlap(
            x,
            y,
            size.width,
            size.height,
            other.position.x,
            other.position.y,
            other.size.width,
            other.size.height,
        )
        for other in existing
    )


def can_place(existing: Sequence[Placed], position: Position, size: Size, bounds: Bounds) -> bool:
    """Whether ``size`` at ``position`` is inside ``bounds`` and overlaps nothing."""
    return _fits(position.x, position.y, size, bounds) and _is_free(
        position.x, position.y, size, existing
    )


def find_free_space(
    existing: Sequence[Placed],
    size: Size,
    preferred: Position,
    bounds: Bounds,
) -> Position | None:
    """
    Find the nearest free spot for a widget of ``size``.

    The preferred position wins if it is free. Otherwise rings of growing
    radius around it are searched, 8 candidates per ring at 45 degree
    steps starting east. Radii run from 1 up to, but not including, the
    larger bounds dimension.

    Args:
        existing: Widgets already on the canvas
        size: Size of the widget being placed
        preferred: Where the user dropped it
        bounds: Canvas dimensions

    Returns:
        The first free position found, or None if nothing fits
    """
    if can_place(existing, preferred, size, bounds):
        return preferred

    max_radius = max(bounds.width, bounds.height)
    for radius in range(1, max_radius):
        for angle in SEARCH_ANGLES:
            theta = math.radians(angle)
            x = _round_half_up(preferred.x + radius * math.cos(theta))
            y = _round_half_up(preferred.y + radius * math.sin(theta))
            if _fits(x, y, size, bounds) and _is_free(x, y, size, existing):
                return Position(x=x, y=y)

    return None
