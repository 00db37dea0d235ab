"""
Placement engine used by the design editor.

Provides grid snapping and collision-free placement search.
"""

from .placement import (
    can_place,
    find_free_space,
    rectangles_overlap,
    snap_to_grid,
)

__all__ = [
    "can_place",
    "find_free_space",
    "rectangles_overlap",
    "snap_to_grid",
]
