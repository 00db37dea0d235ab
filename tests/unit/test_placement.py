"""Tests for grid snapping and free-space search."""

from __future__ import annotations

import pytest

from tuidesigner.core.ir import Dimensions, Position, Size, Widget
from tuidesigner.layout import can_place, find_free_space, rectangles_overlap, snap_to_grid


def box(x: int, y: int, width: int, height: int) -> Widget:
    return Widget(
        id=f"w{x}_{y}",
        type="text",
        position=Position(x=x, y=y),
        size=Size(width=width, height=height),
    )


class TestSnapToGrid:
    @pytest.mark.parametrize(
        ("x", "y", "grid", "expected"),
        [
            (0, 0, 4, (0, 0)),
            (5, 6, 4, (4, 8)),
            (2, 2, 4, (4, 4)),
            (1.9, 1, 4, (0, 0)),
            (13, 27, 5, (15, 25)),
            (7, 7, 1, (7, 7)),
        ],
    )
    def test_rounds_to_nearest_multiple(self, x, y, grid, expected) -> None:
        assert snap_to_grid(x, y, grid) == expected

    def test_half_rounds_up(self) -> None:
        # 6 / 4 = 1.5 and 10 / 4 = 2.5 both round up
        assert snap_to_grid(6, 10, 4) == (8, 12)


class TestRectanglesOverlap:
    def test_overlapping(self) -> None:
        assert rectangles_overlap(box(0, 0, 10, 10), box(5, 5, 10, 10))

    def test_contained(self) -> None:
        assert rectangles_overlap(box(0, 0, 20, 20), box(5, 5, 2, 2))

    def test_shared_edge(self) -> None:
        assert not rectangles_overlap(box(0, 0, 10, 10), box(10, 0, 10, 10))
        assert not rectangles_overlap(box(0, 0, 10, 10), box(0, 10, 10, 10))

    def test_shared_corner(self) -> None:
        assert not rectangles_overlap(box(0, 0, 10, 10), box(10, 10, 5, 5))

    def test_symmetric(self) -> None:
        a, b = box(0, 0, 10, 10), box(9, 9, 3, 3)
        assert rectangles_overlap(a, b) == rectangles_overlap(b, a)


class TestCanPlace:
    def test_free_and_inside(self) -> None:
        bounds = Dimensions(width=40, height=20)
        assert can_place([box(0, 0, 10, 10)], Position(x=10, y=0), Size(width=10, height=10), bounds)

    def test_outside_bounds(self) -> None:
        bounds = Dimensions(width=40, height=20)
        assert not can_place([], Position(x=35, y=0), Size(width=10, height=5), bounds)

    def test_occupied(self) -> None:
        bounds = Dimensions(width=40, height=20)
        assert not can_place([box(0, 0, 10, 10)], Position(x=5, y=5), Size(width=5, height=5), bounds)


class TestFindFreeSpace:
    def test_preferred_position_when_free(self) -> None:
        bounds = Dimensions(width=40, height=20)
        preferred = Position(x=12, y=4)
        result = find_free_space([], Size(width=10, height=5), preferred, bounds)
        assert result == preferred

    def test_nearest_ring_east_first(self) -> None:
        bounds = Dimensions(width=40, height=20)
        existing = [box(0, 0, 10, 10)]
        result = find_free_space(existing, Size(width=10, height=10), Position(x=0, y=0), bounds)
        assert result == Position(x=10, y=0)

    def test_result_is_placeable(self) -> None:
        bounds = Dimensions(width=60, height=30)
        existing = [box(10, 10, 20, 10), box(30, 10, 10, 10)]
        size = Size(width=8, height=6)
        result = find_free_space(existing, size, Position(x=15, y=12), bounds)
        assert result is not None
        assert can_place(existing, result, size, bounds)

    def test_full_canvas(self) -> None:
        bounds = Dimensions(width=40, height=20)
        existing = [box(0, 0, 40, 20)]
        assert find_free_space(existing, Size(width=5, height=5), Position(x=0, y=0), bounds) is None

    def test_deterministic(self) -> None:
        bounds = Dimensions(width=60, height=30)
        existing = [box(10, 10, 20, 10)]
        size = Size(width=8, height=6)
        first = find_free_space(existing, size, Position(x=12, y=12), bounds)
        second = find_free_space(existing, size, Position(x=12, y=12), bounds)
        assert first == second

    def test_candidate_larger_than_canvas(self) -> None:
        bounds = Dimensions.model_construct(width=4, height=4)
        size = Size(width=8, height=8)
        assert find_free_space([], size, Position(x=0, y=0), bounds) is None
