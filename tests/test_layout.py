"""Tests for canvas collision and displacement."""

from dataclasses import dataclass

import pytest

from passage_graph.layout import (
    HEIGHT,
    PADDING,
    WIDTH,
    displace,
    find_overlaps,
    intersects,
    make_room,
    snap,
    tidy,
)


@dataclass
class Box:
    left: float
    top: float


class TestIntersects:
    """Test padded overlap detection."""

    def test_same_position(self):
        assert intersects(Box(0, 0), Box(0, 0))

    def test_overlapping(self):
        assert intersects(Box(0, 0), Box(50, 80))
        assert intersects(Box(50, 80), Box(0, 0))

    def test_overlap_in_padding_only(self):
        # 110 apart: the boxes themselves do not touch, the padding does
        assert intersects(Box(0, 0), Box(110, 0))

    def test_touching_padding_does_not_intersect(self):
        gap = WIDTH + 2 * PADDING
        assert not intersects(Box(0, 0), Box(gap, 0))
        assert not intersects(Box(0, 0), Box(0, gap))

    def test_one_axis_is_not_enough(self):
        assert not intersects(Box(0, 0), Box(50, 500))
        assert not intersects(Box(0, 0), Box(500, 50))


class TestDisplace:
    """Test single-axis displacement."""

    def test_moves_right(self):
        anchor, other = Box(0, 0), Box(50, 0)
        displace(anchor, other)
        assert (other.left, other.top) == (125, 0)
        assert not intersects(anchor, other)

    def test_moves_down(self):
        anchor, other = Box(0, 0), Box(0, 50)
        displace(anchor, other)
        assert (other.left, other.top) == (0, 125)
        assert not intersects(anchor, other)

    def test_moves_left(self):
        anchor, other = Box(200, 0), Box(150, 0)
        displace(anchor, other)
        assert (other.left, other.top) == (75, 0)
        assert not intersects(anchor, other)

    def test_picks_the_smaller_move(self):
        # 77.5 to clear horizontally, 47.5 to clear vertically
        anchor, other = Box(0, 0), Box(60, 90)
        displace(anchor, other)
        assert (other.left, other.top) == (60, 125)
        assert not intersects(anchor, other)

    @pytest.mark.parametrize(
        "left,top",
        [(10, 10), (90, 20), (20, 90), (300, 250), (260, 330), (340, 340), (225, 300)],
    )
    def test_exactly_one_coordinate_changes(self, left, top):
        anchor, other = Box(300, 300), Box(left, top)
        assert intersects(anchor, other) == (abs(left - 300) < 125 and abs(top - 300) < 125)
        if not intersects(anchor, other):
            return

        displace(anchor, other)

        changed = [other.left != left, other.top != top]
        assert changed.count(True) == 1
        assert not intersects(anchor, other)

    def test_never_pushed_off_canvas(self):
        # Moving up or left would go below 0, so the far side is used
        anchor, other = Box(10, 10), Box(0, 0)
        displace(anchor, other)
        assert (other.left, other.top) == (135, 0)
        assert not intersects(anchor, other)

    @pytest.mark.parametrize("left,top", [(0, 0), (5, 40), (40, 5), (0, 100), (100, 0)])
    def test_near_origin_clears_anchor(self, left, top):
        anchor, other = Box(20, 20), Box(left, top)
        displace(anchor, other)
        assert other.left >= 0 and other.top >= 0
        assert not intersects(anchor, other)

    def test_anchor_untouched(self):
        anchor, other = Box(100, 100), Box(120, 130)
        displace(anchor, other)
        assert (anchor.left, anchor.top) == (100, 100)


class TestMakeRoom:
    """Test moving a placed passage off its siblings."""

    def test_moves_only_the_placed_item(self):
        sibling = Box(300, 300)
        placed = Box(320, 310)
        collided = make_room(placed, [sibling, placed])

        assert collided == [sibling]
        assert (sibling.left, sibling.top) == (300, 300)
        assert not intersects(sibling, placed)

    def test_no_collision(self):
        placed = Box(0, 0)
        assert make_room(placed, [Box(500, 500)]) == []
        assert (placed.left, placed.top) == (0, 0)


class TestTidy:
    """Test spreading out a crowded canvas."""

    def test_find_overlaps(self):
        a, b, c = Box(0, 0), Box(50, 0), Box(500, 500)
        assert find_overlaps([a, b, c]) == [(a, b)]

    def test_stacked_boxes_are_spread(self):
        boxes = [Box(300, 300), Box(300, 300), Box(300, 300)]
        moves = tidy(boxes)

        assert moves >= 2
        assert find_overlaps(boxes) == []
        assert (boxes[0].left, boxes[0].top) == (300, 300)

    def test_already_tidy(self):
        boxes = [Box(0, 0), Box(200, 0)]
        assert tidy(boxes) == 0


class TestSnap:
    """Test grid snapping."""

    def test_rounds_to_nearest(self):
        assert snap(37) == 25
        assert snap(38) == 50
        assert snap(0) == 0
        assert snap(110, grid=50) == 100


def test_constants():
    assert (WIDTH, HEIGHT, PADDING) == (100, 100, 12.5)
