"""Canvas layout: keep passages from overlapping."""

from passage_graph.layout.geometry import (
    HEIGHT,
    PADDING,
    WIDTH,
    Positioned,
    displace,
    find_overlaps,
    intersects,
    make_room,
    snap,
    tidy,
)

__all__ = [
    "HEIGHT",
    "PADDING",
    "WIDTH",
    "Positioned",
    "displace",
    "find_overlaps",
    "intersects",
    "make_room",
    "snap",
    "tidy",
]
