"""Collision detection and displacement for passages on the story canvas.

Every passage occupies a fixed-size box. Two passages collide when their
boxes, each grown by PADDING on every side, overlap.
"""

from collections.abc import Iterable, Sequence
from typing import Protocol

from passage_graph.observability import get_logger

log = get_logger(__name__)

# Largest size a passage has onscreen, in pixels
WIDTH = 100
HEIGHT = 100

# Extra space around a passage that still counts as a collision
PADDING = 12.5


class Positioned(Protocol):
    """Anything placed on the canvas by its top-left corner."""

    left: float
    top: float


def intersects(a: Positioned, b: Positioned) -> bool:
    """Check whether two passages overlap onscreen, padding included."""
    return (
        a.left - PADDING < b.left + WIDTH + PADDING
        and a.left + WIDTH + PADDING > b.left - PADDING
        and a.top - PADDING < b.top + HEIGHT + PADDING
        and a.top + HEIGHT + PADDING > b.top - PADDING
    )


def _axis_change(a_near: float, a_far: float, o_near: float, size: int) -> float:
    """Shortest move along one axis that clears anchor without leaving the canvas."""
    back = (o_near - a_near) + size + PADDING
    forward = a_far - o_near + PADDING

    # Moving forward always lands on the canvas
    if back < forward and o_near - back >= 0:
        return -back
    return forward


def displace(anchor: Positioned, other: Positioned) -> None:
    """
    Move other so that it no longer overlaps anchor.

    Only one axis changes: whichever move shifts other the least. Moves that
    would push other off the top or left edge of the canvas are never chosen.
    The new position is written straight to other; nothing is persisted.
    """
    p = PADDING
    a_left = anchor.left - p
    a_right = a_left + WIDTH + p * 2
    a_top = anchor.top - p
    a_bottom = a_top + HEIGHT + p * 2
    o_left = other.left - p
    o_right = o_left + WIDTH + p * 2
    o_top = other.top - p
    o_bottom = o_top + HEIGHT + p * 2

    # Overlap extents of the two padded boxes
    x_overlap = min(a_right, o_right) - max(a_left, o_left)
    y_overlap = min(a_bottom, o_bottom) - max(a_top, o_top)

    x_change: float | None = None
    y_change: float | None = None

    if x_overlap != 0:
        x_change = _axis_change(a_left, a_right, o_left, WIDTH)

    if y_overlap != 0:
        y_change = _axis_change(a_top, a_bottom, o_top, HEIGHT)

    if x_change is None and y_change is None:
        return

    if y_change is not None and (x_change is None or abs(x_change) > abs(y_change)):
        other.top = o_top + y_change
        log.debug("displaced_vertically", change=y_change, top=other.top)
    else:
        other.left = o_left + x_change
        log.debug("displaced_horizontally", change=x_change, left=other.left)


def make_room(anchor: Positioned, others: Iterable[Positioned]) -> list[Positioned]:
    """
    Displace a newly placed passage away from every sibling it overlaps.

    The siblings stay put; anchor is moved once per collision, in order.
    Returns the siblings that caused a move.
    """
    collided: list[Positioned] = []

    for other in others:
        if other is anchor:
            continue
        if intersects(other, anchor):
            displace(other, anchor)
            collided.append(other)

    return collided


def snap(value: float, grid: int = 25) -> float:
    """Round a coordinate to the nearest grid line."""
    return round(value / grid) * grid


def find_overlaps(items: Sequence[Positioned]) -> list[tuple[Positioned, Positioned]]:
    """Return every pair of items that intersect, in input order."""
    pairs: list[tuple[Positioned, Positioned]] = []

    for i, a in enumerate(items):
        for b in items[i + 1 :]:
            if intersects(a, b):
                pairs.append((a, b))

    return pairs


def tidy(items: Sequence[Positioned], max_passes: int = 10) -> int:
    """
    Spread items out until none overlap, or max_passes is reached.

    Each pass walks the items in order and moves every item away from the
    ones before it. Earlier items never move during a pass.

    Returns:
        Number of moves made.
    """
    moves = 0

    for _ in range(max_passes):
        if not find_overlaps(items):
            break
        for i, item in enumerate(items):
            moves += len(make_room(item, items[:i]))

    return moves
