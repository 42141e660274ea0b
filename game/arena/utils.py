"""
Geometry helpers and movement clamping for the arena
"""

from __future__ import annotations
import math
import random
from typing import Iterable, Optional, Tuple
import numpy as np


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp value between low and high bounds"""
    return lo if x < lo else hi if x > hi else x


def vec_len(x: float, y: float) -> float:
    """Calculate vector length (magnitude)"""
    return math.hypot(x, y)


def normalize(x: float, y: float, eps: float = 1e-8) -> Tuple[float, float]:
    """Normalize a vector to unit length (zero vector stays zero)"""
    l = math.hypot(x, y)
    if l < eps:
        return 0.0, 0.0
    return x / l, y / l


def distance(x1: float, y1: float, x2: float, y2: float) -> float:
    return math.hypot(x1 - x2, y1 - y2)


def circle_collide(x1, y1, r1, x2, y2, r2) -> bool:
    """Check if two circles collide"""
    dx = x1 - x2
    dy = y1 - y2
    rr = r1 + r2
    return (dx * dx + dy * dy) <= (rr * rr)


def circle_rect_overlap(cx, cy, r, rx, ry, rw, rh) -> bool:
    """True iff the point of the rectangle nearest to the circle center lies within r"""
    nearest_x = clamp(cx, rx, rx + rw)
    nearest_y = clamp(cy, ry, ry + rh)
    dx = cx - nearest_x
    dy = cy - nearest_y
    return (dx * dx + dy * dy) < (r * r)


def point_near_rect(px, py, rx, ry, rw, rh, margin) -> bool:
    """True iff the point lies strictly inside the rectangle grown by margin"""
    return (rx - margin < px < rx + rw + margin) and (ry - margin < py < ry + rh + margin)


def overlaps_any(x: float, y: float, r: float, obstacles: Iterable) -> bool:
    return any(circle_rect_overlap(x, y, r, o.x, o.y, o.w, o.h) for o in obstacles)


def move_with_clamp(entity, dx: float, dy: float, width: float, height: float, obstacles) -> None:
    """
    Move an entity by (dx, dy), sliding along obstacles.

    The candidate position is clamped to the arena (inset by the radius).
    For each obstacle still overlapped, keep the old x if that clears it,
    otherwise keep the old y, otherwise reject the move. A final pass
    rejects the move if it ends inside an obstacle the entity was not
    already touching (an earlier slide can re-enter a later rectangle).
    """
    r = entity.radius
    old_x, old_y = entity.x, entity.y
    new_x = clamp(old_x + dx, r, width - r)
    new_y = clamp(old_y + dy, r, height - r)

    for o in obstacles:
        if circle_rect_overlap(new_x, new_y, r, o.x, o.y, o.w, o.h):
            if not circle_rect_overlap(old_x, new_y, r, o.x, o.y, o.w, o.h):
                new_x = old_x
            elif not circle_rect_overlap(new_x, old_y, r, o.x, o.y, o.w, o.h):
                new_y = old_y
            else:
                new_x, new_y = old_x, old_y

    for o in obstacles:
        if circle_rect_overlap(new_x, new_y, r, o.x, o.y, o.w, o.h) and \
                not circle_rect_overlap(old_x, old_y, r, o.x, o.y, o.w, o.h):
            new_x, new_y = old_x, old_y
            break

    entity.x = new_x
    entity.y = new_y


def seed_everything(py_seed: Optional[int]):
    """Seed all random number generators"""
    if py_seed is None:
        return
    random.seed(py_seed)
    np.random.seed(py_seed)
