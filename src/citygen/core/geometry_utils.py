"""
Geometry utilities for procedural city generation.

Segment intersection, polygon area, polygon inset and canonical node keys.
Degenerate input (parallel lines, zero-length edges) yields None, never an
exception.
"""

import math
from typing import Optional, Sequence

import numpy as np

from ..contracts import Point


def distance(a: Point, b: Point) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def point_from_polar(origin: Point, angle: float, length: float) -> Point:
    """Point at ``length`` from ``origin`` along ``angle`` (radians)."""
    return Point(origin.x + math.cos(angle) * length, origin.y + math.sin(angle) * length)


def round_half_up(value: float) -> int:
    """Round half up, so -2.5 rounds to -2."""
    return math.floor(value + 0.5)


def generate_canonical_node_id(x: float, y: float) -> str:
    """
    Generate a canonical node ID from world coordinates.

    Args:
        x: X coordinate
        y: Y coordinate

    Returns:
        Key with integer precision (e.g., "100,-201")
    """
    return f"{round_half_up(x)},{round_half_up(y)}"


def segment_intersection(
    a1: Point,
    a2: Point,
    b1: Point,
    b2: Point,
    epsilon: float = 1e-4
) -> Optional[Point]:
    """
    Intersection point of segments a1-a2 and b1-b2.

    Args:
        a1, a2: First segment
        b1, b2: Second segment
        epsilon: Determinant magnitude below which lines count as parallel

    Returns:
        Intersection Point, or None if parallel/colinear or not within both
        segments (parameters t, u in [0, 1])
    """
    x1, y1 = a1.x, a1.y
    x2, y2 = a2.x, a2.y
    x3, y3 = b1.x, b1.y
    x4, y4 = b2.x, b2.y

    denom = (x1 - x2) * (y3 - y4) - (y1 - y2) * (x3 - x4)
    if abs(denom) < epsilon:
        return None

    t = ((x1 - x3) * (y3 - y4) - (y1 - y3) * (x3 - x4)) / denom
    u = -((x1 - x2) * (y1 - y3) - (y1 - y2) * (x1 - x3)) / denom

    if 0 <= t <= 1 and 0 <= u <= 1:
        return Point(x1 + t * (x2 - x1), y1 + t * (y2 - y1))
    return None


def polygon_area(points: Sequence[Point]) -> float:
    """Absolute shoelace area of a ring given without the closing point."""
    if len(points) < 3:
        return 0.0
    xs = np.array([p.x for p in points], dtype=float)
    ys = np.array([p.y for p in points], dtype=float)
    cross = xs * np.roll(ys, -1) - np.roll(xs, -1) * ys
    return float(abs(cross.sum()) / 2.0)


def inset_vertex(prev: Point, cur: Point, nxt: Point, offset: float) -> Optional[Point]:
    """
    Move ``cur`` along the averaged left normal of its two adjacent edges.

    For a counter-clockwise ring the left normal points into the polygon.

    Args:
        prev: Previous vertex
        cur: Vertex to displace
        nxt: Next vertex
        offset: Displacement distance

    Returns:
        Displaced vertex, or None when an adjacent edge has zero length or
        the normals cancel out
    """
    e1x, e1y = cur.x - prev.x, cur.y - prev.y
    e2x, e2y = nxt.x - cur.x, nxt.y - cur.y

    len1 = math.hypot(e1x, e1y)
    len2 = math.hypot(e2x, e2y)
    if len1 <= 0 or len2 <= 0:
        return None

    avg_x = (-e1y / len1 + -e2y / len2) / 2
    avg_y = (e1x / len1 + e2x / len2) / 2

    avg_len = math.hypot(avg_x, avg_y)
    if avg_len <= 0:
        return None

    scale = offset / avg_len
    return Point(cur.x + avg_x * scale, cur.y + avg_y * scale)
