"""
Planar geometry primitives shared by the liftarm and gear calculators.

Provides:
- Point value type
- Circle-circle intersection
- Unsigned angle between two vectors
- Interior angle at a triangle vertex

All comparisons use an epsilon, never exact float equality.
"""

import math
from dataclasses import dataclass

EPSILON = 1e-9


@dataclass(frozen=True)
class Point:
    """A point (or vector) in the stud plane."""
    x: float = 0.0
    y: float = 0.0

    def distance_to(self, other: "Point") -> float:
        """Euclidean distance to another point."""
        return math.hypot(self.x - other.x, self.y - other.y)

    def __sub__(self, other: "Point") -> "Point":
        return Point(self.x - other.x, self.y - other.y)

    def scaled(self, factor: float) -> "Point":
        """Return this point scaled about the origin."""
        return Point(self.x * factor, self.y * factor)


ORIGIN = Point(0.0, 0.0)


def circle_intersections(
    center0: Point,
    r0: float,
    center1: Point,
    r1: float,
    eps: float = EPSILON,
) -> list[Point]:
    """
    Intersect two circles.

    Args:
        center0: Center of the first circle
        r0: Radius of the first circle
        center1: Center of the second circle
        r1: Radius of the second circle
        eps: Tolerance for the distance comparisons

    Returns:
        0, 1 (tangent) or 2 intersection points. Coincident centers
        return no points.

    Method:
        a = (r0² - r1² + d²) / 2d is the distance from center0 to the
        chord midpoint along the center line, h = sqrt(r0² - a²) the
        half chord. The two points are mirrored across the center line.
    """
    dx = center1.x - center0.x
    dy = center1.y - center0.y
    d = math.hypot(dx, dy)

    if d < eps:
        return []
    if d > r0 + r1 + eps:
        return []
    if d < abs(r0 - r1) - eps:
        return []

    a = (r0 * r0 - r1 * r1 + d * d) / (2 * d)
    h = math.sqrt(max(0.0, r0 * r0 - a * a))

    mid_x = center0.x + a * dx / d
    mid_y = center0.y + a * dy / d

    if h < eps:
        return [Point(mid_x, mid_y)]

    off_x = -dy * h / d
    off_y = dx * h / d
    return [
        Point(mid_x + off_x, mid_y + off_y),
        Point(mid_x - off_x, mid_y - off_y),
    ]


def angle_between(v0: Point, v1: Point, eps: float = 1e-12) -> float:
    """
    Unsigned angle between two vectors in radians, in [0, pi].

    Returns 0 when either vector is (nearly) zero length.
    """
    m0 = math.hypot(v0.x, v0.y)
    m1 = math.hypot(v1.x, v1.y)
    if m0 < eps or m1 < eps:
        return 0.0
    cos_angle = (v0.x * v1.x + v0.y * v1.y) / (m0 * m1)
    return math.acos(max(-1.0, min(1.0, cos_angle)))


def angle_at(vertex: Point, point_a: Point, point_b: Point) -> float:
    """Interior angle at `vertex` of the triangle (vertex, a, b), in degrees."""
    return math.degrees(angle_between(point_a - vertex, point_b - vertex))


def direction_deg(start: Point, end: Point) -> float:
    """Direction of the segment start->end relative to the x axis, in degrees."""
    return math.degrees(math.atan2(end.y - start.y, end.x - start.x))
