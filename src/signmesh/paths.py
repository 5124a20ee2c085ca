"""Path model shared by every generator.

Path producers (font outlines, sketches, traced images) hand the kernel
lists of points in millimetres.  This module wraps them in two small
types and performs the only input cleanup the kernel does: dropping
near-duplicate and collinear-redundant points.

``Contour``
    closed 2D loop; the first point implicitly connects to the last.
``SweepPath``
    ordered 3D centerline for tubes and channels, open or closed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple

from signmesh.vec import Vec3

logger = logging.getLogger(__name__)

Point2 = Tuple[float, float]

# Points closer than this (mm) are considered coincident
DEFAULT_TOLERANCE = 1e-4


def _near2(p: Point2, q: Point2, tol: float) -> bool:
    return abs(p[0] - q[0]) <= tol and abs(p[1] - q[1]) <= tol


def _near3(p: Vec3, q: Vec3, tol: float) -> bool:
    return abs(p[0] - q[0]) <= tol and abs(p[1] - q[1]) <= tol and abs(p[2] - q[2]) <= tol


def to_point2(pt: Sequence[float]) -> Point2:
    if len(pt) < 2:
        raise ValueError("point must have at least two components")
    return float(pt[0]), float(pt[1])


def signed_area(points: Sequence[Sequence[float]]) -> float:
    """Shoelace signed area; positive for counter-clockwise loops."""
    n = len(points)
    if n < 3:
        return 0.0
    total = 0.0
    for i in range(n):
        x0, y0 = points[i][0], points[i][1]
        x1, y1 = points[(i + 1) % n][0], points[(i + 1) % n][1]
        total += x0 * y1 - x1 * y0
    return total / 2.0


def clean_loop(points: Iterable[Sequence[float]], tol: float = DEFAULT_TOLERANCE) -> List[Point2]:
    """Drop near-duplicate and collinear-redundant points from a closed loop.

    A repeated closing point is removed as well.  The result may have
    fewer than three points, in which case the loop is degenerate and
    callers should skip it.
    """
    loop: List[Point2] = []
    for pt in points:
        p = to_point2(pt)
        if loop and _near2(loop[-1], p, tol):
            continue
        loop.append(p)
    while len(loop) > 1 and _near2(loop[0], loop[-1], tol):
        loop.pop()

    # Remove collinear points until stable; removing one point can make
    # its neighbour redundant (e.g. a spike folding back on itself).
    changed = True
    while changed and len(loop) >= 3:
        changed = False
        n = len(loop)
        for i in range(n):
            a = loop[i - 1]
            b = loop[i]
            c = loop[(i + 1) % n]
            abx, aby = b[0] - a[0], b[1] - a[1]
            acx, acy = c[0] - a[0], c[1] - a[1]
            # twice the triangle area, compared against edge length
            area2 = abs(abx * acy - aby * acx)
            span = max(abs(acx) + abs(acy), abs(abx) + abs(aby), tol)
            if area2 <= tol * span:
                del loop[i]
                changed = True
                break
    return loop


def simplify(points: Sequence[Sequence[float]], min_distance: float) -> List[Point2]:
    """Drop points closer than ``min_distance`` to the previously kept point.

    Intended for dense freehand strokes.  The first point is always kept;
    the last point is kept as well so the stroke length is preserved.
    """
    if not points:
        return []
    kept: List[Point2] = [to_point2(points[0])]
    limit = min_distance * min_distance
    for pt in points[1:]:
        p = to_point2(pt)
        dx = p[0] - kept[-1][0]
        dy = p[1] - kept[-1][1]
        if dx * dx + dy * dy >= limit:
            kept.append(p)
    last = to_point2(points[-1])
    if len(points) > 1 and kept[-1] != last:
        if len(kept) > 1:
            kept[-1] = last
        else:
            kept.append(last)
    return kept


def points_from_flat(coords: Sequence[float]) -> List[Point2]:
    """Convert ``[x0, y0, x1, y1, ...]`` into a list of points."""
    if len(coords) % 2:
        raise ValueError("flat coordinate list must have an even length")
    return [(float(coords[i]), float(coords[i + 1])) for i in range(0, len(coords), 2)]


@dataclass
class Contour:
    """Closed 2D loop of points."""

    points: List[Point2] = field(default_factory=list)

    def __post_init__(self):
        self.points = [to_point2(p) for p in self.points]

    def __len__(self) -> int:
        return len(self.points)

    @classmethod
    def from_flat(cls, coords: Sequence[float]) -> "Contour":
        return cls(points_from_flat(coords))

    @property
    def signed_area(self) -> float:
        return signed_area(self.points)

    @property
    def is_hole(self) -> bool:
        return self.signed_area < 0

    def cleaned(self, tol: float = DEFAULT_TOLERANCE) -> "Contour":
        return Contour(clean_loop(self.points, tol))

    def reversed(self) -> "Contour":
        return Contour(list(reversed(self.points)))

    def translated(self, dx: float, dy: float) -> "Contour":
        return Contour([(x + dx, y + dy) for x, y in self.points])


@dataclass
class SweepPath:
    """Centerline for tubes and channels.

    Points are stored as ``(x, y, z)``; two-component input is lifted to
    ``z`` (default 0).
    """

    points: List[Vec3] = field(default_factory=list)
    closed: bool = False
    z: float = 0.0

    def __post_init__(self):
        lifted: List[Vec3] = []
        for p in self.points:
            if len(p) == 2:
                lifted.append((float(p[0]), float(p[1]), float(self.z)))
            elif len(p) >= 3:
                lifted.append((float(p[0]), float(p[1]), float(p[2])))
            else:
                raise ValueError("path point must have two or three components")
        self.points = lifted

    def __len__(self) -> int:
        return len(self.points)

    def deduplicated(self, tol: float = DEFAULT_TOLERANCE) -> "SweepPath":
        """Return a copy with consecutive duplicate points removed.

        For closed paths a final point equal to the first one is dropped
        too, since the closing segment is implicit.
        """
        out: List[Vec3] = []
        for p in self.points:
            if out and _near3(out[-1], p, tol):
                continue
            out.append(p)
        if self.closed:
            while len(out) > 1 and _near3(out[0], out[-1], tol):
                out.pop()
        dropped = len(self.points) - len(out)
        if dropped:
            logger.debug("dropped %d duplicate sweep path point(s)", dropped)
        return SweepPath(out, closed=self.closed, z=self.z)

    def length(self) -> float:
        total = 0.0
        pts = self.points
        for a, b in zip(pts, pts[1:]):
            total += ((b[0] - a[0]) ** 2 + (b[1] - a[1]) ** 2 + (b[2] - a[2]) ** 2) ** 0.5
        if self.closed and len(pts) > 2:
            a, b = pts[-1], pts[0]
            total += ((b[0] - a[0]) ** 2 + (b[1] - a[1]) ** 2 + (b[2] - a[2]) ** 2) ** 0.5
        return total


__all__ = [
    "Point2",
    "Contour",
    "SweepPath",
    "DEFAULT_TOLERANCE",
    "signed_area",
    "clean_loop",
    "simplify",
    "points_from_flat",
]
