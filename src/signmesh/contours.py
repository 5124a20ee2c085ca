"""Contour classification.

Splits a flat list of closed contours into outer boundaries and holes
and assigns each hole to the outer boundary that contains it.  Winding
is taken from the shoelace signed area: counter-clockwise (positive) is
an outer boundary, clockwise (negative) is a hole.

Each hole is tested once, by ray casting its centroid against the outer
contours in input order.  A hole inside several outers (nested shapes)
goes to the first one; hole-in-hole nesting is not modelled.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Union

from signmesh.config import DEFAULT_LIMITS, KernelLimits
from signmesh.paths import DEFAULT_TOLERANCE, Contour, Point2, clean_loop, signed_area

logger = logging.getLogger(__name__)

ContourLike = Union[Contour, Sequence[Sequence[float]]]


@dataclass
class ContourGroup:
    """One outer boundary (CCW) and the holes (CW) it owns."""

    outer: List[Point2]
    holes: List[List[Point2]] = field(default_factory=list)

    @property
    def area(self) -> float:
        return signed_area(self.outer) + sum(signed_area(h) for h in self.holes)


def centroid(points: Sequence[Sequence[float]]) -> Point2:
    """Vertex average of a loop.

    This is what hole ownership is tested with; it is not the area
    centroid, but for the convex-ish holes found in glyphs and sketches
    it lies inside the hole's owner.
    """
    n = len(points)
    if n == 0:
        raise ValueError("centroid of an empty point list")
    return (sum(p[0] for p in points) / n, sum(p[1] for p in points) / n)


def point_in_polygon(px: float, py: float, polygon: Sequence[Sequence[float]]) -> bool:
    """Even-odd ray casting test."""
    inside = False
    n = len(polygon)
    j = n - 1
    for i in range(n):
        xi, yi = polygon[i][0], polygon[i][1]
        xj, yj = polygon[j][0], polygon[j][1]
        if (yi > py) != (yj > py):
            x_cross = (xj - xi) * (py - yi) / (yj - yi) + xi
            if px < x_cross:
                inside = not inside
        j = i
    return inside


def points_of(contour: ContourLike) -> List[Sequence[float]]:
    """Point list of a :class:`~signmesh.paths.Contour` or a plain point sequence."""
    if isinstance(contour, Contour):
        return contour.points
    return list(contour)


def classify_contours(contours: Iterable[ContourLike],
                      tol: float = DEFAULT_TOLERANCE,
                      limits: Optional[KernelLimits] = None) -> List[ContourGroup]:
    """Group ``contours`` into outer boundaries with their holes.

    Contours are cleaned with :func:`~signmesh.paths.clean_loop` first;
    loops that collapse to fewer than three points or to zero area are
    skipped.  Holes whose centroid lies in no outer contour are dropped
    and logged.  The returned outers are CCW and holes CW.
    """
    limits = limits or DEFAULT_LIMITS
    contours = list(contours)
    limits.check_contours(len(contours))

    outers: List[List[Point2]] = []
    holes: List[List[Point2]] = []
    for contour in contours:
        pts = points_of(contour)
        limits.check_path(len(pts))
        loop = clean_loop(pts, tol)
        if len(loop) < 3:
            logger.debug("skipping degenerate contour with %d point(s)", len(loop))
            continue
        area = signed_area(loop)
        if abs(area) <= tol * tol:
            logger.debug("skipping zero-area contour")
            continue
        if area > 0:
            outers.append(loop)
        else:
            holes.append(loop)

    groups = [ContourGroup(outer=o) for o in outers]
    dropped = 0
    for hole in holes:
        cx, cy = centroid(hole)
        for group in groups:
            if point_in_polygon(cx, cy, group.outer):
                group.holes.append(hole)
                break
        else:
            dropped += 1

    if dropped:
        logger.warning("dropped %d hole contour(s) not inside any outer contour", dropped)
    logger.debug("classified %d outer contour(s), %d hole(s)", len(groups), len(holes) - dropped)
    return groups


__all__ = ["ContourGroup", "ContourLike", "centroid", "point_in_polygon", "points_of", "classify_contours"]
