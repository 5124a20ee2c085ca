"""Outer-contour providers and mounting hole layouts.

An outline provider is any callable ``provider(width, height, segments=32,
**options) -> Contour`` returning a counter-clockwise loop centred on the
origin and fitted to a ``width x height`` box.  Providers are looked up by
name so callers can choose a plate or tag shape from configuration.

Mounting holes are returned as clockwise hole contours; add them to the
outer contour list before extruding and the classifier attaches them to
whichever outline contains them.
"""

from __future__ import annotations

import math
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from signmesh.paths import Contour, Point2, signed_area

OutlineProvider = Callable[..., Contour]


def _ccw(points: Sequence[Point2]) -> Contour:
    contour = Contour(list(points))
    return contour.reversed() if signed_area(contour.points) < 0 else contour


def _fit(points: Sequence[Point2], width: float, height: float) -> List[Point2]:
    """Scale and centre ``points`` into a ``width x height`` box."""
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    cx = (min(xs) + max(xs)) / 2.0
    cy = (min(ys) + max(ys)) / 2.0
    sx = width / ((max(xs) - min(xs)) or 1.0)
    sy = height / ((max(ys) - min(ys)) or 1.0)
    return [((x - cx) * sx, (y - cy) * sy) for x, y in points]


def circle(width: float, height: float, segments: int = 32) -> Contour:
    """Ellipse inscribed in the box; a circle when ``width == height``."""
    rx, ry = width / 2.0, height / 2.0
    return Contour([(rx * math.cos(2.0 * math.pi * i / segments),
                     ry * math.sin(2.0 * math.pi * i / segments))
                    for i in range(segments)])


def rounded_rectangle(width: float, height: float, segments: int = 32,
                      radius: Optional[float] = None) -> Contour:
    """Rectangle with quarter-circle corners.

    ``radius`` defaults to 15% of the shorter side and is limited to half
    of it.  ``segments`` is the number of points per corner arc.
    """
    short = min(width, height)
    if radius is None:
        radius = 0.15 * short
    radius = max(0.0, min(radius, short / 2.0))
    hw, hh = width / 2.0, height / 2.0
    if radius <= 0.0:
        return Contour([(-hw, -hh), (hw, -hh), (hw, hh), (-hw, hh)])

    steps = max(1, segments // 4)
    corners = ((hw - radius, -hh + radius, -math.pi / 2.0),
               (hw - radius, hh - radius, 0.0),
               (-hw + radius, hh - radius, math.pi / 2.0),
               (-hw + radius, -hh + radius, math.pi))
    points: List[Point2] = []
    for cx, cy, start in corners:
        for i in range(steps + 1):
            a = start + (math.pi / 2.0) * i / steps
            points.append((cx + radius * math.cos(a), cy + radius * math.sin(a)))
    # touching corner arcs share end points; cleaning removes them
    return Contour(points).cleaned()


def heart(width: float, height: float, segments: int = 64) -> Contour:
    """Classic parametric heart with its point at the bottom."""
    raw = []
    for i in range(segments):
        t = 2.0 * math.pi * i / segments
        x = 16.0 * math.sin(t) ** 3
        y = 13.0 * math.cos(t) - 5.0 * math.cos(2 * t) - 2.0 * math.cos(3 * t) - math.cos(4 * t)
        raw.append((x, y))
    return _ccw(_fit(raw, width, height)).cleaned()


def star(width: float, height: float, segments: int = 10,
         inner_ratio: float = 0.4) -> Contour:
    """Star with ``segments // 2`` points; inner vertices at ``inner_ratio``."""
    count = max(6, segments - segments % 2)
    raw = []
    for i in range(count):
        a = math.pi / 2.0 + 2.0 * math.pi * i / count
        r = 1.0 if i % 2 == 0 else inner_ratio
        raw.append((r * math.cos(a), r * math.sin(a)))
    return _ccw(_fit(raw, width, height))


OUTLINE_REGISTRY: Dict[str, OutlineProvider] = {
    'circle': circle,
    'rounded_rectangle': rounded_rectangle,
    'heart': heart,
    'star': star,
}


def register_outline(name: str, provider: OutlineProvider) -> None:
    OUTLINE_REGISTRY[name] = provider


def get_outline(name: str) -> OutlineProvider:
    try:
        return OUTLINE_REGISTRY[name]
    except KeyError:
        raise KeyError(f"unknown outline {name!r}; available: {sorted(OUTLINE_REGISTRY)}") from None


def outline(name: str, width: float, height: float, **options) -> Contour:
    """Build the named outline in one call."""
    return get_outline(name)(width, height, **options)


# ---------------------------------------------------------------------------
# Mounting holes
# ---------------------------------------------------------------------------

MOUNTING_PATTERNS = ('none', '2-point', '4-corner', '6-point')


def mounting_hole_positions(pattern: str, width: float, height: float,
                            inset: float) -> List[Tuple[float, float]]:
    """Hole centres for a plate of ``width x height`` centred on the origin.

    ``inset`` is the distance from each hole centre to the nearest edge.
    """
    if pattern not in MOUNTING_PATTERNS:
        raise ValueError(f"unknown mounting pattern {pattern!r}")
    bx = width / 2.0 - inset
    by = height / 2.0 - inset
    if pattern == '2-point':
        return [(-bx, 0.0), (bx, 0.0)]
    if pattern == '4-corner':
        return [(-bx, by), (bx, by), (-bx, -by), (bx, -by)]
    if pattern == '6-point':
        return [(-bx, by), (0.0, by), (bx, by), (-bx, -by), (0.0, -by), (bx, -by)]
    return []


def mounting_hole_contours(pattern: str, width: float, height: float,
                           inset: float, diameter: float,
                           segments: int = 16) -> List[Contour]:
    """Clockwise circular hole contours for a mounting pattern."""
    if diameter <= 0.0:
        return []
    holes = []
    for x, y in mounting_hole_positions(pattern, width, height, inset):
        ring = circle(diameter, diameter, segments).translated(x, y)
        holes.append(ring.reversed())
    return holes


__all__ = [
    'OutlineProvider',
    'OUTLINE_REGISTRY',
    'MOUNTING_PATTERNS',
    'circle',
    'rounded_rectangle',
    'heart',
    'star',
    'register_outline',
    'get_outline',
    'outline',
    'mounting_hole_positions',
    'mounting_hole_contours',
]
