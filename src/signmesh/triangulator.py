"""Triangulation helpers.

We delegate to ``mapbox-earcut`` (the fast ear clipping implementation
used by Mapbox GL).  The helpers here lay an outer loop and its holes out
in the single flat point list earcut expects and enforce the winding
contract the rest of the kernel relies on: every returned triangle is
counter-clockwise in the XY plane.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple

import numpy as np

try:
    import mapbox_earcut as _earcut
except ImportError as exc:  # pragma: no cover - import guard
    raise ImportError(
        "mapbox-earcut must be installed to triangulate polygons with holes"
    ) from exc

from signmesh.contours import ContourGroup
from signmesh.paths import DEFAULT_TOLERANCE, Point2, clean_loop, points_from_flat, signed_area

Point2D = Tuple[float, float]


@dataclass
class Triangulation:
    """Index buffer over a combined point list.

    ``points`` is ``[outer..., hole1..., hole2...]``; ``hole_offsets``
    holds the index of the first point of each hole (a point count, not
    a byte or coordinate offset).  ``triangles`` holds CCW index triples.
    """

    points: List[Point2] = field(default_factory=list)
    triangles: List[Tuple[int, int, int]] = field(default_factory=list)
    hole_offsets: List[int] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.triangles)

    @property
    def indices(self) -> List[int]:
        """Flat index buffer."""
        return [i for tri in self.triangles for i in tri]

    def loops(self) -> List[List[Point2]]:
        """Split ``points`` back into the outer loop and hole loops."""
        bounds = [0] + list(self.hole_offsets) + [len(self.points)]
        return [self.points[bounds[i]:bounds[i + 1]] for i in range(len(bounds) - 1)]


def _tri_area2(a: Point2, b: Point2, c: Point2) -> float:
    return (b[0] - a[0]) * (c[1] - a[1]) - (c[0] - a[0]) * (b[1] - a[1])


def triangulate_loops(outer: Sequence[Sequence[float]],
                      holes: Iterable[Sequence[Sequence[float]]] = (),
                      tol: float = DEFAULT_TOLERANCE) -> Triangulation:
    """Triangulate ``outer`` minus ``holes`` into a :class:`Triangulation`.

    Loops are cleaned and re-wound (outer CCW, holes CW) before they are
    handed to earcut.  Degenerate loops are ignored.  A self-intersecting
    or zero-area outer may produce an empty or partial triangle list;
    that result is returned as-is.
    """
    outer_loop = _prepare_loop(outer, want_ccw=True, tol=tol)
    if len(outer_loop) < 3:
        return Triangulation()

    point_map: List[Point2] = []
    ring_ends: List[int] = []
    hole_offsets: List[int] = []

    def _append(loop: Sequence[Point2]) -> None:
        point_map.extend(loop)
        ring_ends.append(len(point_map))

    _append(outer_loop)
    for hole in holes:
        loop = _prepare_loop(hole, want_ccw=False, tol=tol)
        if len(loop) < 3:
            continue
        hole_offsets.append(len(point_map))
        _append(loop)

    vertices = np.asarray(point_map, dtype=np.float64).reshape(-1, 2)
    ring_array = np.asarray(ring_ends, dtype=np.uint32)
    indices = _earcut.triangulate_float64(vertices, ring_array)

    triangles: List[Tuple[int, int, int]] = []
    for i in range(0, len(indices) - 2, 3):
        a, b, c = int(indices[i]), int(indices[i + 1]), int(indices[i + 2])
        area2 = _tri_area2(point_map[a], point_map[b], point_map[c])
        if area2 == 0.0:
            continue
        if area2 < 0:
            b, c = c, b
        triangles.append((a, b, c))

    return Triangulation(points=point_map, triangles=triangles, hole_offsets=hole_offsets)


def triangulate_group(group: ContourGroup, tol: float = DEFAULT_TOLERANCE) -> Triangulation:
    """Triangulate one classified :class:`~signmesh.contours.ContourGroup`."""
    return triangulate_loops(group.outer, group.holes, tol=tol)


def triangulate_flat(coords: Sequence[float], hole_offsets: Sequence[int] = (),
                     tol: float = DEFAULT_TOLERANCE) -> Triangulation:
    """Triangulate a flat ``[x0, y0, x1, y1, ...]`` list with hole start offsets.

    ``hole_offsets`` are point indices into ``coords``, in increasing
    order; the points before the first offset form the outer loop.  The
    loops are cleaned and re-wound, so the returned ``points`` and
    ``hole_offsets`` describe the prepared loops rather than the input.
    """
    points = points_from_flat(coords)
    bounds = [0] + list(hole_offsets) + [len(points)]
    if any(b < a for a, b in zip(bounds, bounds[1:])):
        raise ValueError(f"hole offsets {list(hole_offsets)} are not increasing "
                         f"within {len(points)} points")
    loops = [points[bounds[i]:bounds[i + 1]] for i in range(len(bounds) - 1)]
    return triangulate_loops(loops[0], loops[1:], tol=tol)


def triangulate_polygon(outer: Sequence[Sequence[float]],
                        holes: Iterable[Sequence[Sequence[float]]] | None = None
                        ) -> List[List[Point2D]]:
    """Return triangles covering ``outer`` minus any ``holes``.

    Convenience form of :func:`triangulate_loops`; the result is a list of
    CCW triangles, each a list of three ``(x, y)`` pairs.
    """
    tri = triangulate_loops(outer, holes or [])
    return [[tri.points[a], tri.points[b], tri.points[c]] for a, b, c in tri.triangles]


def _prepare_loop(points: Sequence[Sequence[float]], *, want_ccw: bool,
                  tol: float = DEFAULT_TOLERANCE) -> List[Point2D]:
    loop = clean_loop(points, tol)
    if len(loop) < 3:
        return loop
    area = signed_area(loop)
    if want_ccw and area < 0:
        loop.reverse()
    elif not want_ccw and area > 0:
        loop.reverse()
    return loop


__all__ = ["Triangulation", "triangulate_loops", "triangulate_group", "triangulate_flat", "triangulate_polygon"]
