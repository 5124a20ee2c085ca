"""Solid extrusion of triangulated 2D regions.

A :class:`~signmesh.triangulator.Triangulation` is lifted into a closed
prism: the cap triangles are emitted twice (bottom face reversed at
``z = 0``, top face at ``z = depth``) and the side walls are derived
from the triangulation itself.  An undirected edge used by exactly one
cap triangle lies on the region's boundary; collected together these
edges trace the outer silhouette and every hole at once, so the
contours never have to be re-classified.

Because cap triangles are counter-clockwise, each boundary edge keeps
the direction it has in its triangle: outer loops run CCW and hole loops
CW, with the solid always on the left.  A wall quad built on the
directed edge therefore faces away from the solid for both kinds of
loop.
"""

from __future__ import annotations

import logging
from collections import Counter, defaultdict
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from signmesh.config import DEFAULT_LIMITS, KernelLimits
from signmesh.contours import ContourLike, classify_contours
from signmesh.mesh import Mesh
from signmesh.paths import DEFAULT_TOLERANCE, signed_area
from signmesh.triangulator import Triangulation, triangulate_group
from signmesh.vec import Vec3, epsilon

logger = logging.getLogger(__name__)

Edge = Tuple[int, int]


@dataclass
class BoundaryLoop:
    """Vertex indices of one boundary loop in traversal order."""

    indices: List[int]
    closed: bool = True

    def __len__(self) -> int:
        return len(self.indices)

    def edges(self) -> List[Edge]:
        idx = self.indices
        count = len(idx) if self.closed else len(idx) - 1
        return [(idx[i], idx[(i + 1) % len(idx)]) for i in range(count)]

    def is_hole(self, points: Sequence[Sequence[float]]) -> bool:
        return signed_area([points[i] for i in self.indices]) < 0


def boundary_edges(triangles: Iterable[Sequence[int]]) -> List[Edge]:
    """Directed edges used by exactly one triangle.

    Each edge keeps the orientation it has in its triangle.  Order
    follows the triangle order so the result is deterministic.
    """
    triangles = [tuple(t) for t in triangles]
    counts: Counter = Counter()
    for a, b, c in triangles:
        for u, v in ((a, b), (b, c), (c, a)):
            counts[(u, v) if u < v else (v, u)] += 1

    edges: List[Edge] = []
    for a, b, c in triangles:
        for u, v in ((a, b), (b, c), (c, a)):
            if counts[(u, v) if u < v else (v, u)] == 1:
                edges.append((u, v))
    return edges


def boundary_loops(edges: Sequence[Edge]) -> List[BoundaryLoop]:
    """Chain directed boundary edges into loops by walking shared vertices.

    Every edge is consumed exactly once.  Where a vertex starts more than
    one unconsumed edge (two loops touching at a point) the earliest edge
    is followed.  A chain that cannot be closed is returned with
    ``closed=False``; that only happens for malformed triangulations.
    """
    outgoing: Dict[int, List[int]] = defaultdict(list)
    for pos, (u, _) in enumerate(edges):
        outgoing[u].append(pos)
    used = [False] * len(edges)

    loops: List[BoundaryLoop] = []
    for start_pos, (start, _) in enumerate(edges):
        if used[start_pos]:
            continue
        indices = [start]
        pos = start_pos
        closed = False
        while True:
            used[pos] = True
            current = edges[pos][1]
            if current == start:
                closed = True
                break
            indices.append(current)
            nxt = next((p for p in outgoing[current] if not used[p]), None)
            if nxt is None:
                break
            pos = nxt
        loops.append(BoundaryLoop(indices=indices, closed=closed))

    open_loops = sum(1 for loop in loops if not loop.closed)
    if open_loops:
        logger.warning("%d boundary chain(s) did not close; walls will have gaps", open_loops)
    return loops


def extrude_triangulation(tri: Triangulation, depth: float,
                          offset: Sequence[float] = (0.0, 0.0, 0.0),
                          limits: Optional[KernelLimits] = None) -> Mesh:
    """Lift a 2D triangulation into a closed prism of height ``depth``.

    ``offset`` is added to every vertex.  Side walls contribute exactly
    two triangles per boundary edge.  The result is watertight when the
    triangulation has no duplicate or zero-length edges; no repair is
    attempted.
    """
    mesh = Mesh()
    if not tri.triangles:
        return mesh
    if abs(depth) <= epsilon:
        logger.warning("extrusion depth %.3g is too small, returning empty mesh", depth)
        return mesh

    limits = limits or DEFAULT_LIMITS
    edges = boundary_edges(tri.triangles)
    limits.check_triangles(2 * len(tri.triangles) + 2 * len(edges))

    ox, oy, oz = float(offset[0]), float(offset[1]), float(offset[2])
    bottom: List[Vec3] = [(x + ox, y + oy, oz) for x, y in tri.points]
    top: List[Vec3] = [(x + ox, y + oy, oz + depth) for x, y in tri.points]

    for a, b, c in tri.triangles:
        mesh.add_triangle(bottom[a], bottom[c], bottom[b], normal=(0.0, 0.0, -1.0))
    for a, b, c in tri.triangles:
        mesh.add_triangle(top[a], top[b], top[c], normal=(0.0, 0.0, 1.0))

    for loop in boundary_loops(edges):
        for u, v in loop.edges():
            mesh.add_triangle(bottom[u], bottom[v], top[v])
            mesh.add_triangle(bottom[u], top[v], top[u])

    return mesh


def extrude_contours(contours: Iterable[ContourLike], depth: float,
                     offset: Sequence[float] = (0.0, 0.0, 0.0),
                     tol: float = DEFAULT_TOLERANCE,
                     limits: Optional[KernelLimits] = None) -> Mesh:
    """Classify, triangulate and extrude a set of contours.

    Every outer contour becomes its own prism, with its owned holes cut
    through.  An empty or fully degenerate contour set gives an empty
    mesh.
    """
    limits = limits or DEFAULT_LIMITS
    mesh = Mesh()
    for group in classify_contours(contours, tol=tol, limits=limits):
        tri = triangulate_group(group, tol=tol)
        if not tri.triangles:
            logger.warning("triangulation of a %d-point outline produced no triangles",
                           len(group.outer))
            continue
        mesh.extend(extrude_triangulation(tri, depth, offset, limits=limits))
        limits.check_triangles(len(mesh))
    return mesh


__all__ = [
    "BoundaryLoop",
    "boundary_edges",
    "boundary_loops",
    "extrude_triangulation",
    "extrude_contours",
]
