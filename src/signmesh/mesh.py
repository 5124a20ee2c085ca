"""Triangle-soup meshes.

A :class:`Mesh` is an ordered list of :class:`~signmesh.geometry_utils.Triangle`
with no shared-vertex structure.  Watertightness is a property of how a
mesh was generated, not something the container enforces; the analysis
helpers here (:meth:`Mesh.edge_counts`, :meth:`Mesh.is_closed`,
:meth:`Mesh.volume`) exist to verify it after the fact.
"""

from __future__ import annotations

from collections import Counter
from typing import Dict, Iterable, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from signmesh.geometry_utils import ZERO, Triangle, to_vec3, triangle_normal
from signmesh.vec import Vec3, epsilon

VertexKey = Tuple[int, int, int]
EdgeKey = Tuple[VertexKey, VertexKey]


def vertex_key(v: Sequence[float], tol: float = epsilon) -> VertexKey:
    """Create a hashable key for coincident-vertex detection."""
    inv = 1.0 / tol
    return (int(round(v[0] * inv)), int(round(v[1] * inv)), int(round(v[2] * inv)))


def edge_key(a: Sequence[float], b: Sequence[float], tol: float = epsilon) -> EdgeKey:
    """Canonical key so that (a, b) and (b, a) map to the same edge."""
    ka = vertex_key(a, tol)
    kb = vertex_key(b, tol)
    return (ka, kb) if ka <= kb else (kb, ka)


class Mesh:
    """Ordered triangle list with small helpers for building and checking."""

    def __init__(self, triangles: Optional[Iterable[Triangle]] = None):
        self.triangles: List[Triangle] = list(triangles) if triangles else []

    def __len__(self) -> int:
        return len(self.triangles)

    def __iter__(self) -> Iterator[Triangle]:
        return iter(self.triangles)

    def __repr__(self) -> str:
        return f"Mesh({len(self.triangles)} triangles)"

    @property
    def is_empty(self) -> bool:
        return not self.triangles

    # -- construction -------------------------------------------------

    def add_triangle(self, v0: Sequence[float], v1: Sequence[float],
                     v2: Sequence[float], normal: Optional[Vec3] = None) -> None:
        """Append a triangle.

        ``normal`` is a provisional hint only; when omitted it is
        computed from the vertices.
        """
        a, b, c = to_vec3(v0), to_vec3(v1), to_vec3(v2)
        if normal is None:
            normal = triangle_normal(a, b, c) or ZERO
        self.triangles.append(Triangle(normal=normal, v0=a, v1=b, v2=c))

    def add_quad(self, a: Sequence[float], b: Sequence[float],
                 c: Sequence[float], d: Sequence[float]) -> None:
        """Append the quad ``a b c d`` as triangles ``(a, b, c)`` and ``(a, c, d)``."""
        self.add_triangle(a, b, c)
        self.add_triangle(a, c, d)

    def extend(self, other: Iterable[Triangle]) -> "Mesh":
        self.triangles.extend(other)
        return self

    @classmethod
    def combine(cls, *meshes: "Mesh") -> "Mesh":
        """Concatenate meshes into a new one (no boolean union)."""
        out = cls()
        for m in meshes:
            out.triangles.extend(m.triangles)
        return out

    # -- transforms ---------------------------------------------------

    def translated(self, dx: float = 0.0, dy: float = 0.0, dz: float = 0.0) -> "Mesh":
        def _t(v: Vec3) -> Vec3:
            return (v[0] + dx, v[1] + dy, v[2] + dz)

        return Mesh(Triangle(normal=t.normal, v0=_t(t.v0), v1=_t(t.v1), v2=_t(t.v2))
                    for t in self.triangles)

    def mirrored_x(self) -> "Mesh":
        """Mirror across the YZ plane, reversing winding to keep normals outward."""
        out = Mesh()
        for t in self.triangles:
            v0 = (-t.v0[0], t.v0[1], t.v0[2])
            v1 = (-t.v1[0], t.v1[1], t.v1[2])
            v2 = (-t.v2[0], t.v2[1], t.v2[2])
            out.add_triangle(v0, v2, v1)
        return out

    # -- analysis -----------------------------------------------------

    def as_array(self) -> np.ndarray:
        """Return vertex positions as an ``(n, 3, 3)`` float array."""
        if not self.triangles:
            return np.zeros((0, 3, 3), dtype=float)
        return np.array([[t.v0, t.v1, t.v2] for t in self.triangles], dtype=float)

    def edge_counts(self, tol: float = epsilon) -> Dict[EdgeKey, int]:
        """Number of triangles using each undirected edge."""
        counts: Counter = Counter()
        for t in self.triangles:
            counts[edge_key(t.v0, t.v1, tol)] += 1
            counts[edge_key(t.v1, t.v2, tol)] += 1
            counts[edge_key(t.v2, t.v0, tol)] += 1
        return dict(counts)

    def is_closed(self, tol: float = epsilon) -> bool:
        """True if every edge is shared by exactly two triangles."""
        if not self.triangles:
            return True
        return all(count == 2 for count in self.edge_counts(tol).values())

    def signed_volume(self) -> float:
        """Signed enclosed volume via the divergence theorem.

        Positive for a closed mesh whose normals point outward.
        """
        tris = self.as_array()
        if not len(tris):
            return 0.0
        p0, p1, p2 = tris[:, 0], tris[:, 1], tris[:, 2]
        return float(np.einsum('ij,ij->i', p0, np.cross(p1, p2)).sum() / 6.0)

    def volume(self) -> float:
        return abs(self.signed_volume())

    def bbox(self) -> Optional[Tuple[Vec3, Vec3]]:
        """Return ``(min, max)`` corners, or ``None`` for an empty mesh."""
        tris = self.as_array()
        if not len(tris):
            return None
        pts = tris.reshape(-1, 3)
        lo = pts.min(axis=0)
        hi = pts.max(axis=0)
        return (float(lo[0]), float(lo[1]), float(lo[2])), (float(hi[0]), float(hi[1]), float(hi[2]))


__all__ = ["Mesh", "vertex_key", "edge_key"]
