"""Common triangle helpers shared by the generators and serializers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, Tuple

from signmesh.vec import Vec3, cross, dot, epsilon, mag, sub

ZERO: Vec3 = (0.0, 0.0, 0.0)


@dataclass(frozen=True)
class Triangle:
    """Immutable triangle representation in XYZ space.

    ``normal`` is whatever the generator supplied and is treated as
    advisory; use :meth:`computed_normal` for the authoritative value.
    """

    normal: Vec3
    v0: Vec3
    v1: Vec3
    v2: Vec3

    @classmethod
    def from_vertices(cls, v0: Sequence[float], v1: Sequence[float],
                      v2: Sequence[float]) -> "Triangle":
        a, b, c = to_vec3(v0), to_vec3(v1), to_vec3(v2)
        return cls(normal=triangle_normal(a, b, c) or ZERO, v0=a, v1=b, v2=c)

    @property
    def vertices(self) -> Tuple[Vec3, Vec3, Vec3]:
        return self.v0, self.v1, self.v2

    def computed_normal(self) -> Vec3 | None:
        return triangle_normal(self.v0, self.v1, self.v2)

    def flipped(self) -> "Triangle":
        """Return the triangle with reversed winding."""
        n = self.normal
        return Triangle(normal=(-n[0], -n[1], -n[2]), v0=self.v0, v1=self.v2, v2=self.v1)


def to_vec3(point_like: Sequence[float]) -> Vec3:
    """Return the XYZ components of a point as a float tuple.

    Two-component points are lifted to ``z = 0``.
    """

    if len(point_like) == 2:
        return float(point_like[0]), float(point_like[1]), 0.0
    if len(point_like) < 2:
        raise ValueError("value must have at least two components")
    return float(point_like[0]), float(point_like[1]), float(point_like[2])


def triangle_normal(v0: Vec3, v1: Vec3, v2: Vec3) -> Vec3 | None:
    """Return the unit normal of a triangle or ``None`` if degenerate."""

    n = cross(sub(v1, v0), sub(v2, v0))
    length = mag(n)
    if length <= epsilon * epsilon:
        return None
    return (n[0] / length, n[1] / length, n[2] / length)


def triangle_area(v0: Vec3, v1: Vec3, v2: Vec3) -> float:
    """Return the area of a triangle."""

    return 0.5 * mag(cross(sub(v1, v0), sub(v2, v0)))


def triangle_is_degenerate(v0: Vec3, v1: Vec3, v2: Vec3, tol: float = epsilon) -> bool:
    """Return ``True`` if a triangle collapses under the given tolerance."""

    return triangle_area(v0, v1, v2) <= tol


def orient_triangle(v0: Vec3, v1: Vec3, v2: Vec3, preferred_normal: Vec3) -> Tuple[Vec3, Vec3, Vec3]:
    """Ensure triangle winding aligns with ``preferred_normal``."""

    current = triangle_normal(v0, v1, v2)
    if current is None:
        return v0, v1, v2
    if dot(current, preferred_normal) < 0:
        return v0, v2, v1
    return v0, v1, v2


__all__ = [
    "Triangle",
    "Vec3",
    "ZERO",
    "to_vec3",
    "triangle_normal",
    "triangle_area",
    "triangle_is_degenerate",
    "orient_triangle",
]
