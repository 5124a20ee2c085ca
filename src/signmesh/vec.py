"""Small 3D vector helpers on plain tuples.

Generators work on ``(x, y, z)`` tuples rather than homogeneous
coordinates, so the helpers here are deliberately minimal.
"""

from __future__ import annotations

import math
from typing import Sequence, Tuple

Vec3 = Tuple[float, float, float]

# Geometric tolerance in millimetres
epsilon = 1e-6


def add(a: Sequence[float], b: Sequence[float]) -> Vec3:
    """Add two 3D vectors."""
    return (a[0] + b[0], a[1] + b[1], a[2] + b[2])


def sub(a: Sequence[float], b: Sequence[float]) -> Vec3:
    """Subtract two 3D vectors."""
    return (a[0] - b[0], a[1] - b[1], a[2] - b[2])


def scale(v: Sequence[float], s: float) -> Vec3:
    """Scale a 3D vector."""
    return (v[0] * s, v[1] * s, v[2] * s)


def dot(a: Sequence[float], b: Sequence[float]) -> float:
    return a[0] * b[0] + a[1] * b[1] + a[2] * b[2]


def cross(a: Sequence[float], b: Sequence[float]) -> Vec3:
    """Cross product of two 3D vectors."""
    return (
        a[1] * b[2] - a[2] * b[1],
        a[2] * b[0] - a[0] * b[2],
        a[0] * b[1] - a[1] * b[0],
    )


def mag(v: Sequence[float]) -> float:
    return math.sqrt(v[0] * v[0] + v[1] * v[1] + v[2] * v[2])


def normalize(v: Sequence[float]) -> Vec3 | None:
    """Return ``v`` scaled to unit length, or ``None`` if it is too short."""
    length = mag(v)
    if length <= epsilon:
        return None
    return (v[0] / length, v[1] / length, v[2] / length)


def madd(p: Sequence[float], v: Sequence[float], s: float) -> Vec3:
    """Return ``p + s * v``."""
    return (p[0] + v[0] * s, p[1] + v[1] * s, p[2] + v[2] * s)


def close(a: Sequence[float], b: Sequence[float], tol: float = epsilon) -> bool:
    """True if every component of ``a`` and ``b`` differs by at most ``tol``."""
    return all(abs(x - y) <= tol for x, y in zip(a, b))
