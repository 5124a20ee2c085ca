"""Swept tubes along arbitrary 3D paths.

Cross-section rings are placed with a parallel-transport frame rather
than a Frenet frame.  The Frenet normal follows curvature and flips or
spins wherever the path is nearly straight, which shows up as a visible
twist in the tube.  Parallel transport instead carries the previous
normal forward, projecting it onto the plane perpendicular to each new
tangent, so a straight run keeps a constant ring orientation.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence

from signmesh.config import DEFAULT_LIMITS, KernelLimits
from signmesh.geometry_utils import orient_triangle
from signmesh.mesh import Mesh
from signmesh.paths import DEFAULT_TOLERANCE, SweepPath
from signmesh.vec import Vec3, add, cross, dot, epsilon, madd, mag, normalize, scale, sub

logger = logging.getLogger(__name__)

MIN_SEGMENTS = 3

# Below this length a transported normal is considered collapsed
_COLLAPSE = 1e-4

_WORLD_Z: Vec3 = (0.0, 0.0, 1.0)
_WORLD_X: Vec3 = (1.0, 0.0, 0.0)


@dataclass(frozen=True)
class Frame:
    """Orthonormal frame at one path point.

    ``binormal`` is ``tangent x normal``.
    """
    origin: Vec3
    tangent: Vec3
    normal: Vec3
    binormal: Vec3


def _perpendicular_seed(tangent: Vec3) -> Vec3:
    """A unit vector perpendicular to ``tangent`` built from a world axis.

    A zero tangent has no perpendicular and gets ``_WORLD_X``.
    """
    axes = (_WORLD_Z, _WORLD_X) if abs(tangent[2]) < 0.9 else (_WORLD_X, _WORLD_Z)
    for axis in axes:
        seed = normalize(cross(tangent, axis))
        if seed is not None:
            return seed
    return _WORLD_X


def path_tangents(points: Sequence[Vec3], closed: bool = False) -> List[Vec3]:
    """Unit tangents; interior points average the adjacent segment directions."""
    n = len(points)
    tangents: List[Vec3] = []
    for i in range(n):
        if closed:
            incoming = normalize(sub(points[i], points[i - 1]))
            outgoing = normalize(sub(points[(i + 1) % n], points[i]))
        else:
            incoming = normalize(sub(points[i], points[i - 1])) if i > 0 else None
            outgoing = normalize(sub(points[i + 1], points[i])) if i < n - 1 else None

        if incoming is not None and outgoing is not None:
            # a full reversal averages to zero; follow the outgoing segment
            tangent = normalize(add(incoming, outgoing)) or outgoing
        else:
            tangent = incoming or outgoing
        if tangent is None:
            # only reachable with coincident points, which callers filter
            tangent = tangents[-1] if tangents else _WORLD_X
        tangents.append(tangent)
    return tangents


def transport_frames(points: Sequence[Vec3], closed: bool = False,
                     seed: Vec3 = _WORLD_Z) -> List[Frame]:
    """Parallel-transport frames along ``points``.

    The first normal is ``seed`` projected perpendicular to the first
    tangent (re-seeded from a world axis if that projection collapses).
    Each following normal is the previous one projected onto the plane
    perpendicular to the new tangent and renormalised.
    """
    frames: List[Frame] = []
    if not points:
        return frames

    tangents = path_tangents(points, closed)
    prev_normal = seed
    for p, t in zip(points, tangents):
        projected = sub(prev_normal, scale(t, dot(prev_normal, t)))
        length = mag(projected)
        if length < _COLLAPSE:
            normal = _perpendicular_seed(t)
        else:
            normal = scale(projected, 1.0 / length)
        binormal = cross(t, normal)
        frames.append(Frame(origin=p, tangent=t, normal=normal, binormal=binormal))
        prev_normal = normal
    return frames


def circle_ring(frame: Frame, radius: float, segments: int) -> List[Vec3]:
    """``segments`` points on a circle around the frame origin."""
    ring: List[Vec3] = []
    for j in range(segments):
        angle = 2.0 * math.pi * j / segments
        c, s = math.cos(angle), math.sin(angle)
        offset = add(scale(frame.normal, c), scale(frame.binormal, s))
        ring.append(madd(frame.origin, offset, radius))
    return ring


def _stitch_rings(mesh: Mesh, ring0: Sequence[Vec3], ring1: Sequence[Vec3],
                  inward: bool = False) -> None:
    segments = len(ring0)
    for j in range(segments):
        j1 = (j + 1) % segments
        v1, v2, v3, v4 = ring0[j], ring0[j1], ring1[j], ring1[j1]
        if inward:
            mesh.add_triangle(v1, v3, v2)
            mesh.add_triangle(v2, v3, v4)
        else:
            mesh.add_triangle(v1, v2, v3)
            mesh.add_triangle(v2, v4, v3)


def _prepare(path: SweepPath, segments: int, closed: Optional[bool],
             limits: KernelLimits):
    limits.check_path(len(path))
    if segments < MIN_SEGMENTS:
        logger.warning("segment count %d clamped to %d", segments, MIN_SEGMENTS)
        segments = MIN_SEGMENTS
    limits.check_segments(segments)

    is_closed = path.closed if closed is None else closed
    path = SweepPath(path.points, closed=is_closed).deduplicated(DEFAULT_TOLERANCE)
    points = path.points
    if is_closed and len(points) < 3:
        is_closed = False
    return points, segments, is_closed


def sweep_tube(path: SweepPath, radius: float, segments: int = 16,
               closed: Optional[bool] = None,
               limits: Optional[KernelLimits] = None) -> Mesh:
    """Sweep a circle of ``radius`` along ``path``.

    Open paths are closed off with triangle fans to the first and last
    path points; closed paths join the last ring back to the first.
    ``closed`` overrides ``path.closed`` when given.  Consecutive
    duplicate points are dropped first; fewer than two remaining points
    (or a non-positive radius) give an empty mesh.
    """
    limits = limits or DEFAULT_LIMITS
    points, segments, is_closed = _prepare(path, segments, closed, limits)
    mesh = Mesh()
    if len(points) < 2:
        logger.debug("sweep path has %d usable point(s), nothing to build", len(points))
        return mesh
    if radius <= epsilon:
        logger.warning("tube radius %.3g is not positive, returning empty mesh", radius)
        return mesh

    spans = len(points) if is_closed else len(points) - 1
    limits.check_triangles(2 * segments * spans + (0 if is_closed else 2 * segments))

    frames = transport_frames(points, is_closed)
    rings = [circle_ring(f, radius, segments) for f in frames]

    for i in range(spans):
        _stitch_rings(mesh, rings[i], rings[(i + 1) % len(rings)])

    if not is_closed:
        first, last = rings[0], rings[-1]
        start, end = points[0], points[-1]
        for j in range(segments):
            j1 = (j + 1) % segments
            mesh.add_triangle(start, first[j1], first[j])
        for j in range(segments):
            j1 = (j + 1) % segments
            mesh.add_triangle(end, last[j], last[j1])

    return mesh


def sweep_hollow_tube(path: SweepPath, outer_radius: float, inner_radius: float,
                      segments: int = 16, closed: Optional[bool] = None,
                      limits: Optional[KernelLimits] = None) -> Mesh:
    """Sweep an annulus along ``path``.

    The outer and inner walls share one set of transport frames; open
    ends get annular caps.  An ``inner_radius`` that is not smaller than
    ``outer_radius`` falls back to a solid tube.
    """
    if inner_radius <= epsilon or inner_radius >= outer_radius - epsilon:
        if inner_radius > epsilon:
            logger.warning("inner radius %.3g >= outer radius %.3g, building a solid tube",
                           inner_radius, outer_radius)
        return sweep_tube(path, outer_radius, segments, closed=closed, limits=limits)

    limits = limits or DEFAULT_LIMITS
    points, segments, is_closed = _prepare(path, segments, closed, limits)
    mesh = Mesh()
    if len(points) < 2:
        return mesh

    spans = len(points) if is_closed else len(points) - 1
    limits.check_triangles(4 * segments * spans + (0 if is_closed else 4 * segments))

    frames = transport_frames(points, is_closed)
    outer = [circle_ring(f, outer_radius, segments) for f in frames]
    inner = [circle_ring(f, inner_radius, segments) for f in frames]

    for i in range(spans):
        k = (i + 1) % len(frames)
        _stitch_rings(mesh, outer[i], outer[k])
        _stitch_rings(mesh, inner[i], inner[k], inward=True)

    if not is_closed:
        for ring_o, ring_i, facing in ((outer[0], inner[0], scale(frames[0].tangent, -1.0)),
                                       (outer[-1], inner[-1], frames[-1].tangent)):
            for j in range(segments):
                j1 = (j + 1) % segments
                a, b, c = orient_triangle(ring_o[j], ring_o[j1], ring_i[j1], facing)
                mesh.add_triangle(a, b, c)
                a, b, c = orient_triangle(ring_o[j], ring_i[j1], ring_i[j], facing)
                mesh.add_triangle(a, b, c)

    return mesh


__all__ = [
    "Frame",
    "MIN_SEGMENTS",
    "path_tangents",
    "transport_frames",
    "circle_ring",
    "sweep_tube",
    "sweep_hollow_tube",
]
