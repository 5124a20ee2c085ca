"""Closed primitive solids used alongside the main generators.

These cover the small fixed parts of a sign or tag: backing blocks,
wiring bosses, the hanging loop and the struts that tie a loop or a
stray glyph to the rest of the part.  Every primitive is a closed mesh
with outward-facing triangles, so it can be exported on its own or
concatenated with other parts.
"""

from __future__ import annotations

import logging
import math
from typing import Optional, Sequence

from signmesh.config import KernelLimits
from signmesh.extrude import extrude_contours
from signmesh.mesh import Mesh
from signmesh.outlines import circle
from signmesh.paths import Contour, SweepPath
from signmesh.sweep import sweep_tube
from signmesh.vec import epsilon

logger = logging.getLogger(__name__)

# Struts shorter than this (mm) are skipped
MIN_STRUT_LENGTH = 0.1

# Box faces over the corner numbering used in box(), wound outward
_BOX_FACES = (
    (0, 3, 2, 1),  # -z
    (4, 5, 6, 7),  # +z
    (0, 1, 5, 4),  # -y
    (2, 3, 7, 6),  # +y
    (3, 0, 4, 7),  # -x
    (1, 2, 6, 5),  # +x
)


def box(width: float, depth: float, height: float,
        center: Sequence[float] = (0.0, 0.0, 0.0)) -> Mesh:
    """Axis-aligned box of ``width x depth x height`` around ``center``."""
    cx, cy, cz = center
    hw, hd, hh = width / 2.0, depth / 2.0, height / 2.0
    corners = [
        (cx - hw, cy - hd, cz - hh), (cx + hw, cy - hd, cz - hh),
        (cx + hw, cy + hd, cz - hh), (cx - hw, cy + hd, cz - hh),
        (cx - hw, cy - hd, cz + hh), (cx + hw, cy - hd, cz + hh),
        (cx + hw, cy + hd, cz + hh), (cx - hw, cy + hd, cz + hh),
    ]
    mesh = Mesh()
    if min(width, depth, height) <= epsilon:
        logger.warning("box %gx%gx%g has no volume", width, depth, height)
        return mesh
    for a, b, c, d in _BOX_FACES:
        mesh.add_quad(corners[a], corners[b], corners[c], corners[d])
    return mesh


def cylinder(radius: float, height: float, segments: int = 32,
             center: Sequence[float] = (0.0, 0.0), z0: float = 0.0,
             limits: Optional[KernelLimits] = None) -> Mesh:
    """Vertical cylinder standing on ``z0`` at the XY ``center``."""
    x, y = center[0], center[1]
    path = SweepPath([(x, y, z0), (x, y, z0 + height)])
    return sweep_tube(path, radius, segments, limits=limits)


def attachment_loop(center: Sequence[float], inner_diameter: float,
                    outer_diameter: float, height: float, segments: int = 32,
                    z0: float = 0.0, limits: Optional[KernelLimits] = None) -> Mesh:
    """Flat ring for hanging a tag, with flat top and bottom faces.

    An inner diameter that does not leave a ring gives a solid disc.
    """
    outer = circle(outer_diameter, outer_diameter, segments)
    contours = [outer]
    if 0.0 < inner_diameter < outer_diameter - epsilon:
        contours.append(circle(inner_diameter, inner_diameter, segments).reversed())
    elif inner_diameter > 0.0:
        logger.warning("loop inner diameter %g does not fit in %g, building a disc",
                       inner_diameter, outer_diameter)
    return extrude_contours(contours, height, offset=(center[0], center[1], z0), limits=limits)


def strut(start: Sequence[float], end: Sequence[float], width: float,
          height: float, z0: float = 0.0,
          limits: Optional[KernelLimits] = None) -> Mesh:
    """Rectangular bar of ``width`` joining two XY points."""
    dx, dy = end[0] - start[0], end[1] - start[1]
    length = math.hypot(dx, dy)
    if length < MIN_STRUT_LENGTH or width <= epsilon:
        return Mesh()
    nx, ny = -dy / length * width / 2.0, dx / length * width / 2.0
    outline = Contour([
        (start[0] - nx, start[1] - ny),
        (end[0] - nx, end[1] - ny),
        (end[0] + nx, end[1] + ny),
        (start[0] + nx, start[1] + ny),
    ])
    return extrude_contours([outline], height, offset=(0.0, 0.0, z0), limits=limits)


__all__ = ['box', 'cylinder', 'attachment_loop', 'strut', 'MIN_STRUT_LENGTH']
