"""U-channel bases and matching diffuser caps.

A channel is a U-shaped profile swept along a path: two side walls on a
solid floor, open at the top, sized to hold an LED strip.  The diffuser
cap is a separate rectangular strip swept along the same frames so that
it lines up with the channel opening after printing.

Cross-section, looking along the path (``s`` to the left, ``h`` up)::

    OL.hi  IL.hi       IR.hi  OR.hi
      +------+           +------+     <- top   = floor + wall_height
      |      |           |      |
      |      +-----------+      |     <- floor = base_z + floor_thickness
      |    IL.lo       IR.lo    |
      +-------------------------+     <- base_z above the path point
    OL.lo                     OR.lo

Each path point contributes four rails: outer-left, inner-left,
inner-right and outer-right.  Outer rails span ``base_z .. top`` and inner
rails ``floor .. top``.  The rims between outer and inner rails close the
walls into a single U, and open path ends are closed with fixed
triangle fans so the base stays watertight.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Iterable, List, Optional, Sequence, Tuple

from signmesh.config import DEFAULT_LIMITS, KernelLimits
from signmesh.contours import ContourLike, points_of
from signmesh.mesh import Mesh
from signmesh.paths import DEFAULT_TOLERANCE, SweepPath, clean_loop
from signmesh.sweep import Frame, transport_frames
from signmesh.vec import Vec3, cross, madd

logger = logging.getLogger(__name__)

# Smallest wall or opening (mm) the generator will emit
MIN_FEATURE = 0.1

Rail = Tuple[Vec3, Vec3]


@dataclass(frozen=True)
class ChannelProfile:
    """Channel cross-section, all values in millimetres.

    Attributes:
        width: Outer width of the channel
        wall_thickness: Thickness of each side wall
        wall_height: Height of the walls above the channel floor
        floor_thickness: Solid material under the channel floor
        cap_thickness: Thickness of the diffuser cap
        snap_tolerance: Per-side clearance between cap and channel
        base_z: Offset of the channel bottom above the path points
    """
    width: float
    wall_thickness: float
    wall_height: float
    floor_thickness: float
    cap_thickness: float = 2.0
    snap_tolerance: float = 0.2
    base_z: float = 0.0

    @property
    def inner_width(self) -> float:
        return self.width - 2.0 * self.wall_thickness

    @property
    def cap_width(self) -> float:
        return self.width - 2.0 * self.wall_thickness + 2.0 * self.snap_tolerance

    @property
    def floor(self) -> float:
        return self.base_z + self.floor_thickness

    @property
    def top(self) -> float:
        return self.floor + self.wall_height

    def clamped(self) -> "ChannelProfile":
        """Return the profile with its wall and cap dimensions forced into range.

        The wall must leave an opening of at least :data:`MIN_FEATURE`
        and be at least :data:`MIN_FEATURE` thick itself.  The cap must
        stay at least :data:`MIN_FEATURE` wide and thick, which bounds a
        negative ``snap_tolerance``.  Out-of-range values are moved to
        the nearest valid one and logged.
        """
        changes = {}
        upper = (self.width - MIN_FEATURE) / 2.0
        wall = min(max(self.wall_thickness, MIN_FEATURE), upper)
        if wall != self.wall_thickness:
            logger.warning("channel wall thickness %.3g clamped to %.3g for width %.3g",
                           self.wall_thickness, wall, self.width)
            changes['wall_thickness'] = wall

        min_tolerance = (MIN_FEATURE - (self.width - 2.0 * wall)) / 2.0
        if self.snap_tolerance < min_tolerance:
            logger.warning("snap tolerance %.3g clamped to %.3g to keep the cap %.3g wide",
                           self.snap_tolerance, min_tolerance, MIN_FEATURE)
            changes['snap_tolerance'] = min_tolerance

        if self.cap_thickness < MIN_FEATURE:
            logger.warning("cap thickness %.3g clamped to %.3g",
                           self.cap_thickness, MIN_FEATURE)
            changes['cap_thickness'] = MIN_FEATURE

        return replace(self, **changes) if changes else self

    @property
    def is_buildable(self) -> bool:
        return (self.width >= 3.0 * MIN_FEATURE
                and self.wall_height > 0.0
                and self.floor_thickness > 0.0)


@dataclass(frozen=True)
class ChannelRails:
    """The four rails of one channel cross-section, each ``(lower, upper)``."""
    outer_left: Rail
    inner_left: Rail
    inner_right: Rail
    outer_right: Rail

    def u_ring(self) -> List[Vec3]:
        """U outline, counter-clockwise in the (left, up) plane."""
        return [
            self.outer_right[0], self.outer_left[0],
            self.outer_left[1], self.inner_left[1],
            self.inner_left[0], self.inner_right[0],
            self.inner_right[1], self.outer_right[1],
        ]


@dataclass
class ChannelParts:
    """Separate meshes for the channel base and its diffuser cap."""
    base: Mesh
    cap: Mesh
    profile: ChannelProfile


# Triangles closing the U outline: right wall, floor, left wall.
_U_CAP = ((0, 5, 6), (0, 6, 7), (0, 1, 4), (0, 4, 5), (1, 2, 3), (1, 3, 4))
_RECT_CAP = ((0, 1, 2), (0, 2, 3))


def lateral(frame: Frame) -> Vec3:
    """Unit vector pointing left of travel in the frame's cross-section plane."""
    return cross(frame.normal, frame.tangent)


def channel_rails(frame: Frame, profile: ChannelProfile) -> ChannelRails:
    left = lateral(frame)
    up = frame.normal
    half = profile.width / 2.0
    inner_half = half - profile.wall_thickness

    def _at(s: float, h: float) -> Vec3:
        return madd(madd(frame.origin, left, s), up, h)

    bottom = profile.base_z
    top = profile.top
    floor = profile.floor
    return ChannelRails(
        outer_left=(_at(half, bottom), _at(half, top)),
        inner_left=(_at(inner_half, floor), _at(inner_half, top)),
        inner_right=(_at(-inner_half, floor), _at(-inner_half, top)),
        outer_right=(_at(-half, bottom), _at(-half, top)),
    )


def cap_ring(frame: Frame, profile: ChannelProfile) -> List[Vec3]:
    """Diffuser cap outline at one frame, counter-clockwise in the (left, up) plane.

    The cap spans exactly :attr:`ChannelProfile.cap_width` and sits on
    the channel rims, from ``top`` to ``top + cap_thickness``.
    """
    left = lateral(frame)
    up = frame.normal
    half = profile.cap_width / 2.0
    bottom = profile.top
    upper = bottom + profile.cap_thickness

    def _at(s: float, h: float) -> Vec3:
        return madd(madd(frame.origin, left, s), up, h)

    return [_at(-half, bottom), _at(half, bottom), _at(half, upper), _at(-half, upper)]


def sweep_rings(mesh: Mesh, rings: Sequence[Sequence[Vec3]], closed: bool,
                cap_triangles: Iterable[Tuple[int, int, int]] = ()) -> None:
    """Stitch consecutive profile rings into a closed tube of that profile.

    Rings must all have the same length and wind counter-clockwise in
    the (left, up) plane, so their area normal is the path tangent.
    ``cap_triangles`` index into a ring, wind the same way, and close
    the open ends of a non-closed sweep.
    """
    if len(rings) < 2:
        return
    size = len(rings[0])
    spans = len(rings) if closed else len(rings) - 1
    for k in range(spans):
        r0 = rings[k]
        r1 = rings[(k + 1) % len(rings)]
        for i in range(size):
            i1 = (i + 1) % size
            mesh.add_triangle(r0[i], r0[i1], r1[i1])
            mesh.add_triangle(r0[i], r1[i1], r1[i])

    if closed:
        return
    first, last = rings[0], rings[-1]
    for a, b, c in cap_triangles:
        mesh.add_triangle(first[a], first[c], first[b])
    for a, b, c in cap_triangles:
        mesh.add_triangle(last[a], last[b], last[c])


def _frames_for(path: SweepPath, closed: Optional[bool],
                limits: KernelLimits) -> Tuple[List[Frame], bool]:
    limits.check_path(len(path))
    is_closed = path.closed if closed is None else closed
    points = SweepPath(path.points, closed=is_closed).deduplicated(DEFAULT_TOLERANCE).points
    if is_closed and len(points) < 3:
        is_closed = False
    if len(points) < 2:
        logger.debug("channel path has %d usable point(s), nothing to build", len(points))
        return [], is_closed
    return transport_frames(points, is_closed), is_closed


def _checked_profile(profile: ChannelProfile) -> Optional[ChannelProfile]:
    if not profile.is_buildable:
        logger.warning("channel profile %s is too small to build", profile)
        return None
    return profile.clamped()


def channel_base(path: SweepPath, profile: ChannelProfile,
                 closed: Optional[bool] = None,
                 limits: Optional[KernelLimits] = None) -> Mesh:
    """Sweep the U profile along ``path`` and return the base mesh."""
    return channel_with_cap(path, profile, closed=closed, limits=limits).base


def diffuser_cap(path: SweepPath, profile: ChannelProfile,
                 closed: Optional[bool] = None,
                 limits: Optional[KernelLimits] = None) -> Mesh:
    """Sweep the diffuser cap for ``profile`` along ``path``."""
    return channel_with_cap(path, profile, closed=closed, limits=limits).cap


def channel_with_cap(path: SweepPath, profile: ChannelProfile,
                     closed: Optional[bool] = None,
                     limits: Optional[KernelLimits] = None) -> ChannelParts:
    """Build a U-channel base and its matching diffuser cap.

    Both meshes follow the same transport frames.  The profile's wall
    and cap dimensions are clamped first (see :meth:`ChannelProfile.clamped`); the
    clamped profile is returned with the parts.  Paths with fewer than
    two distinct points, or profiles too small to build, give empty
    meshes.
    """
    limits = limits or DEFAULT_LIMITS
    checked = _checked_profile(profile)
    if checked is None:
        return ChannelParts(base=Mesh(), cap=Mesh(), profile=profile)
    profile = checked

    frames, is_closed = _frames_for(path, closed, limits)
    base, cap = Mesh(), Mesh()
    if not frames:
        return ChannelParts(base=base, cap=cap, profile=profile)

    spans = len(frames) if is_closed else len(frames) - 1
    limits.check_triangles(16 * spans + 12)

    u_rings = [channel_rails(f, profile).u_ring() for f in frames]
    sweep_rings(base, u_rings, is_closed, _U_CAP)

    c_rings = [cap_ring(f, profile) for f in frames]
    sweep_rings(cap, c_rings, is_closed, _RECT_CAP)

    logger.debug("channel: %d base and %d cap triangles over %d frames",
                 len(base), len(cap), len(frames))
    return ChannelParts(base=base, cap=cap, profile=profile)


def outline_channels(contours: Iterable[ContourLike], profile: ChannelProfile,
                     z: float = 0.0,
                     limits: Optional[KernelLimits] = None) -> ChannelParts:
    """Run a closed channel around every contour, e.g. each glyph outline.

    Contours are cleaned like any other loop; degenerate ones are skipped.
    """
    limits = limits or DEFAULT_LIMITS
    contours = list(contours)
    limits.check_contours(len(contours))
    base, cap = Mesh(), Mesh()
    used = profile
    for contour in contours:
        loop = clean_loop(points_of(contour))
        if len(loop) < 3:
            continue
        parts = channel_with_cap(SweepPath(loop, closed=True, z=z), profile, limits=limits)
        base.extend(parts.base)
        cap.extend(parts.cap)
        used = parts.profile
    return ChannelParts(base=base, cap=cap, profile=used)


__all__ = [
    "MIN_FEATURE",
    "ChannelProfile",
    "ChannelRails",
    "ChannelParts",
    "lateral",
    "channel_rails",
    "cap_ring",
    "sweep_rings",
    "channel_base",
    "diffuser_cap",
    "channel_with_cap",
    "outline_channels",
]
