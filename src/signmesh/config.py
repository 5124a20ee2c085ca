"""Size ceilings for mesh generation.

The generators have no natural upper bound on the amount of geometry
they produce: a long freehand stroke or a large segment count turns into
an arbitrarily large triangle list.  :class:`KernelLimits` puts an
explicit, configurable ceiling on each input dimension.  Limits are
checked before any geometry is built.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from signmesh.errors import GeometryLimitError


@dataclass(frozen=True)
class KernelLimits:
    """Upper bounds applied to generator inputs.

    Attributes:
        max_path_points: Points in a single contour or sweep path
        max_contours: Contours in one classification call
        max_segments: Angular segments of a swept ring
        max_triangles: Triangles in one generated mesh
    """
    max_path_points: int = 20000
    max_contours: int = 2000
    max_segments: int = 256
    max_triangles: int = 2000000

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if not isinstance(value, int) or value <= 0:
                raise ValueError(f"{f.name} must be a positive integer, got {value!r}")

    def check_path(self, count: int) -> None:
        if count > self.max_path_points:
            raise GeometryLimitError("max_path_points", count, self.max_path_points)

    def check_contours(self, count: int) -> None:
        if count > self.max_contours:
            raise GeometryLimitError("max_contours", count, self.max_contours)

    def check_segments(self, count: int) -> None:
        if count > self.max_segments:
            raise GeometryLimitError("max_segments", count, self.max_segments)

    def check_triangles(self, count: int) -> None:
        if count > self.max_triangles:
            raise GeometryLimitError("max_triangles", count, self.max_triangles)

    def to_dict(self) -> Dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


DEFAULT_LIMITS = KernelLimits()


def limits_from_dict(data: Dict[str, Any], base: KernelLimits = DEFAULT_LIMITS) -> KernelLimits:
    """Return ``base`` with the entries of ``data`` applied.

    Unknown keys raise ``ValueError`` so that typos in a configuration
    file do not silently fall back to the defaults.
    """
    known = {f.name for f in fields(KernelLimits)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"unknown limit(s): {', '.join(unknown)}")
    return replace(base, **data)


def load_limits(path: Union[str, Path]) -> KernelLimits:
    """Read :class:`KernelLimits` from a YAML file.

    The file holds a flat mapping, for example::

        max_path_points: 5000
        max_segments: 64

    Missing keys keep their default values; an empty file yields
    :data:`DEFAULT_LIMITS`.
    """
    with Path(path).open("r", encoding="utf-8") as fp:
        data = yaml.safe_load(fp) or {}
    if not isinstance(data, dict):
        raise ValueError(f"limits file {path} must contain a mapping")
    return limits_from_dict(data)


__all__ = ["KernelLimits", "DEFAULT_LIMITS", "limits_from_dict", "load_limits"]
