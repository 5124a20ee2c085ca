"""Multi-part export.

A print job is usually more than one mesh: a channel base and its
diffuser, a backing plate and raised letters, mounting hardware.  Each
part is exported to its own buffer with a filename that carries the
part name and the material it should be printed in, following the
``<slug>_<part>_<material>.<ext>`` convention.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Dict, Iterable, List, Union

import yaml

from signmesh.channel import ChannelParts
from signmesh.io.obj import obj_text
from signmesh.io.stl import stl_bytes
from signmesh.mesh import Mesh

logger = logging.getLogger(__name__)

MATERIALS = ('opaque', 'translucent')
FORMATS = ('stl', 'obj')

Payload = Union[bytes, str]


@dataclass
class ExportedPart:
    name: str
    mesh: Mesh
    material: str = 'opaque'

    def __post_init__(self):
        if self.material not in MATERIALS:
            raise ValueError(f"unknown material {self.material!r}; expected one of {MATERIALS}")


def slugify(text: str, default: str = 'part') -> str:
    """Filesystem-safe slug: whitespace runs become ``_``, other symbols are dropped."""
    slug = re.sub(r'\s+', '_', text.strip())
    slug = re.sub(r'[^A-Za-z0-9_-]', '', slug)
    return slug or default


def part_filename(slug: str, part: ExportedPart, fmt: str = 'stl') -> str:
    return f"{slugify(slug)}_{slugify(part.name)}_{part.material}.{fmt}"


def _check_format(fmt: str) -> str:
    fmt = fmt.lower()
    if fmt not in FORMATS:
        raise ValueError(f"unsupported export format {fmt!r}; expected one of {FORMATS}")
    return fmt


def export_parts(parts: Iterable[ExportedPart], slug: str,
                 fmt: str = 'stl') -> Dict[str, Payload]:
    """Serialize every part and return ``{filename: payload}``.

    STL payloads are ``bytes`` and OBJ payloads ``str``.  Empty parts are
    skipped with a warning since a zero-triangle file is not printable.
    Filenames that collide raise ``ValueError``.
    """
    fmt = _check_format(fmt)
    files: Dict[str, Payload] = {}
    for part in parts:
        if part.mesh.is_empty:
            logger.warning("skipping empty part %r", part.name)
            continue
        filename = part_filename(slug, part, fmt)
        if filename in files:
            raise ValueError(f"duplicate part filename {filename!r}")
        if fmt == 'obj':
            files[filename] = obj_text(part.mesh, slugify(part.name))
        else:
            files[filename] = stl_bytes(part.mesh, f"signmesh - {part.name}")
        logger.debug("exported %s (%d triangles)", filename, len(part.mesh))
    return files


def parts_manifest(parts: Iterable[ExportedPart], slug: str,
                   fmt: str = 'stl') -> List[Dict[str, object]]:
    """Describe the files :func:`export_parts` produces, in the same order."""
    fmt = _check_format(fmt)
    return [
        {
            'file': part_filename(slug, part, fmt),
            'part': part.name,
            'material': part.material,
            'triangles': len(part.mesh),
        }
        for part in parts
        if not part.mesh.is_empty
    ]


def manifest_yaml(parts: Iterable[ExportedPart], slug: str, fmt: str = 'stl') -> str:
    return yaml.safe_dump({'parts': parts_manifest(parts, slug, fmt)}, sort_keys=False)


def channel_export_parts(parts: ChannelParts, name: str = 'channel') -> List[ExportedPart]:
    """Opaque base and translucent diffuser for a channel build."""
    return [
        ExportedPart(f"{name}_base", parts.base, 'opaque'),
        ExportedPart(f"{name}_diffuser", parts.cap, 'translucent'),
    ]


__all__ = [
    'MATERIALS',
    'FORMATS',
    'ExportedPart',
    'slugify',
    'part_filename',
    'export_parts',
    'parts_manifest',
    'manifest_yaml',
    'channel_export_parts',
]
