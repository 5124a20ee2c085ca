"""STL import and export for signmesh meshes.

Binary layout: an 80-byte header, a little-endian ``uint32`` triangle
count, then 50 bytes per triangle (normal and three vertices as
``float32`` followed by a ``uint16`` attribute word).  Normals are always
recomputed from vertex positions when writing; the normal stored on a
:class:`~signmesh.geometry_utils.Triangle` is never trusted.
"""

from __future__ import annotations

import io
import logging
import re
import struct
from typing import Iterable, List, Tuple

from signmesh.geometry_utils import ZERO, Triangle, triangle_is_degenerate, triangle_normal
from signmesh.mesh import Mesh

logger = logging.getLogger(__name__)

_HEADER_SIZE = 80
_STRUCT_COUNT = struct.Struct('<I')
_STRUCT_TRIANGLE = struct.Struct('<12fH')


def _facets(triangles: Iterable[Triangle]) -> List[Tuple[Triangle, Tuple[float, float, float]]]:
    out = []
    degenerate = 0
    for tri in triangles:
        if triangle_is_degenerate(tri.v0, tri.v1, tri.v2):
            degenerate += 1
            normal = ZERO
        else:
            normal = triangle_normal(tri.v0, tri.v1, tri.v2) or ZERO
        out.append((tri, normal))
    if degenerate:
        logger.debug("writing %d degenerate triangle(s) with zero normals", degenerate)
    return out


def _header(name: str) -> bytes:
    return name[:_HEADER_SIZE].encode('ascii', errors='replace').ljust(_HEADER_SIZE, b' ')


def stl_bytes(mesh: Iterable[Triangle], name: str = 'signmesh') -> bytes:
    """Serialize ``mesh`` to a binary STL buffer.

    An empty mesh gives a valid 84-byte file with a zero count.
    """
    facets = _facets(mesh)
    buf = bytearray(_header(name))
    buf += _STRUCT_COUNT.pack(len(facets))
    for tri, n in facets:
        buf += _STRUCT_TRIANGLE.pack(*n, *tri.v0, *tri.v1, *tri.v2, 0)
    return bytes(buf)


def stl_text(mesh: Iterable[Triangle], name: str = 'signmesh') -> str:
    """Serialize ``mesh`` to ASCII STL."""
    out = io.StringIO()
    _write_ascii(_facets(mesh), out, name)
    return out.getvalue()


def write_stl(mesh: Iterable[Triangle], path_or_file, *, binary: bool = True,
              name: str = 'signmesh') -> None:
    """Write ``mesh`` to STL.

    ``path_or_file`` can be a filesystem path or an open stream (binary
    for ``binary=True``, text otherwise).
    """
    if binary:
        data = stl_bytes(mesh, name)
        if hasattr(path_or_file, 'write'):
            path_or_file.write(data)
        else:
            with open(path_or_file, 'wb') as stream:
                stream.write(data)
        return

    facets = _facets(mesh)
    if hasattr(path_or_file, 'write'):
        _write_ascii(facets, path_or_file, name)
    else:
        with open(path_or_file, 'w', encoding='ascii') as stream:
            _write_ascii(facets, stream, name)


def _write_ascii(facets, stream, name: str) -> None:
    print(f"solid {name}", file=stream)
    for tri, n in facets:
        print(f"  facet normal {n[0]:.6e} {n[1]:.6e} {n[2]:.6e}", file=stream)
        print("    outer loop", file=stream)
        for v in tri.vertices:
            print(f"      vertex {v[0]:.6e} {v[1]:.6e} {v[2]:.6e}", file=stream)
        print("    endloop", file=stream)
        print("  endfacet", file=stream)
    print(f"endsolid {name}", file=stream)


# ---------------------------------------------------------------------------
# STL Import
# ---------------------------------------------------------------------------


def _is_binary_stl(data: bytes) -> bool:
    """Determine if STL data is binary format.

    Binary STL has 80-byte header + 4-byte count, then 50 bytes per triangle.
    ASCII STL starts with 'solid' keyword, but binary headers may too.
    """
    if len(data) < _HEADER_SIZE + 4:
        return False
    count = _STRUCT_COUNT.unpack_from(data, _HEADER_SIZE)[0]
    if len(data) == _HEADER_SIZE + 4 + count * _STRUCT_TRIANGLE.size:
        return True
    header = data[:_HEADER_SIZE].decode('ascii', errors='ignore').strip().lower()
    return not header.startswith('solid')


def _parse_binary_stl(data: bytes) -> List[Triangle]:
    count = _STRUCT_COUNT.unpack_from(data, _HEADER_SIZE)[0]
    triangles = []
    offset = _HEADER_SIZE + 4
    for _ in range(count):
        if offset + _STRUCT_TRIANGLE.size > len(data):
            logger.warning("binary STL truncated after %d of %d triangles", len(triangles), count)
            break
        values = _STRUCT_TRIANGLE.unpack_from(data, offset)
        triangles.append(Triangle(normal=values[0:3], v0=values[3:6],
                                  v1=values[6:9], v2=values[9:12]))
        offset += _STRUCT_TRIANGLE.size
    return triangles


_NUM = r'([-+]?[\d.]+(?:[eE][-+]?\d+)?)'
_FACET = re.compile(
    r'facet\s+normal\s+' + r'\s+'.join([_NUM] * 3) + r'\s+'
    r'outer\s+loop\s+'
    + r'\s+'.join([r'vertex\s+' + r'\s+'.join([_NUM] * 3)] * 3) +
    r'\s+endloop\s+endfacet',
    re.IGNORECASE,
)


def _parse_ascii_stl(text: str) -> List[Triangle]:
    triangles = []
    for match in _FACET.finditer(text):
        vals = [float(g) for g in match.groups()]
        triangles.append(Triangle(normal=tuple(vals[0:3]), v0=tuple(vals[3:6]),
                                  v1=tuple(vals[6:9]), v2=tuple(vals[9:12])))
    return triangles


def read_stl(path_or_file) -> Mesh:
    """Read binary or ASCII STL into a :class:`Mesh`.

    ``path_or_file`` is a path, an open stream, or raw ``bytes``.
    Stored normals are kept as read.
    """
    if isinstance(path_or_file, (bytes, bytearray)):
        data = bytes(path_or_file)
    elif hasattr(path_or_file, 'read'):
        data = path_or_file.read()
        if isinstance(data, str):
            data = data.encode('utf-8')
    else:
        with open(path_or_file, 'rb') as f:
            data = f.read()

    if _is_binary_stl(data):
        triangles = _parse_binary_stl(data)
    else:
        triangles = _parse_ascii_stl(data.decode('utf-8', errors='replace'))
    return Mesh(triangles)


__all__ = ['stl_bytes', 'stl_text', 'write_stl', 'read_stl']
