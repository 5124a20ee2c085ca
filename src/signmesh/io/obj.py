"""Wavefront OBJ export.

Coincident vertices are merged on their 6-decimal text form so that the
face list references a shared vertex table, which is what most slicers
expect from OBJ input.  Indices in the output are 1-based.
"""

from __future__ import annotations

import io
from typing import Dict, Iterable, List, Tuple

from signmesh.geometry_utils import Triangle


def _vertex_text(v) -> str:
    return f"{v[0]:.6f} {v[1]:.6f} {v[2]:.6f}"


def index_mesh(mesh: Iterable[Triangle]) -> Tuple[List[str], List[Tuple[int, int, int]]]:
    """Return ``(vertices, faces)`` with merged vertices and 1-based faces."""
    index: Dict[str, int] = {}
    vertices: List[str] = []
    faces: List[Tuple[int, int, int]] = []
    for tri in mesh:
        face = []
        for v in tri.vertices:
            key = _vertex_text(v)
            if key not in index:
                vertices.append(key)
                index[key] = len(vertices)
            face.append(index[key])
        faces.append((face[0], face[1], face[2]))
    return vertices, faces


def obj_text(mesh: Iterable[Triangle], name: str = 'signmesh') -> str:
    """Serialize ``mesh`` as a single OBJ object called ``name``."""
    vertices, faces = index_mesh(mesh)
    out = io.StringIO()
    out.write("# signmesh OBJ export\n")
    out.write(f"# Vertices: {len(vertices)}\n")
    out.write(f"# Faces: {len(faces)}\n\n")
    out.write(f"o {name}\n")
    for v in vertices:
        out.write(f"v {v}\n")
    out.write("\n")
    for a, b, c in faces:
        out.write(f"f {a} {b} {c}\n")
    return out.getvalue()


def write_obj(mesh: Iterable[Triangle], path_or_file, *, name: str = 'signmesh') -> None:
    text = obj_text(mesh, name)
    if hasattr(path_or_file, 'write'):
        path_or_file.write(text)
    else:
        with open(path_or_file, 'w', encoding='ascii') as stream:
            stream.write(text)


__all__ = ['index_mesh', 'obj_text', 'write_obj']
