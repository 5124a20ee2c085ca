"""I/O utilities for signmesh."""

from .obj import obj_text, write_obj
from .stl import read_stl, stl_bytes, stl_text, write_stl

__all__ = ['stl_bytes', 'stl_text', 'write_stl', 'read_stl', 'obj_text', 'write_obj']
