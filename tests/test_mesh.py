import pytest

from signmesh.geometry_utils import Triangle
from signmesh.mesh import Mesh, edge_key, vertex_key
from signmesh.primitives import box


def test_add_triangle_computes_normal():
    mesh = Mesh()
    mesh.add_triangle((0, 0), (1, 0), (0, 1))
    tri = mesh.triangles[0]
    assert tri.normal == (0.0, 0.0, 1.0)
    assert tri.v0 == (0.0, 0.0, 0.0)


def test_add_quad_splits_into_two_triangles():
    mesh = Mesh()
    mesh.add_quad((0, 0, 0), (1, 0, 0), (1, 1, 0), (0, 1, 0))
    assert len(mesh) == 2
    assert [t.normal for t in mesh] == [(0.0, 0.0, 1.0)] * 2


def test_empty_mesh():
    mesh = Mesh()
    assert mesh.is_empty
    assert mesh.is_closed()
    assert mesh.bbox() is None
    assert mesh.signed_volume() == 0.0
    assert mesh.as_array().shape == (0, 3, 3)


def test_edge_keys_ignore_direction():
    assert edge_key((0, 0, 0), (1, 2, 3)) == edge_key((1, 2, 3), (0, 0, 0))
    assert vertex_key((0.1, 0.2, 0.3)) == vertex_key((0.1 + 1e-9, 0.2, 0.3))


def test_open_mesh_is_not_closed():
    mesh = box(1, 1, 1)
    mesh.triangles.pop()
    assert not mesh.is_closed()


def test_combine_and_extend():
    a = box(1, 1, 1)
    b = box(1, 1, 1, center=(5, 0, 0))
    combined = Mesh.combine(a, b)
    assert len(combined) == 24
    assert len(a) == 12
    assert combined.volume() == pytest.approx(2.0)
    assert len(Mesh().extend(a)) == 12


def test_translated():
    moved = box(2, 2, 2).translated(1, 2, 3)
    lo, hi = moved.bbox()
    assert lo == pytest.approx((0.0, 1.0, 2.0))
    assert hi == pytest.approx((2.0, 3.0, 4.0))


def test_mirrored_x_keeps_outward_normals():
    mesh = box(2, 1, 1, center=(3, 0, 0))
    mirrored = mesh.mirrored_x()
    assert mirrored.signed_volume() == pytest.approx(mesh.signed_volume())
    assert mirrored.is_closed()
    lo, hi = mirrored.bbox()
    assert lo[0] == pytest.approx(-4.0)
    assert hi[0] == pytest.approx(-2.0)
    for tri in mirrored:
        assert tri.normal == pytest.approx(tri.computed_normal())


def test_as_array():
    arr = Mesh([Triangle.from_vertices((0, 0, 0), (1, 0, 0), (0, 1, 0))]).as_array()
    assert arr.shape == (1, 3, 3)
    assert arr[0, 1, 0] == 1.0
