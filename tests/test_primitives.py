import math

import pytest

from signmesh.primitives import attachment_loop, box, cylinder, strut


def _polygon_area(r, n):
    return 0.5 * n * r * r * math.sin(2 * math.pi / n)


def test_box_is_closed_and_centred():
    mesh = box(4, 2, 3, center=(1, 1, 1.5))
    assert len(mesh) == 12
    assert mesh.is_closed()
    assert mesh.signed_volume() == pytest.approx(24.0)
    lo, hi = mesh.bbox()
    assert lo == pytest.approx((-1.0, 0.0, 0.0))
    assert hi == pytest.approx((3.0, 2.0, 3.0))


def test_flat_box_is_empty():
    assert box(1, 1, 0).is_empty


def test_cylinder():
    mesh = cylinder(2.0, 5.0, segments=24, center=(3, 4), z0=1.0)
    assert len(mesh) == 4 * 24
    assert mesh.is_closed()
    assert mesh.signed_volume() == pytest.approx(_polygon_area(2.0, 24) * 5.0)
    lo, hi = mesh.bbox()
    assert lo[2] == pytest.approx(1.0)
    assert hi[2] == pytest.approx(6.0)


def test_attachment_loop_is_a_ring():
    mesh = attachment_loop((10, 0), 4.0, 8.0, 2.0, segments=32)
    assert mesh.is_closed()
    expected = (_polygon_area(4.0, 32) - _polygon_area(2.0, 32)) * 2.0
    assert mesh.signed_volume() == pytest.approx(expected)
    lo, hi = mesh.bbox()
    assert lo[0] == pytest.approx(6.0)
    assert hi[0] == pytest.approx(14.0)


def test_attachment_loop_without_room_for_a_hole_is_a_disc(caplog):
    mesh = attachment_loop((0, 0), 9.0, 8.0, 2.0, segments=16)
    assert mesh.is_closed()
    assert mesh.signed_volume() == pytest.approx(_polygon_area(4.0, 16) * 2.0)
    assert "disc" in caplog.text


@pytest.mark.parametrize("start, end, length", [
    ((0, 0), (10, 0), 10.0),
    ((1, 1), (4, 5), 5.0),
])
def test_strut(start, end, length):
    mesh = strut(start, end, 2.0, 3.0)
    assert len(mesh) == 12
    assert mesh.is_closed()
    assert mesh.signed_volume() == pytest.approx(length * 2.0 * 3.0)


def test_short_strut_is_skipped():
    assert strut((0, 0), (0.05, 0), 2.0, 3.0).is_empty
