import logging
import math

import pytest

from signmesh.config import KernelLimits
from signmesh.errors import GeometryLimitError
from signmesh.paths import SweepPath
from signmesh.sweep import _perpendicular_seed, circle_ring, path_tangents, sweep_hollow_tube, sweep_tube, transport_frames
from signmesh.vec import dot, mag, sub


def _polygon_area(r, n):
    return 0.5 * n * r * r * math.sin(2 * math.pi / n)


def test_straight_path_has_no_twist():
    points = [(float(x), 0.0, 0.0) for x in range(0, 40, 10)]
    frames = transport_frames(points)
    rings = [circle_ring(f, 2.0, 12) for f in frames]
    for frame, ring in zip(frames, rings):
        assert frame.normal == pytest.approx(frames[0].normal)
        offsets = [sub(p, frame.origin) for p in ring]
        reference = [sub(p, frames[0].origin) for p in rings[0]]
        for a, b in zip(offsets, reference):
            assert a == pytest.approx(b, abs=1e-9)


def test_frames_are_orthonormal_on_a_helix():
    points = [(5 * math.cos(t / 4), 5 * math.sin(t / 4), t * 0.5) for t in range(40)]
    for f in transport_frames(points):
        assert mag(f.tangent) == pytest.approx(1.0)
        assert mag(f.normal) == pytest.approx(1.0)
        assert mag(f.binormal) == pytest.approx(1.0)
        assert abs(dot(f.tangent, f.normal)) < 1e-9
        assert abs(dot(f.tangent, f.binormal)) < 1e-9


def test_vertical_path_reseeds_normal():
    frames = transport_frames([(0, 0, 0), (0, 0, 5)])
    for f in frames:
        assert abs(dot(f.tangent, f.normal)) < 1e-9
        assert mag(f.normal) == pytest.approx(1.0)


@pytest.mark.parametrize("tangent", [
    (0.0, 0.0, 1.0),
    (1.0, 0.0, 0.0),
    (0.6, 0.0, 0.8),
    (0.0, 0.0, 0.0),
])
def test_perpendicular_seed_is_always_a_unit_vector(tangent):
    seed = _perpendicular_seed(tangent)
    assert math.isclose(mag(seed), 1.0)
    assert abs(dot(seed, tangent)) < 1e-9


def test_reversal_tangent_follows_outgoing_segment():
    tangents = path_tangents([(0, 0, 0), (1, 0, 0), (0, 0, 0)])
    assert tangents[1] == pytest.approx((-1.0, 0.0, 0.0))


def test_open_tube_is_closed_solid():
    mesh = sweep_tube(SweepPath([(0, 0), (10, 0)]), 1.0, segments=16)
    assert len(mesh) == 2 * 16 + 2 * 16
    assert mesh.is_closed()
    assert mesh.signed_volume() == pytest.approx(_polygon_area(1.0, 16) * 10.0)


def test_bent_tube_is_watertight():
    path = SweepPath([(0, 0), (10, 0), (15, 5), (15, 15)], z=3.0)
    mesh = sweep_tube(path, 1.5, segments=12)
    assert len(mesh) == 2 * 12 * 3 + 2 * 12
    assert mesh.is_closed()
    assert mesh.signed_volume() > 0


def test_closed_path_tube_has_no_caps():
    square = SweepPath([(0, 0), (20, 0), (20, 20), (0, 20)], closed=True)
    mesh = sweep_tube(square, 1.0, segments=8)
    assert len(mesh) == 2 * 8 * 4
    assert mesh.is_closed()
    assert mesh.signed_volume() > 0


def test_closed_flag_overrides_path():
    path = SweepPath([(0, 0), (20, 0), (20, 20), (0, 20)])
    assert len(sweep_tube(path, 1.0, segments=8, closed=True)) == 64


def test_duplicate_points_do_not_break_the_sweep():
    path = SweepPath([(0, 0), (0, 0), (5, 0), (5, 0), (5, 0), (5, 5)])
    mesh = sweep_tube(path, 0.5, segments=8)
    assert len(mesh) == 2 * 8 * 2 + 2 * 8
    assert mesh.is_closed()


@pytest.mark.parametrize("points", [[], [(1, 1)], [(2, 2), (2, 2), (2, 2)]])
def test_short_paths_give_empty_mesh(points):
    assert sweep_tube(SweepPath(points), 1.0).is_empty


def test_non_positive_radius_gives_empty_mesh():
    assert sweep_tube(SweepPath([(0, 0), (1, 0)]), 0.0).is_empty


def test_segments_are_clamped(caplog):
    with caplog.at_level(logging.WARNING, logger="signmesh"):
        mesh = sweep_tube(SweepPath([(0, 0), (1, 0)]), 1.0, segments=2)
    assert len(mesh) == 12
    assert mesh.is_closed()
    assert "clamped" in caplog.text


def test_segment_limit():
    with pytest.raises(GeometryLimitError):
        sweep_tube(SweepPath([(0, 0), (1, 0)]), 1.0, segments=64,
                   limits=KernelLimits(max_segments=32))


def test_path_point_limit():
    path = SweepPath([(i, 0) for i in range(10)])
    with pytest.raises(GeometryLimitError):
        sweep_tube(path, 1.0, limits=KernelLimits(max_path_points=5))


def test_hollow_tube_volume():
    mesh = sweep_hollow_tube(SweepPath([(0, 0), (0, 8)]), 2.0, 1.0, segments=16)
    assert len(mesh) == 4 * 16 + 4 * 16
    assert mesh.is_closed()
    expected = (_polygon_area(2.0, 16) - _polygon_area(1.0, 16)) * 8.0
    assert mesh.signed_volume() == pytest.approx(expected)


def test_hollow_tube_closed_loop():
    square = SweepPath([(0, 0), (20, 0), (20, 20), (0, 20)], closed=True)
    mesh = sweep_hollow_tube(square, 2.0, 1.0, segments=8)
    assert len(mesh) == 4 * 8 * 4
    assert mesh.is_closed()


def test_hollow_tube_with_bad_inner_radius_is_solid():
    path = SweepPath([(0, 0), (10, 0)])
    mesh = sweep_hollow_tube(path, 1.0, 1.5, segments=8)
    assert len(mesh) == len(sweep_tube(path, 1.0, segments=8))
