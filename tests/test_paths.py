import math

import pytest

from signmesh.paths import (
    Contour,
    SweepPath,
    clean_loop,
    points_from_flat,
    signed_area,
    simplify,
)


SQUARE = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]


def test_signed_area_sign_follows_winding():
    assert math.isclose(signed_area(SQUARE), 1.0)
    assert math.isclose(signed_area(list(reversed(SQUARE))), -1.0)
    assert signed_area(SQUARE[:2]) == 0.0


def test_clean_loop_drops_closing_and_near_duplicates():
    loop = SQUARE + [(0.0, 1.0 + 1e-6), (0.0, 0.0)]
    cleaned = clean_loop(loop)
    assert cleaned == SQUARE


def test_clean_loop_drops_collinear_points():
    loop = [(0.0, 0.0), (0.5, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]
    assert clean_loop(loop) == SQUARE


def test_clean_loop_collapses_degenerate_input():
    assert len(clean_loop([(0, 0), (1, 1), (2, 2), (3, 3)])) < 3
    assert len(clean_loop([(0, 0), (0, 0), (0, 0)])) < 3


def test_clean_loop_accepts_3d_points():
    loop = [(x, y, 7.0) for x, y in SQUARE]
    assert clean_loop(loop) == SQUARE


def test_simplify_keeps_end_points():
    stroke = [(i * 0.1, 0.0) for i in range(101)]
    kept = simplify(stroke, 1.0)
    assert kept[0] == (0.0, 0.0)
    assert math.isclose(kept[-1][0], 10.0)
    assert len(kept) <= 12
    for a, b in zip(kept, kept[1:-1]):
        assert math.dist(a, b) >= 1.0 - 1e-9


def test_simplify_empty():
    assert simplify([], 1.0) == []


def test_points_from_flat():
    assert points_from_flat([0, 0, 1, 0, 1, 1]) == [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)]
    with pytest.raises(ValueError):
        points_from_flat([0, 0, 1])


def test_contour_helpers():
    contour = Contour.from_flat([0, 0, 1, 0, 1, 1, 0, 1])
    assert len(contour) == 4
    assert not contour.is_hole
    assert contour.reversed().is_hole
    moved = contour.translated(2.0, 3.0)
    assert moved.points[0] == (2.0, 3.0)
    assert math.isclose(moved.signed_area, 1.0)


def test_contour_rejects_short_points():
    with pytest.raises(ValueError):
        Contour([(1.0,)])


def test_sweep_path_lifts_2d_points():
    path = SweepPath([(0, 0), (1, 0), (1, 1, 4)], z=2.5)
    assert path.points == [(0.0, 0.0, 2.5), (1.0, 0.0, 2.5), (1.0, 1.0, 4.0)]


def test_sweep_path_deduplicated():
    path = SweepPath([(0, 0), (0, 0), (1, 0), (1, 0), (1, 1), (0, 0)], closed=True)
    dedup = path.deduplicated()
    assert dedup.points == [(0.0, 0.0, 0.0), (1.0, 0.0, 0.0), (1.0, 1.0, 0.0)]
    assert dedup.closed

    open_path = SweepPath([(0, 0), (1, 0), (0, 0)])
    assert len(open_path.deduplicated()) == 3


def test_sweep_path_length():
    path = SweepPath([(0, 0), (3, 0), (3, 4)])
    assert math.isclose(path.length(), 7.0)
    closed = SweepPath([(0, 0), (3, 0), (3, 4)], closed=True)
    assert math.isclose(closed.length(), 12.0)
