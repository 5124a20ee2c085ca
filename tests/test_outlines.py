import pytest

from signmesh.contours import classify_contours
from signmesh.extrude import extrude_contours
from signmesh.outlines import (
    OUTLINE_REGISTRY,
    circle,
    get_outline,
    mounting_hole_contours,
    mounting_hole_positions,
    outline,
    register_outline,
    rounded_rectangle,
)
from signmesh.paths import Contour, signed_area


def _bbox(contour):
    xs = [p[0] for p in contour.points]
    ys = [p[1] for p in contour.points]
    return min(xs), min(ys), max(xs), max(ys)


@pytest.mark.parametrize("name", ["circle", "rounded_rectangle", "heart", "star"])
def test_builtin_outlines_fit_their_box(name):
    contour = outline(name, 40.0, 30.0)
    assert contour.signed_area > 0
    x0, y0, x1, y1 = _bbox(contour)
    assert x1 - x0 == pytest.approx(40.0, abs=1e-6)
    assert y1 - y0 == pytest.approx(30.0, abs=1e-6)
    assert (x0 + x1) / 2 == pytest.approx(0.0, abs=1e-6)
    assert (y0 + y1) / 2 == pytest.approx(0.0, abs=1e-6)


@pytest.mark.parametrize("name", ["circle", "rounded_rectangle", "heart", "star"])
def test_builtin_outlines_extrude_to_closed_solids(name):
    mesh = extrude_contours([outline(name, 40.0, 30.0)], 3.0)
    assert mesh.is_closed()
    assert mesh.signed_volume() == pytest.approx(outline(name, 40.0, 30.0).signed_area * 3.0)


def test_rounded_rectangle_without_radius():
    contour = rounded_rectangle(10, 6, radius=0.0)
    assert len(contour) == 4
    assert contour.signed_area == pytest.approx(60.0)


def test_rounded_rectangle_radius_is_limited():
    contour = rounded_rectangle(10, 6, radius=100.0)
    x0, y0, x1, y1 = _bbox(contour)
    assert x1 - x0 == pytest.approx(10.0)
    assert y1 - y0 == pytest.approx(6.0)


def test_registry():
    assert set(OUTLINE_REGISTRY) >= {"circle", "rounded_rectangle", "heart", "star"}
    assert get_outline("circle") is circle
    with pytest.raises(KeyError):
        get_outline("dodecahedron")


def test_register_outline():
    def diamond(width, height, segments=4):
        return Contour([(0, -height / 2), (width / 2, 0), (0, height / 2), (-width / 2, 0)])

    register_outline("diamond", diamond)
    try:
        assert outline("diamond", 4, 2).signed_area == pytest.approx(4.0)
    finally:
        del OUTLINE_REGISTRY["diamond"]


@pytest.mark.parametrize("pattern, count", [
    ("none", 0),
    ("2-point", 2),
    ("4-corner", 4),
    ("6-point", 6),
])
def test_mounting_hole_positions(pattern, count):
    positions = mounting_hole_positions(pattern, 100, 60, 8)
    assert len(positions) == count
    for x, y in positions:
        assert abs(x) <= 42 and abs(y) <= 22


def test_mounting_hole_positions_unknown_pattern():
    with pytest.raises(ValueError):
        mounting_hole_positions("3-point", 100, 60, 8)


def test_mounting_holes_are_clockwise():
    holes = mounting_hole_contours("4-corner", 100, 60, 8, 4.0)
    assert len(holes) == 4
    assert all(signed_area(h.points) < 0 for h in holes)
    assert mounting_hole_contours("4-corner", 100, 60, 8, 0.0) == []


def test_plate_with_mounting_holes():
    plate = rounded_rectangle(100, 60)
    holes = mounting_hole_contours("6-point", 100, 60, 8, 4.0)
    groups = classify_contours([plate] + holes)
    assert len(groups) == 1
    assert len(groups[0].holes) == 6

    mesh = extrude_contours([plate] + holes, 3.0)
    assert mesh.is_closed()
    expected = (plate.signed_area + sum(h.signed_area for h in holes)) * 3.0
    assert mesh.signed_volume() == pytest.approx(expected)
