"""Tests for Douglas-Peucker ring simplification."""
import pytest

from polyclip import Polygon, PolygonSet, area, simplify


def test_small_detour_removed():
    p = Polygon.from_coords([(0, 0), (1, 0.01), (2, 0), (2, 2), (0, 2)])
    r = simplify(p, 0.1)
    assert len(r) == 1
    assert len(r[0].exterior) == 5
    assert area(r) == 4.0


def test_zero_tolerance_keeps_shape():
    p = Polygon.from_coords([(0, 0), (1, 0.01), (2, 0), (2, 2), (0, 2)])
    r = simplify(p, 0.0)
    assert len(r[0].exterior) == len(p.exterior)


def test_collapsing_polygon_dropped():
    sliver = Polygon.from_coords([(0, 0), (10, 0), (5, 0.01)])
    assert simplify(sliver, 1.0).is_empty


def test_collapsing_hole_dropped():
    p = Polygon.from_coords([(0, 0), (10, 0), (10, 10), (0, 10)], [[(4, 4), (6, 4), (5, 4.01)]])
    r = simplify(p, 0.5)
    assert len(r) == 1 and not r[0].holes


def test_set_input():
    s = PolygonSet((Polygon.from_coords([(0, 0), (1, 0), (1, 1), (0, 1)]),))
    assert simplify(s, 0.1) == s


def test_negative_tolerance():
    with pytest.raises(ValueError):
        simplify(Polygon.from_coords([(0, 0), (1, 0), (1, 1)]), -1.0)
