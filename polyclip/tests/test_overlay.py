"""Tests for the boolean operation engine."""
import pytest

from polyclip import (
    InvalidRingError, OverlayOp, Polygon, PolygonSet, area, clip_by_box, difference, intersect,
    is_valid, overlay, symmetric_difference, unary_union, union,
)


def sq(x0, y0, x1, y1, holes=()):
    return Polygon.from_coords([(x0, y0), (x1, y0), (x1, y1), (x0, y1)], holes)


A = sq(0, 0, 2, 2)
B = sq(1, 1, 3, 3)


def close(a, b, eps=1e-9):
    return abs(a - b) < eps


class TestBasicOperations:
    """Two overlapping squares."""

    def test_intersection(self):
        r = intersect(A, B)
        assert len(r) == 1
        assert close(area(r), 1.0)
        assert r[0].exterior == sq(1, 1, 2, 2).exterior

    def test_union(self):
        r = union(A, B)
        assert len(r) == 1 and not r[0].holes
        assert close(area(r), 7.0)
        assert len(r[0].exterior) == 9

    def test_difference_is_order_sensitive(self):
        assert close(area(difference(A, B)), 3.0)
        assert close(area(difference(B, A)), 3.0)
        assert difference(A, B)[0].bounds != difference(B, A)[0].bounds

    def test_symmetric_difference(self):
        r = symmetric_difference(A, B)
        assert close(area(r), 6.0)
        # two L-shaped pieces meeting at the crossing points
        assert len(r) == 2

    def test_overlay_accepts_op_strings(self):
        assert close(area(overlay(A, B, 'union')), 7.0)
        assert close(area(overlay(A, B, OverlayOp.INTERSECTION)), 1.0)
        with pytest.raises(ValueError):
            overlay(A, B, 'buffer')

    def test_results_are_valid_and_oriented(self):
        for op in OverlayOp:
            r = overlay(A, B, op)
            assert is_valid(r)
            for poly in r:
                assert poly.exterior.is_ccw
                assert all(not h.is_ccw for h in poly.holes)

    def test_deterministic(self):
        assert union(A, B) == union(A, B)


class TestSpecialConfigurations:

    def test_disjoint_operands(self):
        far = sq(10, 10, 11, 11)
        assert intersect(A, far).is_empty
        u = union(A, far)
        assert len(u) == 2 and close(area(u), 5.0)
        assert difference(A, far) == PolygonSet((A,))

    def test_empty_operand(self):
        assert intersect(A, PolygonSet.empty()).is_empty
        assert close(area(union(PolygonSet.empty(), A)), 4.0)
        assert close(area(difference(A, PolygonSet.empty())), 4.0)
        assert difference(PolygonSet.empty(), A).is_empty

    def test_difference_creates_hole(self):
        r = difference(sq(0, 0, 4, 4), sq(1, 1, 3, 3))
        assert len(r) == 1 and len(r[0].holes) == 1
        assert close(area(r), 12.0)
        assert is_valid(r)

    def test_hole_filled_by_union(self):
        donut = sq(0, 0, 4, 4, holes=[[(1, 1), (3, 1), (3, 3), (1, 3)]])
        r = union(donut, sq(1, 1, 3, 3))
        assert len(r) == 1 and not r[0].holes
        assert close(area(r), 16.0)
        assert len(r[0].exterior) == 5

    def test_shared_boundary_only_gives_empty_intersection(self):
        donut = sq(0, 0, 4, 4, holes=[[(1, 1), (3, 1), (3, 3), (1, 3)]])
        assert intersect(donut, sq(1, 1, 3, 3)).is_empty

    def test_adjacent_squares_dissolve(self):
        r = union(sq(0, 0, 1, 1), sq(1, 0, 2, 1))
        assert len(r) == 1
        # the shared edge and its now colinear endpoints disappear
        assert len(r[0].exterior) == 5
        assert close(area(r), 2.0)

    def test_vertex_touching_squares_stay_separate(self):
        r = union(sq(0, 0, 1, 1), sq(1, 1, 2, 2))
        assert len(r) == 2
        assert close(area(r), 2.0)
        assert r[0].bounds.minx == 0.0

    def test_enclosed_region_touching_exterior_is_split(self):
        notched = Polygon.from_coords([(0, 0), (3, 0), (3, 2), (2, 2), (2, 1), (1, 1), (1, 3), (0, 3)])
        r = union(notched, sq(1, 2, 2, 3))
        # the unfilled unit square meets the outside at (2, 2)
        assert len(r) == 3
        assert all(not p.holes for p in r)
        assert close(area(r), 7.0)
        assert is_valid(r)

    def test_holes_touching_at_a_corner_are_split(self):
        r = difference(sq(0, 0, 4, 4), PolygonSet((sq(1, 1, 2, 2), sq(2, 2, 3, 3))))
        assert len(r) > 1
        assert close(area(r), 14.0)
        assert is_valid(r)

    def test_identical_operands(self):
        assert close(area(union(A, A)), 4.0)
        assert close(area(intersect(A, A)), 4.0)
        assert difference(A, A).is_empty
        assert symmetric_difference(A, A).is_empty

    def test_multi_member_operand(self):
        pair = PolygonSet((sq(0, 0, 1, 1), sq(2, 0, 3, 1)))
        r = intersect(pair, sq(0.5, 0, 2.5, 1))
        assert len(r) == 2
        assert close(area(r), 1.0)

    def test_invalid_input_rejected(self):
        bow = Polygon.from_coords([(0, 0), (4, 0), (0, 2), (3, 3)])
        with pytest.raises(InvalidRingError):
            intersect(bow, A)


class TestUnaryUnionAndClip:

    def test_unary_union_of_strip(self):
        r = unary_union([sq(0, 0, 1, 1), sq(1, 0, 2, 1), sq(2, 0, 3, 1)])
        assert len(r) == 1
        assert len(r[0].exterior) == 5
        assert close(area(r), 3.0)

    def test_unary_union_overlapping(self):
        r = unary_union([A, B, sq(2.5, 0, 3.5, 1)])
        assert close(area(r), 8.0)

    def test_unary_union_empty(self):
        assert unary_union([]).is_empty

    def test_clip_by_box(self):
        r = clip_by_box(sq(0, 0, 4, 4), (1, 1, 2, 3))
        assert close(area(r), 2.0)
