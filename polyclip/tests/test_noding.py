"""Tests for the shared planar noding graph."""
import numpy as np

from polyclip import Polygon, PolygonSet
from polyclip.core.noding import closed_curve_edges, node_edges, polygon_set_edges


def square(x0, y0, x1, y1):
    return PolygonSet((Polygon.from_coords([(x0, y0), (x1, y0), (x1, y1), (x0, y1)]),))


def both(w):
    return (w[:, 0] > 0) & (w[:, 1] > 0)


def either(w):
    return (w[:, 0] > 0) | (w[:, 1] > 0)


TOL = 1e-9


class TestNodeEdges:

    def test_crossing_squares(self):
        g = node_edges([polygon_set_edges(square(0, 0, 2, 2)), polygon_set_edges(square(1, 1, 3, 3))], TOL)
        # 8 corners plus the crossings (2,1) and (1,2)
        assert g.nodes.shape == (10, 2)
        assert g.fragments.shape == (12, 2)
        assert np.all(g.fragments[:, 0] < g.fragments[:, 1])
        assert g.n_operands == 2

    def test_side_windings_differ_by_multiplicity(self):
        g = node_edges([polygon_set_edges(square(0, 0, 2, 2)), polygon_set_edges(square(1, 1, 3, 3))], TOL)
        left, right = g.side_windings()
        assert np.array_equal(left - right, g.counts)
        assert left.min() >= 0 and right.min() >= 0 and left.max() <= 1

    def test_boundary_edges_for_rules(self):
        g = node_edges([polygon_set_edges(square(0, 0, 2, 2)), polygon_set_edges(square(1, 1, 3, 3))], TOL)
        assert g.boundary_edges(both).shape == (4, 2)
        assert g.boundary_edges(either).shape == (8, 2)

    def test_shared_edge_is_merged(self):
        g = node_edges([polygon_set_edges(square(0, 0, 1, 1)), polygon_set_edges(square(1, 0, 2, 1))], TOL)
        assert g.fragments.shape == (7, 2)
        shared = np.all(g.counts != 0, axis=1)
        assert np.count_nonzero(shared) == 1
        # opposite directions: one operand runs forward, the other backward
        assert g.counts[shared].sum() == 0
        assert g.boundary_edges(either).shape == (6, 2)
        assert g.boundary_edges(both).shape == (0, 2)

    def test_t_junction_splits_host_edge(self):
        g = node_edges([polygon_set_edges(square(0, 0, 2, 2)),
                        polygon_set_edges(square(2, 0.5, 3, 1.5))], TOL)
        assert g.nodes.shape == (8, 2)
        # host right edge split in three, the middle piece shared
        assert g.fragments.shape == (9, 2)

    def test_near_coincident_vertices_snap(self):
        a = square(0, 0, 1, 1)
        b = square(1 + 1e-13, 0, 2, 1)
        g = node_edges([polygon_set_edges(a), polygon_set_edges(b)], TOL)
        assert g.nodes.shape == (6, 2)
        # snapped nodes keep the coordinates of the first operand
        assert any(np.array_equal(n, [1.0, 0.0]) for n in g.nodes)

    def test_empty_operands(self):
        g = node_edges([np.zeros((0, 2, 2)), np.zeros((0, 2, 2))], TOL)
        assert g.fragments.shape == (0, 2)
        left, right = g.side_windings()
        assert left.shape == (0, 2) and right.shape == (0, 2)

    def test_self_overlapping_curve_winding(self):
        # the same unit square traversed twice: winding 2 inside
        c = np.array([[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]], dtype=float)
        edges = closed_curve_edges([c, c])
        g = node_edges([edges], TOL)
        left, right = g.side_windings()
        assert g.fragments.shape == (4, 2)
        assert np.all(np.abs(g.counts) == 2)
        assert sorted(set(np.concatenate([left[:, 0], right[:, 0]]).tolist())) == [0, 2]
