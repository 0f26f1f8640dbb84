"""Algebraic laws of the boolean and buffer operations on a small corpus of
polygons (convex, concave, with holes, multi-part)."""
import itertools

import pytest

from polyclip import (
    Polygon, PolygonSet, Relation, area, buffer, contains, difference, disjoint, equals, intersect,
    is_valid, relate, symmetric_difference, union, within,
)


def sq(x0, y0, x1, y1, holes=()):
    return Polygon.from_coords([(x0, y0), (x1, y0), (x1, y1), (x0, y1)], holes)


MAINLAND = Polygon.from_coords([
    (1, 1), (2, 2), (3, 1), (4, 1), (5, 3), (4, 5.5), (3.5, 4), (3, 5), (2, 5), (2, 4), (1, 5), (0, 3),
])
CORPUS = {
    'mainland': MAINLAND,
    'range': sq(0, 3, 5, 6),
    'donut': sq(-0.5, -0.5, 2.7, 2.7, holes=[[(0.3, 0.4), (1.6, 0.4), (1.6, 1.8), (0.3, 1.8)]]),
    'islands': PolygonSet((sq(4.2, 0, 6, 2), sq(-2, 4, -1, 5))),
    'small': sq(1.5, 2.5, 2.5, 3.5),
    'pond': sq(0.5, 5.2, 1.4, 5.8),
}
PAIRS = list(itertools.combinations(sorted(CORPUS), 2))


def close(a, b, eps=1e-9):
    return abs(a - b) < eps


@pytest.mark.parametrize('na,nb', PAIRS)
class TestPairLaws:

    def test_commutative(self, na, nb):
        a, b = CORPUS[na], CORPUS[nb]
        for op in (intersect, union, symmetric_difference):
            ab, ba = op(a, b), op(b, a)
            assert close(area(ab), area(ba))
            if not ab.is_empty:
                assert relate(ab, ba) == Relation.EQUALS

    def test_complementarity(self, na, nb):
        a, b = CORPUS[na], CORPUS[nb]
        assert close(area(intersect(a, b)) + area(difference(a, b)), area(a))

    def test_inclusion_exclusion(self, na, nb):
        a, b = CORPUS[na], CORPUS[nb]
        assert close(area(union(a, b)), area(a) + area(b) - area(intersect(a, b)))
        assert close(area(symmetric_difference(a, b)), area(union(a, b)) - area(intersect(a, b)))

    def test_difference_disjoint_from_subtrahend(self, na, nb):
        a, b = CORPUS[na], CORPUS[nb]
        d = difference(a, b)
        if not d.is_empty:
            assert relate(d, b) in (Relation.DISJOINT, Relation.TOUCHES)

    def test_results_valid(self, na, nb):
        a, b = CORPUS[na], CORPUS[nb]
        for op in (intersect, union, difference, symmetric_difference):
            assert is_valid(op(a, b))

    def test_containment(self, na, nb):
        for a, b in ((CORPUS[na], CORPUS[nb]), (CORPUS[nb], CORPUS[na])):
            if contains(a, b):
                assert close(area(intersect(a, b)), area(b))
                assert difference(b, a).is_empty

    def test_disjointness(self, na, nb):
        a, b = CORPUS[na], CORPUS[nb]
        if disjoint(a, b):
            assert intersect(a, b).is_empty
            assert close(area(union(a, b)), area(a) + area(b))


def test_difference_not_commutative():
    a, b = MAINLAND, CORPUS['range']
    assert not close(area(difference(a, b)), area(difference(b, a)))


@pytest.mark.parametrize('name', sorted(CORPUS))
def test_union_idempotent(name):
    g = CORPUS[name]
    assert close(area(union(g, g)), area(g))
    assert equals(union(g, g), g)
    assert equals(intersect(g, g), g)
    assert difference(g, g).is_empty


@pytest.mark.parametrize('name', sorted(CORPUS))
def test_zero_buffer_is_identity(name):
    g = CORPUS[name]
    assert equals(buffer(g, 0.0), g)


@pytest.mark.parametrize('name', ['mainland', 'range', 'small', 'pond'])
def test_buffer_monotone(name):
    g = CORPUS[name]
    grown = buffer(g, 0.25)
    shrunk = buffer(g, -0.1)
    assert area(shrunk) < area(g) < area(grown)
    assert within(g, grown)
    assert within(shrunk, g)


def test_within_implies_intersection_is_operand():
    small, rng = CORPUS['small'], CORPUS['range']
    assert not within(small, rng)
    inner = intersect(small, rng)
    assert within(inner, rng)
    assert close(area(intersect(inner, rng)), area(inner))


def test_corpus_has_nested_and_disjoint_pairs():
    relations = {relate(CORPUS[na], CORPUS[nb]) for na, nb in PAIRS}
    assert Relation.WITHIN in relations or Relation.CONTAINS in relations
    assert Relation.DISJOINT in relations
    assert contains(CORPUS['range'], CORPUS['pond'])


class TestChainedResults:
    """Results are valid inputs for further operations."""

    NOTCHED = Polygon.from_coords([(0, 0), (3, 0), (3, 2), (2, 2), (2, 1), (1, 1), (1, 3), (0, 3)])
    CAP = sq(1, 2, 2, 3)

    def test_union_with_pinched_enclosure(self):
        r = union(self.NOTCHED, self.CAP)
        assert is_valid(r)
        assert close(area(r), 7.0)

        same = intersect(r, r)
        assert is_valid(same)
        assert close(area(same), 7.0)

        grown = buffer(r, 0.1)
        assert is_valid(grown)
        assert area(grown) > 7.0

        assert relate(r, self.NOTCHED) == Relation.CONTAINS

        back = difference(r, self.CAP)
        assert is_valid(back)
        assert close(area(back), 6.0)
        assert equals(back, self.NOTCHED)

    def test_difference_then_union_restores_square(self):
        corners = PolygonSet((sq(1, 1, 2, 2), sq(2, 2, 3, 3)))
        r = difference(sq(0, 0, 4, 4), corners)
        assert is_valid(r)
        filled = union(r, corners)
        assert is_valid(filled)
        assert close(area(filled), 16.0)
        assert equals(filled, sq(0, 0, 4, 4))
