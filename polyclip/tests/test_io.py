"""Tests for the GeoJSON-like mapping adapter."""
import pytest

from polyclip import GeometryError, LabeledFeature, Point, Polygon, PolygonSet, area, mapping, shape


def test_point_mapping():
    assert mapping(Point(1, 2)) == {'type': 'Point', 'coordinates': [1.0, 2.0]}


def test_polygon_with_hole_round_trip():
    p = Polygon.from_coords([(0, 0), (4, 0), (4, 4), (0, 4)], [[(1, 1), (1, 2), (2, 2), (2, 1)]])
    m = mapping(p)
    assert m['type'] == 'Polygon'
    assert len(m['coordinates']) == 2
    assert m['coordinates'][0][0] == m['coordinates'][0][-1]
    assert shape(m) == p


def test_multipolygon_from_dict():
    obj = {
        'type': 'MultiPolygon',
        'coordinates': [
            [[[0, 0], [1, 0], [1, 1], [0, 1], [0, 0]]],
            [[[2, 0], [3, 0], [3, 1], [2, 1], [2, 0]]],
        ],
    }
    g = shape(obj)
    assert isinstance(g, PolygonSet) and len(g) == 2
    assert area(g) == 2.0
    assert mapping(g)['type'] == 'MultiPolygon'


def test_open_rings_are_closed():
    g = shape({'type': 'Polygon', 'coordinates': [[[0, 0], [1, 0], [1, 1]]]})
    assert len(g.exterior) == 4


def test_feature():
    f = LabeledFeature('kiwi', Point(1, 1), units='m')
    m = mapping(f)
    assert m['type'] == 'Feature' and m['id'] == 'kiwi'
    assert shape(m) == f


@pytest.mark.parametrize('obj', [
    {'type': 'LineString', 'coordinates': [[0, 0], [1, 1]]},
    {'coordinates': [0, 0]},
    {'type': 'Polygon'},
    {'type': 'Polygon', 'coordinates': []},
    None,
])
def test_invalid_mappings(obj):
    with pytest.raises(GeometryError):
        shape(obj)
