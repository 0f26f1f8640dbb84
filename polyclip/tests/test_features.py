"""Tests for LabeledFeature helpers."""
import pytest

from polyclip import (
    IncompatibleUnitsError, LabeledFeature, OverlayOp, Point, Polygon, area, clip_features,
    ensure_compatible_units, spatial_join,
)


def sq(x0, y0, x1, y1):
    return Polygon.from_coords([(x0, y0), (x1, y0), (x1, y1), (x0, y1)])


RANGES = [
    LabeledFeature('kiwi', sq(0, 0, 2, 2), units='m'),
    LabeledFeature('kakapo', sq(5, 5, 6, 6), units='m'),
    LabeledFeature('takahe', sq(1, 1, 6, 2), units='m'),
]


class TestUnits:

    def test_common_units(self):
        assert ensure_compatible_units(*RANGES) == 'm'

    def test_untagged_are_compatible(self):
        assert ensure_compatible_units(LabeledFeature('a', sq(0, 0, 1, 1))) is None
        assert ensure_compatible_units(LabeledFeature('a', sq(0, 0, 1, 1)), RANGES[0]) == 'm'

    def test_mixed_units(self):
        with pytest.raises(IncompatibleUnitsError) as exc:
            ensure_compatible_units(RANGES[0], LabeledFeature('b', sq(0, 0, 1, 1), units='km'))
        assert exc.value.kind == 'IncompatibleUnits'


class TestClipFeatures:

    def test_labels_kept_and_empty_dropped(self):
        island = sq(1, 0, 3, 3)
        out = clip_features(RANGES, island)
        assert [f.label for f in out] == ['kiwi', 'takahe']
        assert abs(area(out[0].geometry) - 2.0) < 1e-9
        assert abs(area(out[1].geometry) - 2.0) < 1e-9
        assert all(f.units == 'm' for f in out)

    def test_difference(self):
        out = clip_features(RANGES[:1], sq(1, 0, 3, 3), op=OverlayOp.DIFFERENCE)
        assert abs(area(out[0].geometry) - 2.0) < 1e-9

    def test_mask_units_checked(self):
        mask = LabeledFeature('island', sq(1, 0, 3, 3), units='ft')
        with pytest.raises(IncompatibleUnitsError):
            clip_features(RANGES, mask)


class TestSpatialJoin:

    def test_intersects(self):
        islands = [LabeledFeature('north', sq(0, 0, 3, 3)), LabeledFeature('stewart', sq(10, 10, 11, 11))]
        pairs = spatial_join(RANGES, islands)
        assert pairs == [('kiwi', 'north'), ('takahe', 'north')]

    def test_within(self):
        islands = [LabeledFeature('north', sq(0, 0, 3, 3))]
        assert spatial_join(RANGES, islands, predicate='within') == [('kiwi', 'north')]

    def test_points(self):
        sites = [LabeledFeature('s1', Point(0.5, 0.5)), LabeledFeature('s2', Point(9, 9))]
        assert spatial_join(sites, RANGES[:1], predicate='within') == [('s1', 'kiwi')]

    def test_disjoint_skips_bbox_filter(self):
        islands = [LabeledFeature('stewart', sq(10, 10, 11, 11))]
        assert len(spatial_join(RANGES, islands, predicate='disjoint')) == 3

    def test_unknown_predicate(self):
        with pytest.raises(ValueError):
            spatial_join(RANGES, RANGES, predicate='near')
