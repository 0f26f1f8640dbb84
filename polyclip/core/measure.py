"""Area, centroid, bounding box and related measurements."""
from __future__ import annotations

from typing import List, Tuple

import numpy as np

from .errors import EmptyGeometryError
from .model import BoundingBox, Geometry, LabeledFeature, Point, Polygon, Ring, as_polygon_set
from .predicates import ring_centroid

__all__ = [
    'area', 'centroid', 'bounding_box', 'perimeter', 'representative_point',
    'polygon_area',
]


def _unwrap(geom):
    return geom.geometry if isinstance(geom, LabeledFeature) else geom


def polygon_area(poly: Polygon) -> float:
    """Exterior area minus hole areas (orientation independent)."""
    a = abs(poly.exterior.signed_area)
    for h in poly.holes:
        a -= abs(h.signed_area)
    return a


def area(geom: Geometry) -> float:
    """Non-negative area; 0.0 for points and empty sets."""
    geom = _unwrap(geom)
    if isinstance(geom, Point):
        return 0.0
    return float(sum(polygon_area(p) for p in as_polygon_set(geom)))


def perimeter(geom: Geometry) -> float:
    """Total boundary length including holes."""
    geom = _unwrap(geom)
    if isinstance(geom, Point):
        return 0.0
    total = 0.0
    for poly in as_polygon_set(geom):
        for ring in poly.rings:
            d = np.diff(ring.coords, axis=0)
            total += float(np.sum(np.hypot(d[:, 0], d[:, 1])))
    return total


def centroid(geom: Geometry) -> Point:
    """Area-weighted centroid.

    Holes contribute with negative weight and PolygonSet members are weighted
    by their area. Raises EmptyGeometryError when the total area is zero.
    """
    geom = _unwrap(geom)
    if isinstance(geom, Point):
        return geom
    sx = sy = total = 0.0
    for poly in as_polygon_set(geom):
        for k, ring in enumerate(poly.rings):
            cx, cy, a = ring_centroid(ring.coords)
            if a == 0.0:
                continue
            w = abs(a) if k == 0 else -abs(a)
            sx += w * cx
            sy += w * cy
            total += w
    if total <= 0.0:
        raise EmptyGeometryError("Centroid is undefined for empty or zero-area geometry")
    return Point(sx / total, sy / total)


def bounding_box(geom: Geometry) -> BoundingBox:
    geom = _unwrap(geom)
    box = geom.bounds
    if box is None:
        raise EmptyGeometryError("Bounding box is undefined for an empty geometry")
    return box


def _scan_intervals(rings: List[Ring], y: float) -> List[Tuple[float, float]]:
    xs = []
    for ring in rings:
        c = ring.coords
        a = c[:-1]; b = c[1:]
        crosses = (a[:, 1] <= y) != (b[:, 1] <= y)
        if np.any(crosses):
            ac = a[crosses]; bc = b[crosses]
            xs.extend((ac[:, 0] + (y - ac[:, 1]) * (bc[:, 0] - ac[:, 0]) / (bc[:, 1] - ac[:, 1])).tolist())
    xs.sort()
    return [(xs[i], xs[i + 1]) for i in range(0, len(xs) - 1, 2)]


def _polygon_representative_point(poly: Polygon) -> Point:
    rings = list(poly.rings)
    ys = np.unique(np.concatenate([r.coords[:, 1] for r in rings]))
    mids = 0.5 * (ys[:-1] + ys[1:])
    ymid = 0.5 * (ys[0] + ys[-1])
    # scan lines strictly between vertex heights, closest to the middle first
    for y in mids[np.argsort(np.abs(mids - ymid), kind='stable')]:
        intervals = _scan_intervals(rings, float(y))
        if not intervals:
            continue
        x0, x1 = max(intervals, key=lambda iv: iv[1] - iv[0])
        if x1 > x0:
            return Point(0.5 * (x0 + x1), float(y))
    raise EmptyGeometryError("Polygon has no interior to place a representative point in")


def representative_point(geom: Geometry) -> Point:
    """A point guaranteed to lie in the interior of the geometry.

    Uses the midpoint of the widest interior interval of a horizontal scan line
    placed between vertex heights; for a PolygonSet the largest member is used.
    """
    geom = _unwrap(geom)
    if isinstance(geom, Point):
        return geom
    pset = as_polygon_set(geom)
    if pset.is_empty:
        raise EmptyGeometryError("Representative point is undefined for an empty geometry")
    largest = max(pset, key=polygon_area)
    return _polygon_representative_point(largest)

