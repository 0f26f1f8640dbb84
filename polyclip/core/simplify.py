"""Douglas-Peucker simplification of polygon rings."""
from __future__ import annotations

from typing import Optional

import numpy as np

from .model import Geometry, LabeledFeature, Polygon, PolygonSet, Ring, as_polygon_set
from .predicates import project_on_segment, ring_signed_area

__all__ = ['simplify', 'simplify_ring_coords']


def _dp_keep(pts: np.ndarray, tolerance: float) -> np.ndarray:
	"""Boolean keep-mask of an open polyline under Douglas-Peucker."""
	n = pts.shape[0]
	keep = np.zeros(n, dtype=bool)
	keep[0] = keep[-1] = True
	stack = [(0, n - 1)]
	while stack:
		i, j = stack.pop()
		if j <= i + 1:
			continue
		d, _ = project_on_segment(pts[i+1:j], pts[i], pts[j])
		k = int(np.argmax(d))
		if d[k] > tolerance:
			k += i + 1
			keep[k] = True
			stack.append((i, k))
			stack.append((k, j))
	return keep


def simplify_ring_coords(coords, tolerance: float) -> Optional[np.ndarray]:
	"""Simplified closed coordinates, or None when the ring collapses.

	The ring is split at its first vertex and the vertex farthest from it so
	both anchors survive, then each half is simplified independently.
	"""
	c = np.asarray(coords, dtype=np.float64)
	pts = c[:-1]
	n = pts.shape[0]
	far = int(np.argmax(np.hypot(pts[:,0] - pts[0,0], pts[:,1] - pts[0,1])))
	if far == 0:
		return None
	first = pts[:far+1]
	second = np.vstack([pts[far:], pts[:1]])
	keep = np.zeros(n, dtype=bool)
	keep[:far+1] |= _dp_keep(first, tolerance)
	k2 = _dp_keep(second, tolerance)
	keep[far:] |= k2[:-1]
	out = pts[keep]
	if out.shape[0] < 3:
		return None
	closed = np.vstack([out, out[:1]])
	if ring_signed_area(closed) == 0.0:
		return None
	return closed


def simplify(geom: Geometry, tolerance: float) -> PolygonSet:
	"""Simplify every ring with tolerance ``tolerance`` (map units).

	Holes that collapse are dropped; a collapsing exterior drops its polygon.
	The result is not re-validated: simplification may create touching or
	crossing rings.
	"""
	if tolerance < 0:
		raise ValueError(f"tolerance must be non-negative, got {tolerance}")
	if isinstance(geom, LabeledFeature):
		geom = geom.geometry
	polys = []
	for poly in as_polygon_set(geom):
		shell = simplify_ring_coords(poly.exterior.coords, tolerance)
		if shell is None:
			continue
		holes = []
		for h in poly.holes:
			hc = simplify_ring_coords(h.coords, tolerance)
			if hc is not None:
				holes.append(Ring(hc))
		polys.append(Polygon(Ring(shell), tuple(holes)))
	return PolygonSet(tuple(polys))
