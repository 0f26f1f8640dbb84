"""Robust planar predicates on raw coordinate arrays.

Orientation, segment intersection, point/segment distance and point-in-ring
location. Everything here works on numpy arrays (or array-likes) of shape
(..., 2) and knows nothing about the model types, so it can be tested and
reused independently of the polygon engines built on top of it.

Orientation signs are computed in floating point and re-derived exactly
(``fractions.Fraction``) whenever the float determinant is smaller than its
rounding error bound, so near-colinear configurations never flip sign.
"""
from __future__ import annotations
from fractions import Fraction
from typing import Tuple
import numpy as np
from .constants import ORIENT_ERRBOUND

__all__ = [
	'orient','orient_vectorized','seg_intersect','vectorized_seg_intersect','bbox_overlap',
	'candidate_pairs','project_on_segment','segment_contacts','ring_signed_area','ring_centroid',
	'ring_edges','locate_in_ring','ring_self_intersections','rings_touch',
	'INSIDE','ON_BOUNDARY','OUTSIDE',
]

# Point location codes for locate_in_ring
INSIDE = 1
ON_BOUNDARY = 0
OUTSIDE = -1


def _orient_exact(a, b, c):
	ax = Fraction(float(a[0])); ay = Fraction(float(a[1]))
	bx = Fraction(float(b[0])); by = Fraction(float(b[1]))
	cx = Fraction(float(c[0])); cy = Fraction(float(c[1]))
	return (bx-ax)*(cy-ay) - (by-ay)*(cx-ax)


def orient(a, b, c):
	"""2D orientation (signed area * 2) for points a,b,c.

	Returns a positive value when (a,b,c) are counter-clockwise, negative when clockwise,
	and zero when colinear. The sign is exact.
	"""
	ax, ay = float(a[0]), float(a[1])
	bx, by = float(b[0]), float(b[1])
	cx, cy = float(c[0]), float(c[1])
	detleft = (bx-ax)*(cy-ay)
	detright = (by-ay)*(cx-ax)
	det = detleft - detright
	bound = ORIENT_ERRBOUND * (abs(detleft) + abs(detright))
	if det > bound or -det > bound:
		return det
	return float(_orient_exact(a, b, c))


def orient_vectorized(a_pts, b_pts, c_pts):
	"""Orientation for broadcastable arrays of points of shape (..., 2).

	Entries whose float determinant is within the error bound are recomputed
	exactly, so the sign of every entry is reliable.
	"""
	a = np.asarray(a_pts, dtype=np.float64)
	b = np.asarray(b_pts, dtype=np.float64)
	c = np.asarray(c_pts, dtype=np.float64)
	if a.ndim == 1 and b.ndim == 1 and c.ndim == 1:
		return np.float64(orient(a, b, c))
	left = (b[...,0]-a[...,0])*(c[...,1]-a[...,1])
	right = (b[...,1]-a[...,1])*(c[...,0]-a[...,0])
	det = left - right
	unsure = np.abs(det) <= ORIENT_ERRBOUND * (np.abs(left) + np.abs(right))
	if np.any(unsure):
		det = np.array(det, dtype=np.float64)
		A, B, C = np.broadcast_arrays(a, b, c)
		for idx in zip(*np.nonzero(unsure)):
			det[idx] = float(_orient_exact(A[idx], B[idx], C[idx]))
	return det


def seg_intersect(p1, p2, p3, p4):
	"""Return True if segment p1-p2 properly crosses p3-p4 (excluding shared endpoints,
	T-junctions and colinear overlaps).
	"""
	p1 = np.asarray(p1, dtype=np.float64); p2 = np.asarray(p2, dtype=np.float64)
	p3 = np.asarray(p3, dtype=np.float64); p4 = np.asarray(p4, dtype=np.float64)
	if (p1 == p3).all() or (p1 == p4).all() or (p2 == p3).all() or (p2 == p4).all():
		return False
	o1 = orient(p1, p2, p3); o2 = orient(p1, p2, p4)
	o3 = orient(p3, p4, p1); o4 = orient(p3, p4, p2)
	return (o1*o2 < 0) and (o3*o4 < 0)


def vectorized_seg_intersect(a_pts, b_pts, c_pts, d_pts):
	"""Vectorized proper-crossing test for equal-length arrays of segments.

	a_pts, b_pts, c_pts, d_pts must be arrays of shape (M,2). Returns boolean array (M,) where
	each element indicates whether segment a[i]-b[i] properly crosses c[i]-d[i].
	"""
	a = np.asarray(a_pts, dtype=np.float64)
	b = np.asarray(b_pts, dtype=np.float64)
	c = np.asarray(c_pts, dtype=np.float64)
	d = np.asarray(d_pts, dtype=np.float64)
	if a.size == 0:
		return np.zeros((0,), dtype=bool)
	o1 = np.sign(orient_vectorized(a, b, c))
	o2 = np.sign(orient_vectorized(a, b, d))
	o3 = np.sign(orient_vectorized(c, d, a))
	o4 = np.sign(orient_vectorized(c, d, b))
	return (o1*o2 < 0) & (o3*o4 < 0)


def bbox_overlap(minx1, maxx1, miny1, maxy1, minx2, maxx2, miny2, maxy2):
	"""Vectorized bbox overlap test; returns boolean array where bbox1 overlaps bbox2.

	All inputs may be scalars or arrays broadcastable to a common shape.
	"""
	return ~((maxx1 < minx2) | (maxx2 < minx1) | (maxy1 < miny2) | (maxy2 < miny1))


def candidate_pairs(a1, b1, a2=None, b2=None, tol=0.0):
	"""Index pairs (I, J) of segments whose tolerance-expanded bboxes overlap.

	With a single segment set (a2 is None) only pairs I < J are returned.
	"""
	a1 = np.asarray(a1, dtype=np.float64); b1 = np.asarray(b1, dtype=np.float64)
	same = a2 is None
	if same:
		a2, b2 = a1, b1
	else:
		a2 = np.asarray(a2, dtype=np.float64); b2 = np.asarray(b2, dtype=np.float64)
	if a1.shape[0] == 0 or a2.shape[0] == 0:
		empty = np.zeros((0,), dtype=np.intp)
		return empty, empty
	lo1 = np.minimum(a1, b1) - tol; hi1 = np.maximum(a1, b1) + tol
	lo2 = np.minimum(a2, b2); hi2 = np.maximum(a2, b2)
	mask = bbox_overlap(lo1[:,None,0], hi1[:,None,0], lo1[:,None,1], hi1[:,None,1],
		lo2[None,:,0], hi2[None,:,0], lo2[None,:,1], hi2[None,:,1])
	if same:
		mask = np.triu(mask, k=1)
	I, J = np.nonzero(mask)
	return I, J


def project_on_segment(p, a, b):
	"""Distance from points p to segments a-b and the clamped projection parameter.

	All arguments broadcast over leading dimensions. Returns (dist, t) where the
	closest point is a + t*(b-a), 0 <= t <= 1.
	"""
	p = np.asarray(p, dtype=np.float64)
	a = np.asarray(a, dtype=np.float64)
	b = np.asarray(b, dtype=np.float64)
	ab = b - a
	ap = p - a
	denom = ab[...,0]*ab[...,0] + ab[...,1]*ab[...,1]
	num = ap[...,0]*ab[...,0] + ap[...,1]*ab[...,1]
	safe = np.where(denom > 0.0, denom, 1.0)
	t = np.clip(np.where(denom > 0.0, num / safe, 0.0), 0.0, 1.0)
	dx = a[...,0] + t*ab[...,0] - p[...,0]
	dy = a[...,1] + t*ab[...,1] - p[...,1]
	return np.hypot(dx, dy), t


def segment_contacts(a1, b1, a2, b2, tol):
	"""Boolean array: segments a1-b1 and a2-b2 cross or come within tol of each other.

	A contact is a proper crossing or any endpoint lying within tol of the other
	segment, which covers touching, T-junctions and colinear overlaps.
	"""
	cross = vectorized_seg_intersect(a1, b1, a2, b2)
	d1, _ = project_on_segment(a2, a1, b1)
	d2, _ = project_on_segment(b2, a1, b1)
	d3, _ = project_on_segment(a1, a2, b2)
	d4, _ = project_on_segment(b1, a2, b2)
	near = np.minimum(np.minimum(d1, d2), np.minimum(d3, d4)) <= tol
	return cross | near


def ring_edges(coords):
	"""Split a closed (N,2) coordinate array into (N-1,2) start and end arrays."""
	c = np.asarray(coords, dtype=np.float64)
	return c[:-1], c[1:]


def ring_signed_area(coords):
	"""Shoelace signed area of a closed coordinate array (positive when CCW).

	Coordinates are shifted to the first vertex before summing to limit
	cancellation on large projected coordinates.
	"""
	c = np.asarray(coords, dtype=np.float64)
	if c.shape[0] < 4:
		return 0.0
	x = c[:,0] - c[0,0]
	y = c[:,1] - c[0,1]
	return 0.5 * float(np.sum(x[:-1]*y[1:] - x[1:]*y[:-1]))


def ring_centroid(coords):
	"""Return (cx, cy, signed_area) of a closed coordinate array.

	Returns (nan, nan, 0.0) for a zero-area ring.
	"""
	c = np.asarray(coords, dtype=np.float64)
	if c.shape[0] < 4:
		return float('nan'), float('nan'), 0.0
	ox, oy = c[0,0], c[0,1]
	x = c[:,0] - ox
	y = c[:,1] - oy
	cross = x[:-1]*y[1:] - x[1:]*y[:-1]
	a = 0.5 * float(np.sum(cross))
	if a == 0.0:
		return float('nan'), float('nan'), 0.0
	cx = float(np.sum((x[:-1] + x[1:]) * cross)) / (6.0 * a)
	cy = float(np.sum((y[:-1] + y[1:]) * cross)) / (6.0 * a)
	return cx + ox, cy + oy, a


def locate_in_ring(pt, coords, tol=0.0) -> Tuple[int, float]:
	"""Classify a point against a closed ring.

	Returns (location, distance) where location is INSIDE, ON_BOUNDARY or OUTSIDE
	and distance is the distance from the point to the ring boundary. Points
	within tol of the boundary are ON_BOUNDARY; otherwise the crossing number of
	a ray towards +x decides.
	"""
	p = np.asarray(pt, dtype=np.float64)
	a, b = ring_edges(coords)
	dist, _ = project_on_segment(p, a, b)
	dmin = float(dist.min()) if dist.size else float('inf')
	if dmin <= tol:
		return ON_BOUNDARY, dmin
	x, y = p[0], p[1]
	# half-open rule: a vertex exactly on the ray is counted once
	crosses = (a[:,1] <= y) != (b[:,1] <= y)
	if not np.any(crosses):
		return OUTSIDE, dmin
	ac = a[crosses]; bc = b[crosses]
	xint = ac[:,0] + (y - ac[:,1]) * (bc[:,0] - ac[:,0]) / (bc[:,1] - ac[:,1])
	inside = int(np.count_nonzero(xint > x)) % 2 == 1
	return (INSIDE if inside else OUTSIDE), dmin


def ring_self_intersections(coords, tol=0.0):
	"""Return the list of (i, j) edge index pairs that make a closed ring non-simple.

	Non-adjacent edges may not touch at all; adjacent edges may only share their
	common vertex (a spike folding back onto the previous edge is reported).
	"""
	a, b = ring_edges(coords)
	n = a.shape[0]
	if n < 3:
		return []
	I, J = candidate_pairs(a, b, tol=tol)
	if I.size == 0:
		return []
	adjacent = (J == I + 1) | ((I == 0) & (J == n - 1))
	bad = np.zeros(I.shape, dtype=bool)
	far = ~adjacent
	if np.any(far):
		bad[far] = segment_contacts(a[I[far]], b[I[far]], a[J[far]], b[J[far]], tol)
	if np.any(adjacent):
		Ia = I[adjacent]; Ja = J[adjacent]
		# orient so that edge `first` ends where edge `second` starts
		wrap = (Ia == 0) & (Ja == n - 1)
		first = np.where(wrap, Ja, Ia)
		second = np.where(wrap, Ia, Ja)
		d_prev, _ = project_on_segment(a[first], a[second], b[second])
		d_next, _ = project_on_segment(b[second], a[first], b[first])
		bad[adjacent] = (d_prev <= tol) | (d_next <= tol)
	return [(int(i), int(j)) for i, j in zip(I[bad], J[bad])]


def rings_touch(coords1, coords2, tol=0.0):
	"""True when two closed rings cross or come within tol of each other."""
	a1, b1 = ring_edges(coords1)
	a2, b2 = ring_edges(coords2)
	I, J = candidate_pairs(a1, b1, a2, b2, tol=tol)
	if I.size == 0:
		return False
	return bool(np.any(segment_contacts(a1[I], b1[I], a2[J], b2[J], tol)))
