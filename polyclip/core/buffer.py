"""Buffer / offset engine.

Every ring is offset edge by edge along the outward normal; convex corners get
round joins (``quad_segs`` segments per quarter turn) and reflex corners are
joined through the original vertex. The resulting raw curves overlap and
self-intersect freely: they are cleaned up by noding them and keeping the
region of positive winding number, the same machinery the boolean engine
uses.
"""
from __future__ import annotations

import math
from typing import List, Optional

import numpy as np

from .config import EngineConfig, resolve_config
from .errors import GeometryError
from .logging_utils import get_logger
from .measure import representative_point
from .model import Geometry, LabeledFeature, Point, Polygon, PolygonSet, Ring, as_polygon_set
from .noding import closed_curve_edges
from .overlay import _merge_disjoint, _sort_key, dissolve, unary_union
from .predicates import INSIDE, OUTSIDE, locate_in_ring, project_on_segment
from .stats import OverlayStats
from .validation import validate

__all__ = ['buffer', 'offset_curve', 'point_buffer']

logger = get_logger('polyclip.buffer')


def _positive(w: np.ndarray) -> np.ndarray:
    return w[:, 0] > 0


def offset_curve(coords, distance: float, quad_segs: int) -> np.ndarray:
    """Raw closed offset curve of a closed ring whose interior lies on its left.

    Positive distances move outward (to the right of the edges). The curve may
    self-intersect; callers resolve it by winding number.
    """
    c = np.asarray(coords, dtype=np.float64)
    pts = c[:-1]
    prev = np.roll(pts, 1, axis=0)
    nxt = np.roll(pts, -1, axis=0)
    e_in = pts - prev
    e_out = nxt - pts
    l_in = np.hypot(e_in[:, 0], e_in[:, 1])
    l_out = np.hypot(e_out[:, 0], e_out[:, 1])
    n_in = np.stack([e_in[:, 1], -e_in[:, 0]], axis=1) / l_in[:, None]
    n_out = np.stack([e_out[:, 1], -e_out[:, 0]], axis=1) / l_out[:, None]
    turn = np.arctan2(e_in[:, 0] * e_out[:, 1] - e_in[:, 1] * e_out[:, 0],
                      e_in[:, 0] * e_out[:, 0] + e_in[:, 1] * e_out[:, 1])
    radius = abs(distance)
    out: List[np.ndarray] = []
    for i in range(pts.shape[0]):
        v = pts[i]
        p1 = v + distance * n_in[i]
        p2 = v + distance * n_out[i]
        t = float(turn[i])
        if t == 0.0:
            out.append(p1)
        elif distance * t > 0.0:
            # round join on the convex side
            nseg = max(1, int(math.ceil(abs(t) / (0.5 * math.pi) * quad_segs)))
            start = math.atan2(p1[1] - v[1], p1[0] - v[0])
            ang = start + t * np.arange(nseg + 1) / nseg
            arc = np.stack([v[0] + radius * np.cos(ang), v[1] + radius * np.sin(ang)], axis=1)
            arc[0] = p1
            arc[-1] = p2
            out.extend(arc)
        else:
            out.extend((p1, v, p2))
    out.append(out[0])
    return np.array(out, dtype=np.float64)


def point_buffer(point: Point, distance: float, quad_segs: int) -> PolygonSet:
    """Regular 4*quad_segs-gon approximating the disc around a point."""
    if distance <= 0.0:
        return PolygonSet.empty()
    n = 4 * quad_segs
    ang = 2.0 * math.pi * np.arange(n) / n
    ring = Ring.closed(np.stack([point.x + distance * np.cos(ang), point.y + distance * np.sin(ang)], axis=1))
    return PolygonSet((Polygon(ring),))


def _boundary_distance(xy, poly: Polygon) -> float:
    best = math.inf
    for ring in poly.rings:
        d, _ = project_on_segment(np.asarray(xy)[None, :], ring.coords[:-1], ring.coords[1:])
        best = min(best, float(d.min()))
    return best


def _inside_polygon(xy, poly: Polygon, tol: float) -> bool:
    if locate_in_ring(xy, poly.exterior.coords, tol)[0] != INSIDE:
        return False
    return all(locate_in_ring(xy, h.coords, tol)[0] == OUTSIDE for h in poly.holes)


def _drop_eroded_fragments(piece: PolygonSet, source: Polygon, distance: float,
                           quad_segs: int, tol: float) -> PolygonSet:
    """Remove pieces of an inward buffer that lie closer to the source boundary than the distance."""
    # chords of the round joins cut inside the exact disc by this factor
    required = distance * math.cos(math.pi / (4.0 * quad_segs)) - tol
    kept = []
    for poly in piece:
        rp = representative_point(poly)
        xy = (rp.x, rp.y)
        if not _inside_polygon(xy, source, tol) or _boundary_distance(xy, source) < required:
            logger.debug("buffer: dropping eroded fragment near %s", xy)
            continue
        kept.append(poly)
    return PolygonSet(tuple(kept))


def buffer(geom: Geometry, distance: float, quad_segs: Optional[int] = None,
           config: Optional[EngineConfig] = None) -> PolygonSet:
    """Offset a geometry by ``distance`` map units.

    Positive distances grow the region with round corners; negative distances
    erode it (parts eroded away vanish, the result may be empty). A zero
    distance returns the input normalized to a PolygonSet.
    """
    cfg = resolve_config(config)
    segs = int(quad_segs if quad_segs is not None else cfg.buffer.quad_segs)
    if segs < 1:
        raise ValueError(f"quad_segs must be >= 1, got {segs}")
    d = float(distance)
    if not math.isfinite(d):
        raise GeometryError(f"Buffer distance must be finite, got {distance}")
    if isinstance(geom, LabeledFeature):
        geom = geom.geometry
    if isinstance(geom, Point):
        return point_buffer(geom, d, segs)

    pset = as_polygon_set(geom)
    box = pset.bounds
    if box is None:
        return PolygonSet.empty()
    grown = math.hypot(box.width + 2.0 * abs(d), box.height + 2.0 * abs(d))
    tol = cfg.precision.tolerance_for(grown)
    area_tol = cfg.precision.area_tolerance_for(grown)
    if cfg.validate_inputs:
        validate(pset, cfg, cfg.precision.tolerance_for(box.diagonal))
    if d == 0.0:
        return _merge_disjoint(pset)

    pieces: List[PolygonSet] = []
    for poly in pset.oriented():
        curves = [offset_curve(r.coords, d, segs) for r in poly.rings]
        stats = OverlayStats(op='buffer')
        piece = dissolve([closed_curve_edges(curves)], _positive, tol, area_tol, cfg.drop_slivers, stats)
        if d < 0.0 and cfg.buffer.filter_eroded:
            piece = _drop_eroded_fragments(piece, poly, -d, segs, tol)
        if not piece.is_empty:
            pieces.append(piece)

    if not pieces:
        return PolygonSet.empty()
    if d > 0.0 and len(pieces) > 1:
        # inputs of the merge are engine output, already valid
        return unary_union(pieces, EngineConfig.with_overrides(cfg, validate_inputs=False))
    polys = [p for piece in pieces for p in piece]
    polys.sort(key=_sort_key)
    return PolygonSet(tuple(polys))
