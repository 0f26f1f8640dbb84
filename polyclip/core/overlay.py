"""Boolean set operations on polygon sets.

All operations go through the same pipeline:

1. collect the directed edges of every operand (interior on the left);
2. node them into one planar graph (``noding.node_edges``);
3. compute per-operand winding numbers on both sides of every fragment;
4. keep fragments whose two sides disagree under the operation's rule,
   oriented with the result on the left;
5. link the kept edges into rings, turning as far clockwise as possible at
   every node, and sort rings into shells (CCW) and holes (CW).

Shared and coincident boundaries need no special casing: a fragment used by
both operands simply carries both multiplicities.
"""
from __future__ import annotations

import math
import time
from collections import defaultdict
from itertools import combinations
from enum import Enum
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .config import EngineConfig, resolve_config
from .errors import ToleranceAmbiguousError
from .logging_utils import get_logger
from .measure import representative_point
from .model import BoundingBox, Geometry, Polygon, PolygonSet, Ring, as_polygon_set, combined_bounds
from .noding import WindingRule, node_edges, polygon_set_edges
from .predicates import OUTSIDE, locate_in_ring, project_on_segment, ring_signed_area, rings_touch
from .stats import OverlayStats, format_stats
from .validation import validate

__all__ = [
    'OverlayOp', 'overlay', 'intersect', 'union', 'difference', 'symmetric_difference',
    'unary_union', 'clip_by_box', 'dissolve', 'assemble_polygons',
]

logger = get_logger('polyclip.overlay')

TWO_PI = 2.0 * math.pi


class OverlayOp(str, Enum):
    INTERSECTION = 'intersection'
    UNION = 'union'
    DIFFERENCE = 'difference'
    SYMMETRIC_DIFFERENCE = 'symmetric_difference'


_RULES: Dict[OverlayOp, WindingRule] = {
    OverlayOp.INTERSECTION: lambda w: (w[:, 0] > 0) & (w[:, 1] > 0),
    OverlayOp.UNION: lambda w: (w[:, 0] > 0) | (w[:, 1] > 0),
    OverlayOp.DIFFERENCE: lambda w: (w[:, 0] > 0) & ~(w[:, 1] > 0),
    OverlayOp.SYMMETRIC_DIFFERENCE: lambda w: (w[:, 0] > 0) ^ (w[:, 1] > 0),
}


def _any_positive(w: np.ndarray) -> np.ndarray:
    return np.any(w > 0, axis=1)


# ---------------------------------------------------------------------------
# Ring assembly
# ---------------------------------------------------------------------------

def _walk_rings(nodes: np.ndarray, edges: np.ndarray) -> List[List[int]]:
    """Link directed edges into closed node walks (first clockwise turn rule)."""
    M = edges.shape[0]
    if M == 0:
        return []
    order = np.lexsort((edges[:, 1], edges[:, 0]))
    edges = edges[order]
    vec = nodes[edges[:, 1]] - nodes[edges[:, 0]]
    ang = np.arctan2(vec[:, 1], vec[:, 0])
    outgoing: Dict[int, List[int]] = defaultdict(list)
    for k in range(M):
        outgoing[int(edges[k, 0])].append(k)
    used = np.zeros(M, dtype=bool)
    walks: List[List[int]] = []
    for k0 in range(M):
        if used[k0]:
            continue
        start = int(edges[k0, 0])
        walk = [start]
        k = k0
        while True:
            used[k] = True
            v = int(edges[k, 1])
            if v == start:
                break
            walk.append(v)
            cand = [j for j in outgoing[v] if not used[j]]
            if not cand:
                raise ToleranceAmbiguousError(
                    f"Result boundary is open at node {tuple(nodes[v])}; inputs are too close to "
                    f"the tolerance to be overlaid reliably")
            if len(cand) == 1:
                k = cand[0]
            else:
                back = ang[k] + math.pi
                k = min(cand, key=lambda j: ((back - ang[j]) % TWO_PI) or TWO_PI)
        walks.append(walk)
    return walks


def _split_walk(walk: List[int]) -> List[List[int]]:
    """Split a closed walk into simple loops at repeated nodes."""
    loops = []
    stack: List[int] = []
    pos: Dict[int, int] = {}
    for v in walk:
        if v in pos:
            i = pos[v]
            loop = stack[i:]
            for u in loop[1:]:
                del pos[u]
            del stack[i + 1:]
            loops.append(loop)
        else:
            pos[v] = len(stack)
            stack.append(v)
    if len(stack) >= 3:
        loops.append(stack)
    return [lp for lp in loops if len(lp) >= 3]


def _point_segment_distance(p, a, b) -> float:
    d, _ = project_on_segment(p, a, b)
    return float(d)


def _drop_collinear(pts: np.ndarray, tol: float) -> np.ndarray:
    out: List[np.ndarray] = []
    for p in pts:
        while len(out) >= 2 and _point_segment_distance(out[-1], out[-2], p) <= tol:
            out.pop()
        out.append(p)
    changed = True
    while changed and len(out) >= 3:
        changed = False
        if _point_segment_distance(out[-1], out[-2], out[0]) <= tol:
            out.pop()
            changed = True
        elif _point_segment_distance(out[0], out[-1], out[1]) <= tol:
            out.pop(0)
            changed = True
    return np.array(out, dtype=np.float64).reshape(-1, 2)


def _probe_point(coords: np.ndarray) -> np.ndarray:
    """Midpoint of the longest edge of a closed ring."""
    d = np.diff(coords, axis=0)
    k = int(np.argmax(np.hypot(d[:, 0], d[:, 1])))
    return 0.5 * (coords[k] + coords[k + 1])


def _sort_key(poly: Polygon) -> Tuple[float, float, float]:
    c = poly.exterior.coords
    k = int(np.lexsort((c[:-1, 1], c[:-1, 0]))[0])
    return float(c[k, 0]), float(c[k, 1]), -abs(poly.exterior.signed_area)


def _start_lowest(coords: np.ndarray) -> np.ndarray:
    """Rotate an open vertex array so it starts at its lexicographically lowest vertex."""
    k = int(np.lexsort((coords[:, 1], coords[:, 0]))[0])
    return np.roll(coords, -k, axis=0)


def _pinched_hole(poly: Polygon, tol: float) -> Optional[int]:
    """Index of a hole touching the exterior or another hole, else None."""
    shell = poly.exterior.coords
    for k, hole in enumerate(poly.holes):
        if rings_touch(shell, hole.coords, tol):
            return k
    for i, j in combinations(range(len(poly.holes)), 2):
        if rings_touch(poly.holes[i].coords, poly.holes[j].coords, tol):
            return i
    return None


def _split_pinched(poly: Polygon, tol: float, area_tol: float, drop_slivers: bool) -> List[Polygon]:
    """Cut a polygon whose hole touches another ring into members sharing the cut.

    The horizontal cut passes through the interior of that hole, which opens it
    into the exterior of both halves. Halves are assembled again, so further
    pinches are split in turn.
    """
    k = _pinched_hole(poly, tol)
    if k is None:
        return [poly]
    y = representative_point(Polygon(poly.holes[k])).y
    box = poly.bounds
    m = max(box.diagonal, tol)
    edges = polygon_set_edges(PolygonSet((poly,)))
    logger.debug("splitting polygon at y=%g: hole %d touches another ring", y, k)
    pieces: List[Polygon] = []
    for half in (BoundingBox(box.minx - m, box.miny - m, box.maxx + m, y),
                 BoundingBox(box.minx - m, y, box.maxx + m, box.maxy + m)):
        cut = polygon_set_edges(PolygonSet((half.as_polygon(),)))
        part = dissolve([edges, cut], _RULES[OverlayOp.INTERSECTION], tol, area_tol, drop_slivers,
                        OverlayStats(op='split'))
        pieces.extend(part)
    return pieces


def assemble_polygons(nodes: np.ndarray, edges: np.ndarray, tol: float, area_tol: float,
                      drop_slivers: bool = True, stats: Optional[OverlayStats] = None) -> PolygonSet:
    """Build a PolygonSet from directed boundary edges with the region on their left."""
    shells: List[Tuple[float, np.ndarray]] = []
    holes: List[np.ndarray] = []
    slivers = 0
    for walk in _walk_rings(nodes, edges):
        for loop in _split_walk(walk):
            pts = _drop_collinear(nodes[loop], tol)
            if pts.shape[0] < 3:
                slivers += 1
                continue
            pts = _start_lowest(pts)
            closed = np.vstack([pts, pts[:1]])
            a = ring_signed_area(closed)
            if drop_slivers and abs(a) <= area_tol:
                slivers += 1
                continue
            if a > 0:
                shells.append((a, closed))
            elif a < 0:
                holes.append(closed)
            else:
                slivers += 1

    shells.sort(key=lambda item: item[0])
    boxes = [BoundingBox.of_coords(c) for _, c in shells]
    owned: List[List[np.ndarray]] = [[] for _ in shells]
    for hole in holes:
        probe = _probe_point(hole)
        for idx, (_, shell) in enumerate(shells):
            box = boxes[idx]
            if not (box.minx <= probe[0] <= box.maxx and box.miny <= probe[1] <= box.maxy):
                continue
            if locate_in_ring(probe, shell, tol)[0] != OUTSIDE:
                owned[idx].append(hole)
                break
        else:
            raise ToleranceAmbiguousError(
                f"Hole near {tuple(probe)} has no enclosing shell; inputs are too close to the tolerance")

    polys = [Polygon(Ring(shell), tuple(Ring(h) for h in sorted(hs, key=lambda c: (c[0, 0], c[0, 1]))))
             for (_, shell), hs in zip(shells, owned)]
    polys = [piece for poly in polys for piece in _split_pinched(poly, tol, area_tol, drop_slivers)]
    polys.sort(key=_sort_key)
    if stats is not None:
        stats.rings = len(shells) + len(holes)
        stats.shells = len(shells)
        stats.holes = len(holes)
        stats.slivers_dropped = slivers
    return PolygonSet(tuple(polys))


def dissolve(operands: Sequence[np.ndarray], rule: WindingRule, tol: float, area_tol: float,
             drop_slivers: bool = True, stats: Optional[OverlayStats] = None) -> PolygonSet:
    """Region where ``rule`` holds on the per-operand winding numbers.

    operands : list of (E,2,2) directed edge arrays, one per operand.
    rule     : maps an (F,K) winding array to an (F,) boolean membership mask.
    """
    stats = stats if stats is not None else OverlayStats()
    t0 = time.perf_counter()
    graph = node_edges(operands, tol)
    edges = graph.boundary_edges(rule)
    t1 = time.perf_counter()
    result = assemble_polygons(graph.nodes, edges, tol, area_tol, drop_slivers, stats)
    t2 = time.perf_counter()
    stats.input_edges = int(sum(np.asarray(op).reshape(-1, 2, 2).shape[0] for op in operands))
    stats.nodes = int(graph.nodes.shape[0])
    stats.fragments = int(graph.fragments.shape[0])
    stats.selected_edges = int(edges.shape[0])
    stats.time_noding = t1 - t0
    stats.time_assembly = t2 - t1
    logger.debug(format_stats(stats.to_dict()))
    return result


# ---------------------------------------------------------------------------
# Public operations
# ---------------------------------------------------------------------------

def _tolerances(cfg: EngineConfig, box: BoundingBox) -> Tuple[float, float]:
    return cfg.precision.tolerance_for(box.diagonal), cfg.precision.area_tolerance_for(box.diagonal)


def _merge_disjoint(*psets: PolygonSet) -> PolygonSet:
    polys = [p for ps in psets for p in ps.oriented()]
    polys.sort(key=_sort_key)
    return PolygonSet(tuple(polys))


def overlay(a: Geometry, b: Geometry, op, config: Optional[EngineConfig] = None) -> PolygonSet:
    """Apply a boolean operation (OverlayOp or its string value) to two geometries."""
    cfg = resolve_config(config)
    op = OverlayOp(op)
    A = as_polygon_set(a)
    B = as_polygon_set(b)
    box = combined_bounds(A, B)
    if box is None:
        return PolygonSet.empty()
    tol, area_tol = _tolerances(cfg, box)
    if cfg.validate_inputs:
        validate(A, cfg, tol)
        validate(B, cfg, tol)
    if A.is_empty or B.is_empty or not A.bounds.intersects(B.bounds, tol):
        logger.debug(format_stats(OverlayStats(op=op.value, short_circuit=True).to_dict()))
        if op is OverlayOp.INTERSECTION:
            return PolygonSet.empty()
        if op is OverlayOp.DIFFERENCE:
            return _merge_disjoint(A)
        return _merge_disjoint(A, B)
    stats = OverlayStats(op=op.value)
    return dissolve([polygon_set_edges(A), polygon_set_edges(B)], _RULES[op], tol, area_tol,
                    cfg.drop_slivers, stats)


def intersect(a: Geometry, b: Geometry, config: Optional[EngineConfig] = None) -> PolygonSet:
    """Region common to a and b."""
    return overlay(a, b, OverlayOp.INTERSECTION, config)


def union(a: Geometry, b: Geometry, config: Optional[EngineConfig] = None) -> PolygonSet:
    """Region covered by a or b; shared boundaries are dissolved."""
    return overlay(a, b, OverlayOp.UNION, config)


def difference(a: Geometry, b: Geometry, config: Optional[EngineConfig] = None) -> PolygonSet:
    """Part of a not covered by b (a is the base)."""
    return overlay(a, b, OverlayOp.DIFFERENCE, config)


def symmetric_difference(a: Geometry, b: Geometry, config: Optional[EngineConfig] = None) -> PolygonSet:
    """Region covered by exactly one of a and b."""
    return overlay(a, b, OverlayOp.SYMMETRIC_DIFFERENCE, config)


def unary_union(geoms: Iterable[Geometry], config: Optional[EngineConfig] = None) -> PolygonSet:
    """Union of any number of polygonal geometries in one noding pass."""
    cfg = resolve_config(config)
    psets = [as_polygon_set(g) for g in geoms]
    psets = [ps for ps in psets if not ps.is_empty]
    if not psets:
        return PolygonSet.empty()
    box = combined_bounds(*psets)
    tol, area_tol = _tolerances(cfg, box)
    if cfg.validate_inputs:
        for ps in psets:
            validate(ps, cfg, tol)
    if len(psets) == 1 and len(psets[0]) == 1:
        return _merge_disjoint(psets[0])
    stats = OverlayStats(op='unary_union')
    return dissolve([polygon_set_edges(ps) for ps in psets], _any_positive, tol, area_tol,
                    cfg.drop_slivers, stats)


def clip_by_box(geom: Geometry, box, config: Optional[EngineConfig] = None) -> PolygonSet:
    """Intersection with an axis-aligned box given as BoundingBox or (minx, miny, maxx, maxy)."""
    return intersect(geom, BoundingBox(*box).as_polygon(), config)
