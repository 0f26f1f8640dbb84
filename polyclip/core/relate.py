"""Topological predicates between points, polygons and polygon sets.

``relate(a, b)`` returns the single Relation describing ``a`` relative to
``b``; the boolean predicates are thin views over it. Polygonal operands are
noded together (see ``noding``) and every boundary fragment of one operand is
classified against the other from the winding numbers on both of its sides,
which handles crossings, shared edges and touching vertices uniformly.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional, Tuple

from .config import EngineConfig, PrecisionConfig, resolve_config
from .errors import ToleranceAmbiguousError
from .logging_utils import get_logger
from .measure import representative_point
from .model import Geometry, LabeledFeature, Point, PolygonSet, as_polygon_set, combined_bounds
from .noding import node_edges, polygon_set_edges
from .predicates import INSIDE, ON_BOUNDARY, OUTSIDE, locate_in_ring
from .validation import validate

__all__ = [
    'Location', 'Relation', 'locate', 'relate', 'relate_polygonal',
    'within', 'contains', 'intersects', 'disjoint', 'touches', 'overlaps', 'equals',
]

logger = get_logger('polyclip.relate')


class Location(str, Enum):
    INTERIOR = 'interior'
    BOUNDARY = 'boundary'
    EXTERIOR = 'exterior'


class Relation(str, Enum):
    DISJOINT = 'disjoint'
    TOUCHES = 'touches'
    OVERLAPS = 'overlaps'
    WITHIN = 'within'
    CONTAINS = 'contains'
    EQUALS = 'equals'


def _unwrap(geom):
    return geom.geometry if isinstance(geom, LabeledFeature) else geom


def _check_band(dist: float, tol: float, precision: Optional[PrecisionConfig]) -> None:
    if precision is not None and precision.strict and tol < dist <= precision.ambiguity_factor * tol:
        raise ToleranceAmbiguousError(
            f"Point lies {dist:.3e} from a boundary, inside the ambiguity band of tolerance {tol:.3e}")


def _locate_in_set(xy: Tuple[float, float], pset: PolygonSet, tol: float,
                   precision: Optional[PrecisionConfig] = None) -> Location:
    best = Location.EXTERIOR
    # strict mode must see points in the ambiguity band just outside a box
    margin = precision.ambiguity_factor * tol if precision is not None and precision.strict else tol
    for poly in pset:
        box = poly.bounds
        if not (box.minx - margin <= xy[0] <= box.maxx + margin
                and box.miny - margin <= xy[1] <= box.maxy + margin):
            continue
        loc, dist = locate_in_ring(xy, poly.exterior.coords, tol)
        _check_band(dist, tol, precision)
        if loc == OUTSIDE:
            continue
        if loc == ON_BOUNDARY:
            best = Location.BOUNDARY
            continue
        where = Location.INTERIOR
        for hole in poly.holes:
            hloc, hdist = locate_in_ring(xy, hole.coords, tol)
            _check_band(hdist, tol, precision)
            if hloc == ON_BOUNDARY:
                where = Location.BOUNDARY
                break
            if hloc == INSIDE:
                where = Location.EXTERIOR
                break
        if where == Location.INTERIOR:
            return where
        if where == Location.BOUNDARY:
            best = where
    return best


def _tolerance(cfg: EngineConfig, *geoms) -> float:
    box = combined_bounds(*geoms)
    return cfg.precision.tolerance_for(box.diagonal if box is not None else 0.0)


def locate(point: Point, geom: Geometry, config: Optional[EngineConfig] = None) -> Location:
    """Classify a point as INTERIOR, BOUNDARY or EXTERIOR of a geometry.

    Points within tolerance of a boundary are BOUNDARY; a point inside a hole is
    EXTERIOR.
    """
    cfg = resolve_config(config)
    point = _unwrap(point)
    geom = _unwrap(geom)
    tol = _tolerance(cfg, point, geom)
    if isinstance(geom, Point):
        return Location.INTERIOR if point.distance(geom) <= tol else Location.EXTERIOR
    pset = as_polygon_set(geom)
    if cfg.validate_inputs:
        validate(pset, cfg, tol)
    return _locate_in_set((point.x, point.y), pset, tol, cfg.precision)


def relate_polygonal(A: PolygonSet, B: PolygonSet, tol: float,
                     precision: Optional[PrecisionConfig] = None) -> Relation:
    """Relation of two non-empty, valid polygon sets (no validation here)."""
    graph = node_edges([polygon_set_edges(A), polygon_set_edges(B)], tol)
    left, right = graph.side_windings()
    in_a_l = left[:, 0] > 0; in_a_r = right[:, 0] > 0
    in_b_l = left[:, 1] > 0; in_b_r = right[:, 1] > 0
    a_bnd = in_a_l != in_a_r
    b_bnd = in_b_l != in_b_r
    a_in_b_int = bool(((a_bnd & in_b_l & in_b_r)).any())
    a_in_b_ext = bool(((a_bnd & ~in_b_l & ~in_b_r)).any())
    b_in_a_int = bool(((b_bnd & in_a_l & in_a_r)).any())
    b_in_a_ext = bool(((b_bnd & ~in_a_l & ~in_a_r)).any())
    logger.debug("relate: %d fragments, A->B int=%s ext=%s, B->A int=%s ext=%s",
                 graph.fragments.shape[0], a_in_b_int, a_in_b_ext, b_in_a_int, b_in_a_ext)

    interiors_meet = a_in_b_int or b_in_a_int
    if not interiors_meet:
        # no boundary enters the other interior: one region may still sit inside the other
        for src, dst in ((A, B), (B, A)):
            for poly in src:
                rp = representative_point(poly)
                if _locate_in_set((rp.x, rp.y), dst, tol, precision) == Location.INTERIOR:
                    interiors_meet = True
                    break
            if interiors_meet:
                break
    if not interiors_meet:
        a_nodes = set(graph.fragments[a_bnd].ravel().tolist())
        b_nodes = set(graph.fragments[b_bnd].ravel().tolist())
        return Relation.TOUCHES if a_nodes & b_nodes else Relation.DISJOINT

    a_inside = not a_in_b_ext and not b_in_a_int
    b_inside = not b_in_a_ext and not a_in_b_int
    if a_inside and b_inside:
        return Relation.EQUALS
    if a_inside:
        return Relation.WITHIN
    if b_inside:
        return Relation.CONTAINS
    return Relation.OVERLAPS


_POINT_RELATION = {
    Location.INTERIOR: Relation.WITHIN,
    Location.BOUNDARY: Relation.TOUCHES,
    Location.EXTERIOR: Relation.DISJOINT,
}

_CONVERSE = {
    Relation.WITHIN: Relation.CONTAINS,
    Relation.CONTAINS: Relation.WITHIN,
}


def relate(a: Geometry, b: Geometry, config: Optional[EngineConfig] = None) -> Relation:
    """Topological relation of ``a`` with respect to ``b``.

    WITHIN means a lies in b, CONTAINS means a holds b; order matters.
    """
    cfg = resolve_config(config)
    a = _unwrap(a)
    b = _unwrap(b)
    a_pt = isinstance(a, Point)
    b_pt = isinstance(b, Point)
    if a_pt and b_pt:
        return Relation.EQUALS if locate(a, b, cfg) == Location.INTERIOR else Relation.DISJOINT
    if a_pt:
        return _POINT_RELATION[locate(a, b, cfg)]
    if b_pt:
        rel = _POINT_RELATION[locate(b, a, cfg)]
        return _CONVERSE.get(rel, rel)

    A = as_polygon_set(a)
    B = as_polygon_set(b)
    box = combined_bounds(A, B)
    if box is None:
        return Relation.DISJOINT
    tol = cfg.precision.tolerance_for(box.diagonal)
    if cfg.validate_inputs:
        validate(A, cfg, tol)
        validate(B, cfg, tol)
    if A.is_empty or B.is_empty or not A.bounds.intersects(B.bounds, tol):
        return Relation.DISJOINT
    return relate_polygonal(A, B, tol, cfg.precision)


def within(a: Geometry, b: Geometry, config: Optional[EngineConfig] = None) -> bool:
    """True when a lies inside b (interiors meet, no part of a outside b)."""
    return relate(a, b, config) in (Relation.WITHIN, Relation.EQUALS)


def contains(a: Geometry, b: Geometry, config: Optional[EngineConfig] = None) -> bool:
    """True when a holds b; equivalent to within(b, a)."""
    return relate(a, b, config) in (Relation.CONTAINS, Relation.EQUALS)


def intersects(a: Geometry, b: Geometry, config: Optional[EngineConfig] = None) -> bool:
    return relate(a, b, config) != Relation.DISJOINT


def disjoint(a: Geometry, b: Geometry, config: Optional[EngineConfig] = None) -> bool:
    return relate(a, b, config) == Relation.DISJOINT


def touches(a: Geometry, b: Geometry, config: Optional[EngineConfig] = None) -> bool:
    return relate(a, b, config) == Relation.TOUCHES


def overlaps(a: Geometry, b: Geometry, config: Optional[EngineConfig] = None) -> bool:
    return relate(a, b, config) == Relation.OVERLAPS


def equals(a: Geometry, b: Geometry, config: Optional[EngineConfig] = None) -> bool:
    return relate(a, b, config) == Relation.EQUALS
