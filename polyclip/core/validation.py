"""Input validation for rings, polygons and polygon sets.

Invalid inputs are rejected with InvalidRingError before any engine work is
done; nothing is ever repaired. Validation runs at the start of every public
operation unless ``EngineConfig.validate_inputs`` is False.
"""
from __future__ import annotations

from itertools import combinations
from typing import Optional

from .config import EngineConfig, resolve_config
from .errors import GeometryError, InvalidRingError
from .logging_utils import get_logger
from .model import Geometry, LabeledFeature, Point, Polygon, PolygonSet, Ring, as_polygon_set
from .predicates import INSIDE, locate_in_ring, ring_self_intersections, rings_touch

__all__ = ['validate', 'is_valid', 'explain_validity', 'validate_ring', 'validate_polygon']

logger = get_logger('polyclip.validation')


def validate_ring(ring: Ring, tol: float, area_tol: float, what: str = 'Ring') -> None:
    if abs(ring.signed_area) <= area_tol:
        raise InvalidRingError(f"{what} has zero area")
    bad = ring_self_intersections(ring.coords, tol)
    if bad:
        i, j = bad[0]
        raise InvalidRingError(f"{what} is not simple: edges {i} and {j} touch or cross")


def validate_polygon(poly: Polygon, tol: float, area_tol: float, what: str = 'Polygon') -> None:
    validate_ring(poly.exterior, tol, area_tol, f"{what} exterior")
    shell = poly.exterior.coords
    for k, hole in enumerate(poly.holes):
        name = f"{what} hole {k}"
        validate_ring(hole, tol, area_tol, name)
        if rings_touch(shell, hole.coords, tol):
            raise InvalidRingError(f"{name} touches or crosses the exterior")
        loc, _ = locate_in_ring(hole.coords[0], shell, tol)
        if loc != INSIDE:
            raise InvalidRingError(f"{name} lies outside the exterior")
    for i, j in combinations(range(len(poly.holes)), 2):
        hi = poly.holes[i].coords
        hj = poly.holes[j].coords
        if rings_touch(hi, hj, tol):
            raise InvalidRingError(f"{what} holes {i} and {j} touch or cross")
        if (locate_in_ring(hi[0], hj, tol)[0] == INSIDE
                or locate_in_ring(hj[0], hi, tol)[0] == INSIDE):
            raise InvalidRingError(f"{what} holes {i} and {j} are nested")


def _validate_members(pset: PolygonSet, tol: float) -> None:
    from .relate import Relation, relate_polygonal  # relate validates through this module

    for i, j in combinations(range(len(pset)), 2):
        a, b = pset[i], pset[j]
        if not a.bounds.intersects(b.bounds, tol):
            continue
        rel = relate_polygonal(PolygonSet((a,)), PolygonSet((b,)), tol)
        if rel not in (Relation.DISJOINT, Relation.TOUCHES):
            raise InvalidRingError(f"PolygonSet members {i} and {j} overlap ({rel.value})")


def validate(geom: Geometry, config: Optional[EngineConfig] = None, tol: Optional[float] = None) -> None:
    """Raise InvalidRingError if ``geom`` violates the model invariants.

    ``tol`` defaults to the precision policy applied to the geometry's own
    bounding box diagonal.
    """
    cfg = resolve_config(config)
    if isinstance(geom, LabeledFeature):
        geom = geom.geometry
    if isinstance(geom, Point):
        return
    box = geom.bounds
    if box is None:
        return
    if tol is None:
        tol = cfg.precision.tolerance_for(box.diagonal)
    area_tol = cfg.precision.area_tolerance_for(box.diagonal)
    if isinstance(geom, Ring):
        validate_ring(geom, tol, area_tol)
        return
    pset = as_polygon_set(geom)
    for k, poly in enumerate(pset):
        validate_polygon(poly, tol, area_tol, 'Polygon' if len(pset) == 1 else f"Polygon {k}")
    if len(pset) > 1:
        _validate_members(pset, tol)


def explain_validity(geom: Geometry, config: Optional[EngineConfig] = None) -> str:
    """Return "Valid" or the reason the geometry is invalid."""
    try:
        validate(geom, config)
    except GeometryError as exc:
        logger.debug("invalid geometry: %s", exc)
        return str(exc)
    return "Valid"


def is_valid(geom: Geometry, config: Optional[EngineConfig] = None) -> bool:
    return explain_validity(geom, config) == "Valid"
