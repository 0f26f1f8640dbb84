"""GeoJSON-like mapping adapter.

Converts model values to and from plain dicts (``{"type": ..., "coordinates":
...}``) so callers can hand geometries to any reader, writer or renderer. No
files, no CRS handling.
"""
from __future__ import annotations

from typing import Any, Dict, List, Mapping

from .errors import GeometryError
from .model import Geometry, LabeledFeature, Point, Polygon, PolygonSet, Ring

__all__ = ['mapping', 'shape']


def _ring_coords(ring: Ring) -> List[List[float]]:
	return [[x, y] for x, y in ring]


def _polygon_coords(poly: Polygon) -> List[List[List[float]]]:
	return [_ring_coords(r) for r in poly.rings]


def mapping(geom: Geometry) -> Dict[str, Any]:
	"""GeoJSON-like dict of a model value.

	Polygon rings are emitted as stored (exterior first). A PolygonSet becomes a
	MultiPolygon, even with a single member.
	"""
	if isinstance(geom, LabeledFeature):
		return {'type': 'Feature', 'id': geom.label, 'properties': {'units': geom.units},
				'geometry': mapping(geom.geometry)}
	if isinstance(geom, Point):
		return {'type': 'Point', 'coordinates': [geom.x, geom.y]}
	if isinstance(geom, Ring):
		return {'type': 'Polygon', 'coordinates': [_ring_coords(geom)]}
	if isinstance(geom, Polygon):
		return {'type': 'Polygon', 'coordinates': _polygon_coords(geom)}
	if isinstance(geom, PolygonSet):
		return {'type': 'MultiPolygon', 'coordinates': [_polygon_coords(p) for p in geom]}
	raise TypeError(f"Cannot map {type(geom).__name__}")


def _polygon(rings) -> Polygon:
	if not rings:
		raise GeometryError("Polygon mapping has no rings")
	return Polygon.from_coords(rings[0], rings[1:])


def shape(obj: Mapping[str, Any]):
	"""Model value from a GeoJSON-like dict (Point, Polygon, MultiPolygon, Feature)."""
	try:
		kind = obj['type']
	except (KeyError, TypeError):
		raise GeometryError(f"Not a geometry mapping: {obj!r}") from None
	if kind == 'Feature':
		props = obj.get('properties') or {}
		return LabeledFeature(obj.get('id'), shape(obj['geometry']), props.get('units'))
	coords = obj.get('coordinates')
	if coords is None:
		raise GeometryError(f"{kind} mapping has no coordinates")
	if kind == 'Point':
		return Point(*coords)
	if kind == 'Polygon':
		return _polygon(coords)
	if kind == 'MultiPolygon':
		return PolygonSet(tuple(_polygon(rings) for rings in coords))
	raise GeometryError(f"Unsupported geometry type {kind!r}")
