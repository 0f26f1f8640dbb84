"""Immutable geometry value types.

Point, Ring, Polygon (exterior + holes), PolygonSet (multi-part region) and
LabeledFeature are plain aggregates: no inheritance between them and no
back-references. Coordinates are stored as read-only float64 numpy arrays so
they can be fed straight into the vectorized predicates.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Hashable, Iterable, Iterator, NamedTuple, Optional, Sequence, Tuple, Union

import numpy as np

from .errors import GeometryError, InvalidRingError
from .predicates import ring_signed_area


class BoundingBox(NamedTuple):
    """Axis-aligned bounding box."""

    minx: float
    miny: float
    maxx: float
    maxy: float

    @classmethod
    def of_coords(cls, coords) -> 'BoundingBox':
        c = np.asarray(coords, dtype=np.float64).reshape(-1, 2)
        lo = c.min(axis=0)
        hi = c.max(axis=0)
        return cls(float(lo[0]), float(lo[1]), float(hi[0]), float(hi[1]))

    @property
    def width(self) -> float:
        return self.maxx - self.minx

    @property
    def height(self) -> float:
        return self.maxy - self.miny

    @property
    def diagonal(self) -> float:
        return math.hypot(self.width, self.height)

    def intersects(self, other: 'BoundingBox', tol: float = 0.0) -> bool:
        return not (self.maxx + tol < other.minx or other.maxx + tol < self.minx
                    or self.maxy + tol < other.miny or other.maxy + tol < self.miny)

    def union(self, other: 'BoundingBox') -> 'BoundingBox':
        return BoundingBox(min(self.minx, other.minx), min(self.miny, other.miny),
                           max(self.maxx, other.maxx), max(self.maxy, other.maxy))

    def as_polygon(self) -> 'Polygon':
        if self.width <= 0 or self.height <= 0:
            raise GeometryError(f"Degenerate bounding box cannot form a polygon: {tuple(self)}")
        return Polygon.from_coords([(self.minx, self.miny), (self.maxx, self.miny),
                                    (self.maxx, self.maxy), (self.minx, self.maxy)])


@dataclass(frozen=True)
class Point:
    """A 2D point in planar map units."""

    x: float
    y: float

    def __post_init__(self) -> None:
        x, y = float(self.x), float(self.y)
        if not (math.isfinite(x) and math.isfinite(y)):
            raise GeometryError(f"Point coordinates must be finite, got ({self.x}, {self.y})")
        object.__setattr__(self, 'x', x)
        object.__setattr__(self, 'y', y)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y

    @property
    def coords(self) -> np.ndarray:
        arr = np.array([[self.x, self.y]], dtype=np.float64)
        arr.flags.writeable = False
        return arr

    @property
    def bounds(self) -> BoundingBox:
        return BoundingBox(self.x, self.y, self.x, self.y)

    def distance(self, other: 'Point') -> float:
        return math.hypot(self.x - other.x, self.y - other.y)


@dataclass(frozen=True, eq=False)
class Ring:
    """Closed boundary: at least 4 points, first == last.

    Consecutive duplicate points are collapsed on construction. Simplicity is
    not checked here (see ``validation.validate``) because rings assembled by
    the engines are simple by construction.
    """

    coords: np.ndarray

    def __post_init__(self) -> None:
        try:
            arr = np.array(self.coords, dtype=np.float64)
        except (TypeError, ValueError) as exc:
            raise InvalidRingError(f"Ring coordinates are not numeric: {exc}") from exc
        if arr.ndim != 2 or arr.shape[1] != 2:
            raise InvalidRingError(f"Ring coordinates must have shape (N, 2), got {arr.shape}")
        if not np.all(np.isfinite(arr)):
            raise InvalidRingError("Ring coordinates must be finite")
        if arr.shape[0]:
            keep = np.ones(arr.shape[0], dtype=bool)
            keep[1:] = np.any(arr[1:] != arr[:-1], axis=1)
            arr = arr[keep]
        if arr.shape[0] < 4:
            raise InvalidRingError(
                f"Ring requires at least 4 points (3 distinct plus closing point), got {arr.shape[0]}")
        if not np.array_equal(arr[0], arr[-1]):
            raise InvalidRingError(f"Ring is not closed: first {tuple(arr[0])} != last {tuple(arr[-1])}")
        arr.flags.writeable = False
        object.__setattr__(self, 'coords', arr)

    @classmethod
    def closed(cls, points: Iterable[Sequence[float]]) -> 'Ring':
        """Build a ring from an open or closed point sequence."""
        arr = np.array([tuple(p) for p in points], dtype=np.float64).reshape(-1, 2)
        if arr.shape[0] and not np.array_equal(arr[0], arr[-1]):
            arr = np.vstack([arr, arr[:1]])
        return cls(arr)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ring):
            return NotImplemented
        return np.array_equal(self.coords, other.coords)

    def __hash__(self) -> int:
        return hash(self.coords.tobytes())

    def __len__(self) -> int:
        return int(self.coords.shape[0])

    def __iter__(self) -> Iterator[Tuple[float, float]]:
        for x, y in self.coords:
            yield float(x), float(y)

    def __repr__(self) -> str:
        return f"Ring({[tuple(p) for p in self]})"

    @property
    def points(self) -> Tuple[Point, ...]:
        return tuple(Point(x, y) for x, y in self)

    @property
    def signed_area(self) -> float:
        return ring_signed_area(self.coords)

    @property
    def is_ccw(self) -> bool:
        return self.signed_area > 0.0

    @property
    def bounds(self) -> BoundingBox:
        return BoundingBox.of_coords(self.coords)

    def reversed(self) -> 'Ring':
        return Ring(self.coords[::-1])

    def oriented(self, ccw: bool = True) -> 'Ring':
        """Return this ring with the requested orientation."""
        return self if self.is_ccw == ccw else self.reversed()


RingLike = Union[Ring, Sequence[Sequence[float]], np.ndarray]


def _as_ring(value: RingLike) -> Ring:
    return value if isinstance(value, Ring) else Ring(value)


@dataclass(frozen=True)
class Polygon:
    """One exterior ring plus zero or more hole rings."""

    exterior: Ring
    holes: Tuple[Ring, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, 'exterior', _as_ring(self.exterior))
        object.__setattr__(self, 'holes', tuple(_as_ring(h) for h in self.holes))

    @classmethod
    def from_coords(cls, shell: Iterable[Sequence[float]],
                    holes: Iterable[Iterable[Sequence[float]]] = ()) -> 'Polygon':
        """Build a polygon from open or closed coordinate sequences."""
        return cls(Ring.closed(shell), tuple(Ring.closed(h) for h in holes))

    @property
    def rings(self) -> Tuple[Ring, ...]:
        return (self.exterior,) + self.holes

    @property
    def bounds(self) -> BoundingBox:
        return self.exterior.bounds

    def oriented(self) -> 'Polygon':
        """Exterior counter-clockwise, holes clockwise (interior on the left)."""
        return Polygon(self.exterior.oriented(ccw=True), tuple(h.oriented(ccw=False) for h in self.holes))


@dataclass(frozen=True)
class PolygonSet:
    """Zero or more non-overlapping polygons forming one (possibly split) region."""

    polygons: Tuple[Polygon, ...] = ()

    def __post_init__(self) -> None:
        polys = tuple(self.polygons)
        for p in polys:
            if not isinstance(p, Polygon):
                raise TypeError(f"PolygonSet members must be Polygon, got {type(p).__name__}")
        object.__setattr__(self, 'polygons', polys)

    @classmethod
    def empty(cls) -> 'PolygonSet':
        return cls(())

    @property
    def is_empty(self) -> bool:
        return not self.polygons

    def __len__(self) -> int:
        return len(self.polygons)

    def __iter__(self) -> Iterator[Polygon]:
        return iter(self.polygons)

    def __getitem__(self, idx: int) -> Polygon:
        return self.polygons[idx]

    @property
    def bounds(self) -> Optional[BoundingBox]:
        if self.is_empty:
            return None
        box = self.polygons[0].bounds
        for p in self.polygons[1:]:
            box = box.union(p.bounds)
        return box

    def oriented(self) -> 'PolygonSet':
        return PolygonSet(tuple(p.oriented() for p in self.polygons))


Geometry = Union[Point, Ring, Polygon, PolygonSet]


@dataclass(frozen=True)
class LabeledFeature:
    """A geometry with an opaque label (and optional unit tag) for caller bookkeeping."""

    label: Hashable
    geometry: Geometry
    units: Optional[str] = None


def as_polygon_set(geom: Geometry) -> PolygonSet:
    """Coerce a Ring, Polygon or PolygonSet into a PolygonSet."""
    if isinstance(geom, PolygonSet):
        return geom
    if isinstance(geom, Polygon):
        return PolygonSet((geom,))
    if isinstance(geom, Ring):
        return PolygonSet((Polygon(geom),))
    if isinstance(geom, LabeledFeature):
        return as_polygon_set(geom.geometry)
    raise TypeError(f"Expected a polygonal geometry, got {type(geom).__name__}")


def geometry_bounds(geom: Geometry) -> Optional[BoundingBox]:
    if isinstance(geom, LabeledFeature):
        geom = geom.geometry
    return geom.bounds


def combined_bounds(*geoms: Geometry) -> Optional[BoundingBox]:
    """Bounding box of all non-empty geometries, or None when all are empty."""
    box = None
    for g in geoms:
        b = geometry_bounds(g)
        if b is None:
            continue
        box = b if box is None else box.union(b)
    return box


__all__ = [
    'BoundingBox', 'Point', 'Ring', 'Polygon', 'PolygonSet', 'LabeledFeature',
    'Geometry', 'as_polygon_set', 'geometry_bounds', 'combined_bounds',
]
