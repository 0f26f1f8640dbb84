"""Error kinds raised by the geometry engine.

Every error derives from :class:`GeometryError` (itself a ``ValueError``) and
carries a short ``kind`` tag so callers can branch without isinstance chains.
Errors are raised from the failing call only; the engine never returns a
partial result after one of them.
"""
from __future__ import annotations


class GeometryError(ValueError):
    kind = 'GeometryError'


class InvalidRingError(GeometryError):
    """Malformed, self-intersecting or under-specified boundary."""
    kind = 'InvalidRing'


class EmptyGeometryError(GeometryError):
    """Operation undefined on an empty or zero-area input (e.g. centroid)."""
    kind = 'EmptyGeometry'


class IncompatibleUnitsError(GeometryError):
    """Inputs tagged with different planar units were combined."""
    kind = 'IncompatibleUnits'


class ToleranceAmbiguousError(GeometryError):
    """A configuration sits within tolerance of two different classifications."""
    kind = 'ToleranceAmbiguous'


__all__ = [
    'GeometryError',
    'InvalidRingError',
    'EmptyGeometryError',
    'IncompatibleUnitsError',
    'ToleranceAmbiguousError',
]
