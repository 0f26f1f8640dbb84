"""Public package API for polyclip, a planar polygon geometry engine.

This facade provides a stable, flat import surface on top of the internal
implementation package ``polyclip.core``: boolean operations, buffering,
topological predicates and measurements on polygons with holes.

Example
-------
    from polyclip import Polygon, intersect, area

    a = Polygon.from_coords([(0, 0), (2, 0), (2, 2), (0, 2)])
    b = Polygon.from_coords([(1, 1), (3, 1), (3, 3), (1, 3)])
    area(intersect(a, b))   # 1.0

The deeper modules (``polyclip.core.*``) are considered internal and may
change; rely on this layer for public symbols.
"""
from importlib import import_module as _imp
import logging as _logging

try:  # Python 3.8+ runtime version export
    from importlib.metadata import version as _pkg_version, PackageNotFoundError as _PNF
    __version__ = _pkg_version("polyclip")  # populated when installed
except _PNF:  # pragma: no cover - editable / unknown state
    __version__ = "0.0.0+dev"

_logging.getLogger(__name__).addHandler(_logging.NullHandler())

_const = _imp('polyclip.core.constants')
_errors = _imp('polyclip.core.errors')
_config = _imp('polyclip.core.config')
_log = _imp('polyclip.core.logging_utils')
_model = _imp('polyclip.core.model')
_pred = _imp('polyclip.core.predicates')
_valid = _imp('polyclip.core.validation')
_relate = _imp('polyclip.core.relate')
_overlay = _imp('polyclip.core.overlay')
_buffer = _imp('polyclip.core.buffer')
_measure = _imp('polyclip.core.measure')
_simplify = _imp('polyclip.core.simplify')
_features = _imp('polyclip.core.features')
_stats = _imp('polyclip.core.stats')
_io = _imp('polyclip.core.io')

# Model
Point = _model.Point
Ring = _model.Ring
Polygon = _model.Polygon
PolygonSet = _model.PolygonSet
LabeledFeature = _model.LabeledFeature
BoundingBox = _model.BoundingBox

# Configuration and logging
PrecisionConfig = _config.PrecisionConfig
BufferConfig = _config.BufferConfig
EngineConfig = _config.EngineConfig
get_logger = _log.get_logger
configure_logging = _log.configure_logging

# Errors
GeometryError = _errors.GeometryError
InvalidRingError = _errors.InvalidRingError
EmptyGeometryError = _errors.EmptyGeometryError
IncompatibleUnitsError = _errors.IncompatibleUnitsError
ToleranceAmbiguousError = _errors.ToleranceAmbiguousError

# Boolean operations
OverlayOp = _overlay.OverlayOp
overlay = _overlay.overlay
intersect = _overlay.intersect
union = _overlay.union
difference = _overlay.difference
symmetric_difference = _overlay.symmetric_difference
unary_union = _overlay.unary_union
clip_by_box = _overlay.clip_by_box

# Buffer
buffer = _buffer.buffer

# Predicates
Location = _relate.Location
Relation = _relate.Relation
relate = _relate.relate
locate = _relate.locate
within = _relate.within
contains = _relate.contains
intersects = _relate.intersects
disjoint = _relate.disjoint
touches = _relate.touches
overlaps = _relate.overlaps
equals = _relate.equals

# Measurement
area = _measure.area
centroid = _measure.centroid
bounding_box = _measure.bounding_box
perimeter = _measure.perimeter
representative_point = _measure.representative_point

# Validation / simplification
validate = _valid.validate
is_valid = _valid.is_valid
explain_validity = _valid.explain_validity
simplify = _simplify.simplify

# Features and mapping adapter
ensure_compatible_units = _features.ensure_compatible_units
clip_features = _features.clip_features
spatial_join = _features.spatial_join
mapping = _io.mapping
shape = _io.shape

# Tolerances
EPS_REL_TOLERANCE = _const.EPS_REL_TOLERANCE
EPS_ABS_TOLERANCE = _const.EPS_ABS_TOLERANCE
DEFAULT_QUAD_SEGS = _const.DEFAULT_QUAD_SEGS

# Namespace submodules for exploratory users
predicates = _pred
stats = _stats
constants = _const
io = _io

__all__ = [
    '__version__',
    # model
    'Point', 'Ring', 'Polygon', 'PolygonSet', 'LabeledFeature', 'BoundingBox',
    # configuration / logging
    'PrecisionConfig', 'BufferConfig', 'EngineConfig', 'get_logger', 'configure_logging',
    # errors
    'GeometryError', 'InvalidRingError', 'EmptyGeometryError', 'IncompatibleUnitsError',
    'ToleranceAmbiguousError',
    # boolean operations
    'OverlayOp', 'overlay', 'intersect', 'union', 'difference', 'symmetric_difference',
    'unary_union', 'clip_by_box',
    # buffer
    'buffer',
    # predicates
    'Location', 'Relation', 'relate', 'locate', 'within', 'contains', 'intersects', 'disjoint',
    'touches', 'overlaps', 'equals',
    # measurement
    'area', 'centroid', 'bounding_box', 'perimeter', 'representative_point',
    # validation / simplification
    'validate', 'is_valid', 'explain_validity', 'simplify',
    # features / mapping
    'ensure_compatible_units', 'clip_features', 'spatial_join', 'mapping', 'shape',
    # tolerances
    'EPS_REL_TOLERANCE', 'EPS_ABS_TOLERANCE', 'DEFAULT_QUAD_SEGS',
    # submodules / namespaces
    'predicates', 'stats', 'constants', 'io',
]
