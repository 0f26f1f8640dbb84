"""Helpers over LabeledFeature collections: unit checks, batch clipping, joins."""
from __future__ import annotations

from typing import Callable, Dict, Hashable, Iterable, List, Optional, Tuple, Union

from .config import EngineConfig
from .errors import IncompatibleUnitsError
from .logging_utils import get_logger
from .model import Geometry, LabeledFeature, geometry_bounds
from .overlay import OverlayOp, overlay
from . import relate as _relate

__all__ = ['ensure_compatible_units', 'clip_features', 'spatial_join']

logger = get_logger('polyclip.features')

_PREDICATES: Dict[str, Callable[..., bool]] = {
    'intersects': _relate.intersects,
    'within': _relate.within,
    'contains': _relate.contains,
    'touches': _relate.touches,
    'overlaps': _relate.overlaps,
    'disjoint': _relate.disjoint,
    'equals': _relate.equals,
}


def ensure_compatible_units(*features) -> Optional[str]:
    """Return the common unit tag of the features (None if untagged).

    Raises IncompatibleUnitsError when two features carry different tags.
    Untagged features are compatible with anything.
    """
    units = sorted({f.units for f in features if isinstance(f, LabeledFeature) and f.units is not None})
    if len(units) > 1:
        raise IncompatibleUnitsError(f"Features use different planar units: {units}")
    return units[0] if units else None


def clip_features(features: Iterable[LabeledFeature], mask: Union[Geometry, LabeledFeature],
                  op=OverlayOp.INTERSECTION, config: Optional[EngineConfig] = None) -> List[LabeledFeature]:
    """Apply ``op`` between every feature and the mask, keeping labels.

    Features whose result is empty are dropped from the output.
    """
    features = list(features)
    ensure_compatible_units(*features, mask)
    mask_geom = mask.geometry if isinstance(mask, LabeledFeature) else mask
    out: List[LabeledFeature] = []
    for feat in features:
        result = overlay(feat.geometry, mask_geom, op, config)
        if result.is_empty:
            logger.debug("clip_features: %r is empty after %s", feat.label, OverlayOp(op).value)
            continue
        out.append(LabeledFeature(feat.label, result, feat.units))
    logger.info("clip_features: kept %d of %d features", len(out), len(features))
    return out


def spatial_join(left: Iterable[LabeledFeature], right: Iterable[LabeledFeature],
                 predicate: str = 'intersects',
                 config: Optional[EngineConfig] = None) -> List[Tuple[Hashable, Hashable]]:
    """(left_label, right_label) pairs for which ``predicate(left, right)`` holds."""
    try:
        pred = _PREDICATES[predicate]
    except KeyError:
        raise ValueError(f"Unknown predicate {predicate!r}; expected one of {sorted(_PREDICATES)}") from None
    left = list(left)
    right = list(right)
    ensure_compatible_units(*left, *right)
    pairs: List[Tuple[Hashable, Hashable]] = []
    for lf in left:
        lbox = geometry_bounds(lf.geometry)
        for rf in right:
            rbox = geometry_bounds(rf.geometry)
            if predicate != 'disjoint' and (lbox is None or rbox is None or not lbox.intersects(rbox)):
                continue
            if pred(lf.geometry, rf.geometry, config):
                pairs.append((lf.label, rf.label))
    return pairs
