"""Configuration objects for the polyclip engine (precision, buffering)."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from .constants import (
    AMBIGUITY_FACTOR,
    DEFAULT_QUAD_SEGS,
    EPS_ABS_TOLERANCE,
    EPS_AREA,
    EPS_REL_TOLERANCE,
)


@dataclass
class PrecisionConfig:
    """Floating point tolerance policy.

    - rel_tolerance: snapping/boundary tolerance as a fraction of the bounding
      box diagonal of the inputs of one operation.
    - abs_tolerance: lower bound of the tolerance (degenerate extents).
    - strict: raise ToleranceAmbiguousError for point classifications that fall
      in the band (tol, ambiguity_factor * tol] instead of guessing.
    """
    rel_tolerance: float = EPS_REL_TOLERANCE
    abs_tolerance: float = EPS_ABS_TOLERANCE
    strict: bool = False
    ambiguity_factor: float = AMBIGUITY_FACTOR

    def tolerance_for(self, diagonal: float) -> float:
        return max(self.abs_tolerance, self.rel_tolerance * float(diagonal))

    def area_tolerance_for(self, diagonal: float) -> float:
        return max(EPS_AREA, self.tolerance_for(diagonal) * float(diagonal))


@dataclass
class BufferConfig:
    quad_segs: int = DEFAULT_QUAD_SEGS
    # Discard eroded fragments whose interior lies closer to the input boundary
    # than the (chord-corrected) buffer distance.
    filter_eroded: bool = True


@dataclass
class EngineConfig:
    """Unified configuration.

    Attributes
    ----------
    precision : PrecisionConfig
        Tolerance policy shared by every component.
    buffer : BufferConfig
        Parameters for the buffer/offset engine.
    validate_inputs : bool
        Validate every input geometry before operating on it.
    drop_slivers : bool
        Drop result rings whose area is below the area tolerance.
    """
    precision: PrecisionConfig = field(default_factory=PrecisionConfig)
    buffer: BufferConfig = field(default_factory=BufferConfig)
    validate_inputs: bool = True
    drop_slivers: bool = True

    @classmethod
    def with_overrides(cls, base: Optional['EngineConfig'] = None, **overrides: Any) -> 'EngineConfig':
        """Return a copy of ``base`` (or the defaults) with top-level or
        ``precision__``/``buffer__`` prefixed fields replaced."""
        base = base or cls()
        precision = PrecisionConfig(**vars(base.precision))
        buf = BufferConfig(**vars(base.buffer))
        cfg = cls(precision=precision, buffer=buf, validate_inputs=base.validate_inputs,
                  drop_slivers=base.drop_slivers)
        for key, value in overrides.items():
            target, name = cfg, key
            if key.startswith('precision__'):
                target, name = precision, key[len('precision__'):]
            elif key.startswith('buffer__'):
                target, name = buf, key[len('buffer__'):]
            if name not in target.__dataclass_fields__:
                raise AttributeError(f"Unknown EngineConfig field: {key}")
            setattr(target, name, value)
        return cfg


def resolve_config(config: Optional[EngineConfig]) -> EngineConfig:
    return EngineConfig() if config is None else config


__all__ = [
    'PrecisionConfig', 'BufferConfig', 'EngineConfig', 'resolve_config',
]
