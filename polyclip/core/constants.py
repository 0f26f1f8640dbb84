"""Central numerical tolerances and small geometry constants.

This module centralizes tiny numeric thresholds used across the codebase so
they can be tuned consistently and referenced without scattering literals.
"""
from __future__ import annotations

# Geometry tolerances
EPS_AREA: float = 1e-12            # minimum positive (absolute) ring area
EPS_REL_TOLERANCE: float = 1e-9    # snapping/boundary tolerance relative to bbox diagonal
EPS_ABS_TOLERANCE: float = 1e-12   # floor for inputs with (near) zero extent

# Strict-mode band: distances in (tol, AMBIGUITY_FACTOR * tol] are ambiguous
AMBIGUITY_FACTOR: float = 10.0

# Round joins
DEFAULT_QUAD_SEGS: int = 16        # arc segments per quarter turn

# Error bound for the float orientation filter (Shewchuk's ccwerrboundA)
ORIENT_ERRBOUND: float = 3.3306690738754716e-16

__all__ = [
    'EPS_AREA',
    'EPS_REL_TOLERANCE',
    'EPS_ABS_TOLERANCE',
    'AMBIGUITY_FACTOR',
    'DEFAULT_QUAD_SEGS',
    'ORIENT_ERRBOUND',
]
