"""
Physics Module
==============
Geometry and kinematics for the cone fill simulation.

Submodules:
- geometry: Rectangles and 2D vector helpers
- intercept: Closed-form pursuit interception
"""

from .geometry import (
    Rect,
    vec,
    length,
    dot,
    normalized,
    move_towards
)

from .intercept import (
    Intercept,
    intercept
)

__all__ = [
    # Geometry
    'Rect',
    'vec',
    'length',
    'dot',
    'normalized',
    'move_towards',
    # Intercept
    'Intercept',
    'intercept',
]
