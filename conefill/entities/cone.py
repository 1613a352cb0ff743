"""
Cone Entity
===========
One item riding the belt.

Cones are passive: the belt moves them and the hose fills them. What
the targeting pass concludes about a cone each tick lives in a
ConeAssessment (see ai.targeting), not on the cone itself.
"""

import numpy as np
from dataclasses import dataclass
from enum import Enum


class ConeStatus(Enum):
    """Targeting verdict for a cone"""
    BORING = "boring"                # Fillable, nothing special
    ALREADY_FULL = "already_full"    # Nothing left to do
    CANT_FILL = "cant_fill"          # Would leave hose range before full
    URGENT = "urgent"                # Fillable, but only just


@dataclass
class Cone:
    """A cone on the belt"""
    cone_id: int                     # Spawn-order handle
    position: np.ndarray             # Belt coordinates
    fill: float = 0.0                # 0 (empty) to 1 (full)

    @property
    def x(self) -> float:
        return float(self.position[0])

    @property
    def y(self) -> float:
        return float(self.position[1])

    @property
    def is_full(self) -> bool:
        return self.fill >= 1.0

    def advance(self, dx: float):
        """Ride the belt dx units along +X."""
        self.position = self.position + np.array([dx, 0.0])

    def add_fill(self, amount: float) -> bool:
        """
        Pour into the cone. Fill is clamped to exactly 1.0.

        Returns:
            True if the cone is now full
        """
        self.fill = min(1.0, self.fill + amount)
        return self.is_full

    def __repr__(self) -> str:
        return f"Cone(#{self.cone_id}, x={self.x:.2f}, y={self.y:.2f}, fill={self.fill:.2f})"
