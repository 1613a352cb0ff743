"""
Geometry Module
===============
Belt coordinate geometry.

Conventions:
- The belt moves in the +X direction
- Y runs across the belt, top < bottom
- Points and vectors are float64 numpy arrays of shape (2,)
"""

import numpy as np
from dataclasses import dataclass
from typing import Sequence, Tuple


def vec(x: float, y: float) -> np.ndarray:
    """Build a 2D vector."""
    return np.array([x, y], dtype=np.float64)


def length(v: np.ndarray) -> float:
    return float(np.linalg.norm(v))


def dot(a: np.ndarray, b: np.ndarray) -> float:
    return float(np.dot(a, b))


def normalized(v: np.ndarray) -> np.ndarray:
    """Unit vector in the direction of v. A zero vector stays zero."""
    n = np.linalg.norm(v)
    if n == 0.0:
        return np.zeros(2)
    return v / n


def move_towards(position: np.ndarray,
                 destination: np.ndarray,
                 max_distance: float) -> Tuple[np.ndarray, bool]:
    """
    Move in a straight line toward a destination without overshooting.

    Args:
        position: Current position
        destination: Where we want to be
        max_distance: Furthest we may travel this step

    Returns:
        (new position, arrived). Snaps onto the destination when it is
        within max_distance.
    """
    to_dest = destination - position
    if max_distance >= length(to_dest):
        return destination.astype(np.float64).copy(), True
    return position + normalized(to_dest) * max_distance, False


@dataclass(frozen=True)
class Rect:
    """
    Axis-aligned rectangle in belt coordinates.

    Edges behave like a Qt QRectF: right = left + width,
    bottom = top + height, and contains() includes the edges.
    """
    left: float
    top: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def center(self) -> np.ndarray:
        return vec(self.left + self.width / 2.0, self.top + self.height / 2.0)

    def contains(self, point: Sequence[float]) -> bool:
        x, y = float(point[0]), float(point[1])
        return self.left <= x <= self.right and self.top <= y <= self.bottom

    def adjusted(self, dl: float, dt: float, dr: float, db: float) -> 'Rect':
        """Move each edge by the given delta."""
        return Rect(
            left=self.left + dl,
            top=self.top + dt,
            width=self.width + dr - dl,
            height=self.height + db - dt
        )

    def with_left(self, left: float) -> 'Rect':
        """Move the left edge, keeping the right edge where it is."""
        return Rect(left, self.top, self.right - left, self.height)

    def with_width(self, width: float) -> 'Rect':
        """Change the width, keeping the left edge where it is."""
        return Rect(self.left, self.top, width, self.height)

    def to_dict(self) -> dict:
        return {
            'left': self.left,
            'top': self.top,
            'width': self.width,
            'height': self.height
        }
