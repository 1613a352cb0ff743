"""
Intercept Module
================
Closed-form pursuit interception.

A target moves at constant velocity, a pursuer moves in a straight line
at a fixed speed (direction free). Find the earliest time the pursuer can
arrive at the same point as the target.

Setting the distance the pursuer must cover equal to speed * t:

    |P + V*t|² = (speed * t)²

where P is the target position relative to the pursuer and V the target
velocity, gives a quadratic a*t² + b*t + c = 0 with

    a = |V|² - speed²
    b = 2 * (V · P)
    c = |P|²
"""

import numpy as np
from typing import NamedTuple, Optional


class Intercept(NamedTuple):
    """Intercept solution"""
    point: np.ndarray    # Where the target will be when caught
    time: float          # Seconds from now


def _earliest_root(a: float, b: float, c: float) -> Optional[float]:
    """Smallest non-negative root of a*t² + b*t + c = 0, or None."""
    if a == 0.0:
        # Pursuer exactly as fast as the target: linear in t
        if b != 0.0:
            t = -c / b
            return t if t >= 0.0 else None
        return 0.0 if c == 0.0 else None

    discriminant = b**2 - 4*a*c
    if discriminant < 0.0:
        return None

    sqrt_disc = np.sqrt(discriminant)
    t1 = (-b + sqrt_disc) / (2*a)
    t2 = (-b - sqrt_disc) / (2*a)

    roots = [t for t in (t1, t2) if t >= 0.0]
    if not roots:
        return None
    return float(min(roots))


def intercept(target_pos: np.ndarray,
              target_vel: np.ndarray,
              pursuer_pos: np.ndarray,
              pursuer_speed: float) -> Optional[Intercept]:
    """
    Calculate where and when a pursuer can catch a moving target.

    Args:
        target_pos: Target position now
        target_vel: Target velocity (units/s), assumed constant
        pursuer_pos: Pursuer position now
        pursuer_speed: Pursuer speed (units/s)

    Returns:
        Intercept(point, time), or None if the pursuer can never catch up.
        "No solution" is an ordinary outcome, not an error.
    """
    rel_pos = np.asarray(target_pos, dtype=np.float64) - np.asarray(pursuer_pos, dtype=np.float64)
    target_vel = np.asarray(target_vel, dtype=np.float64)

    a = float(np.dot(target_vel, target_vel)) - pursuer_speed**2
    b = 2.0 * float(np.dot(target_vel, rel_pos))
    c = float(np.dot(rel_pos, rel_pos))

    t = _earliest_root(a, b, c)
    if t is None:
        return None

    point = np.asarray(target_pos, dtype=np.float64) + target_vel * t
    return Intercept(point=point, time=t)
