"""
Hose Entity
===========
The single hose head hanging over the belt.

State machine:
- IDLE: no target. Scans for one, otherwise drifts to its rest point
- APPROACHING: flying straight at the precomputed intercept point
- FILLING: riding along with the target cone while pouring

The target is held as a cone_id handle, never as the Cone object, so
the simulator can drop cones without leaving the hose pointing at a
dead one. All state changes go through the transition methods below so
state and target never disagree.
"""

import numpy as np
from enum import Enum
from typing import Optional

from ..physics import move_towards


class HoseState(Enum):
    """Hose head states"""
    IDLE = "idle"
    APPROACHING = "approaching"
    FILLING = "filling"


class HoseMode(Enum):
    """What the hose is up to, as shown to the user"""
    IDLE = "idle"
    NORMAL = "normal"
    URGENT = "urgent"


class Hose:
    """
    The hose head.

    State and target always move together through the transition methods:
    - IDLE, target_id None: scanning, drifting to the rest point
    - APPROACHING, target_id set: moving to the target's fill point
    - FILLING, target_id set: riding the target and filling it

    Attributes:
        position: Current head position
        target_id: cone_id of the current target, or None
        destination: Current movement destination (IDLE, APPROACHING)
        arrived: Reached destination? (IDLE, APPROACHING)
        urgent_mode: Set by the last scan that found urgent cones
        state: HoseState
    """

    def __init__(self, position: np.ndarray):
        self.position = np.asarray(position, dtype=np.float64).copy()
        self.target_id: Optional[int] = None
        self.destination = self.position.copy()
        self.arrived = False
        self.urgent_mode = False
        self.state = HoseState.IDLE

    @property
    def has_target(self) -> bool:
        return self.target_id is not None

    @property
    def is_scanning(self) -> bool:
        """Idle with nothing in mind, so the next update looks for a target."""
        return self.state == HoseState.IDLE and self.target_id is None

    @property
    def mode(self) -> HoseMode:
        if self.state == HoseState.IDLE:
            return HoseMode.IDLE
        return HoseMode.URGENT if self.urgent_mode else HoseMode.NORMAL

    # --- transitions ---

    def begin_approach(self, target_id: int, destination: np.ndarray):
        """IDLE -> APPROACHING"""
        self.target_id = target_id
        self.destination = np.asarray(destination, dtype=np.float64).copy()
        self.arrived = False
        self.state = HoseState.APPROACHING

    def begin_filling(self):
        """APPROACHING -> FILLING"""
        if self.state == HoseState.APPROACHING and self.arrived:
            self.state = HoseState.FILLING

    def release_target(self):
        """Any -> IDLE. Used on completion and when the target is removed."""
        self.target_id = None
        self.state = HoseState.IDLE

    def drift_to(self, rest_point: np.ndarray):
        """Head for the rest point while IDLE."""
        # Arrival is re-detected by move() every tick, so clearing it is harmless
        self.arrived = False
        self.destination = np.asarray(rest_point, dtype=np.float64).copy()

    # --- motion ---

    def move(self, max_distance: float):
        """Travel toward the destination, at most max_distance this step."""
        if self.arrived:
            return
        self.position, self.arrived = move_towards(self.position, self.destination, max_distance)

    def ride(self, cone_position: np.ndarray):
        """Lock onto a cone's live position while filling."""
        self.position = np.asarray(cone_position, dtype=np.float64).copy()

    def get_status_report(self) -> dict:
        return {
            'position': self.position.copy(),
            'state': self.state.value,
            'mode': self.mode.value,
            'target_id': self.target_id,
            'destination': self.destination.copy(),
            'arrived': self.arrived,
            'urgent_mode': self.urgent_mode
        }

    def __repr__(self) -> str:
        return (f"Hose({self.state.name}, target={self.target_id}, "
                f"pos=({self.position[0]:.2f}, {self.position[1]:.2f}))")
