"""
Cone Fill Simulator
===================
Owns the belt, the cones and the hose head, and advances them all one
fixed timestep per update().

An external driver (window timer, command line runner, tests) calls
update() at a fixed cadence, possibly several times per frame to fast
forward, and reads cones/hose back for display. The driver only changes
things through the parameter setters, which take effect on the next
update().

Single threaded: do not read entities while update() is running.
"""

import logging
import numpy as np
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .ai import select_target, TargetingReport
from .config import Parameters
from .entities import Cone, ConeStatus, Hose, HoseState
from .physics import vec


logger = logging.getLogger(__name__)

# Cones die this far past the view's far edge
DEATH_MARGIN = 2.0


@dataclass
class SimulationStats:
    """Running totals since the simulator was created"""
    cones_spawned: int = 0
    cones_filled: int = 0            # Topped off under the hose
    cones_retired_full: int = 0
    cones_retired_partial: int = 0
    cones_retired_empty: int = 0
    targets_abandoned: int = 0       # Target left the belt before it was full
    urgent_scans: int = 0            # Scans that went into triage

    @property
    def cones_retired(self) -> int:
        return self.cones_retired_full + self.cones_retired_partial + self.cones_retired_empty

    @property
    def fill_ratio(self) -> float:
        """Fraction of retired cones that left full."""
        retired = self.cones_retired
        return self.cones_retired_full / retired if retired > 0 else 0.0


class Simulator:
    """
    The cone filling simulation.

    Tick order:
    1. Cones: retire dead ones, ride the belt, spawn new ones
    2. Hose: scan for a target, move, fill
    3. Time advances by one timestep
    """

    def __init__(self, params: Optional[Parameters] = None, seed: Optional[int] = None):
        """
        Args:
            params: Initial parameters (not validated, don't break anything)
            seed: Seed for cone spawn positions. Same seed and parameters
                give the same run.
        """
        self._params = params or Parameters()
        self._time = 0.0
        self._next_cone_time = 0.0
        self._cones: List[Cone] = []
        self._next_cone_id = 0
        self._hose = Hose(self._params.hose_range.center)
        self._rng = np.random.default_rng(seed)
        self._report = TargetingReport()
        self.stats = SimulationStats()

    # --- accessors ---

    @property
    def params(self) -> Parameters:
        return self._params

    @property
    def time(self) -> float:
        return self._time

    @property
    def next_cone_time(self) -> float:
        return self._next_cone_time

    @property
    def cones(self) -> Tuple[Cone, ...]:
        """Live cones in spawn order. Stale after the next update()."""
        return tuple(self._cones)

    @property
    def hose(self) -> Hose:
        return self._hose

    @property
    def target(self) -> Optional[Cone]:
        """The hose's current target cone, if any."""
        return self.find_cone(self._hose.target_id)

    @property
    def last_report(self) -> TargetingReport:
        """Result of the most recent targeting scan."""
        return self._report

    @property
    def death_position(self) -> float:
        """Cones past this X are removed. Just beyond the view's far edge."""
        p = self._params
        return p.hose_range.right + (p.hose_range.left - p.cone_drop.right) + DEATH_MARGIN

    @property
    def rest_position(self) -> np.ndarray:
        """Where an idle hose parks: leading edge of its range, centred."""
        p = self._params
        return vec(p.hose_range.left, p.hose_range.center[1])

    # Values shown in the parameter panel that aren't Parameters fields
    @property
    def cone_variance(self) -> float:
        return self._params.cone_drop.width

    @property
    def hose_range_width(self) -> float:
        return self._params.hose_range.width

    def find_cone(self, cone_id: Optional[int]) -> Optional[Cone]:
        if cone_id is None:
            return None
        for cone in self._cones:
            if cone.cone_id == cone_id:
                return cone
        return None

    def cone_status(self, cone_id: int) -> ConeStatus:
        """Status from the last scan; cones it never saw are BORING."""
        return self._report.status_of(cone_id)

    # --- simulation ---

    def update(self):
        """
        Calculate one simulation frame. Cones may die, so references
        from cones() may be stale afterwards.
        """
        self._update_cones()
        self._update_hose(self._hose)
        self._time += self._params.timestep

    step = update

    def run(self, ticks: int):
        for _ in range(ticks):
            self.update()

    def _update_cones(self):
        p = self._params
        diepos = self.death_position

        # Move / kill cones
        survivors = []
        for cone in self._cones:
            if cone.x > diepos:
                self._retire_cone(cone)
            else:
                cone.advance(p.belt_speed * p.timestep)
                survivors.append(cone)
        self._cones = survivors

        # Spawn new cones
        while self._time >= self._next_cone_time:
            self._next_cone_time += 1.0 / p.cone_rate
            self._spawn_cone()

    def _spawn_cone(self) -> Cone:
        drop = self._params.cone_drop
        position = vec(self._rng.uniform(drop.left, drop.right),
                       self._rng.uniform(drop.top, drop.bottom))
        cone = Cone(cone_id=self._next_cone_id, position=position)
        self._next_cone_id += 1
        self._cones.append(cone)
        self.stats.cones_spawned += 1
        return cone

    def _retire_cone(self, cone: Cone):
        if cone.is_full:
            self.stats.cones_retired_full += 1
        elif cone.fill > 0.0:
            self.stats.cones_retired_partial += 1
        else:
            self.stats.cones_retired_empty += 1

        if self._hose.target_id == cone.cone_id:
            logger.debug("Target #%d left the belt at fill %.2f", cone.cone_id, cone.fill)
            self.stats.targets_abandoned += 1
            self._hose.release_target()

    def _update_hose(self, h: Hose):
        """
        Targeting, movement and filling for one hose head.

        h is passed in rather than read from self so more than one head
        could be supported later.
        """
        p = self._params

        if h.is_scanning:
            self._report = select_target(self._cones, h.position, p)
            h.urgent_mode = self._report.urgent_mode
            if self._report.urgent_mode:
                self.stats.urgent_scans += 1
            if self._report.target_id is not None:
                h.begin_approach(self._report.target_id, self._report.destination)
                logger.debug("t=%.2f: targeting #%d at (%.2f, %.2f)%s",
                             self._time, h.target_id, h.destination[0], h.destination[1],
                             " [urgent]" if h.urgent_mode else "")

        # Drift towards the rest point when there's nothing to do
        if h.state == HoseState.IDLE:
            h.drift_to(self.rest_position)

        if h.state in (HoseState.IDLE, HoseState.APPROACHING):
            h.move(p.hose_speed * p.timestep)

        if h.state == HoseState.APPROACHING and h.arrived:
            h.begin_filling()

        if h.state == HoseState.FILLING:
            target = self.find_cone(h.target_id)
            if target is None:
                h.release_target()
                return
            h.ride(target.position)
            if target.add_fill(p.hose_fill_rate * p.timestep):
                logger.debug("t=%.2f: cone #%d full", self._time, target.cone_id)
                self.stats.cones_filled += 1
                h.release_target()

    # --- parameter setters ---

    def set_parameters(self, params: Parameters):
        """Replace the whole parameter bundle."""
        self._params = params

    def set_belt_speed(self, v: float):
        self._params = self._params.replace(belt_speed=float(v))

    def set_belt_width(self, v: float):
        """Also moves the far edge of the hose range and cone drop area."""
        p = self._params
        delta = float(v) - p.belt_width
        self._params = p.replace(
            belt_width=float(v),
            hose_range=p.hose_range.adjusted(0, 0, 0, delta),
            cone_drop=p.cone_drop.adjusted(0, 0, 0, delta)
        )

    def set_cone_rate(self, v: float):
        self._params = self._params.replace(cone_rate=float(v))
        # Eliminate lag when the rate goes up
        period = 1.0 / self._params.cone_rate
        if self._next_cone_time - self._time > period:
            self._next_cone_time = self._time + period

    def set_cone_variance(self, v: float):
        """Width of the drop area, moving its -X edge."""
        drop = self._params.cone_drop
        self._params = self._params.replace(cone_drop=drop.with_left(drop.right - float(v)))

    def set_hose_range(self, v: float):
        """Width of the hose range, moving its +X edge."""
        self._params = self._params.replace(hose_range=self._params.hose_range.with_width(float(v)))

    def set_hose_speed(self, v: float):
        self._params = self._params.replace(hose_speed=float(v))

    def set_fill_rate(self, v: float):
        self._params = self._params.replace(hose_fill_rate=float(v))

    def set_urgent_time(self, v: float):
        self._params = self._params.replace(urgent_time=float(v))

    SETTERS = {
        'belt_speed': 'set_belt_speed',
        'belt_width': 'set_belt_width',
        'cone_rate': 'set_cone_rate',
        'cone_variance': 'set_cone_variance',
        'hose_range': 'set_hose_range',
        'hose_speed': 'set_hose_speed',
        'fill_rate': 'set_fill_rate',
        'urgent_time': 'set_urgent_time',
    }

    def configure(self, **values: float):
        """
        Apply several setters between ticks, e.g.
        configure(belt_width=30, cone_rate=2).
        """
        unknown = set(values) - set(self.SETTERS)
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")
        for name, value in values.items():
            getattr(self, self.SETTERS[name])(value)

    # --- snapshots ---

    def snapshot(self) -> Dict:
        """Plain-data view of the current frame for drivers and renderers."""
        return {
            'time': self._time,
            'cones': [
                {
                    'id': cone.cone_id,
                    'position': cone.position.copy(),
                    'fill': cone.fill,
                    'status': self.cone_status(cone.cone_id).value,
                    'targeted': cone.cone_id == self._hose.target_id
                }
                for cone in self._cones
            ],
            'hose': self._hose.get_status_report(),
            'stats': {
                'spawned': self.stats.cones_spawned,
                'filled': self.stats.cones_filled,
                'retired': self.stats.cones_retired,
                'fill_ratio': self.stats.fill_ratio
            }
        }
