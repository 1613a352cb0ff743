"""
Cone Fill Renderer Interface
============================

Pluggable renderer abstraction.
Renderers only read simulator state; they never change it.

Supported engines:
- Headless - No drawing, just keeps the last frame and a frame count

Usage:
    from conefill.visualization.engine_interface import create_renderer

    renderer = create_renderer('headless')
    renderer.set_simulation(sim)
    renderer.update_state(RenderState.from_simulator(sim))
    renderer.render_frame(dt)
    ...
    renderer.shutdown()
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Tuple
import numpy as np
from dataclasses import dataclass, field

from ..entities import ConeStatus, HoseMode
from ..simulator import DEATH_MARGIN


# Colours (named as in Qt)
BACKGROUND_COLOR = "blue"
BELT_COLOR = "lightgray"
HOSE_AREA_COLOR = "yellow"
HOSE_BORDER_COLOR = "black"
CONE_AREA_COLOR = "white"
CONE_FULL_COLOR = "green"
CONE_BORDER_COLOR = "black"
CONE_TARGETED_COLOR = "white"

CONE_COLORS = {
    ConeStatus.URGENT: "black",
    ConeStatus.CANT_FILL: "red",
}
CONE_EMPTY_COLOR = "red"

HOSE_COLORS = {
    HoseMode.IDLE: "gray",
    HoseMode.NORMAL: "magenta",
    HoseMode.URGENT: "cyan",
}

# Shapes (belt units)
HOSE_RADIUS = 0.5
CONE_WIDTH = 1.5
CONE_HEIGHT = 2.0


def cone_color(status: ConeStatus) -> str:
    """Empty-part colour for a cone from its targeting status."""
    return CONE_COLORS.get(status, CONE_EMPTY_COLOR)


@dataclass
class ConeSprite:
    cone_id: int
    position: np.ndarray
    fill: float
    color: str                       # Empty part
    border_color: str                # White when targeted


@dataclass
class RenderState:
    """Everything a renderer needs for one frame."""

    time: float
    view_bounds: Tuple[float, float]          # (xmin, xmax) in belt coords
    belt_width: float
    cone_drop: Tuple[float, float, float, float]
    hose_range: Tuple[float, float, float, float]

    cones: List[ConeSprite] = field(default_factory=list)

    hose_position: Optional[np.ndarray] = None
    hose_color: str = HOSE_COLORS[HoseMode.IDLE]

    # HUD
    hud_text: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_simulator(cls, sim) -> 'RenderState':
        """
        Snapshot a simulator. The view spans from the drop area's -X edge
        to just short of where cones die, and the belt is drawn +X to the
        left so cones travel right to left on screen.
        """
        p = sim.params
        hose = sim.hose
        xmin = p.cone_drop.left
        xmax = sim.death_position - DEATH_MARGIN

        cones = [
            ConeSprite(
                cone_id=cone.cone_id,
                position=cone.position.copy(),
                fill=cone.fill,
                color=cone_color(sim.cone_status(cone.cone_id)),
                border_color=(CONE_TARGETED_COLOR if cone.cone_id == hose.target_id
                              else CONE_BORDER_COLOR)
            )
            for cone in sim.cones
        ]

        return cls(
            time=sim.time,
            view_bounds=(xmin, xmax),
            belt_width=p.belt_width,
            cone_drop=(p.cone_drop.left, p.cone_drop.top, p.cone_drop.width, p.cone_drop.height),
            hose_range=(p.hose_range.left, p.hose_range.top, p.hose_range.width, p.hose_range.height),
            cones=cones,
            hose_position=hose.position.copy(),
            hose_color=HOSE_COLORS[hose.mode],
            hud_text={
                'time': f"{sim.time:.1f}s",
                'cones': str(len(cones)),
                'hose': hose.state.value,
                'filled': str(sim.stats.cones_filled)
            }
        )


class RendererInterface(ABC):
    """Abstract base for all cone fill renderers."""

    @abstractmethod
    def initialize(self):
        """Initialize the rendering engine."""
        pass

    @abstractmethod
    def set_simulation(self, sim):
        """Connect to a simulator."""
        pass

    @abstractmethod
    def update_state(self, state: RenderState):
        """Push new state to renderer."""
        pass

    @abstractmethod
    def render_frame(self, dt: float):
        """Render one frame."""
        pass

    @abstractmethod
    def is_running(self) -> bool:
        """Check if renderer is still active."""
        pass

    @abstractmethod
    def shutdown(self):
        """Clean up resources."""
        pass


class HeadlessRenderer(RendererInterface):
    """No-op renderer for batch runs and tests."""

    def __init__(self):
        self._running = False
        self._frame_count = 0
        self.sim = None
        self.last_state: Optional[RenderState] = None

    @property
    def frame_count(self) -> int:
        return self._frame_count

    def initialize(self):
        self._running = True

    def set_simulation(self, sim):
        self.sim = sim

    def update_state(self, state: RenderState):
        self.last_state = state

    def render_frame(self, dt: float):
        self._frame_count += 1

    def is_running(self) -> bool:
        return self._running

    def shutdown(self):
        self._running = False


# Registry of available engines
RENDERERS = {
    'headless': HeadlessRenderer,
    'none': HeadlessRenderer,  # Alias
}


def create_renderer(engine: str = 'headless') -> RendererInterface:
    """
    Create a renderer instance.

    Args:
        engine: One of the RENDERERS keys

    Returns:
        Initialized renderer
    """
    engine = engine.lower()

    if engine not in RENDERERS:
        available = ', '.join(RENDERERS.keys())
        raise ValueError(f"Unknown engine '{engine}'. Available: {available}")

    renderer = RENDERERS[engine]()
    renderer.initialize()

    return renderer
