"""
Cone Fill Simulation - Main Driver
==================================
Entry point for running the cone fill simulation without a window.

The driver plays the role of a window timer: every frame it advances the
simulator frame_skip times, then redraws. frame_skip > 1 fast forwards.

Usage:
    python -m conefill.main                       # Default belt
    python -m conefill.main --frame-skip 4 --duration 120
    python -m conefill.main demo rush             # Urgent triage demo
"""

import argparse
import logging
import time
from typing import Callable, Dict, Optional

from .config import Parameters, load_config, parameters_from_config
from .entities import HoseState
from .simulator import Simulator
from .visualization import RenderState, RendererInterface, create_renderer


logger = logging.getLogger(__name__)


class ConeFillRunner:
    """
    Fixed cadence driver for a Simulator.

    Orchestrates:
    - frame_skip simulator updates per frame
    - Renderer refresh after each frame
    - Status lines every simulated second
    """

    def __init__(self,
                 sim: Simulator,
                 renderer: Optional[RendererInterface] = None,
                 frame_skip: int = 1,
                 verbose: bool = True,
                 fps: Optional[float] = None):
        self.sim = sim
        self.renderer = renderer or create_renderer('headless')
        self.renderer.set_simulation(sim)
        self.frame_skip = max(1, int(frame_skip))
        self.verbose = verbose
        # None runs as fast as possible, otherwise frames are paced to fps
        self.fps = fps
        self.frames = 0
        self.running = False

    def frame(self):
        """One timer tick: frame_skip updates, then redraw."""
        for _ in range(self.frame_skip):
            self.sim.update()
        self.renderer.update_state(RenderState.from_simulator(self.sim))
        self.renderer.render_frame(self.sim.params.timestep * self.frame_skip)
        self.frames += 1

    def run(self, duration: float, callback: Optional[Callable[[Simulator], None]] = None) -> Dict:
        """
        Run until the simulator clock reaches duration.

        Args:
            duration: Simulated seconds
            callback: Optional function called after every frame

        Returns:
            Summary of the run
        """
        if not self.renderer.is_running():
            self.renderer.initialize()
        self.running = True
        start_time = time.time()

        if self.verbose:
            print(f"Starting Cone Fill Simulation - Duration: {duration}s")
            print("=" * 50)

        last_second = int(self.sim.time)
        frame_period = 1.0 / self.fps if self.fps else 0.0
        next_frame = time.time()
        try:
            while self.sim.time < duration and self.running and self.renderer.is_running():
                self.frame()

                if callback:
                    callback(self.sim)

                if frame_period:
                    next_frame += frame_period
                    delay = next_frame - time.time()
                    if delay > 0:
                        time.sleep(delay)

                # Progress update every simulated second
                if self.verbose and int(self.sim.time) != last_second:
                    last_second = int(self.sim.time)
                    self._print_status()
        finally:
            self.running = False
            self.renderer.shutdown()

        real_time = time.time() - start_time
        summary = self.summary()

        if self.verbose:
            print("=" * 50)
            print(f"Simulation complete. Sim time: {self.sim.time:.2f}s, Real time: {real_time:.2f}s")
            if real_time > 0:
                print(f"Speed ratio: {self.sim.time/real_time:.1f}x realtime")
            print(f"Cones: {summary['spawned']} spawned, {summary['filled']} filled, "
                  f"{summary['retired']} retired ({summary['fill_ratio']*100:.0f}% left full)")

        return summary

    def stop(self):
        self.running = False

    def summary(self) -> Dict:
        stats = self.sim.stats
        return {
            'time': self.sim.time,
            'frames': self.frames,
            'spawned': stats.cones_spawned,
            'filled': stats.cones_filled,
            'retired': stats.cones_retired,
            'retired_partial': stats.cones_retired_partial,
            'retired_empty': stats.cones_retired_empty,
            'abandoned': stats.targets_abandoned,
            'urgent_scans': stats.urgent_scans,
            'fill_ratio': stats.fill_ratio
        }

    def _print_status(self):
        """Print compact status line"""
        hose = self.sim.hose
        target = self.sim.target
        fill = f"{target.fill:4.2f}" if target else "  - "
        print(f"T={self.sim.time:6.1f}s | "
              f"Cones: {len(self.sim.cones):3d} | "
              f"Hose: {hose.state.value:11s} | "
              f"Target fill: {fill} | "
              f"Filled: {self.sim.stats.cones_filled:4d} | "
              f"Mode: {hose.mode.value}")


# --- demos ---

DEMOS = {
    # Stock belt from the config file
    'default': {},
    # One cone every few seconds, easy to follow the state machine
    'single': {'cone_rate': 0.25},
    # More cones than the hose can handle, triage kicks in
    'rush': {'cone_rate': 4.0, 'urgent_time': 2.0},
}


def demo_single_cone(seed: Optional[int] = 1):
    """
    Demonstration: one cone through the full Idle -> Approaching ->
    Filling -> Idle cycle.
    """
    print("\n" + "=" * 60)
    print("DEMO: SINGLE CONE FILL")
    print("=" * 60 + "\n")

    sim = Simulator(Parameters(cone_rate=0.25), seed=seed)
    states = []

    for _ in range(2000):
        sim.update()
        if not states or states[-1] != sim.hose.state:
            states.append(sim.hose.state)
            print(f"T={sim.time:5.2f}s  hose -> {sim.hose.state.value}")
        if sim.stats.cones_filled and sim.hose.state == HoseState.IDLE:
            break

    print(f"\nCones filled: {sim.stats.cones_filled}")


def build_simulator(config: Dict, overrides: Optional[Dict] = None, seed: Optional[int] = None) -> Simulator:
    params = parameters_from_config(config['simulation'])
    if overrides:
        params = params.replace(**overrides)
    return Simulator(params, seed=seed)


def main(argv=None):
    parser = argparse.ArgumentParser(description="Cone Fill Simulation")
    parser.add_argument("command", nargs="?", default="run", choices=["run", "demo"],
                        help="Run the configured belt, or a named demo")
    parser.add_argument("demo", nargs="?", default="default", choices=sorted(DEMOS),
                        help="Demo to run with 'demo'")
    parser.add_argument("--config", type=str, default=None, help="YAML parameter file")
    parser.add_argument("--duration", type=float, default=None, help="Simulated seconds")
    parser.add_argument("--frame-skip", type=int, default=None, help="Updates per frame")
    parser.add_argument("--seed", type=int, default=None, help="Random seed for cone drops")
    parser.add_argument("--quiet", action="store_true", help="Only print the summary")
    parser.add_argument("--realtime", action="store_true",
                        help="Pace frames to the configured fps instead of running flat out")
    parser.add_argument("--log-level", type=str, default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    config = load_config(args.config)
    driver = config['driver']

    seed = args.seed if args.seed is not None else driver.get('seed')
    duration = args.duration if args.duration is not None else float(driver['duration'])
    frame_skip = args.frame_skip if args.frame_skip is not None else int(driver['frame_skip'])

    if args.command == "demo" and args.demo == "single" and not args.quiet:
        demo_single_cone(seed if seed is not None else 1)
        return None

    overrides = DEMOS[args.demo] if args.command == "demo" else None
    sim = build_simulator(config, overrides, seed=seed)
    logger.info("Parameters: %s", sim.params)

    fps = float(driver['fps']) if args.realtime else None
    runner = ConeFillRunner(sim, frame_skip=frame_skip, verbose=not args.quiet, fps=fps)
    summary = runner.run(duration)

    if args.quiet:
        print(f"{summary['spawned']} spawned, {summary['filled']} filled, "
              f"{summary['fill_ratio']*100:.0f}% left full")
    return summary


if __name__ == "__main__":
    main()
