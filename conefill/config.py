"""
Simulation Configuration
========================
Parameter bundle plus YAML loading.

Distance units are arbitrary (cones are drawn 1.5 x 2, so think inches).
The hose range leading edge sits at X=12 and cones drop in X<0, so new
parameter sets should stay in that frame to keep the view sensible.
"""

import yaml
import dataclasses
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Dict, Optional, Union

from .physics import Rect


FPS = 50

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "simulation_params.yaml"


class ConfigError(ValueError):
    """Bad configuration input"""


@dataclass(frozen=True)
class Parameters:
    """
    Simulation parameters. Belt moves in the +X direction.

    Frozen: setters swap in a whole new bundle, so a tick never sees a
    half-updated set. Not validated; cone_rate, belt_speed and
    hose_fill_rate must be positive.
    """
    timestep: float = 1.0 / FPS       # s, 1/FPS makes sense
    belt_width: float = 24.0          # Width of belt
    belt_speed: float = 2.0           # units/s
    cone_rate: float = 1.7            # Average spawn rate (cones/s)
    cone_drop: Rect = Rect(-36.0, 2.0, 24.0, 20.0)    # Cone spawn area
    hose_range: Rect = Rect(12.0, 1.0, 36.0, 22.0)    # Hose head movement range
    hose_fill_rate: float = 3.0       # Full fills/s
    hose_speed: float = 20.0          # units/s
    urgent_time: float = 3.0          # Time margin for cones to be urgent (s)

    def replace(self, **changes) -> 'Parameters':
        return dataclasses.replace(self, **changes)


_RECT_FIELDS = ('cone_drop', 'hose_range')
_PARAM_FIELDS = tuple(f.name for f in fields(Parameters))
_DRIVER_FIELDS = {'fps': float, 'frame_skip': int, 'duration': float, 'seed': int}


def default_config() -> Dict:
    """Default configuration if no file provided"""
    return {
        'simulation': parameters_to_config(Parameters()),
        'driver': {
            'fps': FPS,
            'frame_skip': 1,
            'duration': 60.0,
            'seed': None
        }
    }


def _rect_from_config(name: str, value) -> Rect:
    if isinstance(value, Rect):
        return value
    if isinstance(value, dict):
        try:
            return Rect(
                left=float(value['left']),
                top=float(value['top']),
                width=float(value['width']),
                height=float(value['height'])
            )
        except KeyError as e:
            raise ConfigError(f"'{name}' is missing {e.args[0]!r}") from e
    if isinstance(value, (list, tuple)) and len(value) == 4:
        return Rect(*(float(v) for v in value))
    raise ConfigError(f"'{name}' must be a mapping with left/top/width/height")


def parameters_from_config(section: Optional[Dict],
                           base: Optional[Parameters] = None) -> Parameters:
    """
    Build Parameters from a config mapping.

    Missing keys fall back to base (defaults if not given), unknown keys
    raise ConfigError.
    """
    base = base or Parameters()
    if not section:
        return base
    if not isinstance(section, dict):
        raise ConfigError("'simulation' section must be a mapping")

    unknown = set(section) - set(_PARAM_FIELDS)
    if unknown:
        raise ConfigError(f"Unknown simulation parameters: {', '.join(sorted(map(str, unknown)))}")

    changes = {}
    for name, value in section.items():
        if name in _RECT_FIELDS:
            changes[name] = _rect_from_config(name, value)
        else:
            try:
                changes[name] = float(value)
            except (TypeError, ValueError) as e:
                raise ConfigError(f"'{name}' must be a number, got {value!r}") from e
    return base.replace(**changes)


def parameters_to_config(params: Parameters) -> Dict:
    section = {}
    for name in _PARAM_FIELDS:
        value = getattr(params, name)
        section[name] = value.to_dict() if isinstance(value, Rect) else value
    return section


def driver_from_config(section: Optional[Dict], base: Optional[Dict] = None) -> Dict:
    """
    Merge a driver section over base (defaults if not given).

    Unknown keys and values that do not convert raise ConfigError.
    """
    driver = dict(base or default_config()['driver'])
    if not section:
        return driver
    if not isinstance(section, dict):
        raise ConfigError("'driver' section must be a mapping")

    unknown = set(section) - set(_DRIVER_FIELDS)
    if unknown:
        raise ConfigError(f"Unknown driver settings: {', '.join(sorted(map(str, unknown)))}")

    for name, value in section.items():
        if name == 'seed' and value is None:
            driver[name] = None
            continue
        try:
            driver[name] = _DRIVER_FIELDS[name](value)
        except (TypeError, ValueError) as e:
            raise ConfigError(f"'{name}' must be {_DRIVER_FIELDS[name].__name__}, got {value!r}") from e
    return driver


def load_config(path: Optional[Union[str, Path]] = None) -> Dict:
    """
    Load the full configuration (simulation + driver sections).

    With no path, the bundled config/simulation_params.yaml is used when
    present, otherwise default_config().
    """
    config = default_config()
    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            return config
        path = DEFAULT_CONFIG_PATH

    with open(path, 'r') as f:
        loaded = yaml.safe_load(f) or {}

    if not isinstance(loaded, dict):
        raise ConfigError(f"{path}: top level must be a mapping")

    unknown = set(loaded) - set(config)
    if unknown:
        raise ConfigError(f"{path}: unknown sections: {', '.join(sorted(unknown))}")

    config['simulation'] = parameters_to_config(
        parameters_from_config(loaded.get('simulation'))
    )
    config['driver'] = driver_from_config(loaded.get('driver'), config['driver'])
    return config


def load_parameters(path: Optional[Union[str, Path]] = None) -> Parameters:
    return parameters_from_config(load_config(path)['simulation'])
