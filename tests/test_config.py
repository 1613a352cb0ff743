"""
Test Suite: Configuration
=========================
Tests for parameter defaults and YAML loading.
"""

import pytest
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from conefill.config import (
    Parameters, ConfigError, DEFAULT_CONFIG_PATH,
    default_config, driver_from_config, load_config, load_parameters,
    parameters_from_config, parameters_to_config
)
from conefill.physics import Rect


class TestDefaults:
    """Default parameter values"""

    def test_default_parameters(self):
        p = Parameters()
        assert p.timestep == pytest.approx(0.02)
        assert p.cone_drop == Rect(-36.0, 2.0, 24.0, 20.0)
        assert p.hose_range == Rect(12.0, 1.0, 36.0, 22.0)
        assert p.hose_range.right == pytest.approx(48.0)

    def test_parameters_are_frozen(self):
        p = Parameters()
        with pytest.raises(AttributeError):
            p.belt_speed = 3.0

    def test_bundled_file_matches_defaults(self):
        assert DEFAULT_CONFIG_PATH.exists()
        p = load_parameters(DEFAULT_CONFIG_PATH)
        d = Parameters()
        assert p.belt_speed == d.belt_speed
        assert p.cone_rate == d.cone_rate
        assert p.cone_drop == d.cone_drop
        assert p.hose_range == d.hose_range
        assert p.timestep == pytest.approx(d.timestep)

    def test_default_config_sections(self):
        config = default_config()
        assert set(config) == {'simulation', 'driver'}
        assert config['driver']['frame_skip'] == 1
        assert config['simulation']['hose_range']['width'] == 36.0


class TestParametersFromConfig:
    """Building Parameters from mappings"""

    def test_partial_section_keeps_defaults(self):
        p = parameters_from_config({'belt_speed': 3, 'hose_range': {
            'left': 10, 'top': 0, 'width': 30, 'height': 24}})
        assert p.belt_speed == 3.0
        assert p.hose_range == Rect(10.0, 0.0, 30.0, 24.0)
        assert p.cone_rate == Parameters().cone_rate

    def test_rect_as_list(self):
        p = parameters_from_config({'cone_drop': [-30, 2, 20, 20]})
        assert p.cone_drop == Rect(-30.0, 2.0, 20.0, 20.0)

    def test_empty_section(self):
        assert parameters_from_config(None) == Parameters()

    def test_unknown_parameter(self):
        with pytest.raises(ConfigError, match="hose_colour"):
            parameters_from_config({'hose_colour': 'red'})

    def test_bad_number(self):
        with pytest.raises(ConfigError, match="belt_speed"):
            parameters_from_config({'belt_speed': 'fast'})

    def test_rect_missing_edge(self):
        with pytest.raises(ConfigError, match="height"):
            parameters_from_config({'cone_drop': {'left': 0, 'top': 0, 'width': 1}})

    def test_round_trip(self):
        p = Parameters(belt_speed=2.5, cone_drop=Rect(-20.0, 1.0, 8.0, 22.0))
        assert parameters_from_config(parameters_to_config(p)) == p


class TestLoadConfig:
    """Loading YAML files"""

    def test_load_file(self, tmp_path):
        path = tmp_path / "params.yaml"
        path.write_text(
            "simulation:\n"
            "  cone_rate: 3.0\n"
            "  urgent_time: 1.5\n"
            "driver:\n"
            "  frame_skip: 4\n"
            "  seed: 9\n"
        )
        config = load_config(path)

        assert config['simulation']['cone_rate'] == 3.0
        assert config['simulation']['belt_speed'] == 2.0
        assert config['driver']['frame_skip'] == 4
        assert config['driver']['seed'] == 9
        assert config['driver']['fps'] == 50

        p = load_parameters(path)
        assert p.urgent_time == 1.5

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_parameters(path) == Parameters()

    def test_unknown_section(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("renderer:\n  engine: opengl\n")
        with pytest.raises(ConfigError, match="renderer"):
            load_config(path)

    def test_top_level_not_mapping(self, tmp_path):
        path = tmp_path / "list.yaml"
        path.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_simulation_section_not_mapping(self, tmp_path):
        path = tmp_path / "list_sim.yaml"
        path.write_text("simulation:\n  - 1\n  - 2\n")
        with pytest.raises(ConfigError, match="simulation"):
            load_config(path)

    def test_misspelled_driver_key(self, tmp_path):
        path = tmp_path / "typo.yaml"
        path.write_text("driver:\n  framskip: 4\n")
        with pytest.raises(ConfigError, match="framskip"):
            load_config(path)

    def test_driver_section_not_mapping(self, tmp_path):
        path = tmp_path / "list_driver.yaml"
        path.write_text("driver:\n  - 1\n  - 2\n")
        with pytest.raises(ConfigError, match="driver"):
            load_config(path)


class TestDriverFromConfig:
    """Driver section merging"""

    def test_values_are_coerced(self):
        driver = driver_from_config({'frame_skip': '3', 'duration': 10})
        assert driver['frame_skip'] == 3
        assert isinstance(driver['duration'], float)
        assert driver['fps'] == 50

    def test_null_seed(self):
        assert driver_from_config({'seed': None})['seed'] is None

    def test_bad_value(self):
        with pytest.raises(ConfigError, match="frame_skip"):
            driver_from_config({'frame_skip': 'fast'})

    def test_base_is_not_mutated(self):
        base = default_config()['driver']
        driver_from_config({'frame_skip': 5}, base)
        assert base['frame_skip'] == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
