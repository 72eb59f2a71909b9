"""Tests for simulation config loading."""

import json
import math

import numpy as np
import pytest

from ice_halo_simulator.core.errors import ConfigError
from ice_halo_simulator.core.models import (
    DEFAULT_WAVELENGTHS,
    SimulationConfig,
    distribution_from_dict,
)
from ice_halo_simulator.core.orientation import Distribution


def _base_config_dict() -> dict:
    return {
        "sun": {"altitude": 20.0},
        "ray_number": 1000,
        "wavelengths": [440, 550],
        "seed": 42,
        "crystals": [
            {
                "name": "plate",
                "population": 2.0,
                "axis": {"dist": "gauss", "mean": 90.0, "std": 0.5},
                "roll": {"dist": "uniform", "mean": 0.0, "std": 360.0},
            },
            {
                "name": "column",
                "axis": {"dist": "gauss", "mean": 0.0, "std": 1.0},
                "roll": {"dist": "gauss", "mean": 10.0, "std": 2.0},
            },
        ],
    }


def test_angles_are_converted_to_radians():
    config = SimulationConfig.from_dict(_base_config_dict())

    plate = config.crystals[0]
    assert plate.name == "plate"
    assert plate.population == pytest.approx(2.0)
    assert plate.axis.kind is Distribution.GAUSS
    assert plate.axis.mean == pytest.approx(math.pi / 2)
    assert plate.axis.spread == pytest.approx(math.radians(0.5))
    assert plate.roll.kind is Distribution.UNIFORM
    assert plate.roll.spread == pytest.approx(2 * math.pi)

    column = config.crystals[1]
    assert column.population == pytest.approx(1.0)
    assert column.roll.mean == pytest.approx(math.radians(10.0))


def test_top_level_fields():
    config = SimulationConfig.from_dict(_base_config_dict())
    assert config.sun_altitude_deg == pytest.approx(20.0)
    assert config.sun_azimuth_deg == pytest.approx(0.0)
    assert config.ray_number == 1000
    assert config.wavelengths == [440.0, 550.0]
    assert config.seed == 42
    assert config.total_population == pytest.approx(3.0)


def test_defaults():
    data = _base_config_dict()
    del data["wavelengths"]
    del data["seed"]
    del data["ray_number"]
    config = SimulationConfig.from_dict(data)
    assert config.wavelengths == DEFAULT_WAVELENGTHS
    assert config.wavelengths[0] == 440.0
    assert config.wavelengths[-1] == 650.0
    assert config.seed is None
    assert config.ray_number == 10000


def test_unnamed_crystals_get_index_names():
    data = _base_config_dict()
    del data["crystals"][0]["name"]
    del data["crystals"][1]["name"]
    config = SimulationConfig.from_dict(data)
    assert [c.name for c in config.crystals] == ["crystal_0", "crystal_1"]


def test_incident_direction_points_away_from_sun():
    data = _base_config_dict()
    data["sun"] = {"altitude": 0.0, "azimuth": 0.0}
    np.testing.assert_allclose(SimulationConfig.from_dict(data).incident_direction, [-1, 0, 0], atol=1e-12)

    data["sun"] = {"altitude": 90.0}
    np.testing.assert_allclose(SimulationConfig.from_dict(data).incident_direction, [0, 0, -1], atol=1e-12)

    data["sun"] = {"altitude": 30.0, "azimuth": 90.0}
    direction = SimulationConfig.from_dict(data).incident_direction
    np.testing.assert_allclose(direction, [0.0, -math.sqrt(3) / 2, -0.5], atol=1e-12)
    assert np.linalg.norm(direction) == pytest.approx(1.0)


@pytest.mark.parametrize("tag", ["poisson", "", "GAUSSIAN-ish"])
def test_unknown_distribution_rejected(tag):
    data = _base_config_dict()
    data["crystals"][0]["roll"]["dist"] = tag
    with pytest.raises(ConfigError):
        SimulationConfig.from_dict(data)


def test_missing_dist_rejected():
    with pytest.raises(ConfigError):
        distribution_from_dict({"mean": 1.0}, "axis")


def test_non_numeric_mean_rejected():
    with pytest.raises(ConfigError):
        distribution_from_dict({"dist": "gauss", "mean": "up"}, "axis")


def test_missing_crystals_rejected():
    data = _base_config_dict()
    data["crystals"] = []
    with pytest.raises(ConfigError):
        SimulationConfig.from_dict(data)


def test_crystal_without_roll_rejected():
    data = _base_config_dict()
    del data["crystals"][1]["roll"]
    with pytest.raises(ConfigError):
        SimulationConfig.from_dict(data)


def test_duplicate_crystal_names_rejected():
    data = _base_config_dict()
    data["crystals"][1]["name"] = "plate"
    with pytest.raises(ConfigError):
        SimulationConfig.from_dict(data)


@pytest.mark.parametrize("ray_number", [0, -5])
def test_non_positive_ray_number_rejected(ray_number):
    data = _base_config_dict()
    data["ray_number"] = ray_number
    with pytest.raises(ConfigError):
        SimulationConfig.from_dict(data)


def test_negative_population_rejected():
    data = _base_config_dict()
    data["crystals"][0]["population"] = -1
    with pytest.raises(ConfigError):
        SimulationConfig.from_dict(data)


@pytest.mark.parametrize("population", [float("nan"), float("inf"), "many"])
def test_non_finite_population_rejected(population):
    data = _base_config_dict()
    data["crystals"][0]["population"] = population
    with pytest.raises(ConfigError):
        SimulationConfig.from_dict(data)


@pytest.mark.parametrize("entry", ["plate", 3, None, ["axis", "roll"]])
def test_non_object_crystal_rejected(entry):
    data = _base_config_dict()
    data["crystals"][1] = entry
    with pytest.raises(ConfigError):
        SimulationConfig.from_dict(data)


def test_zero_total_population_rejected():
    data = _base_config_dict()
    for c in data["crystals"]:
        c["population"] = 0
    with pytest.raises(ConfigError):
        SimulationConfig.from_dict(data)


def test_empty_wavelengths_rejected():
    data = _base_config_dict()
    data["wavelengths"] = []
    with pytest.raises(ConfigError):
        SimulationConfig.from_dict(data)


def test_sun_altitude_out_of_range_rejected():
    data = _base_config_dict()
    data["sun"]["altitude"] = 95.0
    with pytest.raises(ConfigError):
        SimulationConfig.from_dict(data)


def test_config_error_is_value_error():
    with pytest.raises(ValueError):
        SimulationConfig.from_dict({})


def test_to_dict_round_trip():
    config = SimulationConfig.from_dict(_base_config_dict())
    again = SimulationConfig.from_dict(config.to_dict())

    assert again.wavelengths == config.wavelengths
    assert again.seed == config.seed
    for a, b in zip(again.crystals, config.crystals):
        assert a.name == b.name
        assert a.population == pytest.approx(b.population)
        assert a.axis.kind is b.axis.kind
        assert a.axis.mean == pytest.approx(b.axis.mean)
        assert a.roll.spread == pytest.approx(b.roll.spread)
    assert config.to_dict()["crystals"][0]["axis"]["mean"] == pytest.approx(90.0)
    assert config.to_dict()["crystals"][0]["roll"]["dist"] == "uniform"


def test_from_json_file(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps(_base_config_dict()))
    config = SimulationConfig.from_json_file(path)
    assert [c.name for c in config.crystals] == ["plate", "column"]
