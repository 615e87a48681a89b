# tests/test_generator.py

import numpy as np
import pytest

from planet_generator import config as DEFAULTS
from planet_generator.generator import Planet, PlanetGenerator

SMALL_PLANET = {
    'seed': 7,
    'width': 32,
    'height': 16,
    'num_tectonic_plates': 6,
    'num_rivers': 5,
    'water_bucket_size': 8,
}


@pytest.fixture(scope="module")
def planet():
    return PlanetGenerator(SMALL_PLANET).generate()


def test_settings_fall_back_to_defaults():
    generator = PlanetGenerator({'width': -5, 'height': 0, 'water_bucket_size': 0, 'unknown': 1})
    assert generator.width == DEFAULTS.DEFAULT_WIDTH
    assert generator.height == DEFAULTS.DEFAULT_HEIGHT
    assert generator.settings['water_bucket_size'] == DEFAULTS.WATER_BUCKET_SIZE
    assert generator.settings['num_rivers'] == DEFAULTS.DEFAULT_NUM_RIVERS
    assert 'unknown' not in generator.settings


def test_numpy_integer_dimensions_are_accepted():
    generator = PlanetGenerator({'width': np.int64(64), 'height': np.int32(32)})
    assert generator.width == 64
    assert generator.height == 32
    assert type(generator.width) is int
    assert type(generator.height) is int


def test_non_integer_dimensions_fall_back_to_defaults():
    generator = PlanetGenerator({'width': True, 'height': 12.5})
    assert generator.width == DEFAULTS.DEFAULT_WIDTH
    assert generator.height == DEFAULTS.DEFAULT_HEIGHT


def test_every_layer_is_generated(planet):
    assert isinstance(planet, Planet)
    assert (planet.width, planet.height) == (32, 16)
    assert planet.lithosphere.height_map.size == 32 * 16
    assert planet.hydrosphere.num_rivers == 5
    assert planet.atmosphere.temperature.size == 32 * 16
    assert planet.biosphere.lifezone_indices().shape == (16, 32)


def test_land_fraction_matches_the_configuration(planet):
    # 384 ocean, 102 land and 26 mountain cells.
    assert planet.lithosphere.land_fraction(DEFAULTS.SEA_LEVEL) == pytest.approx(128 / 512)


def test_fields_are_finite_and_normalized(planet):
    for field in (
        planet.lithosphere.height_map,
        planet.hydrosphere.precipitation,
        planet.hydrosphere.water_proximity,
        planet.atmosphere.temperature,
    ):
        assert np.all(np.isfinite(field.data))
        assert field.min_value() >= 0.0
        assert field.max_value() <= 1.0


def test_only_land_is_classified(planet):
    land = planet.hydrosphere.height_map.as_array() > DEFAULTS.SEA_LEVEL
    indices = planet.biosphere.lifezone_indices()
    assert np.all(indices[land] >= 0)
    assert np.all(indices[~land] == -1)


def test_generation_is_deterministic(planet):
    again = PlanetGenerator(SMALL_PLANET).generate()
    np.testing.assert_array_equal(planet.lithosphere.height_map.data, again.lithosphere.height_map.data)
    np.testing.assert_array_equal(planet.hydrosphere.height_map.data, again.hydrosphere.height_map.data)
    np.testing.assert_array_equal(planet.hydrosphere.precipitation.data, again.hydrosphere.precipitation.data)
    np.testing.assert_array_equal(planet.atmosphere.temperature.data, again.atmosphere.temperature.data)
    np.testing.assert_array_equal(planet.biosphere.lifezone_indices(), again.biosphere.lifezone_indices())
    assert [river.path for river in planet.hydrosphere.rivers] == [river.path for river in again.hydrosphere.rivers]


def test_different_seeds_give_different_planets(planet):
    other = PlanetGenerator({**SMALL_PLANET, 'seed': 8}).generate_lithosphere()
    assert not np.array_equal(planet.lithosphere.height_map.data, other.height_map.data)


def test_missing_layers_propagate_as_none():
    generator = PlanetGenerator(SMALL_PLANET)
    assert generator.generate_hydrosphere(None) is None
    assert generator.generate_atmosphere(None) is None
    assert generator.generate_biosphere(None, None) is None
