# tests/test_biosphere.py

import numpy as np
import pytest

from planet_generator import config as DEFAULTS
from planet_generator.biosphere import Biosphere, BiosphereGenerator, BiosphereParams, convert_value
from planet_generator.holdridge import LifezoneChart, LifezoneType, compute_data
from planet_generator.scalar_field import ScalarField


def test_convert_value():
    assert convert_value(0.5, 0.0, 4000.0) == 2000.0
    assert convert_value(0.0, 62.5, 22629.12) == 62.5
    assert convert_value(0.7, 10.0, 10.0) == 10.0


def test_default_params_cover_the_chart():
    params = BiosphereParams()
    assert params.altitude(1.0) == DEFAULTS.MAX_ALTITUDE_M
    assert params.temperature(0.5) == 24.0
    assert params.precipitation(1.0) == pytest.approx(DEFAULTS.MAX_PRECIPITATION_MM)


@pytest.fixture
def climate(make_field):
    return (
        make_field([[0.1, 0.5, 1.0]]),  # height
        make_field([[0.0, 0.5, 1.0]]),  # temperature
        make_field([[0.0, 0.5, 1.0]]),  # precipitation
    )


def test_ocean_cells_hold_no_record(climate):
    generator = BiosphereGenerator()
    generator.height_map, generator.temperature, generator.precipitation = climate
    biosphere = generator.generate()

    assert biosphere.get(0, 0) is None
    assert biosphere.get(1, 0) is not None
    assert biosphere.num_classified() == 2


def test_land_cells_are_classified_in_physical_units(climate):
    generator = BiosphereGenerator()
    generator.height_map, generator.temperature, generator.precipitation = climate
    record = generator.generate().get(1, 0)

    params = BiosphereParams()
    expected = compute_data(24.0, params.precipitation(0.5), 2000.0)
    assert record == expected
    assert record.altitude == 2000.0
    assert record.sea_level_biotemperature == 36.0


def test_get_is_tolerant_of_bad_coordinates():
    biosphere = Biosphere(2, 2)
    assert biosphere.get(-1, 0) is None
    assert biosphere.get(0, 2) is None
    assert biosphere.get(5, 5) is None


def test_lifezone_outputs(climate):
    generator = BiosphereGenerator()
    generator.height_map, generator.temperature, generator.precipitation = climate
    biosphere = generator.generate()

    indices = biosphere.lifezone_indices()
    assert indices.shape == (1, 3)
    assert indices[0, 0] == -1
    assert np.all(indices[0, 1:] >= 0)

    types = biosphere.lifezone_types()
    assert types[0] is None
    assert all(isinstance(kind, LifezoneType) for kind in types[1:])


def test_generator_requires_matching_inputs(climate):
    generator = BiosphereGenerator()
    assert generator.generate() is None

    height, temperature, _ = climate
    generator.height_map = height
    generator.temperature = temperature
    generator.precipitation = ScalarField(4, 1)
    assert generator.generate() is None


def test_unknown_rule_falls_back_to_nearest():
    assert BiosphereGenerator(rule='sideways').rule == LifezoneChart.NEAREST
    assert BiosphereGenerator(rule=LifezoneChart.FARTHEST).rule == LifezoneChart.FARTHEST
