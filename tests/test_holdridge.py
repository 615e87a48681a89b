# tests/test_holdridge.py

import pytest

from planet_generator import holdridge
from planet_generator.holdridge import (
    CHART, LIFEZONE_TYPES, AltitudeBelt, HumidityProvince, LatitudeBelt, LifezoneChart, LifezoneType,
    altitude_belt, compute_data, humidity_province, latitude_belt, lifezone_type,
    potential_evapotranspiration, sea_level_biotemperature,
)


def test_worked_example_with_nearest_centroid():
    data = compute_data(24.0, 1000.0, 0.0)
    assert data.sea_level_biotemperature == 24.0
    assert data.latitude_belt == LatitudeBelt.WARM_TEMPERATE
    assert data.altitude_belt == AltitudeBelt.LOWER_MONTANE
    assert data.potential_evapotranspiration == pytest.approx(1.41432)
    assert data.humidity_province == HumidityProvince.SUBHUMID
    assert data.lifezone == 18
    assert data.lifezone_type == LifezoneType.DRY_FOREST


def test_worked_example_with_legacy_farthest_centroid():
    data = compute_data(24.0, 1000.0, 0.0, rule=LifezoneChart.FARTHEST)
    assert data.lifezone == 29
    assert data.lifezone_type == LifezoneType.RAIN_FOREST


def test_sea_level_biotemperature_is_clamped():
    assert sea_level_biotemperature(10.0, 1000.0) == 16.0
    assert sea_level_biotemperature(47.0, 1000.0) == 48.0
    assert sea_level_biotemperature(-5.0, 0.0) == 0.0


def test_pet_with_zero_precipitation_is_zero():
    assert potential_evapotranspiration(20.0, 0.0) == 0.0
    assert potential_evapotranspiration(10.0, 58.93) == pytest.approx(10.0)


@pytest.mark.parametrize("value, expected", [
    (0.0, LatitudeBelt.POLAR),
    (1.68, LatitudeBelt.POLAR),
    (1.69, LatitudeBelt.SUBPOLAR),
    (6.72, LatitudeBelt.BOREAL),
    (13.44, LatitudeBelt.COOL_TEMPERATE),
    (26.89, LatitudeBelt.WARM_TEMPERATE),
    (26.9, LatitudeBelt.TROPICAL),
])
def test_latitude_belt_bounds(value, expected):
    assert latitude_belt(value) == expected


@pytest.mark.parametrize("value, expected", [
    (1.5, AltitudeBelt.NIVAL),
    (3.0, AltitudeBelt.ALPINE),
    (5.0, AltitudeBelt.SUBALPINE),
    (12.0, AltitudeBelt.MONTANE),
    (24.0, AltitudeBelt.LOWER_MONTANE),
    (30.0, AltitudeBelt.BASAL),
])
def test_altitude_belt_bounds(value, expected):
    assert altitude_belt(value) == expected


@pytest.mark.parametrize("value, expected", [
    (0.0, HumidityProvince.SATURATED),
    (0.03125, HumidityProvince.SATURATED),
    (0.05, HumidityProvince.SUBSATURATED),
    (0.3, HumidityProvince.PERHUMID),
    (3.0, HumidityProvince.SEMIARID),
    (32.0, HumidityProvince.SUPERARID),
    (33.0, HumidityProvince.SEMIPARCHED),
])
def test_humidity_province_bounds(value, expected):
    assert humidity_province(value) == expected


def test_chart_has_thirty_hexagons():
    assert len(CHART) == 30
    assert all(len(hexagon) == 6 for hexagon in CHART.hexagons)
    assert len(LIFEZONE_TYPES) == 30


def test_every_centroid_classifies_as_its_own_hexagon():
    for index, (biotemp, precip) in enumerate(CHART.centroids):
        assert CHART.find(biotemp, precip) == index


def test_centroid_of_a_hexagon():
    biotemp, precip = CHART.centroids[18]
    assert biotemp == pytest.approx((12.0 + 16.96938559 + 24.0) / 3.0)
    assert precip == pytest.approx((500.0 + 707.16 + 1000.0) / 3.0)


def test_lifezone_type_table():
    assert lifezone_type(0) == LifezoneType.DRY_TUNDRA
    assert lifezone_type(4) == LifezoneType.DESERT
    assert lifezone_type(11) == LifezoneType.STEPPE
    assert lifezone_type(25) == LifezoneType.VERY_DRY_FOREST
    assert lifezone_type(29) == LifezoneType.RAIN_FOREST
    assert lifezone_type(30) == LifezoneType.DESERT
    assert lifezone_type(-1) == LifezoneType.DESERT


def test_inputs_are_clamped_to_the_chart():
    data = compute_data(100.0, 0.0, -50.0)
    assert data.biotemperature == 48.0
    assert data.precipitation == 62.5
    assert data.altitude == 0.0


def test_records_are_immutable():
    data = compute_data(10.0, 500.0, 100.0)
    with pytest.raises(AttributeError):
        data.lifezone = 3


def test_unknown_rule_uses_nearest():
    assert holdridge.CHART.find(24.0, 1000.0, rule='closest') == 18
