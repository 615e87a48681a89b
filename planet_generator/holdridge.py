# planet_generator/holdridge.py

"""
================================================================================
HOLDRIDGE LIFE ZONE CLASSIFICATION
================================================================================
This module classifies a climate with the Holdridge life zone system. A
climate is a (biotemperature, precipitation, altitude) triple in physical
units; the classification is a set of belts and provinces picked from fixed
threshold tables, plus a life zone picked from a fixed chart of 30 hexagons
in (biotemperature, precipitation) space.

Data Contract:
---------------
- Inputs:
    - biotemp: Biotemperature in degrees Celsius [0, 48].
    - precip: Annual precipitation in millimeters [62.5, 22629.12].
    - altitude: Altitude in meters [0, 4000].
- Outputs:
    - A frozen HoldridgeData record.
- Side Effects: None. Every function here is pure, and CHART is never
  modified after import, so classification is safe to run in parallel.
================================================================================
"""

import math
from dataclasses import dataclass
from enum import Enum

from . import config as DEFAULTS


class LatitudeBelt(Enum):
    """The temperature behavior a climate would have at sea level."""
    POLAR = 0
    SUBPOLAR = 1
    BOREAL = 2
    COOL_TEMPERATE = 3
    WARM_TEMPERATE = 4
    TROPICAL = 5


class AltitudeBelt(Enum):
    """The temperature behavior a climate has at its actual altitude."""
    NIVAL = 0
    ALPINE = 1
    SUBALPINE = 2
    MONTANE = 3
    LOWER_MONTANE = 4
    BASAL = 5


class HumidityProvince(Enum):
    SATURATED = 0
    SUBSATURATED = 1
    SEMISATURATED = 2
    SUPERHUMID = 3
    PERHUMID = 4
    HUMID = 5
    SUBHUMID = 6
    SEMIARID = 7
    ARID = 8
    PERARID = 9
    SUPERARID = 10
    SEMIPARCHED = 11


class LifezoneType(Enum):
    DESERT = 0
    DRY_TUNDRA = 1
    MOIST_TUNDRA = 2
    WET_TUNDRA = 3
    RAIN_TUNDRA = 4
    DRY_SCRUB = 5
    MOIST_FOREST = 6
    WET_FOREST = 7
    RAIN_FOREST = 8
    DESERT_SCRUB = 9
    DRY_FOREST = 10
    STEPPE = 11
    WOODLAND = 12
    VERY_DRY_FOREST = 13


# Upper bounds (inclusive) of each class. Anything above the last bound falls
# into the final class of the enum.
LATITUDE_BELT_BOUNDS = (
    (1.68, LatitudeBelt.POLAR),
    (3.36, LatitudeBelt.SUBPOLAR),
    (6.72, LatitudeBelt.BOREAL),
    (13.44, LatitudeBelt.COOL_TEMPERATE),
    (26.89, LatitudeBelt.WARM_TEMPERATE),
)
ALTITUDE_BELT_BOUNDS = (
    (1.5, AltitudeBelt.NIVAL),
    (3.0, AltitudeBelt.ALPINE),
    (6.0, AltitudeBelt.SUBALPINE),
    (12.0, AltitudeBelt.MONTANE),
    (24.0, AltitudeBelt.LOWER_MONTANE),
)
HUMIDITY_PROVINCE_BOUNDS = (
    (0.03125, HumidityProvince.SATURATED),
    (0.0625, HumidityProvince.SUBSATURATED),
    (0.125, HumidityProvince.SEMISATURATED),
    (0.25, HumidityProvince.SUPERHUMID),
    (0.5, HumidityProvince.PERHUMID),
    (1.0, HumidityProvince.HUMID),
    (2.0, HumidityProvince.SUBHUMID),
    (4.0, HumidityProvince.SEMIARID),
    (8.0, HumidityProvince.ARID),
    (16.0, HumidityProvince.PERARID),
    (32.0, HumidityProvince.SUPERARID),
)


def _bucket(value, bounds, above):
    for upper, label in bounds:
        if value <= upper:
            return label
    return above


def sea_level_biotemperature(biotemp: float, altitude: float) -> float:
    """
    The biotemperature the climate would have at sea level: 6 degrees warmer
    per 1000 m of altitude, clamped to the chart's [0, 48] range.
    """
    result = biotemp + DEFAULTS.SEA_LEVEL_LAPSE_RATE_C_PER_KM * altitude / 1000.0
    return min(max(result, DEFAULTS.MIN_BIOTEMPERATURE_C), DEFAULTS.MAX_BIOTEMPERATURE_C)


def potential_evapotranspiration(biotemp: float, precip: float) -> float:
    """The PET ratio, 58.93 * biotemp / precip. Zero precipitation gives 0."""
    if precip == 0.0:
        return 0.0
    return DEFAULTS.PET_COEFFICIENT * biotemp / precip


def latitude_belt(sea_level_biotemp: float) -> LatitudeBelt:
    return _bucket(sea_level_biotemp, LATITUDE_BELT_BOUNDS, LatitudeBelt.TROPICAL)


def altitude_belt(biotemp: float) -> AltitudeBelt:
    return _bucket(biotemp, ALTITUDE_BELT_BOUNDS, AltitudeBelt.BASAL)


def humidity_province(pet: float) -> HumidityProvince:
    return _bucket(pet, HUMIDITY_PROVINCE_BOUNDS, HumidityProvince.SEMIPARCHED)


# --- The Life Zone Chart ---

# (low, middle, high) biotemperature of each row of hexagons. The middle is
# the geometric mean of the two bounds.
_BIOTEMP_ROWS = (
    (1.5, 2.121160699, 3.0),      # Subpolar
    (3.0, 4.242321398, 6.0),      # Boreal
    (6.0, 8.484642797, 12.0),     # Cool temperate
    (12.0, 16.96938559, 24.0),    # Warm temperate
    (24.0, 33.93857118, 48.0),    # Tropical
)
# (low, middle, high) precipitation of each column of hexagons.
_PRECIP_COLUMNS = (
    (62.5, 88.395, 125.0),
    (125.0, 176.79, 250.0),
    (250.0, 353.58, 500.0),
    (500.0, 707.16, 1000.0),
    (1000.0, 1414.32, 2000.0),
    (2000.0, 2828.64, 4000.0),
    (4000.0, 5657.28, 8000.0),
    (8000.0, 11314.56, 16000.0),
)
# Each row is one hexagon wider than the row below it.
_ROW_WIDTHS = (4, 5, 6, 7, 8)


def _hexagon(biotemps, precips):
    t_low, t_mid, t_high = biotemps
    p_low, p_mid, p_high = precips
    return (
        (t_mid, p_low), (t_high, p_mid), (t_high, p_high),
        (t_mid, p_high), (t_low, p_mid), (t_low, p_low),
    )


def _build_hexagons():
    hexagons = []
    for biotemps, width in zip(_BIOTEMP_ROWS, _ROW_WIDTHS):
        for precips in _PRECIP_COLUMNS[:width]:
            hexagons.append(_hexagon(biotemps, precips))

    # Moist tundra is charted with 176.69 mm on its right-hand vertex.
    moist_tundra = list(hexagons[1])
    moist_tundra[1] = (moist_tundra[1][0], 176.69)
    hexagons[1] = tuple(moist_tundra)
    return tuple(hexagons)


class LifezoneChart:
    """
    The 30 hexagons of the Holdridge chart, indexed row by row from the
    driest subpolar hexagon (0) to the wettest tropical one (29). A climate
    is matched to a hexagon by the distance to its centroid.
    """

    NEAREST = 'nearest'
    FARTHEST = 'farthest'

    def __init__(self, hexagons=None):
        self.hexagons = hexagons if hexagons is not None else _build_hexagons()
        self.centroids = tuple(
            (sum(t for t, _ in hexagon) / len(hexagon), sum(p for _, p in hexagon) / len(hexagon))
            for hexagon in self.hexagons
        )

    def __len__(self) -> int:
        return len(self.hexagons)

    def distances(self, biotemp: float, precip: float) -> list[float]:
        return [math.hypot(biotemp - t, precip - p) for t, p in self.centroids]

    def find(self, biotemp: float, precip: float, rule: str = NEAREST) -> int:
        """
        Returns the index of the hexagon for a climate. With the 'nearest'
        rule it is the hexagon whose centroid is closest; with 'farthest' it is
        the one whose centroid is furthest away, which is what maps from
        earlier releases were classified with. Ties go to the lowest index.
        """
        distances = self.distances(biotemp, precip)
        if rule == self.FARTHEST:
            return max(range(len(distances)), key=distances.__getitem__)
        return min(range(len(distances)), key=distances.__getitem__)


CHART = LifezoneChart()

# Hexagon index -> named life zone.
LIFEZONE_TYPES = (
    # Subpolar
    LifezoneType.DRY_TUNDRA, LifezoneType.MOIST_TUNDRA, LifezoneType.WET_TUNDRA, LifezoneType.RAIN_TUNDRA,
    # Boreal
    LifezoneType.DESERT, LifezoneType.DRY_SCRUB, LifezoneType.MOIST_FOREST, LifezoneType.WET_FOREST,
    LifezoneType.RAIN_FOREST,
    # Cool temperate
    LifezoneType.DESERT, LifezoneType.DESERT_SCRUB, LifezoneType.STEPPE, LifezoneType.MOIST_FOREST,
    LifezoneType.WET_FOREST, LifezoneType.RAIN_FOREST,
    # Warm temperate
    LifezoneType.DESERT, LifezoneType.DESERT_SCRUB, LifezoneType.WOODLAND, LifezoneType.DRY_FOREST,
    LifezoneType.MOIST_FOREST, LifezoneType.WET_FOREST, LifezoneType.RAIN_FOREST,
    # Tropical
    LifezoneType.DESERT, LifezoneType.DESERT_SCRUB, LifezoneType.WOODLAND, LifezoneType.VERY_DRY_FOREST,
    LifezoneType.DRY_FOREST, LifezoneType.MOIST_FOREST, LifezoneType.WET_FOREST, LifezoneType.RAIN_FOREST,
)


def lifezone_type(index: int) -> LifezoneType:
    """The named life zone of a hexagon. Unknown indices map to DESERT."""
    if 0 <= index < len(LIFEZONE_TYPES):
        return LIFEZONE_TYPES[index]
    return LifezoneType.DESERT


@dataclass(frozen=True)
class HoldridgeData:
    """The full classification of one climate."""
    biotemperature: float
    precipitation: float
    altitude: float
    sea_level_biotemperature: float
    potential_evapotranspiration: float
    latitude_belt: LatitudeBelt
    altitude_belt: AltitudeBelt
    humidity_province: HumidityProvince
    lifezone: int

    @property
    def lifezone_type(self) -> LifezoneType:
        return lifezone_type(self.lifezone)


def compute_data(biotemp: float, precip: float, altitude: float, rule: str = DEFAULTS.LIFEZONE_RULE,
                 chart: LifezoneChart = CHART) -> HoldridgeData:
    """
    Classifies a climate. The inputs are clamped into the chart's physical
    ranges first. The altitude belt and the life zone use the biotemperature
    as given; the latitude belt uses the sea-level biotemperature.
    """
    biotemp = min(max(biotemp, DEFAULTS.MIN_BIOTEMPERATURE_C), DEFAULTS.MAX_BIOTEMPERATURE_C)
    precip = min(max(precip, DEFAULTS.MIN_PRECIPITATION_MM), DEFAULTS.MAX_PRECIPITATION_MM)
    altitude = min(max(altitude, DEFAULTS.MIN_ALTITUDE_M), DEFAULTS.MAX_ALTITUDE_M)

    sea_level_bio = sea_level_biotemperature(biotemp, altitude)
    pet = potential_evapotranspiration(biotemp, precip)

    return HoldridgeData(
        biotemperature=biotemp,
        precipitation=precip,
        altitude=altitude,
        sea_level_biotemperature=sea_level_bio,
        potential_evapotranspiration=pet,
        latitude_belt=latitude_belt(sea_level_bio),
        altitude_belt=altitude_belt(biotemp),
        humidity_province=humidity_province(pet),
        lifezone=chart.find(biotemp, precip, rule),
    )
