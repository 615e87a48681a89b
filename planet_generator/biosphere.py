# planet_generator/biosphere.py

"""
================================================================================
BIOSPHERE
================================================================================
This module classifies every land cell of a planet into a Holdridge life zone.

Data Contract:
---------------
- Inputs:
    - height_map, temperature, precipitation: ScalarFields in [0, 1] of
      identical dimensions.
    - BiosphereParams: The physical ranges the normalized values map onto.
- Outputs:
    - A Biosphere holding one HoldridgeData per land cell and None for every
      ocean cell (height at or below sea level).
- Side Effects: None.
================================================================================
"""

import logging
import time
from dataclasses import dataclass

import numpy as np

from . import config as DEFAULTS
from .holdridge import CHART, HoldridgeData, LifezoneChart, LifezoneType, compute_data
from .scalar_field import ScalarField


def convert_value(value: float, min_value: float, max_value: float) -> float:
    """Maps a normalized value linearly onto [min_value, max_value]."""
    if max_value == min_value:
        return min_value
    return (max_value - min_value) * value + min_value


@dataclass
class BiosphereParams:
    """The physical ranges of the three climate inputs."""
    min_altitude: float = DEFAULTS.MIN_ALTITUDE_M
    max_altitude: float = DEFAULTS.MAX_ALTITUDE_M
    min_temperature: float = DEFAULTS.MIN_BIOTEMPERATURE_C
    max_temperature: float = DEFAULTS.MAX_BIOTEMPERATURE_C
    min_precipitation: float = DEFAULTS.MIN_PRECIPITATION_MM
    max_precipitation: float = DEFAULTS.MAX_PRECIPITATION_MM

    def altitude(self, value: float) -> float:
        return convert_value(value, self.min_altitude, self.max_altitude)

    def temperature(self, value: float) -> float:
        return convert_value(value, self.min_temperature, self.max_temperature)

    def precipitation(self, value: float) -> float:
        return convert_value(value, self.min_precipitation, self.max_precipitation)


class Biosphere:
    """A width x height grid of HoldridgeData records (None over the ocean)."""

    def __init__(self, width: int, height: int, records: list = None):
        self.width = width
        self.height = height
        self.records = records if records is not None else [None] * (width * height)

    def get(self, x: int, y: int) -> HoldridgeData | None:
        """The record at (x, y). Out-of-range coordinates give None."""
        if x < 0 or y < 0 or x >= self.width or y >= self.height:
            return None
        return self.records[y * self.width + x]

    def set(self, x: int, y: int, record: HoldridgeData | None):
        self.records[y * self.width + x] = record

    def num_classified(self) -> int:
        return sum(1 for record in self.records if record is not None)

    def lifezone_indices(self) -> np.ndarray:
        """A (height, width) int array of hexagon indices, -1 over the ocean."""
        indices = np.array(
            [record.lifezone if record is not None else -1 for record in self.records], dtype=np.int64
        )
        return indices.reshape(self.height, self.width)

    def lifezone_types(self) -> list[LifezoneType | None]:
        """The named life zone of every cell in row-major order, None over the ocean."""
        return [record.lifezone_type if record is not None else None for record in self.records]


class BiosphereGenerator:
    def __init__(self, params: BiosphereParams = None, sea_level: float = DEFAULTS.SEA_LEVEL,
                 rule: str = DEFAULTS.LIFEZONE_RULE, chart: LifezoneChart = CHART,
                 logger: logging.Logger = None):
        self.logger = logger or logging.getLogger(__name__)
        self.params = params or BiosphereParams()
        self.sea_level = sea_level
        if rule not in (LifezoneChart.NEAREST, LifezoneChart.FARTHEST):
            self.logger.warning(f"Unknown lifezone rule '{rule}'; using '{LifezoneChart.NEAREST}'.")
            rule = LifezoneChart.NEAREST
        self.rule = rule
        self.chart = chart

        self.height_map: ScalarField = None
        self.temperature: ScalarField = None
        self.precipitation: ScalarField = None

    def generate(self) -> Biosphere | None:
        """
        Classifies every land cell. Returns None if an input field is missing
        or the fields differ in size.
        """
        if self.height_map is None or self.temperature is None or self.precipitation is None:
            self.logger.warning("Biosphere generation skipped: a climate input field is not set.")
            return None
        if not (self.height_map.same_shape(self.temperature) and self.height_map.same_shape(self.precipitation)):
            self.logger.warning("Biosphere generation skipped: the climate input fields differ in size.")
            return None

        start_time = time.time()
        biosphere = Biosphere(self.height_map.width, self.height_map.height)
        heights = self.height_map.data
        temperatures = self.temperature.data
        precipitations = self.precipitation.data

        for index in np.flatnonzero(heights > self.sea_level):
            biosphere.records[index] = compute_data(
                self.params.temperature(float(temperatures[index])),
                self.params.precipitation(float(precipitations[index])),
                self.params.altitude(float(heights[index])),
                self.rule,
                self.chart,
            )

        self.logger.info(
            f"Biosphere generated in {time.time() - start_time:.2f}s "
            f"({biosphere.num_classified()} land cells classified)."
        )
        return biosphere
