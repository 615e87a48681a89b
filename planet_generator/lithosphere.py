# planet_generator/lithosphere.py

"""
================================================================================
LITHOSPHERE
================================================================================
This module turns the three raw crust layers into a height map.

The tectonics map stands for plate activity, the thickness map for crust
thickness, and the orogenic map for general geologic detail. At every cell the
three values are treated as the components of a vector; the height is that
vector's magnitude. The heights are then redistributed by rank so the map has
exactly the requested fractions of ocean, land and mountain.

Data Contract:
---------------
- Inputs:
    - Three ScalarFields of identical dimensions (tectonics, thickness,
      orogenic) and the target land and mountain fractions.
    - min_land, min_mountain: The lowest height of the land and mountain bands.
- Outputs:
    - A height ScalarField in [0, 1].
- Side Effects: None. The input fields are not modified.
- Invariants: The number of cells in each band is fixed by rank, not by value,
  so the fractions hold for any distribution of input values.
================================================================================
"""

import logging
import math
import time
from dataclasses import dataclass

import numpy as np

from . import config as DEFAULTS
from .noise import FieldGenerator
from .scalar_field import ScalarField


def _valid_fraction(value: float, fallback: float) -> float:
    if value is None or value < 0.0 or value > 1.0:
        return fallback
    return float(value)


class TerrainClassifier:
    """
    Combines the crust layers into a height map and redistributes it into
    ocean, land and mountain bands by exact area fractions.
    """

    def __init__(self, percent_land: float = DEFAULTS.DEFAULT_PERCENT_LAND,
                 percent_mountain: float = DEFAULTS.DEFAULT_PERCENT_MOUNTAIN,
                 epsilon: float = DEFAULTS.BAND_EPSILON):
        self.percent_land = percent_land
        self.percent_mountain = percent_mountain
        self.epsilon = epsilon

    @property
    def percent_land(self) -> float:
        return self._percent_land

    @percent_land.setter
    def percent_land(self, value: float):
        self._percent_land = _valid_fraction(value, DEFAULTS.DEFAULT_PERCENT_LAND)

    @property
    def percent_mountain(self) -> float:
        return self._percent_mountain

    @percent_mountain.setter
    def percent_mountain(self, value: float):
        self._percent_mountain = _valid_fraction(value, DEFAULTS.DEFAULT_PERCENT_MOUNTAIN)

    @property
    def percent_sea(self) -> float:
        return max(0.0, 1.0 - (self.percent_land + self.percent_mountain))

    def band_counts(self, total: int) -> tuple[int, int, int]:
        """Returns the number of (sea, land, mountain) cells for a map of `total` cells."""
        sea_count = min(math.floor(total * self.percent_sea), total)
        land_count = min(math.floor(total * self.percent_land), total - sea_count)
        return sea_count, land_count, total - sea_count - land_count

    def classify(self, tectonics: ScalarField, thickness: ScalarField, orogenic: ScalarField,
                 min_land: float = DEFAULTS.MIN_LAND_HEIGHT,
                 min_mountain: float = DEFAULTS.MIN_MOUNTAIN_HEIGHT) -> ScalarField | None:
        """
        Builds the height map. Returns None if any layer is missing or the
        layers differ in size.
        """
        if tectonics is None or thickness is None or orogenic is None:
            return None

        height = tectonics.combine_with([thickness, orogenic])
        if height is None:
            return None
        height.sqrt()
        height.normalize()

        return self.redistribute(height, min_land, min_mountain)

    def redistribute(self, height: ScalarField, min_land: float, min_mountain: float) -> ScalarField:
        """
        Clamps the lowest-ranked cells into the ocean band [0, min_land - eps],
        the next ones into the land band [min_land, min_mountain - eps], and the
        rest into the mountain band [min_mountain, 1]. Modifies `height` in place.
        """
        order, _ = height.sorted_indices()
        sea_count, land_count, _ = self.band_counts(height.size)

        # The deepest the sea can be. It can never go below zero.
        max_sea = max(min_land - self.epsilon, 0.0)

        bands = (
            (0, sea_count, 0.0, max_sea),
            (sea_count, sea_count + land_count, min_land, min_mountain - self.epsilon),
            (sea_count + land_count, height.size, min_mountain, 1.0),
        )
        for start, end, low, high in bands:
            cells = order[start:end]
            height.data[cells] = np.clip(height.data[cells], low, high)

        return height


@dataclass
class Lithosphere:
    """The crust layers of a planet and the height map derived from them."""
    tectonics: ScalarField
    thickness: ScalarField
    orogenic: ScalarField
    percent_land: float
    percent_mountain: float
    height_map: ScalarField = None

    def land_fraction(self, sea_level: float) -> float:
        """The share of cells above `sea_level` in the height map."""
        if self.height_map is None:
            return 0.0
        return float(np.count_nonzero(self.height_map.data > sea_level)) / self.height_map.size


class LithosphereGenerator:
    """
    Generates a Lithosphere by sizing its three field generators to one
    shared map size and classifying the result into a height map.
    """

    def __init__(self, width: int = DEFAULTS.DEFAULT_WIDTH, height: int = DEFAULTS.DEFAULT_HEIGHT,
                 percent_land: float = DEFAULTS.DEFAULT_PERCENT_LAND,
                 percent_mountain: float = DEFAULTS.DEFAULT_PERCENT_MOUNTAIN,
                 min_land: float = DEFAULTS.MIN_LAND_HEIGHT,
                 min_mountain: float = DEFAULTS.MIN_MOUNTAIN_HEIGHT,
                 logger: logging.Logger = None):
        self.logger = logger or logging.getLogger(__name__)
        self.width = width if width and width > 0 else DEFAULTS.DEFAULT_WIDTH
        self.height = height if height and height > 0 else DEFAULTS.DEFAULT_HEIGHT
        self.classifier = TerrainClassifier(percent_land, percent_mountain)
        self.min_land = min_land
        self.min_mountain = min_mountain

        self.tectonics_generator: FieldGenerator = None
        self.thickness_generator: FieldGenerator = None
        self.orogenic_generator: FieldGenerator = None

    def generate(self, tectonics_rng: np.random.Generator, thickness_rng: np.random.Generator,
                 orogenic_rng: np.random.Generator) -> Lithosphere | None:
        """
        Generates the three crust layers, each from its own random source,
        and derives the height map. Returns None if any generator is unset.
        """
        if self.tectonics_generator is None or self.thickness_generator is None or self.orogenic_generator is None:
            self.logger.warning("Lithosphere generation skipped: a crust layer generator is not set.")
            return None

        start_time = time.time()
        lithosphere = Lithosphere(
            tectonics=self.tectonics_generator.generate(self.width, self.height, tectonics_rng),
            thickness=self.thickness_generator.generate(self.width, self.height, thickness_rng),
            orogenic=self.orogenic_generator.generate(self.width, self.height, orogenic_rng),
            percent_land=self.classifier.percent_land,
            percent_mountain=self.classifier.percent_mountain,
        )
        lithosphere.height_map = self.classifier.classify(
            lithosphere.tectonics, lithosphere.thickness, lithosphere.orogenic,
            self.min_land, self.min_mountain
        )

        sea_count, land_count, mountain_count = self.classifier.band_counts(self.width * self.height)
        self.logger.info(
            f"Lithosphere generated in {time.time() - start_time:.2f}s "
            f"({sea_count} ocean / {land_count} land / {mountain_count} mountain cells)."
        )
        return lithosphere
