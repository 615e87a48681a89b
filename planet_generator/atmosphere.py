# planet_generator/atmosphere.py

"""
================================================================================
ATMOSPHERE
================================================================================
This module derives the temperature map. It is a deliberately simple
abstraction (Rule 8): temperature is warmest near the equator and at low
altitude, with a wind noise layer breaking up the bands.

Data Contract:
---------------
- Inputs:
    - height_map: The (eroded) height map of the planet.
    - A wind field generator, and optionally an equator distance generator.
    - sea_level: Cells at or below it are ocean and get a temperature of 0.
- Outputs:
    - A temperature ScalarField in [0, 1], normalized over land only.
- Side Effects: None. The height map is not modified.
================================================================================
"""

import logging
import time
from dataclasses import dataclass

import numpy as np

from . import config as DEFAULTS
from .noise import FieldGenerator
from .scalar_field import ScalarField, normalize_over_land


class TemperatureComposer:
    """
    Combines the wind field, the inverted height map and (when given) the
    equator map into a temperature map. Each component is scaled by its
    weight before combining; a weight of 0 removes it.
    """

    def __init__(self, sea_level: float = DEFAULTS.SEA_LEVEL, weights: dict = None):
        self.sea_level = sea_level
        self.weights = {**DEFAULTS.TEMPERATURE_WEIGHTS, **(weights or {})}

    def compose(self, wind: ScalarField, height_map: ScalarField, equator: ScalarField = None) -> ScalarField | None:
        if wind is None or height_map is None:
            return None

        # Higher ground is colder, so it contributes less.
        lowland = height_map.copy().invert().scale_by(self.weights['altitude'])
        others = [lowland]
        if equator is not None:
            others.append(equator.copy().scale_by(self.weights['equator']))

        temperature = wind.copy().scale_by(self.weights['wind']).combine_with(others)
        if temperature is None:
            return None

        temperature.sqrt()
        return normalize_over_land(temperature, height_map, self.sea_level)


@dataclass
class Atmosphere:
    """The air layer of a planet."""
    wind: ScalarField
    height_map: ScalarField
    equator: ScalarField = None
    temperature: ScalarField = None


class AtmosphereGenerator:
    def __init__(self, width: int = DEFAULTS.DEFAULT_WIDTH, height: int = DEFAULTS.DEFAULT_HEIGHT,
                 sea_level: float = DEFAULTS.SEA_LEVEL, temperature_weights: dict = None,
                 logger: logging.Logger = None):
        self.logger = logger or logging.getLogger(__name__)
        self.width = width if width and width > 0 else DEFAULTS.DEFAULT_WIDTH
        self.height = height if height and height > 0 else DEFAULTS.DEFAULT_HEIGHT
        self.composer = TemperatureComposer(sea_level, temperature_weights)

        self.height_map: ScalarField = None
        self.wind_generator: FieldGenerator = None
        # Optional. Without it, temperature ignores latitude.
        self.equator_generator: FieldGenerator = None

    def generate(self, wind_rng: np.random.Generator) -> Atmosphere | None:
        if self.height_map is None or self.wind_generator is None:
            self.logger.warning("Atmosphere generation skipped: the height map or the wind generator is not set.")
            return None

        start_time = time.time()
        atmosphere = Atmosphere(
            wind=self.wind_generator.generate(self.width, self.height, wind_rng),
            height_map=self.height_map,
        )
        if self.equator_generator is not None:
            atmosphere.equator = self.equator_generator.generate(self.width, self.height, wind_rng)

        atmosphere.temperature = self.composer.compose(atmosphere.wind, atmosphere.height_map, atmosphere.equator)
        if atmosphere.temperature is None:
            self.logger.warning("Temperature not composed: the height map does not match the map size.")

        self.logger.info(f"Atmosphere generated in {time.time() - start_time:.2f}s.")
        return atmosphere
