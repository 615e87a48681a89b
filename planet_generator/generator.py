# planet_generator/generator.py

"""
================================================================================
CORE PLANET GENERATOR
================================================================================
This module contains the main PlanetGenerator class, responsible for running
the whole pipeline: lithosphere, then hydrosphere, then atmosphere, then
biosphere. Each layer only consumes the layers before it.

Data Contract:
---------------
- Inputs (on initialization):
    - config (dict): A dictionary of generation parameters which can override
      the internal defaults. Expected keys include 'seed', 'width', 'height',
      'percent_land', 'num_rivers', etc. Unknown keys are ignored.
    - logger: A configured Python logging object for runtime messages.
- Outputs (from methods):
    - The layer containers, or a Planet bundling all four.
- Side Effects: Logs messages using the provided logger.
- Invariants: Given the same seed and configuration, the output is
  deterministic. Every layer draws from its own random Generator seeded from
  the master seed plus a fixed offset.
================================================================================
"""

import logging
import numbers
import time
from dataclasses import dataclass

import numpy as np

from . import config as DEFAULTS
from .atmosphere import Atmosphere, AtmosphereGenerator
from .biosphere import Biosphere, BiosphereGenerator, BiosphereParams
from .hydrosphere import Hydrosphere, HydrosphereGenerator
from .lithosphere import Lithosphere, LithosphereGenerator
from .noise import EquatorDistanceGenerator, ValueNoiseGenerator
from .tectonics import PlateFieldGenerator


@dataclass
class Planet:
    """Every layer of a generated planet."""
    seed: int
    width: int
    height: int
    lithosphere: Lithosphere = None
    hydrosphere: Hydrosphere = None
    atmosphere: Atmosphere = None
    biosphere: Biosphere = None


class PlanetGenerator:
    """
    Generates the layers of a procedurally generated planet.
    This class is backend-only and does not handle any visualization.
    """
    def __init__(self, config: dict = None, logger: logging.Logger = None):
        """
        Initializes the planet generator.

        Args:
            config (dict): User-defined parameters to override defaults.
            logger (logging.Logger): The logger instance for all output.
        """
        self.logger = logger or logging.getLogger(__name__)
        self.user_config = config or {}
        self.logger.info("PlanetGenerator initializing...")

        # --- Consolidate Configuration ---
        self.settings = {
            'seed': self.user_config.get('seed', DEFAULTS.DEFAULT_SEED),
            'width': self.user_config.get('width', DEFAULTS.DEFAULT_WIDTH),
            'height': self.user_config.get('height', DEFAULTS.DEFAULT_HEIGHT),

            'tectonics_seed_offset': self.user_config.get('tectonics_seed_offset', DEFAULTS.TECTONICS_SEED_OFFSET),
            'thickness_seed_offset': self.user_config.get('thickness_seed_offset', DEFAULTS.THICKNESS_SEED_OFFSET),
            'orogenic_seed_offset': self.user_config.get('orogenic_seed_offset', DEFAULTS.OROGENIC_SEED_OFFSET),
            'cloud_seed_offset': self.user_config.get('cloud_seed_offset', DEFAULTS.CLOUD_SEED_OFFSET),
            'river_source_seed_offset': self.user_config.get('river_source_seed_offset', DEFAULTS.RIVER_SOURCE_SEED_OFFSET),
            'river_shuffle_seed_offset': self.user_config.get('river_shuffle_seed_offset', DEFAULTS.RIVER_SHUFFLE_SEED_OFFSET),
            'wind_seed_offset': self.user_config.get('wind_seed_offset', DEFAULTS.WIND_SEED_OFFSET),

            'thickness_octaves': self.user_config.get('thickness_octaves', DEFAULTS.THICKNESS_OCTAVES),
            'thickness_persistence': self.user_config.get('thickness_persistence', DEFAULTS.THICKNESS_PERSISTENCE),
            'orogenic_octaves': self.user_config.get('orogenic_octaves', DEFAULTS.OROGENIC_OCTAVES),
            'orogenic_persistence': self.user_config.get('orogenic_persistence', DEFAULTS.OROGENIC_PERSISTENCE),
            'cloud_octaves': self.user_config.get('cloud_octaves', DEFAULTS.CLOUD_OCTAVES),
            'cloud_persistence': self.user_config.get('cloud_persistence', DEFAULTS.CLOUD_PERSISTENCE),
            'river_source_octaves': self.user_config.get('river_source_octaves', DEFAULTS.RIVER_SOURCE_OCTAVES),
            'river_source_persistence': self.user_config.get('river_source_persistence', DEFAULTS.RIVER_SOURCE_PERSISTENCE),
            'wind_octaves': self.user_config.get('wind_octaves', DEFAULTS.WIND_OCTAVES),
            'wind_persistence': self.user_config.get('wind_persistence', DEFAULTS.WIND_PERSISTENCE),

            'num_tectonic_plates': self.user_config.get('num_tectonic_plates', DEFAULTS.DEFAULT_NUM_TECTONIC_PLATES),
            'percent_land': self.user_config.get('percent_land', DEFAULTS.DEFAULT_PERCENT_LAND),
            'percent_mountain': self.user_config.get('percent_mountain', DEFAULTS.DEFAULT_PERCENT_MOUNTAIN),
            'min_land_height': self.user_config.get('min_land_height', DEFAULTS.MIN_LAND_HEIGHT),
            'min_mountain_height': self.user_config.get('min_mountain_height', DEFAULTS.MIN_MOUNTAIN_HEIGHT),

            'sea_level': self.user_config.get('sea_level', DEFAULTS.SEA_LEVEL),
            'num_rivers': self.user_config.get('num_rivers', DEFAULTS.DEFAULT_NUM_RIVERS),
            'water_bucket_size': self.user_config.get('water_bucket_size', DEFAULTS.WATER_BUCKET_SIZE),
            'precipitation_blur_radius': self.user_config.get('precipitation_blur_radius', DEFAULTS.PRECIPITATION_BLUR_RADIUS),
            'precipitation_weights': self.user_config.get('precipitation_weights', DEFAULTS.PRECIPITATION_WEIGHTS),

            'equator_y_pos_factor': self.user_config.get('equator_y_pos_factor', DEFAULTS.EQUATOR_Y_POS_FACTOR),
            'temperature_weights': self.user_config.get('temperature_weights', DEFAULTS.TEMPERATURE_WEIGHTS),

            'min_altitude_m': self.user_config.get('min_altitude_m', DEFAULTS.MIN_ALTITUDE_M),
            'max_altitude_m': self.user_config.get('max_altitude_m', DEFAULTS.MAX_ALTITUDE_M),
            'min_biotemperature_c': self.user_config.get('min_biotemperature_c', DEFAULTS.MIN_BIOTEMPERATURE_C),
            'max_biotemperature_c': self.user_config.get('max_biotemperature_c', DEFAULTS.MAX_BIOTEMPERATURE_C),
            'min_precipitation_mm': self.user_config.get('min_precipitation_mm', DEFAULTS.MIN_PRECIPITATION_MM),
            'max_precipitation_mm': self.user_config.get('max_precipitation_mm', DEFAULTS.MAX_PRECIPITATION_MM),
            'lifezone_rule': self.user_config.get('lifezone_rule', DEFAULTS.LIFEZONE_RULE),
        }

        # --- Validate Dimensions ---
        # Invalid dimensions fall back to the defaults instead of failing.
        for key, fallback in (('width', DEFAULTS.DEFAULT_WIDTH), ('height', DEFAULTS.DEFAULT_HEIGHT)):
            value = self.settings[key]
            if not isinstance(value, numbers.Integral) or isinstance(value, bool) or value <= 0:
                self.logger.warning(f"Invalid {key} {value!r}; using the default of {fallback}.")
                self.settings[key] = fallback
            else:
                self.settings[key] = int(value)

        if self.settings['water_bucket_size'] is None or self.settings['water_bucket_size'] <= 0:
            self.logger.warning(
                f"Invalid water_bucket_size {self.settings['water_bucket_size']!r}; "
                f"using the default of {DEFAULTS.WATER_BUCKET_SIZE}."
            )
            self.settings['water_bucket_size'] = DEFAULTS.WATER_BUCKET_SIZE

        # --- Public Properties for easy access ---
        self.seed = self.settings['seed']
        self.width = self.settings['width']
        self.height = self.settings['height']

        self.logger.info(f"PlanetGenerator initialized with seed: {self.seed}")
        self.logger.info(f"Planet dimensions: {self.width}x{self.height} cells")

    def _rng(self, offset_key: str) -> np.random.Generator:
        """A fresh random Generator for one layer, seeded from the master seed."""
        return np.random.default_rng(self.seed + self.settings[offset_key])

    def _noise(self, prefix: str) -> ValueNoiseGenerator:
        return ValueNoiseGenerator(self.settings[f'{prefix}_octaves'], self.settings[f'{prefix}_persistence'])

    def _equator(self) -> EquatorDistanceGenerator:
        return EquatorDistanceGenerator(int(self.height * self.settings['equator_y_pos_factor']))

    def generate_lithosphere(self) -> Lithosphere | None:
        generator = LithosphereGenerator(
            self.width, self.height,
            self.settings['percent_land'], self.settings['percent_mountain'],
            self.settings['min_land_height'], self.settings['min_mountain_height'],
            logger=self.logger,
        )
        generator.tectonics_generator = PlateFieldGenerator(self.settings['num_tectonic_plates'], self.logger)
        generator.thickness_generator = self._noise('thickness')
        generator.orogenic_generator = self._noise('orogenic')

        return generator.generate(
            self._rng('tectonics_seed_offset'),
            self._rng('thickness_seed_offset'),
            self._rng('orogenic_seed_offset'),
        )

    def generate_hydrosphere(self, lithosphere: Lithosphere) -> Hydrosphere | None:
        generator = HydrosphereGenerator(
            self.width, self.height,
            self.settings['num_rivers'], self.settings['sea_level'],
            self.settings['water_bucket_size'], self.settings['precipitation_weights'],
            self.settings['precipitation_blur_radius'],
            logger=self.logger,
        )
        generator.height_map = lithosphere.height_map if lithosphere is not None else None
        generator.cloud_generator = self._noise('cloud')
        generator.river_source_generator = self._noise('river_source')

        return generator.generate(
            self._rng('cloud_seed_offset'),
            self._rng('river_source_seed_offset'),
            self._rng('river_shuffle_seed_offset'),
        )

    def generate_atmosphere(self, hydrosphere: Hydrosphere) -> Atmosphere | None:
        generator = AtmosphereGenerator(
            self.width, self.height,
            self.settings['sea_level'], self.settings['temperature_weights'],
            logger=self.logger,
        )
        # Temperature follows the eroded terrain.
        generator.height_map = hydrosphere.height_map if hydrosphere is not None else None
        generator.wind_generator = self._noise('wind')
        generator.equator_generator = self._equator()

        return generator.generate(self._rng('wind_seed_offset'))

    def generate_biosphere(self, hydrosphere: Hydrosphere, atmosphere: Atmosphere) -> Biosphere | None:
        params = BiosphereParams(
            self.settings['min_altitude_m'], self.settings['max_altitude_m'],
            self.settings['min_biotemperature_c'], self.settings['max_biotemperature_c'],
            self.settings['min_precipitation_mm'], self.settings['max_precipitation_mm'],
        )
        generator = BiosphereGenerator(
            params, self.settings['sea_level'], self.settings['lifezone_rule'], logger=self.logger
        )
        if hydrosphere is not None:
            generator.height_map = hydrosphere.height_map
            generator.precipitation = hydrosphere.precipitation
        if atmosphere is not None:
            generator.temperature = atmosphere.temperature

        return generator.generate()

    def generate(self) -> Planet:
        """
        Runs the whole pipeline. A layer that cannot be generated is left as
        None, and so is every layer that depends on it.
        """
        start_time = time.time()
        planet = Planet(self.seed, self.width, self.height)

        planet.lithosphere = self.generate_lithosphere()
        planet.hydrosphere = self.generate_hydrosphere(planet.lithosphere)
        planet.atmosphere = self.generate_atmosphere(planet.hydrosphere)
        planet.biosphere = self.generate_biosphere(planet.hydrosphere, planet.atmosphere)

        self.logger.info(f"Planet generated in {time.time() - start_time:.2f}s.")
        return planet
