# planet_generator/__init__.py

# This file makes the 'planet_generator' directory a Python package.
# It also defines the public API of the package.

from .scalar_field import ScalarField, normalize_over_land
from .noise import FieldGenerator, ValueNoiseGenerator, EquatorDistanceGenerator, ConstantGenerator
from .tectonics import PlateFieldGenerator
from .lithosphere import TerrainClassifier, Lithosphere, LithosphereGenerator
from .hydrosphere import River, RiverNetworkBuilder, PrecipitationComposer, Hydrosphere, HydrosphereGenerator
from .atmosphere import TemperatureComposer, Atmosphere, AtmosphereGenerator
from .holdridge import HoldridgeData, LifezoneChart, LifezoneType, compute_data
from .biosphere import BiosphereParams, Biosphere, BiosphereGenerator
from .generator import Planet, PlanetGenerator

__all__ = [
    "ScalarField", "normalize_over_land",
    "FieldGenerator", "ValueNoiseGenerator", "EquatorDistanceGenerator", "ConstantGenerator",
    "PlateFieldGenerator",
    "TerrainClassifier", "Lithosphere", "LithosphereGenerator",
    "River", "RiverNetworkBuilder", "PrecipitationComposer", "Hydrosphere", "HydrosphereGenerator",
    "TemperatureComposer", "Atmosphere", "AtmosphereGenerator",
    "HoldridgeData", "LifezoneChart", "LifezoneType", "compute_data",
    "BiosphereParams", "Biosphere", "BiosphereGenerator",
    "Planet", "PlanetGenerator",
]
