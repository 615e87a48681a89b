# planet_generator/config.py

"""
================================================================================
INTERNAL DEFAULT CONFIGURATION
================================================================================
This module contains the default, fallback internal constants for the planet
generator. These values are used if they are not explicitly provided by the
user's configuration.

DO NOT MODIFY THIS FILE FOR A SPECIFIC PLANET.
Instead, pass a configuration dictionary to the PlanetGenerator instance.
================================================================================
"""

# --- Map Dimensions ---
# Any non-positive width or height silently falls back to these values.
DEFAULT_WIDTH = 256
DEFAULT_HEIGHT = 128

# --- Random Seeds ---
DEFAULT_SEED = 1337
# Large prime numbers used to offset seeds for different layers, ensuring
# they are unique but deterministic from the master seed.
TECTONICS_SEED_OFFSET = 54321
THICKNESS_SEED_OFFSET = 98761
OROGENIC_SEED_OFFSET = 25391
CLOUD_SEED_OFFSET = 12347
RIVER_SOURCE_SEED_OFFSET = 77743
RIVER_SHUFFLE_SEED_OFFSET = 31337
WIND_SEED_OFFSET = 45569

# --- Value Noise ---
# Fallbacks used when a noise generator is handed an invalid setting.
DEFAULT_OCTAVE_COUNT = 8
DEFAULT_PERSISTENCE = 0.75
# Persistence substituted for a non-positive value (values above 1 clamp to 1).
FALLBACK_PERSISTENCE = 0.5

# Per-layer noise settings. A low persistence gives a smooth, continental
# layer; a high persistence lets fine detail through.
THICKNESS_OCTAVES = 16
THICKNESS_PERSISTENCE = 0.25
OROGENIC_OCTAVES = 8
OROGENIC_PERSISTENCE = 0.75
CLOUD_OCTAVES = 16
CLOUD_PERSISTENCE = 0.5
RIVER_SOURCE_OCTAVES = 8
RIVER_SOURCE_PERSISTENCE = 0.75
WIND_OCTAVES = 8
WIND_PERSISTENCE = 0.5

# --- Tectonics ---
# Plate count used when none (or a non-positive one) is configured.
DEFAULT_NUM_TECTONIC_PLATES = 60

# --- Lithosphere (Normalized 0.0 to 1.0) ---
# Target area fractions. The ocean is whatever remains: 1 - (land + mountain).
DEFAULT_PERCENT_LAND = 0.20
DEFAULT_PERCENT_MOUNTAIN = 0.05
# The lowest height that counts as land / as mountain once the height map has
# been redistributed into bands.
MIN_LAND_HEIGHT = 0.37
MIN_MOUNTAIN_HEIGHT = 0.63
# Gap left between the top of one band and the bottom of the next.
BAND_EPSILON = 0.001

# --- Hydrosphere ---
# Cells at or below this height are ocean. It sits at the top of the ocean
# band so that every cell of the land band counts as land.
SEA_LEVEL = MIN_LAND_HEIGHT - BAND_EPSILON
DEFAULT_NUM_RIVERS = 40
# The side length, in cells, of the square buckets used to approximate the
# distance to the nearest water. Smaller buckets are smoother but slower.
WATER_BUCKET_SIZE = 100
# The radius, in cells, of the box blur applied to the precipitation map.
PRECIPITATION_BLUR_RADIUS = 5
# Scale factors applied to each precipitation component before combining.
PRECIPITATION_WEIGHTS = {
    "cloud": 1.0,
    "river": 1.0,
    "water_proximity": 1.0,
}

# --- Atmosphere ---
# The row (as a factor of the map height) treated as the equator.
EQUATOR_Y_POS_FACTOR = 0.5
# Scale factors applied to each temperature component before combining.
TEMPERATURE_WEIGHTS = {
    "wind": 1.0,
    "altitude": 1.0,
    "equator": 1.0,
}

# --- Holdridge Life Zones (Rule 8) ---
# Physical ranges that normalized [0, 1] field values are mapped onto before
# classification. These are the bounds of the Holdridge chart itself.
MIN_ALTITUDE_M = 0.0
MAX_ALTITUDE_M = 4000.0
MIN_BIOTEMPERATURE_C = 0.0
MAX_BIOTEMPERATURE_C = 48.0
MIN_PRECIPITATION_MM = 62.5
MAX_PRECIPITATION_MM = 22629.12

# Biotemperature rises by this many degrees for every 1000 m of altitude
# when projecting a climate down to sea level.
SEA_LEVEL_LAPSE_RATE_C_PER_KM = 6.0
# Coefficient of the potential evapotranspiration ratio.
PET_COEFFICIENT = 58.93

# How the lifezone chart picks a hexagon for a climate.
# 'nearest': the hexagon whose centroid is closest (the intended behavior).
# 'farthest': the hexagon whose centroid is furthest away. This reproduces
#             maps generated by earlier releases, which inverted the test.
LIFEZONE_RULE = 'nearest'
